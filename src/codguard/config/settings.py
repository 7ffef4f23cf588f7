"""Configuration management using Pydantic Settings.

Loads configuration from environment variables with .env file support.
"""

from typing import List, Optional

from pydantic_settings import BaseSettings

from codguard.config.constants import BUNDLE_DELAY_SECONDS


class Settings(BaseSettings):
    """Application configuration."""

    # Server Configuration
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
    environment: str = "development"

    # CodGuard API Configuration
    api_base_url: str = "https://api.codguard.com"

    # Initial shop settings (copied into the settings store on first start)
    codguard_shop_id: Optional[str] = None
    codguard_public_key: Optional[str] = None
    codguard_private_key: Optional[str] = None
    codguard_cod_methods: List[str] = []

    # Bundled order sync
    bundle_delay_seconds: int = BUNDLE_DELAY_SECONDS

    # Redis Store Configuration
    redis_enabled: bool = True
    redis_host: str = "redis"
    redis_port: int = 6379
    redis_db: int = 0

    # Dashboard Configuration
    dashboard_api_key: Optional[str] = None

    # Shared secret expected from the commerce system on hook endpoints
    hook_api_key: Optional[str] = None

    # GlitchTip Error Monitoring
    glitchtip_dsn: Optional[str] = None

    class Config:
        """Pydantic config."""

        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


# Create a global settings instance
settings = Settings()
