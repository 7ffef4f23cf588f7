"""CodGuard API client."""

from codguard.api.client import CodGuardClient

__all__ = ["CodGuardClient"]
