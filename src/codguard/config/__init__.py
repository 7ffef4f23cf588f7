"""Configuration - environment settings and shared constants."""
