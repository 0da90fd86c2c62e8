"""Configuration module for the Org/User API client."""
from .settings import ClientConfig, load_settings

__all__ = ["ClientConfig", "load_settings"]
