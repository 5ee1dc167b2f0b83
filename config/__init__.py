"""Environment-sourced configuration."""

from .settings import Settings, SupportContact, normalize_name

__all__ = ["Settings", "SupportContact", "normalize_name"]
