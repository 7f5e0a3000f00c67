"""Configuration package for the interview scheduler."""
from .settings import Settings, settings

__all__ = ["Settings", "settings"]
