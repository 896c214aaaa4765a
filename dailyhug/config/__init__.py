"""Configuration module for the Daily Hug backend."""
from .settings import AppConfig, load_settings

__all__ = ["AppConfig", "load_settings"]
