"""Configuration management for x16remote.

Loads and validates YAML-based configuration with Pydantic models.
Supports environment variable overrides.
"""

from x16remote.config.settings import Settings, load_settings

__all__ = ["Settings", "load_settings"]
