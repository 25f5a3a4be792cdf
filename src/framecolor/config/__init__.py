"""Configuration management for framecolor.

Loads and validates YAML-based configuration with Pydantic models.
Supports environment variable overrides.
"""

from framecolor.config.settings import Settings, load_settings

__all__ = ["Settings", "load_settings"]
