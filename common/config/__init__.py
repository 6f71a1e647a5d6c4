"""
Configuration module - environment-driven settings shared by all apps.
"""

from common.config.base_settings import BaseAppSettings

__all__ = ["BaseAppSettings"]
