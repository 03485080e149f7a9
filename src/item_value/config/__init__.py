"""Configuration subpackage - settings and logging setup."""
from .settings import Settings, ValueCalculation, FallbackValue, get_settings

__all__ = ['Settings', 'ValueCalculation', 'FallbackValue', 'get_settings']
