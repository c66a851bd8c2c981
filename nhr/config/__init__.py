"""Configuration module holding request defaults."""

from nhr.exceptions import ConfigurationError

from .loader import DEFAULTS, Config, config

__all__ = ["DEFAULTS", "Config", "ConfigurationError", "config"]
