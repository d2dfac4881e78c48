"""Configuration management module for the form notification service."""

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .loader import load_app_config, load_config, validate_config_file
from .models import (
    AppConfig,
    BrandingConfig,
    LogFormat,
    LogLevel,
    LoggingConfig,
    MailConfig,
    RateLimitConfig,
    ServerConfig,
    TransportType,
)

__all__ = [
    # Main loader functions
    "load_config",
    "load_app_config",
    "validate_config_file",
    "load_environment_config",
    # Configuration models
    "AppConfig",
    "ServerConfig",
    "MailConfig",
    "RateLimitConfig",
    "BrandingConfig",
    "LoggingConfig",
    "EnvironmentConfig",
    # Enums
    "TransportType",
    "LogLevel",
    "LogFormat",
    # Exceptions
    "ConfigurationError",
]
