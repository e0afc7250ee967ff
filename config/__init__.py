"""Configuration loading and validation for the translation client.

This package provides utilities for loading, parsing, and validating configuration
settings from an INI file, and the errors raised for missing or invalid settings.
"""

from config.loader import (
    ConfigFileNotFoundError,
    ConfigFormatError,
    ConfigLoader,
    ConfigLoaderError,
    ConfigValueError,
    CredentialNotFoundError,
)

__all__: list[str] = [
    "ConfigFileNotFoundError",
    "ConfigFormatError",
    "ConfigLoader",
    "ConfigLoaderError",
    "ConfigValueError",
    "CredentialNotFoundError",
]
