"""Data models for the translation client.

This package contains the language and text value objects, the configuration
sections, and the JSON envelopes of the supported translation services.
"""

from __future__ import annotations

from models.config_models import Config, General, Translation
from models.language_models import Language, Text

__all__: list[str] = [
    "Config",
    "General",
    "Language",
    "Text",
    "Translation",
]
