"""Configuration data models for the translation client.

Each dataclass is one section of the INI file; field names match the INI keys.
The declared default also fixes the type the loader coerces a value to.
"""

from __future__ import annotations

from dataclasses import dataclass, field

__all__: list[str] = ["Config", "General", "Translation"]


@dataclass
class General:
    DEBUG: bool = False
    LOG_FILE: str = ""
    LOG_LEVEL: str = "INFO"


@dataclass
class Translation:
    """Translation service selection and dispatcher sizing.

    Attributes:
        ENGINE (str): Service identifier, "google" or "yandex".
        MAX_WORKERS (int): Remote operations allowed to run at once per translator.
        REQUEST_TIMEOUT (float): Total HTTP timeout per remote call in seconds. 0 disables it.
        SHUTDOWN_TIMEOUT (float): Seconds to wait for in-flight work when shutting down.
    """

    ENGINE: str = "google"
    MAX_WORKERS: int = 4
    REQUEST_TIMEOUT: float = 10.0
    SHUTDOWN_TIMEOUT: float = 10.0


@dataclass
class Config:
    GENERAL: General = field(default_factory=General)
    TRANSLATION: Translation = field(default_factory=Translation)
