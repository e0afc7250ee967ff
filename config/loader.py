"""INI configuration loading for the translation client.

Values are read with `configparser`, coerced to the type of the matching field of the
`models.config_models` dataclasses, overridden by command-line arguments and validated.
"""

from __future__ import annotations

import configparser
from configparser import ConfigParser, SectionProxy
from dataclasses import fields
from pathlib import Path
from typing import TYPE_CHECKING, Any, Final

from models.config_models import Config
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Callable

__all__: list[str] = [
    "ALLOWED_TRANSLATION_ENGINES",
    "ConfigFileNotFoundError",
    "ConfigFormatError",
    "ConfigLoader",
    "ConfigLoaderError",
    "ConfigValueError",
    "CredentialNotFoundError",
]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

ALLOWED_TRANSLATION_ENGINES: Final[list[str]] = ["google", "yandex"]
MAX_WORKERS_WARNING: Final[int] = 32


class ConfigLoaderError(Exception):
    """Base class for configuration problems."""


class ConfigFileNotFoundError(ConfigLoaderError):
    """The configuration file is missing."""


class ConfigFormatError(ConfigLoaderError):
    """The configuration file could not be parsed."""


class ConfigValueError(ConfigFormatError):
    """A setting holds a value outside its allowed range or options."""


class CredentialNotFoundError(ConfigLoaderError):
    """The API key of a translation service is not available."""


def _unquoted(raw: str) -> str:
    value: str = raw.strip()
    for quote in ("'", '"'):
        value = value.removeprefix(quote).removesuffix(quote)
    return value


def _as_bool(section: SectionProxy, key: str) -> bool:
    value: bool | None = section.getboolean(key)
    if value is None:
        msg = "empty value"
        raise ValueError(msg)
    return value


def _as_int(section: SectionProxy, key: str) -> int:
    # accepts "4" as well as "4.0"
    return int(float(_unquoted(section[key])))


def _as_float(section: SectionProxy, key: str) -> float:
    return float(_unquoted(section[key]))


def _as_str(section: SectionProxy, key: str) -> str:
    return _unquoted(section[key])


_COERCERS: Final[dict[type, Callable[[SectionProxy, str], Any]]] = {
    bool: _as_bool,
    int: _as_int,
    float: _as_float,
    str: _as_str,
}


class ConfigLoader:
    """Loads ``config_filename`` into a `Config`.

    Args:
        config_filename (str): INI file to read.
        script_name (str): Name of the running script, shown in the missing-file message.
        **args: Command-line overrides. ``engine`` replaces TRANSLATION.ENGINE when not None,
            a true ``debug`` turns GENERAL.DEBUG on.

    Attributes:
        config (Config): The loaded and validated configuration.

    Raises:
        ConfigFileNotFoundError: If the file does not exist.
        ConfigFormatError: If the file is malformed or a value is invalid.
    """

    def __init__(self, *, config_filename: str, script_name: str, **args) -> None:
        msg: str
        if not Path(config_filename).is_file():
            msg = f"'{config_filename}' not found; {script_name} expects its configuration there."
            raise ConfigFileNotFoundError(msg)

        parser = ConfigParser()
        # keys are matched against the upper-case dataclass fields
        parser.optionxform = str  # type: ignore[assignment,method-assign]
        try:
            with Path(config_filename).open(encoding="utf-8") as file:
                parser.read_file(file)
        except configparser.Error as err:
            msg = f"'{config_filename}' is not a valid INI file: {err}"
            raise ConfigFormatError(msg) from None

        self.config: Config = Config()
        self._apply_file(parser)
        self._apply_overrides(args)
        self._validate()
        logger.debug("Configuration loaded from '%s': %s", config_filename, self.config)

    def _apply_file(self, parser: ConfigParser) -> None:
        for section_field in fields(self.config):
            if not parser.has_section(section_field.name):
                logger.debug("Section '%s' not present, using defaults", section_field.name)
                continue
            section_obj = getattr(self.config, section_field.name)
            section: SectionProxy = parser[section_field.name]
            for key_field in fields(section_obj):
                if key_field.name not in section:
                    continue
                value: Any = self._coerce(section, key_field.name, getattr(section_obj, key_field.name))
                setattr(section_obj, key_field.name, value)

    def _coerce(self, section: SectionProxy, key: str, default: Any) -> Any:
        """Convert one INI value to the type of the field's default.

        Raises:
            ConfigValueError: If the value does not parse as the expected type.
        """
        where: str = f"{section.name}.{key}"
        coercer: Callable[[SectionProxy, str], Any] = _COERCERS[type(default)]
        try:
            return coercer(section, key)
        except ValueError as err:
            msg = f"Invalid value for {where}: {err}"
            raise ConfigValueError(msg) from err

    def _apply_overrides(self, args: dict[str, Any]) -> None:
        if args.get("engine") is not None:
            self.config.TRANSLATION.ENGINE = args["engine"]
        if args.get("debug"):
            self.config.GENERAL.DEBUG = True

    def _validate(self) -> None:
        """Check the TRANSLATION section.

        Raises:
            ConfigValueError: If a value is out of range or not an allowed option.
        """
        translation = self.config.TRANSLATION
        msg: str

        if translation.ENGINE not in ALLOWED_TRANSLATION_ENGINES:
            msg = f"TRANSLATION.ENGINE must be one of {ALLOWED_TRANSLATION_ENGINES}, not '{translation.ENGINE}'"
            raise ConfigValueError(msg)
        if translation.MAX_WORKERS < 1:
            msg = f"TRANSLATION.MAX_WORKERS must be at least 1, not {translation.MAX_WORKERS}"
            raise ConfigValueError(msg)
        for name in ("REQUEST_TIMEOUT", "SHUTDOWN_TIMEOUT"):
            if getattr(translation, name) < 0:
                msg = f"TRANSLATION.{name} must not be negative, not {getattr(translation, name)}"
                raise ConfigValueError(msg)

        if translation.MAX_WORKERS > MAX_WORKERS_WARNING:
            logger.warning("TRANSLATION.MAX_WORKERS is unusually high: %d", translation.MAX_WORKERS)
