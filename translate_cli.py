"""Command-line front end for the translation client.

Examples:
    python translate_cli.py translate dog --to nl --from en
    python translate_cli.py identify "Guten Morgen" --engine yandex
    python translate_cli.py support en ru --config translator.ini

The API key is read from GOOGLE_API_KEY or YANDEX_API_KEY.
Exit status: 0 on success, 1 when the service reports an error, 2 on a configuration error.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any, Final, NoReturn

from config.loader import ALLOWED_TRANSLATION_ENGINES, ConfigLoader, ConfigLoaderError
from core.trans.registry import resolve
from core.version import VERSION
from models.config_models import Config
from models.language_models import Language, Text
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    from collections.abc import Sequence

    from core.trans.interface import TranslationError
    from core.trans.translator import Translator

EXIT_OK: Final[int] = 0
EXIT_SERVICE_ERROR: Final[int] = 1
EXIT_CONFIG_ERROR: Final[int] = 2


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        print(f"\n{message}\n", file=sys.stderr)
        self.print_help(sys.stderr)
        raise SystemExit(EXIT_CONFIG_ERROR)


def _language(value: str) -> Language:
    try:
        return Language.from_code(value)
    except ValueError as err:
        raise argparse.ArgumentTypeError(str(err)) from None


def parse_arguments(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = _ArgumentParser(description="Translate text, identify languages and check language-pair support")
    parser.add_argument("--engine", choices=ALLOWED_TRANSLATION_ENGINES, help="Override TRANSLATION.ENGINE")
    parser.add_argument("--config", metavar="INI_FILE", help="Configuration file to load")
    parser.add_argument("--timeout", type=float, help="Seconds to wait for the result")
    parser.add_argument("--debug", action="store_true", help="Log debug output")
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")

    commands = parser.add_subparsers(dest="command", required=True)

    translate = commands.add_parser("translate", help="Translate text")
    translate.add_argument("text")
    translate.add_argument("--to", dest="tgt_lang", type=_language, required=True, help="Target language code")
    translate.add_argument("--from", dest="src_lang", type=_language, help="Source language code (default: detect)")

    identify = commands.add_parser("identify", help="Identify the language of text")
    identify.add_argument("text")

    support = commands.add_parser("support", help="Check whether a translation direction is offered")
    support.add_argument("src_lang", type=_language)
    support.add_argument("tgt_lang", type=_language)

    return parser.parse_args(argv)


def load_config(args: argparse.Namespace) -> Config:
    """Load the configuration file when one is given and apply CLI overrides.

    Raises:
        ConfigLoaderError: If the configuration file cannot be loaded.
    """
    if args.config:
        script_name: str = Path(sys.argv[0]).stem
        loader = ConfigLoader(
            config_filename=args.config,
            script_name=script_name,
            engine=args.engine,
            debug=args.debug,
        )
        return loader.config

    config = Config()
    if args.engine:
        config.TRANSLATION.ENGINE = args.engine
    config.GENERAL.DEBUG = args.debug
    return config


def submit(translator: Translator, args: argparse.Namespace, outcome: dict[str, Any]) -> None:
    """Submit the requested operation; callbacks store the outcome."""

    def on_success(result: Any) -> None:
        outcome["result"] = result

    def on_error(err: TranslationError) -> None:
        outcome["error"] = err

    if args.command == "translate":
        translator.translate(Text(args.text, args.src_lang), args.tgt_lang, on_success, on_error)
    elif args.command == "identify":
        translator.identify(args.text, on_success, on_error)
    else:
        translator.has_support(args.src_lang, args.tgt_lang, on_success, on_error)


def format_result(result: Any) -> str:
    if isinstance(result, bool):
        return "yes" if result else "no"
    return "\n".join(str(item) for item in result)


def main(argv: Sequence[str] | None = None) -> int:
    args: argparse.Namespace = parse_arguments(argv)
    try:
        config: Config = load_config(args)
    except ConfigLoaderError as err:
        print(f"Error: failed to load configuration: {err}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    logger_utils = LoggerUtils(config.GENERAL.LOG_FILE)
    logger_utils.set_level("DEBUG" if config.GENERAL.DEBUG else config.GENERAL.LOG_LEVEL)

    try:
        translator: Translator = resolve(config.TRANSLATION.ENGINE, settings=config.TRANSLATION)
    except ConfigLoaderError as err:
        print(f"Error: {err}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    outcome: dict[str, Any] = {}
    submit(translator, args, outcome)
    timeout: float = args.timeout if args.timeout is not None else config.TRANSLATION.SHUTDOWN_TIMEOUT
    translator.shutdown(timeout)

    if "result" in outcome:
        print(format_result(outcome["result"]))
        return EXIT_OK
    if "error" in outcome:
        print(f"Error: {outcome['error']}", file=sys.stderr)
    else:
        print(f"Error: no response within {timeout} seconds", file=sys.stderr)
    return EXIT_SERVICE_ERROR


if __name__ == "__main__":
    sys.exit(main())
