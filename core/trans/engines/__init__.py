"""Translation service backends.

Importing this package registers every backend in `TransInterface.registered`.

Modules:
- HttpEngine: Shared POST/JSON plumbing over AsyncHttp.
- GoogleTranslation: Google Translate (v2) backend.
- YandexTranslation: Yandex.Translate (v1.5) backend.
"""

from core.trans.engines.http_engine import HttpEngine
from core.trans.engines.trans_google import GoogleTranslation
from core.trans.engines.trans_yandex import YandexTranslation

__all__: list[str] = [
    "GoogleTranslation",
    "HttpEngine",
    "YandexTranslation",
]
