"""Core components of the translation client.

The `core.trans` package holds the remote operation contract, the asynchronous
dispatcher, the backend registry and the service backends.
"""

from core.version import VERSION

__all__: list[str] = ["VERSION"]
