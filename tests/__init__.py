"""Unit tests for the translation client.

Tests use pytest with asyncio support. HTTP traffic is served by a local aiohttp
test server or replaced via monkeypatch; no test contacts a real service.
"""
