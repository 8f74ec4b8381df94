"""Ingestion layer.

This package contains the adapters that turn fetched payloads into typed
records: time-key extraction, defensive normalization and payload parsing.
"""

__all__: list[str] = []
