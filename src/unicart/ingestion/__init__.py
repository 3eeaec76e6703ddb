"""Ingestion layer.

Adapters that turn backend payloads into the models the stores hold.
"""

__all__: list[str] = []
