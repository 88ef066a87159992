"""Ingestion layer.

This package contains the upstream source catalogue, the format-specific
parsers, and the synchronizer that feeds parsed fragments into the store.
"""

__all__: list[str] = []
