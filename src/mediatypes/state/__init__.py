"""State/store layer.

This package owns the canonical registry, its persistence, and the
notifications emitted when it changes.
"""
