"""Versioned world-state serialization engine."""

__version__ = "0.3.0"
