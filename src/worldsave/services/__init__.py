"""Service layer exports."""

from .errors import (
    LoadError,
    MalformedField,
    OrderTableError,
    SaveLoadError,
    UnknownSymbol,
    UnsupportedVersion,
)

__all__ = [
    "LoadError",
    "MalformedField",
    "OrderTableError",
    "SaveLoadError",
    "UnknownSymbol",
    "UnsupportedVersion",
]
