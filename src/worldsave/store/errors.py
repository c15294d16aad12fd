"""Exceptions raised by the keyed document store."""


class StoreError(Exception):
    """Base exception for the store layer."""


class StoreTypeError(StoreError):
    """Raised when an entry holds a value of a different type than requested."""


class StoreSyntaxError(StoreError):
    """Raised when document text cannot be parsed."""
