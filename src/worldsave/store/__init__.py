"""Keyed document store and its text form."""

from .errors import StoreError, StoreSyntaxError, StoreTypeError
from .section_file import SectionFile, split_path
from .text_io import dumps, loads, read_document, write_document

__all__ = [
    "SectionFile",
    "StoreError",
    "StoreSyntaxError",
    "StoreTypeError",
    "dumps",
    "loads",
    "read_document",
    "split_path",
    "write_document",
]
