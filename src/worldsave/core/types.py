"""Shared type aliases for the core and domain layers."""
from typing import List, Union

SettingValue = Union[int, bool, str]
DocumentValue = Union[int, bool, str, List[str]]

__all__ = ["DocumentValue", "SettingValue"]
