"""Utility functions and helpers for dbwrapper."""

from dbwrapper.utils.decorators import traced

__all__ = [
    "traced",
]
