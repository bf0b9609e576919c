"""Utility helpers for genenet."""

from .rng_manager import RNGManager  # noqa: F401
from .validation import ValidationError  # noqa: F401

__all__ = [
    'RNGManager',
    'ValidationError',
]
