"""Postal store core package."""

from .store import PostalCodeStore

__all__ = ["PostalCodeStore"]
