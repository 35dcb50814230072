"""Utility functions for json-tidy."""

from .validation import ValidationUtils

__all__ = ["ValidationUtils"]
