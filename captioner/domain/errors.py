# captioner/domain/errors.py
from __future__ import annotations


class CaptionError(Exception):
    """Base class for everything the caption core refuses to lay out."""


class InvalidInput(CaptionError, ValueError):
    """The caption has nothing to lay out (no words, no lines)."""


class InvalidConfiguration(CaptionError, ValueError):
    """A width, margin or preset makes layout impossible."""
