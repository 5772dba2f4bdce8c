"""Exceptions raised by the bin store and the proximity search."""

from __future__ import annotations

from typing import Mapping


class BinTrackerError(Exception):
    """Base class for domain errors surfaced to API callers."""


class InvalidQueryError(BinTrackerError, ValueError):
    """A nearby query had missing, malformed or out-of-range parameters."""


class ValidationError(BinTrackerError, ValueError):
    """A bin failed field-level validation on create or update."""

    def __init__(self, errors: Mapping[str, str]) -> None:
        self.errors = dict(errors)
        super().__init__(", ".join(self.errors.values()) or "Invalid bin payload")


class NotFoundError(BinTrackerError, LookupError):

    def __init__(self, bin_id: str) -> None:
        self.bin_id = bin_id
        super().__init__("Bin not found")
