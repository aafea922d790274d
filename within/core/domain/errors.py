"""Error types raised by the within core and service layers."""

from __future__ import annotations


class InvalidArgument(ValueError):
    """A numeric, time or catalog precondition was violated by the caller."""


class StoreError(RuntimeError):
    """A call to the signal store failed."""
