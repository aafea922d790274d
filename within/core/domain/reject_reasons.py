"""Reasons a claim attempt is turned away before or at the store."""

from __future__ import annotations


class ClaimRejectReason:
    FULL = "FULL"
    EXPIRED = "EXPIRED"
    UNKNOWN_SIGNAL = "UNKNOWN_SIGNAL"
