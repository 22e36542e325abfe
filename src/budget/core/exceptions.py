#!/usr/bin/env python3
"""
Engine Exceptions

The engine prefers graceful degradation (skip buckets, clamping, "no effect"
results). These are the few places where it deliberately fails loudly.
"""


class AmountTooLargeError(ValueError):
    """Raised when an amount exceeds the supported ceiling."""

    def __init__(self, cents: int, limit_cents: int):
        self.cents = cents
        self.limit_cents = limit_cents
        super().__init__(f"Amount {cents} cents exceeds the maximum of {limit_cents} cents")


class BackupValidationError(ValueError):
    """Raised when an exported backup file fails validation."""

    pass
