"""Exceptions raised by the comparison engine."""


class BimDiffError(Exception):
    """Base class for all comparison errors."""


class InvalidInputError(BimDiffError, ValueError):
    """A snapshot is missing or an element carries no usable identity."""


class AmbiguousIdentityError(InvalidInputError):
    """Duplicate identity keys in one snapshot while strict identity is on."""

    def __init__(self, message: str, key=None, version_id=None):
        super().__init__(message)
        self.key = key
        self.version_id = version_id


class ComparisonCancelledError(BimDiffError):
    """A multi-version comparison was cancelled by the caller."""
