"""Exception hierarchy for MailQC."""

from __future__ import annotations


class MailQCError(Exception):
    """Base class for all MailQC errors."""


class StorageError(MailQCError):
    """A key-value store could not be read or written."""


class StorageQuotaError(StorageError):
    """A write would exceed the store's size quota."""


class ZammadError(MailQCError):
    """The ticketing API was unreachable or answered with an error status."""


class ValidationError(MailQCError):
    """Reviewer input is missing or malformed. Raised before any state changes."""
