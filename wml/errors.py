"""Exceptions raised outside the (non-raising) adaptive engine."""


class WmlError(Exception):
    """Base class for errors surfaced to callers and the CLI."""
    pass


class StoreError(WmlError):
    """Raised when a performance record cannot be located or written."""
    pass
