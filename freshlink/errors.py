# freshlink/errors.py
from __future__ import annotations


class ValidationError(ValueError):
    """Bad caller input, rejected before anything is mutated."""


class PersistenceError(Exception):
    """A blob could not be read from or written to the database."""


class RemoteError(Exception):
    """The remote order service failed, timed out or refused the request."""
