"""Custom exceptions for docrepo.

Store errors raised by motor/pymongo are never wrapped; these cover the
conditions the package detects itself.
"""


class DocrepoError(Exception):
    """Base exception for docrepo errors."""

    pass


class InvalidFilterError(DocrepoError, ValueError):
    """A filter tree could not be translated (e.g. an un-compilable pattern)."""

    def __init__(self, message: str, pattern: str | None = None):
        super().__init__(message)
        self.pattern = pattern


class DatabaseNotInitializedError(DocrepoError, RuntimeError):
    """The Motor client was requested before init_client() ran."""

    pass
