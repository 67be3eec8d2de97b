"""Exception taxonomy shared by the repository, migrations and CLI.

Lookups by name never raise: a missing file or tag is returned as ``None``.
Everything else that can go wrong surfaces as a ``TaggerError`` subclass.
"""


class TaggerError(Exception):
    """Base class for all recoverable tagger errors."""
    pass


class SchemaError(TaggerError):
    """Raised when the database schema cannot be brought up to date."""
    pass


class ConfigError(TaggerError):
    """Raised when a config file exists but cannot be read or parsed."""
    pass


class StorageError(TaggerError):
    """Wraps a failure reported by the storage engine."""
    pass


class ConflictError(StorageError):
    """Raised when a write violates an integrity constraint."""
    pass


class NotFoundError(TaggerError):
    """Raised when an operation references an id that does not exist."""
    pass


class InvalidFilenameError(TaggerError):
    """Raised when a filename cannot be represented as text."""
    pass


class InvalidTagError(TaggerError):
    """Raised when a tag name cannot be represented as text."""
    pass
