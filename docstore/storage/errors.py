"""
Exceptions raised by storage backends.

Driver exceptions are chained as ``__cause__`` so callers can still
inspect the original (e.g. pymongo's DuplicateKeyError).
"""


class StoreError(Exception):
    """Base exception for storage operations."""
    pass


class StoreConnectionError(StoreError):
    """Initial connection to the database could not be established."""
    pass


class DisconnectError(StoreConnectionError):
    """Releasing the client connection failed."""
    pass


class WriteError(StoreError):
    """Insert, update or delete failed at the transport or constraint level."""
    pass


class NotFoundError(StoreError):
    """No document matched the item's identifier in its namespace."""
    pass


class QueryError(StoreError):
    """A read or list query failed."""
    pass


class DecodeError(QueryError):
    """A stored document does not fit the shape of the target item."""
    pass
