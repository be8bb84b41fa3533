"""
Storage abstraction layer.

Provides a generic item store interface (create/read/update/delete/list)
and its backends.

Supported backends:
- MongoDB
"""

from docstore.storage.base import (
    BaseStore,
    IDSetter,
    Item,
    ListOptions,
    Sort,
    TimeTracker,
)
from docstore.storage.document import Document
from docstore.storage.errors import (
    DecodeError,
    DisconnectError,
    NotFoundError,
    QueryError,
    StoreConnectionError,
    StoreError,
    WriteError,
)
from docstore.storage.factory import (
    create_store,
    get_storage_backend,
    StorageBackend,
)
from docstore.storage.mongodb import MongoConfig, MongoStore

__all__ = [
    # Abstract interfaces
    "BaseStore",
    "IDSetter",
    "Item",
    "ListOptions",
    "Sort",
    "TimeTracker",
    "Document",
    # Errors
    "DecodeError",
    "DisconnectError",
    "NotFoundError",
    "QueryError",
    "StoreConnectionError",
    "StoreError",
    "WriteError",
    # Backends
    "MongoConfig",
    "MongoStore",
    # Factory functions
    "create_store",
    "get_storage_backend",
    "StorageBackend",
]
