"""
Storage factory for creating store instances.

Picks the backend named in settings and opens it.
"""

from enum import Enum
from typing import TYPE_CHECKING

from docstore.logging import configure_logging, get_logger
from docstore.storage.base import BaseStore


if TYPE_CHECKING:
    from docstore.config import Settings


logger = get_logger(__name__)


class StorageBackend(str, Enum):
    """Supported storage backends."""
    MONGODB = "mongodb"


def get_storage_backend(settings: "Settings") -> StorageBackend:
    """
    Determine which storage backend to use based on settings.

    Args:
        settings: Application settings

    Returns:
        The configured storage backend
    """
    backend_str = settings.storage_backend.lower()

    try:
        return StorageBackend(backend_str)
    except ValueError:
        raise ValueError(
            f"Unsupported storage backend: {backend_str}. "
            f"Supported backends: {[b.value for b in StorageBackend]}"
        )


async def create_store(settings: "Settings") -> BaseStore:
    """
    Open a store for the configured backend.

    Args:
        settings: Application settings

    Returns:
        A connected store; the caller is responsible for closing it

    Raises:
        ValueError: If settings name an unsupported backend
        StoreConnectionError: If the backend cannot be reached
    """
    get_storage_backend(settings)
    configure_logging(settings)

    from docstore.storage.mongodb import MongoStore

    logger.info(
        "Creating MongoDB store",
        database=settings.mongodb_database,
    )
    return await MongoStore.open(settings.mongo_config())
