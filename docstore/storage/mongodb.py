"""
MongoDB storage backend implementation.

Maps each item namespace to a collection and each item id to ``_id``.
Pooling, retries and thread-safety are left to the motor client.
"""

import inspect
import time
import uuid
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Callable, Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection
from pymongo.errors import PyMongoError

from docstore.logging import get_logger
from docstore.storage.base import BaseStore, IDSetter, Item, ListOptions, TimeTracker
from docstore.storage.errors import (
    DecodeError,
    DisconnectError,
    NotFoundError,
    QueryError,
    StoreConnectionError,
    WriteError,
)


def _unix_now() -> int:
    return int(time.time())


@dataclass(frozen=True)
class MongoConfig:
    """Connection settings for a MongoStore."""
    database_name: str
    connection_uri: str = "mongodb://localhost:27017"
    server_selection_timeout_ms: int = 5000

    @property
    def handler(self) -> str:
        """Name of the backend this config belongs to."""
        return "mongodb"


class MongoStore(BaseStore):
    """
    MongoDB-backed item store.

    Usage:
        store = await MongoStore.open(
            MongoConfig(database_name="docstore", connection_uri="mongodb://localhost:27017")
        )
        await store.create(task)
        await store.close()
    """

    def __init__(
        self,
        client: Any,
        database_name: str,
        *,
        logger: Optional[Any] = None,
        clock: Optional[Callable[[], int]] = None,
    ):
        """
        Wrap an existing client.

        Args:
            client: AsyncIOMotorClient (or a compatible mock)
            database_name: Database holding one collection per namespace
            logger: structlog logger; defaults to this module's logger
            clock: Returns the current Unix time in seconds
        """
        self._client = client
        self._db = client[database_name]
        self._logger = logger or get_logger(__name__)
        self._clock = clock or _unix_now

    @classmethod
    async def open(
        cls,
        config: MongoConfig,
        *,
        logger: Optional[Any] = None,
        clock: Optional[Callable[[], int]] = None,
    ) -> "MongoStore":
        """
        Connect to ``config.connection_uri`` and bind ``config.database_name``.

        The server is pinged once so an unreachable database fails here
        rather than on the first operation. No retries.

        Raises:
            StoreConnectionError: If the client cannot be created or the ping fails
        """
        log = logger or get_logger(__name__)
        client = None
        try:
            client = AsyncIOMotorClient(
                config.connection_uri,
                serverSelectionTimeoutMS=config.server_selection_timeout_ms,
            )
            await client.admin.command("ping")
        except PyMongoError as exc:
            log.error("Client is not connected", database=config.database_name, error=str(exc))
            if client is not None:
                client.close()
            raise StoreConnectionError(str(exc)) from exc

        log.info("MongoDB store connected", database=config.database_name)
        return cls(client, config.database_name, logger=logger, clock=clock)

    def _collection(self, item: Item) -> AsyncIOMotorCollection:
        namespace = item.get_namespace()
        if not namespace:
            raise ValueError("Item namespace must be a non-empty string")
        return self._db[namespace]

    async def create(self, item: Item) -> None:
        """Insert the item, assigning id and timestamps where supported."""
        if isinstance(item, IDSetter):
            item.set_id(str(uuid.uuid4()))
        if isinstance(item, TimeTracker):
            now = self._clock()
            item.set_created(now)
            item.set_updated(now)

        collection = self._collection(item)
        try:
            result = await collection.insert_one(item.to_document())
        except PyMongoError as exc:
            self._logger.error(
                "No insertion",
                namespace=item.get_namespace(),
                id=item.get_id(),
                error=str(exc),
            )
            raise WriteError(str(exc)) from exc

        self._logger.debug(
            "Inserted a single document",
            namespace=item.get_namespace(),
            id=result.inserted_id,
        )

    async def read(self, item: Item) -> None:
        """Load the document with the item's id into the item."""
        collection = self._collection(item)
        try:
            document = await collection.find_one({"_id": item.get_id()})
        except PyMongoError as exc:
            self._logger.error(
                "Lookup failed",
                namespace=item.get_namespace(),
                id=item.get_id(),
                error=str(exc),
            )
            raise QueryError(str(exc)) from exc

        if document is None:
            self._logger.error(
                "The filter did not match any documents in the collection",
                namespace=item.get_namespace(),
                id=item.get_id(),
            )
            raise NotFoundError(
                f"No document {item.get_id()!r} in namespace {item.get_namespace()!r}"
            )

        self._decode(item, document)
        self._logger.debug("Found document", namespace=item.get_namespace(), id=item.get_id())

    async def update(self, item: Item) -> None:
        """
        Set the stored fields of the item from its current values.

        The creation time of a TimeTracker item is written once by create()
        and never overwritten here.
        """
        fields = item.to_document()
        fields.pop("_id", None)  # _id is immutable
        if isinstance(item, TimeTracker):
            fields.pop("created", None)
            now = self._clock()
            item.set_updated(now)
            fields["updated"] = now

        collection = self._collection(item)
        try:
            result = await collection.update_one(
                {"_id": item.get_id()},
                {"$set": fields},
            )
        except PyMongoError as exc:
            self._logger.error(
                "No update",
                namespace=item.get_namespace(),
                id=item.get_id(),
                error=str(exc),
            )
            raise WriteError(str(exc)) from exc

        # An identical payload matches without modifying; that is a success
        if result.matched_count != 1 and result.modified_count != 1:
            self._logger.error(
                "No update in collection",
                namespace=item.get_namespace(),
                id=item.get_id(),
                matched=result.matched_count,
                modified=result.modified_count,
            )
            raise NotFoundError(
                f"No document {item.get_id()!r} in namespace {item.get_namespace()!r}"
            )

        self._logger.debug(
            "Updated document",
            namespace=item.get_namespace(),
            id=item.get_id(),
            modified=result.modified_count,
        )

    async def delete(self, item: Item) -> None:
        """Delete the document with the item's id."""
        collection = self._collection(item)
        try:
            result = await collection.delete_one({"_id": item.get_id()})
        except PyMongoError as exc:
            self._logger.error(
                "No deletion",
                namespace=item.get_namespace(),
                id=item.get_id(),
                error=str(exc),
            )
            raise WriteError(str(exc)) from exc

        if result.deleted_count != 1:
            self._logger.error(
                "Nothing is deleted",
                namespace=item.get_namespace(),
                id=item.get_id(),
                deleted=result.deleted_count,
            )
            raise NotFoundError(
                f"No document {item.get_id()!r} in namespace {item.get_namespace()!r}"
            )

        self._logger.debug("Deleted document", namespace=item.get_namespace(), id=item.get_id())

    async def list(self, items: Sequence[Item], options: ListOptions) -> int:
        """Decode one page of the items' namespace into ``items``."""
        if len(items) < options.limit:
            raise ValueError(
                f"list needs at least {options.limit} items to fill, got {len(items)}"
            )

        collection = self._collection(items[0])
        order = options.sort.order
        cursor = collection.find(
            {},
            skip=options.skip,
            limit=options.limit,
            sort=[order] if order else None,
        )

        filled = 0
        try:
            async for document in cursor:
                self._decode(items[filled], document)
                filled += 1
        except PyMongoError as exc:
            self._logger.error(
                "Not able to query data",
                namespace=items[0].get_namespace(),
                error=str(exc),
            )
            raise QueryError(str(exc)) from exc
        finally:
            await _close_cursor(cursor)

        self._logger.debug(
            "Listed documents",
            namespace=items[0].get_namespace(),
            page=options.page,
            limit=options.limit,
            sort=options.sort.name,
            count=filled,
        )
        return filled

    async def close(self) -> None:
        """Close the MongoDB client."""
        if self._client is None:
            return

        client, self._client = self._client, None
        try:
            client.close()
        except PyMongoError as exc:
            self._logger.error("Disconnect failed", error=str(exc))
            raise DisconnectError(str(exc)) from exc

        self._logger.info("MongoDB store closed")

    def _decode(self, item: Item, document: dict[str, Any]) -> None:
        try:
            item.load_document(document)
        except (ValueError, TypeError) as exc:
            self._logger.error(
                "Failed decoding",
                namespace=item.get_namespace(),
                id=document.get("_id"),
                error=str(exc),
            )
            raise DecodeError(str(exc)) from exc


async def _close_cursor(cursor: Any) -> None:
    # Motor returns a future from close(); mock cursors close synchronously
    result = cursor.close()
    if inspect.isawaitable(result):
        await result
