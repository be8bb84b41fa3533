"""
Abstract base classes for storage backends.

This module defines the contracts that all storage implementations must follow:

- Item: what every record passed to a store provides
- IDSetter / TimeTracker: optional capabilities a record may opt into
- ListOptions / Sort: pagination and ordering for list()
- BaseStore: the CRUD + list interface each backend implements
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Optional, Protocol, runtime_checkable

from pymongo import ASCENDING, DESCENDING


@runtime_checkable
class Item(Protocol):
    """
    A record that can be persisted.

    The namespace selects the collection; the id is the primary key.
    Encoding is left to the record so the store never needs to know
    its field set.
    """

    def get_namespace(self) -> str: ...

    def get_id(self) -> str: ...

    def to_document(self) -> dict[str, Any]:
        """Document to persist, with the identifier bound to ``_id``."""
        ...

    def load_document(self, document: Mapping[str, Any]) -> None:
        """
        Decode a stored document into this instance in place.

        Raises ValueError or TypeError if the document does not fit.
        """
        ...


@runtime_checkable
class IDSetter(Protocol):
    """Records that let the store assign their identifier on create."""

    def set_id(self, value: str) -> None: ...


@runtime_checkable
class TimeTracker(Protocol):
    """Records that carry created/updated Unix timestamps (seconds)."""

    def set_created(self, unix_time: int) -> None: ...

    def set_updated(self, unix_time: int) -> None: ...

    def get_created(self) -> int: ...

    def get_updated(self) -> int: ...


class Sort(IntEnum):
    """Ordering applied by list()."""
    NATURAL = 0        # Storage order
    CREATED_ASC = 1    # Oldest to newest
    CREATED_DESC = 2   # Newest to oldest
    UPDATED_ASC = 3    # Least recently updated first
    UPDATED_DESC = 4   # Most recently updated first

    @property
    def order(self) -> Optional[tuple[str, int]]:
        """Field and direction to sort by, or None for natural order."""
        return _SORT_ORDERS[self]


_SORT_ORDERS: dict[Sort, Optional[tuple[str, int]]] = {
    Sort.NATURAL: None,
    Sort.CREATED_ASC: ("created", ASCENDING),
    Sort.CREATED_DESC: ("created", DESCENDING),
    Sort.UPDATED_ASC: ("updated", ASCENDING),
    Sort.UPDATED_DESC: ("updated", DESCENDING),
}


@dataclass
class ListOptions:
    """Skip/limit pagination for list(): skip = page * limit."""
    page: int = 0
    limit: int = 10
    sort: Sort = Sort.NATURAL

    def __post_init__(self) -> None:
        if self.page < 0:
            raise ValueError(f"page must be non-negative, got {self.page}")
        if self.limit <= 0:
            raise ValueError(f"limit must be positive, got {self.limit}")
        self.sort = Sort(self.sort)

    @property
    def skip(self) -> int:
        return self.page * self.limit


class BaseStore(ABC):
    """
    Abstract base class for item storage.

    Implementations translate these operations to a concrete database.
    Stores hold no reference to any item between calls.

    Usage:
        async with await MongoStore.open(config) as store:
            await store.create(item)
            await store.read(item)
    """

    @abstractmethod
    async def create(self, item: Item) -> None:
        """
        Insert a new item.

        Assigns a fresh id to IDSetter items and stamps created/updated
        on TimeTracker items before inserting.

        Raises:
            WriteError: If the insert fails (e.g. duplicate key)
        """
        pass

    @abstractmethod
    async def read(self, item: Item) -> None:
        """
        Load the stored item with the same id into ``item`` in place.

        Raises:
            NotFoundError: If no document has the item's id
            DecodeError: If the document does not fit the item
            QueryError: If the lookup fails
        """
        pass

    @abstractmethod
    async def update(self, item: Item) -> None:
        """
        Replace the stored fields of the item with the same id.

        Stamps updated on TimeTracker items.

        Raises:
            NotFoundError: If no document has the item's id
            WriteError: If the update fails
        """
        pass

    @abstractmethod
    async def delete(self, item: Item) -> None:
        """
        Delete the stored item with the same id.

        Raises:
            NotFoundError: If nothing was deleted
            WriteError: If the delete fails
        """
        pass

    @abstractmethod
    async def list(self, items: Sequence[Item], options: ListOptions) -> int:
        """
        Fill pre-allocated blank items with one page of the namespace.

        ``items`` must hold at least ``options.limit`` items, all of the
        same namespace. Results are decoded into ``items`` in order.

        Returns:
            Number of items filled (less than the limit on the last page)

        Raises:
            QueryError: If the query fails
            DecodeError: If a document does not fit its slot; slots
                filled before it keep their values
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release the connection. Safe to call more than once."""
        pass

    async def __aenter__(self) -> "BaseStore":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()
