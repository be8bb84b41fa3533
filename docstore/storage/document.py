"""
Pydantic base class implementing the Item contract.

Subclass Document and declare fields; add set_id() or the TimeTracker
methods to opt into those capabilities.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Document(BaseModel):
    """
    A record stored as one document in the collection named by ``namespace``.

    The namespace is not part of the stored document; the id is stored
    as ``_id``. The id is always written, so a Document without set_id()
    needs a caller-chosen id: two creates that both leave it empty collide
    on ``_id: ""``.

    Usage:
        class Task(Document):
            status: str = ""

        task = Task(namespace="tasks", id="t-1", status="queued")
    """

    model_config = ConfigDict(populate_by_name=True)

    namespace: str
    id: str = Field(default="", alias="_id")

    def get_namespace(self) -> str:
        return self.namespace

    def get_id(self) -> str:
        return self.id

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude={"namespace"})

    def load_document(self, document: Mapping[str, Any]) -> None:
        # Validate first so a bad document leaves this instance untouched
        loaded = type(self).model_validate({**document, "namespace": self.namespace})
        for name in type(self).model_fields:
            if name != "namespace":
                setattr(self, name, getattr(loaded, name))
