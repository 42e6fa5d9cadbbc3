"""
Domain models for the client record access layer.

Attribute names are English; the aliases are the field names the documents
carry in the store (`nombre`, `apellido`, `saldo`, ...). Both spellings are
accepted on input. The models only describe shape: business validation lives
in the service so it can report rejections in a fixed order.
"""
from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, Optional

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from client_records.infrastructure.store import DocumentSnapshot


class Record(BaseModel):
    """
    A client document as exposed to consumers.
    """

    id: Optional[str] = Field(None, description="Store-assigned document id.")
    name: Optional[str] = Field(None, alias="nombre", description="Given name.")
    surname: Optional[str] = Field(None, alias="apellido", description="Family name.")
    email: Optional[str] = Field(None, description="Contact email.")
    balance: Optional[float] = Field(None, alias="saldo", description="Account balance.")
    created_at: Optional[datetime] = Field(
        None, alias="fechaCreacion", description="Set by the service on create."
    )
    modified_at: Optional[datetime] = Field(
        None, alias="fechaModificacion", description="Set by the service on every update."
    )

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "arbitrary_types_allowed": False,
    }

    def to_document(self) -> Dict[str, Any]:
        """Stored field mapping: aliased names, no id, unset fields omitted."""
        return self.model_dump(by_alias=True, exclude={"id"}, exclude_none=True)

    @classmethod
    def from_snapshot(cls, snapshot: "DocumentSnapshot") -> "Record":
        fields = dict(snapshot.fields)
        fields["id"] = snapshot.id
        return cls.model_validate(fields)


class AppConfiguration(BaseModel):
    """
    Runtime application settings kept in the store.
    """

    allow_registration: bool = Field(
        False, alias="permitirRegistro", description="Whether new users may register."
    )

    model_config = {
        "frozen": True,
        "populate_by_name": True,
    }

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


__all__ = ["AppConfiguration", "Record"]
