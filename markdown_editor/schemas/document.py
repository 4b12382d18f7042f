"""Pydantic schemas for Document actions.

Wire keys are camelCase (``isPinned``, ``createdAt``) to match the
action clients; snake_case is accepted on input as well.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

DOCUMENT_MUTABLE_FIELDS = frozenset(
    {"title", "slug", "description", "folder", "tags", "is_pinned", "is_archived"}
)


class ActionModel(BaseModel):
    """Base for action payloads: camelCase aliases, snake_case accepted."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class DocumentFields(ActionModel):
    """Optional document attributes shared by create and update."""

    title: Optional[str] = Field(None, description="Document title or first heading")
    slug: Optional[str] = Field(None, description="Slug for future publishing")
    description: Optional[str] = Field(None, description="Short description")
    folder: Optional[str] = Field(None, description="Virtual folder path")
    tags: Optional[str] = Field(None, description="Opaque tag string")
    is_pinned: Optional[bool] = Field(None, description="Pin the document")
    is_archived: Optional[bool] = Field(None, description="Archive the document")

    @field_validator(*DOCUMENT_MUTABLE_FIELDS, mode="before")
    @classmethod
    def reject_null(cls, value):
        # Omit a field to leave it alone; null is not a value for it
        if value is None:
            raise ValueError("must not be null")
        return value


class DocumentCreate(DocumentFields):
    """Input for createDocument. Every field is optional."""


class DocumentUpdate(DocumentFields):
    """Input for updateDocument.

    Only fields present in the request are applied; at least one must be.
    """

    id: str = Field(..., min_length=1, description="Document to update")

    @model_validator(mode="after")
    def require_a_field(self) -> "DocumentUpdate":
        if not self.model_fields_set & DOCUMENT_MUTABLE_FIELDS:
            raise ValueError("At least one field must be provided to update.")
        return self

    def changes(self) -> dict:
        """Return only the mutable fields the caller actually supplied."""
        return self.model_dump(include=set(DOCUMENT_MUTABLE_FIELDS), exclude_unset=True)


class DocumentListRequest(ActionModel):
    """Input for listDocuments."""

    include_archived: bool = Field(False, description="Also return archived documents")
    pinned_only: bool = Field(False, description="Only return pinned documents")


class DocumentResponse(ActionModel):
    """Schema for a full document row."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    title: Optional[str] = None
    slug: Optional[str] = None
    description: Optional[str] = None
    folder: Optional[str] = None
    tags: Optional[str] = None
    is_pinned: bool = False
    is_archived: bool = False
    created_at: datetime
    updated_at: datetime


class DocumentData(ActionModel):
    document: DocumentResponse


class DocumentListData(ActionModel):
    items: list[DocumentResponse]
    total: int
