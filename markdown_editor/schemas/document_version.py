"""Pydantic schemas for DocumentVersion actions."""

from datetime import datetime
from typing import Optional

from pydantic import ConfigDict, Field, field_validator, model_validator

from .document import ActionModel

VERSION_MUTABLE_FIELDS = frozenset({"version_label", "content", "is_autosave", "is_current"})


class DocumentVersionCreate(ActionModel):
    """Input for createDocumentVersion."""

    document_id: str = Field(..., min_length=1, description="Parent document")
    version_label: Optional[str] = Field(None, description='Label such as "v1" or "autosave #3"')
    content: str = Field(..., min_length=1, description="Full markdown content")
    is_autosave: Optional[bool] = Field(None, description="Machine-generated snapshot")
    is_current: Optional[bool] = Field(None, description="Make this the current version")

    @field_validator("version_label", "is_autosave", "is_current", mode="before")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("must not be null")
        return value


class DocumentVersionUpdate(ActionModel):
    """Input for updateDocumentVersion.

    Only fields present in the request are applied; at least one must be.
    """

    id: str = Field(..., min_length=1, description="Version to update")
    document_id: str = Field(..., min_length=1, description="Document the version belongs to")
    version_label: Optional[str] = None
    content: Optional[str] = Field(None, min_length=1)
    is_autosave: Optional[bool] = None
    is_current: Optional[bool] = None

    @field_validator(*VERSION_MUTABLE_FIELDS, mode="before")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("must not be null")
        return value

    @model_validator(mode="after")
    def require_a_field(self) -> "DocumentVersionUpdate":
        if not self.model_fields_set & VERSION_MUTABLE_FIELDS:
            raise ValueError("At least one field must be provided to update.")
        return self

    def changes(self) -> dict:
        """Return only the mutable fields the caller actually supplied."""
        return self.model_dump(include=set(VERSION_MUTABLE_FIELDS), exclude_unset=True)


class DocumentVersionListRequest(ActionModel):
    """Input for listDocumentVersions."""

    document_id: str = Field(..., min_length=1, description="Document whose versions to list")


class DocumentVersionResponse(ActionModel):
    """Schema for a full version row."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    document_id: str
    user_id: str
    version_label: Optional[str] = None
    content: str
    is_autosave: bool = False
    is_current: bool = False
    created_at: datetime


class DocumentVersionData(ActionModel):
    version: DocumentVersionResponse


class DocumentVersionListData(ActionModel):
    items: list[DocumentVersionResponse]
    total: int
