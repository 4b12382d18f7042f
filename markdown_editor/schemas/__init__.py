"""Pydantic schemas package for request/response validation."""

from .action import ActionResult
from .document import (
    DocumentCreate,
    DocumentData,
    DocumentListData,
    DocumentListRequest,
    DocumentResponse,
    DocumentUpdate,
)
from .document_version import (
    DocumentVersionCreate,
    DocumentVersionData,
    DocumentVersionListData,
    DocumentVersionListRequest,
    DocumentVersionResponse,
    DocumentVersionUpdate,
)

__all__ = [
    "ActionResult",
    # Document schemas
    "DocumentCreate",
    "DocumentData",
    "DocumentListData",
    "DocumentListRequest",
    "DocumentResponse",
    "DocumentUpdate",
    # Version schemas
    "DocumentVersionCreate",
    "DocumentVersionData",
    "DocumentVersionListData",
    "DocumentVersionListRequest",
    "DocumentVersionResponse",
    "DocumentVersionUpdate",
]
