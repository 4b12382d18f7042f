"""SQLAlchemy ORM models package."""

from .document import Document
from .document_version import DocumentVersion

__all__ = [
    "Document",
    "DocumentVersion",
]
