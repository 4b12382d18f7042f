"""Document SQLAlchemy model for markdown notes.

A document is the metadata shell of a note: title, virtual folder, tags
and the pin/archive flags. The markdown itself lives in
DocumentVersion rows. Each document is owned by exactly one user of the
external identity provider.
"""

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Column, DateTime, Index, String, Text
from sqlalchemy.orm import relationship

from ..database import Base, utcnow

if TYPE_CHECKING:
    from .document_version import DocumentVersion


class Document(Base):
    """
    Document model representing a user's markdown note.

    Attributes:
        id: Opaque text identifier (uuid4 string by default), generated on insert
        user_id: Owning user id from the identity provider (never changes)
        title: Document title or first heading
        slug: Slug reserved for publishing
        description: Short free-text description
        folder: Virtual folder path (not validated)
        tags: Opaque tag string (comma-separated or JSON, caller's choice)
        is_pinned: Whether the document is pinned
        is_archived: Whether the document is archived
        created_at: Timestamp when document was created
        updated_at: Timestamp of the last mutation
    """

    __tablename__ = "MarkdownDocuments"
    __allow_unmapped__ = True

    # Primary key
    id = Column(
        String(255),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
        nullable=False,
    )

    # Owner
    user_id = Column(
        String(255),
        nullable=False,
        index=True,
    )

    # Document details
    title = Column(Text, nullable=True)
    slug = Column(Text, nullable=True)
    description = Column(Text, nullable=True)
    folder = Column(Text, nullable=True)
    tags = Column(Text, nullable=True)

    # Flags
    is_pinned = Column(
        Boolean,
        nullable=False,
        default=False,
    )
    is_archived = Column(
        Boolean,
        nullable=False,
        default=False,
    )

    # Timestamps
    created_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )
    updated_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )

    __table_args__ = (
        Index("ix_markdown_documents_user_archived", "user_id", "is_archived"),
    )

    # Relationships
    versions = relationship(
        "DocumentVersion",
        back_populates="document",
        lazy="raise",
    )

    def __repr__(self) -> str:
        """String representation of Document."""
        return f"<Document(id={self.id}, title={self.title[:30] if self.title else ''})>"
