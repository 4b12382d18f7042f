"""DocumentVersion SQLAlchemy model.

Versions are full-content snapshots of a document's markdown. They
accumulate (there is no delete path) and at most one per document is
flagged as current. That rule is backed by a partial unique index so
the store rejects a second current version even under concurrent writes.
"""

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, String, Text, true
from sqlalchemy.orm import relationship

from ..database import Base, utcnow

if TYPE_CHECKING:
    from .document import Document


class DocumentVersion(Base):
    """
    DocumentVersion model storing one markdown snapshot of a document.

    Attributes:
        id: Opaque text identifier (uuid4 string by default)
        document_id: FK to the parent document
        user_id: User who authored the version (captured at creation)
        version_label: Optional label ("v1", "initial", "autosave #3")
        content: Full markdown content
        is_autosave: True for machine-generated snapshots
        is_current: True for the document's active version (at most one)
        created_at: Timestamp when the version was created
    """

    __tablename__ = "MarkdownDocumentVersions"
    __allow_unmapped__ = True

    # Primary key
    id = Column(
        String(255),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
        nullable=False,
    )

    # Parent document
    document_id = Column(
        String(255),
        ForeignKey("MarkdownDocuments.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Author
    user_id = Column(
        String(255),
        nullable=False,
    )

    # Snapshot content
    version_label = Column(Text, nullable=True)
    content = Column(Text, nullable=False)

    # Flags
    is_autosave = Column(
        Boolean,
        nullable=False,
        default=False,
    )
    is_current = Column(
        Boolean,
        nullable=False,
        default=False,
    )

    created_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )

    __table_args__ = (
        Index(
            "uq_markdown_document_versions_current",
            "document_id",
            unique=True,
            postgresql_where=is_current.is_(true()),
            sqlite_where=is_current.is_(true()),
        ),
    )

    # Relationships
    document = relationship(
        "Document",
        back_populates="versions",
        lazy="raise",
    )

    def __repr__(self) -> str:
        """String representation of DocumentVersion."""
        return (
            f"<DocumentVersion(id={self.id}, document_id={self.document_id}, "
            f"current={self.is_current})>"
        )
