"""Document and version business logic.

Every action handler here is a plain coroutine of (input, caller,
session). Authorization is a single gate, get_owned_document, which
matches on both id and owner so a foreign document looks exactly like a
missing one.
"""

import logging
from typing import Sequence

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import utcnow
from ..exceptions import ConflictError, NotFoundError
from ..models.document import Document
from ..models.document_version import DocumentVersion
from ..schemas.document import DocumentCreate, DocumentListRequest, DocumentUpdate
from ..schemas.document_version import (
    DocumentVersionCreate,
    DocumentVersionListRequest,
    DocumentVersionUpdate,
)
from .auth_service import CurrentUser

logger = logging.getLogger(__name__)


async def get_owned_document(
    document_id: str,
    user_id: str,
    db: AsyncSession,
) -> Document:
    """
    Load a document owned by the given user.

    Args:
        document_id: Document to load
        user_id: Caller's user id
        db: Database session

    Returns:
        The Document row

    Raises:
        NotFoundError: If no document has this id and owner
    """
    result = await db.execute(
        select(Document).where(
            Document.id == document_id,
            Document.user_id == user_id,
        )
    )
    document = result.scalar_one_or_none()

    if document is None:
        logger.debug(f"Document {document_id} not found for user {user_id}")
        raise NotFoundError("Document not found.")

    return document


async def clear_current_versions(document_id: str, db: AsyncSession) -> None:
    """Unset is_current on every version of a document (same transaction as the caller)."""
    await db.execute(
        update(DocumentVersion)
        .where(DocumentVersion.document_id == document_id)
        .values(is_current=False)
    )


async def _flush_version(db: AsyncSession, document_id: str) -> None:
    """Flush pending version writes, mapping a second-current race to ConflictError."""
    try:
        await db.flush()
    except IntegrityError as e:
        logger.warning(f"Concurrent current-version write on document {document_id}: {e}")
        raise ConflictError(
            "Another version of this document was made current at the same time. Please retry."
        ) from e


# ============================================================================
# Documents
# ============================================================================


async def create_document(
    body: DocumentCreate,
    user: CurrentUser,
    db: AsyncSession,
) -> Document:
    """Insert a new document owned by the caller."""
    now = utcnow()
    document = Document(
        user_id=user.id,
        title=body.title,
        slug=body.slug,
        description=body.description,
        folder=body.folder,
        tags=body.tags,
        is_pinned=body.is_pinned if body.is_pinned is not None else False,
        is_archived=body.is_archived if body.is_archived is not None else False,
        created_at=now,
        updated_at=now,
    )
    db.add(document)
    await db.flush()
    await db.refresh(document)

    logger.info(f"Document {document.id} created by user {user.id}")
    return document


async def update_document(
    body: DocumentUpdate,
    user: CurrentUser,
    db: AsyncSession,
) -> Document:
    """Apply the supplied fields to an owned document and bump updated_at."""
    document = await get_owned_document(body.id, user.id, db)

    changes = body.changes()
    for field, value in changes.items():
        setattr(document, field, value)
    document.updated_at = utcnow()

    await db.flush()
    await db.refresh(document)

    logger.info(f"Document {document.id} updated by user {user.id}: {sorted(changes)}")
    return document


async def list_documents(
    body: DocumentListRequest,
    user: CurrentUser,
    db: AsyncSession,
) -> Sequence[Document]:
    """Return the caller's documents, hiding archived ones unless asked."""
    filters = [Document.user_id == user.id]
    if not body.include_archived:
        filters.append(Document.is_archived.is_(False))
    if body.pinned_only:
        filters.append(Document.is_pinned.is_(True))

    result = await db.execute(
        select(Document).where(*filters).order_by(Document.created_at)
    )
    return result.scalars().all()


# ============================================================================
# Versions
# ============================================================================


async def create_document_version(
    body: DocumentVersionCreate,
    user: CurrentUser,
    db: AsyncSession,
) -> DocumentVersion:
    """
    Add a version to an owned document.

    When the new version is current, the previous current version is
    cleared first; both writes share the request transaction.
    """
    await get_owned_document(body.document_id, user.id, db)

    if body.is_current:
        await clear_current_versions(body.document_id, db)

    version = DocumentVersion(
        document_id=body.document_id,
        user_id=user.id,
        version_label=body.version_label,
        content=body.content,
        is_autosave=body.is_autosave if body.is_autosave is not None else False,
        is_current=body.is_current if body.is_current is not None else False,
        created_at=utcnow(),
    )
    db.add(version)
    await _flush_version(db, body.document_id)
    await db.refresh(version)

    logger.info(
        f"Version {version.id} created on document {body.document_id} "
        f"by user {user.id} (current={version.is_current})"
    )
    return version


async def update_document_version(
    body: DocumentVersionUpdate,
    user: CurrentUser,
    db: AsyncSession,
) -> DocumentVersion:
    """Apply the supplied fields to a version of an owned document."""
    await get_owned_document(body.document_id, user.id, db)

    result = await db.execute(
        select(DocumentVersion).where(
            DocumentVersion.id == body.id,
            DocumentVersion.document_id == body.document_id,
        )
    )
    version = result.scalar_one_or_none()

    if version is None:
        raise NotFoundError("Document version not found.")

    if body.is_current:
        await clear_current_versions(body.document_id, db)

    changes = body.changes()
    for field, value in changes.items():
        setattr(version, field, value)

    await _flush_version(db, body.document_id)
    await db.refresh(version)

    logger.info(f"Version {version.id} updated by user {user.id}: {sorted(changes)}")
    return version


async def list_document_versions(
    body: DocumentVersionListRequest,
    user: CurrentUser,
    db: AsyncSession,
) -> Sequence[DocumentVersion]:
    """Return every version of an owned document."""
    await get_owned_document(body.document_id, user.id, db)

    result = await db.execute(
        select(DocumentVersion)
        .where(DocumentVersion.document_id == body.document_id)
        .order_by(DocumentVersion.created_at)
    )
    return result.scalars().all()
