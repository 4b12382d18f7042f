"""Markdown editor action endpoints.

Each action is a ``POST /_actions/<actionName>`` taking a JSON body and
returning ``{"success": true, "data": {...}}``. Failures are raised as
ActionError subclasses and rendered by the handlers in ``main``.
"""

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..schemas.action import ActionResult
from ..schemas.document import (
    DocumentCreate,
    DocumentData,
    DocumentListData,
    DocumentListRequest,
    DocumentResponse,
    DocumentUpdate,
)
from ..schemas.document_version import (
    DocumentVersionCreate,
    DocumentVersionData,
    DocumentVersionListData,
    DocumentVersionListRequest,
    DocumentVersionResponse,
    DocumentVersionUpdate,
)
from ..services import document_service
from ..services.auth_service import CurrentUser, get_current_user

router = APIRouter(
    prefix="/_actions",
    tags=["actions"],
)


def _document_result(document) -> ActionResult[DocumentData]:
    return ActionResult[DocumentData](
        data=DocumentData(document=DocumentResponse.model_validate(document))
    )


def _version_result(version) -> ActionResult[DocumentVersionData]:
    return ActionResult[DocumentVersionData](
        data=DocumentVersionData(version=DocumentVersionResponse.model_validate(version))
    )


# ============================================================================
# Documents
# ============================================================================


@router.post("/createDocument", response_model=ActionResult[DocumentData])
async def create_document(
    body: Optional[DocumentCreate] = None,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ActionResult[DocumentData]:
    """Create a document owned by the caller. All fields are optional."""
    if body is None:
        body = DocumentCreate()
    document = await document_service.create_document(body, current_user, db)
    return _document_result(document)


@router.post("/updateDocument", response_model=ActionResult[DocumentData])
async def update_document(
    body: DocumentUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ActionResult[DocumentData]:
    """Partially update an owned document; omitted fields are left untouched."""
    document = await document_service.update_document(body, current_user, db)
    return _document_result(document)


@router.post("/listDocuments", response_model=ActionResult[DocumentListData])
async def list_documents(
    body: Optional[DocumentListRequest] = None,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ActionResult[DocumentListData]:
    """List the caller's documents (archived hidden unless includeArchived)."""
    if body is None:
        body = DocumentListRequest()
    documents = await document_service.list_documents(body, current_user, db)
    items = [DocumentResponse.model_validate(doc) for doc in documents]
    return ActionResult[DocumentListData](data=DocumentListData(items=items, total=len(items)))


# ============================================================================
# Versions
# ============================================================================


@router.post("/createDocumentVersion", response_model=ActionResult[DocumentVersionData])
async def create_document_version(
    body: DocumentVersionCreate,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ActionResult[DocumentVersionData]:
    """Add a version to an owned document, optionally making it current."""
    version = await document_service.create_document_version(body, current_user, db)
    return _version_result(version)


@router.post("/updateDocumentVersion", response_model=ActionResult[DocumentVersionData])
async def update_document_version(
    body: DocumentVersionUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ActionResult[DocumentVersionData]:
    """Partially update a version of an owned document."""
    version = await document_service.update_document_version(body, current_user, db)
    return _version_result(version)


@router.post("/listDocumentVersions", response_model=ActionResult[DocumentVersionListData])
async def list_document_versions(
    body: DocumentVersionListRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ActionResult[DocumentVersionListData]:
    """List every version of an owned document."""
    versions = await document_service.list_document_versions(body, current_user, db)
    items = [DocumentVersionResponse.model_validate(v) for v in versions]
    return ActionResult[DocumentVersionListData](
        data=DocumentVersionListData(items=items, total=len(items))
    )
