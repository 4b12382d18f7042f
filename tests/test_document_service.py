"""Unit tests for the document service layer.

These call the handlers directly with a session and a CurrentUser,
without going through HTTP.
"""

from unittest.mock import patch
from uuid import uuid4

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from markdown_editor.exceptions import ConflictError, NotFoundError
from markdown_editor.models import Document, DocumentVersion
from markdown_editor.schemas.document import DocumentCreate, DocumentListRequest, DocumentUpdate
from markdown_editor.schemas.document_version import (
    DocumentVersionCreate,
    DocumentVersionListRequest,
    DocumentVersionUpdate,
)
from markdown_editor.services import document_service
from markdown_editor.services.auth_service import CurrentUser


async def _current_count(db: AsyncSession, document_id) -> int:
    return await db.scalar(
        select(func.count(DocumentVersion.id)).where(
            DocumentVersion.document_id == document_id,
            DocumentVersion.is_current.is_(True),
        )
    )


@pytest.mark.asyncio
class TestGetOwnedDocument:
    """Tests for the ownership resolver."""

    async def test_returns_owned_document(self, db_session: AsyncSession, test_user: CurrentUser):
        document = await document_service.create_document(DocumentCreate(), test_user, db_session)

        found = await document_service.get_owned_document(document.id, test_user.id, db_session)

        assert found.id == document.id

    async def test_foreign_and_missing_are_indistinguishable(
        self, db_session: AsyncSession, test_user: CurrentUser, test_user_2: CurrentUser
    ):
        document = await document_service.create_document(DocumentCreate(), test_user, db_session)

        with pytest.raises(NotFoundError) as foreign:
            await document_service.get_owned_document(document.id, test_user_2.id, db_session)
        with pytest.raises(NotFoundError) as missing:
            await document_service.get_owned_document(str(uuid4()), test_user.id, db_session)

        assert foreign.value.to_dict() == missing.value.to_dict()


@pytest.mark.asyncio
class TestDocumentHandlers:
    """Tests for document handlers."""

    async def test_create_sets_defaults(self, db_session: AsyncSession, test_user: CurrentUser):
        document = await document_service.create_document(
            DocumentCreate(title="Draft"), test_user, db_session
        )

        assert document.user_id == test_user.id
        assert document.is_pinned is False
        assert document.is_archived is False
        assert document.created_at == document.updated_at

    async def test_update_only_touches_supplied_fields(
        self, db_session: AsyncSession, test_user: CurrentUser
    ):
        document = await document_service.create_document(
            DocumentCreate(title="Keep", folder="/a", is_pinned=True), test_user, db_session
        )

        updated = await document_service.update_document(
            DocumentUpdate(id=document.id, folder="/b"), test_user, db_session
        )

        assert updated.title == "Keep"
        assert updated.folder == "/b"
        assert updated.is_pinned is True
        assert updated.updated_at > updated.created_at

    async def test_update_changes_excludes_unset(self):
        body = DocumentUpdate(id=str(uuid4()), is_archived=False)

        assert body.changes() == {"is_archived": False}

    async def test_list_filters(self, db_session: AsyncSession, test_user: CurrentUser):
        await document_service.create_document(DocumentCreate(title="a"), test_user, db_session)
        await document_service.create_document(
            DocumentCreate(title="b", is_archived=True), test_user, db_session
        )

        visible = await document_service.list_documents(DocumentListRequest(), test_user, db_session)
        everything = await document_service.list_documents(
            DocumentListRequest(include_archived=True), test_user, db_session
        )

        assert [d.title for d in visible] == ["a"]
        assert len(everything) == 2


@pytest.mark.asyncio
class TestVersionHandlers:
    """Tests for version handlers and the single-current-version rule."""

    async def test_at_most_one_current(self, db_session: AsyncSession, test_user: CurrentUser):
        document = await document_service.create_document(DocumentCreate(), test_user, db_session)

        for content in ("one", "two", "three"):
            await document_service.create_document_version(
                DocumentVersionCreate(document_id=document.id, content=content, is_current=True),
                test_user,
                db_session,
            )

        versions = await document_service.list_document_versions(
            DocumentVersionListRequest(document_id=document.id), test_user, db_session
        )
        assert len(versions) == 3
        assert await _current_count(db_session, document.id) == 1

    async def test_update_switches_current(self, db_session: AsyncSession, test_user: CurrentUser):
        document = await document_service.create_document(DocumentCreate(), test_user, db_session)
        first = await document_service.create_document_version(
            DocumentVersionCreate(document_id=document.id, content="one", is_current=True),
            test_user,
            db_session,
        )
        second = await document_service.create_document_version(
            DocumentVersionCreate(document_id=document.id, content="two"),
            test_user,
            db_session,
        )

        updated = await document_service.update_document_version(
            DocumentVersionUpdate(id=second.id, document_id=document.id, is_current=True),
            test_user,
            db_session,
        )

        assert updated.is_current is True
        await db_session.refresh(first)
        assert first.is_current is False
        assert await _current_count(db_session, document.id) == 1

    async def test_store_rejects_second_current_version(
        self, db_session: AsyncSession, test_user: CurrentUser
    ):
        """The partial unique index catches writes that skip the clear step."""
        document = Document(user_id=test_user.id)
        db_session.add(document)
        await db_session.flush()

        db_session.add(DocumentVersion(
            document_id=document.id, user_id=test_user.id, content="a", is_current=True,
        ))
        await db_session.flush()
        db_session.add(DocumentVersion(
            document_id=document.id, user_id=test_user.id, content="b", is_current=True,
        ))

        with pytest.raises(IntegrityError):
            await db_session.flush()

    @staticmethod
    def _racing_clear(user: CurrentUser):
        """Clear step that lets another writer's current version land right after it."""
        real_clear = document_service.clear_current_versions

        async def clear_then_race(document_id: str, db: AsyncSession) -> None:
            await real_clear(document_id, db)
            db.add(DocumentVersion(
                document_id=document_id, user_id=user.id, content="other", is_current=True,
            ))
            await db.flush()

        return clear_then_race

    async def test_concurrent_create_current_maps_to_conflict(
        self, db_session: AsyncSession, test_user: CurrentUser
    ):
        """A lost clear-then-set race on create surfaces as CONFLICT, not a 500."""
        document = await document_service.create_document(DocumentCreate(), test_user, db_session)

        with patch(
            "markdown_editor.services.document_service.clear_current_versions",
            side_effect=self._racing_clear(test_user),
        ) as mock_clear:
            with pytest.raises(ConflictError) as exc_info:
                await document_service.create_document_version(
                    DocumentVersionCreate(document_id=document.id, content="mine", is_current=True),
                    test_user,
                    db_session,
                )

        mock_clear.assert_awaited_once()
        assert exc_info.value.status_code == 409
        assert exc_info.value.code == "CONFLICT"

    async def test_concurrent_update_current_maps_to_conflict(
        self, db_session: AsyncSession, test_user: CurrentUser
    ):
        """A lost clear-then-set race on update surfaces as CONFLICT, not a 500."""
        document = await document_service.create_document(DocumentCreate(), test_user, db_session)
        version = await document_service.create_document_version(
            DocumentVersionCreate(document_id=document.id, content="mine"),
            test_user,
            db_session,
        )

        with patch(
            "markdown_editor.services.document_service.clear_current_versions",
            side_effect=self._racing_clear(test_user),
        ):
            with pytest.raises(ConflictError) as exc_info:
                await document_service.update_document_version(
                    DocumentVersionUpdate(id=version.id, document_id=document.id, is_current=True),
                    test_user,
                    db_session,
                )

        assert exc_info.value.code == "CONFLICT"

    async def test_list_versions_requires_ownership(
        self, db_session: AsyncSession, test_user: CurrentUser, test_user_2: CurrentUser
    ):
        document = await document_service.create_document(DocumentCreate(), test_user, db_session)

        with pytest.raises(NotFoundError):
            await document_service.list_document_versions(
                DocumentVersionListRequest(document_id=document.id), test_user_2, db_session
            )
