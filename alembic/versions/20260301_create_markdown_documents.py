"""Create MarkdownDocuments and MarkdownDocumentVersions tables

Creates the document table (owner, metadata, pin/archive flags) and the
version table (full markdown snapshots). A partial unique index on
document_id WHERE is_current allows at most one current version per
document.

Revision ID: a1b2c3d4e5f6
Revises:
Create Date: 2026-03-01 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'a1b2c3d4e5f6'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the document and version tables."""
    # ========================================================================
    # 1. MarkdownDocuments
    # ========================================================================
    op.create_table(
        'MarkdownDocuments',
        sa.Column('id', sa.String(length=255), nullable=False),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('title', sa.Text(), nullable=True),
        sa.Column('slug', sa.Text(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('folder', sa.Text(), nullable=True),
        sa.Column('tags', sa.Text(), nullable=True),
        sa.Column('is_pinned', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_archived', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_MarkdownDocuments_user_id'), 'MarkdownDocuments', ['user_id'])
    op.create_index(
        'ix_markdown_documents_user_archived',
        'MarkdownDocuments',
        ['user_id', 'is_archived'],
    )

    # ========================================================================
    # 2. MarkdownDocumentVersions
    # ========================================================================
    op.create_table(
        'MarkdownDocumentVersions',
        sa.Column('id', sa.String(length=255), nullable=False),
        sa.Column('document_id', sa.String(length=255), nullable=False),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('version_label', sa.Text(), nullable=True),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('is_autosave', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_current', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['document_id'], ['MarkdownDocuments.id'], ondelete='CASCADE'),
    )
    op.create_index(
        op.f('ix_MarkdownDocumentVersions_document_id'),
        'MarkdownDocumentVersions',
        ['document_id'],
    )
    op.create_index(
        'uq_markdown_document_versions_current',
        'MarkdownDocumentVersions',
        ['document_id'],
        unique=True,
        postgresql_where=sa.text('is_current'),
        sqlite_where=sa.text('is_current'),
    )


def downgrade() -> None:
    """Drop the version and document tables."""
    op.drop_index('uq_markdown_document_versions_current', table_name='MarkdownDocumentVersions')
    op.drop_index(op.f('ix_MarkdownDocumentVersions_document_id'), table_name='MarkdownDocumentVersions')
    op.drop_table('MarkdownDocumentVersions')

    op.drop_index('ix_markdown_documents_user_archived', table_name='MarkdownDocuments')
    op.drop_index(op.f('ix_MarkdownDocuments_user_id'), table_name='MarkdownDocuments')
    op.drop_table('MarkdownDocuments')
