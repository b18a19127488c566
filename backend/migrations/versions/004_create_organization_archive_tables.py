"""Create organization_archive and archived_document tables

Revision ID: 004
Revises: 003
Create Date: 2026-03-02 13:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '004'
down_revision = '003'
branch_labels = None
depends_on = None


def upgrade():
    # No FK to org: the archive outlives the organization's live data
    op.create_table(
        'organization_archive',
        sa.Column('id', postgresql.UUID(as_uuid=True), server_default=sa.text('gen_random_uuid()'), nullable=False),
        sa.Column('organization_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('organization_name', sa.Text(), nullable=False),
        sa.Column('owner_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('retention_days', sa.Integer(), nullable=False),
        sa.Column('closed_at', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column('expires_at', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column('snapshot', postgresql.JSONB(astext_type=sa.Text()), server_default=sa.text("'{}'::jsonb"), nullable=False),
        sa.Column('status', sa.Text(), server_default='active', nullable=False),
        sa.Column('purged_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint("status IN ('active', 'purged')", name='ck_organization_archive_status'),
        sa.CheckConstraint("retention_days IN (30, 60, 90)", name='ck_organization_archive_retention_days')
    )
    op.create_index('ix_organization_archive_owner_id', 'organization_archive', ['owner_id'])
    # Purge job scans active archives by expiry
    op.create_index(
        'ix_organization_archive_status_expires_at',
        'organization_archive',
        ['status', 'expires_at']
    )

    op.execute("""
        CREATE TRIGGER update_organization_archive_updated_at
        BEFORE UPDATE ON organization_archive
        FOR EACH ROW
        EXECUTE FUNCTION update_updated_at_column();
    """)

    op.create_table(
        'archived_document',
        sa.Column('id', postgresql.UUID(as_uuid=True), server_default=sa.text('gen_random_uuid()'), nullable=False),
        sa.Column('archive_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('original_document_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('original_project_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('project_name', sa.Text(), nullable=False),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('type', sa.Text(), nullable=True),
        sa.Column('file_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('file_url', sa.Text(), server_default='', nullable=False),
        sa.Column('file_size_bytes', sa.BigInteger(), server_default='0', nullable=False),
        sa.Column('metadata_json', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('archived_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.Column('expires_at', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['archive_id'], ['organization_archive.id'], ondelete='CASCADE')
    )
    op.create_index('ix_archived_document_archive_id', 'archived_document', ['archive_id'])


def downgrade():
    op.drop_index('ix_archived_document_archive_id', table_name='archived_document')
    op.drop_table('archived_document')

    op.execute('DROP TRIGGER IF EXISTS update_organization_archive_updated_at ON organization_archive')
    op.drop_index('ix_organization_archive_status_expires_at', table_name='organization_archive')
    op.drop_index('ix_organization_archive_owner_id', table_name='organization_archive')
    op.drop_table('organization_archive')
