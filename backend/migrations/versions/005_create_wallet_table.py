"""Create wallet table

Revision ID: 005
Revises: 004
Create Date: 2026-03-05 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '005'
down_revision = '004'
branch_labels = None
depends_on = None


def upgrade():
    # entity_id references a user or an organization, depending on entity_type
    op.create_table(
        'wallet',
        sa.Column('id', postgresql.UUID(as_uuid=True), server_default=sa.text('gen_random_uuid()'), nullable=False),
        sa.Column('entity_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('entity_type', sa.Text(), nullable=False),
        sa.Column('balance', sa.BigInteger(), server_default='0', nullable=False),
        sa.Column('currency', sa.Text(), server_default='RUB', nullable=False),
        sa.Column('status', sa.Text(), server_default='active', nullable=False),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint(
            "entity_type IN ('user', 'organization')",
            name='ck_wallet_entity_type'
        ),
        sa.CheckConstraint(
            "status IN ('active', 'frozen')",
            name='ck_wallet_status'
        )
    )
    op.create_index('ix_wallet_entity', 'wallet', ['entity_id', 'entity_type'])

    op.execute("""
        CREATE TRIGGER update_wallet_updated_at
        BEFORE UPDATE ON wallet
        FOR EACH ROW
        EXECUTE FUNCTION update_updated_at_column();
    """)


def downgrade():
    op.execute('DROP TRIGGER IF EXISTS update_wallet_updated_at ON wallet')
    op.drop_index('ix_wallet_entity', table_name='wallet')
    op.drop_table('wallet')
