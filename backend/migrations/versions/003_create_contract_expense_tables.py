"""Create contract and expense tables

Revision ID: 003
Revises: 002
Create Date: 2026-03-02 12:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '003'
down_revision = '002'
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'contract',
        sa.Column('id', postgresql.UUID(as_uuid=True), server_default=sa.text('gen_random_uuid()'), nullable=False),
        sa.Column('org_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('task_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('performer_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('amount', sa.BigInteger(), nullable=False),
        sa.Column('currency', sa.Text(), server_default='RUB', nullable=False),
        sa.Column('status', sa.Text(), server_default='offer', nullable=False),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['org_id'], ['org.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['performer_id'], ['user.id'], ondelete='RESTRICT'),
        sa.CheckConstraint(
            "status IN ('offer', 'accepted', 'funded', 'completed', 'paid', 'disputed')",
            name='ck_contract_status'
        )
    )
    op.create_index('ix_contract_org_id', 'contract', ['org_id'])
    op.create_index('ix_contract_task_id', 'contract', ['task_id'])

    op.execute("""
        CREATE TRIGGER update_contract_updated_at
        BEFORE UPDATE ON contract
        FOR EACH ROW
        EXECUTE FUNCTION update_updated_at_column();
    """)

    op.create_table(
        'expense',
        sa.Column('id', postgresql.UUID(as_uuid=True), server_default=sa.text('gen_random_uuid()'), nullable=False),
        sa.Column('org_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('project_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('date', sa.Date(), nullable=True),
        sa.Column('amount', sa.Numeric(14, 2), nullable=False),
        sa.Column('currency', sa.Text(), server_default='RUB', nullable=False),
        sa.Column('category', sa.Text(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('vendor', sa.Text(), nullable=True),
        sa.Column('status', sa.Text(), server_default='draft', nullable=False),
        sa.Column('created_by', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['org_id'], ['org.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['project_id'], ['project.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['created_by'], ['user.id'], ondelete='SET NULL'),
        sa.CheckConstraint(
            "status IN ('draft', 'pending', 'approved', 'payable', 'closed')",
            name='ck_expense_status'
        )
    )
    op.create_index('ix_expense_org_id', 'expense', ['org_id'])

    op.execute("""
        CREATE TRIGGER update_expense_updated_at
        BEFORE UPDATE ON expense
        FOR EACH ROW
        EXECUTE FUNCTION update_updated_at_column();
    """)


def downgrade():
    op.execute('DROP TRIGGER IF EXISTS update_expense_updated_at ON expense')
    op.drop_index('ix_expense_org_id', table_name='expense')
    op.drop_table('expense')

    op.execute('DROP TRIGGER IF EXISTS update_contract_updated_at ON contract')
    op.drop_index('ix_contract_task_id', table_name='contract')
    op.drop_index('ix_contract_org_id', table_name='contract')
    op.drop_table('contract')
