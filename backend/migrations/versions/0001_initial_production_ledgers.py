"""initial production ledgers

Revision ID: 0001_initial
Revises:
Create Date: 2024-01-08 00:00:00.000000

Creates the complete schema:
- users: accounts with ADMIN / DATA_ENTRY role
- bulk_inputs, dry_process_entries, washing_entries, sub_contract_entries,
  gate_pass_entries: approvable production ledgers
- special_notes: dated admin announcements (soft delete)

Every ledger carries the same lifecycle columns and CHECK constraints:
status in PENDING/APPROVED/REJECTED, quantity > 0, and approved_by /
approval_timestamp set iff the entry has been resolved.
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0001_initial'
down_revision = None
branch_labels = None
depends_on = None


STATUSES = "'PENDING', 'APPROVED', 'REJECTED'"


def _ledger_columns():
    return [
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('entry_date', sa.Date(), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('entry_timestamp', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('approval_timestamp', sa.DateTime(timezone=True), nullable=True),
        sa.Column('entered_by_user_id', sa.Integer(), nullable=False),
        sa.Column('approved_by_user_id', sa.Integer(), nullable=True),
    ]


def _ledger_constraints(table):
    return [
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['entered_by_user_id'], ['users.id']),
        sa.ForeignKeyConstraint(['approved_by_user_id'], ['users.id']),
        sa.CheckConstraint('quantity > 0', name=f'ck_{table}_quantity_positive'),
        sa.CheckConstraint(f'status IN ({STATUSES})', name=f'ck_{table}_status'),
        sa.CheckConstraint(
            "(status = 'PENDING' AND approved_by_user_id IS NULL AND approval_timestamp IS NULL)"
            " OR (status <> 'PENDING' AND approved_by_user_id IS NOT NULL AND approval_timestamp IS NOT NULL)",
            name=f'ck_{table}_resolution',
        ),
    ]


def _create_ledger(table, columns, checks):
    op.create_table(
        table,
        *_ledger_columns(),
        *columns,
        *_ledger_constraints(table),
        *checks,
        sqlite_autoincrement=True
    )
    op.create_index(f'ix_{table}_entered_by_user_id', table, ['entered_by_user_id'])
    op.create_index(f'ix_{table}_status_date', table, ['status', 'entry_date'])


def upgrade():
    # ============================================================================
    # users
    # ============================================================================
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(length=64), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=16), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint("role IN ('ADMIN', 'DATA_ENTRY')", name='ck_users_role'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_users_username', 'users', ['username'], unique=True)

    # ============================================================================
    # production ledgers
    # ============================================================================
    _create_ledger(
        'bulk_inputs',
        [
            sa.Column('style_number', sa.String(length=64), nullable=False),
            sa.Column('supplier', sa.String(length=16), nullable=False),
        ],
        [sa.CheckConstraint("supplier IN ('CIB', 'G_FLOCK')", name='ck_bulk_inputs_supplier')],
    )
    _create_ledger(
        'dry_process_entries',
        [
            sa.Column('style_number', sa.String(length=64), nullable=False),
            sa.Column('process_name', sa.String(length=32), nullable=False),
        ],
        [sa.CheckConstraint(
            "process_name IN ('HAND_SHINE', 'WHISKER', 'TACKING', 'GRINDING', "
            "'DESTROY', 'PP_SPRAY', 'PP_SPONGE', 'LASER')",
            name='ck_dry_process_entries_process',
        )],
    )
    _create_ledger(
        'washing_entries',
        [
            sa.Column('style_number', sa.String(length=64), nullable=False),
            sa.Column('wash_category', sa.String(length=16), nullable=False),
        ],
        [sa.CheckConstraint(
            "wash_category IN ('BEFORE_WASH', 'AFTER_WASH', 'FINISH')",
            name='ck_washing_entries_category',
        )],
    )
    _create_ledger(
        'sub_contract_entries',
        [
            sa.Column('sub_contractor_name', sa.String(length=120), nullable=False),
            sa.Column('style_number', sa.String(length=64), nullable=False),
            sa.Column('process_name', sa.String(length=64), nullable=False),
            sa.Column('unit_price_used', sa.Numeric(10, 2), nullable=False),
            sa.Column('calculated_salary', sa.Numeric(12, 2), nullable=False),
        ],
        [
            sa.CheckConstraint('unit_price_used >= 0', name='ck_sub_contract_entries_unit_price'),
            sa.CheckConstraint('calculated_salary >= 0', name='ck_sub_contract_entries_salary'),
        ],
    )
    _create_ledger(
        'gate_pass_entries',
        [
            sa.Column('style_number', sa.String(length=64), nullable=False),
            sa.Column('destination', sa.String(length=120), nullable=False),
        ],
        [],
    )

    # ============================================================================
    # special_notes
    # ============================================================================
    op.create_table(
        'special_notes',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('note_date', sa.Date(), nullable=False),
        sa.Column('note_content', sa.Text(), nullable=False),
        sa.Column('entered_by_user_id', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['entered_by_user_id'], ['users.id']),
        sqlite_autoincrement=True
    )
    op.create_index('ix_special_notes_entered_by_user_id', 'special_notes', ['entered_by_user_id'])
    op.create_index('ix_special_notes_active_date', 'special_notes', ['is_active', 'note_date'])


def downgrade():
    op.drop_index('ix_special_notes_active_date', table_name='special_notes')
    op.drop_index('ix_special_notes_entered_by_user_id', table_name='special_notes')
    op.drop_table('special_notes')

    for table in (
        'gate_pass_entries',
        'sub_contract_entries',
        'washing_entries',
        'dry_process_entries',
        'bulk_inputs',
    ):
        op.drop_index(f'ix_{table}_status_date', table_name=table)
        op.drop_index(f'ix_{table}_entered_by_user_id', table_name=table)
        op.drop_table(table)

    op.drop_index('ix_users_username', table_name='users')
    op.drop_table('users')
