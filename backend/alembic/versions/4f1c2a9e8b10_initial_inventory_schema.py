"""Initial inventory schema

Revision ID: 4f1c2a9e8b10
Revises:
Create Date: 2026-10-19 09:12:44.318202

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# Revision identifiers used by Alembic
revision: str = '4f1c2a9e8b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

NAMED_TABLES = (
    ('projects', 'uq_projects_active_name'),
    ('categories', 'uq_categories_active_name'),
    ('units', 'uq_units_active_name'),
    ('materials', 'uq_materials_active_name'),
)


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('username', sa.String(length=100), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role', sa.Enum('SUPER_USER', 'EDITOR', 'VIEWER', name='user_role'), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_username', 'users', ['username'], unique=True)

    op.create_table(
        'projects',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_table(
        'categories',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_table(
        'units',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('abbreviation', sa.String(length=20), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'materials',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('category_id', sa.Uuid(), nullable=False),
        sa.Column('min_stock_level', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['category_id'], ['categories.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_materials_category_id', 'materials', ['category_id'])

    op.create_table(
        'material_units',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('material_id', sa.Uuid(), nullable=False),
        sa.Column('unit_id', sa.Uuid(), nullable=False),
        sa.Column('is_primary', sa.Boolean(), nullable=False),
        sa.Column('conversion_factor', sa.Numeric(precision=12, scale=4), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['material_id'], ['materials.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['unit_id'], ['units.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_material_units_material_id', 'material_units', ['material_id'])
    op.create_index('ix_material_units_unit_id', 'material_units', ['unit_id'])

    # Ledger tables share the reference columns
    for table, date_column in (('inflows', 'delivery_date'), ('outflows', 'release_date')):
        if table == 'inflows':
            extra = [
                sa.Column('delivery_date', sa.DateTime(), nullable=False),
                sa.Column('received_by', sa.String(length=255), nullable=False),
                sa.Column('supplier_name', sa.String(length=255), nullable=False),
                sa.Column('purpose', sa.Text(), nullable=False),
                sa.Column('support_document', sa.String(length=500), nullable=True),
                sa.Column('batch_number', sa.String(length=100), nullable=True),
                sa.Column('expiry_date', sa.DateTime(), nullable=True),
            ]
        else:
            extra = [
                sa.Column('release_date', sa.DateTime(), nullable=False),
                sa.Column('authorized_by', sa.String(length=255), nullable=False),
                sa.Column('received_by', sa.String(length=255), nullable=False),
                sa.Column('purpose', sa.Text(), nullable=False),
                sa.Column('support_document', sa.String(length=500), nullable=True),
                sa.Column('return_date', sa.DateTime(), nullable=True),
                sa.Column('is_returned', sa.Boolean(), nullable=False),
            ]
        op.create_table(
            table,
            sa.Column('id', sa.Uuid(), nullable=False),
            sa.Column('material_id', sa.Uuid(), nullable=False),
            sa.Column('unit_id', sa.Uuid(), nullable=False),
            sa.Column('project_id', sa.Uuid(), nullable=False),
            sa.Column('quantity', sa.Numeric(precision=12, scale=2), nullable=False),
            sa.Column('unit_price', sa.Numeric(precision=12, scale=2), nullable=True),
            sa.Column('total_value', sa.Numeric(precision=12, scale=2), nullable=True),
            *extra,
            sa.Column('created_by', sa.Uuid(), nullable=False),
            *_timestamps(),
            sa.ForeignKeyConstraint(['material_id'], ['materials.id']),
            sa.ForeignKeyConstraint(['unit_id'], ['units.id']),
            sa.ForeignKeyConstraint(['project_id'], ['projects.id']),
            sa.ForeignKeyConstraint(['created_by'], ['users.id']),
            sa.PrimaryKeyConstraint('id'),
        )
        for column in ('material_id', 'unit_id', 'project_id', date_column):
            op.create_index(f'ix_{table}_{column}', table, [column])

    op.create_table(
        'audit_logs',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('table_name', sa.String(length=100), nullable=False),
        sa.Column('record_id', sa.Uuid(), nullable=False),
        sa.Column('action', sa.String(length=20), nullable=False),
        sa.Column('old_values', sa.JSON(), nullable=True),
        sa.Column('new_values', sa.JSON(), nullable=True),
        sa.Column('changed_by', sa.Uuid(), nullable=False),
        sa.Column('changed_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['changed_by'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    for column in ('table_name', 'record_id', 'action', 'changed_at'):
        op.create_index(f'ix_audit_logs_{column}', 'audit_logs', [column])

    # Case-insensitive unique names among active rows
    for table, index_name in NAMED_TABLES:
        op.create_index(
            index_name,
            table,
            [sa.text('lower(name)')],
            unique=True,
            sqlite_where=sa.text('is_active = 1'),
            postgresql_where=sa.text('is_active'),
        )


def downgrade() -> None:
    """Downgrade schema."""
    for table, index_name in NAMED_TABLES:
        op.drop_index(index_name, table_name=table)
    op.drop_table('audit_logs')
    op.drop_table('outflows')
    op.drop_table('inflows')
    op.drop_table('material_units')
    op.drop_table('materials')
    op.drop_table('units')
    op.drop_table('categories')
    op.drop_table('projects')
    op.drop_index('ix_users_username', table_name='users')
    op.drop_table('users')
    sa.Enum(name='user_role').drop(op.get_bind(), checkfirst=True)
