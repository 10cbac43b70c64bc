"""Create animals and breeding_records tables

Revision ID: 4f2a9c1e7b30
Revises:
Create Date: 2026-10-17 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4f2a9c1e7b30'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create animals and breeding_records tables."""

    # --- animals ---
    op.create_table(
        'animals',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('farm_id', sa.Uuid(), nullable=False),
        sa.Column('animal_number', sa.String(length=128), nullable=False),
        sa.Column('species', sa.String(length=32), nullable=False),
        sa.Column('stage', sa.String(length=16), nullable=False),
        sa.Column('gender', sa.String(length=16), nullable=True),
        sa.Column('weight', sa.Numeric(10, 2), nullable=True),
        sa.Column('color', sa.String(length=64), nullable=True),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('health_notes', sa.Text(), nullable=True),
        sa.Column('birth_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('mother_id', sa.Uuid(), nullable=True),
        sa.Column('father_id', sa.Uuid(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        sa.ForeignKeyConstraint(['mother_id'], ['animals.id']),
        sa.ForeignKeyConstraint(['father_id'], ['animals.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('farm_id', 'animal_number', name='ux_animals_farm_number'),
    )
    op.create_index('ix_animals_farm_id', 'animals', ['farm_id'], unique=False)

    # --- breeding_records ---
    op.create_table(
        'breeding_records',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('farm_id', sa.Uuid(), nullable=False),
        sa.Column('farmer_id', sa.Uuid(), nullable=False),
        sa.Column('breeding_id', sa.String(length=32), nullable=False),
        sa.Column('male_id', sa.Uuid(), nullable=False),
        sa.Column('breeding_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('female_breeding_info', sa.JSON(), nullable=False),
        sa.Column('comments', sa.JSON(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=False, server_default=''),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_breeding_records_farm_id', 'breeding_records', ['farm_id'], unique=False)
    op.create_index(
        'ix_breeding_records_farm_date',
        'breeding_records',
        ['farm_id', 'breeding_date'],
        unique=False,
    )
    op.create_index(
        'ix_breeding_records_farm_male',
        'breeding_records',
        ['farm_id', 'male_id'],
        unique=False,
    )


def downgrade() -> None:
    """Drop breeding_records and animals tables."""
    op.drop_index('ix_breeding_records_farm_male', table_name='breeding_records')
    op.drop_index('ix_breeding_records_farm_date', table_name='breeding_records')
    op.drop_index('ix_breeding_records_farm_id', table_name='breeding_records')
    op.drop_table('breeding_records')
    op.drop_index('ix_animals_farm_id', table_name='animals')
    op.drop_table('animals')
