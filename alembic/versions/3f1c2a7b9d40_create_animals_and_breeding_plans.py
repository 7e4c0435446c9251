"""Create animals and breeding_plans tables

Revision ID: 3f1c2a7b9d40
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '3f1c2a7b9d40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
    ]


def upgrade() -> None:
    """Create animals and breeding_plans."""

    # --- animals ---
    op.create_table(
        'animals',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('tenant_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('species', sa.String(length=16), nullable=False),
        sa.Column('sex', sa.String(length=6), nullable=True),
        sa.Column('birth_date', sa.Date(), nullable=True),
        sa.Column('female_cycle_len_override_days', sa.Integer(), nullable=True),
        sa.Column(
            'cycle_start_dates',
            postgresql.ARRAY(sa.Date()),
            server_default=sa.text("'{}'::date[]"),
            nullable=False,
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name='pk_animals'),
        sa.UniqueConstraint('tenant_id', 'id', name='ux_animals_tenant_id'),
    )
    op.create_index('ix_animals_tenant_id', 'animals', ['tenant_id'], unique=False)
    op.create_index('ix_animals_species', 'animals', ['species'], unique=False)

    # --- breeding_plans ---
    op.create_table(
        'breeding_plans',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('tenant_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('species', sa.String(length=16), nullable=False),
        sa.Column('dam_id', sa.Uuid(), nullable=True),
        sa.Column('sire_id', sa.Uuid(), nullable=True),
        sa.Column('status', sa.String(length=16), server_default='PLANNING', nullable=False),
        sa.Column('repro_anchor_mode', sa.String(length=16), nullable=True),
        sa.Column('cycle_start_confidence', sa.String(length=8), nullable=True),
        sa.Column('ovulation_confidence', sa.String(length=8), nullable=True),
        sa.Column('cycle_start_observed', sa.Date(), nullable=True),
        sa.Column('ovulation_confirmed', sa.Date(), nullable=True),
        sa.Column('ovulation_confirmed_method', sa.String(length=32), nullable=True),
        sa.Column('ovulation_test_result_id', sa.String(length=64), nullable=True),
        sa.Column('locked_cycle_start', sa.Date(), nullable=True),
        sa.Column('cycle_start_date_actual', sa.Date(), nullable=True),
        sa.Column('breed_date_actual', sa.Date(), nullable=True),
        sa.Column('birth_date_actual', sa.Date(), nullable=True),
        sa.Column('weaned_date_actual', sa.Date(), nullable=True),
        sa.Column('placement_start_date_actual', sa.Date(), nullable=True),
        sa.Column('placement_completed_date_actual', sa.Date(), nullable=True),
        sa.Column('expected_ovulation_offset', sa.Integer(), nullable=True),
        sa.Column('actual_ovulation_offset', sa.Integer(), nullable=True),
        sa.Column('variance_from_expected', sa.Integer(), nullable=True),
        sa.Column('expected_cycle_start', sa.Date(), nullable=True),
        sa.Column('expected_ovulation', sa.Date(), nullable=True),
        sa.Column('expected_due_date', sa.Date(), nullable=True),
        sa.Column('expected_weaned', sa.Date(), nullable=True),
        sa.Column('expected_placement_start', sa.Date(), nullable=True),
        sa.Column('expected_placement_completed', sa.Date(), nullable=True),
        sa.Column('date_source_notes', sa.Text(), nullable=True),
        sa.Column('committed_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name='pk_breeding_plans'),
        sa.ForeignKeyConstraint(
            ['dam_id'], ['animals.id'], name='fk_breeding_plans_dam_id_animals'
        ),
        sa.ForeignKeyConstraint(
            ['sire_id'], ['animals.id'], name='fk_breeding_plans_sire_id_animals'
        ),
    )
    op.create_index('ix_breeding_plans_tenant_id', 'breeding_plans', ['tenant_id'], unique=False)
    op.create_index('ix_breeding_plans_dam_id', 'breeding_plans', ['dam_id'], unique=False)
    op.create_index(
        'ix_breeding_plans_tenant_status',
        'breeding_plans',
        ['tenant_id', 'status'],
        unique=False,
        postgresql_where="deleted_at IS NULL",
    )


def downgrade() -> None:
    """Drop breeding_plans and animals."""
    op.drop_index('ix_breeding_plans_tenant_status', table_name='breeding_plans')
    op.drop_index('ix_breeding_plans_dam_id', table_name='breeding_plans')
    op.drop_index('ix_breeding_plans_tenant_id', table_name='breeding_plans')
    op.drop_table('breeding_plans')
    op.drop_index('ix_animals_species', table_name='animals')
    op.drop_index('ix_animals_tenant_id', table_name='animals')
    op.drop_table('animals')
