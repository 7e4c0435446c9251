"""add tolerance baseline dates to breeding_plans

Revision ID: 6d2e8b1f4a57
Revises: 3f1c2a7b9d40
Create Date: 2026-10-18 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '6d2e8b1f4a57'
down_revision: Union[str, Sequence[str], None] = '3f1c2a7b9d40'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.add_column('breeding_plans', sa.Column('committed_cycle_start', sa.Date(), nullable=True))
    op.add_column('breeding_plans', sa.Column('committed_ovulation', sa.Date(), nullable=True))
    op.add_column('breeding_plans', sa.Column('committed_breed_date', sa.Date(), nullable=True))
    op.add_column('breeding_plans', sa.Column('committed_weaned_date', sa.Date(), nullable=True))

    # Existing plans start measuring from whatever they hold today
    op.execute(
        """
        UPDATE breeding_plans
        SET committed_cycle_start = cycle_start_observed,
            committed_ovulation = ovulation_confirmed
        WHERE status <> 'PLANNING'
        """
    )
    op.execute(
        """
        UPDATE breeding_plans
        SET committed_breed_date = breed_date_actual
        WHERE status IN ('BRED', 'BIRTHED', 'WEANED', 'PLACEMENT', 'COMPLETE')
        """
    )
    op.execute(
        """
        UPDATE breeding_plans
        SET committed_weaned_date = weaned_date_actual
        WHERE status IN ('WEANED', 'PLACEMENT', 'COMPLETE')
        """
    )


def downgrade() -> None:
    op.drop_column('breeding_plans', 'committed_weaned_date')
    op.drop_column('breeding_plans', 'committed_breed_date')
    op.drop_column('breeding_plans', 'committed_ovulation')
    op.drop_column('breeding_plans', 'committed_cycle_start')
