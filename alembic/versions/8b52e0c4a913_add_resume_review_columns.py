"""Add resume review columns

Revision ID: 8b52e0c4a913
Revises: 3c1f9a7d2e44
Create Date: 2025-10-11 16:03:51.208337
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '8b52e0c4a913'
down_revision: Union[str, Sequence[str], None] = '3c1f9a7d2e44'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.add_column('applications', sa.Column('resume_status', sa.String(length=20), nullable=True))
    op.add_column('applications', sa.Column('resume_remark', sa.Text(), nullable=True))


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_column('applications', 'resume_remark')
    op.drop_column('applications', 'resume_status')
