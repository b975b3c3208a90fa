"""create records table

Revision ID: 001_records
Revises: 
Create Date: 2026-10-19 10:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001_records'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # One table for every catalog collection; documents live in `data`
    op.create_table('records',
    sa.Column('uid', sa.String(), nullable=False),
    sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    sa.Column('collection', sa.String(), nullable=False),
    sa.Column('data', sa.JSON(), nullable=False),
    sa.PrimaryKeyConstraint('uid')
    )
    op.create_index(op.f('ix_records_collection'), 'records', ['collection'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_records_collection'), table_name='records')
    op.drop_table('records')
