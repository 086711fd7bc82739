"""add tags column to tasks

Revision ID: 20261019_task_tags
Revises: 20261019_design_poker_schema
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '20261019_task_tags'
down_revision = '20261019_design_poker_schema'
branch_labels = None
depends_on = None

def upgrade():
    with op.batch_alter_table('tasks') as batch_op:
        batch_op.add_column(sa.Column('tags', sa.JSON(), nullable=True))


def downgrade():
    with op.batch_alter_table('tasks') as batch_op:
        batch_op.drop_column('tags')
