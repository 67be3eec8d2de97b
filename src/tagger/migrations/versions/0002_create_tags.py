"""create tags

Revision ID: 0002_create_tags
Revises: 0001_create_files
Create Date: 2024-01-14 00:10:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0002_create_tags'
down_revision = '0001_create_files'
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'tags',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('name', sa.Text, nullable=False),
        sqlite_autoincrement=True,
    )
    op.create_index('ix_tags_name', 'tags', ['name'])


def downgrade() -> None:
    op.drop_index('ix_tags_name', table_name='tags')
    op.drop_table('tags')
