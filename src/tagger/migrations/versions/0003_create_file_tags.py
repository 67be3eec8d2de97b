"""create file_tags

Revision ID: 0003_create_file_tags
Revises: 0002_create_tags
Create Date: 2024-01-14 00:20:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0003_create_file_tags'
down_revision = '0002_create_tags'
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'file_tags',
        sa.Column('file_id', sa.Integer, sa.ForeignKey('files.id'), nullable=False),
        sa.Column('tag_id', sa.Integer, sa.ForeignKey('tags.id'), nullable=False),
        sa.PrimaryKeyConstraint('file_id', 'tag_id'),
    )


def downgrade() -> None:
    op.drop_table('file_tags')
