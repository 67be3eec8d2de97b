"""create files

Revision ID: 0001_create_files
Revises: 
Create Date: 2024-01-14 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_create_files'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'files',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('filename', sa.Text, nullable=False),
        sa.Column('last_seen_at', sa.DateTime, nullable=True),
        sa.Column('orphaned_at', sa.DateTime, nullable=True),
        sa.Column('updated_at', sa.DateTime, server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('created_at', sa.DateTime, server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sqlite_autoincrement=True,
    )
    # get_file looks rows up by filename
    op.create_index('ix_files_filename', 'files', ['filename'])


def downgrade() -> None:
    op.drop_index('ix_files_filename', table_name='files')
    op.drop_table('files')
