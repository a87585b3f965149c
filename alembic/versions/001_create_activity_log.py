"""create activity log table

Revision ID: 001_activity_log
Revises:
Create Date: 2026-10-19 09:00:00.000000

Uses database-agnostic SQLAlchemy types so the same migration runs on the
SQLite debug database and the production database.
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision = '001_activity_log'
down_revision = None
branch_labels = None
depends_on = None


def table_exists(table_name):
    """Check if a table exists."""
    return table_name in inspect(op.get_bind()).get_table_names()


def upgrade() -> None:
    """
    Create the activity_log table.

    One row per edit outcome or batch job run. SummaryData holds the JSON
    summary returned by the job.
    """
    if table_exists('activity_log'):
        print("- activity_log already exists, skipping")
        return

    print("✓ Creating activity_log table...")
    op.create_table(
        'activity_log',
        sa.Column('id', sa.Integer(), nullable=False, primary_key=True),
        sa.Column('activity_id', sa.String(36), nullable=False, unique=True),

        # What ran, and where
        sa.Column('ActivityType', sa.String(50), nullable=False),
        sa.Column('SheetName', sa.String(100), nullable=True),
        sa.Column('RowNumber', sa.Integer(), nullable=True),

        # Outcome
        sa.Column('Status', sa.String(30), nullable=False),
        sa.Column('User', sa.String(100), nullable=False),
        sa.Column('RecordsAffected', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('SummaryData', sa.Text(), nullable=True),
        sa.Column('CreatedDateTime', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('idx_activity_type_time', 'activity_log', ['ActivityType', 'CreatedDateTime'])
    op.create_index('idx_activity_user_time', 'activity_log', ['User', 'CreatedDateTime'])
    print("✓ activity_log table created")


def downgrade() -> None:
    """Drop the activity_log table."""
    if table_exists('activity_log'):
        op.drop_index('idx_activity_user_time', table_name='activity_log')
        op.drop_index('idx_activity_type_time', table_name='activity_log')
        op.drop_table('activity_log')
