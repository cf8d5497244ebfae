"""core gallery schema: events, photos, app_settings

Revision ID: 032_core_gallery_schema
Revises:
Create Date: 2025-06-02 09:00:00.000000

Baseline for databases created before the schema moved to Alembic. Every
table is existence-guarded, so stamping an existing database is not needed:
upgrading it simply skips what is already there.
"""
from alembic import op
import sqlalchemy as sa

from gallery.schema.ensure import IndexSpec, drop_table_if_exists, ensure_table

# revision identifiers, used by Alembic.
revision = '032_core_gallery_schema'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    ensure_table(
        op,
        'events',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('slug', sa.String(255), nullable=False),
        sa.Column('event_name', sa.String(255), nullable=False),
        sa.Column('event_type', sa.String(50), nullable=True),
        sa.Column('event_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint('slug', name='uq_events_slug'),
    )

    ensure_table(
        op,
        'photos',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            'event_id',
            sa.Integer(),
            sa.ForeignKey('events.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('filename', sa.String(255), nullable=False),
        sa.Column('path', sa.String(512), nullable=False),
        sa.Column('size_bytes', sa.BigInteger(), nullable=True),
        sa.Column('uploaded_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        indexes=[IndexSpec('ix_photos_event_id', ['event_id'])],
    )

    ensure_table(
        op,
        'app_settings',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('setting_key', sa.String(100), nullable=False),
        sa.Column('setting_value', sa.Text(), nullable=True),
        sa.Column('setting_type', sa.String(50), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint('setting_key', name='uq_app_settings_setting_key'),
        indexes=[IndexSpec('ix_app_settings_setting_type', ['setting_type'])],
    )


def downgrade() -> None:
    drop_table_if_exists(op, 'app_settings')
    drop_table_if_exists(op, 'photos')
    drop_table_if_exists(op, 'events')
