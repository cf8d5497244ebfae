"""add gallery feedback tables

Revision ID: 033_add_gallery_feedback
Revises: 032_core_gallery_schema
Create Date: 2025-06-16 14:30:00.000000

Guest ratings, likes, comments and favorites on photos, plus the rate-limit
and word-filter tables that back them, four aggregate counters on photos and
two feedback settings rows. Both directions are safe to re-run.
"""
import json
import logging

from alembic import op
import sqlalchemy as sa

from gallery.schema.capabilities import StoreCapabilities
from gallery.schema.ensure import (
    IndexSpec,
    delete_setting_rows,
    drop_columns_if_present,
    drop_table_if_exists,
    ensure_columns,
    ensure_setting_rows,
    ensure_table,
)

# revision identifiers, used by Alembic.
revision = '033_add_gallery_feedback'
down_revision = '032_core_gallery_schema'
branch_labels = None
depends_on = None

logger = logging.getLogger(__name__)

FEEDBACK_SETTING_TYPE = 'feedback'
PHOTO_FEEDBACK_COLUMNS = ('feedback_count', 'like_count', 'average_rating', 'favorite_count')

# Dropped in this order so no drop leaves a dangling foreign key.
FEEDBACK_TABLES = (
    'feedback_word_filters',
    'feedback_rate_limits',
    'photo_feedback',
    'event_feedback_settings',
)


def _timestamp(name: str) -> sa.Column:
    return sa.Column(name, sa.DateTime(timezone=True), server_default=sa.func.now())


def _event_fk() -> sa.Column:
    return sa.Column('event_id', sa.Integer(), sa.ForeignKey('events.id', ondelete='CASCADE'))


def _feedback_settings_rows() -> list[dict]:
    return [
        {
            'setting_key': 'feedback_notification_email',
            'setting_value': json.dumps(''),
            'setting_type': FEEDBACK_SETTING_TYPE,
        },
        {
            'setting_key': 'feedback_rate_limits',
            'setting_value': json.dumps({
                'rating': {'max': 100, 'window': 3600},
                'comment': {'max': 20, 'window': 3600},
                'like': {'max': 200, 'window': 3600},
            }),
            'setting_type': FEEDBACK_SETTING_TYPE,
        },
    ]


def upgrade() -> None:
    logger.info('Adding gallery feedback tables')
    caps = StoreCapabilities.for_bind(op.get_bind())

    ensure_table(
        op,
        'event_feedback_settings',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        _event_fk(),
        sa.Column('feedback_enabled', sa.Boolean(), server_default=sa.true()),
        sa.Column('allow_ratings', sa.Boolean(), server_default=sa.true()),
        sa.Column('allow_likes', sa.Boolean(), server_default=sa.true()),
        sa.Column('allow_comments', sa.Boolean(), server_default=sa.false()),
        sa.Column('allow_favorites', sa.Boolean(), server_default=sa.true()),
        sa.Column('require_name_email', sa.Boolean(), server_default=sa.false()),
        sa.Column('moderate_comments', sa.Boolean(), server_default=sa.true()),
        sa.Column('show_feedback_to_guests', sa.Boolean(), server_default=sa.true()),
        _timestamp('created_at'),
        _timestamp('updated_at'),
        sa.UniqueConstraint('event_id', name='uq_event_feedback_settings_event_id'),
        capabilities=caps,
    )

    ensure_table(
        op,
        'photo_feedback',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('photo_id', sa.Integer(), sa.ForeignKey('photos.id', ondelete='CASCADE')),
        _event_fk(),
        sa.Column('feedback_type', sa.String(20), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=True),
        sa.Column('comment_text', sa.Text(), nullable=True),
        sa.Column('guest_name', sa.String(100), nullable=True),
        sa.Column('guest_email', sa.String(255), nullable=True),
        sa.Column('guest_identifier', sa.String(64), nullable=True),
        sa.Column('ip_address', sa.String(45), nullable=True),
        sa.Column('user_agent', sa.Text(), nullable=True),
        sa.Column('is_approved', sa.Boolean(), server_default=sa.true()),
        sa.Column('is_hidden', sa.Boolean(), server_default=sa.false()),
        _timestamp('created_at'),
        _timestamp('updated_at'),
        indexes=[
            IndexSpec('ix_photo_feedback_photo_id', ['photo_id']),
            IndexSpec('ix_photo_feedback_event_id', ['event_id']),
            IndexSpec('ix_photo_feedback_feedback_type', ['feedback_type']),
            IndexSpec('ix_photo_feedback_guest_identifier', ['guest_identifier']),
        ],
        checks=[
            sa.CheckConstraint('rating >= 1 AND rating <= 5', name='ck_photo_feedback_rating'),
        ],
        capabilities=caps,
    )

    ensure_table(
        op,
        'feedback_rate_limits',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('identifier', sa.String(64), nullable=False),
        _event_fk(),
        sa.Column('action_type', sa.String(20), nullable=False),
        sa.Column('action_count', sa.Integer(), server_default=sa.text('1')),
        _timestamp('window_start'),
        indexes=[
            IndexSpec('ix_feedback_rate_limits_lookup', ['identifier', 'event_id', 'action_type']),
            IndexSpec('ix_feedback_rate_limits_window_start', ['window_start']),
        ],
        capabilities=caps,
    )

    ensure_table(
        op,
        'feedback_word_filters',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('word', sa.String(100), nullable=False),
        sa.Column('severity', sa.String(20), server_default='moderate'),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true()),
        _timestamp('created_at'),
        sa.UniqueConstraint('word', name='uq_feedback_word_filters_word'),
        capabilities=caps,
    )

    ensure_columns(
        op,
        'photos',
        [
            sa.Column('feedback_count', sa.Integer(), server_default=sa.text('0')),
            sa.Column('like_count', sa.Integer(), server_default=sa.text('0')),
            sa.Column('average_rating', sa.Numeric(3, 2), server_default=sa.text('0')),
            sa.Column('favorite_count', sa.Integer(), server_default=sa.text('0')),
        ],
    )

    ensure_setting_rows(op, _feedback_settings_rows())
    logger.info('Gallery feedback tables created')


def downgrade() -> None:
    logger.info('Removing gallery feedback tables')
    delete_setting_rows(op, FEEDBACK_SETTING_TYPE)
    drop_columns_if_present(op, 'photos', PHOTO_FEEDBACK_COLUMNS)
    for table in FEEDBACK_TABLES:
        drop_table_if_exists(op, table)
    logger.info('Gallery feedback tables removed')
