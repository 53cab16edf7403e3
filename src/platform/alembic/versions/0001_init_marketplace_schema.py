"""init_marketplace_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19

Schema:
- users: Accounts (user / advisor / admin)
- advisors: Advisor profile keyed by user id, plus careers, certificates, blocked times
- advisor_approval_requests: Certificate approval workflow
- reservations: Consultation bookings with embedded payment state
- notifications, community_posts, community_comments, favorites, reviews

Note: uq_reservations_active_slot is a partial unique index so canceled
reservations release their slot.
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps(*, with_updated_at: bool = True) -> list[sa.Column]:
    columns = [
        sa.Column(
            'created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        )
    ]
    if with_updated_at:
        columns.append(
            sa.Column(
                'updated_at',
                sa.DateTime(timezone=True),
                server_default=sa.func.now(),
                nullable=False,
            )
        )
    return columns


def upgrade() -> None:
    """Create all tables with final schema."""

    # ========== STEP 1: Accounts ==========

    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('login_id', sa.String(length=50), nullable=False),
        sa.Column('name', sa.String(length=50), nullable=False),
        sa.Column('nickname', sa.String(length=50), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('contact', sa.String(length=20), nullable=False),
        sa.Column('hashed_password', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('profile_image', sa.String(length=500), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('is_verified', sa.Boolean(), nullable=False),
        sa.Column('terms_agreed', sa.Boolean(), nullable=False),
        sa.Column('last_login_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_users_login_id'), 'users', ['login_id'], unique=True)
    op.create_index(op.f('ix_users_nickname'), 'users', ['nickname'], unique=True)

    # ========== STEP 2: Advisors ==========

    op.create_table(
        'advisors',
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('profile_image_url', sa.String(length=500), nullable=True),
        sa.Column('short_intro', sa.String(length=100), nullable=True),
        sa.Column('long_intro', sa.Text(), nullable=True),
        sa.Column('preferred_trade_style', sa.String(length=20), nullable=True),
        sa.Column('public_contact', sa.String(length=100), nullable=True),
        sa.Column('consultation_fee', sa.Integer(), nullable=False),
        sa.Column('certificate_name', sa.String(length=100), nullable=True),
        sa.Column('certificate_file_sn', sa.String(length=8), nullable=True),
        sa.Column('birth', sa.String(length=8), nullable=True),
        sa.Column('certificate_file_number', sa.String(length=6), nullable=True),
        sa.Column('is_approved', sa.Boolean(), nullable=False),
        sa.Column('approved_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('is_profile_completed', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('user_id'),
    )
    op.create_index(op.f('ix_advisors_is_approved'), 'advisors', ['is_approved'])

    op.create_table(
        'advisor_careers',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('advisor_id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('started_at', sa.Date(), nullable=True),
        sa.Column('ended_at', sa.Date(), nullable=True),
        *_timestamps(with_updated_at=False),
        sa.ForeignKeyConstraint(['advisor_id'], ['advisors.user_id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_advisor_careers_advisor_id'), 'advisor_careers', ['advisor_id'])

    op.create_table(
        'advisor_certificates',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('advisor_id', sa.Integer(), nullable=False),
        sa.Column('certificate_name', sa.String(length=100), nullable=False),
        sa.Column('certificate_file_sn', sa.String(length=8), nullable=False),
        sa.Column('birth', sa.String(length=8), nullable=False),
        sa.Column('certificate_file_number', sa.String(length=6), nullable=False),
        *_timestamps(with_updated_at=False),
        sa.ForeignKeyConstraint(['advisor_id'], ['advisors.user_id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        op.f('ix_advisor_certificates_advisor_id'), 'advisor_certificates', ['advisor_id']
    )

    op.create_table(
        'advisor_blocked_times',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('advisor_id', sa.Integer(), nullable=False),
        sa.Column('blocked_date', sa.Date(), nullable=False),
        sa.Column('blocked_time', sa.Time(), nullable=False),
        sa.ForeignKeyConstraint(['advisor_id'], ['advisors.user_id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint(
            'advisor_id', 'blocked_date', 'blocked_time', name='uq_advisor_blocked_slot'
        ),
    )
    op.create_index(
        op.f('ix_advisor_blocked_times_advisor_id'), 'advisor_blocked_times', ['advisor_id']
    )

    op.create_table(
        'advisor_approval_requests',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('advisor_id', sa.Integer(), nullable=False),
        sa.Column('certificate_name', sa.String(length=100), nullable=False),
        sa.Column('certificate_file_sn', sa.String(length=8), nullable=False),
        sa.Column('birth', sa.String(length=8), nullable=False),
        sa.Column('certificate_file_number', sa.String(length=6), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('previous_request_id', sa.Integer(), nullable=True),
        sa.Column('rejection_reason', sa.String(length=40), nullable=True),
        sa.Column('custom_reason', sa.String(length=500), nullable=True),
        sa.Column(
            'requested_at',
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column('processed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('processed_by', sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(['advisor_id'], ['advisors.user_id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['previous_request_id'], ['advisor_approval_requests.id']),
        sa.ForeignKeyConstraint(['processed_by'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        op.f('ix_advisor_approval_requests_advisor_id'),
        'advisor_approval_requests',
        ['advisor_id'],
    )
    op.create_index(
        op.f('ix_advisor_approval_requests_status'), 'advisor_approval_requests', ['status']
    )

    # ========== STEP 3: Reservations ==========

    op.create_table(
        'reservations',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('client_id', sa.Integer(), nullable=False),
        sa.Column('advisor_id', sa.Integer(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('request_message', sa.Text(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('payment_status', sa.String(length=20), nullable=False),
        sa.Column('amount', sa.Integer(), nullable=True),
        sa.Column('order_id', sa.String(length=100), nullable=True),
        sa.Column('payment_key', sa.String(length=200), nullable=True),
        sa.Column('payment_method', sa.String(length=50), nullable=True),
        sa.Column('card_company', sa.String(length=50), nullable=True),
        sa.Column('receipt_url', sa.String(length=500), nullable=True),
        sa.Column('paid_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('cancel_reason', sa.String(length=30), nullable=True),
        sa.Column('cancel_memo', sa.String(length=500), nullable=True),
        sa.Column('canceled_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('canceled_by', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['client_id'], ['users.id']),
        sa.ForeignKeyConstraint(['advisor_id'], ['advisors.user_id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('order_id'),
    )
    op.create_index(op.f('ix_reservations_client_id'), 'reservations', ['client_id'])
    op.create_index(op.f('ix_reservations_advisor_id'), 'reservations', ['advisor_id'])
    op.create_index(
        'uq_reservations_active_slot',
        'reservations',
        ['advisor_id', 'date', 'start_time'],
        unique=True,
        postgresql_where=sa.text("status != 'CANCELED'"),
        sqlite_where=sa.text("status != 'CANCELED'"),
    )

    # ========== STEP 4: Notifications ==========

    op.create_table(
        'notifications',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('type', sa.String(length=40), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('message', sa.String(length=1000), nullable=False),
        sa.Column('related_id', sa.Integer(), nullable=True),
        sa.Column('is_read', sa.Boolean(), nullable=False),
        sa.Column('read_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(with_updated_at=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_notifications_user_created', 'notifications', ['user_id', 'created_at'])

    # ========== STEP 5: Community, favorites, reviews ==========

    op.create_table(
        'community_posts',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('author_id', sa.Integer(), nullable=False),
        sa.Column('category', sa.String(length=30), nullable=False),
        sa.Column('title', sa.String(length=100), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('view_count', sa.Integer(), nullable=False),
        sa.Column('is_deleted', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['author_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_community_posts_author_id'), 'community_posts', ['author_id'])
    op.create_index(op.f('ix_community_posts_category'), 'community_posts', ['category'])

    op.create_table(
        'community_comments',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('post_id', sa.Integer(), nullable=False),
        sa.Column('author_id', sa.Integer(), nullable=False),
        sa.Column('content', sa.String(length=1000), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['post_id'], ['community_posts.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['author_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_community_comments_post_id'), 'community_comments', ['post_id'])

    op.create_table(
        'favorites',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('advisor_id', sa.Integer(), nullable=False),
        *_timestamps(with_updated_at=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['advisor_id'], ['advisors.user_id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'advisor_id', name='uq_favorite_user_advisor'),
    )
    op.create_index(op.f('ix_favorites_user_id'), 'favorites', ['user_id'])

    op.create_table(
        'reviews',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('reservation_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('advisor_id', sa.Integer(), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('content', sa.String(length=500), nullable=False),
        sa.Column('is_deleted', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['reservation_id'], ['reservations.id']),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.ForeignKeyConstraint(['advisor_id'], ['advisors.user_id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('reservation_id'),
    )
    op.create_index(op.f('ix_reviews_user_id'), 'reviews', ['user_id'])
    op.create_index(op.f('ix_reviews_advisor_id'), 'reviews', ['advisor_id'])


def downgrade() -> None:
    """Drop all tables in reverse order of creation (indexes dropped automatically)."""
    op.drop_table('reviews')
    op.drop_table('favorites')
    op.drop_table('community_comments')
    op.drop_table('community_posts')
    op.drop_table('notifications')
    op.drop_table('reservations')
    op.drop_table('advisor_approval_requests')
    op.drop_table('advisor_blocked_times')
    op.drop_table('advisor_certificates')
    op.drop_table('advisor_careers')
    op.drop_table('advisors')
    op.drop_table('users')
