"""Initial database schema

Revision ID: 0001
Revises:
Create Date: 2025-09-15 09:00:00.000000

"""
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Upgrade database schema."""
    # Create users table
    op.create_table('users',
        sa.Column('user_id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('full_name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=20), nullable=True),
        sa.Column('role', sa.String(length=10), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint("role IN ('USER', 'ADMIN')", name='ck_user_role_valid'),
        sa.CheckConstraint('length(email) > 0', name='ck_user_email_not_empty'),
        sa.PrimaryKeyConstraint('user_id')
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    # Create cities table
    op.create_table('cities',
        sa.Column('city_id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('country', sa.String(length=100), nullable=False),
        sa.PrimaryKeyConstraint('city_id'),
        sa.UniqueConstraint('name', 'country', name='uq_city_name_country')
    )
    op.create_index(op.f('ix_cities_name'), 'cities', ['name'], unique=False)

    # Create hotels table
    op.create_table('hotels',
        sa.Column('hotel_id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('city_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=150), nullable=False),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('rating', sa.Numeric(precision=2, scale=1), nullable=True),
        sa.CheckConstraint('rating IS NULL OR (rating >= 0 AND rating <= 5)', name='ck_hotel_rating_range'),
        sa.ForeignKeyConstraint(['city_id'], ['cities.city_id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('hotel_id')
    )
    op.create_index(op.f('ix_hotels_city_id'), 'hotels', ['city_id'], unique=False)
    op.create_index(op.f('ix_hotels_name'), 'hotels', ['name'], unique=False)

    # Create room_types table
    op.create_table('room_types',
        sa.Column('room_type_id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('hotel_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('base_price', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('max_guests', sa.Integer(), nullable=False),
        sa.CheckConstraint('base_price >= 0', name='ck_room_type_base_price_non_negative'),
        sa.CheckConstraint('max_guests > 0', name='ck_room_type_max_guests_positive'),
        sa.ForeignKeyConstraint(['hotel_id'], ['hotels.hotel_id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('room_type_id')
    )
    op.create_index(op.f('ix_room_types_hotel_id'), 'room_types', ['hotel_id'], unique=False)

    # Create room_inventory table
    op.create_table('room_inventory',
        sa.Column('room_type_id', sa.Integer(), nullable=False),
        sa.Column('stay_date', sa.Date(), nullable=False),
        sa.Column('qty', sa.Integer(), nullable=False),
        sa.CheckConstraint('qty >= 0', name='ck_room_inventory_qty_non_negative'),
        sa.ForeignKeyConstraint(['room_type_id'], ['room_types.room_type_id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('room_type_id', 'stay_date')
    )
    op.create_index(op.f('ix_room_inventory_stay_date'), 'room_inventory', ['stay_date'], unique=False)

    # Create bookings table
    op.create_table('bookings',
        sa.Column('booking_id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('room_type_id', sa.Integer(), nullable=False),
        sa.Column('check_in', sa.Date(), nullable=False),
        sa.Column('check_out', sa.Date(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('check_in < check_out', name='ck_booking_dates_ordered'),
        sa.CheckConstraint("status IN ('CONFIRMED', 'CANCELLED')", name='ck_booking_status_valid'),
        sa.ForeignKeyConstraint(['user_id'], ['users.user_id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['room_type_id'], ['room_types.room_type_id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('booking_id')
    )
    op.create_index(op.f('ix_bookings_user_id'), 'bookings', ['user_id'], unique=False)
    op.create_index(op.f('ix_bookings_room_type_id'), 'bookings', ['room_type_id'], unique=False)
    op.create_index(op.f('ix_bookings_status'), 'bookings', ['status'], unique=False)

    # Create payments table
    op.create_table('payments',
        sa.Column('payment_id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('booking_id', sa.Integer(), nullable=False),
        sa.Column('amount', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('method', sa.String(length=20), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('transaction_ref', sa.String(length=64), nullable=True),
        sa.Column('paid_at', sa.DateTime(), nullable=True),
        sa.Column('refunded_at', sa.DateTime(), nullable=True),
        sa.Column('refund_reason', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('amount >= 0', name='ck_payment_amount_non_negative'),
        sa.CheckConstraint("method IN ('CARD', 'UPI', 'NETBANKING', 'CASH')", name='ck_payment_method_valid'),
        sa.CheckConstraint(
            "status IN ('PENDING', 'SUCCESS', 'FAILED', 'REFUNDED')",
            name='ck_payment_status_valid'
        ),
        sa.ForeignKeyConstraint(['booking_id'], ['bookings.booking_id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('payment_id')
    )
    op.create_index(op.f('ix_payments_booking_id'), 'payments', ['booking_id'], unique=True)
    op.create_index(op.f('ix_payments_status'), 'payments', ['status'], unique=False)

    # Create reviews table
    op.create_table('reviews',
        sa.Column('review_id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('booking_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('hotel_id', sa.Integer(), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('review_title', sa.String(length=200), nullable=False),
        sa.Column('review_text', sa.Text(), nullable=False),
        sa.Column('helpful_count', sa.Integer(), nullable=False),
        sa.Column('is_verified', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('rating >= 1 AND rating <= 5', name='ck_review_rating_range'),
        sa.CheckConstraint('helpful_count >= 0', name='ck_review_helpful_count_non_negative'),
        sa.ForeignKeyConstraint(['booking_id'], ['bookings.booking_id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.user_id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['hotel_id'], ['hotels.hotel_id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('review_id'),
        sa.UniqueConstraint('booking_id')
    )
    op.create_index(op.f('ix_reviews_user_id'), 'reviews', ['user_id'], unique=False)
    op.create_index(op.f('ix_reviews_hotel_id'), 'reviews', ['hotel_id'], unique=False)
    op.create_index(op.f('ix_reviews_created_at'), 'reviews', ['created_at'], unique=False)

    # Create review_helpful_votes table
    op.create_table('review_helpful_votes',
        sa.Column('vote_id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('review_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['review_id'], ['reviews.review_id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.user_id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('vote_id'),
        sa.UniqueConstraint('review_id', 'user_id', name='uq_review_helpful_vote')
    )
    op.create_index(op.f('ix_review_helpful_votes_review_id'), 'review_helpful_votes', ['review_id'], unique=False)

    # Create seasonal_pricing table
    op.create_table('seasonal_pricing',
        sa.Column('pricing_id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('room_type_id', sa.Integer(), nullable=False),
        sa.Column('season_name', sa.String(length=50), nullable=False),
        sa.Column('description', sa.String(length=500), nullable=True),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('price_multiplier', sa.Numeric(precision=4, scale=2), nullable=False),
        sa.Column('priority', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('start_date < end_date', name='ck_seasonal_pricing_dates_ordered'),
        sa.CheckConstraint(
            'price_multiplier > 0 AND price_multiplier <= 5',
            name='ck_seasonal_pricing_multiplier_range'
        ),
        sa.CheckConstraint('priority >= 1 AND priority <= 10', name='ck_seasonal_pricing_priority_range'),
        sa.ForeignKeyConstraint(['room_type_id'], ['room_types.room_type_id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('pricing_id')
    )
    op.create_index(op.f('ix_seasonal_pricing_room_type_id'), 'seasonal_pricing', ['room_type_id'], unique=False)

    # Create idempotency_records table
    op.create_table('idempotency_records',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('idempotency_key', sa.String(length=255), nullable=False),
        sa.Column('scope', sa.String(length=100), nullable=False),
        sa.Column('request_body_hash', sa.String(length=64), nullable=False),
        sa.Column('response_status_code', sa.Integer(), nullable=False),
        sa.Column('response_body', sa.Text(), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('length(idempotency_key) > 0', name='ck_idempotency_key_not_empty'),
        sa.CheckConstraint('length(request_body_hash) = 64', name='ck_idempotency_hash_length'),
        sa.CheckConstraint(
            'response_status_code >= 100 AND response_status_code <= 599',
            name='ck_idempotency_status_code_valid'
        ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('idempotency_key', 'scope', name='uq_idempotency_key_scope')
    )
    op.create_index(op.f('ix_idempotency_records_idempotency_key'), 'idempotency_records', ['idempotency_key'], unique=False)
    op.create_index(op.f('ix_idempotency_records_scope'), 'idempotency_records', ['scope'], unique=False)
    op.create_index(op.f('ix_idempotency_records_expires_at'), 'idempotency_records', ['expires_at'], unique=False)


def downgrade() -> None:
    """Downgrade database schema."""
    op.drop_table('idempotency_records')
    op.drop_table('seasonal_pricing')
    op.drop_table('review_helpful_votes')
    op.drop_table('reviews')
    op.drop_table('payments')
    op.drop_table('bookings')
    op.drop_table('room_inventory')
    op.drop_table('room_types')
    op.drop_table('hotels')
    op.drop_table('cities')
    op.drop_table('users')
