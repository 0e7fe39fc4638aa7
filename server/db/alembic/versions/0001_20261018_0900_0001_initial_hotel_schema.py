"""Initial hotel schema

Revision ID: 0001
Revises:
Create Date: 2026-10-18 09:00:00.000000

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
    # Create room_types table
    op.create_table('room_types',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('max_occupancy', sa.Integer(), nullable=False),
        sa.Column('standard_occupancy', sa.Integer(), nullable=True),
        sa.Column('base_price', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('additional_guest_charge', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
        sa.CheckConstraint('max_occupancy >= 1', name='ck_room_type_max_occupancy_positive'),
        sa.CheckConstraint(
            'standard_occupancy IS NULL OR standard_occupancy >= 1',
            name='ck_room_type_standard_occupancy_positive'
        ),
        sa.CheckConstraint('base_price >= 0', name='ck_room_type_base_price_non_negative'),
        sa.CheckConstraint(
            'additional_guest_charge IS NULL OR additional_guest_charge >= 0',
            name='ck_room_type_additional_charge_non_negative'
        ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_room_types_name'), 'room_types', ['name'], unique=True)

    # Create rooms table
    op.create_table('rooms',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('room_type_id', sa.Uuid(), nullable=False),
        sa.Column('number', sa.String(length=32), nullable=False),
        sa.Column('floor', sa.String(length=32), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['room_type_id'], ['room_types.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_rooms_number'), 'rooms', ['number'], unique=True)
    op.create_index(op.f('ix_rooms_room_type_id'), 'rooms', ['room_type_id'], unique=False)

    # Create temporary_reservations table
    op.create_table('temporary_reservations',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('room_type_id', sa.Uuid(), nullable=False),
        sa.Column('guest_first_name', sa.String(length=128), nullable=False),
        sa.Column('guest_last_name', sa.String(length=128), nullable=False),
        sa.Column('guest_email', sa.String(length=255), nullable=False),
        sa.Column('guest_phone', sa.String(length=64), nullable=True),
        sa.Column('check_in_date', sa.DateTime(), nullable=False),
        sa.Column('check_out_date', sa.DateTime(), nullable=False),
        sa.Column('adults', sa.Integer(), nullable=False),
        sa.Column('children', sa.Integer(), nullable=False),
        sa.Column('total_price', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.Column('pay_on_arrival', sa.Boolean(), nullable=False),
        sa.Column('special_requests', sa.Text(), nullable=True),
        sa.Column('confirmation_code', sa.String(length=16), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
        sa.CheckConstraint('check_out_date > check_in_date', name='ck_temporary_reservation_dates_ordered'),
        sa.CheckConstraint('adults >= 1', name='ck_temporary_reservation_adults_positive'),
        sa.CheckConstraint('children >= 0', name='ck_temporary_reservation_children_non_negative'),
        sa.ForeignKeyConstraint(['room_type_id'], ['room_types.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_temporary_reservations_room_type_id'), 'temporary_reservations', ['room_type_id'], unique=False)
    op.create_index(op.f('ix_temporary_reservations_guest_email'), 'temporary_reservations', ['guest_email'], unique=False)
    op.create_index(op.f('ix_temporary_reservations_check_in_date'), 'temporary_reservations', ['check_in_date'], unique=False)
    op.create_index(op.f('ix_temporary_reservations_check_out_date'), 'temporary_reservations', ['check_out_date'], unique=False)
    op.create_index(op.f('ix_temporary_reservations_status'), 'temporary_reservations', ['status'], unique=False)
    op.create_index(op.f('ix_temporary_reservations_expires_at'), 'temporary_reservations', ['expires_at'], unique=False)
    op.create_index(
        op.f('ix_temporary_reservations_confirmation_code'),
        'temporary_reservations',
        ['confirmation_code'],
        unique=True
    )

    # Create reservations table
    op.create_table('reservations',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('room_id', sa.Uuid(), nullable=False),
        sa.Column('temporary_reservation_id', sa.Uuid(), nullable=True),
        sa.Column('guest_first_name', sa.String(length=128), nullable=False),
        sa.Column('guest_last_name', sa.String(length=128), nullable=False),
        sa.Column('guest_email', sa.String(length=255), nullable=False),
        sa.Column('guest_phone', sa.String(length=64), nullable=True),
        sa.Column('check_in_date', sa.DateTime(), nullable=False),
        sa.Column('check_out_date', sa.DateTime(), nullable=False),
        sa.Column('adults', sa.Integer(), nullable=False),
        sa.Column('children', sa.Integer(), nullable=False),
        sa.Column('total_price', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('payment_status', sa.String(length=20), nullable=False),
        sa.Column('payment_method', sa.String(length=32), nullable=True),
        sa.Column('special_requests', sa.Text(), nullable=True),
        sa.Column('confirmation_code', sa.String(length=16), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
        sa.CheckConstraint('check_out_date > check_in_date', name='ck_reservation_dates_ordered'),
        sa.CheckConstraint('adults >= 1', name='ck_reservation_adults_positive'),
        sa.CheckConstraint('children >= 0', name='ck_reservation_children_non_negative'),
        sa.CheckConstraint('total_price >= 0', name='ck_reservation_total_price_non_negative'),
        sa.ForeignKeyConstraint(['room_id'], ['rooms.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(
            ['temporary_reservation_id'], ['temporary_reservations.id'], ondelete='SET NULL'
        ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('temporary_reservation_id')
    )
    op.create_index(op.f('ix_reservations_room_id'), 'reservations', ['room_id'], unique=False)
    op.create_index(op.f('ix_reservations_guest_email'), 'reservations', ['guest_email'], unique=False)
    op.create_index(op.f('ix_reservations_check_in_date'), 'reservations', ['check_in_date'], unique=False)
    op.create_index(op.f('ix_reservations_check_out_date'), 'reservations', ['check_out_date'], unique=False)
    op.create_index(op.f('ix_reservations_status'), 'reservations', ['status'], unique=False)
    op.create_index(op.f('ix_reservations_confirmation_code'), 'reservations', ['confirmation_code'], unique=True)
    # Availability lookups filter by room and date span together
    op.create_index('ix_reservations_room_span', 'reservations', ['room_id', 'check_in_date', 'check_out_date'])


def downgrade() -> None:
    """Downgrade database schema."""
    op.drop_table('reservations')
    op.drop_table('temporary_reservations')
    op.drop_table('rooms')
    op.drop_table('room_types')
