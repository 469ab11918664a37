"""Initial schema: complexes, courts, clients, bookings, court blackouts

Revision ID: 3f8a1c2d9b70
Revises:
Create Date: 2026-10-18

Bookings carry a partial unique index on (court_id, start_time) restricted
to pending/confirmed rows, so two active bookings can never share a start on
the same court even if two writers slip past the availability check.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f8a1c2d9b70'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ACTIVE_BOOKINGS = "status IN ('pending', 'confirmed')"


def _base_columns() -> list:
    return [
        sa.Column('id', sa.CHAR(length=32), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True),
                  server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    op.create_table('complexes',
        sa.Column('owner_id', sa.CHAR(length=32), nullable=False),
        sa.Column('name', sa.String(length=150), nullable=False),
        sa.Column('address', sa.String(length=255), nullable=True),
        sa.Column('phone', sa.String(length=50), nullable=True),
        *_base_columns(),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('complexes', schema=None) as batch_op:
        batch_op.create_index('idx_complex_owner', ['owner_id'], unique=False)

    op.create_table('courts',
        sa.Column('complex_id', sa.CHAR(length=32), nullable=False),
        sa.Column('name', sa.String(length=150), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('sport_type', sa.String(length=50), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_base_columns(),
        sa.ForeignKeyConstraint(['complex_id'], ['complexes.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('courts', schema=None) as batch_op:
        batch_op.create_index('idx_court_complex', ['complex_id'], unique=False)
        batch_op.create_index('idx_court_active', ['is_active'], unique=False)

    op.create_table('clients',
        sa.Column('owner_id', sa.CHAR(length=32), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('phone', sa.String(length=50), nullable=True),
        *_base_columns(),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('clients', schema=None) as batch_op:
        batch_op.create_index('idx_client_owner', ['owner_id'], unique=False)

    op.create_table('bookings',
        sa.Column('court_id', sa.CHAR(length=32), nullable=False),
        sa.Column('owner_id', sa.CHAR(length=32), nullable=False),
        sa.Column('client_id', sa.CHAR(length=32), nullable=True),
        sa.Column('booking_date', sa.Date(), nullable=False),
        sa.Column('start_time', sa.DateTime(), nullable=False),
        sa.Column('end_time', sa.DateTime(), nullable=False),
        sa.Column('duration_minutes', sa.Integer(), nullable=False),
        sa.Column('price', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('payment_method', sa.String(length=20), nullable=True),
        sa.Column('payment_status', sa.String(length=20), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('is_app_native', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('app_user_id', sa.String(length=100), nullable=True),
        sa.Column('contact_name', sa.String(length=200), nullable=True),
        sa.Column('contact_phone', sa.String(length=50), nullable=True),
        sa.Column('contact_email', sa.String(length=255), nullable=True),
        *_base_columns(),
        sa.CheckConstraint('end_time > start_time', name='ck_booking_window_positive'),
        sa.ForeignKeyConstraint(['court_id'], ['courts.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['client_id'], ['clients.id']),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('bookings', schema=None) as batch_op:
        batch_op.create_index('idx_booking_court', ['court_id'], unique=False)
        batch_op.create_index('idx_booking_owner', ['owner_id'], unique=False)
        batch_op.create_index('idx_booking_client', ['client_id'], unique=False)
        batch_op.create_index('idx_booking_status', ['status'], unique=False)
        batch_op.create_index('idx_booking_date', ['booking_date'], unique=False)
        batch_op.create_index('idx_booking_court_time', ['court_id', 'start_time', 'end_time'], unique=False)
        batch_op.create_index(
            'uq_booking_active_court_start',
            ['court_id', 'start_time'],
            unique=True,
            sqlite_where=sa.text(ACTIVE_BOOKINGS),
            postgresql_where=sa.text(ACTIVE_BOOKINGS),
        )

    op.create_table('court_blackouts',
        sa.Column('court_id', sa.CHAR(length=32), nullable=False),
        sa.Column('owner_id', sa.CHAR(length=32), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('start_time', sa.String(length=5), nullable=True),
        sa.Column('end_time', sa.String(length=5), nullable=True),
        sa.Column('reason', sa.String(length=50), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_base_columns(),
        sa.CheckConstraint('end_date >= start_date', name='ck_blackout_date_range'),
        sa.ForeignKeyConstraint(['court_id'], ['courts.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('court_blackouts', schema=None) as batch_op:
        batch_op.create_index('idx_blackout_court', ['court_id'], unique=False)
        batch_op.create_index('idx_blackout_owner', ['owner_id'], unique=False)
        batch_op.create_index(
            'idx_blackout_court_dates',
            ['court_id', 'is_active', 'start_date', 'end_date'],
            unique=False,
        )


def downgrade() -> None:
    op.drop_table('court_blackouts')
    op.drop_table('bookings')
    op.drop_table('clients')
    op.drop_table('courts')
    op.drop_table('complexes')
