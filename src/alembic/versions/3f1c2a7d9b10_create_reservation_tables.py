"""create tables, staff, reservations and staff assignments

Revision ID: 3f1c2a7d9b10
Revises:
Create Date: 2026-10-18 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '3f1c2a7d9b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

table_channel = postgresql.ENUM(
    'ONLINE', 'OFFLINE', name='table_channel', create_type=False
)
staff_role = postgresql.ENUM(
    'WAITER', 'MANAGER', 'CLEANER', name='staff_role', create_type=False
)
reservation_status = postgresql.ENUM(
    'PENDING',
    'CONFIRMED',
    'REJECTED',
    name='reservation_status',
    create_type=False,
)


def _base_columns() -> list[sa.Column]:
    return [
        sa.Column(
            'id',
            sa.UUID(),
            server_default=sa.text('gen_random_uuid()'),
            nullable=False,
        ),
        sa.Column(
            'is_active',
            sa.Boolean(),
            server_default=sa.text('true'),
            nullable=False,
        ),
        sa.Column(
            'created_at',
            sa.DateTime(timezone=True),
            server_default=sa.text('now()'),
            nullable=False,
        ),
        sa.Column(
            'updated_at',
            sa.DateTime(timezone=True),
            server_default=sa.text('now()'),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    bind = op.get_bind()
    table_channel.create(bind, checkfirst=True)
    staff_role.create(bind, checkfirst=True)
    reservation_status.create(bind, checkfirst=True)

    op.create_table(
        'table',
        sa.Column('number', sa.Integer(), nullable=False),
        sa.Column('capacity', sa.Integer(), nullable=False),
        sa.Column('channel', table_channel, nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        *_base_columns(),
        sa.CheckConstraint('capacity > 0', name='ck_table_capacity_positive'),
        sa.CheckConstraint('number > 0', name='ck_table_number_positive'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('number'),
    )
    op.create_index(
        op.f('ix_table_channel'), 'table', ['channel'], unique=False
    )

    op.create_table(
        'staff',
        sa.Column('first_name', sa.String(length=200), nullable=False),
        sa.Column('last_name', sa.String(length=200), nullable=False),
        sa.Column('role', staff_role, nullable=False),
        *_base_columns(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_staff_role'), 'staff', ['role'], unique=False)

    op.create_table(
        'reservation',
        sa.Column('first_name', sa.String(length=200), nullable=False),
        sa.Column('last_name', sa.String(length=200), nullable=False),
        sa.Column('email', sa.String(length=320), nullable=True),
        sa.Column('phone', sa.String(length=32), nullable=True),
        sa.Column('note', sa.Text(), nullable=True),
        sa.Column('guest_number', sa.Integer(), nullable=False),
        sa.Column('reservation_date', sa.Date(), nullable=False),
        sa.Column('reservation_time', sa.Time(), nullable=False),
        sa.Column(
            'reserved_from', sa.DateTime(timezone=True), nullable=False
        ),
        sa.Column('reserved_to', sa.DateTime(timezone=True), nullable=False),
        sa.Column('channel', table_channel, nullable=False),
        sa.Column(
            'status',
            reservation_status,
            server_default='PENDING',
            nullable=False,
        ),
        *_base_columns(),
        sa.CheckConstraint('guest_number > 0', name='ck_reservation_guests'),
        sa.CheckConstraint(
            'reserved_from < reserved_to', name='ck_reservation_interval'
        ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        'ix_reservation_window',
        'reservation',
        ['reserved_from', 'reserved_to'],
        unique=False,
    )

    op.create_table(
        'reservationtable',
        sa.Column('reservation_id', sa.UUID(), nullable=False),
        sa.Column('table_id', sa.UUID(), nullable=False),
        sa.Column(
            'is_active',
            sa.Boolean(),
            server_default=sa.text('true'),
            nullable=False,
        ),
        sa.Column(
            'created_at',
            sa.DateTime(timezone=True),
            server_default=sa.text('now()'),
            nullable=False,
        ),
        sa.Column(
            'updated_at',
            sa.DateTime(timezone=True),
            server_default=sa.text('now()'),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(
            ['reservation_id'], ['reservation.id'], ondelete='CASCADE'
        ),
        sa.ForeignKeyConstraint(
            ['table_id'], ['table.id'], ondelete='RESTRICT'
        ),
        sa.PrimaryKeyConstraint('reservation_id', 'table_id'),
    )
    op.create_index(
        op.f('ix_reservationtable_table_id'),
        'reservationtable',
        ['table_id'],
        unique=False,
    )

    op.create_table(
        'staffassignment',
        sa.Column('reservation_id', sa.UUID(), nullable=False),
        sa.Column('table_id', sa.UUID(), nullable=False),
        sa.Column('assignment_date', sa.Date(), nullable=False),
        sa.Column('assignment_time', sa.Time(), nullable=False),
        sa.Column('waiter_id', sa.UUID(), nullable=False),
        sa.Column('manager_id', sa.UUID(), nullable=False),
        sa.Column('cleaner_id', sa.UUID(), nullable=False),
        *_base_columns(),
        sa.ForeignKeyConstraint(
            ['reservation_id'], ['reservation.id'], ondelete='CASCADE'
        ),
        sa.ForeignKeyConstraint(
            ['table_id'], ['table.id'], ondelete='RESTRICT'
        ),
        sa.ForeignKeyConstraint(
            ['waiter_id'], ['staff.id'], ondelete='RESTRICT'
        ),
        sa.ForeignKeyConstraint(
            ['manager_id'], ['staff.id'], ondelete='RESTRICT'
        ),
        sa.ForeignKeyConstraint(
            ['cleaner_id'], ['staff.id'], ondelete='RESTRICT'
        ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint(
            'table_id',
            'assignment_date',
            'assignment_time',
            name='uq_staff_assignment_slot',
        ),
    )
    op.create_index(
        op.f('ix_staffassignment_reservation_id'),
        'staffassignment',
        ['reservation_id'],
        unique=False,
    )
    op.create_index(
        'ix_staff_assignment_slot',
        'staffassignment',
        ['assignment_date', 'assignment_time'],
        unique=False,
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_staff_assignment_slot', table_name='staffassignment')
    op.drop_index(
        op.f('ix_staffassignment_reservation_id'),
        table_name='staffassignment',
    )
    op.drop_table('staffassignment')
    op.drop_index(
        op.f('ix_reservationtable_table_id'), table_name='reservationtable'
    )
    op.drop_table('reservationtable')
    op.drop_index('ix_reservation_window', table_name='reservation')
    op.drop_table('reservation')
    op.drop_index(op.f('ix_staff_role'), table_name='staff')
    op.drop_table('staff')
    op.drop_index(op.f('ix_table_channel'), table_name='table')
    op.drop_table('table')

    bind = op.get_bind()
    reservation_status.drop(bind, checkfirst=True)
    staff_role.drop(bind, checkfirst=True)
    table_channel.drop(bind, checkfirst=True)
