"""init_db_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-18

Schema:
- event: events with the tickets_remaining counter
- ticket: one row per seat held, unique human-facing ticket_number
- payment_transaction: one payment receipt per paid ticket
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create all tables with final schema."""

    op.create_table(
        'event',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('category', sa.String(length=20), nullable=False),
        sa.Column('venue', sa.String(length=255), nullable=False),
        sa.Column('organizer_id', sa.Integer(), nullable=False),
        sa.Column('start_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('total_tickets', sa.Integer(), nullable=False),
        sa.Column('tickets_remaining', sa.Integer(), nullable=False),
        sa.Column('ticket_price', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('total_tickets >= 1', name='ck_event_total_tickets_positive'),
        sa.CheckConstraint(
            'tickets_remaining >= 0 AND tickets_remaining <= total_tickets',
            name='ck_event_tickets_remaining_range',
        ),
        sa.CheckConstraint('ticket_price >= 0', name='ck_event_ticket_price_non_negative'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_event_organizer_id'), 'event', ['organizer_id'])

    op.create_table(
        'ticket',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('ticket_number', sa.String(length=32), nullable=False),
        sa.Column('event_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('price', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('reservation_expiry', sa.DateTime(timezone=True), nullable=True),
        sa.Column('checked', sa.Boolean(), nullable=False),
        sa.Column('purchased_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['event_id'], ['event.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('ticket_number'),
    )
    op.create_index(op.f('ix_ticket_event_id'), 'ticket', ['event_id'])
    op.create_index(op.f('ix_ticket_user_id'), 'ticket', ['user_id'])
    # Sweeper scan
    op.create_index(
        'ix_ticket_status_reservation_expiry', 'ticket', ['status', 'reservation_expiry']
    )

    op.create_table(
        'payment_transaction',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('event_id', sa.Integer(), nullable=False),
        sa.Column('ticket_id', sa.Uuid(), nullable=False),
        sa.Column('amount', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('payment_method', sa.String(length=20), nullable=False),
        sa.Column('payment_id', sa.String(length=255), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['event_id'], ['event.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['ticket_id'], ['ticket.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        op.f('ix_payment_transaction_user_id'), 'payment_transaction', ['user_id']
    )
    op.create_index(
        op.f('ix_payment_transaction_event_id'), 'payment_transaction', ['event_id']
    )
    op.create_index(
        op.f('ix_payment_transaction_ticket_id'), 'payment_transaction', ['ticket_id']
    )
    op.create_index(
        op.f('ix_payment_transaction_payment_id'), 'payment_transaction', ['payment_id']
    )


def downgrade() -> None:
    op.drop_table('payment_transaction')
    op.drop_table('ticket')
    op.drop_table('event')
