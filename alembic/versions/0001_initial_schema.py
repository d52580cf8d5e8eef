"""initial schema: users, packages, schedules, orders

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-18 09:00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None

role_enum = sa.Enum('user', 'admin', name='roleenum')
order_status_enum = sa.Enum(
    'pending', 'dp_paid', 'in_progress', 'finished', 'completed', 'cancelled', name='orderstatus'
)
payment_status_enum = sa.Enum('pending', 'paid', 'failed', name='paymentstatus')


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('role', role_enum, nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'packages',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('price', sa.BigInteger(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_packages_id', 'packages', ['id'])

    op.create_table(
        'package_items',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('package_id', sa.Integer(), sa.ForeignKey('packages.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('price', sa.BigInteger(), nullable=False),
    )
    op.create_index('ix_package_items_id', 'package_items', ['id'])

    op.create_table(
        'schedules',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_schedules_id', 'schedules', ['id'])
    op.create_index('ix_schedules_date', 'schedules', ['date'], unique=True)

    op.create_table(
        'orders',
        sa.Column('id', sa.String(length=32), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('package_id', sa.Integer(), sa.ForeignKey('packages.id'), nullable=False),
        sa.Column('schedule_id', sa.Integer(), sa.ForeignKey('schedules.id'), nullable=False),
        sa.Column('schedule_date', sa.Date(), nullable=False),
        sa.Column('customer_name', sa.String(), nullable=False),
        sa.Column('customer_email', sa.String(), nullable=False),
        sa.Column('customer_phone', sa.String(), nullable=False),
        sa.Column('customer_address', sa.Text(), nullable=False),
        sa.Column('total_amount', sa.BigInteger(), nullable=False),
        sa.Column('dp_amount', sa.BigInteger(), nullable=False),
        sa.Column('final_amount', sa.BigInteger(), nullable=False),
        sa.Column('status', order_status_enum, nullable=False),
        sa.Column('dp_status', payment_status_enum, nullable=False),
        sa.Column('final_status', payment_status_enum, nullable=False),
        sa.Column('dp_transaction_id', sa.String(), nullable=True),
        sa.Column('final_transaction_id', sa.String(), nullable=True),
        sa.Column('transaction_status', sa.String(), nullable=True),
        sa.Column('fraud_status', sa.String(), nullable=True),
        sa.Column('payment_type', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('dp_paid_at', sa.DateTime(), nullable=True),
        sa.Column('final_paid_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_orders_user_id', 'orders', ['user_id'])
    op.create_index('ix_orders_created_at', 'orders', ['created_at'])


def downgrade() -> None:
    op.drop_index('ix_orders_created_at', table_name='orders')
    op.drop_index('ix_orders_user_id', table_name='orders')
    op.drop_table('orders')
    op.drop_index('ix_schedules_date', table_name='schedules')
    op.drop_index('ix_schedules_id', table_name='schedules')
    op.drop_table('schedules')
    op.drop_index('ix_package_items_id', table_name='package_items')
    op.drop_table('package_items')
    op.drop_index('ix_packages_id', table_name='packages')
    op.drop_table('packages')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_index('ix_users_id', table_name='users')
    op.drop_table('users')

    bind = op.get_bind()
    payment_status_enum.drop(bind, checkfirst=True)
    order_status_enum.drop(bind, checkfirst=True)
    role_enum.drop(bind, checkfirst=True)
