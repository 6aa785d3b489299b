"""Initial schema: catalog, stock ledger, pricing, orders, quotes, transfers

Revision ID: 3f1c9a2b7d10
Revises:
Create Date: 2026-10-18 09:12:41.512233

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# Revision identifiers used by Alembic
revision: str = '3f1c9a2b7d10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Shared enum types (created once, referenced by several tables)
user_role = postgresql.ENUM(
    'client', 'representative', 'accounting', 'counter_ibn_tachfine', 'warehouse_la_villette', 'director_admin',
    name='user_role', create_type=False,
)
warehouse = postgresql.ENUM('ibn_tachfine', 'drb_omar', 'la_villette', name='warehouse', create_type=False)
order_status = postgresql.ENUM(
    'submitted', 'validated', 'in_preparation', 'ready', 'shipped', 'delivered', 'refused',
    name='order_status', create_type=False,
)
carrier = postgresql.ENUM('ghazala', 'sh2t', 'baha', name='carrier', create_type=False)
transfer_status = postgresql.ENUM(
    'pending', 'in_preparation', 'ready_to_ship', 'shipped', 'received', 'cancelled',
    name='transfer_status', create_type=False,
)
ENUM_TYPES = (user_role, warehouse, order_status, carrier, transfer_status)


def upgrade() -> None:
    """Upgrade schema."""
    bind = op.get_bind()
    for enum_type in ENUM_TYPES:
        enum_type.create(bind, checkfirst=True)

    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(), nullable=False),
        sa.Column('role', user_role, nullable=False),
        sa.Column('sage_id', sa.String(length=50), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    op.create_table(
        'clients',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('company_name', sa.String(length=255), nullable=False),
        sa.Column('contact_name', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=20), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('city', sa.String(length=100), nullable=True),
        sa.Column('credit_limit', sa.Numeric(12, 2), nullable=False),
        sa.Column('current_balance', sa.Numeric(12, 2), nullable=False),
        sa.Column('overdue_amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('payment_due_date', sa.DateTime(), nullable=True),
        sa.Column('is_blocked', sa.Boolean(), nullable=False),
        sa.Column('representative_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index(op.f('ix_clients_id'), 'clients', ['id'], unique=False)
    op.create_index(op.f('ix_clients_representative_id'), 'clients', ['representative_id'], unique=False)

    op.create_table(
        'products',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('reference', sa.String(length=100), nullable=False),
        sa.Column('designation', sa.Text(), nullable=False),
        sa.Column('brand', sa.String(length=100), nullable=True),
        sa.Column('category', sa.String(length=100), nullable=True),
        sa.Column('vehicle_compatibility', sa.Text(), nullable=True),
        sa.Column('base_price', sa.Numeric(10, 2), sa.CheckConstraint('base_price >= 0'), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index(op.f('ix_products_id'), 'products', ['id'], unique=False)
    op.create_index(op.f('ix_products_reference'), 'products', ['reference'], unique=True)
    op.create_index(op.f('ix_products_brand'), 'products', ['brand'], unique=False)
    op.create_index(op.f('ix_products_category'), 'products', ['category'], unique=False)

    op.create_table(
        'product_substitutes',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('product_id', sa.Integer(), sa.ForeignKey('products.id'), nullable=False),
        sa.Column('substitute_product_id', sa.Integer(), sa.ForeignKey('products.id'), nullable=False),
        sa.Column('priority', sa.Integer(), sa.CheckConstraint('priority >= 1 AND priority <= 5'), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('product_id', 'substitute_product_id', name='uq_substitute_pair'),
    )
    op.create_index(op.f('ix_product_substitutes_id'), 'product_substitutes', ['id'], unique=False)
    op.create_index(op.f('ix_product_substitutes_product_id'), 'product_substitutes', ['product_id'], unique=False)

    op.create_table(
        'stock',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('product_id', sa.Integer(), sa.ForeignKey('products.id'), nullable=False),
        sa.Column('warehouse', warehouse, nullable=False),
        sa.Column('quantity', sa.Integer(), sa.CheckConstraint('quantity >= 0'), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('product_id', 'warehouse', name='uq_stock_product_warehouse'),
    )
    op.create_index(op.f('ix_stock_id'), 'stock', ['id'], unique=False)
    op.create_index(op.f('ix_stock_product_id'), 'stock', ['product_id'], unique=False)

    op.create_table(
        'client_product_pricing',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('client_id', sa.Integer(), sa.ForeignKey('clients.id'), nullable=False),
        sa.Column('product_id', sa.Integer(), sa.ForeignKey('products.id'), nullable=False),
        sa.Column('custom_price', sa.Numeric(10, 2), sa.CheckConstraint('custom_price >= 0'), nullable=True),
        sa.Column(
            'discount_percentage', sa.Numeric(5, 2),
            sa.CheckConstraint('discount_percentage >= 0 AND discount_percentage <= 100'), nullable=False,
        ),
        sa.Column('stock_limit_monthly', sa.Integer(), sa.CheckConstraint('stock_limit_monthly >= 0'), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('client_id', 'product_id', name='uq_pricing_client_product'),
    )
    op.create_index(op.f('ix_client_product_pricing_id'), 'client_product_pricing', ['id'], unique=False)
    op.create_index(op.f('ix_client_product_pricing_client_id'), 'client_product_pricing', ['client_id'], unique=False)
    op.create_index(op.f('ix_client_product_pricing_product_id'), 'client_product_pricing', ['product_id'], unique=False)

    op.create_table(
        'orders',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('client_id', sa.Integer(), sa.ForeignKey('clients.id'), nullable=False),
        sa.Column('representative_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('order_number', sa.String(length=50), nullable=False, unique=True),
        sa.Column('status', order_status, nullable=False),
        sa.Column('total_amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('carrier', carrier, nullable=False),
        sa.Column('is_grouped', sa.Boolean(), nullable=False),
        sa.Column('sage_document_number', sa.String(length=50), nullable=True),
        sa.Column('validated_by', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('validated_at', sa.DateTime(), nullable=True),
        sa.Column('shipped_at', sa.DateTime(), nullable=True),
        sa.Column('delivered_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index(op.f('ix_orders_id'), 'orders', ['id'], unique=False)
    op.create_index(op.f('ix_orders_client_id'), 'orders', ['client_id'], unique=False)
    op.create_index(op.f('ix_orders_created_at'), 'orders', ['created_at'], unique=False)

    op.create_table(
        'order_items',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('order_id', sa.Integer(), sa.ForeignKey('orders.id'), nullable=False),
        sa.Column('product_id', sa.Integer(), sa.ForeignKey('products.id'), nullable=False),
        sa.Column('quantity', sa.Integer(), sa.CheckConstraint('quantity > 0'), nullable=False),
        sa.Column('unit_price', sa.Numeric(12, 4), nullable=False),
        sa.Column('total_price', sa.Numeric(14, 4), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index(op.f('ix_order_items_id'), 'order_items', ['id'], unique=False)
    op.create_index(op.f('ix_order_items_order_id'), 'order_items', ['order_id'], unique=False)
    op.create_index(op.f('ix_order_items_product_id'), 'order_items', ['product_id'], unique=False)

    op.create_table(
        'quotes',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('client_id', sa.Integer(), sa.ForeignKey('clients.id'), nullable=False),
        sa.Column('representative_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('quote_number', sa.String(length=50), nullable=False, unique=True),
        sa.Column('total_amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('qr_code', sa.Text(), nullable=False),
        sa.Column('share_token', sa.String(length=64), nullable=False),
        sa.Column('share_link', sa.Text(), nullable=False),
        sa.Column('is_converted_to_order', sa.Boolean(), nullable=False),
        sa.Column('order_id', sa.Integer(), sa.ForeignKey('orders.id'), nullable=True),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index(op.f('ix_quotes_id'), 'quotes', ['id'], unique=False)
    op.create_index(op.f('ix_quotes_client_id'), 'quotes', ['client_id'], unique=False)
    op.create_index(op.f('ix_quotes_representative_id'), 'quotes', ['representative_id'], unique=False)
    op.create_index(op.f('ix_quotes_share_token'), 'quotes', ['share_token'], unique=True)

    op.create_table(
        'quote_items',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('quote_id', sa.Integer(), sa.ForeignKey('quotes.id'), nullable=False),
        sa.Column('product_id', sa.Integer(), sa.ForeignKey('products.id'), nullable=False),
        sa.Column('quantity', sa.Integer(), sa.CheckConstraint('quantity > 0'), nullable=False),
        sa.Column('unit_price', sa.Numeric(12, 4), nullable=False),
        sa.Column('total_price', sa.Numeric(14, 4), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index(op.f('ix_quote_items_id'), 'quote_items', ['id'], unique=False)
    op.create_index(op.f('ix_quote_items_quote_id'), 'quote_items', ['quote_id'], unique=False)

    op.create_table(
        'transfer_requests',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('order_id', sa.Integer(), sa.ForeignKey('orders.id'), nullable=False),
        sa.Column('product_id', sa.Integer(), sa.ForeignKey('products.id'), nullable=False),
        sa.Column('from_warehouse', warehouse, nullable=False),
        sa.Column('to_warehouse', warehouse, nullable=False),
        sa.Column('quantity_requested', sa.Integer(), sa.CheckConstraint('quantity_requested > 0'), nullable=False),
        sa.Column('quantity_prepared', sa.Integer(), sa.CheckConstraint('quantity_prepared >= 0'), nullable=False),
        sa.Column('status', transfer_status, nullable=False),
        sa.Column('requested_by', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('prepared_by', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('received_by', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('requested_at', sa.DateTime(), nullable=False),
        sa.Column('prepared_at', sa.DateTime(), nullable=True),
        sa.Column('received_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index(op.f('ix_transfer_requests_id'), 'transfer_requests', ['id'], unique=False)
    op.create_index(op.f('ix_transfer_requests_order_id'), 'transfer_requests', ['order_id'], unique=False)
    op.create_index(op.f('ix_transfer_requests_from_warehouse'), 'transfer_requests', ['from_warehouse'], unique=False)
    op.create_index(op.f('ix_transfer_requests_to_warehouse'), 'transfer_requests', ['to_warehouse'], unique=False)
    op.create_index(op.f('ix_transfer_requests_status'), 'transfer_requests', ['status'], unique=False)

    op.create_table(
        'logs',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('ts', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('action', sa.String(length=50), nullable=True),
        sa.Column('resource', sa.String(length=50), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=True),
        sa.Column('ip', sa.String(length=64), nullable=True),
        sa.Column('meta', sa.JSON(), nullable=True),
    )
    op.create_index(op.f('ix_logs_id'), 'logs', ['id'], unique=False)
    op.create_index(op.f('ix_logs_ts'), 'logs', ['ts'], unique=False)
    op.create_index(op.f('ix_logs_action'), 'logs', ['action'], unique=False)
    op.create_index(op.f('ix_logs_resource'), 'logs', ['resource'], unique=False)
    op.create_index(op.f('ix_logs_status'), 'logs', ['status'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    for table in (
        'logs', 'transfer_requests', 'quote_items', 'quotes', 'order_items', 'orders',
        'client_product_pricing', 'stock', 'product_substitutes', 'products', 'clients', 'users',
    ):
        op.drop_table(table)

    bind = op.get_bind()
    for enum_type in reversed(ENUM_TYPES):
        enum_type.drop(bind, checkfirst=True)
