"""create_marketplace_tables

Revision ID: 3c7e1f0a9b21
Revises:
Create Date: 2026-10-17 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql
from sqlalchemy.dialects.postgresql import UUID


# revision identifiers, used by Alembic.
revision: str = '3c7e1f0a9b21'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

user_role_enum = postgresql.ENUM(
    'user', 'admin', 'logistics', name='user_role_enum', create_type=False
)
admin_role_enum = postgresql.ENUM(
    'super_admin', 'regional_admin', 'support', name='admin_role_enum', create_type=False
)
business_type_enum = postgresql.ENUM(
    'retailer', 'restaurant', 'wholesaler', name='business_type_enum', create_type=False
)
kyc_status_enum = postgresql.ENUM(
    'pending', 'under_review', 'approved', 'rejected',
    name='kyc_status_enum', create_type=False,
)
order_status_enum = postgresql.ENUM(
    'pending', 'confirmed', 'processing', 'shipped', 'out_for_delivery',
    'delivered', 'cancelled', 'refunded',
    name='order_status_enum', create_type=False,
)
payment_status_enum = postgresql.ENUM(
    'pending', 'paid', 'failed', 'refunded', name='payment_status_enum', create_type=False
)
agent_status_enum = postgresql.ENUM(
    'active', 'available', 'on_delivery', 'offline',
    name='agent_status_enum', create_type=False,
)

ALL_ENUMS = (
    user_role_enum,
    admin_role_enum,
    business_type_enum,
    kyc_status_enum,
    order_status_enum,
    payment_status_enum,
    agent_status_enum,
)


def upgrade() -> None:
    """Upgrade schema - Create marketplace tables."""
    bind = op.get_bind()
    for enum_type in ALL_ENUMS:
        enum_type.create(bind, checkfirst=True)

    op.create_table(
        'regions',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('code', sa.String(length=20), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('support_email', sa.String(length=255), nullable=True),
        sa.Column('support_phone', sa.String(length=50), nullable=True),
        sa.Column('min_order_amount', sa.Numeric(12, 2), server_default='0', nullable=False),
        sa.Column('delivery_fee', sa.Numeric(12, 2), server_default='0', nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('code'),
    )

    op.create_table(
        'profiles',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('full_name', sa.String(length=255), nullable=True),
        sa.Column('avatar_url', sa.Text(), nullable=True),
        sa.Column('role', user_role_enum, server_default='user', nullable=False),
        sa.Column('admin_role', admin_role_enum, nullable=True),
        sa.Column('region_id', UUID(as_uuid=True), nullable=True),
        sa.Column('business_name', sa.String(length=255), nullable=True),
        sa.Column('business_type', business_type_enum, nullable=True),
        sa.Column('gstin', sa.String(length=20), nullable=True),
        sa.Column('address_line1', sa.String(length=255), nullable=True),
        sa.Column('address_line2', sa.String(length=255), nullable=True),
        sa.Column('city', sa.String(length=100), nullable=True),
        sa.Column('state', sa.String(length=100), nullable=True),
        sa.Column('postal_code', sa.String(length=20), nullable=True),
        sa.Column('kyc_status', kyc_status_enum, server_default='pending', nullable=False),
        sa.Column('kyc_submitted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('kyc_verified_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('kyc_verified_by', UUID(as_uuid=True), nullable=True),
        sa.Column('kyc_rejection_reason', sa.Text(), nullable=True),
        sa.Column('vehicle_number', sa.String(length=50), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('last_login_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['region_id'], ['regions.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
    )
    op.create_index('ix_profiles_region_id', 'profiles', ['region_id'])
    op.create_index('ix_profiles_kyc_status', 'profiles', ['kyc_status'])
    op.create_index('ix_profiles_role_region', 'profiles', ['role', 'region_id'])

    op.create_table(
        'saved_addresses',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('user_id', UUID(as_uuid=True), nullable=False),
        sa.Column('label', sa.String(length=100), nullable=False),
        sa.Column('address', sa.Text(), nullable=False),
        sa.Column('city', sa.String(length=100), nullable=False),
        sa.Column('state', sa.String(length=100), nullable=True),
        sa.Column('pincode', sa.String(length=20), nullable=False),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('lat', sa.Float(), nullable=True),
        sa.Column('lng', sa.Float(), nullable=True),
        sa.Column('is_default', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_saved_addresses_user_id', 'saved_addresses', ['user_id'])
    # At most one default address per user
    op.create_index(
        'uq_saved_addresses_one_default',
        'saved_addresses',
        ['user_id'],
        unique=True,
        postgresql_where=sa.text('is_default'),
    )

    op.create_table(
        'delivery_agents',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('user_id', UUID(as_uuid=True), nullable=True),
        sa.Column('region_id', UUID(as_uuid=True), nullable=True),
        sa.Column('vehicle_type', sa.String(length=50), nullable=True),
        sa.Column('status', agent_status_enum, server_default='active', nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['region_id'], ['regions.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_delivery_agents_user_id', 'delivery_agents', ['user_id'])

    op.create_table(
        'products',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('sku', sa.String(length=100), nullable=False),
        sa.Column('category', sa.String(length=100), nullable=False),
        sa.Column('price', sa.Numeric(12, 2), nullable=False),
        sa.Column('price_per_quantity', sa.Integer(), server_default='1', nullable=False),
        sa.Column('mrp', sa.Numeric(12, 2), nullable=True),
        sa.Column('stock_quantity', sa.Integer(), server_default='0', nullable=False),
        sa.Column('unit', sa.String(length=30), server_default='piece', nullable=False),
        sa.Column('min_order_quantity', sa.Integer(), server_default='1', nullable=False),
        sa.Column('max_order_quantity', sa.Integer(), server_default='100', nullable=False),
        sa.Column('image_url', sa.Text(), nullable=True),
        sa.Column('region_id', UUID(as_uuid=True), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('price >= 0', name='product_non_negative_price'),
        sa.CheckConstraint('price_per_quantity > 0', name='product_positive_price_per_qty'),
        sa.ForeignKeyConstraint(['region_id'], ['regions.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('region_id', 'sku', name='unique_region_sku'),
    )
    op.create_index('ix_products_region_id', 'products', ['region_id'])

    op.create_table(
        'orders',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('order_number', sa.String(length=20), nullable=False),
        sa.Column('user_id', UUID(as_uuid=True), nullable=False),
        sa.Column('region_id', UUID(as_uuid=True), nullable=True),
        sa.Column('status', order_status_enum, server_default='pending', nullable=False),
        sa.Column('payment_status', payment_status_enum, server_default='pending', nullable=False),
        sa.Column('payment_method', sa.String(length=30), server_default='cod', nullable=False),
        sa.Column('subtotal', sa.Numeric(14, 2), nullable=False),
        sa.Column('total_amount', sa.Numeric(14, 2), nullable=False),
        sa.Column('delivery_address', sa.Text(), nullable=False),
        sa.Column('delivery_city', sa.String(length=100), nullable=False),
        sa.Column('delivery_state', sa.String(length=100), nullable=True),
        sa.Column('delivery_pincode', sa.String(length=20), nullable=False),
        sa.Column('delivery_phone', sa.String(length=50), nullable=False),
        sa.Column('delivery_lat', sa.Float(), nullable=True),
        sa.Column('delivery_lng', sa.Float(), nullable=True),
        sa.Column('location_accuracy', sa.Float(), nullable=True),
        sa.Column('location_verified', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('assigned_to', UUID(as_uuid=True), nullable=True),
        sa.Column('assigned_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('delivered_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('cancelled_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id']),
        sa.ForeignKeyConstraint(['region_id'], ['regions.id']),
        sa.ForeignKeyConstraint(['assigned_to'], ['profiles.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_orders_order_number', 'orders', ['order_number'], unique=True)
    op.create_index('ix_orders_user_id', 'orders', ['user_id'])
    op.create_index('ix_orders_region_id', 'orders', ['region_id'])
    op.create_index('ix_orders_assigned_to', 'orders', ['assigned_to'])
    op.create_index('ix_orders_region_status', 'orders', ['region_id', 'status'])
    op.create_index('ix_orders_assigned_status', 'orders', ['assigned_to', 'status'])

    op.create_table(
        'order_items',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('order_id', UUID(as_uuid=True), nullable=False),
        sa.Column('product_id', UUID(as_uuid=True), nullable=True),
        sa.Column('product_name', sa.String(length=255), nullable=True),
        sa.Column('product_image', sa.Text(), nullable=True),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('price', sa.Numeric(12, 2), nullable=False),
        sa.Column('price_per_quantity', sa.Integer(), server_default='1', nullable=False),
        sa.Column('unit', sa.String(length=30), server_default='piece', nullable=False),
        sa.Column('total', sa.Numeric(14, 2), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('quantity > 0', name='order_item_positive_quantity'),
        sa.ForeignKeyConstraint(['order_id'], ['orders.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['product_id'], ['products.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_order_items_order_id', 'order_items', ['order_id'])
    op.create_index('ix_order_items_product_id', 'order_items', ['product_id'])


def downgrade() -> None:
    """Downgrade schema - Drop marketplace tables."""
    op.drop_table('order_items')
    op.drop_table('orders')
    op.drop_table('products')
    op.drop_table('delivery_agents')
    op.drop_table('saved_addresses')
    op.drop_table('profiles')
    op.drop_table('regions')

    bind = op.get_bind()
    for enum_type in reversed(ALL_ENUMS):
        enum_type.drop(bind, checkfirst=True)
