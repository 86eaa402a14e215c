"""initial_schema

Revision ID: 20261019_initial
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from fastapi_users_db_sqlalchemy.generics import GUID

from app.core.order_flow import OrderStatus
from app.models.account import AccountRole, AuthProvider
from app.models.menu.menu_item import MenuCategory, Cuisine, SubCategory


# revision identifiers, used by Alembic.
revision: str = '20261019_initial'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade():
    # 1. Accounts (fastapi-users base columns + app fields)
    op.create_table(
        'accounts',
        sa.Column('id', GUID(), primary_key=True),
        sa.Column('email', sa.String(length=320), nullable=False),
        sa.Column('hashed_password', sa.String(length=1024), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('is_superuser', sa.Boolean(), nullable=False),
        sa.Column('is_verified', sa.Boolean(), nullable=False),
        sa.Column('name', sa.String(length=50), nullable=False),
        sa.Column('phone', sa.String(length=10), nullable=True),
        sa.Column('role', sa.Enum(AccountRole), nullable=False),
        sa.Column('avatar', sa.String(), nullable=False),
        sa.Column('auth_provider', sa.Enum(AuthProvider), nullable=False),
        sa.Column('street', sa.String(), nullable=True),
        sa.Column('city', sa.String(), nullable=True),
        sa.Column('state', sa.String(), nullable=True),
        sa.Column('zip_code', sa.String(), nullable=True),
        sa.Column('country', sa.String(), nullable=True),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_accounts_email', 'accounts', ['email'], unique=True)

    op.create_table(
        'oauth_accounts',
        sa.Column('id', GUID(), primary_key=True),
        sa.Column('oauth_name', sa.String(length=100), nullable=False),
        sa.Column('access_token', sa.String(length=1024), nullable=False),
        sa.Column('expires_at', sa.Integer(), nullable=True),
        sa.Column('refresh_token', sa.String(length=1024), nullable=True),
        sa.Column('account_id', sa.String(length=320), nullable=False),
        sa.Column('account_email', sa.String(length=320), nullable=False),
        sa.Column('user_id', GUID(), sa.ForeignKey('accounts.id', ondelete='cascade'), nullable=False),
    )
    op.create_index('ix_oauth_accounts_oauth_name', 'oauth_accounts', ['oauth_name'])
    op.create_index('ix_oauth_accounts_account_id', 'oauth_accounts', ['account_id'])

    # 2. Role profiles
    op.create_table(
        'restaurant_profiles',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('account_id', GUID(), sa.ForeignKey('accounts.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('kitchen_name', sa.String(), nullable=True),
        sa.Column('cuisine', sa.JSON(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('business_license', sa.String(), nullable=True),
        sa.Column('is_verified', sa.Boolean(), nullable=False),
        sa.Column('is_kitchen_open', sa.Boolean(), nullable=False),
        sa.Column('street', sa.String(), nullable=True),
        sa.Column('city', sa.String(), nullable=True),
        sa.Column('state', sa.String(), nullable=True),
        sa.Column('zip_code', sa.String(), nullable=True),
        sa.Column('country', sa.String(), nullable=True),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('rating_average', sa.Float(), nullable=False),
        sa.Column('rating_count', sa.Integer(), nullable=False),
        sa.CheckConstraint('rating_average >= 0 AND rating_average <= 5', name='ck_restaurant_profiles_rating_range'),
    )

    op.create_table(
        'rider_profiles',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('account_id', GUID(), sa.ForeignKey('accounts.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('vehicle_type', sa.String(), nullable=True),
        sa.Column('vehicle_number', sa.String(), nullable=True),
        sa.Column('license_number', sa.String(), nullable=True),
        sa.Column('is_verified', sa.Boolean(), nullable=False),
        sa.Column('is_available', sa.Boolean(), nullable=False),
        sa.Column('current_latitude', sa.Float(), nullable=True),
        sa.Column('current_longitude', sa.Float(), nullable=True),
        sa.Column('location_updated_at', sa.DateTime(), nullable=True),
        sa.Column('total_deliveries', sa.Integer(), nullable=False),
        sa.Column('total_earnings', sa.Float(), nullable=False),
        sa.Column('today_earnings', sa.Float(), nullable=False),
        sa.Column('last_earnings_reset', sa.DateTime(), nullable=False),
        sa.Column('rating_average', sa.Float(), nullable=False),
        sa.Column('rating_count', sa.Integer(), nullable=False),
        sa.CheckConstraint('rating_average >= 0 AND rating_average <= 5', name='ck_rider_profiles_rating_range'),
    )

    # 3. Menu
    op.create_table(
        'menu_items',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('restaurant_id', GUID(), sa.ForeignKey('accounts.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('price', sa.Float(), nullable=False),
        sa.Column('category', sa.Enum(MenuCategory), nullable=False),
        sa.Column('cuisine', sa.Enum(Cuisine), nullable=False),
        sa.Column('sub_category', sa.Enum(SubCategory), nullable=True),
        sa.Column('image', sa.String(), nullable=False),
        sa.Column('is_veg', sa.Boolean(), nullable=False),
        sa.Column('is_available', sa.Boolean(), nullable=False),
        sa.Column('restaurant_latitude', sa.Float(), nullable=True),
        sa.Column('restaurant_longitude', sa.Float(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint('price >= 0', name='ck_menu_items_price_nonneg'),
    )
    op.create_index('idx_menu_items_restaurant_category', 'menu_items', ['restaurant_id', 'category'])
    op.create_index('idx_menu_items_restaurant_available', 'menu_items', ['restaurant_id', 'is_available'])

    # 4. Cart + wishlists
    op.create_table(
        'cart_entries',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('account_id', GUID(), sa.ForeignKey('accounts.id', ondelete='CASCADE'), nullable=False),
        sa.Column('menu_item_id', sa.String(), sa.ForeignKey('menu_items.id', ondelete='CASCADE'), nullable=False),
        sa.Column('restaurant_id', GUID(), sa.ForeignKey('accounts.id'), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('added_at', sa.DateTime(), nullable=True),
        sa.UniqueConstraint('account_id', 'menu_item_id', name='uq_cart_account_item'),
        sa.CheckConstraint('quantity >= 1', name='ck_cart_entries_quantity_min'),
    )
    op.create_index('ix_cart_entries_account_id', 'cart_entries', ['account_id'])

    op.create_table(
        'wishlists',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('account_id', GUID(), sa.ForeignKey('accounts.id', ondelete='CASCADE'), nullable=False),
        sa.Column('restaurant_id', GUID(), sa.ForeignKey('accounts.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('idx_wishlists_account', 'wishlists', ['account_id'])
    op.create_index('idx_wishlists_account_restaurant', 'wishlists', ['account_id', 'restaurant_id'])

    op.create_table(
        'wishlist_items',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('wishlist_id', sa.String(), sa.ForeignKey('wishlists.id', ondelete='CASCADE'), nullable=False),
        sa.Column('menu_item_id', sa.String(), sa.ForeignKey('menu_items.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(), nullable=True),
        sa.Column('price', sa.Float(), nullable=True),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('added_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint('quantity >= 1', name='ck_wishlist_items_quantity_min'),
    )

    # 5. Orders
    op.create_table(
        'orders',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('customer_id', GUID(), sa.ForeignKey('accounts.id'), nullable=False),
        sa.Column('restaurant_id', GUID(), sa.ForeignKey('accounts.id'), nullable=False),
        sa.Column('rider_id', GUID(), sa.ForeignKey('accounts.id'), nullable=True),
        sa.Column('status', sa.Enum(OrderStatus), nullable=False),
        sa.Column('subtotal', sa.Float(), nullable=False),
        sa.Column('delivery_fee', sa.Float(), nullable=False),
        sa.Column('total_amount', sa.Float(), nullable=False),
        sa.Column('delivery_address', sa.Text(), nullable=True),
        sa.Column('cancel_reason', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.Column('delivered_at', sa.DateTime(), nullable=True),
        sa.Column('cancelled_at', sa.DateTime(), nullable=True),
        sa.Column('restaurant_rating', sa.Integer(), nullable=True),
        sa.Column('restaurant_review', sa.Text(), nullable=True),
        sa.Column('restaurant_rated_at', sa.DateTime(), nullable=True),
        sa.Column('rider_rating', sa.Integer(), nullable=True),
        sa.Column('rider_review', sa.Text(), nullable=True),
        sa.Column('rider_rated_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint(
            'restaurant_rating IS NULL OR (restaurant_rating >= 1 AND restaurant_rating <= 5)',
            name='ck_orders_restaurant_rating_range',
        ),
        sa.CheckConstraint(
            'rider_rating IS NULL OR (rider_rating >= 1 AND rider_rating <= 5)',
            name='ck_orders_rider_rating_range',
        ),
    )
    op.create_index('idx_orders_restaurant_status', 'orders', ['restaurant_id', 'status'])
    op.create_index('idx_orders_rider_status', 'orders', ['rider_id', 'status'])
    op.create_index('idx_orders_customer', 'orders', ['customer_id'])

    op.create_table(
        'order_items',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('order_id', sa.String(), sa.ForeignKey('orders.id', ondelete='CASCADE'), nullable=False),
        sa.Column('menu_item_id', sa.String(), sa.ForeignKey('menu_items.id', ondelete='SET NULL'), nullable=True),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('price_at_time_of_order', sa.Float(), nullable=False),
        sa.Column('item_name', sa.String(), nullable=False),
    )


def downgrade():
    op.drop_table('order_items')
    op.drop_index('idx_orders_customer', table_name='orders')
    op.drop_index('idx_orders_rider_status', table_name='orders')
    op.drop_index('idx_orders_restaurant_status', table_name='orders')
    op.drop_table('orders')
    op.drop_table('wishlist_items')
    op.drop_index('idx_wishlists_account_restaurant', table_name='wishlists')
    op.drop_index('idx_wishlists_account', table_name='wishlists')
    op.drop_table('wishlists')
    op.drop_index('ix_cart_entries_account_id', table_name='cart_entries')
    op.drop_table('cart_entries')
    op.drop_index('idx_menu_items_restaurant_available', table_name='menu_items')
    op.drop_index('idx_menu_items_restaurant_category', table_name='menu_items')
    op.drop_table('menu_items')
    op.drop_table('rider_profiles')
    op.drop_table('restaurant_profiles')
    op.drop_index('ix_oauth_accounts_account_id', table_name='oauth_accounts')
    op.drop_index('ix_oauth_accounts_oauth_name', table_name='oauth_accounts')
    op.drop_table('oauth_accounts')
    op.drop_index('ix_accounts_email', table_name='accounts')
    op.drop_table('accounts')
