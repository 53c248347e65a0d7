"""Initial schema: ashrams, identities, needs, donations, feed and marketplace

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-01

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision = '001_initial_schema'
down_revision = None

# Enum types store the lowercase values used by the API
app_role = sa.Enum('admin', 'sub_admin', 'user', name='app_role')
need_category = sa.Enum('food', 'clothing', 'education', 'healthcare', 'daily_essentials', 'other', name='need_category')
need_urgency = sa.Enum('low', 'medium', 'high', 'critical', name='need_urgency')
donation_type = sa.Enum('general', 'recurring', name='donation_type')
payment_method = sa.Enum('upi', 'card', 'netbanking', 'wallet', name='payment_method')
payment_status = sa.Enum('pending', 'completed', name='payment_status')
visit_status = sa.Enum('confirmed', name='visit_status')
item_donation_status = sa.Enum('pledged', name='item_donation_status')
vendor_category = sa.Enum('cloud_kitchen', 'handicrafts', 'homemade', 'services', 'other', name='vendor_category')
order_status = sa.Enum('pending', name='order_status')
inquiry_type = sa.Enum('general', 'donation', 'volunteer', 'vendor', name='inquiry_type')


def uuid_pk():
    return sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True)


def ashram_fk():
    return sa.Column('ashram_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('ashrams.id'), nullable=True, index=True)


def need_fk():
    return sa.Column('need_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('children_needs.id'), nullable=True, index=True)


def user_fk(name, nullable=True):
    return sa.Column(name, postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id'), nullable=nullable, index=True)


def created_at(index=False):
    return sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.current_timestamp(), index=index)


def upgrade():
    # Tenants
    op.create_table(
        'ashrams',
        uuid_pk(),
        sa.Column('name', sa.String(255), nullable=False, index=True),
        sa.Column('slug', sa.String(100), nullable=False, unique=True, index=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('city', sa.String(100), nullable=True),
        sa.Column('state', sa.String(100), nullable=True),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('website', sa.Text(), nullable=True),
        sa.Column('logo_url', sa.Text(), nullable=True),
        sa.Column('cover_image_url', sa.Text(), nullable=True),
        sa.Column('primary_color', sa.String(32), nullable=True),
        sa.Column('secondary_color', sa.String(32), nullable=True),
        sa.Column('accent_color', sa.String(32), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true', index=True),
        created_at(),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )

    # Identities
    op.create_table(
        'users',
        uuid_pk(),
        sa.Column('email', sa.String(255), nullable=False, unique=True, index=True),
        sa.Column('password_hash', sa.Text(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true', index=True),
        created_at(),
        sa.Column('last_login_at', sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        'profiles',
        uuid_pk(),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id'), nullable=False, unique=True, index=True),
        sa.Column('full_name', sa.String(100), nullable=True),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('avatar_url', sa.Text(), nullable=True),
        created_at(),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        'user_roles',
        uuid_pk(),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id'), nullable=False, unique=True, index=True),
        sa.Column('role', app_role, nullable=False, server_default='user', index=True),
        created_at(),
    )

    op.create_table(
        'ashram_admins',
        uuid_pk(),
        sa.Column('ashram_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('ashrams.id'), nullable=False, index=True),
        user_fk('user_id', nullable=False),
        sa.Column('role', sa.String(50), nullable=False, server_default='admin'),
        created_at(),
        sa.UniqueConstraint('ashram_id', 'user_id', name='uq_ashram_admin_user'),
    )

    # Needs
    op.create_table(
        'children_needs',
        uuid_pk(),
        ashram_fk(),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('category', need_category, nullable=False, index=True),
        sa.Column('urgency', need_urgency, nullable=False, server_default='medium', index=True),
        sa.Column('quantity_needed', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('quantity_fulfilled', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('estimated_cost', sa.Numeric(12, 2), nullable=True),
        sa.Column('image_url', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true', index=True),
        user_fk('created_by'),
        created_at(index=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint('quantity_fulfilled >= 0', name='ck_need_fulfilled_non_negative'),
        sa.CheckConstraint('quantity_fulfilled <= quantity_needed', name='ck_need_fulfilled_within_needed'),
    )

    # Donation fulfillment records
    op.create_table(
        'donations',
        uuid_pk(),
        ashram_fk(),
        need_fk(),
        user_fk('donor_id'),
        sa.Column('donor_name', sa.String(100), nullable=True),
        sa.Column('donor_email', sa.String(255), nullable=True),
        sa.Column('donor_phone', sa.String(50), nullable=True),
        sa.Column('is_anonymous', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('amount', sa.Integer(), nullable=False),
        sa.Column('donation_type', donation_type, nullable=False, server_default='general', index=True),
        sa.Column('is_recurring', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('payment_method', payment_method, nullable=True),
        sa.Column('payment_status', payment_status, nullable=False, server_default='pending', index=True),
        sa.Column('transaction_id', sa.String(255), nullable=True),
        sa.Column('message', sa.String(2000), nullable=True),
        created_at(index=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint('amount >= 1', name='ck_donation_amount_positive'),
    )

    op.create_table(
        'donor_visits',
        uuid_pk(),
        ashram_fk(),
        need_fk(),
        user_fk('donor_id'),
        sa.Column('donor_name', sa.String(100), nullable=False),
        sa.Column('donor_email', sa.String(255), nullable=False),
        sa.Column('donor_phone', sa.String(50), nullable=True),
        sa.Column('visit_date', sa.Date(), nullable=False, index=True),
        sa.Column('time_slot', sa.String(50), nullable=False),
        sa.Column('message', sa.String(2000), nullable=True),
        sa.Column('status', visit_status, nullable=False, server_default='confirmed', index=True),
        created_at(),
    )

    op.create_table(
        'item_donations',
        uuid_pk(),
        ashram_fk(),
        need_fk(),
        user_fk('donor_id'),
        sa.Column('donor_name', sa.String(100), nullable=False),
        sa.Column('donor_email', sa.String(255), nullable=False),
        sa.Column('donor_phone', sa.String(50), nullable=True),
        sa.Column('items_description', sa.String(2000), nullable=False),
        sa.Column('delivery_note', sa.String(2000), nullable=True),
        sa.Column('status', item_donation_status, nullable=False, server_default='pledged', index=True),
        created_at(),
    )

    # Events
    op.create_table(
        'events',
        uuid_pk(),
        ashram_fk(),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('event_date', sa.DateTime(timezone=True), nullable=True, index=True),
        sa.Column('location', sa.String(255), nullable=True),
        sa.Column('image_url', sa.Text(), nullable=True),
        sa.Column('is_upcoming', sa.Boolean(), nullable=False, server_default='true', index=True),
        user_fk('created_by'),
        created_at(),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )

    # Feed
    op.create_table(
        'feed_posts',
        uuid_pk(),
        ashram_fk(),
        sa.Column('title', sa.String(200), nullable=True),
        sa.Column('content', sa.Text(), nullable=True),
        sa.Column('media_url', sa.Text(), nullable=True),
        sa.Column('media_type', sa.String(20), nullable=True),
        sa.Column('likes_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('comments_count', sa.Integer(), nullable=False, server_default='0'),
        user_fk('created_by'),
        created_at(index=True),
        sa.CheckConstraint('likes_count >= 0', name='ck_post_likes_non_negative'),
        sa.CheckConstraint('comments_count >= 0', name='ck_post_comments_non_negative'),
    )

    op.create_table(
        'post_likes',
        uuid_pk(),
        sa.Column('post_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('feed_posts.id'), nullable=False, index=True),
        user_fk('user_id', nullable=False),
        created_at(),
        sa.UniqueConstraint('post_id', 'user_id', name='uq_post_like_user'),
    )

    op.create_table(
        'post_comments',
        uuid_pk(),
        sa.Column('post_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('feed_posts.id'), nullable=False, index=True),
        user_fk('user_id', nullable=False),
        sa.Column('content', sa.String(2000), nullable=False),
        created_at(index=True),
    )

    # Marketplace
    op.create_table(
        'vendors',
        uuid_pk(),
        user_fk('user_id', nullable=False),
        ashram_fk(),
        sa.Column('business_name', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('category', vendor_category, nullable=False, index=True),
        sa.Column('logo_url', sa.Text(), nullable=True),
        sa.Column('cover_image_url', sa.Text(), nullable=True),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('charity_percentage', sa.Integer(), nullable=False, server_default='10'),
        sa.Column('is_verified', sa.Boolean(), nullable=False, server_default='false', index=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true', index=True),
        created_at(index=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint('charity_percentage BETWEEN 5 AND 25', name='ck_vendor_charity_range'),
    )

    op.create_table(
        'products',
        uuid_pk(),
        sa.Column('vendor_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('vendors.id'), nullable=False, index=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('category', sa.String(100), nullable=True),
        sa.Column('image_url', sa.Text(), nullable=True),
        sa.Column('is_available', sa.Boolean(), nullable=False, server_default='true', index=True),
        created_at(index=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint('price >= 0', name='ck_product_price_non_negative'),
    )

    op.create_table(
        'orders',
        uuid_pk(),
        sa.Column('product_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('products.id'), nullable=False, index=True),
        sa.Column('vendor_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('vendors.id'), nullable=False, index=True),
        user_fk('buyer_id'),
        sa.Column('buyer_phone', sa.String(50), nullable=True),
        sa.Column('quantity', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('total_amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('charity_amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('shipping_address', sa.Text(), nullable=True),
        sa.Column('status', order_status, nullable=False, server_default='pending', index=True),
        created_at(),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint('quantity >= 1', name='ck_order_quantity_positive'),
    )

    # Inquiries
    op.create_table(
        'contact_messages',
        uuid_pk(),
        ashram_fk(),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('inquiry_type', inquiry_type, nullable=False, server_default='general', index=True),
        sa.Column('subject', sa.String(200), nullable=True),
        sa.Column('message', sa.String(2000), nullable=False),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default='false', index=True),
        created_at(index=True),
    )


def downgrade():
    for table in (
        'contact_messages', 'orders', 'products', 'vendors',
        'post_comments', 'post_likes', 'feed_posts', 'events',
        'item_donations', 'donor_visits', 'donations', 'children_needs',
        'ashram_admins', 'user_roles', 'profiles', 'users', 'ashrams',
    ):
        op.drop_table(table)

    bind = op.get_bind()
    for enum_type in (
        inquiry_type, order_status, vendor_category, item_donation_status, visit_status,
        payment_status, payment_method, donation_type, need_urgency, need_category, app_role,
    ):
        enum_type.drop(bind, checkfirst=True)
