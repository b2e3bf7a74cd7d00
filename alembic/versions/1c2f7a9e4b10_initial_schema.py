"""initial schema: users, agents, properties, contacts

Revision ID: 1c2f7a9e4b10
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '1c2f7a9e4b10'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('name', sa.String(length=50), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('role', sa.String(), nullable=False),
        sa.Column('is_agent', sa.Boolean(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('profile_image_public_id', sa.String(), nullable=True),
        sa.Column('profile_image_url', sa.String(), nullable=True),
        sa.Column('last_login', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('idx_users_email_active', 'users', ['email', 'is_active'])

    op.create_table(
        'agent_profiles',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('user_id', sa.String(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('license_number', sa.String(), nullable=True, unique=True),
        sa.Column('experience', sa.Integer(), nullable=True),
        sa.Column('specializations', sa.JSON(), nullable=False),
        sa.Column('bio', sa.String(length=500), nullable=True),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('street', sa.String(), nullable=True),
        sa.Column('city', sa.String(), nullable=True),
        sa.Column('state', sa.String(), nullable=True),
        sa.Column('zip_code', sa.String(), nullable=True),
        sa.Column('country', sa.String(), nullable=True),
        sa.Column('profile_image_public_id', sa.String(), nullable=True),
        sa.Column('profile_image_url', sa.String(), nullable=True),
        sa.Column('rating_average', sa.Float(), nullable=False),
        sa.Column('rating_count', sa.Integer(), nullable=False),
        sa.Column('total_transactions', sa.Integer(), nullable=False),
        sa.Column('is_verified', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_agent_profiles_user_id', 'agent_profiles', ['user_id'], unique=True)
    op.create_index('ix_agent_profiles_city', 'agent_profiles', ['city'])
    op.create_index('ix_agent_profiles_rating_average', 'agent_profiles', ['rating_average'])

    op.create_table(
        'agent_ratings',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('agent_profile_id', sa.String(), sa.ForeignKey('agent_profiles.id', ondelete='CASCADE'), nullable=False),
        sa.Column('rater_id', sa.String(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('rating', sa.Float(), nullable=False),
        sa.Column('comment', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_agent_ratings_agent_profile_id', 'agent_ratings', ['agent_profile_id'])
    op.create_index('ix_agent_ratings_rater_id', 'agent_ratings', ['rater_id'])

    op.create_table(
        'verification_documents',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('agent_profile_id', sa.String(), sa.ForeignKey('agent_profiles.id', ondelete='CASCADE'), nullable=False),
        sa.Column('document_type', sa.String(), nullable=False),
        sa.Column('file_name', sa.String(), nullable=True),
        sa.Column('cloudinary_public_id', sa.String(), nullable=False, unique=True),
        sa.Column('cloudinary_url', sa.String(), nullable=False),
        sa.Column('uploaded_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_verification_documents_agent_profile_id', 'verification_documents', ['agent_profile_id'])

    op.create_table(
        'properties',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('agent_id', sa.String(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('type', sa.String(), nullable=False),
        sa.Column('listing_type', sa.String(), nullable=False),
        sa.Column('status', sa.String(), nullable=False),
        sa.Column('featured', sa.Boolean(), nullable=False),
        sa.Column('price_amount', sa.Float(), nullable=False),
        sa.Column('price_currency', sa.String(), nullable=False),
        sa.Column('price_type', sa.String(), nullable=False),
        sa.Column('street', sa.String(), nullable=False),
        sa.Column('city', sa.String(), nullable=False),
        sa.Column('state', sa.String(), nullable=False),
        sa.Column('zip_code', sa.String(), nullable=False),
        sa.Column('country', sa.String(), nullable=False),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('bedrooms', sa.Integer(), nullable=False),
        sa.Column('bathrooms', sa.Integer(), nullable=False),
        sa.Column('area_value', sa.Float(), nullable=False),
        sa.Column('area_unit', sa.String(), nullable=False),
        sa.Column('floors', sa.Integer(), nullable=True),
        sa.Column('parking', sa.Integer(), nullable=False),
        sa.Column('furnished', sa.String(), nullable=False),
        sa.Column('year_built', sa.Integer(), nullable=True),
        sa.Column('amenities', sa.JSON(), nullable=False),
        sa.Column('tags', sa.JSON(), nullable=False),
        sa.Column('seo_title', sa.String(), nullable=True),
        sa.Column('seo_description', sa.String(), nullable=True),
        sa.Column('contact_phone', sa.String(), nullable=False),
        sa.Column('contact_email', sa.String(), nullable=True),
        sa.Column('contact_whatsapp', sa.String(), nullable=True),
        sa.Column('is_verified', sa.Boolean(), nullable=False),
        sa.Column('views', sa.Integer(), nullable=False),
        sa.Column('impressions', sa.Integer(), nullable=False),
        sa.Column('clicks', sa.Integer(), nullable=False),
        sa.Column('saves', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_properties_agent_id', 'properties', ['agent_id'])
    op.create_index('ix_properties_type', 'properties', ['type'])
    op.create_index('ix_properties_listing_type', 'properties', ['listing_type'])
    op.create_index('ix_properties_status', 'properties', ['status'])
    op.create_index('ix_properties_price_amount', 'properties', ['price_amount'])
    op.create_index('ix_properties_city', 'properties', ['city'])
    op.create_index('ix_properties_created_at', 'properties', ['created_at'])
    op.create_index('idx_properties_city_state', 'properties', ['city', 'state'])
    op.create_index('idx_properties_type_listing', 'properties', ['type', 'listing_type'])
    op.create_index('idx_properties_status_featured', 'properties', ['status', 'featured'])

    op.create_table(
        'property_images',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('property_id', sa.String(), sa.ForeignKey('properties.id', ondelete='CASCADE'), nullable=False),
        sa.Column('public_id', sa.String(), nullable=False),
        sa.Column('url', sa.String(), nullable=False),
        sa.Column('caption', sa.String(), nullable=True),
        sa.Column('is_primary', sa.Boolean(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
    )
    op.create_index('ix_property_images_property_id', 'property_images', ['property_id'])

    op.create_table(
        'property_inquiries',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('property_id', sa.String(), sa.ForeignKey('properties.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.String(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_property_inquiries_property_id', 'property_inquiries', ['property_id'])
    op.create_index('ix_property_inquiries_user_id', 'property_inquiries', ['user_id'])
    op.create_index('ix_property_inquiries_created_at', 'property_inquiries', ['created_at'])

    op.create_table(
        'contacts',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('name', sa.String(length=50), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('subject', sa.String(length=100), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('type', sa.String(), nullable=False),
        sa.Column('status', sa.String(), nullable=False),
        sa.Column('priority', sa.String(), nullable=False),
        sa.Column('source', sa.String(), nullable=False),
        sa.Column('assigned_to_id', sa.String(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('is_read', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_contacts_email', 'contacts', ['email'])
    op.create_index('ix_contacts_type', 'contacts', ['type'])
    op.create_index('ix_contacts_status', 'contacts', ['status'])
    op.create_index('ix_contacts_priority', 'contacts', ['priority'])
    op.create_index('ix_contacts_assigned_to_id', 'contacts', ['assigned_to_id'])
    op.create_index('ix_contacts_created_at', 'contacts', ['created_at'])
    op.create_index('idx_contacts_status_priority', 'contacts', ['status', 'priority'])

    op.create_table(
        'contact_notes',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('contact_id', sa.String(), sa.ForeignKey('contacts.id', ondelete='CASCADE'), nullable=False),
        sa.Column('note', sa.Text(), nullable=False),
        sa.Column('added_by_id', sa.String(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('added_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_contact_notes_contact_id', 'contact_notes', ['contact_id'])


def downgrade() -> None:
    op.drop_table('contact_notes')
    op.drop_table('contacts')
    op.drop_table('property_inquiries')
    op.drop_table('property_images')
    op.drop_table('properties')
    op.drop_table('verification_documents')
    op.drop_table('agent_ratings')
    op.drop_table('agent_profiles')
    op.drop_table('users')
