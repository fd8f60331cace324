"""initial school website schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    ]


def upgrade():
    op.create_table(
        'user',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(length=120), nullable=False, unique=True),
        sa.Column('password_hash', sa.String(length=256), nullable=True),
        sa.Column('name', sa.String(length=64), nullable=False),
        sa.Column('is_admin', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_table(
        'user_activity',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('user.id', ondelete='SET NULL'), nullable=True),
        sa.Column('activity_type', sa.String(length=50), nullable=False),
        sa.Column('description', sa.String(length=255), nullable=False),
        sa.Column('ip_address', sa.String(length=45), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_table(
        'category',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('slug', sa.String(length=255), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_category_slug', 'category', ['slug'], unique=True)
    op.create_table(
        'article',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('author_id', sa.Integer(), sa.ForeignKey('user.id'), nullable=True),
        sa.Column('category_id', sa.Integer(), sa.ForeignKey('category.id'), nullable=True),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('slug', sa.String(length=255), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('thumbnail', sa.String(length=255), nullable=True),
        sa.Column('is_published', sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_index('ix_article_slug', 'article', ['slug'], unique=True)
    op.create_table(
        'major',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('slug', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('icon', sa.String(length=255), nullable=True),
        sa.Column('preview_image', sa.String(length=255), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_major_slug', 'major', ['slug'], unique=True)
    for table, title_column in (('extracurricular', 'name'), ('achievement', 'title')):
        op.create_table(
            table,
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column(title_column, sa.String(length=255), nullable=False),
            sa.Column('description', sa.Text(), nullable=False),
            sa.Column('thumbnail', sa.String(length=255), nullable=True),
            sa.Column('category', sa.String(length=20), nullable=False),
            *_timestamps(),
        )
        op.create_index(f'ix_{table}_category', table, ['category'])
    op.create_table(
        'banner',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('image', sa.String(length=255), nullable=False),
        sa.Column('link', sa.String(length=255), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('order', sa.Integer(), nullable=False, server_default='0'),
        *_timestamps(),
    )
    op.create_table(
        'gallery',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('slug', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_gallery_slug', 'gallery', ['slug'], unique=True)
    op.create_table(
        'gallery_images',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('gallery_id', sa.Integer(), sa.ForeignKey('gallery.id', ondelete='CASCADE'), nullable=False),
        sa.Column('image', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_table(
        'employee',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('position', sa.String(length=255), nullable=False),
        sa.Column('category', sa.String(length=20), nullable=False),
        sa.Column('image', sa.String(length=255), nullable=True),
        sa.Column('display_order', sa.Integer(), nullable=False, server_default='5'),
        *_timestamps(),
    )
    op.create_index('ix_employee_category', 'employee', ['category'])
    op.create_table(
        'facility',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('slug', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('image', sa.String(length=255), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_facility_slug', 'facility', ['slug'], unique=True)
    op.create_table(
        'school_profiles',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('type', sa.String(length=30), nullable=False, unique=True),
        sa.Column('title', sa.String(length=255), nullable=True),
        sa.Column('content', sa.Text(), nullable=True),
        sa.Column('data', sa.JSON(), nullable=True),
        sa.Column('main_image', sa.String(length=255), nullable=True),
        sa.Column('order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_table(
        'setting',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('school_name', sa.String(length=255), nullable=True),
        sa.Column('logo', sa.String(length=255), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('email', sa.String(length=120), nullable=True),
        sa.Column('maps', sa.Text(), nullable=True),
        sa.Column('facebook', sa.String(length=255), nullable=True),
        sa.Column('instagram', sa.String(length=255), nullable=True),
        sa.Column('twitter', sa.String(length=255), nullable=True),
        sa.Column('youtube', sa.String(length=255), nullable=True),
        *_timestamps(),
    )


def downgrade():
    for table in ('setting', 'school_profiles', 'facility', 'employee', 'gallery_images',
                  'gallery', 'banner', 'achievement', 'extracurricular', 'major',
                  'article', 'category', 'user_activity', 'user'):
        op.drop_table(table)
