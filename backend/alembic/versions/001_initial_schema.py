"""Initial schema: users, albums, photos, stories, shared_links

Revision ID: 001
Revises: 
Create Date: 2026-10-18 10:00:00

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('username', sa.String(100), nullable=False, unique=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'albums',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('location', sa.String(255), nullable=True),
        sa.Column('start_date', sa.DateTime(), nullable=True),
        sa.Column('end_date', sa.DateTime(), nullable=True),
        sa.Column('cover_photo_url', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_albums_user_id', 'albums', ['user_id'])
    op.create_index('idx_albums_user_updated', 'albums', ['user_id', 'updated_at'])

    op.create_table(
        'photos',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('album_id', sa.String(36), sa.ForeignKey('albums.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('url', sa.Text(), nullable=False),
        sa.Column('storage_key', sa.Text(), nullable=True),
        sa.Column('content_type', sa.String(100), nullable=True),
        sa.Column('caption', sa.Text(), nullable=True),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('taken_at', sa.DateTime(), nullable=True),
        sa.Column('uploaded_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('idx_photos_album_uploaded', 'photos', ['album_id', 'uploaded_at'])
    op.create_index('idx_photos_user', 'photos', ['user_id'])

    op.create_table(
        'stories',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('album_id', sa.String(36), sa.ForeignKey('albums.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_stories_album_id', 'stories', ['album_id'])

    op.create_table(
        'shared_links',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('album_id', sa.String(36), sa.ForeignKey('albums.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('token', sa.String(64), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_shared_links_token', 'shared_links', ['token'], unique=True)
    op.create_index('ix_shared_links_album_id', 'shared_links', ['album_id'])


def downgrade() -> None:
    op.drop_table('shared_links')
    op.drop_table('stories')
    op.drop_table('photos')
    op.drop_table('albums')
    op.drop_table('users')
