"""initial horizon schema

Revision ID: 7f3a2c91d4e0
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""
import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = '7f3a2c91d4e0'
down_revision = None
branch_labels = None
depends_on = None

notification_type = sa.Enum('like', 'repost', 'reply', 'follow', name='notification_type')


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('username', sa.String(length=50), nullable=False),
        sa.Column('email', sa.String(length=254), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('display_name', sa.String(length=100), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('avatar_url', sa.String(length=512), nullable=True),
        sa.Column('location', sa.String(length=100), nullable=True),
        sa.Column('website', sa.String(length=255), nullable=True),
        sa.Column('is_private', sa.Boolean(), nullable=False),
        sa.Column('email_verified', sa.Boolean(), nullable=False),
        sa.Column('last_login', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_users')),
        sa.UniqueConstraint('email', name='uq_users_email'),
        sa.UniqueConstraint('username', name='uq_users_username'),
    )

    op.create_table(
        'posts',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('is_private', sa.Boolean(), nullable=False),
        sa.Column('reply_to_post_id', sa.Uuid(), nullable=True),
        sa.Column('allow_replies', sa.Boolean(), nullable=False),
        sa.Column('media_urls', sa.JSON(), nullable=False),
        sa.Column('like_count', sa.Integer(), nullable=False),
        sa.Column('repost_count', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('like_count >= 0', name=op.f('ck_posts_like_count_non_negative')),
        sa.CheckConstraint('repost_count >= 0', name=op.f('ck_posts_repost_count_non_negative')),
        sa.CheckConstraint(
            'reply_to_post_id IS NULL OR reply_to_post_id <> id', name=op.f('ck_posts_not_own_parent')
        ),
        sa.ForeignKeyConstraint(
            ['user_id'], ['users.id'], name=op.f('fk_posts_user_id_users'), ondelete='CASCADE'
        ),
        sa.ForeignKeyConstraint(
            ['reply_to_post_id'], ['posts.id'], name=op.f('fk_posts_reply_to_post_id_posts'),
            ondelete='SET NULL',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_posts')),
    )
    op.create_index('ix_posts_user_id_created_at', 'posts', ['user_id', 'created_at'])
    op.create_index('ix_posts_reply_to_post_id', 'posts', ['reply_to_post_id'])

    for ledger in ('likes', 'bookmarks'):
        op.create_table(
            ledger,
            sa.Column('user_id', sa.Uuid(), nullable=False),
            sa.Column('post_id', sa.Uuid(), nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
            sa.ForeignKeyConstraint(
                ['user_id'], ['users.id'], name=op.f(f'fk_{ledger}_user_id_users'), ondelete='CASCADE'
            ),
            sa.ForeignKeyConstraint(
                ['post_id'], ['posts.id'], name=op.f(f'fk_{ledger}_post_id_posts'), ondelete='CASCADE'
            ),
            sa.PrimaryKeyConstraint('user_id', 'post_id', name=op.f(f'pk_{ledger}')),
        )
        op.create_index(f'ix_{ledger}_post_id', ledger, ['post_id'])

    op.create_table(
        'follows',
        sa.Column('follower_id', sa.Uuid(), nullable=False),
        sa.Column('followed_id', sa.Uuid(), nullable=False),
        sa.Column('is_accepted', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint('follower_id <> followed_id', name=op.f('ck_follows_no_self_follow')),
        sa.ForeignKeyConstraint(
            ['follower_id'], ['users.id'], name=op.f('fk_follows_follower_id_users'), ondelete='CASCADE'
        ),
        sa.ForeignKeyConstraint(
            ['followed_id'], ['users.id'], name=op.f('fk_follows_followed_id_users'), ondelete='CASCADE'
        ),
        sa.PrimaryKeyConstraint('follower_id', 'followed_id', name=op.f('pk_follows')),
    )
    op.create_index('ix_follows_followed_id', 'follows', ['followed_id'])

    op.create_table(
        'notifications',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('actor_id', sa.Uuid(), nullable=False),
        sa.Column('post_id', sa.Uuid(), nullable=True),
        sa.Column('parent_post_id', sa.Uuid(), nullable=True),
        sa.Column('type', notification_type, nullable=False),
        sa.Column('read', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ['user_id'], ['users.id'], name=op.f('fk_notifications_user_id_users'), ondelete='CASCADE'
        ),
        sa.ForeignKeyConstraint(
            ['actor_id'], ['users.id'], name=op.f('fk_notifications_actor_id_users'), ondelete='CASCADE'
        ),
        sa.ForeignKeyConstraint(
            ['post_id'], ['posts.id'], name=op.f('fk_notifications_post_id_posts'), ondelete='CASCADE'
        ),
        sa.ForeignKeyConstraint(
            ['parent_post_id'], ['posts.id'], name=op.f('fk_notifications_parent_post_id_posts'),
            ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_notifications')),
    )
    op.create_index('ix_notifications_user_id_read', 'notifications', ['user_id', 'read'])


def downgrade():
    op.drop_index('ix_notifications_user_id_read', table_name='notifications')
    op.drop_table('notifications')
    op.drop_index('ix_follows_followed_id', table_name='follows')
    op.drop_table('follows')
    for ledger in ('bookmarks', 'likes'):
        op.drop_index(f'ix_{ledger}_post_id', table_name=ledger)
        op.drop_table(ledger)
    op.drop_index('ix_posts_reply_to_post_id', table_name='posts')
    op.drop_index('ix_posts_user_id_created_at', table_name='posts')
    op.drop_table('posts')
    op.drop_table('users')
    notification_type.drop(op.get_bind(), checkfirst=True)
