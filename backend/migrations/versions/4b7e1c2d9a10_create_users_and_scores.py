"""create users and scores tables

Revision ID: 4b7e1c2d9a10
Revises:
Create Date: 2025-09-14 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '4b7e1c2d9a10'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    existing_tables = set(insp.get_table_names())

    if 'users' not in existing_tables:
        op.create_table(
            'users',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('username', sa.String(length=64), nullable=False),
            sa.Column('password', sa.String(length=256), nullable=True),
            sa.Column('avatar', sa.Text(), nullable=True),
            sa.Column('coins', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('ip_address', sa.String(length=64), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sqlite_autoincrement=True,
        )
        op.create_index('ix_users_username', 'users', ['username'], unique=True)
        op.create_index('ix_users_created_at', 'users', ['created_at'])

    if 'scores' not in existing_tables:
        op.create_table(
            'scores',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('user_id', sa.Integer(), nullable=False),
            sa.Column('game', sa.String(length=64), nullable=False),
            sa.Column('score', sa.Integer(), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=False),
        )
        op.create_index('ix_scores_user_id', 'scores', ['user_id'])
        op.create_index('ix_scores_game', 'scores', ['game'])
        op.create_index('ix_scores_created_at', 'scores', ['created_at'])


def downgrade():
    op.drop_table('scores')
    op.drop_table('users')
