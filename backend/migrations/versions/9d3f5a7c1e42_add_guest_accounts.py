"""add nickname and is_guest to users for guest accounts

Revision ID: 9d3f5a7c1e42
Revises: 4b7e1c2d9a10
Create Date: 2025-10-02 18:30:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '9d3f5a7c1e42'
down_revision = '4b7e1c2d9a10'
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    cols = {c['name'] for c in insp.get_columns('users')}
    indexes = {ix['name'] for ix in insp.get_indexes('users')}
    with op.batch_alter_table('users', table_kwargs={'sqlite_autoincrement': True}) as batch_op:
        if 'nickname' not in cols:
            batch_op.add_column(sa.Column('nickname', sa.String(length=32), nullable=True))
        if 'is_guest' not in cols:
            batch_op.add_column(sa.Column('is_guest', sa.Boolean(), nullable=False, server_default=sa.false()))
        if 'ix_users_is_guest' not in indexes:
            batch_op.create_index('ix_users_is_guest', ['is_guest'])


def downgrade():
    with op.batch_alter_table('users', table_kwargs={'sqlite_autoincrement': True}) as batch_op:
        batch_op.drop_index('ix_users_is_guest')
        batch_op.drop_column('is_guest')
        batch_op.drop_column('nickname')
