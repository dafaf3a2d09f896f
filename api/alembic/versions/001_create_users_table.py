"""create_users_table

Revision ID: 001
Revises:
Create Date: 2026-10-17 10:12:41.118204

Crea la tabla sincronizada con sus columnas de sistema. El nombre de la
tabla y de la clave se toman de SYNC_TABLE y SYNC_ID_COLUMN.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

from usersync.core.config import settings


# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _index_name(table_name: str, key_column: str) -> str:
    # Mismo nombre que genera index=True en UserModel
    return f'ix_{table_name}_{key_column}'


def upgrade() -> None:
    """Upgrade schema."""
    table_name = settings.SYNC_TABLE
    key_column = settings.SYNC_ID_COLUMN
    bind = op.get_bind()
    inspector = sa.inspect(bind)

    if not inspector.has_table(table_name):
        op.create_table(table_name,
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(key_column, sa.String(length=255), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=True),
        sa.PrimaryKeyConstraint('id')
        )
        op.create_index(_index_name(table_name, key_column), table_name, [key_column], unique=True)


def downgrade() -> None:
    """Downgrade schema."""
    table_name = settings.SYNC_TABLE
    index_name = _index_name(table_name, settings.SYNC_ID_COLUMN)
    bind = op.get_bind()
    inspector = sa.inspect(bind)

    if inspector.has_table(table_name):
        indexes = [idx['name'] for idx in inspector.get_indexes(table_name)]
        if index_name in indexes:
            op.drop_index(index_name, table_name=table_name)
        op.drop_table(table_name)
