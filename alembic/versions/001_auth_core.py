"""
============================================================
TARJETA CRC (Class / Responsibilities / Collaborators)
============================================================
Class: 001_auth_core (Alembic Migration)

Responsibilities:
  - Crear la tabla de usuarios ("user") con hash y flags de rotación.
  - Crear la tabla de tokens de sesión ("tokens").
  - row_id (BIGSERIAL) da orden de inserción estable para el RowStore.

Collaborators:
  - PostgreSQL 14+ (TEXT, BOOLEAN, TIMESTAMPTZ)
  - infrastructure.row_store.postgres.PostgresRowStore

Notes:
  - Sin UNIQUE en employee_id/email/user_id: el row store no promete
    unicidad; "un token por usuario" lo mantiene TokenStore.
  - Índices no únicos sobre btrim(col), la forma que usa update/delete_where.
  - Los nombres de tabla deben coincidir con USERS_TABLE / TOKENS_TABLE.
============================================================
"""

from typing import Sequence, Union

from alembic import op

# ============================================================
# Alembic identifiers
# ============================================================
revision: str = "001_auth_core"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# ============================================================
# Constants
# ============================================================
_USERS = '"user"'
_TOKENS = '"tokens"'


def upgrade() -> None:
    """Crea tablas de usuarios y tokens."""
    op.execute(
        f"""
        CREATE TABLE {_USERS} (
            row_id                  BIGSERIAL PRIMARY KEY,
            employee_id             TEXT NOT NULL,
            full_name               TEXT NOT NULL DEFAULT '',
            email                   TEXT NOT NULL,
            role                    TEXT NOT NULL DEFAULT 'user',
            status                  SMALLINT NOT NULL DEFAULT 1,
            password_hash           TEXT NOT NULL DEFAULT '',
            require_password_change BOOLEAN NOT NULL DEFAULT FALSE,
            is_temporary_password   BOOLEAN NOT NULL DEFAULT FALSE
        )
    """
    )
    op.execute(f"CREATE INDEX ix_user_employee_id ON {_USERS} (btrim(employee_id))")

    op.execute(
        f"""
        CREATE TABLE {_TOKENS} (
            row_id     BIGSERIAL PRIMARY KEY,
            user_id    TEXT NOT NULL,
            token      TEXT NOT NULL,
            issued_at  TIMESTAMPTZ NOT NULL DEFAULT now()
        )
    """
    )
    op.execute(f"CREATE INDEX ix_tokens_user_id ON {_TOKENS} (btrim(user_id))")
    op.execute(f"CREATE INDEX ix_tokens_token ON {_TOKENS} (btrim(token))")


def downgrade() -> None:
    """Elimina tablas de tokens y usuarios."""
    op.execute(f"DROP TABLE IF EXISTS {_TOKENS}")
    op.execute(f"DROP TABLE IF EXISTS {_USERS}")
