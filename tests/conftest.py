"""
Name: Pytest Configuration and Shared Fixtures

Responsibilities:
  - Configure test environment (in-memory storage, no .env)
  - Provide seeded row stores and fully wired components
  - Provide a fake reset notifier

Collaborators:
  - pytest: Test framework
  - journal_auth.container.build_components
  - journal_auth.infrastructure.row_store.InMemoryRowStore

Notes:
  - Fixtures are function-scoped: every test gets a fresh store
  - Components are built from an explicit Settings; the cached container
    singletons are never touched here
"""

import hashlib
import os
import sys
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("STORAGE_BACKEND", "memory")

from journal_auth.crosscutting import config as app_config  # noqa: E402

app_config.Settings.model_config["env_file"] = None

from journal_auth.container import AuthComponents, build_components  # noqa: E402
from journal_auth.crosscutting.config import Settings  # noqa: E402
from journal_auth.domain.entities import UserRecord  # noqa: E402
from journal_auth.infrastructure.row_store import InMemoryRowStore  # noqa: E402

USERS_TABLE = "user"
TOKENS_TABLE = "tokens"


def pytest_configure(config) -> None:
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )


def sha256_hex(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def user_row(
    employee_id: str,
    email: str,
    *,
    password: str | None = None,
    password_hash: str | None = None,
    full_name: str = "Test User",
    role: str = "user",
    status: object = 1,
    require_password_change: object = False,
    is_temporary_password: object = False,
) -> dict:
    """R: Fila cruda de la tabla de usuarios."""
    return {
        "employee_id": employee_id,
        "full_name": full_name,
        "email": email,
        "role": role,
        "status": status,
        "password_hash": password_hash
        if password_hash is not None
        else sha256_hex(password or ""),
        "require_password_change": require_password_change,
        "is_temporary_password": is_temporary_password,
    }


class FakeResetNotifier:
    def __init__(self, *, fail: bool = False):
        self.fail = fail
        self.sent: list[UserRecord] = []

    def notify_reset(self, user: UserRecord) -> None:
        if self.fail:
            raise ConnectionError("mail relay unavailable")
        self.sent.append(user)


# ============================================================================
# Settings / stores / components
# ============================================================================


@pytest.fixture
def settings() -> Settings:
    return Settings(app_env="test", storage_backend="memory", log_json=False)


@pytest.fixture
def seed_rows() -> list[dict]:
    return [
        user_row("E001", "e001@co.com", password="correctpw", full_name="Somchai"),
        user_row(
            "A001",
            "admin@co.com",
            password="adminpass1",
            full_name="Admin",
            role="admin",
        ),
        user_row("E002", "e002@co.com", password="otherpass", full_name="Malee"),
        user_row("E009", "gone@co.com", password="inactive1", status=0),
    ]


@pytest.fixture
def rows(seed_rows: list[dict]) -> InMemoryRowStore:
    return InMemoryRowStore(seed={USERS_TABLE: seed_rows})


@pytest.fixture
def notifier() -> FakeResetNotifier:
    return FakeResetNotifier()


@pytest.fixture
def components(
    settings: Settings, rows: InMemoryRowStore, notifier: FakeResetNotifier
) -> AuthComponents:
    return build_components(settings, rows, notifier=notifier)
