"""
Name: Application Configuration (Settings)

Responsibilities:
  - Centralized, typed configuration using pydantic-settings
  - Validate environment variables at startup
  - Provide one immutable snapshot that every component receives at construction

Collaborators:
  - container.py: builds the row store, stores and services from Settings
  - crosscutting/logger.py: reads log level / format
  - api/main.py: pool lifecycle and startup log

Constraints:
  - No business logic, pure configuration
  - Settings is frozen: components never mutate it after construction

Notes:
  - get_settings() is cached for the composition root only; tests build
    Settings(...) directly and pass it in
"""

from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_STORAGE_BACKENDS = {"memory", "postgres"}
_TEST_ENVS = {"test", "testing", "ci"}

DEFAULT_BOOTSTRAP_PASSWORD = "Init4321"
DEFAULT_PUBLIC_ACTIONS = "login,resetPassword,changePassword,getAccounts,getAssets"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        app_env: Application environment (development/test/production)
        storage_backend: memory | postgres
        database_url: PostgreSQL connection string (required for postgres)
        db_pool_min_size: Minimum pool connections (default: 1)
        db_pool_max_size: Maximum pool connections (default: 5)
        db_statement_timeout_ms: Per-connection statement timeout
        users_table: Table holding credential rows (default: "user")
        tokens_table: Table holding session tokens (default: "tokens")
        bootstrap_password: Fixed temporary password handed out on reset
        min_password_length: Minimum length accepted by change_password
        admin_role: Role literal that bypasses account ownership
        public_actions: Comma-separated actions that skip the token gate
        log_level: Logging level (default: INFO)
        log_json: Emit JSON logs (default: True)
    """

    # Environment
    app_env: str = "development"

    # Storage
    storage_backend: str = "memory"
    database_url: str = ""

    # Database - Connection Pool
    db_pool_min_size: int = 1
    db_pool_max_size: int = 5
    db_statement_timeout_ms: int = 10000  # 10 seconds

    # Tables
    users_table: str = "user"
    tokens_table: str = "tokens"

    # Credentials
    bootstrap_password: str = DEFAULT_BOOTSTRAP_PASSWORD
    min_password_length: int = 8
    admin_role: str = "admin"

    # Access gate
    public_actions: str = DEFAULT_PUBLIC_ACTIONS

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    @field_validator("storage_backend")
    @classmethod
    def storage_backend_valid(cls, v: str) -> str:
        backend = (v or "memory").strip().lower()
        if backend not in _STORAGE_BACKENDS:
            raise ValueError("storage_backend must be memory or postgres")
        return backend

    @field_validator("min_password_length")
    @classmethod
    def min_password_length_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("min_password_length must be >= 1")
        return v

    @field_validator("users_table", "tokens_table")
    @classmethod
    def table_name_not_blank(cls, v: str) -> str:
        name = (v or "").strip()
        if not name:
            raise ValueError("table names must not be blank")
        return name

    @field_validator("bootstrap_password")
    @classmethod
    def bootstrap_password_not_blank(cls, v: str) -> str:
        if not v:
            raise ValueError("bootstrap_password must not be empty")
        return v

    @model_validator(mode="after")
    def validate_pool_sizes(self):
        if self.db_pool_min_size < 1:
            raise ValueError("db_pool_min_size must be >= 1")
        if self.db_pool_min_size > self.db_pool_max_size:
            raise ValueError(
                f"db_pool_min_size ({self.db_pool_min_size}) must be <= "
                f"db_pool_max_size ({self.db_pool_max_size})"
            )
        return self

    @model_validator(mode="after")
    def validate_storage_requirements(self):
        if self.storage_backend == "postgres" and not self.database_url.strip():
            raise ValueError("DATABASE_URL is required when STORAGE_BACKEND=postgres")
        return self

    def get_public_actions(self) -> frozenset[str]:
        """Parse comma-separated public actions into a set."""
        return frozenset(
            action.strip()
            for action in self.public_actions.split(",")
            if action.strip()
        )

    def uses_default_bootstrap_password(self) -> bool:
        return self.bootstrap_password == DEFAULT_BOOTSTRAP_PASSWORD

    def is_production(self) -> bool:
        return self.app_env.strip().lower() == "production"

    def is_test_env(self) -> bool:
        return self.app_env.strip().lower() in _TEST_ENVS

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore unknown env vars
        frozen=True,
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get singleton Settings instance.

    Raises:
        ValidationError: If env vars are invalid
    """
    return Settings()
