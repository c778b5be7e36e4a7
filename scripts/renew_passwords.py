"""
Name: Password Maintenance Script

Responsibilities:
  - Re-derive every user's regular password (--mode renew)
  - Reset every active user to the bootstrap password (--mode bulk-reset)
  - Run against the configured row store (PostgreSQL via DATABASE_URL)
"""

from __future__ import annotations

import argparse
import json
import sys
import uuid

from journal_auth.container import build_components
from journal_auth.context import clear_context, set_request_context
from journal_auth.crosscutting.config import Settings
from journal_auth.infrastructure.db.pool import close_pool, open_pool
from journal_auth.infrastructure.row_store import PostgresRowStore

_MODES = ("renew", "bulk-reset")


def _parse_args(argv: list[str]) -> argparse.Namespace:
    if argv and argv[0] == "--":
        argv = argv[1:]
    parser = argparse.ArgumentParser(
        description="Bulk password maintenance for the trading journal."
    )
    parser.add_argument(
        "--mode",
        required=True,
        choices=_MODES,
        help="renew: derived passwords; bulk-reset: bootstrap password + forced change",
    )
    parser.add_argument(
        "--yes",
        action="store_true",
        help="Skip the confirmation prompt",
    )
    return parser.parse_args(argv)


def _confirm(mode: str) -> None:
    answer = input(f"Run '{mode}' over every user row? [y/N]: ").strip().lower()
    if answer not in {"y", "yes"}:
        raise SystemExit("Aborted.")


def _require_postgres(settings: Settings) -> None:
    if settings.storage_backend != "postgres" or not settings.database_url:
        raise SystemExit(
            "STORAGE_BACKEND=postgres and DATABASE_URL are required to run maintenance."
        )


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    settings = Settings()
    _require_postgres(settings)
    if not args.yes:
        _confirm(args.mode)

    set_request_context(request_id=f"maintenance-{uuid.uuid4()}")
    pool = open_pool(settings)
    try:
        components = build_components(settings, PostgresRowStore(pool))
        if args.mode == "renew":
            result = components.maintenance.renew_all_passwords()
        else:
            result = components.maintenance.bulk_password_reset()
    finally:
        close_pool()
        clear_context()

    print(json.dumps(result.to_dict(), indent=2))
    return 0 if result.ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
