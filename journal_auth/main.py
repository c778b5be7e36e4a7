"""
Name: ASGI Entrypoint (journal_auth.main)

Responsibilities:
  - Expose the FastAPI app for ASGI servers (journal_auth.main:app)

Notes/Constraints:
  - No business logic here; wiring lives in journal_auth.api.main
"""

from journal_auth.api.main import create_app

app = create_app()

__all__ = ["app"]
