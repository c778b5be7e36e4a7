"""
Name: Composition Root Tests

Responsibilities:
  - Ensure build_components wires one shared row store through every component
  - Ensure runtime singletons honor the configured backend
"""

import logging

import pytest

from journal_auth import container
from journal_auth.infrastructure.notifications import LoggingResetNotifier
from journal_auth.infrastructure.row_store import InMemoryRowStore

pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def _fresh_container():
    container.reset_container()
    yield
    container.reset_container()


def test_components_share_the_row_store(components, rows):
    token = components.auth_service.login("E001", "correctpw").token

    assert components.rows is rows
    assert components.access_gate.authenticate_request(token).user_id == "E001"


def test_runtime_singletons_use_memory_in_tests():
    assert isinstance(container.get_row_store(), InMemoryRowStore)
    assert container.get_auth_service() is container.get_components().auth_service
    assert container.get_password_maintenance() is container.get_components().maintenance
    assert container.get_access_gate() is container.get_components().access_gate


def test_default_notifier_logs_without_password(settings, rows, caplog):
    components = container.build_components(settings, rows)

    with caplog.at_level(logging.INFO, logger="journal_auth"):
        components.auth_service.reset_password("e001@co.com")

    notices = [r for r in caplog.records if getattr(r, "recipient", None)]
    assert notices
    assert notices[0].recipient == "e001@co.com"
    assert "Init4321" not in caplog.text


def test_logging_notifier_is_a_reset_notifier(components):
    user = components.credentials.find_by_employee_id("E001")
    LoggingResetNotifier().notify_reset(user)
