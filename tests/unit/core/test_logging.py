"""Tests for logging configuration and context binding."""

import pytest
import structlog

from stagecms.core.config import Settings
from stagecms.core.logging import (
    LoggingContext,
    add_correlation_id,
    configure_logging,
    get_logger,
    rename_message_field,
)


def test_logging_context_binds_and_unbinds():
    structlog.contextvars.clear_contextvars()

    with LoggingContext(stage_id="stage-1", user_id=None):
        bound = structlog.contextvars.get_contextvars()
        assert bound == {"stage_id": "stage-1"}

    assert structlog.contextvars.get_contextvars() == {}


def test_correlation_id_added_once():
    event = add_correlation_id(None, "info", {"event": "hello"})
    assert event["correlation_id"].startswith("cid_")

    kept = add_correlation_id(None, "info", {"correlation_id": "cid_fixed"})
    assert kept["correlation_id"] == "cid_fixed"


def test_event_renamed_to_message():
    assert rename_message_field(None, "info", {"event": "hello"}) == {"message": "hello"}


@pytest.fixture
def restore_structlog():
    yield
    structlog.reset_defaults()


def test_configure_logging_renders_json_outside_development(restore_structlog):
    configure_logging(Settings(_env_file=None, environment="production", log_format="json"))

    processors = structlog.get_config()["processors"]
    assert isinstance(processors[-1], structlog.processors.JSONRenderer)
    assert rename_message_field in processors


def test_configure_logging_uses_console_in_development(restore_structlog):
    configure_logging(Settings(_env_file=None, environment="development"))

    processors = structlog.get_config()["processors"]
    assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)
    assert get_logger("stagecms.test") is not None
