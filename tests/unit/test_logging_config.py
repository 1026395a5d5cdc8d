"""Tests for tfplan_commenter/utils/logging_config.py."""

import json

import pytest
import structlog

from tfplan_commenter.utils.logging_config import configure_logging


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()


def test_json_output_on_stderr(capsys):
    configure_logging("INFO")

    structlog.get_logger("test").info("comment_created", issue_number=42)

    captured = capsys.readouterr()
    assert captured.out == ""
    record = json.loads(captured.err.strip())
    assert record["event"] == "comment_created"
    assert record["issue_number"] == 42
    assert record["level"] == "info"
    assert "timestamp" in record


def test_level_filters_lower_events(capsys):
    configure_logging("warning")

    structlog.get_logger("test").info("comments_fetched", count=3)

    assert capsys.readouterr().err == ""
