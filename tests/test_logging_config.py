"""Tests for structlog configuration."""

import json

import pytest
import structlog

from admin_provisioning import configure_logging


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()


def test_json_output(capsys):
    configure_logging(json=True)

    structlog.get_logger("test").info("Profile updated", user_id="user-1", role="admin")

    line = capsys.readouterr().out.strip().splitlines()[-1]
    event = json.loads(line)
    assert event["event"] == "Profile updated"
    assert event["user_id"] == "user-1"
    assert event["level"] == "info"
    assert "timestamp" in event


def test_json_output_keeps_accents(capsys):
    configure_logging(json=True)

    structlog.get_logger("test").error("Échec", error="déjà pris")

    assert "déjà pris" in capsys.readouterr().out


def test_console_output(capsys):
    configure_logging(json=False)

    structlog.get_logger("test").warning("Mock providers enabled")

    assert "Mock providers enabled" in capsys.readouterr().out
