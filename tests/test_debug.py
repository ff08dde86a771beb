# ABOUTME: Tests for debug mode configuration
# ABOUTME: Validates DEBUG env var enables verbose output

import os
from importlib import reload
from unittest.mock import patch

import pytest

from surfability import config, debug


@pytest.fixture(autouse=True)
def restore_modules():
    yield
    reload(config)
    reload(debug)


def test_debug_mode_disabled_by_default():
    """Debug mode should be disabled when env var not set"""
    # Stop a local .env from turning it back on during reload
    with patch("dotenv.load_dotenv"), patch.dict(os.environ, {}, clear=True):
        reload(config)
        assert config.Config.DEBUG is False


def test_debug_mode_enabled_when_env_true():
    with patch.dict(os.environ, {"DEBUG": "true"}):
        reload(config)
        assert config.Config.DEBUG is True


def test_debug_mode_enabled_case_insensitive():
    """DEBUG=TRUE (uppercase) should also work"""
    with patch.dict(os.environ, {"DEBUG": "TRUE"}):
        reload(config)
        assert config.Config.DEBUG is True


def test_debug_log_outputs_when_enabled(capsys):
    with patch.dict(os.environ, {"DEBUG": "true"}):
        reload(config)
        reload(debug)
        debug.debug_log("test message", "BUOY")

    assert capsys.readouterr().out == "[DEBUG][BUOY] test message\n"


def test_debug_log_silent_when_disabled(capsys):
    with patch.dict(os.environ, {"DEBUG": "false"}):
        reload(config)
        reload(debug)
        debug.debug_log("test message")

    assert capsys.readouterr().out == ""
