"""
Unit Tests for Configuration Module.

This test suite validates configuration loading from the environment and
config.yml, and that every invalid field is reported at once.
"""
import os
import pytest
import tempfile
from dataclasses import FrozenInstanceError

from config import (
    DEFAULT_REQUEST_TIMEOUT,
    MAX_POLL_INTERVAL,
    PollingConfig,
    load_config,
    load_config_file,
    read_secret_file,
)
from polling.errors import ConfigurationError


NO_FILE = "/nonexistent/path/config.yml"

VALID_ENV = {
    "POLL_URL": "https://api.example.com/metrics",
    "POLL_INTERVAL": "5",
    "DISCORD_WEBHOOK_URL": "https://discord.com/api/webhooks/123/abc",
}


def _write_temp(content: str, suffix: str = ".yml") -> str:
    with tempfile.NamedTemporaryFile(mode="w", suffix=suffix, delete=False) as f:
        f.write(content)
        return f.name


def test_load_config_from_environment():
    """Test that the three required variables produce a valid config."""
    config = load_config(VALID_ENV, config_path=NO_FILE)

    assert config == PollingConfig(
        url="https://api.example.com/metrics",
        interval=5,
        webhook_url="https://discord.com/api/webhooks/123/abc",
    )
    assert config.request_timeout == DEFAULT_REQUEST_TIMEOUT
    assert config.thumbnail_url is None
    assert config.skip_if_running is False


def test_config_is_immutable():
    """Test that a loaded config cannot be mutated."""
    config = load_config(VALID_ENV, config_path=NO_FILE)

    with pytest.raises(FrozenInstanceError):
        config.interval = 10


def test_optional_settings():
    """Test timeout, thumbnail and skip flag parsing."""
    env = dict(VALID_ENV)
    env.update({
        "REQUEST_TIMEOUT": "2.5",
        "THUMBNAIL": "https://example.com/logo.png",
        "POLL_SKIP_IF_RUNNING": "yes",
    })

    config = load_config(env, config_path=NO_FILE)

    assert config.request_timeout == 2.5
    assert config.thumbnail_url == "https://example.com/logo.png"
    assert config.skip_if_running is True


def test_missing_everything_lists_every_field():
    """Test that all missing required fields appear in one error."""
    with pytest.raises(ConfigurationError) as exc_info:
        load_config({}, config_path=NO_FILE)

    fields = [issue.path for issue in exc_info.value.issues]
    assert fields == ["POLL_URL", "POLL_INTERVAL", "DISCORD_WEBHOOK_URL"]
    message = str(exc_info.value)
    assert "- POLL_URL: Required" in message
    assert "- POLL_INTERVAL: Required" in message
    assert "- DISCORD_WEBHOOK_URL: Required" in message


@pytest.mark.parametrize("interval,expected", [
    ("abc", "Expected number"),
    ("0", "greater than 0"),
    ("-3", "greater than 0"),
    ("1.5", "Expected integer"),
])
def test_invalid_interval(interval, expected):
    """Test that a non-positive or non-integer interval is rejected."""
    env = dict(VALID_ENV, POLL_INTERVAL=interval)

    with pytest.raises(ConfigurationError) as exc_info:
        load_config(env, config_path=NO_FILE)

    assert len(exc_info.value.issues) == 1
    assert exc_info.value.issues[0].path == "POLL_INTERVAL"
    assert expected in exc_info.value.issues[0].message


def test_interval_upper_bound():
    """Test that an interval too long for a thread wait is rejected."""
    config = load_config(dict(VALID_ENV, POLL_INTERVAL=str(MAX_POLL_INTERVAL)), config_path=NO_FILE)
    assert config.interval == MAX_POLL_INTERVAL

    env = dict(VALID_ENV, POLL_INTERVAL="200000000")
    with pytest.raises(ConfigurationError) as exc_info:
        load_config(env, config_path=NO_FILE)

    assert [issue.path for issue in exc_info.value.issues] == ["POLL_INTERVAL"]
    assert "less than or equal to" in exc_info.value.issues[0].message


def test_invalid_urls():
    """Test that malformed URLs are rejected with the field name."""
    env = dict(VALID_ENV, POLL_URL="not a url", DISCORD_WEBHOOK_URL="ftp://example.com/hook")

    with pytest.raises(ConfigurationError) as exc_info:
        load_config(env, config_path=NO_FILE)

    fields = {issue.path for issue in exc_info.value.issues}
    assert fields == {"POLL_URL", "DISCORD_WEBHOOK_URL"}


def test_invalid_request_timeout():
    """Test that a non-numeric timeout is reported."""
    env = dict(VALID_ENV, REQUEST_TIMEOUT="soon")

    with pytest.raises(ConfigurationError) as exc_info:
        load_config(env, config_path=NO_FILE)

    assert exc_info.value.issues[0].path == "REQUEST_TIMEOUT"


def test_load_config_with_explicit_path():
    """Test that config.yml supplies values the environment lacks."""
    temp_path = _write_temp("""
poll_url: https://file.example.com/metrics
poll_interval: 15
discord_webhook_url: https://discord.com/api/webhooks/9/file
request_timeout: 3
""")

    try:
        config = load_config({}, config_path=temp_path)
        assert config.url == "https://file.example.com/metrics"
        assert config.interval == 15
        assert config.webhook_url == "https://discord.com/api/webhooks/9/file"
        assert config.request_timeout == 3.0
    finally:
        os.unlink(temp_path)


def test_environment_overrides_file():
    """Test that environment variables win over config.yml."""
    temp_path = _write_temp("""
poll_url: https://file.example.com/metrics
poll_interval: 15
discord_webhook_url: https://discord.com/api/webhooks/9/file
""")

    try:
        config = load_config({"POLL_INTERVAL": "2"}, config_path=temp_path)
        assert config.interval == 2
        assert config.url == "https://file.example.com/metrics"
    finally:
        os.unlink(temp_path)


def test_load_config_file_not_found():
    """Test loading config when file doesn't exist."""
    assert load_config_file(NO_FILE) == {}


def test_load_config_file_invalid_yaml():
    """Test that a malformed config.yml is ignored."""
    temp_path = _write_temp("poll_url: [unclosed")

    try:
        assert load_config_file(temp_path) == {}
    finally:
        os.unlink(temp_path)


def test_load_config_file_non_mapping_root():
    """Test that a config.yml whose root is not a mapping is ignored."""
    temp_path = _write_temp("- just\n- a list\n")

    try:
        assert load_config_file(temp_path) == {}
    finally:
        os.unlink(temp_path)


def test_webhook_url_from_secret_file():
    """Test that DISCORD_WEBHOOK_URL_FILE is read when the URL is unset."""
    secret_path = _write_temp("https://discord.com/api/webhooks/7/secret\n", suffix="")
    env = {
        "POLL_URL": "https://api.example.com/metrics",
        "POLL_INTERVAL": "5",
        "DISCORD_WEBHOOK_URL_FILE": secret_path,
    }

    try:
        config = load_config(env, config_path=NO_FILE)
        assert config.webhook_url == "https://discord.com/api/webhooks/7/secret"
    finally:
        os.unlink(secret_path)


def test_read_secret_file_success():
    """Test reading a Docker secret file."""
    temp_path = _write_temp("test_secret_value\n", suffix="")

    try:
        assert read_secret_file(temp_path) == "test_secret_value"
    finally:
        os.unlink(temp_path)


def test_read_secret_file_not_found():
    """Test reading a secret file that doesn't exist."""
    assert read_secret_file("/nonexistent/secret/file") is None
