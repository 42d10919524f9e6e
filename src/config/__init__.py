"""
Configuration Module for the Webhook Relay.

Settings come from environment variables (optionally seeded from a ``.env``
file by the entry point) with an optional ``config.yml`` underneath them.
Environment variables always win over values from the file.

Required settings:
    POLL_URL: URL to poll data from
    POLL_INTERVAL: How often to poll, in minutes (positive integer)
    DISCORD_WEBHOOK_URL: Discord webhook URL to send notifications to
        (or DISCORD_WEBHOOK_URL_FILE pointing at a Docker secret)

Optional settings:
    REQUEST_TIMEOUT: Per-request timeout in seconds (default: 10)
    THUMBNAIL: Image URL shown in the metrics notification
    POLL_SKIP_IF_RUNNING: Skip a tick while the previous cycle is in flight

Every invalid or missing field is collected before anything is reported, so
a single ConfigurationError lists all of them.

Usage:
    >>> from config import load_config
    >>> config = load_config()
    >>> config.interval
    5
"""
import os
import yaml
import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Any, List, Mapping, Optional
from urllib.parse import urlparse

from polling.errors import ConfigurationError
from schema.validators import ValidationIssue


logger = logging.getLogger(__name__)

DEFAULT_REQUEST_TIMEOUT = 10.0

# Longest interval a threading wait can sleep, in minutes
MAX_POLL_INTERVAL = int(threading.TIMEOUT_MAX // 60)

ENV_POLL_URL = "POLL_URL"
ENV_POLL_INTERVAL = "POLL_INTERVAL"
ENV_WEBHOOK_URL = "DISCORD_WEBHOOK_URL"
ENV_WEBHOOK_URL_FILE = "DISCORD_WEBHOOK_URL_FILE"
ENV_REQUEST_TIMEOUT = "REQUEST_TIMEOUT"
ENV_THUMBNAIL = "THUMBNAIL"
ENV_SKIP_IF_RUNNING = "POLL_SKIP_IF_RUNNING"

# config.yml key for each environment variable
FILE_KEYS = {
    ENV_POLL_URL: "poll_url",
    ENV_POLL_INTERVAL: "poll_interval",
    ENV_WEBHOOK_URL: "discord_webhook_url",
    ENV_REQUEST_TIMEOUT: "request_timeout",
    ENV_THUMBNAIL: "thumbnail_url",
    ENV_SKIP_IF_RUNNING: "skip_if_running",
}

TRUE_VALUES = ("true", "1", "yes", "on")


@dataclass(frozen=True)
class PollingConfig:
    """Immutable settings for one polling service.

    Attributes:
        url: Source URL fetched on every cycle
        interval: Minutes between cycles
        webhook_url: Destination webhook for success and error notifications
        request_timeout: Seconds before an outbound HTTP call is abandoned
        thumbnail_url: Optional image shown in success notifications
        skip_if_running: Skip a tick while the previous cycle is still running
    """
    url: str
    interval: int
    webhook_url: str
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    thumbnail_url: Optional[str] = None
    skip_if_running: bool = False


def find_config_file() -> Optional[str]:
    """Look for config.yml in the current directory and its parents."""
    current = Path.cwd()
    for parent in [current] + list(current.parents):
        candidate = parent / "config.yml"
        if candidate.exists():
            return str(candidate)
    return None


def load_config_file(config_path: Optional[str] = None) -> Dict[str, Any]:
    """Load optional settings from a config.yml file.

    Args:
        config_path: Path to config.yml. If None, looks in the current
                    directory and parent directories.

    Returns:
        Dictionary of settings from the file, or an empty dictionary when no
        usable file exists. A missing or unparseable file is not fatal: the
        environment alone may still provide a complete configuration.
    """
    if config_path is None:
        config_path = find_config_file()

    if config_path is None:
        logger.debug("config.yml not found, using environment only")
        return {}

    try:
        with open(config_path, "r") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        logger.warning(f"Configuration file not found: {config_path}")
        return {}
    except yaml.YAMLError as e:
        logger.error(f"Error parsing configuration file: {e}")
        return {}

    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning("Configuration root must be a mapping, ignoring config.yml")
        return {}

    logger.info(f"Loaded configuration from {config_path}")
    return data


def read_secret_file(filepath: str) -> Optional[str]:
    """Read a Docker secret from a file.

    Docker secrets are mounted as files in the /run/secrets/ directory.

    Args:
        filepath: Path to the secret file

    Returns:
        Content of the secret file (stripped of whitespace), or None if the
        file doesn't exist or cannot be read

    Example:
        >>> webhook = read_secret_file("/run/secrets/discord_webhook_url")
    """
    try:
        with open(filepath, "r") as f:
            return f.read().strip()
    except FileNotFoundError:
        logger.debug(f"Secret file not found: {filepath}")
        return None
    except OSError as e:
        logger.error(f"Error reading secret file {filepath}: {e}")
        return None


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _check_url(name: str, value: Any, issues: List[ValidationIssue]) -> Optional[str]:
    if _is_blank(value):
        issues.append(ValidationIssue(name, "Required"))
        return None
    text = str(value).strip()
    parsed = urlparse(text)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        issues.append(ValidationIssue(name, f"Invalid url: {text!r}"))
        return None
    return text


def _check_interval(name: str, value: Any, issues: List[ValidationIssue]) -> Optional[int]:
    if _is_blank(value):
        issues.append(ValidationIssue(name, "Required"))
        return None
    if isinstance(value, bool):
        issues.append(ValidationIssue(name, f"Expected integer, received {value!r}"))
        return None
    try:
        number = float(str(value).strip())
    except ValueError:
        issues.append(ValidationIssue(name, f"Expected number, received {value!r}"))
        return None
    if not number.is_integer():
        issues.append(ValidationIssue(name, f"Expected integer, received {value!r}"))
        return None
    if number <= 0:
        issues.append(ValidationIssue(name, "Number must be greater than 0"))
        return None
    if number > MAX_POLL_INTERVAL:
        issues.append(ValidationIssue(name, f"Number must be less than or equal to {MAX_POLL_INTERVAL}"))
        return None
    return int(number)


def _check_timeout(name: str, value: Any, issues: List[ValidationIssue]) -> float:
    if _is_blank(value):
        return DEFAULT_REQUEST_TIMEOUT
    try:
        seconds = float(str(value).strip())
    except ValueError:
        issues.append(ValidationIssue(name, f"Expected number, received {value!r}"))
        return DEFAULT_REQUEST_TIMEOUT
    if seconds <= 0:
        issues.append(ValidationIssue(name, "Number must be greater than 0"))
        return DEFAULT_REQUEST_TIMEOUT
    return seconds


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if _is_blank(value):
        return False
    return str(value).strip().lower() in TRUE_VALUES


def load_config(
    environ: Optional[Mapping[str, str]] = None,
    config_path: Optional[str] = None
) -> PollingConfig:
    """Load and validate the relay configuration.

    Args:
        environ: Mapping of environment variables (defaults to os.environ)
        config_path: Explicit config.yml path. If None the file is searched
                    for in the current directory and its parents.

    Returns:
        Validated PollingConfig

    Raises:
        ConfigurationError: If any required value is missing or invalid. The
            error lists every offending field, not just the first.

    Example:
        >>> load_config({"POLL_URL": "https://api.example.com/stats",
        ...              "POLL_INTERVAL": "5",
        ...              "DISCORD_WEBHOOK_URL": "https://discord.com/api/webhooks/1/abc"})
        PollingConfig(url='https://api.example.com/stats', interval=5, ...)
    """
    if environ is None:
        environ = os.environ

    file_values = load_config_file(config_path)

    def setting(env_name: str) -> Any:
        value = environ.get(env_name)
        if _is_blank(value):
            value = file_values.get(FILE_KEYS[env_name])
        return value

    webhook_value = setting(ENV_WEBHOOK_URL)
    if _is_blank(webhook_value) and environ.get(ENV_WEBHOOK_URL_FILE):
        webhook_value = read_secret_file(environ[ENV_WEBHOOK_URL_FILE])

    issues: List[ValidationIssue] = []
    url = _check_url(ENV_POLL_URL, setting(ENV_POLL_URL), issues)
    interval = _check_interval(ENV_POLL_INTERVAL, setting(ENV_POLL_INTERVAL), issues)
    webhook_url = _check_url(ENV_WEBHOOK_URL, webhook_value, issues)
    request_timeout = _check_timeout(ENV_REQUEST_TIMEOUT, setting(ENV_REQUEST_TIMEOUT), issues)

    thumbnail_url = setting(ENV_THUMBNAIL)
    if _is_blank(thumbnail_url):
        thumbnail_url = None
    else:
        thumbnail_url = _check_url(ENV_THUMBNAIL, thumbnail_url, issues)

    if issues:
        for issue in issues:
            logger.error(f"Invalid configuration - {issue.path}: {issue.message}")
        raise ConfigurationError(issues)

    return PollingConfig(
        url=url,
        interval=interval,
        webhook_url=webhook_url,
        request_timeout=request_timeout,
        thumbnail_url=thumbnail_url,
        skip_if_running=_parse_bool(setting(ENV_SKIP_IF_RUNNING)),
    )
