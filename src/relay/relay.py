"""
Relay Entry Point.

This module wires the webhook relay together and runs it until the process
is asked to stop:

1. Configures logging (rotating file plus stdout)
2. Loads ``.env`` and validates the configuration
3. Builds a PollingService for the active user metrics payload
4. Starts polling and blocks until SIGINT or SIGTERM

Environment:
    POLL_URL, POLL_INTERVAL, DISCORD_WEBHOOK_URL: required, see config
    RELAY_DEBUG: set to true/1/yes for DEBUG-level logging

Example:
    $ poetry run webhook-relay
    ... - polling.service - INFO - Polling started! Monitoring every 5 minutes...
"""
import logging
import os
import signal
import sys
import threading
from functools import partial
from logging.handlers import RotatingFileHandler
from typing import Optional

from dotenv import load_dotenv

from config import PollingConfig, load_config
from notifications.templates import create_metrics_message
from polling.errors import ConfigurationError
from polling.service import PollingService
from schema.metrics import METRICS_SCHEMA, UserMetrics

logger = logging.getLogger(__name__)

LOG_FILE = "relay.log"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

REQUIRED_SETTINGS_HELP = (
    "Make sure you have properly configured the environment variables:\n"
    "- POLL_URL: The URL to poll data from\n"
    "- POLL_INTERVAL: How often to poll in minutes\n"
    "- DISCORD_WEBHOOK_URL: Discord webhook URL to send notifications"
)


def configure_logging(debug: bool = False, log_file: Optional[str] = LOG_FILE) -> None:
    """Configure the root logger with a 10MB rotating file and stdout.

    Args:
        debug: Log at DEBUG instead of INFO
        log_file: Path of the rotating log file, or None for stdout only
    """
    log_level = logging.DEBUG if debug else logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT)

    if log_file:
        log_handler = RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=3
        )
        log_handler.setLevel(log_level)
        log_handler.setFormatter(formatter)
        root_logger.addHandler(log_handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)


def build_service(config: PollingConfig) -> PollingService[UserMetrics]:
    """Create the metrics polling service for a configuration."""
    template = partial(create_metrics_message, thumbnail_url=config.thumbnail_url)
    return PollingService(METRICS_SCHEMA, template, config)


def install_signal_handlers(service: PollingService, shutdown: threading.Event) -> None:
    """Stop the service and release ``shutdown`` on SIGINT or SIGTERM."""

    def handle_signal(signum, frame):
        logger.info("Stopping polling service...")
        service.stop()
        shutdown.set()

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)


def main(debug: bool = False) -> None:
    """Run the webhook relay until interrupted.

    Exits with status 1 when the configuration is invalid, after logging
    every offending setting. Exits with status 0 after a clean shutdown.
    """
    load_dotenv()

    if not debug:
        debug = os.environ.get("RELAY_DEBUG", "").lower() in ("true", "1", "yes")
    configure_logging(debug)

    try:
        config = load_config()
    except ConfigurationError as e:
        logger.error(f"Failed to start polling service: {e}")
        logger.error(REQUIRED_SETTINGS_HELP)
        sys.exit(1)

    service = build_service(config)
    shutdown = threading.Event()
    install_signal_handlers(service, shutdown)

    service.start()
    while not shutdown.wait(timeout=1):
        pass
    sys.exit(0)


if __name__ == "__main__":
    main()
