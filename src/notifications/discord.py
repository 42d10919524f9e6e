"""
Discord Webhook Notification Client.

This module delivers relay notifications to a Discord-style webhook that
accepts JSON "embeds":
- Success notifications built by a caller-supplied template
- Error notifications for failed polling cycles

Delivery is best effort. A failed POST is logged and reported through the
boolean return value; it is never retried and never escalated, because the
webhook is the only channel there is.

Usage:
    >>> notifier = DiscordWebhookNotifier("https://discord.com/api/webhooks/1/abc")
    >>> notifier.notify_error("Error fetching data: HTTP 500")
    True

API Reference:
    Discord webhooks: https://discord.com/developers/docs/resources/webhook
"""
import logging
from datetime import datetime
from typing import Any, Callable, Dict, Optional, TypeVar

import requests

from polling.errors import DeliveryError


logger = logging.getLogger(__name__)

T = TypeVar("T")

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_timestamp(moment: Optional[datetime] = None) -> str:
    """Format a timestamp the way notification footers show it."""
    return (moment or datetime.now()).strftime(TIMESTAMP_FORMAT)


class DiscordWebhookNotifier:
    """Client for POSTing embed notifications to a webhook.

    Attributes:
        webhook_url: Destination webhook URL
        timeout: Seconds before a POST is abandoned

    Example:
        >>> notifier = DiscordWebhookNotifier(config.webhook_url, timeout=config.request_timeout)
        >>> notifier.notify_success(metrics, create_metrics_message)
    """

    ERROR_TITLE = "❌ Polling Error"
    ERROR_COLOR = 0xFF0000

    # Discord embed field length limits
    MAX_DESCRIPTION_LENGTH = 4096
    MAX_RESPONSE_BODY_LENGTH = 500

    def __init__(
        self,
        webhook_url: str,
        timeout: float = 10
    ):
        self.webhook_url = webhook_url
        self.timeout = timeout

    def send(self, payload: Dict[str, Any]) -> None:
        """POST a JSON payload to the webhook.

        Args:
            payload: JSON-serializable notification body

        Raises:
            DeliveryError: If the request fails or the webhook answers with a
                non-success status
        """
        try:
            response = requests.post(self.webhook_url, json=payload, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise DeliveryError(f"Webhook request failed: {e}") from e

        if not response.ok:
            body = (response.text or "")[:self.MAX_RESPONSE_BODY_LENGTH]
            raise DeliveryError(
                f"Webhook returned HTTP {response.status_code}: {body}",
                status_code=response.status_code
            )

    def _deliver(self, payload: Dict[str, Any], kind: str) -> bool:
        try:
            self.send(payload)
        except DeliveryError as e:
            logger.error(f"Error sending {kind} to Discord: {e}")
            return False

        logger.info(f"{kind.capitalize()} sent to Discord successfully")
        return True

    def notify_success(self, data: T, template: Callable[[T, str], Dict[str, Any]]) -> bool:
        """Render a validated payload with the template and deliver it.

        Args:
            data: Validated payload
            template: Callable ``(data, timestamp) -> payload`` building the body

        Returns:
            True if the webhook accepted the notification, False otherwise
        """
        payload = template(data, format_timestamp())
        return self._deliver(payload, "data")

    def build_error_payload(self, message: str, timestamp: Optional[str] = None) -> Dict[str, Any]:
        """Build the fixed-shape error embed."""
        embed = {
            "title": self.ERROR_TITLE,
            "color": self.ERROR_COLOR,
            "description": message[:self.MAX_DESCRIPTION_LENGTH],
            "footer": {
                "text": f"Polling • {timestamp or format_timestamp()}"
            }
        }
        return {"embeds": [embed]}

    def notify_error(self, message: str) -> bool:
        """Deliver an error notification.

        Args:
            message: Human-readable description of what went wrong

        Returns:
            True if the webhook accepted the notification, False otherwise
        """
        return self._deliver(self.build_error_payload(message), "error")
