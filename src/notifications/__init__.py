"""Notifications Package - webhook delivery and message templates."""
from .discord import DiscordWebhookNotifier, format_timestamp
from .templates import create_metrics_message, format_number

__all__ = [
    "DiscordWebhookNotifier",
    "format_timestamp",
    "create_metrics_message",
    "format_number",
]
