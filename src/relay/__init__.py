"""Webhook Relay Package.

Entry point for the relay: polls a metrics endpoint on an interval, validates
the response and posts a formatted notification to a Discord webhook.

Exported Functions:
    main: Entry point for the webhook-relay console command
"""
from .relay import main

__all__ = ["main"]
