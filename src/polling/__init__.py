"""Polling Package - scheduled fetch, validate and relay.

Modules:
    errors: Error taxonomy shared by every stage
    fetcher: Validated GET against the source URL
    scheduler: Recurring interval trigger running on a background thread
    service: PollingService tying the cycle and the trigger together

Usage:
    >>> from polling.service import PollingService
    >>> service = PollingService(METRICS_SCHEMA, create_metrics_message, config)
    >>> service.start()
"""
from .errors import (
    ConfigurationError,
    DeliveryError,
    FetchError,
    PollingError,
    ValidationError,
)

__all__ = [
    "ConfigurationError",
    "DeliveryError",
    "FetchError",
    "PollingError",
    "ValidationError",
]
