"""
Pytest configuration and shared fixtures for all tests.

This module provides shared fixtures for the test suite, including:
- A valid PollingConfig
- Fake HTTP responses shaped like requests.Response
- Sample metrics payloads
"""
from unittest.mock import MagicMock

import pytest
import requests

from config import PollingConfig


SOURCE_URL = "https://api.example.com/metrics"
WEBHOOK_URL = "https://discord.com/api/webhooks/123/abc"


def make_response(status_code=200, json_data=None, text=None, reason=None):
    """Build a MagicMock that behaves like a requests.Response."""
    response = MagicMock(spec=requests.Response)
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.reason = reason if reason is not None else ("OK" if response.ok else "Internal Server Error")
    response.text = text if text is not None else ("" if json_data is None else str(json_data))
    if json_data is None:
        response.json.side_effect = requests.exceptions.JSONDecodeError("Expecting value", response.text or "", 0)
    else:
        response.json.return_value = json_data
    return response


@pytest.fixture
def polling_config():
    """A valid configuration pointing at example URLs."""
    return PollingConfig(
        url=SOURCE_URL,
        interval=1,
        webhook_url=WEBHOOK_URL,
        request_timeout=5.0
    )


@pytest.fixture
def valid_metrics_payload():
    """Metrics payload with one count served as a numeric string."""
    return {
        "id": "u1",
        "daily_active_users": "1234",
        "weekly_active_users": 5000,
        "monthly_active_users": 20000,
    }


@pytest.fixture
def response_factory():
    """Factory fixture returning make_response."""
    return make_response
