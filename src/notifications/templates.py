"""
Notification templates.

A template turns a validated payload and a footer timestamp into a webhook
body. Templates are pure functions; the polling service passes them through
untouched and never looks inside the result.
"""
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

from schema.metrics import UserMetrics

METRICS_TITLE = "📊 Active User Metrics"
METRICS_COLOR = 0x3498DB


def format_number(num: Union[int, float]) -> str:
    """Format a count with en-US thousands separators.

    Example:
        >>> format_number(1234)
        '1,234'
        >>> format_number(1234.5)
        '1,234.5'
    """
    if isinstance(num, float) and not num.is_integer():
        return f"{num:,.3f}".rstrip("0").rstrip(".")
    return f"{int(num):,}"


def _metric_field(name: str, value: Union[int, float]) -> Dict[str, Any]:
    return {
        "name": name,
        "value": f"**{format_number(value)}**",
        "inline": True
    }


def create_metrics_message(
    data: UserMetrics,
    timestamp: str,
    thumbnail_url: Optional[str] = None
) -> Dict[str, Any]:
    """Build a Discord embed summarizing active user metrics.

    Args:
        data: Validated metrics payload
        timestamp: Formatted timestamp shown in the footer
        thumbnail_url: Optional image shown beside the embed

    Returns:
        Discord webhook body with a single embed
    """
    embed: Dict[str, Any] = {
        "title": METRICS_TITLE,
        "color": METRICS_COLOR,
        "fields": [
            _metric_field("Daily Active Users", data.daily_active_users),
            _metric_field("Weekly Active Users", data.weekly_active_users),
            _metric_field("Monthly Active Users", data.monthly_active_users),
        ],
    }
    if thumbnail_url:
        embed["thumbnail"] = {"url": thumbnail_url}
    embed["footer"] = {"text": f"📡 Metrics updated • {timestamp}"}
    embed["timestamp"] = datetime.now(timezone.utc).isoformat()

    return {"embeds": [embed]}
