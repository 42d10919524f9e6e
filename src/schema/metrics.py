"""
Active User Metrics Payload.

Typed representation of the payload served by the metrics endpoint, and the
ready-made validator that turns raw JSON into it. Counts arrive either as
numbers or as numeric strings (``"1234"``); both are coerced to numbers.
"""
from dataclasses import dataclass
from typing import Any, Dict, Union

from .schema import METRICS_PAYLOAD_SCHEMA
from .validators import JsonSchemaValidator

Number = Union[int, float]


def to_number(value: Any) -> Number:
    """Coerce a number or numeric string to int (when integral) or float.

    Raises:
        ValueError: If a string is not numeric
        TypeError: If the value is neither a number nor a string
    """
    if isinstance(value, bool):
        raise TypeError(f"Expected number, received boolean {value!r}")
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        text = value.strip()
        number = float(text)
        return int(number) if number.is_integer() and "." not in text else number
    raise TypeError(f"Expected number, received {type(value).__name__}")


@dataclass(frozen=True)
class UserMetrics:
    id: str
    daily_active_users: Number
    weekly_active_users: Number
    monthly_active_users: Number

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "UserMetrics":
        return cls(
            id=payload["id"],
            daily_active_users=to_number(payload["daily_active_users"]),
            weekly_active_users=to_number(payload["weekly_active_users"]),
            monthly_active_users=to_number(payload["monthly_active_users"]),
        )


METRICS_SCHEMA: JsonSchemaValidator[UserMetrics] = JsonSchemaValidator(
    METRICS_PAYLOAD_SCHEMA,
    coerce=UserMetrics.from_payload
)
