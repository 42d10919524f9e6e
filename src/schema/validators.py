"""
Schema Validators.

A schema, as far as the polling core is concerned, is anything with a
``validate(data)`` method returning a ValidationResult: either a typed value
or the list of field issues that prevented one. The core never inspects the
schema format itself, so payload types are chosen entirely by the caller.

JsonSchemaValidator is the stock implementation. It checks the payload with a
jsonschema Draft 7 validator, reports every failing field rather than only the
first, and optionally converts the raw payload into a typed value.

Example:
    >>> validator = JsonSchemaValidator(METRICS_PAYLOAD_SCHEMA, coerce=UserMetrics.from_payload)
    >>> result = validator.validate({"id": "u1"})
    >>> result.ok
    False
    >>> [issue.message for issue in result.issues]
    ["'daily_active_users' is a required property", ...]
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generic, List, Optional, Protocol, TypeVar

from jsonschema import Draft7Validator

logger = logging.getLogger(__name__)

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)

ROOT_PATH = "(root)"


@dataclass(frozen=True)
class ValidationIssue:
    """A single failing field: dotted path plus a human-readable message."""
    path: str
    message: str


@dataclass
class ValidationResult(Generic[T]):
    """Outcome of validating one payload.

    Exactly one of ``value`` / ``issues`` is meaningful: when ``issues`` is
    empty the payload passed and ``value`` holds the typed result.
    """
    value: Optional[T] = None
    issues: List[ValidationIssue] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.issues

    @classmethod
    def success(cls, value: T) -> "ValidationResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, issues: List[ValidationIssue]) -> "ValidationResult[T]":
        return cls(issues=list(issues))


class Schema(Protocol[T_co]):
    """Validator capability consumed by the polling core."""

    def validate(self, data: Any) -> "ValidationResult[T_co]":
        ...


def _format_path(path) -> str:
    parts = [str(p) for p in path]
    return ".".join(parts) if parts else ROOT_PATH


class JsonSchemaValidator(Generic[T]):
    """Validate payloads against a JSON Schema (Draft 7).

    Attributes:
        schema: The JSON schema dictionary
        coerce: Optional callable turning a valid raw payload into a typed
            value. If omitted the raw payload itself is the result.
    """

    def __init__(self, schema: Dict[str, Any], coerce: Optional[Callable[[Any], T]] = None):
        Draft7Validator.check_schema(schema)
        self.schema = schema
        self.coerce = coerce
        self._validator = Draft7Validator(schema)

    def validate(self, data: Any) -> ValidationResult[T]:
        errors = sorted(
            self._validator.iter_errors(data),
            key=lambda e: [str(p) for p in e.absolute_path]
        )
        if errors:
            issues = [
                ValidationIssue(path=_format_path(e.absolute_path), message=e.message)
                for e in errors
            ]
            logger.debug(f"Payload failed schema validation with {len(issues)} issue(s)")
            return ValidationResult.failure(issues)

        if self.coerce is None:
            return ValidationResult.success(data)

        try:
            return ValidationResult.success(self.coerce(data))
        except (TypeError, ValueError) as e:
            # The schema accepted something the converter could not handle
            return ValidationResult.failure([ValidationIssue(path=ROOT_PATH, message=str(e))])
