"""Schema Package - JSON Schema Loading and Payload Validation.

This package loads the JSON schemas used by the relay once at import time
and exposes the validator capability the polling core consumes.

Available Schemas:
    METRICS_PAYLOAD_SCHEMA: JSON Schema for the active user metrics payload.

Validators:
    Schema: Protocol every validator satisfies (``validate(data)``)
    JsonSchemaValidator: jsonschema-backed implementation reporting every issue
    METRICS_SCHEMA: Ready-made validator producing UserMetrics values

Usage:
    from schema import METRICS_SCHEMA
    result = METRICS_SCHEMA.validate(payload)
    if result.ok:
        metrics = result.value

If schema files are missing or contain invalid JSON, the import fails with a
message pointing at the expected file location.
"""
from .schema import METRICS_PAYLOAD_SCHEMA, get_metrics_payload_schema
from .validators import JsonSchemaValidator, Schema, ValidationIssue, ValidationResult
from .metrics import METRICS_SCHEMA, UserMetrics

__all__ = [
    "METRICS_PAYLOAD_SCHEMA",
    "get_metrics_payload_schema",
    "JsonSchemaValidator",
    "Schema",
    "ValidationIssue",
    "ValidationResult",
    "METRICS_SCHEMA",
    "UserMetrics",
]
