"""
Centralized JSON Schema Loading Module.

This module is responsible for loading JSON schema files from disk and
exposing them as module-level constants for use throughout the application.

Design Principles:
    1. Load Once: Schemas are loaded at module import time, not on every use
    2. Fail Fast: Missing or invalid schemas cause immediate import failure
    3. Clear Errors: File location and parse errors are clearly reported

File Location:
    Schemas are expected to be in the same directory as this module
    (src/schema/). The path is resolved using __file__ so it works
    regardless of the current working directory.
"""
import json
from pathlib import Path
from typing import Dict, Any

SCHEMA_DIR = Path(__file__).parent


def _load_schema(schema_filename: str) -> Dict[str, Any]:
    """
    Load a JSON schema file from the schema directory.

    Args:
        schema_filename: Name of the JSON schema file (e.g., "metrics_payload_schema.json")

    Returns:
        Parsed JSON schema as a dictionary, ready for use with jsonschema library

    Raises:
        FileNotFoundError: If the schema file doesn't exist at the expected location.
        json.JSONDecodeError: If the schema file exists but contains invalid JSON.
            The error message names the file and the parse position.

    Example:
        >>> schema = _load_schema("metrics_payload_schema.json")
        >>> schema["$schema"]
        "http://json-schema.org/draft-07/schema#"
    """
    schema_path = SCHEMA_DIR / schema_filename

    if not schema_path.exists():
        raise FileNotFoundError(
            f"Schema file not found: {schema_path}. "
            f"Expected location: {SCHEMA_DIR}"
        )

    try:
        with open(schema_path, "r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise json.JSONDecodeError(
            f"Invalid JSON in schema file {schema_filename}: {e.msg}",
            e.doc,
            e.pos
        ) from e


# Active user metrics payload returned by the polled endpoint.
# Counts are accepted as numbers or numeric strings and coerced later.
METRICS_PAYLOAD_SCHEMA = _load_schema("metrics_payload_schema.json")


def get_metrics_payload_schema() -> Dict[str, Any]:
    """
    Get the metrics payload JSON schema.

    Returns the same object as the METRICS_PAYLOAD_SCHEMA constant; useful for
    dynamic schema selection and for patching in tests.

    Example:
        >>> schema = get_metrics_payload_schema()
        >>> "daily_active_users" in schema["required"]
        True
    """
    return METRICS_PAYLOAD_SCHEMA
