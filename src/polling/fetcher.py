"""
Validated Fetch.

Reads the source URL and gates the response through a schema. The outcome is
always returned as a FetchResult, never raised: callers branch on ``ok``
instead of catching exceptions.

Failure kinds:
    FetchError: network error, timeout, non-2xx status or a non-JSON body
    ValidationError: a JSON body that the schema rejected
"""
import logging
from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar, Union

import requests

from polling.errors import FetchError, ValidationError
from schema.validators import Schema

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_BODY_LENGTH = 500


@dataclass
class FetchResult(Generic[T]):
    """Tagged outcome of one fetch: a typed value or a single error."""
    value: Optional[T] = None
    error: Optional[Union[FetchError, ValidationError]] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _truncate(text: str) -> str:
    if len(text) <= MAX_BODY_LENGTH:
        return text
    return text[:MAX_BODY_LENGTH] + "..."


class ValidatedFetcher(Generic[T]):
    """GET a URL and validate the JSON response.

    Attributes:
        url: Source URL
        schema: Validator turning the raw JSON into a typed value
        timeout: Seconds before the request is abandoned
    """

    def __init__(
        self,
        url: str,
        schema: Schema[T],
        timeout: float = 10
    ):
        self.url = url
        self.schema = schema
        self.timeout = timeout

    def _get_json(self) -> Any:
        """Perform the GET request.

        Raises:
            FetchError: On any transport-level failure
        """
        try:
            response = requests.get(self.url, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            raise FetchError(f"Error fetching data: request timed out after {self.timeout}s ({e})") from e
        except requests.exceptions.ConnectionError as e:
            raise FetchError(f"Error fetching data: network error: {e}") from e
        except requests.exceptions.RequestException as e:
            raise FetchError(f"Error fetching data: {e}") from e

        if not response.ok:
            body = _truncate(response.text or "")
            logger.error(f"Status: {response.status_code}")
            logger.error(f"Data: {body}")
            raise FetchError(
                f"Error fetching data: HTTP {response.status_code} {response.reason or ''}".rstrip()
                + (f" - {body}" if body else ""),
                status_code=response.status_code,
                body=body
            )

        try:
            return response.json()
        except (ValueError, RecursionError) as e:
            body = _truncate(response.text or "")
            raise FetchError(
                f"Error fetching data: response is not valid JSON ({e})",
                status_code=response.status_code,
                body=body
            ) from e

    def fetch(self) -> FetchResult[T]:
        """Fetch and validate the source payload.

        Returns:
            FetchResult holding either the validated value or the
            FetchError / ValidationError that stopped it
        """
        logger.info(f"Fetching data from: {self.url}")
        try:
            data = self._get_json()
        except FetchError as e:
            logger.error(str(e))
            return FetchResult(error=e)

        result = self.schema.validate(data)
        if not result.ok:
            error = ValidationError(result.issues)
            logger.error(str(error))
            return FetchResult(error=error)

        return FetchResult(value=result.value)
