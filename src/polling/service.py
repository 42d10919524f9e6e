"""
Polling Service.

Drives the relay: on every tick it fetches the source URL, validates the
response, renders it with the caller's template and POSTs it to the webhook.
Any failure along the way turns into a single error notification on the same
webhook, and the next tick proceeds as normal.

Cycle outline:
    fetch -> validate -> template -> deliver success
      |         |
      +---------+--> deliver error

A failed success delivery is logged only; it never produces an error
notification, so each cycle attempts exactly one delivery.

Concurrency:
    Each cycle runs on its own daemon thread and the trigger never waits for
    it. A slow cycle can therefore still be in flight when the next one
    starts, and notifications may reach the webhook out of order. Setting
    ``skip_if_running`` in the configuration skips ticks instead.
"""
import logging
import threading
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Callable, Dict, Generic, Optional, TypeVar

from notifications.discord import DiscordWebhookNotifier
from polling.fetcher import ValidatedFetcher
from polling.scheduler import IntervalTrigger
from schema.validators import Schema

if TYPE_CHECKING:
    from config import PollingConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")

SECONDS_PER_MINUTE = 60


class PollingService(Generic[T]):
    """
    Periodically relay a validated payload to a webhook.

    The service is generic over the payload type: the schema decides what a
    valid payload is and the template decides what the notification looks
    like. Neither is inspected here.

    Attributes:
        config: Immutable polling configuration
        schema: Validator producing typed payloads
        template_fn: Callable ``(payload, timestamp) -> notification body``
        fetcher: Validated fetch against ``config.url``
        notifier: Webhook client for ``config.webhook_url``

    Example:
        >>> service = PollingService(METRICS_SCHEMA, create_metrics_message, config)
        >>> service.start()
        >>> ...
        >>> service.stop()
    """

    def __init__(
        self,
        schema: Schema[T],
        template_fn: Callable[[T, str], Dict[str, Any]],
        config: "PollingConfig",
    ):
        self.config = config
        self.schema = schema
        self.template_fn = template_fn
        self.fetcher: ValidatedFetcher[T] = ValidatedFetcher(
            config.url, schema, timeout=config.request_timeout
        )
        self.notifier = DiscordWebhookNotifier(config.webhook_url, timeout=config.request_timeout)
        self._trigger: Optional[IntervalTrigger] = None
        self._lock = threading.Lock()
        self._in_flight = 0

        logger.info(
            f"PollingService initialized: "
            f"url={config.url}, "
            f"interval={config.interval}min, "
            f"timeout={config.request_timeout}s, "
            f"skip_if_running={config.skip_if_running}"
        )

    @property
    def is_running(self) -> bool:
        return self._trigger is not None

    @property
    def in_flight(self) -> int:
        """Number of cycles currently executing."""
        with self._lock:
            return self._in_flight

    def start(self) -> None:
        """Run one cycle immediately, then one every ``config.interval`` minutes.

        Calling start() while already running logs a warning and does nothing,
        so a service never owns two triggers.
        """
        with self._lock:
            if self._trigger is not None:
                logger.warning("PollingService is already running")
                return
            trigger = IntervalTrigger(
                self.config.interval * SECONDS_PER_MINUTE,
                self._dispatch_cycle,
                name="polling-trigger"
            )
            self._trigger = trigger

        # Cold start: poll right away instead of waiting a full interval
        self._dispatch_cycle()
        trigger.start()
        logger.info(f"Polling started! Monitoring every {self.config.interval} minutes...")

    def stop(self) -> None:
        """Cancel future ticks. In-flight cycles are left to finish on their own."""
        with self._lock:
            trigger, self._trigger = self._trigger, None

        if trigger is None:
            logger.debug("PollingService is not running")
            return

        trigger.cancel()
        logger.info("Polling stopped")

    def _dispatch_cycle(self) -> None:
        """Hand one cycle to its own thread without waiting for it."""
        with self._lock:
            if self.config.skip_if_running and self._in_flight > 0:
                logger.warning(
                    f"Previous polling cycle still running ({self._in_flight} in flight), skipping tick"
                )
                return
            self._in_flight += 1

        thread = threading.Thread(target=self._run_tracked_cycle, name="polling-cycle", daemon=True)
        try:
            thread.start()
        except RuntimeError as e:
            logger.error(f"Could not start polling cycle: {e}")
            with self._lock:
                self._in_flight -= 1

    def _run_tracked_cycle(self) -> None:
        try:
            self.run_cycle()
        finally:
            with self._lock:
                self._in_flight -= 1

    def run_cycle(self) -> bool:
        """Perform one fetch-validate-deliver cycle.

        Never raises. Fetch and validation failures, as well as anything the
        template raises, are reported as an error notification.

        Returns:
            True if a success notification was delivered, False otherwise
        """
        logger.info(f"Polling running at {datetime.now(timezone.utc).isoformat()}")

        try:
            result = self.fetcher.fetch()
            if not result.ok:
                logger.error("Failed to fetch valid data")
                self.notifier.notify_error(str(result.error))
                return False

            logger.info(f"Data received: {result.value}")
            return self.notifier.notify_success(result.value, self.template_fn)
        except Exception as e:
            logger.error(f"Unexpected error in polling cycle: {e}", exc_info=True)
            self._report_unexpected_error(e)
            return False

    def _report_unexpected_error(self, error: Exception) -> None:
        try:
            self.notifier.notify_error(f"Polling cycle failed: {error}")
        except Exception as e:
            logger.error(f"Error sending error to Discord: {e}", exc_info=True)
