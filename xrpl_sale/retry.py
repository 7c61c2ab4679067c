"""Retry policy with exponential backoff for API requests."""

import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

import requests
import structlog

from xrpl_sale.errors import TransportError
from xrpl_sale.metrics import RETRIES_TOTAL

logger = structlog.get_logger(__name__)

RETRYABLE_STATUS_CODES = frozenset({408, 429})


def is_retryable_status(status_code: int) -> bool:
    """Return True for 408, 429 and any 5xx status."""
    return status_code in RETRYABLE_STATUS_CODES or 500 <= status_code < 600


RETRYABLE_EXCEPTIONS = (
    requests.exceptions.ConnectionError,
    requests.exceptions.Timeout,
    # connection dropped while the body was being read
    requests.exceptions.ChunkedEncodingError,
    requests.exceptions.ContentDecodingError,
)


def is_retryable_exception(error: BaseException) -> bool:
    """Return True for network-level failures, timeouts included."""
    return isinstance(error, RETRYABLE_EXCEPTIONS)


@dataclass
class RetryState:
    """Progress of a single logical request through the retry policy."""

    attempts: int = 0
    last_error: Optional[BaseException] = None
    last_status: Optional[int] = None
    delays: List[float] = field(default_factory=list)

    @property
    def total_delay(self) -> float:
        return sum(self.delays)

    def reset(self) -> None:
        self.attempts = 0
        self.last_error = None
        self.last_status = None
        self.delays = []


class RetryPolicy:
    """Runs an HTTP attempt up to ``max_retries + 1`` times.

    The policy keeps no state between calls to :meth:`execute`, so one
    instance can be shared by concurrent requests.
    """

    def __init__(
        self,
        max_retries: int = 3,
        base_delay: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize the retry policy.

        Args:
            max_retries: Maximum number of retries after the first attempt
            base_delay: Delay before the first retry in seconds
            sleep: Function used to wait between attempts
        """
        if max_retries < 0:
            raise ValueError("max_retries must be non-negative")
        if base_delay < 0:
            raise ValueError("base_delay must be non-negative")
        self.max_retries = max_retries
        self.base_delay = base_delay
        self._sleep = sleep

    def compute_delay(self, retry_number: int) -> float:
        """Delay before retry ``retry_number`` (1-indexed).

        Args:
            retry_number: Retry count, not counting the first attempt

        Returns:
            ``base_delay * 2 ** (retry_number - 1)`` seconds
        """
        if retry_number < 1:
            raise ValueError("retry_number starts at 1")
        return self.base_delay * (2 ** (retry_number - 1))

    def execute(
        self,
        attempt: Callable[[], requests.Response],
        state: Optional[RetryState] = None,
    ) -> requests.Response:
        """Run ``attempt`` until it succeeds, fails terminally or retries run out.

        Args:
            attempt: Performs one HTTP call and returns its response
            state: Optional state object to record attempts and delays in;
                it is reset before the first attempt

        Returns:
            The response of the last attempt. It may carry a non-2xx status;
            classifying that into an error is up to the caller.

        Raises:
            TransportError: If the last attempt failed at the network level,
                or an attempt failed with a non-retryable request exception
        """
        if state is None:
            state = RetryState()
        else:
            state.reset()
        max_attempts = self.max_retries + 1

        while True:
            state.attempts += 1
            try:
                response = attempt()
            except requests.exceptions.RequestException as e:
                state.last_error = e
                state.last_status = None
                if not is_retryable_exception(e):
                    raise TransportError(f"HTTP request failed: {e}") from e
                if state.attempts >= max_attempts:
                    raise TransportError(
                        f"HTTP request failed after {state.attempts} attempts: {e}"
                    ) from e
                reason = "timeout" if isinstance(e, requests.exceptions.Timeout) else "network"
            else:
                state.last_error = None
                state.last_status = response.status_code
                if not is_retryable_status(response.status_code):
                    return response
                if state.attempts >= max_attempts:
                    return response
                reason = str(response.status_code)

            delay = self.compute_delay(state.attempts)
            state.delays.append(delay)
            RETRIES_TOTAL.labels(reason=reason).inc()
            logger.warning(
                "request_retry_scheduled",
                attempt=state.attempts,
                max_attempts=max_attempts,
                reason=reason,
                delay=delay,
            )
            self._sleep(delay)
