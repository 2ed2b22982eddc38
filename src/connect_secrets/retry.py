"""
Retry logic with exponential backoff for a whole resolution attempt.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from connect_secrets.errors import RetriesExhaustedError

logger = logging.getLogger(__name__)


class RetryOrchestrator:
    """
    Runs an attempt callable until it succeeds or ``max_tries`` is reached.

    The attempt is retried from scratch each time; it is never resumed.
    Delay before attempt k (k >= 2) is ``base_delay * 2 ** (k - 2)``.
    """

    def __init__(
        self,
        attempt: Callable[[], Awaitable[None]],
        max_tries: int = 5,
        base_delay: float = 1.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """
        Args:
            attempt: Async callable performing one full attempt
            max_tries: Maximum number of attempts (at least 1)
            base_delay: Delay before the second attempt, in seconds
            sleep: Awaitable sleep, replaceable in tests
        """
        if max_tries < 1:
            raise ValueError("max_tries must be at least 1")
        self.attempt = attempt
        self.max_tries = max_tries
        self.base_delay = base_delay
        self._sleep = sleep

    def delay_before(self, attempt_number: int) -> float:
        """Seconds to wait before ``attempt_number`` (1-based)."""
        if attempt_number < 2:
            return 0.0
        return self.base_delay * (2 ** (attempt_number - 2))

    async def run(self) -> None:
        """
        Run the attempt with retries.

        Raises:
            RetriesExhaustedError: After ``max_tries`` failed attempts
        """
        last_exception: Optional[Exception] = None

        for attempt_number in range(1, self.max_tries + 1):
            if attempt_number > 1:
                delay = self.delay_before(attempt_number)
                logger.info(f"Retrying in {delay:.0f}s (attempt {attempt_number}/{self.max_tries})")
                await self._sleep(delay)

            try:
                await self.attempt()
                return
            except RetriesExhaustedError:
                raise
            except Exception as e:
                last_exception = e
                logger.warning(f"Attempt {attempt_number}/{self.max_tries} failed: {e}")

        logger.error(f"All {self.max_tries} attempts failed")
        raise RetriesExhaustedError(self.max_tries, last_exception)
