"""Backoff state for retrying rate-limited requests."""

from dataclasses import dataclass

# Maximum number of attempts for a single request, including the first
MAX_ATTEMPTS = 3

# Delay before the first retry, doubled for each further retry
DEFAULT_BASE_DELAY = 1.0

# Upper bound on any single wait, including server-provided hints
MAX_DELAY = 60.0


@dataclass
class RetryState:
    """Attempt counter and backoff timing for one logical request.

    A fresh state is created per request and discarded once the request
    succeeds or the attempts are exhausted.
    """

    attempt: int = 0
    base_delay: float = DEFAULT_BASE_DELAY
    max_attempts: int = MAX_ATTEMPTS

    def record_attempt(self) -> None:
        """Count an attempt that has just been made."""
        self.attempt += 1

    @property
    def exhausted(self) -> bool:
        """Whether no attempts remain."""
        return self.attempt >= self.max_attempts

    def next_delay(self, retry_after: float | None = None) -> float:
        """Delay before the next attempt.

        Doubles the base delay for every retry already made (1s, 2s, 4s...).
        A server-provided ``Retry-After`` hint is honoured when it asks for
        a longer wait.

        :param retry_after: Seconds from the ``Retry-After`` header, if any.
        :returns: Seconds to wait, capped at ``MAX_DELAY``.
        """
        delay = self.base_delay * (2 ** max(self.attempt - 1, 0))
        if retry_after is not None and retry_after > delay:
            delay = retry_after
        return min(delay, MAX_DELAY)
