from typing import Any

from httpx import TimeoutException
from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)
from tenacity.wait import wait_base

from .models.errors import WSHTTPError


def is_retryable_exception(exception: BaseException) -> bool:
    return isinstance(exception, TimeoutException)


def is_retryable_status_code(exception: BaseException) -> bool:
    return isinstance(exception, WSHTTPError) and 500 <= exception.status_code < 600


class RequestRetrier:
    """Retry policy applied by a request around each attempt.

    Subclass and override ``should_retry`` or ``wait`` to change the policy.
    The default retries timeouts and 5xx answers with exponential backoff.
    """

    def __init__(
        self,
        max_attempts: int = 3,
        *,
        multiplier: float = 1,
        min_wait: float = 1,
        max_wait: float = 10,
    ) -> None:
        self.max_attempts = max_attempts
        self.multiplier = multiplier
        self.min_wait = min_wait
        self.max_wait = max_wait

    def should_retry(self, exception: BaseException) -> bool:
        return is_retryable_exception(exception) or is_retryable_status_code(
            exception
        )

    def wait(self) -> wait_base:
        return wait_exponential(
            multiplier=self.multiplier, min=self.min_wait, max=self.max_wait
        )

    def retrying(self, **kwargs: Any) -> AsyncRetrying:
        return AsyncRetrying(
            retry=retry_if_exception(self.should_retry),
            wait=self.wait(),
            stop=stop_after_attempt(self.max_attempts),
            reraise=True,
            **kwargs,
        )
