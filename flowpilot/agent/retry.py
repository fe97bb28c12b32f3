"""
Retry configuration for calls made to external collaborators.

The agent loop itself never retries; retries apply only to backend calls such
as a language model answering a decision request.
"""

from typing import Callable, Optional, Tuple, Type

from loguru import logger
from pydantic import BaseModel, Field
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)


def _log_retry(retry_state: RetryCallState) -> None:
    error = retry_state.outcome.exception() if retry_state.outcome else None
    wait = retry_state.next_action.sleep if retry_state.next_action else 0
    logger.warning(
        f"Attempt {retry_state.attempt_number} failed ({type(error).__name__}: {error}), "
        f"retrying in {wait:.1f}s"
    )


class RetryConfig(BaseModel):
    """
    Retry policy for backend calls, built on tenacity.

    Attributes:
        max_attempts: Maximum number of attempts, including the first call
        wait_multiplier: Multiplier for exponential backoff
        wait_min: Minimum wait time in seconds
        wait_max: Maximum wait time in seconds
        retry_exceptions: Exception types worth another attempt; anything else
            fails on the first occurrence
    """

    max_attempts: int = Field(default=3, ge=1, description="Maximum number of attempts")
    wait_multiplier: float = Field(
        default=1.0, ge=0, description="Multiplier for exponential backoff"
    )
    wait_min: float = Field(default=1.0, ge=0, description="Minimum wait time in seconds")
    wait_max: float = Field(default=10.0, ge=0, description="Maximum wait time in seconds")
    retry_exceptions: Tuple[Type[Exception], ...] = Field(
        default=(Exception,), description="Exception types that trigger a retry"
    )

    def create_retry_decorator(
        self, exception_types: Optional[Tuple[Type[Exception], ...]] = None
    ):
        """
        Build a tenacity decorator from this policy.

        Parameters:
            exception_types: Overrides ``retry_exceptions`` for this decorator.

        Returns:
            A decorator applying exponential backoff, logging each failed attempt
            and re-raising the last exception once ``max_attempts`` is reached.
        """
        return retry(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(
                multiplier=self.wait_multiplier, min=self.wait_min, max=self.wait_max
            ),
            retry=retry_if_exception_type(exception_types or self.retry_exceptions),
            before_sleep=_log_retry,
            reraise=True,
        )

    def wrap_function(
        self,
        func: Callable,
        exception_types: Optional[Tuple[Type[Exception], ...]] = None,
    ) -> Callable:
        """Wrap ``func`` with :meth:`create_retry_decorator`."""
        return self.create_retry_decorator(exception_types)(func)
