# plansight/llm/retry.py
"""Retry logic for LLM API calls with exponential backoff."""

import logging

import anthropic
import httpx
import openai
from ollama import ResponseError
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)

# Transient HTTP statuses worth another attempt
RETRYABLE_STATUSES = {408, 429, 500, 502, 503, 504, 529}


def is_retryable(exception: BaseException) -> bool:
    """
    Returns True if the exception should be retried.

    Retryable conditions:
    - Connection-level failures (refused, reset, timed out)
    - Provider status errors with status in RETRYABLE_STATUSES
    """
    if isinstance(
        exception,
        (
            ConnectionError,
            httpx.TransportError,
            openai.APIConnectionError,
            anthropic.APIConnectionError,
        ),
    ):
        return True

    if isinstance(exception, (openai.APIStatusError, anthropic.APIStatusError, ResponseError)):
        return exception.status_code in RETRYABLE_STATUSES

    return False


llm_retry = retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=4, max=60),
    retry=retry_if_exception(is_retryable),
    before_sleep=before_sleep_log(logger, logging.WARNING),
    reraise=True,
)
