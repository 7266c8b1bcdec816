# tests/unit/test_retry.py
"""Tests for the retry predicate shared by all LLM clients."""

import anthropic
import httpx
import openai
import pytest
from ollama import ResponseError

from plansight.llm import is_retryable

REQUEST = httpx.Request("POST", "https://api.example.com/v1/messages")


def _response(status: int) -> httpx.Response:
    return httpx.Response(status, request=REQUEST)


class TestIsRetryable:
    @pytest.mark.parametrize(
        "exc",
        [
            ConnectionError("refused"),
            httpx.ConnectTimeout("timed out", request=REQUEST),
            openai.APIConnectionError(request=REQUEST),
            anthropic.APIConnectionError(request=REQUEST),
            openai.RateLimitError("slow down", response=_response(429), body=None),
            openai.InternalServerError("oops", response=_response(502), body=None),
            anthropic.RateLimitError("slow down", response=_response(429), body=None),
            anthropic.InternalServerError("overloaded", response=_response(529), body=None),
            ResponseError(error="Service unavailable", status_code=503),
        ],
    )
    def test_transient_errors_are_retried(self, exc):
        assert is_retryable(exc) is True

    @pytest.mark.parametrize(
        "exc",
        [
            openai.BadRequestError("bad", response=_response(400), body=None),
            openai.AuthenticationError("key", response=_response(401), body=None),
            anthropic.NotFoundError("model", response=_response(404), body=None),
            ResponseError(error="model not found", status_code=404),
            ValueError("not an API error"),
            KeyError("missing"),
        ],
    )
    def test_permanent_errors_are_not_retried(self, exc):
        assert is_retryable(exc) is False
