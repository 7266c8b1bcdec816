# plansight/llm/anthropic_client.py
"""
Anthropic client using the Messages API.

Chat messages use the OpenAI-style list; system messages are lifted into the
separate `system` parameter the Messages API expects.
"""

import logging

import anthropic

from .retry import llm_retry

logger = logging.getLogger(__name__)


def split_system_messages(messages: list[dict]) -> tuple[str, list[dict]]:
    """
    Separate system prompts from conversational turns.

    Args:
        messages: Chat messages with "role" and "content" keys

    Returns:
        (system_text, remaining_messages)
    """
    system_parts = [m["content"] for m in messages if m.get("role") == "system"]
    turns = [
        {"role": m["role"], "content": m["content"]}
        for m in messages
        if m.get("role") != "system"
    ]
    return "\n\n".join(system_parts), turns


class AnthropicClient:
    """Async Anthropic client with the same generate() interface as the other providers."""

    def __init__(
        self,
        model: str = "claude-3-5-sonnet-20241022",
        api_key: str | None = None,
        max_tokens: int = 2048,
        timeout: int = 120,
        temperature: float = 0.0,
    ):
        """
        Initialize Anthropic client.

        Args:
            model:       Model to use
            api_key:     API key (None = read ANTHROPIC_API_KEY)
            max_tokens:  Maximum tokens per response
            timeout:     Request timeout in seconds
            temperature: Sampling temperature
        """
        self._api_key = api_key
        self._timeout = timeout
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self._client: anthropic.AsyncAnthropic | None = None

    @property
    def client(self) -> anthropic.AsyncAnthropic:
        """Lazy-loaded Anthropic client."""
        if self._client is None:
            self._client = anthropic.AsyncAnthropic(api_key=self._api_key, timeout=self._timeout)
        return self._client

    async def health_check(self) -> bool:
        """
        Check the API is reachable and the key is accepted.

        Returns:
            True if models can be listed, False otherwise.
        """
        try:
            await self.client.models.list(limit=1)
            return True
        except Exception as e:
            logger.error(f"Anthropic health check failed: {e}")
            return False

    @llm_retry
    async def generate(self, messages: list[dict], model: str | None = None) -> str:
        """
        Generate a response via the Messages API.

        Args:
            messages: Chat messages; any "system" entries become the system prompt
            model:    Model override (defaults to self.model)

        Returns:
            Concatenated text blocks of the response.
        """
        model = model or self.model
        system, turns = split_system_messages(messages)
        logger.info(f"Anthropic.generate: model={model}, messages={len(turns)}")

        kwargs = {
            "model": model,
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
            "messages": turns,
        }
        if system:
            kwargs["system"] = system

        response = await self.client.messages.create(**kwargs)
        result = "".join(
            block.text for block in response.content if getattr(block, "type", "") == "text"
        )
        logger.info(f"Anthropic.generate: {len(result)} chars")
        return result

    async def close(self) -> None:
        """Close the async client if initialized."""
        if self._client is not None:
            await self._client.close()
            self._client = None
