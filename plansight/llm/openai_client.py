# plansight/llm/openai_client.py
"""OpenAI client (also works with any OpenAI-compatible endpoint)."""

import logging

from openai import AsyncOpenAI

from .retry import llm_retry

logger = logging.getLogger(__name__)


class OpenAIClient:
    """
    Async chat-completions client.

    api_key=None lets the SDK read OPENAI_API_KEY from the environment.
    """

    def __init__(
        self,
        model: str = "gpt-4.1-mini",
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: int = 120,
        temperature: float = 0.0,
    ):
        """
        Initialize OpenAI client.

        Args:
            model:       Model name
            api_key:     API key (None = environment)
            base_url:    Endpoint override (None = api.openai.com)
            timeout:     Request timeout in seconds
            temperature: Sampling temperature
        """
        self.model = model
        self.base_url = base_url
        self.temperature = temperature
        self._client = AsyncOpenAI(api_key=api_key, base_url=base_url, timeout=timeout)

    async def health_check(self) -> bool:
        """
        Check the API is reachable and the key is accepted.

        Returns:
            True if models can be listed, False otherwise.
        """
        try:
            await self._client.models.list()
            return True
        except Exception as e:
            logger.error(f"OpenAI health check failed: {e}")
            return False

    @llm_retry
    async def generate(self, messages: list[dict], model: str | None = None) -> str:
        """
        Generate a single chat completion.

        Args:
            messages: Chat messages in format [{"role": "user", "content": "..."}]
            model:    Model override (defaults to self.model)

        Returns:
            Response text ("" when the model returns no content).
        """
        model = model or self.model
        logger.info(f"OpenAI.generate: model={model}, messages={len(messages)}")

        completion = await self._client.chat.completions.create(
            model=model,
            messages=messages,
            temperature=self.temperature,
        )
        content = completion.choices[0].message.content if completion.choices else None
        result = content or ""
        logger.info(f"OpenAI.generate: {len(result)} chars")
        return result

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.close()
