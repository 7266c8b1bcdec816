# plansight/llm/client.py
"""
Local-model provider backed by an Ollama server.

Used when `provider: ollama` is configured, typically to summarise
planning documents without sending them to a hosted API.
"""

import logging

import httpx
from ollama import AsyncClient

from .retry import llm_retry

logger = logging.getLogger(__name__)


def _listed_model_names(listing) -> list[str]:
    # Older servers report "name", newer ones "model"
    return [m.get("model") or m.get("name") or "" for m in listing.get("models", [])]


class OllamaClient:
    """Chat against a local Ollama model; replies are streamed and joined."""

    def __init__(
        self,
        base_url: str,
        model: str,
        timeout: int = 300,
        temperature: float = 0.0,
    ):
        """
        Args:
            base_url: Server address, e.g. "http://localhost:11434"
            model: Tag of the local model, e.g. "qwen2.5:14b-instruct"
            timeout: Seconds per request; cold model loads are slow
            temperature: Sampling temperature for every summary call
        """
        self.base_url = base_url
        self.model = model
        self.temperature = temperature
        self.client = AsyncClient(host=base_url, timeout=httpx.Timeout(timeout))

    async def health_check(self) -> bool:
        """
        Whether the Ollama server answers.

        A model that is not pulled yet only logs a warning, since the server
        fetches it on the first chat request.
        """
        try:
            listing = await self.client.list()
        except Exception as e:
            logger.error(f"Ollama at {self.base_url} is unreachable: {e}")
            return False

        family = self.model.split(":")[0]
        names = _listed_model_names(listing)
        if not any(name == self.model or family in name for name in names):
            logger.warning(
                f"{self.model} is not pulled on {self.base_url}; "
                f"the first summary request will download it"
            )
        return True

    @llm_retry
    async def generate(self, messages: list[dict], model: str | None = None) -> str:
        """Send chat messages and return the joined streamed reply text."""
        model = model or self.model
        logger.debug(f"Ollama chat: model={model}, {len(messages)} messages")

        parts: list[str] = []
        stream = await self.client.chat(
            model=model,
            messages=messages,
            stream=True,
            options={"temperature": self.temperature},
        )
        async for chunk in stream:
            if content := chunk.get("message", {}).get("content"):
                parts.append(content)

        reply = "".join(parts)
        logger.info(f"Ollama {model} replied with {len(reply)} chars")
        return reply
