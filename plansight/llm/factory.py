# plansight/llm/factory.py
"""Factory for creating the configured LLM client."""

from plansight.config.schema import PlansightConfig

from .anthropic_client import AnthropicClient
from .client import OllamaClient
from .openai_client import OpenAIClient

LLMClient = OpenAIClient | AnthropicClient | OllamaClient


def create_llm_client(config: PlansightConfig) -> LLMClient:
    """
    Create the appropriate LLM client based on config.provider.

    Args:
        config: Root PlansightConfig

    Returns:
        OpenAIClient, AnthropicClient or OllamaClient
    """
    temperature = config.extraction.temperature
    if config.provider == "anthropic":
        return AnthropicClient(
            model=config.anthropic.model,
            api_key=config.anthropic.api_key,
            max_tokens=config.anthropic.max_tokens,
            timeout=config.anthropic.timeout,
            temperature=temperature,
        )
    if config.provider == "ollama":
        return OllamaClient(
            base_url=config.ollama.base_url,
            model=config.ollama.model,
            timeout=config.ollama.timeout,
            temperature=temperature,
        )
    return OpenAIClient(
        model=config.openai.model,
        api_key=config.openai.api_key,
        base_url=config.openai.base_url,
        timeout=config.openai.timeout,
        temperature=temperature,
    )
