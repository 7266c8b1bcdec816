# plansight/llm/__init__.py
"""LLM integration module with OpenAI, Anthropic and Ollama clients plus retry logic."""

from .anthropic_client import AnthropicClient
from .client import OllamaClient
from .factory import LLMClient, create_llm_client
from .openai_client import OpenAIClient
from .retry import is_retryable, llm_retry

__all__ = [
    "OpenAIClient",
    "AnthropicClient",
    "OllamaClient",
    "LLMClient",
    "create_llm_client",
    "is_retryable",
    "llm_retry",
]
