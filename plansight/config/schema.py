# plansight/config/schema.py
"""
Pydantic configuration models for plansight.

All models use extra="ignore" to allow unknown YAML keys without crashing.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class OpenAIConfig(BaseModel):
    """OpenAI (or OpenAI-compatible) API configuration."""

    model_config = ConfigDict(extra="ignore")

    base_url: str | None = Field(
        default=None, description="API base URL (None = api.openai.com)"
    )
    api_key: str | None = Field(
        default=None, description="API key (None = read OPENAI_API_KEY from the environment)"
    )
    model: str = Field(default="gpt-4.1-mini", description="Model used for extraction")
    timeout: int = Field(default=120, description="Request timeout in seconds")


class AnthropicConfig(BaseModel):
    """Anthropic API configuration."""

    model_config = ConfigDict(extra="ignore")

    api_key: str | None = Field(
        default=None,
        description="Anthropic API key (None = read ANTHROPIC_API_KEY from the environment)",
    )
    model: str = Field(
        default="claude-3-5-sonnet-20241022",
        description="Model used for extraction",
    )
    max_tokens: int = Field(
        default=2048,
        ge=1,
        le=8192,
        description="Maximum tokens per response",
    )
    timeout: int = Field(default=120, description="Request timeout in seconds")


class OllamaConfig(BaseModel):
    """Ollama server configuration."""

    model_config = ConfigDict(extra="ignore")

    base_url: str = Field(
        default="http://localhost:11434", description="Ollama API base URL"
    )
    model: str = Field(default="qwen2.5:14b-instruct", description="Ollama model to use")
    timeout: int = Field(
        default=300, description="Request timeout in seconds (generous for model loading)"
    )


class ExtractionConfig(BaseModel):
    """Structured summary extraction settings."""

    model_config = ConfigDict(extra="ignore")

    max_attempts: int = Field(
        default=2,
        ge=1,
        le=5,
        description="Prompt attempts before an unparseable reply fails the document",
    )
    max_text_chars: int = Field(
        default=60_000,
        ge=1_000,
        description="Document text is truncated to this many characters in the prompt",
    )
    temperature: float = Field(default=0.0, ge=0.0, le=2.0, description="Sampling temperature")


class MitigationConfig(BaseModel):
    """Mitigation plan generation settings."""

    model_config = ConfigDict(extra="ignore")

    max_risks: int = Field(
        default=6, ge=1, le=25, description="Highest-scoring issues sent to the LLM"
    )


class StorageConfig(BaseModel):
    """Database and blob storage locations."""

    model_config = ConfigDict(extra="ignore")

    data_dir: str | None = Field(
        default=None,
        description="Directory for the database and uploaded files (None = platform data dir)",
    )
    max_upload_bytes: int = Field(
        default=25 * 1024 * 1024, ge=1, description="Largest accepted upload"
    )


class SharingConfig(BaseModel):
    """Shareable link settings."""

    model_config = ConfigDict(extra="ignore")

    base_url: str = Field(
        default="http://localhost:3000", description="Public app URL used to build share links"
    )
    default_expiry_days: int = Field(
        default=30, ge=1, le=365, description="Days until a share link expires"
    )


class AccountConfig(BaseModel):
    """Account plan settings."""

    model_config = ConfigDict(extra="ignore")

    tier: Literal["free", "starter", "pro", "enterprise"] = Field(
        default="free", description="Plan tier; controls feature access"
    )


class PlansightConfig(BaseModel):
    """Root configuration for plansight."""

    model_config = ConfigDict(extra="ignore")

    provider: Literal["openai", "anthropic", "ollama"] = Field(
        default="openai", description="LLM provider to use"
    )
    openai: OpenAIConfig = Field(default_factory=OpenAIConfig)
    anthropic: AnthropicConfig = Field(default_factory=AnthropicConfig)
    ollama: OllamaConfig = Field(default_factory=OllamaConfig)
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    mitigation: MitigationConfig = Field(default_factory=MitigationConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    sharing: SharingConfig = Field(default_factory=SharingConfig)
    account: AccountConfig = Field(default_factory=AccountConfig)
