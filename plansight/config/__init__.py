# plansight/config/__init__.py
"""Configuration system for plansight."""

from .loader import get_config_path, get_data_dir, load_config
from .schema import (
    AccountConfig,
    AnthropicConfig,
    ExtractionConfig,
    MitigationConfig,
    OllamaConfig,
    OpenAIConfig,
    PlansightConfig,
    SharingConfig,
    StorageConfig,
)

__all__ = [
    "PlansightConfig",
    "OpenAIConfig",
    "AnthropicConfig",
    "OllamaConfig",
    "ExtractionConfig",
    "MitigationConfig",
    "StorageConfig",
    "SharingConfig",
    "AccountConfig",
    "load_config",
    "get_config_path",
    "get_data_dir",
]
