# plansight/config/loader.py
"""
Configuration loading with auto-creation of defaults.

Uses platformdirs for cross-platform config and data directory management.
"""

import logging
from pathlib import Path

import yaml
from platformdirs import user_config_path, user_data_path

from .schema import PlansightConfig

logger = logging.getLogger(__name__)

APP_NAME = "plansight"


def get_config_path() -> Path:
    """Get path to config file, ensuring config directory exists."""
    config_dir = user_config_path(APP_NAME, ensure_exists=True)
    return config_dir / "config.yaml"


def get_data_dir(config: PlansightConfig) -> Path:
    """Directory holding the database and blob files, created if missing."""
    if config.storage.data_dir:
        data_dir = Path(config.storage.data_dir).expanduser()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir
    return user_data_path(APP_NAME, ensure_exists=True)


def load_config(config_path: Path | None = None) -> PlansightConfig:
    """
    Load configuration from YAML file.

    If config file doesn't exist, creates it with defaults.
    Returns validated Pydantic model.

    Args:
        config_path: Explicit config file (defaults to the platform config dir)
    """
    config_path = config_path or get_config_path()

    if not config_path.exists():
        default_config = PlansightConfig()
        config_dict = default_config.model_dump(mode="json")

        config_path.parent.mkdir(parents=True, exist_ok=True)
        with config_path.open("w") as f:
            yaml.safe_dump(config_dict, f, default_flow_style=False, sort_keys=False)

        logger.info(f"Created default config at {config_path}")
        return default_config

    with config_path.open("r") as f:
        config_data = yaml.safe_load(f) or {}

    config = PlansightConfig(**config_data)
    logger.info(f"Loaded config from {config_path}")
    return config
