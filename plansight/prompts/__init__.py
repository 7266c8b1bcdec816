# plansight/prompts/__init__.py
"""
Prompt templates for the summary and mitigation LLM calls.

Templates are plain .txt files beside this module. User prompts carry
str.format placeholders ({file_name}, {text}, {error}, ...); system prompts
are used as-is.
"""

from functools import lru_cache
from pathlib import Path

PROMPT_DIR = Path(__file__).parent


@lru_cache(maxsize=None)
def load_prompt(name: str) -> str:
    """
    Read the template called `name` (file stem, e.g. 'summary_system').

    Raises:
        FileNotFoundError: If there is no such template
    """
    path = PROMPT_DIR / f"{name}.txt"
    if not path.is_file():
        raise FileNotFoundError(f"No prompt template named '{name}' in {PROMPT_DIR}")
    return path.read_text(encoding="utf-8")


def render_prompt(name: str, **fields: object) -> str:
    """Fill a template's placeholders; a missing field raises KeyError."""
    return load_prompt(name).format(**fields)


__all__ = ["PROMPT_DIR", "load_prompt", "render_prompt"]
