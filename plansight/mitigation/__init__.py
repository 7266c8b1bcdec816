# plansight/mitigation/__init__.py
"""LLM-generated mitigation plans for ranked risk issues."""

from .generator import MitigationPlanGenerator

__all__ = ["MitigationPlanGenerator"]
