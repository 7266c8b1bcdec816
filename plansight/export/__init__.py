# plansight/export/__init__.py
"""Markdown report export."""

from .renderer import RiskReportRenderer

__all__ = ["RiskReportRenderer"]
