# plansight/__init__.py
"""
plansight: planning-application risk analysis.

Extracts structured risk summaries from planning PDFs with an LLM, scores
them into a risk matrix, and renders shareable reports.
"""

__version__ = "0.1.0"
