# plansight/access/__init__.py
"""Account tier gating."""

from .tiers import (
    PROJECT_LIMITS,
    TIER_CAPABILITIES,
    UNLIMITED,
    Capability,
    Tier,
    can_create_project,
    capabilities_for,
    gate_mitigation_plan,
    has_capability,
    resolve_tier,
)

__all__ = [
    "Capability",
    "PROJECT_LIMITS",
    "TIER_CAPABILITIES",
    "Tier",
    "UNLIMITED",
    "can_create_project",
    "capabilities_for",
    "gate_mitigation_plan",
    "has_capability",
    "resolve_tier",
]
