# plansight/access/tiers.py
"""
Account tiers and the capabilities each one unlocks.

Gating is a lookup: a tier maps to a fixed capability set and a project
limit. Callers ask has_capability() rather than comparing tier names.
"""

from enum import Enum

from plansight.schemas.mitigation import MitigationPlan

UNLIMITED = -1

# Number of mitigation steps shown without full_mitigation_plans
PREVIEW_STEP_COUNT = 1


class Tier(str, Enum):
    """Subscription tiers, lowest first."""

    FREE = "free"
    STARTER = "starter"
    PRO = "pro"
    ENTERPRISE = "enterprise"


class Capability(str, Enum):
    """Gated features."""

    FULL_MITIGATION_PLANS = "full_mitigation_plans"
    FULL_COMPARABLE_ANALYSIS = "full_comparable_analysis"
    POLICY_CITATIONS = "policy_citations"
    PRIORITY_SUPPORT = "priority_support"
    API_ACCESS = "api_access"


TIER_CAPABILITIES: dict[Tier, frozenset[Capability]] = {
    Tier.FREE: frozenset(),
    Tier.STARTER: frozenset({Capability.FULL_MITIGATION_PLANS}),
    Tier.PRO: frozenset(
        {
            Capability.FULL_MITIGATION_PLANS,
            Capability.FULL_COMPARABLE_ANALYSIS,
            Capability.POLICY_CITATIONS,
        }
    ),
    Tier.ENTERPRISE: frozenset(Capability),
}

PROJECT_LIMITS: dict[Tier, int] = {
    Tier.FREE: 1,
    Tier.STARTER: 5,
    Tier.PRO: 25,
    Tier.ENTERPRISE: UNLIMITED,
}


def resolve_tier(value: "Tier | str | None") -> Tier:
    """Parse a tier name; unknown or missing values fall back to free."""
    if isinstance(value, Tier):
        return value
    try:
        return Tier(str(value).strip().lower())
    except ValueError:
        return Tier.FREE


def capabilities_for(tier: "Tier | str | None") -> frozenset[Capability]:
    return TIER_CAPABILITIES[resolve_tier(tier)]


def has_capability(tier: "Tier | str | None", capability: Capability) -> bool:
    return capability in capabilities_for(tier)


def can_create_project(tier: "Tier | str | None", projects_used: int) -> bool:
    """Whether another project fits under the tier's limit (-1 = unlimited)."""
    limit = PROJECT_LIMITS[resolve_tier(tier)]
    if limit == UNLIMITED:
        return True
    return projects_used < limit


def gate_mitigation_plan(plan: MitigationPlan, tier: "Tier | str | None") -> MitigationPlan:
    """
    Apply tier gating to a mitigation plan.

    Tiers without full_mitigation_plans receive the summary and the first
    step only, flagged as truncated.
    """
    if has_capability(tier, Capability.FULL_MITIGATION_PLANS):
        return plan
    if len(plan.steps) <= PREVIEW_STEP_COUNT:
        return plan
    return plan.model_copy(
        update={"steps": plan.steps[:PREVIEW_STEP_COUNT], "truncated": True}
    )
