# plansight/schemas/mitigation.py
"""Schema for LLM-generated mitigation plans."""

from pydantic import BaseModel, ConfigDict, Field, model_validator


class MitigationStep(BaseModel):
    """A single remediation step with indicative cost and timeline."""

    model_config = ConfigDict(extra="ignore")

    title: str = Field(default="", description="Short name of the step")

    description: str = Field(default="", description="What to do, 1-2 sentences")

    cost_gbp_min: float | None = Field(default=None, ge=0, description="Lower cost bound in GBP")

    cost_gbp_max: float | None = Field(default=None, ge=0, description="Upper cost bound in GBP")

    timeline_weeks_min: float | None = Field(
        default=None, ge=0, description="Lower duration bound in weeks"
    )

    timeline_weeks_max: float | None = Field(
        default=None, ge=0, description="Upper duration bound in weeks"
    )

    specialist: str | None = Field(
        default=None, description="Consultant or specialist who should deliver it"
    )

    @model_validator(mode="before")
    @classmethod
    def _normalize_field_names(cls, data: dict) -> dict:
        """Handle LLM field name variations."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if "title" not in data and "step" in data:
            data["title"] = data.pop("step")
        if "description" not in data and "desc" in data:
            data["description"] = data.pop("desc")
        return data


class MitigationPlan(BaseModel):
    """Remediation plan for the highest-scoring risk issues."""

    model_config = ConfigDict(extra="ignore")

    summary: str = Field(description="1-2 sentence overview of the plan")

    steps: list[MitigationStep] = Field(
        default_factory=list,
        description="Ordered remediation steps",
    )

    truncated: bool = Field(
        default=False,
        description="True when only a preview of the steps is included",
    )
