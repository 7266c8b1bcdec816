# plansight/export/renderer.py
"""
Risk report renderer for converting a processed document to markdown.

Produces a markdown report with metadata frontmatter.
"""

from datetime import datetime, timezone

from plansight.models.documents import DocumentRecord
from plansight.risk.matrix import GRID_SIZE, RiskIssueScore, RiskMatrixSnapshot
from plansight.schemas.mitigation import MitigationPlan, MitigationStep
from plansight.schemas.summary import PlanningStructuredSummary


def _range(low: float | None, high: float | None, fmt: str) -> str | None:
    if low is None and high is None:
        return None
    if low is None or high is None or low == high:
        return fmt.format(low if high is None else high)
    return f"{fmt.format(low)} - {fmt.format(high)}"


def _cell(text: str) -> str:
    return text.replace("|", "\\|").replace("\n", " ")


class RiskReportRenderer:
    """
    Converts a document's summary, risk matrix and mitigation plan to markdown.

    Format:
        ---
        document_id: id
        file_name: name
        generated_at: ISO timestamp
        risk_index: int|null
        risk_band: low|medium|high|null
        ---

        # Planning Risk Report: {file_name}

        ## Summary
        ## Risk Matrix
        ## Top Issues
        ## All Issues
        ## Recommended Actions
        ## Timeline Notes
        ## Mitigation Plan
    """

    def render(
        self,
        record: DocumentRecord,
        summary: PlanningStructuredSummary | None,
        snapshot: RiskMatrixSnapshot,
        mitigation: MitigationPlan | None = None,
        generated_at: datetime | None = None,
    ) -> str:
        """
        Render the report to a markdown string.

        Args:
            record:       Document the report is for
            summary:      Structured summary (None if not processed)
            snapshot:     Risk matrix computed from the summary
            mitigation:   Mitigation plan, if one was generated
            generated_at: Timestamp for the frontmatter (defaults to now)

        Returns:
            Formatted markdown string
        """
        sections = []

        sections.append(self._render_frontmatter(record, snapshot, generated_at))

        sections.append(f"# Planning Risk Report: {record.file_name}")
        sections.append("")

        # Summary
        sections.append("## Summary")
        sections.append("")
        if summary is None:
            sections.append(f"Document has not been processed (state: {record.state.value}).")
            sections.append("")
        else:
            if summary.headline:
                sections.append(f"**{summary.headline}**")
                sections.append("")
            if summary.risk_level:
                sections.append(f"**Assessed risk level:** {summary.risk_level}")
                sections.append("")
            if summary.key_issues:
                sections.append("**Key issues:**")
                for item in summary.key_issues:
                    sections.append(f"- {item}")
                sections.append("")

        # Risk matrix
        sections.append("## Risk Matrix")
        sections.append("")
        if snapshot.is_empty:
            sections.append("No risk issues identified.")
            sections.append("")
        else:
            sections.append(
                f"**Risk index:** {snapshot.risk_index}/100 ({snapshot.risk_band})"
            )
            sections.append("")
            sections.extend(self._render_grid(snapshot))
            sections.append("")

            sections.append("## Top Issues")
            sections.append("")
            for i, issue in enumerate(snapshot.top_issues, start=1):
                sections.append(f"### {i}. {issue.issue}")
                sections.append(
                    f"**Category:** {issue.category} | **Probability:** {issue.probability} "
                    f"| **Impact:** {issue.impact} | **Score:** {issue.score}/25"
                )
                if issue.owner:
                    sections.append(f"**Owner:** {issue.owner}")
                if issue.mitigation:
                    sections.append(f"**Mitigation:** {issue.mitigation}")
                sections.append("")

            sections.append("## All Issues")
            sections.append("")
            sections.extend(self._render_issue_table(snapshot.issues))
            sections.append("")

        if summary is not None and summary.recommended_actions:
            sections.append("## Recommended Actions")
            sections.append("")
            for action in summary.recommended_actions:
                sections.append(f"- {action}")
            sections.append("")

        if summary is not None and summary.timeline_notes:
            sections.append("## Timeline Notes")
            sections.append("")
            for note in summary.timeline_notes:
                sections.append(f"- {note}")
            sections.append("")

        if mitigation is not None:
            sections.append("## Mitigation Plan")
            sections.append("")
            sections.append(mitigation.summary)
            sections.append("")
            for i, step in enumerate(mitigation.steps, start=1):
                sections.extend(self._render_step(i, step))
            if mitigation.truncated:
                sections.append("> Preview only. Upgrade to see the full mitigation plan.")
                sections.append("")

        return "\n".join(sections)

    def _render_grid(self, snapshot: RiskMatrixSnapshot) -> list[str]:
        """Probability rows (5 at top) by impact columns."""
        header = "| Probability \\ Impact | " + " | ".join(
            str(i) for i in range(1, GRID_SIZE + 1)
        ) + " |"
        divider = "|---" * (GRID_SIZE + 1) + "|"
        lines = [header, divider]
        for p in range(GRID_SIZE, 0, -1):
            counts = snapshot.grid[p - 1]
            cells = " | ".join(str(c) if c else "." for c in counts)
            lines.append(f"| **{p}** | {cells} |")
        return lines

    def _render_issue_table(self, issues: list[RiskIssueScore]) -> list[str]:
        lines = [
            "| Issue | Category | P | I | Score | Owner |",
            "|---|---|---|---|---|---|",
        ]
        for issue in issues:
            lines.append(
                f"| {_cell(issue.issue)} | {issue.category} | {issue.probability} "
                f"| {issue.impact} | {issue.score} | {_cell(issue.owner or '-')} |"
            )
        return lines

    def _render_step(self, number: int, step: MitigationStep) -> list[str]:
        lines = [f"### Step {number}: {step.title or 'Untitled'}"]
        if step.description:
            lines.append(step.description)
        cost = _range(step.cost_gbp_min, step.cost_gbp_max, "£{:,.0f}")
        if cost:
            lines.append(f"- Cost: {cost}")
        weeks = _range(step.timeline_weeks_min, step.timeline_weeks_max, "{:g}")
        if weeks:
            lines.append(f"- Timeline: {weeks} weeks")
        if step.specialist:
            lines.append(f"- Specialist: {step.specialist}")
        lines.append("")
        return lines

    def _render_frontmatter(
        self,
        record: DocumentRecord,
        snapshot: RiskMatrixSnapshot,
        generated_at: datetime | None,
    ) -> str:
        """Render YAML frontmatter with metadata."""
        generated_at = generated_at or datetime.now(timezone.utc)
        lines = ["---"]
        lines.append(f'document_id: "{record.document_id}"')
        lines.append(f'file_name: "{record.file_name}"')
        if record.site_id:
            lines.append(f'site_id: "{record.site_id}"')
        lines.append(f'generated_at: "{generated_at.isoformat()}"')
        lines.append(
            f"risk_index: {snapshot.risk_index if snapshot.risk_index is not None else 'null'}"
        )
        lines.append(f"risk_band: {snapshot.risk_band or 'null'}")
        lines.append("---")
        lines.append("")
        return "\n".join(lines)
