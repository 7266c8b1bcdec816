# plansight/cli.py
"""
CLI interface for plansight.

Thin presentation layer over the tools/ service layer.
All commands delegate to the same functions that MCP wraps.
"""

import asyncio
import json
import logging

import typer
from rich.console import Console
from rich.table import Table

from plansight.config.loader import load_config
from plansight.logging_config import configure_logging
from plansight.services import Services
from plansight.tools.create_share_link import create_share_link
from plansight.tools.generate_mitigation_plan import generate_mitigation_plan
from plansight.tools.get_report import get_report
from plansight.tools.get_risk_matrix import get_risk_matrix
from plansight.tools.list_documents import list_documents
from plansight.tools.process_document import process_document
from plansight.tools.upload_document import upload_document
from plansight.tools.view_share import view_share

app = typer.Typer(
    name="plansight",
    help="Planning-application risk analysis: PDF in, risk matrix and mitigation plan out.",
    no_args_is_help=True,
)

console = Console(stderr=True)


def _run(coro):
    """Run async function from sync CLI context."""
    return asyncio.run(coro)


async def _get_services() -> Services:
    """Open the stores for one command (schema init + crash recovery)."""
    services = Services(load_config())
    await services.startup()
    return services


def _state_color(state: str) -> str:
    colors = {
        "processed": "green",
        "processing": "yellow",
        "pending": "cyan",
        "failed": "red",
    }
    return colors.get(state, "white")


def _band_color(band: str | None) -> str:
    return {"low": "green", "medium": "yellow", "high": "red"}.get(band or "", "white")


def _call(tool, *args, **kwargs) -> dict:
    """
    Run one tool against fresh services and print errors as CLI failures.

    Keyword arguments named store, blob_store, client or config are filled
    from the services when passed as None.
    """

    async def _invoke():
        services = await _get_services()
        try:
            for name in ("store", "blob_store", "client", "config"):
                if name in kwargs and kwargs[name] is None:
                    kwargs[name] = getattr(services, name)
            return await tool(*args, **kwargs)
        finally:
            await services.shutdown()

    try:
        return _run(_invoke())
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


def _print_matrix(result: dict) -> None:
    matrix = result["matrix"]
    if result.get("headline"):
        console.print(f"[bold]{result['headline']}[/bold]")
    if matrix["risk_index"] is None:
        console.print("No risk issues identified.")
        return

    band = matrix["risk_band"]
    console.print(
        f"Risk index: [bold]{matrix['risk_index']}[/bold]/100 "
        f"([{_band_color(band)}]{band}[/{_band_color(band)}])"
    )

    grid = Table(title="Probability x Impact", show_lines=False)
    grid.add_column("P \\ I", justify="right", style="bold")
    for impact in range(1, 6):
        grid.add_column(str(impact), justify="center")
    for probability in range(5, 0, -1):
        counts = matrix["grid"][probability - 1]
        grid.add_row(str(probability), *[str(c) if c else "." for c in counts])
    console.print(grid)

    top = Table(title="Top issues")
    top.add_column("#", justify="right")
    top.add_column("Issue")
    top.add_column("Category")
    top.add_column("Score", justify="right")
    for i, issue in enumerate(matrix["top_issues"], start=1):
        top.add_row(str(i), issue["issue"], issue["category"], f"{issue['score']}/25")
    console.print(top)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show INFO logs on stderr"),
):
    """Planning-application risk analysis."""
    configure_logging(json_format=False, level=logging.INFO if verbose else logging.WARNING)


@app.command()
def upload(
    file_path: str = typer.Argument(..., help="Path to a planning PDF"),
    site_id: str = typer.Option(None, "--site", "-s", help="Site the document belongs to"),
):
    """Upload a planning document."""
    result = _call(
        upload_document, file_path, store=None, blob_store=None, config=None, site_id=site_id
    )
    typer.echo(f"Uploaded {result['file_name']} as {result['document_id']}.")
    typer.echo(f"Run 'plansight process {result['document_id']}' to analyse it.")


@app.command()
def process(
    document_id: str = typer.Argument(..., help="Document ID to process"),
    force: bool = typer.Option(False, "--force", "-f", help="Re-run extraction if already processed"),
):
    """Extract the structured risk summary for an uploaded document."""
    with console.status("[dim]Extracting risk summary...[/dim]", spinner="dots"):
        result = _call(
            process_document,
            document_id,
            store=None,
            blob_store=None,
            client=None,
            config=None,
            force=force,
        )
    _print_processed(result)


def _print_processed(result: dict) -> None:
    band = result["risk_band"]
    console.print(f"[green]✓ Processed[/green] {result['document_id']}")
    if result.get("headline"):
        typer.echo(result["headline"])
    if result["risk_index"] is not None:
        typer.echo(
            f"Risk index {result['risk_index']}/100 ({band}), {result['issue_count']} issues"
        )


@app.command()
def analyze(
    file_path: str = typer.Argument(..., help="Path to a planning PDF"),
    site_id: str = typer.Option(None, "--site", "-s", help="Site the document belongs to"),
):
    """Upload and process a document in one step."""

    async def _analyze():
        services = await _get_services()
        try:
            uploaded = await upload_document(
                file_path,
                store=services.store,
                blob_store=services.blob_store,
                config=services.config,
                site_id=site_id,
            )
            return await process_document(
                uploaded["document_id"],
                store=services.store,
                blob_store=services.blob_store,
                client=services.client,
                config=services.config,
            )
        finally:
            await services.shutdown()

    try:
        with console.status("[dim]Uploading and extracting...[/dim]", spinner="dots"):
            result = _run(_analyze())
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    _print_processed(result)


@app.command()
def risk(
    document_id: str = typer.Argument(..., help="Document ID"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw snapshot as JSON"),
):
    """Show the risk matrix for a processed document."""
    result = _call(get_risk_matrix, document_id, store=None)
    if as_json:
        typer.echo(json.dumps(result["matrix"], indent=2))
        return
    _print_matrix(result)


@app.command()
def mitigate(
    document_id: str = typer.Argument(..., help="Document ID"),
    regenerate: bool = typer.Option(False, "--regenerate", help="Ignore a stored plan"),
):
    """Generate a mitigation plan for the document's top risks."""
    with console.status("[dim]Generating mitigation plan...[/dim]", spinner="dots"):
        result = _call(
            generate_mitigation_plan,
            document_id,
            store=None,
            client=None,
            config=None,
            regenerate=regenerate,
        )

    plan = result["plan"]
    if plan is None:
        typer.echo(result.get("message") or "No mitigation plan produced.")
        return

    typer.echo(plan["summary"])
    typer.echo()
    for i, step in enumerate(plan["steps"], start=1):
        typer.echo(f"{i}. {step['title']}")
        if step["description"]:
            typer.echo(f"   {step['description']}")
        if step["specialist"]:
            typer.echo(f"   Specialist: {step['specialist']}")
    if result.get("message"):
        typer.echo()
        typer.echo(typer.style(result["message"], fg=typer.colors.MAGENTA))


@app.command()
def report(document_id: str = typer.Argument(..., help="Document ID")):
    """Print the markdown risk report."""
    tier = load_config().account.tier
    result = _call(get_report, document_id, store=None, tier=tier)
    # Raw markdown to stdout (pipeable)
    typer.echo(result["content"])


@app.command()
def share(
    document_id: str = typer.Argument(..., help="Document ID"),
    days: int = typer.Option(None, "--days", "-d", help="Link lifetime in days"),
    email: str = typer.Option(None, "--email", "-e", help="Recipient email"),
):
    """Create an expiring share link for a report."""
    result = _call(
        create_share_link,
        document_id,
        store=None,
        config=None,
        expires_in_days=days,
        recipient_email=email,
    )
    typer.echo(result["url"])
    console.print(f"[dim]Expires {result['expires_at']}[/dim]")


@app.command("view-share")
def view_share_command(token: str = typer.Argument(..., help="Share token")):
    """Open a shared report by token."""
    tier = load_config().account.tier
    result = _call(view_share, token, store=None, tier=tier)
    console.print(f"[dim]{result['file_name']} · view {result['view_count']}[/dim]")
    typer.echo(result["content"])


@app.command("list")
def list_command():
    """List uploaded documents."""
    result = _call(list_documents, store=None)
    documents = result["documents"]

    if not documents:
        typer.echo("No documents found.")
        return

    typer.echo(f"{'DOCUMENT ID':<14} {'STATE':<12} {'RISK':<12} FILE")
    typer.echo("-" * 80)
    for d in documents:
        state = d["state"]
        risk_text = f"{d['risk_index']} {d['risk_band']}" if d["risk_index"] is not None else "-"
        typer.echo(
            typer.style(f"{d['document_id']:<14} ", fg=_state_color(state))
            + typer.style(f"{state:<12} ", fg=_state_color(state))
            + f"{risk_text:<12} {d['file_name']}"
        )


@app.command()
def serve():
    """Start the MCP server on stdio."""
    from plansight.__main__ import main as server_main

    asyncio.run(server_main())


if __name__ == "__main__":
    app()
