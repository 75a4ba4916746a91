"""Command line front end for the verification pipeline using Typer and Rich."""

import asyncio
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from verity_system.analyzers.compliance.rules_engine import ComplianceRulesEngine
from verity_system.config.logging import get_logger
from verity_system.config.settings import settings
from verity_system.data_management.schemas.common_schema import Domain, Severity, Urgency
from verity_system.data_management.schemas.result_schema import VerificationResult
from verity_system.pipeline.verification_pipeline import VerificationPipeline

app = typer.Typer(
    help="Verity - document verification for factual, compliance and logic issues",
    add_completion=False,
)

console = Console()

logger = get_logger("cli")

_RISK_STYLES = {
    Severity.LOW: "green",
    Severity.MEDIUM: "yellow",
    Severity.HIGH: "red",
    Severity.CRITICAL: "bold red",
}


@app.command()
def verify(
    file: Path = typer.Argument(..., help="Plain-text document to verify"),
    domain: Domain = typer.Option(Domain.LEGAL, "--domain", "-d", help="Business domain"),
    jurisdiction: Optional[str] = typer.Option(
        None, "--jurisdiction", "-j", help="Regulatory jurisdiction (default from settings)"
    ),
    urgency: Urgency = typer.Option(Urgency.MEDIUM, "--urgency", "-u"),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
) -> None:
    """
    Verify a document and print the verdict.

    Args:
        file: Path to a UTF-8 text file
        domain: Domain whose rules and weights apply
        jurisdiction: Jurisdiction for compliance rules
        urgency: Request urgency (scales source timeouts)
        as_json: Emit the full VerificationResult as JSON
    """
    try:
        text = file.read_text(encoding="utf-8")
    except OSError as e:
        console.print(f"[red]✗[/red] Cannot read {file}: {e}")
        raise typer.Exit(1)

    logger.info(f"Verifying {file} ({domain.value})")
    result = asyncio.run(_run(text, domain, urgency, jurisdiction, file.stem))

    if as_json:
        typer.echo(result.model_dump_json(indent=2))
        return
    _print_result(result)


async def _run(
    text: str,
    domain: Domain,
    urgency: Urgency,
    jurisdiction: Optional[str],
    content_id: str,
) -> VerificationResult:
    pipeline = VerificationPipeline()
    try:
        return await pipeline.verify_text(
            text, domain, urgency=urgency, jurisdiction=jurisdiction, content_id=content_id
        )
    finally:
        await pipeline.close()


def _print_result(result: VerificationResult) -> None:
    style = _RISK_STYLES[result.risk_level]
    console.print(
        Panel(
            f"Confidence: [bold]{result.overall_confidence:.1f}[/bold]\n"
            f"Risk level: [{style}]{result.risk_level.value.upper()}[/{style}]\n"
            f"Issues: {len(result.issues)}   "
            f"Time: {result.processing_time:.0f} ms",
            title=f"Verification {result.verification_id[:8]}",
            border_style=style,
        )
    )

    if result.issues:
        table = Table(title="Issues", show_header=True, header_style="bold magenta")
        table.add_column("Severity", style="cyan", width=10)
        table.add_column("Type", width=22)
        table.add_column("Where", width=10)
        table.add_column("Description", style="yellow")
        table.add_column("Conf.", justify="right", width=6)
        for issue in result.issues:
            where = f"{issue.location.line}:{issue.location.column}" if issue.location.line else str(issue.location.start)
            table.add_row(
                issue.severity.value,
                issue.type.value,
                where,
                issue.description,
                f"{issue.confidence:.2f}",
            )
        console.print(table)

    for recommendation in result.recommendations:
        console.print(f"• {recommendation}")


@app.command()
def rules(
    domain: Domain = typer.Option(Domain.HEALTHCARE, "--domain", "-d"),
    jurisdiction: Optional[str] = typer.Option(None, "--jurisdiction", "-j"),
) -> None:
    """List the active compliance rules applicable to a domain and jurisdiction."""
    jurisdiction = jurisdiction or settings.default_jurisdiction
    engine = ComplianceRulesEngine()
    applicable = engine.get_applicable_rules(domain, jurisdiction)

    table = Table(
        title=f"Rules for {domain.value} / {jurisdiction}",
        show_header=True,
        header_style="bold magenta",
    )
    table.add_column("Id", style="cyan")
    table.add_column("Regulation", width=12)
    table.add_column("Severity", width=10)
    table.add_column("Version", justify="right", width=8)
    table.add_column("Rule", style="yellow")
    for rule in applicable:
        table.add_row(rule.id, rule.regulation, rule.severity.value, str(rule.version), rule.rule_text)

    console.print(table)
    if not applicable:
        console.print("[dim]No applicable rules.[/dim]")


@app.command()
def status() -> None:
    """
    Display configuration.

    Shows thresholds, source settings and logging configuration.
    """
    logger.info("Displaying system status")

    table = Table(title="Verity Status", show_header=True, header_style="bold magenta")
    table.add_column("Component", style="cyan", width=20)
    table.add_column("Status", style="green", width=15)
    table.add_column("Details", style="yellow")

    python_version = f"Python {sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}"
    table.add_row("Environment", "✓ Ready", python_version)

    table.add_row(
        "Fact checking",
        "✓ Active",
        f"Threshold {settings.fact_check_threshold} (strict {settings.strict_fact_check_threshold}), "
        f"max {settings.max_concurrent_claims} concurrent claims",
    )

    sources_status = "✓ Enabled" if settings.enable_external_sources else "✗ Disabled"
    sources_details = f"Wikipedia: {settings.wikipedia_api_url}"
    if settings.government_api_url:
        sources_details += f", Government: {settings.government_api_url}"
    table.add_row("External sources", sources_status, f"{sources_details} (timeout {settings.source_timeout_seconds}s)")

    table.add_row("Compliance", "✓ Active", f"Default jurisdiction: {settings.default_jurisdiction}")

    log_details = f"Level: {settings.log_level}, Format: {settings.log_format}"
    table.add_row("Logging", "✓ Active", log_details)

    console.print(table)


@app.command()
def version() -> None:
    """Display version information."""
    console.print("[bold]Verity Verification System[/bold]")
    console.print("Version: 0.1.0")


if __name__ == "__main__":
    app()
