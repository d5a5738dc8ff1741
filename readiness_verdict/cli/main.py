"""Main CLI Module - Command-line interface for Readiness Verdict."""

import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import click
import yaml
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .. import __version__
from ..core.classifier import Priority
from ..core.config import ENV_VARIABLES, VerdictConfig
from ..core.finding import ValidationRun
from ..core.verdict import ProductionReadinessVerdictEngine, ProductionReadinessVerdictResult
from ..reporters.base_reporter import ReportData
from ..reporters.json_reporter import JSONReporter

console = Console()

# Exit status when the document or configuration cannot be loaded
EXIT_LOAD_ERROR = 2


def get_score_color(score: float) -> str:
    """Get color for score value."""
    if score >= 90:
        return "green"
    elif score >= 75:
        return "green"
    elif score >= 60:
        return "yellow"
    elif score >= 30:
        return "orange1"
    else:
        return "red"


def get_rating_color(rating: str) -> str:
    """Get color for a LOW..CRITICAL style rating."""
    colors = {
        "critical": "red",
        "insufficient": "red",
        "high": "orange1",
        "limited_capacity": "yellow",
        "medium": "yellow",
        "low": "green",
        "meets_requirements": "green",
        "exceeds_requirements": "green",
    }
    return colors.get(rating.lower(), "white")


def setup_logging(verbose: bool) -> None:
    """Route library logs through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def load_run(path: str) -> ValidationRun:
    """Load a validation run from a YAML or JSON document.

    Raises:
        ValueError: If the document cannot be parsed or is malformed
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ValueError(f"Could not read {path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a mapping with 'phases' and 'critical_issues'")
    return ValidationRun.from_dict(data)


def build_config(
    config_file: Optional[str],
    overrides: Dict[str, Any],
) -> VerdictConfig:
    """Apply config sources in order: defaults, file, environment, CLI options."""
    config = VerdictConfig()
    if config_file:
        config = VerdictConfig.from_file(config_file, base=config)
    config = config.with_env()
    return config.merge(overrides)


@click.group()
@click.version_option(version=__version__, prog_name="prv")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool):
    """Readiness Verdict - Turn analysis findings into a Go/No-Go decision."""
    load_dotenv()
    setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


@cli.command("evaluate")
@click.argument("document", type=click.Path(exists=True, dir_okay=False))
@click.option("--name", "-n", help="Project name (default: document name)")
@click.option("--output", "-o", type=click.Path(file_okay=False), help="Directory for the JSON report")
@click.option("--config", "-c", "config_file", type=click.Path(exists=True, dir_okay=False),
              help="YAML configuration file")
@click.option("--target-capacity", type=int, help="Concurrent users the release must support")
@click.option("--test-coverage", type=float, help="Estimated test coverage percentage")
@click.option("--no-fail", is_flag=True, help="Exit with status 0 whatever the recommendation")
def evaluate(
    document: str,
    name: Optional[str],
    output: Optional[str],
    config_file: Optional[str],
    target_capacity: Optional[int],
    test_coverage: Optional[float],
    no_fail: bool,
):
    """Evaluate a validation run and print the verdict.

    DOCUMENT is a YAML or JSON file holding phase results.
    """
    try:
        verdict_config = build_config(config_file, {
            "target_concurrent_users": target_capacity,
            "test_coverage_estimate": test_coverage,
        })
        run = load_run(document)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(EXIT_LOAD_ERROR)

    project_name = name or Path(document).stem
    console.print(Panel.fit(
        f"[bold blue]Readiness Verdict[/bold blue]\n"
        f"Evaluating: [cyan]{document}[/cyan]",
        title="PRV Evaluate",
        border_style="blue"
    ))

    verdict = ProductionReadinessVerdictEngine(verdict_config).evaluate(run)
    _display_verdict(verdict)

    if output:
        reporter = JSONReporter(output_dir=output)
        report_path = reporter.save(ReportData(
            project_name=project_name,
            verdict=verdict,
            metadata={"document": str(Path(document).resolve()), "config": verdict_config.to_dict()},
        ))
        console.print(f"\n[bold]Report:[/bold] [cyan]{report_path}[/cyan]")

    if verdict.recommendation.blocks_deployment and not no_fail:
        sys.exit(1)


@cli.command("classify")
@click.argument("document", type=click.Path(exists=True, dir_okay=False))
@click.option("--priority", "-p", type=click.Choice(["critical", "high", "medium", "low", "all"]),
              default="all", help="Filter by priority")
@click.option("--limit", "-l", type=int, default=20, help="Number of issues to show")
def classify(document: str, priority: str, limit: int):
    """List the classified issues of a validation run."""
    try:
        run = load_run(document)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(EXIT_LOAD_ERROR)

    categorization = ProductionReadinessVerdictEngine().categorize(run)
    issues_list = categorization.all_issues
    if priority != "all":
        wanted = Priority(priority.upper())
        issues_list = [i for i in issues_list if i.priority == wanted]

    if not issues_list:
        console.print("[green]No issues found matching criteria.[/green]")
        return

    table = Table(title=f"Classified Issues: {Path(document).name}")
    table.add_column("Priority", width=10)
    table.add_column("ID", style="cyan")
    table.add_column("Severity", width=10)
    table.add_column("Category", width=12)
    table.add_column("Impact")
    table.add_column("Effort", width=10)
    table.add_column("Blocker", width=8, justify="center")
    table.add_column("Message", width=40)

    for issue in issues_list[:limit]:
        color = get_rating_color(issue.priority.value)
        message = issue.message
        severity = issue.finding.severity
        table.add_row(
            f"[{color}]{issue.priority.value}[/{color}]",
            escape(issue.id),
            f"[{severity.color}]{severity.value}[/{severity.color}]",
            issue.category.value,
            issue.impact.value,
            issue.remediation_effort.value,
            "[red]Yes[/red]" if issue.deployment_blocker else "[dim]No[/dim]",
            escape(message[:38] + "..." if len(message) > 38 else message),
        )

    console.print(table)

    if len(issues_list) > limit:
        console.print(f"\n[dim]Showing {limit} of {len(issues_list)} issues. Use --limit to see more.[/dim]")


@cli.command("config")
@click.option("--config", "-c", "config_file", type=click.Path(exists=True, dir_okay=False),
              help="YAML configuration file")
def config(config_file: Optional[str]):
    """Show the effective configuration and environment variables."""
    try:
        effective = build_config(config_file, {})
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(EXIT_LOAD_ERROR)

    console.print(Panel.fit(
        "[bold]Effective Configuration[/bold]",
        border_style="blue"
    ))

    table = Table()
    table.add_column("Setting", style="cyan")
    table.add_column("Value", justify="right")
    for key, value in effective.to_dict().items():
        table.add_row(key, str(value))
    console.print(table)

    console.print("\n[bold]Environment Variables:[/bold]\n")
    env_table = Table()
    env_table.add_column("Variable", style="cyan")
    env_table.add_column("Setting")
    env_table.add_column("Status")
    for var_name, field_name in ENV_VARIABLES.items():
        value = os.getenv(var_name)
        status = f"[green]{value}[/green]" if value else "[yellow]Not set[/yellow]"
        env_table.add_row(var_name, field_name, status)
    console.print(env_table)


def _display_verdict(verdict: ProductionReadinessVerdictResult) -> None:
    """Display the verdict in the console."""
    health = verdict.system_health_assessment
    risk = verdict.risk_assessment
    confidence = verdict.confidence_level_assessment
    capacity = verdict.concurrent_user_assessment
    recommendation = verdict.go_no_go_recommendation

    score_color = get_score_color(health.health_score)
    console.print(Panel(
        f"[bold]Health Score:[/bold] [{score_color}]{health.health_score:.1f}/100[/{score_color}] "
        f"({health.overall_rating.value})\n"
        f"[bold]Issues Analyzed:[/bold] {verdict.total_issues_analyzed}  "
        f"[bold]Critical:[/bold] {verdict.critical_issues_count}  "
        f"[bold]Blockers:[/bold] {verdict.deployment_blockers_count}\n"
        f"[bold]Estimated Fix Time:[/bold] {verdict.estimated_fix_time}",
        title="System Health",
        border_style=score_color,
    ))

    phase_table = Table(title="Component Health")
    phase_table.add_column("Component", style="cyan")
    phase_table.add_column("Rating")
    for category, rating in health.component_health.items():
        phase_table.add_row(category.value, rating.value)
    console.print(phase_table)

    risk_table = Table(title="Deployment Risk")
    risk_table.add_column("Dimension", style="cyan")
    risk_table.add_column("Risk")
    for dimension, level in risk.dimension_risks.items():
        color = get_rating_color(level.value)
        risk_table.add_row(dimension, f"[{color}]{level.value}[/{color}]")
    overall_color = get_rating_color(risk.overall_risk.value)
    risk_table.add_row("[bold]OVERALL[/bold]", f"[bold {overall_color}]{risk.overall_risk.value}[/bold {overall_color}]")
    console.print(risk_table)

    capacity_color = get_rating_color(capacity.capacity_rating.value)
    console.print(
        f"\n[bold]Confidence:[/bold] {confidence.overall_confidence.value} "
        f"({confidence.overall_score:.1f}; completeness {confidence.validation_completeness:.0f}%, "
        f"evidence {confidence.evidence_quality.value})"
    )
    console.print(
        f"[bold]Capacity:[/bold] [{capacity_color}]{capacity.capacity_rating.value}[/{capacity_color}] "
        f"({capacity.estimated_capacity} of {capacity.target_capacity} users, {capacity.estimate_source})"
    )

    if verdict.critical_gap_analysis.must_fix_before_deployment:
        console.print("\n[bold red]Must fix before deployment:[/bold red]")
        for issue in verdict.critical_gap_analysis.must_fix_before_deployment:
            console.print(f"  [red]•[/red] {escape(f'[{issue.id}] {issue.message}')}")

    color = recommendation.recommendation.color
    body = [
        f"[bold {color}]{recommendation.recommendation.value}[/bold {color}]",
        recommendation.justification,
        f"[bold]Timeline:[/bold] {recommendation.timeline}",
        f"[bold]Deployment:[/bold] {verdict.recommended_deployment_date}",
    ]
    if recommendation.conditions:
        body.append("[bold]Conditions:[/bold]")
        body.extend(f"  • {condition}" for condition in recommendation.conditions)
    body.append("[bold]Next Steps:[/bold]")
    body.extend(f"  • {step}" for step in recommendation.next_steps)

    console.print()
    console.print(Panel("\n".join(body), title="Recommendation", border_style=color))


def main():
    """Entry point for the CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
