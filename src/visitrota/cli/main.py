from __future__ import annotations

import warnings
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from visitrota.core.errors import LowWorkloadWarning, VisitRotaError
from visitrota.evaluation import (
    Diagnostics,
    analyze_schedule,
    read_schedule_csv,
    review_quality,
    write_schedule_csv,
)
from visitrota.optimization import generate_schedule, schedule_mode
from visitrota.optimization.heuristics import DEFAULT_TIME_BUDGET_SECONDS
from visitrota.scenario.contract import RotationConfig
from visitrota.scenario.io import load_config
from visitrota.validation import FeasibilityReport, check_feasibility

app = typer.Typer(add_completion=False, no_args_is_help=True)
console = Console()

RATING_STYLE = {
    "excellent": "green",
    "good": "green",
    "harmonic_lock": "red",
    "needs_improvement": "yellow",
}


def _load_or_exit(path: Path) -> RotationConfig:
    try:
        return load_config(path)
    except VisitRotaError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(1) from exc


def _feasibility_or_exit(config: RotationConfig) -> FeasibilityReport:
    try:
        return check_feasibility(config)
    except VisitRotaError as exc:
        console.print(f"[red]Workload check failed:[/red] {escape(str(exc))}")
        raise typer.Exit(1) from exc


def _print_config_summary(config: RotationConfig, report: FeasibilityReport) -> None:
    t = Table(title="Rotation configuration")
    t.add_column("Setting")
    t.add_column("Value")
    t.add_row("Deacons", str(config.deacon_count))
    t.add_row("Households", str(config.household_count))
    t.add_row("Start date", config.start_date.isoformat())
    t.add_row("Weeks", str(config.num_weeks))
    t.add_row("Default frequency", f"every {config.default_visit_frequency} week(s)")
    t.add_row("Mode", schedule_mode(config))
    t.add_row("Total visits", str(report.total_visits))
    t.add_row("Visits per deacon", f"{report.visits_per_deacon:.1f}")
    t.add_row("Weeks between visits", f"{report.weeks_per_visit:.1f}")
    console.print(t)
    if config.has_custom_frequencies:
        console.print("[bold]Frequency distribution[/bold]")
        for frequency, names in config.frequency_distribution().items():
            preview = ", ".join(names[:3]) + ("..." if len(names) > 3 else "")
            console.print(f"  every {frequency} week(s): {len(names)} household(s) ({preview})")


def _print_diagnostics(diagnostics: Diagnostics, *, show_deacons: bool) -> None:
    data: dict[str, Any] = diagnostics.to_dict()
    style = RATING_STYLE.get(diagnostics.rating.value, "white")
    console.print("[bold]Balance Summary[/bold]")
    console.print(f"  visits: {data['total_visits']}")
    console.print(
        f"  visit range: {data['min_visits']} to {data['max_visits']} "
        f"(imbalance: {data['imbalance']})"
    )
    console.print(f"  average visits per deacon: {data['avg_visits_per_deacon']:.1f}")
    console.print(f"  average households per deacon: {data['avg_households_per_deacon']:.1f}")
    console.print(
        f"  full household coverage: {data['deacons_with_full_coverage']} deacons "
        f"({data['coverage_percentage']:.1f}%)"
    )
    if diagnostics.harmonic.is_harmonic:
        console.print(f"  shared factor deacons/households: {diagnostics.harmonic.common_factor}")
    if diagnostics.double_bookings:
        console.print(
            f"  [yellow]same-week double bookings: {len(diagnostics.double_bookings)}[/yellow]"
        )
    console.print(f"  rating: [{style}]{diagnostics.rating.value}[/{style}]")

    if show_deacons:
        t = Table(title="Deacon workload")
        t.add_column("Deacon")
        t.add_column("Visits", justify="right")
        t.add_column("Households", justify="right")
        for row in diagnostics.to_dataframe().itertuples(index=False):
            t.add_row(str(row.deacon), str(row.visits), str(row.households))
        console.print(t)


def _print_quality(schedule, config: RotationConfig) -> None:
    findings = review_quality(schedule, config)
    if findings.passed:
        console.print("[green]Schedule quality review passed[/green]")
        return
    for label, style, items in (
        ("Issues", "red", findings.issues),
        ("Warnings", "yellow", findings.warnings),
    ):
        if not items:
            continue
        console.print(f"[{style}]{label} ({len(items)})[/{style}]")
        for index, item in enumerate(items, start=1):
            console.print(f"  {index}. {item}")


@app.command()
def check(config_path: Path = typer.Argument(..., help="Rotation configuration YAML.")):
    """Validate a configuration and report the expected workload."""
    config = _load_or_exit(config_path)
    report = _feasibility_or_exit(config)
    _print_config_summary(config, report)
    for warning in report.warnings:
        console.print(f"[yellow]Warning:[/yellow] {warning}")
    console.print("[green]Configuration OK[/green]")


@app.command()
def generate(
    config_path: Path = typer.Argument(..., help="Rotation configuration YAML."),
    out: Path = typer.Option(..., "--out", help="Output CSV path"),
    time_budget: float = typer.Option(
        DEFAULT_TIME_BUDGET_SECONDS,
        "--time-budget",
        min=0.001,
        help="Wall-clock seconds allowed for generation.",
    ),
    telemetry_log: Path | None = typer.Option(
        None,
        "--telemetry-log",
        help="Append run telemetry to a JSONL file (e.g. telemetry/runs.jsonl).",
        writable=True,
        dir_okay=False,
    ),
    yes: bool = typer.Option(
        False, "--yes", "-y", help="Proceed without asking when the workload is very low."
    ),
    show_deacons: bool = typer.Option(
        False, "--show-deacons", help="Print the per-deacon workload table."
    ),
    quality: bool = typer.Option(
        False, "--quality", help="Print pairing-gap issues and warnings."
    ),
):
    """Generate a rotation schedule and write it to CSV."""
    config = _load_or_exit(config_path)
    report = _feasibility_or_exit(config)
    for warning in report.warnings:
        console.print(f"[yellow]Low workload warning:[/yellow] {warning}")
        if not yes and not typer.confirm("Continue anyway?", default=False):
            console.print("Schedule generation cancelled.")
            raise typer.Exit(1)

    try:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", LowWorkloadWarning)
            schedule = generate_schedule(
                config,
                time_budget=time_budget,
                telemetry_log=telemetry_log,
                telemetry_context={"source": "cli.generate", "config_path": str(config_path)},
            )
    except VisitRotaError as exc:
        console.print(f"[red]Generation failed:[/red] {escape(str(exc))}")
        raise typer.Exit(1) from exc

    write_schedule_csv(schedule, out)
    console.print(
        f"Created {len(schedule)} visits over {config.num_weeks} weeks "
        f"({schedule_mode(config)} mode). Saved to {out}"
    )
    _print_diagnostics(analyze_schedule(schedule, config), show_deacons=show_deacons)
    if quality:
        _print_quality(schedule, config)


@app.command()
def analyze(
    config_path: Path = typer.Argument(..., help="Rotation configuration YAML."),
    schedule_path: Path = typer.Argument(..., help="Schedule CSV written by `generate`."),
    show_deacons: bool = typer.Option(
        False, "--show-deacons", help="Print the per-deacon workload table."
    ),
    quality: bool = typer.Option(
        False, "--quality", help="Print pairing-gap issues and warnings."
    ),
):
    """Re-run balance diagnostics over an exported schedule."""
    config = _load_or_exit(config_path)
    try:
        schedule = read_schedule_csv(schedule_path)
        diagnostics = analyze_schedule(schedule, config)
    except (OSError, ValueError) as exc:
        console.print(f"[red]Cannot analyse {schedule_path}:[/red] {escape(str(exc))}")
        raise typer.Exit(1) from exc
    _print_diagnostics(diagnostics, show_deacons=show_deacons)
    if quality:
        _print_quality(schedule, config)


if __name__ == "__main__":  # pragma: no cover
    app()
