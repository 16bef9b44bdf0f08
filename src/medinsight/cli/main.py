"""CLI for medinsight: extract / check-config commands."""

from __future__ import annotations

import asyncio
import json
import mimetypes
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from medinsight.core.config import AppSettings
from medinsight.core.startup_checks import validate_settings
from medinsight.engines.factory import create_extraction_engine
from medinsight.hooks.logging_config import setup_logging
from medinsight.models import ExtractionResult, FindingSeverity

app = typer.Typer(name="medinsight", help="Rule-based medical report extraction")
console = Console()

_SEVERITY_STYLES = {
    FindingSeverity.CRITICAL: "bold red",
    FindingSeverity.HIGH: "red",
    FindingSeverity.MEDIUM: "yellow",
    FindingSeverity.LOW: "green",
}


def _build_settings(engine: Optional[str], verbose: bool) -> AppSettings:
    """Build settings, overriding env defaults with CLI flags."""
    settings = AppSettings()
    if engine:
        settings = settings.model_copy(
            update={"engine": settings.engine.model_copy(update={"backend": engine})}
        )
    if verbose:
        settings = settings.model_copy(
            update={"observability": settings.observability.model_copy(update={"log_level": "DEBUG"})}
        )
    return settings


def _render(result: ExtractionResult) -> None:
    data = result.extracted_data

    if data.lab_values:
        labs = Table(title="Lab values")
        for column in ("Name", "Value", "Unit", "Range", "Flag"):
            labs.add_column(column)
        for lab in data.lab_values:
            labs.add_row(lab.name, lab.value, lab.unit, lab.reference_range, lab.flag.value)
        console.print(labs)

    if data.diagnoses:
        dx_table = Table(title="Diagnoses")
        dx_table.add_column("Description")
        dx_table.add_column("Confidence", justify="right")
        for dx in data.diagnoses:
            dx_table.add_row(dx.description, f"{dx.confidence:.2f}")
        console.print(dx_table)

    if data.medications:
        meds = Table(title="Medications")
        meds.add_column("Name")
        meds.add_column("Dosage")
        for med in data.medications:
            meds.add_row(med.name, med.dosage)
        console.print(meds)

    if data.findings:
        findings = Table(title="Findings")
        findings.add_column("Category")
        findings.add_column("Severity")
        findings.add_column("Description", overflow="fold")
        for finding in data.findings:
            style = _SEVERITY_STYLES[finding.severity]
            findings.add_row(
                finding.category,
                f"[{style}]{finding.severity.value}[/{style}]",
                finding.description,
            )
        console.print(findings)

    console.print(f"\n[bold]Status:[/bold] {result.completion_status}")
    console.print(f"[bold]Confidence:[/bold] {result.confidence_score:.2f}")
    console.print(f"[bold]Summary:[/bold] {result.summary_text}")


@app.command()
def extract(
    report_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Report text file"),
    declared_format: Optional[str] = typer.Option(None, "--format", help="Declared MIME type"),
    engine: Optional[str] = typer.Option(None, "--engine", help="'rules' or module:Class"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw result as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Run the extraction engine over a single report file."""
    settings = _build_settings(engine, verbose)
    setup_logging(settings.observability)
    extraction_engine = create_extraction_engine(settings)

    mime = declared_format or mimetypes.guess_type(report_file.name)[0] or "text/plain"
    content = report_file.read_bytes()

    result = asyncio.run(extraction_engine.analyze(content, report_file.name, mime))

    if as_json:
        console.print_json(json.dumps(result.model_dump(mode="json")))
    else:
        _render(result)


@app.command("check-config")
def check_config() -> None:
    """Validate settings from the environment and print them."""
    settings = AppSettings()
    try:
        validate_settings(settings)
    except ValueError as exc:
        console.print(f"[red]Invalid configuration:[/red] {exc}")
        raise typer.Exit(code=1) from exc
    console.print_json(settings.model_dump_json())
    console.print("[green]Configuration OK[/green]")


if __name__ == "__main__":
    app()
