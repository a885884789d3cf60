"""
Command Line Interface

CLI for the TM2 terminology engine.
"""

import json
import logging
from pathlib import Path
from typing import Any, List, NoReturn, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from tm2_terminology import __version__
from tm2_terminology.engine.config import EngineConfig, load_config
from tm2_terminology.engine.engine import TerminologyEngine
from tm2_terminology.errors import TerminologyError
from tm2_terminology.fhir.parameters import ParametersFormatter
from tm2_terminology.resolution.disease_grouping import GroupingOutcome
from tm2_terminology.store.record_types import Category

app = typer.Typer(
    name="tm2-terminology",
    help="NAMASTE to ICD-11 TM2 terminology resolution",
    add_completion=False,
)
console = Console()
err_console = Console(stderr=True)

CONFIG_OPTION = typer.Option(None, "--config", "-c", help="Config file")
DATA_OPTION = typer.Option(None, "--data", "-d", help="Record file (JSON or YAML)")
LOG_LEVEL_OPTION = typer.Option(
    None, "--log-level", help="Log level (default: logging.level from config)"
)


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _load_engine(
    config: Optional[Path], data: Optional[Path], log_level: Optional[str]
) -> TerminologyEngine:
    """Build an engine from CLI options, exiting on missing files."""
    for path in (config, data):
        if path is not None and not path.exists():
            console.print(f"[red]Error: File not found: {path}[/red]")
            raise typer.Exit(1)

    engine_config = load_config(config) if config else EngineConfig()
    if data:
        engine_config.store.backend = "memory"
        engine_config.store.data_file = str(data)

    _setup_logging(log_level or engine_config.logging.level)

    return TerminologyEngine(engine_config)


def _emit(payload: Any, output: Optional[Path], indent: int = 2) -> None:
    json_output = json.dumps(payload, indent=indent)

    if output:
        output.write_text(json_output)
        console.print(f"[green]Output saved to: {output}[/green]")
    else:
        console.print(json_output, markup=False, highlight=False, soft_wrap=True)


def _fail(message: str, error: Exception) -> NoReturn:
    console.print(f"[red]Error: {message}: {error}[/red]")
    raise typer.Exit(1)


@app.command()
def code(
    code_value: str = typer.Argument(..., help="NAMASTE or TM2 code"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output file"),
    fhir: bool = typer.Option(False, "--fhir", help="Output FHIR Parameters"),
    config: Optional[Path] = CONFIG_OPTION,
    data: Optional[Path] = DATA_OPTION,
    log_level: Optional[str] = LOG_LEVEL_OPTION,
) -> None:
    """Resolve a code to its best record per category."""
    engine = _load_engine(config, data, log_level)

    try:
        records = engine.resolve_by_code(code_value)
    except TerminologyError as e:
        _fail("Code search failed", e)

    if fhir:
        _emit(ParametersFormatter().code_search(code_value, records), output)
    else:
        _emit([r.to_dict() for r in records], output)

    if not records:
        console.print(f"\n[yellow]Code not found: {code_value}[/yellow]")


@app.command()
def symptoms(
    query: str = typer.Argument(..., help="Symptom or description text"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output file"),
    config: Optional[Path] = CONFIG_OPTION,
    data: Optional[Path] = DATA_OPTION,
    log_level: Optional[str] = LOG_LEVEL_OPTION,
) -> None:
    """Search records by symptom text."""
    engine = _load_engine(config, data, log_level)

    try:
        records = engine.match_by_symptoms(query)
    except TerminologyError as e:
        _fail("Symptom search failed", e)

    _emit([r.to_dict() for r in records], output)
    console.print(f"\n[dim]Found {len(records)} matching codes[/dim]")


@app.command()
def group(
    symptom_terms: List[str] = typer.Argument(..., help="Symptoms to group"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output file"),
    fhir: bool = typer.Option(False, "--fhir", help="Output FHIR Parameters"),
    config: Optional[Path] = CONFIG_OPTION,
    data: Optional[Path] = DATA_OPTION,
    log_level: Optional[str] = LOG_LEVEL_OPTION,
) -> None:
    """Group symptom matches into TM2 disease groups."""
    engine = _load_engine(config, data, log_level)

    try:
        result = engine.group_symptom_matches(symptom_terms)
    except TerminologyError as e:
        _fail("Symptom search failed", e)

    if fhir:
        _emit(ParametersFormatter().symptom_search(result), output)
    else:
        _emit(result.to_dict(), output)

    if result.kind == GroupingOutcome.TOO_MANY_GROUPS:
        console.print(
            f"\n[yellow]Found {result.group_count} disease groups. "
            f"Refine your symptoms to get {result.max_groups} or fewer.[/yellow]"
        )
    elif result.kind == GroupingOutcome.GROUPED:
        console.print(f"\n[dim]Found {result.group_count} disease groups[/dim]")
    else:
        console.print("\n[yellow]No matching codes[/yellow]")


@app.command()
def autocomplete(
    term: str = typer.Argument(..., help="Title search term"),
    limit: int = typer.Option(10, "--limit", "-l", help="Maximum suggestions"),
    config: Optional[Path] = CONFIG_OPTION,
    data: Optional[Path] = DATA_OPTION,
    log_level: Optional[str] = LOG_LEVEL_OPTION,
) -> None:
    """Suggest codes by title."""
    engine = _load_engine(config, data, log_level)

    try:
        records = engine.autocomplete(term, limit)
    except TerminologyError as e:
        _fail("Auto-complete search failed", e)

    if not records:
        console.print("[yellow]No suggestions[/yellow]")
        raise typer.Exit(0)

    for record in records:
        console.print(
            f"  [bold]{record.local_code}[/bold]  {record.local_title or ''}"
            f"  [dim]{record.category or ''} → {record.target_code or 'unmapped'}[/dim]"
        )


@app.command()
def category(
    name: Category = typer.Argument(..., help="Traditional medicine system"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output file"),
    config: Optional[Path] = CONFIG_OPTION,
    data: Optional[Path] = DATA_OPTION,
    log_level: Optional[str] = LOG_LEVEL_OPTION,
) -> None:
    """List codes for a traditional medicine system."""
    engine = _load_engine(config, data, log_level)

    try:
        records = engine.get_by_category(name.value)
    except TerminologyError as e:
        _fail("Category search failed", e)

    _emit([r.to_dict() for r in records], output)
    console.print(f"\n[dim]Retrieved {len(records)} codes for category: {name.value}[/dim]")


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"tm2-terminology version {__version__}")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
