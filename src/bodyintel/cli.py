"""CLI interface using Typer."""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich.console import Console

from bodyintel.app_logging import configure_logging
from bodyintel.config import get_settings, reload_settings
from bodyintel.tracking.models import History

app = typer.Typer(
    help="Body intelligence and TDEE calibration from your tracking history",
    no_args_is_help=True,
)
console = Console()

config_app = typer.Typer(help="Show or initialize settings")
app.add_typer(config_app, name="config")


# ============================================================================
# Helpers
# ============================================================================


def output_json(response: dict, file=None) -> None:
    """Output JSON response to stdout or file."""
    json_str = json.dumps(response, indent=2)
    if file:
        file.write(json_str)
    else:
        print(json_str)


def fail(command: str, message: str, json_output: bool) -> NoReturn:
    """Report an error in the requested format and exit with status 1."""
    if json_output:
        output_json({"success": False, "command": command, "errors": [message]})
    else:
        console.print(f"[red]{message}[/red]")
    raise typer.Exit(1)


def parse_today(today_str: Optional[str], command: str, json_output: bool) -> date:
    """Parse the --today option, defaulting to the current date."""
    if not today_str:
        return date.today()
    try:
        return date.fromisoformat(today_str)
    except ValueError:
        fail(command, f"Invalid date '{today_str}', expected YYYY-MM-DD", json_output)


def load_history_or_exit(
    history_path: Path,
    command: str,
    json_output: bool,
    weigh_ins_csv: Optional[Path] = None,
) -> History:
    """Load a history file (plus optional CSV weigh-ins) or exit on error."""
    from bodyintel.data.history_loader import WeighInCsvLoader, load_history, merge_weigh_ins

    try:
        history = load_history(history_path)
        if weigh_ins_csv is not None:
            if not weigh_ins_csv.exists():
                raise FileNotFoundError(f"File not found: {weigh_ins_csv}")
            loader = WeighInCsvLoader(default_unit=get_settings().defaults.weight_unit)
            imported, counts = loader.load_from_csv(weigh_ins_csv)
            history.weigh_ins = merge_weigh_ins(history.weigh_ins, imported)
            if not json_output:
                console.print(f"[dim]Imported {counts['loaded']} weigh-ins from CSV[/dim]")
    except (FileNotFoundError, ValueError) as e:
        fail(command, str(e), json_output)
    return history


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    config_path: Optional[Path] = typer.Option(
        None, "--config", help="Path to config.yaml (default: ~/.bodyintel/config.yaml)"
    ),
) -> None:
    """Configure logging and settings before any command."""
    configure_logging(verbose)
    if config_path is not None:
        reload_settings(config_path)


# ============================================================================
# Analysis Commands
# ============================================================================


@app.command()
def analyze(
    history_path: Path = typer.Argument(..., help="History file (JSON or YAML)"),
    bmr: Optional[float] = typer.Option(
        None, "--bmr", "-b", help="BMR in kcal/day (default: resolved from scans/profile)"
    ),
    days: Optional[int] = typer.Option(None, "--days", "-d", help="Days to analyze"),
    today_str: Optional[str] = typer.Option(
        None, "--today", help="Last day of the period (YYYY-MM-DD, default: today)"
    ),
    weigh_ins_csv: Optional[Path] = typer.Option(
        None, "--weigh-ins-csv", help="Extra weigh-ins CSV (date,weight[,unit])"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Analyze deficit response, weight quality and metabolic health."""
    from bodyintel.export.formatters import TableFormatter, report_to_dict
    from bodyintel.profiles.bmr import BMRSource, resolve_bmr, resolve_bmr_from_history
    from bodyintel.tracking.body_intelligence import calculate_body_intelligence
    from bodyintel.tracking.servings import build_catalog

    settings = get_settings()
    json_output = json_output or settings.defaults.output_format == "json"
    period_days = days if days is not None else settings.analysis.period_days
    today = parse_today(today_str, "analyze", json_output)
    history = load_history_or_exit(history_path, "analyze", json_output, weigh_ins_csv)

    if bmr is not None:
        if bmr <= 0:
            fail("analyze", f"BMR must be positive, got {bmr}", json_output)
        bmr_result = resolve_bmr(scan_bmr=bmr)
        bmr_source = "manual"
    else:
        latest_weight = max(history.weigh_ins, key=lambda w: w.date).weight if history.weigh_ins else None
        bmr_result = resolve_bmr_from_history(
            history.scans,
            latest_weight_kg=latest_weight,
            height_cm=history.height_cm,
            age=history.age,
            sex=history.sex,
        )
        bmr_source = bmr_result.source.value
        if bmr_result.source == BMRSource.NONE:
            fail(
                "analyze",
                "No BMR available: pass --bmr or add a scan or profile to the history",
                json_output,
            )

    report = calculate_body_intelligence(
        history.logs,
        history.weigh_ins,
        history.scans,
        build_catalog(history.foods),
        bmr_result.bmr,
        today,
        period_days,
    )

    if json_output:
        output_json({
            "success": True,
            "command": "analyze",
            "data": {
                "bmr": {"value": bmr_result.bmr, "source": bmr_source},
                **report_to_dict(report),
            },
            "human_summary": (
                f"Response {report.response_status.value}, quality {report.quality_status.value}, "
                f"metabolism {report.metabolic_status.value} "
                f"({report.days_with_data} days, {report.confidence.value} confidence)"
            ),
        })
        return

    console.print(f"[dim]BMR: {bmr_result.bmr} kcal/day ({bmr_source})[/dim]")
    TableFormatter(console, weight_unit=settings.defaults.weight_unit).format_report(report)


@app.command()
def tdee(
    history_path: Path = typer.Argument(..., help="History file (JSON or YAML)"),
    tef: Optional[float] = typer.Option(
        None, "--tef", help="TEF multiplier applied to wearable TDEE"
    ),
    days: Optional[int] = typer.Option(None, "--days", "-d", help="Calibration period in days"),
    today_str: Optional[str] = typer.Option(
        None, "--today", help="Last day of the period (YYYY-MM-DD, default: today)"
    ),
    weigh_ins_csv: Optional[Path] = typer.Option(
        None, "--weigh-ins-csv", help="Extra weigh-ins CSV (date,weight[,unit])"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Calibrate wearable TDEE against intake and the weight trend."""
    from bodyintel.export.formatters import TableFormatter, calibration_to_dict
    from bodyintel.tracking.servings import build_catalog
    from bodyintel.tracking.tdee_calibration import calibrate_tdee

    settings = get_settings()
    json_output = json_output or settings.defaults.output_format == "json"
    tef_multiplier = tef if tef is not None else settings.calibration.tef_multiplier
    period_days = days if days is not None else settings.calibration.period_days
    today = parse_today(today_str, "tdee", json_output)
    history = load_history_or_exit(history_path, "tdee", json_output, weigh_ins_csv)

    result = calibrate_tdee(
        history.logs,
        history.weigh_ins,
        build_catalog(history.foods),
        today,
        tef_multiplier,
        period_days,
        window_days=settings.analysis.rolling_window_days,
    )

    if json_output:
        if result.observed:
            summary = (
                f"Observed TDEE {result.observed.observed_tdee} vs wearable "
                f"{result.observed.wearable_avg_tdee} kcal/day; "
                f"suggested TEF {result.observed.suggested_tef_multiplier:.2f}"
            )
        else:
            summary = f"Calibration unavailable ({len(result.days)} wearable days)"
        output_json({
            "success": True,
            "command": "tdee",
            "data": calibration_to_dict(result),
            "human_summary": summary,
        })
        return

    TableFormatter(console, weight_unit=settings.defaults.weight_unit).format_calibration(result)


@app.command()
def serving(
    quantity: float = typer.Argument(..., help="Logged quantity"),
    unit: str = typer.Argument(..., help="Unit: serving, g, ml or oz"),
    serving_size: Optional[float] = typer.Option(
        None, "--serving-size", "-s", help="Serving size in grams (default 100)"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Convert a logged quantity into a serving multiplier."""
    from bodyintel.tracking.models import VALID_LOG_UNITS
    from bodyintel.tracking.servings import serving_multiplier

    if unit not in VALID_LOG_UNITS:
        fail("serving", f"Unit must be one of {', '.join(VALID_LOG_UNITS)}, got '{unit}'", json_output)

    multiplier = serving_multiplier(quantity, unit, serving_size)

    if json_output:
        output_json({
            "success": True,
            "command": "serving",
            "data": {
                "quantity": quantity,
                "unit": unit,
                "serving_size": serving_size,
                "multiplier": multiplier,
            },
            "human_summary": f"{quantity:g} {unit} = {multiplier:.3f} servings",
        })
    else:
        console.print(f"{quantity:g} {unit} = [green]{multiplier:.3f}[/green] servings")


# ============================================================================
# Config Subcommands
# ============================================================================


@config_app.command("show")
def config_show(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show the active settings."""
    data = get_settings().to_dict()

    if json_output:
        output_json({"success": True, "command": "config show", "data": data})
        return

    for section, values in data.items():
        console.print(f"[bold]{section}[/bold]")
        for key, value in values.items():
            console.print(f"  {key}: [cyan]{value}[/cyan]")


@config_app.command("init")
def config_init(
    path: Optional[Path] = typer.Option(
        None, "--path", "-p", help="Where to write config.yaml (default: ~/.bodyintel/config.yaml)"
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing file"),
) -> None:
    """Write a config.yaml with default settings."""
    from bodyintel.config.settings import Settings, _default_config_path

    target = path or _default_config_path()
    if target.exists() and not force:
        console.print(f"[yellow]{target} already exists (use --force to overwrite)[/yellow]")
        raise typer.Exit(1)

    written = Settings().save(target)
    console.print(f"[green]Wrote default settings to {written}[/green]")


if __name__ == "__main__":
    app()
