"""Output formatters for body intelligence and TDEE calibration results."""

from __future__ import annotations

from typing import Any, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from bodyintel.tracking.interpretation import (
    interpret_confidence,
    interpret_metabolic,
    interpret_quality,
    interpret_response,
)
from bodyintel.tracking.models import BodyIntelligenceReport
from bodyintel.tracking.tdee_calibration import DailyTdee, TdeeCalibrationResult
from bodyintel.tracking.weights import format_weight_change

# Rich style per interpretation color
_RICH_STYLES = {
    "#10b981": "green",
    "#f59e0b": "yellow",
    "#8b5cf6": "magenta",
    "#ef4444": "red",
    "#6b7280": "dim",
}


def report_to_dict(report: BodyIntelligenceReport) -> dict[str, Any]:
    """Convert a BodyIntelligenceReport to a JSON-friendly dict."""
    return {
        "period": {
            "days": report.period_days,
            "start_date": report.start_date.isoformat(),
            "end_date": report.end_date.isoformat(),
            "days_with_data": report.days_with_data,
        },
        "response": {
            "accumulated_deficit": report.accumulated_deficit,
            "expected_weight_loss_kg": report.expected_weight_loss,
            "actual_weight_loss_kg": report.actual_weight_loss,
            "score": report.response_score,
            "status": report.response_status.value,
        },
        "quality": {
            "has_data": report.has_composition_data,
            "total_weight_lost_kg": report.total_weight_lost,
            "fat_lost_kg": report.fat_lost,
            "muscle_lost_kg": report.muscle_lost,
            "water_change_kg": report.water_change,
            "fat_loss_efficiency": report.fat_loss_efficiency,
            "status": report.quality_status.value,
        },
        "metabolic": {
            "has_data": report.has_bmr_data,
            "current_bmr": report.current_bmr,
            "previous_bmr": report.previous_bmr,
            "bmr_change": report.bmr_change,
            "expected_bmr_change": report.expected_bmr_change,
            "status": report.metabolic_status.value,
        },
        "confidence": {
            "level": report.confidence.value,
            "message": report.confidence_message,
            "has_enough_data": report.has_enough_data,
        },
    }


def _day_to_dict(day: DailyTdee) -> dict[str, Any]:
    return {
        "date": day.date.isoformat() if day.date else None,
        "resting_energy": day.resting_energy,
        "active_energy": day.active_energy,
        "raw_tdee": day.raw_tdee,
        "tdee": day.tdee,
        "calories_eaten": day.calories_eaten,
        "deficit": day.deficit,
        "projected_weekly_loss_kg": day.projected_weekly_loss_kg,
    }


def calibration_to_dict(result: TdeeCalibrationResult) -> dict[str, Any]:
    """Convert a TdeeCalibrationResult to a JSON-friendly dict."""
    observed = result.observed
    return {
        "tef_multiplier": result.tef_multiplier,
        "period_days": result.period_days,
        "averages": {
            "resting_energy": result.avg_resting_energy,
            "active_energy": result.avg_active_energy,
            "raw_tdee": result.avg_raw_tdee,
            "tdee": result.avg_tdee,
        },
        "days": [_day_to_dict(d) for d in result.days],
        "observed": {
            "observed_tdee": observed.observed_tdee,
            "wearable_avg_tdee": observed.wearable_avg_tdee,
            "avg_calories_eaten": observed.avg_calories_eaten,
            "weight_change_kg": observed.weight_change_kg,
            "days_analyzed": observed.days_analyzed,
            "suggested_tef_multiplier": observed.suggested_tef_multiplier,
            "calibration_needed": observed.calibration_needed,
            "confidence": observed.confidence,
        } if observed else None,
    }


def _kg(value: Optional[float], unit: str) -> str:
    if value is None:
        return "-"
    # Deltas are stored as "lost", so flip the sign to show the change
    return format_weight_change(-value, unit)


class TableFormatter:
    """Format results as Rich tables for terminal display."""

    def __init__(self, console: Optional[Console] = None, weight_unit: str = "kg"):
        """Initialize the formatter.

        Args:
            console: Rich console for output. If None, creates a new one.
            weight_unit: Display unit for weights ('kg' or 'lbs')
        """
        self.console = console or Console()
        self.weight_unit = weight_unit

    def _status_line(self, label: str, interpretation) -> str:
        style = _RICH_STYLES.get(interpretation.color, "white")
        return (
            f"[bold]{label}:[/bold] [{style}]{interpretation.status}[/{style}]\n"
            f"  {interpretation.message}"
        )

    def format_report(self, report: BodyIntelligenceReport) -> None:
        """Print a body intelligence report."""
        confidence = interpret_confidence(report.confidence)
        header = [
            f"[bold]BODY INTELLIGENCE[/bold] - {report.start_date} to {report.end_date}",
            f"Days with food logged: {report.days_with_data} of {report.period_days}",
            self._status_line("Confidence", confidence),
        ]
        self.console.print(Panel("\n".join(header), title="Report"))

        table = Table(title="Energy Balance")
        table.add_column("Metric", style="cyan")
        table.add_column("Value", justify="right")
        table.add_row("Accumulated deficit", f"{report.accumulated_deficit:,} kcal")
        table.add_row("Expected change", _kg(report.expected_weight_loss, self.weight_unit))
        table.add_row("Actual change", _kg(report.actual_weight_loss, self.weight_unit))
        table.add_row("Response score", f"{report.response_score}%")
        self.console.print(table)
        self.console.print(
            self._status_line(
                "Response", interpret_response(report.response_score, report.response_status)
            )
        )

        if report.has_composition_data:
            comp = Table(title="Body Composition Change")
            comp.add_column("Component", style="cyan")
            comp.add_column("Change", justify="right")
            comp.add_row("Total weight", _kg(report.total_weight_lost, self.weight_unit))
            comp.add_row("Fat mass", _kg(report.fat_lost, self.weight_unit))
            comp.add_row("Muscle mass", _kg(report.muscle_lost, self.weight_unit))
            comp.add_row("Water", _kg(report.water_change, self.weight_unit))
            comp.add_row("Efficiency", f"{report.fat_loss_efficiency}%")
            self.console.print(comp)
        self.console.print(
            self._status_line(
                "Quality",
                interpret_quality(
                    report.fat_loss_efficiency,
                    report.quality_status,
                    report.total_weight_lost,
                    report.fat_lost,
                    report.muscle_lost,
                ),
            )
        )

        if report.has_bmr_data:
            self.console.print(
                f"BMR: {report.previous_bmr:.0f} -> {report.current_bmr:.0f} kcal/day "
                f"({report.bmr_change:+d}, expected {report.expected_bmr_change:+d})"
            )
        self.console.print(
            self._status_line(
                "Metabolism", interpret_metabolic(
                    report.metabolic_status, report.bmr_change, report.expected_bmr_change
                )
            )
        )

    def format_calibration(self, result: TdeeCalibrationResult) -> None:
        """Print a TDEE calibration result."""
        if result.days:
            table = Table(title=f"Wearable TDEE (last {result.period_days} days)")
            table.add_column("Date", style="cyan")
            table.add_column("Resting", justify="right")
            table.add_column("Active", justify="right")
            table.add_column("TDEE", justify="right", style="blue")
            table.add_column("Eaten", justify="right")
            table.add_column("Deficit", justify="right")
            for day in result.days:
                table.add_row(
                    day.date.isoformat() if day.date else "",
                    f"{day.resting_energy:.0f}",
                    f"{day.active_energy:.0f}",
                    str(day.tdee),
                    str(day.calories_eaten),
                    f"{day.deficit:+d}",
                )
            self.console.print(table)
            self.console.print(
                f"Average TDEE: {result.avg_tdee} kcal/day "
                f"(raw {result.avg_raw_tdee:.0f} x TEF {result.tef_multiplier:.2f})"
            )
        else:
            self.console.print("[yellow]No days with wearable resting energy[/yellow]")

        observed = result.observed
        if observed is None:
            self.console.print(
                "[dim]Calibration unavailable: need 7+ wearable days and "
                "2+ weigh-ins around both ends of the period[/dim]"
            )
            return

        lines = [
            f"Observed TDEE:   {observed.observed_tdee} kcal/day",
            f"Wearable TDEE:   {observed.wearable_avg_tdee} kcal/day",
            f"Avg eaten:       {observed.avg_calories_eaten} kcal/day",
            f"Weight change:   {_kg(observed.weight_change_kg, self.weight_unit)}",
            f"Suggested TEF:   {observed.suggested_tef_multiplier:.2f}",
            f"Confidence:      {observed.confidence} ({observed.days_analyzed} days)",
        ]
        if observed.calibration_needed:
            lines.append("[yellow]Calibration recommended (>10% gap)[/yellow]")
        else:
            lines.append("[green]Wearable TDEE agrees with the scale[/green]")
        self.console.print(Panel("\n".join(lines), title="Calibration"))
