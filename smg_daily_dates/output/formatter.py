"""
Console output formatting using Rich.
"""

from typing import List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from smg_daily_dates.data.schemas import DayClassification, LookbackResult, RangeResult


class ConsoleFormatter:
    """Formats business-day results for console display using Rich."""

    def __init__(self, console: Optional[Console] = None):
        """Initialize the console formatter."""
        self.console = console or Console()

    def print_lookback_result(self, result: LookbackResult) -> None:
        """
        Print the most recent business days.

        Args:
            result: LookbackResult to display.
        """
        self.console.print()
        self.console.rule("[bold blue]Recent Business Days[/bold blue]")
        self.console.print()

        summary_table = Table(show_header=False, box=None)
        summary_table.add_column("Label", style="cyan", width=20)
        summary_table.add_column("Value", style="white")

        summary_table.add_row("Reference Date:", result.reference_date.isoformat())
        summary_table.add_row("Requested Days:", str(result.requested_days))
        summary_table.add_row(
            "Found Days:",
            Text(
                str(result.found_days),
                style="bold green" if result.found_days == result.requested_days else "bold yellow",
            ),
        )
        summary_table.add_row("Days Scanned:", str(result.scanned_days))
        summary_table.add_row("Holidays Loaded:", str(result.holidays_loaded))
        if result.start_date:
            summary_table.add_row(
                "Date Range:", f"{result.start_date.isoformat()} - {result.end_date.isoformat()}"
            )

        self.console.print(Panel(summary_table, title="[bold]Summary[/bold]"))

        if result.business_days:
            self.print_days(result.business_days, title="Business Days")

        self._print_warnings(result.warnings)
        self.console.print()

    def print_range_result(self, result: RangeResult) -> None:
        """
        Print every date of a range with its classification.

        Args:
            result: RangeResult to display.
        """
        request = result.request

        self.console.print()
        self.console.rule("[bold blue]Business Days in Range[/bold blue]")
        self.console.print()

        calc_table = Table(show_header=False, box=None)
        calc_table.add_column("Label", style="cyan", width=20)
        calc_table.add_column("Value", style="white", justify="right", width=24)

        calc_table.add_row(
            "Period:", f"{request.start_date.isoformat()} - {request.end_date.isoformat()}"
        )
        calc_table.add_row("Exclude Weekends:", "yes" if request.exclude_weekends else "no")
        calc_table.add_row("Exclude Holidays:", "yes" if request.exclude_holidays else "no")
        calc_table.add_row("Total Days:", str(result.total_days))
        calc_table.add_row("Skipped Days:", f"- {result.skipped_days}")
        calc_table.add_row("", "─" * 15)
        calc_table.add_row(
            Text("Business Days:", style="bold green"),
            Text(str(result.business_day_count), style="bold green"),
        )

        self.console.print(Panel(calc_table, title="[bold]Calculation[/bold]"))

        self.print_days(result.dates, title="Dates")
        self._print_warnings(result.warnings)
        self.console.print()

    def print_days(self, days: List[DayClassification], title: str = "Dates") -> None:
        """
        Print a table of classified days.

        Args:
            days: Days to display.
            title: Table title.
        """
        table = Table(title=f"[bold]{title}[/bold]")
        table.add_column("Date", style="cyan", width=12)
        table.add_column("Day", style="dim", width=10)
        table.add_column("Business Day", justify="center")
        table.add_column("Skip Reason", style="yellow")

        for day in days:
            table.add_row(
                day.date.isoformat(),
                day.day_of_week,
                "[green]yes[/green]" if day.is_business_day else "[red]no[/red]",
                day.skip_reason.value if day.skip_reason else "",
            )

        self.console.print(table)

    def _print_warnings(self, warnings: List[str]) -> None:
        if warnings:
            self.console.print()
            for warning in warnings:
                self.console.print(f"[yellow]Warning:[/yellow] {warning}")

    def print_error(self, message: str) -> None:
        """
        Print an error message.

        Args:
            message: Error message to display.
        """
        self.console.print(f"[bold red]Error:[/bold red] {message}")

    def print_success(self, message: str) -> None:
        """
        Print a success message.

        Args:
            message: Success message to display.
        """
        self.console.print(f"[bold green]Success:[/bold green] {message}")
