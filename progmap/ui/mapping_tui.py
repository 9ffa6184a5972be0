"""Terminal User Interface for progmap.

This module provides the MappingTUI class, a Rich-based interactive TUI
for reviewing matching results and applying manual overrides.

Example:
    from progmap.ui import MappingTUI

    tui = MappingTUI()
    tui.display_summary(session.summary())
    tui.display_mappings(session.entries())
    applied = tui.review_mappings(session)
"""

from typing import Callable, List, Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    Progress,
    TaskProgressColumn,
    TextColumn,
    TimeRemainingColumn,
)
from rich.prompt import Prompt
from rich.table import Table

from progmap.matching import score_band
from progmap.models import (
    ColumnDetection,
    ExportSummary,
    MappingEntry,
    MappingFilter,
    MappingStatus,
    MappingSummary,
)
from progmap.orchestration import MappingSession

_STATUS_LABELS = {
    MappingStatus.CONFIDENT: "[green]confident[/green]",
    MappingStatus.UNCERTAIN: "[yellow]uncertain[/yellow]",
    MappingStatus.UNMAPPED: "[red]unmapped[/red]",
}


class MappingTUI:
    """Rich-based Terminal User Interface for program mapping.

    Provides display and interactive review methods for a mapping session:
    - Input and detection summary
    - Status counts and the mapping table
    - Progress tracking for the matching pass
    - Interactive review of uncertain and unmapped values

    Args:
        console: Optional Rich Console instance for output. Pass a Console
            writing to a StringIO to capture output in tests.

    Attributes:
        console: The Rich Console instance used for all output.
    """

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()

    def display_input_summary(
        self,
        program_count: int,
        row_count: int,
        detection: ColumnDetection,
        databases: Optional[Sequence[str]] = None,
    ) -> None:
        """Show what was loaded and which columns were detected."""
        lines = [
            f"Canonical programs: {program_count:,}",
            f"Rows: {row_count:,}",
            f"Program column: {escape(detection.program or 'not detected')}",
            f"Email column: {escape(detection.email or 'not detected')}",
            f"Phone column: {escape(detection.phone or 'not detected')}",
            f"Contact ID column: {escape(detection.contact_id or 'not detected')}",
            f"Database column: {escape(detection.database or 'not detected')}",
        ]
        if databases:
            lines.append(f"Databases found ({len(databases)}): {escape(', '.join(databases))}")
        self.console.print(Panel("\n".join(lines), title="Input", border_style="blue"))

    def display_summary(self, summary: MappingSummary) -> None:
        """Display status counts in a panel."""
        text = (
            f"Distinct values: {summary.total:,}\n"
            f"[green]Confident: {summary.confident:,}[/green]\n"
            f"[yellow]Uncertain: {summary.uncertain:,}[/yellow]\n"
            f"[red]Unmapped: {summary.unmapped:,}[/red]"
        )
        self.console.print(Panel(text, title="Matching Results", border_style="blue"))

    def display_mappings(
        self,
        entries: List[MappingEntry],
        mapping_filter: MappingFilter = MappingFilter.ALL,
    ) -> None:
        """Display the mapping table.

        Args:
            entries: Reporting rows, already filtered.
            mapping_filter: Filter used, shown in the table title.
        """
        if not entries:
            self.console.print(f"[yellow]No {mapping_filter.value} mappings.[/yellow]")
            return

        table = Table(title=f"Mappings ({mapping_filter.value})")
        table.add_column("Original", style="white")
        table.add_column("Mapped To", style="cyan")
        table.add_column("Score", justify="center")
        table.add_column("Status")
        table.add_column("Rows", justify="right")

        for entry in entries:
            mapping = entry.mapping
            if mapping.mapped_to:
                target = escape(self._truncate_name(mapping.mapped_to))
            elif mapping.status is MappingStatus.UNCERTAIN:
                target = "[dim]pending[/dim]"
            else:
                target = "[dim]-[/dim]"
            table.add_row(
                escape(self._truncate_name(entry.value)),
                target,
                self._format_score(mapping.score),
                _STATUS_LABELS[mapping.status],
                f"{entry.count:,}",
            )

        self.console.print(table)

    def create_progress_callback(
        self, total: int, description: str = "Matching programs..."
    ) -> tuple[Progress, Callable[[int], None]]:
        """Create a progress bar and a callback that advances it.

        The caller must use the returned Progress as a context manager.

        Example:
            progress, callback = tui.create_progress_callback(len(values))
            with progress:
                session.run_matching(progress_callback=callback)
        """
        progress = Progress(
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            TimeRemainingColumn(),
            console=self.console,
        )
        task_id = progress.add_task(description, total=total)

        def callback(completed: int) -> None:
            progress.update(task_id, completed=completed)

        return progress, callback

    def review_mappings(self, session: MappingSession) -> int:
        """Walk through uncertain and unmapped values, prompting for overrides.

        Actions per value: (a)ccept the suggestion, (c)hoose a program,
        (u)nmapped, (s)kip, (q)uit. Ctrl+C is treated as quit.

        Returns:
            Number of overrides applied.
        """
        pending = [
            entry
            for entry in session.entries()
            if entry.mapping.status is not MappingStatus.CONFIDENT
        ]
        if not pending:
            self.console.print("[green]Nothing to review.[/green]")
            return 0

        programs = session.programs
        applied = 0
        total = len(pending)

        for idx, entry in enumerate(pending, start=1):
            try:
                self._display_entry(entry, idx, total)
                action = self._prompt_action(has_suggestion=bool(entry.mapping.mapped_to))

                if action == "q":
                    break
                if action == "s":
                    continue
                if action == "a":
                    changed = session.override(entry.value, target=entry.mapping.mapped_to)
                elif action == "u":
                    changed = session.override(entry.value, leave_unmapped=True)
                else:
                    target = self._select_program(programs)
                    changed = session.override(entry.value, target=target)

                if changed:
                    applied += 1
            except KeyboardInterrupt:
                self.console.print("\n[yellow]Review cancelled by user.[/yellow]")
                break

        self.console.print(f"[dim]{applied} override(s) applied.[/dim]")
        return applied

    def display_export_summary(self, export: ExportSummary) -> None:
        text = (
            f"Output: {escape(str(export.output_path))}\n"
            f"Rows written: {export.rows_written:,}\n"
            f"Values with a target: {export.mapped_values:,}"
        )
        self.console.print(Panel(text, title="Export", border_style="green"))

    def display_errors(self, errors: List[str]) -> None:
        """Display error messages in a separate panel, at most ten of them."""
        max_display = 10
        displayed_errors = errors[:max_display]
        remaining = len(errors) - max_display

        error_text = "\n".join(f"- {escape(e)}" for e in displayed_errors)
        if remaining > 0:
            error_text += f"\n\n... and {remaining} more errors"

        self.console.print(
            Panel(error_text, title=f"Errors ({len(errors)})", border_style="red")
        )

    def _display_entry(self, entry: MappingEntry, number: int, total: int) -> None:
        mapping = entry.mapping
        suggestion = escape(mapping.mapped_to or "(none)")
        text = (
            f"[bold]Original:[/bold] {escape(entry.value)}\n"
            f"[bold]Suggestion:[/bold] {suggestion}\n"
            f"[bold]Score:[/bold] {self._format_score(mapping.score)}\n"
            f"[bold]Rows:[/bold] {entry.count:,}"
        )
        self.console.print(
            Panel(text, title=f"Review {number}/{total}", border_style="yellow")
        )

    def _prompt_action(self, has_suggestion: bool) -> str:
        """Ask for the action on the current value.

        Returns:
            One of 'a', 'c', 'u', 's', 'q'. 'a' is only offered when there
            is a suggestion to accept.
        """
        if has_suggestion:
            return Prompt.ask(
                "(a)ccept, (c)hoose, (u)nmapped, (s)kip, (q)uit",
                choices=["a", "c", "u", "s", "q"],
                default="a",
            )
        return Prompt.ask(
            "(c)hoose, (u)nmapped, (s)kip, (q)uit",
            choices=["c", "u", "s", "q"],
            default="s",
        )

    def _select_program(self, programs: List[str]) -> Optional[str]:
        """List canonical programs and ask for one by number.

        Returns:
            The chosen program, or None if the user entered nothing.
        """
        for idx, program in enumerate(programs, start=1):
            self.console.print(f"  {idx}. {escape(program)}")

        while True:
            selection = Prompt.ask("Program number (empty to cancel)", default="").strip()
            if not selection:
                return None
            try:
                number = int(selection)
            except ValueError:
                number = 0
            if 1 <= number <= len(programs):
                return programs[number - 1]
            self.console.print(
                f"[red]Invalid selection '{selection}'. "
                f"Enter a number between 1 and {len(programs)}.[/red]"
            )

    def _format_score(self, score: int) -> str:
        """Format a score with the color of its band."""
        band = score_band(score)
        if band is MappingStatus.CONFIDENT:
            return f"[green]{score}%[/green]"
        if band is MappingStatus.UNCERTAIN:
            return f"[yellow]{score}%[/yellow]"
        return f"[red]{score}%[/red]"

    def _truncate_name(self, name: str, max_length: int = 60) -> str:
        if len(name) > max_length:
            return name[: max_length - 3] + "..."
        return name
