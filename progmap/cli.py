"""
Program Mapper - CLI Interface.

A command-line interface for reconciling free-text program names collected
from form submissions with the official program catalog.

Usage Examples:
    # Report how every distinct value maps (read-only)
    progmap match programs.txt submissions.xlsx

    # Only show values that need review
    progmap match programs.txt submissions.xlsx --filter uncertain

    # Export the cleaned file, fixing two values by hand
    progmap map programs.txt submissions.xlsx -o clean.xlsx \\
        --set "MED=Medicine" --unmap "N/A"

    # Review uncertain values interactively, then export three columns
    progmap map programs.txt submissions.csv --interactive --compact
"""

import time
from pathlib import Path
from typing import List, Optional, Tuple

import typer
from rich.console import Console
from rich.markup import escape

from progmap import __version__
from progmap.loading import read_table
from progmap.models import ExportSummary, MappingFilter
from progmap.operations import ExportWriter
from progmap.orchestration import MappingLogger, MappingSession
from progmap.ui import MappingTUI

# Initialize Typer app
app = typer.Typer(
    name="progmap",
    help="Program Mapper - Reconcile free-text program names with the official catalog.",
    add_completion=False,
    no_args_is_help=True,
)

# Rich console for consistent output formatting
console = Console()

FILTER_CHOICES = [f.value for f in MappingFilter]


def version_callback(value: bool) -> None:
    """Display version information and exit."""
    if value:
        console.print(f"Program Mapper v{__version__}")
        raise typer.Exit()


def validate_input_file(path: Path, label: str) -> None:
    """
    Validate that an input file exists and is a regular file.

    Args:
        path: Path to validate.
        label: Human-readable name used in the error message.

    Raises:
        typer.Exit: If validation fails with descriptive error message.
    """
    if not path.exists():
        console.print(f"[red]Error:[/red] {label} does not exist: {escape(str(path))}")
        raise typer.Exit(1)

    if not path.is_file():
        console.print(f"[red]Error:[/red] {label} is not a file: {escape(str(path))}")
        raise typer.Exit(1)


def validate_filter(value: str) -> str:
    """
    Validate the --filter option.

    Raises:
        typer.BadParameter: If value is not a known filter.
    """
    value = value.lower()
    if value not in FILTER_CHOICES:
        raise typer.BadParameter(f"Filter must be one of: {', '.join(FILTER_CHOICES)}")
    return value


def parse_assignment(assignment: str) -> tuple[str, str]:
    """
    Split a ``VALUE=TARGET`` option into its parts.

    The split happens at the first '=', so TARGET may contain '=' but
    VALUE cannot. Values containing '=' can only be remapped through
    ``--interactive`` review.

    Raises:
        typer.BadParameter: If the option has no '=' or an empty side.
    """
    value, sep, target = assignment.partition("=")
    value, target = value.strip(), target.strip()
    if not sep or not value or not target:
        raise typer.BadParameter(f"Expected VALUE=TARGET, got '{assignment}'")
    return value, target


def build_session(
    programs_file: Path, data_file: Path, column: Optional[str]
) -> MappingSession:
    """Load the catalog and the data file into a new session."""
    session = MappingSession()
    session.load_reference_file(programs_file)
    session.load_table(read_table(data_file))
    if column:
        session.set_program_field(column)
    if session.program_field is None:
        headers = ", ".join(session.data.headers)
        raise ValueError(
            f"Program column not detected. Use --column with one of: {headers}"
        )
    return session


def apply_overrides(
    session: MappingSession,
    assignments: List[Tuple[str, str]],
    unmapped: List[str],
) -> List[str]:
    """
    Apply --set and --unmap options to a matched session.

    Every option is tried; the ones that cannot be applied are reported
    together instead of stopping at the first.

    Returns:
        One error message per rejected option (empty if all applied).
    """
    errors: List[str] = []
    catalog = set(session.programs)

    for value, target in assignments:
        if target not in catalog:
            errors.append(f"'{target}' is not in the official program list")
            continue
        try:
            session.override(value, target=target)
        except KeyError:
            errors.append(f"Value not found in the program column: '{value}'")

    for value in unmapped:
        try:
            session.override(value, leave_unmapped=True)
        except KeyError:
            errors.append(f"Value not found in the program column: '{value}'")

    return errors


def run_matching(session: MappingSession, tui: MappingTUI) -> None:
    """Run the matching pass behind a progress bar."""
    total = len(session.count_values())
    progress, callback = tui.create_progress_callback(total)
    with progress:
        session.run_matching(progress_callback=callback)


def write_log(
    logger_instance: MappingLogger,
    session: MappingSession,
    programs_file: Path,
    data_file: Path,
    started: float,
    export: Optional[ExportSummary] = None,
    errors: Optional[List[str]] = None,
) -> None:
    """Write every section of the run log."""
    with logger_instance as log:
        log.log_header()
        log.log_reference_list(programs_file, session.programs)
        log.log_input(
            data_file,
            len(session.data.rows) if session.data else 0,
            session.detection,
            session.unique_databases(),
        )
        log.log_matching_phase(session.summary(), session.entries())
        log.log_overrides(session.overrides)
        if export is not None:
            log.log_export(export)
        if errors:
            log.log_errors(errors)
        log.log_summary(time.monotonic() - started)


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Program Mapper - Reconcile free-text program names with the official catalog."""
    pass


@app.command()
def match(
    programs_file: Path = typer.Argument(
        ...,
        help="Official program list (one per line, or DAX DATATABLE text).",
    ),
    data_file: Path = typer.Argument(
        ...,
        help="Submissions file (.csv, .xlsx or .xlsm).",
    ),
    column: Optional[str] = typer.Option(
        None,
        "--column",
        "-c",
        help="Header of the program column (detected automatically if omitted).",
    ),
    filter_: str = typer.Option(
        "all",
        "--filter",
        "-f",
        help="Show only: all, confident, uncertain or unmapped.",
        callback=validate_filter,
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        "-l",
        help="Path for log file output.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-V",
        help="Enable verbose output.",
    ),
) -> None:
    """
    Match program values without exporting anything.

    Every distinct value in the program column is scored against the
    official list and reported as confident, uncertain or unmapped.
    """
    validate_input_file(programs_file, "Programs file")
    validate_input_file(data_file, "Data file")

    started = time.monotonic()
    logger_instance: Optional[MappingLogger] = None
    if log_file:
        try:
            logger_instance = MappingLogger(log_file, mode="MATCH ONLY")
        except OSError as e:
            console.print(
                f"[yellow]Warning:[/yellow] Cannot write log file: {escape(str(e))}. "
                "Continuing without logging."
            )
            logger_instance = None

    tui = MappingTUI(console=console)

    try:
        session = build_session(programs_file, data_file, column)
        if verbose:
            tui.display_input_summary(
                len(session.programs),
                len(session.data.rows),
                session.detection,
                session.unique_databases(),
            )

        run_matching(session, tui)

        mapping_filter = MappingFilter(filter_)
        tui.display_summary(session.summary())
        tui.display_mappings(session.entries(mapping_filter), mapping_filter)

        if logger_instance:
            write_log(logger_instance, session, programs_file, data_file, started)
            console.print(f"[dim]Log written to: {escape(str(logger_instance.get_log_path()))}[/dim]")

    except KeyboardInterrupt:
        console.print("\n[yellow]Matching interrupted by user.[/yellow]")
        raise typer.Exit(130)

    except ValueError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    except OSError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command(name="map")
def map_programs(
    programs_file: Path = typer.Argument(
        ...,
        help="Official program list (one per line, or DAX DATATABLE text).",
    ),
    data_file: Path = typer.Argument(
        ...,
        help="Submissions file (.csv, .xlsx or .xlsm).",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Export path (.xlsx or .csv). Defaults to mapped_programs_<date>.xlsx.",
    ),
    column: Optional[str] = typer.Option(
        None,
        "--column",
        "-c",
        help="Header of the program column (detected automatically if omitted).",
    ),
    assignments: List[str] = typer.Option(
        [],
        "--set",
        "-s",
        help=(
            "Manual mapping VALUE=TARGET (repeatable). Split at the first '='; "
            "use --interactive for values that contain '='."
        ),
    ),
    unmapped: List[str] = typer.Option(
        [],
        "--unmap",
        "-u",
        help="Leave VALUE unmapped (repeatable).",
    ),
    interactive: bool = typer.Option(
        False,
        "--interactive",
        "-i",
        help="Review uncertain and unmapped values before exporting.",
    ),
    compact: bool = typer.Option(
        False,
        "--compact",
        help="Export only contact id, email and program columns.",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        "-l",
        help="Path for log file output.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-V",
        help="Enable verbose output.",
    ),
) -> None:
    """
    Match program values, apply overrides and export the mapped file.

    Runs the complete workflow:
    1. Load: Read the official list and the submissions file
    2. Match: Classify every distinct program value
    3. Override: Apply --set / --unmap and the interactive review
    4. Export: Write the file with program values replaced
    """
    validate_input_file(programs_file, "Programs file")
    validate_input_file(data_file, "Data file")

    parsed = [parse_assignment(a) for a in assignments]

    started = time.monotonic()
    logger_instance: Optional[MappingLogger] = None
    if log_file:
        try:
            logger_instance = MappingLogger(log_file, mode="EXPORT")
        except OSError as e:
            console.print(f"[red]Error:[/red] Cannot write log file: {escape(str(e))}")
            raise typer.Exit(1)

    tui = MappingTUI(console=console)

    try:
        session = build_session(programs_file, data_file, column)
        if verbose:
            tui.display_input_summary(
                len(session.programs),
                len(session.data.rows),
                session.detection,
                session.unique_databases(),
            )

        run_matching(session, tui)

        errors = apply_overrides(session, parsed, unmapped)
        if errors:
            tui.display_errors(errors)
            if logger_instance:
                write_log(
                    logger_instance, session, programs_file, data_file, started, errors=errors
                )
            console.print("[red]Error:[/red] No file exported. Fix the options above and retry.")
            raise typer.Exit(1)

        if interactive:
            tui.review_mappings(session)

        tui.display_summary(session.summary())
        if verbose:
            tui.display_mappings(session.entries())

        headers, rows = session.export_rows(compact=compact)
        output_path = output or ExportWriter.default_output_path(Path.cwd())
        export = ExportWriter(session.store).write(rows, headers, output_path)
        tui.display_export_summary(export)

        if logger_instance:
            write_log(logger_instance, session, programs_file, data_file, started, export)
            console.print(f"\n[dim]Log written to: {escape(str(logger_instance.get_log_path()))}[/dim]")

    except KeyboardInterrupt:
        console.print("\n[yellow]Mapping interrupted by user.[/yellow]")
        raise typer.Exit(130)

    except ValueError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    except PermissionError as e:
        console.print(f"[red]Error:[/red] Permission denied - {escape(str(e))}")
        raise typer.Exit(1)

    except OSError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
