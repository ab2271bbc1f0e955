"""
Command-line interface for weeksort.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.progress import Progress
from rich.table import Table

from .config import Config
from .constants import COMPLETION_MESSAGE, PROGRAM, get_console, get_logger
from .core import TreeOrganizer
from .errors import WeeksortError
from .progress import ProgressContext
from .stats import StatsManager


def parse_jobs(value: str) -> int:
    """Validate the --jobs argument."""
    try:
        jobs = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid job count: {value}")
    if jobs < 1:
        raise argparse.ArgumentTypeError(f"Job count must be at least 1: {value}")
    return jobs


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROGRAM,
        description="Sort files into year/month/week folders by modification time",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  {PROGRAM} ~/Downloads
  {PROGRAM} ~/Downloads --dry-run
  {PROGRAM} ~/Downloads --reverse --prune
        """
    )

    parser.add_argument(
        "directory", nargs="?",
        help="Directory to organize"
    )
    parser.add_argument(
        "--reverse", "-r", action="store_true",
        help="Move files out of the week folders back into the directory"
    )
    parser.add_argument(
        "--dry-run", "-n", action="store_true", default=None,
        help="Preview operations without making changes"
    )
    parser.add_argument(
        "--prune", action="store_true", default=None,
        help="With --reverse, remove folders left empty afterwards"
    )
    parser.add_argument(
        "--timezone", "--tz", type=str, metavar="TIMEZONE",
        help="Timezone used to bucket modification times (default: system local)"
    )
    parser.add_argument(
        "--jobs", "-j", type=parse_jobs, metavar="N",
        help="Maximum concurrent filesystem operations (default: unbounded)"
    )
    parser.add_argument(
        "--config", type=str, metavar="PATH",
        help="YAML file with default option values"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", default=None,
        help="Enable verbose logging"
    )
    parser.add_argument(
        "--version", "-V", action="store_true",
        help=f"Display the version number of {PROGRAM} and exit"
    )

    return parser


def setup_logging(verbose: bool, console: Console) -> None:
    """Send package log records to the rich console."""
    logger = get_logger()
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    console_handler = RichHandler(console=console, rich_tracebacks=True, show_path=False)
    console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    console_handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    logger.addHandler(console_handler)
    logger.setLevel(logging.DEBUG)


def show_processing_plan(directory: Path, reverse: bool, dry_run: bool, prune: bool,
                         timezone: Optional[str], jobs: Optional[int],
                         console: Console) -> None:
    """Display the processing plan before execution."""
    mode = "REVERSE" if reverse else "ORGANIZE"
    if dry_run:
        mode += " (DRY RUN)"

    console.print("\n[bold]Processing Plan:[/bold]")
    console.print(f"  Directory:       [blue]{escape(str(directory))}[/blue]")
    console.print(f"  Processing Mode: [cyan]{mode}[/cyan]")
    console.print(f"  Timezone:        [cyan]{timezone or 'local'}[/cyan]")
    console.print(f"  Jobs:            [cyan]{jobs or 'unbounded'}[/cyan]")
    if reverse:
        console.print(f"  Prune Folders:   [cyan]{'Yes' if prune else 'No'}[/cyan]")
    console.print()


def print_summary(stats: StatsManager, reverse: bool, console: Console) -> None:
    """Print processing summary."""
    table = Table(title="Processing Summary")
    table.add_column("Category", style="cyan")
    table.add_column("Count", style="green")

    table.add_row("Files Moved", str(stats.get_moved()))
    table.add_row("Folders Scanned", str(stats.get_scanned()))
    if reverse:
        table.add_row("Already In Place", str(stats.get_skipped()))
        table.add_row("Folders Pruned", str(stats.get_pruned()))
    else:
        table.add_row("Folders Created", str(stats.get_created()))

    console.print(table)


def main(argv: Optional[list] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.version:
        from . import __version__
        print(__version__)
        return 0

    if not args.directory:
        parser.error("A directory to organize is required")

    console = get_console()

    try:
        config = Config(config_path=args.config)
        jobs = args.jobs or config.get_max_concurrency()
    except WeeksortError as e:
        print(f"Error: {e}")
        return 1

    dry_run = args.dry_run if args.dry_run is not None else config.get_dry_run()
    prune = args.prune if args.prune is not None else config.get_prune_empty_dirs()
    verbose = args.verbose if args.verbose is not None else config.get_verbose()
    timezone = args.timezone or config.get_timezone()

    setup_logging(verbose, console)

    if args.prune and not args.reverse:
        get_logger().warning("--prune only applies with --reverse; ignoring it")

    try:
        directory = Path(args.directory).expanduser().resolve()
    except (OSError, RuntimeError) as e:
        print(f"Error: Cannot resolve directory {args.directory}: {e}")
        return 1
    if not directory.exists():
        print(f"Error: Directory does not exist: {directory}")
        return 1
    if not directory.is_dir():
        print(f"Error: Not a directory: {directory}")
        return 1

    try:
        organizer = TreeOrganizer(dry_run=dry_run, timezone=timezone,
                                  max_concurrency=jobs, prune_empty_dirs=prune)
    except WeeksortError as e:
        print(f"Error: {e}")
        return 1

    show_processing_plan(directory, args.reverse, dry_run, prune, timezone, jobs, console)

    try:
        with Progress(console=console, transient=True) as progress:
            label = "Flattening files..." if args.reverse else "Organizing files..."
            task = progress.add_task(label, total=0)
            progress_ctx = ProgressContext(progress, task)

            if args.reverse:
                stats = organizer.reverse_organize(directory, progress_ctx)
            else:
                stats = organizer.organize(directory, progress_ctx)

        print_summary(stats, args.reverse, console)
        console.print(f"\n[green]{COMPLETION_MESSAGE}[/green]")
        return 0

    except KeyboardInterrupt:
        console.print("\n[red]Operation cancelled by user[/red]")
        return 1
    except Exception as e:
        console.print(f"\n[red]Fatal error: {escape(str(e))}[/red]")
        return 1


if __name__ == "__main__":
    sys.exit(main())
