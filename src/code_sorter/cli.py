"""
Main CLI entry point for Code Sorter
"""

import logging
import sys
import traceback
from pathlib import Path

import click
from rich.console import Console
from rich.syntax import Syntax

from code_sorter import __version__
from code_sorter.commands.sort import SortCommand
from code_sorter.core.backup_manager import BackupManager
from code_sorter.core.base_processor import ProcessingStatus, ProcessResult
from code_sorter.core.config import PROJECT_CONFIG_NAME, Config
from code_sorter.core.exceptions import ParseError
from code_sorter.core.ordering import STRATEGIES

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@click.group()
@click.version_option(
    version=__version__,
    prog_name="code-sorter",
)
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True),
    help="Configuration file path",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    help="Suppress output",
)
@click.pass_context
def cli(
    ctx,
    config: str | None,
    verbose: bool,
    quiet: bool,
):
    """Declaration sorter for JavaScript and TypeScript

    Reorders imports, variables, functions, classes, interfaces, enums and
    class members into a canonical order, keeping comments and formatting.
    """
    ctx.ensure_object(dict)

    # Load configuration
    if config:
        ctx.obj["config"] = Config.from_file(Path(config))
    else:
        ctx.obj["config"] = Config.load_hierarchy(Path.cwd())

    # Apply CLI flags
    if verbose or ctx.obj["config"].verbose:
        ctx.obj["config"].verbose = True
        logging.getLogger().setLevel(logging.DEBUG)

    if quiet or ctx.obj["config"].quiet:
        ctx.obj["config"].quiet = True
        logging.getLogger().setLevel(logging.WARNING)


def _show_diff(diff: str) -> None:
    Console().print(Syntax(diff, "diff", theme="ansi_dark"))


def _report(config: Config, results: list[ProcessResult], show_diff: bool) -> int:
    """Print per-file results and return the process exit code"""
    for result in results:
        if show_diff and result.diff:
            _show_diff(result.diff)
        if not config.quiet or result.status == ProcessingStatus.ERROR:
            click.echo(str(result), err=result.status == ProcessingStatus.ERROR)

    errors = [r for r in results if r.status == ProcessingStatus.ERROR]
    pending = [r for r in results if r.status == ProcessingStatus.NEEDS_SORTING]

    if not config.quiet:
        click.echo(
            f"\n{len(results)} files processed, "
            f"{sum(1 for r in results if r.is_changed)} "
            f"{'to sort' if config.check or config.dry_run else 'sorted'}, "
            f"{len(errors)} errors"
        )

    if errors:
        return 1
    if config.check and pending:
        return 1
    return 0


def _run_sort(
    config: Config,
    paths: tuple[str, ...],
    recursive: bool,
    show_diff: bool,
) -> None:
    errors = config.validate()
    if errors:
        for error in errors:
            click.echo(f"Configuration error: {error}", err=True)
        sys.exit(2)

    if not paths:
        click.echo("No paths given. Pass files or directories to sort.", err=True)
        sys.exit(2)

    command = SortCommand(config)
    results = command.execute(
        [Path(p) for p in paths],
        recursive=recursive,
        show_diff=show_diff,
    )
    sys.exit(_report(config, results, show_diff))


def _sort_stdin(config: Config) -> None:
    """Sort one document read from stdin and write it to stdout"""
    command = SortCommand(config)
    content = click.get_text_stream("stdin").read()
    try:
        ordered = command.sort_text(content)
    except ParseError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    click.echo(ordered, nl=False)


@cli.command()
@click.argument(
    "paths",
    nargs=-1,
    type=click.Path(exists=True),
)
@click.option(
    "--recursive",
    "-r",
    is_flag=True,
    help="Process directories recursively",
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Preview changes without applying",
)
@click.option(
    "--check",
    is_flag=True,
    help="Exit with status 1 if any file is not sorted",
)
@click.option(
    "--diff",
    "show_diff",
    is_flag=True,
    help="Show a unified diff of the changes",
)
@click.option(
    "--strategy",
    type=click.Choice(STRATEGIES),
    help="Ordering strategy (overrides configuration)",
)
@click.option(
    "--no-backup",
    is_flag=True,
    help="Skip creating backup files",
)
@click.option(
    "--stdin",
    "use_stdin",
    is_flag=True,
    help="Read source from stdin and write the sorted result to stdout",
)
@click.pass_context
def sort(
    ctx,
    paths: tuple[str, ...],
    recursive: bool,
    dry_run: bool,
    check: bool,
    show_diff: bool,
    strategy: str | None,
    no_backup: bool,
    use_stdin: bool,
):
    """Sort declarations of JavaScript and TypeScript files

    Files are rewritten in place. A file that cannot be parsed is reported
    and left untouched.

    Examples:
        code-sorter sort ./src -r              # Sort a whole tree
        code-sorter sort app.ts --diff         # Sort and show what moved
        code-sorter sort ./src -r --check      # Fail if anything is unsorted
        cat app.ts | code-sorter sort --stdin  # Filter mode
    """
    config = ctx.obj["config"]
    config.dry_run = config.dry_run or dry_run
    config.check = config.check or check
    if no_backup:
        config.backup.enabled = False
    if strategy:
        config.ordering.strategy = strategy

    if use_stdin:
        _sort_stdin(config)
        return

    _run_sort(config, paths, recursive, show_diff)


@cli.command()
@click.argument(
    "paths",
    nargs=-1,
    type=click.Path(exists=True),
)
@click.option(
    "--recursive",
    "-r",
    is_flag=True,
    help="Process directories recursively",
)
@click.option(
    "--diff",
    "show_diff",
    is_flag=True,
    help="Show a unified diff of the pending changes",
)
@click.pass_context
def check(
    ctx,
    paths: tuple[str, ...],
    recursive: bool,
    show_diff: bool,
):
    """Report files whose declarations are not sorted

    Nothing is written. Exits with status 1 when any file would change.
    """
    config = ctx.obj["config"]
    config.check = True
    _run_sort(config, paths, recursive, show_diff)


@cli.command()
@click.pass_context
def init(ctx):
    """Initialize configuration in current directory

    Creates a default .code-sorter.yaml configuration file in the current
    directory.
    """
    config_path = Path.cwd() / PROJECT_CONFIG_NAME

    if config_path.exists():
        click.confirm(f"{config_path} already exists. Overwrite?", abort=True)

    default_config = Config()
    default_config.save(config_path)

    click.echo(f"Created configuration file: {config_path}")
    click.echo("Edit this file to customize your settings.")


@cli.command()
@click.option(
    "--sessions",
    is_flag=True,
    help="List backup sessions",
)
@click.option(
    "--restore",
    help="Restore from backup session ID",
)
@click.option(
    "--clean",
    is_flag=True,
    help="Clean old backup sessions",
)
@click.pass_context
def backup(
    ctx,
    sessions: bool,
    restore: str | None,
    clean: bool,
):
    """Manage backup sessions

    View, restore, or clean backup sessions created by the sort command.
    """
    config = ctx.obj["config"]

    manager = BackupManager(
        backup_dir=config.backup.directory,
        compression=config.backup.compression,
        keep_sessions=config.backup.keep_sessions,
    )

    if sessions:
        all_sessions = manager.list_sessions()
        if not all_sessions:
            click.echo("No backup sessions found.")
        else:
            click.echo(f"Found {len(all_sessions)} backup sessions:")
            for session in all_sessions:
                click.echo(f"  - {session['session_id']} ({session['timestamp']})")
                if "files_backed_up" in session:
                    click.echo(f"    Files: {len(session['files_backed_up'])}")

    elif restore:
        click.confirm(f"Restore all files from session {restore}?", abort=True)
        if manager.restore_session(restore):
            click.echo(f"Successfully restored session: {restore}")
        else:
            click.echo(f"Failed to restore session: {restore}", err=True)
            sys.exit(1)

    elif clean:
        click.confirm(
            f"Remove backup sessions older than {config.backup.keep_sessions} most recent?",
            abort=True,
        )
        removed = manager.clean_sessions()
        click.echo(f"Removed {removed} old backup sessions.")

    else:
        click.echo("Use --sessions, --restore, or --clean")


def main():
    """Main entry point"""
    try:
        cli(obj={})
    except KeyboardInterrupt:
        click.echo("\nOperation cancelled by user.", err=True)
        sys.exit(130)
    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        if "--verbose" in sys.argv or "-v" in sys.argv:
            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
