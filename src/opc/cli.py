"""Command-line interface for the blog content manager.

Commands: list, create, update, delete, view, help. Running `opc` with no
command prints the help text. Errors from the content layer are caught here
and reported on stderr with exit status 1; nothing propagates as a traceback.
"""
import functools
import logging
from pathlib import Path
from typing import Optional

import click

from opc import __version__
from opc.config import load_settings
from opc.content import Cancelled, ContentManager
from opc.errors import OpcError
from opc.models import STATUSES
from opc.prompts import AnswerProvider, ClickAnswers
from opc.report import (create_lines, delete_lines, entity_summary_lines, list_lines,
                        update_lines, view_lines)
from opc.storage import ContentRepository
from opc.theme import BOLD, DIM, ERROR_COLOR, HEADER_COLOR, WARNING_COLOR, color

logger = logging.getLogger(__name__)

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"

HELP_TEXT = f"""
{{title}}

  Create and manage project and task entries of the blog.

{{usage}}
  opc [OPTIONS] COMMAND [ARGS]...

{{options}}
  --content-dir PATH    Content directory (env OPC_CONTENT_DIR)
  --base-url URL        Public base URL (env OPC_BASE_URL)
  --strict              Abort when a file has malformed front matter
  -v, --verbose         More log output (-vv for debug)
  -V, --version         Show the version
  -h, --help            Show click's short help

{{commands}}
  list [OPTIONS]        List projects and tasks
      -p, --projects        Only projects
      -t, --tasks           Only tasks
      --id ID               Filter by id, e.g. p1, t2
      --status STATUS       Filter by status: {', '.join(STATUSES)}
  create [project|task] Create an entry (asks for the type when omitted)
      --ascii               Use an ASCII transliteration of the title as file name
  update ID [STATUS]    Set the status (asks when STATUS is omitted)
  delete ID             Delete an entry after confirmation
      -y, --yes             Do not ask for confirmation
  view ID               Show file path, URL and project link for an id
  help                  Show this help

{{examples}}
  opc create project
  opc list --tasks --status in-progress
  opc update t3 completed
  opc view p1
"""


class ClickEchoHandler(logging.Handler):
    """Log records go to whatever stderr click is writing to right now."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            click.echo(self.format(record), err=True)
        except Exception:
            self.handleError(record)


def configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    root = logging.getLogger("opc")
    root.setLevel(level)
    if not any(isinstance(h, ClickEchoHandler) for h in root.handlers):
        handler = ClickEchoHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)


def help_text() -> str:
    return HELP_TEXT.format(
        title=color("opc - blog content manager", HEADER_COLOR, BOLD),
        usage=color("Usage:", BOLD),
        options=color("Options:", BOLD),
        commands=color("Commands:", BOLD),
        examples=color("Examples:", BOLD),
    )


def _echo_lines(lines) -> None:
    for line in lines:
        click.echo(line)


def reports_errors(func):
    """Turn content errors into a message plus a non-zero exit status."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        ctx = click.get_current_context()
        try:
            return func(*args, **kwargs)
        except Cancelled as exc:
            click.echo(color(str(exc), WARNING_COLOR))
            ctx.exit(0)
        except OpcError as exc:
            logger.debug("command failed", exc_info=True)
            click.echo(color(f"Error: {exc}", ERROR_COLOR), err=True)
            ctx.exit(1)
    return wrapper


@click.group(invoke_without_command=True, context_settings=CONTEXT_SETTINGS)
@click.option('--content-dir', type=click.Path(file_okay=False, path_type=Path), default=None,
              help="Content directory (env OPC_CONTENT_DIR).")
@click.option('--base-url', default=None, help="Public base URL (env OPC_BASE_URL).")
@click.option('--strict', is_flag=True, default=False,
              help="Abort on malformed front matter instead of skipping the file.")
@click.option('-v', '--verbose', count=True, help="More log output (-vv for debug).")
@click.version_option(__version__, '-V', '--version', prog_name='opc')
@click.pass_context
def cli(ctx: click.Context, content_dir: Optional[Path], base_url: Optional[str],
        strict: bool, verbose: int) -> None:
    """Blog content manager for project and task entries."""
    configure_logging(verbose)
    settings = load_settings()
    answers = ctx.obj if isinstance(ctx.obj, AnswerProvider) else ClickAnswers()
    repository = ContentRepository(content_dir or settings.content_dir,
                                   strict=strict or settings.strict)
    ctx.obj = ContentManager(repository, base_url=base_url or settings.base_url,
                             author=settings.author, answers=answers)
    logger.debug("content directory: %s", repository.content_dir)
    if ctx.invoked_subcommand is None:
        click.echo(help_text())


@cli.command('help')
def help_command() -> None:
    """Show detailed usage."""
    click.echo(help_text())


@cli.command('list')
@click.option('-p', '--projects', is_flag=True, help="Only list projects.")
@click.option('-t', '--tasks', is_flag=True, help="Only list tasks.")
@click.option('--id', 'entity_id', default=None, help="Filter by id, e.g. p1, t2.")
@click.option('--status', default=None, help=f"Filter by status: {', '.join(STATUSES)}.")
@click.pass_obj
@reports_errors
def list_command(manager: ContentManager, projects: bool, tasks: bool,
                 entity_id: Optional[str], status: Optional[str]) -> None:
    """List projects and/or tasks."""
    result = manager.list_entities(projects=projects, tasks=tasks, entity_id=entity_id, status=status)
    _echo_lines(list_lines(result))
    if manager.repository.skipped:
        click.echo(color(f"{len(manager.repository.skipped)} file(s) skipped (malformed front matter).", DIM))


@cli.command('create')
@click.argument('kind', required=False, metavar='[project|task]')
@click.option('--ascii', 'ascii_name', is_flag=True,
              help="Use an ASCII transliteration of the title for the file name.")
@click.pass_obj
@reports_errors
def create_command(manager: ContentManager, kind: Optional[str], ascii_name: bool) -> None:
    """Create a project or a task."""
    if kind is None:
        click.echo(color("What do you want to create?", BOLD))
    result = manager.create(kind, ascii_name=ascii_name)
    _echo_lines(create_lines(result))


@cli.command('update')
@click.argument('entity_id', metavar='ID')
@click.argument('status', required=False)
@click.pass_obj
@reports_errors
def update_command(manager: ContentManager, entity_id: str, status: Optional[str]) -> None:
    """Set the status of a project or task."""
    _echo_lines(entity_summary_lines(manager.require(entity_id), entity_id))
    if status is None:
        click.echo("\nChoose the new status:")
    result = manager.update(entity_id, status)
    _echo_lines(update_lines(result, entity_id))


@cli.command('delete')
@click.argument('entity_id', metavar='ID')
@click.option('-y', '--yes', 'assume_yes', is_flag=True, help="Do not ask for confirmation.")
@click.pass_obj
@reports_errors
def delete_command(manager: ContentManager, entity_id: str, assume_yes: bool) -> None:
    """Delete a project or task file (tasks of a deleted project are kept)."""
    result = manager.delete(entity_id, assume_yes=assume_yes)
    _echo_lines(delete_lines(result, entity_id))


@cli.command('view')
@click.argument('entity_id', metavar='ID')
@click.pass_obj
@reports_errors
def view_command(manager: ContentManager, entity_id: str) -> None:
    """Show the file path, URL and project link for an id."""
    _echo_lines(view_lines(manager.view(entity_id), entity_id))
