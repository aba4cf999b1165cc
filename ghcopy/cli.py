"""CLI entry point for ghcopy."""

from __future__ import annotations

import asyncio
import logging
import signal
from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich import print as rprint
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.syntax import Syntax
from rich.table import Table
from rich.tree import Tree

from ghcopy_core.auth import mask_token, resolve_token
from ghcopy_core.config import DEFAULT_CONFIG_TEMPLATE, GhCopyConfig, load_config
from ghcopy_core.copier import GitHubCopier, create_copier
from ghcopy_core.errors import GhCopyError
from ghcopy_core.github.models import ResourceDescriptor
from ghcopy_core.log_setup import configure_logging
from ghcopy_core.mirror.models import MirrorEvent, MirrorOutcome, MirrorPlan
from ghcopy_core.mirror.observer import LoggingObserver

logger = logging.getLogger(__name__)

EXIT_INTERRUPTED = 130

app = typer.Typer(
    name="ghcopy",
    help="Copy files and folders out of GitHub repositories without cloning.",
)

config_app = typer.Typer(help="Manage ghcopy configuration.")
app.add_typer(config_app, name="config")

# Global state
_config: GhCopyConfig | None = None


def _get_config() -> GhCopyConfig:
    if _config is None:
        return load_config()
    return _config


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to ghcopy.yaml")
    ] = None,
) -> None:
    """Global options."""
    global _config
    try:
        _config = load_config(config)
    except ValueError as e:
        rprint(f"[red]Config error:[/red] {e}")
        raise typer.Exit(1)


def _format_size(size: int) -> str:
    """Format a byte count to human-readable."""
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


class _ProgressObserver:
    """Feeds mirror events into a rich progress line, then into the log."""

    def __init__(self, progress: Progress) -> None:
        self.progress = progress
        self.task_id = progress.add_task("Starting", total=None)
        self._log = LoggingObserver()

    def on_event(self, event: MirrorEvent) -> None:
        self._log.on_event(event)
        if event.kind == "file_written":
            self.progress.update(
                self.task_id, advance=1, description=f"[green]{event.path}[/green]"
            )
        elif event.kind == "listing":
            self.progress.update(self.task_id, description=f"Listing {event.path or '/'}")


def _display_outcome(source: str, outcome: MirrorOutcome) -> None:
    """Summary panel plus a table of failed entries."""
    if outcome.cancelled:
        title, style = "Copy Interrupted", "red"
    elif outcome.failures:
        title, style = "Copy Finished With Failures", "yellow"
    else:
        title, style = "Copy Complete", "green"

    rprint(Panel(
        f"[dim]Source:[/dim]       {source}\n"
        f"[dim]Files:[/dim]        {outcome.files_written}\n"
        f"[dim]Size:[/dim]         {_format_size(outcome.bytes_written)}\n"
        f"[dim]Directories:[/dim]  {outcome.directories}\n"
        f"[dim]Skipped:[/dim]      {outcome.skipped}\n"
        f"[dim]Failures:[/dim]     {len(outcome.failures)}",
        title=title,
        border_style=style,
    ))

    if outcome.failures:
        table = Table(title=f"Failed entries ({len(outcome.failures)})")
        table.add_column("Path", style="cyan")
        table.add_column("Error", style="red")
        for failure in outcome.failures:
            table.add_row(failure.path or "/", str(failure.cause))
        rprint(table)


def _display_plan(descriptor: ResourceDescriptor, plan: MirrorPlan) -> None:
    """Render the remote tree that a copy would materialize, and what could not be listed."""
    root = Tree(f"[bold]{descriptor}[/bold]")
    nodes: dict[str, Tree] = {}
    total = 0
    for entry in plan.entries:
        parent = nodes.get(entry.path.rpartition("/")[0], root)
        if entry.is_dir:
            nodes[entry.path] = parent.add(f"[blue]{entry.name}/[/blue]")
        elif entry.is_file:
            total += entry.size
            size_str = f" ({_format_size(entry.size)})" if entry.size else ""
            parent.add(f"[green]{entry.name}[/green]{size_str}")
        else:
            parent.add(f"[dim]{entry.name} ({entry.type}, skipped)[/dim]")
    rprint(root)
    rprint(f"\n[dim]{plan.file_count} file(s), {_format_size(total)} total[/dim]")

    if plan.failures:
        table = Table(title=f"Unlisted subtrees ({len(plan.failures)})")
        table.add_column("Path", style="cyan")
        table.add_column("Error", style="red")
        for failure in plan.failures:
            table.add_row(failure.path or "/", str(failure.cause))
        rprint(table)


async def _run_copy(
    copier: GitHubCopier, source: str, dest: str | None, force: bool | None
) -> MirrorOutcome:
    """Run a copy, turning SIGINT into a cooperative cancel."""
    cancel = asyncio.Event()
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, cancel.set)
        installed = True
    except (NotImplementedError, RuntimeError):
        # No loop signal support here; Ctrl-C surfaces as KeyboardInterrupt
        installed = False
    try:
        return await copier.copy(source, dest, force, cancel=cancel)
    finally:
        if installed:
            loop.remove_signal_handler(signal.SIGINT)


@app.command()
def get(
    url: str = typer.Argument(..., help="GitHub blob/tree URL or raw.githubusercontent.com URL"),
    dest: str | None = typer.Argument(None, help="Destination path (defaults to the remote name)"),
    token: Annotated[
        str | None, typer.Option("--token", "-t", help="Bearer token (overrides the token env var)")
    ] = None,
    force: Annotated[
        bool | None, typer.Option("--force/--no-force", "-f", help="Overwrite existing files")
    ] = None,
    strict: Annotated[
        bool | None, typer.Option("--strict/--no-strict", help="Fail on existing files instead of renaming")
    ] = None,
    concurrency: Annotated[
        int | None, typer.Option("--concurrency", "-j", min=1, help="Sibling files fetched at once")
    ] = None,
    dry_run: bool = typer.Option(False, "--dry-run", help="Show the remote tree without writing"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Errors only, no progress"),
) -> None:
    """Download a file or mirror a folder from GitHub."""
    cfg = _get_config()
    level = "debug" if verbose else "error" if quiet else cfg.log_level
    configure_logging(level, cfg.log_format)

    overrides = {
        key: value
        for key, value in (("force", force), ("strict", strict), ("concurrency", concurrency))
        if value is not None
    }
    if overrides:
        cfg = cfg.model_copy(update={"mirror": cfg.mirror.model_copy(update=overrides)})

    resolved_token = resolve_token(cfg, token)
    logger.debug("Using token %s", mask_token(resolved_token))

    try:
        if dry_run:
            copier = create_copier(cfg, resolved_token)
            rprint("[yellow](dry run, nothing is written)[/yellow]\n")
            descriptor, plan = asyncio.run(copier.plan(url))
            _display_plan(descriptor, plan)
            return

        if quiet:
            copier = create_copier(cfg, resolved_token)
            outcome = asyncio.run(_run_copy(copier, url, dest, force))
        else:
            with Progress(
                SpinnerColumn(),
                TextColumn("{task.description}"),
                TextColumn("[dim]{task.completed} file(s)[/dim]"),
                TimeElapsedColumn(),
                console=Console(stderr=True),
                transient=True,
            ) as progress:
                copier = create_copier(cfg, resolved_token, _ProgressObserver(progress))
                outcome = asyncio.run(_run_copy(copier, url, dest, force))
    except GhCopyError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except KeyboardInterrupt:
        rprint("[red]Interrupted.[/red]")
        raise typer.Exit(EXIT_INTERRUPTED)

    _display_outcome(url, outcome)
    if outcome.cancelled:
        raise typer.Exit(EXIT_INTERRUPTED)


@config_app.command("show")
def config_show() -> None:
    """Show current resolved configuration."""
    cfg = _get_config()
    rprint(Syntax(yaml.dump(cfg.model_dump(mode="json"), default_flow_style=False), "yaml"))


@config_app.command("init")
def config_init(
    path: str = typer.Option("ghcopy.yaml", "--path", "-p", help="Where to write the config"),
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Create a default ghcopy.yaml."""
    target = Path(path)
    if target.exists() and not force:
        rprint(f"[yellow]{target} already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {target}")


if __name__ == "__main__":
    app()
