"""CLI interface for ticklist."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ticklist import __version__
from ticklist.codec import CorruptedRecordError
from ticklist.config import TicklistConfig
from ticklist.storage import load_tasks, save_tasks
from ticklist.tasks import (
    DeadlineTask,
    EventTask,
    InvalidTaskError,
    PlainTask,
    Task,
    TaskList,
)

console = Console()


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="ticklist")
@click.option(
    "--file",
    "-f",
    "data_file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Task file to use instead of the configured one",
)
@click.pass_context
def main(ctx: click.Context, data_file: Path | None) -> None:
    """ticklist - Personal task tracker.

    \b
    Examples:
      ticklist todo "buy milk"
      ticklist deadline "submit report" --by "2024-01-15 18:00"
      ticklist event "team sync" --at "2024-01-16 10:00-11:00"
      ticklist list
      ticklist done 1
    """
    ctx.ensure_object(dict)
    config = TicklistConfig.load()
    if data_file is not None:
        config.data_file = str(data_file)
    ctx.obj["config"] = config

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


def _load(ctx: click.Context) -> TaskList:
    """Load tasks for a command, exiting on a corrupted file."""
    config: TicklistConfig = ctx.obj["config"]
    try:
        return load_tasks(config.data_path, strict=config.strict, console=console)
    except CorruptedRecordError as e:
        console.print(f"[red]Task file is corrupted:[/red] {config.data_path}")
        console.print(f"  {escape(str(e))}")
        ctx.exit(1)


def _save(ctx: click.Context, task_list: TaskList) -> None:
    """Save tasks for a command, exiting if the write fails."""
    config: TicklistConfig = ctx.obj["config"]
    if not save_tasks(task_list, config.data_path, console=console):
        ctx.exit(1)


def _add(ctx: click.Context, build: Callable[[], Task]) -> None:
    task_list = _load(ctx)
    try:
        task = build()
    except InvalidTaskError as e:
        console.print(f"[red]Invalid task:[/red] {escape(str(e))}")
        ctx.exit(1)

    task_list.add(task)
    _save(ctx, task_list)
    console.print(f"[green]Added:[/green] {escape(str(task))}")
    console.print(f"[dim]{len(task_list)} task(s) in the list[/dim]")


def _get(ctx: click.Context, task_list: TaskList, index: int) -> Task:
    try:
        return task_list.get(index)
    except IndexError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        ctx.exit(1)


def _change(ctx: click.Context, update: Callable[[], None]) -> None:
    try:
        update()
    except InvalidTaskError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        ctx.exit(1)


@main.command("list")
@click.option("--pending", "-p", is_flag=True, help="Show only tasks not yet done")
@click.pass_context
def list_command(ctx: click.Context, pending: bool) -> None:
    """List tasks in the order they were added."""
    task_list = _load(ctx)
    rows = task_list.pending() if pending else list(enumerate(task_list, start=1))

    if not rows:
        console.print("[dim]No tasks yet.[/dim]")
        return

    _print_tasks(rows, title="Tasks")


@main.command()
@click.argument("description")
@click.pass_context
def todo(ctx: click.Context, description: str) -> None:
    """Add a plain to-do."""
    _add(ctx, lambda: PlainTask(description))


@main.command()
@click.argument("description")
@click.option("--by", "when", required=True, help='Due date and time, e.g. "2024-01-15 18:00"')
@click.pass_context
def deadline(ctx: click.Context, description: str, when: str) -> None:
    """Add a task due by a date and time."""
    _add(ctx, lambda: DeadlineTask(description, when))


@main.command()
@click.argument("description")
@click.option(
    "--at", "when", required=True, help='Date and time or window, e.g. "2024-01-16 10:00-11:00"'
)
@click.pass_context
def event(ctx: click.Context, description: str, when: str) -> None:
    """Add an event on a date, at a time or in a time window."""
    _add(ctx, lambda: EventTask(description, when))


@main.command()
@click.argument("index", type=int)
@click.pass_context
def done(ctx: click.Context, index: int) -> None:
    """Mark task INDEX as done."""
    task_list = _load(ctx)
    task = _get(ctx, task_list, index)
    _change(ctx, task.mark_done)
    _save(ctx, task_list)
    console.print(f"[green]✓ Done:[/green] {escape(str(task))}")


@main.command()
@click.argument("index", type=int)
@click.pass_context
def undo(ctx: click.Context, index: int) -> None:
    """Mark task INDEX as not done."""
    task_list = _load(ctx)
    task = _get(ctx, task_list, index)
    _change(ctx, task.mark_undone)
    _save(ctx, task_list)
    console.print(f"[yellow]Reopened:[/yellow] {escape(str(task))}")


@main.command()
@click.argument("index", type=int)
@click.pass_context
def delete(ctx: click.Context, index: int) -> None:
    """Remove task INDEX."""
    task_list = _load(ctx)
    _get(ctx, task_list, index)
    task = task_list.remove(index)
    _save(ctx, task_list)
    console.print(f"[green]Removed:[/green] {escape(str(task))}")
    console.print(f"[dim]{len(task_list)} task(s) in the list[/dim]")


@main.command()
@click.argument("keyword")
@click.pass_context
def find(ctx: click.Context, keyword: str) -> None:
    """List tasks whose description contains KEYWORD."""
    task_list = _load(ctx)
    matches = task_list.find(keyword)

    if not matches:
        console.print(f"[dim]No tasks matching '{escape(keyword)}'.[/dim]")
        return

    _print_tasks(matches, title=f"Matching '{escape(keyword)}'")


def _print_tasks(rows: list[tuple[int, Task]], title: str) -> None:
    table = Table(title=title, show_header=True)
    table.add_column("#", style="cyan", justify="right")
    table.add_column("Kind", style="dim", width=4)
    table.add_column("Done", width=4)
    table.add_column("Description", style="white")
    table.add_column("When", style="dim")

    for index, task in rows:
        table.add_row(
            str(index),
            task.kind.value,
            "[green]✓[/green]" if task.done else "",
            escape(task.description),
            task.schedule or "",
        )

    console.print(table)
