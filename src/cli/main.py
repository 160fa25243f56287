#!/usr/bin/env python3
"""CLI for the student roster.

Commands:
    init-db     Create or reset the database
    add         Add a student record
    update      Update a student's name and scores
    delete      Delete a student record
    find        Look up a student by sno
    sort        Show the cached roster in a given order
    list        List stored records in a given order (reads storage directly)
    status      Show database status
    shell       Interactive menu sharing one record cache
"""

from pathlib import Path
from typing import Iterable, Optional

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from src.database.connection import DB_PATH, init_database, verify_database
from src.database.errors import StorageError
from src.database.gateway import SqliteGateway
from src.database.models import RecordRow, StudentRecord
from src.logutils import LogConfig, get_config, reset_logging, with_context
from src.records import OperationResult, QueryEngine, RecordCache, SortKey

# Load .env file from current directory if available
load_dotenv()

console = Console()

SORT_CHOICES = [key.value for key in SortKey]


def _open_roster(db_path: Path) -> tuple[RecordCache, QueryEngine]:
    gateway = SqliteGateway(db_path)
    cache = RecordCache(gateway)
    return cache, QueryEngine(cache, gateway)


def _score_table(title: str, with_metrics: bool = False) -> Table:
    table = Table(title=title)
    table.add_column("Sno", style="cyan")
    table.add_column("Name")
    for subject in StudentRecord.SUBJECTS:
        table.add_column(subject.title(), justify="right")
    table.add_column("Total", justify="right", style="bold")
    if with_metrics:
        table.add_column("Average", justify="right")
        table.add_column("Grade", justify="center")
    return table


def _rows_table(title: str, rows: Iterable[RecordRow]) -> Table:
    table = _score_table(title)
    for row in rows:
        table.add_row(row.sno, row.name, *(str(v) for v in row[2:]))
    return table


def _record_table(record: StudentRecord) -> Table:
    grade_style = "green" if record.grade in ("A", "B") else "yellow" if record.grade == "C" else "red"
    table = _score_table(f"Student {record.sno}", with_metrics=True)
    table.add_row(
        record.sno,
        record.name,
        *(str(score) for score in record.scores),
        str(record.total),
        f"{record.average:.2f}",
        f"[{grade_style}]{record.grade.value}[/{grade_style}]",
    )
    return table


def _print_result(result: OperationResult) -> None:
    style = "green" if result.ok else "red"
    console.print(f"[{style}]{result}[/{style}]")
    if result.record is not None:
        console.print(_record_table(result.record))


def _build_record(sno: str, name: str, scores: tuple[int, int, int, int]) -> StudentRecord:
    korean, english, math, science = scores
    return StudentRecord(sno=sno, name=name, korean=korean, english=english, math=math, science=science)


@click.group()
@click.version_option(version="0.1.0", prog_name="roster")
@click.option(
    "--db",
    "db_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="SQLite database file (default: $DATABASE_PATH or roster.db)",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.pass_context
def cli(ctx: click.Context, db_path: Optional[Path], verbose: bool):
    """Student roster CLI - manage and rank student score records."""
    ctx.ensure_object(dict)
    ctx.obj["db_path"] = db_path or DB_PATH
    if verbose:
        config = get_config()
        reset_logging(LogConfig(level="DEBUG", output=config.output, use_rich=config.use_rich))


@cli.command()
@click.option("--force", is_flag=True, help="Force reset existing database")
@click.pass_context
def init_db(ctx: click.Context, force: bool):
    """Initialize or reset the database."""
    db_path: Path = ctx.obj["db_path"]
    if db_path.exists() and not force:
        if not click.confirm("Database exists. Reset it?", default=False):
            console.print("[yellow]Aborted.[/yellow]")
            return
        force = True

    console.print("[blue]Initializing database...[/blue]")
    init_database(db_path, force=force)
    info = verify_database(db_path)

    console.print("[green]✓ Database initialized[/green]")
    console.print(f"  Tables: {', '.join(info.get('tables', []))}")


@cli.command()
@click.argument("sno")
@click.argument("name")
@click.argument("scores", nargs=4, type=int)
@click.pass_context
def add(ctx: click.Context, sno: str, name: str, scores: tuple[int, int, int, int]):
    """Add a student: SNO NAME KOREAN ENGLISH MATH SCIENCE."""
    cache, _ = _open_roster(ctx.obj["db_path"])
    with with_context(component="cli"):
        _print_result(cache.add(_build_record(sno, name, scores)))


@cli.command()
@click.argument("sno")
@click.argument("name")
@click.argument("scores", nargs=4, type=int)
@click.pass_context
def update(ctx: click.Context, sno: str, name: str, scores: tuple[int, int, int, int]):
    """Update a student: SNO NAME KOREAN ENGLISH MATH SCIENCE."""
    cache, _ = _open_roster(ctx.obj["db_path"])
    with with_context(component="cli"):
        _print_result(cache.apply_update(_build_record(sno, name, scores)))


@cli.command()
@click.argument("sno")
@click.pass_context
def delete(ctx: click.Context, sno: str):
    """Delete a student by sno."""
    cache, _ = _open_roster(ctx.obj["db_path"])
    with with_context(component="cli"):
        _print_result(cache.remove(sno))


@cli.command()
@click.argument("sno")
@click.pass_context
def find(ctx: click.Context, sno: str):
    """Look up a student by sno."""
    _, engine = _open_roster(ctx.obj["db_path"])
    try:
        record = engine.find_by_id(sno)
    except StorageError as e:
        console.print(f"[red]Could not load records: {e}[/red]")
        return

    if record is None:
        console.print(f"[yellow]No student found with sno {sno}[/yellow]")
        return
    console.print(_record_table(record))


@cli.command("sort")
@click.option("--by", "key", type=click.Choice(SORT_CHOICES), default="name", show_default=True)
@click.pass_context
def sort_records(ctx: click.Context, key: str):
    """Show the cached roster sorted by name, id or total."""
    _, engine = _open_roster(ctx.obj["db_path"])
    try:
        rows = engine.sort_cache(key)
    except StorageError as e:
        console.print(f"[red]Could not load records: {e}[/red]")
        return
    console.print(_rows_table(f"Roster by {key}", rows))


@cli.command("list")
@click.option("--by", "key", type=click.Choice(SORT_CHOICES), default="name", show_default=True)
@click.pass_context
def list_records(ctx: click.Context, key: str):
    """List stored records sorted by name, id or total, straight from storage."""
    _, engine = _open_roster(ctx.obj["db_path"])
    try:
        rows = list(engine.list_all_sorted(key))
    except StorageError as e:
        console.print(f"[red]Listing failed: {e}[/red]")
        return
    console.print(_rows_table(f"Stored records by {key}", rows))


@cli.command()
@click.pass_context
def status(ctx: click.Context):
    """Show database status."""
    info = verify_database(ctx.obj["db_path"])

    console.print(Panel("[bold]Database Status[/bold]"))
    if not info.get("exists"):
        console.print(f"[red]{info.get('error')}[/red]")
        return

    table = Table(show_header=False)
    table.add_column("Item", style="cyan")
    table.add_column("Value")
    table.add_row("Path", info.get("path", "-"))
    for item, count in info.get("row_counts", {}).items():
        table.add_row(item.title(), str(count))
    if info.get("error"):
        table.add_row("Error", info["error"])
    console.print(table)


SHELL_MENU = """[bold]1[/bold] Add   [bold]2[/bold] Update   [bold]3[/bold] Delete   [bold]4[/bold] Search
[bold]5[/bold] Sort cache   [bold]6[/bold] List storage   [bold]7[/bold] Reload   [bold]0[/bold] Quit"""


def _prompt_record() -> StudentRecord:
    sno = click.prompt("Sno")
    name = click.prompt("Name")
    scores = tuple(click.prompt(subject.title(), type=int) for subject in StudentRecord.SUBJECTS)
    return _build_record(sno, name, scores)


def _prompt_sort_key() -> str:
    return click.prompt("Order (1 name, 2 id, 3 total)", default="1")


@cli.command()
@click.pass_context
def shell(ctx: click.Context):
    """Interactive menu; the record cache lives for the whole session."""
    cache, engine = _open_roster(ctx.obj["db_path"])

    with with_context(component="shell"):
        while True:
            console.print(Panel(SHELL_MENU, title="Student Roster"))
            choice = click.prompt("Select", default="0").strip()

            try:
                if choice == "1":
                    _print_result(cache.add(_prompt_record()))
                elif choice == "2":
                    _print_result(cache.apply_update(_prompt_record()))
                elif choice == "3":
                    _print_result(cache.remove(click.prompt("Sno")))
                elif choice == "4":
                    sno = click.prompt("Sno")
                    record = engine.find_by_id(sno)
                    if record is None:
                        console.print(f"[yellow]No student found with sno {sno}[/yellow]")
                    else:
                        console.print(_record_table(record))
                elif choice == "5":
                    console.print(_rows_table("Cached roster", engine.sort_cache(_prompt_sort_key())))
                elif choice == "6":
                    key = _prompt_sort_key()
                    if SortKey.parse(key) is None:
                        console.print("[yellow]Invalid sort condition.[/yellow]")
                        continue
                    console.print(_rows_table("Stored records", list(engine.list_all_sorted(key))))
                elif choice == "7":
                    cache.refresh()
                    console.print(f"[green]Reloaded {len(cache)} records[/green]")
                elif choice == "0":
                    console.print("[blue]Bye.[/blue]")
                    break
                else:
                    console.print("[yellow]Unknown option.[/yellow]")
            except StorageError as e:
                console.print(f"[red]Storage error: {e}[/red]")

    cache.clear()


def main():
    """Main entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
