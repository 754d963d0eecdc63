"""
Korkort CLI: inspect and drive lesson progress from the terminal.

Commands:
- korkort status     - Show identity, completed lessons and streak
- korkort complete   - Record a finished lesson
- korkort reset      - Clear all progress
- korkort prefs      - Toggle study reminders
- korkort reminders  - List scheduled reminders
- korkort login      - Sign in as a user id
- korkort guest      - Continue as a guest
- korkort logout     - Sign out and wipe local data
"""
from __future__ import annotations

import asyncio
import sys
from typing import Awaitable, Callable, Optional, TypeVar

import typer
from loguru import logger
from rich.console import Console
from rich.prompt import Confirm
from rich.table import Table

from config import get_settings
from korkort.auth import Identity
from korkort.progress import NotificationPreferences
from korkort.services import AppServices, create_services
from korkort.storage import LocalStorageError

T = TypeVar("T")

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="korkort",
    help="Korkort: driving-theory lesson progress",
    no_args_is_help=True,
)
console = Console()


def _run(action: Callable[[AppServices], Awaitable[T]]) -> T:
    """Build services, restore identity, run action, then close clients."""

    async def runner() -> T:
        services = create_services()
        try:
            await services.start()
            return await action(services)
        finally:
            await services.close()

    try:
        return asyncio.run(runner())
    except LocalStorageError as exc:
        console.print(f"[bold red]Local storage error:[/bold red] {exc}")
        raise typer.Exit(1)


def _require_identity(services: AppServices) -> Identity:
    identity = services.identity.current
    if identity is None:
        console.print("[yellow]Not signed in. Use 'korkort login' or 'korkort guest'.[/yellow]")
        raise typer.Exit(1)
    return identity


def _on_off(value: bool) -> str:
    return "[green]on[/green]" if value else "[dim]off[/dim]"


# =============================================================================
# Commands
# =============================================================================

@app.command()
def status() -> None:
    """Show identity, completed lessons and streak."""

    async def action(services: AppServices) -> None:
        identity = services.identity.current
        snapshot = services.progress.snapshot()
        summary = snapshot.summarize(services.settings.minutes_per_lesson)

        table = Table(title="Progress", show_header=False)
        table.add_column("Field", style="bold cyan")
        table.add_column("Value")

        if identity is None:
            table.add_row("Identity", "[dim]signed out[/dim]")
        else:
            kind = "guest" if identity.is_guest else "user"
            table.add_row("Identity", f"{identity.username or identity.user_id} ({kind})")
        table.add_row("Completed lessons", str(summary.completed_count))
        table.add_row("Next lesson", str(summary.next_lesson_index))
        table.add_row("Time studied", f"{summary.minutes_studied} min")
        table.add_row("Streak", f"{summary.current_streak} days")
        last = snapshot.streak.last_study_time
        table.add_row("Last study", last.strftime("%Y-%m-%d %H:%M") if last else "[dim]never[/dim]")
        table.add_row("Daily reminder", _on_off(snapshot.preferences.daily_reminder))
        table.add_row("Streak reminder", _on_off(snapshot.preferences.streak_reminder))
        permitted = await services.progress.check_notification_permission()
        table.add_row("Notifications", "[green]allowed[/green]" if permitted else "[dim]not allowed[/dim]")

        console.print(table)

    _run(action)


@app.command()
def complete(
    lesson_index: int = typer.Argument(..., help="Index of the finished lesson"),
    force: bool = typer.Option(
        False,
        "--force", "-f",
        help="Record even if earlier lessons are not completed",
    ),
) -> None:
    """Record a finished lesson."""

    async def action(services: AppServices) -> None:
        identity = _require_identity(services)
        store = services.progress

        if lesson_index < 0:
            console.print("[red]Lesson index must be non-negative.[/red]")
            raise typer.Exit(1)
        if not force and not store.is_unlocked(lesson_index):
            console.print(
                f"[yellow]Lesson {lesson_index} is locked "
                f"(next lesson is {store.next_lesson_index}). Use --force to record anyway.[/yellow]"
            )
            raise typer.Exit(1)

        if await store.record_completion(identity, lesson_index):
            console.print(
                f"[green]Lesson {lesson_index} completed.[/green] "
                f"Streak: {store.streak.current_streak} days"
            )
        else:
            console.print(f"[dim]Lesson {lesson_index} was already completed.[/dim]")

    _run(action)


@app.command()
def reset(
    confirm: bool = typer.Option(
        False,
        "--yes", "-y",
        help="Skip confirmation",
    ),
) -> None:
    """Clear all lesson progress and the study streak."""
    if not confirm and not Confirm.ask("Reset ALL progress? This cannot be undone!", default=False):
        raise typer.Exit(0)

    async def action(services: AppServices) -> None:
        await services.progress.clear_progress(services.identity.current)
        console.print("[green]All progress has been reset.[/green]")

    _run(action)


@app.command()
def prefs(
    daily: Optional[bool] = typer.Option(
        None,
        "--daily/--no-daily",
        help="Daily study reminder",
    ),
    streak: Optional[bool] = typer.Option(
        None,
        "--streak/--no-streak",
        help="Streak reminder the day after studying",
    ),
) -> None:
    """Toggle study reminders (unchanged if a flag is omitted)."""

    async def action(services: AppServices) -> None:
        identity = _require_identity(services)
        current = services.progress.preferences
        updated = NotificationPreferences(
            daily_reminder=current.daily_reminder if daily is None else daily,
            streak_reminder=current.streak_reminder if streak is None else streak,
        )
        wants_reminders = updated.daily_reminder or updated.streak_reminder
        if wants_reminders and not await services.progress.check_notification_permission():
            if not await services.progress.request_notification_permission():
                console.print("[yellow]Notifications not permitted; reminders will not fire.[/yellow]")
        await services.progress.update_preferences(identity, updated)
        console.print(
            f"Daily reminder: {_on_off(updated.daily_reminder)}  "
            f"Streak reminder: {_on_off(updated.streak_reminder)}"
        )

    _run(action)


@app.command()
def reminders() -> None:
    """List scheduled study reminders."""

    async def action(services: AppServices) -> None:
        pending = await services.scheduler.pending()
        if not pending:
            console.print("[dim]No reminders scheduled.[/dim]")
            return

        table = Table(title="Scheduled Reminders")
        table.add_column("Fires at")
        table.add_column("Title")
        table.add_column("Repeat")
        for item in pending:
            table.add_row(item.fire_at.strftime("%Y-%m-%d %H:%M"), item.title, item.repeat or "-")
        console.print(table)

    _run(action)


@app.command()
def login(
    user_id: str = typer.Argument(..., help="Server-assigned user id"),
    username: Optional[str] = typer.Option(None, "--username", "-u", help="Display name"),
) -> None:
    """Sign in as an authenticated user and sync progress."""

    async def action(services: AppServices) -> None:
        await services.identity.sign_in(Identity(user_id=user_id, username=username))
        count = len(services.progress.completed_lessons)
        console.print(f"[green]Signed in as {username or user_id}.[/green] {count} lessons completed.")

    _run(action)


@app.command()
def guest() -> None:
    """Continue as a local guest (never synced)."""

    async def action(services: AppServices) -> None:
        identity = await services.identity.continue_as_guest()
        console.print(f"[green]Continuing as guest[/green] ({identity.user_id})")

    _run(action)


@app.command()
def logout(
    confirm: bool = typer.Option(
        False,
        "--yes", "-y",
        help="Skip confirmation",
    ),
) -> None:
    """Sign out and wipe local data."""
    if not confirm and not Confirm.ask("Sign out and remove local data?", default=False):
        raise typer.Exit(0)

    async def action(services: AppServices) -> None:
        await services.identity.sign_out()
        console.print("[green]Signed out.[/green]")

    _run(action)


# =============================================================================
# Entry Point
# =============================================================================

def configure_logging() -> None:
    """Route loguru output according to settings."""
    settings = get_settings()
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )
    if settings.log_file:
        logger.add(settings.log_file, level="DEBUG", rotation="1 MB")


def main() -> None:
    """CLI entry point."""
    configure_logging()
    app()


if __name__ == "__main__":
    main()
