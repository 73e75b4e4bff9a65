"""
Root Typer application for the warden CLI.
"""

from __future__ import annotations

import asyncio

import typer
from typer import Typer

from warden.cli.utils import console, err_console, print_error, print_iteration, resolve_ref
from warden.core.errors import WardenError
from warden.core.logging import configure_logging
from warden.core.settings import WardenSettings
from warden.scheduling.configuration import WardenConfiguration
from warden.scheduling.iteration import Watcher
from warden.scheduling.warden import Warden, default_name

app = Typer(
    name="warden",
    help="warden: run checks on a recurring schedule.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from importlib.metadata import PackageNotFoundError
        from importlib.metadata import version as pkg_version

        try:
            v = pkg_version("warden-core")
        except PackageNotFoundError:
            from warden import __version__ as v
        typer.echo(f"warden {v}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """warden CLI: run watchers or a custom iteration processor on a schedule."""


# ── run ──────────────────────────────────────────────────────────────────


def _to_watcher(ref: str) -> Watcher:
    obj = resolve_ref(ref)
    if isinstance(obj, Watcher):
        return obj
    if not callable(obj):
        raise TypeError(f"{ref!r} resolved to non-callable: {type(obj)}")
    return Watcher(name=ref.partition(":")[2], check_fn=obj)


def _build_warden(
    settings: WardenSettings,
    *,
    watch: list[str],
    processor: str | None,
    name: str | None,
    delay: float | None,
    iterations: int | None,
    once: bool,
) -> Warden:
    builder = WardenConfiguration.builder()
    builder.set_iteration_delay(settings.iteration_delay_seconds if delay is None else delay)

    count = 1 if once else (iterations if iterations is not None else settings.iterations_count)
    if count is not None:
        builder.set_iterations_count(count)

    if processor:
        factory = resolve_ref(processor)
        builder.set_iteration_processor_provider(factory)
    for ref in watch:
        builder.add_watcher(_to_watcher(ref))

    builder.set_hooks(lambda hooks: hooks.on_iteration_completed(print_iteration).on_error(print_error))
    return Warden(name or settings.name or default_name(), builder.build())


@app.command("run")
def run(
    watch: list[str] | None = typer.Option(  # noqa: UP007
        None, "--watch", "-w", help="Watcher as module:callable (repeatable)"
    ),
    processor: str | None = typer.Option(  # noqa: UP007
        None, "--processor", "-p", help="Processor factory as module:callable"
    ),
    name: str | None = typer.Option(None, "--name", "-n", help="Warden name"),  # noqa: UP007
    delay: float | None = typer.Option(  # noqa: UP007
        None, "--delay", "-d", min=0, help="Seconds between iterations"
    ),
    iterations: int | None = typer.Option(  # noqa: UP007
        None, "--iterations", "-i", min=1, help="Iteration budget (default: unbounded)"
    ),
    once: bool = typer.Option(False, "--once", help="Run a single iteration"),
    log_level: str | None = typer.Option(None, "--log-level", help="Log level"),  # noqa: UP007
    json_logs: bool | None = typer.Option(  # noqa: UP007
        None, "--json-logs/--console-logs", help="Log format (default: JSON unless a tty)"
    ),
) -> None:
    """Run a Warden until its iteration budget is exhausted or Ctrl-C.

    Example::

        warden run --watch myapp.checks:api_is_up --delay 30
        warden run --processor myapp.checks:make_processor --once
    """
    settings = WardenSettings()
    configure_logging(
        level=log_level or settings.log_level,
        json_format=settings.log_json if json_logs is None else json_logs,
    )

    watch = watch or []
    if processor and watch:
        err_console.print("[bold red]Error[/bold red]: use either --watch or --processor, not both")
        raise typer.Exit(code=2)
    if not processor and not watch:
        err_console.print("[bold red]Error[/bold red]: at least one --watch or a --processor is required")
        raise typer.Exit(code=2)

    try:
        warden = _build_warden(
            settings,
            watch=watch,
            processor=processor,
            name=name,
            delay=delay,
            iterations=iterations,
            once=once,
        )
    except (WardenError, ImportError, AttributeError, TypeError, ValueError) as exc:
        err_console.print(f"[bold red]Error[/bold red] ({type(exc).__name__}): {exc}")
        raise typer.Exit(code=1)

    console.print(
        f"[bold green]Starting {warden.name}[/bold green] "
        f"(delay={warden.configuration.iteration_delay_seconds}s, "
        f"iterations={warden.configuration.iterations_count or 'unbounded'})"
    )

    try:
        asyncio.run(warden.start())
    except KeyboardInterrupt:
        asyncio.run(warden.stop())
        console.print("\n[yellow]Warden stopped by user[/yellow]")
        return
    except Exception as exc:
        err_console.print(f"[red]Warden error: {exc}[/red]")
        raise typer.Exit(code=1)

    stats = warden.get_stats()
    console.print(
        f"[bold]Done[/bold]: {stats.iterations_completed} completed, "
        f"{stats.iterations_failed} failed"
    )


# ── settings ─────────────────────────────────────────────────────────────


@app.command("settings")
def show_settings(
    format: str = typer.Option("table", "--format", "-f", help="Output format: table, json, env"),
) -> None:
    """Show settings resolved from WARDEN_* environment variables and .env."""
    settings = WardenSettings()

    if format == "json":
        console.print_json(settings.model_dump_json())
        return

    if format == "env":
        for key, value in sorted(settings.model_dump().items()):
            console.print(f"WARDEN_{key.upper()}={'' if value is None else value}")
        return

    from rich.table import Table

    table = Table(title="Warden settings")
    table.add_column("Setting")
    table.add_column("Value")
    table.add_row("Name", settings.name or f"{default_name()} [dim](default)[/dim]")
    table.add_row("Iteration delay", f"{settings.iteration_delay_seconds}s")
    table.add_row("Iterations", str(settings.iterations_count or "unbounded"))
    table.add_row("Log level", settings.log_level)
    table.add_row("JSON logs", "auto" if settings.log_json is None else str(settings.log_json))
    console.print(table)
