"""
CLI utility helpers: reference resolution and output formatting.
"""

from __future__ import annotations

import importlib
from typing import Any

from rich.console import Console

from warden.scheduling.iteration import IterationResult

console = Console()
err_console = Console(stderr=True)


def resolve_ref(ref: str) -> Any:
    """Import and return the object identified by ``'module:qualname'``.

    Raises:
        ValueError: If ``ref`` has no ``':'`` separator.
        ImportError: If the module cannot be found.
        AttributeError: If the qualname path is invalid.
    """
    module_path, _, attr_path = ref.partition(":")
    if not module_path or not attr_path:
        raise ValueError(f"Invalid reference (expected 'module:qualname'): {ref!r}")
    obj: Any = importlib.import_module(module_path)
    for part in attr_path.split("."):
        obj = getattr(obj, part)
    return obj


# ── Output helpers ───────────────────────────────────────────────────────


def print_iteration(result: Any) -> None:
    """One line per completed iteration."""
    if not isinstance(result, IterationResult):
        console.print(f"[green]✓[/green] iteration completed: {result!r}")
        return

    total = len(result.results)
    if result.is_valid:
        console.print(
            f"[green]✓[/green] iteration [bold]{result.ordinal}[/bold] "
            f"{total}/{total} watchers valid ({result.execution_time_ms}ms)"
        )
        return

    invalid = result.invalid_results()
    console.print(
        f"[yellow]![/yellow] iteration [bold]{result.ordinal}[/bold] "
        f"{total - len(invalid)}/{total} watchers valid ({result.execution_time_ms}ms)"
    )
    for check in invalid:
        detail = f" [dim]{check.error_type}: {check.error}[/dim]" if check.error else ""
        console.print(f"    [red]✗[/red] {check.watcher_name}{detail}")


def print_error(exc: Exception) -> None:
    err_console.print(f"[bold red]Iteration error[/bold red] ({type(exc).__name__}): {exc}")
