"""Iteration processor contract and the default watcher-based processor.

The Warden loop only knows the ``IterationProcessor`` contract: given the
Warden name and the current ordinal, do one unit of work and return a result.
The result is opaque to the loop and handed verbatim to the
``on_iteration_completed`` hooks.

``WatcherIterationProcessor`` is the processor used when a configuration is
built from watchers: every watcher check runs concurrently, and each one's
outcome (valid, invalid, raised, timed out) is captured in a
``WatcherCheckResult`` so a failing watcher never fails the iteration.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, Field, computed_field

from warden.core.errors import InvalidConfigError
from warden.core.logging import get_logger
from warden.core.timestamps import elapsed_ms, monotonic_ms, utc_now

logger = get_logger(__name__)


@runtime_checkable
class IterationProcessor(Protocol):
    """One unit of work per iteration. May suspend, may raise."""

    async def execute(self, warden_name: str, ordinal: int) -> Any:
        ...


ProcessorFactory = Callable[[], IterationProcessor]


# ── Results ──────────────────────────────────────────────────────────────


class WatcherCheckResult(BaseModel):
    """Outcome of a single watcher check within an iteration."""

    watcher_name: str
    is_valid: bool
    description: str | None = None
    started_at: datetime
    completed_at: datetime
    execution_time_ms: float = 0.0
    error: str | None = None
    error_type: str | None = None


class IterationResult(BaseModel):
    """Result of one iteration of the watcher processor."""

    warden_name: str
    ordinal: int = Field(ge=1)
    started_at: datetime
    completed_at: datetime
    results: list[WatcherCheckResult] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_valid(self) -> bool:
        return all(r.is_valid for r in self.results)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def execution_time_ms(self) -> float:
        return round((self.completed_at - self.started_at).total_seconds() * 1000, 2)

    def invalid_results(self) -> list[WatcherCheckResult]:
        return [r for r in self.results if not r.is_valid]


# ── Watchers ─────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Watcher:
    """Declarative description of a single check run on every iteration.

    Parameters
    ----------
    name : str
        Watcher name, unique within a configuration.
    check_fn : () -> Awaitable[Any]
        Async callable. A truthy result means valid, falsy means invalid,
        raising means invalid with the error recorded.
    timeout_s : float | None
        Max seconds before the check is considered failed. None = no limit.
    description : str | None
        Human readable description copied into the check result.
    """

    name: str
    check_fn: Callable[[], Awaitable[Any]]
    timeout_s: float | None = None
    description: str | None = None

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValueError("Watcher name can not be empty.")
        if not callable(self.check_fn):
            raise TypeError(f"Watcher {self.name!r} check_fn must be callable")
        if self.timeout_s is not None and self.timeout_s <= 0:
            raise ValueError(f"Watcher {self.name!r} timeout_s must be positive")


def watcher(
    name: str | None = None,
    *,
    timeout_s: float | None = None,
    description: str | None = None,
) -> Callable[[Callable[[], Awaitable[Any]]], Watcher]:
    """Decorator turning an async check function into a ``Watcher``.

    Example:
        >>> @watcher("api", timeout_s=2.0)
        ... async def api_is_up():
        ...     return await ping("https://example.com/health")
    """

    def decorator(fn: Callable[[], Awaitable[Any]]) -> Watcher:
        return Watcher(
            name=name or fn.__name__,
            check_fn=fn,
            timeout_s=timeout_s,
            description=description or (fn.__doc__ or "").strip() or None,
        )

    return decorator


class WatcherIterationProcessor:
    """Runs every watcher concurrently and collects an ``IterationResult``."""

    def __init__(self, watchers: Iterable[Watcher]) -> None:
        self._watchers: tuple[Watcher, ...] = tuple(watchers)
        names = [w.name for w in self._watchers]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise InvalidConfigError(
                "watchers", duplicates, f"Duplicate watcher names: {', '.join(duplicates)}"
            )

    @property
    def watchers(self) -> Sequence[Watcher]:
        return self._watchers

    async def execute(self, warden_name: str, ordinal: int) -> IterationResult:
        started_at = utc_now()
        results = await asyncio.gather(*[self._run_one(w) for w in self._watchers])
        completed_at = utc_now()

        iteration = IterationResult(
            warden_name=warden_name,
            ordinal=ordinal,
            started_at=started_at,
            completed_at=completed_at,
            results=list(results),
        )
        logger.debug(
            "iteration.processed",
            warden=warden_name,
            ordinal=ordinal,
            watchers=len(results),
            valid=iteration.is_valid,
        )
        return iteration

    async def _run_one(self, w: Watcher) -> WatcherCheckResult:
        started_at = utc_now()
        start = monotonic_ms()
        try:
            if w.timeout_s is not None:
                outcome = await asyncio.wait_for(w.check_fn(), timeout=w.timeout_s)
            else:
                outcome = await w.check_fn()
        except TimeoutError:
            return WatcherCheckResult(
                watcher_name=w.name,
                is_valid=False,
                description=w.description,
                started_at=started_at,
                completed_at=utc_now(),
                execution_time_ms=elapsed_ms(start),
                error=f"timed out after {w.timeout_s}s",
                error_type="TimeoutError",
            )
        except Exception as exc:  # noqa: BLE001
            return WatcherCheckResult(
                watcher_name=w.name,
                is_valid=False,
                description=w.description,
                started_at=started_at,
                completed_at=utc_now(),
                execution_time_ms=elapsed_ms(start),
                error=str(exc)[:500],
                error_type=type(exc).__name__,
            )

        return WatcherCheckResult(
            watcher_name=w.name,
            is_valid=bool(outcome),
            description=w.description,
            started_at=started_at,
            completed_at=utc_now(),
            execution_time_ms=elapsed_ms(start),
        )


__all__ = [
    "IterationProcessor",
    "ProcessorFactory",
    "IterationResult",
    "WatcherCheckResult",
    "Watcher",
    "watcher",
    "WatcherIterationProcessor",
]
