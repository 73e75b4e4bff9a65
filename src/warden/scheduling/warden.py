"""The Warden - recurring-iteration scheduler core.

┌──────────────────────────────────────────────────────────────────────────────┐
│  WARDEN STATE MACHINE                                                        │
│                                                                              │
│              start()                  pause()                                │
│   STOPPED ───────────► RUNNING ──────────────► PAUSED                        │
│      ▲                  │   ▲                    │                           │
│      │     stop()       │   └────── start() ─────┘  (ordinal preserved)      │
│      └──────────────────┴─────────────────────────  stop() from any state    │
│                                                     (ordinal reset to 1)     │
│                                                                              │
│  Loop pass (while running and ordinal within budget):                        │
│                                                                              │
│   ┌─ try ──────────────────────────────────────────────────────────────┐     │
│   │  on_iteration_start(n)        → on_iteration_start_async(n)        │     │
│   │  result = await processor.execute(name, n)                         │     │
│   │  on_iteration_completed(result) → on_iteration_completed_async(..) │     │
│   │  if not can_execute(n + 1): break                                  │     │
│   │  n += 1                                                            │     │
│   ├─ except ───────────────────────────────────────────────────────────┤     │
│   │  on_error(exc) → on_error_async(exc)   (their failures swallowed)  │     │
│   ├─ finally ──────────────────────────────────────────────────────────┤     │
│   │  await sleep(iteration_delay)                                      │     │
│   └────────────────────────────────────────────────────────────────────┘     │
│                                                                              │
│  A failed pass never advances the ordinal: iteration n is retried on the    │
│  next pass. pause()/stop() are observed at the next continuation check.     │
└──────────────────────────────────────────────────────────────────────────────┘
"""

from __future__ import annotations

import asyncio
import os
import socket
import threading
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Any

from warden.core.errors import InvalidConfigError, MissingConfigError, categorize_error
from warden.core.logging import get_logger
from warden.core.timestamps import to_iso8601, utc_now
from warden.scheduling.configuration import WardenConfiguration, WardenConfigurationBuilder
from warden.scheduling.iteration import IterationProcessor

logger = get_logger(__name__)

_WINDOWS_COMPUTER_NAME_VARIABLE = "COMPUTERNAME"
_UNIX_COMPUTER_NAME_VARIABLE = "HOSTNAME"


def default_name() -> str:
    """Default Warden name: ``"Warden @<computer name>"``."""
    variable = _WINDOWS_COMPUTER_NAME_VARIABLE if os.name == "nt" else _UNIX_COMPUTER_NAME_VARIABLE
    host = os.environ.get(variable) or socket.gethostname()
    return f"Warden @{host}"


class WardenState(str, Enum):
    """Warden lifecycle states."""

    STOPPED = "STOPPED"
    RUNNING = "RUNNING"
    PAUSED = "PAUSED"


@dataclass
class WardenStats:
    """Counters for one Warden instance.

    ``suppressed_hook_errors`` counts failures raised by ``on_error`` hooks
    while reporting an iteration error. Those failures never propagate and
    are not logged; this counter is their only trace.
    """

    iterations_completed: int = 0
    iterations_failed: int = 0
    suppressed_hook_errors: int = 0
    last_iteration_at: datetime | None = None
    last_error: str | None = None
    last_suppressed_error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "iterations_completed": self.iterations_completed,
            "iterations_failed": self.iterations_failed,
            "suppressed_hook_errors": self.suppressed_hook_errors,
            "last_iteration_at": to_iso8601(self.last_iteration_at),
            "last_error": self.last_error,
            "last_suppressed_error": self.last_suppressed_error,
        }


class Warden:
    """Runs an iteration processor on a fixed cadence, surrounded by hooks.

    Example:
        >>> config = (
        ...     WardenConfiguration.builder()
        ...     .set_iteration_delay(10)
        ...     .add_watcher(Watcher("api", check_api))
        ...     .build()
        ... )
        >>> warden = Warden("api-monitor", config)
        >>> await warden.start()   # returns when paused, stopped or out of budget
    """

    def __init__(self, name: str, configuration: WardenConfiguration) -> None:
        if not isinstance(name, str) or not name.strip():
            raise InvalidConfigError("name", name, "Warden name can not be empty.")
        if configuration is None:
            raise MissingConfigError("configuration", "Warden configuration has not been provided.")

        self._name = name
        self._configuration = configuration

        # Guards every field below. Never held across an await.
        self._lock = threading.Lock()
        self._running = False
        self._ordinal = 1
        self._state = WardenState.STOPPED
        # Set while a loop is active; set() when that loop exits
        self._loop_exited: asyncio.Event | None = None
        # Each start() gets a generation; a continuation check that sees the
        # running flag honours every start() made up to then
        self._start_generation = 0
        self._served_generation = 0
        self._stats = WardenStats()

    # === Properties ===

    @property
    def name(self) -> str:
        return self._name

    @property
    def configuration(self) -> WardenConfiguration:
        return self._configuration

    @property
    def ordinal(self) -> int:
        """Ordinal of the current (or next) iteration."""
        with self._lock:
            return self._ordinal

    @property
    def state(self) -> WardenState:
        with self._lock:
            return self._state

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self._running

    # === Lifecycle ===

    async def start(self) -> None:
        """Start (or resume) the Warden.

        Completes when the loop exits: the iteration budget is exhausted or
        ``pause()``/``stop()`` cleared the running flag. Errors raised by the
        start hooks or the processor factory propagate to the caller.

        If a loop is still active, this call waits for it to exit. When that
        loop never saw the running flag set by this call (it was already on
        its way out), a new loop with a fresh processor takes over.
        """
        with self._lock:
            self._running = True
            self._state = WardenState.RUNNING
            self._start_generation += 1
            generation = self._start_generation
            ordinal = self._ordinal
        logger.info("warden.started", warden=self._name, ordinal=ordinal)

        hooks = self._configuration.hooks
        hooks.on_start.execute()
        await hooks.on_start_async.execute()

        joined = False
        while True:
            with self._lock:
                if self._loop_exited is None:
                    if joined and (self._served_generation >= generation or not self._running):
                        return
                    loop_exited = self._loop_exited = asyncio.Event()
                    break
                active = self._loop_exited
            joined = True
            logger.debug("warden.loop_joined", warden=self._name)
            await active.wait()

        try:
            processor = self._configuration.processor_factory()
            await self._run_loop(processor)
        finally:
            with self._lock:
                self._loop_exited = None
            loop_exited.set()

        logger.info("warden.loop_exited", warden=self._name, ordinal=self.ordinal)

    async def pause(self) -> None:
        """Pause the Warden, keeping the current ordinal. Resume with ``start()``."""
        with self._lock:
            self._running = False
            if self._state != WardenState.STOPPED:
                self._state = WardenState.PAUSED
            ordinal = self._ordinal
        logger.info("warden.paused", warden=self._name, ordinal=ordinal)

        hooks = self._configuration.hooks
        hooks.on_pause.execute()
        await hooks.on_pause_async.execute()

    async def stop(self) -> None:
        """Stop the Warden and reset the ordinal to 1. Restart with ``start()``."""
        with self._lock:
            self._running = False
            self._ordinal = 1
            self._state = WardenState.STOPPED
        logger.info("warden.stopped", warden=self._name)

        hooks = self._configuration.hooks
        hooks.on_stop.execute()
        await hooks.on_stop_async.execute()

    # === Loop ===

    def _can_execute_iteration(self, ordinal: int) -> bool:
        """Continuation predicate. Caller must hold ``_lock``.

        Seeing the running flag set honours every ``start()`` made so far.
        """
        if not self._running:
            return False
        self._served_generation = self._start_generation
        count = self._configuration.iterations_count
        if count is None:
            return True
        return ordinal <= count

    def _next_ordinal(self) -> int | None:
        """Ordinal for the next pass, or None when the loop must exit."""
        with self._lock:
            if self._can_execute_iteration(self._ordinal):
                return self._ordinal
            return None

    async def _run_loop(self, processor: IterationProcessor) -> None:
        hooks = self._configuration.hooks
        delay = self._configuration.iteration_delay_seconds

        while (ordinal := self._next_ordinal()) is not None:
            try:
                logger.debug("warden.iteration_started", warden=self._name, ordinal=ordinal)
                hooks.on_iteration_start.execute(ordinal)
                await hooks.on_iteration_start_async.execute(ordinal)

                iteration = await processor.execute(self._name, ordinal)

                hooks.on_iteration_completed.execute(iteration)
                await hooks.on_iteration_completed_async.execute(iteration)

                with self._lock:
                    self._stats.iterations_completed += 1
                    self._stats.last_iteration_at = utc_now()
                logger.debug("warden.iteration_completed", warden=self._name, ordinal=ordinal)

                # Relative to the field: stop() may have reset it mid-iteration
                with self._lock:
                    if not self._can_execute_iteration(self._ordinal + 1):
                        break
                    self._ordinal += 1
            except Exception as exc:
                await self._handle_iteration_error(ordinal, exc)
            finally:
                await asyncio.sleep(delay)

    async def _handle_iteration_error(self, ordinal: int, exc: Exception) -> None:
        with self._lock:
            self._stats.iterations_failed += 1
            self._stats.last_error = f"{type(exc).__name__}: {exc}"
        logger.warning(
            "warden.iteration_failed",
            warden=self._name,
            ordinal=ordinal,
            error=str(exc),
            error_type=type(exc).__name__,
            category=categorize_error(exc).value,
        )

        hooks = self._configuration.hooks
        try:
            hooks.on_error.execute(exc)
            await hooks.on_error_async.execute(exc)
        except Exception as hook_exc:
            # Error hook failures must never stop the loop; counted only.
            with self._lock:
                self._stats.suppressed_hook_errors += 1
                self._stats.last_suppressed_error = f"{type(hook_exc).__name__}: {hook_exc}"

    # === Observability ===

    def get_stats(self) -> WardenStats:
        """Snapshot of the current counters."""
        with self._lock:
            return replace(self._stats)

    def reset_stats(self) -> None:
        with self._lock:
            self._stats = WardenStats()

    def health(self) -> dict[str, Any]:
        with self._lock:
            return {
                "healthy": self._running and self._loop_exited is not None,
                "name": self._name,
                "state": self._state.value,
                "ordinal": self._ordinal,
                "iterations_count": self._configuration.iterations_count,
                "iteration_delay_seconds": self._configuration.iteration_delay_seconds,
                "stats": self._stats.to_dict(),
            }

    def __repr__(self) -> str:
        return f"Warden(name={self._name!r}, state={self.state.value}, ordinal={self.ordinal})"


def create_warden(
    name: str | None = None,
    configuration: WardenConfiguration | None = None,
    configure: Callable[[WardenConfigurationBuilder], Any] | None = None,
) -> Warden:
    """Factory function to create a Warden.

    Either pass a ready ``configuration`` or a ``configure`` callback that
    receives a ``WardenConfigurationBuilder``. The name defaults to
    ``default_name()``.

    Example:
        >>> warden = create_warden(
        ...     "api-monitor",
        ...     configure=lambda b: b.run_only_once().add_watcher(api_watcher),
        ... )
    """
    if configuration is None and configure is not None:
        builder = WardenConfiguration.builder()
        configure(builder)
        configuration = builder.build()
    return Warden(default_name() if name is None else name, configuration)  # type: ignore[arg-type]


__all__ = [
    "Warden",
    "WardenState",
    "WardenStats",
    "create_warden",
    "default_name",
]
