"""Hook collections and the hook set consumed by the Warden loop.

Every lifecycle or phase event has two named slots: a synchronous collection
(``on_start``) and an asynchronous one (``on_start_async``). The Warden always
executes the synchronous collection to completion first, then awaits the
asynchronous one.

┌──────────────────────────────────────────────────────────────────────────────┐
│  HOOK SLOTS                                                                  │
│                                                                              │
│   event                  sync slot                async slot                 │
│   ─────                  ─────────                ──────────                 │
│   start                  on_start()               on_start_async()           │
│   pause                  on_pause()               on_pause_async()           │
│   stop                   on_stop()                on_stop_async()            │
│   iteration start        on_iteration_start(n)    on_iteration_start_async(n)│
│   iteration completed    on_iteration_completed(r) ..._completed_async(r)    │
│   error                  on_error(exc)            on_error_async(exc)        │
│                                                                              │
│  execute() is a fold over the callbacks in registration order that stops    │
│  at, and re-raises, the first failure.                                       │
└──────────────────────────────────────────────────────────────────────────────┘
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, fields
from typing import Any

HookCallback = Callable[..., Any]
AsyncHookCallback = Callable[..., Awaitable[Any]]


def _check_callable(callback: Any) -> None:
    if not callable(callback):
        raise TypeError(f"Hook callback must be callable, got {type(callback).__name__}")


class Hooks:
    """Ordered, immutable collection of synchronous callbacks."""

    __slots__ = ("_callbacks",)

    def __init__(self, callbacks: Iterable[HookCallback] = ()) -> None:
        callbacks = tuple(callbacks)
        for callback in callbacks:
            _check_callable(callback)
        self._callbacks = callbacks

    @property
    def callbacks(self) -> tuple[HookCallback, ...]:
        return self._callbacks

    def with_callback(self, callback: HookCallback) -> Hooks:
        """Return a new collection with ``callback`` appended."""
        return type(self)(self._callbacks + (callback,))

    def execute(self, *args: Any) -> None:
        """Invoke every callback in order; the first failure propagates."""
        for callback in self._callbacks:
            callback(*args)

    def __len__(self) -> int:
        return len(self._callbacks)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({len(self._callbacks)} callbacks)"


class AsyncHooks(Hooks):
    """Ordered, immutable collection of asynchronous callbacks.

    A callback may be a coroutine function or any callable returning an
    awaitable. Each callback is awaited before the next one starts.
    """

    __slots__ = ()

    async def execute(self, *args: Any) -> None:  # type: ignore[override]
        """Await every callback in order; the first failure propagates."""
        for callback in self._callbacks:
            result = callback(*args)
            if inspect.isawaitable(result):
                await result


@dataclass(frozen=True)
class HooksConfiguration:
    """The complete hook set read by the Warden. Never mutated after build."""

    on_start: Hooks = Hooks()
    on_start_async: AsyncHooks = AsyncHooks()
    on_pause: Hooks = Hooks()
    on_pause_async: AsyncHooks = AsyncHooks()
    on_stop: Hooks = Hooks()
    on_stop_async: AsyncHooks = AsyncHooks()
    on_iteration_start: Hooks = Hooks()
    on_iteration_start_async: AsyncHooks = AsyncHooks()
    on_iteration_completed: Hooks = Hooks()
    on_iteration_completed_async: AsyncHooks = AsyncHooks()
    on_error: Hooks = Hooks()
    on_error_async: AsyncHooks = AsyncHooks()

    @classmethod
    def empty(cls) -> HooksConfiguration:
        return cls()

    @classmethod
    def builder(cls) -> HooksBuilder:
        return HooksBuilder()

    def count(self) -> int:
        """Total number of registered callbacks across all slots."""
        return sum(len(getattr(self, f.name)) for f in fields(self))


class HooksBuilder:
    """Fluent registration of hook callbacks.

    Example:
        >>> hooks = (
        ...     HooksBuilder()
        ...     .on_start(lambda: print("started"))
        ...     .on_iteration_completed(lambda it: print(it.ordinal))
        ...     .on_error_async(report_error)
        ...     .build()
        ... )
    """

    def __init__(self, base: HooksConfiguration | None = None) -> None:
        base = base or HooksConfiguration.empty()
        self._slots: dict[str, Hooks] = {f.name: getattr(base, f.name) for f in fields(base)}

    def _add(self, slot: str, callback: Callable[..., Any]) -> HooksBuilder:
        _check_callable(callback)
        self._slots[slot] = self._slots[slot].with_callback(callback)
        return self

    # ── Lifecycle ────────────────────────────────────────────────

    def on_start(self, callback: Callable[[], Any]) -> HooksBuilder:
        return self._add("on_start", callback)

    def on_start_async(self, callback: Callable[[], Awaitable[Any]]) -> HooksBuilder:
        return self._add("on_start_async", callback)

    def on_pause(self, callback: Callable[[], Any]) -> HooksBuilder:
        return self._add("on_pause", callback)

    def on_pause_async(self, callback: Callable[[], Awaitable[Any]]) -> HooksBuilder:
        return self._add("on_pause_async", callback)

    def on_stop(self, callback: Callable[[], Any]) -> HooksBuilder:
        return self._add("on_stop", callback)

    def on_stop_async(self, callback: Callable[[], Awaitable[Any]]) -> HooksBuilder:
        return self._add("on_stop_async", callback)

    # ── Iteration phases ─────────────────────────────────────────

    def on_iteration_start(self, callback: Callable[[int], Any]) -> HooksBuilder:
        return self._add("on_iteration_start", callback)

    def on_iteration_start_async(self, callback: Callable[[int], Awaitable[Any]]) -> HooksBuilder:
        return self._add("on_iteration_start_async", callback)

    def on_iteration_completed(self, callback: Callable[[Any], Any]) -> HooksBuilder:
        return self._add("on_iteration_completed", callback)

    def on_iteration_completed_async(
        self, callback: Callable[[Any], Awaitable[Any]]
    ) -> HooksBuilder:
        return self._add("on_iteration_completed_async", callback)

    # ── Errors ───────────────────────────────────────────────────

    def on_error(self, callback: Callable[[Exception], Any]) -> HooksBuilder:
        return self._add("on_error", callback)

    def on_error_async(self, callback: Callable[[Exception], Awaitable[Any]]) -> HooksBuilder:
        return self._add("on_error_async", callback)

    def build(self) -> HooksConfiguration:
        return HooksConfiguration(**self._slots)


__all__ = [
    "Hooks",
    "AsyncHooks",
    "HooksConfiguration",
    "HooksBuilder",
    "HookCallback",
    "AsyncHookCallback",
]
