"""Warden configuration and its builder.

``WardenConfiguration`` is the immutable schedule description read by the
Warden: cadence, optional iteration budget, processor factory and hook set.
It is built once, before the Warden exists, and never mutated afterwards.

Example:
    >>> config = (
    ...     WardenConfiguration.builder()
    ...     .set_iteration_delay(timedelta(seconds=30))
    ...     .set_iterations_count(10)
    ...     .add_watcher(Watcher("api", check_api))
    ...     .set_hooks(lambda hooks: hooks.on_error(report))
    ...     .build()
    ... )
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import timedelta
from functools import partial
from typing import TYPE_CHECKING, Any

from warden.core.errors import InvalidConfigError, MissingConfigError
from warden.core.settings import DEFAULT_ITERATION_DELAY_SECONDS
from warden.scheduling.hooks import HooksBuilder, HooksConfiguration
from warden.scheduling.iteration import (
    ProcessorFactory,
    Watcher,
    WatcherIterationProcessor,
)

if TYPE_CHECKING:
    from warden.core.settings import WardenSettings

DEFAULT_ITERATION_DELAY = timedelta(seconds=DEFAULT_ITERATION_DELAY_SECONDS)


def _to_delay(delay: timedelta | float | int) -> timedelta:
    if isinstance(delay, bool):
        raise InvalidConfigError("iteration_delay", delay)
    if isinstance(delay, (int, float)):
        delay = timedelta(seconds=delay)
    if not isinstance(delay, timedelta):
        raise InvalidConfigError("iteration_delay", delay)
    if delay < timedelta(0):
        raise InvalidConfigError(
            "iteration_delay", delay, "Iteration delay can not be negative."
        )
    return delay


def _to_count(count: int | None) -> int | None:
    if count is None:
        return None
    if isinstance(count, bool) or not isinstance(count, int) or count < 1:
        raise InvalidConfigError(
            "iterations_count", count, "Iterations count must be a positive integer."
        )
    return count


@dataclass(frozen=True)
class WardenConfiguration:
    """Immutable schedule configuration.

    Attributes:
        processor_factory: Zero-argument callable returning a fresh processor;
            called each time ``start()`` enters the iteration loop.
        iteration_delay: Wait after every loop pass, >= 0.
        iterations_count: Iteration budget; None runs until paused/stopped.
        hooks: Hook set invoked around lifecycle transitions and iterations.
    """

    processor_factory: ProcessorFactory
    iteration_delay: timedelta = DEFAULT_ITERATION_DELAY
    iterations_count: int | None = None
    hooks: HooksConfiguration = field(default_factory=HooksConfiguration.empty)

    def __post_init__(self) -> None:
        if self.processor_factory is None:
            raise MissingConfigError("processor_factory", "Iteration processor factory has not been provided.")
        if not callable(self.processor_factory):
            raise InvalidConfigError("processor_factory", self.processor_factory)
        object.__setattr__(self, "iteration_delay", _to_delay(self.iteration_delay))
        object.__setattr__(self, "iterations_count", _to_count(self.iterations_count))
        if self.hooks is None:
            object.__setattr__(self, "hooks", HooksConfiguration.empty())

    @property
    def iteration_delay_seconds(self) -> float:
        return self.iteration_delay.total_seconds()

    @property
    def is_bounded(self) -> bool:
        return self.iterations_count is not None

    @classmethod
    def builder(cls) -> WardenConfigurationBuilder:
        return WardenConfigurationBuilder()

    @classmethod
    def from_settings(
        cls,
        settings: WardenSettings,
        processor_factory: ProcessorFactory,
        hooks: HooksConfiguration | None = None,
    ) -> WardenConfiguration:
        """Build a configuration whose cadence and budget come from settings."""
        return cls(
            processor_factory=processor_factory,
            iteration_delay=settings.iteration_delay,
            iterations_count=settings.iterations_count,
            hooks=hooks or HooksConfiguration.empty(),
        )


class WardenConfigurationBuilder:
    """Fluent builder for ``WardenConfiguration``."""

    def __init__(self) -> None:
        self._iteration_delay: timedelta = DEFAULT_ITERATION_DELAY
        self._iterations_count: int | None = None
        self._watchers: list[Watcher] = []
        self._hooks = HooksBuilder()
        self._processor_factory: ProcessorFactory | None = None

    def set_iteration_delay(self, delay: timedelta | float) -> WardenConfigurationBuilder:
        """Delay between iterations, as a ``timedelta`` or in seconds."""
        self._iteration_delay = _to_delay(delay)
        return self

    def set_iterations_count(self, count: int) -> WardenConfigurationBuilder:
        self._iterations_count = _to_count(count)
        return self

    def run_only_once(self) -> WardenConfigurationBuilder:
        return self.set_iterations_count(1)

    def add_watcher(self, watcher: Watcher) -> WardenConfigurationBuilder:
        if not isinstance(watcher, Watcher):
            raise InvalidConfigError("watcher", watcher)
        self._watchers.append(watcher)
        return self

    def add_watchers(self, *watchers: Watcher) -> WardenConfigurationBuilder:
        for w in watchers:
            self.add_watcher(w)
        return self

    def set_hooks(self, configure: Callable[[HooksBuilder], Any]) -> WardenConfigurationBuilder:
        """Register hooks; ``configure`` receives the shared ``HooksBuilder``."""
        configure(self._hooks)
        return self

    def set_iteration_processor_provider(
        self, factory: ProcessorFactory
    ) -> WardenConfigurationBuilder:
        if not callable(factory):
            raise InvalidConfigError("processor_factory", factory)
        self._processor_factory = factory
        return self

    def build(self) -> WardenConfiguration:
        factory = self._processor_factory
        if factory is None:
            if not self._watchers:
                raise MissingConfigError(
                    "watchers",
                    "Either an iteration processor provider or at least one watcher is required.",
                )
            watchers = tuple(self._watchers)
            # Validate names now rather than on the first start()
            WatcherIterationProcessor(watchers)
            factory = partial(WatcherIterationProcessor, watchers)

        return WardenConfiguration(
            processor_factory=factory,
            iteration_delay=self._iteration_delay,
            iterations_count=self._iterations_count,
            hooks=self._hooks.build(),
        )


__all__ = [
    "WardenConfiguration",
    "WardenConfigurationBuilder",
    "DEFAULT_ITERATION_DELAY",
]
