"""Warden scheduling: the state machine, its configuration, hooks and processors."""

from warden.scheduling.configuration import (
    DEFAULT_ITERATION_DELAY,
    WardenConfiguration,
    WardenConfigurationBuilder,
)
from warden.scheduling.hooks import AsyncHooks, Hooks, HooksBuilder, HooksConfiguration
from warden.scheduling.iteration import (
    IterationProcessor,
    IterationResult,
    ProcessorFactory,
    Watcher,
    WatcherCheckResult,
    WatcherIterationProcessor,
    watcher,
)
from warden.scheduling.warden import (
    Warden,
    WardenState,
    WardenStats,
    create_warden,
    default_name,
)

__all__ = [
    # Scheduler
    "Warden",
    "WardenState",
    "WardenStats",
    "create_warden",
    "default_name",
    # Configuration
    "WardenConfiguration",
    "WardenConfigurationBuilder",
    "DEFAULT_ITERATION_DELAY",
    # Hooks
    "Hooks",
    "AsyncHooks",
    "HooksConfiguration",
    "HooksBuilder",
    # Processors
    "IterationProcessor",
    "ProcessorFactory",
    "IterationResult",
    "WatcherCheckResult",
    "Watcher",
    "WatcherIterationProcessor",
    "watcher",
]
