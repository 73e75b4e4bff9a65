"""
Warden - recurring-iteration scheduler with lifecycle hooks.

A ``Warden`` repeatedly runs an iteration processor on a fixed cadence,
surrounded by start/pause/stop and per-iteration hooks. Iteration errors are
contained and reported to error hooks; lifecycle hook errors propagate.

Quick start::

    from warden import Watcher, create_warden

    async def api_is_up() -> bool:
        ...

    warden = create_warden(
        "api-monitor",
        configure=lambda b: (
            b.set_iteration_delay(30)
            .add_watcher(Watcher("api", api_is_up))
            .set_hooks(lambda h: h.on_iteration_completed(print))
        ),
    )
    await warden.start()
"""

__version__ = "0.1.0"

from warden.core.errors import (
    ConfigError,
    InvalidConfigError,
    IterationError,
    MissingConfigError,
    WardenError,
)
from warden.core.settings import WardenSettings
from warden.scheduling import (
    HooksBuilder,
    HooksConfiguration,
    IterationProcessor,
    IterationResult,
    Warden,
    WardenConfiguration,
    WardenConfigurationBuilder,
    WardenState,
    WardenStats,
    Watcher,
    WatcherCheckResult,
    WatcherIterationProcessor,
    create_warden,
    default_name,
    watcher,
)

__all__ = [
    "__version__",
    "Warden",
    "WardenState",
    "WardenStats",
    "create_warden",
    "default_name",
    "WardenConfiguration",
    "WardenConfigurationBuilder",
    "WardenSettings",
    "HooksBuilder",
    "HooksConfiguration",
    "IterationProcessor",
    "IterationResult",
    "Watcher",
    "WatcherCheckResult",
    "WatcherIterationProcessor",
    "watcher",
    "WardenError",
    "ConfigError",
    "MissingConfigError",
    "InvalidConfigError",
    "IterationError",
]
