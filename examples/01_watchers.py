#!/usr/bin/env python3
"""Watchers: run a set of checks on a fixed cadence.

WHY WATCHERS
────────────
Most recurring work is "check N things, report what is wrong". A Watcher is
one named async check; the Warden runs every watcher on each iteration,
concurrently, and hands the collected IterationResult to the
on_iteration_completed hooks. A failing or hanging watcher never stops the
loop: it is recorded as an invalid result with its error.

ARCHITECTURE
────────────
    WardenConfiguration.builder()
    │  .add_watcher(Watcher("api", ...))
    │  .add_watcher(Watcher("db", ..., timeout_s=0.1))
    ▼
    WatcherIterationProcessor ── asyncio.gather(watchers)
    │
    ▼
    IterationResult(ordinal, results=[WatcherCheckResult, ...])

Run: python examples/01_watchers.py
"""

import asyncio

from warden import Warden, WardenConfiguration, Watcher, watcher
from warden.core.logging import configure_logging


async def api_is_up() -> bool:
    await asyncio.sleep(0.01)
    return True


@watcher("db", timeout_s=0.1)
async def db_is_up() -> bool:
    """Database answers within 100ms."""
    await asyncio.sleep(1)
    return True


def report(result) -> None:
    status = "OK " if result.is_valid else "BAD"
    print(f"  [{status}] iteration {result.ordinal} ({result.execution_time_ms}ms)")
    for check in result.invalid_results():
        print(f"        {check.watcher_name}: {check.error_type} {check.error}")


async def main():
    print("=" * 60)
    print("Watchers: three iterations, one slow watcher")
    print("=" * 60)

    configure_logging(level="WARNING", json_format=False)

    config = (
        WardenConfiguration.builder()
        .set_iteration_delay(0.2)
        .set_iterations_count(3)
        .add_watchers(Watcher("api", api_is_up), db_is_up)
        .set_hooks(lambda hooks: hooks.on_iteration_completed(report))
        .build()
    )
    warden = Warden("example-watchers", config)
    await warden.start()

    stats = warden.get_stats()
    print(f"\n  completed={stats.iterations_completed} failed={stats.iterations_failed}")


if __name__ == "__main__":
    asyncio.run(main())
