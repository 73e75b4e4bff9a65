#!/usr/bin/env python3
"""Lifecycle Hooks: pause, resume, stop and error containment.

WHAT THIS SHOWS
───────────────
  • pause() keeps the ordinal; start() resumes from it.
  • stop() resets the ordinal to 1.
  • A failing iteration goes to on_error hooks and is retried; the loop
    keeps going.
  • Sync hooks always run before async hooks of the same event.

    start() ──▶ on_start ─▶ on_start_async ─▶ loop
                              │
        on_iteration_start(n) ┤
        processor.execute     ┤  error ─▶ on_error ─▶ on_error_async
        on_iteration_completed┘
                              │
                          sleep(delay)

Run: python examples/02_lifecycle_hooks.py
"""

import asyncio

from warden import create_warden


class FlakyProcessor:
    """Fails the first time it sees ordinal 2."""

    def __init__(self):
        self._failed = False

    async def execute(self, warden_name: str, ordinal: int) -> str:
        if ordinal == 2 and not self._failed:
            self._failed = True
            raise RuntimeError("transient failure")
        return f"{warden_name} #{ordinal}"


async def main():
    print("=" * 60)
    print("Lifecycle Hooks")
    print("=" * 60)

    processor = FlakyProcessor()

    async def announce_start():
        print("  on_start_async")

    warden = create_warden(
        "example-hooks",
        configure=lambda b: (
            b.set_iteration_delay(0.05)
            .set_iterations_count(4)
            .set_iteration_processor_provider(lambda: processor)
            .set_hooks(
                lambda h: h.on_start_async(announce_start)
                .on_start(lambda: print("  on_start"))
                .on_pause(lambda: print("  on_pause"))
                .on_stop(lambda: print("  on_stop"))
                .on_iteration_completed(lambda r: print(f"  completed {r}"))
                .on_error(lambda exc: print(f"  error: {exc}"))
            )
        ),
    )

    print("\n[1] Run until paused after ~2 iterations")
    task = asyncio.create_task(warden.start())
    await asyncio.sleep(0.12)
    await warden.pause()
    await task
    print(f"  state={warden.state.value} ordinal={warden.ordinal}")

    print("\n[2] Resume to the end of the budget")
    await warden.start()
    print(f"  state={warden.state.value} ordinal={warden.ordinal}")

    print("\n[3] Stop resets the ordinal")
    await warden.stop()
    print(f"  state={warden.state.value} ordinal={warden.ordinal}")
    print(f"  health={warden.health()}")


if __name__ == "__main__":
    asyncio.run(main())
