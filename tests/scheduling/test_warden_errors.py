"""Tests for error containment: iteration errors vs lifecycle-hook errors."""

from __future__ import annotations

import pytest

from warden.scheduling import Warden, WardenState

from tests._support.processors import FactoryCounter, RecordingProcessor, make_configuration


class HookFailure(Exception):
    pass


def _raise(message: str):
    def callback(*_args):
        raise HookFailure(message)

    return callback


class TestLifecycleHookErrorsPropagate:
    @pytest.mark.asyncio
    async def test_sync_start_hook_failure_raises_and_loop_never_begins(self, factory):
        config = make_configuration(factory, iterations=1, configure_hooks=lambda h: h.on_start(_raise("start")))
        warden = Warden("w", config)

        with pytest.raises(HookFailure, match="start"):
            await warden.start()

        assert factory.calls == 0
        assert factory.processor.calls == []
        # The running flag was already set when the hook failed
        assert warden.is_running is True
        assert warden.state == WardenState.RUNNING

    @pytest.mark.asyncio
    async def test_async_start_hook_failure_raises(self, factory):
        async def boom():
            raise HookFailure("async start")

        config = make_configuration(factory, iterations=1, configure_hooks=lambda h: h.on_start_async(boom))
        with pytest.raises(HookFailure, match="async start"):
            await Warden("w", config).start()
        assert factory.calls == 0

    @pytest.mark.asyncio
    async def test_sync_start_failure_skips_async_start_hooks(self, factory, events):
        async def record():
            events.append(("async_start", None))

        config = make_configuration(
            factory,
            configure_hooks=lambda h: h.on_start_async(record).on_start(_raise("start")),
        )
        with pytest.raises(HookFailure):
            await Warden("w", config).start()
        assert events == []

    @pytest.mark.asyncio
    async def test_pause_hook_failure_raises_after_transition(self, factory):
        config = make_configuration(factory, configure_hooks=lambda h: h.on_pause(_raise("pause")))
        warden = Warden("w", config)
        with pytest.raises(HookFailure, match="pause"):
            await warden.pause()
        assert warden.is_running is False

    @pytest.mark.asyncio
    async def test_stop_hook_failure_raises_after_reset(self, factory):
        async def boom():
            raise HookFailure("stop")

        config = make_configuration(factory, configure_hooks=lambda h: h.on_stop_async(boom))
        warden = Warden("w", config)
        with pytest.raises(HookFailure, match="stop"):
            await warden.stop()
        assert warden.state == WardenState.STOPPED
        assert warden.ordinal == 1

    @pytest.mark.asyncio
    async def test_factory_failure_propagates(self):
        def broken_factory():
            raise RuntimeError("cannot build processor")

        warden = Warden("w", make_configuration(broken_factory, iterations=1))
        with pytest.raises(RuntimeError, match="cannot build processor"):
            await warden.start()
        # The loop guard is released, so a retry reaches the factory again
        with pytest.raises(RuntimeError, match="cannot build processor"):
            await warden.start()


class TestIterationErrorsContained:
    @pytest.mark.asyncio
    async def test_error_hooks_receive_exception_sync_then_async(self, events):
        factory = FactoryCounter(RecordingProcessor(fail_on={1}))

        async def on_error_async(exc):
            events.append(("error_async", exc))

        config = make_configuration(
            factory,
            iterations=1,
            configure_hooks=lambda h: (
                h.on_error_async(on_error_async).on_error(lambda exc: events.append(("error", exc)))
            ),
        )
        await Warden("w", config).start()

        assert [kind for kind, _ in events] == ["error", "error_async"]
        exc = events[0][1]
        assert isinstance(exc, RuntimeError)
        assert str(exc) == "iteration 1 failed"
        assert events[1][1] is exc

    @pytest.mark.asyncio
    async def test_iteration_start_hook_failure_is_contained(self, factory, events):
        failed = False

        def fail_first(ordinal):
            nonlocal failed
            if not failed:
                failed = True
                raise HookFailure(f"iteration start {ordinal}")

        config = make_configuration(
            factory,
            iterations=1,
            configure_hooks=lambda h: h.on_iteration_start(fail_first).on_error(
                lambda exc: events.append(("error", str(exc)))
            ),
        )
        await Warden("w", config).start()

        assert events == [("error", "iteration start 1")]
        # The processor is skipped for the failed pass
        assert factory.processor.ordinals == [1]

    @pytest.mark.asyncio
    async def test_completed_hook_failure_does_not_advance_ordinal(self, factory, events):
        failed = False

        async def fail_first(result):
            nonlocal failed
            if not failed:
                failed = True
                raise HookFailure("completed")

        config = make_configuration(
            factory,
            iterations=2,
            configure_hooks=lambda h: h.on_iteration_completed_async(fail_first).on_error(
                lambda exc: events.append(("error", str(exc)))
            ),
        )
        await Warden("w", config).start()

        assert factory.processor.ordinals == [1, 1, 2]
        assert events == [("error", "completed")]

    @pytest.mark.asyncio
    async def test_error_hook_failure_is_swallowed(self, events):
        factory = FactoryCounter(RecordingProcessor(fail_on={1}))

        async def never_called(exc):
            events.append(("error_async", exc))

        config = make_configuration(
            factory,
            iterations=2,
            configure_hooks=lambda h: (
                h.on_error(_raise("error hook")).on_error_async(never_called)
                .on_iteration_completed(lambda r: events.append(("completed", r["ordinal"])))
            ),
        )
        warden = Warden("w", config)

        await warden.start()

        assert events == [("completed", 1), ("completed", 2)]
        stats = warden.get_stats()
        assert stats.suppressed_hook_errors == 1
        assert stats.last_suppressed_error == "HookFailure: error hook"

    @pytest.mark.asyncio
    async def test_async_error_hook_failure_is_swallowed(self):
        factory = FactoryCounter(RecordingProcessor(fail_on={1}, fail_times=2))

        async def boom(exc):
            raise HookFailure("async error hook")

        config = make_configuration(factory, iterations=1, configure_hooks=lambda h: h.on_error_async(boom))
        warden = Warden("w", config)
        await warden.start()

        assert factory.processor.ordinals == [1, 1, 1]
        assert warden.get_stats().suppressed_hook_errors == 2

    @pytest.mark.asyncio
    async def test_error_hook_failure_not_logged(self, capsys):
        from warden.core.logging import configure_logging

        configure_logging(level="DEBUG", json_format=True)
        factory = FactoryCounter(RecordingProcessor(fail_on={1}))
        config = make_configuration(factory, iterations=1, configure_hooks=lambda h: h.on_error(_raise("secret")))

        await Warden("w", config).start()

        out = capsys.readouterr().out
        assert "warden.iteration_failed" in out
        assert "secret" not in out
