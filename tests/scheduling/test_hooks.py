"""Tests for warden.scheduling.hooks: hook collections and builder."""

from __future__ import annotations

import pytest

from warden.scheduling.hooks import AsyncHooks, Hooks, HooksBuilder, HooksConfiguration


# ── Hooks ────────────────────────────────────────────────────────────────


class TestHooks:
    def test_empty_execute_is_noop(self):
        Hooks().execute(1, 2)

    def test_executes_in_registration_order(self):
        calls = []
        hooks = Hooks([lambda x: calls.append(("a", x)), lambda x: calls.append(("b", x))])
        hooks.execute(7)
        assert calls == [("a", 7), ("b", 7)]

    def test_first_failure_propagates_and_stops(self):
        calls = []

        def boom():
            raise RuntimeError("boom")

        hooks = Hooks([boom, lambda: calls.append("after")])
        with pytest.raises(RuntimeError, match="boom"):
            hooks.execute()
        assert calls == []

    def test_with_callback_returns_new_collection(self):
        base = Hooks()
        extended = base.with_callback(print)
        assert len(base) == 0
        assert len(extended) == 1
        assert type(extended) is Hooks

    def test_non_callable_rejected(self):
        with pytest.raises(TypeError):
            Hooks(["not callable"])

    def test_repr(self):
        assert repr(Hooks([print])) == "Hooks(1 callbacks)"


class TestAsyncHooks:
    @pytest.mark.asyncio
    async def test_awaits_each_callback_in_order(self):
        calls = []

        async def first(x):
            calls.append(("first", x))

        async def second(x):
            calls.append(("second", x))

        await AsyncHooks([first, second]).execute("r")
        assert calls == [("first", "r"), ("second", "r")]

    @pytest.mark.asyncio
    async def test_accepts_plain_callable(self):
        calls = []
        await AsyncHooks([lambda: calls.append("sync")]).execute()
        assert calls == ["sync"]

    @pytest.mark.asyncio
    async def test_failure_propagates(self):
        async def boom():
            raise ValueError("async boom")

        with pytest.raises(ValueError, match="async boom"):
            await AsyncHooks([boom]).execute()

    def test_with_callback_keeps_async_type(self):
        assert type(AsyncHooks().with_callback(print)) is AsyncHooks


# ── HooksConfiguration / HooksBuilder ────────────────────────────────────


class TestHooksConfiguration:
    def test_empty_has_no_callbacks(self):
        config = HooksConfiguration.empty()
        assert config.count() == 0
        assert isinstance(config.on_start, Hooks)
        assert isinstance(config.on_start_async, AsyncHooks)

    def test_frozen(self):
        config = HooksConfiguration.empty()
        with pytest.raises(AttributeError):
            config.on_start = Hooks()  # type: ignore[misc]


class TestHooksBuilder:
    def test_every_slot_registers(self):
        async def noop(*_):
            pass

        config = (
            HooksBuilder()
            .on_start(print)
            .on_start_async(noop)
            .on_pause(print)
            .on_pause_async(noop)
            .on_stop(print)
            .on_stop_async(noop)
            .on_iteration_start(print)
            .on_iteration_start_async(noop)
            .on_iteration_completed(print)
            .on_iteration_completed_async(noop)
            .on_error(print)
            .on_error_async(noop)
            .build()
        )
        assert config.count() == 12
        assert len(config.on_error_async) == 1

    def test_callbacks_accumulate_per_slot(self):
        config = HooksBuilder().on_error(print).on_error(repr).build()
        assert config.on_error.callbacks == (print, repr)

    def test_builds_on_base(self):
        base = HooksBuilder().on_start(print).build()
        config = HooksBuilder(base).on_start(repr).build()
        assert config.on_start.callbacks == (print, repr)
        assert base.on_start.callbacks == (print,)

    def test_non_callable_rejected(self):
        with pytest.raises(TypeError):
            HooksBuilder().on_error(42)  # type: ignore[arg-type]

    def test_builder_classmethod(self):
        assert isinstance(HooksConfiguration.builder(), HooksBuilder)
