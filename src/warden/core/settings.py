"""Environment-driven settings for Warden processes.

``WardenSettings`` holds the knobs a deployment typically sets from the
environment rather than in code: the Warden name, cadence, iteration budget
and logging. Values are read from ``WARDEN_*`` environment variables and an
optional ``.env`` file.

Examples:
    >>> import os
    >>> os.environ["WARDEN_ITERATION_DELAY_SECONDS"] = "30"
    >>> WardenSettings().iteration_delay_seconds
    30.0
"""

from __future__ import annotations

from datetime import timedelta

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ITERATION_DELAY_SECONDS = 5.0


class WardenSettings(BaseSettings):
    """Settings shared by the CLI and by ``WardenConfiguration.from_settings``.

    Fields
    ──────
    name                    : Warden name (None = "Warden @<host>")
    iteration_delay_seconds : Delay between iterations, >= 0
    iterations_count        : Iteration budget, None = unbounded
    log_level               : Structlog log level
    log_json                : JSON output (None = auto-detect from tty)
    """

    model_config = SettingsConfigDict(
        env_prefix="WARDEN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Identity ─────────────────────────────────────────────────
    name: str | None = None

    # ── Cadence ──────────────────────────────────────────────────
    iteration_delay_seconds: float = Field(default=DEFAULT_ITERATION_DELAY_SECONDS, ge=0)
    iterations_count: int | None = Field(default=None, ge=1)

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    log_json: bool | None = None

    @property
    def iteration_delay(self) -> timedelta:
        return timedelta(seconds=self.iteration_delay_seconds)


__all__ = ["WardenSettings", "DEFAULT_ITERATION_DELAY_SECONDS"]
