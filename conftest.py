"""Shared fixtures: a scriptable fake runtime, a controllable clock, a wired engine."""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from game_console.config import Settings
from game_console.engine import Engine
from game_console.games.schema import GameDefinition
from game_console.runtime.protocol import GameRuntimeError
from game_console.runtime.schema import RuntimeStatus


class FakeRuntime:
    def __init__(self) -> None:
        self.status = RuntimeStatus()
        self.start_calls: list[tuple[str, dict]] = []
        self.stop_calls = 0
        self.fail_start = False
        self.start_delay = 0.0
        self.listeners = []

    async def start(self, game_id: str, type_fields: dict[str, Any]) -> RuntimeStatus:
        self.start_calls.append((game_id, dict(type_fields)))
        if self.start_delay:
            await asyncio.sleep(self.start_delay)
        if self.fail_start:
            raise GameRuntimeError("start", "chat connection down")
        self.status = RuntimeStatus(is_active=True, active_game_id=game_id)
        return self.status

    async def stop(self) -> RuntimeStatus:
        self.stop_calls += 1
        self.status = RuntimeStatus()
        return self.status

    async def get_status(self) -> RuntimeStatus:
        return self.status

    def add_stop_listener(self, listener) -> None:
        self.listeners.append(listener)

    def started_ids(self) -> list[str]:
        return [game_id for game_id, _ in self.start_calls]


class FakeClock:
    def __init__(self) -> None:
        self.now = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


def make_settings(**overrides) -> Settings:
    values = {
        "DATA_PATH": "",
        "SEED_BUILTIN_GAMES": False,
        "SCHEDULER_ENABLED": False,
        "RUNTIME_TIMEOUT_SECONDS": 0.5,
        "DEBUG": False,
    }
    values.update(overrides)
    return Settings(**values)


def add_game(engine: Engine, game_id: str, game_type: str = "guess") -> GameDefinition:
    return engine.definitions.put(GameDefinition(
        id=game_id,
        type=game_type,
        name=game_id.upper(),
        source="builtin",
        created_at=datetime.now(timezone.utc).isoformat(),
    ))


@pytest.fixture
def fake_runtime() -> FakeRuntime:
    return FakeRuntime()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def engine(fake_runtime: FakeRuntime, clock: FakeClock) -> Engine:
    return Engine(make_settings(), runtime=fake_runtime, clock=clock)
