"""GameRuntime contract. Gameplay lives behind this interface, never in this service."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Protocol

from game_console.runtime.schema import RuntimeStatus, StartedBy, StopReason

# (game_id, reason): runtime kendi basina bir oyunu bitirdiginde cagirir
StopListener = Callable[[str, StopReason], Awaitable[None]]


class GameRuntimeError(Exception):
    def __init__(self, operation: str, message: str):
        self.operation = operation
        super().__init__(f"[{operation}] {message}")


class GameRuntime(Protocol):
    async def start(self, game_id: str, type_fields: dict[str, Any]) -> RuntimeStatus: ...

    async def stop(self) -> RuntimeStatus: ...

    async def get_status(self) -> RuntimeStatus: ...

    def add_stop_listener(self, listener: StopListener) -> None: ...


@dataclass
class GameStopped:
    game_id: str
    reason: StopReason
    started_by: StartedBy | None = None
    stopped_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
