"""Manual start/stop. Errors go back to the caller; the scheduler has its own retry path."""

from __future__ import annotations

from typing import Any

from game_console.configs import validator
from game_console.configs.schema import default_config
from game_console.configs.service import raise_for_result
from game_console.errors import AlreadyActiveError, NotFoundError
from game_console.runtime.guard import RuntimeGuard
from game_console.runtime.schema import RuntimeStatus, StopReason
from game_console.store import ConfigStore, DefinitionStore


class RuntimeService:
    def __init__(self, definitions: DefinitionStore, configs: ConfigStore, guard: RuntimeGuard):
        self._definitions = definitions
        self._configs = configs
        self._guard = guard

    async def start_game(self, game_id: str, options: dict[str, Any] | None = None) -> RuntimeStatus:
        definition = self._definitions.get(game_id)
        if not definition:
            raise NotFoundError("GAME_NOT_FOUND", f"Game '{game_id}' not found")
        if self._guard.is_active:
            raise AlreadyActiveError(self._guard.status.active_game_id)

        config = self._configs.get(game_id) or default_config(game_id, definition.type)
        type_fields = {**config.type_fields, **(options or {})}
        raise_for_result(validator.validate_type_fields(definition.type, type_fields))

        return await self._guard.start(game_id, type_fields, started_by="manual")

    async def stop_game(self) -> RuntimeStatus:
        return await self._guard.stop("manual")

    def get_status(self) -> RuntimeStatus:
        return self._guard.status

    async def game_stopped(self, game_id: str, reason: StopReason) -> bool:
        return await self._guard.notify_stopped(game_id, reason)
