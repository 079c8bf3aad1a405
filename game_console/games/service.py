"""
service.py — Game Definitions
==============================
Oyun tanimlari: listeleme, kayit, guncelleme ve cascade silme.

Delete order: stop the game if it is the active one, delete its config and
trigger record, then the definition. A failing stop aborts the delete.
"""

from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path

from game_console.errors import ConflictError, NotActiveError, NotFoundError
from game_console.games.schema import CreateDefinitionRequest, GameDefinition, UpdateDefinitionRequest
from game_console.runtime.guard import RuntimeGuard
from game_console.runtime.schema import RuntimeStatus
from game_console.scheduling.scheduler import Scheduler
from game_console.store import ConfigStore, DefinitionStore

logger = logging.getLogger(__name__)

_BUILTINS_PATH = Path(__file__).resolve().parent.parent / "data" / "builtin_games.json"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class GameService:
    def __init__(
        self,
        definitions: DefinitionStore,
        configs: ConfigStore,
        guard: RuntimeGuard,
        scheduler: Scheduler,
    ):
        self._definitions = definitions
        self._configs = configs
        self._guard = guard
        self._scheduler = scheduler

    def seed_builtins(self) -> int:
        """Insert the built-in templates into an empty store."""
        if self._definitions.count():
            return 0
        builtins = json.loads(_BUILTINS_PATH.read_text(encoding="utf-8"))
        for item in builtins:
            self._definitions.put(GameDefinition(**item, source="builtin", created_at=_now()))
        return len(builtins)

    def list_definitions(self, limit: int = 50, offset: int = 0) -> tuple[list[GameDefinition], int]:
        return self._definitions.list(limit, offset)

    def get_definition(self, game_id: str) -> GameDefinition:
        definition = self._definitions.get(game_id)
        if not definition:
            raise NotFoundError("GAME_NOT_FOUND", f"Game '{game_id}' not found")
        return definition

    def create_definition(self, req: CreateDefinitionRequest) -> GameDefinition:
        game_id = req.id or f"game_{uuid.uuid4().hex[:12]}"
        if self._definitions.get(game_id):
            raise ConflictError("GAME_EXISTS", f"Game '{game_id}' already exists")
        definition = GameDefinition(
            id=game_id,
            type=req.type,
            name=req.name,
            description=req.description,
            source=req.source,
            created_at=_now(),
        )
        logger.info("Game definition created: %s (%s)", game_id, req.type)
        return self._definitions.put(definition)

    def update_definition(self, game_id: str, req: UpdateDefinitionRequest) -> GameDefinition:
        definition = self.get_definition(game_id)
        updates = req.model_dump(exclude_none=True)
        if not updates:
            return definition
        return self._definitions.put(definition.model_copy(update={**updates, "updated_at": _now()}))

    def mark_played(self, status: RuntimeStatus) -> None:
        """Guard start hook: record the session start on the definition."""
        definition = self._definitions.get(status.active_game_id)
        if definition is None:
            return
        self._definitions.put(definition.model_copy(update={"last_played": status.started_at}))

    async def delete_definition(self, game_id: str) -> None:
        self.get_definition(game_id)

        if self._guard.status.active_game_id == game_id:
            try:
                await self._guard.stop("manual")
            except NotActiveError:
                pass  # arada kendisi durdu

        self._configs.delete(game_id)
        self._scheduler.forget(game_id)
        self._definitions.delete(game_id)
        logger.info("Game definition deleted: %s", game_id)
