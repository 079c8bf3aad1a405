"""Stores over the collection database. No validation here, callers validate first."""

from __future__ import annotations

from datetime import datetime, timezone

from game_console.configs.schema import GameConfig
from game_console.database import CONFIGS, DEFINITIONS, RUNTIME, TRIGGERS, Database
from game_console.games.schema import GameDefinition
from game_console.runtime.schema import RuntimeStatus


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


# ── Game Configs ─────────────────────────────────────

class ConfigStore:
    def __init__(self, db: Database):
        self._db = db

    def get(self, game_id: str) -> GameConfig | None:
        record = self._db.get(CONFIGS, game_id)
        return GameConfig.from_record(record) if record else None

    def put(self, game_id: str, config: GameConfig) -> GameConfig:
        """Full replace, last writer wins."""
        record = config.to_record()
        record["gameId"] = game_id
        return GameConfig.from_record(self._db.put(CONFIGS, game_id, record))

    def delete(self, game_id: str) -> bool:
        return self._db.delete(CONFIGS, game_id)

    def list_enabled_auto_start(self) -> list[GameConfig]:
        records = self._db.list(CONFIGS, lambda r: r.get("autoStart", {}).get("enabled"))
        return [GameConfig.from_record(r) for r in records]


# ── Game Definitions ─────────────────────────────────

class DefinitionStore:
    def __init__(self, db: Database):
        self._db = db

    def get(self, game_id: str) -> GameDefinition | None:
        record = self._db.get(DEFINITIONS, game_id)
        return GameDefinition.model_validate(record) if record else None

    def put(self, definition: GameDefinition) -> GameDefinition:
        self._db.put(DEFINITIONS, definition.id, definition.model_dump(by_alias=True))
        return definition

    def delete(self, game_id: str) -> bool:
        return self._db.delete(DEFINITIONS, game_id)

    def list(self, limit: int = 50, offset: int = 0) -> tuple[list[GameDefinition], int]:
        records = sorted(self._db.list(DEFINITIONS), key=lambda r: (r.get("createdAt", ""), r["id"]))
        page = records[offset : offset + limit]
        return [GameDefinition.model_validate(r) for r in page], len(records)

    def count(self) -> int:
        return self._db.count(DEFINITIONS)


# ── Runtime Status (singleton) ───────────────────────

class RuntimeStateStore:
    KEY = "status"

    def __init__(self, db: Database):
        self._db = db

    def load(self) -> RuntimeStatus:
        record = self._db.get(RUNTIME, self.KEY)
        return RuntimeStatus.model_validate(record) if record else RuntimeStatus()

    def save(self, status: RuntimeStatus) -> None:
        self._db.put(RUNTIME, self.KEY, status.model_dump(by_alias=True))


# ── Scheduler Triggers ───────────────────────────────

class TriggerStore:
    """``lastTriggeredAt`` per game. Only the scheduler writes here."""

    def __init__(self, db: Database):
        self._db = db

    def all(self) -> dict[str, datetime]:
        return {
            r["gameId"]: datetime.fromisoformat(r["lastTriggeredAt"])
            for r in self._db.list(TRIGGERS)
        }

    def set(self, game_id: str, at: datetime) -> None:
        self._db.put(TRIGGERS, game_id, {"gameId": game_id, "lastTriggeredAt": at.isoformat()})

    def delete(self, game_id: str) -> bool:
        return self._db.delete(TRIGGERS, game_id)
