"""
local.py — In-Process Game Runtime
===================================
Gelistirme ve test icin: oyun oturumunu sadece bellekte tutar.
Gercek oyun mantigi (round'lar, cevaplar) yok, sadece start/stop/status.

``finish()`` simulates a game ending on its own (round limit reached) and
notifies stop listeners, the same way a real runtime would.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from game_console.runtime.protocol import GameRuntimeError, StopListener
from game_console.runtime.schema import RuntimeStatus, StopReason

logger = logging.getLogger(__name__)


class LocalGameRuntime:
    def __init__(self) -> None:
        self._status = RuntimeStatus()
        self._type_fields: dict[str, Any] = {}
        self._listeners: list[StopListener] = []

    @property
    def type_fields(self) -> dict[str, Any]:
        return dict(self._type_fields)

    async def start(self, game_id: str, type_fields: dict[str, Any]) -> RuntimeStatus:
        if self._status.is_active:
            raise GameRuntimeError("start", f"game '{self._status.active_game_id}' is running")
        self._type_fields = dict(type_fields)
        self._status = RuntimeStatus(
            is_active=True,
            active_game_id=game_id,
            started_at=datetime.now(timezone.utc).isoformat(),
        )
        logger.info("Local runtime started %s", game_id)
        return self._status.model_copy()

    async def stop(self) -> RuntimeStatus:
        if not self._status.is_active:
            raise GameRuntimeError("stop", "no game is running")
        logger.info("Local runtime stopped %s", self._status.active_game_id)
        self._status = RuntimeStatus()
        self._type_fields = {}
        return self._status.model_copy()

    async def get_status(self) -> RuntimeStatus:
        return self._status.model_copy()

    def add_stop_listener(self, listener: StopListener) -> None:
        self._listeners.append(listener)

    async def finish(self, reason: StopReason = "auto") -> None:
        """End the running game from the runtime side."""
        game_id = self._status.active_game_id
        if not game_id:
            return
        self._status = RuntimeStatus()
        self._type_fields = {}
        for listener in self._listeners:
            await listener(game_id, reason)
