"""
reconciler.py — Stop Event Reconciler
======================================
Bir oyun durdugunda (manuel, runtime tarafindan ya da crash) o oyunun
auto-start'i kapatilir.

Durdurmak schedule'i bilerek ezmek demek: enabled kalirsa bir sonraki
interval'de oyun tekrar baslar. Kapatma otomatik, acma her zaman elle.

Only ``autoStart`` changes (``enabled=false, intervalMinutes=null``);
typeFields and randomizeSelection are kept.
"""

from __future__ import annotations

import logging

from game_console.configs import validator
from game_console.runtime.guard import RuntimeGuard
from game_console.runtime.protocol import GameStopped
from game_console.scheduling.scheduler import Scheduler
from game_console.store import ConfigStore, DefinitionStore

logger = logging.getLogger(__name__)


class Reconciler:
    def __init__(self, configs: ConfigStore, definitions: DefinitionStore, scheduler: Scheduler | None = None):
        self._configs = configs
        self._definitions = definitions
        self._scheduler = scheduler

    def attach(self, guard: RuntimeGuard) -> None:
        guard.subscribe(self.on_game_stopped)

    async def on_game_stopped(self, event: GameStopped) -> None:
        config = self._configs.get(event.game_id)
        if config is None or not config.auto_start.enabled:
            return

        disabled = config.model_copy(update={
            "auto_start": config.auto_start.model_copy(update={"enabled": False, "interval_minutes": None}),
        })

        definition = self._definitions.get(event.game_id)
        game_type = definition.type if definition else "generic"
        result = validator.validate(game_type, disabled.to_record())
        if not result.ok:
            # stored typeFields eski kurallara gore yazilmis olabilir; kapatma yine de yazilmali
            logger.warning(
                "Config of %s fails current rules, disabling auto-start anyway: %s",
                event.game_id, [e.to_dict() for e in result.errors],
            )

        self._configs.put(event.game_id, disabled)
        if self._scheduler:
            self._scheduler.forget(event.game_id)
        logger.info("Auto-start disabled for %s after %s stop", event.game_id, event.reason)
