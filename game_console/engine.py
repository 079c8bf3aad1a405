"""
engine.py — Service Wiring
===========================
Database, store'lar, runtime guard, scheduler, reconciler ve servisleri
tek yerde birbirine baglar. ``create_app`` bir tane olusturur; testler
kendi runtime'i ve ayarlariyla ayri instance kurabilir.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from game_console.config import Settings
from game_console.configs.service import ConfigService
from game_console.database import Database
from game_console.games.service import GameService
from game_console.runtime.guard import RuntimeGuard
from game_console.runtime.http import HttpGameRuntime
from game_console.runtime.local import LocalGameRuntime
from game_console.runtime.protocol import GameRuntime
from game_console.runtime.service import RuntimeService
from game_console.scheduling.reconciler import Reconciler
from game_console.scheduling.scheduler import Scheduler, utcnow
from game_console.store import ConfigStore, DefinitionStore, RuntimeStateStore, TriggerStore

logger = logging.getLogger(__name__)


def build_runtime(settings: Settings) -> GameRuntime:
    if settings.RUNTIME_URL:
        return HttpGameRuntime(settings.RUNTIME_URL, settings.RUNTIME_API_KEY)
    return LocalGameRuntime()


class Engine:
    def __init__(
        self,
        settings: Settings,
        runtime: GameRuntime | None = None,
        db: Database | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.settings = settings
        self.db = db or Database(settings.DATA_PATH or None)
        self.runtime = runtime or build_runtime(settings)

        self.configs = ConfigStore(self.db)
        self.definitions = DefinitionStore(self.db)
        self.triggers = TriggerStore(self.db)

        self.guard = RuntimeGuard(self.runtime, RuntimeStateStore(self.db), settings.RUNTIME_TIMEOUT_SECONDS)
        self.scheduler = Scheduler(
            self.configs,
            self.definitions,
            self.triggers,
            self.guard,
            tick_seconds=settings.SCHEDULER_TICK_SECONDS,
            shutdown_grace=settings.SCHEDULER_SHUTDOWN_GRACE_SECONDS,
            clock=clock or utcnow,
        )
        self.reconciler = Reconciler(self.configs, self.definitions, self.scheduler)
        self.reconciler.attach(self.guard)

        self.config_service = ConfigService(self.configs, self.definitions, self.scheduler)
        self.game_service = GameService(self.definitions, self.configs, self.guard, self.scheduler)
        self.guard.on_started(self.game_service.mark_played)
        self.runtime_service = RuntimeService(self.definitions, self.configs, self.guard)

    async def startup(self) -> None:
        if self.settings.SEED_BUILTIN_GAMES:
            seeded = self.game_service.seed_builtins()
            if seeded:
                logger.info("Seeded %d built-in games", seeded)
        await self.guard.refresh()
        if self.settings.SCHEDULER_ENABLED:
            self.scheduler.start()

    async def shutdown(self) -> None:
        await self.scheduler.stop()
        if isinstance(self.runtime, HttpGameRuntime):
            await self.runtime.aclose()
