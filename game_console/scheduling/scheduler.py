"""
scheduler.py — Auto-Start Scheduler
====================================
Sabit aralikli (varsayilan 30 sn) background loop. Her tick'te:

1. Runtime'i yokla (crash tespiti guard'da).
2. autoStart.enabled olan config'leri oku. Ilk kez gorulen config ``now`` ile
   anchor'lanir; artik enabled olmayanlarin anchor'u silinir.
3. Aktif bir oyun varsa dur, auto-start hicbir oyunu ezmez.
4. Due olan her config icin aday sec: randomizeSelection ise o an due olan
   tum config'ler arasindan uniform rastgele, degilse config'in kendisi.
5. Guard uzerinden baslat. Basarida lastTriggeredAt yazilir ve tick biter
   (tick basina en fazla bir oyun). Hatada loglanir, hicbir sey yazilmaz,
   sonraki tick tekrar denenir.

Per config: Waiting(nextDueAt) -> Due -> Dispatched -> Waiting, or Disabled
once auto-start is turned off. The scheduler is the only writer of trigger
records.
"""

from __future__ import annotations

import asyncio
import logging
import random
from datetime import datetime, timedelta, timezone
from typing import Callable

from game_console.configs.schema import GameConfig
from game_console.errors import ConflictError, RuntimeServiceError
from game_console.runtime.guard import RuntimeGuard
from game_console.scheduling.schema import ScheduleEntry, SchedulerSnapshot
from game_console.store import ConfigStore, DefinitionStore, TriggerStore

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Scheduler:
    def __init__(
        self,
        configs: ConfigStore,
        definitions: DefinitionStore,
        triggers: TriggerStore,
        guard: RuntimeGuard,
        tick_seconds: float = 30.0,
        shutdown_grace: float = 5.0,
        clock: Callable[[], datetime] = utcnow,
        rng_factory: Callable[[], random.Random] = random.Random,
    ):
        self._configs = configs
        self._definitions = definitions
        self._triggers = triggers
        self._guard = guard
        self._tick_seconds = tick_seconds
        self._shutdown_grace = shutdown_grace
        self._clock = clock
        self._rng_factory = rng_factory
        self._anchors: dict[str, datetime] = triggers.all()
        self._task: asyncio.Task | None = None
        self._stop_event: asyncio.Event | None = None

    # ── Lifecycle ────────────────────────────────────

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task:
        if self.running:
            logger.warning("Scheduler already running")
            return self._task
        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(self._run())
        return self._task

    async def stop(self) -> None:
        """Let the in-flight tick finish, cancel it after the grace period."""
        if not self.running:
            return
        self._stop_event.set()
        try:
            await asyncio.wait_for(self._task, self._shutdown_grace)
        except asyncio.TimeoutError:
            logger.warning("Scheduler tick abandoned after %.1fs", self._shutdown_grace)
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Scheduler stopped")

    async def _run(self) -> None:
        logger.info("Scheduler started (tick=%.0fs)", self._tick_seconds)
        while not self._stop_event.is_set():
            try:
                await self.tick()
            except Exception:
                logger.exception("Scheduler tick failed")
            try:
                await asyncio.wait_for(self._stop_event.wait(), self._tick_seconds)
            except asyncio.TimeoutError:
                pass

    # ── Anchors ──────────────────────────────────────

    def reset(self, game_id: str) -> None:
        """Restart the waiting period, e.g. after the auto-start policy was rewritten."""
        self._anchor(game_id, self._clock())

    def forget(self, game_id: str) -> None:
        if self._anchors.pop(game_id, None) is not None:
            self._triggers.delete(game_id)

    def _anchor(self, game_id: str, at: datetime) -> None:
        self._anchors[game_id] = at
        self._triggers.set(game_id, at)

    def _next_due(self, config: GameConfig) -> datetime | None:
        anchor = self._anchors.get(config.game_id)
        if anchor is None or not config.auto_start.interval_minutes:
            return None
        return anchor + timedelta(minutes=config.auto_start.interval_minutes)

    def _is_due(self, config: GameConfig, now: datetime) -> bool:
        next_due = self._next_due(config)
        return next_due is not None and now >= next_due

    # ── Tick ─────────────────────────────────────────

    async def tick(self) -> str | None:
        """Run one scheduling pass. Returns the game id started, if any."""
        now = self._clock()
        await self._guard.refresh()

        enabled = self._configs.list_enabled_auto_start()
        enabled_ids = {c.game_id for c in enabled}
        for game_id in list(self._anchors):
            if game_id not in enabled_ids:
                self.forget(game_id)
        for config in enabled:
            if config.game_id not in self._anchors:
                self._anchor(config.game_id, now)

        if self._guard.is_active:
            return None

        due = [c for c in enabled if self._is_due(c, now)]
        if not due:
            return None
        due.sort(key=lambda c: (self._anchors[c.game_id], c.game_id))

        rng = self._rng_factory()
        # tick basina her oyun en fazla bir kez denenir
        tried: set[str] = set()
        for config in due:
            untried = [c for c in due if c.game_id not in tried]
            if not untried:
                break
            if config.auto_start.randomize_selection:
                candidate = rng.choice(untried)
            elif config.game_id in tried:
                continue
            else:
                candidate = config
            tried.add(candidate.game_id)

            if self._definitions.get(candidate.game_id) is None:
                logger.warning("Auto-start skipped: no definition for %s", candidate.game_id)
                continue

            try:
                await self._guard.start(candidate.game_id, candidate.type_fields, started_by="auto")
            except ConflictError:
                # manuel start araya girdi
                logger.info("Auto-start of %s lost to another start", candidate.game_id)
                return None
            except RuntimeServiceError as e:
                logger.warning("Auto-start of %s failed, retrying next tick: %s", candidate.game_id, e.message)
                continue

            self._anchor(candidate.game_id, now)
            if candidate.game_id != config.game_id:
                self._anchor(config.game_id, now)
            logger.info("Auto-started %s (due: %s)", candidate.game_id, config.game_id)
            return candidate.game_id

        return None

    # ── Introspection ────────────────────────────────

    def snapshot(self) -> SchedulerSnapshot:
        now = self._clock()
        active_id = self._guard.status.active_game_id
        entries = []
        for config in self._configs.list_enabled_auto_start():
            anchor = self._anchors.get(config.game_id)
            next_due = self._next_due(config)
            if config.game_id == active_id:
                state = "dispatched"
            elif next_due is not None and now >= next_due:
                state = "due"
            else:
                state = "waiting"
            entries.append(ScheduleEntry(
                game_id=config.game_id,
                state=state,
                interval_minutes=config.auto_start.interval_minutes,
                randomize_selection=config.auto_start.randomize_selection,
                last_triggered_at=anchor.isoformat() if anchor else None,
                next_due_at=next_due.isoformat() if next_due else None,
            ))
        return SchedulerSnapshot(
            running=self.running,
            tick_seconds=self._tick_seconds,
            entries=sorted(entries, key=lambda e: e.game_id),
        )
