"""
guard.py — Runtime Mutual Exclusion
====================================
Tum start/stop cagrilari (manuel veya scheduler) buradan gecer.

The guard owns the single RuntimeStatus. Rules:

- ``start`` checks and reserves the slot with no ``await`` in between, so two
  concurrent starts can never both reach the runtime. A start that finds a game
  active or another start in flight fails at once with ALREADY_ACTIVE; there is
  no queue.
- RuntimeStatus is committed only after the runtime confirmed the start. A
  failed, timed-out or cancelled start releases the reservation and leaves the
  status untouched.
- Every runtime call is bounded by ``timeout``.
- Every transition from active to idle publishes one ``GameStopped`` event.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable

from game_console.errors import AlreadyActiveError, NotActiveError, RuntimeServiceError
from game_console.runtime.protocol import GameRuntime, GameStopped
from game_console.runtime.schema import RuntimeStatus, StartedBy, StopReason
from game_console.store import RuntimeStateStore

logger = logging.getLogger(__name__)

StopHandler = Callable[[GameStopped], Awaitable[None]]
StartHook = Callable[[RuntimeStatus], None]


class RuntimeGuard:
    def __init__(self, runtime: GameRuntime, state: RuntimeStateStore, timeout: float = 10.0):
        self._runtime = runtime
        self._state = state
        self._timeout = timeout
        self._status = state.load()
        self._version = 0
        self._pending: str | None = None
        self._stopping = False
        self._handlers: list[StopHandler] = []
        self._start_hooks: list[StartHook] = []
        runtime.add_stop_listener(self.notify_stopped)

    @property
    def status(self) -> RuntimeStatus:
        return self._status.model_copy()

    @property
    def is_active(self) -> bool:
        return self._status.is_active

    def subscribe(self, handler: StopHandler) -> None:
        self._handlers.append(handler)

    def on_started(self, hook: StartHook) -> None:
        """Called with the committed status after every successful start."""
        self._start_hooks.append(hook)

    # ── Start / Stop ─────────────────────────────────

    async def start(self, game_id: str, type_fields: dict[str, Any], started_by: StartedBy = "manual") -> RuntimeStatus:
        if self._status.is_active:
            raise AlreadyActiveError(self._status.active_game_id)
        if self._pending is not None:
            raise AlreadyActiveError(pending_game_id=self._pending)
        self._pending = game_id

        try:
            await self._call("start", self._runtime.start(game_id, type_fields))
            # commit: start sirasinin son adimi
            self._set_status(RuntimeStatus(
                is_active=True,
                active_game_id=game_id,
                started_by=started_by,
                started_at=datetime.now(timezone.utc).isoformat(),
            ))
        finally:
            self._pending = None

        logger.info("Game %s started (%s)", game_id, started_by)
        self._run_start_hooks()
        return self.status

    async def stop(self, reason: StopReason = "manual") -> RuntimeStatus:
        if not self._status.is_active or self._stopping:
            raise NotActiveError()
        self._stopping = True
        previous = self._status

        try:
            await self._call("stop", self._runtime.stop())
            self._set_status(RuntimeStatus())
        finally:
            self._stopping = False

        logger.info("Game %s stopped (%s)", previous.active_game_id, reason)
        await self._publish(GameStopped(previous.active_game_id, reason, previous.started_by))
        return self.status

    # ── Runtime-side notifications ───────────────────

    async def notify_stopped(self, game_id: str, reason: StopReason = "auto") -> bool:
        """Runtime says a game ended on its own. Ignored unless it is the active one."""
        if self._stopping or not self._status.is_active or self._status.active_game_id != game_id:
            logger.debug("Ignoring stop notification for %s", game_id)
            return False
        previous = self._status
        self._set_status(RuntimeStatus())
        logger.info("Game %s ended by runtime (%s)", game_id, reason)
        await self._publish(GameStopped(game_id, reason, previous.started_by))
        return True

    async def refresh(self) -> RuntimeStatus:
        """Poll the runtime and repair drift: crashed games are stopped, unknown ones adopted."""
        version = self._version
        try:
            remote = await asyncio.wait_for(self._runtime.get_status(), self._timeout)
        except Exception as e:
            logger.warning("Runtime status poll failed: %s", e)
            return self.status

        # poll sirasinda start/stop oldu, snapshot eskidi
        if version != self._version or self._pending is not None or self._stopping:
            return self.status

        local = self._status
        if local.is_active and (not remote.is_active or remote.active_game_id != local.active_game_id):
            self._set_status(RuntimeStatus())
            logger.warning("Game %s no longer running in runtime, treating as crashed", local.active_game_id)
            await self._publish(GameStopped(local.active_game_id, "crash", local.started_by))

        if not self._status.is_active and remote.is_active and remote.active_game_id:
            self._set_status(RuntimeStatus(
                is_active=True,
                active_game_id=remote.active_game_id,
                started_by=remote.started_by,
                started_at=remote.started_at or datetime.now(timezone.utc).isoformat(),
            ))
            logger.warning("Adopted running game %s reported by runtime", remote.active_game_id)

        return self.status

    # ── Helpers ──────────────────────────────────────

    async def _call(self, operation: str, coro: Awaitable[RuntimeStatus]) -> RuntimeStatus:
        try:
            return await asyncio.wait_for(coro, self._timeout)
        except asyncio.TimeoutError as e:
            raise RuntimeServiceError(
                "RUNTIME_TIMEOUT", f"Runtime {operation} timed out after {self._timeout}s"
            ) from e
        except Exception as e:
            raise RuntimeServiceError("RUNTIME_ERROR", f"Runtime {operation} failed: {e}") from e

    def _set_status(self, status: RuntimeStatus) -> None:
        self._status = status
        self._version += 1
        self._state.save(status)

    def _run_start_hooks(self) -> None:
        for hook in self._start_hooks:
            try:
                hook(self.status)
            except Exception:
                logger.exception("Start hook failed for %s", self._status.active_game_id)

    async def _publish(self, event: GameStopped) -> None:
        for handler in self._handlers:
            try:
                await handler(event)
            except Exception:
                logger.exception("Stop handler failed for %s", event.game_id)
