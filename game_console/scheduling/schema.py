from typing import Literal

from game_console.shared.schemas import CamelModel


class ScheduleEntry(CamelModel):
    game_id: str
    state: Literal["waiting", "due", "dispatched"]
    interval_minutes: int | None
    randomize_selection: bool
    last_triggered_at: str | None = None
    next_due_at: str | None = None


class SchedulerSnapshot(CamelModel):
    running: bool
    tick_seconds: float
    entries: list[ScheduleEntry]
