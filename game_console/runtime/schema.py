from typing import Any, Literal

from pydantic import Field

from game_console.shared.schemas import CamelModel

StartedBy = Literal["manual", "auto"]
StopReason = Literal["manual", "auto", "crash"]


class RuntimeStatus(CamelModel):
    is_active: bool = False
    active_game_id: str | None = None
    started_by: StartedBy | None = None
    started_at: str | None = None


class StartRequest(CamelModel):
    game_id: str
    options: dict[str, Any] = Field(default_factory=dict, description="Bu oturum icin typeFields override")


class StoppedEventRequest(CamelModel):
    """Pushed by a remote runtime when a game ends on its own."""

    game_id: str
    reason: Literal["auto", "crash"] = "auto"
