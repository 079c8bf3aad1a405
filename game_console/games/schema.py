from typing import Literal

from pydantic import Field

from game_console.shared.schemas import CamelModel

GameType = Literal["guess", "trivia", "word", "story", "puzzle", "generic"]
GameSource = Literal["builtin", "ai-generated"]


class GameDefinition(CamelModel):
    id: str
    type: GameType
    name: str
    description: str = ""
    source: GameSource = "builtin"
    created_at: str
    updated_at: str | None = None
    last_played: str | None = Field(None, description="startedAt of the most recent session")


class CreateDefinitionRequest(CamelModel):
    id: str | None = Field(None, description="Ozel ID. None ise otomatik uretilir")
    type: GameType
    name: str = Field(min_length=1, max_length=200)
    description: str = ""
    source: GameSource = "ai-generated"


class UpdateDefinitionRequest(CamelModel):
    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
