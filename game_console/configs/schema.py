"""
schema.py — Game Config Models
===============================
GameConfig = typeFields (oyun tipine gore degisen alanlar) + autoStart policy.

Type field models carry no defaults: a field missing from a proposed config is
a validation error. Defaults live in ``TYPE_DEFAULTS`` and are merged in by the
service before validation.
"""

from __future__ import annotations

import copy
from typing import Any

from pydantic import ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from game_console.shared.schemas import CamelModel

MIN_INTERVAL_MINUTES = 3
MAX_INTERVAL_MINUTES = 1440


# ═══════════════════════════════════════════════════
# DOMAIN RECORDS
# ═══════════════════════════════════════════════════

class AutoStartPolicy(CamelModel):
    enabled: bool = False
    interval_minutes: int | None = None
    randomize_selection: bool = False


class GameConfig(CamelModel):
    game_id: str
    type_fields: dict[str, Any] = Field(default_factory=dict)
    auto_start: AutoStartPolicy = Field(default_factory=AutoStartPolicy)

    def to_record(self) -> dict:
        return self.model_dump(by_alias=True)

    @classmethod
    def from_record(cls, record: dict) -> "GameConfig":
        return cls.model_validate(record)


# ═══════════════════════════════════════════════════
# TYPE FIELD RULES (strict): "5" veya True int yerine gecmez
# ═══════════════════════════════════════════════════

class _TypeFields(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        strict=True,
        extra="allow",
    )


class GuessFields(_TypeFields):
    min_number: int = Field(ge=1, le=1000)
    max_number: int = Field(ge=1, le=1000)
    max_guesses: int = Field(ge=0)
    hint_frequency: int = Field(ge=0)

    @model_validator(mode="after")
    def _min_below_max(self):
        if self.min_number >= self.max_number:
            raise ValueError("minNumber must be less than maxNumber")
        return self


class TriviaFields(_TypeFields):
    time_per_question_sec: int = Field(ge=10, le=300)
    points_per_question: int = Field(ge=1, le=100)
    allow_partial_matches: bool


class WordFields(_TypeFields):
    min_word_length: int = Field(ge=1)
    max_word_length: int = Field(ge=1)
    time_limit_sec: int = Field(ge=10, le=300)
    allow_plural_forms: bool

    @model_validator(mode="after")
    def _min_not_above_max(self):
        if self.min_word_length > self.max_word_length:
            raise ValueError("minWordLength must not exceed maxWordLength")
        return self


class StoryFields(_TypeFields):
    max_contribution_length: int = Field(ge=50, le=500)
    turn_time_limit_sec: int = Field(ge=10, le=300)


# Konsoldaki form default'lari
TYPE_DEFAULTS: dict[str, dict[str, Any]] = {
    "guess": {"minNumber": 1, "maxNumber": 100, "maxGuesses": 10, "hintFrequency": 3},
    "trivia": {"timePerQuestionSec": 30, "pointsPerQuestion": 10, "allowPartialMatches": False},
    "word": {"minWordLength": 3, "maxWordLength": 12, "timeLimitSec": 60, "allowPluralForms": True},
    "story": {"maxContributionLength": 200, "turnTimeLimitSec": 60},
}


def default_type_fields(game_type: str) -> dict[str, Any]:
    return copy.deepcopy(TYPE_DEFAULTS.get(game_type, {}))


def default_config(game_id: str, game_type: str) -> GameConfig:
    return GameConfig(game_id=game_id, type_fields=default_type_fields(game_type))


# ═══════════════════════════════════════════════════
# REQUEST / RESPONSE MODELS
# ═══════════════════════════════════════════════════

class AutoStartPatch(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, strict=True)

    enabled: bool | None = None
    interval_minutes: int | None = None
    randomize_selection: bool | None = None


class UpdateConfigRequest(CamelModel):
    """Partial or full config. Omitted parts keep their current value."""

    type_fields: dict[str, Any] | None = Field(None, description="Merged key by key onto current typeFields")
    auto_start: AutoStartPatch | None = None


class ConfigResponse(GameConfig):
    game_type: str
    configured: bool = Field(description="False when the defaults are shown for a never-configured game")
