"""
validator.py — Config Validation
=================================
Pure functions, no store or runtime access.

Order:
1. Common autoStart policy, fails fast with INVALID_INTERVAL.
2. Type rule set from ``TYPE_RULES`` keyed by game type. Unknown types use the
   generic rule set, which only requires typeFields to be an object.

UI tarafi sayilari clamp ediyor ama burada yine de kontrol ediyoruz; ham
degerler dogrudan API'ye gelebilir.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pydantic
from pydantic import BaseModel

from game_console.configs.schema import (
    MAX_INTERVAL_MINUTES,
    MIN_INTERVAL_MINUTES,
    GuessFields,
    StoryFields,
    TriviaFields,
    WordFields,
)

INVALID_INTERVAL = "INVALID_INTERVAL"
INVALID_AUTO_START = "INVALID_AUTO_START"
INVALID_TYPE_FIELDS = "INVALID_TYPE_FIELDS"


@dataclass
class FieldError:
    field: str
    code: str
    message: str

    def to_dict(self) -> dict:
        return {"field": self.field, "code": self.code, "message": self.message}


@dataclass
class ValidationResult:
    errors: list[FieldError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


# None = generic: only the common policy is checked
TYPE_RULES: dict[str, type[BaseModel] | None] = {
    "guess": GuessFields,
    "trivia": TriviaFields,
    "word": WordFields,
    "story": StoryFields,
    "puzzle": None,
    "generic": None,
}


def register_type_rules(game_type: str, model: type[BaseModel] | None) -> None:
    TYPE_RULES[game_type] = model


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _check_auto_start(policy: Any) -> list[FieldError]:
    if not isinstance(policy, dict):
        return [FieldError("autoStart", INVALID_AUTO_START, "autoStart must be an object")]

    enabled = policy.get("enabled", False)
    if not isinstance(enabled, bool):
        return [FieldError("autoStart.enabled", INVALID_AUTO_START, "enabled must be a boolean")]

    interval = policy.get("intervalMinutes")
    if enabled:
        if interval is None:
            return [FieldError("autoStart.intervalMinutes", INVALID_INTERVAL,
                               "intervalMinutes is required when auto-start is enabled")]
        if not _is_int(interval) or not MIN_INTERVAL_MINUTES <= interval <= MAX_INTERVAL_MINUTES:
            return [FieldError("autoStart.intervalMinutes", INVALID_INTERVAL,
                               f"intervalMinutes must be an integer in "
                               f"[{MIN_INTERVAL_MINUTES}, {MAX_INTERVAL_MINUTES}]")]
    elif interval is not None:
        return [FieldError("autoStart.intervalMinutes", INVALID_INTERVAL,
                           "intervalMinutes must be null when auto-start is disabled")]

    if not isinstance(policy.get("randomizeSelection", False), bool):
        return [FieldError("autoStart.randomizeSelection", INVALID_AUTO_START,
                           "randomizeSelection must be a boolean")]
    return []


def validate_type_fields(game_type: str, type_fields: Any) -> ValidationResult:
    if not isinstance(type_fields, dict):
        return ValidationResult([FieldError("typeFields", INVALID_TYPE_FIELDS, "typeFields must be an object")])

    model = TYPE_RULES.get(game_type)
    if model is None:
        return ValidationResult()

    try:
        model.model_validate(type_fields)
    except pydantic.ValidationError as e:
        errors = []
        for err in e.errors():
            loc = ".".join(str(p) for p in err["loc"])
            errors.append(FieldError(
                f"typeFields.{loc}" if loc else "typeFields",
                err["type"],
                err["msg"],
            ))
        return ValidationResult(errors)
    return ValidationResult()


def validate(game_type: str, proposed: dict) -> ValidationResult:
    """Validate a camelCase config record (``{"typeFields": ..., "autoStart": ...}``)."""
    policy_errors = _check_auto_start(proposed.get("autoStart", {}))
    if policy_errors:
        return ValidationResult(policy_errors)
    return validate_type_fields(game_type, proposed.get("typeFields", {}))
