"""Tests for config validation rules."""

from __future__ import annotations

import pytest

from game_console.configs import validator
from game_console.configs.schema import TYPE_DEFAULTS


def _config(type_fields: dict, enabled: bool = False, interval: int | None = None, randomize: bool = False) -> dict:
    return {
        "typeFields": type_fields,
        "autoStart": {"enabled": enabled, "intervalMinutes": interval, "randomizeSelection": randomize},
    }


class TestAutoStartPolicy:
    def test_interval_below_minimum_is_rejected(self) -> None:
        result = validator.validate("guess", _config({"minNumber": 1, "maxNumber": 100}, True, 2))
        assert not result.ok
        assert result.errors[0].code == validator.INVALID_INTERVAL
        assert result.errors[0].field == "autoStart.intervalMinutes"

    @pytest.mark.parametrize("interval", [3, 60, 1440])
    def test_interval_bounds_are_inclusive(self, interval: int) -> None:
        assert validator.validate("guess", _config(TYPE_DEFAULTS["guess"], True, interval)).ok

    @pytest.mark.parametrize("interval", [None, 1441, 0, -5, "10", 10.0, True])
    def test_enabled_requires_integer_interval_in_range(self, interval) -> None:
        result = validator.validate("guess", _config(TYPE_DEFAULTS["guess"], True, interval))
        assert [e.code for e in result.errors] == [validator.INVALID_INTERVAL]

    def test_disabled_with_interval_is_rejected(self) -> None:
        result = validator.validate("guess", _config(TYPE_DEFAULTS["guess"], False, 10))
        assert result.errors[0].code == validator.INVALID_INTERVAL

    def test_policy_failure_short_circuits_type_rules(self) -> None:
        result = validator.validate("guess", _config({"minNumber": 500, "maxNumber": 2}, True, 1))
        assert len(result.errors) == 1
        assert result.errors[0].code == validator.INVALID_INTERVAL

    def test_non_boolean_enabled(self) -> None:
        config = _config(TYPE_DEFAULTS["guess"])
        config["autoStart"]["enabled"] = "yes"
        result = validator.validate("guess", config)
        assert result.errors[0].code == validator.INVALID_AUTO_START


class TestGuessRules:
    def test_defaults_are_valid(self) -> None:
        assert validator.validate("guess", _config(TYPE_DEFAULTS["guess"])).ok

    def test_min_must_be_below_max(self) -> None:
        fields = {**TYPE_DEFAULTS["guess"], "minNumber": 50, "maxNumber": 50}
        result = validator.validate("guess", _config(fields))
        assert not result.ok
        assert result.errors[0].field == "typeFields"

    def test_numbers_outside_range(self) -> None:
        fields = {**TYPE_DEFAULTS["guess"], "maxNumber": 1001}
        result = validator.validate("guess", _config(fields))
        assert [e.field for e in result.errors] == ["typeFields.maxNumber"]

    def test_missing_field(self) -> None:
        fields = {"minNumber": 1, "maxNumber": 100}
        result = validator.validate("guess", _config(fields))
        assert {e.field for e in result.errors} == {"typeFields.maxGuesses", "typeFields.hintFrequency"}

    def test_string_numbers_are_not_coerced(self) -> None:
        fields = {**TYPE_DEFAULTS["guess"], "maxNumber": "100"}
        assert not validator.validate("guess", _config(fields)).ok

    def test_extra_fields_are_allowed(self) -> None:
        fields = {**TYPE_DEFAULTS["guess"], "announceWinner": True}
        assert validator.validate("guess", _config(fields)).ok


class TestOtherTypes:
    @pytest.mark.parametrize("value,ok", [(10, True), (300, True), (9, False), (301, False)])
    def test_trivia_time_per_question(self, value: int, ok: bool) -> None:
        fields = {**TYPE_DEFAULTS["trivia"], "timePerQuestionSec": value}
        assert validator.validate("trivia", _config(fields)).ok is ok

    def test_trivia_points_range(self) -> None:
        fields = {**TYPE_DEFAULTS["trivia"], "pointsPerQuestion": 0}
        assert not validator.validate("trivia", _config(fields)).ok

    def test_word_min_may_equal_max(self) -> None:
        fields = {**TYPE_DEFAULTS["word"], "minWordLength": 5, "maxWordLength": 5}
        assert validator.validate("word", _config(fields)).ok

    def test_word_min_above_max(self) -> None:
        fields = {**TYPE_DEFAULTS["word"], "minWordLength": 8, "maxWordLength": 5}
        assert not validator.validate("word", _config(fields)).ok

    def test_story_contribution_length(self) -> None:
        fields = {**TYPE_DEFAULTS["story"], "maxContributionLength": 40}
        result = validator.validate("story", _config(fields))
        assert [e.field for e in result.errors] == ["typeFields.maxContributionLength"]

    @pytest.mark.parametrize("game_type", ["puzzle", "generic", "karaoke"])
    def test_permissive_types_only_check_policy(self, game_type: str) -> None:
        assert validator.validate(game_type, _config({"anything": [1, 2, 3]}, True, 15)).ok
        assert not validator.validate(game_type, _config({}, True, 2)).ok

    def test_type_fields_must_be_an_object(self) -> None:
        result = validator.validate("generic", _config([]))  # type: ignore[arg-type]
        assert result.errors[0].code == validator.INVALID_TYPE_FIELDS


def test_registered_rule_set_is_used() -> None:
    from game_console.configs.schema import StoryFields

    validator.register_type_rules("saga", StoryFields)
    try:
        assert not validator.validate("saga", _config({})).ok
        assert validator.validate("saga", _config(TYPE_DEFAULTS["story"])).ok
    finally:
        validator.TYPE_RULES.pop("saga")
