"""Config read/write path: merge -> validate -> store -> sync scheduler anchors."""

from __future__ import annotations

import logging

from game_console.configs import validator
from game_console.configs.schema import ConfigResponse, GameConfig, UpdateConfigRequest, default_config
from game_console.errors import NotFoundError, ValidationError
from game_console.games.schema import GameDefinition
from game_console.scheduling.scheduler import Scheduler
from game_console.store import ConfigStore, DefinitionStore

logger = logging.getLogger(__name__)


def raise_for_result(result: validator.ValidationResult) -> None:
    if result.ok:
        return
    first = result.errors[0]
    code = first.code if first.code == validator.INVALID_INTERVAL else "VALIDATION_ERROR"
    raise ValidationError(code, first.message, {"errors": [e.to_dict() for e in result.errors]})


class ConfigService:
    def __init__(self, configs: ConfigStore, definitions: DefinitionStore, scheduler: Scheduler):
        self._configs = configs
        self._definitions = definitions
        self._scheduler = scheduler

    def _require_definition(self, game_id: str) -> GameDefinition:
        definition = self._definitions.get(game_id)
        if not definition:
            raise NotFoundError("GAME_NOT_FOUND", f"Game '{game_id}' not found")
        return definition

    def get_config(self, game_id: str) -> ConfigResponse:
        definition = self._require_definition(game_id)
        stored = self._configs.get(game_id)
        config = stored or default_config(game_id, definition.type)
        return ConfigResponse(**config.model_dump(), game_type=definition.type, configured=stored is not None)

    def update_config(self, game_id: str, req: UpdateConfigRequest) -> ConfigResponse:
        definition = self._require_definition(game_id)
        current = self._configs.get(game_id) or default_config(game_id, definition.type)

        proposed = current.to_record()
        if req.type_fields is not None:
            proposed["typeFields"] = {**proposed["typeFields"], **req.type_fields}
        if req.auto_start is not None:
            patch = req.auto_start.model_dump(by_alias=True, exclude_unset=True)
            proposed["autoStart"] = {**proposed["autoStart"], **patch}
            # kapatirken interval verilmediyse temizle
            if patch.get("enabled") is False and "intervalMinutes" not in patch:
                proposed["autoStart"]["intervalMinutes"] = None

        raise_for_result(validator.validate(definition.type, proposed))

        stored = self._configs.put(game_id, GameConfig.from_record(proposed))
        self._sync_schedule(current, stored)
        logger.info("Config saved for %s (autoStart=%s)", game_id, stored.auto_start.enabled)
        return ConfigResponse(**stored.model_dump(), game_type=definition.type, configured=True)

    def _sync_schedule(self, before: GameConfig, after: GameConfig) -> None:
        if not after.auto_start.enabled:
            self._scheduler.forget(after.game_id)
        elif (
            not before.auto_start.enabled
            or before.auto_start.interval_minutes != after.auto_start.interval_minutes
        ):
            self._scheduler.reset(after.game_id)
