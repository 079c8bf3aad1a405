from fastapi import Request

from game_console.configs.service import ConfigService
from game_console.engine import Engine
from game_console.games.service import GameService
from game_console.runtime.service import RuntimeService


def get_engine(request: Request) -> Engine:
    return request.app.state.engine


def get_config_service(request: Request) -> ConfigService:
    return get_engine(request).config_service


def get_game_service(request: Request) -> GameService:
    return get_engine(request).game_service


def get_runtime_service(request: Request) -> RuntimeService:
    return get_engine(request).runtime_service
