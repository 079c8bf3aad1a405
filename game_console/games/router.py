from fastapi import APIRouter, Depends, Query, Response

from game_console.configs.schema import ConfigResponse, UpdateConfigRequest
from game_console.configs.service import ConfigService
from game_console.deps import get_config_service, get_game_service
from game_console.games.schema import CreateDefinitionRequest, GameDefinition, UpdateDefinitionRequest
from game_console.games.service import GameService
from game_console.shared.schemas import PaginatedResponse, error_responses

router = APIRouter(prefix="/v1/games", tags=["games"], responses=error_responses(400, 404, 409, 502))


@router.get("", response_model=PaginatedResponse)
async def list_games(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    service: GameService = Depends(get_game_service),
):
    items, total = service.list_definitions(limit, offset)
    return PaginatedResponse(
        items=[d.model_dump(by_alias=True) for d in items], total=total, limit=limit, offset=offset
    )


@router.post("", response_model=GameDefinition, status_code=201)
async def create_game(body: CreateDefinitionRequest, service: GameService = Depends(get_game_service)):
    return service.create_definition(body)


@router.get("/{game_id}", response_model=GameDefinition)
async def get_game(game_id: str, service: GameService = Depends(get_game_service)):
    return service.get_definition(game_id)


@router.patch("/{game_id}", response_model=GameDefinition)
async def update_game(game_id: str, body: UpdateDefinitionRequest, service: GameService = Depends(get_game_service)):
    return service.update_definition(game_id, body)


@router.delete("/{game_id}", status_code=204)
async def delete_game(game_id: str, service: GameService = Depends(get_game_service)):
    await service.delete_definition(game_id)
    return Response(status_code=204)


# ── Config ───────────────────────────────────────────

@router.get("/{game_id}/config", response_model=ConfigResponse)
async def get_config(game_id: str, service: ConfigService = Depends(get_config_service)):
    return service.get_config(game_id)


@router.put("/{game_id}/config", response_model=ConfigResponse)
async def update_config(game_id: str, body: UpdateConfigRequest, service: ConfigService = Depends(get_config_service)):
    return service.update_config(game_id, body)
