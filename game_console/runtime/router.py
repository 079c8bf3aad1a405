from fastapi import APIRouter, Depends

from game_console.deps import get_runtime_service
from game_console.runtime.schema import RuntimeStatus, StartRequest, StoppedEventRequest
from game_console.runtime.service import RuntimeService
from game_console.shared.schemas import error_responses

router = APIRouter(prefix="/v1/runtime", tags=["runtime"], responses=error_responses(400, 404, 409, 502))


@router.get("/status", response_model=RuntimeStatus)
async def get_status(service: RuntimeService = Depends(get_runtime_service)):
    return service.get_status()


@router.post("/start", response_model=RuntimeStatus)
async def start_game(body: StartRequest, service: RuntimeService = Depends(get_runtime_service)):
    return await service.start_game(body.game_id, body.options)


@router.post("/stop", response_model=RuntimeStatus)
async def stop_game(service: RuntimeService = Depends(get_runtime_service)):
    return await service.stop_game()


@router.post("/events/stopped")
async def game_stopped(body: StoppedEventRequest, service: RuntimeService = Depends(get_runtime_service)):
    accepted = await service.game_stopped(body.game_id, body.reason)
    return {"accepted": accepted}
