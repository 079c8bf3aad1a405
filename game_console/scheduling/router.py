from fastapi import APIRouter, Depends

from game_console.deps import get_engine
from game_console.engine import Engine
from game_console.scheduling.schema import SchedulerSnapshot

router = APIRouter(prefix="/v1/scheduler", tags=["scheduler"])


@router.get("", response_model=SchedulerSnapshot)
async def get_schedule(engine: Engine = Depends(get_engine)):
    return engine.scheduler.snapshot()
