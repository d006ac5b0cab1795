from fastapi import APIRouter, Depends, Query

from minion.models import Operation
from minion.orchestrator import BatchOrchestrator
from minion_api.api.deps import get_orchestrator
from minion_api.schemas.operations import OperationResponse
from minion_api.services.operations import run_operation

router = APIRouter(prefix="/api", tags=["operations"])


@router.post("/extend-keys", response_model=OperationResponse)
def extend_keys(
    years: int | None = Query(default=None, ge=1),
    orchestrator: BatchOrchestrator = Depends(get_orchestrator),
) -> OperationResponse:
    return run_operation(orchestrator, Operation.EXTEND_KEYS, years=years)


@router.post("/refresh-menus", response_model=OperationResponse)
def refresh_menus(orchestrator: BatchOrchestrator = Depends(get_orchestrator)) -> OperationResponse:
    return run_operation(orchestrator, Operation.REFRESH_MENUS)
