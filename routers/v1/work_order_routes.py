from fastapi import APIRouter, Depends, HTTPException, Request, status

from models.fault_models import DiagnosedFault
from models.work_order_models import WorkOrder
from services.logger_singleton import LoggerSingleton
from services.repair_planner import RepairPlanner

logger = LoggerSingleton.get_logger(__name__)

router = APIRouter(prefix="/work-orders", tags=["Work Orders"])


def get_repair_planner(request: Request) -> RepairPlanner:
    """Planner created in the application lifespan"""
    planner = getattr(request.app.state, "repair_planner", None)
    if planner is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Repair planner is not initialized"
        )
    return planner


@router.post(
    "/plan",
    response_model=WorkOrder,
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"model": WorkOrder, "description": "Work order planned and stored"},
        502: {"description": "The language model returned an unusable draft"},
        503: {"description": "Database temporarily unavailable"},
    },
    description="""Plan a repair for a diagnosed fault and store the resulting work order.

    Each call creates a new work order, even for the same fault.
    Priority is never lower than the fault severity implies. When no
    qualified technician is available the work order is left unassigned
    and its notes carry a manual assignment warning.""",
)
async def plan_work_order(
    fault: DiagnosedFault,
    planner: RepairPlanner = Depends(get_repair_planner),
) -> WorkOrder:
    logger.info(f"Plan request for fault {fault.id} ({fault.fault_type}) on machine {fault.machine_id}")
    return await planner.plan_and_create_work_order(fault)


@router.get(
    "/{work_order_id}",
    response_model=WorkOrder,
    responses={404: {"description": "Work order not found"}},
)
async def get_work_order(
    work_order_id: str,
    planner: RepairPlanner = Depends(get_repair_planner),
) -> WorkOrder:
    work_order = await planner.store.get_work_order(work_order_id)
    if work_order is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Work order {work_order_id} not found"
        )
    return work_order
