"""
Work order assembly: identity, numbering, timestamps, then one create in the store.
"""

import uuid
from datetime import datetime, timezone
from typing import Callable, Optional

from models.shared_types import WorkOrderStatus
from models.work_order_models import WorkOrder
from services.logger_singleton import LoggerSingleton

logger = LoggerSingleton.get_logger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def make_work_order_number(work_order_id: str, created_at: datetime) -> str:
    """WO-<YYYYMMDD in UTC>-<first 8 chars of the id>"""
    if created_at.tzinfo is not None:
        created_at = created_at.astimezone(timezone.utc)
    return f"WO-{created_at:%Y%m%d}-{work_order_id[:8]}"


class WorkOrderAssembler:
    """Finalizes reconciled work orders and hands them to the store"""

    def __init__(self, store, clock: Callable[[], datetime] = utc_now):
        self.store = store
        self.clock = clock

    def finalize(self, work_order: WorkOrder, now: Optional[datetime] = None) -> WorkOrder:
        now = now or self.clock()
        work_order_id = work_order.id or str(uuid.uuid4())
        update = {
            "id": work_order_id,
            # an existing number is kept as-is
            "work_order_number": work_order.work_order_number or make_work_order_number(work_order_id, now),
            "created_at": now,
            "updated_at": now,
            "status": work_order.status or WorkOrderStatus.PENDING.value,
        }
        return work_order.model_copy(update=update)

    async def assemble_and_persist(self, work_order: WorkOrder) -> WorkOrder:
        finalized = self.finalize(work_order)
        logger.info(
            f"Creating work order {finalized.work_order_number} for machine {finalized.machine_id}"
        )
        return await self.store.create_work_order(finalized)
