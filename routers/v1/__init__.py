from fastapi import APIRouter

from .fault_type_routes import router as fault_type_router
from .work_order_routes import router as work_order_router

v1_router = APIRouter(prefix="/v1", tags=["v1"])

v1_router.include_router(work_order_router)
v1_router.include_router(fault_type_router)
