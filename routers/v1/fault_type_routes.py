from typing import List

from fastapi import APIRouter

from models.fault_models import FaultTypeRequirements
from services.fault_mapping_service import known_fault_types, required_parts, required_skills

router = APIRouter(prefix="/fault-types", tags=["Fault Types"])


@router.get(
    "",
    response_model=List[FaultTypeRequirements],
    description="List the fault types with known repair requirements. Unknown fault types fall back to general_maintenance and no parts.",
)
async def list_fault_types() -> List[FaultTypeRequirements]:
    return [
        FaultTypeRequirements(
            fault_type=fault_type,
            required_skills=sorted(required_skills(fault_type)),
            required_parts=sorted(required_parts(fault_type)),
        )
        for fault_type in known_fault_types()
    ]
