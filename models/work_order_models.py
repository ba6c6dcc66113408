"""
Work order models.

WorkOrder is the persisted entity stored in the WorkOrders collection
(shard key: status). DraftWorkOrder has the same shape but every field is
optional: it is what the text-generation service hands back and is never
persisted as-is.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from models.shared_types import Priority, WorkOrderStatus, WorkOrderType


class RepairTask(BaseModel):
    """One ordered step of a repair plan"""
    sequence: int = Field(default=0, description="1-based execution order")
    title: str = ""
    description: str = ""
    estimated_duration_minutes: int = Field(default=0, alias="estimatedDurationMinutes")
    required_skills: List[str] = Field(default_factory=list, alias="requiredSkills")
    safety_notes: str = Field(default="", alias="safetyNotes")

    model_config = ConfigDict(populate_by_name=True, extra='ignore')


class WorkOrderPartUsage(BaseModel):
    """A part consumed by a work order"""
    part_id: str = Field(default="", alias="partId")
    part_number: str = Field(..., alias="partNumber")
    quantity: int = Field(default=1, ge=0)

    model_config = ConfigDict(populate_by_name=True, extra='ignore')


class WorkOrder(BaseModel):
    """Finalized repair plan, the entity handed to the persistence layer"""
    id: str = ""
    work_order_number: str = Field(default="", alias="workOrderNumber")
    machine_id: str = Field(default="", alias="machineId")
    title: str = ""
    description: str = ""
    type: str = Field(default=WorkOrderType.CORRECTIVE.value, description="corrective | preventive | emergency")
    priority: str = Field(default=Priority.MEDIUM.value, description="critical | high | medium | low")
    status: str = Field(default=WorkOrderStatus.PENDING.value, description="Shard key of the WorkOrders collection")
    assigned_to: str = Field(default="", alias="assignedTo", description="Technician id, empty when unassigned")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")
    estimated_duration: int = Field(default=0, alias="estimatedDuration", description="Total estimate in minutes")
    tasks: List[RepairTask] = Field(default_factory=list)
    parts_used: List[WorkOrderPartUsage] = Field(default_factory=list, alias="partsUsed")
    notes: str = ""

    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    def to_document(self) -> Dict[str, Any]:
        """Serialize for MongoDB, using the work order id as _id"""
        document = self.model_dump(by_alias=True)
        document["_id"] = self.id
        return document

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "WorkOrder":
        data = dict(document)
        stored_id = data.pop("_id", None)
        if not data.get("id") and stored_id is not None:
            data["id"] = str(stored_id)
        return cls.model_validate(data)


class DraftWorkOrder(BaseModel):
    """Unvalidated candidate work order produced by the text-generation service.

    Any field may be missing or null. Priority is kept as a free string so an
    unrecognized value can be ranked below every real level instead of
    failing validation.
    """
    id: Optional[str] = None
    work_order_number: Optional[str] = Field(default=None, alias="workOrderNumber")
    machine_id: Optional[str] = Field(default=None, alias="machineId")
    title: Optional[str] = None
    description: Optional[str] = None
    type: Optional[str] = Field(default=None, description="corrective | preventive | emergency")
    priority: Optional[str] = Field(default=None, description="critical | high | medium | low")
    status: Optional[str] = None
    assigned_to: Optional[str] = Field(default=None, alias="assignedTo", description="Id of the selected technician, or null")
    estimated_duration: Optional[int] = Field(default=None, alias="estimatedDuration", description="Total estimate in minutes")
    tasks: Optional[List[RepairTask]] = None
    parts_used: Optional[List[WorkOrderPartUsage]] = Field(default=None, alias="partsUsed")
    notes: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True, extra='ignore')
