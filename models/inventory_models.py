"""
Models for the documents read from the Technicians and PartsInventory collections.

Both are read-only to the planner.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class Technician(BaseModel):
    """Maintenance technician with skills and availability"""
    id: str = ""
    name: str = ""
    department: str = ""
    email: str = ""
    phone: str = ""
    skills: List[str] = Field(default_factory=list)
    certifications: List[str] = Field(default_factory=list)
    available: bool = False
    current_workload_hours: float = Field(default=0, alias="currentWorkloadHours")
    shift_schedule: str = Field(default="", alias="shiftSchedule")

    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    def has_any_skill(self, required_skills) -> bool:
        """Case-insensitive check against a set of required skill tags"""
        wanted = {skill.lower() for skill in required_skills}
        return any(skill.lower() in wanted for skill in self.skills)


class Part(BaseModel):
    """Spare part held in the plant inventory"""
    id: str = ""
    part_number: str = Field(default="", alias="partNumber")
    name: str = ""
    description: str = ""
    category: str = ""
    manufacturer: str = ""
    quantity_in_stock: int = Field(default=0, alias="quantityInStock")
    quantity_reserved: int = Field(default=0, alias="quantityReserved")
    reorder_level: int = Field(default=0, alias="reorderLevel")
    unit_price: float = Field(default=0.0, alias="unitPrice")
    supplier: str = ""
    lead_time_days: int = Field(default=0, alias="leadTimeDays")
    location: str = ""

    model_config = ConfigDict(populate_by_name=True, extra='ignore')
