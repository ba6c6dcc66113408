"""
Pydantic models for faults reported by the upstream diagnosis process.

A DiagnosedFault is the input to repair planning. It is owned by the caller
and is never modified by the planner, so the model is frozen.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class DiagnosedFault(BaseModel):
    """A diagnosed equipment malfunction, the trigger for repair planning"""
    id: str = Field(default="", description="Fault identifier")
    machine_id: str = Field(default="", alias="machineId", description="Identifier of the faulty machine")
    machine_name: str = Field(default="", alias="machineName", description="Human readable machine name")
    fault_type: str = Field(default="", alias="faultType", description="Fault type code, e.g. 'curing_temperature_excessive'")
    severity: str = Field(default="", description="critical | high | medium | low")
    description: str = Field(default="", description="Free-text description of the fault")
    root_cause: str = Field(default="", alias="rootCause", description="Diagnosed root cause")
    recommended_actions: List[str] = Field(default_factory=list, alias="recommendedActions")
    detected_at: Optional[datetime] = Field(default=None, alias="detectedAt")
    diagnosed_at: Optional[datetime] = Field(default=None, alias="diagnosedAt")

    model_config = ConfigDict(
        populate_by_name=True,
        frozen=True,
        extra='ignore',
        json_schema_extra={
            "example": {
                "id": "3f6c1c2e-9b0a-4d4e-8a43-5d1c2f0e7a11",
                "machineId": "TCP-001",
                "machineName": "Tire Curing Press #1",
                "faultType": "curing_temperature_excessive",
                "severity": "high",
                "description": "Curing temperature exceeds acceptable limits, causing rubber degradation",
                "rootCause": "Heating element malfunction or temperature sensor calibration drift",
                "recommendedActions": [
                    "Inspect and test heating elements",
                    "Calibrate temperature sensors",
                    "Replace faulty components"
                ],
                "detectedAt": "2025-03-05T08:15:00Z",
                "diagnosedAt": "2025-03-05T09:15:00Z"
            }
        }
    )


class FaultTypeRequirements(BaseModel):
    """Skills and parts a fault type calls for"""
    fault_type: str = Field(..., alias="faultType")
    required_skills: List[str] = Field(default_factory=list, alias="requiredSkills")
    required_parts: List[str] = Field(default_factory=list, alias="requiredParts")

    model_config = ConfigDict(populate_by_name=True)
