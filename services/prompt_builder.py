"""
Prompts for the repair plan generator.

The system instructions carry the DraftWorkOrder JSON schema; the user
prompt carries the fault, the resolved requirements and the candidate
technicians and parts read from the store.
"""

import json
from typing import Iterable, List

from models.fault_models import DiagnosedFault
from models.inventory_models import Part, Technician
from models.work_order_models import DraftWorkOrder

NO_TECHNICIANS_BANNER = (
    "⚠️ WARNING: No technicians currently available with required skills. "
    "Work order must be assigned manually."
)
NO_PARTS_BANNER = (
    "⚠️ WARNING: Required parts not in inventory and must be ordered before repair can begin."
)

PLANNER_INSTRUCTIONS = """You are a Repair Planner Agent for tire manufacturing equipment.
Generate comprehensive repair plans with detailed tasks, timelines, and resource allocation.

Key responsibilities:
- Analyze the diagnosed fault and required skills/parts
- Select the most qualified available technician based on their skills and workload
- Create ordered, actionable repair tasks with accurate time estimates
- Include relevant parts from inventory; use empty array if none needed
- Set priority based on fault severity (critical/high/medium/low)
- Set type based on repair nature: "corrective" (reactive), "preventive" (scheduled), "emergency" (critical)
- Add safety notes for all tasks and general notes for coordination needs
- If no technician is listed, set assignedTo to null"""


def build_system_instructions() -> str:
    """Planner instructions with the draft work order schema appended"""
    schema = json.dumps(DraftWorkOrder.model_json_schema(by_alias=True), indent=2)
    return f"""{PLANNER_INSTRUCTIONS}

Required JSON Schema:
{schema}

Respond with ONLY valid JSON matching this exact schema."""


def _format_technicians(technicians: List[Technician]) -> str:
    if not technicians:
        return NO_TECHNICIANS_BANNER
    return "\n".join(
        f"- {t.name} (ID: {t.id}): Skills: [{', '.join(t.skills)}], "
        f"Workload: {t.current_workload_hours:g}h, Available: {t.available}"
        for t in technicians
    )


def _format_parts(parts: List[Part]) -> str:
    if not parts:
        return NO_PARTS_BANNER
    return "\n".join(
        f"- {p.part_number} - {p.name}: Stock: {p.quantity_in_stock}, "
        f"Location: {p.location}, Price: ${p.unit_price:.2f}"
        for p in parts
    )


def build_planning_prompt(
    fault: DiagnosedFault,
    required_skills: Iterable[str],
    required_parts: Iterable[str],
    technicians: List[Technician],
    parts: List[Part],
) -> str:
    detected = f"{fault.detected_at:%Y-%m-%d %H:%M:%S} UTC" if fault.detected_at else "unknown"
    actions = "; ".join(fault.recommended_actions) or "none"
    skills = ", ".join(sorted(required_skills)) or "none"
    part_numbers = ", ".join(sorted(required_parts)) or "none"

    return f"""DIAGNOSED FAULT:
- Machine: {fault.machine_name} ({fault.machine_id})
- Fault Type: {fault.fault_type}
- Severity: {fault.severity}
- Description: {fault.description}
- Root Cause: {fault.root_cause}
- Recommended Actions: {actions}
- Detected: {detected}

REQUIRED SKILLS:
{skills}

AVAILABLE TECHNICIANS:
{_format_technicians(technicians)}

REQUIRED PARTS:
{part_numbers}

PARTS IN INVENTORY:
{_format_parts(parts)}

Generate a comprehensive repair plan as JSON following the schema provided in your instructions."""
