#!/usr/bin/env python3
"""
Plan a repair for a diagnosed fault from the command line.

Usage:
    python plan_fault.py --scenario curing_temperature
    python plan_fault.py --fault-file fault.json --timeout 120
    python plan_fault.py --list-fault-types

Requires MONGO_URI, OPENAI_API_KEY and (optionally) REPAIR_PLANNER_MODEL,
read from the environment or .env.
"""

import argparse
import asyncio
import json
import sys
import uuid
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from config import get_settings
from models.fault_models import DiagnosedFault
from models.work_order_models import WorkOrder
from services.draft_plan_generator import DraftPlanGenerator
from services.error_handlers import RepairPlannerError
from services.fault_mapping_service import known_fault_types, required_parts, required_skills
from services.logger_singleton import LoggerSingleton
from services.mongo_client import close_mongo_client, get_mongo_db
from services.repair_planner import RepairPlanner
from services.repair_store import RepairStore

logger = LoggerSingleton.get_logger(__name__)

SCENARIOS = {
    "curing_temperature": {
        "machineId": "TCP-001",
        "machineName": "Tire Curing Press #1",
        "faultType": "curing_temperature_excessive",
        "severity": "high",
        "description": "Curing temperature exceeds acceptable limits, causing rubber degradation",
        "rootCause": "Heating element malfunction or temperature sensor calibration drift",
        "recommendedActions": [
            "Inspect and test heating elements",
            "Calibrate temperature sensors",
            "Replace faulty components",
        ],
    },
    "building_drum_vibration": {
        "machineId": "TBM-002",
        "machineName": "Tire Building Machine #2",
        "faultType": "building_drum_vibration",
        "severity": "medium",
        "description": "Excessive vibration detected in building drum during operation",
        "rootCause": "Bearing wear or drum imbalance",
        "recommendedActions": [
            "Perform vibration analysis",
            "Inspect and replace bearings",
            "Balance building drum",
        ],
    },
    "load_cell_drift": {
        "machineId": "TUM-003",
        "machineName": "Tire Uniformity Machine #3",
        "faultType": "load_cell_drift",
        "severity": "low",
        "description": "Load cell readings drifting outside calibration range",
        "rootCause": "Sensor calibration drift or environmental factors",
        "recommendedActions": [
            "Recalibrate load cells",
            "Check environmental conditions",
            "Replace sensors if necessary",
        ],
    },
    "no_technician": {
        "machineId": "SPECIALTY-999",
        "machineName": "Specialized Equipment",
        "faultType": "unknown_specialized_fault",
        "severity": "high",
        "description": "Rare fault requiring specialized skills not available in current staff",
        "rootCause": "Requires specialist technician",
        "recommendedActions": [
            "Contact external specialist",
            "Arrange contractor visit",
        ],
    },
}


def build_scenario_fault(name: str, now: Optional[datetime] = None) -> DiagnosedFault:
    """A fresh fault for one of the built-in scenarios, detected an hour before now"""
    now = now or datetime.now(timezone.utc)
    return DiagnosedFault.model_validate({
        **SCENARIOS[name],
        "id": str(uuid.uuid4()),
        "detectedAt": now - timedelta(hours=1),
        "diagnosedAt": now,
    })


def load_fault_file(path: Path) -> DiagnosedFault:
    with open(path, "r", encoding="utf-8") as f:
        return DiagnosedFault.model_validate_json(f.read())


def format_fault_types() -> str:
    lines = []
    for fault_type in known_fault_types():
        lines.append(fault_type)
        lines.append(f"  skills: {', '.join(sorted(required_skills(fault_type)))}")
        lines.append(f"  parts:  {', '.join(sorted(required_parts(fault_type))) or '-'}")
    return "\n".join(lines)


def format_work_order(work_order: WorkOrder) -> str:
    lines = [
        "=== Work Order Created ===",
        f"Work Order: {work_order.work_order_number}",
        f"Machine: {work_order.machine_id}",
        f"Title: {work_order.title}",
        f"Priority: {work_order.priority}",
        f"Type: {work_order.type}",
        f"Assigned To: {work_order.assigned_to or 'Unassigned'}",
        f"Estimated Duration: {work_order.estimated_duration} minutes",
        f"Tasks: {len(work_order.tasks)}",
        f"Parts: {len(work_order.parts_used)}",
    ]

    if work_order.tasks:
        lines.append("")
        lines.append("Tasks:")
        for task in work_order.tasks:
            lines.append(f"  {task.sequence}. {task.title} ({task.estimated_duration_minutes} min)")

    if work_order.parts_used:
        lines.append("")
        lines.append("Parts:")
        for part in work_order.parts_used:
            lines.append(f"  - {part.part_number} (Qty: {part.quantity})")

    if work_order.notes:
        lines.append("")
        lines.append("Notes:")
        lines.append(f"  {work_order.notes}")

    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Plan a repair work order for a diagnosed fault"
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--scenario",
        choices=sorted(SCENARIOS),
        help="Plan one of the built-in demo faults"
    )
    source.add_argument(
        "--fault-file",
        type=Path,
        help="Path to a JSON file holding a DiagnosedFault"
    )
    source.add_argument(
        "--list-fault-types",
        action="store_true",
        help="List known fault types with their required skills and parts, then exit"
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Abandon planning after this many seconds; nothing is stored"
    )
    return parser


async def plan(planner: RepairPlanner, fault: DiagnosedFault, timeout: Optional[float] = None) -> WorkOrder:
    """Run one planning call, cancelled if it outlives the timeout"""
    async with asyncio.timeout(timeout):
        return await planner.plan_and_create_work_order(fault)


async def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.list_fault_types:
        print(format_fault_types())
        return 0

    try:
        fault = build_scenario_fault(args.scenario) if args.scenario else load_fault_file(args.fault_file)
    except (OSError, ValidationError) as e:
        print(f"❌ Could not load fault: {e}", file=sys.stderr)
        return 2

    settings = get_settings()
    try:
        settings.validate()
    except RepairPlannerError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 2

    db = get_mongo_db(settings)
    generator = DraftPlanGenerator.from_settings(settings)
    planner = RepairPlanner(RepairStore.from_settings(db, settings), generator)

    print(f"Processing fault: {fault.fault_type} on {fault.machine_name}")
    try:
        work_order = await plan(planner, fault, args.timeout)
    except TimeoutError:
        print(f"❌ Planning timed out after {args.timeout}s; no work order was stored", file=sys.stderr)
        return 1
    except RepairPlannerError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1
    finally:
        await generator.client.close()
        await close_mongo_client()

    print()
    print(format_work_order(work_order))
    return 0


def cli() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    cli()
