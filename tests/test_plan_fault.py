import asyncio
import json
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from models.work_order_models import RepairTask, WorkOrder, WorkOrderPartUsage
from plan_fault import (
    SCENARIOS,
    build_parser,
    build_scenario_fault,
    format_fault_types,
    format_work_order,
    load_fault_file,
    main,
    plan,
)
from services.plan_reconciler import NO_TECHNICIAN_WARNING


class TestScenarios:

    @pytest.mark.parametrize("name", sorted(SCENARIOS))
    def test_scenario_faults(self, name):
        now = datetime(2025, 3, 5, 9, 0, tzinfo=timezone.utc)

        fault = build_scenario_fault(name, now=now)

        assert fault.id
        assert fault.diagnosed_at == now
        assert fault.detected_at < now
        assert fault.machine_id == SCENARIOS[name]["machineId"]

    def test_no_technician_scenario_is_unknown_fault(self):
        assert build_scenario_fault("no_technician").fault_type == "unknown_specialized_fault"

    def test_load_fault_file(self, tmp_path):
        path = tmp_path / "fault.json"
        path.write_text(json.dumps({**SCENARIOS["load_cell_drift"], "id": "fault-42"}))

        fault = load_fault_file(path)

        assert fault.id == "fault-42"
        assert fault.fault_type == "load_cell_drift"


class TestOutput:

    def test_format_work_order(self):
        work_order = WorkOrder(
            work_order_number="WO-20250305-abcdef12",
            machine_id="TUM-003",
            title="Recalibrate load cells",
            priority="low",
            estimated_duration=45,
            tasks=[RepairTask(sequence=1, title="Recalibrate", estimated_duration_minutes=45)],
            parts_used=[WorkOrderPartUsage(part_number="TUM-LC-2KN", quantity=2)],
            notes=NO_TECHNICIAN_WARNING,
        )

        text = format_work_order(work_order)

        assert "Work Order: WO-20250305-abcdef12" in text
        assert "Assigned To: Unassigned" in text
        assert "  1. Recalibrate (45 min)" in text
        assert "  - TUM-LC-2KN (Qty: 2)" in text
        assert NO_TECHNICIAN_WARNING in text

    def test_format_fault_types(self):
        text = format_fault_types()

        assert "building_drum_vibration\n  skills: " in text
        assert "  parts:  -" in text


class TestCommandLine:

    def test_source_is_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_scenario_and_file_are_exclusive(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--scenario", "load_cell_drift", "--fault-file", "fault.json"])

    @pytest.mark.asyncio
    async def test_list_fault_types(self, capsys):
        assert await main(["--list-fault-types"]) == 0
        assert "curing_temperature_excessive" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_missing_configuration(self, monkeypatch, capsys):
        monkeypatch.delenv("MONGO_URI", raising=False)
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)

        assert await main(["--scenario", "curing_temperature"]) == 2
        assert "MONGO_URI" in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_plan_times_out(self, fault):
        async def slow_plan(_fault):
            await asyncio.sleep(3600)

        planner = MagicMock()
        planner.plan_and_create_work_order = AsyncMock(side_effect=slow_plan)

        with pytest.raises(TimeoutError):
            await plan(planner, fault, timeout=0.05)

    @pytest.mark.asyncio
    async def test_plan_without_timeout(self, fault):
        planner = MagicMock()
        planner.plan_and_create_work_order = AsyncMock(return_value=WorkOrder(id="wo-1"))

        work_order = await plan(planner, fault)

        assert work_order.id == "wo-1"
