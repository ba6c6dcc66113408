import os

# Keep a developer's .env out of the test run
os.environ.setdefault("USE_DOTENV", "false")

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from config import reset_settings
from models.fault_models import DiagnosedFault
from models.inventory_models import Part, Technician
from models.work_order_models import DraftWorkOrder, RepairTask, WorkOrderPartUsage


@pytest.fixture(autouse=True)
def fresh_settings():
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def make_fault():
    """Factory for diagnosed faults; keyword overrides use field names"""
    def _make(**overrides) -> DiagnosedFault:
        data = {
            "id": "fault-001",
            "machine_id": "TCP-001",
            "machine_name": "Tire Curing Press #1",
            "fault_type": "curing_temperature_excessive",
            "severity": "high",
            "description": "Curing temperature exceeds acceptable limits, causing rubber degradation",
            "root_cause": "Heating element malfunction or temperature sensor calibration drift",
            "recommended_actions": ["Inspect and test heating elements", "Calibrate temperature sensors"],
            "detected_at": datetime(2025, 3, 5, 8, 15, tzinfo=timezone.utc),
            "diagnosed_at": datetime(2025, 3, 5, 9, 15, tzinfo=timezone.utc),
        }
        data.update(overrides)
        return DiagnosedFault(**data)
    return _make


@pytest.fixture
def fault(make_fault) -> DiagnosedFault:
    return make_fault()


@pytest.fixture
def technicians():
    return [
        Technician(
            id="tech-001",
            name="John Smith",
            department="Maintenance",
            skills=["tire_curing_press", "temperature_control", "instrumentation"],
            available=True,
            current_workload_hours=4,
        ),
        Technician(
            id="tech-002",
            name="Maria Garcia",
            department="Maintenance",
            skills=["electrical_systems", "plc_troubleshooting"],
            available=True,
            current_workload_hours=12.5,
        ),
    ]


@pytest.fixture
def parts():
    return [
        Part(
            id="part-001",
            part_number="TCP-HTR-4KW",
            name="Curing Press Heating Element 4kW",
            quantity_in_stock=6,
            location="Warehouse A, Shelf 3",
            unit_price=845.5,
        ),
        Part(
            id="part-002",
            part_number="GEN-TS-K400",
            name="Type K Thermocouple 400C",
            quantity_in_stock=25,
            location="Warehouse B, Bin 12",
            unit_price=42.0,
        ),
    ]


@pytest.fixture
def draft() -> DraftWorkOrder:
    return DraftWorkOrder(
        title="Replace curing press heating element",
        description="Heating element on TCP-001 is overheating the mold",
        type="corrective",
        priority="high",
        assigned_to="tech-001",
        estimated_duration=150,
        tasks=[
            RepairTask(sequence=2, title="Replace heating element", estimated_duration_minutes=90),
            RepairTask(sequence=1, title="Lock out and cool down press", estimated_duration_minutes=60),
        ],
        parts_used=[WorkOrderPartUsage(part_id="part-001", part_number="TCP-HTR-4KW", quantity=1)],
        notes="Schedule during shift change",
    )


@pytest.fixture
def mock_store():
    """RepairStore stand-in; create_work_order echoes what it is given"""
    store = MagicMock()
    store.find_available_technicians = AsyncMock(return_value=[])
    store.find_parts = AsyncMock(return_value=[])
    store.create_work_order = AsyncMock(side_effect=lambda work_order: work_order)
    store.get_work_order = AsyncMock(return_value=None)
    return store


@pytest.fixture
def mock_generator(draft):
    generator = MagicMock()
    generator.generate = AsyncMock(return_value=draft)
    return generator
