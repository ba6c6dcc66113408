from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from pymongo.errors import ServerSelectionTimeoutError

from app_factory import create_app
from models.work_order_models import RepairTask, WorkOrder
from services.error_handlers import DraftGenerationError

FAULT_PAYLOAD = {
    "id": "fault-001",
    "machineId": "TCP-001",
    "machineName": "Tire Curing Press #1",
    "faultType": "curing_temperature_excessive",
    "severity": "high",
    "description": "Curing temperature exceeds acceptable limits",
    "rootCause": "Heating element malfunction",
    "recommendedActions": ["Inspect and test heating elements"],
    "detectedAt": "2025-03-05T08:15:00Z",
}

STORED = WorkOrder(
    id="abcdef1234567890",
    work_order_number="WO-20250305-abcdef12",
    machine_id="TCP-001",
    title="Replace heating element",
    priority="high",
    assigned_to="tech-001",
    created_at=datetime(2025, 3, 5, 10, 30, tzinfo=timezone.utc),
    updated_at=datetime(2025, 3, 5, 10, 30, tzinfo=timezone.utc),
    estimated_duration=90,
    tasks=[RepairTask(sequence=1, title="Replace heating element", estimated_duration_minutes=90)],
)


@pytest.fixture
def planner():
    planner = MagicMock()
    planner.plan_and_create_work_order = AsyncMock(return_value=STORED)
    planner.store.get_work_order = AsyncMock(return_value=None)
    return planner


@pytest.fixture
def app(planner):
    app = create_app(use_lifespan=False)
    app.state.repair_planner = planner
    return app


@pytest.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


class TestWorkOrderRoutes:

    @pytest.mark.asyncio
    async def test_plan_creates_work_order(self, client, planner):
        response = await client.post("/v1/work-orders/plan", json=FAULT_PAYLOAD)

        assert response.status_code == 201
        body = response.json()
        assert body["workOrderNumber"] == "WO-20250305-abcdef12"
        assert body["machineId"] == "TCP-001"
        assert body["assignedTo"] == "tech-001"
        assert body["tasks"][0]["estimatedDurationMinutes"] == 90

        fault = planner.plan_and_create_work_order.await_args.args[0]
        assert fault.fault_type == "curing_temperature_excessive"
        assert fault.machine_id == "TCP-001"

    @pytest.mark.asyncio
    async def test_plan_rejects_invalid_fault(self, client, planner):
        response = await client.post("/v1/work-orders/plan", json={"machineId": ["not", "a", "string"]})

        assert response.status_code == 422
        planner.plan_and_create_work_order.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_plan_generation_failure_is_502(self, client, planner):
        planner.plan_and_create_work_order.side_effect = DraftGenerationError("empty response")

        response = await client.post("/v1/work-orders/plan", json=FAULT_PAYLOAD)

        assert response.status_code == 502
        body = response.json()
        assert body["status"] == "error"
        assert body["details"]["error_type"] == "draft_generation_error"
        assert body["details"]["message"] == "empty response"

    @pytest.mark.asyncio
    async def test_plan_database_unavailable_is_503(self, client, planner):
        planner.plan_and_create_work_order.side_effect = ServerSelectionTimeoutError("no servers")

        response = await client.post("/v1/work-orders/plan", json=FAULT_PAYLOAD)

        assert response.status_code == 503
        assert response.json()["error"] == "Database temporarily unavailable"

    @pytest.mark.asyncio
    async def test_get_work_order(self, client, planner):
        planner.store.get_work_order.return_value = STORED

        response = await client.get("/v1/work-orders/abcdef1234567890")

        assert response.status_code == 200
        assert response.json()["id"] == "abcdef1234567890"
        planner.store.get_work_order.assert_awaited_once_with("abcdef1234567890")

    @pytest.mark.asyncio
    async def test_get_missing_work_order(self, client):
        response = await client.get("/v1/work-orders/missing")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_planner_not_initialized(self, app, client):
        app.state.repair_planner = None

        response = await client.post("/v1/work-orders/plan", json=FAULT_PAYLOAD)

        assert response.status_code == 503


class TestMetaRoutes:

    @pytest.mark.asyncio
    async def test_fault_types(self, client):
        response = await client.get("/v1/fault-types")

        assert response.status_code == 200
        body = response.json()
        assert len(body) == 10
        by_type = {entry["faultType"]: entry for entry in body}
        assert by_type["load_cell_drift"]["requiredParts"] == ["TUM-ENC-5000", "TUM-LC-2KN"]
        assert "load_cell_calibration" in by_type["load_cell_drift"]["requiredSkills"]
        assert by_type["high_radial_force_variation"]["requiredParts"] == []

    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert "Server-Timing" in response.headers
