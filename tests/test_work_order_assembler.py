from datetime import datetime, timedelta, timezone

import pytest

from models.work_order_models import WorkOrder
from services.work_order_assembler import WorkOrderAssembler, make_work_order_number

FIXED_NOW = datetime(2025, 3, 5, 10, 30, tzinfo=timezone.utc)


class TestWorkOrderNumber:

    def test_number_format(self):
        number = make_work_order_number("abcdef1234567890", datetime(2025, 3, 5))
        assert number == "WO-20250305-abcdef12"

    def test_number_uses_utc_date(self):
        # 01:00 on the 6th in UTC+5 is still the 5th in UTC
        local = datetime(2025, 3, 6, 1, 0, tzinfo=timezone(timedelta(hours=5)))
        assert make_work_order_number("abcdef1234567890", local) == "WO-20250305-abcdef12"

    def test_short_id(self):
        assert make_work_order_number("abc", FIXED_NOW) == "WO-20250305-abc"


class TestWorkOrderAssembler:

    def test_finalize_assigns_identity_and_timestamps(self, mock_store):
        assembler = WorkOrderAssembler(mock_store, clock=lambda: FIXED_NOW)

        finalized = assembler.finalize(WorkOrder(machine_id="TCP-001", status=""))

        assert finalized.id
        assert finalized.work_order_number == f"WO-20250305-{finalized.id[:8]}"
        assert finalized.created_at == FIXED_NOW
        assert finalized.updated_at == FIXED_NOW
        assert finalized.status == "pending"

    def test_finalize_keeps_existing_id_and_number(self, mock_store):
        assembler = WorkOrderAssembler(mock_store, clock=lambda: FIXED_NOW)
        work_order = WorkOrder(id="abcdef1234567890", work_order_number="WO-20240101-existing")

        finalized = assembler.finalize(work_order)

        assert finalized.id == "abcdef1234567890"
        assert finalized.work_order_number == "WO-20240101-existing"

    def test_finalize_generates_distinct_ids(self, mock_store):
        assembler = WorkOrderAssembler(mock_store, clock=lambda: FIXED_NOW)

        first = assembler.finalize(WorkOrder())
        second = assembler.finalize(WorkOrder())

        assert first.id != second.id

    @pytest.mark.asyncio
    async def test_assemble_and_persist_creates_once(self, mock_store):
        assembler = WorkOrderAssembler(mock_store, clock=lambda: FIXED_NOW)

        saved = await assembler.assemble_and_persist(WorkOrder(machine_id="TCP-001", priority="high"))

        mock_store.create_work_order.assert_awaited_once()
        stored = mock_store.create_work_order.await_args.args[0]
        assert stored.id and stored.work_order_number.startswith("WO-20250305-")
        assert stored.status == "pending"
        assert saved == stored
