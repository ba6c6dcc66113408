"""
Repair planning workflow: diagnosed fault in, persisted work order out.

    required skills/parts -> technicians + parts (read concurrently)
    -> prompt -> draft from the generator -> reconcile -> assemble -> store

Each call is independent. The only write is the final create, so a run
that fails or is cancelled at any earlier step leaves nothing behind.
Calling twice with the same fault creates two work orders.
"""

import asyncio
from typing import List, Optional

from models.fault_models import DiagnosedFault
from models.inventory_models import Part, Technician
from models.work_order_models import WorkOrder
from services.draft_plan_generator import DraftPlanGenerator
from services.fault_mapping_service import required_parts, required_skills
from services.logger_singleton import LoggerSingleton
from services.plan_reconciler import reconcile_draft
from services.prompt_builder import build_planning_prompt
from services.repair_store import RepairStore
from services.work_order_assembler import WorkOrderAssembler

logger = LoggerSingleton.get_logger(__name__)


class RepairPlanner:
    """Plans and creates work orders for diagnosed faults"""

    def __init__(
        self,
        store: RepairStore,
        generator: DraftPlanGenerator,
        assembler: Optional[WorkOrderAssembler] = None,
    ):
        self.store = store
        self.generator = generator
        self.assembler = assembler or WorkOrderAssembler(store)

    async def plan_and_create_work_order(self, fault: DiagnosedFault) -> WorkOrder:
        logger.info(f"Planning repair for fault {fault.id} on machine {fault.machine_id}")

        try:
            skills = required_skills(fault.fault_type)
            part_numbers = required_parts(fault.fault_type)
            logger.info(
                f"Fault {fault.fault_type} requires {len(skills)} skills and {len(part_numbers)} parts"
            )

            technicians, parts = await asyncio.gather(
                self.store.find_available_technicians(skills),
                self.store.find_parts(part_numbers),
            )
            self._log_candidate_gaps(skills, part_numbers, technicians, parts)

            prompt = build_planning_prompt(fault, skills, part_numbers, technicians, parts)
            draft = await self.generator.generate(prompt)

            work_order = reconcile_draft(fault, draft)
            saved = await self.assembler.assemble_and_persist(work_order)
        except asyncio.CancelledError:
            logger.warning(f"Repair planning for fault {fault.id} was cancelled; no work order stored")
            raise
        except Exception as e:
            logger.error(f"Failed to plan and create work order for fault {fault.id}: {e}")
            raise

        logger.info(
            f"Work order {saved.work_order_number} created for machine {saved.machine_id} "
            f"(priority={saved.priority}, assigned_to={saved.assigned_to or 'unassigned'})"
        )
        return saved

    @staticmethod
    def _log_candidate_gaps(skills, part_numbers, technicians: List[Technician], parts: List[Part]) -> None:
        if not technicians:
            logger.warning(
                f"No technicians available with required skills: {', '.join(sorted(skills))}. "
                "Work order will be created unassigned and require manual assignment."
            )
        else:
            logger.info(f"Found {len(technicians)} qualified technician(s) available")

        if part_numbers and not parts:
            logger.warning(
                f"None of the required parts are in inventory: {', '.join(sorted(part_numbers))}. "
                "Work order will proceed but parts must be ordered."
            )
        elif len(parts) < len(part_numbers):
            logger.warning(
                f"{len(part_numbers) - len(parts)} of {len(part_numbers)} required parts are not in inventory"
            )
