"""
Plan reconciliation.

Turns an untrusted DraftWorkOrder into a WorkOrder that satisfies the
domain rules, in this order:

1. Priority floor: the final priority is never below the priority implied
   by the fault severity. The draft may raise urgency, never lower it.
2. Assignment fallback: any marker the draft wrote into its notes is
   dropped, then an unassigned draft gets exactly one no-technician warning
   appended. A non-empty assignee is kept exactly as chosen.
3. Structural defaults for status, type, notes, tasks, parts, title and
   description. type and status are lower-cased; status is the shard key.
4. machineId is always taken from the fault.

Everything here is pure: the fault and the draft are not modified.
"""

from types import MappingProxyType
from typing import Optional

from models.fault_models import DiagnosedFault
from models.shared_types import Priority, Severity, WorkOrderStatus, WorkOrderType
from models.work_order_models import DraftWorkOrder, WorkOrder
from services.logger_singleton import LoggerSingleton

logger = LoggerSingleton.get_logger(__name__)

NO_TECHNICIAN_WARNING = "⚠️ No qualified technician available. Manual assignment required."

PRIORITY_RANK = MappingProxyType({
    Priority.LOW.value: 1,
    Priority.MEDIUM.value: 2,
    Priority.HIGH.value: 3,
    Priority.CRITICAL.value: 4,
})

SEVERITY_TO_PRIORITY = MappingProxyType({
    Severity.CRITICAL.value: Priority.CRITICAL.value,
    Severity.HIGH.value: Priority.HIGH.value,
    Severity.MEDIUM.value: Priority.MEDIUM.value,
    Severity.LOW.value: Priority.LOW.value,
})


def _blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def severity_to_priority(severity: Optional[str]) -> str:
    """critical/high/medium/low map to themselves, anything else to medium"""
    normalized = (severity or "").strip().lower()
    return SEVERITY_TO_PRIORITY.get(normalized, Priority.MEDIUM.value)


def priority_rank(priority: Optional[str]) -> int:
    """low=1 .. critical=4; absent or unrecognized priorities rank 0"""
    return PRIORITY_RANK.get((priority or "").strip().lower(), 0)


def enforce_priority_floor(draft_priority: Optional[str], floor: str) -> str:
    """The higher of the draft priority and the floor, lower-cased"""
    floor = severity_to_priority(floor)
    if priority_rank(draft_priority) >= priority_rank(floor):
        return draft_priority.strip().lower()
    return floor


def strip_unassigned_warning(notes: Optional[str]) -> str:
    """Notes with every no-technician marker removed"""
    if not notes or NO_TECHNICIAN_WARNING not in notes:
        return notes or ""
    pieces = [piece.strip() for piece in notes.split(NO_TECHNICIAN_WARNING)]
    return "\n\n".join(piece for piece in pieces if piece)


def append_unassigned_warning(notes: Optional[str]) -> str:
    """Notes ending in exactly one no-technician marker"""
    notes = strip_unassigned_warning(notes)
    if _blank(notes):
        return NO_TECHNICIAN_WARNING
    return f"{notes}\n\n{NO_TECHNICIAN_WARNING}"


def reconcile_draft(fault: DiagnosedFault, draft: DraftWorkOrder) -> WorkOrder:
    """Apply the domain rules to a parsed draft and return the work order to assemble"""
    # 1. priority floor
    floor = severity_to_priority(fault.severity)
    priority = enforce_priority_floor(draft.priority, floor)
    if priority_rank(draft.priority) < priority_rank(floor):
        logger.info(
            f"Raised priority from {draft.priority!r} to {priority} for severity {fault.severity!r}"
        )

    # 2. assignment fallback
    # marker in notes <=> unassigned
    notes = strip_unassigned_warning(draft.notes)
    assigned_to = "" if _blank(draft.assigned_to) else draft.assigned_to
    if not assigned_to:
        notes = append_unassigned_warning(notes)
        logger.warning(f"Work order for fault {fault.id} has no assigned technician")

    # 3. structural defaults
    tasks = sorted(draft.tasks or [], key=lambda task: task.sequence)
    parts_used = list(draft.parts_used or [])
    estimated_duration = draft.estimated_duration
    if not estimated_duration:
        estimated_duration = sum(task.estimated_duration_minutes for task in tasks)

    work_order = WorkOrder(
        id=draft.id or "",
        work_order_number=draft.work_order_number or "",
        # 4. the fault owns the machine linkage
        machine_id=fault.machine_id,
        title=draft.title if not _blank(draft.title) else f"Repair for {fault.fault_type}",
        description=draft.description if not _blank(draft.description) else fault.description,
        type=draft.type.strip().lower() if not _blank(draft.type) else WorkOrderType.CORRECTIVE.value,
        priority=priority,
        status=draft.status.strip().lower() if not _blank(draft.status) else WorkOrderStatus.PENDING.value,
        assigned_to=assigned_to,
        estimated_duration=estimated_duration,
        tasks=tasks,
        parts_used=parts_used,
        notes=notes,
    )

    logger.info(
        f"Reconciled draft: priority={work_order.priority}, type={work_order.type}, "
        f"status={work_order.status}, tasks={len(work_order.tasks)}, parts={len(work_order.parts_used)}"
    )
    return work_order
