# Shared enums for faults, inventory and work orders
from enum import Enum


class Severity(str, Enum):
    """Severity assigned to a diagnosed fault"""
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Priority(str, Enum):
    """Work order priority, ordered low < medium < high < critical"""
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class WorkOrderType(str, Enum):
    CORRECTIVE = "corrective"  # reactive repair
    PREVENTIVE = "preventive"  # scheduled
    EMERGENCY = "emergency"  # critical, stop-the-line


class WorkOrderStatus(str, Enum):
    """Lifecycle states. Work orders are always created as pending."""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
