"""
Intake view models.
Canonical order/technician records and the derived structures the dashboard renders.
"""
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field
from enum import Enum


class OrderStatus(str, Enum):
    """Full repair lifecycle of a service order"""
    INTAKE = "Intake"
    DIAGNOSIS = "Diagnosis"
    QUOTE = "Quote"
    APPROVED = "Approved"
    REPAIRING = "Repairing"
    QA = "QA"
    READY = "Ready"
    DELIVERED = "Delivered"
    NOT_REPAIRED = "Not Repaired"


class IntakeStatus(str, Enum):
    """The three earliest lifecycle statuses, the only ones the intake desk sees"""
    INTAKE = "Intake"
    DIAGNOSIS = "Diagnosis"
    QUOTE = "Quote"


class OrderPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class IntakeChannel(str, Enum):
    """How the device reached the shop"""
    COUNTER = "Counter"
    EMAIL = "Email"
    WHATSAPP = "WhatsApp"
    REFERRED = "Referred"


PRIORITY_WEIGHT = {
    OrderPriority.HIGH: 3,
    OrderPriority.MEDIUM: 2,
    OrderPriority.LOW: 1,
}

SLA_RISK_HOURS = 24.0


class IntakeOrder(BaseModel):
    """
    Canonical intake order, immutable for the lifetime of one feed snapshot.
    hours_in_queue is derived from intake_timestamp at normalization time and
    never persisted.
    """
    model_config = ConfigDict(frozen=True)

    order_id: str
    customer_name: str
    device_label: str
    status: IntakeStatus
    priority: OrderPriority
    intake_timestamp: datetime
    hours_in_queue: float = Field(ge=0)
    suggested_technician: Optional[str] = None
    channel: IntakeChannel = IntakeChannel.COUNTER
    tags: List[str] = Field(default_factory=list)  # Deduplicated, first-seen order
    photo_count: int = Field(default=0, ge=0)
    accessories: List[str] = Field(default_factory=list)


class TechnicianLoad(BaseModel):
    """Technician roster entry with counts derived from the current order set"""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    specialties: List[str] = Field(default_factory=list)
    assigned_count: int = Field(default=0, ge=0)
    pending_diagnosis_count: int = Field(default=0, ge=0)


class IntakeSummary(BaseModel):
    """Headline counters for the overview cards"""
    total_today: int = 0
    pending_diagnosis: int = 0
    in_quote: int = 0
    high_priority: int = 0
    sla_risk: int = 0


class CountEntry(BaseModel):
    """One row of a breakdown or frequency ranking"""
    label: str
    count: int


class TechnicianTotals(BaseModel):
    assigned: int = 0
    pending_diagnosis: int = 0
    active: int = 0


class IntakeDashboardData(BaseModel):
    """Everything the intake pages render for one snapshot"""
    summary: IntakeSummary
    orders: List[IntakeOrder]
    technicians: List[TechnicianLoad]
    available_tags: List[str]
