"""
Intake aggregations.
Pure functions deriving the dashboard's summary cards, breakdowns, tag ranking
and technician load from one snapshot of canonical orders.

Nothing here holds state between calls: every figure is recomputed from the
(orders, technicians) pair it is given, so re-running on the same input
always returns the same result.
"""
from collections import Counter
from datetime import datetime
from typing import Dict, List

from intake_board.ingestion.normalizer import align_timezone
from intake_board.models.intake import (
    CountEntry, IntakeDashboardData, IntakeOrder, IntakeStatus, IntakeSummary,
    OrderPriority, SLA_RISK_HOURS, TechnicianLoad, TechnicianTotals
)

TOP_TAGS_LIMIT = 6

INTAKE_STATUSES = set(IntakeStatus)


def _require(value, name: str):
    # None here is a caller bug, not bad feed data
    if value is None:
        raise TypeError(f"{name} must be a list, got None")


def build_summary(orders: List[IntakeOrder], now: datetime) -> IntakeSummary:
    """Single pass over the orders computing all five headline counters"""
    _require(orders, "orders")
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    summary = IntakeSummary()

    for order in orders:
        if align_timezone(order.intake_timestamp, now) >= midnight:
            summary.total_today += 1

        if order.status == IntakeStatus.DIAGNOSIS:
            summary.pending_diagnosis += 1

        if order.status == IntakeStatus.QUOTE:
            summary.in_quote += 1

        if order.priority == OrderPriority.HIGH:
            summary.high_priority += 1

        if order.hours_in_queue >= SLA_RISK_HOURS and order.status in INTAKE_STATUSES:
            summary.sla_risk += 1

    return summary


def compute_technician_metrics(
    technicians: List[TechnicianLoad], orders: List[IntakeOrder]
) -> List[TechnicianLoad]:
    """
    Attach assigned / pending-diagnosis counts to each technician.

    Orders reference technicians by display name (falling back to id), so a
    technician is matched by name first and by id second. Orders without a
    suggested technician count towards nobody. A technician with no matching
    orders keeps the counts it already carries.
    """
    _require(technicians, "technicians")
    _require(orders, "orders")

    counts: Dict[str, Dict[str, int]] = {}
    for order in orders:
        if not order.suggested_technician:
            continue
        current = counts.setdefault(order.suggested_technician, {"assigned": 0, "diagnosis": 0})
        current["assigned"] += 1
        if order.status == IntakeStatus.DIAGNOSIS:
            current["diagnosis"] += 1

    enriched = []
    for technician in technicians:
        metrics = counts.get(technician.name)
        if metrics is None:
            metrics = counts.get(technician.id)
        if metrics is None:
            enriched.append(technician)
            continue
        enriched.append(technician.model_copy(update={
            "assigned_count": metrics["assigned"],
            "pending_diagnosis_count": metrics["diagnosis"],
        }))
    return enriched


def technician_totals(technicians: List[TechnicianLoad]) -> TechnicianTotals:
    _require(technicians, "technicians")
    return TechnicianTotals(
        assigned=sum(technician.assigned_count for technician in technicians),
        pending_diagnosis=sum(technician.pending_diagnosis_count for technician in technicians),
        active=len(technicians),
    )


def top_tags(orders: List[IntakeOrder], limit: int = TOP_TAGS_LIMIT) -> List[CountEntry]:
    """
    Most frequent tags, highest count first. Counter keeps insertion order and
    most_common() sorts stably, so ties stay in first-encountered order.
    """
    _require(orders, "orders")
    counter = Counter(tag for order in orders for tag in order.tags)
    return [CountEntry(label=tag, count=count) for tag, count in counter.most_common(limit)]


def extract_tags(orders: List[IntakeOrder]) -> List[str]:
    """Distinct tags across all orders, in first-seen order"""
    _require(orders, "orders")
    return list(dict.fromkeys(tag for order in orders for tag in order.tags))


def status_breakdown(orders: List[IntakeOrder]) -> List[CountEntry]:
    """Order count per intake status, in first-encountered order"""
    _require(orders, "orders")
    counter = Counter(order.status for order in orders if order.status in INTAKE_STATUSES)
    return [CountEntry(label=status.value, count=count) for status, count in counter.items()]


def channel_breakdown(orders: List[IntakeOrder]) -> List[CountEntry]:
    """Order count per intake channel, busiest first"""
    _require(orders, "orders")
    counter = Counter(order.channel for order in orders)
    return [CountEntry(label=channel.value, count=count) for channel, count in counter.most_common()]


def build_dashboard_data(
    orders: List[IntakeOrder], technicians: List[TechnicianLoad], now: datetime
) -> IntakeDashboardData:
    return IntakeDashboardData(
        summary=build_summary(orders, now),
        orders=list(orders),
        technicians=compute_technician_metrics(technicians, orders),
        available_tags=extract_tags(orders),
    )
