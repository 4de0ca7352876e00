"""
Order record normalization.
Maps loosely-typed feed documents into canonical IntakeOrder / TechnicianLoad records.

Normalization is total: every field has an explicit fallback, so a malformed
document never fails the render. Present-but-unusable values are reported
through the anomaly hook and logged; absent values default silently.
"""
import logging
from datetime import datetime
from enum import Enum
from typing import Any, Callable, List, Mapping, Optional, Type

from pydantic import BaseModel

from intake_board.models.intake import (
    IntakeChannel, IntakeOrder, IntakeStatus, OrderPriority, OrderStatus, TechnicianLoad
)

logger = logging.getLogger(__name__)

UNNAMED_CUSTOMER = "Unnamed customer"
UNKNOWN_DEVICE = "Unknown device"
UNNAMED_TECHNICIAN = "Unnamed technician"

DEFAULT_STATUS = IntakeStatus.INTAKE
DEFAULT_PRIORITY = OrderPriority.MEDIUM
DEFAULT_CHANNEL = IntakeChannel.COUNTER


class NormalizationAnomaly(BaseModel):
    """A field that was present but could not be used and was defaulted"""
    document_id: str
    field: str
    value: str  # repr() of the offending value
    reason: str


AnomalyHook = Callable[[NormalizationAnomaly], None]


def hours_in_queue(intake_timestamp: datetime, now: datetime) -> float:
    """Hours elapsed since intake, clamped at zero for future timestamps"""
    elapsed = (now - align_timezone(intake_timestamp, now)).total_seconds() / 3600
    return max(elapsed, 0.0)


def align_timezone(value: datetime, now: datetime) -> datetime:
    """Make value comparable with now (naive values take now's timezone)"""
    if value.tzinfo is None and now.tzinfo is not None:
        return value.replace(tzinfo=now.tzinfo)
    if value.tzinfo is not None and now.tzinfo is None:
        return value.astimezone().replace(tzinfo=None)
    return value


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Accepts a datetime, a platform timestamp object exposing to_datetime() or
    ToDatetime(), or an ISO-8601 string. Returns None for anything else.
    """
    if isinstance(value, datetime):
        return value
    for method in ("to_datetime", "ToDatetime"):
        converter = getattr(value, method, None)
        if callable(converter):
            converted = converter()
            return converted if isinstance(converted, datetime) else None
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    return None


def _text(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, (list, tuple)):
        return []
    return [item for item in value if isinstance(item, str)]


def _match_enum(enum_cls: Type[Enum], value: Any) -> Optional[Enum]:
    """Case-insensitive lookup by member value"""
    if isinstance(value, Enum):
        value = value.value
    if not isinstance(value, str):
        return None
    needle = value.strip().lower()
    for member in enum_cls:
        if member.value.lower() == needle:
            return member
    return None


class RecordNormalizer:
    """Normalizes raw order and roster documents"""

    def __init__(self, on_anomaly: Optional[AnomalyHook] = None):
        self.on_anomaly = on_anomaly

    def normalize_order(self, doc_id: str, data: Mapping[str, Any], now: datetime) -> IntakeOrder:
        device = data.get("device")
        if not isinstance(device, Mapping):
            device = {}

        intake_timestamp = self._intake_timestamp(doc_id, data.get("intake_date"), now)
        device_label = " ".join(
            part for part in (_text(device.get("brand")), _text(device.get("model"))) if part
        )
        photos = data.get("photos")

        return IntakeOrder(
            order_id=doc_id,
            customer_name=(
                _text(data.get("customer_name")) or _text(data.get("customer_id")) or UNNAMED_CUSTOMER
            ),
            device_label=device_label or UNKNOWN_DEVICE,
            status=self._status(doc_id, data.get("status")),
            priority=self._coerce(doc_id, "priority", data.get("priority"), OrderPriority, DEFAULT_PRIORITY),
            intake_timestamp=intake_timestamp,
            hours_in_queue=hours_in_queue(intake_timestamp, now),
            suggested_technician=_text(data.get("assigned_to_name")) or _text(data.get("assigned_to")),
            channel=self._coerce(doc_id, "channel", data.get("channel"), IntakeChannel, DEFAULT_CHANNEL),
            tags=list(dict.fromkeys(_string_list(data.get("tags")))),
            photo_count=len(photos) if isinstance(photos, (list, tuple)) else 0,
            accessories=_string_list(device.get("accessories_received")),
        )

    def normalize_technician(self, doc_id: str, data: Mapping[str, Any]) -> TechnicianLoad:
        return TechnicianLoad(
            id=doc_id,
            name=_text(data.get("name")) or UNNAMED_TECHNICIAN,
            specialties=_string_list(data.get("skills")),
        )

    def _status(self, doc_id: str, value: Any) -> IntakeStatus:
        if value is None:
            return DEFAULT_STATUS
        status = _match_enum(IntakeStatus, value)
        if status is not None:
            return status
        if _match_enum(OrderStatus, value) is not None:
            self._report(doc_id, "status", value, "status outside the intake stages")
        else:
            self._report(doc_id, "status", value, "unrecognized status")
        return DEFAULT_STATUS

    def _coerce(self, doc_id: str, field: str, value: Any, enum_cls: Type[Enum], default: Enum):
        if value is None:
            return default
        member = _match_enum(enum_cls, value)
        if member is None:
            self._report(doc_id, field, value, f"unrecognized {field}")
            return default
        return member

    def _intake_timestamp(self, doc_id: str, value: Any, now: datetime) -> datetime:
        if value is None:
            return now
        parsed = parse_timestamp(value)
        if parsed is None:
            self._report(doc_id, "intake_date", value, "unsupported timestamp shape")
            return now
        return align_timezone(parsed, now)

    def _report(self, doc_id: str, field: str, value: Any, reason: str):
        anomaly = NormalizationAnomaly(document_id=doc_id, field=field, value=repr(value), reason=reason)
        logger.warning("Defaulted %s on %s: %s (%s)", field, doc_id, reason, anomaly.value)
        if self.on_anomaly is not None:
            self.on_anomaly(anomaly)

