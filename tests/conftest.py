"""
Shared fixtures for the intake board tests.
"""
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from intake_board.models.intake import (
    IntakeChannel, IntakeOrder, IntakeStatus, OrderPriority
)

NOW = datetime(2024, 3, 4, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_order():
    """Factory for canonical orders; intake time is derived from hours_in_queue"""
    counter = {"n": 0}

    def _make(
        order_id=None,
        priority=OrderPriority.MEDIUM,
        status=IntakeStatus.INTAKE,
        hours=1.0,
        technician=None,
        channel=IntakeChannel.COUNTER,
        tags=None,
        customer="Test Customer",
        device="Test Device",
    ):
        counter["n"] += 1
        return IntakeOrder(
            order_id=order_id or f"ST-{counter['n']:05d}",
            customer_name=customer,
            device_label=device,
            status=status,
            priority=priority,
            intake_timestamp=NOW - timedelta(hours=hours),
            hours_in_queue=hours,
            suggested_technician=technician,
            channel=channel,
            tags=tags or [],
        )

    return _make
