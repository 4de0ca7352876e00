"""
Push feed contract.
A feed delivers full snapshots of raw documents, or a transport failure, to
subscribers. Subscribing returns a disposer that releases the subscription.
"""
from datetime import datetime
from typing import Any, Callable, Dict, List, Protocol
from pydantic import BaseModel, Field


class FeedDocument(BaseModel):
    """One raw document as delivered by the feed"""
    id: str
    data: Dict[str, Any] = Field(default_factory=dict)


class FeedError(BaseModel):
    """Transport failure surfaced to the presentation layer"""
    feed: str  # "orders" or "technicians"
    message: str
    occurred_at: datetime


SnapshotCallback = Callable[[List[FeedDocument]], None]
ErrorCallback = Callable[[Exception], None]
Unsubscribe = Callable[[], None]


class Feed(Protocol):
    """Transport collaborator the reconciler subscribes to"""

    def subscribe_orders(self, on_snapshot: SnapshotCallback, on_error: ErrorCallback) -> Unsubscribe:
        ...

    def subscribe_technicians(self, on_snapshot: SnapshotCallback, on_error: ErrorCallback) -> Unsubscribe:
        ...
