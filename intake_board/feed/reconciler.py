"""
Feed reconciliation.
Decides, on every feed event, whether the dashboard shows live documents or
the static sample set, and which banner goes with it.

States:
- UNCONFIGURED: connection settings missing, no subscription is ever made
- LIVE: subscribed and showing live documents
- DEGRADED: a transport error was recorded or the orders feed came back empty

The reconciler keeps raw documents only. Canonical records, queue times and
aggregates are rebuilt on every view() call, so nothing derived outlives the
snapshot it came from.
"""
import logging
from collections import Counter
from datetime import datetime
from enum import Enum
from typing import Callable, Dict, List, Optional

from pydantic import BaseModel

from intake_board.engine.aggregation import build_dashboard_data
from intake_board.feed.base import Feed, FeedDocument, FeedError, Unsubscribe
from intake_board.feed.sample_data import SampleData
from intake_board.ingestion.normalizer import AnomalyHook, NormalizationAnomaly, RecordNormalizer
from intake_board.models.intake import IntakeDashboardData

logger = logging.getLogger(__name__)

ORDERS_FEED = "orders"
TECHNICIANS_FEED = "technicians"


class FeedState(str, Enum):
    UNCONFIGURED = "unconfigured"
    LIVE = "live"
    DEGRADED = "degraded"


class Banner(str, Enum):
    """Exactly one of these is shown above the intake pages"""
    NONE = "none"
    WARNING = "warning"  # sample data shown, feed unconfigured or empty
    ERROR = "error"  # transport failure


class DashboardView(BaseModel):
    """Everything the presentation layer needs for one render"""
    data: IntakeDashboardData
    state: FeedState
    banner: Banner
    error: Optional[FeedError] = None
    using_sample: bool
    loading: bool
    anomalies: Dict[str, int]  # defaulted field name -> occurrences in this view


def local_now() -> datetime:
    return datetime.now().astimezone()


class FeedReconciler:
    """Owns the feed subscriptions for one dashboard session"""

    def __init__(
        self,
        feed: Optional[Feed],
        configured: bool,
        sample: Optional[SampleData] = None,
        clock: Callable[[], datetime] = local_now,
        on_anomaly: Optional[AnomalyHook] = None,
    ):
        self.feed = feed
        self.configured = configured and feed is not None
        self.sample = sample or SampleData()
        self.clock = clock
        self.on_anomaly = on_anomaly

        self.error: Optional[FeedError] = None
        self.loading = False
        self.subscription_attempts = 0

        # None means "no usable live snapshot, serve sample data"
        self._order_documents: Optional[List[FeedDocument]] = None
        self._technician_documents: Optional[List[FeedDocument]] = None
        self._disposers: List[Unsubscribe] = []
        self._started = False
        self._closed = False

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def using_sample(self) -> bool:
        return not self.configured or self._order_documents is None

    @property
    def state(self) -> FeedState:
        if not self.configured:
            return FeedState.UNCONFIGURED
        if self.error is not None:
            return FeedState.DEGRADED
        if self.loading:
            return FeedState.LIVE
        return FeedState.DEGRADED if self.using_sample else FeedState.LIVE

    @property
    def banner(self) -> Banner:
        if self.error is not None:
            return Banner.ERROR
        if self.loading:
            return Banner.NONE
        return Banner.WARNING if self.using_sample else Banner.NONE

    def start(self):
        """Subscribe to both feeds, unless unconfigured. Calling twice is a no-op."""
        if self._started or self._closed:
            return
        self._started = True

        if not self.configured:
            logger.info("Feed not configured, serving sample data for this session")
            return

        self.loading = True
        self.subscription_attempts += 1
        self._subscribe(ORDERS_FEED, self.feed.subscribe_orders, self._on_orders)
        self._subscribe(TECHNICIANS_FEED, self.feed.subscribe_technicians, self._on_technicians)
        logger.info("Subscribed to orders and technicians feeds")

    def close(self):
        """Release every subscription exactly once; later callbacks are ignored"""
        if self._closed:
            return
        self._closed = True
        disposers, self._disposers = self._disposers, []
        for dispose in disposers:
            try:
                dispose()
            except Exception as e:
                logger.error("Failed to release feed subscription: %s", e)
        logger.info("Feed reconciler closed")

    def view(self, now: Optional[datetime] = None) -> DashboardView:
        """Normalize the current snapshot at `now` and derive the dashboard data"""
        now = now or self.clock()
        anomalies: Counter = Counter()

        def record(anomaly: NormalizationAnomaly):
            anomalies[anomaly.field] += 1
            if self.on_anomaly is not None:
                self.on_anomaly(anomaly)

        normalizer = RecordNormalizer(on_anomaly=record)

        order_documents = self._order_documents
        if order_documents is None:
            order_documents = self.sample.order_documents(now)
        technician_documents = self._technician_documents
        if technician_documents is None:
            technician_documents = self.sample.technician_documents()

        orders = [normalizer.normalize_order(doc.id, doc.data, now) for doc in order_documents]
        technicians = [normalizer.normalize_technician(doc.id, doc.data) for doc in technician_documents]

        return DashboardView(
            data=build_dashboard_data(orders, technicians, now),
            state=self.state,
            banner=self.banner,
            error=self.error,
            using_sample=self.using_sample,
            loading=self.loading,
            anomalies=dict(anomalies),
        )

    def _subscribe(self, feed_name: str, subscribe, on_snapshot):
        def on_error(exc: Exception):
            self._on_error(feed_name, exc)

        try:
            self._disposers.append(subscribe(on_snapshot, on_error))
        except Exception as e:
            self._on_error(feed_name, e)

    def _on_orders(self, documents: List[FeedDocument]):
        if self._closed:
            logger.debug("Ignoring orders snapshot after close")
            return

        self.loading = False
        if self.error is not None and self.error.feed == ORDERS_FEED:
            self.error = None

        if documents:
            self._order_documents = list(documents)
            logger.info("Orders snapshot with %d documents", len(documents))
        else:
            self._order_documents = None
            logger.info("Orders snapshot is empty, showing sample data")

    def _on_technicians(self, documents: List[FeedDocument]):
        if self._closed:
            logger.debug("Ignoring technicians snapshot after close")
            return

        if self.error is not None and self.error.feed == TECHNICIANS_FEED:
            self.error = None

        self._technician_documents = list(documents) if documents else None

    def _on_error(self, feed_name: str, exc: Exception):
        if self._closed:
            return

        if feed_name == ORDERS_FEED:
            self.loading = False
        # Documents are left untouched: last-known-good, or sample data if none
        self.error = FeedError(
            feed=feed_name,
            message=str(exc) or exc.__class__.__name__,
            occurred_at=self.clock(),
        )
        logger.error("Error listening to %s feed: %s", feed_name, exc)
