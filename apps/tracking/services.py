# apps/tracking/services.py
import logging
from dataclasses import dataclass
from typing import Callable, Optional, Union

from django.conf import settings
from django.utils import timezone

from .repositories import Row, TabularStore, get_store

logger = logging.getLogger(__name__)

UNKNOWN_LOCATION = "Unknown"


@dataclass(frozen=True)
class ViewEvent:
    job_id: int
    location: Optional[str] = None

    metric = "views"
    lifetime_field = "totalViews"


@dataclass(frozen=True)
class ClickEvent:
    job_id: int

    metric = "clicks"
    lifetime_field = "totalClicks"


TrackingEvent = Union[ViewEvent, ClickEvent]


def _count(value) -> int:
    # The sheet hands counters back as ints, numeric strings or blanks
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


def _same_id(row_value, job_id: int) -> bool:
    try:
        return int(row_value) == job_id
    except (TypeError, ValueError):
        return False


class CounterService:
    """
    Records view and click events against two tables:

    * ``jobs_table``: one row per job with lifetime ``totalViews``/``totalClicks``
    * ``analytics_table``: one row per ``(jobId, date)`` with ``views``/``clicks``

    Nothing is locked. With a store lacking ``increment`` (or with
    ``prefer_atomic=False``) each bump is a blind read-then-write and
    concurrent events can lose updates. The daily find-or-create can produce
    duplicate rows for the same day under concurrent first events whatever
    the store.
    """

    def __init__(self, store: TabularStore, jobs_table: str = "sheet1",
                 analytics_table: str = "analytics",
                 clock: Callable = timezone.now, prefer_atomic: bool = True):
        self.store = store
        self.jobs_table = jobs_table
        self.analytics_table = analytics_table
        self.clock = clock
        self.prefer_atomic = prefer_atomic

    @property
    def uses_atomic_increment(self) -> bool:
        return self.prefer_atomic and self.store.supports_atomic_increment

    def record_view(self, event: ViewEvent) -> None:
        self._record(event)

    def record_click(self, event: ClickEvent) -> None:
        self._record(event)

    def _record(self, event: TrackingEvent) -> None:
        self._bump_lifetime(event)
        self._bump_daily(event)

    def _bump_lifetime(self, event: TrackingEvent) -> None:
        job = self.store.find_one(self.jobs_table, lambda row: _same_id(row.get("id"), event.job_id))
        if job is None:
            logger.warning(f"Job {event.job_id} not found in {self.jobs_table}, skipping lifetime counter")
            return
        self._bump(self.jobs_table, job, event.lifetime_field)

    def _bump_daily(self, event: TrackingEvent) -> None:
        today = self.clock().date().isoformat()
        record = self.store.find_one(
            self.analytics_table,
            lambda row: _same_id(row.get("jobId"), event.job_id) and row.get("date") == today,
        )
        if record is not None:
            self._bump(self.analytics_table, record, event.metric)
            return

        fields = {
            "jobId": event.job_id,
            "date": today,
            "views": 1 if event.metric == "views" else 0,
            "clicks": 1 if event.metric == "clicks" else 0,
        }
        if isinstance(event, ViewEvent):
            fields["viewerLocation"] = (event.location or "").strip() or UNKNOWN_LOCATION
        self.store.create(self.analytics_table, fields)
        logger.info(f"Created {self.analytics_table} record for job {event.job_id} on {today}")

    def _bump(self, table: str, row: Row, field: str) -> None:
        if self.uses_atomic_increment:
            self.store.increment(table, row["id"], field, 1)
        else:
            self.store.update_fields(table, row["id"], {field: _count(row.get(field)) + 1})


def get_counter_service() -> CounterService:
    return CounterService(
        get_store(),
        prefer_atomic=getattr(settings, "TRACKING_ATOMIC_INCREMENTS", True),
    )
