import threading
from datetime import datetime, timezone as dt_timezone

from django.test import SimpleTestCase

from apps.tracking.repositories.memory import InMemoryTabularStore
from apps.tracking.services import CounterService, ViewEvent


def clock():
    return datetime(2024, 3, 1, 9, 30, tzinfo=dt_timezone.utc)


class InterleavingStore(InMemoryTabularStore):
    """Holds the first reads of ``table`` until every racer has read it."""

    def __init__(self, *args, table='analytics', parties=2, **kwargs):
        super().__init__(*args, **kwargs)
        self.table = table
        self.barrier = threading.Barrier(parties, timeout=5)
        self.pending = parties
        self.gate = threading.Lock()

    def list_all(self, table):
        rows = super().list_all(table)
        with self.gate:
            hold = table == self.table and self.pending > 0
            if hold:
                self.pending -= 1
        if hold:
            self.barrier.wait()
        return rows


def run_concurrently(service, events):
    errors = []

    def worker(event):
        try:
            service.record_view(event)
        except Exception as e:
            errors.append(e)

    threads = [threading.Thread(target=worker, args=(event,)) for event in events]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=10)
    return errors


class ConcurrentFirstViewTest(SimpleTestCase):
    """
    Two simultaneous first views of the day race on find-or-create.

    Both outcomes are legitimate: one record with ``views == 2``, or two
    records for the same ``(jobId, date)`` with ``views == 1`` each.
    """

    def assertDocumentedOutcome(self, records):
        views = sorted(record['views'] for record in records)
        self.assertIn(views, ([2], [1, 1]))
        for record in records:
            self.assertEqual((record['jobId'], record['date']), (7, '2024-03-01'))

    def test_unsynchronised_views(self):
        store = InMemoryTabularStore({'sheet1': [{'id': 7, 'totalViews': 0}], 'analytics': []})
        errors = run_concurrently(CounterService(store, clock=clock), [ViewEvent(7), ViewEvent(7)])

        self.assertEqual(errors, [])
        self.assertDocumentedOutcome(store.list_all('analytics'))
        self.assertIn(store.list_all('sheet1')[0]['totalViews'], (1, 2))

    def test_interleaved_reads(self):
        store = InterleavingStore({'sheet1': [{'id': 7, 'totalViews': 0}], 'analytics': []})
        errors = run_concurrently(CounterService(store, clock=clock), [ViewEvent(7), ViewEvent(7)])

        self.assertEqual(errors, [])
        records = store.list_all('analytics')
        self.assertDocumentedOutcome(records)
        # with both reads forced ahead of either write, neither racer saw a record
        self.assertEqual(len(records), 2)

    def test_lost_update_on_lifetime_counter(self):
        store = InterleavingStore(
            {'sheet1': [{'id': 7, 'totalViews': 0}], 'analytics': []}, table='sheet1',
        )
        errors = run_concurrently(CounterService(store, clock=clock), [ViewEvent(7), ViewEvent(7)])

        self.assertEqual(errors, [])
        self.assertEqual(store.list_all('sheet1')[0]['totalViews'], 1)

    def test_atomic_increment_keeps_lifetime_counter_exact(self):
        store = InterleavingStore(
            {'sheet1': [{'id': 7, 'totalViews': 0}], 'analytics': []},
            table='sheet1', atomic_increment=True,
        )
        errors = run_concurrently(CounterService(store, clock=clock), [ViewEvent(7), ViewEvent(7)])

        self.assertEqual(errors, [])
        self.assertEqual(store.list_all('sheet1')[0]['totalViews'], 2)
        self.assertDocumentedOutcome(store.list_all('analytics'))
