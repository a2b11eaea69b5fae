import threading
from concurrent.futures import ThreadPoolExecutor
from unittest import mock

from django.db import DatabaseError, connection
from django.test import TestCase, TransactionTestCase, override_settings

from core.models import IdSequence
from core.numbering import InvalidArgument, SequenceAllocationFailed, SequenceType
from core.services.numbering import (
    DatabaseSequenceStore,
    SequenceStore,
    generate_client_id,
    generate_quotation_id,
    get_sequence_store,
)


class LockedMemoryStore(SequenceStore):
    """In-process store with the same contract, used to hammer the generators from threads."""

    def __init__(self):
        self._lock = threading.Lock()
        self._values = {}

    def allocate(self, sequence_type, scope_key=None, fiscal_year=None):
        key = (str(sequence_type), scope_key or "", fiscal_year or "")
        with self._lock:
            self._values[key] = self._values.get(key, 0) + 1
            return self._values[key]


class DatabaseSequenceStoreTests(TestCase):
    def setUp(self):
        self.store = DatabaseSequenceStore()

    def test_first_allocation_returns_one(self):
        self.assertEqual(self.store.allocate(SequenceType.CLIENT), 1)

    def test_allocations_are_sequential(self):
        values = [self.store.allocate(SequenceType.CLIENT) for _ in range(10)]
        self.assertEqual(values, list(range(1, 11)))
        self.assertEqual(self.store.current_value(SequenceType.CLIENT), 10)

    def test_series_are_independent(self):
        self.store.allocate(SequenceType.QUOTATION, "EA701")
        self.store.allocate(SequenceType.QUOTATION, "EA701")

        self.assertEqual(self.store.allocate(SequenceType.QUOTATION, "SW702"), 1)
        self.assertEqual(self.store.allocate(SequenceType.INVOICE, "EA701", "2425"), 1)
        self.assertEqual(self.store.allocate(SequenceType.INVOICE, "EA701", "2526"), 1)
        self.assertEqual(self.store.allocate(SequenceType.QUOTATION, "EA701"), 3)
        self.assertEqual(IdSequence.objects.count(), 4)

    def test_unscoped_series_is_stored_once(self):
        self.store.allocate(SequenceType.CLIENT)
        self.store.allocate(SequenceType.CLIENT, None, None)
        self.store.allocate(SequenceType.CLIENT, "", "")

        row = IdSequence.objects.get()
        self.assertEqual((row.scope_key, row.fiscal_year, row.current_value), ("", "", 3))

    def test_current_value_is_none_before_first_allocation(self):
        self.assertIsNone(self.store.current_value(SequenceType.INVOICE, "EA701", "2425"))

    def test_current_value_does_not_allocate(self):
        self.store.allocate(SequenceType.CLIENT)
        self.store.current_value(SequenceType.CLIENT)
        self.assertEqual(self.store.allocate(SequenceType.CLIENT), 2)

    def test_unknown_sequence_type(self):
        with self.assertRaises(InvalidArgument):
            self.store.allocate("order")
        self.assertFalse(IdSequence.objects.exists())

    def test_database_error_is_wrapped(self):
        error = DatabaseError("connection lost")
        with mock.patch.object(DatabaseSequenceStore, "_increment", side_effect=error):
            with self.assertRaises(SequenceAllocationFailed) as ctx, self.assertLogs(
                "core.services.numbering", level="ERROR"
            ):
                self.store.allocate(SequenceType.QUOTATION, "EA701")

        exc = ctx.exception
        self.assertIs(exc.cause, error)
        self.assertIs(exc.__cause__, error)
        self.assertEqual(exc.sequence_type, "quotation")
        self.assertEqual(exc.scope_key, "EA701")
        self.assertFalse(IdSequence.objects.exists())

    def test_concurrent_insert_falls_back_to_increment(self):
        # Another caller created the row between our UPDATE and INSERT.
        IdSequence.objects.create(sequence_type=SequenceType.CLIENT, current_value=1)
        identity = {"sequence_type": "client", "scope_key": "", "fiscal_year": ""}

        self.assertEqual(self.store._insert_if_absent(identity), 2)
        self.assertEqual(IdSequence.objects.get().current_value, 2)


class SequenceStoreSettingTests(TestCase):
    def test_default_store(self):
        self.assertIsInstance(get_sequence_store(), DatabaseSequenceStore)

    @override_settings(NUMBERING_SEQUENCE_STORE="core.tests.test_sequences.LockedMemoryStore")
    def test_store_is_configurable(self):
        self.assertIsInstance(get_sequence_store(), LockedMemoryStore)


class ConcurrentGenerationTests(TestCase):
    def test_parallel_client_ids_are_unique(self):
        store = LockedMemoryStore()

        def make(_):
            return generate_client_id("E", "W", "IND", store=store).value

        with ThreadPoolExecutor(max_workers=8) as pool:
            ids = list(pool.map(make, range(64)))

        self.assertEqual(len(set(ids)), 64)

    def test_parallel_quotation_ids_are_sequential_per_client(self):
        store = LockedMemoryStore()

        def make(i):
            client_id = "EA701-IND-253" if i % 2 else "SW702-USA-24B"
            return generate_quotation_id(client_id, store=store).sequence_number

        with ThreadPoolExecutor(max_workers=8) as pool:
            numbers = list(pool.map(make, range(40)))

        self.assertEqual(sorted(numbers), sorted(list(range(1, 21)) * 2))


class DatabaseSequenceConcurrencyTests(TransactionTestCase):
    """
    Threads allocate through their own connections and commit for real.

    Runs on PostgreSQL (row locks) and on the file-backed SQLite test
    database (writers queue on the database lock).
    """

    workers = 8
    per_worker = 10

    def setUp(self):
        if connection.vendor == "sqlite" and connection.is_in_memory_db():
            self.skipTest("threads cannot share an in-memory SQLite database")

    def _run_in_threads(self, func):
        def run(index):
            try:
                return func(index)
            finally:
                connection.close()

        with ThreadPoolExecutor(max_workers=self.workers) as pool:
            return list(pool.map(run, range(self.workers)))

    def test_no_duplicates_under_contention(self):
        def allocate_many(_):
            store = DatabaseSequenceStore()
            return [
                store.allocate(SequenceType.INVOICE, "EA701", "2425")
                for _ in range(self.per_worker)
            ]

        batches = self._run_in_threads(allocate_many)

        values = sorted(v for batch in batches for v in batch)
        total = self.workers * self.per_worker
        self.assertEqual(values, list(range(1, total + 1)))
        self.assertEqual(
            IdSequence.objects.get(scope_key="EA701", fiscal_year="2425").current_value,
            total,
        )

    def test_first_allocation_race_creates_one_row(self):
        batches = self._run_in_threads(
            lambda _: [DatabaseSequenceStore().allocate(SequenceType.CLIENT)]
        )

        values = sorted(v for batch in batches for v in batch)
        self.assertEqual(values, list(range(1, self.workers + 1)))
        self.assertEqual(
            IdSequence.objects.filter(sequence_type=SequenceType.CLIENT).count(), 1
        )

    def test_parallel_quotation_ids_per_client(self):
        def make(index):
            client_id = "EA701-IND-253" if index % 2 else "SW702-USA-24B"
            return [
                generate_quotation_id(client_id).value
                for _ in range(self.per_worker)
            ]

        batches = self._run_in_threads(make)

        ids = [value for batch in batches for value in batch]
        per_client = self.workers // 2 * self.per_worker
        self.assertEqual(len(set(ids)), len(ids))
        self.assertEqual(
            sorted(ids),
            sorted(
                [f"QN1-EA701-{n:03d}" for n in range(1, per_client + 1)]
                + [f"QN1-SW702-{n:03d}" for n in range(1, per_client + 1)]
            ),
        )
