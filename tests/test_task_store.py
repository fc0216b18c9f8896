"""Tests for app.services.task_store against an in-memory SQLite store."""

import unittest
import uuid
from datetime import UTC, datetime, timedelta, timezone

from app.core.database import build_engine, build_session_factory
from app.models import Base
from app.services.task_store import TaskStore, as_utc, start_of_utc_day


class Clock:
    """Settable clock injected into TaskStore."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


class TaskStoreTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = build_engine("sqlite://")
        Base.metadata.create_all(bind=self.engine)
        self.session = build_session_factory(self.engine)()
        self.clock = Clock(datetime(2026, 10, 19, 9, 30, tzinfo=UTC))
        self.store = TaskStore(self.session, now=self.clock)

    def tearDown(self) -> None:
        self.session.close()
        self.engine.dispose()


class TestHelpers(unittest.TestCase):
    def test_start_of_utc_day(self) -> None:
        moment = datetime(2026, 10, 19, 23, 59, 59, 999999, tzinfo=UTC)
        self.assertEqual(start_of_utc_day(moment), datetime(2026, 10, 19, tzinfo=UTC))

    def test_start_of_utc_day_converts_offsets(self) -> None:
        # 01:00 at +03:00 is 22:00 the previous day in UTC.
        moment = datetime(2026, 10, 19, 1, 0, tzinfo=timezone(timedelta(hours=3)))
        self.assertEqual(start_of_utc_day(moment), datetime(2026, 10, 18, tzinfo=UTC))

    def test_as_utc_treats_naive_as_utc(self) -> None:
        self.assertEqual(as_utc(datetime(2026, 1, 1, 12)), datetime(2026, 1, 1, 12, tzinfo=UTC))


class TestCreate(TaskStoreTestCase):
    def test_sets_server_fields(self) -> None:
        item = self.store.create("Buy milk", "2 litres")
        self.assertIsInstance(item.id, uuid.UUID)
        self.assertEqual(item.title, "Buy milk")
        self.assertEqual(item.description, "2 litres")
        self.assertFalse(item.is_done)
        self.assertEqual(as_utc(item.created_at), self.clock.now)

    def test_ids_are_unique(self) -> None:
        ids = {self.store.create(f"t{i}", None).id for i in range(20)}
        self.assertEqual(len(ids), 20)


class TestGetAll(TaskStoreTestCase):
    def test_empty_store_returns_empty_list(self) -> None:
        self.assertEqual(self.store.get_all(), [])

    def test_default_window_is_start_of_today(self) -> None:
        self.clock.now = datetime(2026, 10, 18, 23, 59, tzinfo=UTC)
        yesterday = self.store.create("yesterday", None)
        self.clock.now = datetime(2026, 10, 19, 0, 0, tzinfo=UTC)
        midnight = self.store.create("midnight", None)
        self.clock.advance(hours=10)
        later = self.store.create("later", None)

        result = self.store.get_all()
        self.assertEqual([i.id for i in result], [later.id, midnight.id])
        self.assertNotIn(yesterday.id, [i.id for i in result])

    def test_since_is_inclusive_and_newest_first(self) -> None:
        created = []
        for hour in (1, 5, 3, 7):
            self.clock.now = datetime(2026, 10, 10, hour, tzinfo=UTC)
            created.append(self.store.create(f"h{hour}", None))

        result = self.store.get_all(datetime(2026, 10, 10, 3, tzinfo=UTC))
        self.assertEqual([i.title for i in result], ["h7", "h5", "h3"])

    def test_naive_since_is_utc(self) -> None:
        self.clock.now = datetime(2026, 10, 10, 12, tzinfo=UTC)
        self.store.create("noon", None)
        self.assertEqual(len(self.store.get_all(datetime(2026, 10, 10, 12))), 1)
        self.assertEqual(self.store.get_all(datetime(2026, 10, 10, 12, 0, 1)), [])

    def test_since_with_offset_is_converted(self) -> None:
        self.clock.now = datetime(2026, 10, 10, 12, tzinfo=UTC)
        self.store.create("noon", None)
        # 14:00 at +02:00 == 12:00 UTC
        since = datetime(2026, 10, 10, 14, tzinfo=timezone(timedelta(hours=2)))
        self.assertEqual(len(self.store.get_all(since)), 1)


class TestGetUpdateDelete(TaskStoreTestCase):
    def test_get_unknown_is_none(self) -> None:
        self.assertIsNone(self.store.get_by_id(uuid.uuid4()))

    def test_update_changes_only_mutable_fields(self) -> None:
        item = self.store.create("T", "d")
        item_id, created_at = item.id, as_utc(item.created_at)
        self.clock.advance(hours=2)

        self.assertTrue(self.store.update(item_id, "T2", None, True))

        fetched = self.store.get_by_id(item_id)
        self.assertEqual(fetched.title, "T2")
        self.assertIsNone(fetched.description)
        self.assertTrue(fetched.is_done)
        self.assertEqual(fetched.id, item_id)
        self.assertEqual(as_utc(fetched.created_at), created_at)

    def test_update_unknown_is_false(self) -> None:
        self.assertFalse(self.store.update(uuid.uuid4(), "T", None, False))

    def test_delete(self) -> None:
        item_id = self.store.create("T", None).id
        self.assertTrue(self.store.delete(item_id))
        self.assertIsNone(self.store.get_by_id(item_id))

    def test_deleted_item_reports_not_found_everywhere(self) -> None:
        item_id = self.store.create("T", None).id
        self.store.delete(item_id)
        self.assertFalse(self.store.update(item_id, "T2", None, True))
        self.assertFalse(self.store.delete(item_id))
        self.assertIsNone(self.store.get_by_id(item_id))

    def test_other_items_untouched(self) -> None:
        keep = self.store.create("keep", None)
        drop = self.store.create("drop", None)
        self.store.update(drop.id, "changed", None, True)
        self.store.delete(drop.id)
        fetched = self.store.get_by_id(keep.id)
        self.assertEqual(fetched.title, "keep")
        self.assertFalse(fetched.is_done)


if __name__ == "__main__":
    unittest.main()
