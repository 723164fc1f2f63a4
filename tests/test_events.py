from datetime import datetime

import pytest

from studweb.errors import NotFoundError
from studweb.events import Event, EventQueries


class FakeDB:
    def __init__(self, rows=(), one=None, affected=1):
        self.rows = list(rows)
        self.one = one
        self.affected = affected
        self.calls = []

    def fetch_all(self, query, *args):
        self.calls.append(("fetch_all", query, args))
        return self.rows

    def fetch_one(self, query, *args):
        self.calls.append(("fetch_one", query, args))
        if self.one is None:
            raise NotFoundError("no rows in result set")
        return self.one

    def execute(self, query, *args):
        self.calls.append(("execute", query, args))
        return self.affected


DATE = datetime(2024, 5, 1, 18, 0)
CREATED = datetime(2024, 4, 1, 12, 0)
REG_OPEN = datetime(2024, 4, 15, 9, 0)

ROW = (
    3, "Open day", "Meet the clubs", "Come along", 11, DATE, True,
    CREATED, 2, "https://reg.example.com", REG_OPEN, "https://fb.example.com",
)


def make_event():
    return Event(*ROW)


def test_get_all_events_maps_columns():
    db = FakeDB(rows=[ROW])
    (event,) = EventQueries(db).get_all_events()
    assert event.id == 3
    assert event.title == "Open day"
    assert event.date == DATE
    assert event.reg_open_date == REG_OPEN
    assert event.feedback_url == "https://fb.example.com"


def test_get_all_events_empty():
    with pytest.raises(NotFoundError):
        EventQueries(FakeDB()).get_all_events()


def test_get_event():
    db = FakeDB(one=ROW)
    assert EventQueries(db).get_event(3) == make_event()
    assert db.calls[0][2] == (3,)


def test_get_event_missing():
    with pytest.raises(NotFoundError):
        EventQueries(FakeDB()).get_event(3)


def test_get_events_by_range_passes_bounds():
    db = FakeDB(rows=[ROW])
    start, end = datetime(2024, 1, 1), datetime(2024, 12, 31)
    assert EventQueries(db).get_events_by_range(start, end) == [make_event()]
    assert db.calls[0][2] == (start, end)
    assert "BETWEEN $1 AND $2" in db.calls[0][1]


def test_get_events_by_range_empty():
    with pytest.raises(NotFoundError):
        EventQueries(FakeDB()).get_events_by_range(datetime(2024, 1, 1), datetime(2024, 2, 1))


def test_post_event_arguments_exclude_id():
    db = FakeDB()
    EventQueries(db).post_event(make_event())
    assert db.calls[0][2] == ROW[1:]


def test_update_event_arguments_end_with_id():
    db = FakeDB()
    EventQueries(db).update_event(make_event())
    assert db.calls[0][2] == ROW[1:] + (3,)


def test_update_event_not_found():
    with pytest.raises(NotFoundError):
        EventQueries(FakeDB(affected=0)).update_event(make_event())


def test_delete_event():
    db = FakeDB()
    EventQueries(db).delete_event(3)
    assert db.calls == [("execute", db.calls[0][1], (3,))]
    assert db.calls[0][1].startswith("DELETE FROM event")


def test_delete_event_not_found():
    with pytest.raises(NotFoundError):
        EventQueries(FakeDB(affected=0)).delete_event(3)


def test_round_trip_through_row():
    event = make_event()
    db = FakeDB()
    EventQueries(db).post_event(event)
    db.one = (event.id, *db.calls[0][2])
    assert EventQueries(db).get_event(event.id) == event