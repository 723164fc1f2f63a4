"""Event records and the queries that read and change them."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .errors import NotFoundError

_EVENT_COLUMNS = """
id,
title,
description,
prompt,
media_id,
date,
approved,
created_at,
created_by,
reg_url,
reg_open_date,
feedback_url"""

_GET_ALL_EVENTS = f"SELECT {_EVENT_COLUMNS}\nFROM event"
_GET_EVENT = f"SELECT {_EVENT_COLUMNS}\nFROM event WHERE id=$1"
_GET_EVENTS_BY_RANGE = f"SELECT {_EVENT_COLUMNS}\nFROM event\nWHERE date BETWEEN $1 AND $2;"
_POST_EVENT = """INSERT INTO event (title, description, prompt, media_id, date, approved,
    created_at, created_by, reg_url, reg_open_date, feedback_url)
    VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11)"""
_DELETE_EVENT = "DELETE FROM event WHERE id=$1"
_UPDATE_EVENT = """
UPDATE event SET
title=$1,
description=$2,
prompt=$3,
media_id=$4,
date=$5,
approved=$6,
created_at=$7,
created_by=$8,
reg_url=$9,
reg_open_date=$10,
feedback_url=$11
WHERE id=$12"""


def _epoch() -> datetime:
    return datetime(1, 1, 1)


@dataclass
class Event:
    """A scheduled event with optional registration and feedback links."""

    id: int = 0
    title: str = ""
    description: str = ""
    prompt: str = ""
    media_id: int = 0
    date: datetime = field(default_factory=_epoch)
    approved: bool = False
    created_at: datetime = field(default_factory=_epoch)
    created_by: int = 0
    reg_url: str = ""
    reg_open_date: datetime = field(default_factory=_epoch)
    feedback_url: str = ""

    def _fields(self) -> tuple[Any, ...]:
        return (
            self.title,
            self.description,
            self.prompt,
            self.media_id,
            self.date,
            self.approved,
            self.created_at,
            self.created_by,
            self.reg_url,
            self.reg_open_date,
            self.feedback_url,
        )


def _event_from_row(row: Sequence[Any]) -> Event:
    return Event(*row)


def _events_or_not_found(rows: Sequence[Sequence[Any]]) -> list[Event]:
    events = [_event_from_row(row) for row in rows]
    if not events:
        raise NotFoundError()
    return events


@dataclass
class EventQueries:
    """Event queries against a Database."""

    db: Any

    def get_all_events(self) -> list[Event]:
        """Return every event; raise NotFoundError if there are none."""
        return _events_or_not_found(self.db.fetch_all(_GET_ALL_EVENTS))

    def get_event(self, event_id: int) -> Event:
        """Return the event with the given id."""
        return _event_from_row(self.db.fetch_one(_GET_EVENT, event_id))

    def get_events_by_range(self, start: datetime, end: datetime) -> list[Event]:
        """Return events dated between start and end, both inclusive."""
        return _events_or_not_found(self.db.fetch_all(_GET_EVENTS_BY_RANGE, start, end))

    def post_event(self, event: Event) -> None:
        """Insert a new event."""
        self.db.execute(_POST_EVENT, *event._fields())

    def delete_event(self, event_id: int) -> None:
        """Delete an event; raise NotFoundError if it does not exist."""
        if self.db.execute(_DELETE_EVENT, event_id) == 0:
            raise NotFoundError()

    def update_event(self, event: Event) -> None:
        """Update an event; raise NotFoundError if it does not exist."""
        if self.db.execute(_UPDATE_EVENT, *event._fields(), event.id) == 0:
            raise NotFoundError()