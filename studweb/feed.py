"""Feed posts and club encounters, and the queries over them."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .errors import NotFoundError

_FEED_COLUMNS = (
    "id, title, approved, description, media_id, vk_post_url, "
    "updated_at, created_at, views, created_by"
)
_GET_ALL_FEED = f"SELECT {_FEED_COLUMNS} FROM feed"
_GET_FEED = f"SELECT {_FEED_COLUMNS} FROM feed WHERE id=$1"
_GET_FEED_BY_TITLE = f"SELECT {_FEED_COLUMNS} FROM feed WHERE title ILIKE $1"
_GET_FEED_ENCOUNTERS = "SELECT id, count, description, club_id FROM encounter WHERE club_id=$1"
_POST_FEED = """INSERT INTO feed (title, approved, description, media_id, vk_post_url,
    updated_at, created_at, views, created_by)
    VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9)"""
_DELETE_FEED = "DELETE FROM feed WHERE id=$1"
_UPDATE_FEED = """
UPDATE feed SET
title=$1,
approved=$2,
description=$3,
media_id=$4,
vk_post_url=$5,
updated_at=$6,
created_at=$7,
views=$8,
created_by=$9 WHERE id=$10"""
_POST_ENCOUNTER = "INSERT INTO encounter (count, description, club_id) VALUES ($1, $2, $3)"
_DELETE_ENCOUNTER = "DELETE FROM encounter WHERE id=$1"
_UPDATE_ENCOUNTER = "UPDATE encounter SET count=$1, description=$2, club_id=$3 WHERE id=$4"


def _epoch() -> datetime:
    return datetime(1, 1, 1)


@dataclass
class Feed:
    """A news feed post."""

    id: int = 0
    title: str = ""
    approved: bool = False
    description: str = ""
    media_id: int = 0
    vk_post_url: str = ""
    updated_at: datetime = field(default_factory=_epoch)
    created_at: datetime = field(default_factory=_epoch)
    views: int = 0
    created_by: int = 0

    def _fields(self) -> tuple[Any, ...]:
        return (
            self.title,
            self.approved,
            self.description,
            self.media_id,
            self.vk_post_url,
            self.updated_at,
            self.created_at,
            self.views,
            self.created_by,
        )


@dataclass
class Encounter:
    """A counted figure shown for a club, such as a number of participants."""

    id: int = 0
    count: str = ""
    description: str = ""
    club_id: int = 0


def _non_empty(items: list[Any]) -> list[Any]:
    if not items:
        raise NotFoundError()
    return items


def _feeds(rows: Sequence[Sequence[Any]]) -> list[Feed]:
    return _non_empty([Feed(*row) for row in rows])


@dataclass
class FeedQueries:
    """Feed and encounter queries against a Database."""

    db: Any

    def get_all_feed(self) -> list[Feed]:
        """Return every feed post; raise NotFoundError if there are none."""
        return _feeds(self.db.fetch_all(_GET_ALL_FEED))

    def get_feed(self, feed_id: int) -> Feed:
        """Return the feed post with the given id."""
        return Feed(*self.db.fetch_one(_GET_FEED, feed_id))

    def get_feed_encounters(self, club_id: int) -> list[Encounter]:
        """Return the encounters of a club."""
        rows = self.db.fetch_all(_GET_FEED_ENCOUNTERS, club_id)
        return _non_empty([Encounter(*row) for row in rows])

    def get_feed_by_title(self, title: str) -> list[Feed]:
        """Return posts whose title contains the text, case-insensitively."""
        return _feeds(self.db.fetch_all(_GET_FEED_BY_TITLE, f"%{title}%"))

    def post_feed(self, feed: Feed) -> None:
        """Insert a new feed post."""
        self.db.execute(_POST_FEED, *feed._fields())

    def delete_feed(self, feed_id: int) -> None:
        """Delete a feed post; raise NotFoundError if it does not exist."""
        if self.db.execute(_DELETE_FEED, feed_id) == 0:
            raise NotFoundError()

    def update_feed(self, feed: Feed) -> None:
        """Update a feed post; raise NotFoundError if it does not exist."""
        if self.db.execute(_UPDATE_FEED, *feed._fields(), feed.id) == 0:
            raise NotFoundError()

    def post_encounter(self, encounter: Encounter) -> None:
        """Insert a new encounter."""
        self.db.execute(
            _POST_ENCOUNTER, encounter.count, encounter.description, encounter.club_id
        )

    def delete_encounter(self, encounter_id: int) -> None:
        """Delete an encounter; raise NotFoundError if it does not exist."""
        if self.db.execute(_DELETE_ENCOUNTER, encounter_id) == 0:
            raise NotFoundError()

    def update_encounter(self, encounter: Encounter) -> None:
        """Update an encounter; raise NotFoundError if it does not exist."""
        affected = self.db.execute(
            _UPDATE_ENCOUNTER,
            encounter.count,
            encounter.description,
            encounter.club_id,
            encounter.id,
        )
        if affected == 0:
            raise NotFoundError()