"""Club records, their organisers and photos, and the queries over them."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from .errors import NotFoundError
from .members import Member

NO_PARENT_CLUB_ID = 0
ORGANISER_CLEARANCE = 2

_GET_CLUB = """SELECT
 name,
 short_name,
 description,
 short_description,
 type,
 logo,
 parent_id,
 vk_url,
 tg_url
 FROM club WHERE id = $1 AND id > 0
"""

_CLUB_LIST_COLUMNS = (
    "id, name, short_name, short_description, type, logo, parent_id, vk_url, tg_url"
)
_GET_ALL_CLUBS = f"SELECT {_CLUB_LIST_COLUMNS} FROM club WHERE id > 0"
_GET_CLUBS_BY_NAME = f"SELECT {_CLUB_LIST_COLUMNS} FROM club WHERE name ILIKE $1 AND id > 0"
_GET_CLUBS_BY_TYPE = f"SELECT {_CLUB_LIST_COLUMNS} FROM club WHERE type ILIKE $1 AND id > 0"

_ORG_JOINS = """
FROM club_org
JOIN
(
    SELECT id, hash_password, login, media_id, telegram, vk, name, is_admin
    FROM member
) mem
ON (mem.id = club_org.member_id)
JOIN
(
    SELECT id, name FROM club {club_filter}
) AS clubs
ON (club_org.club_id = clubs.id)
JOIN
(
    SELECT id, role_name, role_spec
    FROM club_role
    WHERE role_clearance = 2
) AS orgs
ON orgs.id = club_org.role_id
"""

_ORG_COLUMNS = """
    orgs.role_name,
    orgs.role_spec,
    mem.id,
    mem.hash_password,
    mem.login,
    mem.media_id,
    mem.telegram,
    mem.vk,
    mem.name,
    mem.is_admin,
    clubs.name AS club_name"""

_GET_CLUB_ORGS = (
    f"SELECT{_ORG_COLUMNS}"
    + _ORG_JOINS.format(club_filter="")
    + "WHERE club_id = $1 AND club_id > 0\n"
)
_GET_CLUBS_ORGS = (
    f"SELECT{_ORG_COLUMNS},\n    clubs.id AS club_id"
    + _ORG_JOINS.format(club_filter="")
    + "WHERE club_id = ANY($1) AND club_id > 0\n"
)
_GET_CLUB_SUB_ORGS = (
    f"SELECT{_ORG_COLUMNS}"
    + _ORG_JOINS.format(club_filter="WHERE id > 0")
    + "WHERE club_id = ANY((SELECT id FROM club WHERE parent_id = $1)) AND club_id > 0\n"
)
_GET_ALL_CLUB_ORGS = """SELECT
    orgs.role_name,
    orgs.role_spec,
    member_id,
    club_id,
    mem.hash_password,
    mem.login,
    mem.media_id,
    mem.telegram,
    mem.vk,
    mem.name,
    mem.is_admin,
    clubs.name AS club_name""" + _ORG_JOINS.format(club_filter="WHERE id > 0")

_ADD_CLUB = """
INSERT INTO club (
    name,
    short_name,
    description,
    short_description,
    type,
    logo,
    parent_id,
    vk_url,
    tg_url
) VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9)
RETURNING id
"""

_ADD_ORG_ROLE = """
INSERT INTO club_role (
    role_name,
    role_spec,
    role_clearance
) VALUES ($1, $2, 2)
RETURNING id
"""

_ADD_ORG = """
INSERT INTO club_org (
    role_id,
    member_id,
    club_id
) VALUES ($1, $2, $3)
"""

_GET_CLUB_MEDIA_FILES = """
SELECT id, ref_num, club_id, media_id
FROM club_photo
WHERE club_id = $1 AND club_id > 0
"""

_DELETE_CLUB = "DELETE FROM club WHERE id = $1"
_DELETE_CLUB_ORGS = (
    "DELETE FROM club_org USING club_role WHERE club_id = $1 "
    "AND club_role.id = club_org.role_id AND club_role.role_clearance = 2"
)
_DELETE_CLUB_MEMBERS = "DELETE FROM club_org WHERE club_id = $1"
_DELETE_CLUB_PHOTOS = "DELETE FROM club_photo WHERE club_id = $1"
_DELETE_CLUB_ENCOUNTERS = "DELETE FROM encounter WHERE club_id = $1"
_DELETE_CLUB_DOCUMENTS = "DELETE FROM document WHERE club_id = $1"
_UPDATE_CLUB_PARENTS = "UPDATE club SET parent_id=null WHERE parent_id = $1"

_UPDATE_CLUB = """
UPDATE club
SET name=$1,
    short_name=$2,
    description=$3,
    type=$4,
    logo=$5,
    parent_id=$6,
    vk_url=$7,
    tg_url=$8,
    short_description=$9
WHERE id = $10 AND id > 0
"""

_ADD_CLUB_PHOTO = "INSERT INTO club_photo (ref_num, club_id, media_id) VALUES ($1, $2, $3)"
_GET_CLUB_PHOTOS = "SELECT id, ref_num, club_id, media_id FROM club_photo WHERE club_id = $1"
_UPSERT_CLUB_PHOTO = """
INSERT INTO club_photo (ref_num, club_id, media_id) VALUES ($1, $2, $3)
ON CONFLICT (media_id, club_id) DO UPDATE SET ref_num=$1
"""
_DELETE_CLUB_PHOTO = "DELETE FROM club_photo WHERE id = $1"
_GET_PHOTO_CLUB_ID = "SELECT club_id FROM club_photo WHERE id = $1"


@dataclass
class Club:
    """A student club; parent_id is NO_PARENT_CLUB_ID for top-level clubs."""

    id: int = 0
    name: str = ""
    short_name: str = ""
    description: str = ""
    short_description: str = ""
    type: str = ""
    logo_id: int = 0
    parent_id: int = NO_PARENT_CLUB_ID
    vk_url: str = ""
    tg_url: str = ""


@dataclass
class ClubOrg(Member):
    """A member holding an organiser role in a club."""

    role_name: str = ""
    role_spec: str = ""
    club_name: str = ""
    club_id: int = 0


@dataclass
class ClubPhoto:
    """A photo shown on a club's page, ordered by ref_number."""

    id: int = 0
    ref_number: int = 0
    club_id: int = 0
    media_id: int = 0


def _parent(value: int | None) -> int:
    return NO_PARENT_CLUB_ID if value is None else value


def _club_from_list_row(row: Sequence[Any]) -> Club:
    (club_id, name, short_name, short_description, club_type,
     logo, parent_id, vk_url, tg_url) = row
    return Club(
        id=club_id,
        name=name,
        short_name=short_name,
        short_description=short_description,
        type=club_type,
        logo_id=logo,
        parent_id=_parent(parent_id),
        vk_url=vk_url,
        tg_url=tg_url,
    )


def _org_from_row(row: Sequence[Any], club_id: int = 0) -> ClubOrg:
    (role_name, role_spec, member_id, hash_password, login, media_id,
     telegram, vk, name, is_admin, club_name) = row
    return ClubOrg(
        id=member_id,
        login=login,
        hash_password=hash_password,
        media_id=media_id,
        telegram=telegram,
        vk=vk,
        name=name,
        is_admin=is_admin,
        role_name=role_name,
        role_spec=role_spec,
        club_name=club_name,
        club_id=club_id,
    )


def _non_empty(items: list[Any]) -> list[Any]:
    if not items:
        raise NotFoundError()
    return items


def _insert_orgs(tx: Any, orgs: Iterable[ClubOrg]) -> None:
    for org in orgs:
        (role_id,) = tx.fetch_one(_ADD_ORG_ROLE, org.role_name, org.role_spec)
        tx.execute(_ADD_ORG, role_id, org.id, org.club_id)


@dataclass
class ClubQueries:
    """Club queries against a Database."""

    db: Any

    def get_club(self, club_id: int) -> Club:
        """Return the club with the given id."""
        (name, short_name, description, short_description, club_type,
         logo, parent_id, vk_url, tg_url) = self.db.fetch_one(_GET_CLUB, club_id)
        return Club(
            id=club_id,
            name=name,
            short_name=short_name,
            description=description,
            short_description=short_description,
            type=club_type,
            logo_id=logo,
            parent_id=_parent(parent_id),
            vk_url=vk_url,
            tg_url=tg_url,
        )

    def get_all_clubs(self) -> list[Club]:
        """Return every club; raise NotFoundError if there are none."""
        return _non_empty([_club_from_list_row(r) for r in self.db.fetch_all(_GET_ALL_CLUBS)])

    def get_clubs_by_name(self, name: str) -> list[Club]:
        """Return clubs whose name contains the text, case-insensitively."""
        rows = self.db.fetch_all(_GET_CLUBS_BY_NAME, f"%{name}%")
        return _non_empty([_club_from_list_row(r) for r in rows])

    def get_clubs_by_type(self, club_type: str) -> list[Club]:
        """Return clubs whose type contains the text, case-insensitively."""
        rows = self.db.fetch_all(_GET_CLUBS_BY_TYPE, f"%{club_type}%")
        return _non_empty([_club_from_list_row(r) for r in rows])

    def get_club_orgs(self, club_id: int) -> list[ClubOrg]:
        """Return the organisers of one club."""
        rows = self.db.fetch_all(_GET_CLUB_ORGS, club_id)
        return _non_empty([_org_from_row(r) for r in rows])

    def get_clubs_orgs(self, club_ids: Iterable[int]) -> list[ClubOrg]:
        """Return the organisers of all the given clubs."""
        rows = self.db.fetch_all(_GET_CLUBS_ORGS, list(club_ids))
        return _non_empty([_org_from_row(r[:-1], club_id=r[-1]) for r in rows])

    def get_club_sub_orgs(self, club_id: int) -> list[ClubOrg]:
        """Return the organisers of the club's sub-clubs, tagged with the parent id."""
        rows = self.db.fetch_all(_GET_CLUB_SUB_ORGS, club_id)
        return _non_empty([_org_from_row(r, club_id=club_id) for r in rows])

    def get_all_club_orgs(self) -> list[ClubOrg]:
        """Return the organisers of every club."""
        orgs = []
        for row in self.db.fetch_all(_GET_ALL_CLUB_ORGS):
            role_name, role_spec, member_id, club_id, *rest = row
            orgs.append(_org_from_row((role_name, role_spec, member_id, *rest), club_id=club_id))
        return _non_empty(orgs)

    def add_club(self, club: Club) -> int:
        """Insert a club and return its new id."""
        (club_id,) = self.db.fetch_one(
            _ADD_CLUB,
            club.name,
            club.short_name,
            club.description,
            club.short_description,
            club.type,
            club.logo_id,
            club.parent_id,
            club.vk_url,
            club.tg_url,
        )
        return club_id

    def add_orgs(self, orgs: Iterable[ClubOrg]) -> None:
        """Create a role for each organiser and attach it to the club, atomically."""
        with self.db.transaction() as tx:
            _insert_orgs(tx, orgs)

    def get_club_media_files(self, club_id: int) -> list[ClubPhoto]:
        """Return the photos of a club."""
        photos = [
            ClubPhoto(id=photo_id, ref_number=ref_num, club_id=club_id, media_id=media_id)
            for photo_id, ref_num, _, media_id in self.db.fetch_all(_GET_CLUB_MEDIA_FILES, club_id)
        ]
        return _non_empty(photos)

    def delete_club_with_orgs(self, club_id: int) -> None:
        """Delete a club with its members, photos, encounters and documents.

        Sub-clubs lose their parent. Raises NotFoundError if the club does not exist.
        """
        with self.db.transaction() as tx:
            for statement in (
                _DELETE_CLUB_MEMBERS,
                _DELETE_CLUB_PHOTOS,
                _DELETE_CLUB_ENCOUNTERS,
                _DELETE_CLUB_DOCUMENTS,
                _UPDATE_CLUB_PARENTS,
            ):
                tx.execute(statement, club_id)
            if tx.execute(_DELETE_CLUB, club_id) == 0:
                raise NotFoundError()

    def update_club(self, club: Club, orgs: Iterable[ClubOrg]) -> None:
        """Update a club and replace its organisers."""
        with self.db.transaction() as tx:
            affected = tx.execute(
                _UPDATE_CLUB,
                club.name,
                club.short_name,
                club.description,
                club.type,
                club.logo_id,
                club.parent_id,
                club.vk_url,
                club.tg_url,
                club.short_description,
                club.id,
            )
            if affected == 0:
                raise NotFoundError()
            tx.execute(_DELETE_CLUB_ORGS, club.id)
            _insert_orgs(tx, orgs)

    def add_club_photos(self, photos: Iterable[ClubPhoto]) -> None:
        """Insert the photos, atomically."""
        with self.db.transaction() as tx:
            for photo in photos:
                tx.execute(_ADD_CLUB_PHOTO, photo.ref_number, photo.club_id, photo.media_id)

    def update_club_photos(self, club_id: int, photos: Sequence[ClubPhoto]) -> None:
        """Make the club's photos match the given list.

        Stored photos whose media is not in the list are deleted; the rest are
        inserted or have their order updated.
        """
        if not photos:
            raise ValueError("no photos given")
        with self.db.transaction() as tx:
            stored = tx.fetch_all(_GET_CLUB_PHOTOS, photos[0].club_id)
            wanted = {photo.media_id for photo in photos}
            for photo_id, _, _, media_id in stored:
                if media_id not in wanted:
                    tx.execute(_DELETE_CLUB_PHOTO, photo_id)
            for photo in photos:
                tx.execute(_UPSERT_CLUB_PHOTO, photo.ref_number, club_id, photo.media_id)

    def delete_club_photo(self, photo_id: int) -> None:
        """Delete one club photo."""
        with self.db.transaction() as tx:
            tx.execute(_DELETE_CLUB_PHOTO, photo_id)

    def get_photo_club_id(self, photo_id: int) -> int:
        """Return the id of the club a photo belongs to."""
        (club_id,) = self.db.fetch_one(_GET_PHOTO_CLUB_ID, photo_id)
        return club_id