"""Member records and the queries that read and change them."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from .errors import NotFoundError

_MEMBER_COLUMNS = "id, login, media_id, telegram, vk, name, is_admin"

_GET_ALL_MEMBERS = f"SELECT {_MEMBER_COLUMNS} FROM member"
_GET_MEMBER = f"SELECT {_MEMBER_COLUMNS} FROM member WHERE id=$1"
_GET_MEMBERS_BY_NAME = f"SELECT {_MEMBER_COLUMNS} FROM member WHERE name ILIKE $1"
_POST_MEMBER = """INSERT INTO member
    (login, media_id, telegram, vk, name, is_admin)
    VALUES ($1, $2, $3, $4, $5, $6)"""
_DELETE_MEMBER = "DELETE FROM member WHERE id=$1"
_UPDATE_MEMBER = """
UPDATE member SET
login=$1,
media_id=$2,
telegram=$3,
vk=$4,
name=$5,
is_admin=$6
WHERE id=$7"""
_GET_MEMBER_BY_LOGIN = (
    "SELECT id, login, hash_password, media_id, telegram, vk, name, is_admin "
    "FROM member WHERE login=$1;"
)


@dataclass
class Member:
    """A registered member of the student organisation."""

    id: int = 0
    login: str = ""
    hash_password: str = ""
    media_id: int = 0
    telegram: str = ""
    vk: str = ""
    name: str = ""
    is_admin: bool = False


def _member_from_row(row: Sequence[Any]) -> Member:
    member_id, login, media_id, telegram, vk, name, is_admin = row
    return Member(
        id=member_id,
        login=login,
        media_id=media_id,
        telegram=telegram,
        vk=vk,
        name=name,
        is_admin=is_admin,
    )


def _members_or_not_found(rows: Sequence[Sequence[Any]]) -> list[Member]:
    members = [_member_from_row(row) for row in rows]
    if not members:
        raise NotFoundError()
    return members


@dataclass
class MemberQueries:
    """Member queries against a Database."""

    db: Any

    def get_all_members(self) -> list[Member]:
        """Return every member; raise NotFoundError if there are none."""
        return _members_or_not_found(self.db.fetch_all(_GET_ALL_MEMBERS))

    def get_member(self, member_id: int) -> Member:
        """Return the member with the given id."""
        return _member_from_row(self.db.fetch_one(_GET_MEMBER, member_id))

    def get_members_by_name(self, name: str) -> list[Member]:
        """Return members whose name contains the text, case-insensitively."""
        return _members_or_not_found(self.db.fetch_all(_GET_MEMBERS_BY_NAME, f"%{name}%"))

    def post_member(self, member: Member) -> None:
        """Insert a new member."""
        self.db.execute(
            _POST_MEMBER,
            member.login,
            member.media_id,
            member.telegram,
            member.vk,
            member.name,
            member.is_admin,
        )

    def delete_member(self, member_id: int) -> None:
        """Delete a member; raise NotFoundError if it does not exist."""
        if self.db.execute(_DELETE_MEMBER, member_id) == 0:
            raise NotFoundError()

    def update_member(self, member: Member) -> None:
        """Update a member; raise NotFoundError if it does not exist."""
        affected = self.db.execute(
            _UPDATE_MEMBER,
            member.login,
            member.media_id,
            member.telegram,
            member.vk,
            member.name,
            member.is_admin,
            member.id,
        )
        if affected == 0:
            raise NotFoundError()

    def get_member_by_login(self, login: str) -> Member:
        """Return the member with the given login, password hash included."""
        member_id, user_login, hash_password, media_id, telegram, vk, name, is_admin = (
            self.db.fetch_one(_GET_MEMBER_BY_LOGIN, login)
        )
        return Member(
            id=member_id,
            login=user_login,
            hash_password=hash_password,
            media_id=media_id,
            telegram=telegram,
            vk=vk,
            name=name,
            is_admin=is_admin,
        )