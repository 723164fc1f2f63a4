"""Queries used by authentication: registration and password hashes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .members import Member

_ADD_MEMBER = (
    "INSERT INTO member (login, hash_password, name, telegram, vk, media_id) "
    "VALUES ($1, $2, $3, $4, $5, $6) RETURNING id"
)
_GET_MEMBER_HASH = "SELECT hash_password FROM member WHERE login = $1"


@dataclass
class GuardQueries:
    """Authentication queries against a Database."""

    db: Any

    def add_member(self, member: Member) -> int:
        """Insert a member with its password hash and return the new id."""
        (member_id,) = self.db.fetch_one(
            _ADD_MEMBER,
            member.login,
            member.hash_password,
            member.name,
            member.telegram,
            member.vk,
            member.media_id,
        )
        return member_id

    def get_member_hash(self, login: str) -> str:
        """Return the stored password hash for a login."""
        (hash_password,) = self.db.fetch_one(_GET_MEMBER_HASH, login)
        return hash_password