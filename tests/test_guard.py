import pytest

from studweb.errors import NotFoundError
from studweb.guard import GuardQueries
from studweb.members import Member


class FakeDatabase:
    def __init__(self, rows=()):
        self.rows = list(rows)
        self.calls = []

    def fetch_one(self, query, *args):
        self.calls.append((query, args))
        if not self.rows:
            raise NotFoundError()
        return self.rows[0]


def test_add_member_returns_new_id():
    db = FakeDatabase(rows=[(17,)])
    member = Member(login="anna", hash_password="secret", name="Anna",
                    telegram="@anna", vk="vk", media_id=4)
    assert GuardQueries(db).add_member(member) == 17
    query, args = db.calls[0]
    assert args == ("anna", "secret", "Anna", "@anna", "vk", 4)
    assert "RETURNING id" in query


def test_get_member_hash():
    db = FakeDatabase(rows=[("secret",)])
    assert GuardQueries(db).get_member_hash("anna") == "secret"
    assert db.calls[0][1] == ("anna",)


def test_get_member_hash_unknown_login_raises():
    with pytest.raises(NotFoundError):
        GuardQueries(FakeDatabase()).get_member_hash("nobody")