import pytest

from studweb.errors import NotFoundError
from studweb.members import Member, MemberQueries


class FakeDatabase:
    def __init__(self, rows=(), rowcount=1):
        self.rows = list(rows)
        self.rowcount = rowcount
        self.calls = []

    def fetch_all(self, query, *args):
        self.calls.append((query, args))
        return list(self.rows)

    def fetch_one(self, query, *args):
        self.calls.append((query, args))
        if not self.rows:
            raise NotFoundError()
        return self.rows[0]

    def execute(self, query, *args):
        self.calls.append((query, args))
        return self.rowcount


ROW = (3, "anna", 12, "@anna", "vk.com/anna", "Anna", False)


def test_get_all_members_maps_rows():
    db = FakeDatabase(rows=[ROW, (4, "boris", 0, "", "", "Boris", True)])
    members = MemberQueries(db).get_all_members()
    assert members[0] == Member(id=3, login="anna", media_id=12, telegram="@anna",
                                vk="vk.com/anna", name="Anna", is_admin=False)
    assert [m.id for m in members] == [3, 4]
    assert members[1].is_admin is True


def test_get_all_members_empty_raises():
    with pytest.raises(NotFoundError):
        MemberQueries(FakeDatabase()).get_all_members()


def test_get_member():
    db = FakeDatabase(rows=[ROW])
    member = MemberQueries(db).get_member(3)
    assert member.login == "anna"
    assert member.hash_password == ""
    assert db.calls[0][1] == (3,)


def test_get_member_missing_raises():
    with pytest.raises(NotFoundError):
        MemberQueries(FakeDatabase()).get_member(9)


def test_get_members_by_name_uses_contains_pattern():
    db = FakeDatabase(rows=[ROW])
    members = MemberQueries(db).get_members_by_name("ann")
    assert [m.name for m in members] == ["Anna"]
    assert db.calls[0][1] == ("%ann%",)
    assert "ILIKE" in db.calls[0][0]


def test_get_members_by_name_empty_raises():
    with pytest.raises(NotFoundError):
        MemberQueries(FakeDatabase()).get_members_by_name("zzz")


def test_post_member_passes_fields_without_hash():
    db = FakeDatabase()
    member = Member(login="anna", hash_password="secret", media_id=2, telegram="t",
                    vk="v", name="Anna", is_admin=True)
    MemberQueries(db).post_member(member)
    assert db.calls[0][1] == ("anna", 2, "t", "v", "Anna", True)


def test_delete_member_missing_raises():
    with pytest.raises(NotFoundError):
        MemberQueries(FakeDatabase(rowcount=0)).delete_member(5)


def test_delete_member_passes_id():
    db = FakeDatabase(rowcount=1)
    MemberQueries(db).delete_member(5)
    assert db.calls[0][1] == (5,)


def test_update_member_puts_id_last():
    db = FakeDatabase(rowcount=1)
    MemberQueries(db).update_member(Member(id=8, login="l", media_id=1, name="N"))
    assert db.calls[0][1] == ("l", 1, "", "", "N", False, 8)


def test_update_member_missing_raises():
    with pytest.raises(NotFoundError):
        MemberQueries(FakeDatabase(rowcount=0)).update_member(Member(id=8))


def test_get_member_by_login_includes_hash():
    db = FakeDatabase(rows=[(3, "anna", "secret", 12, "@anna", "vk", "Anna", True)])
    member = MemberQueries(db).get_member_by_login("anna")
    assert member.hash_password == "secret"
    assert member.id == 3
    assert member.is_admin is True
    assert db.calls[0][1] == ("anna",)