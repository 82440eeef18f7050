import pyrods
from pyrods.errors import ErrorKind

from .conftest import HOME, ZONE


def test_grant_read_adds_exactly_one_entry(session):
    before = set(pyrods.get_collection_acl(session, HOME).unwrap())
    assert pyrods.chmod(session, HOME, ZONE, "alice", "read").ok
    after = set(pyrods.get_collection_acl(session, HOME).unwrap())
    assert after - before == {pyrods.ACLEntry("alice", ZONE, "read object", "rodsuser")}
    assert before <= after


def test_null_removes_grant(session):
    pyrods.chmod(session, HOME, ZONE, "alice", "write")
    assert pyrods.chmod(session, HOME, ZONE, "alice", "null").ok
    names = [e.name for e in pyrods.get_collection_acl(session, HOME).unwrap()]
    assert names == ["rods"]


def test_recursive_grant(session, catalog):
    catalog.add_data_object(f"{HOME}/inner", b"")
    assert pyrods.chmod(session, HOME, None, "bob", "own", recursive=True).ok
    data_id = catalog.data[f"{HOME}/inner"]["id"]
    acl = pyrods.get_dataobject_acl(session, data_id).unwrap()
    assert pyrods.ACLEntry("bob", ZONE, "own", "rodsuser") in acl


def test_grant_without_ownership(alice):
    result = pyrods.chmod(alice, HOME, ZONE, "alice", "own")
    assert result.error.kind is ErrorKind.REMOTE
    assert result.error.status == -818000


def test_unknown_user(session):
    result = pyrods.chmod(session, HOME, ZONE, "mallory", "read")
    assert result.error.kind is ErrorKind.REMOTE
    assert "mallory" in result.error.message


def test_name_required_unless_inheritance(server, session):
    before = len(server.requests)
    assert pyrods.chmod(session, HOME, ZONE, "", "read").error.kind is ErrorKind.CONTRACT
    assert len(server.requests) == before
    assert pyrods.chmod(session, HOME, ZONE, None, "noinherit").ok
