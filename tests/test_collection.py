import pyrods
from pyrods.errors import ErrorKind

from .conftest import HOME


def _listing(session, path):
    handle = pyrods.open_collection(session, path).unwrap()
    batches = []
    while True:
        batch = pyrods.read_collection(session, handle).unwrap()
        if batch.count == 0:
            break
        batches.append(batch)
    assert pyrods.close_collection(session, handle).ok
    return batches


def test_paged_read_returns_each_entry_once(session, catalog):
    for i in range(3):
        catalog.add_collection(f"{HOME}/sub{i}", "rods")
    for i in range(300):
        catalog.add_data_object(f"{HOME}/file{i:03}.txt", b"x")

    batches = _listing(session, HOME)
    assert len(batches) > 1
    paths = [entry.path for batch in batches for entry in batch]
    assert len(paths) == len(set(paths)) == 303
    assert paths[:3] == [f"{HOME}/sub0", f"{HOME}/sub1", f"{HOME}/sub2"]
    assert set(paths[3:]) == {f"{HOME}/file{i:03}.txt" for i in range(300)}


def test_replicas_are_listed_once(session, catalog):
    catalog.add_data_object(f"{HOME}/replicated", b"abc", replicas=3)
    entries = [e for batch in _listing(session, HOME) for e in batch]
    assert [e.data_name for e in entries] == ["replicated"]
    assert entries[0].obj_type == "dataobject"
    assert entries[0].size == "3"


def test_empty_collection_reads_empty_batch(session):
    handle = pyrods.open_collection(session, HOME).unwrap()
    assert pyrods.read_collection(session, handle).unwrap().count == 0
    assert pyrods.read_collection(session, handle).unwrap().count == 0
    pyrods.close_collection(session, handle)


def test_close_mid_listing_drops_server_query(server, session, catalog):
    for i in range(300):
        catalog.add_data_object(f"{HOME}/f{i}", b"")
    handle = pyrods.open_collection(session, HOME).unwrap()
    assert pyrods.read_collection(session, handle).unwrap().count == 256
    assert pyrods.close_collection(session, handle).ok
    assert server.closed_queries == 1


def test_closed_handle_is_rejected(server, session):
    handle = pyrods.open_collection(session, HOME).unwrap()
    pyrods.close_collection(session, handle)
    before = len(server.requests)

    result = pyrods.read_collection(session, handle)
    assert result.error.kind is ErrorKind.CONTRACT
    assert result.value.count == 0
    assert pyrods.close_collection(session, handle).error.kind is ErrorKind.CONTRACT
    assert len(server.requests) == before


def test_collection_handle_is_not_a_data_object_handle(session):
    handle = pyrods.open_collection(session, HOME).unwrap()
    result = pyrods.read_dataobject(session, handle, 10)
    assert result.error.kind is ErrorKind.CONTRACT
    assert result.value == b""


def test_handle_from_another_session(server, session, alice):
    handle = pyrods.open_collection(session, HOME).unwrap()
    assert pyrods.read_collection(alice, handle).error.kind is ErrorKind.CONTRACT


def test_open_data_object_as_collection(session, catalog):
    catalog.add_data_object(f"{HOME}/plain", b"")
    result = pyrods.open_collection(session, f"{HOME}/plain")
    assert result.error.kind is ErrorKind.REMOTE
    assert result.value is None


def test_open_missing_collection(session):
    result = pyrods.open_collection(session, f"{HOME}/missing")
    assert result.error.kind is ErrorKind.REMOTE
    assert result.error.status == -310000


def test_create_collection(session, catalog):
    assert pyrods.create_collection(session, f"{HOME}/new").ok
    assert f"{HOME}/new" in catalog.collections

    result = pyrods.create_collection(session, f"{HOME}/a/b/c")
    assert result.error.kind is ErrorKind.REMOTE
    assert pyrods.create_collection(session, f"{HOME}/a/b/c", recursive=True).ok
    assert f"{HOME}/a/b" in catalog.collections


def test_collection_acl(session):
    acl = pyrods.get_collection_acl(session, HOME).unwrap()
    assert list(acl) == [pyrods.ACLEntry("rods", "tempZone", "own", "rodsadmin")]


def test_collection_inheritance(session):
    assert pyrods.get_collection_inheritance(session, HOME).unwrap() is False
    pyrods.chmod(session, HOME, None, None, "inherit")
    assert pyrods.get_collection_inheritance(session, HOME).unwrap() is True
    assert pyrods.get_collection_inheritance(session, "/nowhere").error.kind is ErrorKind.REMOTE


def test_rm_collection(session, catalog):
    catalog.add_collection(f"{HOME}/full", "rods")
    catalog.add_data_object(f"{HOME}/full/a", b"1")
    catalog.add_data_object(f"{HOME}/full/b", b"2")

    result = pyrods.rm(session, f"{HOME}/full", True)
    assert result.error.kind is ErrorKind.REMOTE
    assert f"{HOME}/full/a" in catalog.data

    assert pyrods.rm(session, f"{HOME}/full", True, recursive=True, force=True).ok
    assert f"{HOME}/full" not in catalog.collections
    assert f"{HOME}/full/a" not in catalog.data
    ## The session is still usable after the interim status exchange
    assert pyrods.get_groups(session).ok
