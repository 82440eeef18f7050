import pytest

import pyrods
from pyrods.errors import ContractViolation, ErrorKind
from pyrods.query import metadata_conditions

from .conftest import HOME


@pytest.fixture
def tagged(session, catalog):
    for name, study in (("a.dat", "ABC"), ("b.dat", "ABC"), ("c.dat", "XYZ")):
        path = f"{HOME}/{name}"
        catalog.add_data_object(path, b"")
        pyrods.add_meta(session, "d", path, "study", study).unwrap()
    pyrods.add_meta(session, "d", f"{HOME}/a.dat", "size", "2000").unwrap()
    pyrods.add_meta(session, "C", HOME, "study", "ABC").unwrap()


def test_query_dataobj(session, tagged):
    paths = pyrods.query_dataobj(session, "study = ABC").unwrap()
    assert sorted(paths) == [f"{HOME}/a.dat", f"{HOME}/b.dat"]


def test_query_dataobj_and(session, tagged):
    paths = pyrods.query_dataobj(session, "study = ABC and size '>' 1000").unwrap()
    assert list(paths) == [f"{HOME}/a.dat"]


def test_query_like(session, tagged):
    paths = pyrods.query_dataobj(session, "study like '%Z'").unwrap()
    assert list(paths) == [f"{HOME}/c.dat"]


def test_query_collection(session, tagged):
    assert list(pyrods.query_collection(session, "study = ABC").unwrap()) == [HOME]


def test_no_match_is_empty(session, tagged):
    result = pyrods.query_collection(session, "study = nothing")
    assert result.ok
    assert result.value.count == 0


def test_malformed_query(server, session):
    before = len(server.requests)
    for query in ("study =", "study = ABC or x = y", "study = 'unterminated"):
        result = pyrods.query_dataobj(session, query)
        assert result.error.kind is ErrorKind.CONTRACT
        assert result.value == pyrods.PathList()
    assert len(server.requests) == before


def test_metadata_conditions():
    assert metadata_conditions("a = 'b c'", "600", "601") == [
        ("600", "= 'a'"), ("601", "= 'b c'")]
    with pytest.raises(ContractViolation):
        metadata_conditions("a = b and", "600", "601")


def test_single_quote_is_rejected(server, session):
    before = len(server.requests)
    result = pyrods.query_dataobj(session, "study = \"it's\"")
    assert result.error.kind is ErrorKind.CONTRACT
    assert pyrods.get_user(session, "o'brien").error.kind is ErrorKind.CONTRACT
    assert len(server.requests) == before
