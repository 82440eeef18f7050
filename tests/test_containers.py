import xml.etree.ElementTree as ET

import pandas as pd
import pytest

from pyrods.containers import (
    ACLEntry,
    ACLList,
    MetaEntry,
    MetaList,
    PathList,
    StringList,
    frame_from_gen_query,
    marshal,
    release,
)

GEN_QUERY_OUT = """
<GenQueryOut_PI>
  <rowCnt>2</rowCnt><attriCnt>2</attriCnt><continueInx>0</continueInx><totalRowCount>2</totalRowCount>
  <SqlResult_PI><attriInx>600</attriInx><reslen>32</reslen><value>colour</value><value>size</value></SqlResult_PI>
  <SqlResult_PI><attriInx>601</attriInx><reslen>32</reslen><value>red</value><value>12</value></SqlResult_PI>
</GenQueryOut_PI>
"""


def test_frame_from_gen_query_names_columns():
    frame = frame_from_gen_query(ET.fromstring(GEN_QUERY_OUT))
    assert list(frame.columns) == ["COL_META_DATA_ATTR_NAME", "COL_META_DATA_ATTR_VALUE"]
    assert frame["COL_META_DATA_ATTR_VALUE"].tolist() == ["red", "12"]


def test_frame_from_empty_reply():
    assert len(frame_from_gen_query(None)) == 0


def test_missing_column_leaves_field_empty():
    frame = frame_from_gen_query(ET.fromstring(GEN_QUERY_OUT))
    metas = MetaList.from_frame(frame, ["COL_META_DATA_ATTR_NAME", "COL_META_DATA_ATTR_VALUE",
                                        "COL_META_DATA_ATTR_UNITS"])
    assert metas.count == 2
    assert metas[0] == MetaEntry("colour", "red", "")
    assert metas[1] == MetaEntry("size", "12", "")


def test_null_cells_become_empty_strings():
    frame = pd.DataFrame({"a": ["x", None], "b": [float("nan"), "y"]})
    assert marshal(frame, ["a", "b"], lambda a, b: (a, b)) == (("x", ""), ("", "y"))


def test_container_is_independent_of_frame():
    frame = pd.DataFrame({"COL_COLL_NAME": ["/z/a", "/z/b"]}, dtype=object)
    paths = PathList.from_frame(frame, ["COL_COLL_NAME"])
    frame.loc[0, "COL_COLL_NAME"] = "/changed"
    del frame
    assert list(paths) == ["/z/a", "/z/b"]


def test_count_tracks_entries():
    empty = StringList()
    assert empty.count == 0 and empty.entries == ()
    names = StringList(["a", "b", "c"])
    assert names.count == len(names.entries) == 3


def test_release_is_idempotent():
    acl = ACLList([ACLEntry("rods", "tempZone", "own", "rodsadmin")])
    acl.release()
    assert acl.count == 0
    assert acl.entries == ()
    acl.release()
    release(acl)
    release(None)
    assert acl.count == 0


def test_scope_exit_releases():
    with StringList(["a"]) as names:
        assert names.count == 1
    assert names.count == 0


def test_equality_is_per_kind():
    assert StringList(["a"]) == StringList(["a"])
    assert StringList(["a"]) != PathList(["a"])


def test_entries_are_immutable():
    entry = MetaEntry("a", "v", "u")
    with pytest.raises(AttributeError):
        entry.name = "b"


def test_containers_are_unhashable():
    with pytest.raises(TypeError):
        hash(StringList(["a"]))
    with pytest.raises(TypeError):
        {PathList(["/z/a"])}
