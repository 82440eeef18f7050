"""Result containers and the helpers that fill and release them.

Query replies arrive as ``GenQueryOut_PI`` tables: one ``SqlResult_PI`` per
selected column, each holding that column's values for every row. They are
read into a pandas DataFrame first and then copied, row by row, into one of
the owned containers below. Nothing in a container refers back to the
frame or the reply it came from.
"""

from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Sequence

import pandas as pd

from .catalog import CATALOG_REVERSE_INDEX_TABLE


@dataclass(frozen=True)
class MetaEntry:
    name: str
    value: str
    units: str


@dataclass(frozen=True)
class ACLEntry:
    name: str
    zone: str
    access_level: str
    acl_type: str


@dataclass(frozen=True)
class CollectionEntry:
    obj_type: str
    coll_name: str
    data_name: str = ""
    data_id: str = ""
    size: str = ""
    owner: str = ""
    create_time: str = ""
    modify_time: str = ""
    checksum: str = ""

    @property
    def path(self) -> str:
        if self.data_name:
            return f"{self.coll_name.rstrip('/')}/{self.data_name}"
        return self.coll_name


def frame_from_gen_query(gqr) -> pd.DataFrame:
    if gqr is None:
        return pd.DataFrame()
    ## Each SqlResult_PI is a column of data.
    ## We can safely ignore the "reslen" attribute since the XML
    ## API already knows how large each string is.
    data = {}
    for result in gqr.findall("SqlResult_PI"):
        attri_inx = result.findtext("attriInx")
        if attri_inx == "0":
            continue
        col = [value.text or "" for value in result.findall("value")]
        data[CATALOG_REVERSE_INDEX_TABLE.get(attri_inx, attri_inx)] = col
    return pd.DataFrame(data, dtype=object)


def _column(frame: pd.DataFrame, name: str) -> list:
    if name not in frame.columns:
        return [""] * len(frame)
    return ["" if pd.isna(v) else str(v) for v in frame[name].tolist()]


def marshal(frame: pd.DataFrame, columns: Sequence[str], build: Callable) -> tuple:
    """Build one entry per row of ``frame`` from the named ``columns``.

    A column the frame lacks yields ``""`` for that field in every row.
    """
    cells = [_column(frame, name) for name in columns]
    if not cells:
        return ()
    return tuple(build(*values) for values in zip(*cells))


class ResultContainer:
    """An owned, ordered snapshot of query results.

    ``count`` always equals the number of entries. ``release()`` empties the
    container and may be called any number of times; leaving a ``with``
    block calls it.
    """

    entry_type: Callable = str

    __slots__ = ("_entries",)

    def __init__(self, entries: Iterable = ()):
        self._entries = tuple(entries)

    @classmethod
    def from_frame(cls, frame: pd.DataFrame, columns: Sequence[str],
                   build: Optional[Callable] = None):
        return cls(marshal(frame, columns, build or cls.entry_type))

    @property
    def count(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> tuple:
        return self._entries

    def release(self) -> None:
        self._entries = ()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.release()

    def __len__(self):
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)

    def __getitem__(self, index):
        return self._entries[index]

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self._entries == other._entries

    ## Mutable through release()
    __hash__ = None

    def __repr__(self):
        return f"{type(self).__name__}(count={self.count}, entries={list(self._entries)!r})"


class StringList(ResultContainer):
    __slots__ = ()


class PathList(ResultContainer):
    __slots__ = ()


class MetaList(ResultContainer):
    __slots__ = ()
    entry_type = MetaEntry


class ACLList(ResultContainer):
    __slots__ = ()
    entry_type = ACLEntry


class EntryList(ResultContainer):
    __slots__ = ()
    entry_type = CollectionEntry


def release(container: Optional[ResultContainer]) -> None:
    if container is not None:
        container.release()
