"""Collections: paged listing through handles, creation, ACLs, inheritance."""

import logging

from . import genquery, message
from .acl import acl_query
from .catalog import CAT_NO_ROWS_FOUND, COLL_OBJ_T
from .containers import ACLList, CollectionEntry, EntryList
from .dataobject import obj_stat
from .dispatch import operation, require
from .errors import RemoteError
from .session import CollectionHandle

logger = logging.getLogger(__name__)

SUB_COLLECTION_COLUMNS = [
    "COL_COLL_NAME",
    "COL_COLL_OWNER_NAME",
    "COL_COLL_CREATE_TIME",
    "COL_COLL_MODIFY_TIME",
]

DATA_OBJECT_COLUMNS = [
    "COL_DATA_NAME",
    "COL_D_DATA_ID",
    "COL_DATA_SIZE",
    "COL_D_OWNER_NAME",
    "COL_D_CREATE_TIME",
    "COL_D_MODIFY_TIME",
    "COL_D_DATA_CHECKSUM",
]


class CollectionCursor:
    """Where an open collection's listing has got to.

    Sub-collections are listed first, then data objects. Each phase is one
    catalog query read a page at a time.
    """

    COLLECTIONS, DATA_OBJECTS, DONE = range(3)

    def __init__(self, path):
        self.path = path
        self.phase = self.COLLECTIONS
        self.continue_inx = 0
        self.seen_ids = set()

    def query(self):
        if self.phase == self.COLLECTIONS:
            return SUB_COLLECTION_COLUMNS, [("COL_COLL_PARENT_NAME", genquery.equals(self.path))]
        return DATA_OBJECT_COLUMNS, [("COL_COLL_NAME", genquery.equals(self.path))]

    def entries(self, frame):
        if self.phase == self.COLLECTIONS:
            entries = EntryList.from_frame(frame, SUB_COLLECTION_COLUMNS, build=self._collection)
            ## The root collection is its own parent
            return [e for e in entries if e.coll_name != self.path]
        entries = []
        ## One row per replica; keep the first
        for e in EntryList.from_frame(frame, DATA_OBJECT_COLUMNS, build=self._data_object):
            if e.data_id not in self.seen_ids:
                self.seen_ids.add(e.data_id)
                entries.append(e)
        return entries

    def _collection(self, name, owner, created, modified):
        return CollectionEntry("collection", name, owner=owner,
                               create_time=created, modify_time=modified)

    def _data_object(self, name, data_id, size, owner, created, modified, checksum):
        return CollectionEntry("dataobject", self.path, data_name=name, data_id=data_id,
                               size=size, owner=owner, create_time=created,
                               modify_time=modified, checksum=checksum)


@operation()
def open_collection(session, path) -> CollectionHandle:
    require(path, "path")
    path = path.rstrip("/") or "/"
    stat = obj_stat(session, path)
    if stat.obj_type != COLL_OBJ_T:
        raise RemoteError(f"{path} is not a collection", path=path)
    return session.register(CollectionHandle, session.next_collection_index(),
                            CollectionCursor(path))


@operation(empty=EntryList)
def read_collection(session, handle) -> EntryList:
    """Return the next page of the listing; an empty page means the end."""
    cursor = session.resolve(handle, CollectionHandle)
    while cursor.phase != CollectionCursor.DONE:
        select, conditions = cursor.query()
        frame, cursor.continue_inx = genquery.fetch_page(session, select, conditions,
                                                         cursor.continue_inx)
        entries = cursor.entries(frame)
        if not cursor.continue_inx:
            cursor.phase += 1
        if entries:
            return EntryList(entries)
    return EntryList()


@operation()
def close_collection(session, handle) -> None:
    cursor = session.resolve(handle, CollectionHandle)
    try:
        if cursor.phase != CollectionCursor.DONE:
            select, conditions = cursor.query()
            genquery.close_query(session, select, conditions, cursor.continue_inx)
    finally:
        session.forget(handle)


@operation()
def create_collection(session, path, recursive=False) -> None:
    require(path, "path")
    cond_input = {"recursiveOpr": ""} if recursive else {}
    session.conn.request("COLL_CREATE_AN", message.coll_inp(path, cond_input=cond_input))


@operation(empty=ACLList)
def get_collection_acl(session, path, zone_hint=None) -> ACLList:
    require(path, "path")
    return acl_query(session, "COL_COLL_NAME", path, zone_hint,
                     ["COL_COLL_USER_NAME", "COL_COLL_USER_ZONE",
                      "COL_COLL_ACCESS_NAME", "COL_USER_TYPE"])


@operation()
def get_collection_inheritance(session, path) -> bool:
    require(path, "path")
    frame = genquery.fetch_all(session, ["COL_COLL_INHERITANCE"],
                               [("COL_COLL_NAME", genquery.equals(path))])
    if not len(frame):
        raise RemoteError(f"collection {path} does not exist", status=CAT_NO_ROWS_FOUND,
                          path=path)
    return frame["COL_COLL_INHERITANCE"].iloc[0] == "1"
