"""Data objects: streaming I/O through handles, plus whole-object operations.

Open modes and seek origins follow their POSIX counterparts (``O_RDONLY``,
``O_WRONLY``, ``O_RDWR``, ``O_APPEND``; ``SEEK_SET``, ``SEEK_CUR``,
``SEEK_END``). The handle index is the L1 descriptor the server hands back
from an open or create, an opaque handle to the replica being streamed.
"""

import logging
from dataclasses import dataclass

from . import message
from .acl import acl_query
from .catalog import (
    COPY_DEST,
    COPY_SRC,
    O_RDONLY,
    O_RDWR,
    RENAME_DATA_OBJ,
    SEEK_END,
    SEEK_SET,
)
from .containers import ACLList
from .dispatch import operation, require
from .errors import ContractViolation
from .session import DataObjectHandle

logger = logging.getLogger(__name__)


## #define RodsObjStat_PI "double objSize; int objType; int dataMode; str dataId[NAME_LEN]; \
## str chksum[NAME_LEN]; str ownerName[NAME_LEN]; str ownerZone[NAME_LEN]; \
## str createTime[TIME_LEN]; str modifyTime[TIME_LEN]; struct *SpecColl_PI;"
@dataclass(frozen=True)
class ObjStat:
    size: int
    obj_type: int
    data_mode: int
    data_id: str
    checksum: str
    owner_name: str
    owner_zone: str
    create_time: str
    modify_time: str


def obj_stat(session, path) -> ObjStat:
    reply = session.conn.request("OBJ_STAT_AN", message.data_obj_inp(path))
    m = reply.body
    return ObjStat(
        size=int(float(m.findtext("objSize") or 0)),
        obj_type=int(m.findtext("objType") or 0),
        data_mode=int(m.findtext("dataMode") or 0),
        data_id=m.findtext("dataId") or "",
        checksum=m.findtext("chksum") or "",
        owner_name=m.findtext("ownerName") or "",
        owner_zone=m.findtext("ownerZone") or "",
        create_time=m.findtext("createTime") or "",
        modify_time=m.findtext("modifyTime") or "",
    )


def _l1_descriptor(session, handle) -> int:
    session.resolve(handle, DataObjectHandle)
    return handle.index


@operation()
def open_dataobject(session, path, open_flags=O_RDONLY) -> DataObjectHandle:
    require(path, "path")
    reply = session.conn.request(
        "DATA_OBJ_OPEN_AN",
        ## We're getting the data from somewhere else,
        ## so we don't know how big it is
        message.data_obj_inp(path, open_flags=open_flags, data_size=-1))
    return session.register(DataObjectHandle, reply.int_info, path)


@operation()
def create_dataobject(session, path, size=0, mode=0o750, force=False,
                      resource=None) -> DataObjectHandle:
    require(path, "path")
    cond_input = {"dataType": "generic"}
    if force:
        ## Keys with empty values in cond_input act as flags
        cond_input["forceFlag"] = ""
    if resource:
        cond_input["destRescName"] = resource
    reply = session.conn.request(
        "DATA_OBJ_CREATE_AN",
        message.data_obj_inp(path, create_mode=mode, open_flags=O_RDWR,
                             data_size=size, cond_input=cond_input))
    return session.register(DataObjectHandle, reply.int_info, path)


@operation(empty=bytes)
def read_dataobject(session, handle, length) -> bytes:
    """Read up to ``length`` bytes; ``b""`` means the end of the object."""
    l1 = _l1_descriptor(session, handle)
    if not isinstance(length, int) or length < 0:
        raise ContractViolation(f"invalid read length {length!r}", length=length)
    ## The len parameter tells the server how many bytes to stream back
    reply = session.conn.request("DATA_OBJ_READ_AN", message.opened_data_obj_inp(l1, len_=length))
    return reply.bs[:reply.int_info]


@operation()
def write_dataobject(session, handle, data) -> int:
    l1 = _l1_descriptor(session, handle)
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise ContractViolation(f"data must be bytes-like, got {type(data).__name__}",
                                argument="data")
    data = bytes(data)
    reply = session.conn.request("DATA_OBJ_WRITE_AN",
                                 message.opened_data_obj_inp(l1, len_=len(data)),
                                 bs_buf=data)
    return reply.int_info


@operation()
def lseek_dataobject(session, handle, offset, whence=SEEK_SET) -> int:
    """Move the handle's cursor; returns the new absolute offset."""
    l1 = _l1_descriptor(session, handle)
    if whence not in range(SEEK_SET, SEEK_END + 1):
        raise ContractViolation(f"invalid whence {whence!r}", whence=whence)
    ## #define FileLseekOut_PI "double offset;"
    reply = session.conn.request("DATA_OBJ_LSEEK_AN",
                                 message.opened_data_obj_inp(l1, whence=whence, offset=offset))
    return int(float(reply.body.findtext("offset")))


@operation()
def close_dataobject(session, handle) -> None:
    l1 = _l1_descriptor(session, handle)
    try:
        session.conn.request("DATA_OBJ_CLOSE_AN", message.opened_data_obj_inp(l1))
    finally:
        session.forget(handle)


@operation()
def stat_dataobject(session, path) -> ObjStat:
    require(path, "path")
    return obj_stat(session, path)


@operation()
def copy_dataobject(session, source, destination) -> None:
    require(source, "source")
    require(destination, "destination")
    session.conn.request("DATA_OBJ_COPY_AN",
                         message.data_obj_copy_inp(source, destination, COPY_SRC, COPY_DEST))


@operation()
def move_dataobject(session, source, destination) -> None:
    require(source, "source")
    require(destination, "destination")
    session.conn.request("DATA_OBJ_RENAME_AN",
                         message.data_obj_copy_inp(source, destination,
                                                   RENAME_DATA_OBJ, RENAME_DATA_OBJ))


def _unlink(session, path, force):
    session.conn.request("DATA_OBJ_UNLINK_AN",
                         message.data_obj_inp(path, cond_input={"forceFlag": ""} if force else {}))


@operation()
def unlink_dataobject(session, path, force=False) -> None:
    require(path, "path")
    _unlink(session, path, force)


@operation()
def checksum_dataobject(session, path) -> str:
    require(path, "path")
    reply = session.conn.request("DATA_OBJ_CHKSUM_AN", message.data_obj_inp(path))
    ## #define STR_PI "str myStr;"
    return reply.body.findtext("myStr") or ""


@operation()
def rm(session, path, is_collection, recursive=False, force=False) -> None:
    """Remove a data object or a collection.

    Without ``recursive`` the server refuses to remove a non-empty
    collection; ``force`` skips the trash.
    """
    require(path, "path")
    if not is_collection:
        _unlink(session, path, force)
        return
    cond_input = {}
    if recursive:
        cond_input["recursiveOpr"] = ""
    if force:
        cond_input["forceFlag"] = ""
    session.conn.request("RM_COLL_AN", message.coll_inp(path, cond_input=cond_input))


@operation(empty=ACLList)
def get_dataobject_acl(session, data_id, zone_hint=None) -> ACLList:
    require(data_id, "data_id")
    return acl_query(session, "COL_DATA_ACCESS_DATA_ID", str(data_id), zone_hint,
                     ["COL_USER_NAME", "COL_USER_ZONE", "COL_DATA_ACCESS_NAME", "COL_USER_TYPE"])
