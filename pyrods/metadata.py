"""Attribute-value-unit (AVU) metadata on data objects, collections and more."""

import posixpath
from enum import Enum

from . import genquery, message
from .containers import MetaList
from .dispatch import operation, require
from .errors import ContractViolation


class MetaTarget(Enum):
    DATA_OBJECT = "-d"
    COLLECTION = "-C"
    RESOURCE = "-R"
    USER = "-u"

    @classmethod
    def of(cls, value) -> "MetaTarget":
        if isinstance(value, cls):
            return value
        flag = value if str(value).startswith("-") else f"-{value}"
        try:
            return cls(flag)
        except ValueError:
            raise ContractViolation(f"unknown metadata target {value!r}", target=value)


DATA_META_COLUMNS = ["COL_META_DATA_ATTR_NAME", "COL_META_DATA_ATTR_VALUE",
                     "COL_META_DATA_ATTR_UNITS"]
COLL_META_COLUMNS = ["COL_META_COLL_ATTR_NAME", "COL_META_COLL_ATTR_VALUE",
                     "COL_META_COLL_ATTR_UNITS"]


def resolve_path(name, cwd=None):
    if posixpath.isabs(name) or not cwd:
        return posixpath.normpath(name)
    return posixpath.normpath(posixpath.join(cwd, name))


@operation(empty=MetaList)
def meta_dataobj(session, name, cwd=None) -> MetaList:
    """AVUs on the data object ``name``, taken relative to ``cwd`` unless absolute."""
    require(name, "name")
    coll, data = posixpath.split(resolve_path(name, cwd))
    frame = genquery.fetch_all(session, DATA_META_COLUMNS,
                               [("COL_COLL_NAME", genquery.equals(coll)),
                                ("COL_DATA_NAME", genquery.equals(data))])
    return MetaList.from_frame(frame, DATA_META_COLUMNS)


@operation(empty=MetaList)
def meta_collection(session, name, cwd=None) -> MetaList:
    require(name, "name")
    frame = genquery.fetch_all(session, COLL_META_COLUMNS,
                               [("COL_COLL_NAME", genquery.equals(resolve_path(name, cwd)))])
    return MetaList.from_frame(frame, COLL_META_COLUMNS)


def _mod_avu(session, *args):
    session.conn.request("MOD_AVU_METADATA_AN", message.mod_avu_metadata_inp(*args))


@operation()
def add_meta(session, target, path, attribute, value, units="") -> None:
    require(path, "path")
    require(attribute, "attribute")
    require(value, "value")
    _mod_avu(session, "add", MetaTarget.of(target).value, path, attribute, value, units or "")


@operation()
def mod_meta(session, target, path, old_attribute, old_value, old_units,
             new_attribute, new_value, new_units="") -> None:
    """Replace the AVU matching the old triple with the new one.

    The old units take part in the match, which is what tells apart AVUs
    sharing an attribute name.
    """
    require(path, "path")
    require(old_attribute, "old_attribute")
    require(old_value, "old_value")
    require(new_attribute, "new_attribute")
    require(new_value, "new_value")
    _mod_avu(session, "mod", MetaTarget.of(target).value, path,
             old_attribute, old_value, old_units or "",
             f"n:{new_attribute}", f"v:{new_value}", f"u:{new_units or ''}")


@operation()
def rm_meta(session, target, path, attribute, value, units="") -> None:
    require(path, "path")
    require(attribute, "attribute")
    require(value, "value")
    _mod_avu(session, "rm", MetaTarget.of(target).value, path, attribute, value, units or "")
