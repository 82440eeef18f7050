"""Access control: granting levels and reading ACL lists."""

from . import genquery, message
from .containers import ACLList
from .dispatch import operation, require

ACCESS_LEVELS = ("null", "read", "write", "own", "inherit", "noinherit")


def acl_query(session, key_column, key, zone_hint, columns) -> ACLList:
    frame = genquery.fetch_all(session, columns, [(key_column, genquery.equals(key))],
                               zone_hint=zone_hint)
    return ACLList.from_frame(frame, columns)


@operation()
def chmod(session, path, zone, name, access_level, recursive=False) -> None:
    """Set ``access_level`` for user or group ``name`` on ``path``.

    ``inherit``/``noinherit`` toggle inheritance on a collection and ignore
    ``name``.
    """
    require(path, "path")
    require(access_level, "access_level")
    if access_level not in ("inherit", "noinherit"):
        require(name, "name")
    session.conn.request("MOD_ACCESS_CONTROL_AN",
                         message.mod_access_control_inp(recursive, access_level, name or "",
                                                        zone or "", path))
