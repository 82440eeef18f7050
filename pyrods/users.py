"""Users, groups and group membership."""

from . import genquery
from .admin import general_admin_request
from .catalog import CAT_NO_ROWS_FOUND
from .containers import StringList, marshal
from .dispatch import operation, require
from .errors import RemoteError

## Order of the values returned by get_user
USER_FIELDS = (
    "COL_USER_NAME",
    "COL_USER_ID",
    "COL_USER_TYPE",
    "COL_USER_ZONE",
    "COL_USER_INFO",
    "COL_USER_COMMENT",
    "COL_USER_CREATE_TIME",
    "COL_USER_MODIFY_TIME",
)

GROUP_TYPE = "rodsgroup"


def _qualified(name, zone):
    return f"{name}#{zone}"


@operation(empty=StringList)
def get_groups(session) -> StringList:
    frame = genquery.fetch_all(session, ["COL_USER_NAME"],
                               [("COL_USER_TYPE", genquery.equals(GROUP_TYPE))])
    return StringList.from_frame(frame, ["COL_USER_NAME"])


@operation(empty=StringList)
def get_group(session, group_name) -> StringList:
    """Members of ``group_name`` as ``user#zone`` strings."""
    require(group_name, "group_name")
    frame = genquery.fetch_all(
        session, ["COL_USER_NAME", "COL_USER_ZONE"],
        [("COL_USER_GROUP_NAME", genquery.equals(group_name)),
         ("COL_USER_TYPE", f"<> {genquery.quote(GROUP_TYPE)}")])
    return StringList.from_frame(frame, ["COL_USER_NAME", "COL_USER_ZONE"], build=_qualified)


@operation(empty=StringList)
def get_users(session) -> StringList:
    frame = genquery.fetch_all(session, ["COL_USER_NAME", "COL_USER_ZONE"],
                               [("COL_USER_TYPE", f"<> {genquery.quote(GROUP_TYPE)}")])
    return StringList.from_frame(frame, ["COL_USER_NAME", "COL_USER_ZONE"], build=_qualified)


@operation(empty=StringList)
def get_user(session, user_name) -> StringList:
    """Catalog fields for one user, in ``USER_FIELDS`` order."""
    require(user_name, "user_name")
    frame = genquery.fetch_all(session, USER_FIELDS,
                               [("COL_USER_NAME", genquery.equals(user_name))])
    if not len(frame):
        raise RemoteError(f"user {user_name} does not exist", status=CAT_NO_ROWS_FOUND,
                          user=user_name)
    return StringList(marshal(frame.head(1), USER_FIELDS, lambda *values: values)[0])


@operation(empty=StringList)
def get_user_groups(session, user_name) -> StringList:
    require(user_name, "user_name")
    frame = genquery.fetch_all(session, ["COL_USER_GROUP_NAME"],
                               [("COL_USER_NAME", genquery.equals(user_name))])
    groups = StringList.from_frame(frame, ["COL_USER_GROUP_NAME"])
    ## Every user is listed as a member of its own personal group
    return StringList(g for g in groups if g != user_name)


@operation()
def add_user_to_group(session, user_name, zone_name, group_name) -> None:
    require(user_name, "user_name")
    require(group_name, "group_name")
    general_admin_request(session, "modify", "group", group_name, "add",
                          user_name, "", zone_name or session.zone)


@operation()
def remove_user_from_group(session, user_name, zone_name, group_name) -> None:
    require(user_name, "user_name")
    require(group_name, "group_name")
    general_admin_request(session, "modify", "group", group_name, "remove",
                          user_name, "", zone_name or session.zone)
