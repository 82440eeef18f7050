"""pyrods: a thin client for iRODS.

Open a session, call one operation at a time, read the ``Result``::

    import pyrods

    session = pyrods.connect("irods.example.org", 1247, "rods", "tempZone", "secret").unwrap()
    with pyrods.get_groups(session).unwrap() as groups:
        for name in groups:
            print(name)
    session.disconnect()

Every operation returns a :class:`pyrods.Result`; ordinary server failures
are reported through ``Result.error`` rather than raised. A session must
only be used by one thread at a time.
"""

from .acl import ACCESS_LEVELS, chmod
from .admin import general_admin, set_session_ticket
from .catalog import O_APPEND, O_RDONLY, O_RDWR, O_WRONLY, SEEK_CUR, SEEK_END, SEEK_SET
from .collection import (
    close_collection,
    create_collection,
    get_collection_acl,
    get_collection_inheritance,
    open_collection,
    read_collection,
)
from .config import (
    IrodsEnvironment,
    environment_fields,
    environment_string,
    load_environment,
    load_password,
)
from .containers import (
    ACLEntry,
    ACLList,
    CollectionEntry,
    EntryList,
    MetaEntry,
    MetaList,
    PathList,
    ResultContainer,
    StringList,
    release,
)
from .dataobject import (
    ObjStat,
    checksum_dataobject,
    close_dataobject,
    copy_dataobject,
    create_dataobject,
    get_dataobject_acl,
    lseek_dataobject,
    move_dataobject,
    open_dataobject,
    read_dataobject,
    rm,
    stat_dataobject,
    unlink_dataobject,
    write_dataobject,
)
from .errors import (
    ConfigurationError,
    ConnectionFailure,
    ContractViolation,
    ErrorKind,
    RemoteError,
    ResourceExhausted,
    Result,
    RodsError,
)
from .metadata import MetaTarget, add_meta, meta_collection, meta_dataobj, mod_meta, rm_meta
from .query import query_collection, query_dataobj
from .session import CollectionHandle, DataObjectHandle, Handle, Session, connect, connect_env
from .users import (
    USER_FIELDS,
    add_user_to_group,
    get_group,
    get_groups,
    get_user,
    get_user_groups,
    get_users,
    remove_user_from_group,
)

__version__ = "0.1.0"
