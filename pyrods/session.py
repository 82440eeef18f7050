"""Sessions, handles and the two ways of connecting.

A :class:`Session` owns one authenticated socket. It is not thread safe:
callers that share a session between threads must serialise access to it
themselves. Handles returned by the open operations are tokens checked
against the session's registry of open resources, so a closed, foreign or
wrong-kind handle is rejected before anything is sent to the server.
"""

import itertools
import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Dict, Optional, Tuple

from . import config
from .connection import Connection
from .errors import (
    ConfigurationError,
    ConnectionFailure,
    ContractViolation,
    RemoteError,
    Result,
)

logger = logging.getLogger(__name__)


class HandleKind(Enum):
    COLLECTION = "collection"
    DATA_OBJECT = "data object"


@dataclass(frozen=True)
class Handle:
    kind: ClassVar[HandleKind]

    index: int
    session_id: int
    ## The server reuses descriptor numbers; the serial tells one open apart from the next
    serial: int


class CollectionHandle(Handle):
    kind = HandleKind.COLLECTION


class DataObjectHandle(Handle):
    kind = HandleKind.DATA_OBJECT


class Session:

    _ids = itertools.count(1)

    def __init__(self, conn: Connection, host: str, port: int, zone: str, username: str):
        self.id = next(Session._ids)
        self.host = host
        self.port = port
        self.zone = zone
        self.username = username
        self.connected = True
        self._conn = conn
        self._resources: Dict[Tuple[HandleKind, int], Tuple[int, Any]] = {}
        self._next_collection = itertools.count(1)
        self._serials = itertools.count(1)

    def __str__(self):
        return f"Host: {self.username}@{self.host}:{self.port}/{self.zone}, Connected: {self.connected}"

    def __repr__(self):
        return f"<Session {self.id} {self}>"

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        if self.connected:
            self.disconnect()

    @property
    def conn(self) -> Connection:
        if not self.connected:
            raise ContractViolation("session is closed", session=self.id)
        return self._conn

    def mark_broken(self) -> None:
        logger.info("Dropping broken session %s", self)
        self._resources.clear()
        self.connected = False
        self._conn.close()

    def next_collection_index(self) -> int:
        return next(self._next_collection)

    def register(self, handle_type, index: int, state=None) -> Handle:
        key = (handle_type.kind, index)
        if key in self._resources:
            raise ContractViolation(f"{handle_type.kind.value} handle {index} is already open",
                                    handle=index)
        serial = next(self._serials)
        self._resources[key] = (serial, state)
        return handle_type(index=index, session_id=self.id, serial=serial)

    def resolve(self, handle: Handle, handle_type) -> Any:
        """Return the state registered for ``handle`` or raise ``ContractViolation``."""
        if not isinstance(handle, handle_type):
            raise ContractViolation(
                f"expected a {handle_type.kind.value} handle, got {handle!r}", handle=handle)
        if handle.session_id != self.id:
            raise ContractViolation(f"handle {handle.index} belongs to another session",
                                    handle=handle.index)
        entry = self._resources.get((handle.kind, handle.index))
        if entry is None or entry[0] != handle.serial:
            raise ContractViolation(f"{handle.kind.value} handle {handle.index} is not open",
                                    handle=handle.index)
        return entry[1]

    def forget(self, handle: Handle) -> None:
        key = (handle.kind, handle.index)
        entry = self._resources.get(key)
        if entry is not None and entry[0] == handle.serial:
            del self._resources[key]

    def disconnect(self) -> Result[None]:
        if not self.connected:
            return Result.failure(ContractViolation("session is already closed", session=self.id))
        self._resources.clear()
        self.connected = False
        try:
            self._conn.disconnect()
        except OSError as e:
            return Result.failure(ConnectionFailure(f"iRODS disconnect failed: {e}"))
        logger.info("Disconnected %s@%s:%s", self.username, self.host, self.port)
        return Result.success()


def connect(host: str, port: int, username: str, zone: str, password: str) -> Result[Session]:
    """Open and authenticate a session with explicit parameters."""
    for name, value in (("host", host), ("username", username), ("zone", zone),
                        ("password", password)):
        if not value:
            return Result.failure(ConnectionFailure(f"iRODS connect failed: {name} is required"))
    if not isinstance(port, int) or port <= 0:
        return Result.failure(ConnectionFailure(f"iRODS connect failed: invalid port {port!r}"))

    try:
        conn = Connection.open(host, port)
    except OSError as e:
        return Result.failure(ConnectionFailure(f"iRODS connect failed: {host}:{port}: {e}",
                                                host=host, port=port))
    try:
        conn.handshake(username, zone)
        conn.authenticate_native(username, zone, password)
    except RemoteError as e:
        conn.close()
        return Result.failure(ConnectionFailure(f"iRODS connect failed: {e.message}",
                                                status=e.status))
    except ConnectionFailure as e:
        conn.close()
        return Result.failure(e)
    except (OSError, ET.ParseError, KeyError, TypeError, ValueError) as e:
        conn.close()
        return Result.failure(ConnectionFailure(f"iRODS connect failed: {e}"))

    logger.info("Connected to %s:%s as %s#%s", host, port, username, zone)
    return Result.success(Session(conn, host, port, zone, username))


def connect_env(password: Optional[str] = None,
                environment: Optional[config.IrodsEnvironment] = None) -> Result[Session]:
    """Connect using the client environment instead of explicit parameters.

    ``environment`` defaults to :func:`pyrods.config.load_environment`; a
    missing ``password`` is read from the scrambled authentication file.
    """
    try:
        env = environment or config.load_environment()
        if password is None:
            password = config.load_password(env)
    except ConfigurationError as e:
        return Result.failure(e)
    return connect(env.host, env.port, env.username, env.zone, password)
