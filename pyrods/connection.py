"""Socket framing, handshake and native authentication."""

import base64
import hashlib
import logging
import socket
import struct
from typing import NamedTuple, Optional
import xml.etree.ElementTree as ET

from . import message
from .catalog import (
    API_TABLE,
    MAX_PASSWORD_LENGTH,
    SYS_CLI_TO_SVR_COLL_STAT_REPLY,
    SYS_SVR_TO_CLI_COLL_STAT,
)
from .errors import ConnectionFailure, RemoteError
from .message import HeaderType

logger = logging.getLogger(__name__)


class Reply(NamedTuple):
    header: ET.Element
    msg: Optional[ET.Element]
    error: bytes
    bs: bytes

    @property
    def int_info(self) -> int:
        return int(self.header.findtext("intInfo"))

    @property
    def body(self) -> ET.Element:
        if self.msg is None:
            raise ConnectionFailure(
                f"{self.header.findtext('type')} reply carried no message body")
        return self.msg


def _recv_exact(sock: socket.socket, size: int) -> bytes:
    chunks = []
    remaining = size
    while remaining > 0:
        chunk = sock.recv(remaining)
        if not chunk:
            raise ConnectionError("connection closed by server")
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def _error_stack_text(error: bytes) -> str:
    ## #define RError_PI "int count; struct *RErrMsg_PI[count];"
    ## #define RErrMsg_PI "int status; str msg[ERR_MSG_LEN];"
    if not error:
        return ""
    try:
        stack = message.parse(error)
    except ET.ParseError:
        return error.decode("utf-8", "replace")
    return "; ".join((m.findtext("msg") or "").strip() for m in stack.iter("RErrMsg_PI"))


def pad_password(pw: str) -> bytes:
    return struct.pack("%ds" % MAX_PASSWORD_LENGTH, pw.encode("utf-8").strip())


class Connection:
    """One socket speaking the XML flavour of the iRODS protocol."""

    def __init__(self, sock: socket.socket):
        self.sock = sock

    @classmethod
    def open(cls, host: str, port: int) -> "Connection":
        logger.debug("Opening socket to %s:%s", host, port)
        return cls(socket.create_connection((host, port)))

    def send(self, header_type: HeaderType, msg: bytes = b"",
             bs_buf: bytes = b"", int_info: int = 0) -> None:
        h = message.header(header_type, msg, bs_len=len(bs_buf), int_info=int_info)
        ## The first part of all iRODS messages must be 4 bytes indicating how
        ## long the header is, in big-endian order
        logger.debug("[header] %s", h)
        self.sock.sendall(struct.pack("!I", len(h)))
        self.sock.sendall(h)
        if msg:
            self.sock.sendall(msg)
        if bs_buf:
            self.sock.sendall(bs_buf)

    def recv(self) -> Reply:
        header_len = struct.unpack("!I", _recv_exact(self.sock, 4))[0]
        h = message.parse(_recv_exact(self.sock, header_len))
        try:
            msg_len, error_len, bs_len, int_info = (
                int(h.findtext(name)) for name in ("msgLen", "errorLen", "bsLen", "intInfo"))
        except (TypeError, ValueError):
            raise ConnectionFailure("malformed message header", header=h.findtext("type"))
        logger.debug("[recv] type=%s msgLen=%d errorLen=%d bsLen=%d intInfo=%d",
                     h.findtext("type"), msg_len, error_len, bs_len, int_info)
        ## Take the whole frame off the socket before parsing any of it
        raw_msg = _recv_exact(self.sock, msg_len) if msg_len > 0 else b""
        error = _recv_exact(self.sock, error_len) if error_len > 0 else b""
        bs = _recv_exact(self.sock, bs_len) if bs_len > 0 else b""
        msg = message.parse(raw_msg) if raw_msg else None
        return Reply(h, msg, error, bs)

    def request(self, api: str, msg: bytes, bs_buf: bytes = b"", accept=()) -> Reply:
        """Send one API request and return the reply.

        A negative ``intInfo`` raises ``RemoteError`` unless the status is
        listed in ``accept``.
        """
        api_number = API_TABLE[api]
        self.send(HeaderType.RODS_API_REQ, msg, bs_buf=bs_buf, int_info=api_number)
        reply = self.recv()
        while reply.int_info == SYS_SVR_TO_CLI_COLL_STAT:
            self.sock.sendall(struct.pack("!i", SYS_CLI_TO_SVR_COLL_STAT_REPLY))
            reply = self.recv()
        status = reply.int_info
        if status < 0 and status not in accept:
            detail = _error_stack_text(reply.error)
            text = f"{api} failed with status {status}"
            if detail:
                text = f"{text}: {detail}"
            raise RemoteError(text, status=status, api=api)
        return reply

    def handshake(self, user: str, zone: str) -> ET.Element:
        sp = message.startup_pack(user, zone)
        self.send(HeaderType.RODS_CONNECT, sp)
        reply = self.recv()
        ## In this Version_PI, status of 0 lets us know that negotiation has been successful.
        version = reply.msg
        status = int(version.findtext("status")) if version is not None else reply.int_info
        if status < 0:
            raise ConnectionFailure(f"connection rejected with status {status}",
                                    status=status)
        return version

    def authenticate_native(self, user: str, zone: str, password: str) -> None:
        auth_ctx = {
            "a_ttl": "0",
            "force_password_prompt": "true",
            "next_operation": "auth_agent_auth_request",
            "scheme": "native",
            "user_name": user,
            "zone_name": zone,
        }
        reply = self.request("AUTHENTICATION_APN", message.bin_bytes_buf(auth_ctx))
        auth_ctx = message.read_base64_into_json(reply.body.findtext("buf"))
        request_result = auth_ctx["request_result"].encode("utf-8")

        ## Native auth specific operations
        m = hashlib.md5()
        m.update(request_result)
        m.update(pad_password(password))
        auth_ctx["digest"] = base64.b64encode(m.digest()).decode("utf-8")
        auth_ctx["next_operation"] = "auth_agent_auth_response"
        self.request("AUTHENTICATION_APN", message.bin_bytes_buf(auth_ctx))

    def disconnect(self) -> None:
        try:
            self.send(HeaderType.RODS_DISCONNECT)
        finally:
            self.close()

    def close(self) -> None:
        self.sock.close()
