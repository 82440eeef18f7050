"""Packing-instruction bodies for the requests pyrods sends.

Each builder returns the XML body for one ``*_PI`` structure, already
translated into the iRODS XML dialect. The comment above each builder
quotes the packing instruction string the server uses to define the
message type.
"""

import base64
import json
import xml.etree.ElementTree as ET
from enum import Enum

import defusedxml.ElementTree as SecureET

from .catalog import SEEK_SET


## We can define these in an enum since
## header types are a closed class and are not sensitive to any
## particular API.
class HeaderType(Enum):
    RODS_CONNECT = "RODS_CONNECT"
    RODS_DISCONNECT = "RODS_DISCONNECT"
    RODS_API_REQ = "RODS_API_REQ"
    RODS_API_REPLY = "RODS_API_REPLY"
    RODS_VERSION = "RODS_VERSION"


class IrodsProt(Enum):
    NATIVE_PROT = 0
    XML_PROT = 1


## The iRODS dialect of XML does not escape some special characters at all
## and uses a non-standard encoding for others. It does not distinguish
## between "`" and "'".
STANDARD_TO_IRODS_TABLE = {
    b'"': b"&quot;",
    b"&#34;": b"&quot;",
    b"&#39;": b"&apos;",
    b"&#x9;": b"\t",
    b"&#xD;": b"\r",
    b"&#xA;": b"\n",
    b"`": b"&apos;",
    b"'": b"&apos;",
}


def translate_xml_to_irods_dialect(xml_bytes: bytes) -> bytes:
    for prefix in STANDARD_TO_IRODS_TABLE:
        xml_bytes = xml_bytes.replace(prefix, STANDARD_TO_IRODS_TABLE[prefix])
    return xml_bytes


def pack(et: ET.Element) -> bytes:
    return translate_xml_to_irods_dialect(ET.tostring(et, encoding="unicode").encode("utf-8"))


def parse(body: bytes) -> ET.Element:
    return SecureET.fromstring(body.decode("utf-8"))


def _element(tag, fields) -> ET.Element:
    et = ET.Element(tag)
    for name, value in fields:
        child = ET.SubElement(et, name)
        child.text = "" if value is None else str(value)
    return et


# #define MsgHeader_PI "str type[HEADER_TYPE_LEN]; int msgLen; int errorLen; int bsLen; int intInfo;"
def header(header_type: HeaderType, msg: bytes,
           error_len=0, bs_len=0, int_info=0) -> bytes:
    return f"""
        <MsgHeader_PI>
            <type>{header_type.value}</type>
            <msgLen>{len(msg)}</msgLen>
            <errorLen>{error_len}</errorLen>
            <bsLen>{bs_len}</bsLen>
            <intInfo>{int_info}</intInfo>
        </MsgHeader_PI>
        """.replace(' ', '').replace('\n', '').encode('utf-8')  ## The protocol is whitespace-insensitive


## define StartupPack_PI "int irodsProt; int reconnFlag; int connectCnt; str proxyUser[NAME_LEN];\
##                        str proxyRcatZone[NAME_LEN]; str clientUser[NAME_LEN]; str clientRcatZone[NAME_LEN];\
##                        str relVersion[NAME_LEN]; str apiVersion[NAME_LEN]; str option[LONG_NAME_LEN];"
def startup_pack(client_user,
                 client_rcat_zone,
                 irods_prot=IrodsProt.XML_PROT.value,
                 reconn_flag=0,
                 connect_cnt=0,
                 proxy_user=None,
                 proxy_rcat_zone=None,
                 rel_version="4.3.0",
                 api_version="d",  ## This MUST ALWAYS be "d." This value has been hardcoded into iRODS
                 option="pyrods") -> bytes:
    return pack(_element("StartupPack_PI", [
        ("irodsProt", irods_prot),
        ("reconnFlag", reconn_flag),
        ("connectCnt", connect_cnt),
        ("proxyUser", proxy_user or client_user),
        ("proxyRcatZone", proxy_rcat_zone or client_rcat_zone),
        ("clientUser", client_user),
        ("clientRcatZone", client_rcat_zone),
        ("relVersion", f"rods{rel_version}"),
        ("apiVersion", api_version),
        ("option", option),
    ]))


## Binary payloads must be base64-encoded since XML must be valid UTF-8
def encode_dict_as_base64_json(d: dict) -> bytes:
    return base64.b64encode(json.dumps(d).encode('utf-8'))


def read_base64_into_json(bsix: str) -> dict:
    ## The server null-terminates the buffer
    decoded = base64.b64decode(bsix).decode('utf-8').rstrip("\x00")
    return json.loads(decoded)


## #define BinBytesBuf_PI "int buflen; bin *buf(buflen);"
def bin_bytes_buf(payload: dict) -> bytes:
    payload = encode_dict_as_base64_json(payload)
    return pack(_element("BinBytesBuf_PI", [
        ("buflen", len(payload)),
        ("buf", payload.decode('utf-8')),
    ]))


def append_kvp(et, data):
    kvp = ET.SubElement(et, "KeyValPair_PI")
    sslen = ET.SubElement(kvp, "ssLen")
    sslen.text = str(len(data))
    for key in data.keys():
        keyWord = ET.SubElement(kvp, "keyWord")
        keyWord.text = key
    for value in data.values():
        svalue = ET.SubElement(kvp, "svalue")
        svalue.text = value
    return et


def append_iivp(et, data):
    iivp = ET.SubElement(et, "InxIvalPair_PI")
    iilen = ET.SubElement(iivp, "iiLen")
    iilen.text = str(len(data))
    for key in data.keys():
        inx = ET.SubElement(iivp, "inx")
        inx.text = key
    for value in data.values():
        ivalue = ET.SubElement(iivp, "ivalue")
        ivalue.text = value
    return et


## Conditions are a list of pairs rather than a dict: the same column
## may legitimately be constrained more than once (metadata queries).
def append_ivp(et, pairs):
    ivp = ET.SubElement(et, "InxValPair_PI")
    islen = ET.SubElement(ivp, "isLen")
    islen.text = str(len(pairs))
    for key, _ in pairs:
        inx = ET.SubElement(ivp, "inx")
        inx.text = key
    for _, value in pairs:
        svalue = ET.SubElement(ivp, "svalue")
        svalue.text = value
    return et


## #define DataObjInp_PI "str objPath[MAX_NAME_LEN]; int createMode; int openFlags; double offset; \
##  double dataSize; int numThreads; int oprType; struct *SpecColl_PI; struct KeyValPair_PI;"
def _data_obj_inp_element(obj_path, create_mode=0, open_flags=0, offset=0,
                          data_size=0, num_threads=0, opr_type=0, cond_input=None):
    obj_inp = _element("DataObjInp_PI", [
        ("objPath", obj_path),
        ("createMode", create_mode),
        ("openFlags", open_flags),
        ("offset", offset),
        ("dataSize", data_size),
        ("numThreads", num_threads),
        ("oprType", opr_type),
    ])
    return append_kvp(obj_inp, cond_input or {})


def data_obj_inp(obj_path, **kwargs) -> bytes:
    return pack(_data_obj_inp_element(obj_path, **kwargs))


## #define DataObjCopyInp_PI "struct DataObjInp_PI; struct DataObjInp_PI;"
def data_obj_copy_inp(src_path, dest_path, src_opr_type=0, dest_opr_type=0,
                      dest_cond_input=None) -> bytes:
    copy_inp = ET.Element("DataObjCopyInp_PI")
    copy_inp.append(_data_obj_inp_element(src_path, opr_type=src_opr_type))
    copy_inp.append(_data_obj_inp_element(dest_path, opr_type=dest_opr_type,
                                          cond_input=dest_cond_input))
    return pack(copy_inp)


## #define OpenedDataObjInp_PI "int l1descInx; int len; int whence; int oprType; \
## double offset; double bytesWritten; struct KeyValPair_PI;"
def opened_data_obj_inp(l1_desc,
                        len_=0,
                        whence=SEEK_SET,
                        opr_type=0,
                        offset=0,
                        bytes_written=0,
                        cond_input=None) -> bytes:
    ret = _element("OpenedDataObjInp_PI", [
        ("l1descInx", l1_desc),
        ("len", len_),
        ("whence", whence),
        ("oprType", opr_type),
        ("offset", offset),
        ("bytesWritten", bytes_written),
    ])
    return pack(append_kvp(ret, cond_input or {}))


## #define GenQueryInp_PI "int maxRows; int continueInx; int partialStartIndex; \
## int options; struct KeyValPair_PI; struct InxIvalPair_PI; struct InxValPair_PI;"
def gen_query(
    max_rows=256,
    continue_inx=0,
    partial_start_index=0,
    options=0,
    cond_input=None,
    select_inp=None,
    sql_cond_inp=None
) -> bytes:
    ret = _element("GenQueryInp_PI", [
        ("maxRows", max_rows),
        ("continueInx", continue_inx),
        ("partialStartIndex", partial_start_index),
        ("options", options),
    ])
    ret = append_kvp(ret, cond_input or {})
    ret = append_iivp(ret, select_inp or {})
    ret = append_ivp(ret, sql_cond_inp or [])
    return pack(ret)


## #define CollInpNew_PI "str collName[MAX_NAME_LEN]; int flags; int oprType; struct KeyValPair_PI;"
def coll_inp(coll_name, flags=0, opr_type=0, cond_input=None) -> bytes:
    ret = _element("CollInpNew_PI", [
        ("collName", coll_name),
        ("flags", flags),
        ("oprType", opr_type),
    ])
    return pack(append_kvp(ret, cond_input or {}))


def _numbered_args(tag, args, first=0, count=10):
    args = list(args) + [""] * (count - len(args))
    return _element(tag, [(f"arg{first + i}", arg) for i, arg in enumerate(args)])


## #define generalAdminInp_PI "str *arg0; str *arg1; str *arg2; \
## str *arg3; str *arg4; str *arg5; str *arg6; str *arg7;  str *arg8;  str *arg9;"
def general_admin_inp(*args) -> bytes:
    return pack(_numbered_args("generalAdminInp_PI", args))


## #define ModAVUMetadataInp_PI "str *arg0; str *arg1; str *arg2; str *arg3; str *arg4; \
## str *arg5; str *arg6; str *arg7; str *arg8; str *arg9; struct KeyValPair_PI;"
def mod_avu_metadata_inp(*args) -> bytes:
    return pack(append_kvp(_numbered_args("ModAVUMetadataInp_PI", args), {}))


## #define ModAccessControlInp_PI "int recursiveFlag; str *accessLevel; str *userName; \
## str *zone; str *path;"
def mod_access_control_inp(recursive, access_level, user_name, zone, path) -> bytes:
    return pack(_element("ModAccessControlInp_PI", [
        ("recursiveFlag", 1 if recursive else 0),
        ("accessLevel", access_level),
        ("userName", user_name),
        ("zone", zone),
        ("path", path),
    ]))


## #define ticketAdminInp_PI "str *arg1; str *arg2; str *arg3; str *arg4; str *arg5; \
## str *arg6; struct KeyValPair_PI;"
def ticket_admin_inp(*args) -> bytes:
    return pack(append_kvp(_numbered_args("ticketAdminInp_PI", args, first=1, count=6), {}))
