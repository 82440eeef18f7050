"""API numbers, catalog column indices and protocol constants."""

## These come from the server's api number table
API_TABLE = {
    "AUTHENTICATION_APN": 110000,  ## The API number for the 4.3.0 auth framework
    "DATA_OBJ_CREATE_AN": 601,
    "DATA_OBJ_OPEN_AN": 602,
    "DATA_OBJ_UNLINK_AN": 615,
    "DATA_OBJ_RENAME_AN": 627,
    "DATA_OBJ_CHKSUM_AN": 629,
    "OBJ_STAT_AN": 633,
    "DATA_OBJ_CLOSE_AN": 673,
    "DATA_OBJ_LSEEK_AN": 674,
    "DATA_OBJ_READ_AN": 675,
    "DATA_OBJ_WRITE_AN": 676,
    "RM_COLL_AN": 679,
    "COLL_CREATE_AN": 681,
    "DATA_OBJ_COPY_AN": 696,
    "GENERAL_ADMIN_AN": 701,
    "GEN_QUERY_AN": 702,
    "MOD_AVU_METADATA_AN": 706,
    "MOD_ACCESS_CONTROL_AN": 707,
    "TICKET_ADMIN_AN": 723,
}

## These provide indices into the catalog,
## which allows the iRODS server to directly query the SQL server
CATALOG_INDEX_TABLE = {
    "COL_USER_ID": "201",
    "COL_USER_NAME": "202",
    "COL_USER_TYPE": "203",
    "COL_USER_ZONE": "204",
    "COL_USER_INFO": "206",
    "COL_USER_COMMENT": "207",
    "COL_USER_CREATE_TIME": "208",
    "COL_USER_MODIFY_TIME": "209",
    "COL_D_DATA_ID": "401",
    "COL_DATA_NAME": "403",
    "COL_DATA_SIZE": "407",
    "COL_D_RESC_NAME": "409",
    "COL_D_OWNER_NAME": "411",
    "COL_D_DATA_CHECKSUM": "415",
    "COL_D_CREATE_TIME": "419",
    "COL_D_MODIFY_TIME": "420",
    "COL_DATA_MODE": "421",
    "COL_COLL_ID": "500",
    "COL_COLL_NAME": "501",
    "COL_COLL_PARENT_NAME": "502",
    "COL_COLL_OWNER_NAME": "503",
    "COL_COLL_INHERITANCE": "506",
    "COL_COLL_CREATE_TIME": "508",
    "COL_COLL_MODIFY_TIME": "509",
    "COL_META_DATA_ATTR_NAME": "600",
    "COL_META_DATA_ATTR_VALUE": "601",
    "COL_META_DATA_ATTR_UNITS": "602",
    "COL_META_COLL_ATTR_NAME": "610",
    "COL_META_COLL_ATTR_VALUE": "611",
    "COL_META_COLL_ATTR_UNITS": "612",
    "COL_DATA_ACCESS_NAME": "701",
    "COL_DATA_ACCESS_DATA_ID": "704",
    "COL_COLL_ACCESS_NAME": "711",
    "COL_USER_GROUP_NAME": "901",
    "COL_COLL_USER_NAME": "1300",
    "COL_COLL_USER_ZONE": "1301",
}
CATALOG_REVERSE_INDEX_TABLE = {
    v: k for k, v in CATALOG_INDEX_TABLE.items()
}

## Server status codes that the client has to recognise
CAT_NO_ROWS_FOUND = -808000

## Sent by the server while it works through a recursive collection removal;
## the client must answer each one before the final reply arrives
SYS_SVR_TO_CLI_COLL_STAT = 99999996
SYS_CLI_TO_SVR_COLL_STAT_REPLY = 99999997

## objType values in RodsObjStat_PI
DATA_OBJ_T = 1
COLL_OBJ_T = 2

## oprType values for DataObjCopyInp_PI
COPY_DEST = 9
COPY_SRC = 10
RENAME_DATA_OBJ = 11

## These constants are taken from their Linux equivalents
## and work the same way
SEEK_SET = 0
SEEK_CUR = 1
SEEK_END = 2

O_RDONLY = 0
O_WRONLY = 1
O_RDWR = 2
O_APPEND = 0o2000

MAX_PASSWORD_LENGTH = 50  ## This constant comes from the internals of the iRODS server
DEFAULT_PORT = 1247  ## This is the standard iRODS port
MAX_SQL_ROWS = 256
