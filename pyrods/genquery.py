"""Running catalog queries (GenQuery) and paging through their results."""

import logging
from typing import Optional, Sequence, Tuple

import pandas as pd

from . import message
from .catalog import CAT_NO_ROWS_FOUND, CATALOG_INDEX_TABLE, MAX_SQL_ROWS
from .containers import frame_from_gen_query
from .errors import ContractViolation

logger = logging.getLogger(__name__)


def quote(value: str) -> str:
    ## GenQuery has no escape for a quote inside a quoted literal
    if "'" in value:
        raise ContractViolation(f"GenQuery values cannot contain \"'\": {value!r}", value=value)
    return f"'{value}'"


def equals(value: str) -> str:
    return f"= {quote(value)}"


def build(select: Sequence[str], conditions: Sequence[Tuple[str, str]],
          continue_inx=0, max_rows=MAX_SQL_ROWS, zone_hint: Optional[str] = None) -> bytes:
    return message.gen_query(
        max_rows=max_rows,
        continue_inx=continue_inx,
        cond_input={"zone": zone_hint} if zone_hint else {},
        select_inp={CATALOG_INDEX_TABLE[name]: "1" for name in select},
        sql_cond_inp=[(CATALOG_INDEX_TABLE[name], cond) for name, cond in conditions],
    )


def fetch_page(session, select, conditions, continue_inx=0,
               max_rows=MAX_SQL_ROWS, zone_hint=None) -> Tuple[pd.DataFrame, int]:
    """Fetch one page; returns the rows and the index to continue from (0 when done)."""
    gq = build(select, conditions, continue_inx, max_rows, zone_hint)
    reply = session.conn.request("GEN_QUERY_AN", gq, accept=(CAT_NO_ROWS_FOUND,))
    if reply.int_info == CAT_NO_ROWS_FOUND or reply.msg is None:
        return pd.DataFrame(), 0
    frame = frame_from_gen_query(reply.msg)
    return frame, int(reply.msg.findtext("continueInx") or 0)


def close_query(session, select, conditions, continue_inx: int) -> None:
    ## Asking for zero rows tells the server to drop the open statement
    if continue_inx:
        session.conn.request("GEN_QUERY_AN", build(select, conditions, continue_inx, max_rows=0),
                             accept=(CAT_NO_ROWS_FOUND,))


def fetch_all(session, select, conditions, zone_hint=None) -> pd.DataFrame:
    frames = []
    continue_inx = 0
    while True:
        frame, continue_inx = fetch_page(session, select, conditions,
                                         continue_inx, zone_hint=zone_hint)
        if len(frame):
            frames.append(frame)
        if not continue_inx:
            break
    logger.debug("Query for %s returned %d page(s)", ",".join(select), len(frames))
    if not frames:
        return pd.DataFrame(columns=list(select))
    return pd.concat(frames, ignore_index=True)
