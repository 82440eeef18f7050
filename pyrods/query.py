"""Metadata searches returning catalog paths.

A query reads like ``imeta qu``: one or more ``attribute operator value``
conditions joined by ``and``, quoted with shell rules::

    study = 'ABC 123' and size '>' 1000

Operators and values go to the server untouched; a query the catalog
cannot run fails with the server's error. Attributes and values may not
contain a single quote, which GenQuery cannot escape.
"""

import shlex

from . import genquery
from .containers import PathList
from .dispatch import operation, require
from .errors import ContractViolation


def metadata_conditions(query, attr_column, value_column):
    try:
        tokens = shlex.split(query)
    except ValueError as e:
        raise ContractViolation(f"malformed query {query!r}: {e}", query=query)

    conditions = []
    i = 0
    while True:
        if len(tokens) - i < 3:
            raise ContractViolation(f"malformed query {query!r}: expected attribute operator value",
                                    query=query)
        attribute, op, value = tokens[i:i + 3]
        conditions.append((attr_column, genquery.equals(attribute)))
        conditions.append((value_column, f"{op} {genquery.quote(value)}"))
        i += 3
        if i == len(tokens):
            return conditions
        if tokens[i].lower() != "and":
            raise ContractViolation(f"malformed query {query!r}: expected 'and' at {tokens[i]!r}",
                                    query=query)
        i += 1


@operation(empty=PathList)
def query_collection(session, query) -> PathList:
    require(query, "query")
    conditions = metadata_conditions(query, "COL_META_COLL_ATTR_NAME", "COL_META_COLL_ATTR_VALUE")
    frame = genquery.fetch_all(session, ["COL_COLL_NAME"], conditions)
    return PathList.from_frame(frame, ["COL_COLL_NAME"])


@operation(empty=PathList)
def query_dataobj(session, query) -> PathList:
    require(query, "query")
    conditions = metadata_conditions(query, "COL_META_DATA_ATTR_NAME", "COL_META_DATA_ATTR_VALUE")
    frame = genquery.fetch_all(session, ["COL_COLL_NAME", "COL_DATA_NAME"], conditions)
    return PathList.from_frame(frame, ["COL_COLL_NAME", "COL_DATA_NAME"],
                               build=lambda coll, data: f"{coll.rstrip('/')}/{data}")
