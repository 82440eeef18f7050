"""The calling convention shared by every entity operation."""

import logging
import xml.etree.ElementTree as ET
from functools import wraps

from .errors import ConnectionFailure, ContractViolation, ResourceExhausted, Result, RodsError
from .session import Session

logger = logging.getLogger(__name__)


def require(value, name):
    if value is None or value == "":
        raise ContractViolation(f"{name} is required", argument=name)
    return value


def operation(empty=None):
    """Turn a function that raises into one that returns a ``Result``.

    ``empty`` builds the pre-call output handed back on failure.
    """

    def decorator(func):
        @wraps(func)
        def wrapper(session, *args, **kwargs):
            try:
                if not isinstance(session, Session):
                    raise ContractViolation(f"{func.__name__} needs a Session, got {session!r}")
                if not session.connected:
                    raise ContractViolation("session is closed", session=session.id)
                value = func(session, *args, **kwargs)
            except ConnectionFailure as e:
                ## The stream can no longer be trusted to be in step with the server
                session.mark_broken()
                return Result.failure(e, empty)
            except RodsError as e:
                logger.debug("%s failed: %s", func.__name__, e)
                return Result.failure(e, empty)
            except MemoryError:
                logger.debug("%s ran out of memory", func.__name__)
                return Result.failure(
                    ResourceExhausted(f"{func.__name__}: out of memory building result"), empty)
            except OSError as e:
                session.mark_broken()
                return Result.failure(
                    ConnectionFailure(f"{func.__name__}: transport failure: {e}"), empty)
            except (ET.ParseError, ValueError) as e:
                ## Unparseable reply; UnicodeDecodeError and defusedxml's errors are ValueErrors
                session.mark_broken()
                return Result.failure(
                    ConnectionFailure(f"{func.__name__}: malformed reply: {e}"), empty)
            return Result.success(value)

        return wrapper

    return decorator
