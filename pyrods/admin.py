"""Administrative requests and session tickets."""

from . import message
from .dispatch import operation, require
from .errors import ContractViolation


def general_admin_request(session, *args):
    ## The arguments are positional and not very self-describing; see
    ## _rsGeneralAdmin on the server for what each combination does.
    if len(args) > 10:
        raise ContractViolation("generalAdminInp_PI takes at most 10 arguments")
    return session.conn.request("GENERAL_ADMIN_AN", message.general_admin_inp(*args))


@operation()
def general_admin(session, *args) -> None:
    require(args[0] if args else None, "arg0")
    general_admin_request(session, *args)


@operation()
def set_session_ticket(session, ticket) -> None:
    """Use ``ticket`` for access checks on this session from now on."""
    require(ticket, "ticket")
    session.conn.request("TICKET_ADMIN_AN", message.ticket_admin_inp("session", ticket))
