"""Client environment: ``irods_environment.json`` and the scrambled password file.

Sessions take an explicit :class:`IrodsEnvironment`; :func:`load_environment`
is an optional convenience for callers that want the defaults iCommands use.
"""

import json
import logging
import os
from dataclasses import dataclass
from typing import Optional, Tuple

from irods import password_obfuscation as obf

from .catalog import DEFAULT_PORT
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_ENVIRONMENT_FILE = os.path.join("~", ".irods", "irods_environment.json")
DEFAULT_AUTHENTICATION_FILE = os.path.join("~", ".irods", ".irodsA")


@dataclass(frozen=True)
class IrodsEnvironment:
    host: str
    port: int
    zone: str
    username: str
    authentication_file: Optional[str] = None


def environment_path(path: Optional[str] = None) -> str:
    path = path or os.environ.get("IRODS_ENVIRONMENT_FILE") or DEFAULT_ENVIRONMENT_FILE
    return os.path.expanduser(path)


def load_environment(path: Optional[str] = None) -> IrodsEnvironment:
    path = environment_path(path)
    logger.debug("Reading iRODS environment from %s", path)
    try:
        with open(path, encoding="utf-8") as f:
            env = json.load(f)
    except FileNotFoundError:
        raise ConfigurationError(f"iRODS environment file not found: {path}", path=path)
    except (OSError, ValueError) as e:
        raise ConfigurationError(f"cannot read iRODS environment file {path}: {e}", path=path)

    missing = [k for k in ("irods_host", "irods_zone_name", "irods_user_name") if not env.get(k)]
    if missing:
        raise ConfigurationError(
            f"iRODS environment file {path} is missing {', '.join(missing)}",
            path=path, missing=missing)
    try:
        port = int(env.get("irods_port", DEFAULT_PORT))
    except (TypeError, ValueError):
        raise ConfigurationError(f"invalid irods_port in {path}: {env.get('irods_port')!r}",
                                 path=path)

    return IrodsEnvironment(
        host=env["irods_host"],
        port=port,
        zone=env["irods_zone_name"],
        username=env["irods_user_name"],
        authentication_file=env.get("irods_authentication_file"),
    )


def environment_string(env: IrodsEnvironment) -> str:
    return (f"irods_host={env.host} irods_port={env.port} "
            f"irods_zone_name={env.zone} irods_user_name={env.username}")


def environment_fields(env: IrodsEnvironment) -> Tuple[str, str, int, str]:
    return env.username, env.host, env.port, env.zone


def load_password(env: Optional[IrodsEnvironment] = None) -> str:
    """Decode the password that ``iinit`` scrambled into the authentication file."""
    path = (env and env.authentication_file) \
        or os.environ.get("IRODS_AUTHENTICATION_FILE") \
        or DEFAULT_AUTHENTICATION_FILE
    path = os.path.expanduser(path)
    try:
        with open(path, encoding="utf-8") as f:
            scrambled = f.read().rstrip("\n")
    except OSError as e:
        raise ConfigurationError(f"cannot read iRODS authentication file {path}: {e}", path=path)
    return obf.decode(scrambled)
