import pytest

import pyrods
from tests.fakeirods import FakeIrodsServer

ZONE = "tempZone"
HOME = f"/{ZONE}/home/rods"


@pytest.fixture
def server():
    srv = FakeIrodsServer().start()
    yield srv
    srv.stop()


@pytest.fixture
def catalog(server):
    return server.catalog


@pytest.fixture
def session(server):
    """An authenticated rodsadmin session against the fake server."""
    result = pyrods.connect("127.0.0.1", server.port, "rods", ZONE, "rods")
    assert result.ok, result.error
    s = result.value
    yield s
    if s.connected:
        s.disconnect()


@pytest.fixture
def alice(server):
    s = pyrods.connect("127.0.0.1", server.port, "alice", ZONE, "alicepw").unwrap()
    yield s
    if s.connected:
        s.disconnect()
