import json

import pytest
from irods import password_obfuscation as obf

from pyrods import config
from pyrods.errors import ConfigurationError


@pytest.fixture
def env_file(tmp_path):
    path = tmp_path / "irods_environment.json"
    path.write_text(json.dumps({
        "irods_host": "irods.example.org",
        "irods_port": 1248,
        "irods_zone_name": "exampleZone",
        "irods_user_name": "alice",
    }))
    return path


def test_load_environment(env_file):
    env = config.load_environment(str(env_file))
    assert env == config.IrodsEnvironment("irods.example.org", 1248, "exampleZone", "alice")
    assert config.environment_fields(env) == ("alice", "irods.example.org", 1248, "exampleZone")
    assert "irods_host=irods.example.org" in config.environment_string(env)


def test_environment_variable_picks_file(env_file, monkeypatch):
    monkeypatch.setenv("IRODS_ENVIRONMENT_FILE", str(env_file))
    assert config.load_environment().zone == "exampleZone"


def test_port_defaults(tmp_path):
    path = tmp_path / "env.json"
    path.write_text(json.dumps({"irods_host": "h", "irods_zone_name": "z",
                                "irods_user_name": "u"}))
    assert config.load_environment(str(path)).port == 1247


def test_missing_keys(tmp_path):
    path = tmp_path / "env.json"
    path.write_text(json.dumps({"irods_host": "h"}))
    with pytest.raises(ConfigurationError, match="irods_zone_name"):
        config.load_environment(str(path))


def test_missing_file(tmp_path):
    with pytest.raises(ConfigurationError, match="not found"):
        config.load_environment(str(tmp_path / "nope.json"))


def test_load_password_decodes_scrambled_file(tmp_path):
    auth = tmp_path / ".irodsA"
    auth.write_text(obf.encode("s3cret"))
    env = config.IrodsEnvironment("h", 1247, "z", "u", authentication_file=str(auth))
    assert config.load_password(env) == "s3cret"
