import dataclasses
import json

import pytest
from flagstruct import args_from_mapping, decode, load_args_file


@dataclasses.dataclass
class ServerConfig:
    host: str = dataclasses.field(default="", metadata={"flag": "server-host"})
    port: int = dataclasses.field(default=0, metadata={"flag": "server-port"})
    debug: bool = dataclasses.field(default=False, metadata={"flag": "debug"})
    tags: list[str] = dataclasses.field(default_factory=list, metadata={"flag": "tags"})


def test_args_from_mapping():
    args = args_from_mapping(
        {
            "debug": True,
            "tags": ["a", "b"],
            "server": {"host": "example.org", "port": 8080},
            "skipped": None,
        }
    )
    assert args == [
        "-debug=true",
        "-tags=a;b",
        "-server-host=example.org",
        "-server-port=8080",
    ]


def test_args_from_mapping_custom_prefix():
    assert args_from_mapping({"port": 1, "off": False}, prefix="--") == [
        "--port=1",
        "--off=false",
    ]


def test_load_yaml_file(tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "server:\n  host: example.org\n  port: 8080\ndebug: true\ntags: [x, y]\n"
    )
    cfg = decode(ServerConfig(), load_args_file(str(config_path)))
    assert cfg.host == "example.org"
    assert cfg.port == 8080
    assert cfg.debug is True
    assert cfg.tags == ["x", "y"]


def test_load_json_file(tmp_path):
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps({"server": {"port": 3000}}))
    assert load_args_file(str(config_path)) == ["-server-port=3000"]


def test_command_line_overrides_file(tmp_path):
    config_path = tmp_path / "config.yml"
    config_path.write_text("server:\n  port: 8080\n")
    args = ["--server-port=9090"] + load_args_file(str(config_path))
    cfg = decode(ServerConfig(), args)
    assert cfg.port == 9090


def test_empty_yaml_file(tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("")
    assert load_args_file(str(config_path)) == []


def test_missing_file():
    with pytest.raises(FileNotFoundError):
        load_args_file("/nonexistent/config.yaml")


def test_unsupported_extension(tmp_path):
    config_path = tmp_path / "config.toml"
    config_path.write_text("port = 1\n")
    with pytest.raises(ValueError, match="Unsupported file format"):
        load_args_file(str(config_path))


def test_invalid_json(tmp_path):
    config_path = tmp_path / "config.json"
    config_path.write_text("{not json")
    with pytest.raises(ValueError, match="Invalid JSON"):
        load_args_file(str(config_path))


def test_invalid_yaml(tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("a: [1, 2\n")
    with pytest.raises(ValueError, match="Invalid YAML"):
        load_args_file(str(config_path))


def test_non_mapping_file(tmp_path):
    config_path = tmp_path / "config.json"
    config_path.write_text("[1, 2]")
    with pytest.raises(ValueError, match="must contain a mapping"):
        load_args_file(str(config_path))
