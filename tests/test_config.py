# tests/test_config.py
import os

import pytest

from rcon_core import (
    DEFAULT_PORT,
    DEFAULT_TIMEOUT,
    ConfigError,
    RconConfig,
    ResponseMode,
    create_config_from_dict,
    load_config_from_env,
    load_config_from_toml,
    parse_address,
)

# 最小化的 "快乐路径" 配置
valid_config_dict = {
    "address": "10.0.0.1:27016",
    "password": "secret",
}


def test_config_happy_path():
    config = create_config_from_dict(valid_config_dict.copy())

    assert isinstance(config, RconConfig)
    assert config.host == "10.0.0.1"
    assert config.port == 27016
    assert config.password == "secret"
    assert config.timeout == DEFAULT_TIMEOUT
    assert config.response_mode is ResponseMode.MULTI
    assert config.address == "10.0.0.1:27016"


def test_config_host_and_port():
    config = create_config_from_dict({"host": "example.com", "port": "25575"})
    assert config.port == 25575
    assert config.password == ""


def test_config_default_port():
    config = create_config_from_dict({"address": "example.com"})
    assert config.port == DEFAULT_PORT


@pytest.mark.parametrize("flag", [False, "false", "0", "no"])
def test_config_single_packet(flag):
    config = create_config_from_dict({"address": "h", "multi_packet": flag})
    assert config.response_mode is ResponseMode.SINGLE
    assert config.multi_packet is False


def test_config_missing_address():
    with pytest.raises(ConfigError, match="address"):
        create_config_from_dict({"password": "x"})


def test_config_nil_option():
    with pytest.raises(ConfigError, match="None"):
        create_config_from_dict({"address": "h", "timeout": None})


@pytest.mark.parametrize(
    "raw",
    [
        {"address": "h", "timeout": "0"},
        {"address": "h", "timeout": "fast"},
        {"address": "h:70000"},
        {"address": "h:port"},
        {"host": ""},
    ],
)
def test_config_invalid_values(raw):
    with pytest.raises(ConfigError):
        create_config_from_dict(raw)


def test_repr_hides_password():
    config = RconConfig(host="h", password="topsecret")
    assert "topsecret" not in repr(config)
    assert "******" in repr(config)


@pytest.mark.parametrize(
    "address, expected",
    [
        ("127.0.0.1", ("127.0.0.1", DEFAULT_PORT)),
        ("127.0.0.1:1234", ("127.0.0.1", 1234)),
        ("[::1]:1234", ("::1", 1234)),
        ("[::1]", ("::1", DEFAULT_PORT)),
        ("::1", ("::1", DEFAULT_PORT)),
    ],
)
def test_parse_address(address, expected):
    assert parse_address(address) == expected


def test_ipv6_address_property():
    assert RconConfig(host="::1", port=1).address == "[::1]:1"


# --- TOML ---


def test_load_toml_profile(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text(
        """
[profile.default]
address = "1.2.3.4"
password = "a"

[profile.minecraft]
address = "5.6.7.8:25575"
password = "b"
multi_packet = false
timeout = 3
"""
    )

    config = load_config_from_toml(path, "minecraft")
    assert config.host == "5.6.7.8"
    assert config.port == 25575
    assert config.response_mode is ResponseMode.SINGLE
    assert config.timeout == 3.0

    assert load_config_from_toml(path).host == "1.2.3.4"

    with pytest.raises(ConfigError, match="profile.missing"):
        load_config_from_toml(path, "missing")


def test_load_toml_rcon_section(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text('[rcon]\nhost = "srv"\nport = 1\n')
    config = load_config_from_toml(path)
    assert (config.host, config.port) == ("srv", 1)


def test_load_toml_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="未找到"):
        load_config_from_toml(tmp_path / "nope.toml")


def test_load_toml_invalid(tmp_path):
    path = tmp_path / "bad.toml"
    path.write_text("not = [valid")
    with pytest.raises(ConfigError, match="TOML"):
        load_config_from_toml(path)


# --- Env ---


@pytest.fixture
def clean_env(monkeypatch):
    for suffix in ("ADDRESS", "HOST", "PORT", "PASSWORD", "TIMEOUT", "MULTI_PACKET"):
        monkeypatch.delenv(f"RCON_{suffix}", raising=False)
    return monkeypatch


def test_load_env(clean_env):
    clean_env.setenv("RCON_ADDRESS", "9.9.9.9:1000")
    clean_env.setenv("RCON_PASSWORD", "pw")
    clean_env.setenv("RCON_MULTI_PACKET", "false")

    config = load_config_from_env()
    assert config.address == "9.9.9.9:1000"
    assert config.password == "pw"
    assert config.response_mode is ResponseMode.SINGLE


def test_load_env_empty(clean_env):
    with pytest.raises(ConfigError, match="RCON_"):
        load_config_from_env()


def test_load_dotenv_file(clean_env, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("RCON_HOST=dotenv-host\nRCON_TIMEOUT=4.5\n")

    try:
        config = load_config_from_env(env_file)
    finally:
        # load_dotenv 直接写入 os.environ，需手动清理
        os.environ.pop("RCON_HOST", None)
        os.environ.pop("RCON_TIMEOUT", None)

    assert config.host == "dotenv-host"
    assert config.timeout == 4.5


def test_load_dotenv_missing(clean_env, tmp_path):
    with pytest.raises(ConfigError, match=".env"):
        load_config_from_env(tmp_path / ".env")
