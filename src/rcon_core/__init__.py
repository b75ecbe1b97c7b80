# src/rcon_core/__init__.py
"""
RCON-Core v1.0.0
基于 asyncio 的 Source RCON 协议客户端核心库。
"""

from .command import Command

# 暴露核心配置
from .config import (
    DEFAULT_PORT,
    DEFAULT_TIMEOUT,
    RconConfig,
    ResponseMode,
    create_config_from_dict,
    load_config_from_env,
    load_config_from_toml,
    parse_address,
)
from .core import RconClient

# 暴露异常体系 (方便上层 try-except)
from .exceptions import (
    AuthError,
    ConfigError,
    MalformedResponseError,
    NetworkError,
    NonASCIIError,
    ProtocolError,
    RconError,
    StateError,
)
from .state import ClientStatus, HandshakeState, RconState

__version__ = "1.0.0"

__all__ = [
    "RconClient",
    "RconConfig",
    "RconState",
    "ResponseMode",
    "ClientStatus",
    "HandshakeState",
    "Command",
    "DEFAULT_PORT",
    "DEFAULT_TIMEOUT",
    "create_config_from_dict",
    "load_config_from_env",
    "load_config_from_toml",
    "parse_address",
    "RconError",
    "ConfigError",
    "NetworkError",
    "AuthError",
    "ProtocolError",
    "MalformedResponseError",
    "NonASCIIError",
    "StateError",
]
