# src/rcon_core/protocols/__init__.py
"""
RCON 协议层 (Protocol Layer)

- packets: 单个线路包的构建 (Build) 与解析 (Parse)。
- handshake: 认证握手状态机。
- exchange: 单包 / 多包响应重组策略。

不包含 socket 创建或状态持久化；字节流与状态对象由 core 层注入。
"""

from . import constants
from .base import BaseExchange
from .exchange import MultiPacketExchange, SinglePacketExchange
from .handshake import Handshake
from .packets import Packet, build_packet, parse_packet, read_packet

# 公共 API
__all__ = [
    "constants",
    "Packet",
    "build_packet",
    "parse_packet",
    "read_packet",
    "Handshake",
    "BaseExchange",
    "MultiPacketExchange",
    "SinglePacketExchange",
]
