# File: src/rcon_core/state.py
"""
RCON 核心库 - 状态模块

负责定义和存储所有易变的会话状态。
本模块不包含业务逻辑，仅作为数据容器供 Client 和 Exchange 共享读写。
"""

from dataclasses import dataclass
from enum import Enum, auto

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1


def wrap_int32(value: int) -> int:
    """将整数按有符号 32 位回绕，与线路上的 id 字段保持一致。"""
    return (value - INT32_MIN) % 2**32 + INT32_MIN


class ClientStatus(Enum):
    """客户端的生命周期状态枚举。

    状态流转示意:
    IDLE -> CONNECTING -> AUTHENTICATING -> READY -> CLOSED
               |                |             |
               v                v             v
             ERROR            ERROR         ERROR
    """

    IDLE = auto()
    """初始状态，客户端已实例化但未执行任何操作。"""

    CONNECTING = auto()
    """正在建立 TCP 连接。"""

    AUTHENTICATING = auto()
    """正在执行认证握手。"""

    READY = auto()
    """握手完成，可以执行命令。"""

    CLOSED = auto()
    """连接已被调用方主动关闭。"""

    ERROR = auto()
    """错误状态。字节流已失步或连接失效，必须重新连接。"""


class HandshakeState(Enum):
    """认证握手状态机。

    NO_AUTH_NEEDED 与 AUTHENTICATED 为成功终态，FAILED 为失败终态。
    """

    NO_AUTH_NEEDED = auto()
    AWAITING_AUTH_ECHO = auto()
    AWAITING_AUTH_RESULT = auto()
    AUTHENTICATED = auto()
    FAILED = auto()


@dataclass
class RconState:
    """存储单条 RCON 连接的易变状态数据。

    该对象是非持久化的，且从不在多个客户端之间共享。
    每次重新连接时都应重新实例化，以避免旧的请求 ID 污染新会话。

    Attributes:
        request_id: 下一个待发送包使用的关联 ID，从 0 开始，每写一个包加一，
            超过 INT32_MAX 后回绕到 INT32_MIN。
        handshake: 认证握手状态。
        status: 当前客户端的运行状态。
        last_error: 最近一次发生的错误信息描述。
    """

    request_id: int = 0
    handshake: HandshakeState | None = None
    status: ClientStatus = ClientStatus.IDLE
    last_error: str = ""

    def next_request_id(self) -> int:
        """取出当前请求 ID 并将计数器加一。

        Returns:
            int: 本次写包应使用的 ID。
        """
        req_id = self.request_id
        self.request_id = wrap_int32(req_id + 1)
        return req_id

    @property
    def authenticated(self) -> bool:
        """握手是否已成功 (包括无需认证的情况)。"""
        return self.handshake in (
            HandshakeState.NO_AUTH_NEEDED,
            HandshakeState.AUTHENTICATED,
        )

    @property
    def is_ready(self) -> bool:
        """判断当前是否可以执行命令。"""
        return self.status == ClientStatus.READY
