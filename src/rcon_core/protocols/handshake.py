"""
RCON 认证握手状态机 (Handshake)

状态流转:
    无密码                          -> NO_AUTH_NEEDED
    发送 AUTH 包                    -> AWAITING_AUTH_ECHO
    收到 RESPONSE_VALUE (回显)      -> AWAITING_AUTH_RESULT -> AUTHENTICATED
    直接收到 AUTH_RESPONSE          -> AUTHENTICATED
    ID 不符 / 类型不符              -> FAILED

标准服务器先回一个空的 RESPONSE_VALUE 再回 AUTH_RESPONSE；
Minecraft 只回 AUTH_RESPONSE。状态机无需配置即可同时兼容两者。
"""

import logging
from typing import TYPE_CHECKING

from ..exceptions import AuthError
from ..state import HandshakeState
from . import packets
from .constants import PacketType

if TYPE_CHECKING:
    from ..network import StreamClient
    from ..state import RconState

logger = logging.getLogger(__name__)


class Handshake:
    """在一条新连接上执行一次认证。"""

    def __init__(self, stream: "StreamClient", state: "RconState") -> None:
        self.stream = stream
        self.state = state

    def _transition(self, new_state: HandshakeState) -> HandshakeState:
        logger.debug(f"handshake: {self.state.handshake} -> {new_state.name}")
        self.state.handshake = new_state
        return new_state

    def _fail(self, reason: str) -> AuthError:
        self._transition(HandshakeState.FAILED)
        logger.warning(f"认证失败: {reason}")
        return AuthError(f"authentication failure: {reason}")

    async def run(self, password: str) -> HandshakeState:
        """执行握手。

        Args:
            password: 认证密码，为空则跳过认证。

        Returns:
            HandshakeState: NO_AUTH_NEEDED 或 AUTHENTICATED。

        Raises:
            AuthError: 服务器拒绝认证。
            MalformedResponseError: 响应包格式错误。
            NetworkError: 网络通信异常。
        """
        if not password:
            return self._transition(HandshakeState.NO_AUTH_NEEDED)

        auth_id = self.state.next_request_id()
        await self.stream.send(packets.build_packet(PacketType.AUTH, auth_id, password))
        self._transition(HandshakeState.AWAITING_AUTH_ECHO)

        pkt = await packets.read_packet(self.stream)
        if pkt.id != auth_id:
            raise self._fail(f"unexpected packet id {pkt.id}")

        if pkt.type == PacketType.RESPONSE_VALUE:
            self._transition(HandshakeState.AWAITING_AUTH_RESULT)
            pkt = await packets.read_packet(self.stream)
            if pkt.id != auth_id:
                raise self._fail(f"unexpected packet id {pkt.id}")
            if pkt.type != PacketType.AUTH_RESPONSE:
                raise self._fail(f"unexpected type {pkt.type}")
        elif pkt.type != PacketType.AUTH_RESPONSE:
            raise self._fail(f"unexpected type {pkt.type}")

        return self._transition(HandshakeState.AUTHENTICATED)
