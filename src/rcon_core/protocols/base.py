"""
RCON 响应交换基类 (Base Exchange)

定义所有请求/响应交换策略必须实现的抽象接口。
"""

import abc
import logging
from typing import TYPE_CHECKING

from . import packets
from .constants import PacketType

if TYPE_CHECKING:
    from ..network import StreamClient
    from ..state import RconState


class BaseExchange(abc.ABC):
    """交换策略抽象基类。

    具体策略（多包、单包）在客户端构造时选定，连接生命周期内不再改变。
    所有写包操作都经过 write_packet，以保证请求 ID 严格按写入顺序递增。
    """

    def __init__(self, stream: "StreamClient", state: "RconState") -> None:
        """初始化交换策略。

        Args:
            stream: 异步字节流客户端。
            state: 共享状态对象 (持有请求 ID 计数器)。
        """
        self.stream = stream
        self.state = state
        self.logger = logging.getLogger(self.__class__.__name__)

    async def execute(self, body: str) -> str:
        """发送一条命令并返回完整响应。

        Args:
            body: 已校验为 ASCII 的命令字符串。

        Returns:
            str: 重组后的响应文本。
        """
        expected_id = self.state.request_id
        await self.write(PacketType.EXEC_COMMAND, body)
        return await self.read(expected_id)

    async def write_packet(self, packet_type: int, body: str | bytes) -> int:
        """用当前请求 ID 写入单个包，并将计数器加一。

        Returns:
            int: 本次写入使用的 ID。
        """
        req_id = self.state.next_request_id()
        self.logger.debug(f"write_packet: id={req_id} type={packet_type}")
        await self.stream.send(packets.build_packet(packet_type, req_id, body))
        return req_id

    async def read_packet(self) -> packets.Packet:
        return await packets.read_packet(self.stream)

    @abc.abstractmethod
    async def write(self, packet_type: int, body: str) -> None:
        """[Abstract] 写入一次请求所需的全部包。"""
        raise NotImplementedError

    @abc.abstractmethod
    async def read(self, expected_id: int) -> str:
        """[Abstract] 读取并重组 expected_id 对应的响应。

        Raises:
            MalformedResponseError: 响应违反协议约定。
            NetworkError: 网络通信异常。
        """
        raise NotImplementedError
