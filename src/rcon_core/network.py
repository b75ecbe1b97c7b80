# src/rcon_core/network.py
"""
RCON 核心库 - 网络模块 (Network) [Asyncio Edition]

封装 TCP 连接的建立、发送、接收和关闭逻辑。
该模块屏蔽了底层 StreamReader/StreamWriter 的复杂性，向协议层提供纯粹的 bytes 收发接口。
每一次读写之前都会重新应用配置中的超时 (Deadline)。
"""

import asyncio
import logging
from typing import Optional

from .config import RconConfig
from .exceptions import NetworkError

logger = logging.getLogger(__name__)

# 读缓冲区大小，对应单个响应包的实际上限
READ_BUFFER_SIZE = 4096


class StreamClient:
    """
    封装 asyncio TCP 操作的客户端。
    """

    def __init__(self, config: RconConfig):
        self.config = config
        self.reader: Optional[asyncio.StreamReader] = None
        self.writer: Optional[asyncio.StreamWriter] = None

    @property
    def connected(self) -> bool:
        return self.writer is not None and not self.writer.is_closing()

    async def connect(self) -> None:
        """
        建立 TCP 连接 (受 timeout 约束)。
        """
        target = (self.config.host, self.config.port)
        try:
            self.reader, self.writer = await asyncio.wait_for(
                asyncio.open_connection(*target, limit=READ_BUFFER_SIZE),
                timeout=self.config.timeout,
            )
            logger.debug(f"TCP 连接已建立: {self.config.address}")

        except asyncio.TimeoutError:
            raise NetworkError(
                f"连接超时 ({self.config.timeout}s): {self.config.address}"
            ) from None
        except OSError as e:
            raise NetworkError(f"连接失败 {self.config.address}: {e}") from e

    async def send(self, data: bytes) -> None:
        """
        发送数据并等待写缓冲区排空。
        """
        if not self.connected:
            raise NetworkError("连接未建立或已关闭")

        assert self.writer is not None

        try:
            self.writer.write(data)
            await asyncio.wait_for(self.writer.drain(), timeout=self.config.timeout)
        except asyncio.TimeoutError:
            raise NetworkError(f"发送超时 ({self.config.timeout}s)") from None
        except OSError as e:
            raise NetworkError(f"发送失败: {e}") from e

    async def read(self, n: int) -> bytes:
        """
        读取最多 n 个字节。

        可能返回少于 n 个字节；返回 b"" 表示对端已关闭连接 (EOF)。
        """
        if self.reader is None:
            raise NetworkError("连接未建立")

        try:
            return await asyncio.wait_for(
                self.reader.read(n), timeout=self.config.timeout
            )
        except asyncio.TimeoutError:
            raise NetworkError(f"接收超时 ({self.config.timeout}s)") from None
        except OSError as e:
            raise NetworkError(f"接收错误: {e}") from e

    async def close(self) -> None:
        """关闭连接"""
        if self.writer:
            writer, self.writer = self.writer, None
            self.reader = None
            writer.close()
            try:
                await writer.wait_closed()
            except OSError as e:
                logger.debug(f"关闭连接时发生错误 (忽略): {e}")
            logger.debug("TCP 连接已关闭")

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
