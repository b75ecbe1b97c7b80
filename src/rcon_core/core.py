# File: src/rcon_core/core.py
"""
RCON 客户端 (Client Engine)

职责：
1. 资源组装：State + Network + Config。
2. 策略分发：按配置选定单包 / 多包交换策略。
3. 生命周期：Connect -> Handshake -> Exec* -> Close。

客户端不做内部加锁。请求 ID 的关联假设请求严格串行，
如需在多个 Task 间共享同一实例，调用方必须自行串行化访问。
"""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import replace
from typing import Any

from .command import Command
from .config import RconConfig, ResponseMode
from .exceptions import (
    ConfigError,
    MalformedResponseError,
    NetworkError,
    NonASCIIError,
    RconError,
    StateError,
)
from .network import StreamClient
from .protocols.base import BaseExchange
from .protocols.exchange import MultiPacketExchange, SinglePacketExchange
from .protocols.handshake import Handshake
from .state import ClientStatus, RconState

logger = logging.getLogger(__name__)

# 定义回调函数类型别名：支持同步或异步函数
StatusCallback = Callable[[ClientStatus, str], Any | Awaitable[Any]]


class RconClient:
    """Source RCON 客户端 (Async)。"""

    def __init__(
        self,
        config: RconConfig,
        status_callback: StatusCallback | None = None,
    ) -> None:
        """初始化客户端。不执行任何网络操作。

        Args:
            config: 全局配置对象。
            status_callback: 初始状态回调。也可以之后使用 add_listener 注册。

        Raises:
            ConfigError: config 为 None 或类型错误。
        """
        if not isinstance(config, RconConfig):
            raise ConfigError(f"配置无效: 期望 RconConfig, 实际为 {config!r}")

        self.config = config

        self._listeners: list[StatusCallback] = []
        if status_callback:
            self.add_listener(status_callback)

        self._state = RconState()
        self.stream = StreamClient(config)

        self.exchange: BaseExchange
        self._load_strategy()

    @classmethod
    async def open(
        cls,
        config: RconConfig,
        status_callback: StatusCallback | None = None,
    ) -> "RconClient":
        """构造客户端并完成连接与认证。"""
        client = cls(config, status_callback)
        await client.connect()
        return client

    @property
    def state(self) -> RconState:
        """获取当前会话状态的只读副本。

        返回的是一个副本 (Copy)，修改它不会影响客户端内部状态。
        """
        return replace(self._state)

    def add_listener(self, callback: StatusCallback) -> None:
        """注册状态变更监听器。"""
        if callback not in self._listeners:
            self._listeners.append(callback)

    def remove_listener(self, callback: StatusCallback) -> None:
        """移除状态变更监听器。"""
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _load_strategy(self) -> None:
        """加载并实例化对应的交换策略。"""
        mode = self.config.response_mode
        if mode is ResponseMode.MULTI:
            self.exchange = MultiPacketExchange(self.stream, self._state)
        elif mode is ResponseMode.SINGLE:
            self.exchange = SinglePacketExchange(self.stream, self._state)
        else:
            raise ConfigError(f"不支持的响应模式: {mode}")

    async def connect(self) -> None:
        """建立连接并执行认证握手。

        握手失败时会关闭底层连接后再抛出异常。

        Raises:
            StateError: 客户端已经连接过。
            NetworkError: 拨号或读写失败。
            AuthError: 认证被拒绝。
            MalformedResponseError: 握手响应格式错误。
        """
        if self._state.status != ClientStatus.IDLE:
            raise StateError(f"无法连接: 当前状态为 {self._state.status.name}")

        self._update_status(ClientStatus.CONNECTING, f"正在连接 {self.config.address}")
        try:
            await self.stream.connect()

            self._update_status(ClientStatus.AUTHENTICATING, "正在认证...")
            handshake = await Handshake(self.stream, self._state).run(
                self.config.password
            )
        except RconError as e:
            self._state.last_error = str(e)
            await self.stream.close()
            self._update_status(ClientStatus.ERROR, f"连接失败: {e}")
            raise

        self._update_status(ClientStatus.READY, f"连接就绪 ({handshake.name})")

    async def exec(self, command: str | Command) -> str:
        """在服务器上执行命令并返回响应。

        Args:
            command: 命令字符串或 Command 对象。

        Returns:
            str: 完整的响应文本 (多包模式下已重组)。

        Raises:
            NonASCIIError: 命令包含非 ASCII 字符，未写入任何字节。
            StateError: 客户端未就绪。
            MalformedResponseError: 响应违反协议约定，连接随之失效。
            NetworkError: 网络通信异常，连接随之失效。
            asyncio.CancelledError: 调用方取消了本次执行，连接随之失效。
        """
        body = str(command)

        if not body.isascii():
            raise NonASCIIError(body)

        if not self._state.is_ready:
            raise StateError(f"无法执行命令: 当前状态为 {self._state.status.name}")

        try:
            return await self.exchange.execute(body)
        except (MalformedResponseError, NetworkError) as e:
            # 字节流已失步，不做恢复
            await self._abandon(f"命令执行异常: {e}", str(e))
            raise
        except asyncio.CancelledError:
            # 请求可能已部分写出，残留的响应会污染后续读取
            await self._abandon("命令执行被取消", "cancelled")
            raise

    async def _abandon(self, msg: str, error: str) -> None:
        """标记连接失效并关闭底层字节流。"""
        self._state.last_error = error
        self._update_status(ClientStatus.ERROR, msg)
        await self.stream.close()

    async def exec_cmd(self, cmd: Command) -> str:
        """执行一个 Command 对象。"""
        return await self.exec(cmd)

    async def close(self) -> None:
        """关闭连接。重复调用是安全的。"""
        await self.stream.close()
        if self._state.status not in (ClientStatus.CLOSED, ClientStatus.ERROR):
            self._update_status(ClientStatus.CLOSED, "连接已关闭")

    async def __aenter__(self) -> "RconClient":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def _update_status(self, status: ClientStatus, msg: str) -> None:
        """更新内部状态并异步触发所有回调。"""
        self._state.status = status
        if status == ClientStatus.ERROR:
            logger.warning(f"[{status.name}] {msg}")
        else:
            logger.info(f"[{status.name}] {msg}")

        for callback in self._listeners:
            try:
                if inspect.iscoroutinefunction(callback):
                    asyncio.create_task(callback(status, msg))  # type: ignore
                else:
                    loop = asyncio.get_running_loop()
                    loop.call_soon(callback, status, msg)
            except RuntimeError:
                # 应对 loop 尚未运行或已关闭的边缘情况
                pass
