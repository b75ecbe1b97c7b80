"""
RCON 响应重组策略 (Response Reassembly)

职责：
1. 单包模式：一请求一响应，校验关联 ID。
2. 多包模式：在命令之后追加一个空的 RESPONSE_VALUE 哨兵包。
   服务器严格按发送顺序处理，所以命令的全部输出一定先于哨兵的回显到达，
   哨兵的第二个回显包 (固定 body) 即为响应结束的信号。
"""

from ..exceptions import MalformedResponseError
from ..state import wrap_int32
from .base import BaseExchange
from .constants import SENTINEL_MARKER, PacketType


class SinglePacketExchange(BaseExchange):
    """单包策略，用于不支持多包响应的服务器 (如 Minecraft、Starbound)。"""

    async def write(self, packet_type: int, body: str) -> None:
        await self.write_packet(packet_type, body)

    async def read(self, expected_id: int) -> str:
        pkt = await self.read_packet()

        if pkt.id != expected_id:
            raise MalformedResponseError(f"unexpected packet id {pkt.id}")

        return pkt.text


class MultiPacketExchange(BaseExchange):
    """多包策略 (默认)。

    命令包使用 ID N，哨兵包使用 ID N+1。读取时:
    - ID N   : 命令输出，追加到缓冲区，可能有多个。
    - ID N+1 : 哨兵回显，恰好两个；第一个 body 为空，
               第二个 body 为 SENTINEL_MARKER，收到即结束。
    - 其他   : 协议错误。
    """

    async def write(self, packet_type: int, body: str) -> None:
        await self.write_packet(packet_type, body)
        await self.write_packet(PacketType.RESPONSE_VALUE, b"")

    async def read(self, expected_id: int) -> str:
        buf = bytearray()
        sentinel_id = wrap_int32(expected_id + 1)
        sentinel_count = 0

        while True:
            pkt = await self.read_packet()

            if pkt.type != PacketType.RESPONSE_VALUE:
                raise MalformedResponseError("unexpected type")

            if pkt.id == expected_id:
                buf.extend(pkt.body)
                continue

            if pkt.id != sentinel_id:
                raise MalformedResponseError(f"unexpected packet id {pkt.id}")

            sentinel_count += 1
            if sentinel_count == 1:
                # 哨兵包的原样回显
                if pkt.body:
                    raise MalformedResponseError("non-empty body")
                continue

            if pkt.body != SENTINEL_MARKER:
                raise MalformedResponseError(f"unexpected body {pkt.text!r}")

            self.logger.debug(
                f"多包响应重组完成: id={expected_id} len={len(buf)}"
            )
            return bytes(buf).decode("utf-8", errors="replace")
