# File: src/rcon_core/protocols/packets.py
"""
RCON 协议封包构建器与解析器 (Packet Codec)

负责单个线路包与字节流之间的相互转换，独占二进制布局约定:

    offset 0 : size  (int32) = size 字段之后的字节数
    offset 4 : id    (int32) 关联 ID
    offset 8 : type  (int32) 包类型
    offset 12: body  (size - 10 字节)
    末尾     : 0x00 0x00 (必须存在的包尾)

所有整数均为 little-endian 有符号 32 位。
本模块除 read_packet 从传入的流读取字节外，不持有任何配置或会话信息。
"""

import logging
import struct
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..exceptions import MalformedResponseError, NetworkError
from . import constants

if TYPE_CHECKING:
    from ..network import StreamClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Packet:
    """一个已完整构造或解码的 RCON 包。

    Attributes:
        size: size 字段的值，恒等于 len(body) + 10。
        id: 发送方选定的关联 ID。
        type: 包类型 (见 constants.PacketType)。
        body: 去掉包尾后的原始负载，可能包含内嵌的 0x00。
    """

    size: int
    id: int
    type: int
    body: bytes

    @property
    def text(self) -> str:
        """以文本形式返回 body。"""
        return self.body.decode("utf-8", errors="replace")


def _to_bytes(body: str | bytes) -> bytes:
    if isinstance(body, str):
        return body.encode("utf-8")
    return bytes(body)


def build_packet(packet_type: int, packet_id: int, body: str | bytes = b"") -> bytes:
    """构建一个线路包。

    Args:
        packet_type: 包类型。
        packet_id: 关联 ID。
        body: 包体。str 按 UTF-8 编码 (命令在 core 层已校验为 ASCII)。

    Returns:
        bytes: size + id + type + body + 0x00 0x00。
    """
    payload = _to_bytes(body)
    size = len(payload) + constants.MIN_PACKET_SIZE
    return (
        struct.pack(constants.SIZE_FORMAT, size)
        + struct.pack(constants.HEADER_FORMAT, packet_id, packet_type)
        + payload
        + constants.TERMINATOR
    )


def _check_size(size: int) -> None:
    if size < constants.MIN_PACKET_SIZE:
        raise MalformedResponseError("size too small")


def _unpack_payload(size: int, raw: bytes) -> Packet:
    """将 size 之后的 size 个字节解析为 Packet。"""
    packet_id, packet_type = struct.unpack_from(constants.HEADER_FORMAT, raw)
    payload = raw[constants.HEADER_LEN :]

    if payload[-len(constants.TERMINATOR) :] != constants.TERMINATOR:
        raise MalformedResponseError("invalid trailer")

    return Packet(
        size=size,
        id=packet_id,
        type=packet_type,
        body=payload[: -len(constants.TERMINATOR)],
    )


def parse_packet(data: bytes) -> Packet:
    """从一段完整的缓冲区中解码一个包。

    缓冲区长度必须恰好等于 size + 4。

    Args:
        data: 完整的线路包字节。

    Returns:
        Packet: 解码后的包。

    Raises:
        MalformedResponseError: 长度不足、size 非法或包尾错误。
    """
    if len(data) < constants.SIZE_LEN:
        raise MalformedResponseError("short packet")

    (size,) = struct.unpack_from(constants.SIZE_FORMAT, data)
    _check_size(size)

    raw = data[constants.SIZE_LEN :]
    if len(raw) != size:
        raise MalformedResponseError(
            f"size mismatch (declared {size}, got {len(raw)})"
        )

    return _unpack_payload(size, raw)


async def _read_exactly(stream: "StreamClient", n: int) -> bytes:
    """循环读取直到拿到恰好 n 个字节。

    部分读取是正常情况；读到 EOF 时抛出 NetworkError。
    """
    buf = bytearray()
    while len(buf) < n:
        chunk = await stream.read(n - len(buf))
        if not chunk:
            raise NetworkError(f"连接已关闭 (期望 {n} 字节, 实际 {len(buf)} 字节)")
        buf.extend(chunk)
    return bytes(buf)


async def read_packet(stream: "StreamClient") -> Packet:
    """从字节流中读取并解码一个包。

    成功时恰好消耗 size + 4 个字节。失败时消耗的字节数不定，
    调用方必须认为字节流已失去同步并关闭连接。

    Args:
        stream: 提供 `async read(n)` 的字节流。

    Returns:
        Packet: 解码后的包。

    Raises:
        MalformedResponseError: size 过小或包尾错误。
        NetworkError: 读取失败、超时或连接被关闭。
    """
    (size,) = struct.unpack(
        constants.SIZE_FORMAT, await _read_exactly(stream, constants.SIZE_LEN)
    )
    _check_size(size)

    pkt = _unpack_payload(size, await _read_exactly(stream, size))
    logger.debug("read_packet: id=%d type=%d size=%d", pkt.id, pkt.type, pkt.size)
    return pkt
