# src/rcon_core/protocols/constants.py
"""
RCON 协议层 - 常量定义

本模块定义了所有协议相关的魔法数字、帧结构常量和固定值。
采用命名空间 (Class Namespace) 组织。
"""

import struct

# =========================================================================
# 1. 包类型 (Packet Types)
# =========================================================================


class PacketType:
    """包头中的 type 字段。

    注意 2 同时表示 EXEC_COMMAND (Client -> Server) 和 AUTH_RESPONSE
    (Server -> Client)，只能根据方向与握手阶段区分。
    """

    RESPONSE_VALUE = 0  # 服务器返回的数据 (Server -> Client)
    EXEC_COMMAND = 2  # 执行命令 (Client -> Server)
    AUTH_RESPONSE = 2  # 认证结果 (Server -> Client)
    AUTH = 3  # 认证请求 (Client -> Server)


# =========================================================================
# 2. 帧结构 (Framing)
# =========================================================================

# size 字段本身: int32 little-endian
SIZE_FORMAT = "<i"
SIZE_LEN = struct.calcsize(SIZE_FORMAT)

# size 之后的头部: id (int32) + type (int32)
HEADER_FORMAT = "<ii"
HEADER_LEN = struct.calcsize(HEADER_FORMAT)

# 包尾: body 的 NUL 结束符 + 空字符串的 NUL 结束符
TERMINATOR = b"\x00\x00"

# 最小 size = id(4) + type(4) + 包尾(2)
MIN_PACKET_SIZE = HEADER_LEN + len(TERMINATOR)


# =========================================================================
# 3. 多包响应 (Multi-packet Responses)
# =========================================================================

# 服务器对空 RESPONSE_VALUE 哨兵包的第二个回显包的固定 body
SENTINEL_MARKER = b"\x00\x01\x00\x00"
