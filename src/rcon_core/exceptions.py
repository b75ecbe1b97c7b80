# File: src/rcon_core/exceptions.py
"""
RCON 核心库 - 异常体系 (Exceptions)

定义库内统一使用的异常类，以便上层应用（如 CLI/Bot）能进行精细的错误处理。
库内不做任何自动重试，所有异常都直接抛给调用方。
"""


class RconError(Exception):
    """RCON 核心库的所有内部异常的基类。

    上层应用可以通过捕获此异常来处理所有由 rcon-core 抛出的已知错误。
    """

    pass


class ConfigError(RconError):
    """配置加载或校验失败。

    触发场景:
    1. 传入了 None 选项 (nil option)。
    2. 字段格式错误 (如端口越界、超时非正数)。
    3. 找不到配置文件或环境变量。

    注意: 此类错误总是在任何网络活动之前抛出。
    """

    pass


class NetworkError(RconError):
    """网络层面的错误 (I/O 级别)。

    触发场景:
    1. 连接被拒绝或 DNS 解析失败。
    2. 读写超时 (Deadline 到期)。
    3. 连接被对端关闭 (EOF)。

    注意: 发生此类错误后连接应视为已失效，由调用方决定是否重连。
    """

    pass


class ProtocolError(RconError):
    """协议交互错误 (逻辑级别) 的基类。"""

    pass


class MalformedResponseError(ProtocolError):
    """服务器响应不符合协议约定。

    触发场景:
    1. size 字段小于最小帧长度 (10)。
    2. 包尾不是 0x00 0x00。
    3. 非预期的包类型或关联 ID。
    4. 多包响应的哨兵回显异常。

    解码失败后字节流已失去同步，调用方应关闭连接而不是尝试恢复。
    """

    def __init__(self, reason: str) -> None:
        """初始化协议格式错误。

        Args:
            reason: 人类可读的错误原因。
        """
        super().__init__(f"malformed response {reason}")
        self.reason = reason


class AuthError(RconError):
    """认证被拒绝 (业务层面的失败)。

    当握手阶段收到的 ID/类型表明密码错误时抛出。
    这通常意味着不可恢复的配置错误，需要用户干预。
    """

    pass


class NonASCIIError(RconError):
    """命令中包含非 ASCII 字符。

    在写入任何字节之前抛出，不会改变会话状态。
    """

    def __init__(self, command: str) -> None:
        super().__init__("non-ascii body")
        self.command = command


class StateError(RconError):
    """状态机错误 (FSM Violation)。

    触发场景:
    1. 在未连接状态下执行命令。
    2. 在连接关闭或失效后继续执行命令。
    3. 在已连接状态下重复调用 connect。
    """

    pass
