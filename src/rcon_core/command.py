"""
RCON 命令模型

命令由动词和有序参数组成，渲染为单个以空格分隔的字符串。
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Command:
    """一条 RCON 命令。

    参数可以是任意能通过 str() 转为可打印文本的对象。

    Example:
        >>> str(Command("echo").with_args("test me"))
        'echo test me'
    """

    verb: str
    args: tuple[Any, ...] = field(default_factory=tuple)

    def with_args(self, *args: Any) -> "Command":
        """返回一个替换了参数列表的新命令。"""
        return Command(self.verb, tuple(args))

    def __str__(self) -> str:
        return " ".join(str(part) for part in (self.verb, *self.args))
