"""
RCON 核心库 - 配置模块

负责配置的加载、解析与强类型转换。
支持从 TOML 文件、环境变量 (.env) 或字典中加载配置。
所有配置都在任何网络活动之前解析完毕，非法值统一抛出 ConfigError。
"""

import logging
import os
import tomllib
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

# Source RCON 默认端口
DEFAULT_PORT = 27015

# 默认的 读 / 写 / 拨号 超时 (秒)
DEFAULT_TIMEOUT = 10.0


class ResponseMode(Enum):
    """响应重组模式，在客户端构造时选定，连接生命周期内不可变。"""

    MULTI = "multi"
    """多包模式 (默认)：利用哨兵包回显检测响应结束。"""

    SINGLE = "single"
    """单包模式：Minecraft / Starbound 等不支持多包响应的服务器需要。"""


@dataclass(frozen=True)
class RconConfig:
    """RconClient 的强类型配置对象。

    所有字段均为只读 (frozen=True)，确保配置在运行时不可变。

    Attributes:
        host: 服务器主机名或 IP 地址。
        port: 服务器 RCON 端口。
        password: 认证密码，为空表示无需认证。
        timeout: 每次读 / 写 / 拨号操作的超时秒数。
        response_mode: 响应重组模式。
    """

    host: str
    port: int = DEFAULT_PORT
    password: str = ""
    timeout: float = DEFAULT_TIMEOUT
    response_mode: ResponseMode = ResponseMode.MULTI

    def __post_init__(self) -> None:
        if not self.host:
            raise ConfigError("配置无效: host 不能为空")
        if not 0 < self.port < 65536:
            raise ConfigError(f"端口无效: {self.port}")
        if self.timeout <= 0:
            raise ConfigError(f"超时必须为正数: {self.timeout}")

    @property
    def address(self) -> str:
        """返回 host:port 形式的目标地址 (IPv6 自动加方括号)。"""
        if ":" in self.host:
            return f"[{self.host}]:{self.port}"
        return f"{self.host}:{self.port}"

    @property
    def multi_packet(self) -> bool:
        return self.response_mode is ResponseMode.MULTI

    def __repr__(self) -> str:
        """
        覆盖默认的 repr，隐藏密码字段，防止日志泄露敏感信息。
        """
        return (
            f"<{self.__class__.__name__} "
            f"server={self.address}, "
            f"password='{'******' if self.password else ''}', "
            f"timeout={self.timeout}, "
            f"mode={self.response_mode.value}>"
        )


def parse_address(address: str) -> tuple[str, int]:
    """将 `host[:port]` 字符串拆分为主机与端口。

    没有端口时使用 DEFAULT_PORT。IPv6 地址需写成 `[::1]:27015` 的形式，
    不带方括号的裸 IPv6 地址视为不含端口。

    Args:
        address: 目标地址字符串。

    Returns:
        tuple[str, int]: (host, port)。

    Raises:
        ConfigError: 地址为空或端口不是合法整数。
    """
    address = address.strip()
    if not address:
        raise ConfigError("地址不能为空")

    if address.startswith("["):
        host, sep, rest = address[1:].partition("]")
        if not sep:
            raise ConfigError(f"地址格式无效: {address}")
        port_str = rest[1:] if rest.startswith(":") else ""
    elif address.count(":") == 1:
        host, _, port_str = address.partition(":")
    else:
        host, port_str = address, ""

    if not port_str:
        return host, DEFAULT_PORT

    try:
        return host, int(port_str)
    except ValueError:
        raise ConfigError(f"端口格式无效: {port_str}") from None


def _to_bool(val: Any) -> bool:
    if isinstance(val, bool):
        return val
    return str(val).strip().lower() in ("true", "1", "t", "yes", "on")


def create_config_from_dict(raw_data: dict[str, Any]) -> RconConfig:
    """通用工厂：将字典转换为强类型配置对象。

    负责字段的清洗、默认值注入和类型转换。

    支持的键:
        address: `host[:port]` 形式的地址 (与 host/port 二选一)。
        host / port: 分开给出的主机与端口。
        password: 认证密码。
        timeout: 超时秒数。
        multi_packet: 是否启用多包模式，默认 True。

    Args:
        raw_data: 原始配置字典 (来自 TOML 或 Env)。

    Returns:
        RconConfig: 验证并转换后的配置对象。

    Raises:
        ConfigError: 当必要字段缺失、值为 None 或格式错误时抛出。
    """
    try:
        for key, val in raw_data.items():
            if val is None:
                raise ConfigError(f"配置无效: 选项 '{key}' 为 None")

        if "address" in raw_data:
            host, port = parse_address(str(raw_data["address"]))
            if "port" in raw_data:
                port = int(raw_data["port"])
        elif "host" in raw_data:
            host = str(raw_data["host"])
            port = int(raw_data.get("port", DEFAULT_PORT))
        else:
            raise ConfigError("配置缺失: 缺少必要字段 'address' 或 'host'")

        mode = (
            ResponseMode.MULTI
            if _to_bool(raw_data.get("multi_packet", True))
            else ResponseMode.SINGLE
        )

        return RconConfig(
            host=host,
            port=port,
            password=str(raw_data.get("password", "")),
            timeout=float(raw_data.get("timeout", DEFAULT_TIMEOUT)),
            response_mode=mode,
        )

    except Exception as e:
        if isinstance(e, ConfigError):
            raise
        raise ConfigError(f"配置生成失败: {e}") from e


def load_config_from_toml(file_path: Path, profile: str = "default") -> RconConfig:
    """从 TOML 文件加载配置。

    支持多层级查找策略:
    1. [profile.xxx]: 优先查找指定的 profile 块。
    2. [rcon]: 单服务器配置块。
    3. Root: 兼容根目录直接配置。

    Args:
        file_path: TOML 文件路径。
        profile: 配置预设名。默认为 "default"。

    Returns:
        RconConfig: 配置对象。

    Raises:
        ConfigError: 文件读取失败或 Profile 不存在。
    """
    if not file_path.exists():
        raise ConfigError(f"配置文件未找到: {file_path}")

    try:
        with open(file_path, "rb") as f:
            data = tomllib.load(f)
    except Exception as e:
        raise ConfigError(f"读取 TOML 失败: {e}") from e

    if "profile" in data:
        if profile not in data["profile"]:
            raise ConfigError(f"未找到预设: [profile.{profile}]")
        raw_config = data["profile"][profile]
    elif "rcon" in data:
        if profile != "default":
            logger.warning(f"配置仅包含 [rcon] 节，忽略 profile='{profile}'。")
        raw_config = data["rcon"]
    else:
        raw_config = data

    return create_config_from_dict(raw_config)


def load_config_from_env(dotenv_path: Path | None = None) -> RconConfig:
    """从环境变量加载配置 (Docker/Cloud Friendly)。

    读取所有以 `RCON_` 开头的环境变量，并映射到配置字段。
    例如: `RCON_PASSWORD` -> `password`。
    如果给出 dotenv_path，会先用 python-dotenv 加载该文件 (不覆盖已有变量)。

    Args:
        dotenv_path: 可选的 .env 文件路径。

    Returns:
        RconConfig: 配置对象。

    Raises:
        ConfigError: 未检测到任何相关环境变量，或 .env 文件不存在。
    """
    if dotenv_path is not None:
        if not dotenv_path.exists():
            raise ConfigError(f".env 文件未找到: {dotenv_path}")
        load_dotenv(dotenv_path=dotenv_path, override=False)

    # 字段映射表 (Config Field -> Env Suffix)
    env_map = {
        "address": "ADDRESS",
        "host": "HOST",
        "port": "PORT",
        "password": "PASSWORD",
        "timeout": "TIMEOUT",
        "multi_packet": "MULTI_PACKET",
    }

    raw_data = {}

    for cfg_key, env_suffix in env_map.items():
        val = os.environ.get(f"RCON_{env_suffix}")
        if val is not None:
            raw_data[cfg_key] = val

    if not raw_data:
        raise ConfigError("未检测到 RCON_ 前缀的环境变量")

    return create_config_from_dict(raw_data)
