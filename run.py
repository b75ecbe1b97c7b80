#!/usr/bin/env python
# run.py (本地调试脚本)
# 功能：优先加载本地 config.toml，否则读取 .env / 环境变量，连接服务器并依次执行命令
# 用法：python run.py [--profile NAME] status "echo hello"

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# --- 0. 环境准备 ---
PROJECT_ROOT = Path(__file__).resolve().parent
SRC_PATH = PROJECT_ROOT / "src"

if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

try:
    from rcon_core import (
        AuthError,
        ClientStatus,
        ConfigError,
        RconClient,
        RconError,
        __version__,
        load_config_from_env,
        load_config_from_toml,
    )
except ImportError as e:
    print(f"❌ 无法导入 rcon_core: {e}")
    sys.exit(1)

# --- 1. 配置日志 ---
logging.basicConfig(
    level=logging.DEBUG,
    format="%(asctime)s - %(name)s - [%(levelname)s] - %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("DebugApp")


# --- 2. 状态回调 ---
def on_status_change(status: ClientStatus, msg: str):
    icon_map = {
        ClientStatus.CONNECTING: "⏳",
        ClientStatus.AUTHENTICATING: "🔑",
        ClientStatus.READY: "✅",
        ClientStatus.CLOSED: "🔌",
        ClientStatus.ERROR: "❌",
    }
    icon = icon_map.get(status, "ℹ️")
    print(f"\n>>> [Callback] {icon} 状态变更: {status.name} | 消息: {msg}\n")


# --- 3. 主程序 ---
async def run(commands: list[str], profile: str) -> int:
    config_path = PROJECT_ROOT / "config.toml"
    env_path = PROJECT_ROOT / ".env"

    try:
        # A. 加载配置
        if config_path.exists():
            logger.info(f"📄 发现配置文件: {config_path}")
            config = load_config_from_toml(config_path, profile)
        else:
            logger.info("未找到 config.toml，改用环境变量")
            config = load_config_from_env(env_path if env_path.exists() else None)

        logger.debug(f"配置加载完成: {config!r}")

        # B. 连接并执行
        async with RconClient(config, status_callback=on_status_change) as client:
            for cmd in commands:
                logger.info(f">>> {cmd}")
                print(await client.exec(cmd))
        return 0

    except AuthError as ae:
        logger.error(f"⛔ 认证被拒绝: {ae}")
    except ConfigError as ce:
        logger.error(f"🔧 配置错误: {ce}")
    except RconError as e:
        logger.error(f"⚠️ 运行时异常: {e}")
    return 1


def main():
    parser = argparse.ArgumentParser(description=f"RCON-Core v{__version__} runner")
    parser.add_argument("--profile", default="default", help="config.toml 中的预设名")
    parser.add_argument("commands", nargs="*", default=["status"])
    args = parser.parse_args()

    sys.exit(asyncio.run(run(args.commands, args.profile)))


if __name__ == "__main__":
    main()
