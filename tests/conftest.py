# tests/conftest.py
import sys
from pathlib import Path

import pytest
import pytest_asyncio

# 确保 src 目录在 sys.path 中
src_path = Path(__file__).resolve().parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from mock_server import MockRconServer

from rcon_core.config import RconConfig, ResponseMode


@pytest.fixture
def valid_config():
    """
    [Fixture] 返回一个指向本地、带密码的多包模式配置。
    """
    return RconConfig(
        host="127.0.0.1",
        port=27015,
        password="test_password",
        timeout=2.0,
        response_mode=ResponseMode.MULTI,
    )


@pytest_asyncio.fixture
async def mock_server():
    """[Fixture] 启动一个默认行为的模拟服务器 (密码 test_password，带认证回显)。"""
    server = MockRconServer(
        password="test_password",
        responses={
            "echo test me": ["test me"],
            "status": ["hostname: test ", "map: de_dust2"],
        },
    )
    await server.start()
    yield server
    await server.close()


@pytest.fixture
def server_config(mock_server):
    """[Fixture] 指向 mock_server 的配置。"""
    return RconConfig(
        host=mock_server.host,
        port=mock_server.port,
        password="test_password",
        timeout=2.0,
    )
