# tests/test_handshake.py
"""
测试认证握手状态机 (src/rcon_core/protocols/handshake.py)。
重点验证:
1. 标准服务器: RESPONSE_VALUE 回显 + AUTH_RESPONSE。
2. Minecraft: 只有 AUTH_RESPONSE。
3. ID / 类型不符时抛出 AuthError。
"""

import pytest
from mock_server import FakeStream

from rcon_core.exceptions import AuthError, MalformedResponseError, NetworkError
from rcon_core.protocols import build_packet
from rcon_core.protocols.constants import PacketType
from rcon_core.protocols.handshake import Handshake
from rcon_core.state import HandshakeState, RconState


def _run(responses: bytes, password: str = "secret"):
    stream = FakeStream(responses)
    state = RconState()
    return stream, state, Handshake(stream, state).run(password)


@pytest.mark.asyncio
async def test_no_password_skips_auth():
    stream, state, coro = _run(b"", password="")

    assert await coro is HandshakeState.NO_AUTH_NEEDED
    assert state.handshake is HandshakeState.NO_AUTH_NEEDED
    assert state.authenticated is True
    assert stream.sent == []
    assert state.request_id == 0


@pytest.mark.asyncio
async def test_echo_then_result():
    responses = build_packet(PacketType.RESPONSE_VALUE, 0) + build_packet(
        PacketType.AUTH_RESPONSE, 0
    )
    stream, state, coro = _run(responses)

    assert await coro is HandshakeState.AUTHENTICATED
    assert state.authenticated is True
    assert stream.remaining == 0

    # 认证包: type=AUTH, id=0, body=密码
    (auth_pkt,) = stream.sent_packets
    assert auth_pkt.type == PacketType.AUTH
    assert auth_pkt.id == 0
    assert auth_pkt.body == b"secret"
    assert state.request_id == 1


@pytest.mark.asyncio
async def test_result_without_echo():
    """Minecraft 不发送回显包"""
    stream, state, coro = _run(build_packet(PacketType.AUTH_RESPONSE, 0))

    assert await coro is HandshakeState.AUTHENTICATED
    assert stream.remaining == 0


@pytest.mark.asyncio
async def test_wrong_password_id():
    """密码错误时服务器返回 id = -1"""
    stream, state, coro = _run(build_packet(PacketType.AUTH_RESPONSE, -1))

    with pytest.raises(AuthError):
        await coro
    assert state.handshake is HandshakeState.FAILED
    assert state.authenticated is False


@pytest.mark.asyncio
async def test_wrong_password_after_echo():
    responses = build_packet(PacketType.RESPONSE_VALUE, 0) + build_packet(
        PacketType.AUTH_RESPONSE, -1
    )
    stream, state, coro = _run(responses)

    with pytest.raises(AuthError):
        await coro
    assert state.handshake is HandshakeState.FAILED


@pytest.mark.asyncio
async def test_echo_followed_by_wrong_type():
    responses = build_packet(PacketType.RESPONSE_VALUE, 0) + build_packet(
        PacketType.RESPONSE_VALUE, 0
    )
    stream, state, coro = _run(responses)

    with pytest.raises(AuthError):
        await coro


@pytest.mark.asyncio
async def test_unexpected_type():
    stream, state, coro = _run(build_packet(PacketType.AUTH, 0))

    with pytest.raises(AuthError):
        await coro
    assert state.handshake is HandshakeState.FAILED


@pytest.mark.asyncio
async def test_malformed_reply_is_not_auth_error():
    stream, state, coro = _run(b"\x05\x00\x00\x00" + b"\x00" * 8)

    with pytest.raises(MalformedResponseError):
        await coro


@pytest.mark.asyncio
async def test_connection_closed_during_handshake():
    stream, state, coro = _run(build_packet(PacketType.RESPONSE_VALUE, 0))

    with pytest.raises(NetworkError):
        await coro
    assert state.handshake is HandshakeState.AWAITING_AUTH_RESULT
