import socket

import pytest

from brynet import socketlib


@pytest.fixture
def listener():
    sock = socketlib.listen(False, "127.0.0.1", 0, 16, False)
    yield sock
    sock.close()


def test_init_socket_succeeds():
    assert socketlib.init_socket() is True


def test_connect_accept_and_send(listener):
    port = socketlib.get_local_addr(listener)[1]
    client = socketlib.connect(False, "127.0.0.1", port)
    server, address = socketlib.accept(listener)
    try:
        assert socketlib.socket_send(client, b"hello") == 5
        assert server.recv(5) == b"hello"
        assert socketlib.get_ip_of_socket(client) == "127.0.0.1"
        assert socketlib.ip_string(address) == "127.0.0.1"
        assert socketlib.get_peer_addr(client)[1] == port
        assert socketlib.is_self_connect(client) is False
    finally:
        client.close()
        server.close()


def test_connect_rejects_invalid_ip():
    with pytest.raises(ValueError):
        socketlib.connect(False, "not-an-ip", 80)


def test_listen_rejects_invalid_ip():
    with pytest.raises(ValueError):
        socketlib.listen(False, "999.1.1.1", 0, 5, False)


def test_connect_refused_raises():
    probe = socketlib.listen(False, "127.0.0.1", 0, 1, False)
    port = socketlib.get_local_addr(probe)[1]
    probe.close()
    with pytest.raises(OSError):
        socketlib.connect(False, "127.0.0.1", port)


def test_listen_with_reuse_port_binds():
    sock = socketlib.listen(False, "127.0.0.1", 0, 5, True)
    try:
        assert socketlib.get_local_addr(sock)[1] > 0
    finally:
        sock.close()


def test_ip_string_formats():
    assert socketlib.ip_string(("127.0.0.1", 80)) == "127.0.0.1"
    assert socketlib.ip_string(("0:0:0:0:0:0:0:1", 80, 0, 0)) == "::1"
    assert socketlib.ip_string("/tmp/some.sock") == "Unknown AF"


def test_unconnected_socket_has_no_peer():
    sock = socketlib.socket_create(socket.AF_INET, socket.SOCK_STREAM, 0)
    try:
        assert sock.family == socket.AF_INET
        assert socketlib.get_ip_of_socket(sock) == ""
        assert socketlib.get_peer_addr(sock) is None
        assert socketlib.is_self_connect(sock) is False
    finally:
        sock.close()


def test_block_and_nonblock_toggle():
    sock = socketlib.socket_create(socket.AF_INET, socket.SOCK_STREAM, 0)
    try:
        socketlib.socket_nonblock(sock)
        assert sock.getblocking() is False
        socketlib.socket_block(sock)
        assert sock.getblocking() is True
    finally:
        sock.close()


def test_socket_options_are_applied():
    sock = socketlib.socket_create(socket.AF_INET, socket.SOCK_STREAM, 0)
    try:
        socketlib.socket_nodelay(sock)
        assert sock.getsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY) != 0
        socketlib.socket_set_send_size(sock, 32 * 1024)
        socketlib.socket_set_recv_size(sock, 32 * 1024)
        assert sock.getsockopt(socket.SOL_SOCKET, socket.SO_SNDBUF) >= 32 * 1024
        assert sock.getsockopt(socket.SOL_SOCKET, socket.SO_RCVBUF) >= 32 * 1024
    finally:
        sock.close()


def test_socket_send_returns_zero_when_full():
    left, right = socket.socketpair()
    try:
        socketlib.socket_nonblock(left)
        chunk = b"x" * 65536
        results = [socketlib.socket_send(left, chunk) for _ in range(1000)]
        assert 0 in results
        assert all(0 <= sent <= len(chunk) for sent in results)
    finally:
        left.close()
        right.close()