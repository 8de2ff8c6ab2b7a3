"""Thin helpers around the socket module for TCP clients and listeners."""

from __future__ import annotations

import signal
import socket
import threading
from typing import Any


def init_socket() -> bool:
    """Prepare the process for socket use; broken pipes become errors instead of signals."""
    if hasattr(signal, "SIGPIPE") and threading.current_thread() is threading.main_thread():
        signal.signal(signal.SIGPIPE, signal.SIG_IGN)
    return True


def socket_nodelay(sock: socket.socket) -> None:
    """Disable Nagle's algorithm."""
    sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)


def socket_block(sock: socket.socket) -> None:
    """Put the socket into blocking mode."""
    sock.setblocking(True)


def socket_nonblock(sock: socket.socket) -> None:
    """Put the socket into non-blocking mode."""
    sock.setblocking(False)


def socket_set_send_size(sock: socket.socket, size: int) -> None:
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_SNDBUF, size)


def socket_set_recv_size(sock: socket.socket, size: int) -> None:
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_RCVBUF, size)


def socket_set_reuse_port(sock: socket.socket) -> None:
    """Enable SO_REUSEPORT where the platform has it; elsewhere do nothing."""
    if hasattr(socket, "SO_REUSEPORT"):
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEPORT, 1)


def socket_create(family: int, type: int, proto: int = 0) -> socket.socket:
    return socket.socket(family, type, proto)


def _check_address(family: int, ip: str) -> None:
    try:
        socket.inet_pton(family, ip)
    except (OSError, ValueError) as exc:
        raise ValueError(f"invalid IP address: {ip!r}") from exc


def connect(is_ipv6: bool, server_ip: str, port: int) -> socket.socket:
    """Open a blocking TCP connection to a numeric address; OSError if it fails."""
    init_socket()
    family = socket.AF_INET6 if is_ipv6 else socket.AF_INET
    _check_address(family, server_ip)
    sock = socket.socket(family, socket.SOCK_STREAM)
    try:
        sock.connect((server_ip, port))
    except BaseException:
        sock.close()
        raise
    return sock


def listen(
    is_ipv6: bool, ip: str, port: int, backlog: int, reuse_port: bool
) -> socket.socket:
    """Create a listening TCP socket bound to a numeric address."""
    init_socket()
    family = socket.AF_INET6 if is_ipv6 else socket.AF_INET
    _check_address(family, ip)
    sock = socket.socket(family, socket.SOCK_STREAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        if reuse_port:
            socket_set_reuse_port(sock)
        sock.bind((ip, port))
        sock.listen(backlog)
    except BaseException:
        sock.close()
        raise
    return sock


def ip_string(address: Any) -> str:
    """Return the canonical IP text of a socket address, or "Unknown AF"."""
    if isinstance(address, tuple):
        if len(address) == 2:
            family = socket.AF_INET
        elif len(address) == 4:
            family = socket.AF_INET6
        else:
            return "Unknown AF"
        host = str(address[0]).split("%", 1)[0]
        try:
            return socket.inet_ntop(family, socket.inet_pton(family, host))
        except (OSError, ValueError):
            return "Unknown AF"
    return "Unknown AF"


def get_ip_of_socket(sock: socket.socket) -> str:
    """Return the peer IP of a connected socket, or an empty string."""
    try:
        return ip_string(sock.getpeername())
    except OSError:
        return ""


def socket_send(sock: socket.socket, data: bytes | bytearray | memoryview) -> int:
    """Send what the socket accepts now; 0 when it would block."""
    try:
        return sock.send(data)
    except (BlockingIOError, InterruptedError):
        return 0


def accept(listen_sock: socket.socket) -> tuple[socket.socket, Any]:
    """Accept one connection and return the new socket with the peer address."""
    return listen_sock.accept()


def get_peer_addr(sock: socket.socket) -> Any:
    """Return the peer address, or None when the socket has no peer."""
    try:
        return sock.getpeername()
    except OSError:
        return None


def get_local_addr(sock: socket.socket) -> Any:
    """Return the local address, or None when it cannot be read."""
    try:
        return sock.getsockname()
    except OSError:
        return None


def is_self_connect(sock: socket.socket) -> bool:
    """True when a TCP socket is connected to its own local address."""
    local = get_local_addr(sock)
    peer = get_peer_addr(sock)
    if local is None or peer is None:
        return False
    family = sock.family
    if family not in (socket.AF_INET, socket.AF_INET6):
        return False
    try:
        local_ip = socket.inet_pton(family, str(local[0]).split("%", 1)[0])
        peer_ip = socket.inet_pton(family, str(peer[0]).split("%", 1)[0])
    except (OSError, ValueError):
        return False
    return local[1] == peer[1] and local_ip == peer_ip