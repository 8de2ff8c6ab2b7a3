"""Non-blocking TCP connection attempts tracked until success, failure or timeout."""

from __future__ import annotations

import errno
import select
import selectors
import socket
import time
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Callable, Sequence

from brynet.socketlib import init_socket, is_self_connect

CompletedCallback = Callable[[socket.socket], None]
ProcessSocketCallback = Callable[[socket.socket], None]
FailedCallback = Callable[[], None]

_IN_PROGRESS = {errno.EINPROGRESS, errno.EWOULDBLOCK, errno.EAGAIN}


def _seconds(value: float | timedelta) -> float:
    if isinstance(value, timedelta):
        return value.total_seconds()
    return float(value)


@dataclass(frozen=True)
class AsyncConnectAddr:
    """Where to connect and what to call when the attempt ends."""

    ip: str
    port: int
    timeout: float | timedelta
    success_cb: CompletedCallback | None = None
    failed_cb: FailedCallback | None = None
    process_callbacks: Sequence[ProcessSocketCallback] = ()


@dataclass
class ConnectOption:
    """User-facing options for one connection attempt."""

    ip: str = ""
    port: int = 0
    timeout: float | timedelta = 10.0
    process_callbacks: list[ProcessSocketCallback] = field(default_factory=list)
    completed_callback: CompletedCallback | None = None
    failed_callback: FailedCallback | None = None


@dataclass
class _ConnectingInfo:
    sock: socket.socket
    start_time: float
    timeout: float
    success_cb: CompletedCallback | None
    failed_cb: FailedCallback | None
    process_callbacks: tuple[ProcessSocketCallback, ...]


class ConnectorWorkInfo:
    """Starts non-blocking connects and reports each outcome exactly once."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._selector = selectors.DefaultSelector()
        self._connecting: dict[int, _ConnectingInfo] = {}

    def pending_count(self) -> int:
        """Number of connection attempts still in progress."""
        return len(self._connecting)

    def check_connect_status(self, timeout_ms: int) -> None:
        """Wait up to ``timeout_ms`` for attempts to finish and report them."""
        if not self._connecting:
            return
        timeout = timeout_ms / 1000 if timeout_ms >= 0 else None
        events = self._selector.select(timeout)
        if not events:
            return

        ready = sorted((key.fileobj for key, _ in events), key=lambda s: s.fileno())
        succeeded = {
            sock.fileno()
            for sock in ready
            if self.is_connect_success(sock, False) and not is_self_connect(sock)
        }

        for sock in ready:
            fd = sock.fileno()
            self._selector.unregister(sock)
            info = self._connecting.pop(fd, None)
            if info is None:
                continue
            if fd in succeeded:
                self._finish_success(info.sock, info.success_cb, info.process_callbacks)
            else:
                info.sock.close()
                if info.failed_cb is not None:
                    info.failed_cb()

    def is_connect_success(self, sock: socket.socket, will_check_write: bool) -> bool:
        """True when the socket reports no pending connection error."""
        if will_check_write:
            try:
                _, writable, _ = select.select([], [sock], [], 0)
            except (OSError, ValueError):
                return False
            if not writable:
                return False
        try:
            error = sock.getsockopt(socket.SOL_SOCKET, socket.SO_ERROR)
        except OSError:
            return False
        return error == 0

    def check_timeout(self) -> None:
        """Fail every attempt that has run for its whole timeout."""
        for fd, info in list(self._connecting.items()):
            if self._clock() - info.start_time < info.timeout:
                continue
            self._selector.unregister(info.sock)
            del self._connecting[fd]
            info.sock.close()
            if info.failed_cb is not None:
                info.failed_cb()

    def process_connect(self, addr: AsyncConnectAddr) -> None:
        """Start connecting to ``addr``; outcomes are reported by the callbacks."""
        init_socket()
        sock: socket.socket | None = None
        try:
            socket.inet_pton(socket.AF_INET, addr.ip)
            sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
            sock.setblocking(False)
            result = sock.connect_ex((addr.ip, addr.port))
        except (OSError, ValueError):
            self._fail(sock, addr.failed_cb)
            return

        if result == 0:
            if is_self_connect(sock):
                self._fail(sock, addr.failed_cb)
                return
            self._finish_success(sock, addr.success_cb, tuple(addr.process_callbacks))
            return

        if result not in _IN_PROGRESS:
            self._fail(sock, addr.failed_cb)
            return

        self._connecting[sock.fileno()] = _ConnectingInfo(
            sock=sock,
            start_time=self._clock(),
            timeout=_seconds(addr.timeout),
            success_cb=addr.success_cb,
            failed_cb=addr.failed_cb,
            process_callbacks=tuple(addr.process_callbacks),
        )
        self._selector.register(sock, selectors.EVENT_WRITE)

    def cause_all_failed(self) -> None:
        """Abort every pending attempt and report each as failed."""
        pending = list(self._connecting.values())
        self._connecting.clear()
        for info in pending:
            self._selector.unregister(info.sock)
            info.sock.close()
            if info.failed_cb is not None:
                info.failed_cb()

    @staticmethod
    def _fail(sock: socket.socket | None, failed_cb: FailedCallback | None) -> None:
        if sock is not None:
            sock.close()
        if failed_cb is not None:
            failed_cb()

    @staticmethod
    def _finish_success(
        sock: socket.socket,
        success_cb: CompletedCallback | None,
        process_callbacks: Sequence[ProcessSocketCallback],
    ) -> None:
        if success_cb is None:
            sock.close()
            return
        for process in process_callbacks:
            process(sock)
        success_cb(sock)