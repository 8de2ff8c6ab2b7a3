import socket
import time

import pytest

from brynet import socketlib
from brynet.connector import AsyncConnectAddr, ConnectOption, ConnectorWorkInfo


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


@pytest.fixture
def listener():
    sock = socketlib.listen(False, "127.0.0.1", 0, 16, False)
    yield sock
    sock.close()


def _port_of(sock):
    return socketlib.get_local_addr(sock)[1]


def _closed_port():
    probe = socketlib.listen(False, "127.0.0.1", 0, 1, False)
    port = _port_of(probe)
    probe.close()
    return port


def _drive(worker, done, seconds=5.0):
    deadline = time.monotonic() + seconds
    while not done() and time.monotonic() < deadline:
        worker.check_connect_status(50)


def test_connect_option_defaults():
    option = ConnectOption()
    assert option.ip == ""
    assert option.port == 0
    assert option.timeout == 10
    assert option.process_callbacks == []
    assert option.completed_callback is None


def test_successful_connect_runs_process_then_success(listener):
    worker = ConnectorWorkInfo()
    order = []
    connected = []
    addr = AsyncConnectAddr(
        "127.0.0.1",
        _port_of(listener),
        2.0,
        success_cb=lambda sock: (order.append("success"), connected.append(sock)),
        failed_cb=lambda: order.append("failed"),
        process_callbacks=(lambda sock: order.append("process"),),
    )
    worker.process_connect(addr)
    _drive(worker, lambda: bool(order))
    try:
        assert order == ["process", "success"]
        assert worker.pending_count() == 0
        assert connected[0].getpeername()[1] == _port_of(listener)
        assert worker.is_connect_success(connected[0], True) is True
    finally:
        for sock in connected:
            sock.close()


def test_refused_connect_reports_failure():
    worker = ConnectorWorkInfo()
    outcomes = []
    addr = AsyncConnectAddr(
        "127.0.0.1",
        _closed_port(),
        2.0,
        success_cb=lambda sock: outcomes.append("success"),
        failed_cb=lambda: outcomes.append("failed"),
    )
    worker.process_connect(addr)
    _drive(worker, lambda: bool(outcomes))
    assert outcomes == ["failed"]
    assert worker.pending_count() == 0


def test_invalid_ip_fails_immediately():
    worker = ConnectorWorkInfo()
    outcomes = []
    addr = AsyncConnectAddr(
        "not-an-ip", 80, 1.0, failed_cb=lambda: outcomes.append("failed")
    )
    worker.process_connect(addr)
    assert outcomes == ["failed"]
    assert worker.pending_count() == 0


def test_check_timeout_keeps_attempts_within_timeout(listener):
    clock = FakeClock()
    worker = ConnectorWorkInfo(clock=clock)
    outcomes = []
    addr = AsyncConnectAddr(
        "127.0.0.1",
        _port_of(listener),
        10.0,
        success_cb=lambda sock: (outcomes.append("success"), sock.close()),
        failed_cb=lambda: outcomes.append("failed"),
    )
    worker.process_connect(addr)
    before = worker.pending_count()
    clock.now += 5.0
    worker.check_timeout()
    assert worker.pending_count() == before
    assert "failed" not in outcomes
    worker.cause_all_failed()


def test_check_timeout_settles_every_attempt(listener):
    clock = FakeClock()
    worker = ConnectorWorkInfo(clock=clock)
    outcomes = []
    addr = AsyncConnectAddr(
        "127.0.0.1",
        _port_of(listener),
        1.0,
        success_cb=lambda sock: (outcomes.append("success"), sock.close()),
        failed_cb=lambda: outcomes.append("failed"),
    )
    for _ in range(3):
        worker.process_connect(addr)
    pending = worker.pending_count()
    clock.now += 1.0
    worker.check_timeout()
    assert worker.pending_count() == 0
    assert len(outcomes) == 3
    assert outcomes.count("failed") == pending


def test_cause_all_failed_settles_every_attempt(listener):
    worker = ConnectorWorkInfo()
    outcomes = []
    addr = AsyncConnectAddr(
        "127.0.0.1",
        _port_of(listener),
        10.0,
        success_cb=lambda sock: (outcomes.append("success"), sock.close()),
        failed_cb=lambda: outcomes.append("failed"),
    )
    for _ in range(2):
        worker.process_connect(addr)
    pending = worker.pending_count()
    worker.cause_all_failed()
    assert worker.pending_count() == 0
    assert len(outcomes) == 2
    assert outcomes.count("failed") == pending


def test_is_connect_success_false_for_unconnected_write_check():
    worker = ConnectorWorkInfo()
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        sock.close()
        assert worker.is_connect_success(sock, True) is False
    finally:
        sock.close()