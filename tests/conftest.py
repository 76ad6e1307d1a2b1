"""Shared fixtures: in-memory stand-ins for UDP sockets."""

import io
import logging
import queue
import socket

import pytest

from relaychat.config import ClientConfig, RelayConfig
from relaychat.server import RelayServer
from relaychat.util import LOG

ALICE = ("10.0.0.1", 40001)
BOB = ("10.0.0.2", 40002)
CAROL = ("10.0.0.3", 40003)


class FakeSocket:
    """Records outgoing datagrams; serves queued inbound ones.

    ``fail_to`` lists endpoints whose sendto() raises OSError.
    """

    def __init__(self, fail_to=(), fail_send=False):
        self.sent = []            # (payload, addr) from sendto()
        self.sent_connected = []  # payloads from send()
        self.inbound = queue.Queue()
        self.fail_to = set(fail_to)
        self.fail_send = fail_send
        self.timeout = None
        self.closed = False

    def settimeout(self, value):
        self.timeout = value

    def sendto(self, payload, addr):
        if addr in self.fail_to:
            raise OSError("Network is unreachable")
        self.sent.append((payload, addr))
        return len(payload)

    def send(self, payload):
        if self.fail_send:
            raise OSError("Connection refused")
        self.sent_connected.append(payload)
        return len(payload)

    def _next(self):
        if self.closed:
            raise OSError("Bad file descriptor")
        try:
            item = self.inbound.get(timeout=0.05)
        except queue.Empty:
            raise socket.timeout("timed out") from None
        if isinstance(item, BaseException):
            raise item
        return item

    def recvfrom(self, bufsize):
        return self._next()

    def recv(self, bufsize):
        return self._next()

    def getsockname(self):
        return ("127.0.0.1", 8080)

    def close(self):
        self.closed = True

    def sent_to(self, addr):
        """Decoded texts delivered to ``addr`` via sendto()."""
        return [p.decode() for p, a in self.sent if a == addr]


@pytest.fixture
def fake_sock():
    return FakeSocket()


@pytest.fixture
def relay(fake_sock):
    return RelayServer(RelayConfig(poll_interval=0.05), sock=fake_sock)


@pytest.fixture
def client_config():
    return ClientConfig(name="alice", leave_timeout=0.05)


@pytest.fixture
def stdout():
    return io.StringIO()


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers a CLI test attached to the package logger."""
    yield
    for handler in list(LOG.handlers):
        LOG.removeHandler(handler)
    LOG.setLevel(logging.NOTSET)
