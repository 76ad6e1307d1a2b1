"""Relay and participants talking over real loopback UDP sockets."""

import socket
import threading
import time

import pytest

from relaychat.client import ChatClient
from relaychat.config import ClientConfig, RelayConfig
from relaychat.server import RelayServer


@pytest.fixture
def running_relay():
    relay = RelayServer(RelayConfig(host="127.0.0.1", port=0, poll_interval=0.05))
    worker = threading.Thread(target=relay.serve_forever, daemon=True)
    worker.start()
    yield relay
    relay.stop()
    worker.join(timeout=2)


def participant(relay, name):
    host, port = relay.address
    client = ChatClient(ClientConfig(name=name, server_host=host, server_port=port, leave_timeout=0.5))
    client.join()
    return client


def expect(client, text):
    assert client.sock.recv(1024).decode() == text


def expect_nothing(client, wait=0.2):
    client.sock.settimeout(wait)
    with pytest.raises(socket.timeout):
        client.sock.recv(1024)


def wait_for_member(relay, count):
    for _ in range(200):
        if len(relay.members) == count:
            return
        time.sleep(0.01)
    raise AssertionError(f"relay has {len(relay.members)} members, expected {count}")


def test_chat_scenario(running_relay):
    alice = participant(running_relay, "alice")
    wait_for_member(running_relay, 1)
    bob = participant(running_relay, "bob")
    try:
        expect(alice, "bob has joined the chat.")

        alice._send(b"hi")
        expect(bob, "[alice]: hi")

        bob._send(b"LEAVE:bob")
        expect(alice, "bob has left the chat.")
        wait_for_member(running_relay, 1)

        bob._send(b"hi")
        expect_nothing(alice)
        expect_nothing(bob)
    finally:
        alice.sock.close()
        bob.sock.close()


def test_new_entrant_hears_nothing_about_itself(running_relay):
    alice = participant(running_relay, "alice")
    try:
        wait_for_member(running_relay, 1)
        expect_nothing(alice)
    finally:
        alice.sock.close()
