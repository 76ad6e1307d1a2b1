#!/usr/bin/env python3
"""Command‑line participant for the UDP chat relay.

* Announces itself with ``JOIN:<name>`` on start
* Sends every console line to the relay
* Prints relayed messages without clobbering the line being typed
* Ctrl‑C / SIGTERM sends ``LEAVE:<name>`` before exiting

Usage (after installing package locally):

    relaychat-client alice --host 203.0.113.22
"""

from __future__ import annotations                # ↩ type hints forward refs OK

import argparse                                    # For CLI parsing
import enum
import logging
import queue                                       # Receiver → display hand‑off
import signal                                      # SIGINT / SIGTERM trapping
import socket                                      # Low‑level UDP API
import sys                                         # Needed for prompt redraw
import threading                                   # Background receive / display
from typing import Optional, Sequence, TextIO

from . import protocol
from .config import DEFAULT_SERVER_HOST, ClientConfig
from .util import LOG, configure_logging

# 3rd‑party: coloured terminal output
from colorama import Fore, Style, init
init(autoreset=True)                               # Reset colour after each print


class ClientState(enum.Enum):
    JOINING = "joining"
    ACTIVE = "active"
    LEAVING = "leaving"
    TERMINATED = "terminated"


class ChatClient:
    """One human participant: input, receive, display and termination activities.

    The activities share nothing but the socket.  Process exit (raised from
    :meth:`shutdown`) is what stops them; the receive and display threads are
    daemons.
    """

    def __init__(
        self,
        config: ClientConfig,
        sock: Optional[socket.socket] = None,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
    ) -> None:
        self.config = config

        # -------- connected UDP socket, ephemeral local port --------
        if sock is None:
            sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
            try:
                sock.connect(config.server)        # Resolves host; no packet sent
            except OSError:
                sock.close()
                raise
        # Bounds every send (the final LEAVE included) and lets recv poll.
        sock.settimeout(config.leave_timeout)
        self.sock = sock

        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout

        self.inbox: "queue.Queue[Optional[str]]" = queue.Queue()
        self.state = ClientState.JOINING
        self.running = threading.Event()
        self.running.set()

    # ================================================================== main ===
    def start(self) -> None:
        """Blocking run: join, spawn receive + display threads, read stdin."""
        self.install_signal_handlers()
        self.join()
        threading.Thread(target=self._recv_loop, name="relaychat-recv", daemon=True).start()
        threading.Thread(target=self._display_loop, name="relaychat-display", daemon=True).start()
        try:
            self._input_loop()
        finally:
            self.running.clear()
            self.sock.close()
            LOG.info("Disconnected")

    def join(self) -> None:
        """Fire‑and‑forget JOIN; no acknowledgement is expected."""
        self._send(protocol.make_join(self.config.name))
        self.state = ClientState.ACTIVE
        LOG.info("Joined relay %s:%d as %s", *self.config.server, self.config.name)

    def shutdown(self) -> None:
        """Send LEAVE (best effort, bounded by the socket timeout) and exit."""
        if self.state in (ClientState.LEAVING, ClientState.TERMINATED):
            raise SystemExit(0)                    # Second signal: don't leave twice
        self.state = ClientState.LEAVING
        self._send(protocol.make_leave(self.config.name))
        self.stdout.write("\nExiting...\n")
        self.stdout.flush()
        self.state = ClientState.TERMINATED
        self.running.clear()
        self.inbox.put(None)                       # Wake display thread
        raise SystemExit(0)

    def install_signal_handlers(self) -> None:
        # Must run in the main thread (signal module restriction).
        signal.signal(signal.SIGINT, self._on_signal)   # Ctrl+C
        signal.signal(signal.SIGTERM, self._on_signal)  # regular stop through OS

    def _on_signal(self, signum, frame) -> None:
        LOG.debug("Received signal %d", signum)
        self.shutdown()

    # ---------------------------------------------------------------- networking
    def _send(self, payload: bytes) -> bool:
        """Thin wrapper around sock.send(); failures are logged, never fatal."""
        try:
            self.sock.send(payload)
        except OSError as exc:
            LOG.error("Send failed: %s", exc)
            return False
        return True

    # ---------------------------------------------------------------- activities
    def _input_loop(self) -> None:
        """Main thread: one console line ⟶ one datagram."""
        while self.running.is_set():
            self._write_prompt()
            line = self.stdin.readline()           # Blocking stdin read
            if not line:                           # EOF (Ctrl‑D) counts as leaving
                self.shutdown()
            text = line.strip()
            if not text:
                continue
            self._send(protocol.encode(text, self.config.buf_size))

    def _recv_loop(self) -> None:
        """Background thread: datagram ⟶ inbox."""
        while self.running.is_set():
            try:
                data = self.sock.recv(self.config.buf_size)
            except socket.timeout:
                continue
            except ConnectionRefusedError:
                # ICMP "port unreachable" from an earlier send; relay not up yet.
                LOG.debug("Relay %s:%d unreachable", *self.config.server)
                continue
            except OSError:                        # Socket closed
                break
            self.inbox.put(protocol.decode(data))

    def _display_loop(self) -> None:
        """Background thread: inbox ⟶ console, then repaint the prompt."""
        while True:
            text = self.inbox.get()
            if text is None:
                break
            self.render(text)

    def render(self, text: str) -> None:
        colour = Fore.CYAN if protocol.is_notice(text) else Fore.GREEN
        self.stdout.write(f"\r{colour}{text}{Style.RESET_ALL}\n")
        self._write_prompt()

    def _write_prompt(self) -> None:
        self.stdout.write(self.config.prompt)
        self.stdout.flush()

# ======================================================================
#  Command‑line entry point
# ======================================================================

def add_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--host", default=DEFAULT_SERVER_HOST, help="Address of the relay")
    parser.add_argument("--port", type=int, default=protocol.DEFAULT_PORT, help="UDP port of the relay")
    parser.add_argument("--log-file", help="Also write a rotating log to this file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show diagnostic log output")


def run(args: argparse.Namespace) -> int:
    # Logs go to stderr so they don't interleave with the chat on stdout.
    level = logging.DEBUG if args.verbose else logging.WARNING
    configure_logging(level, args.log_file, stream=sys.stderr)
    config = ClientConfig(name=args.name, server_host=args.host, server_port=args.port)
    try:
        client = ChatClient(config)
    except OSError as exc:
        LOG.error("Cannot reach relay %s:%d: %s", args.host, args.port, exc)
        return 1
    client.start()
    return 0


def display_name(value: str) -> str:
    """argparse type: the relay ignores a JOIN without a name."""
    name = value.strip()
    if not name:
        raise argparse.ArgumentTypeError("display name must not be empty")
    return name


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Parse CLI args then instantiate & run the chat client."""
    parser = argparse.ArgumentParser("relaychat-client", description="UDP chat participant")
    parser.add_argument("name", type=display_name, help="Display name shown to other participants")
    add_arguments(parser)
    sys.exit(run(parser.parse_args(argv)))


if __name__ == "__main__":
    main()
