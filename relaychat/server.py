#!/usr/bin/env python3
"""UDP chat relay.

* Tracks which endpoint belongs to which display name (JOIN / LEAVE)
* Rebroadcasts every chat line to all other members
* No persistence – everything lives in RAM until process exits.

One serial receive/dispatch loop owns the membership table, so membership
changes are applied in arrival order and need no locking.
"""

from __future__ import annotations

import argparse                       # CLI parsing
import logging
import socket                         # UDP socket operations
import sys
import threading                      # Stop flag shared with other threads
from typing import List, Optional, Sequence

from . import protocol
from .config import DEFAULT_HOST, RelayConfig
from .membership import Endpoint, Membership
from .util import LOG, configure_logging, get_local_ip


class RelayServer:
    """Membership tracker and fan‑out router."""

    def __init__(self, config: Optional[RelayConfig] = None, sock: Optional[socket.socket] = None) -> None:
        self.config = config or RelayConfig()

        # ------ bind socket (OSError here is fatal to the caller) ------
        if sock is None:
            sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
            try:
                sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
                sock.bind((self.config.host, self.config.port))
            except OSError:
                sock.close()
                raise
        sock.settimeout(self.config.poll_interval)
        self.sock = sock

        # ------ runtime state ------
        self.members = Membership()

        # Flag to shut the loop down cooperatively.
        self.running = threading.Event()

    @property
    def address(self) -> Endpoint:
        """Actual bound (host, port); useful when port 0 was requested."""
        return self.sock.getsockname()[:2]

    # ================================================================= main ===
    def start(self) -> None:
        host, port = self.address
        LOG.info("Relay listening on %s:%d (LAN address %s)", host, port, get_local_ip())
        self.serve_forever()

    def serve_forever(self) -> None:
        """Receive and dispatch datagrams until stop(), Ctrl‑C or a socket failure."""
        self.running.set()
        try:
            while self.running.is_set():
                try:
                    data, addr = self.sock.recvfrom(self.config.buf_size)
                except socket.timeout:
                    continue                   # Allow shutdown check
                except ConnectionResetError as exc:
                    # Windows reports an ICMP "port unreachable" from an
                    # earlier sendto() here; the listener itself is fine.
                    LOG.warning("Ignoring reset from a departed participant: %s", exc)
                    continue
                except OSError as exc:
                    if not self.running.is_set():
                        break                  # Closed underneath us by stop()
                    LOG.error("Receive failed, relay cannot continue: %s", exc)
                    raise
                self.handle_datagram(data, addr)
        except KeyboardInterrupt:
            LOG.info("Shutdown requested")
        finally:
            self.running.clear()
            self.sock.close()
            LOG.info("Relay stopped")

    def stop(self) -> None:
        self.running.clear()

    # ---------------------------------------------------------------- dispatch
    def handle_datagram(self, data: bytes, addr: Endpoint) -> List[Endpoint]:
        """Apply one inbound datagram; return the endpoints that were sent to."""
        kind, body = protocol.classify(protocol.decode(data))
        if kind == protocol.JOIN:
            return self._handle_join(body, addr)
        if kind == protocol.LEAVE:
            return self._handle_leave(body, addr)
        return self._handle_chat(body, addr)

    def _handle_join(self, name: str, addr: Endpoint) -> List[Endpoint]:
        if not name:
            LOG.warning("Ignoring JOIN without a name from %s:%d", *addr)
            return []
        previous = self.members.name_of(addr)
        self.members.join(addr, name)
        if previous is not None and previous != name:
            LOG.info("%s rejoined as %s", previous, name)
        else:
            LOG.info("%s joined the chat (%s:%d)", name, *addr)
        return self.broadcast(protocol.joined_notice(name), exclude=addr)

    def _handle_leave(self, claimed: str, addr: Endpoint) -> List[Endpoint]:
        participant = self.members.leave(addr)
        if participant is None:
            LOG.debug("LEAVE from non-member %s:%d ignored", *addr)
            return []
        if claimed and claimed != participant.name:
            LOG.info("%s left the chat (announced as %r)", participant.name, claimed)
        else:
            LOG.info("%s left the chat", participant.name)
        return self.broadcast(protocol.left_notice(participant.name))

    def _handle_chat(self, text: str, addr: Endpoint) -> List[Endpoint]:
        name = self.members.name_of(addr)
        if name is None:
            LOG.debug("Dropped message from unknown sender %s:%d", *addr)
            return []
        LOG.debug("<%s> %s", name, text)
        return self.broadcast(protocol.chat_line(name, text), exclude=addr)

    # ---------------------------------------------------------------- fan‑out
    def broadcast(self, text: str, exclude: Optional[Endpoint] = None) -> List[Endpoint]:
        """Send ``text`` to every member except ``exclude``.

        Each recipient is an independent send: a failure is logged and the
        remaining recipients are still served.
        """
        payload = protocol.encode(text, self.config.buf_size)
        delivered: List[Endpoint] = []
        for addr in self.members.recipients(exclude):
            try:
                self.sock.sendto(payload, addr)
            except OSError as exc:
                LOG.warning("Send to %s:%d failed: %s", addr[0], addr[1], exc)
                continue
            delivered.append(addr)
        return delivered

# ======================================================================
#  Command‑line entry point
# ======================================================================

def add_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--host", default=DEFAULT_HOST, help="Address to bind")
    parser.add_argument("--port", type=int, default=protocol.DEFAULT_PORT, help="UDP port to listen on")
    parser.add_argument("--log-file", help="Also write a rotating log to this file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every relayed message")


def run(args: argparse.Namespace) -> int:
    configure_logging(logging.DEBUG if args.verbose else logging.INFO, args.log_file)
    if getattr(args, "name", None):
        LOG.info("Starting relay %s", args.name)
    try:
        server = RelayServer(RelayConfig(host=args.host, port=args.port))
    except OSError as exc:
        LOG.error("Cannot listen on %s:%d: %s", args.host, args.port, exc)
        return 1
    try:
        server.start()
    except OSError:
        return 1
    return 0


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser("relaychat-server", description="UDP chat relay")
    add_arguments(parser)
    sys.exit(run(parser.parse_args(argv)))


if __name__ == "__main__":
    main()
