"""Runtime settings for the relay and the participant agent.

Both are filled in from the command line; there are no config files and no
environment variables.
"""

from __future__ import annotations

from dataclasses import dataclass

from .protocol import BUF_SIZE, DEFAULT_PORT

DEFAULT_HOST = "0.0.0.0"           # Relay binds on all interfaces
DEFAULT_SERVER_HOST = "127.0.0.1"  # Where a participant looks for the relay


@dataclass(slots=True)
class RelayConfig:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    buf_size: int = BUF_SIZE
    poll_interval: float = 0.5     # Socket timeout so stop() is noticed


@dataclass(slots=True)
class ClientConfig:
    name: str
    server_host: str = DEFAULT_SERVER_HOST
    server_port: int = DEFAULT_PORT
    buf_size: int = BUF_SIZE
    leave_timeout: float = 1.0     # Upper bound on any single send
    prompt: str = "You: "

    @property
    def server(self) -> tuple[str, int]:
        return (self.server_host, self.server_port)
