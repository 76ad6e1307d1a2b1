"""relaychat – a minimal UDP chat relay and its command‑line participant.

Importing this package exposes :class:`relaychat.RelayServer` and
:class:`relaychat.ChatClient`, allowing either side to be embedded in another
application or launched via ``python -m relaychat``.
"""

# ------------------------ re-exports ------------------------
from .client import ChatClient, ClientState   # noqa: F401
from .config import ClientConfig, RelayConfig  # noqa: F401
from .membership import Membership, Participant  # noqa: F401
from .server import RelayServer               # noqa: F401

__version__ = "1.0.0"

__all__: list[str] = [
    "ChatClient",     # Participant agent
    "ClientConfig",
    "ClientState",
    "Membership",     # Relay's endpoint ➜ name table
    "Participant",
    "RelayConfig",
    "RelayServer",    # The relay itself
]
