#!/usr/bin/env python3
"""Wire format shared by **both** relay & participant.

Every datagram is plain UTF‑8 text.  Control datagrams carry a type prefix
(``JOIN:`` / ``LEAVE:``); everything else is an ordinary chat line.  The relay
answers with plain‑text notices built by the helpers at the bottom.
"""

from __future__ import annotations       # Postponed annotation evaluation (PEP 563)
from typing import NamedTuple            # Lightweight (kind, body) record

# --- Network configuration -------------------------------------------------
BUF_SIZE: int = 1024          # Max UDP datagram size we accept/read (bytes)
DEFAULT_PORT: int = 8080      # Well‑known port on which the relay listens
ENCODING: str = "utf-8"

# --- Datagram kinds --------------------------------------------------------
JOIN = "join"                 # Sender announces a display name
LEAVE = "leave"               # Sender departs
CHAT = "chat"                 # Any other text

JOIN_PREFIX = "JOIN:"
LEAVE_PREFIX = "LEAVE:"

_JOINED_SUFFIX = " has joined the chat."
_LEFT_SUFFIX = " has left the chat."


class Datagram(NamedTuple):
    """A classified inbound datagram."""

    kind: str   # JOIN | LEAVE | CHAT
    body: str   # display name for control datagrams, full text for chat


# --- Codec -----------------------------------------------------------------

def decode(data: bytes) -> str:
    """bytes ⟶ trimmed text.  Undecodable bytes are replaced, never fatal."""
    return data.decode(ENCODING, errors="replace").strip()


def encode(text: str, limit: int = BUF_SIZE) -> bytes:
    """text ⟶ UTF‑8 bytes, cut on a character boundary to fit one datagram."""
    data = text.encode(ENCODING)
    if len(data) <= limit:
        return data
    return data[:limit].decode(ENCODING, errors="ignore").encode(ENCODING)


def classify(text: str) -> Datagram:
    """Split trimmed datagram text into its kind and body."""
    if text.startswith(JOIN_PREFIX):
        return Datagram(JOIN, text[len(JOIN_PREFIX):].strip())
    if text.startswith(LEAVE_PREFIX):
        return Datagram(LEAVE, text[len(LEAVE_PREFIX):].strip())
    return Datagram(CHAT, text)


def make_join(name: str) -> bytes:
    return encode(JOIN_PREFIX + name)


def make_leave(name: str) -> bytes:
    return encode(LEAVE_PREFIX + name)


# --- Relay → participant notices ------------------------------------------

def joined_notice(name: str) -> str:
    return name + _JOINED_SUFFIX


def left_notice(name: str) -> str:
    return name + _LEFT_SUFFIX


def chat_line(name: str, text: str) -> str:
    return f"[{name}]: {text}"


def is_notice(text: str) -> bool:
    """True for join/leave notices, False for relayed chat lines."""
    if text.startswith("[") and "]: " in text:   # "[name]: text"
        return False
    return text.endswith(_JOINED_SUFFIX) or text.endswith(_LEFT_SUFFIX)
