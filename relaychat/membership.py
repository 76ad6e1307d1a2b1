"""Relay‑side membership table: endpoint ➜ participant."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

Endpoint = Tuple[str, int]   # UDP (ip, port) as returned by recvfrom()


@dataclass(slots=True)
class Participant:
    """Lightweight record for a joined participant (relay side only)."""

    addr: Endpoint   # e.g. ("192.0.2.10", 64233)
    name: str        # Display name supplied at JOIN


class Membership:
    """Endpoint ➜ Participant mapping owned by the relay's receive loop.

    Only the relay's single processing thread touches it, so no locking.
    """

    def __init__(self) -> None:
        self._members: Dict[Endpoint, Participant] = {}

    def join(self, addr: Endpoint, name: str) -> Participant:
        """Insert or replace the record for ``addr``."""
        participant = Participant(addr, name)
        self._members[addr] = participant
        return participant

    def leave(self, addr: Endpoint) -> Optional[Participant]:
        """Remove ``addr``; unknown endpoints are a no‑op returning None."""
        return self._members.pop(addr, None)

    def get(self, addr: Endpoint) -> Optional[Participant]:
        return self._members.get(addr)

    def name_of(self, addr: Endpoint) -> Optional[str]:
        participant = self._members.get(addr)
        return participant.name if participant else None

    def recipients(self, exclude: Optional[Endpoint] = None) -> List[Endpoint]:
        """Snapshot of every member endpoint except ``exclude``."""
        return [a for a in self._members if a != exclude]

    def names(self) -> List[str]:
        return [p.name for p in self._members.values()]

    def __contains__(self, addr: object) -> bool:
        return addr in self._members

    def __len__(self) -> int:
        return len(self._members)

    def __iter__(self) -> Iterator[Participant]:
        return iter(list(self._members.values()))
