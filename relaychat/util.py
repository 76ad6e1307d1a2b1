#!/usr/bin/env python3
"""Logging utils **and** helper that discovers our outward‑facing IP address."""

from __future__ import annotations
import logging                           # Python stdlib logging framework
import socket                            # Needed for IP detection
import sys                               # For stderr/stdout handles
from logging.handlers import RotatingFileHandler
from typing import Optional, TextIO

__all__ = ["LOG", "configure_logging", "get_local_ip"]

# Importers simply do:  from relaychat.util import LOG
# Handlers are attached by configure_logging(), called once from main().
LOG = logging.getLogger("relaychat")

_FORMAT = logging.Formatter("[%(asctime)s] %(levelname)-8s %(message)s", "%H:%M:%S")


def configure_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """Attach console (+ optional rotating file) output to the "relaychat" logger.

    Existing handlers are dropped first so repeated calls never duplicate
    log lines.
    """
    for handler in list(LOG.handlers):
        LOG.removeHandler(handler)
        handler.close()
    LOG.setLevel(level)

    # ----- Console handler -----
    sh = logging.StreamHandler(stream if stream is not None else sys.stdout)
    sh.setFormatter(_FORMAT)
    LOG.addHandler(sh)

    # ----- Rotating file handler -----
    # Rotates once file hits ±1 MiB, keeps 3 backups ⇒ log ≲ 4 MiB on disk.
    if log_file:
        fh = RotatingFileHandler(
            log_file,
            maxBytes=1_048_576,
            backupCount=3,
            encoding="utf-8",
        )
        fh.setFormatter(_FORMAT)
        LOG.addHandler(fh)

    return LOG

# ----------------------------------------------------------------------
# best‑effort outward IP discovery (no external calls, works offline)
# ----------------------------------------------------------------------

def get_local_ip() -> str:
    """Return the host's primary IP, fallback to 127.0.0.1 on failure."""

    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)  # UDP socket ≠ connect
    try:
        # connect() with UDP doesn't send anything; it only makes the OS pick
        # the source address it would use for that destination.
        sock.connect(("8.8.8.8", 80))
        return sock.getsockname()[0]
    except OSError:
        return "127.0.0.1"                      # Either offline or no NIC
    finally:
        sock.close()
