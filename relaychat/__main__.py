"""``python -m relaychat <server|client> <name> [options]``"""

from __future__ import annotations

import argparse
import sys
from typing import Optional, Sequence

from . import client, server

USAGE = "relaychat [-h] {server,client} name [--host HOST] [--port PORT] [--log-file FILE] [-v]"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        "relaychat",
        usage=USAGE,
        description="UDP chat relay (server) and participant (client)",
    )
    parser.add_argument("role", choices=("server", "client"), help="Run the relay or join one")
    parser.add_argument("name", help="Display name (server: label in the startup log)")
    parser.add_argument("--host", help="server: bind address; client: relay address")
    parser.add_argument("--port", type=int, help="UDP port of the relay")
    parser.add_argument("--log-file", help="Also write a rotating log to this file")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.role == "client":
        try:
            args.name = client.display_name(args.name)
        except argparse.ArgumentTypeError as exc:
            parser.error(str(exc))

    # Fill role‑specific defaults from the role's own parser.
    defaults = argparse.ArgumentParser(add_help=False)
    (server if args.role == "server" else client).add_arguments(defaults)
    for key, value in vars(defaults.parse_args([])).items():
        if getattr(args, key) is None:
            setattr(args, key, value)

    runner = server.run if args.role == "server" else client.run
    sys.exit(runner(args))


if __name__ == "__main__":
    main()
