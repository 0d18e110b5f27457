"""Command-line entry point: ``python -m volpong``."""

from __future__ import annotations

import argparse
import logging
import sys

from volpong.app import run
from volpong.config import PongConfig
from volpong.exceptions import BusError, VolpongConfigError

_LOG = logging.getLogger("volpong")


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="volpong",
        description="Pong with the left paddle driven by Bluetooth headphone volume.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def _main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = PongConfig.from_env()
    except VolpongConfigError as exc:
        _LOG.error("Invalid configuration: %s", exc)
        return 2

    try:
        run(config)
    except BusError as exc:
        _LOG.error("%s", exc)
        return 2
    except KeyboardInterrupt:
        return 130
    return 0


def main() -> None:
    sys.exit(_main())


if __name__ == "__main__":
    main()
