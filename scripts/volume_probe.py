#!/usr/bin/env python3
"""Passive volume probe for BlueZ media transports.

Connects to the system bus with the same match rule and decoder the game
uses, and prints every decoded volume change. Use this to check that a
headset actually publishes ``MediaTransport1.Volume`` before starting
the game.
"""

from __future__ import annotations

import argparse
import logging
import signal
import sys
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any

# Allow running from repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from volpong import PongConfig, VolumeBridge, VolumeListener  # noqa: E402
from volpong.exceptions import BusError  # noqa: E402

_LOG = logging.getLogger("volume_probe")


@dataclass
class ProbeStats:
    started_at: float
    total_changes: int = 0
    min_volume: int | None = None
    max_volume: int | None = None
    first_change_at: float | None = None
    last_change_at: float | None = None
    last_idle_report_at: float | None = None

    def on_volume(self, volume: int, now: float) -> float | None:
        previous = self.last_change_at
        self.total_changes += 1
        if self.first_change_at is None:
            self.first_change_at = now
        self.last_change_at = now
        self.min_volume = volume if self.min_volume is None else min(self.min_volume, volume)
        self.max_volume = volume if self.max_volume is None else max(self.max_volume, volume)
        return None if previous is None else now - previous


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Passive probe for BlueZ MediaTransport1 volume changes.",
    )
    parser.add_argument(
        "--duration",
        type=int,
        default=0,
        help="Maximum runtime in seconds (0 = run until Ctrl+C).",
    )
    parser.add_argument(
        "--idle-report-seconds",
        type=int,
        default=60,
        help="Print idle notice each N seconds without volume changes.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logs.",
    )
    return parser.parse_args()


def _print_summary(stats: ProbeStats) -> None:
    runtime = time.time() - stats.started_at
    print("[probe] Summary")
    print(f"[probe]   runtime_s     : {runtime:.1f}")
    print(f"[probe]   total_changes : {stats.total_changes}")
    if stats.min_volume is not None:
        print(f"[probe]   volume_range  : {stats.min_volume}..{stats.max_volume}")
    if stats.last_change_at is not None:
        last_change = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(stats.last_change_at))
        print(f"[probe]   last_change   : {last_change}")


def _main() -> int:
    args = _parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = PongConfig.from_env()
    bridge = VolumeBridge(config.default_volume, maximum=config.volume_max)
    stats = ProbeStats(started_at=time.time())
    stop_event = threading.Event()

    def stop_handler(_signum: int, _frame: Any) -> None:
        stop_event.set()

    signal.signal(signal.SIGINT, stop_handler)
    signal.signal(signal.SIGTERM, stop_handler)

    def on_volume(volume: int) -> None:
        now = time.time()
        delta = stats.on_volume(volume, now)
        ts_text = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(now))
        gap_text = "first" if delta is None else f"{delta:.1f}s"
        print(f"[probe] change#{stats.total_changes} at {ts_text} gap={gap_text} volume={volume}")

    listener = VolumeListener(config=config, bridge=bridge, on_volume=on_volume, logger=_LOG)
    print(f"[probe] Connecting to {config.bus_address or 'system bus'}...")
    try:
        listener.start()
    except BusError as exc:
        print(f"[probe] Bus setup failed: {exc}", file=sys.stderr)
        return 2

    try:
        while not stop_event.is_set():
            now = time.time()

            if args.duration > 0 and (now - stats.started_at) >= args.duration:
                print(f"[probe] Reached --duration={args.duration}s, stopping.")
                break

            if args.idle_report_seconds > 0:
                last_activity = stats.last_change_at or stats.started_at
                idle_seconds = now - last_activity
                last_report = stats.last_idle_report_at or stats.started_at
                should_report = (
                    idle_seconds >= args.idle_report_seconds and (now - last_report) >= args.idle_report_seconds
                )
                if should_report:
                    print(f"[probe] idle_for={idle_seconds:.1f}s without volume changes (current={bridge.load()})")
                    stats.last_idle_report_at = now

            stop_event.wait(1.0)
    finally:
        listener.stop()

    _print_summary(stats)
    return 0


if __name__ == "__main__":
    raise SystemExit(_main())
