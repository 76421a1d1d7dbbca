#!/usr/bin/env python3
"""CLI tool that posts simulated fire sensor readings to a running receiver.

Usage:
    python -m fire_receiver.sensor_sim --url http://localhost:3000 --room 1 --count 5 --interval 2
"""

from __future__ import annotations

import argparse
import json
import random
import sys
import time
from typing import Optional

import httpx


def make_reading(rng: random.Random, room_number: int, fire_probability: float = 0.5) -> dict:
    """Build one reading shaped like the ESP32 + DHT11 sensor reports."""
    return {
        "room_number": room_number,
        "fire": rng.random() < fire_probability,
        "temperature": f"{20 + rng.random() * 60:.1f}",
        "humidity": f"{20 + rng.random() * 70:.1f}",
    }


def send_reading(client: httpx.Client, reading: dict) -> dict:
    """POST a reading to /fire and return the acknowledged event."""
    resp = client.post("/fire", json=reading)
    resp.raise_for_status()
    return resp.json()["event"]


def run(
    client: httpx.Client,
    room_number: int,
    count: int,
    interval: float,
    fire_probability: float = 0.5,
    seed: Optional[int] = None,
) -> int:
    """Send `count` readings; returns the number of failed sends."""
    rng = random.Random(seed)
    failures = 0
    for i in range(count):
        reading = make_reading(rng, room_number, fire_probability)
        try:
            event = send_reading(client, reading)
            print(json.dumps(event))
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
            # A 2xx reply that is not an ack surfaces as ValueError/KeyError/TypeError.
            failures += 1
            print(f"Failed to send reading {i + 1}/{count}: {e}", file=sys.stderr)
        if interval > 0 and i < count - 1:
            time.sleep(interval)
    return failures


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Simulated fire sensor")
    parser.add_argument("--url", default="http://localhost:3000", help="Receiver base URL")
    parser.add_argument("--room", type=int, default=1, help="Room number to report")
    parser.add_argument("--count", type=int, default=1, help="Number of readings to send")
    parser.add_argument("--interval", type=float, default=2.0, help="Seconds between readings")
    parser.add_argument("--fire-probability", type=float, default=0.5)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--timeout", type=float, default=10.0)
    args = parser.parse_args(argv)

    if not 0.0 <= args.fire_probability <= 1.0:
        parser.error("--fire-probability must be between 0 and 1")

    with httpx.Client(base_url=args.url, timeout=args.timeout) as client:
        failures = run(
            client,
            room_number=args.room,
            count=args.count,
            interval=args.interval,
            fire_probability=args.fire_probability,
            seed=args.seed,
        )
    sys.exit(1 if failures else 0)


if __name__ == "__main__":
    main()
