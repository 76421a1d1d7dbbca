"""Server entrypoint: builds the event log and app, then serves them with uvicorn.

Usage:
    python -m fire_receiver
    PORT=8080 fire-receiver
"""

from __future__ import annotations

import logging
import os

import uvicorn

from fire_receiver.app import create_app
from fire_receiver.event_log import EventLog

logger = logging.getLogger("fire_receiver")

HOST = "0.0.0.0"
DEFAULT_PORT = 3000


def get_port() -> int:
    raw = os.environ.get("PORT", str(DEFAULT_PORT))
    try:
        return int(raw)
    except ValueError:
        raise SystemExit(f"PORT must be an integer, got {raw!r}")


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    port = get_port()
    app = create_app(EventLog())

    logger.info(f"Server running at http://localhost:{port}")
    logger.info(f"POST fire events to: http://localhost:{port}/fire")
    uvicorn.run(app, host=HOST, port=port, log_config=None)


if __name__ == "__main__":
    main()
