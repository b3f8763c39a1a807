#!/usr/bin/env python3
"""
Server Tracker v1.0
Polls a game server's status and keeps daily availability statistics
"""

import asyncio
import os
import signal
import sys
from pathlib import Path

from tracker.core.checker import StatusChecker
from tracker.core.clock import Clock
from tracker.core.server_tracker import ServerTracker
from tracker.core.settings import Settings
from tracker.core.stats_store import StatsStore
from tracker.reporting.sink import FileReportingSink
from tracker.utils.logger import setup_logger


async def run(settings: Settings, address: str) -> int:
    clock = Clock(settings.get('timezone', 'UTC'))
    store = StatsStore(settings.data_dir / StatsStore.FILENAME, clock)
    sink = FileReportingSink(
        settings.data_dir / "reports",
        render_charts=settings.get('render_charts', True),
    )

    async with StatusChecker(address, timeout=settings.get('request_timeout', 5.0)) as checker:
        tracker = ServerTracker(
            checker, sink, store, clock,
            interval=settings.get('check_interval', 30),
        )

        stop = asyncio.Event()
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, stop.set)
            except NotImplementedError:
                # Windows event loops have no signal handlers; Ctrl+C raises instead
                pass

        await tracker.run(stop)
    return 0


def main():
    """Main entry point."""
    data_dir = Path(os.environ.get("TRACKER_DATA_DIR", "data"))
    logger = setup_logger(data_dir / "logs")
    logger.info("=" * 50)
    logger.info("Server Tracker v1.0 - Starting")
    logger.info("=" * 50)

    settings = Settings(data_dir)

    # Positional argument, then environment, then settings.json
    args = [arg for arg in sys.argv[1:] if not arg.startswith("-")]
    if args:
        address = args[0]
        if address != settings.get('server_address'):
            # Remembered for later runs started without an argument
            settings.set('server_address', address)
    else:
        address = os.environ.get("TRACKER_SERVER_ADDRESS", settings.get('server_address', ''))
    if os.environ.get("TRACKER_TIMEZONE"):
        settings.data['timezone'] = os.environ["TRACKER_TIMEZONE"]

    if not address:
        logger.error("No server address configured (argument, TRACKER_SERVER_ADDRESS or settings.json)")
        return 2

    try:
        return asyncio.run(run(settings, address))
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 0
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        return 1
    finally:
        logger.info("Application shutdown")


if __name__ == "__main__":
    sys.exit(main())
