"""Main entry point for the Flyway viewer.

This module provides command-line options to run the viewer:
- Window mode (default): pygame window with live canvas and status panel
- Headless mode: no window, logs status once per second, for smoke checks
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from core.config.client import BACKEND_URL_ENV, ClientSettings
from core.config.display import SEPARATOR_WIDTH, SURFACE_HEIGHT, SURFACE_WIDTH
from core.exceptions import ConfigurationError
from viewer.logging_config import configure_logging

logger = logging.getLogger(__name__)


async def run_headless(orchestrator, duration: float, autostart: bool) -> None:
    """Mount, optionally start the run, and log status until ``duration`` elapses.

    Args:
        orchestrator: Orchestrator to drive
        duration: Seconds to keep polling
        autostart: Start the simulation if it is not already running
    """
    await orchestrator.mount()
    try:
        if autostart and not orchestrator.is_running:
            await orchestrator.toggle_running()

        loop = asyncio.get_running_loop()
        deadline = loop.time() + duration
        while loop.time() < deadline:
            await asyncio.sleep(min(1.0, max(0.0, deadline - loop.time())))
            status = orchestrator.status()
            logger.info(
                "t=%g running=%s birds=%d predators=%d collisions=%d",
                status["time"],
                status["running"],
                status["birds"],
                status["predators"],
                status["collision_count"],
            )

        if autostart and orchestrator.is_running:
            await orchestrator.toggle_running()
    finally:
        await orchestrator.shutdown()


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Flyway Viewer - bird migration simulation client",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  # Open the viewer against the default service
  python main.py

  # Point at another service (or set {BACKEND_URL_ENV})
  python main.py --backend-url http://sim-host:8080

  # Smoke-check a service without a window: start, poll for 10s, stop
  python main.py --headless --autostart --duration 10
        """,
    )

    parser.add_argument(
        "--backend-url",
        type=str,
        default=None,
        help=f"Simulation service base URL (default: ${BACKEND_URL_ENV} or http://localhost:8080)",
    )
    parser.add_argument(
        "--width", type=int, default=SURFACE_WIDTH, help="Canvas width in pixels"
    )
    parser.add_argument(
        "--height", type=int, default=SURFACE_HEIGHT, help="Canvas height in pixels"
    )
    parser.add_argument(
        "--poll-interval-ms",
        type=int,
        default=None,
        help="Snapshot polling cadence while running (default: 100)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: $FLYWAY_LOG_LEVEL or INFO)",
    )
    parser.add_argument(
        "--headless", action="store_true", help="Run without a window, logging status only"
    )
    parser.add_argument(
        "--duration",
        type=float,
        default=10.0,
        help="Seconds to run in headless mode (default: 10)",
    )
    parser.add_argument(
        "--autostart",
        action="store_true",
        help="Start the simulation after mounting (headless mode)",
    )
    return parser


def resolve_settings(args: argparse.Namespace) -> ClientSettings:
    """Environment settings, overridden by explicit command-line options."""
    settings = ClientSettings.from_env()
    return ClientSettings(
        backend_url=args.backend_url or settings.backend_url,
        poll_interval_ms=args.poll_interval_ms or settings.poll_interval_ms,
        request_timeout=settings.request_timeout,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Parse command-line arguments and run the appropriate mode."""
    args = build_arg_parser().parse_args(argv)
    configure_logging(level=args.log_level, extra_loggers=("rendering", "core"))

    try:
        settings = resolve_settings(args)
    except ConfigurationError as e:
        logger.error("Invalid configuration: %s", e)
        return 2

    from viewer.orchestrator import Orchestrator

    orchestrator = Orchestrator.from_settings(settings, surface_size=(args.width, args.height))

    logger.info("=" * SEPARATOR_WIDTH)
    logger.info("FLYWAY VIEWER")
    logger.info("=" * SEPARATOR_WIDTH)
    logger.info("Service: %s", settings.backend_url)
    logger.info("Polling every %d ms while running", settings.poll_interval_ms)

    if args.headless:
        asyncio.run(run_headless(orchestrator, args.duration, args.autostart))
    else:
        from viewer import app

        app.main(orchestrator)
    return 0


if __name__ == "__main__":
    sys.exit(main())
