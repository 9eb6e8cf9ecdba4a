#!/usr/bin/env python3
"""
Bot Monitor - terminal dashboard for the trading bot server

Usage:
    python run.py                      # Watch TRAINING data (default mode)
    python run.py --mode trading       # Watch TRADING data
    python run.py --start trading      # Start the bot in TRADING, then watch it
    python run.py --pause              # Pause the bot, then watch
    python run.py --once               # Fetch one snapshot, print it, exit
    python run.py --help               # Show all options
"""

import argparse
import asyncio
import sys

from core.config import settings
from core.logging_utils import get_logger, setup_logging, suppress_console_logging
from core.modes import Mode

logger = get_logger(__name__, tag="MAIN")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='botmonitor',
        description='Bot Monitor - trading bot dashboard',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run.py --url http://bot:8080/api   Watch a remote server
  python run.py --start training            Start training and watch it
  python run.py --reset --once              Reset the bot and print the result
"""
    )

    parser.add_argument('--url', type=str, default=None,
                        help=f'Bot API base URL (default: {settings.api_base_url})')
    parser.add_argument('-m', '--mode', type=Mode.parse, default=None,
                        help=f'Mode to view: training or trading (default: {settings.default_mode.value})')
    parser.add_argument('-i', '--interval-ms', type=int, default=None,
                        help=f'Poll interval in ms (default: {settings.poll_interval_ms})')

    action = parser.add_mutually_exclusive_group()
    action.add_argument('--start', type=Mode.parse, metavar='MODE', default=None,
                        help='Start the bot in MODE before watching')
    action.add_argument('--pause', action='store_true', help='Pause the bot before watching')
    action.add_argument('--reset', action='store_true', help='Reset the bot before watching')

    parser.add_argument('--once', action='store_true',
                        help='Print a single snapshot and exit')
    parser.add_argument('--log-level', type=str, default=None,
                        help=f'Log level (default: {settings.log_level})')
    return parser


async def run(args: argparse.Namespace) -> int:
    from rich.live import Live

    from dashboard.display import Dashboard
    from dashboard.sync_controller import SyncController
    from datafeeds.bot_api import BotApiClient
    from datafeeds.mode_fetcher import ModeScopedFetcher

    async with BotApiClient(base_url=args.url) as api:
        if not await api.health():
            logger.error("Bot server at %s is not healthy", api.base_url)
            return 1

        controller = SyncController(
            ModeScopedFetcher(api),
            api,
            poll_interval_ms=args.interval_ms,
        )
        dashboard = Dashboard(controller)

        await controller.start(args.mode or args.start)
        if args.start:
            await controller.start_bot(args.start)
        elif args.pause:
            await controller.pause()
        elif args.reset:
            await controller.reset()

        if args.once:
            await controller.wait_idle()
            await controller.stop()
            dashboard.console.print(dashboard.render(), height=40)
            return 0 if controller.snapshot is not None else 1

        suppress_console_logging(True)
        try:
            with Live(dashboard.render(), console=dashboard.console, refresh_per_second=4, screen=True) as live:
                while not controller.is_stopped:
                    await asyncio.sleep(0.5)
                    live.update(dashboard.render())
        except asyncio.CancelledError:
            logger.info("Interrupted, shutting down")
        finally:
            suppress_console_logging(False)
            await controller.stop()
            await controller.wait_idle()
        return 0


def main():
    args = build_parser().parse_args()
    setup_logging(args.log_level or settings.log_level)
    try:
        code = asyncio.run(run(args))
    except KeyboardInterrupt:
        print("\nStopped.")
        code = 0
    sys.exit(code)


if __name__ == "__main__":
    main()
