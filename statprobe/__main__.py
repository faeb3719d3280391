"""
Process entry point: configuration, logging and signal wiring
"""

import sys
import signal
import asyncio
import logging

from .config import ConfigError, ProbeConfig
from .monitoring import LogManager
from .poller import StatsPoller

logger = logging.getLogger(__name__)


def install_signal_handlers(poller: StatsPoller):
    """Route SIGINT and SIGTERM to a graceful poller stop"""
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, poller.stop)
        except (NotImplementedError, RuntimeError):
            # Windows event loops; Ctrl+C still arrives as KeyboardInterrupt
            logger.debug(f"Signal handler for {sig.name} not supported on this loop")


async def run_probe(config: ProbeConfig):
    poller = StatsPoller(config)
    install_signal_handlers(poller)
    await poller.run()


def main():
    try:
        config = ProbeConfig.from_env()
    except ConfigError as e:
        print(f"❌ Invalid configuration: {e}", file=sys.stderr)
        sys.exit(2)

    LogManager(log_level=config.log_level, log_dir=config.log_dir)
    try:
        asyncio.run(run_probe(config))
    except KeyboardInterrupt:
        logger.info("Stats probe interrupted")


if __name__ == "__main__":
    main()
