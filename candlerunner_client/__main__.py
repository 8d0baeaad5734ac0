"""Main entry point for the candlerunner client."""
import argparse
import asyncio
import json
import logging
import sys

from candlerunner_client.core.config import Config, load_config, ConfigError
from candlerunner_client.core.context import AppContext
from candlerunner_client.core.store import LoadState

logger = logging.getLogger(__name__)


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Args:
        args: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog="python -m candlerunner_client",
        description="Candlerunner client - load accounts, instruments, strategies and instances",
    )

    parser.add_argument(
        "-c", "--config",
        default="config/default.yaml",
        help="Path to configuration file (default: config/default.yaml)",
    )

    parser.add_argument(
        "-l", "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: INFO)",
    )

    parser.add_argument(
        "--base-url",
        default=None,
        help="Override the service URL from the configuration file",
    )

    parser.add_argument(
        "--dump",
        action="store_true",
        help="Print the loaded collections as JSON",
    )

    return parser.parse_args(args)


def setup_logging(level: str) -> None:
    """Configure logging for the application.

    Args:
        level: Logging level string (DEBUG, INFO, etc.)
    """
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=getattr(logging, level),
        format=log_format,
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )

    # Reduce noise from external libraries
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)


def _apply_overrides(config: Config, parsed_args: argparse.Namespace) -> None:
    if parsed_args.base_url:
        if "://" not in parsed_args.base_url:
            raise ConfigError(f"Invalid --base-url, expected scheme://host: {parsed_args.base_url}")
        config.service.url = parsed_args.base_url


async def run(config: Config, dump: bool = False) -> dict[str, LoadState]:
    """Load every enabled store once and report the outcome.

    Args:
        config: Client configuration
        dump: Print the published collections as JSON

    Returns:
        Final load state per store name
    """
    async with AppContext(config) as context:
        context.start()
        states = await context.wait()

        for store in context.stores:
            if store.state is LoadState.LOADED:
                logger.info(f"{store.name}: {len(store.value)} loaded")
            else:
                logger.error(f"{store.name}: {store.state.value} ({store.error})")

        if dump:
            snapshot = {
                store.name: [item.to_dict() for item in store.value]
                for store in context.stores
            }
            print(json.dumps(snapshot, indent=2))

    return states


def main(args: list[str] | None = None) -> int:
    """Main entry point.

    Args:
        args: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 if every store loaded, 1 otherwise)
    """
    parsed_args = parse_args(args)

    setup_logging(parsed_args.log_level)

    logger.info("Candlerunner client starting...")
    logger.info(f"Config: {parsed_args.config}")

    try:
        config = load_config(parsed_args.config)
        _apply_overrides(config, parsed_args)

        states = asyncio.run(run(config, dump=parsed_args.dump))

    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 0

    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        return 1

    if all(state is LoadState.LOADED for state in states.values()):
        return 0
    return 1


if __name__ == "__main__":
    sys.exit(main())
