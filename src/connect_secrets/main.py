"""
connect-secrets - Main Entry Point

Loads secrets from a 1Password Connect server into step outputs and,
optionally, environment variables of a GitHub Actions job.
"""

import argparse
import asyncio
import logging
import os
import sys
from typing import List, Optional

from connect_secrets.action import SecretsAction
from connect_secrets.config import ActionConfig
from connect_secrets.errors import ConfigurationError, RetriesExhaustedError
from connect_secrets.integration import ConnectClient
from connect_secrets.sinks import ActionsSink
from connect_secrets.workflow import ActionsLogHandler

logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO"):
    """Set up logging, using workflow commands when running on an Actions runner."""
    if os.getenv("GITHUB_ACTIONS") == "true":
        logging.basicConfig(
            level=getattr(logging, level.upper(), logging.INFO),
            format="%(message)s",
            handlers=[ActionsLogHandler()],
            force=True,
        )
    else:
        logging.basicConfig(
            level=getattr(logging, level.upper(), logging.INFO),
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    # httpx logs every request line (item titles included) at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Load 1Password Connect secrets into GitHub Actions outputs"
    )
    parser.add_argument(
        "--connect-server-url",
        type=str,
        help="Connect server URL (default: from INPUT_CONNECT-SERVER-URL)"
    )
    parser.add_argument(
        "--secret-path",
        type=str,
        help="Secret requests, one '<vault>/<item>[/<field>] [<output>[!]]' per line"
    )
    parser.add_argument(
        "--retry-count",
        type=int,
        help="Maximum number of attempts (default: 5)"
    )
    parser.add_argument(
        "--export-env-vars",
        action="store_true",
        default=None,
        help="Also export every output as an environment variable"
    )
    parser.add_argument(
        "--fail-on-not-found",
        action="store_true",
        default=None,
        help="Fail the run when a vault, item or field is missing"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level"
    )
    return parser


async def run(config: ActionConfig, sink: ActionsSink, transport=None, sleep=None) -> int:
    """Resolve all secrets and return the process exit code."""
    async with ConnectClient(
        config.connect_server_url,
        config.connect_server_token.get_secret_value(),
        timeout=config.timeout,
        transport=transport,
    ) as client:
        action = SecretsAction(config, client, sink, sleep=sleep)
        try:
            await action.run()
        except RetriesExhaustedError as e:
            if e.last_error is not None:
                sink.set_failed(str(e.last_error))
            sink.set_failed("🛑 Too many retries")

    return sink.exit_code


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    try:
        config = ActionConfig.from_env(
            connect_server_url=args.connect_server_url,
            secret_path=args.secret_path,
            retry_count=args.retry_count,
            export_env_vars=args.export_env_vars,
            fail_on_not_found=args.fail_on_not_found,
            log_level=args.log_level,
        )
    except ConfigurationError as e:
        setup_logging(args.log_level or "INFO")
        sink = ActionsSink()
        sink.set_failed(str(e))
        return sink.exit_code

    setup_logging(config.log_level)
    logger.info(f"Connect server: {config.connect_server_url}")

    sink = ActionsSink(export_env_vars=config.export_env_vars)
    try:
        return asyncio.run(run(config, sink))
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sink.set_failed(f"Action failed with error: {e}")
        return sink.exit_code


def cli():
    sys.exit(main())


if __name__ == "__main__":
    cli()
