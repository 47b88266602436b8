"""Command-line entry point.

Loads the configuration, opens the session log and runs the TUI until the
user quits.
"""

from __future__ import annotations

import argparse
import sys

from podscope import __version__
from podscope.clients.kubectl import KubectlClient
from podscope.clients.ssh import SSHClient
from podscope.constants.values import APP_TITLE
from podscope.core.dispatcher import Dispatcher
from podscope.models.state.app_settings import ConfigLoadError, ConfigManager
from podscope.ui.app import PodscopeApp
from podscope.utils.log_sink import LogSink, LogSinkError

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _log_level(value: str) -> str:
    """argparse type for logging level names."""
    level = value.upper()
    if level not in _LOG_LEVELS:
        raise argparse.ArgumentTypeError(f"invalid log level: {value!r}")
    return level


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=APP_TITLE,
        description="Terminal UI for browsing Kubernetes clusters and node container logs.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help=f"path to the config file (default: {ConfigManager.default_path()})",
    )
    parser.add_argument(
        "--log-level",
        type=_log_level,
        default=None,
        help="log level for the session log file (overrides the config file)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = ConfigManager.load(args.config)
    except ConfigLoadError as exc:
        print(f"{APP_TITLE}: {exc}", file=sys.stderr)
        return 1

    sink = LogSink(level=args.log_level or config.log_level)
    try:
        log = sink.open()
    except LogSinkError as exc:
        print(f"{APP_TITLE}: {exc}", file=sys.stderr)
        return 1

    try:
        dispatcher = Dispatcher(
            config,
            cluster_factory=KubectlClient.from_entry,
            remote_factory=SSHClient,
            log=log.getChild("dispatcher"),
        )
        PodscopeApp(dispatcher).run()
    finally:
        log.info("Session ended")
        sink.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
