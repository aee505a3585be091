#!/usr/bin/env python3
"""
Command-line entry point for Git Monitor.

    python -m gitmonitor status [--watch]
    python -m gitmonitor push PATH
    python -m gitmonitor pull PATH
    python -m gitmonitor deploy PATH

Environment variables:
    GIT_MONITOR_CONFIG: Configuration file (default: ~/.git-monitor/config.json)
    GIT_MONITOR_LOG_LEVEL: Root log level (default: INFO)
    OPENAI_API_KEY / GITHUB_TOKEN: Used when the configuration file has none
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from gitmonitor.common.config.config import GIT_MONITOR_LOG_LEVEL
from gitmonitor.common.config.settings import load_monitor_config
from gitmonitor.models.types import RepoSnapshot
from gitmonitor.services.monitor_service import GitMonitorService

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def format_snapshot(snapshot: RepoSnapshot) -> str:
    branch = f" [{snapshot.branch}]" if snapshot.branch else ""
    return (
        f"{snapshot.ref.display_name}{branch}: "
        f"{snapshot.status.state.value} - {snapshot.status.describe()}"
    )


async def _print_snapshots(snapshots: List[RepoSnapshot]) -> None:
    for snapshot in snapshots:
        print(format_snapshot(snapshot))
    sys.stdout.flush()


async def _run(args: argparse.Namespace) -> int:
    service = GitMonitorService(load_monitor_config(args.config))

    if args.command == "status":
        if args.watch:
            await service.watch_repositories(_print_snapshots)
        else:
            await _print_snapshots(await service.check_repositories())
        return 0

    if args.command == "push":
        result = await service.commit_and_push(args.path)
        if not result.ok:
            print(f"Push failed at {result.stage.value}: {result.error}")
            return 1
        print(f"Pushed: {result.title}")
        if result.body:
            print(result.body)
        return 0

    if args.command == "pull":
        pull_result = await service.pull(args.path)
        if not pull_result.success:
            print(f"Pull failed: {pull_result.error}")
            return 1
        print(pull_result.message)
        return 0

    if args.command == "deploy":
        deploy = await service.check_deploy_status(args.path)
        detail = f" - {deploy.detail}" if deploy.detail else ""
        print(f"{deploy.state.value}{detail}")
        return 0

    return 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="git-monitor",
        description="Watch, commit and push a set of local git repositories.",
    )
    parser.add_argument("--config", help="Path to the configuration JSON file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    status = subparsers.add_parser("status", help="Show the status of all repositories")
    status.add_argument(
        "--watch", action="store_true", help="Keep polling on the configured interval"
    )

    for name, help_text in (
        ("push", "Commit pending changes with a generated message and push"),
        ("pull", "Pull the current branch"),
        ("deploy", "Show CI/deploy status of the current commit"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("path", help="Repository directory")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else GIT_MONITOR_LOG_LEVEL.upper(),
        format=LOG_FORMAT,
        stream=sys.stderr,
    )

    try:
        return asyncio.run(_run(args))
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
