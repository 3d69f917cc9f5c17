from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

import aiohttp
import requests

from .config import ConfigError, load_config
from .github_api import GitHubAPIError
from .logging import configure_logging
from .pipeline import run_pipeline


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="profile-readme",
        description="Build a profile README from repository topics and a badge configuration.",
    )
    parser.add_argument("--config", type=Path, help="Path to settings YAML file", default=None)
    parser.add_argument("--badges", type=Path, help="Badge configuration document (YAML or JSON)")
    parser.add_argument("--template", type=Path, help="Jinja2 template for the README")
    parser.add_argument("--output", type=Path, help="Where to write the rendered README")
    parser.add_argument("--refresh", action="store_true", help="Ignore cached GitHub data and fetch it again")
    parser.add_argument("--no-pinned", dest="pinned", action="store_false", help="Skip the pinned repositories lookup")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-file", type=Path, help="Also write logs to this file")
    return parser


def app(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logger = configure_logging(verbose=args.verbose, log_file=args.log_file)

    try:
        config = load_config(args.config)
    except ConfigError as exc:
        parser.error(str(exc))
        return
    if args.badges:
        config.badges.config = args.badges
    if args.template:
        config.output.template = args.template
    if args.output:
        config.output.path = args.output

    try:
        readme_path = run_pipeline(config, refresh=args.refresh, include_pinned=args.pinned)
    except (ConfigError, GitHubAPIError, requests.RequestException, aiohttp.ClientError, asyncio.TimeoutError) as exc:
        parser.error(str(exc) or f"{type(exc).__name__} while talking to GitHub")
        return

    logger.info("README generated: %s", readme_path)


if __name__ == "__main__":  # pragma: no cover
    app(sys.argv[1:])
