"""CLI entry point for directories-solr."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from directories_solr.config.settings import Settings


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point.

    Returns:
        Process exit code: 0 on success, 1 when errors were reported.
    """
    parser = argparse.ArgumentParser(
        prog="directories-solr",
        description="Index CMS directory entities into Solr",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["debug", "info", "warning", "error"],
        default=None,
        help="Log level (overrides config)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"directories-solr {_get_version()}",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    index_parser = subparsers.add_parser("index", help="Run indexing once")
    index_parser.add_argument(
        "--indexer",
        type=str,
        default=None,
        help="Run only this indexer (default: every enabled indexer)",
    )

    subparsers.add_parser("list", help="List the registered indexers")

    serve_parser = subparsers.add_parser("serve", help="Start the HTTP API")
    serve_parser.add_argument("--host", type=str, default=None, help="Server bind address (overrides config)")
    serve_parser.add_argument("--port", "-p", type=int, default=None, help="Server port (overrides config)")

    args = parser.parse_args(argv)

    if args.config:
        config_path = Path(args.config)
        if not config_path.exists():
            print(f"Error: Config file not found: {config_path}", file=sys.stderr)
            return 1
        settings = Settings.from_yaml(config_path)
    else:
        settings = Settings()

    if args.log_level:
        settings.observability.log_level = args.log_level

    from directories_solr.observability.logging import setup_logging

    setup_logging(settings.observability)

    if args.command == "index":
        return asyncio.run(_index(settings, args.indexer))
    if args.command == "list":
        return _list(settings)
    return _serve(settings, args.host, args.port)


async def _index(settings: Settings, indexer_name: str | None) -> int:
    from directories_solr.core.service import IndexingService
    from directories_solr.indexers.base.exceptions import IndexerError
    from directories_solr.indexers.base.registry import IndexerNotFoundError

    service = IndexingService(settings)
    try:
        await service.initialize()
        if indexer_name:
            results = {indexer_name: await service.index(indexer_name)}
        else:
            results = await service.index_all()
    except (IndexerError, IndexerNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        await service.shutdown()

    if not results:
        print("No enabled indexer.")
        return 0

    failed = False
    for name, errors in results.items():
        if errors:
            failed = True
            print(f"{name}: {len(errors)} error(s)", file=sys.stderr)
            for error in errors:
                print(f"  {error}", file=sys.stderr)
        else:
            print(f"{name}: OK")
    return 1 if failed else 0


def _list(settings: Settings) -> int:
    from directories_solr.core.service import IndexingService

    service = IndexingService(settings)
    for description in service.registry.describe_all():
        state = "enabled" if description.enabled else "disabled"
        print(f"{description.name} {description.version} [{state}] - {description.description}")
    return 0


def _serve(settings: Settings, host: str | None, port: int | None) -> int:
    if host:
        settings.server.host = host
    if port:
        settings.server.port = port

    import uvicorn

    from directories_solr.api.app import create_app

    uvicorn.run(
        create_app(settings),
        host=settings.server.host,
        port=settings.server.port,
        log_level=settings.observability.log_level.lower(),
    )
    return 0


def _get_version() -> str:
    """Get the package version."""
    try:
        from directories_solr import __version__

        return __version__
    except ImportError:
        return "unknown"


if __name__ == "__main__":
    sys.exit(main())
