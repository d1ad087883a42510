"""Command line interface for querying the transcript index."""
from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, BinaryIO, Optional

from .config import AppConfig, load_config, save_config
from .core import SearchOptions, SpeechSearchError
from .runtime import create_service

logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
LOGGER = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Search parliamentary speech transcripts")
    parser.add_argument(
        "command",
        choices=["summary", "hits", "export", "speech", "context", "config"],
        help="Which search operation to execute",
    )
    parser.add_argument("--config", type=Path, help="Path to an explicit configuration file")
    parser.add_argument("--query", "-q", default="", help="Full text query")
    parser.add_argument("--interval", help="Timeline interval: month, 12w, 24w or year")
    parser.add_argument(
        "--include-president",
        action="store_true",
        help="Include speeches by the presiding officer in hit lists",
    )
    parser.add_argument("--size", type=int, help="Number of hits per page")
    parser.add_argument("--start", type=int, help="Offset of the first hit")
    parser.add_argument("--sort", help="Sort key for hit lists (default: relevance)")
    parser.add_argument("--id", dest="identifier", help="Speech id (only used with 'speech')")
    parser.add_argument("--transcript", help="Transcript id (only used with 'context')")
    parser.add_argument("--from-order", type=int, default=0, help="First speech order in the context")
    parser.add_argument("--to-order", type=int, default=0, help="Last speech order in the context")
    parser.add_argument("--output", type=Path, help="Write the export to this file instead of stdout")
    return parser


def _print_json(data: Any) -> None:
    json.dump(data, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")


async def _export(service, options: SearchOptions, target: BinaryIO) -> None:
    async for chunk in service.export_tsv(options):
        target.write(chunk)


async def _run(args: argparse.Namespace, config: AppConfig) -> None:
    options = SearchOptions(
        query=args.query,
        interval=args.interval,
        include_president=args.include_president,
        size=args.size,
        start=args.start,
        sort=args.sort,
    )
    resources = create_service(config)
    service = resources.service
    try:
        if args.command == "summary":
            _print_json((await service.summary(options)).to_dict())
        elif args.command == "hits":
            _print_json((await service.hits(options)).to_dict())
        elif args.command == "speech":
            _print_json(await service.get_speech(args.identifier))
        elif args.command == "context":
            _print_json(await service.get_context(args.transcript, args.from_order, args.to_order))
        elif args.output:
            with args.output.open("wb") as fh:
                await _export(service, options, fh)
            LOGGER.info("Wrote export to %s", args.output)
        else:
            await _export(service, options, sys.stdout.buffer)
    finally:
        await resources.aclose()


def main(argv: Optional[list[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.command == "speech" and not args.identifier:
        parser.error("the 'speech' command requires --id")
    if args.command == "context" and not args.transcript:
        parser.error("the 'context' command requires --transcript")
    config = load_config(args.config)

    if args.command == "config":
        target = save_config(config, args.config)
        LOGGER.info("Wrote effective configuration to %s", target)
        return 0

    try:
        asyncio.run(_run(args, config))
    except (SpeechSearchError, ValueError) as exc:
        LOGGER.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
