"""
Lingotour - Main entry point.

    lingotour serve                      # run the API
    lingotour watch tour <id>            # stream a translation session
"""

from __future__ import annotations

import argparse
import asyncio
import logging

import httpx

from lingotour.config import get_settings
from lingotour.core.models import TranslationBundle
from lingotour.i18n import TranslationStreamClient, TranslationSession, count_filled_fields

logger = logging.getLogger(__name__)


def serve(args: argparse.Namespace) -> None:
    """Run the API server."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "lingotour.api.app:app",
        host=args.host or settings.api_host,
        port=args.port or settings.api_port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )


async def watch(args: argparse.Namespace) -> TranslationSession:
    """
    Open a streaming session and print locales as they finish.
    """
    print("=" * 60)
    print(f"Translating {args.entity_type} {args.id}")
    print("=" * 60)

    seen: dict[str, dict] = {}

    def on_update(bundle: TranslationBundle) -> None:
        for locale, fields in bundle.items():
            if seen.get(locale) != fields:
                seen[locale] = fields
                print(f"  ✓ {locale}: {count_filled_fields(bundle, locale)} field(s)")

    async with httpx.AsyncClient(base_url=args.url, timeout=None) as http:
        client = TranslationStreamClient(http)
        session = await client.translate(
            args.entity_type,
            args.id,
            on_update=on_update,
            timeout=args.timeout,
        )

    print()
    for locale, status in session.statuses.items():
        print(f"  • {locale}: {status.value}")
    print(f"Progress: {session.progress:.0%}")

    if session.failed:
        print(f"Failed: {session.error}")
    elif session.timed_out:
        print(f"Timed out; still pending: {', '.join(session.pending_locales)}")
    elif session.finished:
        print(f"Saved: {', '.join(session.translated_locales) or 'nothing'}")
    print("=" * 60)
    return session


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="lingotour")
    commands = parser.add_subparsers(dest="command", required=True)

    serve_cmd = commands.add_parser("serve", help="Run the API server")
    serve_cmd.add_argument("--host", default=None)
    serve_cmd.add_argument("--port", type=int, default=None)
    serve_cmd.add_argument("--reload", action="store_true")

    watch_cmd = commands.add_parser("watch", help="Stream a translation session")
    watch_cmd.add_argument("entity_type")
    watch_cmd.add_argument("id")
    watch_cmd.add_argument("--url", default="http://localhost:8000")
    watch_cmd.add_argument("--timeout", type=float, default=None)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=get_settings().log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "serve":
        serve(args)
        return 0

    session = asyncio.run(watch(args))
    return 1 if session.failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
