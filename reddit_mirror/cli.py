"""Command line entry point for reddit-mirror."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any, Sequence

from .core import (
    DEFAULT_USER_AGENT,
    FetchError,
    build_session,
    fetch_about,
    fetch_posts,
    fetch_thread,
    filter_posts,
    save_json,
)
from .models import parse_subreddit, parse_user
from .settings import get_filters

logger = logging.getLogger(__name__)


def _normalize_path(raw: str) -> str:
    path = raw.strip()
    if not path:
        raise SystemExit("A Reddit path is required (for example /r/python/hot.json).")
    if path.startswith(("http://", "https://")):
        return path
    if not path.startswith("/"):
        path = "/" + path
    base, _, query = path.partition("?")
    if not base.endswith(".json"):
        base = base.rstrip("/") + ".json"
    return f"{base}?{query}" if query else base


def _about_owner(path: str) -> tuple[str, str]:
    segments = [segment for segment in path.split("?", 1)[0].split("/") if segment]
    if len(segments) >= 2 and segments[0].lower() in {"u", "user"}:
        return "user", segments[1]
    if len(segments) >= 2 and segments[0].lower() == "r":
        return "subreddit", segments[1]
    raise SystemExit(f"--about expects a /user/<name>/about or /r/<name>/about path, got {path}")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Fetch a Reddit listing, post or about page and print it as normalized records "
            "with every Reddit-hosted URL rewritten to a local proxy path."
        ),
    )
    parser.add_argument(
        "path",
        help="Reddit path to fetch, e.g. /r/python/hot, /r/python/comments/abc123 or /user/spez/about.",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--thread",
        action="store_true",
        help="Treat the path as a post page and include its comment tree.",
    )
    mode.add_argument(
        "--about",
        action="store_true",
        help="Treat the path as a user or subreddit about page.",
    )
    parser.add_argument(
        "--quarantine",
        action="store_true",
        help="Opt in to quarantined and gated subreddits for this request.",
    )
    parser.add_argument(
        "--filter",
        dest="filters",
        action="append",
        default=[],
        help=(
            "Subreddit name or u_<username> to hide. Provide multiple times for multiple filters "
            "(default: REDDIT_MIRROR_DEFAULT_FILTERS, '+'-separated)."
        ),
    )
    parser.add_argument(
        "--highlight",
        default="",
        help="Comment id to mark as highlighted when using --thread.",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write JSON to this file instead of standard output.",
    )
    parser.add_argument(
        "--user-agent",
        default=DEFAULT_USER_AGENT,
        help="Custom User-Agent header to send with requests.",
    )
    parser.add_argument(
        "--insecure",
        action="store_true",
        help="Disable TLS certificate verification (only if you trust the network).",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging verbosity (default: INFO).",
    )
    return parser.parse_args(argv)


def run(args: argparse.Namespace) -> dict[str, Any]:
    path = _normalize_path(args.path)
    filters = frozenset(name.strip() for name in args.filters if name.strip()) or get_filters(None)
    session = build_session(args.user_agent, not args.insecure)

    if args.about:
        kind, name = _about_owner(path)
        about = fetch_about(session, path, quarantine=args.quarantine)
        record = parse_user(name, about) if kind == "user" else parse_subreddit(about)
        return {kind: asdict(record)}

    if args.thread:
        post, comments = fetch_thread(
            session,
            path,
            quarantine=args.quarantine,
            highlighted_comment=args.highlight,
            filters=filters,
        )
        return {"post": asdict(post), "comments": [asdict(comment) for comment in comments]}

    posts, after = fetch_posts(session, path, quarantine=args.quarantine)
    removed, all_removed = filter_posts(posts, filters)
    if removed:
        logger.info("Filtered %d post(s)%s", removed, " (all)" if all_removed else "")
    return {
        "posts": [asdict(post) for post in posts],
        "after": after,
        "filtered": removed,
        "all_filtered": all_removed,
    }


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)

    log_level = getattr(logging, args.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        force=True,
    )
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    try:
        result = run(args)
    except FetchError as exc:
        raise SystemExit(f"Failed to fetch {args.path}: {exc}") from exc

    if args.output is not None:
        save_json(result, args.output)
        print(f"Wrote {args.output}", file=sys.stderr)
    else:
        print(json.dumps(result, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
