"""Listing retrieval and post collection utilities for reddit-mirror."""
from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Any, Collection

import requests

from .fields import as_dict, as_str, get_path
from .models import Comment, Post, parse_comments, parse_post

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
BASE_URL = "https://www.reddit.com"
REQUEST_TIMEOUT_SECONDS = 30
QUARANTINE_OPTIN_COOKIES = {
    "_options": '{"pref_quarantine_optin": true, "pref_gated_sub_optin": true}',
}


class FetchError(RuntimeError):
    """Reddit could not be reached or answered with something other than a listing."""


def build_session(user_agent: str = DEFAULT_USER_AGENT, verify: bool = True) -> requests.Session:
    session = requests.Session()
    session.headers.update(
        {
            "User-Agent": user_agent,
            "Accept": "application/json, text/javascript, */*; q=0.01",
            "Accept-Language": "en-US,en;q=0.8",
            "Referer": "https://www.reddit.com/",
            "Connection": "keep-alive",
        }
    )
    session.verify = verify
    return session


def _resolve_url(path: str) -> str:
    if path.startswith(("http://", "https://")):
        return path
    if not path.startswith("/"):
        path = "/" + path
    return f"{BASE_URL}{path}"


def fetch_json(
    session: requests.Session,
    path: str,
    *,
    quarantine: bool = False,
    params: dict | None = None,
    retries: int = 3,
    backoff: float = 1.0,
) -> Any:
    """GET a Reddit JSON endpoint, retrying transient failures with backoff.

    ``quarantine`` sends the opt-in cookies that let quarantined and gated
    subreddits through. Raises :class:`FetchError` once retries run out or
    when Reddit answers with an error document.
    """
    url = _resolve_url(path)
    query = dict(params or {})
    query.setdefault("raw_json", 1)
    cookies = QUARANTINE_OPTIN_COOKIES if quarantine else None

    last_exc: Exception | None = None
    for attempt in range(1, retries + 1):
        try:
            response = session.get(url, params=query, cookies=cookies, timeout=REQUEST_TIMEOUT_SECONDS)
            response.raise_for_status()
            payload = response.json()
        except (requests.exceptions.RequestException, ValueError) as exc:
            last_exc = exc
            if attempt >= retries:
                break
            wait_time = backoff * (2 ** (attempt - 1))
            logger.warning(
                "Error fetching %s (attempt %d/%d): %s; retrying in %.1f seconds",
                url,
                attempt,
                retries,
                exc,
                wait_time,
            )
            time.sleep(wait_time)
            continue

        if isinstance(payload, dict) and "error" in payload:
            raise FetchError(
                f"Reddit error {payload.get('error')} {payload.get('reason')!r}: {payload.get('message')} | {path}"
            )
        return payload
    raise FetchError(f"Failed to fetch {url!r}: {last_exc}") from last_exc


def fetch_posts(
    session: requests.Session,
    path: str,
    quarantine: bool = False,
) -> tuple[list[Post], str]:
    """Fetch one listing page and return its posts with the ``after`` cursor."""
    listing = fetch_json(session, path, quarantine=quarantine)

    children = get_path(listing, "data", "children")
    if not isinstance(children, list):
        raise FetchError("No posts found")

    posts = [parse_post(child) for child in children]
    after = as_str(get_path(listing, "data", "after"))
    logger.info("Parsed %d posts from %s (after=%s)", len(posts), path, after or "-")
    return posts, after


def filter_posts(posts: list[Post], filters: Collection[str]) -> tuple[int, bool]:
    """Drop posts from filtered subreddits or users, in place.

    Users are matched as ``u_<name>``. Returns the number removed and whether
    nothing is left; an empty input is reported as ``(0, False)``.
    """
    if not posts:
        return 0, False
    before = len(posts)
    posts[:] = [
        post for post in posts if post.community not in filters and f"u_{post.author.name}" not in filters
    ]
    return before - len(posts), not posts


def fetch_thread(
    session: requests.Session,
    path: str,
    quarantine: bool = False,
    *,
    highlighted_comment: str = "",
    filters: Collection[str] = frozenset(),
) -> tuple[Post, tuple[Comment, ...]]:
    """Fetch a post page (``/r/<sub>/comments/<id>.json``) with its comment tree."""
    payload = fetch_json(session, path, quarantine=quarantine)

    child = get_path(payload, 0, "data", "children", 0)
    if not isinstance(child, dict):
        raise FetchError(f"No post found at {path}")

    post = parse_post(child)
    comments = parse_comments(get_path(payload, 1), post.permalink, post.author.name, highlighted_comment, filters)
    return post, comments


def fetch_about(session: requests.Session, path: str, quarantine: bool = False) -> dict[str, Any]:
    """Fetch an ``about.json`` document for a user or subreddit."""
    about = as_dict(fetch_json(session, path, quarantine=quarantine))
    if not as_dict(about.get("data")):
        raise FetchError(f"No metadata found at {path}")
    return about


def save_json(data: Any, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
