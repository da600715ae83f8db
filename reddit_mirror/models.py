"""Frozen records built from Reddit listing JSON."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Collection

from .fields import (
    U64_LIMIT,
    as_bool,
    as_dict,
    as_float,
    as_int,
    as_list,
    as_optional_u64,
    as_str,
    get_path,
    val,
)
from .formatting import format_num, format_short_date, format_time
from .media import GalleryMedia, Media, resolve_media
from .settings import pushshift_frontend
from .urls import format_url, rewrite_urls

logger = logging.getLogger(__name__)

HIDDEN_SCORE = ("•", "Hidden")
REMOVED_NOTICE = '<div class="md"><p>[removed] — <a href="https://{frontend}{link}">view removed {what}</a></p></div>'


@dataclass(frozen=True, slots=True)
class FlairPart:
    kind: str
    value: str


@dataclass(frozen=True, slots=True)
class Flair:
    parts: tuple[FlairPart, ...] = ()
    text: str = ""
    background_color: str = ""
    foreground_color: str = "white"


@dataclass(frozen=True, slots=True)
class Author:
    name: str = ""
    flair: Flair = field(default_factory=Flair)
    distinguished: str = ""


@dataclass(frozen=True, slots=True)
class Award:
    name: str = ""
    icon_url: str = ""
    description: str = ""
    count: int = 1

    def __str__(self) -> str:
        return f"{self.name} {self.icon_url} {self.description}"


@dataclass(frozen=True, slots=True)
class PollOption:
    id: int
    text: str
    vote_count: int | None = None


@dataclass(frozen=True, slots=True)
class Poll:
    options: tuple[PollOption, ...]
    voting_end_timestamp: tuple[str, str]
    total_vote_count: int

    def most_votes(self) -> int:
        return max((o.vote_count for o in self.options if o.vote_count is not None), default=0)


@dataclass(frozen=True, slots=True)
class Flags:
    nsfw: bool = False
    stickied: bool = False


@dataclass(frozen=True, slots=True)
class Post:
    id: str
    title: str
    community: str
    body: str
    author: Author
    permalink: str
    poll: Poll | None
    score: tuple[str, str]
    upvote_ratio: int
    post_type: str
    flair: Flair
    flags: Flags
    thumbnail: Media
    media: Media
    domain: str
    rel_time: str
    created: str
    num_duplicates: int
    comments: tuple[str, str]
    gallery: tuple[GalleryMedia, ...]
    awards: tuple[Award, ...]
    nsfw: bool
    ws_url: str


@dataclass(frozen=True, slots=True)
class Comment:
    id: str
    kind: str
    parent_id: str
    parent_kind: str
    post_link: str
    post_author: str
    body: str
    author: Author
    score: tuple[str, str]
    rel_time: str
    created: str
    edited: tuple[str, str]
    replies: tuple[Comment, ...]
    highlighted: bool
    awards: tuple[Award, ...]
    collapsed: bool
    is_filtered: bool
    more_count: int


@dataclass(frozen=True, slots=True)
class User:
    name: str = ""
    title: str = ""
    icon: str = ""
    karma: int = 0
    created: str = ""
    banner: str = ""
    description: str = ""
    nsfw: bool = False


@dataclass(frozen=True, slots=True)
class Subreddit:
    name: str = ""
    title: str = ""
    description: str = ""
    info: str = ""
    icon: str = ""
    members: tuple[str, str] = ("0", "0")
    active: tuple[str, str] = ("0", "0")
    wiki: bool = False
    nsfw: bool = False


def parse_flair_parts(flair_type: str, rich_flair: Any, text_flair: Any) -> tuple[FlairPart, ...]:
    if flair_type == "richtext":
        parts: list[FlairPart] = []
        for part in as_list(rich_flair):
            kind = as_str(get_path(part, "e"))
            if kind == "text":
                value = as_str(get_path(part, "t"))
            elif kind == "emoji":
                value = format_url(as_str(get_path(part, "u")))
            else:
                value = ""
            parts.append(FlairPart(kind, value))
        return tuple(parts)
    if flair_type == "text" and isinstance(text_flair, str):
        return (FlairPart("text", text_flair),)
    return ()


def _foreground_color(text_color: str) -> str:
    return "black" if text_color == "dark" else "white"


def parse_flair(data: dict[str, Any], prefix: str) -> Flair:
    """Build the ``link_`` or ``author_`` flair of a post or comment."""
    return Flair(
        parts=parse_flair_parts(
            as_str(data.get(f"{prefix}_flair_type")),
            data.get(f"{prefix}_flair_richtext"),
            data.get(f"{prefix}_flair_text"),
        ),
        text=as_str(data.get(f"{prefix}_flair_text")),
        background_color=as_str(data.get(f"{prefix}_flair_background_color")),
        foreground_color=_foreground_color(as_str(data.get(f"{prefix}_flair_text_color"))),
    )


def parse_author(data: dict[str, Any]) -> Author:
    return Author(
        name=as_str(data.get("author")),
        flair=parse_flair(data, "author"),
        distinguished=as_str(data.get("distinguished")),
    )


def _is_u64_string(value: Any) -> bool:
    return isinstance(value, str) and value.isascii() and value.isdigit() and int(value) < U64_LIMIT


def parse_poll_options(options: Any) -> tuple[PollOption, ...] | None:
    if not isinstance(options, list):
        return None
    parsed: list[PollOption] = []
    for option in options:
        # Option ids arrive as numeric strings.
        raw_id = get_path(option, "id")
        text = get_path(option, "text")
        if not _is_u64_string(raw_id) or not isinstance(text, str):
            logger.debug("Skipping malformed poll option %r", option)
            continue
        parsed.append(PollOption(int(raw_id), text, as_optional_u64(get_path(option, "vote_count"))))
    return tuple(parsed)


def parse_poll(poll_data: Any) -> Poll | None:
    if not isinstance(poll_data, dict):
        return None
    total_vote_count = as_optional_u64(poll_data.get("total_vote_count"))
    voting_end = poll_data.get("voting_end_timestamp")
    options = parse_poll_options(poll_data.get("options"))
    if total_vote_count is None or options is None:
        return None
    if not isinstance(voting_end, (int, float)) or isinstance(voting_end, bool):
        return None
    # voting_end_timestamp is in milliseconds
    return Poll(options, format_time(voting_end / 1000.0), total_vote_count)


def _award_count(value: Any) -> int:
    count = as_optional_u64(value)
    return 1 if count is None else count


def parse_awards(items: Any) -> tuple[Award, ...]:
    return tuple(
        Award(
            name=as_str(get_path(item, "name")),
            icon_url=format_url(as_str(get_path(item, "resized_icons", 0, "url"))),
            description=as_str(get_path(item, "description")),
            count=_award_count(get_path(item, "count")),
        )
        for item in as_list(items)
    )


def _removed_notice(link: str, what: str) -> str:
    return REMOVED_NOTICE.format(frontend=pushshift_frontend(), link=link, what=what)


def parse_post(post: Any) -> Post:
    """Create a :class:`Post` from a ``t3`` listing child."""
    data = as_dict(get_path(post, "data"))
    rel_time, created = format_time(as_float(data.get("created_utc")))
    ratio = as_float(data.get("upvote_ratio"), 1.0) * 100.0
    post_type, media, gallery = resolve_media(data)
    permalink = val(post, "permalink")

    if val(post, "removed_by_category") == "moderator":
        body = _removed_notice(permalink, "post")
    else:
        # selftext_html is set for text posts; body_html for comment-shaped entries.
        body = rewrite_urls(val(post, "selftext_html")) or rewrite_urls(val(post, "body_html"))

    if as_bool(data.get("hide_score")):
        score = HIDDEN_SCORE
    else:
        score = format_num(as_int(data.get("score")))

    nsfw = as_bool(data.get("over_18"))
    return Post(
        id=val(post, "id"),
        title=val(post, "title"),
        community=val(post, "subreddit"),
        body=body,
        author=parse_author(data),
        permalink=permalink,
        poll=parse_poll(data.get("poll_data")),
        score=score,
        upvote_ratio=int(ratio) if math.isfinite(ratio) else 0,
        post_type=post_type,
        flair=parse_flair(data, "link"),
        flags=Flags(
            nsfw=nsfw,
            stickied=as_bool(data.get("stickied")) or as_bool(data.get("pinned")),
        ),
        thumbnail=Media(
            url=format_url(val(post, "thumbnail")),
            width=as_int(data.get("thumbnail_width")),
            height=as_int(data.get("thumbnail_height")),
        ),
        media=media,
        domain=val(post, "domain"),
        rel_time=rel_time,
        created=created,
        num_duplicates=as_optional_u64(data.get("num_duplicates")) or 0,
        comments=format_num(as_int(data.get("num_comments"))),
        gallery=gallery,
        awards=parse_awards(data.get("all_awardings")),
        nsfw=nsfw,
        ws_url=val(post, "websocket_url"),
    )


def build_comment(
    comment: Any,
    replies: tuple[Comment, ...],
    post_link: str,
    post_author: str,
    highlighted_comment: str,
    filters: Collection[str],
) -> Comment:
    data = as_dict(get_path(comment, "data"))
    comment_id = val(comment, "id")
    raw_body = val(comment, "body")
    if (val(comment, "author") == "[deleted]" and raw_body == "[removed]") or raw_body == "[ Removed by Reddit ]":
        body = _removed_notice(f"{post_link}{comment_id}", "comment")
    else:
        body = rewrite_urls(val(comment, "body_html"))

    rel_time, created = format_time(as_float(data.get("created_utc")))
    edited_at = data.get("edited")
    if isinstance(edited_at, (int, float)) and not isinstance(edited_at, bool):
        edited = format_time(edited_at)
    else:
        edited = ("", "")

    if as_bool(data.get("score_hidden")):
        score = HIDDEN_SCORE
    else:
        score = format_num(as_int(data.get("score")))

    parent_kind, _, parent_id = val(comment, "parent_id").partition("_")
    author = parse_author(data)
    is_filtered = f"u_{author.name}" in filters
    is_moderator_comment = author.distinguished == "moderator"
    is_stickied = as_bool(data.get("stickied"))

    return Comment(
        id=comment_id,
        kind=as_str(get_path(comment, "kind")),
        parent_id=parent_id,
        parent_kind=parent_kind,
        post_link=post_link,
        post_author=post_author,
        body=body,
        author=author,
        score=score,
        rel_time=rel_time,
        created=created,
        edited=edited,
        replies=replies,
        highlighted=comment_id == highlighted_comment,
        awards=parse_awards(data.get("all_awardings")),
        collapsed=(is_moderator_comment and is_stickied) or is_filtered,
        is_filtered=is_filtered,
        # "more" stubs carry the number of replies the API left out.
        more_count=as_int(data.get("count")),
    )


def parse_comments(
    listing: Any,
    post_link: str,
    post_author: str,
    highlighted_comment: str = "",
    filters: Collection[str] = frozenset(),
) -> tuple[Comment, ...]:
    """Build the comment tree under a ``Listing`` node, replies included."""
    comments: list[Comment] = []
    for child in as_list(get_path(listing, "data", "children")):
        replies_listing = get_path(child, "data", "replies")
        if isinstance(replies_listing, dict):
            replies = parse_comments(replies_listing, post_link, post_author, highlighted_comment, filters)
        else:
            replies = ()
        comments.append(build_comment(child, replies, post_link, post_author, highlighted_comment, filters))
    return tuple(comments)


def parse_user(name: str, about: Any) -> User:
    """Create a :class:`User` from a ``/user/<name>/about.json`` response."""
    data = as_dict(get_path(about, "data"))
    profile = as_dict(data.get("subreddit"))
    return User(
        name=name,
        title=as_str(profile.get("title")),
        icon=format_url(as_str(profile.get("icon_img"))),
        karma=as_int(data.get("total_karma")),
        created=format_short_date(as_float(data.get("created_utc"))),
        banner=format_url(as_str(profile.get("banner_img"))),
        description=as_str(profile.get("public_description")),
        nsfw=as_bool(profile.get("over_18")),
    )


def parse_subreddit(about: Any) -> Subreddit:
    """Create a :class:`Subreddit` from a ``/r/<name>/about.json`` response."""
    data = as_dict(get_path(about, "data"))
    icon = as_str(data.get("community_icon")) or as_str(data.get("icon_img"))
    return Subreddit(
        name=as_str(data.get("display_name")),
        title=as_str(data.get("title")),
        description=as_str(data.get("public_description")),
        info=rewrite_urls(as_str(data.get("description_html"))),
        icon=format_url(icon.split("?", 1)[0]),
        members=format_num(as_int(data.get("subscribers"))),
        active=format_num(as_int(data.get("accounts_active"))),
        wiki=as_bool(data.get("wiki_enabled")),
        nsfw=as_bool(data.get("over_18")),
    )
