"""Public package surface for reddit-mirror."""
from .core import (
    BASE_URL,
    DEFAULT_USER_AGENT,
    FetchError,
    build_session,
    fetch_about,
    fetch_json,
    fetch_posts,
    fetch_thread,
    filter_posts,
)
from .formatting import format_num, format_time
from .media import GalleryMedia, Media, resolve_media
from .models import (
    Author,
    Award,
    Comment,
    Flair,
    FlairPart,
    Poll,
    PollOption,
    Post,
    Subreddit,
    User,
    parse_comments,
    parse_post,
    parse_subreddit,
    parse_user,
)
from .settings import Preferences, get_filters
from .urls import format_url, rewrite_urls

__version__ = "0.1.0"

__all__ = [
    "Author",
    "Award",
    "BASE_URL",
    "Comment",
    "DEFAULT_USER_AGENT",
    "FetchError",
    "Flair",
    "FlairPart",
    "GalleryMedia",
    "Media",
    "Poll",
    "PollOption",
    "Post",
    "Preferences",
    "Subreddit",
    "User",
    "build_session",
    "fetch_about",
    "fetch_json",
    "fetch_posts",
    "fetch_thread",
    "filter_posts",
    "format_num",
    "format_time",
    "format_url",
    "get_filters",
    "parse_comments",
    "parse_post",
    "parse_subreddit",
    "parse_user",
    "resolve_media",
    "rewrite_urls",
    "__version__",
]
