"""User preferences and instance-wide settings."""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable, Optional

ENV_PREFIX = "REDDIT_MIRROR_"
DEFAULT_PUSHSHIFT_FRONTEND = "undelete.pullpush.io"
LIST_SEPARATOR = "+"

# Maps a setting name to the value the client sent (a cookie in the web app).
SettingLookup = Callable[[str], Optional[str]]

STRING_PREFERENCES = (
    "theme",
    "front_page",
    "layout",
    "wide",
    "show_nsfw",
    "blur_nsfw",
    "hide_hls_notification",
    "use_hls",
    "autoplay_videos",
    "disable_visit_reddit_confirmation",
    "comment_sort",
    "post_sort",
    "hide_awards",
    "hide_score",
)


def get_setting(name: str) -> str | None:
    return os.environ.get(name)


def pushshift_frontend() -> str:
    """Host of the read-only mirror used to view removed posts and comments."""
    return get_setting(f"{ENV_PREFIX}PUSHSHIFT_FRONTEND") or DEFAULT_PUSHSHIFT_FRONTEND


def setting(lookup: SettingLookup | None, name: str) -> str:
    """Return the client's value for ``name``, else the instance default, else ``""``."""
    value = lookup(name) if lookup is not None else None
    if value is None:
        value = get_setting(f"{ENV_PREFIX}DEFAULT_{name.upper()}")
    return value or ""


def setting_or_default(lookup: SettingLookup | None, name: str, default: str) -> str:
    return setting(lookup, name) or default


def _split_list(raw: str) -> frozenset[str]:
    return frozenset(item for item in raw.split(LIST_SEPARATOR) if item)


def get_filters(lookup: SettingLookup | None) -> frozenset[str]:
    return _split_list(setting(lookup, "filters"))


@dataclass(frozen=True, slots=True)
class Preferences:
    theme: str = ""
    front_page: str = ""
    layout: str = ""
    wide: str = ""
    show_nsfw: str = ""
    blur_nsfw: str = ""
    hide_hls_notification: str = ""
    use_hls: str = ""
    autoplay_videos: str = ""
    fixed_navbar: str = "on"
    disable_visit_reddit_confirmation: str = ""
    comment_sort: str = ""
    post_sort: str = ""
    hide_awards: str = ""
    hide_score: str = ""
    subscriptions: frozenset[str] = frozenset()
    filters: frozenset[str] = frozenset()

    @classmethod
    def build(cls, lookup: SettingLookup | None = None) -> Preferences:
        values = {name: setting(lookup, name) for name in STRING_PREFERENCES}
        return cls(
            **values,
            fixed_navbar=setting_or_default(lookup, "fixed_navbar", "on"),
            subscriptions=_split_list(setting(lookup, "subscriptions")),
            filters=get_filters(lookup),
        )


def sfw_only() -> bool:
    return get_setting(f"{ENV_PREFIX}SFW_ONLY") == "on"


def should_be_nsfw_gated(prefs: Preferences, req_url: str) -> bool:
    """Whether an NSFW resource should show the landing gate instead of content."""
    sfw_instance = sfw_only()
    gate_nsfw = prefs.show_nsfw != "on" or sfw_instance
    # The gate cannot be bypassed on an SFW-only instance.
    bypass_gate = not sfw_instance and "&bypass_nsfw_landing" in req_url
    return gate_nsfw and not bypass_gate
