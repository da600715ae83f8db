"""Rewriting of Reddit-hosted URLs onto local proxy paths."""
from __future__ import annotations

import re
from typing import NamedTuple
from urllib.parse import urlsplit

SENTINEL_URLS = frozenset({"", "self", "default", "nsfw", "spoiler"})


class UrlRule(NamedTuple):
    pattern: re.Pattern[str]
    prefix: str
    segments: int = 1


def _rule(pattern: str, prefix: str, segments: int = 1) -> UrlRule:
    return UrlRule(re.compile(pattern), prefix, segments)


# Rules per host are tried in order and the first match wins.
URL_RULES: dict[str, tuple[UrlRule, ...]] = {
    "www.reddit.com": (_rule(r"https?://www\.reddit\.com/(.*)", "/"),),
    "old.reddit.com": (_rule(r"https?://old\.reddit\.com/(.*)", "/"),),
    "np.reddit.com": (_rule(r"https?://np\.reddit\.com/(.*)", "/"),),
    "reddit.com": (_rule(r"https?://reddit\.com/(.*)", "/"),),
    "v.redd.it": (
        _rule(r"https?://v\.redd\.it/(.*)/DASH_([0-9]{2,4}(\.mp4|$|\?source=fallback))", "/vid/", 2),
        _rule(r"https?://v\.redd\.it/(.+)/(HLSPlaylist\.m3u8.*)$", "/hls/", 2),
    ),
    "i.redd.it": (_rule(r"https?://i\.redd\.it/(.*)", "/img/"),),
    "a.thumbs.redditmedia.com": (_rule(r"https?://a\.thumbs\.redditmedia\.com/(.*)", "/thumb/a/"),),
    "b.thumbs.redditmedia.com": (_rule(r"https?://b\.thumbs\.redditmedia\.com/(.*)", "/thumb/b/"),),
    "emoji.redditmedia.com": (_rule(r"https?://emoji\.redditmedia\.com/(.*)/(.*)", "/emoji/", 2),),
    "preview.redd.it": (_rule(r"https?://preview\.redd\.it/(.*)", "/preview/pre/"),),
    "external-preview.redd.it": (
        _rule(r"https?://external\-preview\.redd\.it/(.*)", "/preview/external-pre/"),
    ),
    "styles.redditmedia.com": (_rule(r"https?://styles\.redditmedia\.com/(.*)", "/style/"),),
    "www.redditstatic.com": (_rule(r"https?://www\.redditstatic\.com/(.*)", "/static/"),),
}

REDDIT_LINK_REGEX = re.compile(r'href="(https|http|)://(www\.|old\.|np\.|amp\.|new\.|)(reddit\.com|redd\.it)/')
REDDIT_EMOJI_REGEX = re.compile(r"https?://(www|).redditstatic\.com/(.*)")
REDDIT_PREVIEW_REGEX = re.compile(r"https?://(external-preview|preview)\.redd\.it(.*)[^?]")
URL_SPAN_REGEX = re.compile(r'href="[^"]*"|https?://[^\s"<>]+')


def _capture(rule: UrlRule, url: str) -> str:
    match = rule.pattern.search(url)
    if match is None:
        return ""
    if rule.segments == 2:
        return f"{rule.prefix}{match.group(1)}/{match.group(2)}"
    return f"{rule.prefix}{match.group(1)}"


def format_url(url: str) -> str:
    """Map an upstream media or site URL onto its local proxy path.

    Sentinel thumbnails (``self``, ``nsfw`` ...) become an empty string and
    hosts outside the rule table are returned untouched. A URL on a proxied
    host that fits none of the host's shapes is dropped rather than leaked.
    """
    if url in SENTINEL_URLS:
        return ""
    try:
        parsed = urlsplit(url)
        host = parsed.hostname
    except ValueError:
        return url
    if not parsed.scheme or not host:
        return url

    rules = URL_RULES.get(host)
    if rules is None:
        return url
    for rule in rules:
        result = _capture(rule, url)
        if result:
            return result
    return ""


def _replace_all_with_first(pattern: re.Pattern[str], text: str) -> str:
    first = pattern.search(text)
    if first is None:
        return text
    replacement = format_url(first.group(0))
    return pattern.sub(lambda _match: replacement, text)


def _strip_escapes(match: re.Match[str]) -> str:
    return match.group(0).replace("%5C", "").replace("\\_", "_")


def rewrite_urls(input_text: str) -> str:
    """Point Reddit links and media inside a rendered HTML body at the proxy."""
    text = REDDIT_LINK_REGEX.sub('href="/', input_text)
    text = _replace_all_with_first(REDDIT_EMOJI_REGEX, text)
    # Reddit's markdown renderer escapes underscores inside links.
    text = URL_SPAN_REGEX.sub(_strip_escapes, text)
    return _replace_all_with_first(REDDIT_PREVIEW_REGEX, text)
