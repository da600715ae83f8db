"""Classification of a post's media and resolution of its proxied URLs."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, NamedTuple

from .fields import as_bool, as_dict, as_int, as_list, as_str, get_path
from .urls import format_url

logger = logging.getLogger(__name__)

IMAGE_CDN_DOMAIN = "i.redd.it"
GIF_MIME_TYPE = "image/gif"

# Places Reddit may put a hosted video, in priority order.
VIDEO_LOCATIONS: tuple[tuple[str | int, ...], ...] = (
    ("preview", "reddit_video_preview"),
    ("secure_media", "reddit_video"),
    ("crosspost_parent_list", 0, "secure_media", "reddit_video"),
)


@dataclass(frozen=True, slots=True)
class Media:
    url: str = ""
    alt_url: str = ""
    width: int = 0
    height: int = 0
    poster: str = ""


@dataclass(frozen=True, slots=True)
class GalleryMedia:
    url: str = ""
    width: int = 0
    height: int = 0
    caption: str = ""
    outbound_url: str = ""


class MediaSource(NamedTuple):
    post_type: str
    url: Any
    alt_url: Any = None
    gallery: tuple[GalleryMedia, ...] = ()


MediaRule = Callable[[dict[str, Any]], "MediaSource | None"]


def parse_gallery(items: Any, metadata: Any) -> tuple[GalleryMedia, ...]:
    gallery: list[GalleryMedia] = []
    for item in as_list(items):
        media_id = as_str(get_path(item, "media_id"))
        entry = as_dict(get_path(metadata, media_id)) if media_id else {}
        image = as_dict(entry.get("s"))
        if entry.get("m") == GIF_MIME_TYPE:
            url = as_str(image.get("gif"))
        else:
            url = as_str(image.get("u"))
        gallery.append(
            GalleryMedia(
                url=format_url(url),
                width=as_int(image.get("x")),
                height=as_int(image.get("y")),
                caption=as_str(get_path(item, "caption")),
                outbound_url=format_url(as_str(get_path(item, "outbound_url"))),
            )
        )
    return tuple(gallery)


def _video_rule(location: tuple[str | int, ...]) -> MediaRule:
    def rule(data: dict[str, Any]) -> MediaSource | None:
        video = get_path(data, *location)
        fallback_url = get_path(video, "fallback_url")
        if not isinstance(fallback_url, str) or not fallback_url:
            return None
        post_type = "gif" if as_bool(get_path(video, "is_gif")) else "video"
        return MediaSource(post_type, fallback_url, get_path(video, "hls_url"))

    return rule


def _image_rule(data: dict[str, Any]) -> MediaSource | None:
    if get_path(data, "post_hint") != "image":
        return None
    preview = get_path(data, "preview", "images", 0)
    mp4 = get_path(preview, "variants", "mp4")
    if isinstance(mp4, dict):
        return MediaSource("gif", get_path(mp4, "source", "url"))
    if get_path(data, "domain") == IMAGE_CDN_DOMAIN:
        return MediaSource("image", get_path(data, "url"))
    return MediaSource("image", get_path(preview, "source", "url"))


def _self_rule(data: dict[str, Any]) -> MediaSource | None:
    if not as_bool(get_path(data, "is_self")):
        return None
    return MediaSource("self", get_path(data, "permalink"))


def _gallery_rule(data: dict[str, Any]) -> MediaSource | None:
    if not as_bool(get_path(data, "is_gallery")):
        return None
    gallery = parse_gallery(get_path(data, "gallery_data", "items"), get_path(data, "media_metadata"))
    return MediaSource("gallery", get_path(data, "url"), gallery=gallery)


def _reddit_media_rule(data: dict[str, Any]) -> MediaSource | None:
    if as_bool(get_path(data, "is_reddit_media_domain")) and get_path(data, "domain") == IMAGE_CDN_DOMAIN:
        return MediaSource("image", get_path(data, "url"))
    return None


def _link_rule(data: dict[str, Any]) -> MediaSource | None:
    return MediaSource("link", get_path(data, "url"))


MEDIA_RULES: tuple[MediaRule, ...] = (
    *(_video_rule(location) for location in VIDEO_LOCATIONS),
    _image_rule,
    _self_rule,
    _gallery_rule,
    _reddit_media_rule,
    _link_rule,
)


def resolve_media(data: Any) -> tuple[str, Media, tuple[GalleryMedia, ...]]:
    """Determine the post type, primary media and gallery of a post's ``data``.

    The first rule in :data:`MEDIA_RULES` that recognises the payload decides
    the type. Dimensions and the poster frame always come from the first
    preview image, so they stay zero for self posts, links and galleries.
    """
    data = as_dict(data)
    source = next(result for result in (rule(data) for rule in MEDIA_RULES) if result is not None)
    logger.debug("Resolved media for %s as %s", data.get("id"), source.post_type)

    preview_source = get_path(data, "preview", "images", 0, "source")
    media = Media(
        url=format_url(as_str(source.url)),
        alt_url=format_url(as_str(source.alt_url)),
        width=as_int(get_path(preview_source, "width")),
        height=as_int(get_path(preview_source, "height")),
        poster=format_url(as_str(get_path(preview_source, "url"))),
    )
    return source.post_type, media, source.gallery
