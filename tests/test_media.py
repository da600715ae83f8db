from __future__ import annotations

from reddit_mirror.media import GalleryMedia, Media, parse_gallery, resolve_media


def test_resolve_media_prefers_preview_video() -> None:
    data = {
        "preview": {
            "reddit_video_preview": {
                "fallback_url": "https://v.redd.it/pre/DASH_480.mp4",
                "hls_url": "https://v.redd.it/pre/HLSPlaylist.m3u8?a=1",
                "is_gif": True,
            },
            "images": [{"source": {"url": "https://preview.redd.it/poster.jpg?s=1", "width": 640, "height": 480}}],
        },
        "secure_media": {"reddit_video": {"fallback_url": "https://v.redd.it/sec/DASH_720.mp4"}},
    }

    post_type, media, gallery = resolve_media(data)

    assert post_type == "gif"
    assert media == Media(
        url="/vid/pre/480.mp4",
        alt_url="/hls/pre/HLSPlaylist.m3u8?a=1",
        width=640,
        height=480,
        poster="/preview/pre/poster.jpg?s=1",
    )
    assert gallery == ()


def test_resolve_media_uses_secure_media_video() -> None:
    data = {
        "secure_media": {
            "reddit_video": {
                "fallback_url": "https://v.redd.it/abc/DASH_720.mp4?source=fallback",
                "hls_url": "https://v.redd.it/abc/HLSPlaylist.m3u8",
                "is_gif": False,
            }
        },
    }

    post_type, media, _ = resolve_media(data)

    assert post_type == "video"
    assert media.url == "/vid/abc/720.mp4"
    assert media.alt_url == "/hls/abc/HLSPlaylist.m3u8"
    assert (media.width, media.height, media.poster) == (0, 0, "")


def test_resolve_media_skips_empty_preview_video() -> None:
    data = {
        "preview": {"reddit_video_preview": {"fallback_url": "", "is_gif": True}},
        "secure_media": {"reddit_video": {"fallback_url": "https://v.redd.it/foo/DASH_720.mp4"}},
    }

    post_type, media, _ = resolve_media(data)

    assert post_type == "video"
    assert media.url == "/vid/foo/720.mp4"


def test_resolve_media_falls_back_to_crosspost_parent() -> None:
    data = {
        "secure_media": None,
        "crosspost_parent_list": [
            {"secure_media": {"reddit_video": {"fallback_url": "https://v.redd.it/xp/DASH_360.mp4"}}}
        ],
    }

    post_type, media, _ = resolve_media(data)

    assert post_type == "video"
    assert media.url == "/vid/xp/360.mp4"
    assert media.alt_url == ""


def test_resolve_media_image_hint_with_mp4_variant_is_gif() -> None:
    data = {
        "post_hint": "image",
        "domain": "i.redd.it",
        "url": "https://i.redd.it/anim.gif",
        "preview": {
            "images": [
                {
                    "source": {"url": "https://preview.redd.it/anim.gif?s=1", "width": 200, "height": 100},
                    "variants": {"mp4": {"source": {"url": "https://preview.redd.it/anim.gif?format=mp4&s=2"}}},
                }
            ]
        },
    }

    post_type, media, _ = resolve_media(data)

    assert post_type == "gif"
    assert media.url == "/preview/pre/anim.gif?format=mp4&s=2"
    assert (media.width, media.height) == (200, 100)


def test_resolve_media_image_prefers_cdn_url_on_cdn_domain() -> None:
    preview = {"images": [{"source": {"url": "https://preview.redd.it/pic.jpg?s=1"}}]}

    on_cdn = {"post_hint": "image", "domain": "i.redd.it", "url": "https://i.redd.it/pic.jpg", "preview": preview}
    elsewhere = {"post_hint": "image", "domain": "imgur.com", "url": "https://imgur.com/pic", "preview": preview}

    assert resolve_media(on_cdn)[:2] == ("image", Media(url="/img/pic.jpg", poster="/preview/pre/pic.jpg?s=1"))
    assert resolve_media(elsewhere)[1].url == "/preview/pre/pic.jpg?s=1"


def test_resolve_media_self_post_uses_permalink() -> None:
    post_type, media, _ = resolve_media({"is_self": True, "permalink": "/r/test/comments/abc/title/", "url": "x"})

    assert post_type == "self"
    assert media.url == "/r/test/comments/abc/title/"


def test_resolve_media_gallery_selects_gif_field_per_item() -> None:
    data = {
        "is_gallery": True,
        "url": "https://www.reddit.com/gallery/abc",
        "gallery_data": {
            "items": [
                {"media_id": "first", "caption": "moving"},
                {"media_id": "second", "outbound_url": "https://example.com/more"},
            ]
        },
        "media_metadata": {
            "first": {
                "m": "image/gif",
                "s": {"gif": "https://i.redd.it/first.gif", "u": "https://preview.redd.it/first.gif?s=1", "x": 10, "y": 20},
            },
            "second": {
                "m": "image/png",
                "s": {"gif": "https://i.redd.it/second.gif", "u": "https://preview.redd.it/second.png?s=2", "x": 30, "y": 40},
            },
        },
    }

    post_type, media, gallery = resolve_media(data)

    assert post_type == "gallery"
    assert media.url == "/gallery/abc"
    assert gallery == (
        GalleryMedia(url="/img/first.gif", width=10, height=20, caption="moving"),
        GalleryMedia(
            url="/preview/pre/second.png?s=2",
            width=30,
            height=40,
            outbound_url="https://example.com/more",
        ),
    )


def test_parse_gallery_tolerates_missing_metadata() -> None:
    gallery = parse_gallery([{"media_id": "gone"}, "junk"], None)

    assert gallery == (GalleryMedia(), GalleryMedia())


def test_resolve_media_reddit_media_domain_is_image() -> None:
    data = {"is_reddit_media_domain": True, "domain": "i.redd.it", "url": "https://i.redd.it/plain.png"}

    assert resolve_media(data)[:2] == ("image", Media(url="/img/plain.png"))


def test_resolve_media_defaults_to_link() -> None:
    post_type, media, gallery = resolve_media({"url": "https://example.com/article"})

    assert post_type == "link"
    assert media == Media(url="https://example.com/article")
    assert gallery == ()


def test_resolve_media_survives_garbage() -> None:
    for data in (None, [], "text", {"preview": "nope", "secure_media": {"reddit_video": {"fallback_url": 5}}}):
        post_type, media, gallery = resolve_media(data)
        assert post_type == "link"
        assert media == Media()
        assert gallery == ()
