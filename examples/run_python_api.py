from __future__ import annotations

from reddit_mirror import Preferences, build_session, fetch_posts, filter_posts


def main() -> None:
    """Demonstrate the Python API by fetching and filtering one page of r/python."""
    session = build_session("reddit-mirror-example/0.1", verify=True)

    # In the web app the lookup reads request cookies.
    cookies = {"filters": "u_AutoModerator+memes", "theme": "dark"}
    prefs = Preferences.build(cookies.get)

    posts, after = fetch_posts(session, "/r/python/hot.json?limit=25")
    removed, all_removed = filter_posts(posts, prefs.filters)

    for post in posts:
        print(f"[{post.post_type:7}] {post.score[0]:>6} {post.title} -> {post.media.url or post.permalink}")
    print(f"filtered={removed} all_filtered={all_removed} next={after or '-'}")


if __name__ == "__main__":
    main()
