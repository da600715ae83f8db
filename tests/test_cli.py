from __future__ import annotations

import json
from pathlib import Path

import pytest

import reddit_mirror.cli as cli
import reddit_mirror.core as core
from reddit_mirror.core import FetchError


def _listing() -> dict:
    return {
        "data": {
            "children": [
                {"kind": "t3", "data": {"id": "a1", "subreddit": "python", "author": "alice", "url": "https://i.redd.it/x.png"}},
                {"kind": "t3", "data": {"id": "a2", "subreddit": "memes", "author": "bob"}},
            ],
            "after": "t3_a2",
        }
    }


@pytest.fixture(autouse=True)
def _no_env_filters(monkeypatch) -> None:
    monkeypatch.delenv("REDDIT_MIRROR_DEFAULT_FILTERS", raising=False)


def test_normalize_path_appends_json() -> None:
    assert cli._normalize_path("r/python/hot") == "/r/python/hot.json"
    assert cli._normalize_path("/r/python/hot/?t=day") == "/r/python/hot.json?t=day"
    assert cli._normalize_path("/user/spez/about.json") == "/user/spez/about.json"
    with pytest.raises(SystemExit):
        cli._normalize_path("  ")


def test_main_writes_filtered_listing(tmp_path: Path, monkeypatch) -> None:
    paths: list[str] = []

    def fake_fetch_json(session, path, *, quarantine=False, params=None, retries=3, backoff=1.0):
        paths.append(path)
        return _listing()

    monkeypatch.setattr(core, "fetch_json", fake_fetch_json)
    output = tmp_path / "out.json"

    cli.main(["/r/python/hot", "--filter", "memes", "--output", str(output)])

    result = json.loads(output.read_text(encoding="utf-8"))
    assert paths == ["/r/python/hot.json"]
    assert [post["id"] for post in result["posts"]] == ["a1"]
    assert result["posts"][0]["media"]["url"] == "/img/x.png"
    assert result["after"] == "t3_a2"
    assert result["filtered"] == 1
    assert result["all_filtered"] is False


def test_main_about_user(monkeypatch, capsys) -> None:
    about = {"data": {"total_karma": 5, "subreddit": {"title": "spez"}}}
    monkeypatch.setattr(core, "fetch_json", lambda *args, **kwargs: about)

    cli.main(["/user/spez/about", "--about"])

    result = json.loads(capsys.readouterr().out)
    assert result["user"]["name"] == "spez"
    assert result["user"]["karma"] == 5


def test_main_turns_fetch_error_into_exit(monkeypatch) -> None:
    def failing_fetch_json(*args, **kwargs):
        raise FetchError("No posts found")

    monkeypatch.setattr(core, "fetch_json", failing_fetch_json)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["/r/empty"])

    assert "No posts found" in str(excinfo.value)
