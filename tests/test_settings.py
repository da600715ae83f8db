from __future__ import annotations

import pytest

from reddit_mirror.settings import (
    Preferences,
    get_filters,
    setting,
    setting_or_default,
    sfw_only,
    should_be_nsfw_gated,
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch) -> None:
    for name in ("REDDIT_MIRROR_DEFAULT_THEME", "REDDIT_MIRROR_DEFAULT_FILTERS", "REDDIT_MIRROR_SFW_ONLY"):
        monkeypatch.delenv(name, raising=False)


def test_setting_prefers_lookup_then_environment(monkeypatch) -> None:
    cookies = {"theme": "dark"}
    monkeypatch.setenv("REDDIT_MIRROR_DEFAULT_THEME", "light")

    assert setting(cookies.get, "theme") == "dark"
    assert setting({}.get, "theme") == "light"
    assert setting(None, "layout") == ""
    assert setting_or_default(None, "layout", "card") == "card"


def test_preferences_build_from_cookies() -> None:
    cookies = {
        "theme": "dark",
        "layout": "compact",
        "subscriptions": "rust+python++linux",
        "filters": "memes+u_spammer+",
    }

    prefs = Preferences.build(cookies.get)

    assert prefs.theme == "dark"
    assert prefs.layout == "compact"
    assert prefs.fixed_navbar == "on"
    assert prefs.show_nsfw == ""
    assert prefs.subscriptions == frozenset({"rust", "python", "linux"})
    assert prefs.filters == frozenset({"memes", "u_spammer"})


def test_preferences_fall_back_to_instance_defaults(monkeypatch) -> None:
    monkeypatch.setenv("REDDIT_MIRROR_DEFAULT_FILTERS", "politics")

    prefs = Preferences.build()

    assert prefs.filters == frozenset({"politics"})
    assert get_filters(None) == frozenset({"politics"})
    assert prefs.subscriptions == frozenset()


def test_nsfw_gate(monkeypatch) -> None:
    shown = Preferences(show_nsfw="on")
    hidden = Preferences()

    assert sfw_only() is False
    assert should_be_nsfw_gated(hidden, "/r/nsfw") is True
    assert should_be_nsfw_gated(hidden, "/r/nsfw?x=1&bypass_nsfw_landing") is False
    assert should_be_nsfw_gated(shown, "/r/nsfw") is False

    monkeypatch.setenv("REDDIT_MIRROR_SFW_ONLY", "on")

    assert sfw_only() is True
    assert should_be_nsfw_gated(shown, "/r/nsfw") is True
    assert should_be_nsfw_gated(shown, "/r/nsfw?x=1&bypass_nsfw_landing") is True
