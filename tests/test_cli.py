"""Test suite for the command-line interface."""

import json
import logging

import pytest
from click.testing import CliRunner

from kbbi_lookup import main as cli_module
from kbbi_lookup.core import KBBIDictionary, KBBISession
from kbbi_lookup.core.session import AUTH_COOKIE
from kbbi_lookup.main import cli
from kbbi_lookup.search import PageFetcher, SearchCache
from kbbi_lookup.utils import RateLimiter
from tests.helpers import (
    MEMBER_PAGE,
    NOT_FOUND_PAGE,
    RUMAH_PAGE,
    login_handler,
    make_client,
    page_handler,
    redirect_handler,
)


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point cookie and cache paths at a temporary directory."""
    monkeypatch.setenv("KBBI_COOKIE_PATH", str(tmp_path / "kuki.json"))
    monkeypatch.setenv("KBBI_CACHE_DIR", str(tmp_path / "cache"))
    monkeypatch.setenv("KBBI_REQUEST_DELAY_SECONDS", "0")

    root_logger = logging.getLogger()
    handlers, level = root_logger.handlers[:], root_logger.level
    yield tmp_path
    root_logger.handlers = handlers
    root_logger.setLevel(level)


@pytest.fixture
def runner():
    return CliRunner()


def serve(monkeypatch, handler):
    """Make the search command fetch pages from ``handler``."""
    def factory(config=None, session=None, use_cache=True):
        fetcher = PageFetcher(
            cache=SearchCache(cache_dir=config.resolved_cache_dir, enabled=use_cache),
            rate_limiter=RateLimiter(delay=0),
            client=make_client(handler),
            host=config.host,
            sleep=lambda seconds: None
        )
        return KBBIDictionary(config=config, session=session, fetcher=fetcher)

    monkeypatch.setattr(cli_module, "KBBIDictionary", factory)


def test_search_text(runner, monkeypatch):
    serve(monkeypatch, page_handler(RUMAH_PAGE))

    result = runner.invoke(cli, ["search", "rumah", "--guest"])

    assert result.exit_code == 0
    assert result.output.startswith("ru.mah (1)  ru·mah\n")
    assert "rumah makan" in result.output


def test_search_filters(runner, monkeypatch):
    serve(monkeypatch, page_handler(RUMAH_PAGE))

    result = runner.invoke(cli, ["search", "rumah", "--guest", "--no-examples", "--no-related"])

    assert result.exit_code == 0
    assert "rumah makan" not in result.output
    assert "→" not in result.output


def test_search_json(runner, monkeypatch):
    serve(monkeypatch, page_handler(RUMAH_PAGE))

    result = runner.invoke(cli, ["search", "rumah", "--guest", "--json", "--indent"])

    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["canonicalLink"] == "https://kbbi.kemdikbud.go.id/entri/rumah"
    assert len(data["entries"]) == 2


def test_search_output_file(runner, monkeypatch, tmp_path):
    """Test --output saves the full JSON result next to the text output."""
    serve(monkeypatch, page_handler(RUMAH_PAGE))
    output_path = tmp_path / "out" / "rumah.json"

    result = runner.invoke(
        cli, ["search", "rumah", "--guest", "--no-examples", "--output", str(output_path)]
    )

    assert result.exit_code == 0
    assert "ru.mah (1)" in result.output
    data = json.loads(output_path.read_text(encoding="utf-8"))
    assert len(data["entries"]) == 2
    # Display filters do not apply to the saved file
    assert "rumah makan" in output_path.read_text(encoding="utf-8")


def test_search_output_file_skipped_for_guest_not_found(runner, monkeypatch, tmp_path):
    serve(monkeypatch, page_handler(NOT_FOUND_PAGE))
    output_path = tmp_path / "rumahx.json"

    result = runner.invoke(cli, ["search", "rumahx", "--guest", "--output", str(output_path)])

    assert result.exit_code == 0
    assert not output_path.exists()


def test_not_found_hides_suggestions_from_guests(runner, monkeypatch):
    """Test guests see only the not-found line in text mode."""
    serve(monkeypatch, page_handler(NOT_FOUND_PAGE))

    result = runner.invoke(cli, ["search", "rumahx", "--guest"])

    assert result.exit_code == 0
    assert result.output == "rumahx tidak ditemukan dalam KBBI.\n"


def test_not_found_json_includes_suggestions(runner, monkeypatch):
    serve(monkeypatch, page_handler(NOT_FOUND_PAGE))

    result = runner.invoke(cli, ["search", "rumahx", "--guest", "--json"])

    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["entries"] == []
    assert data["suggestions"] == ["rumah", "rumahan"]


def test_search_with_saved_login(runner, monkeypatch, isolated_settings):
    """Test the saved cookie is picked up and member fields are shown."""
    cookie_path = isolated_settings / "kuki.json"
    cookie_path.write_text(json.dumps({AUTH_COOKIE: "abc123"}), encoding="utf-8")

    def restored(path, **kwargs):
        session = KBBISession(path, client=make_client(page_handler(MEMBER_PAGE)))
        session.load_cookies()
        return session

    monkeypatch.setattr(cli_module.KBBISession, "from_saved_cookies", staticmethod(restored))
    serve(monkeypatch, page_handler(""))

    result = runner.invoke(cli, ["search", "kehadiran", "--json"])

    assert result.exit_code == 0
    entry = json.loads(result.output)["entries"][0]
    assert entry["etymology"]["originLanguage"] == "Arab"


def test_terminal_error_exits_nonzero(runner, monkeypatch):
    serve(monkeypatch, redirect_handler("Beranda/BatasSehari"))

    result = runner.invoke(cli, ["search", "rumah", "--guest"])

    assert result.exit_code == 1
    assert "batas maksimum" in result.output


def test_login_saves_cookie(runner, monkeypatch, isolated_settings):
    class FakeLoginSession(KBBISession):
        def __init__(self, cookie_path, host=None, timeout=30.0):
            super().__init__(cookie_path, client=make_client(login_handler()))

    monkeypatch.setattr(cli_module, "KBBISession", FakeLoginSession)

    result = runner.invoke(cli, ["login", "--email", "saya@contoh.id"], input="rahasia\n")

    assert result.exit_code == 0
    assert "Login successful" in result.output
    saved = json.loads((isolated_settings / "kuki.json").read_text(encoding="utf-8"))
    assert saved == {AUTH_COOKIE: "abc123"}


def test_login_failure(runner, monkeypatch):
    class FakeLoginSession(KBBISession):
        def __init__(self, cookie_path, host=None, timeout=30.0):
            super().__init__(cookie_path, client=make_client(login_handler()))

    monkeypatch.setattr(cli_module, "KBBISession", FakeLoginSession)

    result = runner.invoke(cli, ["login", "--email", "saya@contoh.id", "--password", "salah"])

    assert result.exit_code == 1
    assert "Login failed" in result.output


def test_logout(runner, isolated_settings):
    cookie_path = isolated_settings / "kuki.json"
    cookie_path.write_text("{}", encoding="utf-8")

    result = runner.invoke(cli, ["logout"])

    assert result.exit_code == 0
    assert not cookie_path.exists()


def test_check(runner, monkeypatch):
    class FakeFetcher(PageFetcher):
        def __init__(self, host, timeout):
            super().__init__(client=make_client(page_handler("", status_code=503)), host=host)

    monkeypatch.setattr(cli_module, "PageFetcher", FakeFetcher)

    result = runner.invoke(cli, ["check"])

    assert result.exit_code == 1
    assert "503" in result.output


def test_cache_commands(runner, monkeypatch):
    serve(monkeypatch, page_handler(RUMAH_PAGE))
    runner.invoke(cli, ["search", "rumah", "--guest"])

    stats = runner.invoke(cli, ["cache", "stats"])
    assert stats.exit_code == 0
    assert "Entries: 1" in stats.output

    cleanup = runner.invoke(cli, ["cache", "cleanup"])
    assert "Removed 0 expired entries" in cleanup.output

    cleared = runner.invoke(cli, ["cache", "clear", "--yes"])
    assert cleared.exit_code == 0
    assert "Removed 1 entries" in cleared.output
