"""Tests for browser acquisition — Playwright is mocked, no browser needed."""
from unittest.mock import MagicMock

import pytest

from cookie_capture.browser.acquire import BrowserHandle, acquire_browser
from cookie_capture.config import MODE_LOCAL, MODE_REMOTE, ResolvedConnection
from cookie_capture.errors import BrowserConnectionError, LaunchError, SeedingError

WS = "ws://127.0.0.1:9222/devtools/browser/878b5668"
CHROME = "/usr/bin/google-chrome"


def _make_playwright(contexts=None):
    pw = MagicMock()
    browser = MagicMock()
    browser.contexts = contexts if contexts is not None else [MagicMock(name="default_context")]
    browser.new_context.return_value = MagicMock(name="new_context")
    pw.chromium.connect_over_cdp.return_value = browser
    pw.chromium.launch.return_value = browser
    return pw, browser


def test_remote_attaches_and_never_launches():
    pw, browser = _make_playwright()
    handle = acquire_browser(pw, ResolvedConnection(MODE_REMOTE, WS))

    pw.chromium.connect_over_cdp.assert_called_once_with(WS)
    pw.chromium.launch.assert_not_called()
    assert handle.is_remote
    assert handle.context is browser.contexts[0]
    browser.new_context.assert_not_called()


def test_remote_without_contexts_opens_one():
    pw, browser = _make_playwright(contexts=[])
    handle = acquire_browser(pw, ResolvedConnection(MODE_REMOTE, WS))
    assert handle.context is browser.new_context.return_value


def test_local_launches_visible_and_never_attaches():
    pw, browser = _make_playwright()
    handle = acquire_browser(pw, ResolvedConnection(MODE_LOCAL, CHROME))

    pw.chromium.launch.assert_called_once_with(executable_path=CHROME, headless=False)
    pw.chromium.connect_over_cdp.assert_not_called()
    assert not handle.is_remote
    assert handle.context is browser.new_context.return_value


def test_connect_failure_raises_connection_error():
    pw, _ = _make_playwright()
    pw.chromium.connect_over_cdp.side_effect = Exception("ECONNREFUSED")
    with pytest.raises(BrowserConnectionError) as exc:
        acquire_browser(pw, ResolvedConnection(MODE_REMOTE, WS))
    assert "ECONNREFUSED" in str(exc.value)
    assert isinstance(exc.value.__cause__, Exception)


def test_launch_failure_raises_launch_error():
    pw, _ = _make_playwright()
    pw.chromium.launch.side_effect = Exception("Executable doesn't exist")
    with pytest.raises(LaunchError):
        acquire_browser(pw, ResolvedConnection(MODE_LOCAL, "/nope/chrome"))


def test_launch_context_failure_closes_browser():
    pw, browser = _make_playwright()
    browser.new_context.side_effect = Exception("boom")
    with pytest.raises(LaunchError):
        acquire_browser(pw, ResolvedConnection(MODE_LOCAL, CHROME))
    browser.close.assert_called_once()


def test_seeding_is_one_batched_call():
    pw, browser = _make_playwright()
    seed = [
        {"name": "a", "value": "1", "domain": ".example.com", "path": "/", "hostOnly": True},
        {"name": "b", "value": "2", "domain": ".example.com"},
    ]
    handle = acquire_browser(pw, ResolvedConnection(MODE_REMOTE, WS), seed)

    handle.context.add_cookies.assert_called_once()
    sent = handle.context.add_cookies.call_args[0][0]
    assert [c["name"] for c in sent] == ["a", "b"]
    assert "hostOnly" not in sent[0]
    assert sent[1]["path"] == "/"


def test_no_seed_no_add_cookies():
    pw, browser = _make_playwright()
    handle = acquire_browser(pw, ResolvedConnection(MODE_REMOTE, WS), [])
    handle.context.add_cookies.assert_not_called()


def test_seeding_failure_releases_and_raises():
    pw, browser = _make_playwright()
    browser.new_context.return_value.add_cookies.side_effect = Exception("Invalid cookie fields")
    with pytest.raises(SeedingError):
        acquire_browser(pw, ResolvedConnection(MODE_LOCAL, CHROME),
                        [{"name": "a", "value": "1", "domain": "x.com"}])
    browser.close.assert_called_once()


def test_malformed_seed_rejected_before_launch():
    pw, _ = _make_playwright()
    with pytest.raises(SeedingError):
        acquire_browser(pw, ResolvedConnection(MODE_LOCAL, CHROME), [{"value": "no name"}])
    pw.chromium.launch.assert_not_called()


def test_remote_release_detaches():
    """Remote: drop the connection, leave the remote default context alone."""
    browser, context = MagicMock(), MagicMock()
    handle = BrowserHandle(browser, context, MODE_REMOTE, WS)
    handle.release()
    browser.close.assert_called_once()
    context.close.assert_not_called()
    assert handle.released


def test_local_release_terminates():
    browser, context = MagicMock(), MagicMock()
    handle = BrowserHandle(browser, context, MODE_LOCAL, CHROME)
    handle.release()
    context.close.assert_called_once()
    browser.close.assert_called_once()


def test_release_is_idempotent():
    browser = MagicMock()
    handle = BrowserHandle(browser, MagicMock(), MODE_LOCAL, CHROME)
    handle.release()
    handle.release()
    browser.close.assert_called_once()


def test_terminate_survives_context_close_error():
    browser, context = MagicMock(), MagicMock()
    context.close.side_effect = Exception("Target closed")
    BrowserHandle(browser, context, MODE_LOCAL, CHROME).terminate()
    browser.close.assert_called_once()
