"""Response-driven cookie snapshots and the closure signal.

CookieObserver listens to page.on("response") and, after every response,
replaces its snapshot with a full read of the context's cookies. Nothing is
merged; the latest snapshot wins.

ClosureSignal resolves once, when the page closes or the browser
disconnects, and is what a capture session blocks on.
"""
import logging
from typing import Any

log = logging.getLogger(__name__)


class CookieObserver:
    """Keep the latest full cookie snapshot of a context, refreshed per response."""

    def __init__(self, page: Any, context: Any):
        self._page = page
        self._context = context
        self._snapshot: list[dict] = []
        self._updates = 0
        self._listening = False

    def start(self):
        """Register page.on('response') listener."""
        if self._listening:
            return
        self._page.on("response", self._on_response)
        self._listening = True
        log.debug("CookieObserver started")

    def stop(self):
        """Remove listener."""
        if not self._listening:
            return
        try:
            self._page.remove_listener("response", self._on_response)
        except Exception as e:
            log.debug(f"CookieObserver: remove_listener failed: {e}")
        self._listening = False
        log.debug("CookieObserver stopped")

    @property
    def snapshot(self) -> list[dict]:
        """Copy of the most recent snapshot, or [] if no response was seen."""
        return [dict(c) for c in self._snapshot]

    @property
    def updates(self) -> int:
        return self._updates

    def _on_response(self, response):
        try:
            cookies = self._context.cookies()
        except Exception as e:
            # Page or browser going away; keep the previous snapshot.
            log.debug(f"CookieObserver: cookie read failed after {getattr(response, 'url', '?')}: {e}")
            return
        self._snapshot = list(cookies)
        self._updates += 1
        log.debug("CookieObserver: %d cookies after %s", len(self._snapshot), getattr(response, "url", "?"))


class ClosureSignal:
    """Single-resolution signal fulfilled by page close or browser disconnect."""

    PAGE_CLOSED = "page_closed"
    BROWSER_DISCONNECTED = "browser_disconnected"

    def __init__(self):
        self._reason: str | None = None
        self._page = None
        self._browser = None

    @property
    def is_set(self) -> bool:
        return self._reason is not None

    @property
    def reason(self) -> str | None:
        return self._reason

    def set(self, reason: str):
        """Resolve the signal. Only the first reason is kept."""
        if self._reason is None:
            self._reason = reason
            log.info("Closure detected: %s", reason)

    def attach(self, page: Any, browser: Any):
        self._page = page
        self._browser = browser
        page.once("close", lambda _page: self.set(self.PAGE_CLOSED))
        browser.once("disconnected", lambda _browser: self.set(self.BROWSER_DISCONNECTED))

    def _target_gone(self) -> bool:
        try:
            if self._page is not None and self._page.is_closed():
                self.set(self.PAGE_CLOSED)
                return True
            if self._browser is not None and not self._browser.is_connected():
                self.set(self.BROWSER_DISCONNECTED)
                return True
        except Exception:
            return False
        return False

    def wait(self, page: Any, poll_interval: int = 500) -> str:
        """Block until the signal resolves. No timeout.

        Uses page.wait_for_timeout() so Playwright keeps dispatching events
        (response handlers included) while we wait; time.sleep() would starve
        them. An error from the wait counts as closure only when the page is
        closed or the browser disconnected; anything else propagates.
        """
        while not self.is_set:
            try:
                page.wait_for_timeout(poll_interval)
            except Exception:
                if self.is_set or self._target_gone():
                    break
                raise
        return self._reason
