"""Cookie capture session lifecycle.

A session opens a browser (remote attach or visible local launch), navigates
to a URL, snapshots cookies after every response, and blocks until the
operator closes the page or the browser. It then optionally saves the last
snapshot, releases the browser, and returns that snapshot.

The browser is always released, on every exit path: detached in remote
mode, terminated in local mode.
"""
import logging
import time
from enum import Enum
from typing import Any

from ..config import ConnectionConfig, resolve_connection
from ..errors import CaptureError, NavigationError
from .acquire import BrowserHandle, acquire_browser
from .cookies import save_cookies
from .observer import ClosureSignal, CookieObserver

log = logging.getLogger(__name__)


class CaptureState(Enum):
    CREATED = "created"
    NAVIGATING = "navigating"
    OBSERVING = "observing"
    CLOSING = "closing"
    FINALIZED = "finalized"


def _as_config(connection: Any) -> ConnectionConfig:
    if connection is None:
        return ConnectionConfig()
    if isinstance(connection, ConnectionConfig):
        return connection
    if isinstance(connection, dict):
        return ConnectionConfig(
            remote_endpoint=connection.get("remote_endpoint") or "",
            executable_path=connection.get("executable_path") or "",
        )
    raise TypeError(f"connection must be a ConnectionConfig or dict, not {type(connection).__name__}")


class CookieCaptureSession:
    """One capture run. Call :meth:`run` exactly once.

    Args:
        url: Page to open.
        connection: ConnectionConfig (or a dict with the same keys). Empty
            fields fall back to WEBHOOK_URL / PUPPETEER_EXECUTABLE_PATH.
        save_path: Where to write the final snapshot as JSON ("" = don't).
        cookies: Cookies to seed before navigating.
        playwright: An already-started Playwright instance. When omitted the
            session starts its own and stops it afterwards.
        env: Environment mapping used for fallback (defaults to os.environ).
        event_logger: Optional CaptureEventLogger for telemetry.
        poll_interval: Milliseconds per event-loop slice while waiting.
    """

    def __init__(
        self,
        url: str,
        connection: ConnectionConfig | dict | None = None,
        save_path: str = "",
        cookies: list[dict] | None = None,
        *,
        playwright: Any = None,
        env: dict | None = None,
        event_logger: Any = None,
        poll_interval: int = 500,
    ):
        self.url = url
        self.save_path = save_path or ""
        self.state = CaptureState.CREATED
        self.mode: str | None = None
        self.cookies: list[dict] = []
        self.errors: list[CaptureError] = []
        self.saved_path = ""
        self._config = _as_config(connection)
        self._seed_cookies = list(cookies or [])
        self._playwright = playwright
        self._env = env
        self._event_logger = event_logger
        self._poll_interval = poll_interval
        self._closure = ClosureSignal()
        self._observer: CookieObserver | None = None

    @property
    def close_reason(self) -> str | None:
        return self._closure.reason

    def run(self) -> list[dict]:
        """Run the session and return the last cookie snapshot.

        Raises ConfigurationError, BrowserConnectionError, LaunchError or
        SeedingError. Navigation and save failures are logged and kept on
        :attr:`errors` instead.
        """
        if self.state is not CaptureState.CREATED:
            raise RuntimeError("CookieCaptureSession.run() can only be called once")

        started = time.monotonic()
        # Resolved once; the mode also decides how the browser is released.
        connection = resolve_connection(self._config, self._env)
        self.mode = connection.mode
        if self._event_logger is not None:
            self._event_logger.log_session_start(self.url, connection.mode, len(self._seed_cookies))

        own_playwright = self._playwright is None
        playwright = self._playwright
        if own_playwright:
            from playwright.sync_api import sync_playwright
            playwright = sync_playwright().start()

        handle: BrowserHandle | None = None
        status = "failed"
        try:
            handle = acquire_browser(playwright, connection, self._seed_cookies)
            page = handle.new_page()
            self._closure.attach(page, handle.browser)
            self._observer = CookieObserver(page, handle.context)
            self._observer.start()

            self.state = CaptureState.NAVIGATING
            self._navigate(page)

            self.state = CaptureState.OBSERVING
            log.info("Waiting for the browser to be closed...")
            self._closure.wait(page, poll_interval=self._poll_interval)

            self.state = CaptureState.CLOSING
            self.cookies = self._observer.snapshot
            self._persist()
            status = "degraded" if self.errors else "ok"
        finally:
            if self.state is not CaptureState.CLOSING and self._observer is not None:
                # Aborted mid-session; keep whatever was captured so far.
                self.cookies = self._observer.snapshot
            self.state = CaptureState.CLOSING
            if self._observer is not None:
                self._observer.stop()
            self._release(handle)
            if own_playwright:
                try:
                    playwright.stop()
                except Exception as e:
                    log.warning(f"Failed to stop Playwright cleanly: {e}")
            self.state = CaptureState.FINALIZED
            if self._event_logger is not None:
                self._event_logger.log_session_end(
                    status=status,
                    close_reason=self.close_reason,
                    cookie_count=len(self.cookies),
                    updates=self._observer.updates if self._observer else 0,
                    errors=[str(e) for e in self.errors],
                    saved_path=self.saved_path,
                    duration=time.monotonic() - started,
                )

        log.info("Captured %d cookies from %s", len(self.cookies), self.url)
        return self.cookies

    def _navigate(self, page):
        log.info("Navigating to %s", self.url)
        try:
            page.goto(self.url)
        except Exception as e:
            err = NavigationError(f"Navigation to {self.url} failed: {e}")
            err.__cause__ = e
            self.errors.append(err)
            log.error(str(err))
            if self._event_logger is not None:
                self._event_logger.log_navigation(self.url, False, str(e))
            return
        if self._event_logger is not None:
            self._event_logger.log_navigation(self.url, True)

    def _persist(self):
        if not self.save_path:
            return
        try:
            self.saved_path = save_cookies(self.cookies, self.save_path)
        except CaptureError as e:
            self.errors.append(e)
            log.error(str(e))

    def _release(self, handle: BrowserHandle | None):
        if handle is None:
            return
        try:
            handle.release()
        except Exception as e:
            log.warning(f"Error closing browser ({handle.mode}): {e}")


def get_cookies(
    url: str,
    connection: ConnectionConfig | dict | None = None,
    save_path: str = "",
    cookies: list[dict] | None = None,
    **kwargs,
) -> list[dict]:
    """Open *url* in a browser, wait for the operator to close it, return its cookies.

    Usage::

        # local browser, cookies written to a file on close
        cookies = get_cookies(
            "https://example.com",
            ConnectionConfig(executable_path="/usr/bin/google-chrome"),
            save_path="./saved-cookies.json",
        )

        # remote browser, seeded with a session cookie
        cookies = get_cookies(
            "https://example.com",
            {"remote_endpoint": "ws://127.0.0.1:9222/devtools/browser/878b..."},
            cookies=[{"name": "session", "value": "abc123",
                      "domain": ".example.com", "path": "/"}],
        )

    Extra keyword arguments are passed to :class:`CookieCaptureSession`.
    """
    return CookieCaptureSession(url, connection, save_path, cookies, **kwargs).run()
