"""Browser acquisition: attach to a remote browser or launch a visible local one.

The returned BrowserHandle owns the browser for the rest of the session and
knows how it was acquired, so it can release itself the right way: detach
from a remote browser (which must keep running) or terminate a local one.
"""
import logging
from dataclasses import dataclass
from typing import Any

from ..config import MODE_LOCAL, MODE_REMOTE, ResolvedConnection
from ..errors import BrowserConnectionError, LaunchError, SeedingError
from .cookies import normalize_cookies

log = logging.getLogger(__name__)


@dataclass
class BrowserHandle:
    browser: Any
    context: Any
    mode: str
    target: str
    released: bool = False

    @property
    def is_remote(self) -> bool:
        return self.mode == MODE_REMOTE

    def new_page(self):
        return self.context.new_page()

    def detach(self) -> None:
        """Disconnect from a remote browser, leaving it running.

        For a CDP-attached browser, ``Browser.close()`` only drops the
        connection; the default context belongs to the remote side and is
        not closed.
        """
        self.released = True
        self.browser.close()
        log.info("Detached from remote browser")

    def terminate(self) -> None:
        """Close the context and kill a locally launched browser process."""
        self.released = True
        try:
            self.context.close()
        except Exception as e:
            log.debug(f"Context close before terminate failed: {e}")
        self.browser.close()
        log.info("Terminated local browser")

    def release(self) -> None:
        """Release once: detach in remote mode, terminate in local mode."""
        if self.released:
            return
        if self.is_remote:
            self.detach()
        else:
            self.terminate()


def attach_browser(playwright, endpoint: str) -> BrowserHandle:
    """Connect to an already-running browser over CDP."""
    log.info("Connecting to remote browser at %s", endpoint)
    try:
        browser = playwright.chromium.connect_over_cdp(endpoint)
    except Exception as e:
        log.error(f"Error connecting to remote browser at {endpoint}: {e}")
        raise BrowserConnectionError(f"Could not connect to {endpoint}: {e}") from e

    try:
        context = browser.contexts[0] if browser.contexts else browser.new_context()
    except Exception as e:
        try:
            browser.close()
        except Exception:
            pass
        raise BrowserConnectionError(f"Connected to {endpoint} but no usable context: {e}") from e
    return BrowserHandle(browser, context, MODE_REMOTE, endpoint)


def launch_browser(playwright, executable_path: str) -> BrowserHandle:
    """Launch a local browser with a visible window so a human can use it."""
    log.info("Launching local browser: %s", executable_path)
    try:
        browser = playwright.chromium.launch(
            executable_path=executable_path,
            headless=False,
        )
    except Exception as e:
        log.error(
            f"Error launching browser, check that {executable_path} exists "
            f"and is compatible with Playwright: {e}"
        )
        raise LaunchError(f"Could not launch {executable_path}: {e}") from e

    try:
        context = browser.new_context()
    except Exception as e:
        try:
            browser.close()
        except Exception:
            pass
        raise LaunchError(f"Launched {executable_path} but could not open a context: {e}") from e
    return BrowserHandle(browser, context, MODE_LOCAL, executable_path)


def acquire_browser(
    playwright,
    connection: ResolvedConnection,
    cookies: list[dict] | None = None,
) -> BrowserHandle:
    """Acquire a browser handle for *connection* and seed it with *cookies*.

    Seeding is one batched ``add_cookies`` call. If it fails the handle is
    released before SeedingError is raised. Malformed seed cookies are rejected
    before any browser is touched.
    """
    seed = normalize_cookies(cookies)
    if connection.is_remote:
        handle = attach_browser(playwright, connection.target)
    else:
        handle = launch_browser(playwright, connection.target)

    if seed:
        try:
            handle.context.add_cookies(seed)
        except Exception as e:
            try:
                handle.release()
            except Exception as release_err:
                log.warning(f"Failed to release browser after seeding error: {release_err}")
            raise SeedingError(f"Could not set {len(seed)} initial cookies: {e}") from e
        log.info("Seeded %d initial cookies", len(seed))
    return handle
