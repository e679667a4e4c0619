"""browser — Playwright browser acquisition, cookie observation and capture sessions."""
from .acquire import BrowserHandle, acquire_browser, attach_browser, launch_browser  # noqa: F401
from .cookies import normalize_cookie, normalize_cookies, load_cookies, save_cookies  # noqa: F401
from .observer import CookieObserver, ClosureSignal  # noqa: F401
from .session import CookieCaptureSession, CaptureState, get_cookies  # noqa: F401
