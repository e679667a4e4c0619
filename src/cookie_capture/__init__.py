"""cookie-capture — open a browser, let a human use it, keep the cookies.

Attaches to a remote browser or launches a visible local one, snapshots
cookies after every network response, and returns the last snapshot once
the operator closes the page or the browser.
"""
from .browser.session import CookieCaptureSession, CaptureState, get_cookies  # noqa: F401
from .config import ConnectionConfig, resolve_connection  # noqa: F401
from .errors import (  # noqa: F401
    CaptureSignal,
    CaptureError,
    ConfigurationError,
    BrowserConnectionError,
    LaunchError,
    SeedingError,
    NavigationError,
    PersistenceError,
)
