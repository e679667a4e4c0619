"""Error taxonomy for cookie capture sessions.

Every failure is raised as a CaptureError carrying a CaptureSignal, so
callers can either catch the specific subclass or branch on ``err.signal``.
"""
from enum import Enum


class CaptureSignal(Enum):
    """What stage of a capture session failed."""
    CONFIGURATION = "configuration"  # no endpoint and no executable
    CONNECTION = "connection"        # remote attach failed
    LAUNCH = "launch"                # local launch failed
    SEEDING = "seeding"              # initial cookies rejected
    NAVIGATION = "navigation"        # page.goto failed
    PERSISTENCE = "persistence"      # cookie file write failed


# Signals that abort a session; the rest are recorded and the session goes on.
FATAL_SIGNALS = frozenset({
    CaptureSignal.CONFIGURATION,
    CaptureSignal.CONNECTION,
    CaptureSignal.LAUNCH,
    CaptureSignal.SEEDING,
})


class CaptureError(Exception):
    """Exception carrying a CaptureSignal."""

    def __init__(self, signal: CaptureSignal, message: str = ""):
        self.signal = signal
        super().__init__(message or signal.value)

    @property
    def fatal(self) -> bool:
        return self.signal in FATAL_SIGNALS


class ConfigurationError(CaptureError):
    def __init__(self, message: str = ""):
        super().__init__(CaptureSignal.CONFIGURATION, message)


class BrowserConnectionError(CaptureError):
    def __init__(self, message: str = ""):
        super().__init__(CaptureSignal.CONNECTION, message)


class LaunchError(CaptureError):
    def __init__(self, message: str = ""):
        super().__init__(CaptureSignal.LAUNCH, message)


class SeedingError(CaptureError):
    def __init__(self, message: str = ""):
        super().__init__(CaptureSignal.SEEDING, message)


class NavigationError(CaptureError):
    def __init__(self, message: str = ""):
        super().__init__(CaptureSignal.NAVIGATION, message)


class PersistenceError(CaptureError):
    def __init__(self, message: str = ""):
        super().__init__(CaptureSignal.PERSISTENCE, message)
