"""Tests for CaptureSignal and the CaptureError family."""
from cookie_capture.errors import (
    BrowserConnectionError,
    CaptureError,
    CaptureSignal,
    ConfigurationError,
    LaunchError,
    NavigationError,
    PersistenceError,
    SeedingError,
)


def test_signal_values():
    assert CaptureSignal.CONFIGURATION.value == "configuration"
    assert CaptureSignal.CONNECTION.value == "connection"
    assert CaptureSignal.LAUNCH.value == "launch"
    assert CaptureSignal.SEEDING.value == "seeding"
    assert CaptureSignal.NAVIGATION.value == "navigation"
    assert CaptureSignal.PERSISTENCE.value == "persistence"


def test_capture_error_with_message():
    err = CaptureError(CaptureSignal.LAUNCH, "binary missing")
    assert err.signal == CaptureSignal.LAUNCH
    assert str(err) == "binary missing"


def test_capture_error_default_message():
    assert str(CaptureError(CaptureSignal.SEEDING)) == "seeding"
    assert str(NavigationError()) == "navigation"


def test_subclasses_carry_their_signal():
    assert ConfigurationError().signal == CaptureSignal.CONFIGURATION
    assert BrowserConnectionError().signal == CaptureSignal.CONNECTION
    assert LaunchError().signal == CaptureSignal.LAUNCH
    assert SeedingError().signal == CaptureSignal.SEEDING
    assert NavigationError().signal == CaptureSignal.NAVIGATION
    assert PersistenceError().signal == CaptureSignal.PERSISTENCE


def test_fatal_split():
    assert ConfigurationError().fatal
    assert BrowserConnectionError().fatal
    assert LaunchError().fatal
    assert SeedingError().fatal
    assert not NavigationError().fatal
    assert not PersistenceError().fatal


def test_subclass_catchable_as_capture_error():
    try:
        raise LaunchError("nope")
    except CaptureError as e:
        assert e.signal == CaptureSignal.LAUNCH


def test_connection_error_does_not_shadow_builtin():
    assert not issubclass(BrowserConnectionError, ConnectionError)
