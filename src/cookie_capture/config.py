"""Connection configuration with environment fallback.

The connection is resolved once, at the start of a session, into a
ResolvedConnection. Acquisition and release both read that one value, so
the environment is never consulted twice within a call.
"""
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass

from .errors import ConfigurationError

log = logging.getLogger(__name__)

# Same names as get-cookies-puppeteer, so its .env files work unchanged.
ENV_REMOTE_ENDPOINT = "WEBHOOK_URL"
ENV_EXECUTABLE_PATH = "PUPPETEER_EXECUTABLE_PATH"

MODE_REMOTE = "remote"
MODE_LOCAL = "local"


@dataclass(frozen=True)
class ConnectionConfig:
    """Caller-supplied connection data. Empty fields fall back to the environment."""
    remote_endpoint: str = ""
    executable_path: str = ""


@dataclass(frozen=True)
class ResolvedConnection:
    mode: str    # MODE_REMOTE or MODE_LOCAL
    target: str  # endpoint URL or executable path

    @property
    def is_remote(self) -> bool:
        return self.mode == MODE_REMOTE


def resolve_connection(
    config: ConnectionConfig | None = None,
    env: Mapping[str, str] | None = None,
) -> ResolvedConnection:
    """Pick the connection method: remote endpoint first, then local executable.

    *env* defaults to ``os.environ``. Raises ConfigurationError when neither
    the arguments nor the environment provide anything usable.
    """
    config = config or ConnectionConfig()
    env = os.environ if env is None else env

    # Blank arguments count as not supplied
    endpoint_arg = (config.remote_endpoint or "").strip()
    endpoint = endpoint_arg or env.get(ENV_REMOTE_ENDPOINT, "").strip()
    if endpoint:
        log.debug("Resolved remote endpoint (%s)",
                  "argument" if endpoint_arg else ENV_REMOTE_ENDPOINT)
        return ResolvedConnection(MODE_REMOTE, endpoint)

    executable_arg = (config.executable_path or "").strip()
    executable = executable_arg or env.get(ENV_EXECUTABLE_PATH, "").strip()
    if executable:
        log.debug("Resolved local executable (%s)",
                  "argument" if executable_arg else ENV_EXECUTABLE_PATH)
        return ResolvedConnection(MODE_LOCAL, executable)

    raise ConfigurationError(
        f"Set either {ENV_EXECUTABLE_PATH} or {ENV_REMOTE_ENDPOINT}, "
        "or pass executable_path / remote_endpoint"
    )
