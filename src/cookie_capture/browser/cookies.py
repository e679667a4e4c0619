"""Cookie normalization, seed-file loading and snapshot persistence."""
import json
import logging
import os
from typing import Any

from ..errors import PersistenceError, SeedingError

log = logging.getLogger(__name__)

# Keys Playwright's add_cookies() accepts.
_COOKIE_KEYS = ("name", "value", "url", "domain", "path", "expires", "httpOnly", "secure", "sameSite")

_SAME_SITE = {
    "strict": "Strict",
    "lax": "Lax",
    "none": "None",
    "no_restriction": "None",
    "no-restriction": "None",
}


def normalize_cookie(cookie: dict[str, Any]) -> dict[str, Any] | None:
    """Map a cookie from a browser or extension export to Playwright's shape.

    Returns None when the entry has no name or value.
    """
    if not isinstance(cookie, dict):
        return None
    if "name" not in cookie or "value" not in cookie:
        return None

    out: dict[str, Any] = {}
    for key, value in cookie.items():
        if key in ("expires", "expirationDate", "expiry"):
            try:
                out["expires"] = float(value)
            except (TypeError, ValueError):
                # Unparseable expiry -> session cookie
                pass
        elif key == "sameSite":
            mapped = _SAME_SITE.get(str(value).strip().lower())
            if mapped:
                out["sameSite"] = mapped
        elif key in ("httpOnly", "secure"):
            out[key] = bool(value)
        elif key in _COOKIE_KEYS:
            out[key] = value

    # Playwright takes either url, or domain + path, never both
    if "url" in out:
        out.pop("domain", None)
        out.pop("path", None)
    elif out.get("domain"):
        out.setdefault("path", "/")
    return out


def normalize_cookies(cookies: list[dict[str, Any]] | None) -> list[dict[str, Any]]:
    """Normalize a cookie list for seeding.

    Raises SeedingError if any entry lacks a name or value.
    """
    if not cookies:
        return []
    result = []
    for index, cookie in enumerate(cookies):
        normalized = normalize_cookie(cookie)
        if normalized is None:
            raise SeedingError(f"Cookie #{index} has no name/value: {cookie!r}")
        result.append(normalized)
    return result


def load_cookies(path: str) -> list[dict[str, Any]]:
    """Read seed cookies from a JSON file.

    Accepts either a bare JSON array or a Playwright storage-state object
    with a ``cookies`` key. Raises SeedingError on a missing or corrupt file.
    """
    if not os.path.isfile(path):
        raise SeedingError(f"Cookie file not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise SeedingError(f"Could not read cookie file {path}: {e}") from e

    if isinstance(data, dict):
        data = data.get("cookies", [])
    if not isinstance(data, list):
        raise SeedingError(f"Cookie file {path} does not contain a cookie list")
    log.info("Loaded %d cookies from %s", len(data), path)
    return data


def save_cookies(cookies: list[dict[str, Any]], path: str) -> str:
    """Write *cookies* to *path* as indented JSON, overwriting any existing file.

    Returns the path written. Raises PersistenceError on failure.
    """
    try:
        parent = os.path.dirname(path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        # Serialize before opening so a bad snapshot leaves the old file intact
        text = json.dumps(cookies, ensure_ascii=False, indent=2)
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
    except (OSError, TypeError, ValueError) as e:
        raise PersistenceError(f"Could not save cookies to {path}: {e}") from e
    log.info("Saved %d cookies to %s", len(cookies), path)
    return path
