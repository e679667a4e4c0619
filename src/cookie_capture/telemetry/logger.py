"""Structured JSONL event logging for capture sessions."""
import json
import logging
import os
import time

log = logging.getLogger(__name__)


class CaptureEventLogger:
    """Writes one JSON line per event to a per-run JSONL file.

    All logging is best-effort — methods never raise exceptions.
    Supports context-manager protocol for automatic close.
    """

    def __init__(self, run_id: str, log_dir: str = "data/logs/capture_events"):
        self._run_id = run_id
        self._f = None
        self.path = ""
        try:
            os.makedirs(log_dir, exist_ok=True)
            safe_run_id = run_id.replace("/", "_").replace("\\", "_")
            self.path = os.path.join(log_dir, f"capture_{safe_run_id}.jsonl")
            self._f = open(self.path, "a", encoding="utf-8")
        except Exception as e:
            log.warning(f"CaptureEventLogger: failed to open log file: {e}")

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def _write(self, event: dict):
        if self._f is None:
            return
        try:
            event["ts"] = time.time()
            event["run_id"] = self._run_id
            self._f.write(json.dumps(event, ensure_ascii=False) + "\n")
            self._f.flush()
        except Exception as e:
            log.warning(f"CaptureEventLogger: write failed: {e}")

    def log_session_start(self, url: str, mode: str, seeded: int):
        self._write({
            "event": "session_start",
            "url": url,
            "mode": mode,
            "seeded": seeded,
        })

    def log_navigation(self, url: str, ok: bool, error: str | None = None):
        self._write({
            "event": "navigation",
            "url": url,
            "ok": ok,
            "error": error,
        })

    def log_session_end(self, status: str, close_reason: str | None, cookie_count: int,
                        updates: int, errors: list[str], saved_path: str, duration: float):
        """Log the outcome of one session.

        Valid ``status`` values:
        - ``ok``: closed by the operator, nothing went wrong
        - ``degraded``: closed, but navigation or saving failed
        - ``failed``: aborted by an unexpected error
        """
        self._write({
            "event": "session_end",
            "status": status,
            "close_reason": close_reason,
            "cookie_count": cookie_count,
            "updates": updates,
            "errors": errors,
            "saved_path": saved_path,
            "duration": duration,
        })

    def close(self):
        if self._f is not None:
            try:
                self._f.flush()
                self._f.close()
            except Exception:
                pass
            self._f = None
