"""telemetry — structured JSONL event logging for capture sessions."""
from .logger import CaptureEventLogger  # noqa: F401
