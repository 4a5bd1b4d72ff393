"""JSONL logging for observability."""

import json
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any


@dataclass
class LogEntry:
    """A single log entry."""

    timestamp: str
    event: str
    session_id: str | None = None
    command: str | None = None
    backend: str | None = None
    duration_ms: float | None = None
    fragments: int | None = None
    words: int | None = None
    error: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict, excluding None values."""
        data = asdict(self)
        return {k: v for k, v in data.items() if v is not None and v != {} and v != []}


class JSONLLogger:
    """Logger that writes structured logs in JSONL format."""

    def __init__(
        self,
        log_dir: str | Path | None = None,
        filename: str = "logs.jsonl",
        max_size_mb: float = 10.0,
    ) -> None:
        if log_dir is None:
            log_dir = Path.home() / ".piko" / "logs"
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.filename = filename
        self.max_size_bytes = int(max_size_mb * 1024 * 1024)

    @property
    def log_path(self) -> Path:
        """Current log file path."""
        return self.log_dir / self.filename

    def _rotate_if_needed(self) -> None:
        """Rotate log file if it exceeds max size."""
        if not self.log_path.exists():
            return

        if self.log_path.stat().st_size >= self.max_size_bytes:
            timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
            rotated_name = f"{self.log_path.stem}_{timestamp}.jsonl"
            self.log_path.rename(self.log_dir / rotated_name)

    def _write(self, entry: LogEntry) -> None:
        """Write a log entry to the file."""
        self._rotate_if_needed()

        with open(self.log_path, "a", encoding="utf-8") as f:
            f.write(json.dumps(entry.to_dict(), ensure_ascii=False) + "\n")

    def log(
        self,
        event: str,
        *,
        session_id: str | None = None,
        command: str | None = None,
        backend: str | None = None,
        duration_ms: float | None = None,
        fragments: int | None = None,
        words: int | None = None,
        error: str | None = None,
        **extra: Any,
    ) -> None:
        """Log an event."""
        entry = LogEntry(
            timestamp=datetime.now(timezone.utc).isoformat(),
            event=event,
            session_id=session_id,
            command=command,
            backend=backend,
            duration_ms=duration_ms,
            fragments=fragments,
            words=words,
            error=error,
            extra=extra if extra else {},
        )
        self._write(entry)

    def log_command(self, command: str, *, session_id: str | None = None, **extra: Any) -> None:
        """Log how a user message was classified."""
        self.log("command", session_id=session_id, command=command, **extra)

    def log_stream(
        self,
        backend: str,
        fragments: int,
        words: int,
        duration_ms: float,
        *,
        session_id: str | None = None,
        error: str | None = None,
    ) -> None:
        """Log the end of a streamed reply."""
        self.log(
            "stream_failed" if error else "stream_complete",
            session_id=session_id,
            backend=backend,
            fragments=fragments,
            words=words,
            duration_ms=duration_ms,
            error=error,
        )


class NullLogger(JSONLLogger):
    """Drops every entry. Used in tests and embedded setups."""

    def __init__(self) -> None:
        self.filename = "logs.jsonl"
        self.max_size_bytes = 0

    def _write(self, entry: LogEntry) -> None:
        pass


# Global logger instance
_logger: JSONLLogger | None = None


def get_logger() -> JSONLLogger:
    """Get the global logger instance."""
    global _logger
    if _logger is None:
        _logger = JSONLLogger()
    return _logger


def configure_logger(log_dir: str | Path | None = None, max_size_mb: float = 10.0) -> JSONLLogger:
    """Configure and return the global logger."""
    global _logger
    _logger = JSONLLogger(log_dir=log_dir, max_size_mb=max_size_mb)
    return _logger
