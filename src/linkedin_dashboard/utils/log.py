import traceback
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, TextIO

DEFAULT_LOG_PATH = Path.home() / "LinkedInDashboard_error.log"


def _safe_text(value: Any, max_len: int = 800) -> str:
    try:
        text = str(value)
    except Exception:
        text = repr(value)
    text = text.replace("\r", "\\r").replace("\n", "\\n")
    if len(text) > max_len:
        return text[: max_len - 3] + "..."
    return text


def _append(log_path: Path | None, write: Callable[[TextIO], None]) -> None:
    path = log_path or DEFAULT_LOG_PATH
    try:
        with open(path, "a", encoding="utf-8") as f:
            write(f)
    except Exception:
        # Never crash the dashboard due to logging failures
        pass


def log_event(context: str, message: str, log_path: Path | None = None) -> None:
    """Append a concise single-line diagnostic event (parse counts, skipped rows, rejected uploads)."""
    line = f"{datetime.now().isoformat()}  |  {context}  |  {_safe_text(message)}\n"
    _append(log_path, lambda f: f.write(line))


def log_exception(context: str, log_path: Path | None = None) -> None:
    """Append the traceback of the exception currently being handled."""

    def _write(f: TextIO) -> None:
        f.write("\n\n" + "=" * 80 + "\n")
        f.write(f"{datetime.now().isoformat()}  |  {context}\n")
        traceback.print_exc(file=f)

    _append(log_path, _write)
