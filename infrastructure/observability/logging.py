"""
Logging setup with contextvars-based metadata injection.

- Adds the run tag and the paper being scored into every log line (via contextvars).
- Worker threads see the context of the task they run, not of the thread.
- Supports console-only logging OR console + rotating file logs.
"""

import contextvars
import hashlib
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path

# Context variables for dynamic log metadata
cv_run_tag = contextvars.ContextVar("run_tag", default="-")
cv_paper_id = contextvars.ContextVar("paper_id", default="-")

# Kept for artifacts, not printed every line
cv_run_id_full = contextvars.ContextVar("run_id_full", default="-")

# Third-party loggers and the minimum level they are allowed to emit
NOISY_LOGGERS = {
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "urllib3": logging.WARNING,
    "opik": logging.INFO,
}


def make_run_tag(run_id_full: str, length: int = 8) -> str:
    """
    Stable short tag derived from the full run_id.
    Uses BLAKE2s for collision resistance.
    """
    h = hashlib.blake2s(run_id_full.encode("utf-8"), digest_size=8).hexdigest()
    return h[:length]


class ContextInjectFilter(logging.Filter):
    """Expose the run tag and paper id as ``%(run)s`` / ``%(paper)s``."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.run = cv_run_tag.get() or "-"
        record.paper = cv_paper_id.get() or "-"
        return True


def set_log_context(
    *,
    run_id_full: str | None = None,
    paper_id: str | None = None,
) -> None:
    """Update logging context (thread-safe via contextvars)."""
    if run_id_full is not None:
        cv_run_id_full.set(str(run_id_full))
        cv_run_tag.set(make_run_tag(str(run_id_full)))

    if paper_id is not None:
        cv_paper_id.set(str(paper_id))


@contextmanager
def paper_context(paper_id: str) -> Iterator[None]:
    """Tag log lines with ``paper_id`` inside the block, then restore the previous paper."""
    token = cv_paper_id.set(str(paper_id))
    try:
        yield
    finally:
        cv_paper_id.reset(token)


def get_log_context() -> dict[str, str]:
    """Return the current context in a convenient dict form (e.g. for JSON artifacts)."""
    return {
        "run_tag": str(cv_run_tag.get() or "-"),
        "run_id_full": str(cv_run_id_full.get() or "-"),
        "paper_id": str(cv_paper_id.get() or "-"),
    }


def clear_paper_context() -> None:
    """Reset paper context to default (keep run info)."""
    cv_paper_id.set("-")


def configure_logging(
    *,
    log_file: Path | None = None,
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    max_bytes: int = 10_000_000,  # 10MB
    backup_count: int = 5,
) -> None:
    """
    Configure root logging for one report run.

    The console shows the run tag and paper; the file additionally records the
    logger name and the worker thread, which matters once papers are scored
    on a pool.

    Args:
        log_file: Path to log file; None logs to the console only
        console_level: Minimum level for console output (default: INFO)
        file_level: Minimum level for file output (default: DEBUG)
        max_bytes: Max log file size before rotation
        backup_count: Number of backup files to keep
    """
    # Clear existing handlers to avoid duplicate logs if called multiple times
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(logging.DEBUG)  # keep root permissive; handlers enforce levels

    ctx_filter = ContextInjectFilter()

    ch = logging.StreamHandler()
    ch.setLevel(console_level)
    ch.setFormatter(
        logging.Formatter("%(asctime)s [%(levelname)s] r=%(run)s p=%(paper)s | %(message)s", datefmt="%H:%M:%S")
    )
    ch.addFilter(ctx_filter)
    root.addHandler(ch)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = RotatingFileHandler(
            log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        fh.setLevel(file_level)
        fh.setFormatter(
            logging.Formatter(
                "%(asctime)s [%(levelname)s] %(name)s (%(threadName)s) | r=%(run)s p=%(paper)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        fh.addFilter(ctx_filter)
        root.addHandler(fh)

    for name, level in NOISY_LOGGERS.items():
        logging.getLogger(name).setLevel(level)

    logging.getLogger(__name__).info(
        "Logging configured (console_level=%s, file=%s)",
        logging.getLevelName(console_level),
        str(log_file) if log_file is not None else "None",
    )
