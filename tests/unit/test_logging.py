import logging
from pathlib import Path

from infrastructure.observability import (
    clear_paper_context,
    configure_logging,
    get_log_context,
    make_run_tag,
    paper_context,
    set_log_context,
)
from infrastructure.observability.logging import ContextInjectFilter


def test_run_tag_is_stable_and_short() -> None:
    assert make_run_tag("20250101_accuracy") == make_run_tag("20250101_accuracy")
    assert make_run_tag("20250101_accuracy") != make_run_tag("20250102_accuracy")
    assert len(make_run_tag("x", length=6)) == 6


def test_filter_injects_context() -> None:
    set_log_context(run_id_full="run-a", paper_id="p-9")
    record = logging.LogRecord("t", logging.INFO, __file__, 1, "msg", None, None)

    assert ContextInjectFilter().filter(record) is True
    assert record.run == make_run_tag("run-a")
    assert record.paper == "p-9"

    clear_paper_context()
    assert get_log_context()["paper_id"] == "-"
    assert get_log_context()["run_id_full"] == "run-a"


def test_configure_logging_writes_file(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "run.log"
    configure_logging(log_file=log_file, console_level=logging.WARNING)
    set_log_context(paper_id="p-1")
    logging.getLogger("tests.logging").debug("hello from paper")
    for handler in logging.getLogger().handlers:
        handler.flush()

    text = log_file.read_text(encoding="utf-8")
    assert "hello from paper" in text
    assert "p=p-1" in text
    clear_paper_context()
    root = logging.getLogger()
    for handler in list(root.handlers):
        handler.close()
        root.removeHandler(handler)


def test_paper_context_restores_previous_paper() -> None:
    set_log_context(paper_id="outer")
    with paper_context("inner"):
        assert get_log_context()["paper_id"] == "inner"
    assert get_log_context()["paper_id"] == "outer"
    clear_paper_context()
