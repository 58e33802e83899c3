"""Tests for datapack.logging."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from datapack.logging import configure_logging, get_logger, reset_logging


@pytest.fixture(autouse=True)
def _detach_handlers():
    yield
    reset_logging()


def test_get_logger_nests_under_package() -> None:
    assert get_logger("builder").name == "datapack.builder"
    assert get_logger().name == "datapack"


def test_console_hides_debug_unless_verbose(capsys) -> None:
    configure_logging()
    get_logger("test").debug("hidden detail")
    get_logger("test").info("visible summary")

    err = capsys.readouterr().err
    assert "[datapack] INFO visible summary" in err
    assert "hidden detail" not in err


def test_log_file_records_debug_on_quiet_console(tmp_path: Path, capsys) -> None:
    log_file = tmp_path / "logs" / "build.log"
    configure_logging(log_file=log_file)

    get_logger("builder").debug("Wrote pack.mcmeta")

    assert "DEBUG datapack.builder: Wrote pack.mcmeta" in log_file.read_text(encoding="utf-8")
    assert "Wrote pack.mcmeta" not in capsys.readouterr().err


def test_reconfiguring_closes_previous_handlers(tmp_path: Path) -> None:
    logger = configure_logging(log_file=tmp_path / "first.log")
    first_file = next(h for h in logger.handlers if isinstance(h, logging.FileHandler))

    configure_logging()

    assert first_file.stream is None
    assert not any(isinstance(h, logging.FileHandler) for h in logger.handlers)
