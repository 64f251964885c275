"""Tests for the file logging set up by api/main.py."""

from __future__ import annotations

import logging
from pathlib import Path

from api.main import _add_file_logging


def _file_handlers_for(path: Path) -> list[logging.FileHandler]:
    return [
        h
        for h in logging.getLogger().handlers
        if isinstance(h, logging.FileHandler) and Path(h.baseFilename) == path.absolute()
    ]


def test_file_handler_added_once(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "app.log"
    try:
        _add_file_logging(str(log_file))
        _add_file_logging(str(log_file))
        assert len(_file_handlers_for(log_file)) == 1
        assert log_file.parent.is_dir()
    finally:
        for handler in _file_handlers_for(log_file):
            logging.getLogger().removeHandler(handler)
            handler.close()


def test_empty_log_file_disables_file_logging() -> None:
    before = list(logging.getLogger().handlers)
    _add_file_logging("")
    assert logging.getLogger().handlers == before
