"""core/logging.py 테스트"""

import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

import pytest

from core.logging import resolve_level, setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


class TestResolveLevel:
    def test_names(self) -> None:
        assert resolve_level("debug") == logging.DEBUG
        assert resolve_level(" WARNING ") == logging.WARNING
        assert resolve_level(logging.ERROR) == logging.ERROR

    def test_unknown(self) -> None:
        with pytest.raises(ValueError):
            resolve_level("LOUD")


class TestSetupLogging:
    def test_file_handler_under_process_dir(self, tmp_path: Path) -> None:
        root = setup_logging("web", level="INFO", log_dir=tmp_path, retention_days=3)

        file_handlers = [h for h in root.handlers if isinstance(h, TimedRotatingFileHandler)]
        assert len(file_handlers) == 1
        assert file_handlers[0].backupCount == 3
        assert (tmp_path / "web" / "web.log").exists()

    def test_repeat_call_does_not_duplicate(self, tmp_path: Path) -> None:
        setup_logging("web", log_dir=tmp_path)
        root = setup_logging("web", log_dir=tmp_path)

        assert len(root.handlers) == 2

    def test_console_only(self, tmp_path: Path) -> None:
        root = setup_logging("init_db", level="DEBUG", log_dir=tmp_path, to_file=False)

        assert len(root.handlers) == 1
        assert root.level == logging.DEBUG
        assert not (tmp_path / "init_db").exists()
        assert logging.getLogger("aiosqlite").level == logging.WARNING
