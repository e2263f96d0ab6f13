# nameplate_dashboard/tests/test_logger.py
import logging

from nameplate_dashboard.logger import LOG_FILE_NAME, get_logger


def _drop(logger):
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def test_writes_to_rotating_file_in_log_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    logger = get_logger("nameplate_dashboard.tests.file_output")
    try:
        logger.info("lot LOT-1 sent to print")
        for handler in logger.handlers:
            handler.flush()

        content = (tmp_path / "logs" / LOG_FILE_NAME).read_text(encoding="utf-8")
        assert "[INFO] [nameplate_dashboard.tests.file_output] lot LOT-1 sent to print" in content
        assert logger.level == logging.INFO
    finally:
        _drop(logger)


def test_level_and_console_only_from_env(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("LOG_DIR", "")
    monkeypatch.setenv("LOG_LEVEL", "warning")
    logger = get_logger("nameplate_dashboard.tests.console_only")
    try:
        assert logger.level == logging.WARNING
        assert [type(h) for h in logger.handlers] == [logging.StreamHandler]
        assert list(tmp_path.iterdir()) == []
    finally:
        _drop(logger)


def test_unknown_level_falls_back_to_info(monkeypatch):
    monkeypatch.setenv("LOG_DIR", "")
    monkeypatch.setenv("LOG_LEVEL", "chatty")
    logger = get_logger("nameplate_dashboard.tests.unknown_level")
    try:
        assert logger.level == logging.INFO
    finally:
        _drop(logger)


def test_handlers_are_not_stacked(monkeypatch):
    monkeypatch.setenv("LOG_DIR", "")
    logger = get_logger("nameplate_dashboard.tests.stacking")
    try:
        assert get_logger("nameplate_dashboard.tests.stacking") is logger
        assert len(logger.handlers) == 1
    finally:
        _drop(logger)
