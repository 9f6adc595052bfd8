import logging

import pytest

from shared.logging.logging_setup import LOG_FILE, ColorLogger, ZonedFormatter, setup_logging


@pytest.fixture
def restore_root_logging():
    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        if isinstance(handler.formatter, ZonedFormatter):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


def test_file_gets_plain_marked_lines(tmp_path, monkeypatch, capsys, restore_root_logging):
    monkeypatch.setenv("ROOT_DIR", str(tmp_path))
    monkeypatch.setenv("TIMEZONE", "UTC")
    monkeypatch.delenv("LOG_LEVEL", raising=False)

    logger = setup_logging()
    assert isinstance(logger, ColorLogger)

    logger.info("Feed complete after %d pages", 3, color="green")
    logger.warning("Fetching feed page %d failed", 4)
    logger.debug("hidden at info level")
    for handler in logging.getLogger().handlers:
        handler.flush()

    content = (tmp_path / "logs" / LOG_FILE).read_text(encoding="utf-8")
    assert "INFO - Feed complete after 3 pages" in content
    assert "WARNING - ⚠️ Fetching feed page 4 failed" in content
    assert "hidden at info level" not in content
    assert "\033[" not in content

    console = capsys.readouterr().out
    assert "\033[32m" in console
    # the shared record is not marked twice by the two handlers
    assert "⚠️ ⚠️" not in console + content
