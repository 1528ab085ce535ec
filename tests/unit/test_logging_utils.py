import logging

from speaking_practice.logging_utils import setup_logging
from speaking_practice.settings import LoggingSettings


def test_setup_logging_adds_file_handler(tmp_path):
    log_file = tmp_path / "analyzer.log"
    root = logging.getLogger()
    before = list(root.handlers)

    logger = setup_logging(LoggingSettings(level="info", format="%(levelname)s %(message)s", file=str(log_file)))
    try:
        logger.warning("analyzer.test_event")
        for handler in root.handlers:
            handler.flush()
    finally:
        for handler in root.handlers[:]:
            if handler not in before:
                root.removeHandler(handler)
                handler.close()

    assert logger.name == "speaking_practice"
    assert "WARNING analyzer.test_event" in log_file.read_text()
