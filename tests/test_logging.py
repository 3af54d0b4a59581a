import logging

import pytest

from xplane_udp.config import LoggingConfig
from xplane_udp.logging import DATAGRAM_LOGGER_NAME, configure_logging


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    datagrams = logging.getLogger(DATAGRAM_LOGGER_NAME)
    previous_handlers = list(root.handlers)
    previous_level = root.level
    previous_datagram_level = datagrams.level

    yield root

    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    for handler in previous_handlers:
        root.addHandler(handler)
    root.setLevel(previous_level)
    datagrams.setLevel(previous_datagram_level)


def test_configure_logging_writes_file(tmp_path, restore_logging):
    log_path = tmp_path / "logs" / "xplane-udp.log"
    root = restore_logging

    configure_logging(LoggingConfig(level="debug", path=log_path))
    logging.getLogger("xplane_udp.test").debug("hello %s", "log")
    for handler in root.handlers:
        handler.flush()

    assert root.level == logging.DEBUG
    assert "| DEBUG | xplane_udp.test | hello log" in log_path.read_text()


def test_configure_logging_rotates_file(tmp_path, restore_logging):
    log_path = tmp_path / "xplane-udp.log"
    root = restore_logging

    configure_logging(LoggingConfig(path=log_path, max_bytes=200, backup_count=1))
    for index in range(10):
        logging.getLogger("xplane_udp.test").info("line %d %s", index, "x" * 40)
    for handler in root.handlers:
        handler.flush()

    assert (tmp_path / "xplane-udp.log.1").exists()
    assert not (tmp_path / "xplane-udp.log.2").exists()


def test_configure_logging_can_silence_datagram_dumps(restore_logging):
    datagrams = logging.getLogger(DATAGRAM_LOGGER_NAME)

    configure_logging(LoggingConfig(log_datagrams=False))
    assert not datagrams.isEnabledFor(logging.INFO)
    assert datagrams.isEnabledFor(logging.WARNING)

    configure_logging(LoggingConfig(log_datagrams=True))
    assert datagrams.isEnabledFor(logging.INFO)
