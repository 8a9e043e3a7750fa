# tests/test_logger.py
import logging

from adstudio.logger import get_logger


def test_get_logger_configures_once_and_names_package():
    log = get_logger()
    assert log.name == "adstudio"
    assert get_logger("adstudio.features.video_ad").name == "adstudio.features.video_ad"


def test_transport_loggers_stay_quiet():
    get_logger(__name__)
    for name in ("httpx", "httpcore", "urllib3"):
        assert logging.getLogger(name).level >= logging.WARNING
