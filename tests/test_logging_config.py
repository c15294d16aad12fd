import logging

from worldsave.core.logging_config import configure_logging


def test_configure_logging_adds_one_handler() -> None:
    package_logger = logging.getLogger("worldsave")
    before = list(package_logger.handlers)
    try:
        configure_logging("debug")
        configure_logging(logging.WARNING)

        added = [handler for handler in package_logger.handlers if handler not in before]
        assert len(added) == 1
        assert package_logger.level == logging.WARNING
    finally:
        for handler in list(package_logger.handlers):
            if handler not in before:
                package_logger.removeHandler(handler)
        package_logger.setLevel(logging.NOTSET)


def test_unknown_level_name_falls_back_to_info() -> None:
    package_logger = logging.getLogger("worldsave")
    before = list(package_logger.handlers)
    try:
        assert configure_logging("chatty").level == logging.INFO
    finally:
        for handler in list(package_logger.handlers):
            if handler not in before:
                package_logger.removeHandler(handler)
        package_logger.setLevel(logging.NOTSET)
