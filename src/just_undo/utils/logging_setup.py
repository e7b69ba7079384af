# src/just_undo/utils/logging_setup.py
import logging
import sys

PACKAGE_LOGGER = 'just_undo'
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO") -> int:
    """
    Настраивает логгер пакета: вывод в stdout, собственный формат, без передачи корневому.
    Возвращает установленный уровень.
    """
    level_name = level.upper()
    log_level = logging.getLevelName(level_name)
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if not isinstance(log_level, int):
        logger.warning(f"Invalid log level '{level}'. Using INFO.")
        log_level = logging.INFO

    package_logger.setLevel(log_level)
    if not package_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        package_logger.addHandler(handler)
        package_logger.propagate = False
    logger.debug(f"Log level for '{PACKAGE_LOGGER}' set to {logging.getLevelName(log_level)}")
    return log_level
