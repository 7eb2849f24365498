import logging
from enum import StrEnum

LOG_FORMAT_DEBUG = "%(levelname)s - %(message)s - %(pathname)s - %(funcName)s %(lineno)d"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"

class LogLevels(StrEnum):
    debug = "DEBUG"
    info = "INFO"
    warn = "WARNING"
    error = "ERROR"

def configure_logging(log_level: str = LogLevels.error):
    log_level = str(log_level).upper()
    valid_levels = [level.value for level in LogLevels]

    if log_level not in valid_levels:
        logging.basicConfig(level=logging.ERROR, format=LOG_FORMAT)
        logging.warning(f"Unknown log level {log_level!r}, falling back to ERROR")
        return

    if log_level == LogLevels.debug:
        logging.basicConfig(level=logging.DEBUG, format=LOG_FORMAT_DEBUG)
        return

    logging.basicConfig(level=getattr(logging, log_level), format=LOG_FORMAT)
