import logging


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(lineno)d - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(log_level: str = "INFO", logger_name: str = "smart_liveness") -> logging.Logger:
    """Console logging for the package logger.

    Safe to call more than once: the handler is only added the first time,
    later calls just change the level.
    """
    level = getattr(logging, str(log_level).upper(), logging.INFO)
    logger = logging.getLogger(logger_name)
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)
    for h in logger.handlers:
        h.setLevel(level)
    return logger
