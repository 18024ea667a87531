# Import necessary modules
# ------------------------------------------------------------------------------------------------ #
import logging
import sys
from typing import Optional
# ------------------------------------------------------------------------------------------------ #

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Send the 'anomalypy' log records (solver warnings, redraw debug lines) to stdout and,
    optionally, to a file. Handlers from a previous call are replaced.

    Returns
    -------
    logging.Logger: The package logger.
    """
    logger = logging.getLogger("anomalypy")
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))

    formatter = logging.Formatter(LOG_FORMAT, datefmt='%H:%M:%S')
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger
