import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """Attaches console (and optional file) handlers to the reconlab logger once."""
    logger = logging.getLogger("reconlab")
    logger.setLevel(level)
    if not logger.handlers:
        formatter = logging.Formatter(LOG_FORMAT)
        handlers = [logging.StreamHandler()]
        if log_file:
            handlers.append(logging.FileHandler(log_file))
        for handler in handlers:
            handler.setFormatter(formatter)
            logger.addHandler(handler)
    return logger
