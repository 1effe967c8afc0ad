import logging

from config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOGGER_NAME = "renta"


def setup_logger() -> logging.Logger:
     logger = logging.getLogger(LOGGER_NAME)

     # Avoid duplicate handlers on uvicorn reload
     if logger.handlers:
          return logger

     logger.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))

     stream_handler = logging.StreamHandler()
     stream_handler.setFormatter(logging.Formatter(LOG_FORMAT))
     logger.addHandler(stream_handler)

     return logger


logger = setup_logger()
