import logging
import sys

from app.config import settings

logger = logging.getLogger("folderdeck")

formatter = logging.Formatter(
    fmt="%(asctime)s - %(levelname)s - %(name)s - %(message)s"
)

stream_handler = logging.StreamHandler(sys.stdout)
stream_handler.setFormatter(formatter)
handlers = [stream_handler]

if settings.LOG_FILE:
    file_handler = logging.FileHandler(settings.LOG_FILE)
    file_handler.setFormatter(formatter)
    handlers.append(file_handler)

logger.handlers = handlers

logger.setLevel(settings.LOG_LEVEL)

logger.info("Logger initialized")
