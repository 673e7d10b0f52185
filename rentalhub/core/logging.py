# rentalhub/core/logging.py
import logging
import sys
import colorlog

LOG_FORMAT = "%(log_color)s%(asctime)s %(levelname)-8s [%(name)s]%(reset)s %(message)s"

LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "bold_red",
}


def configure_logging(level=logging.INFO, *, stream=None):
    """
    Install one colored stdout handler on the root logger.
    Colors are dropped automatically when the stream is not a TTY (docker logs, CI).
    """
    stream = stream or sys.stdout
    handler = colorlog.StreamHandler(stream)
    handler.setFormatter(
        colorlog.ColoredFormatter(
            LOG_FORMAT,
            datefmt="%H:%M:%S",
            log_colors=LOG_COLORS,
            stream=stream,
        )
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [handler]

    # Uvicorn follows the app level; the Mongo driver only speaks up on warnings
    for name in ("uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).setLevel(level)
    for name in ("pymongo", "motor"):
        logging.getLogger(name).setLevel(logging.WARNING)
