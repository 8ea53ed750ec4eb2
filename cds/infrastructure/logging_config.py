import logging
import sys
from typing import Optional

LIBRARY_LOGGERS = ("urllib3", "requests")


def configure_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    library_log_level: str = "WARNING",
) -> None:
    """
    Configure logging for the deployment tools.

    The ``cds`` loggers run at ``log_level``. The root logger, and with it
    every third-party logger, runs at ``library_log_level`` so HTTP
    connection chatter stays out of deployment output.

    Args:
        log_level: Level for the ``cds.*`` loggers (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path to write logs to
        library_log_level: Level for the root logger and third-party loggers
    """
    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(library_log_level.upper())
    root_logger.handlers = []

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    for name in LIBRARY_LOGGERS:
        logging.getLogger(name).setLevel(library_log_level.upper())

    cds_logger = logging.getLogger("cds")
    cds_logger.setLevel(log_level.upper())
    cds_logger.debug(
        "Logging configured: cds=%s, libraries=%s, file=%s",
        log_level,
        library_log_level,
        log_file,
    )
