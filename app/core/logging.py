import logging
import sys

from pythonjsonlogger import jsonlogger


def setup_logging(level: str = "INFO", json_output: bool = False) -> None:
    """
    Configure the root logger to write to stdout.

    JSON lines are used when ``json_output`` is set so log shippers can parse
    the ``extra`` fields attached by the request middleware.
    """
    handler = logging.StreamHandler(sys.stdout)
    if json_output:
        formatter: logging.Formatter = jsonlogger.JsonFormatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s",
            rename_fields={"asctime": "timestamp", "levelname": "level"},
        )
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level.upper())

    # Remove existing handlers to avoid duplicates
    for h in root_logger.handlers[:]:
        root_logger.removeHandler(h)

    root_logger.addHandler(handler)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("pymongo").setLevel(logging.WARNING)
