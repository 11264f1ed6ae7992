"""Root logger configuration, applied once at startup."""

import logging
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)8s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "INFO") -> None:
    """Send all log records at ``level`` and above to stdout.

    Existing root handlers are replaced so repeated calls do not duplicate output.
    """
    root = logging.getLogger()
    root.setLevel(level.upper())
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    root.addHandler(handler)
