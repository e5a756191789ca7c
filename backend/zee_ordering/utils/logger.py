import logging
import sys

from zee_ordering.config import settings

_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"


def get_logger(name: str) -> logging.Logger:
    """
    Return the ``zee_ordering.<name>`` logger writing to stdout.
    The handler is attached once, to the package root logger.
    """
    root = logging.getLogger("zee_ordering")
    if not root.handlers:
        h = logging.StreamHandler(sys.stdout)
        h.setFormatter(logging.Formatter(_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        root.addHandler(h)
        root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
        root.propagate = False
    return root.getChild(name)
