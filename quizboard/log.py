import logging
import sys

from quizboard.config import settings

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_configured = False


def _configure() -> None:
    global _configured
    if _configured:
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_FORMAT))
    root = logging.getLogger("quizboard")
    root.addHandler(handler)
    root.setLevel(settings.LOG_LEVEL.upper())
    root.propagate = False
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """
    Returns a logger under the quizboard namespace.

    Parameters:
        name (str): Usually the caller's __name__.

    Returns:
        logging.Logger: The configured logger.
    """
    _configure()
    if not name.startswith("quizboard"):
        name = f"quizboard.{name}"
    return logging.getLogger(name)
