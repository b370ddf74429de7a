"""Contains the package-wide logger for TabProfiler and its per-module children."""
import logging
import sys
import threading

LOGGER_NAME = "TabProfiler"
LOG_FORMAT = "%(levelname)s:%(name)s: %(message)s"

_setup_lock = threading.Lock()


class _StdoutHandler(logging.StreamHandler):
    """Stream handler writing to the current sys.stdout, even once replaced."""

    def __init__(self) -> None:
        super().__init__(stream=sys.stdout)
        self.setFormatter(logging.Formatter(LOG_FORMAT))

    def emit(self, record: logging.LogRecord) -> None:
        self.stream = sys.stdout
        super().emit(record)


def _is_set_up(logger: logging.Logger) -> bool:
    return any(isinstance(handler, _StdoutHandler) for handler in logger.handlers)


def get_logger() -> logging.Logger:
    """
    Return the TabProfiler logger, set up on first use.

    Set up adds one stdout handler and sets the INFO level; later calls
    leave the level alone.

    :return: the package logger
    :rtype: logging.Logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    if _is_set_up(logger):
        return logger

    with _setup_lock:
        # another thread may have finished the set up while we waited
        if not _is_set_up(logger):
            logger.addHandler(_StdoutHandler())
            logger.setLevel(logging.INFO)
    return logger


def set_verbosity(level):
    """
    Set verbosity level for TabProfiler logger.

    :param level: level from the logging module, e.g. logging.WARNING,
        or its name
    :type level: int or str
    """
    get_logger().setLevel(level)


def get_child_logger(name):
    """
    Return the logger of a TabProfiler module.

    tabprofiler.profilers.profile_builder logs as
    TabProfiler.profilers.profile_builder.

    :param name: __name__ of the module
    :type name: str
    :return: child of the package logger
    :rtype: logging.Logger
    """
    prefix = "tabprofiler."
    if name.startswith(prefix):
        name = name[len(prefix) :]
    return get_logger().getChild(name)
