"""Logging setup for FinanceTracker.

Routes everything through the root logger: a stdout stream handler, an in-memory
:class:`TankHandler` the application can browse by level, and a Qt message
handler that forwards Qt's own diagnostics into Python logging.
"""
import collections
import logging
import sys
from typing import List, Optional

from PySide6.QtCore import QtMsgType, qInstallMessageHandler

from ..core.signals import signals

LOG_LEVEL = logging.DEBUG
LOG_FORMAT = '[%(asctime)s] <%(module)s> %(levelname)s:  %(message)s'
LOG_DATEFMT = '%Y-%m-%d %H:%M:%S'

#: Oldest records are dropped once the tank holds this many
TANK_SIZE = 50_000

LEVELS = (
    logging.DEBUG,
    logging.INFO,
    logging.WARNING,
    logging.ERROR,
    logging.CRITICAL,
)

QT_LEVELS = {
    QtMsgType.QtDebugMsg: logging.DEBUG,
    QtMsgType.QtInfoMsg: logging.INFO,
    QtMsgType.QtWarningMsg: logging.WARNING,
    QtMsgType.QtCriticalMsg: logging.ERROR,
    QtMsgType.QtFatalMsg: logging.CRITICAL,
}


def set_logging_level(level):
    """
    Sets the logging level of the root logger and all of its handlers.

    Args:
        level (int): One of the standard logging levels.

    Raises:
        ValueError: If level is not an int or not a standard level.
    """
    if not isinstance(level, int) or isinstance(level, bool):
        raise ValueError('Logging level must be an integer.')
    if level not in LEVELS:
        raise ValueError('Invalid logging level. Use one of the standard logging levels, e.g., logging.DEBUG.')

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers:
        handler.setLevel(level)


def qt_message_handler(mode, context, message):
    """
    Forwards a Qt message to the ``Qt`` logger. Fatal messages exit the process.
    """
    level = QT_LEVELS.get(mode, logging.WARNING)
    logging.getLogger('Qt').log(level, message.strip())
    if mode == QtMsgType.QtFatalMsg:
        sys.exit(1)


def get_tank_handler() -> Optional['TankHandler']:
    """Return the tank installed on the root logger, if any."""
    return next((h for h in logging.getLogger().handlers if isinstance(h, TankHandler)), None)


def setup_logging(enable_stream_handler=True, enable_qt_handler=True, log_level=LOG_LEVEL):
    """
    Configures the root logger. Existing handlers are removed first.

    Args:
        enable_stream_handler (bool): Whether to log to stdout.
        enable_qt_handler (bool): Whether to route Qt messages through Python logging.
        log_level (int): Level applied to the root logger and its handlers.

    Returns:
        TankHandler: The installed in-memory handler.
    """
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)

    if enable_stream_handler:
        stream_handler = logging.StreamHandler(sys.stdout)
        stream_handler.setFormatter(formatter)
        root_logger.addHandler(stream_handler)

    tank_handler = TankHandler()
    tank_handler.setFormatter(formatter)
    root_logger.addHandler(tank_handler)

    set_logging_level(log_level)

    if enable_qt_handler:
        qInstallMessageHandler(qt_message_handler)

    return tank_handler


class TankHandler(logging.Handler):
    """
    Keeps formatted log messages in memory so they can be shown on demand.

    Error and critical records emit ``signals.showLogs``.

    Attributes:
        tank (collections.deque[tuple[int, str]]): ``(level, message)`` pairs, oldest first.
    """

    def __init__(self, size=TANK_SIZE):
        super().__init__()
        self.tank = collections.deque(maxlen=size)

    def emit(self, record):
        try:
            self.tank.append((record.levelno, self.format(record)))
        except Exception:
            self.handleError(record)
            return

        if record.levelno >= logging.ERROR:
            signals.showLogs.emit()

    def get_logs(self, level=logging.NOTSET) -> List[str]:
        """
        Returns stored messages at or above level.

        Args:
            level (int, optional): The minimum logging level. Defaults to logging.NOTSET.
        """
        return [msg for lvl, msg in self.tank if lvl >= level]

    def clear_logs(self):
        self.tank.clear()
