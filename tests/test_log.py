# tests/test_log.py
"""
Tests for FinanceTracker.log.log
(covers TankHandler, the Qt bridge and the setup helpers).

Run:
    python -m unittest tests.test_log
"""
import logging
import time
from typing import List

from PySide6.QtCore import QtMsgType

from FinanceTracker.core.signals import signals
from FinanceTracker.log.log import (
    TankHandler,
    get_tank_handler,
    qt_message_handler,
    set_logging_level,
    setup_logging,
)
from tests.base import BaseTestCase


class LogModuleTests(BaseTestCase):
    """
    Each test starts with a fresh root logger configured by
    setup_logging(enable_stream_handler=False).
    """

    def setUp(self) -> None:
        super().setUp()
        logging.disable(logging.NOTSET)

        self.tank: TankHandler = setup_logging(enable_stream_handler=False,
                                               enable_qt_handler=False,
                                               log_level=logging.DEBUG)
        self.root_logger = logging.getLogger()

    def test_setup_logging_installs_tank_handler_only(self):
        self.assertEqual([type(h) for h in self.root_logger.handlers], [TankHandler])
        self.assertIs(get_tank_handler(), self.tank)

    def test_setup_logging_with_stream_handler(self):
        tank = setup_logging(enable_stream_handler=True, enable_qt_handler=False, log_level=logging.INFO)
        self.assertEqual(len(self.root_logger.handlers), 2)
        self.assertIs(get_tank_handler(), tank)
        self.assertTrue(all(h.level == logging.INFO for h in self.root_logger.handlers))

    def test_tank_bulk_append_speed(self):
        self.tank.clear_logs()
        n = 10_000
        t0 = time.perf_counter()
        for i in range(n):
            logging.debug('bulk-%05d', i)
        elapsed = time.perf_counter() - t0

        self.assertLessEqual(elapsed, 2.0, f'logging {n} messages took {elapsed:.2f}s')
        self.assertEqual(len(self.tank.tank), n)

    def test_tank_is_bounded(self):
        tank = TankHandler(size=3)
        for i in range(5):
            tank.emit(logging.makeLogRecord({'msg': f'm{i}', 'levelno': logging.INFO}))
        self.assertEqual(tank.get_logs(), ['m2', 'm3', 'm4'])

    def test_tank_handler_stores_and_filters(self):
        logging.debug('dbg message')
        logging.error('err message')
        self.assertEqual(len(self.tank.tank), 2)
        errs: List[str] = self.tank.get_logs(logging.ERROR)
        self.assertEqual(len(errs), 1)
        self.assertIn('err message', errs[0])
        self.tank.clear_logs()
        self.assertEqual(len(self.tank.tank), 0)

    def test_emit_triggers_show_logs_on_error(self):
        triggered: List[bool] = []

        def _slot() -> None:
            triggered.append(True)

        signals.showLogs.connect(_slot)
        try:
            logging.info('no signal')
            self.assertFalse(triggered)
            logging.error('should emit signal')
            self.assertTrue(triggered)
        finally:
            signals.showLogs.disconnect(_slot)

    def test_set_logging_level_accepts_valid_levels(self):
        set_logging_level(logging.ERROR)
        self.assertEqual(self.root_logger.level, logging.ERROR)
        for h in self.root_logger.handlers:
            self.assertEqual(h.level, logging.ERROR)

    def test_set_logging_level_rejects_non_int(self):
        with self.assertRaises(ValueError):
            set_logging_level('INFO')  # type: ignore[arg-type]
        with self.assertRaises(ValueError):
            set_logging_level(True)  # type: ignore[arg-type]

    def test_set_logging_level_rejects_unknown(self):
        with self.assertRaises(ValueError):
            set_logging_level(1234)

    def test_qt_message_handler_maps_to_logging(self):
        qt_message_handler(QtMsgType.QtInfoMsg, None, 'Qt info\n')
        qt_message_handler(QtMsgType.QtCriticalMsg, None, 'Qt critical')
        self.assertTrue(any('Qt info' in m for m in self.tank.get_logs(logging.INFO)))
        self.assertTrue(any('Qt critical' in m for m in self.tank.get_logs(logging.ERROR)))

    def test_qt_message_handler_fatal_exits(self):
        with self.assertRaises(SystemExit):
            qt_message_handler(QtMsgType.QtFatalMsg, None, 'fatal')

    def test_status_exception_is_logged(self):
        from FinanceTracker.status import status
        status.SyncError('Push failed: HTTP 500')
        self.assertTrue(any('Push failed: HTTP 500' in m for m in self.tank.get_logs(logging.ERROR)))
