"""Application-wide Qt signals for FinanceTracker.

This module provides:
    - Signals: custom Qt signals for configuration changes, the sync lifecycle,
      and error reporting.
    - signals: the shared instance consumers connect to.
"""
import logging

from PySide6 import QtCore


class Signals(QtCore.QObject):
    """Centralized Qt signals for config, sync, and error events."""
    configSectionChanged = QtCore.Signal(str)

    spreadsheetProvisioned = QtCore.Signal(str)  # Spreadsheet id
    dataAboutToBeSynced = QtCore.Signal()
    dataSynced = QtCore.Signal()
    dataAboutToBeLoaded = QtCore.Signal()
    dataLoaded = QtCore.Signal(object)  # Dataset

    showLogs = QtCore.Signal()
    error = QtCore.Signal(str)

    def __init__(self):
        super().__init__()
        self._connect_signals()

    def _connect_signals(self):
        self.spreadsheetProvisioned.connect(
            lambda spreadsheet_id: logging.debug(f'Spreadsheet provisioned: {spreadsheet_id}'))
        self.dataSynced.connect(lambda: logging.debug('Dataset pushed to the spreadsheet.'))


signals = Signals()
