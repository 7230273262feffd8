"""Test suite for FinanceTracker.

Enables Qt's standard-path test mode before any FinanceTracker module creates its
settings, so tests never touch the user's real application data.
"""
from PySide6 import QtCore

QtCore.QStandardPaths.setTestModeEnabled(True)
