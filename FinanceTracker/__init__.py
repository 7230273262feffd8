"""
FinanceTracker: Google Sheets sync client for a personal finance tracker.

This package provides:

- :mod:`FinanceTracker.core` – Authentication, spreadsheet provisioning, and push/pull sync against Google Sheets.
- :mod:`FinanceTracker.data` – Record dataclasses, the :class:`FinanceTracker.data.model.Dataset` aggregate, and pandas views.
- :mod:`FinanceTracker.settings` – Client secret and Sheets API configuration.
- :mod:`FinanceTracker.status` – Status codes and the exceptions raised by the package.
- :mod:`FinanceTracker.log` – Logging setup with an in-memory log tank.

Construct a :class:`FinanceTracker.core.sync.SyncClient` to sign in and sync a dataset.
"""

import sys

# Fail on Python < 3.11
if not (sys.version_info.major == 3 and sys.version_info.minor >= 11):
    raise RuntimeError('FinanceTracker requires Python 3.11 or higher.')

__version__ = '0.1.0'
__license__ = 'GPL-3.0'
__description__ = 'FinanceTracker: Google Sheets sync client for a personal finance tracker.'

from .log import log

log.setup_logging()
