"""
Settings package: configuration paths, files, and the client configuration value.

This package provides:

- :mod:`FinanceTracker.settings.lib` – Settings management, validation, and :class:`FinanceTracker.settings.lib.Config`.
"""
