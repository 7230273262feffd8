"""
FinanceTracker data package: records and analytics.

This package provides:

- :mod:`FinanceTracker.data.model` – Record dataclasses and the :class:`FinanceTracker.data.model.Dataset` aggregate.
- :mod:`FinanceTracker.data.data` – pandas views and summaries over a dataset.
"""
