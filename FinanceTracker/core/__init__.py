"""
Core package for FinanceTracker providing the sync machinery.

This package includes:

- :mod:`FinanceTracker.core.auth` – Google OAuth2 identity provider and the signed-in principal.
- :mod:`FinanceTracker.core.bindings` – Durable user to spreadsheet bindings in SQLite.
- :mod:`FinanceTracker.core.rates` – Exchange rate and asset price lookups with fallbacks.
- :mod:`FinanceTracker.core.schema` – Sheet layout and row codecs.
- :mod:`FinanceTracker.core.service` – Google Sheets API access.
- :mod:`FinanceTracker.core.signals` – Application-wide Qt signals.
- :mod:`FinanceTracker.core.sync` – The sync client: authentication lifecycle, provisioning, push and pull.
"""
