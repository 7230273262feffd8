"""
Logging subsystem for FinanceTracker.

Modules:

- :mod:`FinanceTracker.log.log` – Root logger setup, the in-memory :class:`TankHandler`, and the Qt message bridge.
"""
