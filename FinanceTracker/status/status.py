"""Status definitions and exceptions for FinanceTracker.

This module provides:
    - Status: enumeration of possible client states and failures
    - STATUS_MESSAGE: user-facing messages for each status
    - get_message: retrieve the message for a status
    - BaseStatusException: base exception carrying a Status
    - Specific exceptions (e.g., SyncError) raised by the sync client and settings
"""
import enum
import logging
from typing import Dict


class Status(enum.StrEnum):
    """Enumeration of application status codes."""
    UnknownStatus = enum.auto()
    Okay = enum.auto()

    # Config status
    ClientSecretNotFound = enum.auto()
    ClientSecretInvalid = enum.auto()
    SheetsConfigInvalid = enum.auto()

    # Client lifecycle status
    InitFailed = enum.auto()
    NotReady = enum.auto()
    NotAuthenticated = enum.auto()

    # Spreadsheet status
    NotBound = enum.auto()
    ProvisioningFailed = enum.auto()
    SyncFailed = enum.auto()
    MalformedRow = enum.auto()


STATUS_MESSAGE: Dict[Status, str] = {
    Status.UnknownStatus: 'Unknown status. Please check the settings.',
    Status.Okay: 'Everything is okay.',

    Status.ClientSecretNotFound: 'Could not find the google client secret. Have you set up a valid Google client secret?',
    Status.ClientSecretInvalid: 'Could not verify the client secret. Have you set up a valid Google client secret?',
    Status.SheetsConfigInvalid: 'The Google Sheets configuration is incomplete, or contains invalid values.',

    Status.InitFailed: 'Could not initialize the Google API client. Please check your credentials.',
    Status.NotReady: 'The Google API client is not ready yet.',
    Status.NotAuthenticated: 'Authentication error. Try signing in again to your Google account.',

    Status.NotBound: 'No spreadsheet is linked to this account. Please sign in first.',
    Status.ProvisioningFailed: 'Could not create the finance spreadsheet.',
    Status.SyncFailed: 'Could not synchronize with Google Sheets. Please check your connection.',
    Status.MalformedRow: 'The spreadsheet contains a row that could not be read.',
}


def get_message(status: Status) -> str:
    """
    Get the message for a given status.

    Args:
        status (Status): The status enum.

    Returns:
        str: The message associated with the status.
    """
    return STATUS_MESSAGE.get(status, 'Unknown status')


class BaseStatusException(Exception):
    """Base exception for status-based errors in FinanceTracker.

    The exception logs itself and notifies :data:`FinanceTracker.core.signals.signals`
    when raised, so every failure is reported where it occurs.

    Attributes:
        status (Status): Status code associated with this error.
        status_message (str): User-facing message for the status.

    Args:
        message (str): Optional additional context for the error.
    """
    status = Status.UnknownStatus

    def __init__(self, message: str = None):
        self.status_message = get_message(self.status)
        exception_message = f'{self.status_message} {message}' if message else self.status_message
        super().__init__(exception_message)

        logging.error(exception_message)

        from ..core.signals import signals
        signals.error.emit(message or self.status_message)


class UnknownException(BaseStatusException):
    """Exception for an unknown error during status processing."""
    pass


class ClientSecretNotFoundException(BaseStatusException):
    """Exception raised when the Google OAuth client secret file cannot be found."""
    status = Status.ClientSecretNotFound


class ClientSecretInvalidException(BaseStatusException):
    """Exception raised when the Google OAuth client secret is invalid or malformed."""
    status = Status.ClientSecretInvalid


class SheetsConfigInvalidException(BaseStatusException):
    """Exception raised when sheets.json (api key, discovery docs, scopes) is invalid."""
    status = Status.SheetsConfigInvalid


class InitError(BaseStatusException):
    """Exception raised when the provider rejects bootstrap or credential registration."""
    status = Status.InitFailed


class NotReadyError(BaseStatusException):
    """Exception raised when an operation is attempted before the client was initialized."""
    status = Status.NotReady


class AuthenticationError(BaseStatusException):
    """Exception raised when the interactive sign-in or the sign-out fails at the provider."""
    status = Status.NotAuthenticated


class NotBoundError(BaseStatusException):
    """Exception raised when a sync is attempted with no spreadsheet bound."""
    status = Status.NotBound


class ProvisioningError(BaseStatusException):
    """Exception raised when the finance spreadsheet cannot be created or prepared."""
    status = Status.ProvisioningFailed


class SyncError(BaseStatusException):
    """Exception raised when a push or pull remote call fails."""
    status = Status.SyncFailed


class MalformedRowError(BaseStatusException):
    """Exception raised when a spreadsheet row cannot be decoded into a record."""
    status = Status.MalformedRow
