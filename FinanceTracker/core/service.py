"""Google Sheets API access for the finance spreadsheet.

:class:`SheetsStore` is the only place that talks to the Sheets v4 resource. It
exposes the four calls the sync client needs (create, batch get, batch clear
and batch update) and leaves error translation to the caller.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

import google.auth.exceptions
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from ..settings.lib import Config

#: Failures a remote call can raise: API errors, transport errors (timeouts, SSL) and auth errors
REMOTE_ERRORS = (HttpError, OSError, google.auth.exceptions.GoogleAuthError)


def describe_error(ex: Exception) -> str:
    """Return a short description of a remote failure, including the HTTP status when known."""
    if isinstance(ex, HttpError):
        stat: Optional[int] = ex.resp.status if ex.resp else None
        if stat == 404:
            return 'Spreadsheet not found (HTTP 404).'
        if stat == 403:
            return 'Access denied (HTTP 403).'
        return f'HTTP {stat}: {ex}'
    return str(ex) or ex.__class__.__name__


def get_service(creds: Any, config: Optional[Config] = None) -> Any:
    """
    Builds a Google Sheets service client.

    Args:
        creds: Authorized credentials.
        config: Client configuration providing the discovery document and API key.

    Returns:
        The Sheets API Resource.
    """
    kwargs: Dict[str, Any] = {'credentials': creds, 'cache_discovery': False}
    if config is not None:
        if config.discovery_url:
            kwargs['discoveryServiceUrl'] = config.discovery_url
        if config.api_key:
            kwargs['developerKey'] = config.api_key
    service = build('sheets', 'v4', **kwargs)
    logging.debug('Google Sheets service client created successfully.')
    return service


class SheetsStore:
    """Thin wrapper over a Sheets API resource.

    Args:
        service: A ``sheets`` v4 resource, as returned by :func:`get_service`.
    """

    def __init__(self, service: Any) -> None:
        self.service = service

    @classmethod
    def from_credentials(cls, creds: Any, config: Optional[Config] = None) -> 'SheetsStore':
        return cls(get_service(creds, config))

    def close(self) -> None:
        try:
            self.service.close()
        except Exception as ex:
            logging.debug(f'Failed closing Sheets service client: {ex}')

    def create(self, title: str, sheet_titles: Sequence[str]) -> str:
        """Create a spreadsheet with the given worksheets and return its id."""
        body = {
            'properties': {'title': title},
            'sheets': [{'properties': {'title': t}} for t in sheet_titles],
        }
        logging.debug(f'Creating spreadsheet "{title}" with sheets {list(sheet_titles)}.')
        result: Dict[str, Any] = self.service.spreadsheets().create(
            body=body,
            fields='spreadsheetId'
        ).execute()
        return result['spreadsheetId']

    def batch_get(self, spreadsheet_id: str, ranges: Sequence[str]) -> List[Dict[str, Any]]:
        """Read several ranges. Each value range may lack a ``values`` key when empty."""
        logging.debug(f'Fetching ranges {list(ranges)}.')
        result: Dict[str, Any] = self.service.spreadsheets().values().batchGet(
            spreadsheetId=spreadsheet_id,
            ranges=list(ranges),
            valueRenderOption='UNFORMATTED_VALUE',
        ).execute()
        return result.get('valueRanges', [])

    def batch_clear(self, spreadsheet_id: str, ranges: Sequence[str]) -> None:
        logging.debug(f'Clearing ranges {list(ranges)}.')
        self.service.spreadsheets().values().batchClear(
            spreadsheetId=spreadsheet_id,
            body={'ranges': list(ranges)}
        ).execute()

    def batch_update(self, spreadsheet_id: str, data: List[Dict[str, Any]],
                     value_input_option: str = 'RAW') -> None:
        """Write several ranges. ``data`` is a list of ``{'range': ..., 'values': [[...]]}``."""
        logging.debug(f'Writing {len(data)} range(s) with {value_input_option} input.')
        self.service.spreadsheets().values().batchUpdate(
            spreadsheetId=spreadsheet_id,
            body={'valueInputOption': value_input_option, 'data': data}
        ).execute()
