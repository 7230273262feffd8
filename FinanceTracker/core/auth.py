"""
Google OAuth2 identity provider.

Provides the signed-in :class:`Principal`, the :class:`IdentityProvider` interface
the sync client depends on, and :class:`GoogleIdentityProvider`, which runs the
installed-app consent flow, stores credentials on disk, and announces session
changes through the ``sessionChanged`` Qt signal.
"""

import dataclasses
import json
import logging
import pathlib
from typing import Any, Optional, Union

import google.auth.exceptions
import google.auth.transport.requests
import google.oauth2.credentials
import google_auth_oauthlib.flow
from PySide6 import QtCore
from googleapiclient.discovery import build

from ..settings.lib import Config
from ..status import status


@dataclasses.dataclass(frozen=True)
class Principal:
    """The signed-in Google account."""
    user_id: str
    display_name: str
    email: str = ''
    avatar_url: str = ''


class IdentityProvider(QtCore.QObject):
    """
    Interface of an identity provider.

    Signals:
        sessionChanged (object): Emitted with a :class:`Principal` on sign-in and ``None`` on sign-out.
    """
    sessionChanged = QtCore.Signal(object)

    def bootstrap(self, config: Config) -> None:
        """Register credentials and restore any existing session."""
        raise NotImplementedError

    def is_signed_in(self) -> bool:
        return self.current_user() is not None

    def current_user(self) -> Optional[Principal]:
        raise NotImplementedError

    @property
    def credentials(self) -> Any:
        raise NotImplementedError

    def sign_in(self) -> None:
        """Run the interactive consent flow; emits ``sessionChanged`` on success."""
        raise NotImplementedError

    def sign_out(self) -> None:
        """End the session; emits ``sessionChanged(None)``."""
        raise NotImplementedError


def save_creds(creds: google.oauth2.credentials.Credentials, path: pathlib.Path) -> None:
    """
    Save OAuth2 credentials to the token file.

    Args:
        creds (google.oauth2.credentials.Credentials): Credentials to save.
        path (pathlib.Path): Destination file.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as token_file:
        token_file.write(creds.to_json())

    logging.debug(f'Credentials saved to {path}.')


def fetch_profile(creds: Any) -> Principal:
    """
    Query the OAuth2 userinfo endpoint for the signed-in account.

    Args:
        creds: Authorized credentials carrying the userinfo scopes.

    Returns:
        Principal: The account's id, name, email and avatar.
    """
    with build('oauth2', 'v2', credentials=creds, cache_discovery=False) as oauth2:
        info = oauth2.userinfo().get().execute()
    logging.debug(f'Fetched profile for user "{info.get("id")}".')
    return Principal(
        user_id=str(info['id']),
        display_name=info.get('name', ''),
        email=info.get('email', ''),
        avatar_url=info.get('picture', ''),
    )


class GoogleIdentityProvider(IdentityProvider):
    """Identity provider backed by google-auth installed-app credentials.

    Args:
        creds_path: Where credentials are stored. Defaults to the configured ``creds.json``.
        parent: Optional Qt parent.
    """

    def __init__(self, creds_path: Optional[Union[str, pathlib.Path]] = None,
                 parent: Optional[QtCore.QObject] = None) -> None:
        super().__init__(parent)
        if creds_path is None:
            from ..settings import lib
            creds_path = lib.settings.creds_path
        self.creds_path = pathlib.Path(creds_path)

        self._config: Optional[Config] = None
        self._creds: Optional[google.oauth2.credentials.Credentials] = None
        self._user: Optional[Principal] = None

    @property
    def credentials(self) -> Optional[google.oauth2.credentials.Credentials]:
        return self._creds

    def current_user(self) -> Optional[Principal]:
        return self._user

    def _flow(self) -> google_auth_oauthlib.flow.InstalledAppFlow:
        return google_auth_oauthlib.flow.InstalledAppFlow.from_client_config(
            self._config.client_config, scopes=list(self._config.scopes))

    def bootstrap(self, config: Config) -> None:
        """
        Register the client configuration and restore a stored session.

        Raises:
            ValueError: If the client configuration is unusable.
        """
        if not config.client_id:
            raise ValueError('The client_id is empty.')
        if not config.scopes:
            raise ValueError('No OAuth scopes are configured.')

        self._config = config
        try:
            self._flow()
        except ValueError:
            self._config = None
            raise

        creds = self._load_stored_creds()
        if creds is None:
            logging.debug('No stored session found.')
            return

        self._creds = creds
        self._user = fetch_profile(creds)
        logging.info(f'Restored session for "{self._user.email}".')

    def _load_stored_creds(self) -> Optional[google.oauth2.credentials.Credentials]:
        if not self.creds_path.exists():
            return None

        try:
            creds = google.oauth2.credentials.Credentials.from_authorized_user_file(str(self.creds_path))
        except (ValueError, json.JSONDecodeError) as ex:
            logging.error(f'Failed to load credentials, removing them: {ex}')
            self.creds_path.unlink(missing_ok=True)
            return None

        if not set(self._config.scopes).issubset(set(creds.scopes or [])):
            logging.debug('Stored credentials have mismatched scopes. Re-authentication required.')
            return None

        if creds.expired:
            if not creds.refresh_token:
                logging.debug('Stored credentials expired and cannot be refreshed.')
                return None
            logging.debug('Stored credentials expired; attempting refresh.')
            try:
                creds.refresh(google.auth.transport.requests.Request())
            except google.auth.exceptions.RefreshError as ex:
                logging.error(f'Refresh failed: {ex}; interactive sign-in required.')
                return None
            save_creds(creds, self.creds_path)

        return creds

    def sign_in(self) -> None:
        """
        Run the OAuth consent flow in the browser.

        Raises:
            RuntimeError: If the provider was not bootstrapped.
            status.AuthenticationError: If the flow fails or returns no valid credentials.
        """
        if self._config is None:
            raise RuntimeError('Provider is not bootstrapped')

        logging.debug('Starting new OAuth flow...')
        try:
            creds = self._flow().run_local_server(port=0)
        except Exception as ex:
            raise status.AuthenticationError(f'OAuth flow failed: {ex}') from ex

        if not creds or not creds.valid:
            raise status.AuthenticationError('Authentication was cancelled or no credentials obtained.')

        user = fetch_profile(creds)
        save_creds(creds, self.creds_path)
        self._creds = creds
        self._user = user
        logging.info(f'Signed in as "{self._user.email}".')
        self.sessionChanged.emit(self._user)

    def sign_out(self) -> None:
        """
        Delete stored credentials and end the session.
        """
        if self.creds_path.exists():
            logging.debug(f'Deleting {self.creds_path}...')
            self.creds_path.unlink()
        else:
            logging.debug('No credentials file found.')

        self._creds = None
        self._user = None
        logging.debug('Successfully signed out.')
        self.sessionChanged.emit(None)
