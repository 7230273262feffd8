"""Sync client mirroring the finance tracker's dataset into a Google spreadsheet.

:class:`SyncClient` owns the authentication lifecycle, resolves (or creates) the
spreadsheet bound to the signed-in user, and implements the two sync verbs:

- :meth:`SyncClient.sync_to_sheets` replaces every data row in the spreadsheet
  with the local dataset (clear, then write).
- :meth:`SyncClient.load_from_sheets` reads every data row back into a
  :class:`~FinanceTracker.data.model.Dataset`.

The client is a plain object constructed by the application and passed to
whoever needs it. Session changes arrive from the identity provider's
``sessionChanged`` signal and are applied by :meth:`SyncClient.handle_session_changed`.

Calls are blocking and not serialised; the caller must not run push, pull or
provisioning concurrently against the same spreadsheet.
"""
import enum
import logging
from typing import Any, Callable, Optional

from PySide6 import QtCore

from .auth import IdentityProvider, Principal
from .bindings import BindingStore
from .schema import SCHEMAS, SHEET_TITLES
from .service import REMOTE_ERRORS, SheetsStore, describe_error
from .signals import signals
from ..data.model import Dataset
from ..settings.lib import Config
from ..status import status

SPREADSHEET_URL = 'https://docs.google.com/spreadsheets/d/{spreadsheet_id}/edit'


class ClientState(enum.StrEnum):
    """Authentication lifecycle states."""
    Uninitialized = 'uninitialized'
    Ready = 'ready'
    Authenticated = 'authenticated'


def spreadsheet_title(principal: Principal) -> str:
    return f'Finance Tracker - {principal.display_name}'


class SyncClient(QtCore.QObject):
    """Authentication state machine and push/pull sync against the user's spreadsheet.

    Args:
        config: Static client credentials and scopes.
        provider: Identity provider the client signs in with.
        bindings: Durable user → spreadsheet binding storage.
        store_factory: Callable building a :class:`~FinanceTracker.core.service.SheetsStore`
            from the provider's credentials. Defaults to :meth:`SheetsStore.from_credentials`.
        parent: Optional Qt parent.

    Signals:
        stateChanged (str): Emitted with the new :class:`ClientState` value.
        signedIn (object): Emitted with the :class:`~FinanceTracker.core.auth.Principal` once bound.
        signedOut (): Emitted after the session was cleared.
        errorOccurred (object): Emitted with the exception when a signal-driven transition fails.
    """
    stateChanged = QtCore.Signal(str)
    signedIn = QtCore.Signal(object)
    signedOut = QtCore.Signal()
    errorOccurred = QtCore.Signal(object)

    def __init__(
            self,
            config: Config,
            provider: IdentityProvider,
            bindings: BindingStore,
            store_factory: Optional[Callable[[Any], SheetsStore]] = None,
            parent: Optional[QtCore.QObject] = None,
    ) -> None:
        super().__init__(parent)
        self.config = config
        self.provider = provider
        self.bindings = bindings
        self._store_factory = store_factory or (lambda creds: SheetsStore.from_credentials(creds, config))

        self._state: ClientState = ClientState.Uninitialized
        self._user: Optional[Principal] = None
        self._spreadsheet_id: Optional[str] = None
        self._store: Optional[SheetsStore] = None

    @property
    def state(self) -> ClientState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state != ClientState.Uninitialized

    @property
    def is_signed_in(self) -> bool:
        return self._state == ClientState.Authenticated

    @property
    def user(self) -> Optional[Principal]:
        return self._user

    @property
    def spreadsheet_id(self) -> Optional[str]:
        return self._spreadsheet_id

    @property
    def spreadsheet_url(self) -> Optional[str]:
        """Browser URL of the bound spreadsheet, or None when unbound."""
        if not self._spreadsheet_id:
            return None
        return SPREADSHEET_URL.format(spreadsheet_id=self._spreadsheet_id)

    def _set_state(self, state: ClientState) -> None:
        if state == self._state:
            return
        logging.debug(f'Sync client state: {self._state.value} -> {state.value}')
        self._state = state
        self.stateChanged.emit(state.value)

    def init(self) -> None:
        """Bootstrap the identity provider and restore an already-active session.

        Raises:
            status.InitError: If the provider rejects the configuration.
            status.ProvisioningError: If restoring the session had to create a spreadsheet and failed.
        """
        if self._state != ClientState.Uninitialized:
            logging.debug('Sync client already initialized.')
            return

        try:
            self.provider.bootstrap(self.config)
        except Exception as ex:
            raise status.InitError(f'Bootstrap failed: {ex}') from ex

        self._set_state(ClientState.Ready)
        self.provider.sessionChanged.connect(self._on_session_changed)

        user = self.provider.current_user()
        if user is not None:
            logging.debug(f'Provider reports an active session for "{user.user_id}".')
            self.handle_session_changed(user)

    def sign_in(self) -> None:
        """Start the provider's interactive consent flow.

        The authenticated transition happens when the provider announces the new session.

        Raises:
            status.NotReadyError: If :meth:`init` has not completed.
            status.AuthenticationError: If the consent flow fails.
        """
        if self._state == ClientState.Uninitialized:
            raise status.NotReadyError('Call init() before signing in.')

        try:
            self.provider.sign_in()
        except status.BaseStatusException:
            raise
        except Exception as ex:
            raise status.AuthenticationError(f'Sign-in failed: {ex}') from ex

    def sign_out(self) -> None:
        """Sign out at the provider and clear the local session.

        The session and spreadsheet id are cleared even if the provider fails.
        The durable binding is kept for the next sign-in.

        Raises:
            status.NotReadyError: If :meth:`init` has not completed.
            status.AuthenticationError: If the provider's sign-out fails.
        """
        if self._state == ClientState.Uninitialized:
            raise status.NotReadyError('Call init() before signing out.')

        try:
            self.provider.sign_out()
        except status.BaseStatusException:
            raise
        except Exception as ex:
            raise status.AuthenticationError(f'Sign-out failed: {ex}') from ex
        finally:
            self._handle_sign_out()

    def handle_session_changed(self, principal: Optional[Principal]) -> None:
        """Apply a session change reported by the identity provider.

        Args:
            principal: The signed-in account, or None when the session ended.
        """
        if principal is None:
            self._handle_sign_out()
        else:
            self._handle_sign_in(principal)

    @QtCore.Slot(object)
    def _on_session_changed(self, principal: Optional[Principal]) -> None:
        try:
            self.handle_session_changed(principal)
        except status.BaseStatusException as ex:
            self.errorOccurred.emit(ex)
        except Exception as ex:
            logging.exception('Session change could not be applied.')
            self.errorOccurred.emit(ex)

    def _handle_sign_in(self, principal: Principal) -> None:
        if self._user == principal and self._spreadsheet_id:
            logging.debug(f'Session for "{principal.user_id}" is already active.')
            return

        if self._user is not None and self._user.user_id != principal.user_id:
            self._handle_sign_out()

        self._user = principal
        self._set_state(ClientState.Authenticated)

        saved_id = self.bindings.get_spreadsheet_id(principal.user_id)
        if saved_id:
            logging.info(f'Using spreadsheet "{saved_id}" for "{principal.user_id}".')
            self._spreadsheet_id = saved_id
        else:
            logging.info(f'No spreadsheet bound to "{principal.user_id}"; creating one.')
            self.create_spreadsheet()

        self.signedIn.emit(principal)

    def _handle_sign_out(self) -> None:
        self._user = None
        self._spreadsheet_id = None
        self._clear_store()
        if self._state == ClientState.Authenticated:
            self._set_state(ClientState.Ready)
            self.signedOut.emit()

    def _get_store(self) -> SheetsStore:
        if self._store is None:
            self._store = self._store_factory(self.provider.credentials)
        return self._store

    def _clear_store(self) -> None:
        if self._store is not None:
            self._store.close()
        self._store = None

    def _require_binding(self) -> str:
        if not self._spreadsheet_id:
            raise status.NotBoundError
        return self._spreadsheet_id

    def create_spreadsheet(self) -> str:
        """Create the finance spreadsheet for the signed-in user and bind it.

        Returns:
            The new spreadsheet id.

        Raises:
            status.ProvisioningError: If nobody is signed in, or the create or header call fails.
        """
        if self._user is None:
            raise status.ProvisioningError('Nobody is signed in.')

        title = spreadsheet_title(self._user)
        try:
            spreadsheet_id = self._get_store().create(title, SHEET_TITLES)
        except REMOTE_ERRORS as ex:
            raise status.ProvisioningError(f'Could not create "{title}": {describe_error(ex)}') from ex

        self._spreadsheet_id = spreadsheet_id
        self.bindings.set_spreadsheet_id(self._user.user_id, spreadsheet_id)
        logging.info(f'Created spreadsheet "{title}" ({spreadsheet_id}).')
        signals.spreadsheetProvisioned.emit(spreadsheet_id)

        self.initialize_headers()
        return spreadsheet_id

    def initialize_headers(self) -> None:
        """Write the header row of every sheet.

        Raises:
            status.NotBoundError: If no spreadsheet is bound.
            status.ProvisioningError: If the write fails.
        """
        spreadsheet_id = self._require_binding()
        data = [{'range': s.header_range, 'values': [s.headers]} for s in SCHEMAS]
        try:
            self._get_store().batch_update(spreadsheet_id, data, value_input_option='RAW')
        except REMOTE_ERRORS as ex:
            raise status.ProvisioningError(f'Could not write headers: {describe_error(ex)}') from ex
        logging.debug(f'Headers written to {len(data)} sheets.')

    def sync_to_sheets(self, dataset: Dataset) -> bool:
        """Replace the spreadsheet's data rows with the dataset.

        Clears rows 2 and below of every sheet, then writes every collection in one batch.
        A failure between the two calls leaves the sheets empty.

        Args:
            dataset: The complete local dataset.

        Returns:
            True once both calls succeeded.

        Raises:
            status.NotBoundError: If no spreadsheet is bound.
            status.SyncError: If the clear or write call fails.
        """
        spreadsheet_id = self._require_binding()
        signals.dataAboutToBeSynced.emit()

        data = [
            {'range': s.data_range, 'values': [s.encode(r) for r in getattr(dataset, s.collection)]}
            for s in SCHEMAS
        ]
        ranges = [s.data_range for s in SCHEMAS]

        try:
            store = self._get_store()
            store.batch_clear(spreadsheet_id, ranges)
            store.batch_update(spreadsheet_id, data, value_input_option='RAW')
        except REMOTE_ERRORS as ex:
            raise status.SyncError(f'Push failed: {describe_error(ex)}') from ex

        logging.info(
            f'Pushed {sum(len(d["values"]) for d in data)} row(s) to spreadsheet "{spreadsheet_id}".'
        )
        signals.dataSynced.emit()
        return True

    def load_from_sheets(self) -> Dataset:
        """Read every data row back into a dataset.

        Returns:
            The reconstructed dataset. Sheets without data rows give empty collections.

        Raises:
            status.NotBoundError: If no spreadsheet is bound.
            status.SyncError: If the read call fails or returns an unexpected response.
            status.MalformedRowError: If a row cannot be decoded.
        """
        spreadsheet_id = self._require_binding()
        signals.dataAboutToBeLoaded.emit()

        ranges = [s.data_range for s in SCHEMAS]
        try:
            value_ranges = self._get_store().batch_get(spreadsheet_id, ranges)
        except REMOTE_ERRORS as ex:
            raise status.SyncError(f'Load failed: {describe_error(ex)}') from ex

        if len(value_ranges) != len(SCHEMAS):
            raise status.SyncError(
                f'Load failed: expected {len(SCHEMAS)} ranges, got {len(value_ranges)}.'
            )

        dataset = Dataset()
        for schema, value_range in zip(SCHEMAS, value_ranges):
            rows = (value_range or {}).get('values') or []
            setattr(dataset, schema.collection, schema.decode_rows(rows))

        logging.info(f'Loaded dataset from spreadsheet "{spreadsheet_id}".')
        signals.dataLoaded.emit(dataset)
        return dataset
