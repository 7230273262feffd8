"""Settings library for the Google client configuration.

Provides:
    - Schema validation for sheets.json (api key, discovery documents, scopes).
    - Loading, saving, and reverting client_secret.json and sheets.json.
    - The :class:`Config` value handed to the sync client.
"""

import dataclasses
import json
import logging
import pathlib
import shutil
from typing import Dict, Any, Optional, List, Tuple

from PySide6 import QtCore

from ..status import status

app_name: str = 'FinanceTracker'

DEFAULT_DISCOVERY_DOCS: List[str] = ['https://sheets.googleapis.com/$discovery/rest?version=v4']
DEFAULT_SCOPES: List[str] = [
    'https://www.googleapis.com/auth/spreadsheets',
    'https://www.googleapis.com/auth/drive.file',
    'openid',
    'https://www.googleapis.com/auth/userinfo.email',
    'https://www.googleapis.com/auth/userinfo.profile',
]

SHEETS_CONFIG_SCHEMA: Dict[str, Any] = {
    'api_key': {'type': str, 'required': True},
    'discovery_docs': {'type': list, 'required': True, 'item_type': str, 'non_empty': True},
    'scopes': {'type': list, 'required': True, 'item_type': str, 'non_empty': True},
}

SECTIONS: List[str] = ['client_secret', 'sheets']


@dataclasses.dataclass(frozen=True)
class Config:
    """Static credentials and scope list used to bootstrap the Google client.

    Attributes:
        client_config: The client_secret.json payload (``installed`` or ``web`` section).
        api_key: API key passed to discovery-based service builds.
        discovery_docs: Discovery document URLs; the first one is used for the Sheets API.
        scopes: Requested OAuth scopes.
    """
    client_config: Dict[str, Any]
    api_key: str = ''
    discovery_docs: Tuple[str, ...] = tuple(DEFAULT_DISCOVERY_DOCS)
    scopes: Tuple[str, ...] = tuple(DEFAULT_SCOPES)

    @property
    def client_id(self) -> str:
        key = next((k for k in ('installed', 'web') if k in self.client_config), None)
        if not key:
            return ''
        return self.client_config[key].get('client_id', '')

    @property
    def discovery_url(self) -> Optional[str]:
        return self.discovery_docs[0] if self.discovery_docs else None


def _validate_sheets_config(data: Dict[str, Any]) -> None:
    """Validate the sheets.json configuration.

    Args:
        data: Mapping loaded from sheets.json.

    Raises:
        TypeError: If data or one of its values has the wrong type.
        ValueError: If a required key is missing or a list is empty.
    """
    logging.debug('Validating "sheets" section.')
    if not isinstance(data, dict):
        msg: str = 'sheets config must be a dict.'
        logging.error(msg)
        raise TypeError(msg)
    for key, specs in SHEETS_CONFIG_SCHEMA.items():
        if specs['required'] and key not in data:
            msg = f'sheets config is missing "{key}".'
            logging.error(msg)
            raise ValueError(msg)
        value = data[key]
        if not isinstance(value, specs['type']):
            msg = f'"{key}" must be {specs["type"]}, got {type(value)}.'
            logging.error(msg)
            raise TypeError(msg)
        if 'item_type' in specs:
            for item in value:
                if not isinstance(item, specs['item_type']):
                    msg = f'"{key}" items must be {specs["item_type"]}, got {type(item)}.'
                    logging.error(msg)
                    raise TypeError(msg)
        if specs.get('non_empty') and not value:
            msg = f'"{key}" must not be empty.'
            logging.error(msg)
            raise ValueError(msg)


class ConfigPaths:
    """Manage application file paths and ensure default templates and directories exist.

    This class initializes paths for configuration templates, credentials and the
    binding database. It verifies the presence of template assets and prepares
    default configuration files by copying them into the user data directory.
    """

    def __init__(self) -> None:
        QtCore.QCoreApplication.setApplicationName(app_name)
        QtCore.QCoreApplication.setOrganizationName('')
        logging.debug(f'Setting application name: {app_name}')

        p = QtCore.QStandardPaths.writableLocation(QtCore.QStandardPaths.AppDataLocation)
        app_data_dir = pathlib.Path(p)
        logging.debug(f'Using app data directory: {app_data_dir}')

        self.template_dir: pathlib.Path = pathlib.Path(__file__).parent.parent / 'config'
        self.client_secret_template: pathlib.Path = self.template_dir / 'client_secret.json.template'
        self.sheets_template: pathlib.Path = self.template_dir / 'sheets.json.template'

        self.config_dir: pathlib.Path = app_data_dir / 'config'
        self.auth_dir: pathlib.Path = self.config_dir / 'auth'
        self.db_dir: pathlib.Path = self.config_dir / 'db'

        self.client_secret_path: pathlib.Path = self.config_dir / 'client_secret.json'
        self.sheets_path: pathlib.Path = self.config_dir / 'sheets.json'
        self.creds_path: pathlib.Path = self.auth_dir / 'creds.json'
        self.db_path: pathlib.Path = self.db_dir / 'bindings.db'

        self._verify_and_prepare()

    def _verify_and_prepare(self) -> None:
        """Verify templates exist and prepare configuration directories and files.

        Raises:
            FileNotFoundError: If required template directory or file is missing.
        """
        logging.debug(f'Verifying required directories and templates in {self.template_dir}')
        if not self.template_dir.exists():
            msg: str = f'Missing template directory: {self.template_dir}'
            logging.error(msg)
            raise FileNotFoundError(msg)
        if not self.client_secret_template.exists():
            msg = f'Missing client_secret template: {self.client_secret_template}'
            logging.error(msg)
            raise FileNotFoundError(msg)
        if not self.sheets_template.exists():
            msg = f'Missing sheets template: {self.sheets_template}'
            logging.error(msg)
            raise FileNotFoundError(msg)

        for path in (self.config_dir, self.auth_dir, self.db_dir):
            if not path.exists():
                logging.debug(f'Creating directory: {path}')
                path.mkdir(parents=True, exist_ok=True)

        # Ensure valid configs exists even if we haven't yet set them up
        if not self.client_secret_path.exists():
            logging.debug(f'Copying default client_secret from template to {self.client_secret_path}')
            shutil.copy(self.client_secret_template, self.client_secret_path)
        if not self.sheets_path.exists():
            logging.debug(f'Copying default sheets config from template to {self.sheets_path}')
            shutil.copy(self.sheets_template, self.sheets_path)

    def revert_sheets_to_template(self) -> None:
        """Restore sheets.json from the default template file."""
        logging.debug(f'Reverting sheets config to template: {self.sheets_template}')
        shutil.copy(self.sheets_template, self.sheets_path)

    def revert_client_secret_to_template(self) -> None:
        """Restore client_secret.json from the default template file."""
        logging.debug(f'Reverting client_secret to template: {self.client_secret_template}')
        shutil.copy(self.client_secret_template, self.client_secret_path)


class SettingsAPI(ConfigPaths):
    """
    Provides an interface to get/set/revert/save the client_secret.json and sheets.json sections.
    """
    required_client_secret_keys: List[str] = ['client_id', 'project_id', 'client_secret', 'auth_uri', 'token_uri']

    def __init__(self, sheets_path: Optional[str] = None, client_secret_path: Optional[str] = None) -> None:
        """Initialize SettingsAPI and load sheets and client_secret data.

        Args:
            sheets_path: Optional path to a custom sheets.json file.
            client_secret_path: Optional path to a custom client_secret.json file.
        """
        super().__init__()

        self.sheets_path: pathlib.Path = pathlib.Path(sheets_path) if sheets_path else self.sheets_path
        self.client_secret_path: pathlib.Path = (
            pathlib.Path(client_secret_path)
            if client_secret_path
            else self.client_secret_path
        )

        self.sheets_data: Dict[str, Any] = {}
        self.client_secret_data: Dict[str, Any] = {}

        self.init_data()

    def init_data(self) -> None:
        """Reload sheets and client_secret data, emitting change signals."""
        self.load_sheets()
        self.load_client_secret()

        from ..core.signals import signals
        for section in SECTIONS:
            signals.configSectionChanged.emit(section)

    def load_sheets(self) -> Dict[str, Any]:
        """Load sheets.json from disk and validate it.

        Returns:
            The loaded sheets configuration.

        Raises:
            status.SheetsConfigInvalidException: If the file is missing, unparsable, or invalid.
        """
        logging.debug(f'Loading sheets config from "{self.sheets_path}"')
        if not self.sheets_path.exists():
            raise status.SheetsConfigInvalidException(f'File not found: {self.sheets_path}')

        try:
            with self.sheets_path.open('r', encoding='utf-8') as f:
                data: Dict[str, Any] = json.load(f)
            _validate_sheets_config(data)
        except (ValueError, TypeError) as ex:
            raise status.SheetsConfigInvalidException(str(ex)) from ex

        self.sheets_data = data
        return self.sheets_data

    def load_client_secret(self) -> Dict[str, Any]:
        """Load client_secret.json from disk and validate required OAuth fields.

        Returns:
            The loaded client secret data dictionary.

        Raises:
            status.ClientSecretNotFoundException: If client_secret.json file is missing.
            status.ClientSecretInvalidException: If JSON parsing or required fields are missing.
        """
        logging.debug(f'Loading client_secret from "{self.client_secret_path}"')
        if not self.client_secret_path.exists():
            raise status.ClientSecretNotFoundException(f'File not found: {self.client_secret_path}')
        try:
            with self.client_secret_path.open('r', encoding='utf-8') as f:
                data: Dict[str, Any] = json.load(f)
        except (ValueError, json.JSONDecodeError) as ex:
            raise status.ClientSecretInvalidException from ex

        self.validate_client_secret(data)
        self.client_secret_data = data
        return self.client_secret_data

    def validate_client_secret(self, data=None) -> str:
        """Validate that the client configuration contains required OAuth credentials.

        Args:
            data (dict, optional): Client secret data to validate. Defaults to loaded client_secret_data.

        Returns:
            str: Section key used ('installed' or 'web').

        Raises:
            status.ClientSecretInvalidException: If no valid client_secret section exists or required fields are missing.
        """
        if data is None:
            data = self.client_secret_data

        if not isinstance(data, dict):
            raise status.ClientSecretInvalidException('client_secret must be a JSON object.')

        key = next((k for k in ('installed', 'web') if k in data), None)
        if not key:
            raise status.ClientSecretInvalidException('Missing "installed" or "web" section in client_secret.')

        logging.debug(f'Found "{key}" section in client_secret.')

        config_section: Dict[str, Any] = data[key]
        missing: List[str] = [k for k in self.required_client_secret_keys if k not in config_section]
        if missing:
            raise status.ClientSecretInvalidException(
                f'Missing required fields in the \'{key}\' section: {missing}.'
            )
        return key

    def get_section(self, section_name: str) -> Dict[str, Any]:
        """Retrieve a copy of configuration data for a section.

        Args:
            section_name: 'client_secret' or 'sheets'.

        Returns:
            A copied dict of the requested section data.

        Raises:
            KeyError: If section_name is unknown.
        """
        if section_name == 'client_secret':
            return self.client_secret_data.copy()
        if section_name == 'sheets':
            return self.sheets_data.copy()
        raise KeyError(f'Unknown section: "{section_name}", must be one of {SECTIONS}')

    def set_section(self, section_name: str, new_data: Dict[str, Any]) -> None:
        """Validate, replace and persist a configuration section.

        Args:
            section_name: Section to update ('client_secret' or 'sheets').
            new_data: New data dict for the section.

        Raises:
            ValueError: If section_name is unrecognized or the data is invalid.
            TypeError: If the data has the wrong shape.
        """
        from ..core.signals import signals

        if section_name == 'client_secret':
            logging.debug('Setting entire client_secret data.')
            self.validate_client_secret(new_data)
            self.client_secret_data = new_data
        elif section_name == 'sheets':
            logging.debug('Setting entire sheets data.')
            _validate_sheets_config(new_data)
            self.sheets_data = new_data
        else:
            msg: str = f'Unknown section_name for set: "{section_name}"'
            logging.error(msg)
            raise ValueError(msg)

        self.save_section(section_name)
        signals.configSectionChanged.emit(section_name)

    def revert_section(self, section_name: str) -> None:
        """Revert a configuration section to its template default and reload it.

        Args:
            section_name: Section to revert ('client_secret' or 'sheets').

        Raises:
            ValueError: If section_name is invalid.
        """
        from ..core.signals import signals

        if section_name == 'client_secret':
            self.revert_client_secret_to_template()
            self.load_client_secret()
        elif section_name == 'sheets':
            self.revert_sheets_to_template()
            self.load_sheets()
        else:
            msg: str = f'Unknown section_name for revert: "{section_name}"'
            logging.error(msg)
            raise ValueError(msg)

        signals.configSectionChanged.emit(section_name)

    def save_section(self, section_name: str) -> None:
        """Persist a single configuration section to its corresponding file.

        Args:
            section_name: The section to save ('client_secret' or 'sheets').

        Raises:
            ValueError: If section_name is not recognized.
        """
        if section_name == 'client_secret':
            path, data = self.client_secret_path, self.client_secret_data
        elif section_name == 'sheets':
            path, data = self.sheets_path, self.sheets_data
        else:
            msg: str = f'Unknown section_name for save: "{section_name}"'
            logging.error(msg)
            raise ValueError(msg)

        logging.debug(f'Saving {section_name} to "{path}"')
        try:
            with path.open('w', encoding='utf-8') as f:
                json.dump(data, f, indent=4, ensure_ascii=False)
        except OSError as e:
            logging.error(f'Error saving {section_name}: {e}')
            raise

    def get_config(self) -> Config:
        """Build the immutable client configuration from the loaded sections.

        Returns:
            Config: Credentials and scopes for the sync client.
        """
        sheets = self.get_section('sheets')
        return Config(
            client_config=self.get_section('client_secret'),
            api_key=sheets.get('api_key', ''),
            discovery_docs=tuple(sheets.get('discovery_docs', DEFAULT_DISCOVERY_DOCS)),
            scopes=tuple(sheets.get('scopes', DEFAULT_SCOPES)),
        )


settings: SettingsAPI = SettingsAPI()
