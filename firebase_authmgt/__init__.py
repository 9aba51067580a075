# Copyright 2017 Google Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Firebase Auth tenant and provider configuration management for Python."""
import json
import os
import threading

from google.auth.exceptions import DefaultCredentialsError
from firebase_authmgt import credentials
from firebase_authmgt.__about__ import __version__


_apps = {}
_apps_lock = threading.RLock()

_DEFAULT_APP_NAME = '[DEFAULT]'
_FIREBASE_CONFIG_ENV_VAR = 'FIREBASE_CONFIG'
_CONFIG_VALID_KEYS = ['httpTimeout', 'projectId']


def initialize_app(credential=None, options=None, name=_DEFAULT_APP_NAME):
    """Initializes and returns a new App instance.

    If options are not provided an attempt is made to load the options from the
    ``FIREBASE_CONFIG`` environment variable. If the value of the variable starts with ``"{"``,
    it is parsed as a JSON object. Otherwise it is treated as a file name and the JSON content is
    read from the corresponding file.

    Args:
      credential: A credential object used to initialize the SDK (optional). If none is provided,
          Google Application Default Credentials are used.
      options: A dictionary of configuration options (optional). Supported options are
          ``projectId`` and ``httpTimeout``. If ``httpTimeout`` is not set, the SDK uses a
          default timeout of 120 seconds.
      name: Name of the app (optional).

    Returns:
      App: A newly initialized instance of App.

    Raises:
      ValueError: If the app name is already in use, or any of the
          provided arguments are invalid.
    """
    if credential is None:
        credential = credentials.ApplicationDefault()
    app = App(name, credential, options)
    with _apps_lock:
        if app.name not in _apps:
            _apps[app.name] = app
            return app

    if name == _DEFAULT_APP_NAME:
        raise ValueError(
            'The default app already exists. This means you called initialize_app() more '
            'than once without providing an app name as the third argument.')

    raise ValueError(
        f'App named "{name}" already exists. Make sure you provide a unique name every time '
        'you call initialize_app().')


def delete_app(app):
    """Gracefully deletes an App instance, closing the HTTP sessions of its services.

    Args:
      app: The app instance to be deleted.

    Raises:
      ValueError: If the app is not initialized.
    """
    if not isinstance(app, App):
        raise ValueError(
            f'Illegal app argument type: "{type(app)}". Argument must be of type App.')
    with _apps_lock:
        if _apps.get(app.name) is app:
            del _apps[app.name]
            app._cleanup() # pylint: disable=protected-access
            return

    raise ValueError(
        f'App named "{app.name}" is not initialized. Make sure to initialize the app by '
        'calling initialize_app().')


def get_app(name=_DEFAULT_APP_NAME):
    """Retrieves an App instance by name.

    Args:
      name: Name of the App instance to retrieve (optional).

    Returns:
      App: An App instance with the given name.

    Raises:
      ValueError: If the specified name is not a string, or if the specified
          app does not exist.
    """
    if not isinstance(name, str):
        raise ValueError(
            f'Illegal app name argument type: "{type(name)}". App name must be a string.')
    with _apps_lock:
        if name in _apps:
            return _apps[name]

    if name == _DEFAULT_APP_NAME:
        raise ValueError(
            'The default app does not exist. Make sure to initialize the SDK by calling '
            'initialize_app().')

    raise ValueError(
        f'App named "{name}" does not exist. Make sure to initialize the SDK by calling '
        'initialize_app() with your app name.')


class _AppOptions:
    """A collection of configuration options for an App."""

    def __init__(self, options):
        if options is None:
            options = self._load_from_environment()

        if not isinstance(options, dict):
            raise ValueError(
                f'Illegal app options type: {type(options)}. Options must be a dictionary.')
        self._options = options

    def get(self, key, default=None):
        """Returns the option identified by the provided key."""
        return self._options.get(key, default)

    def _load_from_environment(self):
        config_file = os.getenv(_FIREBASE_CONFIG_ENV_VAR)
        if not config_file:
            return {}
        if config_file.startswith('{'):
            json_str = config_file
        else:
            try:
                with open(config_file, 'r') as json_file:
                    json_str = json_file.read()
            except OSError as err:
                raise ValueError(f'Unable to read file {config_file}. {err}')
        try:
            json_data = json.loads(json_str)
        except ValueError as err:
            raise ValueError(f'JSON string "{json_str}" is not valid json. {err}')
        return {k: v for k, v in json_data.items() if k in _CONFIG_VALID_KEYS}


class App:
    """Holds the credential and options shared by the management services.

    Services (the provider config client, the tenant manager) are created lazily, once per App,
    and receive the App's project ID and credential at construction.
    """

    def __init__(self, name, credential, options):
        if not name or not isinstance(name, str):
            raise ValueError(
                f'Illegal app name "{name}" provided. App name must be a non-empty string.')
        self._name = name

        if not isinstance(credential, credentials.Base):
            raise ValueError('Illegal credential provided. App must be initialized '
                             'with a valid credential instance.')
        self._credential = credential
        self._options = _AppOptions(options)
        self._lock = threading.RLock()
        self._services = {}

        project_id = self._options.get('projectId')
        if project_id is not None and not isinstance(project_id, str):
            raise ValueError(
                f'Invalid project ID: "{project_id}". project ID must be a string.')
        self._project_id_initialized = False
        self._project_id = None

    @property
    def name(self):
        return self._name

    @property
    def credential(self):
        return self._credential

    @property
    def options(self):
        return self._options

    @property
    def project_id(self):
        if not self._project_id_initialized:
            self._project_id = self._lookup_project_id()
            self._project_id_initialized = True
        return self._project_id

    def _lookup_project_id(self):
        """Looks up the project ID from the options, the credential, or the environment.

        Returns:
            str: A project ID string or None.
        """
        project_id = self._options.get('projectId')
        if not project_id:
            try:
                project_id = self._credential.project_id
            except (AttributeError, DefaultCredentialsError):
                pass
        if not project_id:
            project_id = os.environ.get('GOOGLE_CLOUD_PROJECT',
                                        os.environ.get('GCLOUD_PROJECT'))
        return project_id

    def _get_service(self, name, initializer):
        """Returns the service instance identified by the given name.

        If the named service does not exist yet, calls the provided initializer with this App
        and caches the result.

        Raises:
          ValueError: If the provided name is invalid, or if the App is already deleted.
        """
        if not name or not isinstance(name, str):
            raise ValueError(
                f'Illegal name argument: "{name}". Name must be a non-empty string.')
        with self._lock:
            if self._services is None:
                raise ValueError(f'Service requested from deleted App: "{self._name}".')
            if name not in self._services:
                self._services[name] = initializer(self)
            return self._services[name]

    def _cleanup(self):
        with self._lock:
            for service in self._services.values():
                if hasattr(service, 'close') and hasattr(service.close, '__call__'):
                    service.close()
            self._services = None
