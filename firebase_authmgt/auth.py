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

"""Firebase Authentication provider configuration module.

This module contains functions for looking up the SAML and OIDC identity provider
configurations registered on a Firebase project.
"""

from firebase_authmgt import _auth_providers
from firebase_authmgt import _auth_utils
from firebase_authmgt import _http_client
from firebase_authmgt import _utils


_AUTH_ATTRIBUTE = '_auth'


__all__ = [
    'Client',
    'ConfigurationError',
    'OIDCProviderConfig',
    'ProviderConfig',
    'SAMLProviderConfig',
    'UnexpectedResponseError',

    'get_oidc_provider_config',
    'get_provider_config',
    'get_saml_provider_config',
]

ConfigurationError = _auth_utils.ConfigurationError
OIDCProviderConfig = _auth_providers.OIDCProviderConfig
ProviderConfig = _auth_providers.ProviderConfig
SAMLProviderConfig = _auth_providers.SAMLProviderConfig
UnexpectedResponseError = _auth_utils.UnexpectedResponseError


def _get_client(app):
    """Returns a client instance for an App.

    If the App already has a client associated with it, simply returns
    it. Otherwise creates a new client, and adds it to the App before
    returning it.

    Args:
        app: A Firebase App instance (or ``None`` to use the default App).

    Returns:
        Client: A client for the specified App instance.

    Raises:
        ValueError: If the app argument is invalid.
    """
    return _utils.get_app_service(app, _AUTH_ATTRIBUTE, Client)


class Client:
    """Firebase Authentication client for reading project-level provider configurations."""

    def __init__(self, app):
        credential = app.credential.get_credential()
        if _auth_utils.is_emulated():
            credential = _utils.EmulatorAdminCredentials()
        http_client = _http_client.JsonHttpClient(
            credential=credential,
            timeout=app.options.get('httpTimeout', _http_client.DEFAULT_TIMEOUT_SECONDS))
        self._provider_manager = _auth_providers.ProviderConfigClient(
            http_client, app.project_id, _utils.get_version_header(),
            url_override=_auth_utils.get_id_toolkit_url())

    def get_saml_provider_config(self, provider_id):
        """Returns the SAMLProviderConfig with the given ID.

        Args:
            provider_id: Provider ID string.

        Returns:
            SAMLProviderConfig: A SAML provider config instance.

        Raises:
            ValueError: If the provider ID is invalid, empty or does not have ``saml.`` prefix.
            ConfigurationError: If no project ID is available.
            FirebaseError: If an error occurs while retrieving the SAML provider.
        """
        return self._provider_manager.get_saml_provider_config(provider_id)

    def get_oidc_provider_config(self, provider_id):
        """Returns the OIDCProviderConfig with the given ID.

        Args:
            provider_id: Provider ID string.

        Returns:
            OIDCProviderConfig: An OIDC provider config instance.

        Raises:
            ValueError: If the provider ID is invalid, empty or does not have ``oidc.`` prefix.
            ConfigurationError: If no project ID is available.
            FirebaseError: If an error occurs while retrieving the OIDC provider.
        """
        return self._provider_manager.get_oidc_provider_config(provider_id)

    def get_provider_config(self, provider_id):
        """Returns the provider config with the given ID, of the kind named by its prefix.

        Returns:
            ProviderConfig: A ``SAMLProviderConfig`` or an ``OIDCProviderConfig``.

        Raises:
            ValueError: If the provider ID does not start with a known prefix.
            ConfigurationError: If no project ID is available.
            FirebaseError: If an error occurs while retrieving the provider config.
        """
        return self._provider_manager.get_provider_config(provider_id)

    def close(self):
        self._provider_manager.http_client.close()


def get_saml_provider_config(provider_id, app=None):
    """Returns the SAMLProviderConfig with the given ID.

    Args:
        provider_id: Provider ID string.
        app: An App instance (optional).

    Returns:
        SAMLProviderConfig: A SAML provider config instance.

    Raises:
        ValueError: If the provider ID is invalid, empty or does not have ``saml.`` prefix.
        ConfigurationError: If no project ID is available.
        FirebaseError: If an error occurs while retrieving the SAML provider.
    """
    client = _get_client(app)
    return client.get_saml_provider_config(provider_id)


def get_oidc_provider_config(provider_id, app=None):
    """Returns the OIDCProviderConfig with the given ID.

    Args:
        provider_id: Provider ID string.
        app: An App instance (optional).

    Returns:
        OIDCProviderConfig: An OIDC provider config instance.

    Raises:
        ValueError: If the provider ID is invalid, empty or does not have ``oidc.`` prefix.
        ConfigurationError: If no project ID is available.
        FirebaseError: If an error occurs while retrieving the OIDC provider.
    """
    client = _get_client(app)
    return client.get_oidc_provider_config(provider_id)


def get_provider_config(provider_id, app=None):
    client = _get_client(app)
    return client.get_provider_config(provider_id)
