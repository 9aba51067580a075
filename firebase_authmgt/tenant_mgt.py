# Copyright 2020 Google Inc.
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

"""Firebase tenant management module.

This module contains functions for reading the authentication tenants of a Google Cloud
Identity Platform (GCIP) project, and for obtaining clients scoped to a single tenant.
"""

import dataclasses
import typing

import requests

from firebase_authmgt import _auth_providers
from firebase_authmgt import _auth_utils
from firebase_authmgt import _http_client
from firebase_authmgt import _utils


_TENANT_MGT_ATTRIBUTE = '_tenant_mgt'
_MAX_LIST_TENANTS_RESULTS = 100


__all__ = [
    'ConfigurationError',
    'ListTenantsPage',
    'Tenant',
    'TenantClient',
    'TenantManager',
    'TenantNotFoundError',
    'UnexpectedResponseError',

    'auth_for_tenant',
    'get_tenant',
    'list_tenants',
]


ConfigurationError = _auth_utils.ConfigurationError
TenantNotFoundError = _auth_utils.TenantNotFoundError
UnexpectedResponseError = _auth_utils.UnexpectedResponseError


def auth_for_tenant(tenant_id, app=None):
    """Gets a client scoped to the given tenant ID.

    No remote call is made; the tenant is not required to exist.

    Args:
        tenant_id: A tenant ID string.
        app: An App instance (optional).

    Returns:
        TenantClient: A client bound to the tenant.

    Raises:
        ValueError: If the tenant ID is None, empty or not a string.
    """
    tenant_manager = _get_tenant_manager(app)
    return tenant_manager.auth_for_tenant(tenant_id)


def get_tenant(tenant_id, app=None):
    """Gets the tenant corresponding to the given ``tenant_id``.

    Args:
        tenant_id: A tenant ID string.
        app: An App instance (optional).

    Returns:
        Tenant: A tenant object.

    Raises:
        ValueError: If the tenant ID is None, empty or not a string.
        ConfigurationError: If no project ID is available.
        TenantNotFoundError: If no tenant exists by the given ID.
        FirebaseError: If an error occurs while retrieving the tenant.
    """
    tenant_manager = _get_tenant_manager(app)
    return tenant_manager.get_tenant(tenant_id)


def list_tenants(page_token=None, max_results=_MAX_LIST_TENANTS_RESULTS, app=None):
    """Retrieves a page of tenants from a Firebase project.

    The ``page_token`` argument governs the starting point of the page. The ``max_results``
    argument governs the maximum number of tenants that may be included in the returned page.
    This function never returns None. If there are no tenants in the Firebase project, this
    returns an empty page.

    Args:
        page_token: A non-empty page token string, which indicates the starting point of the page
            (optional). Defaults to ``None``, which will retrieve the first page of tenants.
        max_results: A positive integer indicating the maximum number of tenants to include in the
            returned page (optional). Defaults to 100, which is also the maximum number allowed.
        app: An App instance (optional).

    Returns:
        ListTenantsPage: A page of tenants.

    Raises:
        ValueError: If ``max_results`` or ``page_token`` are invalid.
        FirebaseError: If an error occurs while retrieving the tenants.
    """
    tenant_manager = _get_tenant_manager(app)
    def download(page_token, max_results):
        return tenant_manager.list_tenants(page_token, max_results)
    return ListTenantsPage(download, page_token, max_results)


def _get_tenant_manager(app):
    return _utils.get_app_service(app, _TENANT_MGT_ATTRIBUTE, _new_tenant_manager)


def _new_tenant_manager(app):
    credential = app.credential.get_credential()
    if _auth_utils.is_emulated():
        credential = _utils.EmulatorAdminCredentials()
    http_client = _http_client.JsonHttpClient(
        credential=credential,
        timeout=app.options.get('httpTimeout', _http_client.DEFAULT_TIMEOUT_SECONDS))
    return TenantManager(
        http_client, app.project_id, _utils.get_version_header(),
        base_url=_auth_utils.get_id_toolkit_url())


@dataclasses.dataclass(frozen=True)
class Tenant:
    """Represents a tenant in a multi-tenant application.

    Multi-tenancy support requires Google Cloud Identity Platform (GCIP). To learn more about
    GCIP including pricing and features, see https://cloud.google.com/identity-platform.

    A Tenant instance provides information such as the display name, tenant identifier and email
    authentication configuration.
    """

    tenant_id: str
    display_name: typing.Optional[str] = None
    allow_password_sign_up: bool = False
    enable_email_link_sign_in: bool = False


def _tenant_from_response(body):
    body = _auth_utils.resource_from_response(body, 'tenant')
    return Tenant(
        tenant_id=_auth_utils.extract_resource_id(body['name']),
        display_name=body.get('displayName'),
        allow_password_sign_up=body.get('allowPasswordSignup', False),
        enable_email_link_sign_in=body.get('enableEmailLinkSignin', False),
    )


class TenantClient:
    """Provides Auth operations scoped to a single tenant."""

    def __init__(self, tenant_id, provider_manager=None):
        self._tenant_id = _auth_utils.validate_tenant_id(tenant_id)
        self._provider_manager = provider_manager

    @property
    def tenant_id(self):
        """Tenant ID associated with this client."""
        return self._tenant_id

    def get_saml_provider_config(self, provider_id):
        """Returns the SAML provider configuration with the given ID, registered on this tenant.

        Raises:
            ValueError: If the provider ID does not start with ``saml.``.
            ConfigurationError: If no project ID is available.
            FirebaseError: If an error occurs while retrieving the provider config.
        """
        return self._provider_client().get_saml_provider_config(provider_id)

    def get_oidc_provider_config(self, provider_id):
        return self._provider_client().get_oidc_provider_config(provider_id)

    def get_provider_config(self, provider_id):
        return self._provider_client().get_provider_config(provider_id)

    def _provider_client(self):
        if self._provider_manager is None:
            raise ValueError(
                f'TenantClient for tenant "{self._tenant_id}" is not bound to a project.')
        return self._provider_manager


class TenantManager:
    """Reads the tenants of a Firebase project.

    A TenantManager holds a base URL, a project ID, a client version string and an HTTP client,
    all fixed at construction. The project ID is only required when a remote call is made.
    """

    def __init__(self, http_client, project_id, version, base_url=_auth_utils.ID_TOOLKIT_URL):
        self._http_client = http_client
        self._project_id = project_id
        self._version = version
        self._base_url = base_url

    @property
    def http_client(self):
        return self._http_client

    @property
    def project_id(self):
        return self._project_id

    @property
    def version(self):
        return self._version

    @property
    def base_url(self):
        return self._base_url

    def auth_for_tenant(self, tenant_id):
        """Creates a new TenantClient scoped to the given tenant ID."""
        tenant_id = _auth_utils.validate_tenant_id(tenant_id)
        provider_manager = _auth_providers.ProviderConfigClient(
            self._http_client, self._project_id, self._version, tenant_id=tenant_id,
            url_override=self._base_url)
        return TenantClient(tenant_id, provider_manager)

    def get_tenant(self, tenant_id):
        """Gets the tenant corresponding to the given ``tenant_id``."""
        tenant_id = _auth_utils.validate_tenant_id(tenant_id)
        body = self._make_request('get', f'/tenants/{tenant_id}')
        return _tenant_from_response(body)

    def list_tenants(self, page_token=None, max_results=_MAX_LIST_TENANTS_RESULTS):
        """Retrieves a batch of tenants."""
        if page_token is not None:
            if not isinstance(page_token, str) or not page_token:
                raise ValueError('Page token must be a non-empty string.')
        if not isinstance(max_results, int) or isinstance(max_results, bool):
            raise ValueError('Max results must be an integer.')
        if max_results < 1 or max_results > _MAX_LIST_TENANTS_RESULTS:
            raise ValueError(
                'Max results must be a positive integer less than or equal to '
                f'{_MAX_LIST_TENANTS_RESULTS}.')

        params = {'pageSize': max_results}
        if page_token:
            params['pageToken'] = page_token
        body = self._make_request('get', '/tenants', params=params)
        if not isinstance(body, dict):
            raise UnexpectedResponseError(f'Unexpected list tenants response: {body}')
        return body

    def _make_request(self, method, path, **kwargs):
        project_id = _auth_utils.validate_project_id(self._project_id)
        url = f'{self._base_url}/projects/{project_id}{path}'
        kwargs.setdefault('headers', {})['X-Client-Version'] = self._version
        try:
            resp = self._http_client.request(method, url, **kwargs)
        except requests.exceptions.RequestException as error:
            raise _auth_utils.handle_tenant_backend_error(error)

        try:
            return self._http_client.parse_body(resp)
        except ValueError as error:
            raise UnexpectedResponseError(
                f'Failed to parse tenant response: {error}', cause=error, http_response=resp)

    def close(self):
        self._http_client.close()


class ListTenantsPage:
    """Represents a page of tenants fetched from a Firebase project.

    Provides methods for traversing tenants included in this page, as well as retrieving
    subsequent pages of tenants. The iterator returned by ``iterate_all()`` can be used to iterate
    through all tenants in the Firebase project starting from this page.
    """

    def __init__(self, download, page_token, max_results):
        self._download = download
        self._max_results = max_results
        self._current = download(page_token, max_results)

    @property
    def tenants(self):
        """A list of ``Tenant`` instances available in this page."""
        return [_tenant_from_response(data) for data in self._current.get('tenants', [])]

    @property
    def next_page_token(self):
        """Page token string for the next page (empty string indicates no more pages)."""
        return self._current.get('nextPageToken', '')

    @property
    def has_next_page(self):
        """A boolean indicating whether more pages are available."""
        return bool(self.next_page_token)

    def get_next_page(self):
        """Retrieves the next page of tenants, if available.

        Returns:
            ListTenantsPage: Next page of tenants, or None if this is the last page.
        """
        if self.has_next_page:
            return ListTenantsPage(self._download, self.next_page_token, self._max_results)
        return None

    def iterate_all(self):
        """Retrieves an iterator for tenants.

        Returned iterator will iterate through all the tenants in the Firebase project
        starting from this page. The iterator will never buffer more than one page of tenants
        in memory at a time.

        Returns:
            iterator: An iterator of Tenant instances.
        """
        return _TenantIterator(self)


class _TenantIterator:
    """An iterator over tenants that loads one page at a time."""

    def __init__(self, current_page):
        if not current_page:
            raise ValueError('Current page must not be None.')
        self._current_page = current_page
        self._tenants = current_page.tenants
        self._index = 0

    def __next__(self):
        while self._index == len(self._tenants) and self._current_page.has_next_page:
            self._current_page = self._current_page.get_next_page()
            self._tenants = self._current_page.tenants
            self._index = 0
        if self._index < len(self._tenants):
            result = self._tenants[self._index]
            self._index += 1
            return result
        raise StopIteration

    def __iter__(self):
        return self
