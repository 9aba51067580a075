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

"""Firebase auth providers management sub module."""

import dataclasses
import typing

import requests

from firebase_authmgt import _auth_utils
from firebase_authmgt import _utils


@dataclasses.dataclass(frozen=True)
class ProviderConfig:
    """Parent type for all authentication provider config types.

    Provider configs are immutable values. The ``provider_type`` tag identifies the kind of
    identity provider a config describes.
    """

    provider_type: typing.ClassVar[str] = ''

    provider_id: str
    display_name: typing.Optional[str] = None
    enabled: bool = False


@dataclasses.dataclass(frozen=True)
class SAMLProviderConfig(ProviderConfig):
    """Represents the SAML auth provider configuration.

    See http://docs.oasis-open.org/security/saml/Post2.0/sstc-saml-tech-overview-2.0.html.
    """

    provider_type: typing.ClassVar[str] = 'saml'

    idp_entity_id: typing.Optional[str] = None
    sso_url: typing.Optional[str] = None
    x509_certificates: typing.Tuple[str, ...] = ()
    rp_entity_id: typing.Optional[str] = None
    callback_url: typing.Optional[str] = None


@dataclasses.dataclass(frozen=True)
class OIDCProviderConfig(ProviderConfig):
    """Represents the OIDC auth provider configuration.

    See https://openid.net/specs/openid-connect-core-1_0-final.html.
    """

    provider_type: typing.ClassVar[str] = 'oidc'

    issuer: typing.Optional[str] = None
    client_id: typing.Optional[str] = None


def _saml_config_from_response(body):
    body = _auth_utils.resource_from_response(body, 'SAML provider config')
    idp_config = _as_dict(body.get('idpConfig'))
    sp_config = _as_dict(body.get('spConfig'))
    # signRequest is part of idpConfig but not exposed.
    certs = idp_config.get('idpCertificates')
    if not isinstance(certs, list):
        certs = []
    return SAMLProviderConfig(
        provider_id=_auth_utils.extract_resource_id(body['name']),
        display_name=body.get('displayName'),
        enabled=body.get('enabled', False),
        idp_entity_id=idp_config.get('idpEntityId'),
        sso_url=idp_config.get('ssoUrl'),
        x509_certificates=tuple(
            _as_dict(cert).get('x509Certificate', '') for cert in certs),
        rp_entity_id=sp_config.get('spEntityId'),
        callback_url=sp_config.get('callbackUri'),
    )


def _as_dict(value):
    """Null or non-object nested values read as an empty object."""
    return value if isinstance(value, dict) else {}


def _oidc_config_from_response(body):
    body = _auth_utils.resource_from_response(body, 'OIDC provider config')
    return OIDCProviderConfig(
        provider_id=_auth_utils.extract_resource_id(body['name']),
        display_name=body.get('displayName'),
        enabled=body.get('enabled', False),
        issuer=body.get('issuer'),
        client_id=body.get('clientId'),
    )


class _ProviderKind(typing.NamedTuple):
    """Describes how a kind of provider config is addressed and decoded."""
    label: str
    id_prefix: str
    collection: str
    from_response: typing.Callable[[typing.Any], ProviderConfig]


_SAML = _ProviderKind('SAML', 'saml.', 'inboundSamlConfigs', _saml_config_from_response)
_OIDC = _ProviderKind('OIDC', 'oidc.', 'oauthIdpConfigs', _oidc_config_from_response)

_PROVIDER_KINDS = (_SAML, _OIDC)


class ProviderConfigClient:
    """Client for reading Auth provider configurations.

    The client holds a fixed project ID, an optional tenant ID and an HTTP client. It is never
    mutated after construction, and can be shared across threads.
    """

    PROVIDER_CONFIG_URL = _auth_utils.ID_TOOLKIT_URL

    def __init__(self, http_client, project_id, version, tenant_id=None, url_override=None):
        self._http_client = http_client
        self._project_id = project_id
        self._version = version
        self._tenant_id = tenant_id
        self._url_prefix = url_override or self.PROVIDER_CONFIG_URL

    @property
    def http_client(self):
        return self._http_client

    @property
    def tenant_id(self):
        return self._tenant_id

    def get_saml_provider_config(self, provider_id):
        return self._get_provider_config(_SAML, provider_id)

    def get_oidc_provider_config(self, provider_id):
        return self._get_provider_config(_OIDC, provider_id)

    def get_provider_config(self, provider_id):
        """Looks up a provider config of any supported kind, based on the provider ID prefix."""
        if isinstance(provider_id, str):
            for kind in _PROVIDER_KINDS:
                if provider_id.startswith(kind.id_prefix):
                    return self._get_provider_config(kind, provider_id)

        prefixes = ', '.join(f'"{kind.id_prefix}"' for kind in _PROVIDER_KINDS)
        raise ValueError(
            f'Invalid provider ID: {provider_id}. Provider ID must start with one of {prefixes}.')

    def _get_provider_config(self, kind, provider_id):
        _validate_provider_id(kind, provider_id)
        body = self._make_request('get', f'/{kind.collection}/{provider_id}')
        return kind.from_response(body)

    def _base_url(self):
        project_id = _auth_utils.validate_project_id(self._project_id)
        url = f'{self._url_prefix}/projects/{project_id}'
        if self._tenant_id:
            url += f'/tenants/{self._tenant_id}'
        return url

    def _make_request(self, method, path, **kwargs):
        url = f'{self._base_url()}{path}'
        kwargs.setdefault('headers', {})['X-Client-Version'] = self._version
        try:
            resp = self._http_client.request(method, url, **kwargs)
        except requests.exceptions.RequestException as error:
            raise _utils.handle_requests_error(error)

        try:
            return self._http_client.parse_body(resp)
        except ValueError as error:
            raise _auth_utils.UnexpectedResponseError(
                f'Failed to parse provider config response: {error}',
                cause=error, http_response=resp)


def _validate_provider_id(kind, provider_id):
    if not isinstance(provider_id, str):
        raise ValueError(
            f'Invalid {kind.label} provider ID: {provider_id}. Provider ID must be a non-empty '
            'string.')
    if not provider_id.startswith(kind.id_prefix):
        raise ValueError(f'Invalid {kind.label} provider ID: "{provider_id}".')
    return provider_id
