# Copyright 2018 Google Inc.
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

"""Firebase auth utils."""

import os
from typing import Any, Dict, Optional

import requests

from firebase_authmgt import exceptions
from firebase_authmgt import _utils


EMULATOR_HOST_ENV_VAR = 'FIREBASE_AUTH_EMULATOR_HOST'
ID_TOOLKIT_URL = 'https://identitytoolkit.googleapis.com/v2beta1'
PROJECT_ID_NOT_AVAILABLE = 'project id not available'


def get_emulator_host() -> str:
    emulator_host = os.getenv(EMULATOR_HOST_ENV_VAR, '')
    if emulator_host and '//' in emulator_host:
        raise ValueError(
            f'Invalid {EMULATOR_HOST_ENV_VAR}: "{emulator_host}". It must follow format '
            '"host:port".')
    return emulator_host


def is_emulated() -> bool:
    return get_emulator_host() != ''


def get_id_toolkit_url() -> str:
    """Returns the Identity Toolkit endpoint, routed through the emulator when one is set."""
    emulator_host = get_emulator_host()
    if emulator_host:
        return f'http://{emulator_host}/identitytoolkit.googleapis.com/v2beta1'
    return ID_TOOLKIT_URL


def extract_resource_id(name: str) -> str:
    """Returns the last segment of a resource name like ``projects/p/tenants/t``."""
    return name.split('/')[-1]


def validate_tenant_id(tenant_id: Any) -> str:
    if not isinstance(tenant_id, str) or not tenant_id:
        raise ValueError(
            f'Invalid tenant ID: {tenant_id}. Tenant ID must be a non-empty string.')
    return tenant_id


def validate_project_id(project_id: Optional[str]) -> str:
    if not project_id:
        raise ConfigurationError(PROJECT_ID_NOT_AVAILABLE)
    return project_id


def resource_from_response(body: Any, resource: str) -> Dict[str, Any]:
    """Checks that a decoded response body is a JSON object carrying a resource ``name``."""
    if not isinstance(body, dict) or not isinstance(body.get('name'), str):
        raise UnexpectedResponseError(
            f'Unexpected {resource} response from the Auth service: {body}')
    return body


class ConfigurationError(ValueError):
    """The SDK is missing configuration required to build the request, such as a project ID."""


class UnexpectedResponseError(exceptions.UnknownError):
    """Backend service responded with an unexpected or malformed response."""


class TenantNotFoundError(exceptions.NotFoundError):
    """No tenant found for the specified identifier."""

    default_message = 'No tenant found for the given identifier'


class ConfigurationNotFoundError(exceptions.NotFoundError):
    """No auth provider found for the specified identifier."""

    default_message = 'No auth provider found for the given identifier'


class InsufficientPermissionError(exceptions.PermissionDeniedError):
    """The credential used to initialize the SDK lacks required permissions."""

    default_message = ('The credential used to initialize the SDK has insufficient '
                       'permissions to perform the requested operation')


_CODE_TO_EXC_TYPE = {
    'CONFIGURATION_NOT_FOUND': ConfigurationNotFoundError,
    'INSUFFICIENT_PERMISSION': InsufficientPermissionError,
    'TENANT_NOT_FOUND': TenantNotFoundError,
}


def handle_tenant_backend_error(error: requests.RequestException) -> exceptions.FirebaseError:
    """Converts a requests error from the tenant management API into a FirebaseError.

    The error envelope is parsed on a best-effort basis. Its ``status`` selects the error type and
    its ``message`` is surfaced verbatim, unless the message is one of the Auth error codes above.
    """
    return _utils.handle_platform_error_from_requests(error, _handle_auth_error_code)


def _handle_auth_error_code(
        error: requests.RequestException, message: str, error_dict: Dict[str, Any]):
    """Maps Auth error messages of the form ``CODE: optional text`` to dedicated error types."""
    code, custom_message = _split_auth_error_message(error_dict.get('message'))
    exc_type = _CODE_TO_EXC_TYPE.get(code)
    if not exc_type:
        return None

    ext = f' {custom_message}' if custom_message else ''
    msg = f'{exc_type.default_message} ({code}).{ext}'
    return exc_type(msg, cause=error, http_response=error.response)


def _split_auth_error_message(message: Any):
    if not isinstance(message, str):
        return None, None
    separator = message.find(':')
    if separator == -1:
        return message.strip(), None
    return message[:separator].strip(), message[separator + 1:].strip()
