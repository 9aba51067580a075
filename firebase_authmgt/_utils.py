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

"""Internal utilities shared by the management modules."""

import json
import logging
from platform import python_version

import google.auth.credentials
import requests

import firebase_authmgt
from firebase_authmgt import exceptions


logger = logging.getLogger(__name__)


_ERROR_CODE_TO_EXCEPTION_TYPE = {
    exceptions.INVALID_ARGUMENT: exceptions.InvalidArgumentError,
    exceptions.FAILED_PRECONDITION: exceptions.FailedPreconditionError,
    exceptions.OUT_OF_RANGE: exceptions.OutOfRangeError,
    exceptions.UNAUTHENTICATED: exceptions.UnauthenticatedError,
    exceptions.PERMISSION_DENIED: exceptions.PermissionDeniedError,
    exceptions.NOT_FOUND: exceptions.NotFoundError,
    exceptions.ABORTED: exceptions.AbortedError,
    exceptions.ALREADY_EXISTS: exceptions.AlreadyExistsError,
    exceptions.CONFLICT: exceptions.ConflictError,
    exceptions.RESOURCE_EXHAUSTED: exceptions.ResourceExhaustedError,
    exceptions.CANCELLED: exceptions.CancelledError,
    exceptions.DATA_LOSS: exceptions.DataLossError,
    exceptions.UNKNOWN: exceptions.UnknownError,
    exceptions.INTERNAL: exceptions.InternalError,
    exceptions.UNAVAILABLE: exceptions.UnavailableError,
    exceptions.DEADLINE_EXCEEDED: exceptions.DeadlineExceededError,
}


_HTTP_STATUS_TO_ERROR_CODE = {
    400: exceptions.INVALID_ARGUMENT,
    401: exceptions.UNAUTHENTICATED,
    403: exceptions.PERMISSION_DENIED,
    404: exceptions.NOT_FOUND,
    409: exceptions.CONFLICT,
    412: exceptions.FAILED_PRECONDITION,
    429: exceptions.RESOURCE_EXHAUSTED,
    500: exceptions.INTERNAL,
    503: exceptions.UNAVAILABLE,
}


def get_metrics_header():
    return f'gl-python/{python_version()} fire-authmgt/{firebase_authmgt.__version__}'


def get_version_header():
    return f'Python/Admin/{firebase_authmgt.__version__}'


def _get_initialized_app(app):
    """Returns a reference to an initialized App instance."""
    if app is None:
        return firebase_authmgt.get_app()

    if isinstance(app, firebase_authmgt.App):
        initialized_app = firebase_authmgt.get_app(app.name)
        if app is not initialized_app:
            raise ValueError('Illegal app argument. App instance not '
                             'initialized via the firebase_authmgt module.')
        return app

    raise ValueError('Illegal app argument. Argument must be of type '
                     f'firebase_authmgt.App, but given "{type(app)}".')


def get_app_service(app, name, initializer):
    app = _get_initialized_app(app)
    return app._get_service(name, initializer) # pylint: disable=protected-access


def handle_platform_error_from_requests(error, handle_func=None):
    """Constructs a ``FirebaseError`` from the given requests error.

    The response body, when present, is parsed as a GCP error envelope of the form
    ``{"error": {"status": "...", "message": "..."}}``. The ``status`` becomes the error code and
    the ``message`` the error message. A body that cannot be parsed is not an error in itself: the
    code then falls back to the one implied by the HTTP status.

    Args:
        error: An error raised by the requests module while making an HTTP call to a GCP API.
        handle_func: A function that can be used to handle platform errors in a custom way. When
            specified, this function will be called with three arguments. It has the same
            signature as ``_handle_func_requests``, but may return ``None``.

    Returns:
        FirebaseError: A ``FirebaseError`` that can be raised to the user code.
    """
    if error.response is None:
        return handle_requests_error(error)

    response = error.response
    content = response.content.decode('utf-8', errors='replace')
    status_code = response.status_code
    error_dict, message = _parse_platform_error(content, status_code)
    exc = None
    if handle_func:
        exc = handle_func(error, message, error_dict)

    return exc if exc else _handle_func_requests(error, message, error_dict)


def _handle_func_requests(error, message, error_dict):
    code = error_dict.get('status')
    if not isinstance(code, str):
        code = None
    return handle_requests_error(error, message, code)


def handle_requests_error(error, message=None, code=None):
    """Constructs a ``FirebaseError`` from the given requests error.

    This method does not look at the response body. Connection failures and timeouts map to
    ``UnavailableError`` and ``DeadlineExceededError`` respectively. Error responses map to the
    error type implied by ``code``, or by the HTTP status when no code is given.

    Args:
        error: An error raised by the requests module while making an HTTP call.
        message: A message to be included in the resulting ``FirebaseError`` (optional). If not
            specified the string representation of the ``error`` argument is used as the message.
        code: A GCP error code that will be used to determine the resulting error type (optional).
            A code outside the platform table yields a plain ``FirebaseError`` carrying it.

    Returns:
        FirebaseError: A ``FirebaseError`` that can be raised to the user code.
    """
    if isinstance(error, requests.exceptions.Timeout):
        return exceptions.DeadlineExceededError(
            message=f'Timed out while making an API call: {error}',
            cause=error)
    if isinstance(error, requests.exceptions.ConnectionError):
        return exceptions.UnavailableError(
            message=f'Failed to establish a connection: {error}',
            cause=error)
    if error.response is None:
        return exceptions.UnknownError(
            message=f'Unknown error while making a remote service call: {error}',
            cause=error)

    if not code:
        code = _http_status_to_error_code(error.response.status_code)
    if not message:
        message = str(error)

    logger.debug('Remote call failed with status %d (%s)', error.response.status_code, code)
    err_type = _error_code_to_exception_type(code)
    if err_type is None:
        # Codes outside the platform table are surfaced as reported by the server.
        return exceptions.FirebaseError(
            code, message, cause=error, http_response=error.response)
    return err_type(message=message, cause=error, http_response=error.response)


def _http_status_to_error_code(status):
    """Maps an HTTP status to a platform error code."""
    return _HTTP_STATUS_TO_ERROR_CODE.get(status, exceptions.UNKNOWN)


def _error_code_to_exception_type(code):
    """Maps a platform error code to an exception type, or None for an unknown code."""
    return _ERROR_CODE_TO_EXCEPTION_TYPE.get(code)


def _parse_platform_error(content, status_code):
    """Parses an HTTP error response from a Google Cloud Platform API and extracts the error code
    and message fields.

    Args:
        content: Decoded content of the response body.
        status_code: HTTP status code.

    Returns:
        tuple: A tuple containing the error dict and a message.
    """
    data = {}
    try:
        parsed_body = json.loads(content)
        if isinstance(parsed_body, dict):
            data = parsed_body
    except ValueError:
        pass

    error_dict = data.get('error', {})
    if not isinstance(error_dict, dict):
        error_dict = {}
    msg = error_dict.get('message')
    if not msg:
        msg = f'Unexpected HTTP response with status: {status_code}; body: {content}'
    return error_dict, msg


# pylint: disable=abstract-method
class EmulatorAdminCredentials(google.auth.credentials.Credentials):
    """Credentials for use with the Firebase Auth emulator.

    The emulator accepts the fixed ``owner`` token, so refreshing is a no-op.
    """
    def __init__(self):
        google.auth.credentials.Credentials.__init__(self)
        self.token = 'owner'

    def refresh(self, request):
        pass
