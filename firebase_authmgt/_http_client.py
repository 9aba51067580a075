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

"""Internal HTTP client module.

This module provides utilities for making HTTP calls using the requests library.
"""

import logging
import typing

import google.auth.credentials
import google.auth.transport.requests
import requests
import requests.adapters
from urllib3.util import retry

from firebase_authmgt import _utils


logger = logging.getLogger(__name__)

# Default retry configuration: Retries once on low-level connection and socket read errors.
# Retries up to 4 times on HTTP 500 and 503 errors, with exponential backoff. Returns the
# last response upon exhausting all retries.
DEFAULT_RETRY_CONFIG = retry.Retry(
    connect=1, read=1, status=4, status_forcelist=[500, 503],
    raise_on_status=False, backoff_factor=0.5, allowed_methods=None)

DEFAULT_TIMEOUT_SECONDS = 120

METRICS_HEADERS = {
    'x-goog-api-client': _utils.get_metrics_header(),
}


class HttpClient:
    """Base HTTP client used to make HTTP calls.

    HttpClient maintains an HTTP session, and handles request authentication and retries if
    necessary. A successful call is one that yields a 2xx response; any other status is raised
    as a ``requests.exceptions.HTTPError``.
    """

    def __init__(
            self,
            credential: typing.Optional[google.auth.credentials.Credentials] = None,
            session: typing.Optional[requests.Session] = None,
            base_url: str = '',
            headers: typing.Optional[typing.Dict[str, str]] = None,
            retries: typing.Optional[retry.Retry] = DEFAULT_RETRY_CONFIG,
            timeout: typing.Optional[float] = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        """Creates a new HttpClient instance from the provided arguments.

        If a credential is provided, initializes a new HTTP session authorized with it. If neither
        a credential nor a session is provided, initializes a new unauthorized session.

        Args:
          credential: A Google credential that can be used to authenticate requests (optional).
          session: A custom HTTP session (optional).
          base_url: A URL prefix to be added to all outgoing requests (optional).
          headers: A map of headers to be added to all outgoing requests (optional).
          retries: A urllib3 retry configuration. Default settings would retry once for low-level
              connection and socket read errors, and up to 4 times for HTTP 500 and 503 errors.
              Pass None to disable retries (optional).
          timeout: HTTP timeout in seconds. Defaults to 120 seconds when not specified. Set to
              None to disable timeouts (optional).
        """
        if credential:
            self._session = google.auth.transport.requests.AuthorizedSession(credential)
        elif session:
            self._session = session
        else:
            self._session = requests.Session() # pylint: disable=redefined-variable-type

        if headers:
            self._session.headers.update(headers)
        self._base_url = base_url
        self._timeout = timeout
        self._retries = None
        self.retries = retries

    @property
    def session(self) -> typing.Optional[requests.Session]:
        return self._session

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def timeout(self) -> typing.Optional[float]:
        return self._timeout

    @property
    def retries(self) -> typing.Optional[retry.Retry]:
        """The retry configuration applied to outgoing requests, or None if retries are off."""
        return self._retries

    @retries.setter
    def retries(self, retries: typing.Optional[retry.Retry]) -> None:
        self._retries = retries or None
        if self._session is None:
            return
        max_retries = self._retries if self._retries else 0
        self._session.mount('http://', requests.adapters.HTTPAdapter(max_retries=max_retries))
        self._session.mount('https://', requests.adapters.HTTPAdapter(max_retries=max_retries))

    def parse_body(self, resp: requests.Response) -> typing.Any:
        raise NotImplementedError

    def request(self, method: str, url: str, **kwargs: typing.Any) -> requests.Response:
        """Makes an HTTP call using the Python requests library.

        This is the sole entry point to the requests library. All other helper methods in this
        class call this method to send HTTP requests out. Refer to
        http://docs.python-requests.org/en/master/api/ for more information on supported options
        and features.

        Args:
          method: HTTP method name as a string (e.g. get, post).
          url: URL of the remote endpoint.
          **kwargs: An additional set of keyword arguments to be passed into the requests API
              (e.g. json, params, headers, timeout).

        Returns:
          Response: An HTTP response object.

        Raises:
          RequestException: Any requests exceptions encountered while making the HTTP call,
              including ``HTTPError`` for non-2xx responses.
        """
        if 'timeout' not in kwargs:
            kwargs['timeout'] = self.timeout
        kwargs.setdefault('headers', {}).update(METRICS_HEADERS)
        logger.debug('Sending %s request to %s', method.upper(), self.base_url + url)
        resp = self._session.request(method, self.base_url + url, **kwargs)
        logger.debug('Received response with status %d', resp.status_code)
        resp.raise_for_status()
        return resp

    def body_and_response(
            self, method: str, url: str, **kwargs: typing.Any
    ) -> typing.Tuple[typing.Any, requests.Response]:
        resp = self.request(method, url, **kwargs)
        return self.parse_body(resp), resp

    def body(self, method: str, url: str, **kwargs: typing.Any) -> typing.Any:
        resp = self.request(method, url, **kwargs)
        return self.parse_body(resp)

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None


class JsonHttpClient(HttpClient):
    """An HTTP client that parses response messages as JSON."""

    def parse_body(self, resp: requests.Response) -> typing.Any:
        return resp.json()
