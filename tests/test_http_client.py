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

"""Tests for firebase_authmgt._http_client."""
import pytest
from pytest_localserver import http
import requests
from urllib3.util import retry

from firebase_authmgt import _http_client, _utils
from tests import testutils


_TEST_URL = 'http://firebase.test.url/'


class TestHttpClient:

    def test_default_session(self):
        client = _http_client.HttpClient()
        assert client.session is not None
        assert client.base_url == ''
        recorder = self._instrument(client, 'body')

        resp = client.request('get', _TEST_URL)

        assert resp.status_code == 200
        assert resp.text == 'body'
        assert len(recorder) == 1
        assert recorder[0].method == 'GET'
        assert recorder[0].url == _TEST_URL

    def test_custom_session(self):
        session = requests.Session()
        client = _http_client.HttpClient(session=session)
        assert client.session is session
        recorder = self._instrument(client, 'body')

        client.request('get', _TEST_URL)

        assert len(recorder) == 1

    def test_base_url(self):
        client = _http_client.HttpClient(base_url=_TEST_URL)
        assert client.base_url == _TEST_URL
        recorder = self._instrument(client, 'body')

        resp = client.request('get', 'foo')

        assert resp.text == 'body'
        assert recorder[0].url == _TEST_URL + 'foo'

    def test_default_headers(self):
        client = _http_client.HttpClient(headers={'X-Custom': 'value'})
        recorder = self._instrument(client, 'body')

        client.request('get', _TEST_URL)

        assert recorder[0].headers['X-Custom'] == 'value'

    def test_metrics_headers(self):
        client = _http_client.HttpClient()
        recorder = self._instrument(client, 'body')

        client.request('get', _TEST_URL, headers={'X-Client-Version': 'test'})

        assert recorder[0].headers['X-GOOG-API-CLIENT'] == _utils.get_metrics_header()
        assert recorder[0].headers['X-Client-Version'] == 'test'

    def test_credential(self):
        client = _http_client.HttpClient(credential=testutils.MockGoogleCredential())
        recorder = self._instrument(client, 'body')

        client.request('get', _TEST_URL)

        assert recorder[0].headers['Authorization'] == 'Bearer mock-token'

    @pytest.mark.parametrize('options, timeout', [
        ({}, _http_client.DEFAULT_TIMEOUT_SECONDS),
        ({'timeout': 7}, 7),
        ({'timeout': 0}, 0),
        ({'timeout': None}, None),
    ])
    def test_timeout(self, options, timeout):
        client = _http_client.HttpClient(**options)
        assert client.timeout == timeout
        recorder = self._instrument(client, 'body')

        client.request('get', _TEST_URL)

        assert len(recorder) == 1
        if timeout is None:
            assert recorder[0]._extra_kwargs['timeout'] is None
        else:
            assert recorder[0]._extra_kwargs['timeout'] == pytest.approx(timeout, 0.001)

    def test_per_request_timeout(self):
        client = _http_client.HttpClient()
        recorder = self._instrument(client, 'body')

        client.request('get', _TEST_URL, timeout=3)

        assert recorder[0]._extra_kwargs['timeout'] == pytest.approx(3, 0.001)

    @pytest.mark.parametrize('status', [400, 404, 500])
    def test_error_status_raises(self, status):
        client = _http_client.HttpClient()
        self._instrument(client, '{}', status)

        with pytest.raises(requests.exceptions.HTTPError) as excinfo:
            client.request('get', _TEST_URL)

        assert excinfo.value.response.status_code == status

    def test_json_body(self):
        client = _http_client.JsonHttpClient()
        self._instrument(client, '{"name": "projects/p/tenants/t"}')

        body = client.body('get', _TEST_URL)

        assert body == {'name': 'projects/p/tenants/t'}

    def test_json_body_and_response(self):
        client = _http_client.JsonHttpClient()
        self._instrument(client, '{"key": "value"}')

        body, resp = client.body_and_response('get', _TEST_URL)

        assert body == {'key': 'value'}
        assert resp.status_code == 200

    def test_invalid_json_body(self):
        client = _http_client.JsonHttpClient()
        self._instrument(client, 'not json')

        with pytest.raises(ValueError):
            client.body('get', _TEST_URL)

    def test_default_retries(self):
        client = _http_client.HttpClient()
        assert client.retries is _http_client.DEFAULT_RETRY_CONFIG
        adapter = client.session.get_adapter('https://identitytoolkit.googleapis.com')
        assert adapter.max_retries is _http_client.DEFAULT_RETRY_CONFIG

    def test_disable_retries(self):
        client = _http_client.HttpClient(retries=None)
        assert client.retries is None
        adapter = client.session.get_adapter('https://identitytoolkit.googleapis.com')
        assert adapter.max_retries.total == 0

    def test_close(self):
        client = _http_client.HttpClient()
        client.close()
        assert client.session is None

    def test_set_retries_after_close(self):
        client = _http_client.HttpClient()
        client.close()

        client.retries = None
        assert client.retries is None
        client.retries = _http_client.DEFAULT_RETRY_CONFIG
        assert client.retries is _http_client.DEFAULT_RETRY_CONFIG
        assert client.session is None

    def _instrument(self, client, payload, status=200):
        recorder = []
        adapter = testutils.MockAdapter(payload, status, recorder)
        client.session.mount(_TEST_URL, adapter)
        return recorder


class TestHttpRetry:
    """Unit tests for the default HTTP retry configuration."""

    @classmethod
    def setup_class(cls):
        # Turn off exponential backoff for faster execution.
        cls.retry_config = retry.Retry(
            connect=1, read=1, status=4, status_forcelist=[500, 503],
            raise_on_status=False, backoff_factor=0, allowed_methods=None)

        server = http.ContentServer()
        server.start()
        cls.httpserver = server

    @classmethod
    def teardown_class(cls):
        cls.httpserver.stop()

    def setup_method(self):
        self.httpserver.requests = []

    @pytest.mark.parametrize('status', [500, 503])
    def test_retry_on_server_error(self, status):
        self.httpserver.serve_content({}, status)
        client = _http_client.JsonHttpClient(
            credential=testutils.MockGoogleCredential(), base_url=self.httpserver.url,
            retries=self.retry_config)

        with pytest.raises(requests.exceptions.HTTPError) as excinfo:
            client.request('get', '/')

        assert excinfo.value.response.status_code == status
        assert len(self.httpserver.requests) == 5

    def test_no_retry_on_404(self):
        self.httpserver.serve_content({}, 404)
        client = _http_client.JsonHttpClient(
            credential=testutils.MockGoogleCredential(), base_url=self.httpserver.url,
            retries=self.retry_config)

        with pytest.raises(requests.exceptions.HTTPError) as excinfo:
            client.request('get', '/')

        assert excinfo.value.response.status_code == 404
        assert len(self.httpserver.requests) == 1

    def test_retries_disabled(self):
        self.httpserver.serve_content({}, 503)
        client = _http_client.JsonHttpClient(
            credential=testutils.MockGoogleCredential(), base_url=self.httpserver.url,
            retries=None)

        with pytest.raises(requests.exceptions.HTTPError):
            client.request('get', '/')

        assert len(self.httpserver.requests) == 1
