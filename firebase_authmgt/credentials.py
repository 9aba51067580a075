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

"""Credentials used to authorize calls to the Identity Toolkit service."""

import json
import os

import google.auth
from google.auth.credentials import Credentials as GoogleAuthCredentials
from google.oauth2 import service_account


_scopes = [
    'https://www.googleapis.com/auth/cloud-platform',
    'https://www.googleapis.com/auth/firebase',
    'https://www.googleapis.com/auth/identitytoolkit',
]


class Base:
    """Provides Google credentials for accessing the Identity Toolkit service."""

    def get_credential(self) -> GoogleAuthCredentials:
        """Returns the Google credential instance used for authentication."""
        raise NotImplementedError


class Certificate(Base):
    """A credential initialized from a JSON service account key file."""

    _CREDENTIAL_TYPE = 'service_account'

    def __init__(self, cert):
        """Initializes a credential from a Google service account certificate.

        Args:
          cert: Path to a certificate file or a dict representing the contents of a certificate.

        Raises:
          IOError: If the specified certificate file doesn't exist or cannot be read.
          ValueError: If the specified certificate is invalid.
        """
        super().__init__()
        if isinstance(cert, (str, os.PathLike)):
            with open(cert) as json_file:
                json_data = json.load(json_file)
        elif isinstance(cert, dict):
            json_data = cert
        else:
            raise ValueError(
                f'Invalid certificate argument: "{cert}". Certificate argument must be a file '
                'path, or a dict containing the parsed file contents.')

        if json_data.get('type') != self._CREDENTIAL_TYPE:
            raise ValueError(
                'Invalid service account certificate. Certificate must contain a '
                f'"type" field set to "{self._CREDENTIAL_TYPE}".')
        try:
            self._g_credential = service_account.Credentials.from_service_account_info(
                json_data, scopes=_scopes)
        except ValueError as error:
            raise ValueError(
                f'Failed to initialize a certificate credential. Caused by: "{error}"')

    @property
    def project_id(self):
        return self._g_credential.project_id

    @property
    def service_account_email(self):
        return self._g_credential.service_account_email

    def get_credential(self):
        return self._g_credential


class ApplicationDefault(Base):
    """A Google Application Default credential.

    Discovery of the underlying credential is deferred until it is first needed, so that an
    App can be created in environments where no default credential is configured.
    """

    def __init__(self):
        super().__init__()
        self._g_credential = None
        self._project_id = None

    @property
    def project_id(self):
        self._load_credential()
        return self._project_id

    def get_credential(self):
        self._load_credential()
        return self._g_credential

    def _load_credential(self):
        if not self._g_credential:
            self._g_credential, self._project_id = google.auth.default(scopes=_scopes)


class ExternalCredentials(Base):
    """Wraps an existing ``google.auth.credentials.Credentials`` instance."""

    def __init__(self, credential: GoogleAuthCredentials):
        super().__init__()
        self._g_credential = credential

    def get_credential(self):
        return self._g_credential
