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

"""Setup file for distribution artifacts."""
from os import path
import sys

from setuptools import setup


(major, minor) = (sys.version_info.major, sys.version_info.minor)
if major != 3 or minor < 9:
    print('firebase_authmgt requires python >= 3.9', file=sys.stderr)
    sys.exit(1)

# Read in the package metadata per recommendations from:
# https://packaging.python.org/guides/single-sourcing-package-version/
about_path = path.join(path.dirname(path.abspath(__file__)), 'firebase_authmgt', '__about__.py')
about = {}
with open(about_path) as fp:
    exec(fp.read(), about)  # pylint: disable=exec-used


long_description = ('Firebase Auth management for Python reads the tenants and the SAML and OIDC '
                    'identity provider configurations of a Firebase project.')
install_requires = [
    'google-auth >= 2.0.0',
    'requests >= 2.26.0',
    'urllib3 >= 1.26.0',
]
extras_require = {
    'test': [
        'pytest >= 6.2.0',
        'pytest-localserver >= 0.5.0',
        'pytest-mock >= 3.6.0',
    ],
}

setup(
    name=about['__title__'],
    version=about['__version__'],
    description='Firebase Auth tenant and provider configuration management',
    long_description=long_description,
    url=about['__url__'],
    author=about['__author__'],
    license=about['__license__'],
    keywords='firebase auth multi-tenancy saml oidc',
    install_requires=install_requires,
    extras_require=extras_require,
    packages=['firebase_authmgt'],
    python_requires='>=3.9',
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'Topic :: Software Development :: Libraries',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'License :: OSI Approved :: Apache Software License',
    ],
)
