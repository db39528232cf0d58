# Copyright 2010-2025 Google LLC
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

from sys import executable

setuptools_import_error_message = """setuptools is not installed for """ + executable + """
Please follow this link for installing instructions :
https://pypi.python.org/pypi/setuptools
make sure you use \"""" + executable + """\" during the installation"""

try:
    from setuptools import setup
except ImportError:
    raise ImportError(setuptools_import_error_message)

from os.path import join as pjoin
from os.path import dirname


# Utility function to read the README file.
# Used for the long_description.
def read(fname):
    with open(pjoin(dirname(__file__), fname)) as f:
        return f.read()


setup(
    name='optdsl',
    version='1.0.0',
    packages=[
        'optdsl',
        'optdsl.cp',
        'optdsl.cp.samples',
        'optdsl.mp',
        'optdsl.mp.samples',
    ],
    python_requires='>=3.9',
    install_requires=[
        'absl-py >= 2.0.0',
        'numpy >= 1.13.3',
        'ortools >= 9.12, < 9.13',
        'pandas >= 2.0.0',
        'protobuf >= 5.26.1',
    ],
    extras_require={
        'test': ['pytest'],
    },
    package_data={
        'optdsl.cp.samples': ['data/*.data'],
    },
    license='Apache 2.0',
    description='Python modeling layer for constraint programming and '
                'mathematical programming on top of OR-Tools',
    keywords=('operations research, constraint programming, '
              'scheduling, linear programming, mixed integer programming, '
              'python'),
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: Apache Software License',
        'Operating System :: OS Independent',
        'Programming Language :: Python :: 3',
        'Topic :: Office/Business :: Scheduling',
        'Topic :: Scientific/Engineering',
        'Topic :: Scientific/Engineering :: Mathematics',
        'Topic :: Software Development :: Libraries :: Python Modules'],
    long_description=read('README.md'),
    long_description_content_type='text/markdown',
)
