"""A setuptools based setup module for flowmatch.
See:
https://packaging.python.org/en/latest/distributing.html
https://github.com/pypa/sampleproject
"""

import os
import re
from setuptools import setup, find_packages


HERE = os.path.abspath(os.path.dirname(__file__))
README_PATH = os.path.join(HERE, 'README.rst')
VERSION_PATH = os.path.join(HERE, 'flowmatch', '__init__.py')


def _get_description(path):
    with open(path, encoding='utf-8') as afile:
        return afile.read()


def _get_version(path):
    with open(path, encoding='utf-8') as afile:
        regex = re.compile(r"(?m)__version__\s*=\s*'(\d+\.\d+\.\d+)'")
        return regex.search(afile.read()).group(1)


setup(
    name='flowmatch',
    packages=find_packages(exclude=['tests']),
    version=_get_version(VERSION_PATH),
    license='MIT',

    description='Encode flow match fields as ovs-ofctl match tokens',
    long_description=_get_description(README_PATH),
    keywords='openflow ovs-ofctl match tcam',

    python_requires='>=3.8',

    # Dependencies
    install_requires=[
        # Imported by http and service submodules.
        'aiohttp>=3.8',
        # Required for /metrics and encode counters.
        'prometheus_client',
        # Required for interactive shell.
        'prompt_toolkit>=3.0'
    ],
    extras_require={
        'test': ['pytest', 'pytest-asyncio']
    },

    entry_points={
        'console_scripts': ['flowmatch=flowmatch.__main__:main']
    },

    # See https://pypi.python.org/pypi?%3Aaction=list_classifiers
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Operating System :: Unix',
        'Programming Language :: Python :: 3',
        'Topic :: System :: Networking'
    ],

    zip_safe=True
)
