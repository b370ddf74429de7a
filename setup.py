"""
A setuptools for the TabProfiler Python Library
"""

# To use a consistent encoding
from codecs import open
import re
from os import path

# Always prefer setuptools over distutils
from setuptools import setup, find_packages

here = path.abspath(path.dirname(__file__))

# Load package version without importing the package
with open(path.join(here, 'tabprofiler', 'version.py'), encoding='utf-8') as f:
    version_parts = dict(re.findall(r'^(MAJOR|MINOR|MICRO) = (\d+)$',
                                    f.read(), re.MULTILINE))
__version__ = "{MAJOR}.{MINOR}.{MICRO}".format(**version_parts)

# Get the long description from the README file
with open(path.join(here, 'README.md'), encoding='utf-8') as f:
    LONG_DESCRIPTION = f.read()

# Get the install_requirements from requirements.txt
with open(path.join(here, 'requirements.txt'), encoding='utf-8') as f:
    required_packages = f.read().splitlines()

# Get the install_requirements from requirements-reports.txt
with open(path.join(here, 'requirements-reports.txt'), encoding='utf-8') as f:
    reports_packages = f.read().splitlines()

# Get the install_requirements from requirements-test.txt
with open(path.join(here, 'requirements-test.txt'), encoding='utf-8') as f:
    test_packages = f.read().splitlines()


DESCRIPTION = "Status, frequency and numeric profiles of tabular data."

setup(
    name='TabProfiler',
    version=__version__,
    python_requires='>=3.8',
    description=DESCRIPTION,
    long_description=LONG_DESCRIPTION,
    long_description_content_type='text/markdown',

    # Choose your license
    license='Apache License, Version 2.0',

    # See https://pypi.python.org/pypi?%3Aaction=list_classifiers
    classifiers=[
        # How mature is this project? Common values are
        #   3 - Alpha
        #   4 - Beta
        #   5 - Production/Stable
        'Development Status :: 3 - Alpha',

        # Indicate who your project is intended for
        'Intended Audience :: Developers',
        'Intended Audience :: Science/Research',

        'Topic :: Scientific/Engineering',
        'Topic :: Scientific/Engineering :: Information Analysis',

        # Pick your license as you wish (should match "license" above)
        'License :: OSI Approved :: Apache Software License',

        'Programming Language :: Python :: 3',
    ],

    # What does your project relate to?
    keywords='Data Profiling Exploratory Analysis',

    packages=find_packages(exclude=["*tests*"]),

    # List run-time dependencies here.  These will be installed by pip when
    # your project is installed. For an analysis of "install_requires" vs pip's
    # requirements files see:
    # https://packaging.python.org/en/latest/requirements.html
    install_requires=required_packages,

    # Optional dependencies, installed by pip when someone installs the
    # project[<label>].
    extras_require={'reports': reports_packages,
                    'test': test_packages,
                    'full': reports_packages + test_packages,
                    },
    include_package_data=True,
)
