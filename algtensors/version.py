"""Access to version of this library.

The version is provided in the standard python format ``major.minor.revision`` as string.
Use ``pkg_resources.parse_version`` before comparing versions.

.. autodata :: version
.. autodata :: released
.. autodata :: full_version
.. autodata :: version_summary
"""
# Copyright (C) TeNPy Developers, Apache license

import sys

import numpy
import scipy

__all__ = ['version', 'released', 'full_version', 'version_summary']

#: current release version as a string
version = '0.1.0'

#: whether this is a released version or modified
released = False

#: same as version, but with a '.dev' suffix for unreleased versions
full_version = version if released else version + '.dev0'

#: summary of the algtensors, python, numpy and scipy versions used
version_summary = (
    f'algtensors {full_version}\n'
    f'---------------------\n'
    f'Python version {sys.version}\n'
    f'numpy version {numpy.__version__}\n'
    f'scipy version {scipy.__version__}'
)
