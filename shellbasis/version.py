"""Access to version of this library."""
# Copyright (C) TeNPy Developers, Apache license

import sys

import numpy as np

__all__ = ['version', 'full_version', 'version_summary']

version = '0.1.0'
"""Current release version as a string of the form ``'x.y.z'``."""

full_version = version
"""Version including a development suffix, if any."""

version_summary = (f'shellbasis {full_version}, '
                   f'using numpy {np.version.full_version}, '
                   f'python {sys.version}')
"""Summary of the versions of shellbasis and the libraries it uses."""
