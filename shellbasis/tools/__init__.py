"""Helper tools for the generic indexing layer.

.. rubric:: Submodules

.. autosummary::
    :toctree: .

    mappings
    math
    string
"""
# Copyright (C) TeNPy Developers, Apache license

from . import mappings, math, string
from .mappings import HashedLookup, OrderedLookup, make_lookup
from .math import allowed_triangle, half_int, half_int_str, parity_grade, triangle_range, twice_value
from .string import format_label, format_like_list, join_lines

__all__ = [
    'mappings', 'math', 'string',
    'HashedLookup', 'OrderedLookup', 'make_lookup',
    'allowed_triangle', 'half_int', 'half_int_str', 'parity_grade', 'triangle_range', 'twice_value',
    'format_label', 'format_like_list', 'join_lines',
]
