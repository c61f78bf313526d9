"""Temporary solution for global config options."""
# Copyright (C) TeNPy Developers, Apache license

__all__ = ['printoptions', 'config']


class printoptions:
    """A collection of global print options. The class is used as a namespace"""

    indent: int = 2
    label_width: int = 3  # column width of indices and labels in debug strings
    maxlines_spaces: int = 15


class config:
    """A collection of global config options. The class is used as a namespace"""
    printoptions = printoptions
    # 'ordered' or 'hashed', see :func:`shellbasis.tools.mappings.make_lookup`.
    # 'ordered' inserts in O(n), which is quadratic for large tables filled out of order.
    lookup_policy = 'ordered'
    do_sanity_checks = False  # If the concrete schemes should call test_sanity() after construction
