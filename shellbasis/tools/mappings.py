"""Lookup tables from labels to indices.

Two implementations with the same call structure are provided. :class:`OrderedLookup` keeps its
keys sorted, which gives a deterministic iteration order and only requires the keys to be
orderable. :class:`HashedLookup` is a plain hash map, which scales better for large tables but
requires hashable keys. Which one is used by the basis containers is a policy, controlled by
:attr:`shellbasis.dummy_config.config.lookup_policy`.
"""
# Copyright (C) TeNPy Developers, Apache license

from __future__ import annotations

import bisect
from collections.abc import Iterator
from typing import Generic, Literal, TypeVar

from ..dummy_config import config

__all__ = ['OrderedLookup', 'HashedLookup', 'make_lookup', 'lookup_policies']


_KT = TypeVar('_KT')  # type for keys, i.e. label tuples

lookup_policies = ('ordered', 'hashed')


class HashedLookup(Generic[_KT], dict[_KT, int]):
    """A hash map ``labels -> index``.

    Iteration goes over the keys in insertion order.
    """

    policy = 'hashed'


class OrderedLookup(Generic[_KT]):
    """A sorted map ``labels -> index``.

    The keys are kept in a sorted list, lookups are done by bisection. Iteration goes over the keys
    in sorted order. Inserting a key that does not sort last costs ``O(n)``, so filling a large
    table out of order is quadratic; the ``'hashed'`` policy avoids this.
    """

    policy = 'ordered'

    def __init__(self):
        self._keys = []
        self._values = []

    def _find(self, key: _KT) -> int | None:
        pos = bisect.bisect_left(self._keys, key)
        if pos < len(self._keys) and self._keys[pos] == key:
            return pos
        return None

    def get(self, key: _KT, default=None):
        pos = self._find(key)
        if pos is None:
            return default
        return self._values[pos]

    def __getitem__(self, key: _KT) -> int:
        pos = self._find(key)
        if pos is None:
            raise KeyError(key)
        return self._values[pos]

    def __setitem__(self, key: _KT, value: int):
        pos = bisect.bisect_left(self._keys, key)
        if pos < len(self._keys) and self._keys[pos] == key:
            self._values[pos] = value
            return
        self._keys.insert(pos, key)
        self._values.insert(pos, value)

    def __contains__(self, key) -> bool:
        return self._find(key) is not None

    def __len__(self) -> int:
        return len(self._keys)

    def __iter__(self) -> Iterator[_KT]:
        return iter(self._keys)

    def keys(self) -> list[_KT]:
        return self._keys[:]

    def items(self) -> list[tuple[_KT, int]]:
        return list(zip(self._keys, self._values))

    def __repr__(self):
        return f'{type(self).__name__}({dict(self.items())!r})'


def make_lookup(policy: Literal['ordered', 'hashed'] | None = None) -> OrderedLookup | HashedLookup:
    """Create an empty lookup table.

    Parameters
    ----------
    policy : {'ordered', 'hashed'} | None
        Which implementation to use. Defaults to :attr:`config.lookup_policy`.
    """
    if policy is None:
        policy = config.lookup_policy
    if policy == 'ordered':
        return OrderedLookup()
    if policy == 'hashed':
        return HashedLookup()
    raise ValueError(f'Invalid lookup policy: {policy!r}. Expected one of {lookup_policies}.')
