r"""Generic indexing of basis states arranged into symmetry subspaces.

The foundational class is the *subspace*, :class:`BaseSubspace`, which represents a subspace with
good quantum numbers (e.g. :math:`J`, parity and isospin projection) and sets up the indexing of
the states within that subspace, in both directions ``labels <-> index``.

Access to the states is via a *state*, :class:`BaseState`, which is a lightweight view consisting
of a reference to its subspace and the index of the state within that subspace. Its labels are
looked up from the subspace when needed.

A *space*, :class:`BaseSpace`, is an ordered collection of subspaces, with reverse lookup of the
subspace index by the subspace labels.

Finally, to keep track of the matrix elements of an operator of given tensorial character, we
enumerate the *sectors*, i.e. the pairs of subspaces which are connected under the selection rules
of the operator. A :class:`BaseSector` identifies a single block of the matrix representation of
the operator, and :class:`BaseSectors` enumerates all of them, see :meth:`BaseSectors._enumerate`.

Concrete coupling schemes derive from these base classes, see :mod:`shellbasis.models`.
They enumerate states and subspaces in their constructors by calling the protected push methods,
in a canonical order which is defined by the scheme. After construction, all objects are
read-only.

Failed lookups do not raise, but return the flag value :data:`NONE`, which callers must check for.
Violations of the calling contract, such as out-of-range indices or duplicate labels, are
programming errors and are trapped by ``assert`` statements.
"""
# Copyright (C) TeNPy Developers, Apache license

from __future__ import annotations

import copy
import logging
import warnings
from collections.abc import Iterator
from enum import IntEnum
from typing import Generic, TypeVar

import numpy as np

from .dummy_config import printoptions
from .selection_rules import AnyPair, SelectionRule
from .tools.mappings import make_lookup
from .tools.string import format_label, join_lines

__all__ = ['NONE', 'BaseSubspace', 'BaseState', 'BaseSpace', 'BaseSector', 'SectorDirection',
           'BaseSectors', 'Sectors']

logger = logging.getLogger(__name__)

NONE = int(np.iinfo(np.intp).max)
"""Flag value for a missing target in index lookups, the maximal representable index."""

_SubspaceT = TypeVar('_SubspaceT', bound='BaseSubspace')
_SpaceT = TypeVar('_SpaceT', bound='BaseSpace')


class BaseSubspace:
    """Indexing of the states within a symmetry subspace.

    The derived class is expected to set up a constructor, which enumerates the states by calling
    :meth:`_push_state_labels`, and friendlier accessors for the individual labels.

    Labels are tuples, even if only a single quantum number is needed.

    Parameters
    ----------
    labels : tuple
        The labels of the subspace itself.

    Attributes
    ----------
    weights : list of float
        Truncation weights of the states, if provided by the derived class.
        Either empty or one entry per state. They do not affect the indexing.
    """

    def __init__(self, labels: tuple):
        assert isinstance(labels, tuple), f'subspace labels must be a tuple, got {labels!r}'
        self._labels = labels
        self._state_table = []
        self._lookup = make_lookup()
        self.weights = []

    def test_sanity(self):
        assert len(self._lookup) == len(self._state_table), 'duplicate state labels'
        for index, state_labels in enumerate(self._state_table):
            assert self._lookup[state_labels] == index, f'inconsistent lookup for {state_labels}'
        assert len(self.weights) in (0, self.size), 'weights do not match the states'

    @property
    def labels(self) -> tuple:
        """The labels of the subspace itself."""
        return self._labels

    @property
    def size(self) -> int:
        """The number of states in the subspace."""
        return len(self._state_table)

    def __len__(self):
        return len(self._state_table)

    @property
    def state_table(self) -> tuple[tuple, ...]:
        """The labels of all states, in index order."""
        return tuple(self._state_table)

    def __iter__(self) -> Iterator[tuple]:
        return iter(self._state_table)

    def get_state_labels(self, index: int) -> tuple:
        """The labels of a state within the subspace, given its index.

        It is not normally expected that this is used directly. Rather, instantiate a state
        (a :class:`BaseState` of the appropriate type) and use its accessors.
        """
        assert 0 <= index < len(self._state_table), f'state index {index} out of range'
        return self._state_table[index]

    def contains_state(self, state_labels: tuple) -> bool:
        """If a state with the given labels is found within the subspace."""
        return state_labels in self._lookup

    def __contains__(self, state_labels: tuple) -> bool:
        return self.contains_state(state_labels)

    def lookup_state_index(self, state_labels: tuple) -> int:
        """The index of the state with the given labels, or :data:`NONE` if absent."""
        return self._lookup.get(state_labels, NONE)

    def _push_state_labels(self, state_labels: tuple, *, weight: float = None) -> int:
        """Register a state, assigning it the next index. Returns that index.

        Only for use during the initial construction. The enumeration of the derived class is
        responsible for never producing the same labels twice.
        """
        assert isinstance(state_labels, tuple), f'state labels must be a tuple, got {state_labels!r}'
        assert state_labels not in self._lookup, f'duplicate state labels {state_labels}'
        index = len(self._state_table)
        self._lookup[state_labels] = index
        self._state_table.append(state_labels)
        if weight is not None:
            self.weights.append(weight)
        return index

    def label_str(self) -> str:
        """A string representation of the subspace labels."""
        return format_label(self._labels)

    def debug_str(self) -> str:
        """Dump of the subspace contents, for debugging."""
        w = printoptions.label_width
        lines = []
        for index, state_labels in enumerate(self._state_table):
            line = f' index {index:>{w}} labels {format_label(state_labels)}'
            if self.weights:
                line += f' weight {self.weights[index]}'
            lines.append(line)
        return join_lines(lines)

    def __repr__(self):
        return f'{type(self).__name__}(labels={self.label_str()}, size={self.size})'


class BaseState(Generic[_SubspaceT]):
    """A state within a given subspace.

    The subspace (and the indexing it provides) is *not* copied into the state, but referenced.
    The derived class is expected to provide friendlier accessors for the individual labels.

    Parameters
    ----------
    subspace : :class:`BaseSubspace`
        The subspace in which the state lies.
    index : int
        The index of the state within the subspace.

    See Also
    --------
    from_labels
    """

    def __init__(self, subspace: _SubspaceT, index: int):
        self._subspace = subspace
        self._index = index
        assert 0 <= index < subspace.size, f'state index {index} out of range for {subspace!r}'

    @classmethod
    def from_labels(cls, subspace: _SubspaceT, state_labels: tuple):
        """Construct a state by reverse lookup of its labels within the subspace."""
        index = subspace.lookup_state_index(state_labels)
        assert index != NONE, f'state labels {state_labels} not found in {subspace!r}'
        return cls(subspace, index)

    @property
    def subspace(self) -> _SubspaceT:
        """The subspace in which this state lies."""
        return self._subspace

    @property
    def index(self) -> int:
        """The index of the state within its subspace."""
        return self._index

    @property
    def labels(self) -> tuple:
        """The labels of this state."""
        return self._subspace.get_state_labels(self._index)

    def label_str(self) -> str:
        """A string representation of the state labels."""
        return format_label(self.labels)

    def __eq__(self, other):
        if not isinstance(other, BaseState):
            return NotImplemented
        return self._subspace is other._subspace and self._index == other._index

    def __hash__(self):
        return hash((id(self._subspace), self._index))

    def __repr__(self):
        return f'{type(self).__name__}({self._subspace.label_str()}, index={self._index})'


class BaseSpace(Generic[_SubspaceT]):
    """Container of subspaces, with reverse lookup by subspace labels.

    The derived class is expected to set up a constructor which enumerates the subspaces, calling
    :meth:`_push_subspace` or :meth:`_emplace_subspace`, in the canonical order of the scheme.
    Whether empty subspaces are kept is a policy of the derived class.

    Copies are lightweight: a (shallow) copy shares the subspaces and the lookup table with the
    original. The first copy ends the construction: the list of subspaces is frozen into a tuple,
    and further calls to :meth:`_push_subspace` fail, on the original as well as on the copies.
    Since :class:`BaseSectors` store copies, a space used in sectors can not change underneath them.
    """

    def __init__(self):
        self._subspaces = []
        self._lookup = make_lookup()

    def test_sanity(self):
        assert len(self._lookup) == len(self._subspaces), 'duplicate subspace labels'
        for index, subspace in enumerate(self._subspaces):
            assert self._lookup[subspace.labels] == index, f'inconsistent lookup for {subspace!r}'
            subspace.test_sanity()

    def copy(self):
        """A lightweight copy, sharing the subspaces with `self`. Freezes `self`."""
        return copy.copy(self)

    def __copy__(self):
        self._freeze()
        res = object.__new__(type(self))
        res.__dict__.update(self.__dict__)
        return res

    def _freeze(self):
        """End the construction. Afterwards, no subspaces can be added."""
        if not self.is_frozen:
            self._subspaces = tuple(self._subspaces)

    @property
    def is_frozen(self) -> bool:
        """If the construction has ended, see :meth:`_freeze`."""
        return isinstance(self._subspaces, tuple)

    @property
    def size(self) -> int:
        """The number of subspaces within the space."""
        return len(self._subspaces)

    def __len__(self):
        return len(self._subspaces)

    def __iter__(self) -> Iterator[_SubspaceT]:
        return iter(self._subspaces)

    @property
    def dimension(self) -> int:
        """The total dimension, i.e. the sum of the sizes of all subspaces."""
        return sum(subspace.size for subspace in self._subspaces)

    def subspace_slices(self) -> np.ndarray:
        """For every subspace, the start and stop of its states in the concatenated basis.

        Returns
        -------
        slices : 2D array of int
            Axes ``[n, 2]``, such that the states of subspace ``n`` occupy the indices
            ``slices[n, 0]:slices[n, 1]`` when enumerating all states of the space in order.
        """
        sizes = np.array([subspace.size for subspace in self._subspaces], dtype=np.intp)
        slices = np.zeros((len(sizes), 2), dtype=np.intp)
        slices[:, 1] = slice_ends = np.cumsum(sizes)
        slices[1:, 0] = slice_ends[:-1]  # slices[0, 0] remains 0, which is correct
        return slices

    def get_subspace(self, index: int) -> _SubspaceT:
        """The subspace with the given index."""
        assert 0 <= index < len(self._subspaces), f'subspace index {index} out of range'
        return self._subspaces[index]

    def __getitem__(self, index: int) -> _SubspaceT:
        return self.get_subspace(index)

    def contains_subspace(self, subspace_labels: tuple) -> bool:
        """If a subspace with the given labels is found within the space."""
        return subspace_labels in self._lookup

    def __contains__(self, subspace_labels: tuple) -> bool:
        return self.contains_subspace(subspace_labels)

    def lookup_subspace_index(self, subspace_labels: tuple) -> int:
        """The index of the subspace with the given labels, or :data:`NONE` if absent."""
        return self._lookup.get(subspace_labels, NONE)

    def lookup_subspace(self, subspace_labels: tuple) -> _SubspaceT:
        """The subspace with the given labels, which must be present."""
        index = self.lookup_subspace_index(subspace_labels)
        assert index != NONE, f'subspace labels {subspace_labels} not found'
        return self._subspaces[index]

    def _push_subspace(self, subspace: _SubspaceT) -> int:
        """Register a subspace, assigning it the next index. Returns that index.

        Only for use during the initial construction.
        """
        assert not self.is_frozen, 'can not add subspaces to a space after it was copied'
        assert subspace.labels not in self._lookup, f'duplicate subspace labels {subspace.labels}'
        index = len(self._subspaces)
        self._lookup[subspace.labels] = index
        self._subspaces.append(subspace)
        return index

    def _emplace_subspace(self, cls: type[_SubspaceT], *args, **kwargs) -> int:
        """Construct a subspace ``cls(*args, **kwargs)`` and register it. Returns its index."""
        return self._push_subspace(cls(*args, **kwargs))

    def debug_str(self) -> str:
        """Dump of the subspaces, for debugging."""
        w = printoptions.label_width
        return join_lines(
            f' index {index:>{w}} labels {subspace.label_str()} dim {subspace.size:>{w}}'
            for index, subspace in enumerate(self._subspaces)
        )

    def __repr__(self):
        ClsName = type(self).__name__
        lines = [f'{ClsName}([']
        indent = printoptions.indent * ' '
        for subspace in self._subspaces:
            lines.append(f'{indent}{subspace!r},')
        lines.append('])')
        if len(lines) <= printoptions.maxlines_spaces:
            return '\n'.join(lines)
        # fallback
        return f'{ClsName}(size={self.size}, dimension={self.dimension})'


class BaseSector(Generic[_SubspaceT]):
    """A single sector, i.e. a pair of subspaces defining a block of an operator matrix.

    The sector may also carry a multiplicity index. This applies if the symmetry group has outer
    multiplicities, such that reduced matrix elements are labelled not only by the bra and the ket,
    but also by a multiplicity index.
    """

    def __init__(self, bra_subspace_index: int, ket_subspace_index: int,
                 bra_subspace: _SubspaceT, ket_subspace: _SubspaceT, multiplicity_index: int = 1):
        self.bra_subspace_index = bra_subspace_index
        self.ket_subspace_index = ket_subspace_index
        self.bra_subspace = bra_subspace
        self.ket_subspace = ket_subspace
        self.multiplicity_index = multiplicity_index

    @property
    def key(self) -> tuple[int, int, int]:
        """The key ``(bra_subspace_index, ket_subspace_index, multiplicity_index)``."""
        return (self.bra_subspace_index, self.ket_subspace_index, self.multiplicity_index)

    @property
    def is_diagonal(self) -> bool:
        """If the sector lies within a single subspace."""
        return self.bra_subspace_index == self.ket_subspace_index

    @property
    def is_upper_triangle(self) -> bool:
        """If the sector lies in the upper triangle, including the diagonal."""
        return self.bra_subspace_index <= self.ket_subspace_index

    @property
    def shape(self) -> tuple[int, int]:
        """The shape ``(bra_dim, ket_dim)`` of the matrix block."""
        return (self.bra_subspace.size, self.ket_subspace.size)

    def __eq__(self, other):
        if not isinstance(other, BaseSector):
            return NotImplemented
        return (self.key == other.key and self.bra_subspace is other.bra_subspace
                and self.ket_subspace is other.ket_subspace)

    def __hash__(self):
        return hash(self.key)

    def __repr__(self):
        return (f'{type(self).__name__}(bra={self.bra_subspace_index}, ket={self.ket_subspace_index}, '
                f'multiplicity_index={self.multiplicity_index})')


class SectorDirection(IntEnum):
    """Which pairs of subspaces to consider when enumerating sectors.

    =============  ===========================================================
    Value          Meaning
    =============  ===========================================================
    canonical      only ``bra_subspace_index <= ket_subspace_index``
    -------------  -----------------------------------------------------------
    both           all pairs
    =============  ===========================================================
    """

    canonical = 0
    both = 1

    @classmethod
    def from_any(cls, direction) -> SectorDirection:
        """Convert a member, its value or its name to a member."""
        if isinstance(direction, str):
            try:
                return cls[direction]
            except KeyError:
                raise ValueError(f'Invalid sector direction: {direction!r}') from None
        return cls(direction)


class BaseSectors(Generic[_SpaceT]):
    """Container of sectors, with reverse lookup by sector key.

    The sectors store their own (lightweight) copies of the bra and ket spaces. Each sector is
    identified by its key ``(bra_subspace_index, ket_subspace_index, multiplicity_index)`` and
    indexed in the order of enumeration. Downstream code stores one matrix block per sector,
    positionally by sector index, and thus relies on this order.

    Parameters
    ----------
    bra_space : :class:`BaseSpace`
        The space of the bra states.
    ket_space : :class:`BaseSpace`, optional
        The space of the ket states. Defaults to the same space as `bra_space`.

    Attributes
    ----------
    direction : :class:`SectorDirection` | None
        The direction used in :meth:`_enumerate`, if the sectors were enumerated by it.
    selection_rule : :class:`~shellbasis.selection_rules.SelectionRule` | None
        The selection rule used in :meth:`_enumerate`, if the sectors were enumerated by it.
    """

    SectorType = BaseSector

    def __init__(self, bra_space: _SpaceT, ket_space: _SpaceT = None):
        if ket_space is None:
            ket_space = bra_space
        self._bra_space = bra_space.copy()
        self._ket_space = ket_space.copy()
        self._keys = []
        self._lookup = make_lookup()
        self.direction = None
        self.selection_rule = None

    def test_sanity(self):
        assert len(self._lookup) == len(self._keys), 'duplicate sector keys'
        for sector_index, key in enumerate(self._keys):
            assert self._lookup[key] == sector_index, f'inconsistent lookup for {key}'
            bra_subspace_index, ket_subspace_index, multiplicity_index = key
            assert 0 <= bra_subspace_index < self._bra_space.size
            assert 0 <= ket_subspace_index < self._ket_space.size
            assert multiplicity_index >= 1
            if self.direction == SectorDirection.canonical:
                assert bra_subspace_index <= ket_subspace_index, f'non-canonical sector {key}'

    @property
    def bra_space(self) -> _SpaceT:
        return self._bra_space

    @property
    def ket_space(self) -> _SpaceT:
        return self._ket_space

    @property
    def has_same_spaces(self) -> bool:
        """If the bra and ket spaces are (copies of) the same space."""
        return self._bra_space._subspaces is self._ket_space._subspaces

    @property
    def keys(self) -> tuple[tuple[int, int, int], ...]:
        """The keys of all sectors, in index order."""
        return tuple(self._keys)

    @property
    def size(self) -> int:
        """The number of sectors."""
        return len(self._keys)

    def __len__(self):
        return len(self._keys)

    def __iter__(self) -> Iterator[BaseSector]:
        for sector_index in range(len(self._keys)):
            yield self.get_sector(sector_index)

    def get_sector(self, sector_index: int) -> BaseSector:
        """The sector with the given index.

        A new sector object is constructed on each call, with references to the subspaces of the
        spaces stored in `self`.
        """
        assert 0 <= sector_index < len(self._keys), f'sector index {sector_index} out of range'
        bra_subspace_index, ket_subspace_index, multiplicity_index = self._keys[sector_index]
        return self.SectorType(
            bra_subspace_index, ket_subspace_index,
            self._bra_space.get_subspace(bra_subspace_index),
            self._ket_space.get_subspace(ket_subspace_index),
            multiplicity_index,
        )

    def contains_sector(self, bra_subspace_index: int, ket_subspace_index: int,
                        multiplicity_index: int = 1) -> bool:
        """If the sector is found within the sector set."""
        return (bra_subspace_index, ket_subspace_index, multiplicity_index) in self._lookup

    def lookup_sector_index(self, bra_subspace_index: int, ket_subspace_index: int,
                            multiplicity_index: int = 1) -> int:
        """The index of the sector, or :data:`NONE` if absent."""
        return self._lookup.get((bra_subspace_index, ket_subspace_index, multiplicity_index), NONE)

    def lookup_sector_index_by_key(self, key: tuple[int, int, int]) -> int:
        """The index of the sector with the given key, or :data:`NONE` if absent."""
        return self._lookup.get(tuple(key), NONE)

    def block_shapes(self) -> list[tuple[int, int]]:
        """The shape ``(bra_dim, ket_dim)`` of the matrix block of each sector, in index order."""
        return [(self._bra_space.get_subspace(b).size, self._ket_space.get_subspace(k).size)
                for b, k, _ in self._keys]

    def _push_sector(self, bra_subspace_index: int, ket_subspace_index: int,
                     multiplicity_index: int = 1) -> int:
        """Register a sector, assigning it the next index. Returns that index.

        Only for use during the initial construction.
        """
        return self._push_sector_key((bra_subspace_index, ket_subspace_index, multiplicity_index))

    def _push_sector_key(self, key: tuple[int, int, int]) -> int:
        """Register a sector by its key. See :meth:`_push_sector`."""
        assert key not in self._lookup, f'duplicate sector {key}'
        index = len(self._keys)
        self._lookup[key] = index
        self._keys.append(key)
        return index

    def _enumerate(self, selection_rule: SelectionRule = None,
                   direction: SectorDirection | str = SectorDirection.canonical):
        """Enumerate all sectors allowed by a selection rule.

        Goes over all pairs ``(bra_subspace_index, ket_subspace_index)`` in row-major order, i.e.
        with the bra index in the outer loop, both increasing. Pairs are discarded if they violate
        the `direction`, or if the `selection_rule` does not allow them. For each remaining pair,
        sectors are pushed for the multiplicity indices ``1, ..., selection_rule.multiplicity``.
        This order defines the sector indices.

        Parameters
        ----------
        selection_rule : :class:`~shellbasis.selection_rules.SelectionRule`, optional
            Which pairs are connected. Defaults to all pairs.
        direction : :class:`SectorDirection`
            With ``canonical``, only the upper triangle ``bra_subspace_index <= ket_subspace_index``
            is kept.
        """
        assert not self._keys, 'sectors can only be enumerated once'
        direction = SectorDirection.from_any(direction)
        if selection_rule is None:
            selection_rule = AnyPair()
        if direction == SectorDirection.canonical and not self.has_same_spaces:
            msg = 'Canonical sector direction between different bra and ket spaces.'
            warnings.warn(msg, stacklevel=3)
        self.direction = direction
        self.selection_rule = selection_rule
        canonical = direction == SectorDirection.canonical
        for bra_subspace_index, bra_subspace in enumerate(self._bra_space):
            for ket_subspace_index, ket_subspace in enumerate(self._ket_space):
                if canonical and bra_subspace_index > ket_subspace_index:
                    continue
                if not selection_rule.allowed(bra_subspace, ket_subspace):
                    continue
                multiplicity = selection_rule.multiplicity(bra_subspace, ket_subspace)
                for multiplicity_index in range(1, multiplicity + 1):
                    self._push_sector(bra_subspace_index, ket_subspace_index, multiplicity_index)
        logger.debug('%s: enumerated %d sectors (%s, %r)', type(self).__name__, len(self._keys),
                     direction.name, selection_rule)

    def debug_str(self) -> str:
        """Dump of the sectors, for debugging.

        Requires the subspaces to provide :meth:`~BaseSubspace.label_str`.
        """
        w = printoptions.label_width
        lines = []
        for sector_index, sector in enumerate(self):
            lines.append(
                f'  sector {sector_index:>{w}}'
                f'  bra index {sector.bra_subspace_index:>{w}} labels {sector.bra_subspace.label_str()}'
                f' dim {sector.bra_subspace.size:>{w}}'
                f'  ket index {sector.ket_subspace_index:>{w}} labels {sector.ket_subspace.label_str()}'
                f' dim {sector.ket_subspace.size:>{w}}'
                f'  multiplicity index {sector.multiplicity_index}'
            )
        return join_lines(lines)

    def __repr__(self):
        return f'{type(self).__name__}(size={self.size}, direction={self.direction!r})'


class Sectors(BaseSectors[_SpaceT]):
    """Sectors of an operator, enumerated from a selection rule on construction.

    Parameters
    ----------
    bra_space : :class:`BaseSpace`
        The space of the bra states.
    ket_space : :class:`BaseSpace`, optional
        The space of the ket states. Defaults to the same space as `bra_space`.
    selection_rule : :class:`~shellbasis.selection_rules.SelectionRule`, optional
        Which pairs of subspaces are connected. Defaults to all pairs.
    direction : :class:`SectorDirection` | str, optional
        Defaults to ``canonical`` for a single space and to ``both`` for two spaces.

    Examples
    --------
    Sectors of a hermitian operator of angular momentum rank 2 and positive parity::

        rule = TriangleRule(JJ0=4) & ParityRule(g0=0)
        sectors = Sectors(space, selection_rule=rule)
    """

    def __init__(self, bra_space: _SpaceT, ket_space: _SpaceT = None,
                 selection_rule: SelectionRule = None, direction: SectorDirection | str = None):
        BaseSectors.__init__(self, bra_space, ket_space)
        if direction is None:
            direction = SectorDirection.canonical if self.has_same_spaces else SectorDirection.both
        self._enumerate(selection_rule, direction)
