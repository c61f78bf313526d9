"""Basis containers in which each state carries a substate multiplicity.

A state of a :class:`BaseMultiSubspace` stands for a whole block of ``multiplicity`` substates,
e.g. the states of an irrep of a subgroup which are not resolved further. The substates of all
states of a subspace are numbered consecutively, and :attr:`BaseMultiSubspace.state_offsets`
gives the position of the first substate of each state.
"""
# Copyright (C) TeNPy Developers, Apache license

from __future__ import annotations

from .basis import BaseSpace, BaseState, BaseSubspace

__all__ = ['BaseMultiSubspace', 'BaseMultiState', 'BaseMultiSpace']


class BaseMultiSubspace(BaseSubspace):
    """Indexing of states within a subspace, where each state has a substate multiplicity.

    Attributes
    ----------
    state_offsets : list of int
        For each state, the index of its first substate.
    state_multiplicities : list of int
        For each state, its number of substates.
    full_dimension : int
        The total number of substates.
    """

    def __init__(self, labels: tuple):
        BaseSubspace.__init__(self, labels)
        self.state_offsets = []
        self.state_multiplicities = []
        self.full_dimension = 0

    def test_sanity(self):
        BaseSubspace.test_sanity(self)
        assert len(self.state_offsets) == len(self.state_multiplicities) == self.size
        offset = 0
        for state_offset, multiplicity in zip(self.state_offsets, self.state_multiplicities):
            assert state_offset == offset
            offset += multiplicity
        assert offset == self.full_dimension

    def _push_state_labels(self, state_labels: tuple, multiplicity: int, *, weight: float = None) -> int:
        """Register a state and its substates. See :meth:`BaseSubspace._push_state_labels`."""
        assert multiplicity >= 0
        index = BaseSubspace._push_state_labels(self, state_labels, weight=weight)
        self.state_offsets.append(self.full_dimension)
        self.state_multiplicities.append(multiplicity)
        self.full_dimension += multiplicity
        return index


class BaseMultiState(BaseState):
    """A state within a :class:`BaseMultiSubspace`."""

    @property
    def offset(self) -> int:
        """The index of the first substate of this state."""
        return self.subspace.state_offsets[self.index]

    @property
    def multiplicity(self) -> int:
        """The number of substates of this state."""
        return self.subspace.state_multiplicities[self.index]


class BaseMultiSpace(BaseSpace):
    """Container of :class:`BaseMultiSubspace` s."""

    @property
    def full_dimension(self) -> int:
        """The total number of substates of all subspaces."""
        return sum(subspace.full_dimension for subspace in self)
