"""Assertion wrappers for testing."""

# Copyright (C) TeNPy Developers, Apache license
from ..basis import NONE, BaseSectors, BaseSpace, BaseState, BaseSubspace, SectorDirection

__all__ = ['assert_subspace_round_trip', 'assert_space_round_trip', 'assert_sectors_consistent']


def assert_subspace_round_trip(subspace: BaseSubspace):
    """Verify ``labels -> index -> labels`` and ``index -> labels -> index`` for all states."""
    assert len(subspace) == subspace.size == len(subspace.state_table)
    for index in range(subspace.size):
        state_labels = subspace.get_state_labels(index)
        assert subspace.contains_state(state_labels)
        assert subspace.lookup_state_index(state_labels) == index
        assert BaseState.from_labels(subspace, state_labels).index == index
        assert BaseState(subspace, index).labels == state_labels


def assert_space_round_trip(space: BaseSpace):
    """Verify the subspace lookup of `space` and the state lookup of each of its subspaces."""
    assert len(space) == space.size
    assert space.dimension == sum(len(subspace) for subspace in space)
    for index, subspace in enumerate(space):
        assert space.get_subspace(index) is subspace
        assert space.lookup_subspace_index(subspace.labels) == index
        assert space.lookup_subspace(subspace.labels) is subspace
        assert space.contains_subspace(subspace.labels)
        assert_subspace_round_trip(subspace)


def assert_sectors_consistent(sectors: BaseSectors):
    """Verify the lookup, the enumeration order and the direction of `sectors`.

    Also checks that exactly the pairs allowed by the selection rule are present.
    """
    sectors.test_sanity()
    previous_key = None
    for sector_index, sector in enumerate(sectors):
        assert sectors.lookup_sector_index_by_key(sector.key) == sector_index
        assert sectors.lookup_sector_index(*sector.key) == sector_index
        assert sectors.contains_sector(*sector.key)
        assert sector.bra_subspace is sectors.bra_space.get_subspace(sector.bra_subspace_index)
        assert sector.ket_subspace is sectors.ket_space.get_subspace(sector.ket_subspace_index)
        if previous_key is not None:
            assert previous_key < sector.key, 'sectors not in row-major order'
        previous_key = sector.key
    if sectors.selection_rule is None:
        return
    canonical = sectors.direction == SectorDirection.canonical
    for bra_subspace_index, bra_subspace in enumerate(sectors.bra_space):
        for ket_subspace_index, ket_subspace in enumerate(sectors.ket_space):
            expect = sectors.selection_rule.allowed(bra_subspace, ket_subspace)
            if canonical and bra_subspace_index > ket_subspace_index:
                expect = False
            found = sectors.lookup_sector_index(bra_subspace_index, ket_subspace_index) != NONE
            assert found == expect, f'sector ({bra_subspace_index}, {ket_subspace_index})'
