"""A collection of tests for :mod:`shellbasis.models.orbitals`."""
# Copyright (C) TeNPy Developers, Apache license

import io

import numpy as np
import pytest

from shellbasis import NONE, SectorDirection
from shellbasis.models import orbitals, operators
from shellbasis.models.orbitals import (
    OrbitalPNInfo,
    OrbitalSectorsLJPN,
    OrbitalSpaceLJPN,
    OrbitalSpacePN,
    OrbitalSpeciesPN,
    OrbitalStateLJPN,
    OrbitalStatePN,
    OrbitalSubspacePN,
)
from shellbasis.testing import assert_sectors_consistent, assert_space_round_trip

p, n = OrbitalSpeciesPN.p, OrbitalSpeciesPN.n

orbital_file_text = """\
# MFDn SPorbital file
#   version
15055
2 1
   1   0   0   1   1   0.00000000
   2   0   1   3   1   1.00000000
   1   0   0   1   2   0.00000000
"""


def test_OrbitalSpeciesPN():
    assert p.twice_Tz == 1
    assert n.twice_Tz == -1
    assert p.code == 1
    assert n.code == 2
    assert p < n


def test_oscillator_orbitals():
    res = orbitals.oscillator_orbitals(2, [p])
    nlj = [(o.n, o.l, o.jj) for o in res]
    assert nlj == [(0, 0, 1), (0, 1, 1), (0, 1, 3), (1, 0, 1), (0, 2, 3), (0, 2, 5)]
    assert [o.weight for o in res] == [0, 1, 1, 2, 2, 2]
    for o in res:
        assert 2 * o.n + o.l == o.weight
    both = orbitals.oscillator_orbitals(3)
    assert len(both) == 2 * (1 + 2 + 3 + 4)
    assert [o.orbital_species for o in both] == [p] * 10 + [n] * 10


def test_parse_orbital_stream():
    res = orbitals.parse_orbital_stream(io.StringIO(orbital_file_text))
    assert res == [
        OrbitalPNInfo(p, 0, 0, 1, 0.),
        OrbitalPNInfo(p, 0, 1, 3, 1.),
        OrbitalPNInfo(n, 0, 0, 1, 0.),
    ]
    body = orbital_file_text.splitlines()[4:]
    assert orbitals.parse_orbital_stream(body, standalone=False) == res

    print('checking output')
    text = orbitals.orbital_definition_str(res)
    assert text.splitlines()[-3:] == orbital_file_text.splitlines()[-3:]
    assert orbitals.parse_orbital_stream(text.splitlines()) == res
    body_text = orbitals.orbital_definition_str(res, standalone=False)
    assert body_text.splitlines() == body

    all_orbitals = orbitals.oscillator_orbitals(3)
    text = orbitals.orbital_definition_str(all_orbitals)
    assert orbitals.parse_orbital_stream(io.StringIO(text)) == all_orbitals


@pytest.mark.parametrize('text, match', [
    ('15099\n0 0\n', 'version'),
    ('# comment only\n', 'version line'),
    ('15055\n1\n', 'count'),
    ('15055\n1 0\n   1   0   0   1   3   0.0\n', 'Invalid orbital definition'),
    ('15055\n1 0\n   1   0   0   1   1\n', 'Invalid orbital definition'),
    ('15055\n2 0\n   1   0   0   1   1   0.0\n', 'do not match'),
])
def test_parse_orbital_stream_errors(text, match):
    with pytest.raises(ValueError, match=match):
        orbitals.parse_orbital_stream(io.StringIO(text))


def test_OrbitalSpacePN(lookup_policy, sanity_checks):
    space = OrbitalSpacePN.from_Nmax(2)
    assert_space_round_trip(space)
    assert space.size == 2
    assert space.dimension == 12
    assert space.is_oscillator_like
    assert space.Nmax == 2
    assert space.weight_max == 2
    assert space.orbital_info() == orbitals.oscillator_orbitals(2)

    subspace = space.lookup_subspace((n,))
    assert subspace.orbital_species == n
    assert subspace.twice_Tz == -1
    assert subspace.Nmax == 2
    state = OrbitalStatePN.from_labels(subspace, (1, 0, 1))
    assert state.index == 3
    assert state.weight == 2
    assert state.j == 0.5
    assert state.g == 0
    assert state.full_labels == (n, 1, 0, 1)
    assert state.orbital_info() == OrbitalPNInfo(n, 1, 0, 1, 2.)
    assert state.label_str() == '[ 1 3 : 1 0 1/2 2.0 ]'
    assert OrbitalStatePN(subspace, 5).g == 0
    assert OrbitalStatePN(subspace, 2).g == 1

    assert len(space.debug_str().splitlines()) == 3
    assert len(subspace.debug_str().splitlines()) == 7


def test_OrbitalSpacePN_general():
    # reordered orbitals are not oscillator-like
    osc = orbitals.oscillator_orbitals(1)
    space = OrbitalSpacePN(osc[::-1])
    assert space.size == 2
    assert space[0].orbital_species == p
    assert not space.is_oscillator_like
    assert space.Nmax == -1
    assert space[0].state_table == ((0, 1, 3), (0, 1, 1), (0, 0, 1))

    # only protons
    space = OrbitalSpacePN(orbitals.parse_orbital_stream(io.StringIO(orbital_file_text))[:2])
    assert space.size == 1
    assert space.lookup_subspace_index((n,)) == NONE
    assert not space.is_oscillator_like

    subspace = OrbitalSubspacePN.from_Nmax(n, 1)
    assert subspace.is_oscillator_like
    assert subspace.size == 3
    assert subspace.label_str() == '[ 1 ]'


def test_OrbitalSpaceLJPN(lookup_policy, sanity_checks):
    space = OrbitalSpaceLJPN.from_Nmax(2)
    assert_space_round_trip(space)
    assert space.Nmax == 2
    assert space.size == 10
    assert space.dimension == 12
    labels = [subspace.labels for subspace in space]
    assert labels[:5] == [(p, 0, 1), (p, 1, 1), (p, 1, 3), (p, 2, 3), (p, 2, 5)]
    assert labels == sorted(labels)
    subspace = space[0]
    assert subspace.state_table == ((0,), (1,))
    assert subspace.weights == [0., 2.]
    assert subspace.weight_max == 2
    assert subspace.j == 0.5
    state = OrbitalStateLJPN(subspace, 1)
    assert state.full_labels == (p, 1, 0, 1)
    assert state.weight == 2

    print('checking construction from a list of orbitals')
    space2 = OrbitalSpaceLJPN(orbitals.oscillator_orbitals(2))
    assert space2.Nmax == -1
    assert [s.labels for s in space2] == labels
    assert [s.state_table for s in space2] == [s.state_table for s in space]
    assert space2.orbital_info() == space.orbital_info()
    assert len(space.debug_str().splitlines()) == 10
    assert len(subspace.debug_str().splitlines()) == 2


def test_OrbitalSectorsLJPN(lookup_policy):
    space = OrbitalSpaceLJPN.from_Nmax(1)
    assert [s.labels for s in space] == [(p, 0, 1), (p, 1, 1), (p, 1, 3), (n, 0, 1), (n, 1, 1), (n, 1, 3)]

    sectors = OrbitalSectorsLJPN(space)
    assert sectors.size == 21
    assert_sectors_consistent(sectors)

    sectors = OrbitalSectorsLJPN(space, l0max=0)
    assert [k[:2] for k in sectors.keys] == [(0, 0), (0, 3), (1, 1), (1, 4), (2, 2), (2, 5), (3, 3), (4, 4), (5, 5)]

    print('checking that Tz0 is ignored for a single space')
    sectors_Tz0 = OrbitalSectorsLJPN(space, l0max=0, Tz0=0)
    assert sectors_Tz0.keys == sectors.keys
    assert (0, 3, 1) in sectors_Tz0.keys
    assert_sectors_consistent(sectors_Tz0)

    sectors = OrbitalSectorsLJPN(space, l0max=1, Tz0=0)
    assert [k[:2] for k in sectors.keys] == [(0, 1), (0, 2), (0, 4), (0, 5), (1, 3), (2, 3), (3, 4), (3, 5)]
    assert sectors.keys == OrbitalSectorsLJPN(space, l0max=1).keys

    print('checking the same space twice')
    sectors = OrbitalSectorsLJPN(space, space.copy(), l0max=0)
    assert sectors.direction == SectorDirection.canonical
    assert [k[:2] for k in sectors.keys] == [(0, 0), (0, 3), (1, 1), (1, 4), (2, 2), (2, 5), (3, 3), (4, 4), (5, 5)]

    print('checking two spaces')
    bra_space = OrbitalSpaceLJPN.from_Nmax(2)
    sectors = OrbitalSectorsLJPN(bra_space, space)
    assert sectors.size == 10 * 6
    sectors = OrbitalSectorsLJPN(bra_space, space, l0max=2, Tz0=1)
    assert_sectors_consistent(sectors)
    assert any(sector.bra_subspace.orbital_species != sector.ket_subspace.orbital_species
               for sector in sectors)
    sectors = OrbitalSectorsLJPN(bra_space, space, l0max=2, Tz0=0)
    assert sectors.direction == SectorDirection.both
    assert sectors.size > 0
    assert all(sector.bra_subspace.orbital_species == sector.ket_subspace.orbital_species
               for sector in sectors)
    assert len(sectors.debug_str().splitlines()) == sectors.size


def test_matrix_element_ljpn(lookup_policy):
    space = OrbitalSpaceLJPN.from_Nmax(2)
    sectors = OrbitalSectorsLJPN(space, l0max=0, Tz0=0)
    assert sectors.size == 15  # 5 diagonal blocks per species, plus 5 proton-neutron blocks

    indices = orbitals.matrix_element_indices_ljpn
    assert indices(space, space, sectors, (p, 1, 0, 1), (p, 0, 0, 1)) == (0, 1, 0)
    assert indices(space, space, sectors, (p, 2, 0, 1), (p, 0, 0, 1)) == (0, NONE, 0)
    assert indices(space, space, sectors, (p, 0, 0, 1), (n, 0, 0, 1)) == (1, 0, 0)
    assert indices(space, space, sectors, (p, 0, 0, 1), (p, 0, 1, 1)) == (NONE, NONE, NONE)
    assert indices(space, space, sectors, (p, 0, 3, 5), (p, 0, 3, 5)) == (NONE, NONE, NONE)
    assert indices(space, space, sectors, (n, 0, 2, 5), (n, 0, 2, 5)) == (14, 0, 0)

    matrices = operators.zero_matrices(sectors)
    matrices[0][1, 0] = 2.5
    space_pn = OrbitalSpacePN.from_Nmax(2)
    bra = OrbitalStatePN.from_labels(space_pn[0], (1, 0, 1))
    ket = OrbitalStatePN.from_labels(space_pn[0], (0, 0, 1))
    ket_n = OrbitalStatePN.from_labels(space_pn[1], (0, 0, 1))
    ket_l1 = OrbitalStatePN.from_labels(space_pn[0], (0, 1, 1))
    element = orbitals.matrix_element_ljpn(space, space, sectors, matrices, bra, ket)
    assert element == 2.5
    assert orbitals.matrix_element_ljpn(space, space, sectors, matrices, ket, ket) == 0.
    assert orbitals.matrix_element_ljpn(space, space, sectors, matrices, bra, ket_n) == 0.

    with pytest.raises(operators.SectorLookupError, match='missing sector'):
        orbitals.matrix_element_ljpn(space, space, sectors, matrices, bra, ket_l1)

    small_space = OrbitalSpaceLJPN.from_Nmax(1)
    small_sectors = OrbitalSectorsLJPN(small_space, l0max=0, Tz0=0)
    small_matrices = operators.zero_matrices(small_sectors)
    with pytest.raises(LookupError, match='radial quantum number'):
        orbitals.matrix_element_ljpn(small_space, small_space, small_sectors, small_matrices, bra, ket)
    assert np.all([m.shape == s for m, s in zip(small_matrices, small_sectors.block_shapes())])
