"""Coupling schemes for single-particle orbitals and two-body states, built on :mod:`shellbasis.basis`."""
# Copyright (C) TeNPy Developers, Apache license

from . import jjjpn, operators, orbitals
from .jjjpn import (
    TruncationRank,
    TwoBodySectorsJJJPN,
    TwoBodySpaceJJJPN,
    TwoBodySpaceOrdering,
    TwoBodySpeciesPN,
    TwoBodyStateJJJPN,
    TwoBodySubspaceJJJPN,
    WeightMax,
)
from .operators import SectorLookupError, allocated_entries, upper_triangular_entries, zero_matrices
from .orbitals import (
    OrbitalPNInfo,
    OrbitalSectorsLJPN,
    OrbitalSpaceLJPN,
    OrbitalSpacePN,
    OrbitalSpeciesPN,
    OrbitalStateLJPN,
    OrbitalStatePN,
    OrbitalSubspaceLJPN,
    OrbitalSubspacePN,
    matrix_element_indices_ljpn,
    matrix_element_ljpn,
    orbital_definition_str,
    oscillator_orbitals,
    parse_orbital_stream,
)

__all__ = [
    'jjjpn', 'operators', 'orbitals',
    'TruncationRank', 'TwoBodySectorsJJJPN', 'TwoBodySpaceJJJPN', 'TwoBodySpaceOrdering',
    'TwoBodySpeciesPN', 'TwoBodyStateJJJPN', 'TwoBodySubspaceJJJPN', 'WeightMax',
    'SectorLookupError', 'allocated_entries', 'upper_triangular_entries', 'zero_matrices',
    'OrbitalPNInfo', 'OrbitalSectorsLJPN', 'OrbitalSpaceLJPN', 'OrbitalSpacePN', 'OrbitalSpeciesPN',
    'OrbitalStateLJPN', 'OrbitalStatePN', 'OrbitalSubspaceLJPN', 'OrbitalSubspacePN',
    'matrix_element_indices_ljpn', 'matrix_element_ljpn', 'orbital_definition_str',
    'oscillator_orbitals', 'parse_orbital_stream',
]
