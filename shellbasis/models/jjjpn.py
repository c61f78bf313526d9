r"""Two-body states in jj-coupling, with proton-neutron labelling and general orbitals.

Subspaces are labelled by ``(species, J, g)``, where `species` is the two-body species
(:class:`TwoBodySpeciesPN`, equivalent to the isospin projection), `J` is the total angular
momentum and ``g`` the parity grade, ``P = (-1) ** g``.

States within a subspace are labelled by ``(index1, index2)``, the indices of the two particles
within the proton or neutron subspace of an :class:`~shellbasis.models.orbitals.OrbitalSpacePN`.
They are ordered by increasing `index1`, then increasing `index2`, subject to

- the triangle condition on ``(j1, j2, J)``,
- the parity condition ``g1 + g2 = g (mod 2)``,
- the truncation by one-body and two-body weights, see :class:`WeightMax`.

The states are those of *identical* particles. In the pp and nn subspaces, only ``index1 <= index2``
is kept, since ``(index2, index1)`` would be redundant, and ``J`` must be even if
``index1 == index2``.

Within the space, subspaces are ordered by species (see :class:`TwoBodySpaceOrdering`), then by
increasing ``J``, then by increasing ``g``. Empty subspaces are pruned.
"""
# Copyright (C) TeNPy Developers, Apache license

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, IntEnum

from ..basis import NONE, BaseSectors, BaseSpace, BaseState, BaseSubspace, SectorDirection
from ..dummy_config import config, printoptions
from ..selection_rules import ParityRule, ProjectionRule, TriangleRule
from ..tools.math import allowed_triangle
from ..tools.string import join_lines
from .orbitals import OrbitalSpacePN, OrbitalSpeciesPN, OrbitalStatePN

__all__ = ['TwoBodySpeciesPN', 'TruncationRank', 'WeightMax', 'TwoBodySpaceOrdering',
           'TwoBodySubspaceJJJPN', 'TwoBodyStateJJJPN', 'TwoBodySpaceJJJPN', 'TwoBodySectorsJJJPN']

logger = logging.getLogger(__name__)


class TwoBodySpeciesPN(IntEnum):
    """Species of a pair of particles."""

    pp = 0
    nn = 1
    pn = 2

    @property
    def orbital_species(self) -> tuple[OrbitalSpeciesPN, OrbitalSpeciesPN]:
        """The species of the two particles."""
        return _orbital_species[self]

    @property
    def twice_Tz(self) -> int:
        """Twice the isospin projection, ``+2``, ``-2`` or ``0``."""
        species1, species2 = self.orbital_species
        return species1.twice_Tz + species2.twice_Tz

    @property
    def Tz(self) -> int:
        return self.twice_Tz // 2


_orbital_species = {
    TwoBodySpeciesPN.pp: (OrbitalSpeciesPN.p, OrbitalSpeciesPN.p),
    TwoBodySpeciesPN.nn: (OrbitalSpeciesPN.n, OrbitalSpeciesPN.n),
    TwoBodySpeciesPN.pn: (OrbitalSpeciesPN.p, OrbitalSpeciesPN.n),
}


class TruncationRank(IntEnum):
    """Rank of the conventional oscillator truncation, see :meth:`WeightMax.from_rank`."""

    one_body = 1
    two_body = 2


@dataclass(frozen=True)
class WeightMax:
    """Maximal weights for the truncation of a two-body space.

    Attributes
    ----------
    one_body : tuple of float
        Maximal weight of a single orbital, for ``(p, n)``.
    two_body : tuple of float
        Maximal sum of the weights of the two orbitals, for ``(pp, nn, pn)``.
    """

    one_body: tuple[float, float]
    two_body: tuple[float, float, float]

    @classmethod
    def from_cutoffs(cls, N1max: int, N2max: int) -> WeightMax:
        """Conventional oscillator truncation, from separate one-body and two-body cutoffs."""
        return cls((N1max, N1max), (N2max, N2max, N2max))

    @classmethod
    def from_rank(cls, truncation_rank: TruncationRank, truncation_cutoff: int) -> WeightMax:
        """Conventional oscillator truncation of given rank.

        For a one-body truncation, ``N1max = cutoff`` and ``N2max = 2 * cutoff``.
        For a two-body truncation, ``N1max = N2max = cutoff``.
        """
        truncation_rank = TruncationRank(truncation_rank)
        if truncation_rank == TruncationRank.one_body:
            return cls.from_cutoffs(truncation_cutoff, 2 * truncation_cutoff)
        return cls.from_cutoffs(truncation_cutoff, truncation_cutoff)


class TwoBodySpaceOrdering(Enum):
    """Order of the species subspaces within a :class:`TwoBodySpaceJJJPN`.

    =======  ================
    Value    species order
    =======  ================
    pn       pp, nn, pn
    -------  ----------------
    tz       pp, pn, nn
    =======  ================
    """

    pn = 'pn'
    tz = 'tz'

    @property
    def species_order(self) -> tuple[TwoBodySpeciesPN, ...]:
        if self is TwoBodySpaceOrdering.pn:
            return (TwoBodySpeciesPN.pp, TwoBodySpeciesPN.nn, TwoBodySpeciesPN.pn)
        return (TwoBodySpeciesPN.pp, TwoBodySpeciesPN.pn, TwoBodySpeciesPN.nn)


class TwoBodySubspaceJJJPN(BaseSubspace):
    """Two-body states of given species, ``J`` and parity.

    Parameters
    ----------
    orbital_space : :class:`~shellbasis.models.orbitals.OrbitalSpacePN`
        The orbitals. Must contain the subspaces of both species of `two_body_species`.
    two_body_species : :class:`TwoBodySpeciesPN`
        The species.
    J : int
        The total angular momentum.
    g : int
        The parity grade.
    weight_max : :class:`WeightMax`
        The truncation.
    """

    def __init__(self, orbital_space: OrbitalSpacePN, two_body_species: TwoBodySpeciesPN, J: int,
                 g: int, weight_max: WeightMax):
        two_body_species = TwoBodySpeciesPN(two_body_species)
        BaseSubspace.__init__(self, (two_body_species, J, g))
        self.weight_max = weight_max
        species1, species2 = two_body_species.orbital_species
        self.orbital_subspace1 = orbital_space.lookup_subspace((species1,))
        self.orbital_subspace2 = orbital_space.lookup_subspace((species2,))
        identical = species1 == species2
        w1_max = weight_max.one_body[species1]
        w2_max = weight_max.one_body[species2]
        w_max = weight_max.two_body[two_body_species]
        for index1 in range(self.orbital_subspace1.size):
            orbital1 = OrbitalStatePN(self.orbital_subspace1, index1)
            for index2 in range(self.orbital_subspace2.size):
                if identical and index1 > index2:
                    continue
                orbital2 = OrbitalStatePN(self.orbital_subspace2, index2)
                if not allowed_triangle(orbital1.jj, orbital2.jj, 2 * J):
                    continue
                if (orbital1.g + orbital2.g + g) % 2 != 0:
                    continue
                if identical and index1 == index2 and J % 2 != 0:
                    continue
                weight = orbital1.weight + orbital2.weight
                if orbital1.weight > w1_max or orbital2.weight > w2_max or weight > w_max:
                    continue
                self._push_state_labels((index1, index2), weight=weight)

    @property
    def two_body_species(self) -> TwoBodySpeciesPN:
        return self.labels[0]

    @property
    def J(self) -> int:
        return self.labels[1]

    @property
    def JJ(self) -> int:
        """Twice the total angular momentum."""
        return 2 * self.labels[1]

    @property
    def g(self) -> int:
        return self.labels[2]

    @property
    def Tz(self) -> int:
        return self.two_body_species.Tz

    @property
    def twice_Tz(self) -> int:
        return self.two_body_species.twice_Tz

    def label_str(self) -> str:
        w = printoptions.label_width
        return f'[ {int(self.two_body_species):>{w}} {self.J:>{w}} {self.g:>{w}} ]'

    def debug_str(self) -> str:
        w = printoptions.label_width
        lines = []
        for index in range(self.size):
            state = TwoBodyStateJJJPN(self, index)
            lines.append(f' index {index:>{w}} index1 {state.index1:>{w}} index2 {state.index2:>{w}}'
                         f' nlj1 {state.get_orbital1().label_str()} nlj2 {state.get_orbital2().label_str()}')
        return join_lines(lines)


class TwoBodyStateJJJPN(BaseState[TwoBodySubspaceJJJPN]):
    """A two-body state within a :class:`TwoBodySubspaceJJJPN`."""

    @property
    def two_body_species(self) -> TwoBodySpeciesPN:
        return self.subspace.two_body_species

    @property
    def J(self) -> int:
        return self.subspace.J

    @property
    def g(self) -> int:
        return self.subspace.g

    @property
    def index1(self) -> int:
        return self.labels[0]

    @property
    def index2(self) -> int:
        return self.labels[1]

    def get_orbital1(self) -> OrbitalStatePN:
        return OrbitalStatePN(self.subspace.orbital_subspace1, self.index1)

    def get_orbital2(self) -> OrbitalStatePN:
        return OrbitalStatePN(self.subspace.orbital_subspace2, self.index2)

    def label_str(self) -> str:
        return (f'[ {int(self.two_body_species)} {self.J} {self.g} : '
                f'{self.index1} {self.index2} ]')


class TwoBodySpaceJJJPN(BaseSpace[TwoBodySubspaceJJJPN]):
    """All two-body subspaces within a truncation.

    Parameters
    ----------
    orbital_space : :class:`~shellbasis.models.orbitals.OrbitalSpacePN`
        The orbitals. Species for which one of the orbital subspaces is missing are skipped.
    weight_max : :class:`WeightMax`
        The truncation.
    ordering : :class:`TwoBodySpaceOrdering` | str
        The order of the species subspaces.

    Raises
    ------
    ValueError
        If `ordering` is invalid.
    """

    def __init__(self, orbital_space: OrbitalSpacePN, weight_max: WeightMax,
                 ordering: TwoBodySpaceOrdering | str = TwoBodySpaceOrdering.pn):
        BaseSpace.__init__(self)
        self.weight_max = weight_max
        self.ordering = ordering = TwoBodySpaceOrdering(ordering)
        for two_body_species in ordering.species_order:
            orbital_subspaces = []
            for orbital_species in two_body_species.orbital_species:
                index = orbital_space.lookup_subspace_index((orbital_species,))
                if index != NONE:
                    orbital_subspaces.append(orbital_space.get_subspace(index))
            if len(orbital_subspaces) < 2 or not all(s.size for s in orbital_subspaces):
                continue
            JJ_max = sum(max(OrbitalStatePN(s, i).jj for i in range(s.size)) for s in orbital_subspaces)
            for J in range(JJ_max // 2 + 1):
                for g in (0, 1):
                    subspace = TwoBodySubspaceJJJPN(orbital_space, two_body_species, J, g, weight_max)
                    if subspace.size > 0:
                        self._push_subspace(subspace)
        logger.debug('TwoBodySpaceJJJPN: %d subspaces, dimension %d', self.size, self.dimension)
        if config.do_sanity_checks:
            self.test_sanity()

    def debug_str(self) -> str:
        w = printoptions.label_width
        return join_lines(
            f' index {index:>{w}} species {int(subspace.two_body_species):>{w}} J {subspace.J:>{w}}'
            f' g {subspace.g:>{w}} dim {subspace.size:>{w}}'
            for index, subspace in enumerate(self)
        )


class TwoBodySectorsJJJPN(BaseSectors[TwoBodySpaceJJJPN]):
    """Sectors of a two-body operator of given tensorial character.

    Parameters
    ----------
    space : :class:`TwoBodySpaceJJJPN`
        The space, for both bra and ket.
    J0 : int
        The angular momentum rank of the operator.
    g0 : int
        The parity grade of the operator.
    Tz0 : int
        The isospin projection carried by the operator. For ``canonical`` sectors, pairs with
        ``|Tz' - Tz| == Tz0`` are kept, since the lower triangle implied by hermiticity carries the
        opposite projection. For ``both``, ``Tz' - Tz == Tz0`` is required.
    direction : :class:`~shellbasis.basis.SectorDirection` | str
        Which pairs of subspaces to consider.
    """

    def __init__(self, space: TwoBodySpaceJJJPN, J0: int, g0: int, Tz0: int,
                 direction: SectorDirection | str = SectorDirection.canonical):
        BaseSectors.__init__(self, space)
        self.J0 = J0
        self.g0 = g0
        self.Tz0 = Tz0
        direction = SectorDirection.from_any(direction)
        mode = 'absolute' if direction == SectorDirection.canonical else 'exact'
        rule = (TriangleRule(2 * J0, 'JJ') & ParityRule(g0)
                & ProjectionRule(2 * Tz0, 'twice_Tz', mode=mode))
        self._enumerate(rule, direction)
        if config.do_sanity_checks:
            self.test_sanity()
