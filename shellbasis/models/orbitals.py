r"""Single-particle orbitals, in proton-neutron form.

An orbital is labelled by its species (proton or neutron) and the quantum numbers ``n, l, j``,
together with a truncation weight (e.g. the oscillator quantum number ``N = 2n + l``).
Angular momenta are stored as twice-values, so ``jj = 2 * j``.

Two groupings into subspaces are provided:

=========================  ======================  ==================
Space                      subspace labels         state labels
=========================  ======================  ==================
:class:`OrbitalSpacePN`    ``(species,)``          ``(n, l, jj)``
-------------------------  ----------------------  ------------------
:class:`OrbitalSpaceLJPN`  ``(species, l, jj)``    ``(n,)``
=========================  ======================  ==================

Orbitals can be read from and written to the MFDn (version 15) orbital file format::

    # comment lines
    15055
    num_p num_n
    index n l 2*j species weight
    ...

where ``species`` is ``1`` for protons and ``2`` for neutrons and indices are 1-based and counted
separately for each species.
"""
# Copyright (C) TeNPy Developers, Apache license

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import IntEnum
from fractions import Fraction

import numpy as np

from ..basis import NONE, BaseSectors, BaseSpace, BaseState, BaseSubspace, SectorDirection
from ..dummy_config import config, printoptions
from ..selection_rules import AnyPair, DeltaRule, ParityRule, ProjectionRule
from ..tools.math import half_int, half_int_str, parity_grade
from ..tools.string import join_lines
from .operators import SectorLookupError

__all__ = ['OrbitalSpeciesPN', 'OrbitalPNInfo', 'oscillator_orbitals', 'parse_orbital_stream',
           'orbital_definition_str', 'OrbitalSubspacePN', 'OrbitalStatePN', 'OrbitalSpacePN',
           'OrbitalSubspaceLJPN', 'OrbitalStateLJPN', 'OrbitalSpaceLJPN', 'OrbitalSectorsLJPN',
           'matrix_element_indices_ljpn', 'matrix_element_ljpn']

logger = logging.getLogger(__name__)

ORBITAL_FILE_VERSION = 15055


class OrbitalSpeciesPN(IntEnum):
    """Species of a single particle."""

    p = 0
    n = 1

    @property
    def twice_Tz(self) -> int:
        """Twice the isospin projection, ``+1`` for protons and ``-1`` for neutrons."""
        return 1 - 2 * self.value

    @property
    def code(self) -> int:
        """The 1-based species code used in orbital files."""
        return self.value + 1


@dataclass(frozen=True)
class OrbitalPNInfo:
    """Flattened description of a single orbital."""

    orbital_species: OrbitalSpeciesPN
    n: int
    l: int
    jj: int
    weight: float

    @property
    def j(self) -> Fraction:
        return half_int(self.jj)


def oscillator_orbitals(Nmax: int, species: Iterable[OrbitalSpeciesPN] = tuple(OrbitalSpeciesPN)
                        ) -> list[OrbitalPNInfo]:
    """Orbitals of the oscillator shells ``N = 0, ..., Nmax``, with weight ``N``.

    For each species, orbitals are ordered by increasing ``N``, then increasing ``j``.
    """
    res = []
    for orbital_species in species:
        for N in range(Nmax + 1):
            for jj in range(1, 2 * N + 2, 2):
                # recover (n, l) from (N, j)
                l = (jj - 1) // 2 + (N + (jj - 1) // 2) % 2
                n = (N - l) // 2
                res.append(OrbitalPNInfo(OrbitalSpeciesPN(orbital_species), n, l, jj, float(N)))
    return res


def _orbital_line_str(orbital: OrbitalPNInfo) -> str:
    w = printoptions.label_width
    return (f' {orbital.n:>{w}} {orbital.l:>{w}} {orbital.jj:>{w}} {orbital.orbital_species.code:>{w}}'
            f' {orbital.weight:>{w + 9}.8f}')


def parse_orbital_stream(lines: Iterable[str], standalone: bool = True) -> list[OrbitalPNInfo]:
    """Read orbital definitions in the MFDn format.

    Parameters
    ----------
    lines : iterable of str
        E.g. an open text file.
    standalone : bool
        If the input includes the header (comments, version line and orbital counts).

    Raises
    ------
    ValueError
        If a line can not be parsed, or if the counts in the header do not match the orbitals.
    """
    lines = iter(lines)
    line_count = 0
    num_orbitals_p = num_orbitals_n = None
    if standalone:
        # version line, after any comment lines
        for line in lines:
            line_count += 1
            if not line.startswith('#'):
                break
        else:
            raise ValueError('Missing version line in orbital definitions')
        try:
            version = int(line.split()[0])
        except (ValueError, IndexError):
            raise ValueError(f'Invalid version line (line {line_count}): {line!r}') from None
        if version != ORBITAL_FILE_VERSION:
            raise ValueError(f'Unsupported orbital file version {version} (line {line_count})')
        # number of p, n orbitals
        line = next(lines, '')
        line_count += 1
        try:
            num_orbitals_p, num_orbitals_n = map(int, line.split()[:2])
        except ValueError:
            raise ValueError(f'Invalid orbital count line (line {line_count}): {line!r}') from None

    orbitals = []
    for line in lines:
        line_count += 1
        if not line.strip():
            continue
        tokens = line.split()
        try:
            _, n, l, twice_j, species_code = map(int, tokens[:5])
            weight = float(tokens[5])
            orbital_species = OrbitalSpeciesPN(species_code - 1)
        except (ValueError, IndexError):
            raise ValueError(f'Invalid orbital definition (line {line_count}): {line!r}') from None
        orbitals.append(OrbitalPNInfo(orbital_species, n, l, twice_j, weight))

    if standalone:
        num_p = sum(o.orbital_species == OrbitalSpeciesPN.p for o in orbitals)
        num_n = sum(o.orbital_species == OrbitalSpeciesPN.n for o in orbitals)
        if (num_p, num_n) != (num_orbitals_p, num_orbitals_n):
            msg = (f'Orbital counts in header ({num_orbitals_p}, {num_orbitals_n}) do not match '
                   f'the orbitals found ({num_p}, {num_n})')
            raise ValueError(msg)
    return orbitals


def orbital_definition_str(orbitals: Iterable[OrbitalPNInfo], standalone: bool = True) -> str:
    """Format orbital definitions in the MFDn format, see :func:`parse_orbital_stream`."""
    body = []
    counters = {species: 0 for species in OrbitalSpeciesPN}
    w = printoptions.label_width
    for orbital in orbitals:
        counters[orbital.orbital_species] += 1
        body.append(f' {counters[orbital.orbital_species]:>{w}}{_orbital_line_str(orbital)}')
    header = []
    if standalone:
        header = [
            '# MFDn SPorbital file',
            '#   version',
            '#   norb_p norb_n',
            '#   index n l 2*j species weight',
            str(ORBITAL_FILE_VERSION),
            f'{counters[OrbitalSpeciesPN.p]} {counters[OrbitalSpeciesPN.n]}',
        ]
    return join_lines(header + body)


class _OrbitalStateMixin:
    """Accessors shared by the orbital states."""

    @property
    def orbital_species(self) -> OrbitalSpeciesPN:
        return self.subspace.orbital_species

    @property
    def twice_Tz(self) -> int:
        return self.subspace.orbital_species.twice_Tz

    @property
    def j(self) -> Fraction:
        return half_int(self.jj)

    @property
    def g(self) -> int:
        return parity_grade(self.l)

    @property
    def weight(self) -> float:
        return self.subspace.weights[self.index]

    @property
    def full_labels(self) -> tuple[OrbitalSpeciesPN, int, int, int]:
        """The labels ``(species, n, l, jj)``."""
        return (self.orbital_species, self.n, self.l, self.jj)

    def orbital_info(self) -> OrbitalPNInfo:
        return OrbitalPNInfo(self.orbital_species, self.n, self.l, self.jj, self.weight)

    def label_str(self) -> str:
        return (f'[ {int(self.orbital_species)} {self.index} : {self.n} {self.l} '
                f'{half_int_str(self.jj)} {self.weight} ]')


class OrbitalSubspacePN(BaseSubspace):
    """All orbitals of a single species.

    States ``(n, l, jj)`` are taken from `orbitals` in the given order.

    Attributes
    ----------
    weight_max : float
        The maximal weight of the orbitals.
    is_oscillator_like : bool
        If the orbitals are exactly those of the oscillator shells ``N <= Nmax``, in the order of
        :func:`oscillator_orbitals`, with weights ``N``.
    Nmax : int
        The oscillator truncation if :attr:`is_oscillator_like`, otherwise ``-1``.
    """

    def __init__(self, orbital_species: OrbitalSpeciesPN, orbitals: Iterable[OrbitalPNInfo]):
        orbital_species = OrbitalSpeciesPN(orbital_species)
        BaseSubspace.__init__(self, (orbital_species,))
        for orbital in orbitals:
            if orbital.orbital_species == orbital_species:
                self._push_state_labels((orbital.n, orbital.l, orbital.jj), weight=orbital.weight)
        self.weight_max = max(self.weights, default=0.)
        self.is_oscillator_like = self._is_oscillator_like()
        self.Nmax = int(self.weight_max) if self.is_oscillator_like else -1

    @classmethod
    def from_Nmax(cls, orbital_species: OrbitalSpeciesPN, Nmax: int) -> OrbitalSubspacePN:
        """The orbitals of the oscillator shells ``N = 0, ..., Nmax``."""
        return cls(orbital_species, oscillator_orbitals(Nmax, [orbital_species]))

    def _is_oscillator_like(self) -> bool:
        if self.size == 0:
            return False
        Nmax = int(self.weight_max)
        if Nmax != self.weight_max or Nmax < 0:
            return False
        return oscillator_orbitals(Nmax, [self.orbital_species]) == self.orbital_info()

    @property
    def orbital_species(self) -> OrbitalSpeciesPN:
        return self.labels[0]

    @property
    def twice_Tz(self) -> int:
        return self.orbital_species.twice_Tz

    def orbital_info(self) -> list[OrbitalPNInfo]:
        """The orbitals of this subspace, flattened."""
        return [OrbitalStatePN(self, index).orbital_info() for index in range(self.size)]

    def label_str(self) -> str:
        return f'[ {int(self.orbital_species)} ]'

    def debug_str(self) -> str:
        w = printoptions.label_width
        lines = [f' weight_max {self.weight_max} Nmax {self.Nmax} '
                 f'(oscillator-like: {str(self.is_oscillator_like).lower()})']
        for index in range(self.size):
            state = OrbitalStatePN(self, index)
            lines.append(f' index {index:>{w}} nlj {state.n:>{w}} {state.l:>{w}} '
                         f'{half_int_str(state.jj):>{w + 2}} weight {state.weight}')
        return join_lines(lines)


class OrbitalStatePN(_OrbitalStateMixin, BaseState[OrbitalSubspacePN]):
    """A single orbital within an :class:`OrbitalSubspacePN`."""

    @property
    def n(self) -> int:
        return self.labels[0]

    @property
    def l(self) -> int:
        return self.labels[1]

    @property
    def jj(self) -> int:
        return self.labels[2]


class _OrbitalSpaceMixin:
    """Accessors shared by the orbital spaces."""

    def orbital_info(self) -> list[OrbitalPNInfo]:
        """All orbitals of the space, flattened, in the order of the subspaces."""
        return [orbital for subspace in self for orbital in subspace.orbital_info()]


class OrbitalSpacePN(_OrbitalSpaceMixin, BaseSpace[OrbitalSubspacePN]):
    """Orbitals grouped by species, with one subspace per species present (protons first).

    Attributes
    ----------
    weight_max : float
        The maximal weight of all orbitals.
    is_oscillator_like : bool
        If all subspaces are oscillator-like with the same `Nmax`.
    Nmax : int
        The oscillator truncation if :attr:`is_oscillator_like`, otherwise ``-1``.
    """

    def __init__(self, orbitals: Iterable[OrbitalPNInfo]):
        BaseSpace.__init__(self)
        orbitals = list(orbitals)
        for orbital_species in sorted(set(o.orbital_species for o in orbitals)):
            self._emplace_subspace(OrbitalSubspacePN, orbital_species, orbitals)
        self.weight_max = max((subspace.weight_max for subspace in self), default=0.)
        Nmaxes = set(subspace.Nmax for subspace in self)
        self.is_oscillator_like = (self.size > 0 and all(s.is_oscillator_like for s in self)
                                   and len(Nmaxes) == 1)
        self.Nmax = Nmaxes.pop() if self.is_oscillator_like else -1
        logger.debug('OrbitalSpacePN: %d subspaces, dimension %d', self.size, self.dimension)
        if config.do_sanity_checks:
            self.test_sanity()

    @classmethod
    def from_Nmax(cls, Nmax: int) -> OrbitalSpacePN:
        """The proton and neutron orbitals of the oscillator shells ``N = 0, ..., Nmax``."""
        return cls(oscillator_orbitals(Nmax))

    def debug_str(self) -> str:
        header = (f' weight_max {self.weight_max} Nmax {self.Nmax} '
                  f'(oscillator-like: {str(self.is_oscillator_like).lower()})\n')
        return header + BaseSpace.debug_str(self)


class OrbitalSubspaceLJPN(BaseSubspace):
    """Orbitals of a single species with given ``l`` and ``j``, i.e. the radial states ``n``.

    States ``(n,)`` are taken from `orbitals` in the given order.

    Attributes
    ----------
    weight_max : float
        The truncation weight, i.e. ``Nmax`` for :meth:`from_Nmax`, or the maximal weight of the
        orbitals otherwise.
    Nmax : int
        The oscillator truncation if constructed by :meth:`from_Nmax`, otherwise ``-1``.
    """

    def __init__(self, orbital_species: OrbitalSpeciesPN, l: int, jj: int,
                 orbitals: Iterable[OrbitalPNInfo]):
        orbital_species = OrbitalSpeciesPN(orbital_species)
        BaseSubspace.__init__(self, (orbital_species, l, jj))
        for orbital in orbitals:
            if (orbital.orbital_species, orbital.l, orbital.jj) == self.labels:
                self._push_state_labels((orbital.n,), weight=orbital.weight)
        self.weight_max = max(self.weights, default=0.)
        self.Nmax = -1

    @classmethod
    def from_Nmax(cls, orbital_species: OrbitalSpeciesPN, l: int, jj: int, Nmax: int
                  ) -> OrbitalSubspaceLJPN:
        """The radial states with ``2n + l <= Nmax``, with weights ``2n + l``."""
        orbitals = [OrbitalPNInfo(OrbitalSpeciesPN(orbital_species), n, l, jj, float(2 * n + l))
                    for n in range((Nmax - l) // 2 + 1)]
        res = cls(orbital_species, l, jj, orbitals)
        res.weight_max = float(Nmax)
        res.Nmax = Nmax
        return res

    @property
    def orbital_species(self) -> OrbitalSpeciesPN:
        return self.labels[0]

    @property
    def l(self) -> int:
        return self.labels[1]

    @property
    def jj(self) -> int:
        return self.labels[2]

    @property
    def j(self) -> Fraction:
        return half_int(self.jj)

    @property
    def g(self) -> int:
        return parity_grade(self.l)

    @property
    def twice_Tz(self) -> int:
        return self.orbital_species.twice_Tz

    def orbital_info(self) -> list[OrbitalPNInfo]:
        """The orbitals of this subspace, flattened."""
        return [OrbitalStateLJPN(self, index).orbital_info() for index in range(self.size)]

    def label_str(self) -> str:
        w = printoptions.label_width
        return f'[ {int(self.orbital_species):>{w}} {self.l:>{w}} {half_int_str(self.jj):>{w + 2}} ]'

    def debug_str(self) -> str:
        w = printoptions.label_width
        return join_lines(
            f' index {index:>{w}} nlj {state.n:>{w}} {state.l:>{w}} {half_int_str(state.jj):>{w + 2}}'
            f' weight {state.weight}'
            for index, state in ((index, OrbitalStateLJPN(self, index)) for index in range(self.size))
        )


class OrbitalStateLJPN(_OrbitalStateMixin, BaseState[OrbitalSubspaceLJPN]):
    """A single orbital within an :class:`OrbitalSubspaceLJPN`."""

    @property
    def n(self) -> int:
        return self.labels[0]

    @property
    def l(self) -> int:
        return self.subspace.l

    @property
    def jj(self) -> int:
        return self.subspace.jj


class OrbitalSpaceLJPN(_OrbitalSpaceMixin, BaseSpace[OrbitalSubspaceLJPN]):
    """Orbitals grouped into ``(species, l, j)`` subspaces, in lexicographic order of the labels.

    Attributes
    ----------
    weight_max : float
        The truncation weight of the space.
    Nmax : int
        The oscillator truncation if constructed by :meth:`from_Nmax`, otherwise ``-1``.
    """

    def __init__(self, orbitals: Iterable[OrbitalPNInfo]):
        BaseSpace.__init__(self)
        orbitals = list(orbitals)
        subspace_labels = sorted(set((o.orbital_species, o.l, o.jj) for o in orbitals))
        for orbital_species, l, jj in subspace_labels:
            self._emplace_subspace(OrbitalSubspaceLJPN, orbital_species, l, jj, orbitals)
        self.weight_max = max((subspace.weight_max for subspace in self), default=0.)
        self.Nmax = -1
        logger.debug('OrbitalSpaceLJPN: %d subspaces, dimension %d', self.size, self.dimension)
        if config.do_sanity_checks:
            self.test_sanity()

    @classmethod
    def from_Nmax(cls, Nmax: int) -> OrbitalSpaceLJPN:
        """The proton and neutron orbitals of the oscillator shells ``N = 0, ..., Nmax``."""
        res = cls([])
        for orbital_species in OrbitalSpeciesPN:
            for l in range(Nmax + 1):
                for jj in (2 * l - 1, 2 * l + 1):
                    if jj < 0:
                        continue
                    res._push_subspace(OrbitalSubspaceLJPN.from_Nmax(orbital_species, l, jj, Nmax))
        res.weight_max = float(Nmax)
        res.Nmax = Nmax
        logger.debug('OrbitalSpaceLJPN: %d subspaces, dimension %d', res.size, res.dimension)
        if config.do_sanity_checks:
            res.test_sanity()
        return res


class OrbitalSectorsLJPN(BaseSectors[OrbitalSpaceLJPN]):
    """Sectors of a one-body operator between :class:`OrbitalSpaceLJPN` spaces.

    Without `l0max`, all pairs of subspaces are enumerated ("all-to-all" enumeration).
    Otherwise, the sectors are constrained to ``|l' - l| <= l0max``, ``|j' - j| <= l0max`` and
    parity ``(-1) ** l0max``. Between two spaces, if `Tz0` is given, also ``|Tz' - Tz| <= Tz0``;
    for a single space, `Tz0` is ignored.

    Parameters
    ----------
    bra_space, ket_space : :class:`OrbitalSpaceLJPN`
        The spaces. If only one is given, it is used for both.
    l0max : int, optional
        Maximal change in orbital angular momentum.
    Tz0 : int, optional
        Maximal change in isospin projection, only used if `ket_space` is given.
    direction : :class:`~shellbasis.basis.SectorDirection`, optional
        Defaults to ``canonical`` for a single space (or copies of it) and to ``both`` for two spaces.
    """

    def __init__(self, bra_space: OrbitalSpaceLJPN, ket_space: OrbitalSpaceLJPN = None,
                 l0max: int = None, Tz0: int = None, direction: SectorDirection | str = None):
        BaseSectors.__init__(self, bra_space, ket_space)
        self.l0max = l0max
        self.Tz0 = Tz0
        if direction is None:
            direction = SectorDirection.canonical if self.has_same_spaces else SectorDirection.both
        if l0max is None:
            rule = AnyPair()
        else:
            rule = DeltaRule(l0max, 'l') & DeltaRule(2 * l0max, 'jj') & ParityRule(l0max % 2)
        if Tz0 is not None and ket_space is not None:
            rule = rule & ProjectionRule(2 * Tz0, 'twice_Tz', mode='bound')
        self._enumerate(rule, direction)
        if config.do_sanity_checks:
            self.test_sanity()

    def debug_str(self) -> str:
        w = printoptions.label_width
        lines = []
        for sector_index, sector in enumerate(self):
            bra, ket = sector.bra_subspace, sector.ket_subspace
            lines.append(
                f'{sector_index:>{w}}'
                f' bra {sector.bra_subspace_index:>{w}} ({int(bra.orbital_species)}, {bra.l}, {half_int_str(bra.jj)})'
                f' ket {sector.ket_subspace_index:>{w}} ({int(ket.orbital_species)}, {ket.l}, {half_int_str(ket.jj)})'
            )
        return join_lines(lines)


def matrix_element_indices_ljpn(bra_orbital_space: OrbitalSpaceLJPN, ket_orbital_space: OrbitalSpaceLJPN,
                                sectors: OrbitalSectorsLJPN, bra_labels: tuple, ket_labels: tuple
                                ) -> tuple[int, int, int]:
    """Locate the matrix element between two orbitals.

    Parameters
    ----------
    bra_orbital_space, ket_orbital_space : :class:`OrbitalSpaceLJPN`
        The spaces in which `sectors` are defined.
    sectors : :class:`OrbitalSectorsLJPN`
        The sectors of the operator.
    bra_labels, ket_labels : tuple
        The full orbital labels ``(species, n, l, jj)``.

    Returns
    -------
    sector_index, bra_state_index, ket_state_index : int
        The position of the matrix element. Missing entries are :data:`~shellbasis.basis.NONE`.
        If the sector is missing, all three are.
    """
    bra_species, bra_n, bra_l, bra_jj = bra_labels
    ket_species, ket_n, ket_l, ket_jj = ket_labels
    assert bra_n >= 0 and ket_n >= 0
    bra_subspace_index = bra_orbital_space.lookup_subspace_index((bra_species, bra_l, bra_jj))
    ket_subspace_index = ket_orbital_space.lookup_subspace_index((ket_species, ket_l, ket_jj))
    sector_index = sectors.lookup_sector_index(bra_subspace_index, ket_subspace_index)
    if sector_index == NONE:
        return NONE, NONE, NONE
    sector = sectors.get_sector(sector_index)
    bra_state_index = sector.bra_subspace.lookup_state_index((bra_n,))
    ket_state_index = sector.ket_subspace.lookup_state_index((ket_n,))
    return sector_index, bra_state_index, ket_state_index


def matrix_element_ljpn(bra_orbital_space: OrbitalSpaceLJPN, ket_orbital_space: OrbitalSpaceLJPN,
                        sectors: OrbitalSectorsLJPN, matrices: list[np.ndarray],
                        bra: OrbitalStatePN, ket: OrbitalStatePN) -> float:
    """The matrix element between two orbitals, read from the blocks `matrices` of `sectors`.

    Raises
    ------
    SectorLookupError
        If the sector of the orbitals, or the radial state within it, is missing.
    """
    sector_index, bra_state_index, ket_state_index = matrix_element_indices_ljpn(
        bra_orbital_space, ket_orbital_space, sectors, bra.full_labels, ket.full_labels
    )
    if sector_index == NONE:
        msg = f'missing sector while looking up radial matrix element {bra.label_str()} {ket.label_str()}'
        raise SectorLookupError(msg)
    if bra_state_index == NONE or ket_state_index == NONE:
        msg = f'radial quantum number not found in orbital subspace {bra.label_str()} {ket.label_str()}'
        raise SectorLookupError(msg)
    return matrices[sector_index][bra_state_index, ket_state_index]
