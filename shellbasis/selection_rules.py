r"""Selection rules, deciding which pairs of subspaces are connected by an operator.

A :class:`SelectionRule` is evaluated on the quantum-number labels of a bra subspace and a ket
subspace during the enumeration of :class:`~shellbasis.basis.BaseSectors`. Rules read the quantum
numbers as attributes of the subspaces, e.g. a :class:`TriangleRule` with ``attr='JJ'`` reads
``bra_subspace.JJ`` and ``ket_subspace.JJ``. Angular momenta are compared as twice-values.

Rules can be combined with ``&``::

    rule = TriangleRule(JJ0=4) & ParityRule(g0=0) & ProjectionRule(0, attr='Tz')

=========================  ====================================================================
Rule                       Condition on the pair ``(bra, ket)``
=========================  ====================================================================
:class:`AnyPair`           always allowed
-------------------------  --------------------------------------------------------------------
:class:`TriangleRule`      ``ket.JJ x JJ0 -> bra.JJ`` is an allowed angular momentum coupling
-------------------------  --------------------------------------------------------------------
:class:`DeltaRule`         ``|bra.a - ket.a| <= max_delta``
-------------------------  --------------------------------------------------------------------
:class:`ParityRule`        ``(bra.g + g0 + ket.g) % 2 == 0``
-------------------------  --------------------------------------------------------------------
:class:`ProjectionRule`    ``bra.Tz - ket.Tz == value``, or ``|.| == value``, or ``|.| <= value``
-------------------------  --------------------------------------------------------------------
:class:`MultiplicityRule`  a callable gives the number of independent couplings, 0 forbids
=========================  ====================================================================
"""
# Copyright (C) TeNPy Developers, Apache license

from __future__ import annotations

from abc import ABCMeta, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING, Literal

from .tools.math import allowed_triangle

if TYPE_CHECKING:
    from .basis import BaseSubspace

__all__ = ['SelectionRule', 'AllOf', 'AnyPair', 'TriangleRule', 'DeltaRule', 'ParityRule',
           'ProjectionRule', 'MultiplicityRule']


class SelectionRule(metaclass=ABCMeta):
    """Base class for admissibility predicates on pairs of subspaces."""

    @abstractmethod
    def allowed(self, bra_subspace: BaseSubspace, ket_subspace: BaseSubspace) -> bool:
        """If an operator can connect `ket_subspace` to `bra_subspace`."""
        ...

    def multiplicity(self, bra_subspace: BaseSubspace, ket_subspace: BaseSubspace) -> int:
        """The number of independent reduced matrix elements connecting an allowed pair.

        Only symmetry groups with outer multiplicities have values larger than ``1``.
        Only meaningful if :meth:`allowed`.
        """
        return 1

    def __call__(self, bra_subspace: BaseSubspace, ket_subspace: BaseSubspace) -> bool:
        return self.allowed(bra_subspace, ket_subspace)

    def __and__(self, other: SelectionRule) -> AllOf:
        if not isinstance(other, SelectionRule):
            return NotImplemented
        return AllOf([self, other])


class AllOf(SelectionRule):
    """The conjunction of several selection rules.

    The :meth:`multiplicity` is the largest multiplicity reported by any of the `rules`.
    At most one of them should carry outer multiplicities.
    """

    def __init__(self, rules: list[SelectionRule]):
        flat = []
        for r in rules:
            if isinstance(r, AllOf):
                flat.extend(r.rules)
            else:
                flat.append(r)
        self.rules = flat

    def allowed(self, bra_subspace, ket_subspace) -> bool:
        return all(r.allowed(bra_subspace, ket_subspace) for r in self.rules)

    def multiplicity(self, bra_subspace, ket_subspace) -> int:
        return max((r.multiplicity(bra_subspace, ket_subspace) for r in self.rules), default=1)

    def __repr__(self):
        return ' & '.join(repr(r) for r in self.rules)


class AnyPair(SelectionRule):
    """Allow every pair, i.e. an unconstrained ("all-to-all") enumeration."""

    def allowed(self, bra_subspace, ket_subspace) -> bool:
        return True

    def __repr__(self):
        return 'AnyPair()'


class TriangleRule(SelectionRule):
    """Angular momentum selection rule for a spherical tensor operator of rank ``JJ0 / 2``.

    Parameters
    ----------
    JJ0 : int
        Twice the rank of the operator.
    attr : str
        Name of the subspace attribute holding twice the angular momentum.
    """

    def __init__(self, JJ0: int, attr: str = 'JJ'):
        assert JJ0 >= 0
        self.JJ0 = JJ0
        self.attr = attr

    def allowed(self, bra_subspace, ket_subspace) -> bool:
        return allowed_triangle(getattr(ket_subspace, self.attr), self.JJ0,
                                getattr(bra_subspace, self.attr))

    def __repr__(self):
        return f'TriangleRule(JJ0={self.JJ0}, attr={self.attr!r})'


class DeltaRule(SelectionRule):
    """Bound on the change of a quantum number, ``|bra.attr - ket.attr| <= max_delta``."""

    def __init__(self, max_delta, attr: str):
        self.max_delta = max_delta
        self.attr = attr

    def allowed(self, bra_subspace, ket_subspace) -> bool:
        return abs(getattr(bra_subspace, self.attr) - getattr(ket_subspace, self.attr)) <= self.max_delta

    def __repr__(self):
        return f'DeltaRule(max_delta={self.max_delta}, attr={self.attr!r})'


class ParityRule(SelectionRule):
    """Parity selection rule for an operator of parity ``(-1) ** g0``."""

    def __init__(self, g0: int, attr: str = 'g'):
        self.g0 = g0 % 2
        self.attr = attr

    def allowed(self, bra_subspace, ket_subspace) -> bool:
        return (getattr(bra_subspace, self.attr) + self.g0 + getattr(ket_subspace, self.attr)) % 2 == 0

    def __repr__(self):
        return f'ParityRule(g0={self.g0}, attr={self.attr!r})'


class ProjectionRule(SelectionRule):
    """Selection rule on a projection quantum number, such as the isospin projection ``Tz``.

    Parameters
    ----------
    value : int
        The projection carried by the operator, in the same units as the subspace attribute.
    attr : str
        Name of the subspace attribute.
    mode : {'exact', 'absolute', 'bound'}
        With ``delta = bra.attr - ket.attr``, require ``delta == value`` (``'exact'``),
        ``|delta| == value`` (``'absolute'``) or ``|delta| <= value`` (``'bound'``).
        The ``'absolute'`` mode is appropriate for canonical sector sets, where the lower triangle
        is implied by hermiticity and carries the opposite projection.
    """

    modes = ('exact', 'absolute', 'bound')

    def __init__(self, value: int, attr: str = 'Tz', mode: Literal['exact', 'absolute', 'bound'] = 'exact'):
        if mode not in self.modes:
            raise ValueError(f'Invalid mode: {mode!r}. Expected one of {self.modes}.')
        self.value = value
        self.attr = attr
        self.mode = mode

    def allowed(self, bra_subspace, ket_subspace) -> bool:
        delta = getattr(bra_subspace, self.attr) - getattr(ket_subspace, self.attr)
        if self.mode == 'exact':
            return delta == self.value
        if self.mode == 'absolute':
            return abs(delta) == self.value
        return abs(delta) <= self.value

    def __repr__(self):
        return f'ProjectionRule({self.value}, attr={self.attr!r}, mode={self.mode!r})'


class MultiplicityRule(SelectionRule):
    """Selection rule given by the outer multiplicity of the coupling.

    Parameters
    ----------
    func : callable
        ``func(bra_subspace, ket_subspace) -> int``, the number of independent couplings.
        A pair is allowed iff this is positive.
    """

    def __init__(self, func: Callable[[BaseSubspace, BaseSubspace], int]):
        self.func = func

    def allowed(self, bra_subspace, ket_subspace) -> bool:
        return self.func(bra_subspace, ket_subspace) > 0

    def multiplicity(self, bra_subspace, ket_subspace) -> int:
        return self.func(bra_subspace, ket_subspace)

    def __repr__(self):
        return f'MultiplicityRule({getattr(self.func, "__name__", self.func)!r})'
