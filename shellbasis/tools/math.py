"""Angular momentum arithmetic on twice-values.

Angular momenta are stored as integers ``jj = 2 * j`` throughout the library, such that half-integer
and integer values are both exact. E.g. a spin-1/2 is represented by ``1``
and a spin-1 by ``2``.
"""
# Copyright (C) TeNPy Developers, Apache license

from fractions import Fraction

import numpy as np

__all__ = ['twice_value', 'half_int', 'half_int_str', 'allowed_triangle', 'triangle_range',
           'parity_grade']


def twice_value(x) -> int:
    """Convert an integer or half-integer to its twice-value.

    Raises
    ------
    ValueError
        If `x` is not an integer or half-integer.
    """
    xx = Fraction(x) * 2
    if xx.denominator != 1:
        raise ValueError(f'Not a half-integer: {x!r}')
    return int(xx)


def half_int(jj: int) -> Fraction:
    """The half-integer ``jj / 2`` as an exact fraction."""
    return Fraction(jj, 2)


def half_int_str(jj: int) -> str:
    """Format a twice-value as ``'j'`` or ``'jj/2'``."""
    if jj % 2 == 0:
        return str(jj // 2)
    return f'{jj}/2'


def allowed_triangle(aa: int, bb: int, cc: int) -> bool:
    """If the angular momenta (given as twice-values) can be coupled, ``a x b -> c``.

    Checks the triangle inequality ``|a - b| <= c <= a + b`` and that the coupling is integral,
    i.e. that ``a + b + c`` is an integer.
    """
    return (cc <= aa + bb) and (aa <= bb + cc) and (bb <= cc + aa) and ((aa + bb + cc) % 2 == 0)


def triangle_range(aa: int, bb: int) -> np.ndarray:
    """All twice-values ``cc`` allowed in the coupling ``a x b -> c``, in increasing order."""
    return np.arange(abs(aa - bb), aa + bb + 2, 2)


def parity_grade(l: int) -> int:
    """The grade ``g in {0, 1}`` of the parity ``(-1) ** l``."""
    return l % 2
