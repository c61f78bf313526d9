"""Storage helpers for the matrix representation of operators, block by block.

The matrix of an operator is stored as a list of 2D numpy arrays, one per sector, in the order of
the sector indices. Nothing beyond the shapes is fixed here.
"""
# Copyright (C) TeNPy Developers, Apache license

from __future__ import annotations

import numpy as np

from ..basis import BaseSectors

__all__ = ['SectorLookupError', 'zero_matrices', 'allocated_entries', 'upper_triangular_entries']


class SectorLookupError(LookupError):
    """Raised if a matrix element is requested for a missing sector or state."""


def zero_matrices(sectors: BaseSectors, dtype=float) -> list[np.ndarray]:
    """Zero-initialized blocks for all `sectors`, with shapes ``(bra_dim, ket_dim)``."""
    return [np.zeros(shape, dtype=dtype) for shape in sectors.block_shapes()]


def allocated_entries(matrices: list[np.ndarray]) -> int:
    """The total number of entries stored in `matrices`."""
    return sum(matrix.size for matrix in matrices)


def upper_triangular_entries(sectors: BaseSectors) -> int:
    """The number of independent entries of a hermitian operator stored in canonical `sectors`.

    Diagonal sectors only contribute their upper triangle, including the diagonal.
    """
    count = 0
    for sector in sectors:
        bra_dim, ket_dim = sector.shape
        if sector.is_diagonal:
            count += bra_dim * (bra_dim + 1) // 2
        else:
            count += bra_dim * ket_dim
    return count
