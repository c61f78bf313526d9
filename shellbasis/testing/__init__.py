"""Tools for testing."""
# Copyright (C) TeNPy Developers, Apache license
from . import asserting, random_generation
from .asserting import assert_sectors_consistent, assert_space_round_trip, assert_subspace_round_trip
from .random_generation import ToySpace, ToySubspace, random_subspace_labels, random_toy_space

__all__ = [
    'asserting', 'random_generation',
    'assert_sectors_consistent', 'assert_space_round_trip', 'assert_subspace_round_trip',
    'ToySpace', 'ToySubspace', 'random_subspace_labels', 'random_toy_space',
]
