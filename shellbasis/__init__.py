r"""shellbasis library - indexing of basis states for quantum many-body calculations.

Provides generic containers for subspaces of states with good quantum numbers, spaces of such
subspaces, and the sectors of operators between them, together with concrete coupling schemes for
nuclear single-particle orbitals and two-body states.

"""
# Copyright (C) TeNPy Developers, Apache license

# note: order matters!
from . import (
    basis,
    dummy_config,
    models,
    multibasis,
    selection_rules,
    testing,
    tools,
    version,
)
from .basis import (
    NONE,
    BaseSector,
    BaseSectors,
    BaseSpace,
    BaseState,
    BaseSubspace,
    SectorDirection,
    Sectors,
)
from .multibasis import BaseMultiSpace, BaseMultiState, BaseMultiSubspace
from .selection_rules import (
    AllOf,
    AnyPair,
    DeltaRule,
    MultiplicityRule,
    ParityRule,
    ProjectionRule,
    SelectionRule,
    TriangleRule,
)
from .version import full_version as __full_version__
from .version import version as __version__

__all__ = [
    'basis', 'dummy_config', 'models', 'multibasis', 'selection_rules', 'testing', 'tools', 'version',
    'NONE', 'BaseSector', 'BaseSectors', 'BaseSpace', 'BaseState', 'BaseSubspace', 'SectorDirection',
    'Sectors', 'BaseMultiSpace', 'BaseMultiState', 'BaseMultiSubspace',
    'AllOf', 'AnyPair', 'DeltaRule', 'MultiplicityRule', 'ParityRule', 'ProjectionRule',
    'SelectionRule', 'TriangleRule', 'show_config',
]


def show_config():
    """Print information about the version of shellbasis and used libraries.

    The information printed is :attr:`shellbasis.version.version_summary`.
    """
    print(version.version_summary)
