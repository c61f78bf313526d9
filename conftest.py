r"""Provide test configuration for lookup policies, toy spaces etc.

Fixtures
--------

The following table summarizes the available fixtures.

=============================  ======================  ===========================================
Fixture                        Depends on / # cases    Description
=============================  ======================  ===========================================
np_random                      -                       A numpy random Generator. Use this for
                                                       reproducibility.
-----------------------------  ----------------------  -------------------------------------------
lookup_policy                  Generates ~2 cases      Goes over the lookup policies given by
                                                       ``--lookup-policies``, as str. Sets
                                                       ``config.lookup_policy`` for the test.
-----------------------------  ----------------------  -------------------------------------------
make_any_space                 lookup_policy           RNG for :class:`ToySpace` s.
                                                       ``make(max_subspaces=5, max_size=4,
                                                       allow_empty=False)``
-----------------------------  ----------------------  -------------------------------------------
sanity_checks                  -                       Enables ``config.do_sanity_checks`` for the
                                                       test.
-----------------------------  ----------------------  -------------------------------------------
orbital_space_pn               -                       ``OrbitalSpacePN.from_Nmax(Nmax)``, via
                                                       ``make(Nmax)``.
=============================  ======================  ===========================================


Marks
-----
Note: a list of marks should also be maintained in ``pyproject.toml``.

- ``slow``: marks tests as slow (deselect with ``-m "not slow"``)
- ``ordered``: marks tests that use the ordered lookup policy.
- ``hashed``: marks tests that use the hashed lookup policy.

"""

# Copyright (C) TeNPy Developers, Apache license
from __future__ import annotations

import numpy as np
import pytest

from shellbasis.dummy_config import config
from shellbasis.models import OrbitalSpacePN
from shellbasis.testing import ToySpace, random_toy_space

# OVERRIDE pytest routines


def pytest_addoption(parser):
    parser.addoption('--lookup-policies', action='store', default='ordered,hashed',
                     help=f'Comma separated lookup policy names')
    parser.addoption('--rng-seed', action='store', default=12345, type=int, help=f'The rng seed')


def pytest_generate_tests(metafunc):
    if 'lookup_policy' in metafunc.fixturenames:
        lookup_policies = metafunc.config.getoption('--lookup-policies').split(',')
        assert all(p in _lookup_policy_params for p in lookup_policies), str(lookup_policies)
        metafunc.parametrize('lookup_policy', [_lookup_policy_params[p] for p in lookup_policies])


# QUICK CONFIGURATION

_lookup_policy_params = dict(
    ordered=pytest.param('ordered', marks=pytest.mark.ordered),
    hashed=pytest.param('hashed', marks=pytest.mark.hashed),
)


# FIXTURES


@pytest.fixture
def np_random(request) -> np.random.Generator:
    return np.random.default_rng(seed=request.config.getoption('--rng-seed'))


@pytest.fixture  # values defined during `pytest_generate_tests`
def lookup_policy(request, monkeypatch) -> str:
    monkeypatch.setattr(config, 'lookup_policy', request.param)
    return request.param


@pytest.fixture
def sanity_checks(monkeypatch):
    monkeypatch.setattr(config, 'do_sanity_checks', True)


@pytest.fixture
def make_any_space(lookup_policy, np_random):
    def make(max_subspaces: int = 5, max_size: int = 4, allow_empty: bool = False) -> ToySpace:
        return random_toy_space(max_subspaces, max_size, allow_empty=allow_empty, np_random=np_random)

    return make


@pytest.fixture
def orbital_space_pn():
    def make(Nmax: int) -> OrbitalSpacePN:
        return OrbitalSpacePN.from_Nmax(Nmax)

    return make
