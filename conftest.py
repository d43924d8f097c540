r"""Provide test configuration for block backends etc.

Fixtures
--------

The following table summarizes the available fixtures.

=============================  ======================  ===========================================
Fixture                        Depends on / # cases    Description
=============================  ======================  ===========================================
np_random                      -                       A numpy random Generator. Use this for
                                                       reproducibility.
-----------------------------  ----------------------  -------------------------------------------
block_backend                  Generates ~1 case       Goes over all block backends, as str
                                                       descriptions, valid for
                                                       ``get_block_backend``.
-----------------------------  ----------------------  -------------------------------------------
make_block                     block_backend           RNG for blocks of ``block_backend``.
                                                       ``make(size, real=False)``
-----------------------------  ----------------------  -------------------------------------------
make_tensor                    block_backend           RNG for tensors with ``block_backend``.
                                                       ``make(lspaces, rspaces=(), dims=None,
                                                       real=True)``
=============================  ======================  ===========================================

The ``dims`` argument of ``make_tensor`` is a dict ``{space: extent}``. Extents of spaces that
are not in it are chosen at random and added to the dict, such that the same dict can be passed
to subsequent calls to generate tensors with compatible extents.


Marks
-----
Note: a list of marks should also be maintained in ``pyproject.toml``.

- ``slow``: marks tests as slow (deselect with ``-m "not slow"``)
- ``numpy``: marks tests that use the numpy block backend.

"""

# Copyright (C) TeNPy Developers, Apache license
from __future__ import annotations

import numpy as np
import pytest

from algtensors import block_backends, dummy_config, tensors
from algtensors.testing import random_block, random_tensor

# OVERRIDE pytest routines


def pytest_addoption(parser):
    parser.addoption('--block-backends', action='store', default='numpy', help=f'Comma separated block-backend names')
    parser.addoption('--rng-seed', action='store', default=12345, type=int, help=f'The rng seed')


def pytest_generate_tests(metafunc):
    if 'block_backend' in metafunc.fixturenames:
        block_backends = metafunc.config.getoption('--block-backends').split(',')
        assert all(b in _block_backend_params for b in block_backends), str(block_backends)
        metafunc.parametrize('block_backend', [_block_backend_params[b] for b in block_backends])


# QUICK CONFIGURATION

_block_backend_params = dict(
    numpy=pytest.param('numpy', marks=pytest.mark.numpy),
)


# "UNCONSTRAINED" FIXTURES  ->  independent (mostly) of the other features. no compatibility guarantees.


@pytest.fixture
def np_random(request) -> np.random.Generator:
    return np.random.default_rng(seed=request.config.getoption('--rng-seed'))


@pytest.fixture
def make_block(block_backend, np_random):
    backend = block_backends.get_block_backend(block_backend)

    def make(size: tuple[int, ...], real=False) -> block_backends.Block:
        # return Block
        return random_block(backend, size, real=real, np_random=np_random)

    return make


@pytest.fixture
def make_tensor(block_backend, np_random):
    """Tensor RNG."""

    def make(lspaces, rspaces=(), dims: dict[int, int] = None, real: bool = True,
             max_dim: int = 4) -> tensors.Tensor:
        return random_tensor(lspaces, rspaces, dims=dims, real=real, backend=block_backend,
                             max_dim=max_dim, np_random=np_random)

    return make


@pytest.fixture
def lazy_outer_products():
    """Temporarily make ``A & B`` return a :class:`~algtensors.tensors.TensorProduct`."""
    old = dummy_config.config.lazy_outer_products
    dummy_config.config.lazy_outer_products = True
    yield
    dummy_config.config.lazy_outer_products = old
