"""Utility functions to access block backend instances."""

# Copyright (C) TeNPy Developers, Apache license
from __future__ import annotations

import logging

from ..dummy_config import config
from ._block_backend import BlockBackend
from .numpy import NumpyBlockBackend

__all__ = ['get_block_backend']

logger = logging.getLogger(__name__)

_block_backends = dict(  # values: (cls, kwargs)
    numpy=(NumpyBlockBackend, {}),
    cpu=(NumpyBlockBackend, {}),
    torch=None,
    jax=None,
    gpu=None,
)
_instantiated_backends = {}  # keys: block_backend: str


def get_block_backend(block_backend: str | BlockBackend = None) -> BlockBackend:
    """Get an instance of an appropriate block backend.

    Backends are instantiated only once and then cached. If a suitable backend instance is in
    the cache, that same instance is returned.

    Parameters
    ----------
    block_backend : {None, 'numpy', 'cpu'} | BlockBackend
        Specify which block backend to use. ``None`` means ``config.default_block_backend``.
        An instance is returned unchanged.

    """
    if isinstance(block_backend, BlockBackend):
        return block_backend
    if block_backend is None:
        block_backend = config.default_block_backend
    if not isinstance(block_backend, str):
        msg = f'Invalid type for `block_backend`. Expected BlockBackend or str. Got {type(block_backend).__name__}'
        raise TypeError(msg)

    backend = _instantiated_backends.get(block_backend, None)
    if backend is not None:
        return backend

    if block_backend not in _block_backends:
        raise ValueError(f'Unknown block backend: {block_backend!r}')
    if _block_backends[block_backend] is None:
        raise ValueError(f'Block backend {block_backend!r} is not supported yet')

    BlockBackendCls, block_kwargs = _block_backends[block_backend]
    backend = BlockBackendCls(**block_kwargs)
    logger.debug('instantiated block backend %s for %r', backend, block_backend)

    _instantiated_backends[block_backend] = backend
    return backend
