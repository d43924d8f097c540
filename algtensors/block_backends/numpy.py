"""A block backend using numpy."""
# Copyright (C) TeNPy Developers, Apache license
from __future__ import annotations

from collections.abc import Sequence
from math import prod

import numpy as np
import scipy.linalg

from ..dummy_config import printoptions
from ._block_backend import Block, BlockBackend

__all__ = ['NumpyBlockBackend']


class NumpyBlockBackend(BlockBackend):
    """A block backend using numpy."""

    BlockCls = np.ndarray
    _matrix_functions = {
        'sin': scipy.linalg.sinm,
        'cos': scipy.linalg.cosm,
        'tan': scipy.linalg.tanm,
        'sinh': scipy.linalg.sinhm,
        'cosh': scipy.linalg.coshm,
        'tanh': scipy.linalg.tanhm,
    }

    def __init__(self):
        super().__init__(default_device='cpu')

    def as_block(self, a, dtype=None) -> Block:
        return np.asarray(a, dtype=dtype)

    def copy_block(self, a: Block) -> Block:
        return np.copy(a)

    def get_shape(self, a: Block) -> tuple[int, ...]:
        return np.shape(a)

    def get_dtype(self, a: Block):
        return a.dtype

    def conj(self, a: Block) -> Block:
        return np.conj(a)

    def real(self, a: Block) -> Block:
        return np.real(a)

    def imag(self, a: Block) -> Block:
        return np.imag(a)

    def permute_axes(self, a: Block, permutation: list[int]) -> Block:
        return np.transpose(a, permutation)

    def reshape(self, a: Block, shape: tuple[int, ...]) -> Block:
        return np.reshape(a, shape)

    def item(self, a: Block) -> float | complex:
        return a.item()

    def block_equal(self, a: Block, b: Block) -> bool:
        return np.array_equal(a, b)

    def allclose(self, a: Block, b: Block, rtol: float = 1e-5, atol: float = 1e-8) -> bool:
        if np.shape(a) != np.shape(b):
            return False
        return np.allclose(a, b, rtol=rtol, atol=atol)

    def tdot(self, a: Block, b: Block, idcs_a: list[int], idcs_b: list[int]) -> Block:
        return np.tensordot(a, b, (idcs_a, idcs_b))

    def outer(self, a: Block, b: Block) -> Block:
        return np.multiply.outer(a, b)

    def trace_full(self, a: Block, idcs1: Sequence[int], idcs2: Sequence[int]) -> float | complex:
        a = np.transpose(a, [*idcs1, *idcs2])
        trace_dim = prod(a.shape[:len(idcs1)])
        a = np.reshape(a, (trace_dim, trace_dim))
        return np.trace(a).item()

    def trace_partial(self, a: Block, idcs1: Sequence[int], idcs2: Sequence[int],
                      remaining: Sequence[int]) -> Block:
        a = np.transpose(a, [*remaining, *idcs1, *idcs2])
        trace_dim = prod(a.shape[len(remaining):len(remaining) + len(idcs1)])
        a = np.reshape(a, a.shape[:len(remaining)] + (trace_dim, trace_dim))
        return np.trace(a, axis1=-2, axis2=-1)

    def matrix_eig(self, matrix: Block) -> tuple[Block, Block]:
        return np.linalg.eig(matrix)

    def matrix_eigvals(self, matrix: Block) -> Block:
        return np.linalg.eigvals(matrix)

    def matrix_eigh(self, matrix: Block) -> tuple[Block, Block]:
        return np.linalg.eigh(matrix)

    def matrix_svd(self, matrix: Block) -> tuple[Block, Block, Block]:
        return scipy.linalg.svd(matrix, full_matrices=False)

    def matrix_svdvals(self, matrix: Block) -> Block:
        return scipy.linalg.svdvals(matrix)

    def matrix_det(self, matrix: Block) -> float | complex:
        return np.linalg.det(matrix).item()

    def matrix_inv(self, matrix: Block) -> Block:
        return scipy.linalg.inv(matrix)

    def matrix_exp(self, matrix: Block) -> Block:
        return scipy.linalg.expm(matrix)

    def matrix_log(self, matrix: Block) -> Block:
        return scipy.linalg.logm(matrix)

    def matrix_sqrt(self, matrix: Block) -> Block:
        return scipy.linalg.sqrtm(matrix)

    def matrix_function(self, matrix: Block, name: str) -> Block:
        try:
            func = self._matrix_functions[name]
        except KeyError:
            raise ValueError(f'Unknown matrix function: {name}') from None
        return func(matrix)

    def matrix_power(self, matrix: Block, n: int) -> Block:
        return np.linalg.matrix_power(matrix, n)

    def matrix_norm(self, matrix: Block, order: int | float | str = 2) -> float:
        return np.linalg.norm(matrix, ord=order).item()

    def eye_matrix(self, dim: int, dtype) -> Block:
        return np.eye(dim, dtype=dtype)

    def _block_repr_lines(self, a: Block, indent: str, max_width: int, max_lines: int
                          ) -> list[str]:
        with np.printoptions(linewidth=max_width - len(indent), precision=printoptions.precision):
            lines = [f'{indent}{line}' for line in str(a).split('\n')]
        if len(lines) > max_lines:
            first = (max_lines - 1) // 2
            last = max_lines - 1 - first
            lines = lines[:first] + [f'{indent}...'] + lines[-last:]
        return lines
