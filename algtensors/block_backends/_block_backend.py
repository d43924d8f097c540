"""Block-backends implement matrix and array algebra on dense blocks, similar to e.g. numpy"""

# Copyright (C) TeNPy Developers, Apache license
from __future__ import annotations

from abc import ABCMeta, abstractmethod
from collections.abc import Sequence
from math import prod
from typing import TypeVar

import numpy as np

from ..alignment import block_permutation

__all__ = ['Block', 'BlockBackend']

# placeholder for a backend-specific type that represents the data of tensors
Block = TypeVar('Block')


class BlockBackend(metaclass=ABCMeta):
    """Abstract base class that defines the operation on dense blocks.

    The tensor classes never touch their data directly. Instead, they describe what should
    happen in terms of groups of axes (which axes are contracted, which are traced, which
    order the result should have) and leave the arithmetic to a block backend.
    """

    BlockCls = None  # to be set by subclass

    def __init__(self, default_device: str):
        self.default_device = default_device

    def __repr__(self):
        return f'{type(self).__name__}()'

    def __str__(self):
        return f'{type(self).__name__}()'

    @abstractmethod
    def as_block(self, a, dtype=None) -> Block:
        """Convert objects to blocks.

        Should support blocks, numpy arrays, nested python containers. May support more.
        If `a` is already a block of correct dtype, it must be returned un-modified, such that
        tensors constructed from it share their data with `a`.

        See Also
        --------
        copy_block
            Guarantees an independent copy.

        """
        ...

    @abstractmethod
    def copy_block(self, a: Block) -> Block:
        """Create a new, independent block with the same data"""
        ...

    @abstractmethod
    def get_shape(self, a: Block) -> tuple[int, ...]: ...

    @abstractmethod
    def get_dtype(self, a: Block): ...

    @abstractmethod
    def conj(self, a: Block) -> Block:
        """Complex conjugate of a block"""
        ...

    @abstractmethod
    def real(self, a: Block) -> Block:
        """The real part of a complex number, elementwise."""
        ...

    @abstractmethod
    def imag(self, a: Block) -> Block:
        """The imaginary part of a complex number, elementwise."""
        ...

    @abstractmethod
    def permute_axes(self, a: Block, permutation: list[int]) -> Block:
        """Permute the axes such that the new axis ``i`` is the old axis ``permutation[i]``.

        Should return a view if the block type supports it.
        """
        ...

    @abstractmethod
    def reshape(self, a: Block, shape: tuple[int, ...]) -> Block: ...

    @abstractmethod
    def item(self, a: Block) -> float | complex:
        """Assumes that data is a scalar (i.e. has only one entry). Returns that scalar"""
        ...

    @abstractmethod
    def block_equal(self, a: Block, b: Block) -> bool:
        """If two blocks have the same shape and equal entries"""
        ...

    @abstractmethod
    def allclose(self, a: Block, b: Block, rtol: float = 1e-5, atol: float = 1e-8) -> bool: ...

    def mul(self, a: float | complex, b: Block) -> Block:
        return a * b

    def linear_combination(self, a, v: Block, b, w: Block) -> Block:
        return a * v + b * w

    def add(self, a: Block, b: Block, perm_b: Sequence[int], alpha=1, beta=1) -> Block:
        """The sum ``alpha * a + beta * b``, where `b` is first brought into the axis order of `a`.

        Parameters
        ----------
        a, b : Block
            Blocks with the same number of axes.
        perm_b : list of int
            Axis permutation of `b`, such that ``permute_axes(b, perm_b)`` has the same axis
            order as `a`.
        alpha, beta : number
            Prefactors.

        """
        b = self.permute_axes(b, list(perm_b))
        return self.linear_combination(alpha, a, beta, b)

    def contract(self, a: Block, b: Block, open_a: Sequence[int], contracted_a: Sequence[int],
                 contracted_b: Sequence[int], open_b: Sequence[int], out_perm: Sequence[int]
                 ) -> Block:
        """Generic contraction of two blocks.

        The axes ``contracted_a[n]`` of `a` and ``contracted_b[n]`` of `b` are summed over.
        The remaining axes are described by the index groups `open_a` and `open_b`, which must
        be the uncontracted axes in ascending order.
        The intermediate result has axes ``[*open_a, *open_b]`` which are then brought into
        the order `out_perm`, i.e. the result axis ``i`` is the intermediate axis
        ``out_perm[i]``.
        """
        num_a = len(self.get_shape(a))
        num_b = len(self.get_shape(b))
        assert len(open_a) + len(contracted_a) == num_a
        assert len(open_b) + len(contracted_b) == num_b
        res = self.tdot(a, b, list(contracted_a), list(contracted_b))
        return self.permute_axes(res, list(out_perm))

    @abstractmethod
    def tdot(self, a: Block, b: Block, idcs_a: list[int], idcs_b: list[int]) -> Block:
        """Tensordot. The result has the uncontracted axes of `a` then those of `b`, in order."""
        ...

    @abstractmethod
    def outer(self, a: Block, b: Block) -> Block:
        """Outer product of blocks.

        ``res[i1,...,iN,j1,...,jM] = a[i1,...,iN] * b[j1,...,jM]``
        """
        ...

    def tensor_outer(self, a: Block, b: Block, K: int, L: int) -> Block:
        """Version of ``tensors.outer`` on blocks.

        Note the different leg order to usual outer products::

            res[i1,...,iK,j1,...,jL,i{K+1},...,iN,j{L+1},...,jM] == a[i1,...,iN] * b[j1,...,jM]

        intended to be used with ``K`` and ``L`` the number of left axes of `a` and `b`.
        """
        res = self.outer(a, b)  # [i1,...,iN,j1,...,jM]
        N = len(self.get_shape(a))
        M = len(self.get_shape(b))
        perm = block_permutation([K, N - K, L, M - L], [0, 2, 1, 3])
        return self.permute_axes(res, perm)

    @abstractmethod
    def trace_full(self, a: Block, idcs1: Sequence[int], idcs2: Sequence[int]) -> float | complex:
        """Sum over the diagonal where each axis ``idcs1[n]`` is paired with ``idcs2[n]``.

        Every axis of `a` must appear in exactly one of `idcs1` or `idcs2`.
        """
        ...

    @abstractmethod
    def trace_partial(self, a: Block, idcs1: Sequence[int], idcs2: Sequence[int],
                      remaining: Sequence[int]) -> Block:
        """Partial version of :meth:`trace_full`. The axes `remaining` are kept, in that order."""
        ...

    # MATRIX FUNCTIONS

    def matrix_from_block(self, a: Block, num_rows: int) -> Block:
        """Combine the first `num_rows` axes to rows and the rest to columns, C-style."""
        shape = self.get_shape(a)
        return self.reshape(a, (prod(shape[:num_rows]), prod(shape[num_rows:])))

    @abstractmethod
    def matrix_eig(self, matrix: Block) -> tuple[Block, Block]:
        """Eigenvalues and right eigenvectors (as columns) of a square matrix."""
        ...

    @abstractmethod
    def matrix_eigvals(self, matrix: Block) -> Block: ...

    @abstractmethod
    def matrix_eigh(self, matrix: Block) -> tuple[Block, Block]:
        """Eigen decomposition of a hermitian matrix. Eigenvalues are ascending."""
        ...

    @abstractmethod
    def matrix_svd(self, matrix: Block) -> tuple[Block, Block, Block]:
        """Singular value decomposition ``U, S, Vh`` with descending singular values."""
        ...

    @abstractmethod
    def matrix_svdvals(self, matrix: Block) -> Block: ...

    @abstractmethod
    def matrix_det(self, matrix: Block) -> float | complex: ...

    @abstractmethod
    def matrix_inv(self, matrix: Block) -> Block: ...

    @abstractmethod
    def matrix_exp(self, matrix: Block) -> Block: ...

    @abstractmethod
    def matrix_log(self, matrix: Block) -> Block: ...

    @abstractmethod
    def matrix_sqrt(self, matrix: Block) -> Block: ...

    @abstractmethod
    def matrix_function(self, matrix: Block, name: str) -> Block:
        """Analytic matrix function by name, one of ``sin, cos, tan, sinh, cosh, tanh``."""
        ...

    @abstractmethod
    def matrix_power(self, matrix: Block, n: int) -> Block: ...

    @abstractmethod
    def matrix_norm(self, matrix: Block, order: int | float | str = 2) -> float:
        """Matrix norm. ``order=2`` is the operator norm, ``'fro'`` the Frobenius norm."""
        ...

    @abstractmethod
    def eye_matrix(self, dim: int, dtype) -> Block:
        """The ``dim x dim`` identity matrix"""
        ...

    def eye_block(self, dims: list[int], dtype) -> Block:
        """The identity matrix, reshaped to a block with axes ``[m1,...,mJ,m1*,...,mJ*]``."""
        eye = self.eye_matrix(prod(dims), dtype)
        return self.reshape(eye, tuple(dims) * 2)

    def to_numpy(self, a: Block, numpy_dtype=None) -> np.ndarray:
        # BlockBackends may override, if this implementation is not valid
        return np.asarray(a, dtype=numpy_dtype)

    @abstractmethod
    def _block_repr_lines(self, a: Block, indent: str, max_width: int, max_lines: int
                          ) -> list[str]: ...

    def test_block_sanity(self, block, expect_shape: tuple[int, ...] | None = None,
                          expect_dtype=None):
        assert isinstance(block, self.BlockCls), 'wrong block type'
        if expect_shape is not None:
            if self.get_shape(block) != expect_shape:
                msg = f'wrong block shape {self.get_shape(block)} != {expect_shape}'
                raise AssertionError(msg)
        if expect_dtype is not None:
            assert self.get_dtype(block) == expect_dtype, 'wrong block dtype'
