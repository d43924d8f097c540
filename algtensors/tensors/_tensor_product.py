"""Factored representation of outer products of tensors."""
# Copyright (C) TeNPy Developers, Apache license
from __future__ import annotations

import logging
from itertools import accumulate
from math import prod

import numpy as np

from ..spaces import (
    EmptyFactorList,
    InvalidIndexArity,
    LabelCollision,
    SpacesInt,
    disjoint,
    intersection,
    mask_to_labels,
    rank,
    union,
)
from ..tools.misc import is_scalar_number
from ..tools.string import format_spaces
from ._tensors import Tensor, _scale, outer

__all__ = ['TensorProduct']

logger = logging.getLogger(__name__)


class TensorProduct:
    r"""An outer product of tensors that is not (yet) computed.

    Represents the tensor ``outer(*factors)`` while storing only the factors. The left spaces
    are the left spaces of all factors, in order of the factors, and likewise for the right
    spaces. The logical axes are ordered accordingly, i.e. first the left axes of all factors,
    then the right axes of all factors.

    Products are accumulated with ``&``, e.g. ``TensorProduct(A, B) & C``, which returns a new
    product with three factors. The factors themselves are never modified.
    Use :meth:`to_tensor` to compute the dense result.

    .. note ::
        The factors must have pairwise distinct left spaces and pairwise distinct right spaces.
        Factors with spaces in common, e.g. ``T[i, j, k] = A[i, k] * B[j, k]``, would require
        tracking which factors share an axis and are not supported.

    Parameters
    ----------
    *factors : Tensor
        The factors.

    Attributes
    ----------
    factors : tuple of Tensor
        The factors.
    num_factors : int
        The number of :attr:`factors`.

    """

    __array_ufunc__ = None
    __hash__ = None

    def __init__(self, *factors: Tensor):
        lmask = 0
        rmask = 0
        for n, f in enumerate(factors):
            if not isinstance(f, Tensor):
                raise TypeError(f'Factors must be tensors. Got {type(f).__name__}')
            if not disjoint(f.lspaces_mask, lmask):
                msg = (f'Factor {n} has left spaces '
                       f'{mask_to_labels(intersection(f.lspaces_mask, lmask))} '
                       f'in common with previous factors')
                raise LabelCollision(msg)
            if not disjoint(f.rspaces_mask, rmask):
                msg = (f'Factor {n} has right spaces '
                       f'{mask_to_labels(intersection(f.rspaces_mask, rmask))} '
                       f'in common with previous factors')
                raise LabelCollision(msg)
            lmask = union(lmask, f.lspaces_mask)
            rmask = union(rmask, f.rspaces_mask)
        self.factors = factors
        self.num_factors = len(factors)
        self._lmask = lmask
        self._rmask = rmask
        # axis offsets of the factors, separately for left and right axes
        self._loffsets = [0, *accumulate(f.num_lspaces for f in factors)]
        self._roffsets = [0, *accumulate(f.num_rspaces for f in factors)]

    def test_sanity(self):
        for f in self.factors:
            f.test_sanity()
        assert self.num_factors == len(self.factors)
        assert len(self._loffsets) == len(self._roffsets) == self.num_factors + 1
        assert rank(self._lmask) == len(self.lspaces)
        assert rank(self._rmask) == len(self.rspaces)

    @property
    def lspaces(self) -> tuple[int, ...]:
        return tuple(s for f in self.factors for s in f.lspaces)

    @property
    def rspaces(self) -> tuple[int, ...]:
        return tuple(s for f in self.factors for s in f.rspaces)

    @property
    def spaces(self) -> tuple[int, ...]:
        return self.lspaces + self.rspaces

    @property
    def lspaces_mask(self) -> SpacesInt:
        return self._lmask

    @property
    def rspaces_mask(self) -> SpacesInt:
        return self._rmask

    @property
    def num_lspaces(self) -> int:
        return self._loffsets[-1]

    @property
    def num_rspaces(self) -> int:
        return self._roffsets[-1]

    @property
    def ndim(self) -> int:
        return self.num_lspaces + self.num_rspaces

    @property
    def lsize(self) -> tuple[int, ...]:
        return tuple(d for f in self.factors for d in f.lsize)

    @property
    def rsize(self) -> tuple[int, ...]:
        return tuple(d for f in self.factors for d in f.rsize)

    @property
    def shape(self) -> tuple[int, ...]:
        return self.lsize + self.rsize

    @property
    def size(self) -> int:
        return prod(f.size for f in self.factors)

    @property
    def dtype(self):
        if self.num_factors == 0:
            return np.dtype(float)
        return np.result_type(*(f.dtype for f in self.factors))

    def factor_axes(self, i: int) -> list[int]:
        """The logical axes that belong to factor `i`, left axes first."""
        N = self.num_lspaces
        return [*range(self._loffsets[i], self._loffsets[i + 1]),
                *range(N + self._roffsets[i], N + self._roffsets[i + 1])]

    def to_tensor(self) -> Tensor:
        """Compute the outer product of the factors."""
        if self.num_factors == 0:
            return Tensor(np.ones(()), ())
        logger.debug('materializing product of %d factors with spaces %s', self.num_factors,
                     format_spaces(self.lspaces, self.rspaces))
        res = outer(*self.factors)
        return res

    def __getitem__(self, idx):
        """Index with at most one integer or slice per logical axis.

        Missing trailing indices select the full axes. Each factor is indexed with the indices
        of its axes, and the results are combined with :func:`outer`.
        """
        if not isinstance(idx, tuple):
            idx = (idx,)
        if self.num_factors == 0:
            if len(idx) > 0:
                raise EmptyFactorList('Can not index a TensorProduct that has no factors')
            return 1.
        if len(idx) > self.ndim:
            raise InvalidIndexArity(f'Too many indices ({len(idx)}) for {self.ndim} axes')
        idx = idx + (slice(None, None, None),) * (self.ndim - len(idx))
        vals = [f[tuple(idx[ax] for ax in self.factor_axes(i))]
                for i, f in enumerate(self.factors)]
        return outer(*vals)

    def _scaled(self, factor) -> TensorProduct:
        if self.num_factors == 0:
            return TensorProduct(Tensor(np.asarray(factor), ()))
        return TensorProduct(_scale(factor, self.factors[0]), *self.factors[1:])

    def __and__(self, other):
        if isinstance(other, TensorProduct):
            return TensorProduct(*self.factors, *other.factors)
        if isinstance(other, Tensor):
            return TensorProduct(*self.factors, other)
        if is_scalar_number(other):
            return self._scaled(other)
        return NotImplemented

    def __rand__(self, other):
        if isinstance(other, Tensor):
            return TensorProduct(other, *self.factors)
        if is_scalar_number(other):
            return self._scaled(other)
        return NotImplemented

    def __mul__(self, other):
        if is_scalar_number(other):
            return self._scaled(other)
        if isinstance(other, TensorProduct):
            return self.to_tensor() * other.to_tensor()
        if isinstance(other, Tensor):
            return self.to_tensor() * other
        return NotImplemented

    def __rmul__(self, other):
        if is_scalar_number(other):
            return self._scaled(other)
        if isinstance(other, Tensor):
            return other * self.to_tensor()
        return NotImplemented

    def __eq__(self, other):
        if isinstance(other, TensorProduct):
            other = other.to_tensor()
        if not isinstance(other, Tensor):
            return NotImplemented
        return self.to_tensor() == other

    def __str__(self):
        return f'TensorProduct{format_spaces(self.lspaces, self.rspaces)}'

    def __repr__(self):
        lines = [f'<{self!s} shape={self.shape} with {self.num_factors} factors>']
        for i, f in enumerate(self.factors):
            lines.append(f'Factor {i}:')
            lines.append(repr(f))
        return '\n'.join(lines)
