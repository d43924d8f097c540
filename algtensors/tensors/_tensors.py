"""The :class:`Tensor` class and the algebra of tensors.

See :mod:`algtensors.tensors` for an overview of the conventions.
"""
# Copyright (C) TeNPy Developers, Apache license
from __future__ import annotations

from collections.abc import Sequence
from functools import reduce
from math import prod
from numbers import Number

import numpy as np

from ..alignment import align_permutation, sorted_order, sorting_permutation
from ..block_backends import Block, BlockBackend, get_block_backend
from ..dummy_config import config, printoptions
from ..spaces import (
    ArityMismatch,
    DimensionMismatch,
    IndexOutOfRange,
    LabelCollision,
    LabelSetMismatch,
    ShapeMismatch,
    SpacesInt,
    check_labels,
    disjoint,
    intersection,
    is_subset,
    mask_to_labels,
    rank,
    to_mask,
    union,
)
from ..tools.misc import is_integer, is_permutation, is_scalar_number, to_iterable, to_valid_idx
from ..tools.string import format_spaces

__all__ = [
    'Tensor', 'relabel', 'linear_combination', 'contract', 'outer', 'trace', 'partial_trace',
    'marginal', 'transpose', 'partial_transpose', 'adjoint', 'permute_axes', 'sort_spaces',
    'almost_equal', 'eye',
]


def _default_rspaces(lspaces: tuple[int, ...], num_axes: int) -> tuple[int, ...]:
    # square tensors reuse the left spaces on the right, otherwise a vector
    if len(lspaces) > 0 and num_axes == 2 * len(lspaces):
        return lspaces
    return ()


class Tensor:
    r"""A dense array whose axes are labelled by spaces.

    The first :attr:`num_lspaces` axes of the :attr:`data` belong to the left spaces, in the
    order given by :attr:`lspaces`, and the remaining axes belong to the right spaces, in the
    order given by :attr:`rspaces`. A space may appear at most once per side, but the same
    space may appear on both sides, e.g. for linear operators acting on that space.

    The order of the spaces is a detail of the memory layout. All operations match axes by
    their spaces, and two tensors are equal if they have the same spaces on each side and equal
    entries after aligning the axes.

    The data is stored by reference. Relabelling (``T(new_lspaces, new_rspaces)``) and indexing
    with slices create new tensors that share the same data, such that in-place modifications
    via ``T[idx] = value`` are visible to all of them.

    Parameters
    ----------
    data : array_like
        The entries. Blocks of the backend (e.g. numpy arrays) are used without copy.
    lspaces : sequence of int
        The left spaces, one per leading axis.
    rspaces : sequence of int, optional
        The right spaces, one per trailing axis. If not given, a tensor with twice as many axes
        as left spaces is "square" and has the same spaces on the right. Otherwise, there are no
        right spaces.
    backend : str | BlockBackend, optional
        The block backend. Defaults to ``config.default_block_backend``.

    Attributes
    ----------
    data : Block
        The entries, with axes ``[*lspaces, *rspaces]``.
    backend : BlockBackend
        The block backend that performs the numerical operations on :attr:`data`.

    """

    __array_ufunc__ = None  # let numpy defer to our reflected operators, e.g. ``np.float64(2) * T``
    __hash__ = None  # mutable data

    def __init__(self, data, lspaces: Sequence[int], rspaces: Sequence[int] = None,
                 backend: str | BlockBackend = None):
        self.backend = backend = get_block_backend(backend)
        data = backend.as_block(data)
        num_axes = len(backend.get_shape(data))
        lspaces = check_labels(to_iterable(lspaces))
        if rspaces is None:
            rspaces = _default_rspaces(lspaces, num_axes)
        else:
            rspaces = check_labels(to_iterable(rspaces))
        if num_axes != len(lspaces) + len(rspaces):
            msg = (f'Array with {num_axes} axes does not match {len(lspaces)} left and '
                   f'{len(rspaces)} right spaces')
            raise ShapeMismatch(msg)
        self.data = data
        self._lspaces = lspaces
        self._rspaces = rspaces
        self._lmask = to_mask(lspaces)
        self._rmask = to_mask(rspaces)

    @classmethod
    def _from_block(cls, data: Block, lspaces: Sequence[int], rspaces: Sequence[int],
                    backend: BlockBackend) -> Tensor:
        """Skip input checks, for internal use with already validated spaces."""
        res = cls.__new__(cls)
        res.backend = backend
        res.data = data
        res._lspaces = tuple(lspaces)
        res._rspaces = tuple(rspaces)
        res._lmask = to_mask(res._lspaces)
        res._rmask = to_mask(res._rspaces)
        return res

    def test_sanity(self):
        self.backend.test_block_sanity(self.data)
        assert check_labels(self._lspaces) == self._lspaces
        assert check_labels(self._rspaces) == self._rspaces
        assert len(self.shape) == len(self._lspaces) + len(self._rspaces)
        assert self._lmask == to_mask(self._lspaces)
        assert self._rmask == to_mask(self._rspaces)
        assert rank(self._lmask) == len(self._lspaces)
        assert rank(self._rmask) == len(self._rspaces)

    # PROPERTIES

    @property
    def lspaces(self) -> tuple[int, ...]:
        """The left spaces, in the order of the leading axes."""
        return self._lspaces

    @property
    def rspaces(self) -> tuple[int, ...]:
        """The right spaces, in the order of the trailing axes."""
        return self._rspaces

    @property
    def spaces(self) -> tuple[int, ...]:
        """All spaces, in the order of the axes. A space may appear twice."""
        return self._lspaces + self._rspaces

    @property
    def lspaces_mask(self) -> SpacesInt:
        return self._lmask

    @property
    def rspaces_mask(self) -> SpacesInt:
        return self._rmask

    @property
    def spaces_mask(self) -> SpacesInt:
        return union(self._lmask, self._rmask)

    @property
    def num_lspaces(self) -> int:
        return len(self._lspaces)

    @property
    def num_rspaces(self) -> int:
        return len(self._rspaces)

    @property
    def ndim(self) -> int:
        return len(self._lspaces) + len(self._rspaces)

    @property
    def shape(self) -> tuple[int, ...]:
        return tuple(self.backend.get_shape(self.data))

    @property
    def lsize(self) -> tuple[int, ...]:
        """The extents of the left axes."""
        return self.shape[:self.num_lspaces]

    @property
    def rsize(self) -> tuple[int, ...]:
        """The extents of the right axes."""
        return self.shape[self.num_lspaces:]

    @property
    def size(self) -> int:
        """The total number of entries."""
        return prod(self.shape)

    @property
    def dtype(self):
        return self.backend.get_dtype(self.data)

    @property
    def is_scalar(self) -> bool:
        """If the tensor has no spaces at all."""
        return self.ndim == 0

    @property
    def is_square(self) -> bool:
        """If the same spaces, with the same extents, are on the left and on the right."""
        if self._lmask != self._rmask:
            return False
        return all(self.dim_of(s, 'left') == self.dim_of(s, 'right') for s in self._lspaces)

    @property
    def T(self) -> Tensor:
        """The transpose, see :func:`transpose`."""
        return transpose(self)

    @property
    def H(self) -> Tensor:
        """The adjoint, see :func:`adjoint`."""
        return adjoint(self)

    @property
    def real(self) -> Tensor:
        return Tensor._from_block(self.backend.real(self.data), self._lspaces, self._rspaces,
                                  self.backend)

    @property
    def imag(self) -> Tensor:
        return Tensor._from_block(self.backend.imag(self.data), self._lspaces, self._rspaces,
                                  self.backend)

    def dim_of(self, space: int, side: str = 'left') -> int:
        """The extent of the axis with the given space on the given side.

        Parameters
        ----------
        space : int
            The space.
        side : {'left', 'right'}
            Which side of the tensor to look at.

        """
        if side == 'left':
            spaces, offset = self._lspaces, 0
        elif side == 'right':
            spaces, offset = self._rspaces, self.num_lspaces
        else:
            raise ValueError(f'Invalid side: {side!r}')
        if space not in spaces:
            raise LabelSetMismatch(f'Space {space} is not a {side} space of {self!s}')
        return self.shape[offset + spaces.index(space)]

    # CONVERSIONS

    def copy(self) -> Tensor:
        """A tensor with an independent copy of the data."""
        return Tensor._from_block(self.backend.copy_block(self.data), self._lspaces,
                                  self._rspaces, self.backend)

    def conj(self) -> Tensor:
        """Elementwise complex conjugate. The spaces stay the same."""
        return Tensor._from_block(self.backend.conj(self.data), self._lspaces, self._rspaces,
                                  self.backend)

    def to_numpy(self, numpy_dtype=None) -> np.ndarray:
        """The data as a numpy array, with axes in the order of :attr:`spaces`."""
        return self.backend.to_numpy(self.data, numpy_dtype)

    def item(self) -> float | complex:
        """The single entry of a tensor with ``size == 1``."""
        if self.size != 1:
            raise ValueError(f'Tensor with {self.size} entries can not be converted to a scalar')
        return self.backend.item(self.data)

    def relabel(self, lspaces: Sequence[int], rspaces: Sequence[int] = None) -> Tensor:
        """Same as :func:`relabel`."""
        return relabel(self, lspaces, rspaces)

    def trace(self, spaces: int | Sequence[int] = None) -> Tensor | float | complex:
        """Same as :func:`trace`."""
        return trace(self, spaces)

    def transpose(self, spaces: int | Sequence[int] = None) -> Tensor:
        """Same as :func:`transpose`."""
        return transpose(self, spaces)

    def __call__(self, *spaces) -> Tensor:
        """Reinterpret the axes as new spaces, sharing the data.

        ``T(3, 2)`` and ``T((3, 2))`` give new left spaces ``(3, 2)`` (and the same right spaces
        if the tensor is square), ``T((3, 2), (5,))`` gives new left and right spaces.
        See :func:`relabel`.
        """
        if all(is_integer(s) for s in spaces):
            return relabel(self, spaces)
        if len(spaces) == 1:
            return relabel(self, spaces[0])
        if len(spaces) == 2:
            return relabel(self, spaces[0], spaces[1])
        raise TypeError(f'Expected new spaces as integers or up to two sequences. Got {spaces!r}')

    # INDEXING

    def _parse_index(self, idx) -> tuple:
        if not isinstance(idx, tuple):
            idx = (idx,)
        if len(idx) != self.ndim:
            raise ArityMismatch(f'Expected {self.ndim} indices, got {len(idx)}')
        res = []
        for i, dim in zip(idx, self.shape):
            if is_integer(i):
                try:
                    i = to_valid_idx(int(i), dim)
                except IndexError as e:
                    raise IndexOutOfRange(str(e)) from None
            elif not isinstance(i, slice):
                raise TypeError(f'Indices must be integers or slices. Got {i!r}')
            res.append(i)
        return tuple(res)

    def _indexed_spaces(self, idx: tuple) -> tuple[tuple[int, ...], tuple[int, ...]]:
        N = self.num_lspaces
        lspaces = tuple(s for s, i in zip(self._lspaces, idx[:N]) if isinstance(i, slice))
        rspaces = tuple(s for s, i in zip(self._rspaces, idx[N:]) if isinstance(i, slice))
        return lspaces, rspaces

    def __getitem__(self, idx):
        """Index with one integer or slice per axis, in the order of :attr:`spaces`.

        Axes indexed by an integer are removed, together with their space. If all indices are
        integers, the entry is returned. Otherwise, a tensor that shares the data.
        """
        idx = self._parse_index(idx)
        res = self.data[idx]
        if all(is_integer(i) for i in idx):
            return res
        lspaces, rspaces = self._indexed_spaces(idx)
        return Tensor._from_block(res, lspaces, rspaces, self.backend)

    def __setitem__(self, idx, value):
        """Assign to the addressed entries of the data, which may be shared with other tensors.

        The `value` may be a scalar, an array, or a :class:`Tensor` with the same spaces as
        ``self[idx]``, which is aligned by its spaces.
        """
        idx = self._parse_index(idx)
        if isinstance(value, Tensor):
            lspaces, rspaces = self._indexed_spaces(idx)
            if value._lmask != to_mask(lspaces) or value._rmask != to_mask(rspaces):
                msg = (f'Can not assign {format_spaces(value._lspaces, value._rspaces)} to '
                       f'entries with spaces {format_spaces(lspaces, rspaces)}')
                raise LabelSetMismatch(msg)
            perm = align_permutation(value._lspaces, value._rspaces, lspaces, rspaces)
            value = value.backend.permute_axes(value.data, perm)
        self.data[idx] = value

    # COMPARISON

    def __eq__(self, other):
        if not isinstance(other, Tensor):
            return NotImplemented
        if self._lmask != other._lmask or self._rmask != other._rmask:
            return False
        perm = align_permutation(other._lspaces, other._rspaces, self._lspaces, self._rspaces)
        return self.backend.block_equal(self.data, other.backend.permute_axes(other.data, perm))

    # ARITHMETIC

    def __neg__(self) -> Tensor:
        return Tensor._from_block(self.backend.mul(-1, self.data), self._lspaces, self._rspaces,
                                  self.backend)

    def __pos__(self) -> Tensor:
        return self

    def __add__(self, other):
        if isinstance(other, Tensor):
            return linear_combination(1, self, 1, other)
        return NotImplemented

    def __sub__(self, other):
        if isinstance(other, Tensor):
            return linear_combination(1, self, -1, other)
        return NotImplemented

    def __mul__(self, other):
        if isinstance(other, Tensor):
            return contract(self, other)
        if is_scalar_number(other):
            return _scale(other, self)
        return NotImplemented

    def __rmul__(self, other):
        if is_scalar_number(other):
            return _scale(other, self)
        return NotImplemented

    def __truediv__(self, other):
        if is_scalar_number(other):
            return _scale(1 / other, self)
        return NotImplemented

    def __pow__(self, n):
        from ._linalg import matrix_power
        return matrix_power(self, n)

    def __and__(self, other):
        if isinstance(other, Tensor) and config.lazy_outer_products:
            from ._tensor_product import TensorProduct
            return TensorProduct(self, other)
        if isinstance(other, Tensor) or is_scalar_number(other):
            return outer(self, other)
        return NotImplemented

    def __rand__(self, other):
        if is_scalar_number(other):
            return outer(other, self)
        return NotImplemented

    # DISPLAY

    def __str__(self):
        return f'Tensor{format_spaces(self._lspaces, self._rspaces)}'

    def __repr__(self):
        indent = printoptions.indent * ' '
        lines = [f'<{self!s} shape={self.shape} dtype={self.dtype}>']
        if not printoptions.skip_data:
            lines.extend(self.backend._block_repr_lines(self.data, indent=indent,
                                                        max_width=printoptions.linewidth,
                                                        max_lines=printoptions.maxlines_tensors))
        return '\n'.join(lines)


# FUNCTIONS ON TENSORS


def _scale(factor: Number, tensor: Tensor) -> Tensor:
    return Tensor._from_block(tensor.backend.mul(factor, tensor.data), tensor._lspaces,
                              tensor._rspaces, tensor.backend)


def _check_extents(a: Tensor, axes_a: Sequence[int], b: Tensor, axes_b: Sequence[int],
                   what: str):
    shape_a = a.shape
    shape_b = b.shape
    for ax_a, ax_b in zip(axes_a, axes_b):
        if shape_a[ax_a] != shape_b[ax_b]:
            msg = (f'{what}: space {a.spaces[ax_a]} has extent {shape_a[ax_a]} vs '
                   f'{shape_b[ax_b]}')
            raise DimensionMismatch(msg)


def relabel(tensor: Tensor, lspaces: Sequence[int], rspaces: Sequence[int] = None) -> Tensor:
    """Reinterpret the axes of a tensor as new spaces.

    The result shares the data with `tensor`, no copy is made.

    Parameters
    ----------
    tensor : Tensor
        The tensor to relabel.
    lspaces : sequence of int
        The new left spaces, one per left axis of `tensor`.
    rspaces : sequence of int, optional
        The new right spaces. If not given, the `lspaces` are used for the right spaces too
        if there are as many right axes as left axes, otherwise there must be no right axes.

    Raises
    ------
    ShapeMismatch
        If the number of new spaces does not match the number of left and right axes.

    """
    lspaces = check_labels(to_iterable(lspaces))
    if rspaces is None:
        rspaces = _default_rspaces(lspaces, tensor.ndim)
    else:
        rspaces = check_labels(to_iterable(rspaces))
    if len(lspaces) != tensor.num_lspaces or len(rspaces) != tensor.num_rspaces:
        msg = (f'Can not relabel {tensor!s} with {tensor.num_lspaces} left and '
               f'{tensor.num_rspaces} right axes to {format_spaces(lspaces, rspaces)}')
        raise ShapeMismatch(msg)
    return Tensor._from_block(tensor.data, lspaces, rspaces, tensor.backend)


def linear_combination(a: Number, v: Tensor, b: Number, w: Tensor) -> Tensor:
    """The linear combination ``a * v + b * w`` with the order of spaces of `v`.

    Raises
    ------
    LabelSetMismatch
        If `v` and `w` do not have the same left spaces and the same right spaces.
    DimensionMismatch
        If the extents of axes with the same space differ.

    """
    if v._lmask != w._lmask or v._rmask != w._rmask:
        msg = f'Can not add tensors with different spaces: {v!s} and {w!s}'
        raise LabelSetMismatch(msg)
    perm = align_permutation(w._lspaces, w._rspaces, v._lspaces, v._rspaces)
    _check_extents(v, range(v.ndim), w, perm, 'Can not add tensors')
    data = v.backend.add(v.data, w.data, perm, alpha=a, beta=b)
    return Tensor._from_block(data, v._lspaces, v._rspaces, v.backend)


def contract(a: Tensor, b: Tensor) -> Tensor | float | complex:
    r"""Tensor multiplication ``a * b``.

    The right spaces of `a` that are also left spaces of `b` are contracted, i.e. the
    corresponding axes are paired up and summed over. All other axes are kept, as in an outer
    product. The spaces of the result are sorted::

        lspaces(a * b) == sorted([*lspaces(a), *uncontracted_lspaces(b)])
        rspaces(a * b) == sorted([*uncontracted_rspaces(a), *rspaces(b)])

    If no spaces are left, the scalar result is returned.

    Raises
    ------
    DimensionMismatch
        If contracted axes have different extents.
    LabelCollision
        If a space would appear twice on the same side of the result.

    """
    if not (isinstance(a, Tensor) and isinstance(b, Tensor)):
        raise TypeError(f'Expected two tensors. Got {type(a).__name__} and {type(b).__name__}')
    contracted = intersection(a._rmask, b._lmask)
    free_bl = b._lmask & ~contracted
    free_ar = a._rmask & ~contracted
    if not disjoint(a._lmask, free_bl):
        msg = (f'Can not multiply {a!s} * {b!s}: duplicate left spaces '
               f'{mask_to_labels(intersection(a._lmask, free_bl))}')
        raise LabelCollision(msg)
    if not disjoint(free_ar, b._rmask):
        msg = (f'Can not multiply {a!s} * {b!s}: duplicate right spaces '
               f'{mask_to_labels(intersection(free_ar, b._rmask))}')
        raise LabelCollision(msg)

    N_a = a.num_lspaces
    N_b = b.num_lspaces
    con_spaces = [s for s in a._rspaces if contracted >> s & 1]
    con_a = [N_a + a._rspaces.index(s) for s in con_spaces]
    con_b = [b._lspaces.index(s) for s in con_spaces]
    _check_extents(a, con_a, b, con_b, f'Can not multiply {a!s} * {b!s}')
    open_a = [i for i in range(a.ndim) if i not in con_a]
    open_b = [i for i in range(b.ndim) if i not in con_b]

    # the intermediate result of the backend has axes [*open_a, *open_b].
    # find where each space ended up, separately for the left and right side.
    left_pos = {}
    right_pos = {}
    for n, ax in enumerate(open_a):
        if ax < N_a:
            left_pos[a._lspaces[ax]] = n
        else:
            right_pos[a._rspaces[ax - N_a]] = n
    for n, ax in enumerate(open_b, start=len(open_a)):
        if ax < N_b:
            left_pos[b._lspaces[ax]] = n
        else:
            right_pos[b._rspaces[ax - N_b]] = n
    lspaces = sorted_order(left_pos)
    rspaces = sorted_order(right_pos)
    out_perm = [left_pos[s] for s in lspaces] + [right_pos[s] for s in rspaces]

    data = a.backend.contract(a.data, b.data, open_a, con_a, con_b, open_b, out_perm)
    if len(out_perm) == 0:
        return a.backend.item(data)
    return Tensor._from_block(data, lspaces, rspaces, a.backend)


def _outer_pair(a, b):
    if is_scalar_number(a):
        if is_scalar_number(b):
            return a * b
        return _scale(a, b)
    if is_scalar_number(b):
        return _scale(b, a)
    if not disjoint(a._lmask, b._lmask):
        msg = (f'Outer product {a!s} & {b!s} has common left spaces '
               f'{mask_to_labels(intersection(a._lmask, b._lmask))}')
        raise LabelCollision(msg)
    if not disjoint(a._rmask, b._rmask):
        msg = (f'Outer product {a!s} & {b!s} has common right spaces '
               f'{mask_to_labels(intersection(a._rmask, b._rmask))}')
        raise LabelCollision(msg)
    data = a.backend.tensor_outer(a.data, b.data, a.num_lspaces, b.num_lspaces)
    return Tensor._from_block(data, a._lspaces + b._lspaces, a._rspaces + b._rspaces, a.backend)


def outer(*factors) -> Tensor | float | complex:
    r"""Outer (tensor) product of tensors, without any contraction.

    The left (right) spaces of the factors must be pairwise distinct.
    The spaces of the result are concatenated, *not* sorted::

        lspaces(outer(a, b)) == (*lspaces(a), *lspaces(b))
        rspaces(outer(a, b)) == (*rspaces(a), *rspaces(b))

    Numbers are allowed as factors and simply scale the result.
    Factors that are a :class:`~algtensors.tensors.TensorProduct` are materialized.

    Raises
    ------
    LabelCollision
        If two factors have a left space or a right space in common.

    """
    if len(factors) == 0:
        raise ValueError('Need at least one factor')
    factors = [f.to_tensor() if hasattr(f, 'to_tensor') else f for f in factors]
    for f in factors:
        if not (isinstance(f, Tensor) or is_scalar_number(f)):
            raise TypeError(f'Expected tensors or numbers. Got {type(f).__name__}')
    return reduce(_outer_pair, factors)


def trace(tensor: Tensor, spaces: int | Sequence[int] = None) -> Tensor | float | complex:
    """Full or partial trace.

    Parameters
    ----------
    tensor : Tensor
        The tensor to trace.
    spaces : (sequence of) int, optional
        If given, only trace over these spaces, each of which must be both a left and a right
        space of `tensor`. The remaining spaces keep their order.
        Otherwise trace over all spaces, which requires the same left and right spaces.

    Returns
    -------
    The traced tensor, or a number if no spaces remain.

    Raises
    ------
    LabelSetMismatch
        If a space to be traced is not on both sides.
    DimensionMismatch
        If the left and right axes to be traced have different extents.

    """
    if spaces is None:
        if tensor._lmask != tensor._rmask:
            msg = f'Full trace requires the same left and right spaces. Got {tensor!s}'
            raise LabelSetMismatch(msg)
        spaces = tensor._lspaces
    else:
        spaces = check_labels(to_iterable(spaces))
        traceable = intersection(tensor._lmask, tensor._rmask)
        if not is_subset(to_mask(spaces), traceable):
            missing = [s for s in spaces if not traceable >> s & 1]
            msg = f'Can not trace {tensor!s} over spaces {missing}, which are not on both sides'
            raise LabelSetMismatch(msg)
    N = tensor.num_lspaces
    idcs1 = [tensor._lspaces.index(s) for s in spaces]
    idcs2 = [N + tensor._rspaces.index(s) for s in spaces]
    _check_extents(tensor, idcs1, tensor, idcs2, f'Can not trace {tensor!s}')
    mask = to_mask(spaces)
    lspaces = tuple(s for s in tensor._lspaces if not mask >> s & 1)
    rspaces = tuple(s for s in tensor._rspaces if not mask >> s & 1)
    if len(lspaces) == 0 and len(rspaces) == 0:
        return tensor.backend.trace_full(tensor.data, idcs1, idcs2)
    remaining = [i for i in range(tensor.ndim) if i not in idcs1 and i not in idcs2]
    data = tensor.backend.trace_partial(tensor.data, idcs1, idcs2, remaining)
    return Tensor._from_block(data, lspaces, rspaces, tensor.backend)


def partial_trace(tensor: Tensor, spaces: int | Sequence[int]) -> Tensor | float | complex:
    """Trace over the given `spaces` only. See :func:`trace`."""
    return trace(tensor, spaces)


def marginal(tensor: Tensor, keep: int | Sequence[int]) -> Tensor | float | complex:
    """Trace over all spaces that are on both sides, except those in `keep`.

    For a density matrix this is the reduced density matrix of the subsystem `keep`.
    """
    keep = to_mask(to_iterable(keep))
    if not is_subset(keep, tensor.spaces_mask):
        msg = f'Spaces {mask_to_labels(keep & ~tensor.spaces_mask)} are not spaces of {tensor!s}'
        raise LabelSetMismatch(msg)
    traced = [s for s in tensor._lspaces if tensor._rmask >> s & 1 and not keep >> s & 1]
    if len(traced) == 0:
        return tensor
    return trace(tensor, traced)


def transpose(tensor: Tensor, spaces: int | Sequence[int] = None) -> Tensor:
    """Full or partial transpose.

    The full transpose (``spaces=None``) exchanges the left and the right spaces, keeping
    their respective order. The entries are not conjugated, see :func:`adjoint` for that.

    The partial transpose moves the given `spaces` to the other side: a left space becomes a
    right space and vice versa. Spaces on both sides switch sides. The spaces of the result
    are sorted on each side.

    Raises
    ------
    LabelSetMismatch
        If any of the `spaces` is not a space of `tensor`.

    """
    N = tensor.num_lspaces
    if spaces is None:
        perm = [*range(N, tensor.ndim), *range(N)]
        data = tensor.backend.permute_axes(tensor.data, perm)
        return Tensor._from_block(data, tensor._rspaces, tensor._lspaces, tensor.backend)
    mask = to_mask(to_iterable(spaces))
    if not is_subset(mask, tensor.spaces_mask):
        msg = f'Spaces {mask_to_labels(mask & ~tensor.spaces_mask)} are not spaces of {tensor!s}'
        raise LabelSetMismatch(msg)
    left_pos = {}
    right_pos = {}
    for n, s in enumerate(tensor._lspaces):
        if mask >> s & 1:
            right_pos[s] = n
        else:
            left_pos[s] = n
    for n, s in enumerate(tensor._rspaces, start=N):
        if mask >> s & 1:
            left_pos[s] = n
        else:
            right_pos[s] = n
    lspaces = sorted_order(left_pos)
    rspaces = sorted_order(right_pos)
    perm = [left_pos[s] for s in lspaces] + [right_pos[s] for s in rspaces]
    data = tensor.backend.permute_axes(tensor.data, perm)
    return Tensor._from_block(data, lspaces, rspaces, tensor.backend)


def partial_transpose(tensor: Tensor, spaces: int | Sequence[int]) -> Tensor:
    """Move the given `spaces` to the other side. See :func:`transpose`."""
    return transpose(tensor, spaces)


def adjoint(tensor: Tensor) -> Tensor:
    """The transpose with complex conjugated entries."""
    return transpose(tensor).conj()


def permute_axes(tensor: Tensor, perm: Sequence[int]) -> Tensor:
    """Permute the axes of the data together with their spaces.

    The result is equal to `tensor`; only the memory layout changes.
    The left axes must stay in front, i.e. ``perm[:num_lspaces]`` is a permutation of
    ``range(num_lspaces)``.
    """
    perm = [int(p) for p in perm]
    N = tensor.num_lspaces
    if not is_permutation(perm, tensor.ndim) or not is_permutation(perm[:N]):
        msg = f'Invalid permutation {perm} for {tensor!s}, left axes must stay in front'
        raise ShapeMismatch(msg)
    spaces = tensor.spaces
    lspaces = tuple(spaces[p] for p in perm[:N])
    rspaces = tuple(spaces[p] for p in perm[N:])
    data = tensor.backend.permute_axes(tensor.data, perm)
    return Tensor._from_block(data, lspaces, rspaces, tensor.backend)


def sort_spaces(tensor: Tensor) -> Tensor:
    """An equal tensor with the spaces in ascending order on each side."""
    N = tensor.num_lspaces
    perm = sorting_permutation(tensor._lspaces)
    perm += [N + i for i in sorting_permutation(tensor._rspaces)]
    return permute_axes(tensor, perm)


def almost_equal(a: Tensor, b: Tensor, rtol: float = 1e-5, atol: float = 1e-8) -> bool:
    """If the tensors have the same spaces and their aligned entries are close."""
    if a._lmask != b._lmask or a._rmask != b._rmask:
        return False
    perm = align_permutation(b._lspaces, b._rspaces, a._lspaces, a._rspaces)
    return a.backend.allclose(a.data, b.backend.permute_axes(b.data, perm), rtol=rtol, atol=atol)


def eye(spaces: Sequence[int], dims: Sequence[int], dtype=float,
        backend: str | BlockBackend = None) -> Tensor:
    """The identity operator on the given spaces with the given extents."""
    spaces = check_labels(to_iterable(spaces))
    dims = [int(d) for d in to_iterable(dims)]
    if len(dims) != len(spaces):
        raise ShapeMismatch(f'Got {len(dims)} dimensions for {len(spaces)} spaces')
    backend = get_block_backend(backend)
    return Tensor._from_block(backend.eye_block(dims, dtype), spaces, spaces, backend)
