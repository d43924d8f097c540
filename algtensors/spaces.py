r"""Spaces are integer labels for the axes of a :class:`~algtensors.tensors.Tensor`.

A space has no properties other than its identity: two axes live in the same space iff their
labels are equal. Valid labels are the integers ``1, ..., MAX_SPACE``.

A set of spaces is represented as a bitset, i.e. a python ``int`` where bit ``i`` is set iff
the space ``i`` is in the set. Since labels are at most :data:`MAX_SPACE`, the masks fit in
128 bits. Comparing label sets of two tensors is then a single integer comparison, which
allows all tensor operations to validate their inputs before any data is touched.

This module also defines the exceptions raised by the tensor operations.
"""
# Copyright (C) TeNPy Developers, Apache license
from __future__ import annotations

from collections.abc import Iterable, Sequence
from functools import reduce

from .tools.misc import duplicate_entries, is_integer
from .tools.string import format_like_list

__all__ = [
    'MAX_SPACE', 'SpacesInt', 'SpaceError', 'InvalidLabel', 'ShapeMismatch', 'DimensionMismatch',
    'LabelSetMismatch', 'LabelCollision', 'IndexOutOfRange', 'ArityMismatch', 'InvalidIndexArity',
    'EmptyFactorList', 'check_labels', 'to_mask', 'disjoint', 'rank', 'union', 'intersection',
    'is_subset', 'mask_to_labels',
]

MAX_SPACE = 127
"""The largest valid space label."""

SpacesInt = int
"""Type hint for a bitset of spaces."""


class SpaceError(Exception):
    """Base class for exceptions raised when spaces of tensors are incompatible or invalid"""

    pass


class InvalidLabel(SpaceError, ValueError):
    """A space label is out of range, not an integer, or repeated within one side of a tensor"""

    pass


class ShapeMismatch(SpaceError, ValueError):
    """The number of array axes does not match the number of spaces"""

    pass


class DimensionMismatch(SpaceError, ValueError):
    """Axes that should be paired up have different extents, or the spaces are incompatible"""

    pass


class LabelSetMismatch(DimensionMismatch):
    """An operation requires the same sets of spaces, but they differ"""

    pass


class LabelCollision(SpaceError, ValueError):
    """Two operands have a space in common on the same side, where that is not allowed"""

    pass


class IndexOutOfRange(SpaceError, IndexError):
    """An index is out of bounds for its axis"""

    pass


class ArityMismatch(SpaceError, IndexError):
    """The number of indices does not match the number of axes"""

    pass


class InvalidIndexArity(ArityMismatch):
    """There are more indices than axes"""

    pass


class EmptyFactorList(SpaceError, IndexError):
    """Indexing a product with no factors"""

    pass


def check_labels(labels: Iterable[int]) -> tuple[int, ...]:
    """Validate a sequence of space labels for one side of a tensor.

    Returns
    -------
    tuple of int
        The labels as python integers.

    Raises
    ------
    InvalidLabel
        If any label is not an integer in ``[1, MAX_SPACE]`` or if labels are repeated.

    """
    if isinstance(labels, str) or not isinstance(labels, Iterable):
        raise InvalidLabel(f'Expected a sequence of space labels. Got {labels!r}')
    res = []
    for l in labels:
        if not is_integer(l):
            raise InvalidLabel(f'Space labels must be integers. Got {l!r}')
        if not 1 <= l <= MAX_SPACE:
            raise InvalidLabel(f'Space labels must be in [1, {MAX_SPACE}]. Got {l}')
        res.append(int(l))
    duplicates = duplicate_entries(res)
    if duplicates:
        raise InvalidLabel(f'Repeated spaces: {format_like_list(sorted(duplicates))}')
    return tuple(res)


def to_mask(labels: Sequence[int]) -> SpacesInt:
    """Convert distinct space labels to a bitset.

    Raises :class:`InvalidLabel` if labels are out of range or repeated.
    """
    mask = 0
    for l in check_labels(labels):
        mask |= 1 << l
    return mask


def disjoint(a: SpacesInt, b: SpacesInt) -> bool:
    """If the two sets of spaces have no space in common."""
    return a & b == 0


def rank(a: SpacesInt) -> int:
    """The number of spaces in the set."""
    return bin(a).count('1')


def union(*masks: SpacesInt) -> SpacesInt:
    return reduce(lambda x, y: x | y, masks, 0)


def intersection(a: SpacesInt, b: SpacesInt) -> SpacesInt:
    return a & b


def is_subset(a: SpacesInt, b: SpacesInt) -> bool:
    """If every space in `a` is also in `b`."""
    return a & ~b == 0


def mask_to_labels(mask: SpacesInt) -> tuple[int, ...]:
    """The spaces in a bitset, in ascending order."""
    return tuple(l for l in range(1, MAX_SPACE + 1) if mask >> l & 1)
