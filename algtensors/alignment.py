r"""Permutations between different orderings of the same spaces.

The axes of a tensor are ordered by its spaces. Operations on two tensors match axes by label,
so they need to know how to bring the axes of one tensor into the order of the other.
All permutations here follow the convention of :func:`numpy.transpose`, i.e. a permutation
``perm`` reorders axes such that the new axis ``i`` is the old axis ``perm[i]``.
"""
# Copyright (C) TeNPy Developers, Apache license
from __future__ import annotations

from collections.abc import Sequence

from .spaces import LabelSetMismatch
from .tools.misc import is_permutation

__all__ = [
    'compute_axis_permutation', 'sorted_order', 'sorting_permutation', 'block_permutation',
    'align_permutation',
]


def compute_axis_permutation(from_order: Sequence[int], to_order: Sequence[int]) -> list[int]:
    """The axis permutation that brings axes ordered by `from_order` into the order `to_order`.

    Parameters
    ----------
    from_order, to_order : sequence of int
        Two orderings of the same set of distinct labels.

    Returns
    -------
    perm : list of int
        Such that ``to_order[i] == from_order[perm[i]]``.

    Raises
    ------
    LabelSetMismatch
        If the two orderings are not permutations of each other.

    """
    position = {l: n for n, l in enumerate(from_order)}
    if len(position) != len(from_order) or len(from_order) != len(to_order):
        raise LabelSetMismatch(f'Not orderings of the same spaces: {tuple(from_order)} and '
                               f'{tuple(to_order)}')
    try:
        perm = [position[l] for l in to_order]
    except KeyError:
        raise LabelSetMismatch(f'Not orderings of the same spaces: {tuple(from_order)} and '
                               f'{tuple(to_order)}') from None
    if not is_permutation(perm):
        raise LabelSetMismatch(f'Not orderings of the same spaces: {tuple(from_order)} and '
                               f'{tuple(to_order)}')
    return perm


def sorted_order(labels: Sequence[int]) -> tuple[int, ...]:
    """The labels in ascending order."""
    return tuple(sorted(labels))


def sorting_permutation(labels: Sequence[int]) -> list[int]:
    """The axis permutation that sorts axes labelled by `labels`."""
    return sorted(range(len(labels)), key=labels.__getitem__)


def block_permutation(block_sizes: Sequence[int], block_order: Sequence[int]) -> list[int]:
    """Permutation of contiguous groups of axes.

    The axes are divided into consecutive blocks with ``block_sizes[b]`` axes each.
    The result puts the blocks in the order `block_order`, keeping the axis order within each
    block. Blocks not mentioned in `block_order` are dropped from the result.

    Examples
    --------
    >>> block_permutation([1, 2, 2], [2, 0, 1])
    [3, 4, 0, 1, 2]

    """
    starts = [0]
    for size in block_sizes:
        starts.append(starts[-1] + size)
    return [ax for b in block_order for ax in range(starts[b], starts[b + 1])]


def align_permutation(src_lspaces: Sequence[int], src_rspaces: Sequence[int],
                      dst_lspaces: Sequence[int], dst_rspaces: Sequence[int]) -> list[int]:
    """Full axis permutation from a tensor with spaces `src` to the layout of `dst`.

    Left and right axes are permuted separately; left axes stay in front.
    Raises :class:`LabelSetMismatch` if the sides have different label sets.
    """
    perm_l = compute_axis_permutation(src_lspaces, dst_lspaces)
    perm_r = compute_axis_permutation(src_rspaces, dst_rspaces)
    N = len(src_lspaces)
    return perm_l + [N + i for i in perm_r]
