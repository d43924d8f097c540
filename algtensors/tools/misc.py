"""Miscellaneous tools, somewhat random mix yet often helpful."""
# Copyright (C) TeNPy Developers, Apache license

from collections.abc import Sequence
from numbers import Integral, Number
from typing import TypeVar

import numpy as np

__all__ = [
    'duplicate_entries', 'is_iterable', 'to_iterable', 'is_scalar_number', 'is_integer',
    'to_valid_idx', 'is_permutation', 'argsort',
]

_T = TypeVar('_T')  # used in typing some functions


def duplicate_entries(seq: Sequence[_T], ignore: Sequence[_T] = []) -> set[_T]:
    """The duplicate entries in a sequence, with exceptions from `ignore`."""
    return set(ele for idx, ele in enumerate(seq) if ele in seq[idx + 1:] and ele not in ignore)


def is_iterable(a):
    """If the given object is iterable."""
    try:
        iter(a)
    except TypeError:
        return False
    return True


def to_iterable(a):
    """If `a` is a not iterable or a string, return ``[a]``, else return ``a``."""
    if type(a) is str:
        return [a]
    if is_iterable(a):
        return a
    return [a]


def is_scalar_number(a) -> bool:
    """If `a` is a python or numpy number, including 0-dimensional arrays."""
    if isinstance(a, Number):
        return True
    return isinstance(a, np.ndarray) and a.ndim == 0


def is_integer(a) -> bool:
    """If `a` is a python or numpy integer, but not a bool."""
    return isinstance(a, Integral) and not isinstance(a, (bool, np.bool_))


def to_valid_idx(idx: int, length: int) -> int:
    """Convert to a valid non-negative index into the given `length`, if possible."""
    if not -length <= idx < length:
        raise IndexError(f'Index {idx} out of bounds for length {length}')
    if idx < 0:
        idx += length
    return idx


def is_permutation(perm, length: int = None) -> bool:
    """If `perm` contains each of ``0, ..., length - 1`` exactly once."""
    if length is None:
        length = len(perm)
    return len(perm) == length and sorted(perm) == list(range(length))


def argsort(a, sort=None, **kwargs):
    """Wrapper around np.argsort to allow sorting ascending/descending and by magnitude.

    Parameters
    ----------
    a : array_like
        The array to sort.
    sort : ``'m>', 'm<', '>', '<', None``
        Specify how the arguments should be sorted.

        ==================== =============================
        `sort`               order
        ==================== =============================
        ``'m>', 'LM'``       Largest magnitude first
        -------------------- -----------------------------
        ``'m<', 'SM'``       Smallest magnitude first
        -------------------- -----------------------------
        ``'>', 'LR', 'LA'``  Largest real part first
        -------------------- -----------------------------
        ``'<', 'SR', 'SA'``  Smallest real part first
        -------------------- -----------------------------
        ``None``             numpy default: same as '<'
        ==================== =============================

    **kwargs :
        Further keyword arguments given directly to :func:`numpy.argsort`.

    Returns
    -------
    index_array : ndarray, int
        Same shape as `a`, such that ``a[index_array]`` is sorted in the specified way.

    """
    if sort is not None:
        if sort == 'm<' or sort == 'SM':
            a = np.abs(a)
        elif sort == 'm>' or sort == 'LM':
            a = -np.abs(a)
        elif sort == '<' or sort == 'SR' or sort == 'SA':
            a = np.real(a)
        elif sort == '>' or sort == 'LR' or sort == 'LA':
            a = -np.real(a)
        else:
            raise ValueError("unknown sort option " + repr(sort))
    return np.argsort(a, **kwargs)
