"""Helper functions for permutations, iterables and string formatting."""
# Copyright (C) TeNPy Developers, Apache license

from . import misc, string
from .misc import (
    argsort,
    duplicate_entries,
    is_integer,
    is_iterable,
    is_permutation,
    is_scalar_number,
    to_iterable,
    to_valid_idx,
)
from .string import format_like_list, format_spaces
