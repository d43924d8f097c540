"""Tools for handling strings."""
# Copyright (C) TeNPy Developers, Apache license

__all__ = ['format_like_list', 'format_spaces']


def format_like_list(it) -> str:
    """Format elements of an iterable as if it were a plain list.

    This means surrounding them with brackets and separating them by `', '`.
    """
    return f'[{", ".join(map(str, it))}]'


def format_spaces(lspaces, rspaces) -> str:
    """Format left and right spaces in bra-ket like notation, e.g. ``|1,2><3|``."""
    return f'|{",".join(map(str, lspaces))}><{",".join(map(str, rspaces))}|'
