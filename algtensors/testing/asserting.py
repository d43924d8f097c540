"""Assertion wrappers for testing."""

# Copyright (C) TeNPy Developers, Apache license
from ..tensors import Tensor, almost_equal
from ..tools.string import format_spaces

__all__ = ['assert_tensors_almost_equal', 'assert_same_spaces']


def assert_same_spaces(a: Tensor, expect_lspaces, expect_rspaces):
    """Verify the spaces of a tensor, including their order."""
    assert a.lspaces == tuple(expect_lspaces), f'{a.lspaces} != {tuple(expect_lspaces)}'
    assert a.rspaces == tuple(expect_rspaces), f'{a.rspaces} != {tuple(expect_rspaces)}'


def assert_tensors_almost_equal(a: Tensor, expect: Tensor, rtol: float = 1e-12, atol: float = 1e-12):
    """Verify two tensors have the same spaces and almost equal numerical entries."""
    assert a.lspaces_mask == expect.lspaces_mask, \
        f'{format_spaces(a.lspaces, a.rspaces)} vs {format_spaces(expect.lspaces, expect.rspaces)}'
    assert a.rspaces_mask == expect.rspaces_mask, \
        f'{format_spaces(a.lspaces, a.rspaces)} vs {format_spaces(expect.lspaces, expect.rspaces)}'
    assert almost_equal(a, expect, rtol=rtol, atol=atol)
