"""Linear algebra on tensors, viewed as matrices from the right spaces to the left spaces.

A tensor is *square* if it has the same left and right spaces, with the same extents.
Square tensors are linear operators. To apply matrix routines, the left axes are combined to
the rows and the right axes, brought into the same order as the left axes, to the columns.
Results are converted back to tensors with the left spaces of the input on both sides.
"""
# Copyright (C) TeNPy Developers, Apache license
from __future__ import annotations

from collections.abc import Sequence

from ..alignment import align_permutation
from ..block_backends import Block, BlockBackend, get_block_backend
from ..spaces import DimensionMismatch, LabelSetMismatch, ShapeMismatch, check_labels
from ..tools.misc import argsort, is_integer, to_iterable
from ._tensors import Tensor

__all__ = [
    'as_matrix', 'from_matrix', 'eigvals', 'eigvecs', 'eig', 'eigh', 'svdvals', 'svd', 'det',
    'inv', 'exp', 'log', 'sqrt', 'sin', 'cos', 'tan', 'sinh', 'cosh', 'tanh', 'matrix_power',
    'opnorm', 'norm',
]


def _square_matrix(tensor: Tensor) -> Block:
    """The matrix of a square tensor, raises if the tensor is not square."""
    if tensor.lspaces_mask != tensor.rspaces_mask:
        msg = f'Expected a square tensor with the same left and right spaces. Got {tensor!s}'
        raise LabelSetMismatch(msg)
    perm = align_permutation(tensor.lspaces, tensor.rspaces, tensor.lspaces, tensor.lspaces)
    lsize = tensor.lsize
    rsize = tuple(tensor.shape[p] for p in perm[tensor.num_lspaces:])
    if lsize != rsize:
        msg = f'Left extents {lsize} differ from right extents {rsize} of {tensor!s}'
        raise DimensionMismatch(msg)
    backend = tensor.backend
    return backend.matrix_from_block(backend.permute_axes(tensor.data, perm), tensor.num_lspaces)


def _from_square_matrix(tensor: Tensor, matrix: Block) -> Tensor:
    backend = tensor.backend
    data = backend.reshape(matrix, tensor.lsize * 2)
    return Tensor._from_block(data, tensor.lspaces, tensor.lspaces, backend)


def as_matrix(tensor: Tensor) -> Block:
    """The tensor as a matrix from the right spaces to the left spaces.

    The rows are the combined left axes, the columns the combined right axes, both C-style.
    For square tensors, the right axes are first brought into the order of the left axes, such
    that the matrix is the matrix of the linear operator.
    """
    if tensor.is_square:
        return _square_matrix(tensor)
    return tensor.backend.matrix_from_block(tensor.data, tensor.num_lspaces)


def from_matrix(matrix, lspaces: Sequence[int], rspaces: Sequence[int], lsize: Sequence[int],
                rsize: Sequence[int], backend: str | BlockBackend = None) -> Tensor:
    """Inverse of :func:`as_matrix`: split rows and columns into axes with the given extents."""
    backend = get_block_backend(backend)
    lspaces = check_labels(to_iterable(lspaces))
    rspaces = check_labels(to_iterable(rspaces))
    lsize = tuple(int(d) for d in to_iterable(lsize))
    rsize = tuple(int(d) for d in to_iterable(rsize))
    if len(lsize) != len(lspaces) or len(rsize) != len(rspaces):
        raise ShapeMismatch(f'Extents {lsize}, {rsize} do not match spaces {lspaces}, {rspaces}')
    data = backend.reshape(backend.as_block(matrix), lsize + rsize)
    return Tensor._from_block(data, lspaces, rspaces, backend)


def eigvals(tensor: Tensor, sort: str = None) -> Block:
    """The eigenvalues of a square tensor.

    Parameters
    ----------
    tensor : Tensor
        A square tensor.
    sort : {'m>', 'm<', '>', '<', None}
        How the eigenvalues should be sorted, see :func:`~algtensors.tools.misc.argsort`.
        Per default, they are returned in the order of the matrix routine.

    """
    vals = tensor.backend.matrix_eigvals(_square_matrix(tensor))
    if sort is not None:
        vals = vals[argsort(vals, sort)]
    return vals


def eig(tensor: Tensor, sort: str = None) -> tuple[Block, Tensor]:
    """Eigenvalues and eigenvectors of a square tensor.

    Returns
    -------
    vals : 1D Block
        The eigenvalues.
    vecs : Tensor
        A square tensor whose matrix has the right eigenvectors as columns, in the same order
        as the `vals`.

    """
    vals, vecs = tensor.backend.matrix_eig(_square_matrix(tensor))
    if sort is not None:
        perm = argsort(vals, sort)
        vals = vals[perm]
        vecs = vecs[:, perm]
    return vals, _from_square_matrix(tensor, vecs)


def eigvecs(tensor: Tensor, sort: str = None) -> Tensor:
    """The eigenvectors of a square tensor. See :func:`eig`."""
    return eig(tensor, sort)[1]


def eigh(tensor: Tensor) -> tuple[Block, Tensor]:
    """Like :func:`eig` for hermitian tensors. The eigenvalues are real and ascending."""
    vals, vecs = tensor.backend.matrix_eigh(_square_matrix(tensor))
    return vals, _from_square_matrix(tensor, vecs)


def svdvals(tensor: Tensor) -> Block:
    """The singular values of the matrix from the right to the left spaces, descending."""
    return tensor.backend.matrix_svdvals(as_matrix(tensor))


def svd(tensor: Tensor) -> tuple[Tensor, Block, Tensor]:
    """Singular value decomposition of a square tensor.

    Returns ``U, S, Vh`` such that ``tensor == U * diag(S) * Vh``, where ``U`` and ``Vh`` are
    square tensors with the spaces of `tensor` and ``S`` are the descending singular values.
    """
    U, S, Vh = tensor.backend.matrix_svd(_square_matrix(tensor))
    return _from_square_matrix(tensor, U), S, _from_square_matrix(tensor, Vh)


def det(tensor: Tensor) -> float | complex:
    """The determinant of a square tensor."""
    return tensor.backend.matrix_det(_square_matrix(tensor))


def inv(tensor: Tensor) -> Tensor:
    """The inverse of a square tensor, such that ``tensor * inv(tensor)`` is the identity."""
    return _from_square_matrix(tensor, tensor.backend.matrix_inv(_square_matrix(tensor)))


def exp(tensor: Tensor) -> Tensor:
    """The matrix exponential of a square tensor."""
    return _from_square_matrix(tensor, tensor.backend.matrix_exp(_square_matrix(tensor)))


def log(tensor: Tensor) -> Tensor:
    """The matrix logarithm of a square tensor."""
    return _from_square_matrix(tensor, tensor.backend.matrix_log(_square_matrix(tensor)))


def sqrt(tensor: Tensor) -> Tensor:
    """The matrix square root of a square tensor."""
    return _from_square_matrix(tensor, tensor.backend.matrix_sqrt(_square_matrix(tensor)))


def _matrix_function(tensor: Tensor, name: str) -> Tensor:
    matrix = tensor.backend.matrix_function(_square_matrix(tensor), name)
    return _from_square_matrix(tensor, matrix)


def sin(tensor: Tensor) -> Tensor:
    return _matrix_function(tensor, 'sin')


def cos(tensor: Tensor) -> Tensor:
    return _matrix_function(tensor, 'cos')


def tan(tensor: Tensor) -> Tensor:
    return _matrix_function(tensor, 'tan')


def sinh(tensor: Tensor) -> Tensor:
    return _matrix_function(tensor, 'sinh')


def cosh(tensor: Tensor) -> Tensor:
    return _matrix_function(tensor, 'cosh')


def tanh(tensor: Tensor) -> Tensor:
    return _matrix_function(tensor, 'tanh')


def matrix_power(tensor: Tensor, n: int) -> Tensor:
    """Integer power of a square tensor, i.e. repeated multiplication with itself.

    Negative powers are powers of the inverse.
    """
    if not is_integer(n):
        raise TypeError(f'Exponent must be an integer. Got {n!r}')
    return _from_square_matrix(tensor, tensor.backend.matrix_power(_square_matrix(tensor), int(n)))


def opnorm(tensor: Tensor, order: int | float = 2) -> float:
    """The operator norm of the matrix from the right to the left spaces.

    ``order`` is as for :func:`numpy.linalg.norm` for matrices, e.g. ``2`` for the largest
    singular value, ``1`` or ``np.inf`` for the maximal column or row sum.
    """
    return tensor.backend.matrix_norm(as_matrix(tensor), order)


def norm(tensor: Tensor) -> float:
    """The Frobenius norm, i.e. the 2-norm of all entries."""
    return tensor.backend.matrix_norm(as_matrix(tensor), 'fro')
