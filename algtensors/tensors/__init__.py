r""".. _tensor_spaces:

Spaces of Tensors
-----------------

Every axis of a :class:`Tensor` is labelled by a space, an integer in ``1, ..., 127``.
The leading axes are the *left* spaces (like the rows of a matrix), the trailing axes the
*right* spaces (like the columns). A space can appear at most once on each side, but may appear
on both sides of the same tensor, e.g. for a linear operator on that space::

    A = Tensor(data, lspaces=(1, 2), rspaces=(2, 3))   # data.shape == (d1, d2, d2_, d3)

Operations match axes by their spaces, never by their position. Reordering the spaces of a
tensor, e.g. with :func:`permute_axes`, changes only the memory layout, and the result compares
equal to the original.


.. _tensor_algebra:

Tensor Algebra
--------------

    ==================  ===========================  ==========================================
    expression          requires                     spaces of the result
    ==================  ===========================  ==========================================
    ``A + B, A - B``    same left / right spaces     as ``A``
    ------------------  ---------------------------  ------------------------------------------
    ``c * A``           ``c`` a number               as ``A``
    ------------------  ---------------------------  ------------------------------------------
    ``A * B``           matching extents on the      right spaces of ``A`` that are left spaces
                        contracted spaces            of ``B`` are contracted, the rest is
                                                     kept, sorted on each side
    ------------------  ---------------------------  ------------------------------------------
    ``A & B``           distinct left and distinct   concatenated: ``(*lA, *lB), (*rA, *rB)``
                        right spaces
    ------------------  ---------------------------  ------------------------------------------
    ``trace(A)``        same left and right spaces   a number
    ------------------  ---------------------------  ------------------------------------------
    ``trace(A, S)``     ``S`` on both sides          ``S`` removed from both sides
    ------------------  ---------------------------  ------------------------------------------
    ``A.T, A.H``        -                            left and right exchanged
    ------------------  ---------------------------  ------------------------------------------
    ``transpose(A, S)`` ``S`` spaces of ``A``        ``S`` moved to the other side, sorted
    ==================  ===========================  ==========================================


.. _shared_data:

Shared Data
-----------

Tensors store their data by reference. Relabelling, transposing and indexing with slices
return tensors that share the data with the original. Assigning entries with ``T[idx] = value``
is therefore visible through all of them. Arithmetic never modifies its operands.

"""
# Copyright (C) TeNPy Developers, Apache license

from ._linalg import (
    as_matrix,
    cos,
    cosh,
    det,
    eig,
    eigh,
    eigvals,
    eigvecs,
    exp,
    from_matrix,
    inv,
    log,
    matrix_power,
    norm,
    opnorm,
    sin,
    sinh,
    sqrt,
    svd,
    svdvals,
    tan,
    tanh,
)
from ._tensor_product import TensorProduct
from ._tensors import (
    Tensor,
    adjoint,
    almost_equal,
    contract,
    eye,
    linear_combination,
    marginal,
    outer,
    partial_trace,
    partial_transpose,
    permute_axes,
    relabel,
    sort_spaces,
    trace,
    transpose,
)
