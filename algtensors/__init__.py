r"""algtensors library - dense tensors with axes labelled by algebraic spaces.

Provides a tensor class whose axes are identified by integer spaces rather than by position,
with the algebra of linear operators on tensor products of these spaces: sums, contraction,
outer products, (partial) traces and transposes, and matrix functions, on an exchangeable
block backend.

"""
# Copyright (C) TeNPy Developers, Apache license

# note: order matters!
from . import (
    alignment,
    block_backends,
    dummy_config,
    spaces,
    tensors,
    testing,
    tools,
    version,
)

# subpackages
from .block_backends import get_block_backend

# modules under algtensors
from .dummy_config import config, printoptions
from .spaces import (
    ArityMismatch,
    DimensionMismatch,
    EmptyFactorList,
    IndexOutOfRange,
    InvalidIndexArity,
    InvalidLabel,
    LabelCollision,
    LabelSetMismatch,
    ShapeMismatch,
    SpaceError,
)
from .tensors import (
    Tensor,
    TensorProduct,
    adjoint,
    almost_equal,
    as_matrix,
    contract,
    cos,
    cosh,
    det,
    eig,
    eigh,
    eigvals,
    eigvecs,
    exp,
    eye,
    from_matrix,
    inv,
    linear_combination,
    log,
    marginal,
    matrix_power,
    norm,
    opnorm,
    outer,
    partial_trace,
    partial_transpose,
    permute_axes,
    relabel,
    sin,
    sinh,
    sort_spaces,
    sqrt,
    svd,
    svdvals,
    tan,
    tanh,
    trace,
    transpose,
)
from .version import full_version as __full_version__
from .version import version as __version__


def show_config():
    """Print information about the version of algtensors and used libraries.

    The information printed is :attr:`algtensors.version.version_summary`.
    """
    print(version.version_summary)
