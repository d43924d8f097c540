"""A collection of tests for algtensors.tensors.TensorProduct."""
# Copyright (C) TeNPy Developers, Apache license
import numpy as np
import numpy.testing as npt
import pytest

from algtensors import tensors
from algtensors.spaces import EmptyFactorList, InvalidIndexArity, LabelCollision
from algtensors.testing import assert_same_spaces, assert_tensors_almost_equal
from algtensors.tensors import Tensor, TensorProduct


@pytest.fixture
def factors(np_random):
    P = Tensor(np_random.normal(size=(2, 3, 4, 5, 6)), (1, 2), (3, 4, 5))
    Q = Tensor(np_random.normal(size=(4, 3, 2)), (3, 4), (7,))
    R = Tensor(np_random.normal(size=(3,)) + 1.j, (9,))
    return P, Q, R


def test_TensorProduct(factors):
    P, Q, R = factors
    PQ = TensorProduct(P, Q)
    PQ.test_sanity()
    assert PQ.num_factors == 2
    assert PQ.factors[0] is P
    assert PQ.factors[1] is Q
    assert PQ.lspaces == (1, 2, 3, 4)
    assert PQ.rspaces == (3, 4, 5, 7)
    assert PQ.spaces == (P & Q).spaces
    assert PQ.shape == (2, 3, 4, 3, 4, 5, 6, 2)
    assert PQ.lsize == (2, 3, 4, 3)
    assert PQ.rsize == (4, 5, 6, 2)
    assert PQ.ndim == 8
    assert PQ.num_lspaces == 4
    assert PQ.num_rspaces == 4
    assert PQ.size == P.size * Q.size
    assert PQ.lspaces_mask == P.lspaces_mask | Q.lspaces_mask
    assert PQ.rspaces_mask == P.rspaces_mask | Q.rspaces_mask
    assert PQ.dtype == np.float64
    assert TensorProduct(P, R).dtype == np.complex128
    assert PQ.factor_axes(0) == [0, 1, 4, 5, 6]
    assert PQ.factor_axes(1) == [2, 3, 7]

    print('checking to_tensor')
    T = PQ.to_tensor()
    assert isinstance(T, Tensor)
    assert T == P & Q
    assert PQ == P & Q
    assert PQ == TensorProduct(P, Q)
    assert tensors.outer(PQ, R) == P & Q & R

    print('checking str and repr')
    assert str(PQ) == 'TensorProduct|1,2,3,4><3,4,5,7|'
    assert 'with 2 factors' in repr(PQ)

    print('checking invalid factors')
    with pytest.raises(LabelCollision):
        _ = TensorProduct(P, P)
    with pytest.raises(LabelCollision, match=r'right spaces \(5,\) in common'):
        _ = TensorProduct(P, Tensor(np.zeros(2), (), (5,)))
    with pytest.raises(TypeError):
        _ = TensorProduct(P, 2.)


def test_TensorProduct_getitem(factors):
    P, Q, R = factors
    PQ = TensorProduct(P, Q)
    dense = P & Q

    print('checking missing trailing indices')
    res = PQ[0, 1]
    assert_same_spaces(res, (3, 4), (3, 4, 5, 7))
    assert res == dense[0, 1, :, :, :, :, :, :]
    assert PQ[1] == dense[1, :, :, :, :, :, :, :]

    print('checking full indices')
    idx = (1, 2, 3, 0, 1, 2, 3, 1)
    npt.assert_allclose(PQ[idx], dense[idx])
    idx = (0, slice(None), 3, slice(1, 3), 1, 2, slice(None), 0)
    assert_tensors_almost_equal(PQ[idx], dense[idx])

    print('checking invalid indices')
    with pytest.raises(InvalidIndexArity):
        _ = PQ[0, 0, 0, 0, 0, 0, 0, 0, 0]

    print('checking products without factors')
    empty = TensorProduct()
    empty.test_sanity()
    assert empty.num_factors == 0
    assert empty.spaces == ()
    assert empty.size == 1
    assert empty[()] == 1.
    with pytest.raises(EmptyFactorList):
        _ = empty[0]
    with pytest.raises(EmptyFactorList):
        _ = empty[0, 0, 0]
    one = empty.to_tensor()
    assert one.is_scalar
    assert one.item() == 1.


def test_TensorProduct_algebra(factors, np_random):
    P, Q, R = factors
    PQ = TensorProduct(P, Q)

    print('checking accumulation')
    PQR = PQ & R
    assert isinstance(PQR, TensorProduct)
    assert PQR.num_factors == 3
    assert PQ.num_factors == 2  # unchanged
    assert PQR == P & Q & R
    RPQ = R & PQ
    assert isinstance(RPQ, TensorProduct)
    assert RPQ.factors == (R, P, Q)
    assert (PQ & TensorProduct(R)).num_factors == 3

    print('checking scalars')
    assert isinstance(2 * PQ, TensorProduct)
    assert (2 * PQ).num_factors == 2
    assert_tensors_almost_equal((2 * PQ).to_tensor(), 2 * (P & Q))
    assert_tensors_almost_equal((PQ * 3.).to_tensor(), 3 * (P & Q))
    assert_tensors_almost_equal((PQ & 2).to_tensor(), 2 * (P & Q))
    assert_tensors_almost_equal((2 & PQ).to_tensor(), 2 * (P & Q))
    assert (2 * TensorProduct()).to_tensor().item() == 2.
    assert P == PQ.factors[0]  # factors are not modified

    print('checking contraction')
    X = Tensor(np_random.normal(size=(4, 5, 6, 2)), (3, 4, 5, 7))
    res = PQ * X
    assert isinstance(res, Tensor)
    assert_tensors_almost_equal(res, (P & Q) * X)
    Y = Tensor(np_random.normal(size=(2, 3, 4, 3)), (), (1, 2, 3, 4))
    assert_tensors_almost_equal(Y * PQ, Y * (P & Q))
    assert_tensors_almost_equal(PQ * TensorProduct(X), (P & Q) * X)


def test_lazy_outer_products(factors, lazy_outer_products):
    P, Q, R = factors
    PQ = P & Q
    assert isinstance(PQ, TensorProduct)
    PQR = PQ & R
    assert isinstance(PQR, TensorProduct)
    assert PQR.num_factors == 3
    assert isinstance(P & 2, Tensor)
    assert PQR.to_tensor() == tensors.outer(P, Q, R)
