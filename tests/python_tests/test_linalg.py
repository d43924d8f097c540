"""A collection of tests for the linear algebra of square tensors."""
# Copyright (C) TeNPy Developers, Apache license
import numpy as np
import numpy.testing as npt
import pytest

from algtensors import tensors
from algtensors.spaces import DimensionMismatch, LabelSetMismatch, ShapeMismatch
from algtensors.testing import assert_tensors_almost_equal
from algtensors.tensors import Tensor


def _diag(vals, T: Tensor) -> Tensor:
    """The diagonal operator with the given eigenvalues, with the spaces of a square `T`."""
    return tensors.from_matrix(np.diag(vals), T.lspaces, T.lspaces, T.lsize, T.lsize)


@pytest.fixture
def square_pair(np_random):
    R = Tensor(np_random.random((3, 4, 3, 4)), (1, 2))
    R_ = Tensor(np.transpose(R.data, (0, 1, 3, 2)), (1, 2), (2, 1))
    return R, R_


def test_as_matrix(make_tensor):
    dims = {}
    T = make_tensor((1,), (2, 3), dims=dims)
    M = tensors.as_matrix(T)
    assert M.shape == (dims[1], dims[2] * dims[3])
    npt.assert_array_equal(M, np.reshape(T.data, M.shape))
    assert tensors.from_matrix(M, (1,), (2, 3), T.lsize, T.rsize) == T

    print('checking square tensors with different order of the right spaces')
    S = make_tensor((1, 2), (2, 1), dims=dims)
    M = tensors.as_matrix(S)
    npt.assert_array_equal(M, np.reshape(np.transpose(S.data, (0, 1, 3, 2)), M.shape))

    with pytest.raises(ShapeMismatch):
        _ = tensors.from_matrix(M, (1, 2), (1, 2), (dims[1],), (dims[1], dims[2]))


def test_eigen_decompositions(square_pair):
    R, R_ = square_pair
    assert R == R_

    print('checking eigenvalues do not depend on the order of the right spaces')
    npt.assert_allclose(tensors.eigvals(R, 'm>'), tensors.eigvals(R_, 'm>'))
    vals = tensors.eigvals(R, 'LM')
    assert np.all(np.diff(np.abs(vals)) <= 1e-12)

    print('checking eig')
    vals, vecs = tensors.eig(R)
    assert_tensors_almost_equal(R * vecs, vecs * _diag(vals, R), rtol=1e-8, atol=1e-8)
    vecs2 = tensors.eigvecs(R_, sort='m>')
    assert vecs2.spaces == (1, 2, 1, 2)

    print('checking eigh')
    H = R + R.H
    vals, vecs = tensors.eigh(H)
    assert np.all(np.diff(vals) >= 0)
    assert_tensors_almost_equal(vecs * _diag(vals, H) * vecs.H, H, rtol=1e-8, atol=1e-8)


def test_svd(square_pair):
    R, R_ = square_pair
    npt.assert_allclose(tensors.svdvals(R), tensors.svdvals(R_))
    U, S, Vh = tensors.svd(R_)
    assert U.spaces == (1, 2, 1, 2)
    assert np.all(np.diff(S) <= 0)
    assert_tensors_almost_equal(U * _diag(S, R) * Vh, R, rtol=1e-8, atol=1e-8)
    assert_tensors_almost_equal(U.H * U, tensors.eye((1, 2), (3, 4)), rtol=1e-8, atol=1e-8)
    npt.assert_allclose(tensors.opnorm(R), S[0])
    npt.assert_allclose(tensors.norm(R), np.linalg.norm(R.data))

    print('checking singular values of non-square tensors')
    T = Tensor(np.reshape(np.arange(6.), (2, 3)), (1,), (2,))
    npt.assert_allclose(tensors.svdvals(T), np.linalg.svd(T.data, compute_uv=False))


def test_inv_det(square_pair):
    R, R_ = square_pair
    eye = tensors.eye((1, 2), (3, 4))
    assert_tensors_almost_equal(R * tensors.inv(R), eye, rtol=1e-7, atol=1e-7)
    assert_tensors_almost_equal(tensors.inv(R_) * R_, eye, rtol=1e-7, atol=1e-7)
    assert_tensors_almost_equal(tensors.inv(R), tensors.inv(R_), rtol=1e-8, atol=1e-8)
    npt.assert_allclose(tensors.det(R), np.linalg.det(np.reshape(R.data, (12, 12))))
    npt.assert_allclose(tensors.det(R_), tensors.det(R))

    print('checking invalid inputs')
    with pytest.raises(LabelSetMismatch):
        _ = tensors.inv(Tensor(np.zeros((2, 2)), (1,), (2,)))
    with pytest.raises(DimensionMismatch):
        _ = tensors.det(Tensor(np.zeros((2, 3)), (1,), (1,)))


def test_matrix_functions(square_pair):
    R, R_ = square_pair
    eye = tensors.eye((1, 2), (3, 4))
    H = (R + R.H) / 20.

    assert_tensors_almost_equal(tensors.exp(0 * R), eye)
    assert_tensors_almost_equal(tensors.exp(H) * tensors.exp(-H), eye, rtol=1e-8, atol=1e-8)
    assert_tensors_almost_equal(tensors.log(tensors.exp(H)), H, rtol=1e-6, atol=1e-8)
    H2 = H * H + eye
    sqrt_H2 = tensors.sqrt(H2)
    assert_tensors_almost_equal(sqrt_H2 * sqrt_H2, H2, rtol=1e-8, atol=1e-8)

    print('checking trigonometric identities')
    sin, cos = tensors.sin(H), tensors.cos(H)
    assert_tensors_almost_equal(sin * sin + cos * cos, eye, rtol=1e-8, atol=1e-8)
    sinh, cosh = tensors.sinh(H), tensors.cosh(H)
    assert_tensors_almost_equal(cosh * cosh - sinh * sinh, eye, rtol=1e-8, atol=1e-8)
    assert_tensors_almost_equal(tensors.tanh(H), sinh * tensors.inv(cosh), rtol=1e-8, atol=1e-8)
    assert_tensors_almost_equal(tensors.tan(H), sin * tensors.inv(cos), rtol=1e-8, atol=1e-8)

    print('checking that the order of the right spaces does not matter')
    H_ = (R_ + R_.H) / 20.
    assert_tensors_almost_equal(tensors.exp(H_), tensors.exp(H), rtol=1e-8, atol=1e-8)


def test_matrix_power(square_pair):
    R, R_ = square_pair
    assert_tensors_almost_equal(R ** 3, R * R * R, rtol=1e-8, atol=1e-8)
    assert_tensors_almost_equal(R_ ** 2, R * R, rtol=1e-8, atol=1e-8)
    assert R ** 0 == tensors.eye((1, 2), (3, 4))
    assert_tensors_almost_equal(R ** -1, tensors.inv(R), rtol=1e-8, atol=1e-8)
    assert_tensors_almost_equal(tensors.matrix_power(R, 1), R)
    with pytest.raises(TypeError):
        _ = R ** 1.5
    with pytest.raises(LabelSetMismatch):
        _ = Tensor(np.zeros((2, 2)), (1,), (2,)) ** 2
