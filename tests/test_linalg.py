"""Tests for the complex matrix helpers."""

import numpy as np
import pytest

from tiny_qreg import gates as g
from tiny_qreg import linalg


def test_kron_all_left_to_right():
    result = linalg.kron_all([g.X, g.I, g.Z])
    np.testing.assert_allclose(result, np.kron(np.kron(g.X, g.I), g.Z), atol=0)


def test_kron_all_empty():
    with pytest.raises(ValueError):
        linalg.kron_all([])


def test_as_matrix_copies_and_reshapes():
    data = np.array([1, 0], dtype=complex)
    m = linalg.as_matrix(data)
    assert m.shape == (2, 1)
    m[0, 0] = 5
    assert data[0] == 1


@pytest.mark.parametrize("n,expected", [(1, True), (2, True), (8, True), (0, False), (6, False), (-4, False)])
def test_is_power_of_two(n, expected):
    assert linalg.is_power_of_two(n) is expected


def test_num_qubits_for():
    assert linalg.num_qubits_for(16) == 4
    with pytest.raises(ValueError):
        linalg.num_qubits_for(12)


def test_structure_checks():
    assert linalg.is_unitary(g.H)
    assert not linalg.is_unitary(2 * g.H)
    assert linalg.is_hermitian(g.Y)
    assert not linalg.is_hermitian(g.S)
    assert linalg.is_projector(np.diag([1, 0]).astype(complex))
    assert not linalg.is_projector(g.Z)


def test_elementwise_close_checks_real_and_imaginary_separately():
    a = np.array([1 + 1j])
    assert linalg.elementwise_close(a, a + 0.009, 0.01)
    assert linalg.elementwise_close(a, a + 0.009j, 0.01)
    assert not linalg.elementwise_close(a, a + 0.02j, 0.01)
    assert not linalg.elementwise_close(a, np.array([1, 1]), 0.01)


def test_equal_up_to_global_phase():
    psi = np.array([1, 1j]) / np.sqrt(2)
    assert linalg.equal_up_to_global_phase(psi, np.exp(0.7j) * psi, 1e-9)
    assert not linalg.elementwise_close(psi, np.exp(0.7j) * psi, 1e-3)
    assert not linalg.equal_up_to_global_phase(psi, np.array([1, -1j]) / np.sqrt(2), 1e-3)
