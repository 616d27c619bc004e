"""
Dense complex matrix helpers.

numpy ``ndarray`` (complex128) is the matrix type throughout tiny-qreg.
The functions here are pure: they never modify their inputs, and
module-level constants are marked read-only so a gate operator can never
alias a mutable generator by accident.
"""

from __future__ import annotations

from typing import Iterable

import numpy as np
from numpy import ndarray

# Type alias
Matrix = ndarray

# Default tolerance for the structural checks below
ATOL = 1e-9


def as_matrix(data) -> Matrix:
    """Return a fresh 2-D complex128 copy of ``data``."""
    m = np.array(data, dtype=np.complex128, copy=True)
    if m.ndim == 1:
        m = m.reshape(-1, 1)
    return m


def frozen(m: Matrix) -> Matrix:
    """Mark ``m`` read-only and return it."""
    m.setflags(write=False)
    return m


def kron_all(factors: Iterable[Matrix]) -> Matrix:
    """
    Kronecker product of ``factors``, taken left to right.

    The first factor is the most significant tensor factor, i.e. qubit 0.
    """
    result = None
    for f in factors:
        result = f if result is None else np.kron(result, f)
    if result is None:
        raise ValueError("kron_all() needs at least one factor")
    return np.array(result, dtype=np.complex128)


def dagger(m: Matrix) -> Matrix:
    """Conjugate transpose."""
    return m.conj().T


def is_power_of_two(n: int) -> bool:
    return n >= 1 and n & (n - 1) == 0


def num_qubits_for(dim: int) -> int:
    """log2 of a power-of-two dimension."""
    if not is_power_of_two(dim):
        raise ValueError(f"Dimension {dim} is not a power of 2")
    return dim.bit_length() - 1


def is_square(m: Matrix) -> bool:
    return m.ndim == 2 and m.shape[0] == m.shape[1]


def is_unitary(m: Matrix, tol: float = ATOL) -> bool:
    """Check U†U = I."""
    if not is_square(m):
        return False
    return np.allclose(dagger(m) @ m, np.eye(m.shape[0]), atol=tol)


def is_hermitian(m: Matrix, tol: float = ATOL) -> bool:
    if not is_square(m):
        return False
    return np.allclose(m, dagger(m), atol=tol)


def is_projector(m: Matrix, tol: float = ATOL) -> bool:
    """Hermitian and idempotent (P² = P)."""
    return is_hermitian(m, tol) and np.allclose(m @ m, m, atol=tol)


def elementwise_close(a: Matrix, b: Matrix, tol: float) -> bool:
    """
    Shapes match and every entry agrees within ``tol``.

    Real and imaginary parts are compared separately, so ``tol`` bounds
    each component rather than the complex modulus.
    """
    if a.shape != b.shape:
        return False
    diff = a - b
    return bool(
        np.all(np.abs(diff.real) <= tol) and np.all(np.abs(diff.imag) <= tol)
    )


def global_phase(a: Matrix, b: Matrix) -> complex:
    """
    Phase factor e^{iφ} that best maps ``b`` onto ``a``.

    Uses the largest-magnitude entry of ``b`` as reference; returns 1 when
    ``b`` is all zeros.
    """
    flat_a = np.ravel(a)
    flat_b = np.ravel(b)
    k = int(np.argmax(np.abs(flat_b)))
    if abs(flat_b[k]) < ATOL or abs(flat_a[k]) < ATOL:
        return 1.0 + 0j
    ratio = flat_a[k] / flat_b[k]
    return complex(ratio / abs(ratio))


def equal_up_to_global_phase(a: Matrix, b: Matrix, tol: float) -> bool:
    """``a == e^{iφ} b`` element-wise within ``tol`` for some φ."""
    if a.shape != b.shape:
        return False
    return elementwise_close(a, global_phase(a, b) * b, tol)
