"""
Single-qubit observables and measurement projectors.

Each value object is built once from ``(num_qubits, index)`` and holds
its operator already embedded into the N-qubit space.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
from numpy import ndarray

from tiny_qreg.embedding import check_index, check_num_qubits, embed
from tiny_qreg.gates import X, Y, Z
from tiny_qreg.linalg import Matrix, frozen

PI_UP = frozen(np.array([[1, 0], [0, 0]], dtype=np.complex128))
"""Projector onto |0⟩ (spin up)."""

PI_DOWN = frozen(np.array([[0, 0], [0, 1]], dtype=np.complex128))
"""Projector onto |1⟩ (spin down)."""

_LOCAL_OPERATORS: dict[str, Matrix] = {
    "x": X,
    "y": Y,
    "z": Z,
    "pi_up": PI_UP,
    "pi_down": PI_DOWN,
}


@dataclass(frozen=True, eq=False)
class Observable:
    """Embedded single-qubit observable or projector."""

    kind: str
    num_qubits: int
    index: int
    operator: Matrix = field(repr=False)

    @property
    def is_projector(self) -> bool:
        return self.kind in ("pi_up", "pi_down")

    def expectation(self, vector: ndarray) -> float:
        """⟨ψ|O|ψ⟩, real part."""
        psi = np.ravel(vector)
        return float(np.real(np.vdot(psi, self.operator @ psi)))

    def project(self, vector: ndarray) -> ndarray:
        """Unnormalised ``O @ ψ`` (same shape as ``vector``)."""
        return self.operator @ vector


def _build(kind: str, num_qubits: int, index: int) -> Observable:
    check_num_qubits(num_qubits)
    check_index(index, num_qubits, f"Index for {kind} operator")
    operator = embed(_LOCAL_OPERATORS[kind], index, num_qubits)
    return Observable(kind, num_qubits, index, frozen(operator))


def x_observable(num_qubits: int, index: int) -> Observable:
    return _build("x", num_qubits, index)


def y_observable(num_qubits: int, index: int) -> Observable:
    return _build("y", num_qubits, index)


def z_observable(num_qubits: int, index: int) -> Observable:
    return _build("z", num_qubits, index)


def up_projector(num_qubits: int, index: int) -> Observable:
    """Π↑ on qubit ``index``: keeps the components where that qubit is 0."""
    return _build("pi_up", num_qubits, index)


def down_projector(num_qubits: int, index: int) -> Observable:
    """Π↓ on qubit ``index``: keeps the components where that qubit is 1."""
    return _build("pi_down", num_qubits, index)


def pauli_observables(num_qubits: int, index: int) -> tuple[Observable, Observable, Observable]:
    """(X_i, Y_i, Z_i) for qubit ``index``."""
    return (
        x_observable(num_qubits, index),
        y_observable(num_qubits, index),
        z_observable(num_qubits, index),
    )
