"""
Quantum register state vector.

A ``QuantumState`` owns the 2^N complex amplitude vector of an N-qubit
register. ``apply_gate`` and ``measure`` mutate it in place;
``expectation_values`` and ``equals`` only read it.

Qubit 0 is the most significant bit of a basis-state index, matching
the Kronecker ordering in ``tiny_qreg.embedding``.

Example
-------
>>> from tiny_qreg import QuantumState, h_gate
>>> state = QuantumState(1, seed=7)
>>> state.apply_gate(h_gate(1, 0))
QuantumState(qubits=1, dim=2)
>>> state.expectation_values(0)  # doctest: +SKIP
(1.0, 0.0, 0.0)
"""

from __future__ import annotations

import logging
from typing import Iterable, Protocol

import numpy as np
from numpy import ndarray

from tiny_qreg.embedding import check_num_qubits, is_qubit_index
from tiny_qreg.errors import InvalidDimensionError, ShapeMismatchError
from tiny_qreg.gates import Gate
from tiny_qreg.linalg import (
    Matrix,
    as_matrix,
    elementwise_close,
    equal_up_to_global_phase,
    is_power_of_two,
    kron_all,
    num_qubits_for,
)
from tiny_qreg.observables import down_projector, pauli_observables, up_projector

logger = logging.getLogger(__name__)

STATE_TOLERANCE = 0.01
"""Per-component tolerance used by ``QuantumState.equals``."""

PROBABILITY_EPSILON = 1e-5
"""Collapsed branches with probability at or below this are not renormalised."""

EXPECTATION_OUT_OF_RANGE = (10.0, 10.0, 10.0)
"""Returned by ``expectation_values`` for an invalid qubit index."""

_KET0 = np.array([[1], [0]], dtype=np.complex128)


class RandomSource(Protocol):
    """Anything with ``random() -> float`` in [0, 1), e.g. ``numpy.random.Generator``."""

    def random(self) -> float: ...


class QuantumState:
    """
    State vector of an N-qubit register.

    Parameters
    ----------
    num_qubits : int
        Number of qubits, ``>= 1``. The register starts in |0...0⟩.
    seed : int | None
        Seed for the default random source used by ``measure``.
    rng : RandomSource, optional
        Random source used by ``measure``; overrides ``seed``.

    Raises
    ------
    InvalidDimensionError
        If ``num_qubits <= 0``.
    """

    def __init__(
        self,
        num_qubits: int,
        *,
        seed: int | None = None,
        rng: RandomSource | None = None,
    ) -> None:
        check_num_qubits(num_qubits)
        self._num_qubits = int(num_qubits)
        # |0...0⟩ = |0⟩ ⊗ |0⟩ ⊗ ... ⊗ |0⟩
        self._data = kron_all([_KET0] * self._num_qubits).ravel()
        self._rng = rng if rng is not None else np.random.default_rng(seed)

    @classmethod
    def from_vector(
        cls,
        vector,
        *,
        seed: int | None = None,
        rng: RandomSource | None = None,
    ) -> QuantumState:
        """
        Wrap an existing amplitude vector.

        Accepts a flat array of length 2^N or a (2^N, 1) column. The data is
        copied; no normalisation is applied.

        Raises
        ------
        InvalidDimensionError
            If the input has more than one column, fewer than 2 rows, or a
            row count that is not a power of 2.
        """
        m = np.asarray(vector, dtype=np.complex128)
        if m.ndim not in (1, 2) or (m.ndim == 2 and m.shape[1] != 1):
            msg = f"Parameter matrix must have 1 column, got shape {m.shape}"
            logger.error(msg)
            raise InvalidDimensionError(msg)
        m = as_matrix(m)
        rows = m.shape[0]
        if rows < 2:
            msg = "Insufficient number of rows in parameter matrix to construct quantum state"
            logger.error(msg)
            raise InvalidDimensionError(msg)
        if not is_power_of_two(rows):
            msg = (
                "Unable to construct a quantum state with given matrix. "
                f"Number of rows must be a power of 2, got {rows}"
            )
            logger.error(msg)
            raise InvalidDimensionError(msg)

        state = cls.__new__(cls)
        state._num_qubits = num_qubits_for(rows)
        state._data = m.ravel()
        state._rng = rng if rng is not None else np.random.default_rng(seed)
        return state

    # -- Accessors -----------------------------------------------------------

    @property
    def num_qubits(self) -> int:
        return self._num_qubits

    @property
    def dim(self) -> int:
        return self._data.shape[0]

    @property
    def vector(self) -> ndarray:
        """Flat copy of the amplitudes, shape (2^N,)."""
        return self._data.copy()

    @property
    def matrix(self) -> Matrix:
        """Column copy of the amplitudes, shape (2^N, 1)."""
        return self._data.reshape(-1, 1).copy()

    def norm(self) -> float:
        return float(np.linalg.norm(self._data))

    def probabilities(self) -> ndarray:
        """Born-rule probability of every basis state."""
        return np.abs(self._data) ** 2

    def copy(self) -> QuantumState:
        """Independent copy sharing the same random source."""
        return QuantumState.from_vector(self._data, rng=self._rng)

    # -- Mutation --------------------------------------------------------------

    def apply_gate(self, gate: Gate | Matrix) -> QuantumState:
        """
        Replace the state with ``operator @ state``.

        The result is not renormalised: a non-unitary operator leaves the
        state with a norm other than 1.

        Raises
        ------
        ShapeMismatchError
            If the operator's column count differs from the state's row count.
        """
        operator = gate.operator if isinstance(gate, Gate) else as_matrix(gate)
        if operator.ndim != 2 or operator.shape[1] != self.dim:
            msg = (
                f"Invalid gate size. Expected matrix with {self.dim} columns, "
                f"got shape {operator.shape}."
            )
            logger.error(msg)
            raise ShapeMismatchError(msg)
        self._data = operator @ self._data
        logger.debug("Applied %s", getattr(gate, "name", "matrix"))
        return self

    def measure(
        self,
        indices: Iterable[int],
        rng: RandomSource | None = None,
    ) -> list[tuple[int, int]]:
        """
        Projectively measure each qubit in ``indices``, in order.

        For every index one uniform draw ``r`` is taken. The qubit collapses
        onto the down (|1⟩) branch when ``r > p_up`` and onto the up (|0⟩)
        branch otherwise. The surviving branch is divided by the square root
        of its probability when that probability exceeds
        ``PROBABILITY_EPSILON``. Each measurement sees the state left by the
        previous one. Indices outside ``[0, num_qubits)`` are skipped.

        Parameters
        ----------
        indices : iterable of int
            Qubits to measure.
        rng : RandomSource, optional
            Random source for this call; defaults to the state's own.

        Returns
        -------
        list of (int, int)
            ``(index, outcome)`` for each qubit actually measured, with
            outcome 0 for up and 1 for down.
        """
        rng = self._rng if rng is None else rng
        results: list[tuple[int, int]] = []

        for index in indices:
            if not is_qubit_index(index, self._num_qubits):
                logger.debug("Skipping invalid measurement index %r", index)
                continue

            up = up_projector(self._num_qubits, index).project(self._data)
            down = down_projector(self._num_qubits, index).project(self._data)
            p_up = float(np.real(np.vdot(self._data, up)))

            r = rng.random()
            if r > p_up:
                collapsed, probability, outcome = down, 1.0 - p_up, 1
            else:
                collapsed, probability, outcome = up, p_up, 0

            if probability > PROBABILITY_EPSILON:
                collapsed = collapsed / np.sqrt(probability)

            self._data = collapsed
            results.append((int(index), outcome))
            logger.debug("Qubit %d measured %s (p_up=%.4f, r=%.4f)",
                         index, "down" if outcome else "up", p_up, r)

        return results

    # -- Read-only queries -----------------------------------------------------

    def expectation_values(self, index: int) -> tuple[float, float, float]:
        """
        Bloch-vector components (⟨X⟩, ⟨Y⟩, ⟨Z⟩) of qubit ``index``.

        Returns ``EXPECTATION_OUT_OF_RANGE`` (and logs an error) when
        ``index`` is outside ``[0, num_qubits)``.
        """
        if not is_qubit_index(index, self._num_qubits):
            logger.error(
                "Index provided to expectation_values is out of range. Index of %r "
                "provided. Index in range [0, %d] expected.",
                index, self._num_qubits - 1,
            )
            return EXPECTATION_OUT_OF_RANGE

        x_obs, y_obs, z_obs = pauli_observables(self._num_qubits, index)
        return (
            x_obs.expectation(self._data),
            y_obs.expectation(self._data),
            z_obs.expectation(self._data),
        )

    def bloch_vectors(self) -> list[tuple[float, float, float]]:
        """Expectation triple for every qubit, in index order."""
        return [self.expectation_values(q) for q in range(self._num_qubits)]

    def equals(self, other: QuantumState, tol: float = STATE_TOLERANCE) -> bool:
        """Same qubit count and every amplitude within ``tol`` (real and imaginary)."""
        if self._num_qubits != other.num_qubits:
            return False
        return elementwise_close(self._data, other._data, tol)

    def equals_up_to_global_phase(
        self, other: QuantumState, tol: float = STATE_TOLERANCE
    ) -> bool:
        """Like ``equals`` but ignores an overall phase factor e^{iφ}."""
        if self._num_qubits != other.num_qubits:
            return False
        return equal_up_to_global_phase(self._data, other._data, tol)

    def __repr__(self) -> str:
        return f"QuantumState(qubits={self._num_qubits}, dim={self.dim})"
