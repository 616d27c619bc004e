"""
Embedding of local operators into the full N-qubit Hilbert space.

Qubit ordering is big-endian: qubit 0 is the leftmost (most significant)
Kronecker factor, so for N = 3 a single-qubit operator ``U`` on qubit 1
becomes ``I ⊗ U ⊗ I``.

Example
-------
>>> from tiny_qreg.embedding import embed
>>> from tiny_qreg.gates import X
>>> embed(X, 0, 2).shape
(4, 4)
"""

from __future__ import annotations

import logging
from typing import Mapping

import numpy as np

from tiny_qreg.errors import IndexOutOfRangeError, InvalidDimensionError
from tiny_qreg.linalg import Matrix, frozen, kron_all

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Fixed 2x2 building blocks
# ---------------------------------------------------------------------------

_I2 = frozen(np.eye(2, dtype=np.complex128))
_KET0_BRA0 = frozen(np.array([[1, 0], [0, 0]], dtype=np.complex128))
_KET1_BRA1 = frozen(np.array([[0, 0], [0, 1]], dtype=np.complex128))


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def check_num_qubits(num_qubits: int) -> None:
    """Raise ``InvalidDimensionError`` unless ``num_qubits`` is a positive int."""
    if (
        isinstance(num_qubits, (bool, np.bool_))
        or not isinstance(num_qubits, (int, np.integer))
        or num_qubits < 1
    ):
        msg = f"Number of qubits must be a positive integer, got {num_qubits!r}"
        logger.error(msg)
        raise InvalidDimensionError(msg)


def is_qubit_index(index, num_qubits: int) -> bool:
    """True for an integer (not bool) in ``[0, num_qubits)``."""
    if isinstance(index, (bool, np.bool_)) or not isinstance(index, (int, np.integer)):
        return False
    return 0 <= index < num_qubits


def check_index(index: int, num_qubits: int, what: str = "Index") -> None:
    """Raise ``IndexOutOfRangeError`` unless ``0 <= index < num_qubits``."""
    if not is_qubit_index(index, num_qubits):
        msg = (
            f"{what} {index!r} is out of range. "
            f"Index in range [0, {num_qubits - 1}] expected."
        )
        logger.error(msg)
        raise IndexOutOfRangeError(msg, index)


def _check_single_qubit_op(op: Matrix) -> None:
    if getattr(op, "shape", None) != (2, 2):
        msg = f"Single-qubit operator must be 2x2, got shape {getattr(op, 'shape', None)}"
        logger.error(msg)
        raise InvalidDimensionError(msg)


# ---------------------------------------------------------------------------
# Embedding
# ---------------------------------------------------------------------------

def identity(num_qubits: int) -> Matrix:
    """2^N x 2^N identity."""
    check_num_qubits(num_qubits)
    return np.eye(2**num_qubits, dtype=np.complex128)


def embed(op: Matrix, target: int, num_qubits: int) -> Matrix:
    """
    Embed a 2x2 operator acting on qubit ``target`` into an N-qubit space.

    Parameters
    ----------
    op : ndarray
        2x2 single-qubit operator.
    target : int
        Qubit the operator acts on, 0 being the leftmost factor.
    num_qubits : int
        Total number of qubits N.

    Returns
    -------
    ndarray
        2^N x 2^N operator ``I ⊗ ... ⊗ op ⊗ ... ⊗ I``.

    Raises
    ------
    InvalidDimensionError
        If ``num_qubits < 1`` or ``op`` is not 2x2.
    IndexOutOfRangeError
        If ``target`` is outside ``[0, num_qubits)``.
    """
    check_num_qubits(num_qubits)
    _check_single_qubit_op(op)
    check_index(target, num_qubits, "Target index")
    return embed_many({target: op}, num_qubits)


def embed_many(ops: Mapping[int, Matrix], num_qubits: int) -> Matrix:
    """
    Place several single-qubit operators in one left-to-right pass.

    Positions missing from ``ops`` contribute a 2x2 identity.
    """
    check_num_qubits(num_qubits)
    for index, op in ops.items():
        _check_single_qubit_op(op)
        check_index(index, num_qubits)
    return kron_all(ops.get(q, _I2) for q in range(num_qubits))


def embed_controlled(op: Matrix, control: int, target: int, num_qubits: int) -> Matrix:
    """
    Embed a controlled single-qubit operator.

    Builds ``|0⟩⟨0|_c ⊗ I_t + |1⟩⟨1|_c ⊗ op_t`` with identities at every
    other position. The control may sit above or below the target.

    Raises
    ------
    IndexOutOfRangeError
        If either index is out of range, or ``control == target``.
    """
    check_num_qubits(num_qubits)
    _check_single_qubit_op(op)
    check_index(control, num_qubits, "Control index")
    check_index(target, num_qubits, "Target index")
    if control == target:
        msg = f"Control and target must differ, both are {control}"
        logger.error(msg)
        raise IndexOutOfRangeError(msg, control)

    untouched = embed_many({control: _KET0_BRA0}, num_qubits)
    acted = embed_many({control: _KET1_BRA1, target: op}, num_qubits)
    return untouched + acted
