"""
Quantum gate definitions and gate algebra.

Fixed gates are unitary matrices (numpy arrays). A ``Gate`` is an
immutable value object that carries its family tag, the qubits it acts
on and the operator already embedded into the full N-qubit space.

Gate families:
    - Rotation family (closed-form Nth root): X, H, S, T
    - Controlled: CNOT (truth-table definition)
    - Custom: any 2^N x 2^N unitary supplied by the host
    - Identity

Nth roots of rotation-family gates use the two-level rotation formula

    U_n = e^{ia} e^{ibG}
        = cos(a)cos(b) I + i cos(a)sin(b) G + i sin(a)cos(b) I - sin(a)sin(b) G

with ``a = -θ/(2n)`` and ``b = θ/(2n)``. The 2x2 root is computed first
and only then embedded, so ``U_n`` applied n times reproduces the base
gate exactly, global phase included.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace

import numpy as np
from scipy.linalg import fractional_matrix_power

from tiny_qreg.embedding import (
    check_index,
    check_num_qubits,
    embed,
    embed_controlled,
    identity,
)
from tiny_qreg.errors import (
    InvalidDimensionError,
    InvalidRootDegreeError,
    UnknownGateError,
)
from tiny_qreg.linalg import (
    Matrix,
    as_matrix,
    elementwise_close,
    frozen,
    is_square,
    is_unitary,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
_SQRT2_INV = 1.0 / np.sqrt(2.0)

GATE_TOLERANCE = 1e-3
"""Per-component tolerance used by ``Gate.equals``."""

# ---------------------------------------------------------------------------
# Single-qubit fixed gates
# ---------------------------------------------------------------------------

I = frozen(np.eye(2, dtype=np.complex128))
"""Identity gate."""

X = frozen(np.array([[0, 1], [1, 0]], dtype=np.complex128))
"""Pauli-X (NOT) gate."""

Y = frozen(np.array([[0, -1j], [1j, 0]], dtype=np.complex128))
"""Pauli-Y gate."""

Z = frozen(np.array([[1, 0], [0, -1]], dtype=np.complex128))
"""Pauli-Z gate."""

H = frozen(np.array([[1, 1], [1, -1]], dtype=np.complex128) * _SQRT2_INV)
"""Hadamard gate."""

S = frozen(np.array([[1, 0], [0, 1j]], dtype=np.complex128))
"""S (phase) gate: sqrt(Z)."""

T = frozen(np.array([[1, 0], [0, np.exp(1j * np.pi / 4)]], dtype=np.complex128))
"""T gate: sqrt(S)."""

# ---------------------------------------------------------------------------
# Two-qubit fixed gates (4x4 matrices)
# ---------------------------------------------------------------------------

CNOT = frozen(np.array(
    [[1, 0, 0, 0], [0, 1, 0, 0], [0, 0, 0, 1], [0, 0, 1, 0]],
    dtype=np.complex128,
))
"""Controlled-NOT with the control on the more significant qubit."""


# ---------------------------------------------------------------------------
# Gate family registry
# ---------------------------------------------------------------------------

ROTATION_FAMILIES: dict[str, dict] = {
    "x": {"name": "XGate", "matrix": X, "theta": np.pi, "generator": X},
    "h": {"name": "HGate", "matrix": H, "theta": np.pi, "generator": H},
    "s": {"name": "SGate", "matrix": S, "theta": -np.pi / 2, "generator": Z},
    "t": {"name": "TGate", "matrix": T, "theta": -np.pi / 4, "generator": Z},
}

CONTROLLED_FAMILIES: dict[str, dict] = {
    "cnot": {"name": "CNOTGate", "matrix": CNOT, "theta": np.pi, "generator": X},
}

# Lookup names accepted by make_gate(), lower-cased
_ALIASES: dict[str, str] = {
    "x": "x", "xgate": "x", "not": "x",
    "h": "h", "hgate": "h", "hadamard": "h",
    "s": "s", "sgate": "s", "phase": "s",
    "t": "t", "tgate": "t",
    "cnot": "cnot", "cnotgate": "cnot", "cx": "cnot",
}


# ---------------------------------------------------------------------------
# Nth-root formula
# ---------------------------------------------------------------------------

def rotation_root(theta: float, generator: Matrix, n: int) -> Matrix:
    """
    Nth root of the two-level rotation ``(θ, G)`` by the closed-form formula.

    The result satisfies ``root ** n == e^{-iθ/2} e^{iθG/2}`` exactly. It is
    the principal root only for negative ``θ`` (the S and T families); for
    ``θ = π`` the -1 eigenvalue of ``G`` is split as ``e^{-iπ/n}``, so the
    square root of X is the conjugate of the usual SX matrix.

    Parameters
    ----------
    theta : float
        Rotation angle characterising the gate family.
    generator : ndarray
        Traceless Hermitian part G (Hadamard, Pauli-X or Pauli-Z).
    n : int
        Root degree, ``n >= 1``.

    Returns
    -------
    ndarray
        Matrix of the same shape as ``generator``.
    """
    _check_root_degree(n)
    a = -theta / (2 * n)
    b = theta / (2 * n)
    eye = np.eye(generator.shape[0], dtype=np.complex128)
    return (
        np.cos(a) * np.cos(b) * eye
        + 1j * np.cos(a) * np.sin(b) * generator
        + 1j * np.sin(a) * np.cos(b) * eye
        - np.sin(a) * np.sin(b) * generator
    )


def _check_root_degree(n, num_qubits: int | None = None) -> None:
    if isinstance(n, (bool, np.bool_)) or not isinstance(n, (int, np.integer)) or n < 1:
        msg = f"Must provide a positive integer for an Nth root, got {n!r}"
        logger.error(msg)
        fallback = identity_gate(num_qubits) if num_qubits else None
        raise InvalidRootDegreeError(msg, fallback=fallback)


# ---------------------------------------------------------------------------
# Gate value object
# ---------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class Gate:
    """
    Immutable gate acting on an N-qubit register.

    Attributes
    ----------
    kind : str
        Family tag: ``"x"``, ``"h"``, ``"s"``, ``"t"``, ``"cnot"``,
        ``"custom"`` or ``"identity"``.
    num_qubits : int
        Size of the register the operator is embedded into.
    operator : ndarray
        Read-only 2^N x 2^N matrix.
    target : int | None
        Target qubit (None for custom and identity gates).
    control : int | None
        Control qubit for controlled gates.
    root : int
        Root degree relative to the family's base gate (1 = the gate itself).
    name : str
        Display type name, e.g. ``"HGate"``.
    """

    kind: str
    num_qubits: int
    operator: Matrix = field(repr=False)
    target: int | None = None
    control: int | None = None
    root: int = 1
    name: str = "undefined"

    @property
    def dim(self) -> int:
        return self.operator.shape[0]

    @property
    def type_name(self) -> str:
        return self.name

    def is_unitary(self, tol: float = 1e-9) -> bool:
        return is_unitary(self.operator, tol)

    def nth_root(self, n: int) -> Gate:
        """Return a new gate whose n-fold application equals this one."""
        return nth_root_gate(self, n)

    def equals(self, other: Gate, tol: float = GATE_TOLERANCE) -> bool:
        """Same type name and qubit count, operators equal within ``tol``."""
        if self.name != other.name:
            return False
        if self.num_qubits != other.num_qubits:
            return False
        return elementwise_close(self.operator, other.operator, tol)


# ---------------------------------------------------------------------------
# Gate constructors
# ---------------------------------------------------------------------------

def _rotation_gate(kind: str, num_qubits: int, target: int) -> Gate:
    check_num_qubits(num_qubits)
    family = ROTATION_FAMILIES[kind]
    check_index(target, num_qubits, f"Target index for {family['name']}")
    operator = embed(family["matrix"], target, num_qubits)
    return Gate(
        kind=kind,
        num_qubits=num_qubits,
        operator=frozen(operator),
        target=target,
        name=family["name"],
    )


def x_gate(num_qubits: int, target: int) -> Gate:
    """Pauli-X on ``target``."""
    return _rotation_gate("x", num_qubits, target)


def h_gate(num_qubits: int, target: int) -> Gate:
    """Hadamard on ``target``."""
    return _rotation_gate("h", num_qubits, target)


def s_gate(num_qubits: int, target: int) -> Gate:
    """S (quarter-turn phase) on ``target``."""
    return _rotation_gate("s", num_qubits, target)


def t_gate(num_qubits: int, target: int) -> Gate:
    """T (eighth-turn phase) on ``target``."""
    return _rotation_gate("t", num_qubits, target)


def cnot_gate(num_qubits: int, control: int, target: int) -> Gate:
    """
    Controlled-NOT defined by its truth table.

    Flips ``target`` on every basis state whose ``control`` bit is 1.
    """
    check_num_qubits(num_qubits)
    family = CONTROLLED_FAMILIES["cnot"]
    operator = embed_controlled(family["generator"], control, target, num_qubits)
    return Gate(
        kind="cnot",
        num_qubits=num_qubits,
        operator=frozen(operator),
        target=target,
        control=control,
        name=family["name"],
    )


def identity_gate(num_qubits: int) -> Gate:
    """Gate that leaves every state unchanged."""
    return Gate(
        kind="identity",
        num_qubits=num_qubits,
        operator=frozen(identity(num_qubits)),
        name="Identity",
    )


def custom_gate(num_qubits: int, matrix, name: str = "undefined") -> Gate:
    """
    Wrap a host-supplied 2^N x 2^N matrix as a gate.

    Raises
    ------
    InvalidDimensionError
        If ``num_qubits < 1`` or the matrix is not square of size 2^N.
    """
    check_num_qubits(num_qubits)
    if matrix is None:
        msg = "Null matrix provided"
        logger.error(msg)
        raise InvalidDimensionError(msg)
    m = as_matrix(matrix)
    if not is_square(m) or m.shape[0] != 2**num_qubits:
        msg = (
            f"Matrix provided to custom_gate is not the correct size: got "
            f"{m.shape}, expected ({2**num_qubits}, {2**num_qubits})."
        )
        logger.error(msg)
        raise InvalidDimensionError(msg)
    if not is_unitary(m, tol=1e-6):
        logger.warning("Gate %r is not unitary; states it acts on lose their norm", name)
    return Gate(kind="custom", num_qubits=num_qubits, operator=frozen(m), name=name)


# ---------------------------------------------------------------------------
# Nth root
# ---------------------------------------------------------------------------

def nth_root_gate(gate: Gate, n: int) -> Gate:
    """
    Build the gate whose n-fold application reproduces ``gate``.

    The root is taken of the family's 2x2 generator (or of the 2x2 target
    block for CNOT) before embedding, never of the embedded operator.

    Parameters
    ----------
    gate : Gate
        Base gate. Roots of roots compose: the k-th root of an m-th root
        is the (k*m)-th root of the base gate.
    n : int
        Root degree, ``n >= 1``.

    Returns
    -------
    Gate
        New gate with ``root = gate.root * n``.

    Raises
    ------
    InvalidRootDegreeError
        If ``n`` is not a positive integer. ``err.fallback`` is the identity
        gate of the same size.
    """
    _check_root_degree(n, gate.num_qubits)
    degree = gate.root * n

    if gate.kind in ROTATION_FAMILIES:
        family = ROTATION_FAMILIES[gate.kind]
        local = rotation_root(family["theta"], family["generator"], degree)
        operator = embed(local, gate.target, gate.num_qubits)
    elif gate.kind in CONTROLLED_FAMILIES:
        family = CONTROLLED_FAMILIES[gate.kind]
        local = rotation_root(family["theta"], family["generator"], degree)
        operator = embed_controlled(local, gate.control, gate.target, gate.num_qubits)
    elif gate.kind == "identity":
        operator = gate.operator
    else:
        operator = gate.operator if n == 1 else fractional_matrix_power(gate.operator, 1.0 / n)

    logger.debug("Built %s root %d on %d qubit(s)", gate.name, degree, gate.num_qubits)
    return replace(gate, operator=frozen(np.array(operator, dtype=np.complex128)), root=degree)


# ---------------------------------------------------------------------------
# Lookup by name
# ---------------------------------------------------------------------------

def make_gate(type_name: str, num_qubits: int, *indices: int) -> Gate:
    """
    Construct a gate from its type name and qubit indices.

    Parameters
    ----------
    type_name : str
        Case-insensitive name, e.g. ``"HGate"``, ``"h"``, ``"CNOTGate"``, ``"cx"``.
    num_qubits : int
        Register size.
    *indices : int
        ``target`` for single-qubit gates, ``control, target`` for CNOT.

    Raises
    ------
    UnknownGateError
        If the name is not registered.
    ValueError
        If the wrong number of indices is given.
    """
    key = _ALIASES.get(str(type_name).lower())
    if key is None:
        msg = f"Unknown gate: '{type_name}'. Available: {sorted(_ALIASES)}"
        logger.error(msg)
        raise UnknownGateError(msg)

    expected = 2 if key in CONTROLLED_FAMILIES else 1
    if len(indices) != expected:
        msg = f"Gate '{type_name}' requires {expected} qubit index(es), got {len(indices)}"
        logger.error(msg)
        raise ValueError(msg)
    if key == "cnot":
        return cnot_gate(num_qubits, *indices)
    return _rotation_gate(key, num_qubits, indices[0])
