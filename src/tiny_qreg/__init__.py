"""
tiny-qreg: a small quantum register simulator.

Holds one state vector over N qubits and applies gates, projective
measurements and Pauli expectation values to it. Built as the numeric
core behind an interactive Bloch-sphere front end.

Quick Start:
    >>> from tiny_qreg import QuantumState, h_gate, cnot_gate
    >>> state = QuantumState(2, seed=1)
    >>> state.apply_gate(h_gate(2, 0)).apply_gate(cnot_gate(2, 0, 1))
    QuantumState(qubits=2, dim=4)
    >>> state.measure([0, 1])  # doctest: +SKIP
    [(0, 1), (1, 1)]

Fractional gates:
    >>> quarter_h = h_gate(1, 0).nth_root(4)
    >>> quarter_h.root
    4
"""
import logging

__version__ = "0.3.0"

from .errors import (
    QuantumError,
    InvalidDimensionError,
    IndexOutOfRangeError,
    ShapeMismatchError,
    InvalidRootDegreeError,
    UnknownGateError,
)
from .embedding import embed, embed_controlled, embed_many, identity
from .gates import (
    Gate,
    x_gate,
    h_gate,
    s_gate,
    t_gate,
    cnot_gate,
    custom_gate,
    identity_gate,
    nth_root_gate,
    rotation_root,
    make_gate,
)
from .observables import (
    Observable,
    x_observable,
    y_observable,
    z_observable,
    up_projector,
    down_projector,
    pauli_observables,
)
from .state import QuantumState, EXPECTATION_OUT_OF_RANGE
from .config import SessionSettings
from .session import QubitSession, Preview
from . import gates

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Errors
    'QuantumError',
    'InvalidDimensionError',
    'IndexOutOfRangeError',
    'ShapeMismatchError',
    'InvalidRootDegreeError',
    'UnknownGateError',
    # Embedding
    'embed',
    'embed_controlled',
    'embed_many',
    'identity',
    # Gates
    'Gate',
    'x_gate',
    'h_gate',
    's_gate',
    't_gate',
    'cnot_gate',
    'custom_gate',
    'identity_gate',
    'nth_root_gate',
    'rotation_root',
    'make_gate',
    'gates',
    # Observables
    'Observable',
    'x_observable',
    'y_observable',
    'z_observable',
    'up_projector',
    'down_projector',
    'pauli_observables',
    # State
    'QuantumState',
    'EXPECTATION_OUT_OF_RANGE',
    # Session
    'SessionSettings',
    'QubitSession',
    'Preview',
]
