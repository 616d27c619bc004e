"""
Headless qubit session.

``QubitSession`` owns the long-lived ``QuantumState`` of an interactive
front end and exposes the calls such a host makes: build a gate from a
tool's type name, preview it as a sequence of Nth-root steps, commit the
preview, measure, reset, and read Bloch vectors for display.

All mutating calls are serialised with one lock per session.

Example
-------
>>> from tiny_qreg import QubitSession, SessionSettings
>>> session = QubitSession(2, SessionSettings(nth_root=4, preview_enabled=True))
>>> preview = session.preview(session.make_gate("HGate", 0))
>>> len(preview.states)
5
>>> session.commit_preview()
QuantumState(qubits=2, dim=4)
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

from tiny_qreg import gates as g
from tiny_qreg.config import SessionSettings
from tiny_qreg.embedding import check_index, check_num_qubits
from tiny_qreg.gates import Gate
from tiny_qreg.state import QuantumState

logger = logging.getLogger(__name__)

Vector3 = tuple[float, float, float]


@dataclass
class Preview:
    """
    Pending gate application split into Nth-root steps.

    Attributes
    ----------
    gate : Gate
        The base gate the host asked for.
    root_gate : Gate
        ``gate.nth_root(n)``; applied ``n`` times to go from
        ``states[0]`` to ``states[-1]``.
    states : list[QuantumState]
        ``n + 1`` states, the first being the state before the gate.
    trajectories : list[list[Vector3]]
        Per qubit, the expectation triple at each step. Empty when
        previews are disabled.
    """

    gate: Gate
    root_gate: Gate
    states: list[QuantumState]
    trajectories: list[list[Vector3]] = field(default_factory=list)

    @property
    def final_state(self) -> QuantumState:
        return self.states[-1]


class QubitSession:
    """
    Owner of one quantum register for an interactive host.

    Parameters
    ----------
    num_qubits : int
        Register size, ``>= 1``.
    settings : SessionSettings, optional
        Preview and random-source settings.

    Attributes
    ----------
    active : list[bool]
        Per-qubit activity flag for the host, initialised from
        ``settings.qubits_start_active``.
    """

    def __init__(self, num_qubits: int, settings: SessionSettings | None = None) -> None:
        check_num_qubits(num_qubits)
        self.num_qubits = num_qubits
        self.settings = settings or SessionSettings()
        self._rng = np.random.default_rng(self.settings.seed)
        self._lock = threading.Lock()
        self._state = QuantumState(num_qubits, rng=self._rng)
        self._preview: Preview | None = None
        self.active = [self.settings.qubits_start_active] * num_qubits

        # Progression parameters read by the host's lesson logic
        self.current_gate: Gate | None = None
        self.measurement_indices: list[int] | None = None
        self.flag = ""

        logger.info("Created session with %d qubit(s), nth_root=%d",
                    num_qubits, self.settings.nth_root)

    @property
    def state(self) -> QuantumState:
        return self._state

    @property
    def pending_preview(self) -> Preview | None:
        return self._preview

    def reset(self) -> QuantumState:
        """Replace the register with a fresh |0...0⟩ state."""
        with self._lock:
            self._state = QuantumState(self.num_qubits, rng=self._rng)
            self._preview = None
        logger.info("Session reset")
        return self._state

    def make_gate(self, type_name: str, *indices: int) -> Gate:
        """Gate for this register from a tool type name such as ``"SGate"``."""
        return g.make_gate(type_name, self.num_qubits, *indices)

    def apply_gate(self, gate: Gate) -> QuantumState:
        """
        Apply ``gate`` to the live state immediately.

        Any pending preview is discarded.
        """
        with self._lock:
            self._drop_stale_preview("apply_gate")
            return self._state.apply_gate(gate)

    def preview(self, gate: Gate) -> Preview:
        """
        Compute the gate's action as ``nth_root`` equal steps.

        The live state is left untouched until ``commit_preview``.
        """
        n = self.settings.nth_root
        root_gate = gate.nth_root(n)
        with self._lock:
            states = [self._state.copy()]
            step = self._state.copy()
            for _ in range(n):
                step.apply_gate(root_gate)
                states.append(step.copy())

            trajectories: list[list[Vector3]] = []
            if self.settings.preview_enabled:
                trajectories = [
                    [s.expectation_values(q) for s in states]
                    for q in range(self.num_qubits)
                ]
            self._preview = Preview(gate, root_gate, states, trajectories)
        logger.debug("Previewing %s in %d step(s)", gate.name, n)
        return self._preview

    def commit_preview(self) -> QuantumState:
        """Make the pending preview's final state the live state."""
        with self._lock:
            if self._preview is None:
                msg = "No gate preview is pending"
                logger.error(msg)
                raise RuntimeError(msg)
            self._state = self._preview.final_state
            self.current_gate = self._preview.gate
            self._preview = None
        logger.info("Committed %s", self.current_gate.name)
        return self._state

    def cancel_preview(self) -> None:
        with self._lock:
            self._preview = None

    def measure(self, indices: Sequence[int]) -> list[tuple[int, int]]:
        """
        Measure ``indices`` in order; see ``QuantumState.measure``.

        Discards any pending preview.
        """
        with self._lock:
            self._drop_stale_preview("measure")
            self.measurement_indices = list(indices)
            outcomes = self._state.measure(self.measurement_indices, rng=self._rng)
        logger.info("Measured %s -> %s", self.measurement_indices, outcomes)
        return outcomes

    def set_qubit_active(self, index: int, value: bool) -> None:
        """Set the host-facing activity flag of qubit ``index``."""
        check_index(index, self.num_qubits, "Qubit index")
        self.active[index] = bool(value)

    def _drop_stale_preview(self, reason: str) -> None:
        # Caller holds the lock
        if self._preview is not None:
            logger.info("Discarding pending %s preview after %s",
                        self._preview.gate.name, reason)
            self._preview = None

    def bloch_vectors(self) -> list[Vector3]:
        with self._lock:
            return self._state.bloch_vectors()

    def clear_progression(self) -> None:
        self.current_gate = None
        self.measurement_indices = None
        self.flag = ""
