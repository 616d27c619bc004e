"""Tests for the host-facing qubit session."""

import threading

import numpy as np
import pytest

from tiny_qreg import (
    IndexOutOfRangeError,
    InvalidDimensionError,
    QubitSession,
    SessionSettings,
    UnknownGateError,
    h_gate,
    x_gate,
)


@pytest.fixture
def session():
    return QubitSession(2, SessionSettings(nth_root=4, preview_enabled=True, seed=42))


def test_starts_in_zero_state(session):
    np.testing.assert_allclose(session.state.vector, [1, 0, 0, 0], atol=0)
    assert session.current_gate is None
    assert session.measurement_indices is None
    assert session.flag == ""


def test_rejects_empty_register():
    with pytest.raises(InvalidDimensionError):
        QubitSession(0)


def test_make_gate_uses_register_size(session):
    gate = session.make_gate("SGate", 1)
    assert gate.num_qubits == 2
    assert gate.target == 1
    with pytest.raises(UnknownGateError):
        session.make_gate("FlashlightGate", 0)


# ---------------------------------------------------------------------------
# Preview
# ---------------------------------------------------------------------------

def test_preview_does_not_touch_live_state(session):
    preview = session.preview(session.make_gate("HGate", 0))
    assert len(preview.states) == 5
    assert preview.root_gate.root == 4
    np.testing.assert_allclose(session.state.vector, [1, 0, 0, 0], atol=0)
    assert session.pending_preview is preview


def test_preview_final_state_matches_gate(session):
    preview = session.preview(session.make_gate("HGate", 0))
    expected = session.state.copy().apply_gate(h_gate(2, 0))
    assert preview.final_state.equals(expected)
    assert preview.states[0].equals(session.state)


def test_preview_trajectories(session):
    preview = session.preview(session.make_gate("XGate", 1))
    assert len(preview.trajectories) == 2
    for trajectory in preview.trajectories:
        assert len(trajectory) == 5
    # Untouched qubit stays at the north pole
    for point in preview.trajectories[0]:
        np.testing.assert_allclose(point, (0, 0, 1), atol=1e-12)
    # Target qubit travels from the north pole to the south pole
    np.testing.assert_allclose(preview.trajectories[1][0], (0, 0, 1), atol=1e-12)
    np.testing.assert_allclose(preview.trajectories[1][-1], (0, 0, -1), atol=1e-12)
    zs = [point[2] for point in preview.trajectories[1]]
    assert zs == sorted(zs, reverse=True)


def test_preview_without_trajectories():
    session = QubitSession(1, SessionSettings(nth_root=3))
    preview = session.preview(session.make_gate("h", 0))
    assert preview.trajectories == []
    assert len(preview.states) == 4


def test_preview_cnot(session):
    session.apply_gate(h_gate(2, 0))
    preview = session.preview(session.make_gate("CNOTGate", 0, 1))
    np.testing.assert_allclose(
        preview.final_state.vector, np.array([1, 0, 0, 1]) / np.sqrt(2), atol=1e-10
    )


def test_commit_preview(session):
    gate = session.make_gate("HGate", 1)
    session.preview(gate)
    state = session.commit_preview()
    np.testing.assert_allclose(state.vector, np.array([1, 1, 0, 0]) / np.sqrt(2), atol=1e-10)
    assert session.state is state
    assert session.current_gate is gate
    assert session.pending_preview is None


def test_commit_without_preview_raises(session):
    with pytest.raises(RuntimeError):
        session.commit_preview()


def test_cancel_preview(session):
    session.preview(session.make_gate("TGate", 0))
    session.cancel_preview()
    assert session.pending_preview is None
    with pytest.raises(RuntimeError):
        session.commit_preview()


# ---------------------------------------------------------------------------
# Direct application, measurement and reset
# ---------------------------------------------------------------------------

def test_apply_gate(session):
    session.apply_gate(x_gate(2, 0))
    np.testing.assert_allclose(session.state.vector, [0, 0, 1, 0], atol=0)
    np.testing.assert_allclose(session.bloch_vectors()[0], (0, 0, -1), atol=1e-12)


def test_measure_records_indices(session):
    session.apply_gate(x_gate(2, 1))
    outcomes = session.measure([1, 7])
    assert outcomes == [(1, 1)]
    assert session.measurement_indices == [1, 7]


def test_measure_is_reproducible_with_seed():
    results = []
    for _ in range(2):
        session = QubitSession(1, SessionSettings(seed=5))
        runs = []
        for _ in range(10):
            session.apply_gate(h_gate(1, 0))
            runs.extend(session.measure([0]))
        results.append(runs)
    assert results[0] == results[1]


def test_reset(session):
    session.apply_gate(x_gate(2, 0))
    session.preview(session.make_gate("h", 1))
    state = session.reset()
    np.testing.assert_allclose(state.vector, [1, 0, 0, 0], atol=0)
    assert session.pending_preview is None


def test_clear_progression(session):
    session.preview(session.make_gate("h", 0))
    session.commit_preview()
    session.measure([0])
    session.flag = "lesson-complete"
    session.clear_progression()
    assert session.current_gate is None
    assert session.measurement_indices is None
    assert session.flag == ""


def test_concurrent_gate_application_is_serialised():
    session = QubitSession(3)
    gate = x_gate(3, 2)

    def worker():
        for _ in range(50):
            session.apply_gate(gate)

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    # 200 X applications is the identity
    np.testing.assert_allclose(session.state.vector, np.eye(8)[0], atol=1e-12)


def test_apply_gate_discards_pending_preview(session):
    session.preview(session.make_gate("HGate", 0))
    session.apply_gate(x_gate(2, 0))
    assert session.pending_preview is None
    with pytest.raises(RuntimeError):
        session.commit_preview()
    np.testing.assert_allclose(session.state.vector, [0, 0, 1, 0], atol=0)


def test_measure_discards_pending_preview(session):
    session.preview(session.make_gate("XGate", 1))
    assert session.measure([0]) == [(0, 0)]
    assert session.pending_preview is None
    np.testing.assert_allclose(session.state.vector, [1, 0, 0, 0], atol=0)


def test_commit_without_preview_logs_error(session, caplog):
    with caplog.at_level("ERROR", logger="tiny_qreg.session"):
        with pytest.raises(RuntimeError):
            session.commit_preview()
    assert "No gate preview is pending" in caplog.text


# ---------------------------------------------------------------------------
# Qubit activity flags
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("start_active", [True, False])
def test_active_flags_follow_settings(start_active):
    session = QubitSession(3, SessionSettings(qubits_start_active=start_active))
    assert session.active == [start_active] * 3


def test_set_qubit_active(session):
    session.set_qubit_active(1, False)
    assert session.active == [True, False]
    with pytest.raises(IndexOutOfRangeError):
        session.set_qubit_active(2, True)
