"""Example: preview a Hadamard gate in quarter steps, then measure."""
import logging
import sys
sys.path.insert(0, 'src')

from tiny_qreg import QubitSession, SessionSettings

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

print("=" * 50)
print("tiny-qreg: Hadamard Preview Example")
print("=" * 50)

session = QubitSession(2, SessionSettings(nth_root=4, preview_enabled=True, seed=42))
preview = session.preview(session.make_gate("HGate", 0))

print("\nBloch vector of qubit 0 at each quarter step:")
for step, (x, y, z) in enumerate(preview.trajectories[0]):
    print(f"  step {step}: ({x:+.3f}, {y:+.3f}, {z:+.3f})")

session.commit_preview()
session.apply_gate(session.make_gate("CNOTGate", 0, 1))

print("\nMeasuring both qubits of the Bell state:")
for qubit, outcome in session.measure([0, 1]):
    print(f"  qubit {qubit}: {'down |1⟩' if outcome else 'up |0⟩'}")

print("\nExpected: both qubits give the same outcome (entangled!)")
