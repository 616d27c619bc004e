"""
Error kinds raised by the tiny-qreg core.

Each error also subclasses the builtin a caller would naturally catch
(``ValueError`` or ``IndexError``), so existing handlers keep working.
"""

from __future__ import annotations


class QuantumError(Exception):
    """Base class for every error raised by tiny-qreg."""


class InvalidDimensionError(QuantumError, ValueError):
    """Qubit count, matrix shape or vector length is not usable."""


class IndexOutOfRangeError(QuantumError, IndexError):
    """A qubit index falls outside ``[0, num_qubits)``."""

    def __init__(self, message: str, index: int | None = None) -> None:
        super().__init__(message)
        self.index = index


class ShapeMismatchError(QuantumError, ValueError):
    """Gate operator does not match the size of the state it is applied to."""


class InvalidRootDegreeError(QuantumError, ValueError):
    """
    Nth-root degree was not a positive integer.

    ``fallback`` holds the identity gate of the same dimension, so a host
    can choose to substitute it explicitly.
    """

    def __init__(self, message: str, fallback=None) -> None:
        super().__init__(message)
        self.fallback = fallback


class UnknownGateError(QuantumError, KeyError):
    """Gate lookup by a name that is not registered."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the message readable.
        return str(self.args[0]) if self.args else ""
