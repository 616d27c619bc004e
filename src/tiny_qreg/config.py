"""Host-supplied session settings."""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from typing import Any, Mapping

from tiny_qreg.errors import InvalidRootDegreeError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionSettings:
    """
    Settings a host passes to ``QubitSession``.

    Attributes
    ----------
    nth_root : int
        Root degree used when previewing a gate; the preview shows the
        gate's action split into ``nth_root`` equal steps.
    preview_enabled : bool
        Whether ``QubitSession.preview`` computes per-qubit trajectories.
    seed : int | None
        Seed for the measurement random source.
    qubits_start_active : bool
        Initial activity flag the host gives every qubit.
    """

    nth_root: int = 1
    preview_enabled: bool = False
    seed: int | None = None
    qubits_start_active: bool = True

    def __post_init__(self) -> None:
        n = self.nth_root
        if isinstance(n, bool) or not isinstance(n, int) or n < 1:
            msg = f"nth_root must be a positive integer, got {n!r}"
            logger.error(msg)
            raise InvalidRootDegreeError(msg)

    @classmethod
    def from_dict(cls, config: Mapping[str, Any]) -> SessionSettings:
        """
        Build settings from a plain mapping.

        Unknown keys are ignored with a warning.
        """
        valid_keys = [f.name for f in fields(cls)]
        kwargs = {}
        for key, value in config.items():
            if key in valid_keys:
                kwargs[key] = value
            else:
                logger.warning(
                    "Ignoring unknown configuration key: '%s'. Valid keys are: %s.",
                    key, valid_keys,
                )
        settings = cls(**kwargs)
        logger.debug("Session settings: %s", settings)
        return settings
