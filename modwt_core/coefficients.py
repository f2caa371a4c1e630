# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Scott Friedman and Project Contributors

"""
Result container for multi-level MODWT decompositions.
"""

import numpy as np
from typing import Dict, List, Optional, Sequence, Any

from .convolution import BoundaryMode
from .exceptions import SignalValidationError


def _as_band(values, label, expected_length=None):
    band = np.array(values, dtype=np.float64)
    if band.ndim != 1 or band.size == 0:
        raise SignalValidationError(f"{label} must be a non-empty 1-D array")
    if expected_length is not None and band.size != expected_length:
        raise SignalValidationError(
            f"{label} has length {band.size}, expected {expected_length}")
    return band


class MultiLevelCoefficients:
    """
    Approximation and detail bands of a J-level MODWT.

    Every band has the length N of the analysed signal. Detail bands are kept
    in level order (index 0 holds level 1, the finest scale). The arrays are
    owned by this object and may be modified in place, e.g. by a thresholding
    step, before being handed back to the inverse transform.

    Args:
        approximation (array-like): Final level scaling coefficients V_J
        details (sequence): Wavelet coefficients W_1 ... W_J
        boundary_mode (BoundaryMode, optional): Mode used to produce the bands
    """

    def __init__(self, approximation, details: Sequence, boundary_mode: Optional[BoundaryMode] = None):
        self.approximation = _as_band(approximation, "approximation")
        n = self.approximation.size
        if len(details) == 0:
            raise SignalValidationError("At least one detail band is required")
        self.details: List[np.ndarray] = [
            _as_band(d, f"detail band {i + 1}", n) for i, d in enumerate(details)
        ]
        self.boundary_mode = boundary_mode

    @property
    def levels(self) -> int:
        return len(self.details)

    @property
    def signal_length(self) -> int:
        return self.approximation.size

    def _check_level(self, level):
        if not 1 <= level <= self.levels:
            raise SignalValidationError(
                f"Level {level} out of range; valid levels are 1..{self.levels}")

    def get_detail(self, level: int) -> np.ndarray:
        """Detail band for a 1-based level (the stored array, not a copy)."""
        self._check_level(level)
        return self.details[level - 1]

    def set_detail(self, level: int, values) -> None:
        """Replace the detail band at a 1-based level."""
        self._check_level(level)
        self.details[level - 1] = _as_band(values, f"detail band {level}", self.signal_length)

    def set_approximation(self, values) -> None:
        self.approximation = _as_band(values, "approximation", self.signal_length)

    def validate(self) -> None:
        """Check that every band is finite and of length N."""
        bands = [("approximation", self.approximation)]
        bands += [(f"detail band {i + 1}", d) for i, d in enumerate(self.details)]
        for label, band in bands:
            if band.ndim != 1 or band.size != self.signal_length:
                raise SignalValidationError(
                    f"{label} has shape {band.shape}, expected ({self.signal_length},)")
            if not np.all(np.isfinite(band)):
                raise SignalValidationError(f"{label} contains non-finite values")

    def copy(self) -> 'MultiLevelCoefficients':
        return MultiLevelCoefficients(self.approximation.copy(),
                                      [d.copy() for d in self.details],
                                      self.boundary_mode)

    def detail_energies(self) -> np.ndarray:
        """Sum of squares of each detail band, in level order."""
        return np.array([float(np.dot(d, d)) for d in self.details])

    def approximation_energy(self) -> float:
        return float(np.dot(self.approximation, self.approximation))

    def total_energy(self) -> float:
        """Approximation energy plus all detail energies."""
        return self.approximation_energy() + float(self.detail_energies().sum())

    def energy_summary(self) -> Dict[str, Any]:
        """Absolute and relative energy per band."""
        details = self.detail_energies()
        approx = self.approximation_energy()
        total = approx + float(details.sum())
        scale = 1.0 / total if total > 0 else 0.0
        return {
            'total': total,
            'approximation': approx,
            'detail': details.tolist(),
            'approximation_fraction': approx * scale,
            'detail_fraction': (details * scale).tolist(),
        }

    def to_dict(self) -> Dict[str, Any]:
        """Dictionary form: {'approximation', 'detail', 'levels', 'boundary_mode'}."""
        return {
            'approximation': self.approximation,
            'detail': list(self.details),
            'levels': self.levels,
            'boundary_mode': self.boundary_mode.name if self.boundary_mode is not None else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MultiLevelCoefficients':
        try:
            approximation = data['approximation']
            details = data['detail']
        except KeyError as exc:
            raise SignalValidationError(f"Coefficient dictionary is missing {exc}") from exc
        mode = data.get('boundary_mode')
        if isinstance(mode, str):
            try:
                mode = BoundaryMode[mode]
            except KeyError as exc:
                raise SignalValidationError(f"Unknown boundary mode '{mode}'") from exc
        coeffs = cls(approximation, details, mode)
        if 'levels' in data and data['levels'] != coeffs.levels:
            raise SignalValidationError(
                f"'levels' is {data['levels']} but {coeffs.levels} detail bands were given")
        return coeffs

    def __repr__(self):
        mode = self.boundary_mode.name if self.boundary_mode is not None else None
        return (f"MultiLevelCoefficients(levels={self.levels}, "
                f"signal_length={self.signal_length}, boundary_mode={mode})")
