# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Scott Friedman and Project Contributors

"""
Wavelet filter definitions consumed by the MODWT engine.

The engine never selects coefficients itself; it is handed a
WaveletFilterPair. Coefficient tables come from PyWavelets, and an
orthogonal pair can also be built directly from a low-pass filter.

Tap ordering convention:
    - decomposition taps are applied by convolution,
      out[t] = sum_l h[l] * x[t - l]
    - reconstruction taps are applied by correlation,
      out[t] = sum_l h~[l] * x[t + l]

With this convention the reconstruction taps of an orthogonal wavelet are
identical to its decomposition taps.
"""

import numpy as np
from enum import Enum
from typing import Optional, Sequence, Tuple, Union

import pywt

from .exceptions import ConfigurationError, SignalValidationError

DEFAULT_RECONSTRUCTION_TOLERANCE = 1e-10

# Documented precision limits of coefficient tables that are not exact to
# double precision. 'dmey' is a truncated FIR approximation of the Meyer
# wavelet and only reconstructs approximately.
KNOWN_RECONSTRUCTION_TOLERANCES = {
    "sym8": 1e-6,
    "sym10": 2e-4,
    "coif2": 1e-4,
    "dmey": 3e-3,
}


class WaveletFamily(Enum):
    """Enum defining the discrete wavelet families available from PyWavelets."""
    HAAR = 0
    DAUBECHIES = 1
    SYMLET = 2
    COIFLET = 3
    BIORTHOGONAL = 4
    MEYER = 5


def _as_taps(values, label):
    taps = np.array(values, dtype=np.float64).ravel()
    if taps.size == 0:
        raise SignalValidationError(f"{label} must contain at least one tap")
    if not np.all(np.isfinite(taps)):
        raise SignalValidationError(f"{label} contains non-finite values")
    taps.flags.writeable = False
    return taps


class WaveletFilterPair:
    """
    Analysis and synthesis filters of a discrete wavelet.

    Args:
        decomp_low: Low-pass decomposition taps (convolution order)
        decomp_high: High-pass decomposition taps (convolution order)
        recon_low: Low-pass reconstruction taps (correlation order)
        recon_high: High-pass reconstruction taps (correlation order)
        name: Optional wavelet name used in logs and error messages

    The stored arrays are read-only; the engine references them without
    copying.
    """

    def __init__(self, decomp_low: Sequence[float], decomp_high: Sequence[float],
                 recon_low: Sequence[float], recon_high: Sequence[float],
                 name: Optional[str] = None):
        self.decomp_low = _as_taps(decomp_low, "decomp_low")
        self.decomp_high = _as_taps(decomp_high, "decomp_high")
        self.recon_low = _as_taps(recon_low, "recon_low")
        self.recon_high = _as_taps(recon_high, "recon_high")
        self.name = name or "custom"

    @property
    def filter_length(self) -> int:
        """Support width L0 of the wavelet (longest of the four filters)."""
        return max(len(self.decomp_low), len(self.decomp_high),
                   len(self.recon_low), len(self.recon_high))

    @property
    def is_orthogonal(self) -> bool:
        """
        True when synthesis taps equal analysis taps (to 1e-12).

        This compares taps only; a truncated approximation such as 'dmey'
        reports True without reconstructing exactly. See
        validate_perfect_reconstruction().
        """
        if len(self.decomp_low) != len(self.recon_low) or len(self.decomp_high) != len(self.recon_high):
            return False
        return (np.allclose(self.decomp_low, self.recon_low, rtol=0.0, atol=1e-12)
                and np.allclose(self.decomp_high, self.recon_high, rtol=0.0, atol=1e-12))

    def reconstruction_kernel(self) -> Tuple[np.ndarray, int]:
        """
        Lag response of one analysis + synthesis stage and the index of lag 0.

        Entry k holds 1/2 * sum_l (h~[l] h[l-k] + g~[l] g[l-k]) for
        k = -(L-1) .. L-1; a perfectly reconstructing pair gives a unit
        impulse at the centre.
        """
        low = np.convolve(self.recon_low, self.decomp_low[::-1])
        high = np.convolve(self.recon_high, self.decomp_high[::-1])
        # Align both products on lag 0 before summing
        low_zero, high_zero = len(self.decomp_low) - 1, len(self.decomp_high) - 1
        span = max(low_zero, high_zero) + max(low.size - low_zero, high.size - high_zero)
        kernel = np.zeros(span)
        centre = max(low_zero, high_zero)
        kernel[centre - low_zero:centre - low_zero + low.size] += low
        kernel[centre - high_zero:centre - high_zero + high.size] += high
        return 0.5 * kernel, centre

    def perfect_reconstruction_error(self) -> float:
        """
        L1 distance of the stage lag response from a unit impulse.

        Bounds the per-level reconstruction error relative to max|x| under
        PERIODIC boundaries; zero (to round-off) for exact wavelets.
        """
        kernel, centre = self.reconstruction_kernel()
        kernel[centre] -= 1.0
        return float(np.sum(np.abs(kernel)))

    def validate_perfect_reconstruction(self, tolerance: Optional[float] = None) -> bool:
        """
        Check the filters against the perfect reconstruction conditions.

        Orthogonal pairs must have a low-pass summing to sqrt(2) with unit
        energy and vanishing even-shift autocorrelation. Every pair must
        satisfy the analysis/synthesis identity of reconstruction_kernel().

        Args:
            tolerance (float, optional): Allowed deviation; defaults to the
                documented precision of the named wavelet (see
                KNOWN_RECONSTRUCTION_TOLERANCES) or 1e-10

        Returns:
            bool: True if every condition holds within tolerance
        """
        if tolerance is None:
            tolerance = KNOWN_RECONSTRUCTION_TOLERANCES.get(self.name, DEFAULT_RECONSTRUCTION_TOLERANCE)

        if self.is_orthogonal:
            h = self.decomp_low
            if abs(h.sum() - np.sqrt(2.0)) > tolerance or abs(np.dot(h, h) - 1.0) > tolerance:
                return False
            for shift in range(2, h.size, 2):
                if abs(np.dot(h[:-shift], h[shift:])) > tolerance:
                    return False

        return self.perfect_reconstruction_error() <= tolerance

    @classmethod
    def orthogonal(cls, low_pass: Sequence[float], name: Optional[str] = None) -> 'WaveletFilterPair':
        """
        Build an orthogonal pair from a low-pass filter.

        The high-pass filter follows the quadrature mirror relationship
        g[i] = (-1)^i * h[L-1-i]; reconstruction taps equal the analysis taps.
        """
        h = np.array(low_pass, dtype=np.float64).ravel()
        L = len(h)
        g = np.array([(-1) ** i * h[L - 1 - i] for i in range(L)])
        return cls(h, g, h, g, name=name)

    @classmethod
    def from_pywt(cls, name: str) -> 'WaveletFilterPair':
        """
        Build a pair from a PyWavelets discrete wavelet name (e.g. 'db4').

        PyWavelets stores reconstruction filters in convolution order, so they
        are reversed into correlation order here.
        """
        try:
            wavelet = pywt.Wavelet(name)
        except ValueError as exc:
            raise ConfigurationError(f"Unknown discrete wavelet '{name}': {exc}") from exc
        dec_lo, dec_hi, rec_lo, rec_hi = wavelet.filter_bank
        return cls(dec_lo, dec_hi, rec_lo[::-1], rec_hi[::-1], name=wavelet.name)

    def __repr__(self):
        return f"WaveletFilterPair(name={self.name!r}, filter_length={self.filter_length})"


def haar() -> WaveletFilterPair:
    """Haar wavelet built without a coefficient table lookup."""
    return WaveletFilterPair.orthogonal([0.7071067811865475, 0.7071067811865475], name="haar")


def get_wavelet(wavelet_family=WaveletFamily.DAUBECHIES,
                vanishing_moments: Union[int, str] = 4) -> WaveletFilterPair:
    """
    Look up a wavelet by family and vanishing moments.

    Args:
        wavelet_family (WaveletFamily): The wavelet family to use
        vanishing_moments (int or str): Number of vanishing moments; for the
            biorthogonal family the PyWavelets order string such as '2.2'

    Returns:
        WaveletFilterPair: Filters for the requested wavelet

    MEYER resolves to PyWavelets' 'dmey', a truncated approximation whose
    inverse transform is approximate (per-level error bounded by
    perfect_reconstruction_error() times the largest sample magnitude).
    """
    if wavelet_family == WaveletFamily.HAAR:
        return haar()
    if wavelet_family == WaveletFamily.DAUBECHIES:
        name = f"db{vanishing_moments}"
    elif wavelet_family == WaveletFamily.SYMLET:
        name = f"sym{vanishing_moments}"
    elif wavelet_family == WaveletFamily.COIFLET:
        name = f"coif{vanishing_moments}"
    elif wavelet_family == WaveletFamily.BIORTHOGONAL:
        name = f"bior{vanishing_moments}"
    elif wavelet_family == WaveletFamily.MEYER:
        name = "dmey"
    else:
        raise ConfigurationError(f"Wavelet family {wavelet_family} not supported")
    return WaveletFilterPair.from_pywt(name)


def resolve_wavelet(wavelet) -> WaveletFilterPair:
    """Accept a WaveletFilterPair, a PyWavelets name or a WaveletFamily."""
    if isinstance(wavelet, WaveletFilterPair):
        return wavelet
    if isinstance(wavelet, WaveletFamily):
        return get_wavelet(wavelet)
    if isinstance(wavelet, str):
        if wavelet.lower() == "haar":
            return haar()
        return WaveletFilterPair.from_pywt(wavelet)
    raise ConfigurationError(
        f"Expected WaveletFilterPair, wavelet name or WaveletFamily, got {type(wavelet).__name__}")
