# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Scott Friedman and Project Contributors

"""
Direct (time-domain) convolution kernels for the MODWT.

All boundary modes share one filtering routine; they differ only in the
function that maps an out-of-range sample position back onto the signal:

    PERIODIC      [a b c d] -> ... c d | a b c d | a b ...
    SYMMETRIC     [a b c d] -> ... b a | a b c d | d c ...
    ZERO_PADDING  [a b c d] -> ... 0 0 | a b c d | 0 0 ...

Analysis uses convolution, out[t] = sum_l f[l] * x[map(t - l)].
Synthesis uses correlation, out[t] = sum_l f[l] * x[map(t + l)].

Every output sample depends only on the read-only input and filter, so the
optional ``start``/``stop`` window lets a scheduler compute disjoint chunks
of one level concurrently.
"""

import numpy as np
from enum import Enum
from typing import Optional, Tuple


class BoundaryMode(Enum):
    """Enum defining boundary handling modes for wavelet transforms."""
    ZERO_PADDING = 0
    SYMMETRIC = 1
    PERIODIC = 2


def _periodic_index(positions, n):
    return np.mod(positions, n), None


def _zero_padding_index(positions, n):
    valid = (positions >= 0) & (positions < n)
    return np.where(valid, positions, 0), valid


def _symmetric_index(positions, n):
    # Half-sample symmetric extension repeats with period 2N.
    folded = np.mod(positions, 2 * n)
    return np.where(folded >= n, 2 * n - 1 - folded, folded), None


_INDEX_MAPS = {
    BoundaryMode.PERIODIC: _periodic_index,
    BoundaryMode.ZERO_PADDING: _zero_padding_index,
    BoundaryMode.SYMMETRIC: _symmetric_index,
}


def _output_window(n, start, stop):
    stop = n if stop is None else stop
    if not 0 <= start <= stop <= n:
        raise ValueError(f"Output window [{start}, {stop}) outside signal of length {n}")
    return start, stop


def _apply_filter(signal, filter_taps, mode, direction, start=0, stop=None):
    """
    Shared filtering loop.

    Args:
        signal (numpy.ndarray): Input samples
        filter_taps (numpy.ndarray): Filter taps
        mode (BoundaryMode): Selects the index map
        direction (int): -1 for convolution, +1 for correlation
        start (int): First output index
        stop (int): One past the last output index (default N)

    Returns:
        numpy.ndarray: Output samples for [start, stop)
    """
    signal = np.asarray(signal, dtype=np.float64)
    filter_taps = np.asarray(filter_taps, dtype=np.float64)
    n = signal.shape[0]
    start, stop = _output_window(n, start, stop)
    index_map = _INDEX_MAPS[mode]

    t = np.arange(start, stop)
    output = np.zeros(stop - start, dtype=np.float64)
    # Upsampled filters are mostly zeros; only non-zero taps contribute.
    for lag in np.flatnonzero(filter_taps):
        indices, valid = index_map(t + direction * lag, n)
        samples = signal[indices]
        if valid is not None:
            samples = np.where(valid, samples, 0.0)
        output += filter_taps[lag] * samples
    return output


def convolve(signal, filter_taps, mode=BoundaryMode.PERIODIC, start=0, stop=None):
    """Analysis-form convolution under the given boundary mode."""
    return _apply_filter(signal, filter_taps, mode, -1, start, stop)


def correlate(signal, filter_taps, mode=BoundaryMode.PERIODIC, start=0, stop=None):
    """Synthesis-form correlation under the given boundary mode."""
    return _apply_filter(signal, filter_taps, mode, +1, start, stop)


def convolve_periodic(signal, filter_taps, start=0, stop=None):
    """output[t] = sum_l f[l] * x[(t - l) mod N]"""
    return convolve(signal, filter_taps, BoundaryMode.PERIODIC, start, stop)


def convolve_zero_padding(signal, filter_taps, start=0, stop=None):
    """output[t] = sum_l f[l] * x[t - l], out-of-range samples are zero"""
    return convolve(signal, filter_taps, BoundaryMode.ZERO_PADDING, start, stop)


def convolve_symmetric(signal, filter_taps, start=0, stop=None):
    """output[t] = sum_l f[l] * x[sym(t - l)] with half-sample mirroring"""
    return convolve(signal, filter_taps, BoundaryMode.SYMMETRIC, start, stop)


def correlate_periodic(signal, filter_taps, start=0, stop=None):
    return correlate(signal, filter_taps, BoundaryMode.PERIODIC, start, stop)


def correlate_zero_padding(signal, filter_taps, start=0, stop=None):
    return correlate(signal, filter_taps, BoundaryMode.ZERO_PADDING, start, stop)


def correlate_symmetric(signal, filter_taps, start=0, stop=None):
    return correlate(signal, filter_taps, BoundaryMode.SYMMETRIC, start, stop)


class BoundaryConvolver:
    """
    One MODWT level computed by direct convolution.

    Args:
        mode (BoundaryMode): Method for handling boundaries
    """

    def __init__(self, mode=BoundaryMode.PERIODIC):
        if not isinstance(mode, BoundaryMode):
            raise ValueError(f"Unsupported boundary mode: {mode!r}")
        self.mode = mode

    def convolve(self, signal, low_filter, high_filter,
                 start: int = 0, stop: Optional[int] = None) -> Tuple[np.ndarray, np.ndarray]:
        """
        Compute one level's approximation and detail bands.

        Returns:
            tuple: (approximation, detail), each covering [start, stop)
        """
        approx = convolve(signal, low_filter, self.mode, start, stop)
        detail = convolve(signal, high_filter, self.mode, start, stop)
        return approx, detail

    def reconstruct(self, approx, detail, low_filter, high_filter,
                    start: int = 0, stop: Optional[int] = None) -> np.ndarray:
        """Combine one level's bands with the synthesis filters."""
        return (correlate(approx, low_filter, self.mode, start, stop)
                + correlate(detail, high_filter, self.mode, start, stop))

    def __repr__(self):
        return f"BoundaryConvolver(mode={self.mode.name})"
