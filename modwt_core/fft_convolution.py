# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Scott Friedman and Project Contributors

"""
FFT-based circular convolution for PERIODIC boundary handling.

The filter is folded onto the signal's period (taps beyond N wrap around),
both sequences are transformed with a real FFT of length exactly N, multiplied
pointwise and transformed back. The result equals the direct periodic
convolution to within floating point round-off.

Scratch arrays are allocated per call, so one engine may be shared freely
between threads.
"""

import numpy as np
import scipy.fft

SUPPORTED_BACKENDS = ("scipy", "numpy")


def _fold_filter(filter_taps, n):
    """Wrap filter taps modulo n into a length-n kernel."""
    taps = np.asarray(filter_taps, dtype=np.float64)
    kernel = np.zeros(n, dtype=np.float64)
    if taps.size <= n:
        kernel[:taps.size] = taps
    else:
        np.add.at(kernel, np.arange(taps.size) % n, taps)
    return kernel


class CircularConvolutionEngine:
    """
    Real-input FFT convolution engine.

    Args:
        backend (str): 'scipy' (scipy.fft, default) or 'numpy' (numpy.fft)
        workers (int, optional): Worker count forwarded to scipy.fft
    """

    def __init__(self, backend: str = "scipy", workers=None):
        if backend not in SUPPORTED_BACKENDS:
            raise ValueError(f"Unsupported FFT backend '{backend}', expected one of {SUPPORTED_BACKENDS}")
        if workers is not None and backend != "scipy":
            raise ValueError("workers is only supported by the scipy backend")
        self.backend = backend
        self.workers = workers

    def _rfft(self, x):
        if self.backend == "scipy":
            return scipy.fft.rfft(x, workers=self.workers)
        return np.fft.rfft(x)

    def _irfft(self, spectrum, n):
        if self.backend == "scipy":
            return scipy.fft.irfft(spectrum, n=n, workers=self.workers)
        return np.fft.irfft(spectrum, n=n)

    def convolve(self, signal, filter_taps) -> np.ndarray:
        """output[t] = sum_l f[l] * x[(t - l) mod N], computed in the frequency domain."""
        signal = np.asarray(signal, dtype=np.float64)
        n = signal.shape[0]
        kernel = _fold_filter(filter_taps, n)
        spectrum = self._rfft(signal) * self._rfft(kernel)
        return self._irfft(spectrum, n)

    def correlate(self, signal, filter_taps) -> np.ndarray:
        """output[t] = sum_l f[l] * x[(t + l) mod N], computed in the frequency domain."""
        signal = np.asarray(signal, dtype=np.float64)
        n = signal.shape[0]
        kernel = _fold_filter(filter_taps, n)
        spectrum = self._rfft(signal) * np.conj(self._rfft(kernel))
        return self._irfft(spectrum, n)

    def __repr__(self):
        return f"CircularConvolutionEngine(backend={self.backend!r}, workers={self.workers})"


_DEFAULT_ENGINE = CircularConvolutionEngine()


def circular_convolve_fft(signal, filter_taps) -> np.ndarray:
    """Periodic convolution through the default (scipy) FFT engine."""
    return _DEFAULT_ENGINE.convolve(signal, filter_taps)


def circular_correlate_fft(signal, filter_taps) -> np.ndarray:
    """Periodic correlation through the default (scipy) FFT engine."""
    return _DEFAULT_ENGINE.correlate(signal, filter_taps)
