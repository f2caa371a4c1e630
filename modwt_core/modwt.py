# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Scott Friedman and Project Contributors

"""
Multi-level Maximal Overlap Discrete Wavelet Transform (MODWT).

The MODWT is a non-decimated wavelet transform: no level downsamples, so
every band keeps the input length and the decomposition is shift-invariant.
Signals of any length are accepted.

At level j the analysis filters are the base filters upsampled by 2^(j-1)
and scaled by 1/sqrt(2). Each level filters the previous level's
approximation; the detail band is stored and the approximation feeds the
next level. The inverse runs the same cascade backwards with the synthesis
filters applied by correlation.

Boundary modes:
    PERIODIC      circular filtering, exact reconstruction at every index
    ZERO_PADDING  implicit zeros outside the signal, exact reconstruction
                  only on the interior [M, N-1-M] with M = (L0-1)(2^J-1)
    SYMMETRIC     mirrored extension, exact on the same interior region

Under PERIODIC, a level may be routed through FFT convolution according to
the transform's FFTHeuristics; both paths agree to near machine precision.

Example:
    >>> transform = MaximalOverlapDWT("db4", BoundaryMode.PERIODIC)
    >>> coeffs = transform.forward(signal, levels=4)
    >>> reconstructed = transform.inverse(coeffs)
"""

import logging
import numpy as np
from enum import Enum
from typing import Dict, Optional, Any

from .coefficients import MultiLevelCoefficients
from .convolution import BoundaryConvolver, BoundaryMode
from .exceptions import ConfigurationError, SignalValidationError
from .fft_convolution import CircularConvolutionEngine
from .filters import LevelFilterCache, check_level_shift, max_levels as _max_levels
from .heuristics import FFTHeuristics
from .wavelets import DEFAULT_RECONSTRUCTION_TOLERANCE, WaveletFilterPair, resolve_wavelet


class FFTMode(Enum):
    """How periodic levels choose between direct and FFT convolution."""
    AUTO = 0
    ALWAYS = 1
    NEVER = 2


def validate_signal(signal) -> np.ndarray:
    """
    Coerce a signal to a 1-D float64 array and reject empty or non-finite input.
    """
    try:
        data = np.array(signal, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise SignalValidationError(f"Signal is not numeric: {exc}") from exc
    if data.ndim != 1:
        raise SignalValidationError(f"Signal must be one-dimensional, got shape {data.shape}")
    if data.size == 0:
        raise SignalValidationError("Signal cannot be empty")
    finite = np.isfinite(data)
    if not np.all(finite):
        bad = np.flatnonzero(~finite)
        raise SignalValidationError(
            f"Signal contains {bad.size} non-finite value(s); first at index {bad[0]}")
    return data


class MaximalOverlapDWT:
    """
    Multi-level MODWT with per-instance filter caches.

    Args:
        wavelet: WaveletFilterPair, PyWavelets name (e.g. 'db4') or WaveletFamily
        boundary_mode (BoundaryMode): Method for handling boundaries
        fft_mode (FFTMode): Direct/FFT dispatch policy for PERIODIC levels
        fft_heuristics (FFTHeuristics, optional): Dispatch thresholds
        fft_backend (str): 'scipy' or 'numpy'
        logger (logging.Logger, optional): Logger instance

    The instance owns its analysis and synthesis filter caches; they are
    released with the instance or when a ``with`` block around it exits.
    All transform methods are reentrant and may be called from several
    threads at once.
    """

    def __init__(self, wavelet="db4", boundary_mode=BoundaryMode.PERIODIC,
                 fft_mode=FFTMode.AUTO, fft_heuristics: Optional[FFTHeuristics] = None,
                 fft_backend: str = "scipy", logger: Optional[logging.Logger] = None):
        self.wavelet: WaveletFilterPair = resolve_wavelet(wavelet)
        if not isinstance(boundary_mode, BoundaryMode):
            raise ConfigurationError(f"Unsupported boundary mode: {boundary_mode!r}")
        if not isinstance(fft_mode, FFTMode):
            raise ConfigurationError(f"Unsupported FFT mode: {fft_mode!r}")
        if fft_mode == FFTMode.ALWAYS and boundary_mode != BoundaryMode.PERIODIC:
            raise ConfigurationError(
                f"FFT convolution is circular and requires PERIODIC boundaries, "
                f"not {boundary_mode.name}")

        self.boundary_mode = boundary_mode
        self.fft_mode = fft_mode
        self.fft_heuristics = fft_heuristics if fft_heuristics is not None else FFTHeuristics.defaults()
        self.logger = logger or logging.getLogger("MaximalOverlapDWT")
        if not self.wavelet.validate_perfect_reconstruction(DEFAULT_RECONSTRUCTION_TOLERANCE):
            self.logger.warning(
                f"Wavelet {self.wavelet.name} does not reconstruct perfectly "
                f"(stage error {self.wavelet.perfect_reconstruction_error():.2e}); "
                f"the inverse transform is approximate")

        try:
            self._fft_engine = CircularConvolutionEngine(fft_backend)
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc
        self._convolver = BoundaryConvolver(boundary_mode)
        self._analysis_cache = LevelFilterCache(self.wavelet.decomp_low, self.wavelet.decomp_high)
        self._synthesis_cache = LevelFilterCache(self.wavelet.recon_low, self.wavelet.recon_high)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self._analysis_cache.clear()
        self._synthesis_cache.clear()
        return False

    def __repr__(self):
        return (f"MaximalOverlapDWT(wavelet={self.wavelet.name!r}, "
                f"boundary_mode={self.boundary_mode.name}, fft_mode={self.fft_mode.name})")

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def reset_fft_heuristics(self) -> None:
        """Restore the default FFT dispatch thresholds."""
        self.fft_heuristics = FFTHeuristics.defaults()

    def max_levels(self, signal_length: int) -> int:
        """Largest level whose upsampled filter fits in ``signal_length`` samples."""
        return _max_levels(signal_length, self.wavelet.filter_length)

    def analysis_filters(self, level: int):
        """Upsampled, scaled (low, high) decomposition filters for a level."""
        return self._analysis_cache.get(level)

    def synthesis_filters(self, level: int):
        """Upsampled, scaled (low, high) reconstruction filters for a level."""
        return self._synthesis_cache.get(level)

    def _use_fft(self, signal_length, filter_length) -> bool:
        if self.boundary_mode != BoundaryMode.PERIODIC or self.fft_mode == FFTMode.NEVER:
            return False
        if self.fft_mode == FFTMode.ALWAYS:
            return True
        return self.fft_heuristics.should_use_fft(signal_length, filter_length)

    def _validate_levels(self, levels, signal_length):
        if isinstance(levels, bool) or not isinstance(levels, (int, np.integer)):
            raise SignalValidationError(f"levels must be an integer, got {levels!r}")
        if levels < 1:
            raise SignalValidationError(f"levels must be >= 1, got {levels}")
        check_level_shift(levels)
        limit = self.max_levels(signal_length)
        if limit == 0:
            raise ConfigurationError(
                f"Signal of length {signal_length} is shorter than the "
                f"{self.wavelet.name} filter (length {self.wavelet.filter_length}); "
                f"no decomposition level is possible")
        if levels > limit:
            raise ConfigurationError(
                f"Invalid number of levels: {levels}. Must be between 1 and {limit} "
                f"for signal length {signal_length} and {self.wavelet.name} "
                f"filter length {self.wavelet.filter_length}")
        return int(levels)

    # ------------------------------------------------------------------
    # Per-level kernels
    # ------------------------------------------------------------------

    def _analysis_step(self, current, level):
        low, high = self.analysis_filters(level)
        n = current.shape[0]
        filter_length = max(low.size, high.size)
        if self._use_fft(n, filter_length):
            self.logger.debug(f"Level {level}: FFT analysis, N={n}, L={filter_length}")
            return self._fft_engine.convolve(current, low), self._fft_engine.convolve(current, high)
        self.logger.debug(f"Level {level}: direct {self.boundary_mode.name} analysis, N={n}, L={filter_length}")
        return self._convolver.convolve(current, low, high)

    def _synthesis_step(self, approx, detail, level):
        low, high = self.synthesis_filters(level)
        n = approx.shape[0]
        filter_length = max(low.size, high.size)
        if self._use_fft(n, filter_length):
            self.logger.debug(f"Level {level}: FFT synthesis, N={n}, L={filter_length}")
            return self._fft_engine.correlate(approx, low) + self._fft_engine.correlate(detail, high)
        self.logger.debug(f"Level {level}: direct {self.boundary_mode.name} synthesis, N={n}, L={filter_length}")
        return self._convolver.reconstruct(approx, detail, low, high)

    def _prepare_coefficients(self, coefficients) -> MultiLevelCoefficients:
        if isinstance(coefficients, dict):
            coefficients = MultiLevelCoefficients.from_dict(coefficients)
        if not isinstance(coefficients, MultiLevelCoefficients):
            raise SignalValidationError(
                f"Expected MultiLevelCoefficients, got {type(coefficients).__name__}")
        coefficients.validate()
        mode = coefficients.boundary_mode
        if mode is not None and mode != self.boundary_mode:
            raise ConfigurationError(
                f"Coefficients were produced with {mode.name} boundaries but this "
                f"transform uses {self.boundary_mode.name}")
        self._validate_levels(coefficients.levels, coefficients.signal_length)
        return coefficients

    # ------------------------------------------------------------------
    # Transforms
    # ------------------------------------------------------------------

    def forward(self, signal, levels: Optional[int] = None) -> MultiLevelCoefficients:
        """
        Perform forward MODWT.

        Args:
            signal (array-like): Input signal of any length
            levels (int, optional): Number of decomposition levels; defaults
                to the maximum for this signal and wavelet (see max_levels();
                a one-tap filter is bounded only by MAX_SAFE_SHIFT_BITS)

        Returns:
            MultiLevelCoefficients: Approximation plus one detail band per level
        """
        data = validate_signal(signal)
        n = data.size
        if levels is None:
            levels = max(self.max_levels(n), 1)
        levels = self._validate_levels(levels, n)

        details = []
        current = data
        for level in range(1, levels + 1):
            approx, detail = self._analysis_step(current, level)
            details.append(detail)
            current = approx

        return MultiLevelCoefficients(current, details, self.boundary_mode)

    def inverse(self, coefficients) -> np.ndarray:
        """
        Perform inverse MODWT.

        Exact under PERIODIC boundaries for wavelets that pass
        WaveletFilterPair.validate_perfect_reconstruction() at 1e-10. Under
        ZERO_PADDING and SYMMETRIC the result is exact away from the edges and
        approximate near them. Truncated approximations such as 'dmey'
        reconstruct only approximately in every mode.

        Args:
            coefficients (MultiLevelCoefficients or dict): Output of forward()

        Returns:
            numpy.ndarray: Reconstructed signal
        """
        coeffs = self._prepare_coefficients(coefficients)
        current = coeffs.approximation
        for level in range(coeffs.levels, 0, -1):
            current = self._synthesis_step(current, coeffs.get_detail(level), level)
        return current

    def reconstruct_from_level(self, coefficients, start_level: int) -> np.ndarray:
        """
        Reconstruct while discarding details finer than ``start_level``.

        Args:
            coefficients (MultiLevelCoefficients or dict): Output of forward()
            start_level (int): Finest detail level kept (1 keeps everything)

        Returns:
            numpy.ndarray: Smoothed reconstruction
        """
        coeffs = self._prepare_coefficients(coefficients)
        if not 1 <= start_level <= coeffs.levels:
            raise ConfigurationError(
                f"Invalid start level: {start_level}. Must be between 1 and {coeffs.levels}")
        zeros = np.zeros(coeffs.signal_length)
        current = coeffs.approximation
        for level in range(coeffs.levels, 0, -1):
            detail = coeffs.get_detail(level) if level >= start_level else zeros
            current = self._synthesis_step(current, detail, level)
        return current

    def reconstruct_levels(self, coefficients, min_level: int, max_level: int) -> np.ndarray:
        """
        Band-pass reconstruction from the detail levels in [min_level, max_level].

        The approximation is included only when ``max_level`` is the coarsest
        level of the decomposition.
        """
        coeffs = self._prepare_coefficients(coefficients)
        if min_level < 1 or max_level > coeffs.levels or min_level > max_level:
            raise ConfigurationError(
                f"Invalid level range [{min_level}, {max_level}]; "
                f"levels must satisfy 1 <= min_level <= max_level <= {coeffs.levels}")
        zeros = np.zeros(coeffs.signal_length)
        current = coeffs.approximation if max_level == coeffs.levels else zeros
        for level in range(coeffs.levels, 0, -1):
            detail = coeffs.get_detail(level) if min_level <= level <= max_level else zeros
            current = self._synthesis_step(current, detail, level)
        return current

    def analyze(self, signal, levels: Optional[int] = None, plot: bool = False) -> Dict[str, Any]:
        """
        Decompose a signal and summarise the energy in each band.

        Args:
            signal (array-like): Input signal
            levels (int, optional): Number of decomposition levels
            plot (bool): Whether to draw the decomposition with matplotlib

        Returns:
            dict: 'coefficients', 'energy' and, when plotting, 'figure'
        """
        coeffs = self.forward(signal, levels)
        result = {
            'coefficients': coeffs,
            'energy': coeffs.energy_summary(),
        }
        if plot:
            from .visualization import plot_decomposition
            result['figure'] = plot_decomposition(
                signal, coeffs, title=f"MODWT ({self.wavelet.name}, {self.boundary_mode.name})")
        return result


# ----------------------------------------------------------------------
# Functional interface
# ----------------------------------------------------------------------

def forward(signal, levels: Optional[int] = None, filter_pair="db4",
            boundary_mode=BoundaryMode.PERIODIC, **options) -> MultiLevelCoefficients:
    """One-shot forward MODWT; ``options`` are passed to MaximalOverlapDWT."""
    return MaximalOverlapDWT(filter_pair, boundary_mode, **options).forward(signal, levels)


def inverse(coefficients, filter_pair="db4", boundary_mode=BoundaryMode.PERIODIC,
            **options) -> np.ndarray:
    """One-shot inverse MODWT; ``options`` are passed to MaximalOverlapDWT."""
    return MaximalOverlapDWT(filter_pair, boundary_mode, **options).inverse(coefficients)


def max_levels(signal_length: int, base_filter_length: int) -> int:
    """Largest j such that (L0 - 1) * 2^(j-1) + 1 <= N."""
    return _max_levels(signal_length, base_filter_length)
