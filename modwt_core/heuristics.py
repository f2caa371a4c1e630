# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Scott Friedman and Project Contributors

"""
Decision rule for routing periodic convolution through the FFT.

Direct convolution costs O(N * L); FFT convolution costs O(N log N) plus a
fixed setup overhead, so the FFT only pays off once N is large and L is a
non-trivial fraction of N.
"""

import os
import logging
from typing import Mapping, Optional

from .exceptions import ConfigurationError

DEFAULT_MIN_N = 1024
DEFAULT_MIN_FILTER_TO_SIGNAL_RATIO = 1.0 / 8.0

ENV_MIN_N = "MODWT_FFT_MIN_N"
ENV_MIN_FILTER_RATIO = "MODWT_FFT_MIN_FILTER_RATIO"

logger = logging.getLogger("FFTHeuristics")


class FFTHeuristics:
    """
    Immutable FFT dispatch thresholds.

    Args:
        min_n (int): Smallest signal length for which the FFT is considered
        min_filter_to_signal_ratio (float): FFT is chosen only when
            L > N * ratio; must lie in (0, 1]
    """

    __slots__ = ("_min_n", "_ratio")

    def __init__(self, min_n: int = DEFAULT_MIN_N,
                 min_filter_to_signal_ratio: float = DEFAULT_MIN_FILTER_TO_SIGNAL_RATIO):
        try:
            count = int(min_n)
            ratio = float(min_filter_to_signal_ratio)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(
                f"FFT thresholds must be numeric, got min_n={min_n!r}, "
                f"min_filter_to_signal_ratio={min_filter_to_signal_ratio!r}") from exc
        if count != min_n or count < 1:
            raise ConfigurationError(f"min_n must be an integer >= 1, got {min_n!r}")
        if not 0.0 < ratio <= 1.0:
            raise ConfigurationError(
                f"min_filter_to_signal_ratio must be in (0, 1], got {min_filter_to_signal_ratio!r}")
        self._min_n = count
        self._ratio = ratio

    @property
    def min_n(self) -> int:
        return self._min_n

    @property
    def min_filter_to_signal_ratio(self) -> float:
        return self._ratio

    @classmethod
    def defaults(cls) -> 'FFTHeuristics':
        """Thresholds with their default values."""
        return cls()

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'FFTHeuristics':
        """
        Read thresholds from MODWT_FFT_MIN_N / MODWT_FFT_MIN_FILTER_RATIO.

        Unparseable or out-of-range values fall back to the defaults.
        """
        environ = os.environ if environ is None else environ
        min_n = DEFAULT_MIN_N
        ratio = DEFAULT_MIN_FILTER_TO_SIGNAL_RATIO

        raw = environ.get(ENV_MIN_N)
        if raw is not None:
            try:
                parsed = int(raw.strip())
                if parsed < 1:
                    raise ValueError("must be >= 1")
                min_n = parsed
            except ValueError as exc:
                logger.warning(f"Ignoring {ENV_MIN_N}={raw!r}: {exc}")

        raw = environ.get(ENV_MIN_FILTER_RATIO)
        if raw is not None:
            try:
                parsed = float(raw.strip())
                if not 0.0 < parsed <= 1.0:
                    raise ValueError("must be in (0, 1]")
                ratio = parsed
            except ValueError as exc:
                logger.warning(f"Ignoring {ENV_MIN_FILTER_RATIO}={raw!r}: {exc}")

        return cls(min_n, ratio)

    def with_overrides(self, min_n: Optional[int] = None,
                       min_filter_to_signal_ratio: Optional[float] = None) -> 'FFTHeuristics':
        """Copy with some thresholds replaced."""
        return FFTHeuristics(
            self._min_n if min_n is None else min_n,
            self._ratio if min_filter_to_signal_ratio is None else min_filter_to_signal_ratio)

    def should_use_fft(self, signal_length: int, filter_length: int) -> bool:
        """True iff N >= min_n and L > N * min_filter_to_signal_ratio."""
        if signal_length <= 0 or filter_length <= 0:
            return False
        if signal_length < self._min_n:
            return False
        return filter_length > signal_length * self._ratio

    def __eq__(self, other):
        if not isinstance(other, FFTHeuristics):
            return NotImplemented
        return self._min_n == other._min_n and self._ratio == other._ratio

    def __hash__(self):
        return hash((self._min_n, self._ratio))

    def __repr__(self):
        return (f"FFTHeuristics(min_n={self._min_n}, "
                f"min_filter_to_signal_ratio={self._ratio})")


def should_use_fft(signal_length: int, filter_length: int,
                   heuristics: Optional[FFTHeuristics] = None) -> bool:
    """Module-level form of FFTHeuristics.should_use_fft (defaults if none given)."""
    heuristics = heuristics if heuristics is not None else FFTHeuristics.defaults()
    return heuristics.should_use_fft(signal_length, filter_length)
