# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Scott Friedman and Project Contributors

"""
Per-level filter preparation for the MODWT cascade.

At level j the base taps are spread apart by inserting 2^(j-1) - 1 zeros
between consecutive taps ("a trous" upsampling) and multiplied by 1/sqrt(2).
Composing j such stages gives the textbook MODWT scale of 2^(-j/2).
"""

import threading
import numpy as np
from typing import Dict, Tuple

from .exceptions import FilterOverflowError, SignalValidationError

# Upsampling uses 1 << (level - 1); levels past this shift width are rejected
# before any array is allocated.
MAX_SAFE_SHIFT_BITS = 30

STAGE_SCALE = 1.0 / np.sqrt(2.0)


def check_level_shift(level: int) -> None:
    """Reject levels whose upsampling shift would exceed MAX_SAFE_SHIFT_BITS."""
    if level - 1 >= MAX_SAFE_SHIFT_BITS:
        raise FilterOverflowError(
            f"Decomposition level {level} would require a 2^{level - 1} upsampling "
            f"factor; maximum safe level is {MAX_SAFE_SHIFT_BITS}")


def upsampled_length(base_length: int, level: int) -> int:
    """Effective filter length Lj = (L0 - 1) * 2^(j-1) + 1."""
    check_level_shift(level)
    return (base_length - 1) * (1 << (level - 1)) + 1


def scale_filter(base_filter, level: int) -> np.ndarray:
    """
    Upsample and scale a base filter for decomposition level ``level``.

    Args:
        base_filter (array-like): Non-empty base filter taps
        level (int): Decomposition level, 1-based

    Returns:
        numpy.ndarray: New array of length (L0 - 1) * 2^(level-1) + 1
    """
    taps = np.asarray(base_filter, dtype=np.float64)
    if taps.ndim != 1 or taps.size == 0:
        raise SignalValidationError("Base filter must be a non-empty 1-D sequence")
    if level < 1:
        raise SignalValidationError(f"Filter level must be >= 1, got {level}")
    check_level_shift(level)

    step = 1 << (level - 1)
    scaled = np.zeros((taps.size - 1) * step + 1, dtype=np.float64)
    scaled[::step] = taps * STAGE_SCALE
    return scaled


def max_levels(signal_length: int, base_filter_length: int) -> int:
    """
    Largest level j such that the upsampled filter fits in the signal.

    Equivalent to floor(log2((N - 1) / (L0 - 1))) + 1 for L0 >= 2 and N >= L0,
    capped at MAX_SAFE_SHIFT_BITS. Returns 0 when not even one level fits.

    A one-tap filter never grows with the level, so for L0 == 1 the bound is
    MAX_SAFE_SHIFT_BITS for every N >= 1 (including N == 1). There is no
    smaller fixed cap: a transform asked for its default depth with such a
    filter runs MAX_SAFE_SHIFT_BITS levels.
    """
    signal_length = int(signal_length)
    base_filter_length = int(base_filter_length)
    if signal_length < 1 or base_filter_length < 1:
        return 0
    if base_filter_length == 1:
        return MAX_SAFE_SHIFT_BITS
    if signal_length < base_filter_length:
        return 0
    # 2^(j-1) <= (N-1) // (L0-1)  <=>  j <= bit_length of the quotient
    quotient = (signal_length - 1) // (base_filter_length - 1)
    return min(quotient.bit_length(), MAX_SAFE_SHIFT_BITS)


class LevelFilterCache:
    """
    Lazily built (low, high) filter pairs keyed by level.

    Safe for concurrent use: the first thread to request a level builds it
    under a lock, later readers take the lock-free fast path. Cached arrays
    are read-only.
    """

    def __init__(self, base_low, base_high):
        self._base_low = base_low
        self._base_high = base_high
        self._filters: Dict[int, Tuple[np.ndarray, np.ndarray]] = {}
        self._lock = threading.Lock()

    def get(self, level: int) -> Tuple[np.ndarray, np.ndarray]:
        pair = self._filters.get(level)
        if pair is not None:
            return pair
        with self._lock:
            pair = self._filters.get(level)
            if pair is None:
                low = scale_filter(self._base_low, level)
                high = scale_filter(self._base_high, level)
                low.flags.writeable = False
                high.flags.writeable = False
                pair = (low, high)
                self._filters[level] = pair
        return pair

    def clear(self) -> None:
        with self._lock:
            self._filters.clear()

    def __contains__(self, level):
        return level in self._filters

    def __len__(self):
        return len(self._filters)
