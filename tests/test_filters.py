# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Scott Friedman and Project Contributors

"""
Tests for per-level filter scaling, the level bound and the filter cache.
"""

import numpy as np
import pytest
from concurrent.futures import ThreadPoolExecutor

from modwt_core import (
    MAX_SAFE_SHIFT_BITS,
    FilterOverflowError,
    ConfigurationError,
    SignalValidationError,
    LevelFilterCache,
    WaveletFilterPair,
    scale_filter,
    upsampled_length,
    max_levels
)


class TestScaleFilter:
    def test_level_one_scales_only(self):
        base = np.array([1.0, 2.0, 3.0, 4.0])
        scaled = scale_filter(base, 1)
        np.testing.assert_allclose(scaled, base / np.sqrt(2))

    def test_zero_insertion(self):
        base = np.array([1.0, -2.0, 3.0])
        scaled = scale_filter(base, 3)
        assert scaled.size == upsampled_length(3, 3) == 9
        np.testing.assert_allclose(scaled[::4], base / np.sqrt(2))
        mask = np.ones(scaled.size, dtype=bool)
        mask[::4] = False
        assert np.all(scaled[mask] == 0.0)

    def test_length_formula(self):
        for base_length in (1, 2, 4, 8, 16):
            for level in range(1, 12):
                taps = scale_filter(np.ones(base_length), level)
                assert taps.size == (base_length - 1) * 2 ** (level - 1) + 1

    def test_single_tap_filter(self):
        scaled = scale_filter([2.0], 7)
        assert scaled.shape == (1,)
        assert scaled[0] == pytest.approx(np.sqrt(2))

    def test_bit_identical_on_repeat(self):
        base = WaveletFilterPair.from_pywt("db4").decomp_low
        first = scale_filter(base, 5)
        second = scale_filter(base, 5)
        assert first is not second
        assert first.tobytes() == second.tobytes()

    def test_input_not_modified(self):
        base = np.array([0.5, 0.5])
        scale_filter(base, 4)
        np.testing.assert_array_equal(base, [0.5, 0.5])

    def test_invalid_inputs(self):
        with pytest.raises(SignalValidationError):
            scale_filter([], 1)
        with pytest.raises(SignalValidationError):
            scale_filter(np.ones((2, 2)), 1)
        with pytest.raises(SignalValidationError):
            scale_filter([1.0, 1.0], 0)

    def test_overflow_guard(self):
        with pytest.raises(FilterOverflowError):
            scale_filter([1.0, 1.0], MAX_SAFE_SHIFT_BITS + 1)
        with pytest.raises(FilterOverflowError):
            upsampled_length(2, MAX_SAFE_SHIFT_BITS + 5)
        # Overflow is a configuration problem for callers
        assert issubclass(FilterOverflowError, ConfigurationError)


class TestMaxLevels:
    @staticmethod
    def brute_force(n, base_length):
        level = 0
        while level < MAX_SAFE_SHIFT_BITS and (base_length - 1) * 2 ** level + 1 <= n:
            level += 1
        return level

    def test_matches_brute_force(self):
        for base_length in (2, 4, 6, 8, 12, 16, 20):
            for n in list(range(1, 200)) + [1000, 1024, 4097, 16384, 65536]:
                assert max_levels(n, base_length) == self.brute_force(n, base_length), (n, base_length)

    def test_closed_form(self):
        for base_length in (2, 8, 16):
            for n in (64, 100, 1000, 16384):
                expected = int(np.floor(np.log2((n - 1) / (base_length - 1)))) + 1
                assert max_levels(n, base_length) == expected

    def test_known_values(self):
        assert max_levels(8, 2) == 3
        assert max_levels(16384, 16) == 11
        assert max_levels(1024, 8) == 8

    def test_signal_shorter_than_filter(self):
        assert max_levels(7, 8) == 0
        assert max_levels(0, 2) == 0

    def test_identity_filter_capped(self):
        assert max_levels(10, 1) == MAX_SAFE_SHIFT_BITS

    def test_next_level_does_not_fit(self):
        n, base_length = 1000, 8
        j = max_levels(n, base_length)
        assert upsampled_length(base_length, j) <= n
        assert upsampled_length(base_length, j + 1) > n


class TestLevelFilterCache:
    @pytest.fixture
    def pair(self):
        return WaveletFilterPair.from_pywt("db2")

    def test_lazy_population(self, pair):
        cache = LevelFilterCache(pair.decomp_low, pair.decomp_high)
        assert len(cache) == 0
        low, high = cache.get(3)
        assert 3 in cache
        assert 2 not in cache
        np.testing.assert_array_equal(low, scale_filter(pair.decomp_low, 3))
        np.testing.assert_array_equal(high, scale_filter(pair.decomp_high, 3))

    def test_returns_same_arrays(self, pair):
        cache = LevelFilterCache(pair.decomp_low, pair.decomp_high)
        assert cache.get(2)[0] is cache.get(2)[0]

    def test_cached_arrays_are_read_only(self, pair):
        cache = LevelFilterCache(pair.decomp_low, pair.decomp_high)
        low, high = cache.get(1)
        with pytest.raises(ValueError):
            low[0] = 1.0
        with pytest.raises(ValueError):
            high[0] = 1.0

    def test_clear(self, pair):
        cache = LevelFilterCache(pair.decomp_low, pair.decomp_high)
        cache.get(1)
        cache.get(2)
        cache.clear()
        assert len(cache) == 0

    def test_concurrent_population(self, pair):
        cache = LevelFilterCache(pair.decomp_low, pair.decomp_high)
        levels = [1 + (i % 6) for i in range(240)]

        with ThreadPoolExecutor(max_workers=16) as pool:
            results = list(pool.map(cache.get, levels))

        assert len(cache) == 6
        for level, (low, high) in zip(levels, results):
            cached_low, cached_high = cache.get(level)
            assert low is cached_low
            assert high is cached_high
