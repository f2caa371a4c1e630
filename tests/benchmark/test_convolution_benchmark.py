# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Scott Friedman and Project Contributors

"""
Tests for the direct vs FFT convolution benchmark.
"""

import os
import sys
import json
import pytest

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "../..")))

from benchmark.convolution_benchmark import (
    ConvolutionBenchmarkResult,
    run_convolution_benchmark,
    run_transform_benchmark,
    save_results,
    load_results,
    main
)
from modwt_core import FFTHeuristics


class TestConvolutionBenchmark:
    """Smoke tests on small sizes."""

    @pytest.fixture
    def results(self):
        return run_convolution_benchmark([256, 2048], wavelet="db4", repeats=1)

    def test_every_legal_level_measured(self, results):
        # db4 has 8 taps: 6 levels fit in 256 samples, 9 in 2048
        assert len(results) == 6 + 9
        assert {r.signal_length for r in results} == {256, 2048}

    def test_paths_agree(self, results):
        for result in results:
            assert result.max_abs_difference < 1e-9
            assert result.direct_time >= 0.0
            assert result.fft_time >= 0.0

    def test_fft_selection_follows_heuristic(self, results):
        for result in results:
            expected = FFTHeuristics.defaults().should_use_fft(result.signal_length, result.filter_length)
            assert result.fft_selected == expected
        assert not any(r.fft_selected for r in results if r.signal_length == 256)
        assert any(r.fft_selected for r in results if r.signal_length == 2048)

    def test_illegal_levels_skipped(self):
        results = run_convolution_benchmark([256], wavelet="db4", levels=[1, 40], repeats=1)
        assert [r.level for r in results] == [1]

    def test_result_serialization(self, results, temp_output_dir):
        output_file = temp_output_dir / "nested" / "results.json"
        save_results(results, str(output_file))

        with open(output_file) as f:
            raw = json.load(f)
        assert len(raw) == len(results)
        assert "speedup" in raw[0]

        loaded = load_results(str(output_file))
        assert [r.to_dict() for r in loaded] == [r.to_dict() for r in results]

    def test_speedup(self):
        result = ConvolutionBenchmarkResult("db4", 1024, 3, 29, 2.0, 0.5, 0.0, False)
        assert result.speedup == 4.0
        result.fft_time = 0.0
        assert result.speedup == float("inf")

    def test_transform_benchmark(self):
        timings = run_transform_benchmark(2048, repeats=1)
        assert set(timings) == {"auto", "direct_only"}

    def test_main(self, temp_output_dir):
        output_file = temp_output_dir / "cli.json"
        exit_code = main(["--sizes", "128", "--wavelet", "haar", "--repeats", "1",
                          "--output", str(output_file), "--log-level", "WARNING",
                          "--round-trip", "256"])
        assert exit_code == 0
        # haar fits 7 levels in 128 samples
        assert len(load_results(str(output_file))) == 7
