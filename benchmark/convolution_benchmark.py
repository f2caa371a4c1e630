#!/usr/bin/env python3
# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Scott Friedman and Project Contributors

"""
Direct vs FFT periodic convolution benchmark for the MODWT engine.
Times both paths on upsampled wavelet filters, records their numerical
agreement and whether the dispatch heuristic would choose the FFT.
"""

import argparse
import json
import logging
import os
import sys
import time
import numpy as np
from pathlib import Path
from datetime import datetime
from typing import Dict, List, Optional, Any

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.append(str(project_root))

from modwt_core import (
    FFTHeuristics,
    MaximalOverlapDWT,
    WaveletFilterPair,
    CircularConvolutionEngine,
    configure_logging,
    convolve_periodic,
    scale_filter,
    max_levels
)

logger = logging.getLogger("ConvolutionBenchmark")


class ConvolutionBenchmarkResult:
    """Container for one (signal length, level) measurement."""

    def __init__(self,
                 wavelet: str,
                 signal_length: int,
                 level: int,
                 filter_length: int,
                 direct_time: float,
                 fft_time: float,
                 max_abs_difference: float,
                 fft_selected: bool):
        """
        Initialize benchmark result.

        Args:
            wavelet: Wavelet name
            signal_length: Signal length N
            level: Decomposition level whose filter was used
            filter_length: Effective filter length L at that level
            direct_time: Best direct convolution time in seconds
            fft_time: Best FFT convolution time in seconds
            max_abs_difference: Largest elementwise difference between paths
            fft_selected: Whether the dispatch heuristic picks the FFT
        """
        self.wavelet = wavelet
        self.signal_length = signal_length
        self.level = level
        self.filter_length = filter_length
        self.direct_time = direct_time
        self.fft_time = fft_time
        self.max_abs_difference = max_abs_difference
        self.fft_selected = fft_selected
        self.timestamp = datetime.now().isoformat()

    @property
    def speedup(self) -> float:
        """Direct time divided by FFT time."""
        return self.direct_time / self.fft_time if self.fft_time > 0 else float("inf")

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary for serialization."""
        return {
            "wavelet": self.wavelet,
            "signal_length": self.signal_length,
            "level": self.level,
            "filter_length": self.filter_length,
            "direct_time": self.direct_time,
            "fft_time": self.fft_time,
            "speedup": self.speedup,
            "max_abs_difference": self.max_abs_difference,
            "fft_selected": self.fft_selected,
            "timestamp": self.timestamp
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ConvolutionBenchmarkResult':
        """Create result from dictionary."""
        result = cls(
            wavelet=data["wavelet"],
            signal_length=data["signal_length"],
            level=data["level"],
            filter_length=data["filter_length"],
            direct_time=data["direct_time"],
            fft_time=data["fft_time"],
            max_abs_difference=data["max_abs_difference"],
            fft_selected=data["fft_selected"]
        )
        result.timestamp = data.get("timestamp", result.timestamp)
        return result


def _best_time(func, repeats: int) -> float:
    best = float("inf")
    for _ in range(repeats):
        start = time.perf_counter()
        func()
        best = min(best, time.perf_counter() - start)
    return best


def run_convolution_benchmark(signal_lengths: List[int],
                              wavelet: str = "db8",
                              levels: Optional[List[int]] = None,
                              repeats: int = 3,
                              heuristics: Optional[FFTHeuristics] = None,
                              seed: int = 42) -> List[ConvolutionBenchmarkResult]:
    """
    Benchmark direct and FFT periodic convolution.

    Args:
        signal_lengths: Signal lengths to test
        wavelet: PyWavelets name of the wavelet whose low-pass filter is used
        levels: Levels to test (default: every legal level per length)
        repeats: Timing repetitions; the best time is kept
        heuristics: Dispatch thresholds used for the 'fft_selected' column
        seed: Random seed for the test signals

    Returns:
        List of results, one per (length, level)
    """
    pair = WaveletFilterPair.from_pywt(wavelet)
    heuristics = heuristics or FFTHeuristics.defaults()
    engine = CircularConvolutionEngine()
    rng = np.random.default_rng(seed)
    results = []

    for n in signal_lengths:
        signal = rng.standard_normal(n)
        legal = range(1, max_levels(n, pair.filter_length) + 1)
        for level in (levels or legal):
            if level not in legal:
                logger.warning(f"Skipping level {level} for N={n}: outside 1..{len(legal)}")
                continue
            taps = scale_filter(pair.decomp_low, level)

            direct = convolve_periodic(signal, taps)
            via_fft = engine.convolve(signal, taps)
            result = ConvolutionBenchmarkResult(
                wavelet=pair.name,
                signal_length=n,
                level=level,
                filter_length=taps.size,
                direct_time=_best_time(lambda: convolve_periodic(signal, taps), repeats),
                fft_time=_best_time(lambda: engine.convolve(signal, taps), repeats),
                max_abs_difference=float(np.max(np.abs(direct - via_fft))),
                fft_selected=heuristics.should_use_fft(n, taps.size)
            )
            logger.info(f"N={n} level={level} L={taps.size}: direct {result.direct_time:.6f}s, "
                        f"fft {result.fft_time:.6f}s, diff {result.max_abs_difference:.2e}")
            results.append(result)

    return results


def run_transform_benchmark(signal_length: int, wavelet: str = "db4",
                            repeats: int = 3, seed: int = 42) -> Dict[str, float]:
    """Time a full forward+inverse MODWT round trip with and without FFT dispatch."""
    signal = np.random.default_rng(seed).standard_normal(signal_length)
    timings = {}
    for label, heuristics in (("auto", FFTHeuristics.defaults()),
                              ("direct_only", FFTHeuristics(min_n=signal_length + 1))):
        transform = MaximalOverlapDWT(wavelet, fft_heuristics=heuristics)
        timings[label] = _best_time(lambda: transform.inverse(transform.forward(signal)), repeats)
    return timings


def save_results(results: List[ConvolutionBenchmarkResult], output_file: str) -> None:
    """Write results as a JSON list."""
    os.makedirs(os.path.dirname(os.path.abspath(output_file)), exist_ok=True)
    with open(output_file, "w") as f:
        json.dump([r.to_dict() for r in results], f, indent=2)


def load_results(input_file: str) -> List[ConvolutionBenchmarkResult]:
    """Read results written by save_results."""
    with open(input_file, "r") as f:
        return [ConvolutionBenchmarkResult.from_dict(d) for d in json.load(f)]


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Direct vs FFT periodic convolution benchmark for the MODWT engine")
    parser.add_argument("--sizes", type=int, nargs="+", default=[1024, 4096, 16384], help="Signal lengths to test")
    parser.add_argument("--wavelet", type=str, default="db8", help="PyWavelets wavelet name")
    parser.add_argument("--levels", type=int, nargs="*", default=None, help="Levels to test (default: all legal levels)")
    parser.add_argument("--repeats", type=int, default=3, help="Timing repetitions per measurement")
    parser.add_argument("--output", type=str, default="results/convolution_benchmark.json", help="Output JSON file")
    parser.add_argument("--log-level", type=str, default=None, help="Logging level (default: MODWT_LOG_LEVEL or INFO)")
    parser.add_argument("--round-trip", type=int, default=None, help="Also time a full forward+inverse transform of this length")

    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    results = run_convolution_benchmark(
        args.sizes,
        wavelet=args.wavelet,
        levels=args.levels,
        repeats=args.repeats,
        heuristics=FFTHeuristics.from_env()
    )
    save_results(results, args.output)
    logger.info(f"Wrote {len(results)} results to {args.output}")
    if args.round_trip:
        timings = run_transform_benchmark(args.round_trip, repeats=args.repeats)
        for label, seconds in timings.items():
            logger.info(f"Round trip N={args.round_trip} ({label}): {seconds:.6f}s")
    return 0


if __name__ == "__main__":
    sys.exit(main())
