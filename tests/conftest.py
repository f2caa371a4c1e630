# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Scott Friedman and Project Contributors

"""
Global pytest configuration.
"""

import os
import sys
import numpy as np
import pytest

# Add the project root to the Python path so tests can import modules properly
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

# Plots are drawn off-screen
os.environ.setdefault("MPLBACKEND", "Agg")


def brute_force_filter(signal, taps, index_map, direction):
    """Reference loop: out[t] = sum_l f[l] * x[map(t + direction * l)], None means zero."""
    n = len(signal)
    out = np.zeros(n)
    for t in range(n):
        total = 0.0
        for lag, tap in enumerate(taps):
            k = index_map(t + direction * lag, n)
            if k is not None:
                total += tap * signal[k]
        out[t] = total
    return out


def periodic_map(pos, n):
    return pos % n


def zero_padding_map(pos, n):
    return pos if 0 <= pos < n else None


def symmetric_map(pos, n):
    m = pos % (2 * n)
    return 2 * n - 1 - m if m >= n else m


@pytest.fixture
def rng():
    """Seeded random generator."""
    return np.random.default_rng(1234)


@pytest.fixture
def sine_signal():
    """Two-tone sine sampled at 512 points."""
    t = np.linspace(0, 1, 512, endpoint=False)
    return np.sin(2 * np.pi * 5 * t) + 0.5 * np.sin(2 * np.pi * 40 * t)


@pytest.fixture
def temp_output_dir(tmp_path):
    """Fixture to provide a temporary directory for test outputs."""
    output_dir = tmp_path / "output"
    output_dir.mkdir()
    return output_dir
