# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Scott Friedman and Project Contributors

"""
Unit tests for wavelet filter pairs.
"""

import unittest
import numpy as np
import pywt

from modwt_core import (
    ConfigurationError,
    SignalValidationError,
    WaveletFamily,
    WaveletFilterPair,
    get_wavelet,
    haar
)
from modwt_core.wavelets import resolve_wavelet


class TestWaveletFilterPair(unittest.TestCase):
    """Test construction and lookup of filter pairs."""

    def test_haar(self):
        pair = haar()
        self.assertEqual(pair.name, "haar")
        self.assertEqual(pair.filter_length, 2)
        np.testing.assert_allclose(pair.decomp_low, [1 / np.sqrt(2)] * 2)
        np.testing.assert_allclose(pair.decomp_high, [1 / np.sqrt(2), -1 / np.sqrt(2)])
        self.assertTrue(pair.is_orthogonal)

    def test_orthogonal_quadrature_mirror(self):
        h = pywt.Wavelet("db2").dec_lo
        pair = WaveletFilterPair.orthogonal(h, name="db2-custom")
        L = len(h)
        for i in range(L):
            self.assertAlmostEqual(pair.decomp_high[i], (-1) ** i * h[L - 1 - i])
        np.testing.assert_array_equal(pair.recon_low, pair.decomp_low)
        # Low-pass sums to sqrt(2), high-pass to zero
        self.assertAlmostEqual(pair.decomp_low.sum(), np.sqrt(2))
        self.assertAlmostEqual(pair.decomp_high.sum(), 0.0)

    def test_from_pywt_orthogonal(self):
        for name in ("db4", "sym4", "coif1"):
            pair = WaveletFilterPair.from_pywt(name)
            wavelet = pywt.Wavelet(name)
            self.assertEqual(pair.filter_length, wavelet.dec_len)
            np.testing.assert_allclose(pair.decomp_low, wavelet.dec_lo)
            np.testing.assert_allclose(pair.recon_low, wavelet.rec_lo[::-1])
            self.assertTrue(pair.is_orthogonal)

    def test_from_pywt_biorthogonal(self):
        pair = WaveletFilterPair.from_pywt("bior2.2")
        self.assertFalse(pair.is_orthogonal)
        self.assertEqual(pair.name, "bior2.2")

    def test_unknown_name(self):
        with self.assertRaises(ConfigurationError):
            WaveletFilterPair.from_pywt("not-a-wavelet")

    def test_invalid_taps(self):
        with self.assertRaises(SignalValidationError):
            WaveletFilterPair([], [1.0], [1.0], [1.0])
        with self.assertRaises(SignalValidationError):
            WaveletFilterPair([np.nan, 1.0], [1.0, 1.0], [1.0, 1.0], [1.0, 1.0])

    def test_taps_are_read_only(self):
        pair = WaveletFilterPair.from_pywt("db2")
        with self.assertRaises(ValueError):
            pair.decomp_low[0] = 0.0

    def test_get_wavelet(self):
        self.assertEqual(get_wavelet(WaveletFamily.HAAR).filter_length, 2)
        self.assertEqual(get_wavelet(WaveletFamily.DAUBECHIES, 4).name, "db4")
        self.assertEqual(get_wavelet(WaveletFamily.SYMLET, 8).filter_length, 16)
        self.assertEqual(get_wavelet(WaveletFamily.COIFLET, 2).name, "coif2")
        self.assertEqual(get_wavelet(WaveletFamily.BIORTHOGONAL, "3.5").name, "bior3.5")
        self.assertEqual(get_wavelet(WaveletFamily.MEYER).name, "dmey")

    def test_exact_wavelets_validate(self):
        for name in ("haar", "db4", "sym4", "coif1", "bior2.2", "bior3.5", "rbio1.3"):
            pair = resolve_wavelet(name)
            self.assertTrue(pair.validate_perfect_reconstruction(), name)
            self.assertLess(pair.perfect_reconstruction_error(), 1e-10, name)

    def test_reconstruction_kernel_is_unit_impulse(self):
        pair = WaveletFilterPair.from_pywt("bior2.2")
        kernel, centre = pair.reconstruction_kernel()
        expected = np.zeros_like(kernel)
        expected[centre] = 1.0
        np.testing.assert_allclose(kernel, expected, atol=1e-12)

    def test_meyer_is_approximate(self):
        pair = get_wavelet(WaveletFamily.MEYER)
        self.assertTrue(pair.is_orthogonal)
        self.assertFalse(pair.validate_perfect_reconstruction(1e-10))
        self.assertGreater(pair.perfect_reconstruction_error(), 1e-6)

    def test_broken_filters_fail_validation(self):
        h = np.array(pywt.Wavelet("db2").dec_lo)
        perturbed = h.copy()
        perturbed[1] += 1e-3
        self.assertFalse(WaveletFilterPair.orthogonal(perturbed).validate_perfect_reconstruction())
        # Right shape, wrong normalisation
        self.assertFalse(WaveletFilterPair.orthogonal([1.0, 1.0]).validate_perfect_reconstruction())
        # Synthesis taps that do not invert the analysis
        db2 = WaveletFilterPair.from_pywt("db2")
        mismatched = WaveletFilterPair(db2.decomp_low, db2.decomp_high,
                                       db2.decomp_low[::-1], db2.decomp_high[::-1])
        self.assertFalse(mismatched.validate_perfect_reconstruction())

    def test_loose_tolerance_accepts_small_errors(self):
        h = np.array(pywt.Wavelet("db2").dec_lo)
        h[0] += 1e-9
        pair = WaveletFilterPair.orthogonal(h)
        self.assertFalse(pair.validate_perfect_reconstruction())
        self.assertTrue(pair.validate_perfect_reconstruction(tolerance=1e-6))

    def test_resolve_wavelet(self):
        pair = haar()
        self.assertIs(resolve_wavelet(pair), pair)
        self.assertEqual(resolve_wavelet("HAAR").name, "haar")
        self.assertEqual(resolve_wavelet("db3").filter_length, 6)
        self.assertEqual(resolve_wavelet(WaveletFamily.DAUBECHIES).name, "db4")
        with self.assertRaises(ConfigurationError):
            resolve_wavelet(42)


if __name__ == "__main__":
    unittest.main()
