"""
MODWT Core

This package provides the maximal overlap discrete wavelet transform
engine: a redundant, shift-invariant multi-resolution decomposition
(one approximation band plus one detail band per level, each as long as
the input) and its exact inverse.

Key components:
- Per-level a trous filter scaling with a concurrent level cache
- Direct convolution under periodic, zero-padding and symmetric boundaries
- FFT circular convolution with a tunable dispatch heuristic
- Multi-level cascade with level-bound validation

Plotting helpers live in ``modwt_core.visualization`` (requires matplotlib).
"""

from .exceptions import (
    ModwtError,
    SignalValidationError,
    ConfigurationError,
    FilterOverflowError
)

from .wavelets import (
    WaveletFamily,
    WaveletFilterPair,
    get_wavelet,
    haar
)

from .filters import (
    MAX_SAFE_SHIFT_BITS,
    LevelFilterCache,
    scale_filter,
    upsampled_length
)

from .convolution import (
    BoundaryMode,
    BoundaryConvolver,
    convolve_periodic,
    convolve_zero_padding,
    convolve_symmetric,
    correlate_periodic,
    correlate_zero_padding,
    correlate_symmetric
)

from .heuristics import (
    FFTHeuristics,
    should_use_fft
)

from .fft_convolution import (
    CircularConvolutionEngine,
    circular_convolve_fft,
    circular_correlate_fft
)

from .coefficients import MultiLevelCoefficients

from .modwt import (
    FFTMode,
    MaximalOverlapDWT,
    forward,
    inverse,
    max_levels
)

from .log import configure_logging

# Version information
__version__ = '0.1.0'
