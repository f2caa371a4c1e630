# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Scott Friedman and Project Contributors

"""
Plotting helpers for MODWT decompositions.
"""

import numpy as np
import matplotlib.pyplot as plt
from typing import Optional, Tuple

from .coefficients import MultiLevelCoefficients


def plot_decomposition(signal, coeffs: MultiLevelCoefficients,
                       title: Optional[str] = None,
                       output_file: Optional[str] = None,
                       figsize: Tuple[int, int] = (12, 8),
                       show: bool = False):
    """
    Plot the original signal, the final approximation and every detail band.

    Args:
        signal: Original signal
        coeffs: Decomposition of ``signal``
        title: Title for the top panel
        output_file: Save the figure here when given
        figsize: Figure size
        show: Call plt.show() after drawing

    Returns:
        matplotlib.figure.Figure: The figure (levels + 2 stacked panels)
    """
    levels = coeffs.levels
    fig, axes = plt.subplots(levels + 2, 1, figsize=figsize, sharex=True)

    axes[0].plot(np.asarray(signal))
    axes[0].set_title(title or 'Original Signal')
    axes[0].grid(True)

    axes[1].plot(coeffs.approximation)
    axes[1].set_title(f'Scaling Coefficients (Level {levels})')
    axes[1].grid(True)

    for level in range(1, levels + 1):
        ax = axes[level + 1]
        ax.plot(coeffs.get_detail(level))
        ax.set_title(f'Wavelet Coefficients (Level {level})')
        ax.grid(True)

    fig.tight_layout()
    if output_file:
        fig.savefig(output_file, dpi=300, bbox_inches='tight')
    if show:
        plt.show()
    return fig
