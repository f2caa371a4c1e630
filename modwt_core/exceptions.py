# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Scott Friedman and Project Contributors

"""
Exception types raised by the MODWT engine.

All errors derive from ValueError so callers that already guard transform
calls with ``except ValueError`` keep working.
"""


class ModwtError(ValueError):
    """Base class for all MODWT engine errors."""


class SignalValidationError(ModwtError):
    """Raised for empty, non-finite or malformed input data."""


class ConfigurationError(ModwtError):
    """Raised when a transform is configured or invoked inconsistently."""


class FilterOverflowError(ConfigurationError):
    """Raised when filter upsampling would exceed the safe shift width."""
