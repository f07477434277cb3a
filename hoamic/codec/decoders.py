"""
Virtual Microphone Decoding Module

This module renders an ACN/SN3D ambisonic bundle to a single output channel
emulating a virtual microphone aimed at a chosen direction. The polar
pattern is a linear blend between the omnidirectional channel and the sum of
the directional channels:

    out = b[0] * Y[0] * (1 - p) + p * sum(b[i] * Y[i] for i in 1..N-1)

where Y is the coefficient vector evaluated at the microphone direction.
p = 0 gives pure omni pickup, p = 1 the pure directional pattern. Values of
p outside [0, 1] are not rejected; they extrapolate past either extreme.
"""

import numpy as np
from typing import Optional, Tuple, Union

from .config import channel_count, validate_order
from .exceptions import ConfigurationError, ValidationError
from .math_utils import get_coefficients
from .utils import Angle, order_from_channel_count


def _check_bundle(bundle: np.ndarray, order: int) -> Tuple[np.ndarray, int]:
    """Validate an ambisonic bundle against a decode order and return its active channels."""
    n_channels = channel_count(order)

    bundle = np.asarray(bundle, dtype=np.float64)
    if bundle.ndim not in (1, 2):
        raise ValidationError(f"Ambisonic bundle must be 1-D or 2-D, got shape {bundle.shape}")

    bundle_order = order_from_channel_count(bundle.shape[0])
    if bundle_order < order:
        raise ConfigurationError(f"Decode order {order} exceeds the order {bundle_order} of the ambisonic bundle")

    return bundle[:n_channels], n_channels


def _mix(bundle: np.ndarray, coefficients: np.ndarray, pattern: float) -> Union[float, np.ndarray]:
    omni = bundle[0] * coefficients[0] * (1.0 - pattern)
    directional = np.tensordot(coefficients[1:], bundle[1:], axes=(0, 0))
    return omni + pattern * directional


def virtual_mic_weights(azimuth: float, elevation: float, pattern: float, order: int) -> np.ndarray:
    """
    Per-channel gains of a virtual microphone.

    Args:
        azimuth: Microphone azimuth in radians
        elevation: Microphone elevation in radians
        pattern: 0 = omnidirectional, 1 = pure directional
        order: Ambisonic order, 1..7

    Returns:
        Weights of shape ((order+1)²,); decoding is the dot product of
        these weights with the bundle
    """
    n_channels = channel_count(order)
    weights = get_coefficients(azimuth, elevation)[:n_channels].copy()
    weights[0] *= (1.0 - pattern)
    weights[1:] *= pattern
    return weights


def decode(bundle: np.ndarray, azimuth: float, elevation: float, pattern: float, order: int) -> float:
    """
    Decode one ambisonic sample with a virtual microphone.

    The bundle may have been encoded from any direction; the coefficients
    are evaluated at the microphone direction.

    Args:
        bundle: Ambisonic sample, shape (n_channels,) with at least (order+1)² channels
        azimuth: Microphone azimuth in radians
        elevation: Microphone elevation in radians
        pattern: 0 = omnidirectional, 1 = pure directional
        order: Decode order, 1..7

    Returns:
        The microphone output sample

    Raises:
        ConfigurationError: If order is outside 1..7 or above the bundle's order
        ValidationError: If the bundle is not a complete ACN bundle
    """
    bundle, n_channels = _check_bundle(bundle, order)
    if bundle.ndim != 1:
        raise ValidationError(f"Expected a single ambisonic sample, got shape {bundle.shape}; use decode_block")

    coefficients = get_coefficients(azimuth, elevation)[:n_channels]
    return float(_mix(bundle, coefficients, pattern))


def decode_sample(sample: float, azimuth: float, elevation: float, pattern: float, order: int) -> float:
    """
    Encode and decode a single source sample at one shared direction.

    Models a virtual microphone aimed exactly at a known point source: the
    coefficient vector is evaluated once and used on both sides.

    Args:
        sample: Source sample
        azimuth: Source and microphone azimuth in radians
        elevation: Source and microphone elevation in radians
        pattern: 0 = omnidirectional, 1 = pure directional
        order: Ambisonic order, 1..7
    """
    n_channels = channel_count(order)
    coefficients = get_coefficients(azimuth, elevation)[:n_channels]
    return float(_mix(sample * coefficients, coefficients, pattern))


def decode_block(ambi_signals: np.ndarray, azimuth: float, elevation: float, pattern: float,
                 order: Optional[int] = None, coefficients: Optional[np.ndarray] = None) -> np.ndarray:
    """
    Decode a block of ambisonic signals with a fixed virtual microphone.

    Args:
        ambi_signals: Ambisonic signals, shape (n_channels, n_samples)
        azimuth: Microphone azimuth in radians
        elevation: Microphone elevation in radians
        pattern: 0 = omnidirectional, 1 = pure directional
        order: Decode order; defaults to the order of the bundle
        coefficients: Pre-computed coefficient vector for the microphone direction

    Returns:
        Microphone signal, shape (n_samples,)
    """
    ambi_signals = np.asarray(ambi_signals)
    if ambi_signals.ndim != 2:
        raise ValidationError(f"Ambisonic signals must have shape (n_channels, n_samples), got {ambi_signals.shape}")

    if order is None:
        order = order_from_channel_count(ambi_signals.shape[0])
    validate_order(order)

    bundle, n_channels = _check_bundle(ambi_signals, order)
    if coefficients is None:
        coefficients = get_coefficients(azimuth, elevation)
    elif len(coefficients) < n_channels:
        raise ValidationError(f"Need {n_channels} coefficients for order {order}, got {len(coefficients)}")

    return _mix(bundle, coefficients[:n_channels], pattern)


def polar_response(bundle: np.ndarray, azimuths: Angle, elevations: Angle, pattern: float,
                   order: int) -> np.ndarray:
    """
    Decode one ambisonic sample for many microphone directions at once.

    Args:
        bundle: Ambisonic sample, shape (n_channels,)
        azimuths: Microphone azimuths in radians
        elevations: Microphone elevations in radians, broadcast against azimuths
        pattern: 0 = omnidirectional, 1 = pure directional
        order: Decode order, 1..7

    Returns:
        Microphone output for each direction, with the broadcast angle shape
    """
    bundle, n_channels = _check_bundle(bundle, order)
    if bundle.ndim != 1:
        raise ValidationError(f"Expected a single ambisonic sample, got shape {bundle.shape}")

    coefficients = get_coefficients(azimuths, elevations)[:n_channels]
    omni = bundle[0] * coefficients[0] * (1.0 - pattern)
    directional = np.tensordot(bundle[1:], coefficients[1:], axes=(0, 0))
    return omni + pattern * directional
