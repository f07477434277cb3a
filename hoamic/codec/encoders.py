"""
Encoding Functions

This module contains functions for encoding a mono signal into an ACN/SN3D
ambisonic bundle representing a point source at a given direction.
"""

import numpy as np
from typing import Optional

from .config import channel_count, validate_order
from .exceptions import ValidationError
from .math_utils import get_coefficients
from .utils import Angle, CartesianCoord, Direction


def encode(sample: float, azimuth: Angle, elevation: Angle, order: int) -> np.ndarray:
    """
    Encode one sample of a point source into ambisonic channels.

    Args:
        sample: Input sample
        azimuth: Source azimuth in radians, positive towards the left
        elevation: Source elevation in radians
        order: Ambisonic order, 1..7

    Returns:
        Ambisonic sample of shape ((order+1)²,), channel i = sample * coefficient i

    Raises:
        ConfigurationError: If order is outside 1..7
    """
    n_channels = channel_count(order)
    return sample * get_coefficients(azimuth, elevation)[:n_channels]


def encode_direction_vector(sample: float, vector: CartesianCoord, order: int) -> np.ndarray:
    """
    Encode one sample of a point source given as a direction vector.

    Args:
        sample: Input sample
        vector: (x, y, z) with x front, y left, z up; need not be normalized
        order: Ambisonic order, 1..7
    """
    validate_order(order)
    direction = Direction.from_vector(*vector)
    return encode(sample, direction.azimuth, direction.elevation, order)


def encode_mono_source(audio: np.ndarray, azimuth: float, elevation: float, order: int,
                       coefficients: Optional[np.ndarray] = None) -> np.ndarray:
    """
    Encode a block of mono audio from a fixed direction into ambisonic signals.

    The direction is held constant across the block, so the coefficient
    vector is evaluated once.

    Args:
        audio: Mono audio signal, shape (n_samples,)
        azimuth: Source azimuth in radians
        elevation: Source elevation in radians
        order: Ambisonic order, 1..7
        coefficients: Pre-computed coefficient vector for this direction, at
            least (order+1)² entries long

    Returns:
        Ambisonic signals, shape ((order+1)², n_samples)
    """
    n_channels = channel_count(order)

    audio = np.asarray(audio)
    if audio.ndim != 1:
        raise ValidationError(f"Mono audio must be one-dimensional, got shape {audio.shape}")

    if coefficients is None:
        coefficients = get_coefficients(azimuth, elevation)
    elif len(coefficients) < n_channels:
        raise ValidationError(f"Need {n_channels} coefficients for order {order}, got {len(coefficients)}")

    return np.outer(coefficients[:n_channels], audio)
