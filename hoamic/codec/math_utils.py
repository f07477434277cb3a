"""
Spherical Harmonic Coefficient Engine

This module computes the real ACN/SN3D spherical harmonic gains up to 7th
order (64 channels) as closed-form functions of azimuth and elevation.

Each entry of the coefficient vector at ACN index n, degree l and suborder m
is the product of an elevation term, a fixed polynomial in sin(elevation)
and cos(elevation) looked up by (l, |m|), and an azimuth term:

    cos(m * azimuth)     for m > 0
    sin(|m| * azimuth)   for m < 0
    1                    for m = 0

The elevation polynomials are written out explicitly per degree and must
match the published SN3D table; do not algebraically rearrange them.

A generic evaluator built on scipy's associated Legendre functions is
provided alongside for verification of the closed-form table.

See Also:
    - utils: For ACN index helpers and channel aliases
    - encoders, decoders: The consumers of the coefficient vector
"""

import math
import functools
from typing import Callable, Dict, Tuple, Union

import numpy as np
from scipy import special

from .config import MAX_ORDER, NUM_COEFFICIENTS, validate_order
from .exceptions import MathError, ValidationError
from .utils import Angle, acn_index, channel_from_label

# Cache size for factorial memoization
_FACTORIAL_CACHE_SIZE = 50

ElevationTerm = Callable[[Angle, Angle], Angle]

# Elevation polynomials keyed by (degree, |suborder|); s = sin(elevation), c = cos(elevation)
SN3D_ELEVATION_TERMS: Dict[Tuple[int, int], ElevationTerm] = {
    # 0th order
    (0, 0): lambda s, c: np.ones_like(s),

    # 1st order
    (1, 0): lambda s, c: s,
    (1, 1): lambda s, c: c,

    # 2nd order
    (2, 0): lambda s, c: 0.5 * (3 * s**2 - 1),
    (2, 1): lambda s, c: math.sqrt(3) * c * s,
    (2, 2): lambda s, c: (math.sqrt(3) / 2) * c**2,

    # 3rd order
    (3, 0): lambda s, c: 0.5 * s * (5 * s**2 - 3),
    (3, 1): lambda s, c: math.sqrt(3 / 8) * c * (5 * s**2 - 1),
    (3, 2): lambda s, c: (math.sqrt(15) / 2) * c**2 * s,
    (3, 3): lambda s, c: math.sqrt(5 / 8) * c**3,

    # 4th order
    (4, 0): lambda s, c: (35 * s**4 - 30 * s**2 + 3) / 8,
    (4, 1): lambda s, c: (math.sqrt(10) / 4) * c * s * (7 * s**2 - 3),
    (4, 2): lambda s, c: (math.sqrt(5) / 4) * c**2 * (7 * s**2 - 1),
    (4, 3): lambda s, c: (math.sqrt(70) / 4) * c**3 * s,
    (4, 4): lambda s, c: (math.sqrt(35) / 8) * c**4,

    # 5th order
    (5, 0): lambda s, c: s * (63 * s**4 - 70 * s**2 + 15) / 8,
    (5, 1): lambda s, c: (math.sqrt(15) / 8) * c * (21 * s**4 - 14 * s**2 + 1),
    (5, 2): lambda s, c: (math.sqrt(105) / 4) * c**2 * s * (3 * s**2 - 1),
    (5, 3): lambda s, c: (math.sqrt(70) / 16) * c**3 * (9 * s**2 - 1),
    (5, 4): lambda s, c: (3 * math.sqrt(35) / 8) * c**4 * s,
    (5, 5): lambda s, c: (3 * math.sqrt(14) / 16) * c**5,

    # 6th order
    (6, 0): lambda s, c: (231 * s**6 - 315 * s**4 + 105 * s**2 - 5) / 16,
    (6, 1): lambda s, c: (math.sqrt(21) / 8) * c * s * (33 * s**4 - 30 * s**2 + 5),
    (6, 2): lambda s, c: (math.sqrt(210) / 32) * c**2 * (33 * s**4 - 18 * s**2 + 1),
    (6, 3): lambda s, c: (math.sqrt(210) / 16) * c**3 * s * (11 * s**2 - 3),
    (6, 4): lambda s, c: (3 * math.sqrt(7) / 16) * c**4 * (11 * s**2 - 1),
    (6, 5): lambda s, c: (3 * math.sqrt(154) / 16) * c**5 * s,
    (6, 6): lambda s, c: (math.sqrt(462) / 32) * c**6,

    # 7th order
    (7, 0): lambda s, c: s * (429 * s**6 - 693 * s**4 + 315 * s**2 - 35) / 16,
    (7, 1): lambda s, c: (math.sqrt(7) / 32) * c * (429 * s**6 - 495 * s**4 + 135 * s**2 - 5),
    (7, 2): lambda s, c: (math.sqrt(42) / 32) * c**2 * s * (143 * s**4 - 110 * s**2 + 15),
    (7, 3): lambda s, c: (math.sqrt(21) / 32) * c**3 * (143 * s**4 - 66 * s**2 + 3),
    (7, 4): lambda s, c: (math.sqrt(231) / 16) * c**4 * s * (13 * s**2 - 3),
    (7, 5): lambda s, c: (math.sqrt(231) / 32) * c**5 * (13 * s**2 - 1),
    (7, 6): lambda s, c: (math.sqrt(6006) / 32) * c**6 * s,
    (7, 7): lambda s, c: (math.sqrt(429) / 32) * c**7,
}


def _build_acn_table() -> Tuple[Tuple[int, int, int], ...]:
    """(acn, degree, suborder) rows for all channels up to MAX_ORDER, in ACN order."""
    rows = []
    for l in range(MAX_ORDER + 1):
        for m in range(-l, l + 1):
            rows.append((acn_index(l, m), l, m))
    return tuple(rows)


# Built once at import; every order uses a leading slice of it
ACN_TABLE = _build_acn_table()


def coefficient_table(order: int = MAX_ORDER) -> Tuple[Tuple[int, int, int], ...]:
    """
    The (acn, degree, suborder) rows active at a given ambisonic order.

    Raises:
        ConfigurationError: If order is outside 1..7
    """
    return ACN_TABLE[:(validate_order(order) + 1) ** 2]


def _azimuth_term(suborder: int, azimuth: Angle) -> Angle:
    if suborder > 0:
        return np.cos(suborder * azimuth)
    if suborder < 0:
        return np.sin(-suborder * azimuth)
    return 1.0


def get_coefficients(azimuth: Angle, elevation: Angle) -> np.ndarray:
    """
    Evaluate all 64 ACN/SN3D spherical harmonic gains for a direction.

    No validation is done on the angles; NaN or infinite input gives NaN
    output. Angles may be arrays, in which case they are broadcast against
    each other.

    Args:
        azimuth: Azimuth in radians, positive towards the left
        elevation: Elevation in radians, positive upwards

    Returns:
        Array of shape (64,) for scalar angles, or (64,) + broadcast shape

    Examples:
        >>> get_coefficients(0.0, 0.0)[:4]
        array([1., 0., 0., 1.])
    """
    azimuth, elevation = np.broadcast_arrays(np.asarray(azimuth, dtype=np.float64),
                                             np.asarray(elevation, dtype=np.float64))
    sin_el = np.sin(elevation)
    cos_el = np.cos(elevation)

    coefficients = np.empty((NUM_COEFFICIENTS,) + azimuth.shape)
    for acn, l, m in ACN_TABLE:
        elevation_term = SN3D_ELEVATION_TERMS[(l, abs(m))](sin_el, cos_el)
        coefficients[acn] = elevation_term * _azimuth_term(m, azimuth)

    return coefficients


sn3d_coefficients = get_coefficients


def get_coefficient(acn: int, azimuth: Angle, elevation: Angle) -> Angle:
    """
    Evaluate a single ACN/SN3D gain.

    Args:
        acn: ACN channel number, 0..63
        azimuth: Azimuth in radians
        elevation: Elevation in radians

    Raises:
        ValidationError: If acn is outside 0..63
    """
    if acn < 0 or acn >= NUM_COEFFICIENTS:
        raise ValidationError(f"ACN channel number must be between 0 and {NUM_COEFFICIENTS - 1}, got {acn}")

    _, l, m = ACN_TABLE[acn]
    elevation_term = SN3D_ELEVATION_TERMS[(l, abs(m))](np.sin(elevation), np.cos(elevation))
    return elevation_term * _azimuth_term(m, azimuth)


def coefficient_by_label(label: str, azimuth: Angle, elevation: Angle) -> Angle:
    """Evaluate a gain by its channel alias ('W', 'X', ..., 'ACN42')."""
    return get_coefficient(channel_from_label(label), azimuth, elevation)


# =====================================================================================
# Generic reference evaluation
# =====================================================================================

@functools.lru_cache(maxsize=_FACTORIAL_CACHE_SIZE)
def factorial(n: int) -> int:
    """
    Compute factorial, optimized with caching for repeated calls.

    Raises:
        MathError.DomainError: If n is negative

    Examples:
        >>> factorial(5)
        120
    """
    if n < 0:
        raise MathError.DomainError("Factorial not defined for negative numbers")
    if n <= 1:
        return 1
    return n * factorial(n - 1)


def sn3d_normalization(l: int, m: int) -> float:
    """SN3D normalization factor sqrt((2 - δ_m0) (l-|m|)! / (l+|m|)!)."""
    m_abs = abs(m)
    if m_abs > l:
        raise MathError.DomainError(f"Order m must satisfy -l <= m <= l, got l={l}, m={m}")
    delta = 1.0 if m == 0 else 0.0
    return math.sqrt((2.0 - delta) * factorial(l - m_abs) / factorial(l + m_abs))


def real_spherical_harmonic(l: int, m: int, azimuth: Angle, elevation: Angle) -> Angle:
    """
    Compute one real ACN/SN3D spherical harmonic from associated Legendre functions.

    This is the generic (any degree) counterpart of the closed-form table,
    used to verify it. scipy's lpmv includes the Condon-Shortley phase,
    which ambisonics conventions omit, so it is cancelled here.

    Args:
        l: Degree of the spherical harmonic (l >= 0)
        m: Suborder of the spherical harmonic (-l <= m <= l)
        azimuth: Azimuth in radians
        elevation: Elevation in radians

    Returns:
        The value(s) of the real spherical harmonic

    Raises:
        MathError.DomainError: If l < 0 or |m| > l
    """
    if l < 0:
        raise MathError.DomainError(f"Degree l must be non-negative, got {l}")

    m_abs = abs(m)
    norm = sn3d_normalization(l, m)
    legendre = (-1) ** m_abs * special.lpmv(m_abs, l, np.sin(elevation))
    return norm * legendre * _azimuth_term(m, np.asarray(azimuth, dtype=np.float64))


def spherical_harmonic_matrix(order: int, azimuths: np.ndarray, elevations: np.ndarray) -> np.ndarray:
    """
    Compute a matrix of reference spherical harmonics for a set of directions.

    Args:
        order: Maximum degree of spherical harmonics to compute
        azimuths: Array of azimuths in radians
        elevations: Array of elevations in radians

    Returns:
        Matrix of shape (len(azimuths), (order+1)²) where each row contains
        all spherical harmonic values for one direction, ordered by ACN.
    """
    if order < 0:
        raise MathError.DomainError(f"Order must be non-negative, got {order}")

    azimuths = np.atleast_1d(np.asarray(azimuths, dtype=np.float64))
    elevations = np.atleast_1d(np.asarray(elevations, dtype=np.float64))

    Y = np.zeros((len(azimuths), (order + 1) ** 2))
    for l in range(order + 1):
        for m in range(-l, l + 1):
            Y[:, acn_index(l, m)] = real_spherical_harmonic(l, m, azimuths, elevations)

    return Y


def directional_energy(coefficients: np.ndarray, order: int) -> Union[float, np.ndarray]:
    """
    Sum of squared directional gains (channels 1..N-1) at an order.

    For SN3D every degree contributes exactly 1, so this equals `order`
    for any direction.
    """
    n_channels = (validate_order(order) + 1) ** 2
    return np.sum(np.asarray(coefficients)[1:n_channels] ** 2, axis=0)
