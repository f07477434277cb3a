"""
General Utility Functions and Definitions

This module contains type definitions, the Direction data class, ACN index
helpers and the conventional channel letter aliases used across hoamic.

Coordinates follow the ISO 2631 frame: X points to the front, Y to the left
and Z up. Azimuth 0 is the front, +π/2 the left; elevation +π/2 the zenith.

See Also:
    - config: For centralized configuration management
    - math_utils: For the spherical harmonic coefficient engine
"""

import math
from dataclasses import dataclass
from typing import Tuple, Union

import numpy as np

from .exceptions import ValidationError

# Type aliases for improved readability
CartesianCoord = Tuple[float, float, float]  # (x, y, z) unit vector
Angle = Union[float, np.ndarray]  # radians, scalar or array

# Conventional letter names of the first 16 ACN channels (orders 0..3)
CHANNEL_LETTERS = ('W', 'Y', 'Z', 'X',
                   'V', 'T', 'R', 'S', 'U',
                   'Q', 'O', 'M', 'K', 'L', 'N', 'P')


def wrap_azimuth(azimuth: float) -> float:
    """
    Wrap an azimuth into the range (-π, π]. Both -π and π map to π.
    """
    wrapped = math.fmod(azimuth + math.pi, 2 * math.pi)
    if wrapped <= 0:
        wrapped += 2 * math.pi
    return wrapped - math.pi


@dataclass(frozen=True)
class Direction:
    """
    An immutable direction on the unit sphere.

    Attributes:
        azimuth: Angle in the horizontal plane in radians, positive towards the left
        elevation: Angle above the horizontal plane in radians, [-π/2, π/2]
    """
    azimuth: float = 0.0
    elevation: float = 0.0

    @classmethod
    def from_vector(cls, x: float, y: float, z: float) -> 'Direction':
        """
        Create a direction from Cartesian coordinates (x front, y left, z up).

        The vector does not need to be normalized. The zero vector maps to
        the front direction.
        """
        distance = math.sqrt(x*x + y*y + z*z)

        # Handle the origin
        if distance < 1e-10:
            return cls(0.0, 0.0)

        elevation = math.asin(max(-1.0, min(1.0, z / distance)))
        azimuth = math.atan2(y, x)
        return cls(azimuth, elevation)

    @classmethod
    def from_degrees(cls, azimuth: float, elevation: float, clockwise: bool = False) -> 'Direction':
        """
        Create a direction from angles in degrees.

        Args:
            azimuth: Azimuth in degrees
            elevation: Elevation in degrees
            clockwise: Set for host controls whose azimuth increases towards
                the right; the azimuth is then negated
        """
        if clockwise:
            azimuth = -azimuth
        return cls(math.radians(azimuth), math.radians(elevation))

    def to_vector(self) -> CartesianCoord:
        """Unit vector (x, y, z) of this direction."""
        cos_el = math.cos(self.elevation)
        return (cos_el * math.cos(self.azimuth),
                cos_el * math.sin(self.azimuth),
                math.sin(self.elevation))

    def wrapped(self) -> 'Direction':
        """Same direction with the azimuth wrapped into (-π, π]."""
        return Direction(wrap_azimuth(self.azimuth), self.elevation)

    def angle_to(self, other: 'Direction') -> float:
        """Great-circle angle to another direction in radians."""
        a = self.to_vector()
        b = other.to_vector()
        cos_angle = a[0]*b[0] + a[1]*b[1] + a[2]*b[2]
        return math.acos(max(-1.0, min(1.0, cos_angle)))


def acn_index(degree: int, suborder: int) -> int:
    """ACN channel number of the harmonic (l, m): n = l² + l + m."""
    if degree < 0 or abs(suborder) > degree:
        raise ValidationError(f"Invalid harmonic indices (l={degree}, m={suborder})")
    return degree * degree + degree + suborder


def acn_to_degree_order(acn: int) -> Tuple[int, int]:
    """
    Degree and suborder (l, m) of an ACN channel number.

    Examples:
        >>> acn_to_degree_order(0)
        (0, 0)
        >>> acn_to_degree_order(3)
        (1, 1)
        >>> acn_to_degree_order(63)
        (7, 7)
    """
    if acn < 0:
        raise ValidationError(f"ACN channel number must be non-negative, got {acn}")
    degree = math.isqrt(acn)
    return degree, acn - degree * degree - degree


def order_from_channel_count(n_channels: int) -> int:
    """
    Ambisonic order of a complete ACN bundle with n_channels channels.

    Raises:
        ValidationError: If n_channels is not (order + 1)² for some order
    """
    order = math.isqrt(max(n_channels, 0)) - 1
    if n_channels < 1 or (order + 1) ** 2 != n_channels:
        raise ValidationError(f"Number of channels {n_channels} does not correspond to a complete ambisonic order")
    return order


def channel_label(acn: int) -> str:
    """Letter alias of an ACN channel (W, Y, Z, X, ...), or 'ACN<n>' above 3rd order."""
    if acn < 0:
        raise ValidationError(f"ACN channel number must be non-negative, got {acn}")
    if acn < len(CHANNEL_LETTERS):
        return CHANNEL_LETTERS[acn]
    return f"ACN{acn}"


def channel_from_label(label: str) -> int:
    """ACN channel number for a letter alias or an 'ACN<n>' label."""
    if label in CHANNEL_LETTERS:
        return CHANNEL_LETTERS.index(label)
    if label.startswith('ACN') and label[3:].isdigit():
        return int(label[3:])
    raise ValidationError(f"Unknown channel label: {label!r}")
