"""
Configuration Management Module

This module provides centralized configuration management for the hoamic
codec, including constants, order validation and the dataclasses a host
uses to describe the processing, source and virtual microphone settings.
"""

import json
import logging
from typing import Dict, Any
from dataclasses import dataclass, field

import numpy as np

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)


# =====================================================================================
# Constants
# =====================================================================================

# Ambisonic settings
MIN_ORDER = 1
MAX_ORDER = 7
NUM_COEFFICIENTS = (MAX_ORDER + 1) ** 2  # 64 ACN channels
DEFAULT_ORDER = 3

# Virtual microphone settings
DEFAULT_PATTERN = 0.5  # 0 = omnidirectional, 1 = pure directional

# Default stream settings
DEFAULT_SAMPLE_RATE = 48000  # Hz
DEFAULT_BUFFER_SIZE = 1024  # samples

SUPPORTED_PRECISIONS = {
    'float32': np.float32,
    'float64': np.float64,
}


def validate_order(order: int) -> int:
    """
    Check that an ambisonic order is one of the supported orders 1..7.

    Args:
        order: Requested ambisonic order

    Returns:
        The order as an int

    Raises:
        ConfigurationError: If the order is not an integer in [MIN_ORDER, MAX_ORDER]
    """
    if isinstance(order, bool) or not isinstance(order, (int, np.integer)):
        raise ConfigurationError(f"Ambisonic order must be an integer, got {order!r}")

    if order < MIN_ORDER or order > MAX_ORDER:
        raise ConfigurationError(f"Ambisonic order must be between {MIN_ORDER} and {MAX_ORDER}, got {order}")

    return int(order)


def channel_count(order: int) -> int:
    """Number of ACN channels (4, 9, ..., 64) used by a validated order."""
    return (validate_order(order) + 1) ** 2


# =====================================================================================
# Configuration Classes
# =====================================================================================

@dataclass
class ProcessingConfig:
    """Configuration for block processing parameters"""

    sample_rate: int = DEFAULT_SAMPLE_RATE
    buffer_size: int = DEFAULT_BUFFER_SIZE
    order: int = DEFAULT_ORDER
    precision: str = 'float64'

    def __post_init__(self):
        """Validate configuration after initialization"""
        if self.sample_rate <= 0:
            raise ConfigurationError(f"Sample rate must be positive, got {self.sample_rate}")

        if self.buffer_size <= 0:
            raise ConfigurationError(f"Buffer size must be positive, got {self.buffer_size}")

        validate_order(self.order)

        if self.precision not in SUPPORTED_PRECISIONS:
            raise ConfigurationError(f"Precision {self.precision!r} not supported. Use one of: {sorted(SUPPORTED_PRECISIONS)}")

    @property
    def n_channels(self) -> int:
        return channel_count(self.order)

    @property
    def dtype(self) -> type:
        return SUPPORTED_PRECISIONS[self.precision]


@dataclass
class SourceConfig:
    """Direction of the encoded point source, in radians"""

    azimuth: float = 0.0
    elevation: float = 0.0


@dataclass
class VirtualMicConfig:
    """
    Virtual microphone aim and polar pattern.

    The pattern is not clamped: values outside [0, 1] extrapolate past pure
    omni / pure directional pickup.
    """

    azimuth: float = 0.0
    elevation: float = 0.0
    pattern: float = DEFAULT_PATTERN


@dataclass
class HOAMicConfig:
    """Complete configuration for a source -> HOA -> virtual microphone chain"""

    processing: ProcessingConfig = field(default_factory=ProcessingConfig)
    source: SourceConfig = field(default_factory=SourceConfig)
    microphone: VirtualMicConfig = field(default_factory=VirtualMicConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary for serialization"""
        return {
            'processing': {
                'sample_rate': self.processing.sample_rate,
                'buffer_size': self.processing.buffer_size,
                'order': self.processing.order,
                'precision': self.processing.precision
            },
            'source': {
                'azimuth': self.source.azimuth,
                'elevation': self.source.elevation
            },
            'microphone': {
                'azimuth': self.microphone.azimuth,
                'elevation': self.microphone.elevation,
                'pattern': self.microphone.pattern
            }
        }

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'HOAMicConfig':
        """Create configuration from dictionary"""
        try:
            return cls(
                processing=ProcessingConfig(**config_dict.get('processing', {})),
                source=SourceConfig(**config_dict.get('source', {})),
                microphone=VirtualMicConfig(**config_dict.get('microphone', {}))
            )
        except TypeError as e:
            raise ConfigurationError(f"Invalid configuration entry: {e}") from e

    def save(self, file_path: str) -> None:
        """Save configuration to a JSON file"""
        logger.info(f"Saving configuration to {file_path}")
        with open(file_path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, file_path: str) -> 'HOAMicConfig':
        """Load configuration from a JSON file"""
        logger.info(f"Loading configuration from {file_path}")
        with open(file_path, 'r') as f:
            return cls.from_dict(json.load(f))


# Create a default configuration
default_config = HOAMicConfig()
