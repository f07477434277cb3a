"""
Pytest configuration file for hoamic tests.
"""

import pytest
import numpy as np
from hoamic.codec.config import HOAMicConfig


@pytest.fixture
def test_config():
    """Return a test configuration with predefined settings."""
    config = HOAMicConfig()
    config.processing.sample_rate = 44100
    config.processing.buffer_size = 512
    config.processing.order = 2
    return config


@pytest.fixture
def test_audio_mono():
    """Create a simple mono test signal."""
    # Create a 0.1-second sine wave at 440 Hz
    sr = 44100
    t = np.arange(int(0.1 * sr)) / sr
    audio = 0.5 * np.sin(2 * np.pi * 440 * t)
    return audio


@pytest.fixture
def direction_grid():
    """Azimuth/elevation pairs covering the sphere, poles included."""
    azimuths = np.linspace(-np.pi, np.pi, 25)
    elevations = np.linspace(-np.pi / 2, np.pi / 2, 13)
    azi, ele = np.meshgrid(azimuths, elevations)
    return azi.ravel(), ele.ravel()


@pytest.fixture
def random_bundle():
    """A random 7th-order ambisonic sample."""
    rng = np.random.default_rng(1234)
    return rng.uniform(-1.0, 1.0, 64)
