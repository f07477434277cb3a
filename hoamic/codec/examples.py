"""
Example Usage and Demonstrations

This module contains example functions demonstrating the usage of the
hoamic encoder and virtual microphone.
"""

import logging
import math
import numpy as np
from scipy import signal

from .config import HOAMicConfig, ProcessingConfig, SourceConfig, VirtualMicConfig
from .decoders import polar_response
from .encoders import encode
from .streaming import VirtualMicProcessor
from .utils import Direction, channel_label

logger = logging.getLogger(__name__)


def generate_test_tone(frequency: float = 440.0, duration: float = 1.0, sample_rate: int = 48000,
                       waveform: str = 'sine', amplitude: float = 0.5) -> np.ndarray:
    """
    Generate a mono oscillator test signal.

    Args:
        frequency: Oscillator frequency in Hz
        duration: Duration in seconds
        sample_rate: Sample rate in Hz
        waveform: 'sine', 'square', 'sawtooth' or 'noise'
        amplitude: Peak amplitude

    Returns:
        Mono signal, shape (int(duration * sample_rate),)
    """
    t = np.arange(int(duration * sample_rate)) / sample_rate
    phase = 2 * np.pi * frequency * t

    if waveform == 'sine':
        tone = np.sin(phase)
    elif waveform == 'square':
        tone = signal.square(phase)
    elif waveform == 'sawtooth':
        tone = signal.sawtooth(phase)
    elif waveform == 'noise':
        rng = np.random.default_rng(42)
        b, a = signal.butter(2, 0.1)
        tone = signal.filtfilt(b, a, rng.standard_normal(len(t)))
        tone /= max(np.max(np.abs(tone)), 1e-12)
    else:
        raise ValueError(f"Unknown waveform: {waveform}")

    return amplitude * tone


def demonstrate_channel_gains(order: int = 3):
    """Print the encoding gains of a source in front, to the left and above."""
    print(f"Encoding gains at order {order}:")

    for name, direction in (('front', Direction(0.0, 0.0)),
                            ('left', Direction(math.pi / 2, 0.0)),
                            ('zenith', Direction(0.0, math.pi / 2))):
        gains = encode(1.0, direction.azimuth, direction.elevation, order)
        listing = ", ".join(f"{channel_label(i)}={g:+.3f}" for i, g in enumerate(gains[:4]))
        print(f"  {name:>6}: {listing}, ... ({len(gains)} channels)")


def demonstrate_polar_pattern(order: int = 1, steps: int = 12):
    """
    Print the horizontal pickup of a virtual microphone aimed at a frontal source.

    The source is encoded once at the front; the microphone is swept around
    the horizon for several pattern values.
    """
    bundle = encode(1.0, 0.0, 0.0, 7)
    azimuths = np.linspace(-np.pi, np.pi, steps, endpoint=False)

    print(f"Virtual microphone response to a frontal source at order {order}:")
    print("  azimuth  " + "  ".join(f"p={p:.2f}" for p in (0.0, 0.5, 1.0)))
    responses = [polar_response(bundle, azimuths, 0.0, pattern, order) for pattern in (0.0, 0.5, 1.0)]
    for i, azimuth in enumerate(azimuths):
        row = "  ".join(f"{response[i]:+.3f}" for response in responses)
        print(f"  {math.degrees(azimuth):+7.1f}  {row}")


def demonstrate_orbiting_source(order: int = 3, pattern: float = 0.5, duration: float = 1.0,
                                sample_rate: int = 48000, buffer_size: int = 1024):
    """
    Render a tone orbiting the listener, picked up by a frontal virtual microphone.

    The source direction is updated once per block, so the processor
    recomputes the source coefficients per block and reuses the
    microphone coefficients throughout.
    """
    config = HOAMicConfig(
        processing=ProcessingConfig(sample_rate=sample_rate, buffer_size=buffer_size, order=order),
        source=SourceConfig(),
        microphone=VirtualMicConfig(pattern=pattern)
    )
    processor = VirtualMicProcessor(config)
    tone = generate_test_tone(duration=duration, sample_rate=sample_rate)

    blocks = []
    n_blocks = int(math.ceil(len(tone) / buffer_size))
    for i in range(n_blocks):
        azimuth = 2 * np.pi * i / n_blocks
        block = tone[i * buffer_size:(i + 1) * buffer_size]
        blocks.append(processor.process_block(block, source=Direction(azimuth, 0.0).wrapped()))

    output = np.concatenate(blocks)
    logger.info(f"Rendered {len(output)} samples with {processor.coefficient_updates} coefficient updates")

    print(f"Orbiting source at order {order}, pattern {pattern}:")
    for quarter, name in enumerate(('front', 'left', 'back', 'right')):
        start = quarter * len(output) // 4
        segment = output[start:start + len(output) // 4]
        print(f"  {name:>5}: rms={np.sqrt(np.mean(segment ** 2)):.4f}")

    return output


def main():
    """Run all demonstrations."""
    demonstrate_channel_gains()
    print()
    demonstrate_polar_pattern()
    print()
    demonstrate_orbiting_source()
