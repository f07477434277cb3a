"""
Block Processing Module

This module contains the VirtualMicProcessor class, which runs the reference
synthesis chain (mono source -> ambisonic bundle -> virtual microphone) on
blocks of audio, with the source and microphone directions held constant
across each block.

Coefficient vectors are computed once per direction and reused for as long
as the direction stays the same. The reuse never changes the output.
"""

import dataclasses
import logging
from collections import OrderedDict
import numpy as np
from typing import Optional, Tuple

from .config import HOAMicConfig, VirtualMicConfig, validate_order
from .decoders import decode_block
from .encoders import encode_mono_source
from .exceptions import ValidationError
from .math_utils import get_coefficients
from .utils import Direction

logger = logging.getLogger(__name__)


class VirtualMicProcessor:
    """
    Block processor for a point source picked up by a virtual microphone.

    Each instance keeps its own small coefficient cache, so use one
    processor per audio thread.
    """

    # Source and microphone each hold one direction at a time
    _CACHE_SIZE = 2

    def __init__(self, config: Optional[HOAMicConfig] = None, order: Optional[int] = None):
        """
        Initialize the processor.

        Args:
            config: Complete configuration; defaults to HOAMicConfig()
            order: Overrides config.processing.order when given
        """
        config = config or HOAMicConfig()
        if order is not None:
            validate_order(order)
            config = dataclasses.replace(config, processing=dataclasses.replace(config.processing, order=order))

        self.config = config
        self.order = config.processing.order
        self.n_channels = config.processing.n_channels
        self.buffer_size = config.processing.buffer_size
        self.dtype = config.processing.dtype

        self._coefficient_cache: "OrderedDict[Direction, np.ndarray]" = OrderedDict()
        self.coefficient_updates = 0

    @property
    def source(self) -> Direction:
        """Default source direction from the configuration."""
        return Direction(self.config.source.azimuth, self.config.source.elevation)

    @property
    def microphone(self) -> VirtualMicConfig:
        return self.config.microphone

    def coefficients(self, direction: Direction) -> np.ndarray:
        """
        Coefficient vector for a direction, recomputed only when it is not cached.

        Args:
            direction: Direction to evaluate

        Returns:
            Coefficient vector of shape (64,)
        """
        cached = self._coefficient_cache.get(direction)
        if cached is not None:
            self._coefficient_cache.move_to_end(direction)
            return cached

        if len(self._coefficient_cache) >= self._CACHE_SIZE:
            # Drop the least recently used direction
            self._coefficient_cache.popitem(last=False)

        logger.debug(f"Computing coefficients for azimuth={direction.azimuth:.4f}, elevation={direction.elevation:.4f}")
        coefficients = get_coefficients(direction.azimuth, direction.elevation)
        coefficients.setflags(write=False)
        self._coefficient_cache[direction] = coefficients
        self.coefficient_updates += 1
        return coefficients

    def clear_cache(self) -> None:
        """Forget all cached coefficient vectors."""
        self._coefficient_cache.clear()

    def encode_block(self, audio: np.ndarray, source: Optional[Direction] = None) -> np.ndarray:
        """
        Encode a block of mono audio into ambisonic signals.

        Args:
            audio: Mono audio block, shape (n_samples,)
            source: Source direction; defaults to the configured source

        Returns:
            Ambisonic signals, shape (n_channels, n_samples)
        """
        source = source or self.source
        ambi = encode_mono_source(audio, source.azimuth, source.elevation, self.order,
                                  coefficients=self.coefficients(source))
        return ambi.astype(self.dtype, copy=False)

    def decode_block(self, ambi_signals: np.ndarray, mic: Optional[Direction] = None,
                     pattern: Optional[float] = None) -> np.ndarray:
        """
        Render a block of ambisonic signals with the virtual microphone.

        Args:
            ambi_signals: Ambisonic signals, shape (n_channels, n_samples)
            mic: Microphone direction; defaults to the configured microphone
            pattern: Polar pattern; defaults to the configured pattern

        Returns:
            Microphone signal, shape (n_samples,)
        """
        mic, pattern = self._resolve_mic(mic, pattern)
        output = decode_block(ambi_signals, mic.azimuth, mic.elevation, pattern, self.order,
                              coefficients=self.coefficients(mic))
        return output.astype(self.dtype, copy=False)

    def process_block(self, audio: np.ndarray, source: Optional[Direction] = None,
                      mic: Optional[Direction] = None, pattern: Optional[float] = None) -> np.ndarray:
        """
        Run one block through source -> ambisonics -> virtual microphone.

        Returns:
            Microphone signal, shape (n_samples,)
        """
        return self.decode_block(self.encode_block(audio, source), mic, pattern)

    def process(self, audio: np.ndarray, source: Optional[Direction] = None,
                mic: Optional[Direction] = None, pattern: Optional[float] = None) -> np.ndarray:
        """
        Process a signal of any length in blocks of buffer_size samples.

        Args:
            audio: Mono audio signal, shape (n_samples,)
            source: Source direction
            mic: Microphone direction
            pattern: Polar pattern

        Returns:
            Microphone signal, shape (n_samples,)
        """
        audio = np.asarray(audio)
        if audio.ndim != 1:
            raise ValidationError(f"Mono audio must be one-dimensional, got shape {audio.shape}")

        if len(audio) == 0:
            return np.zeros(0, dtype=self.dtype)

        blocks = [self.process_block(audio[start:start + self.buffer_size], source, mic, pattern)
                  for start in range(0, len(audio), self.buffer_size)]
        return np.concatenate(blocks)

    def _resolve_mic(self, mic: Optional[Direction], pattern: Optional[float]) -> Tuple[Direction, float]:
        if mic is None:
            mic = Direction(self.microphone.azimuth, self.microphone.elevation)
        if pattern is None:
            pattern = self.microphone.pattern
        return mic, pattern
