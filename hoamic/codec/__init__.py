"""
HOA Virtual Microphone Codec Package

Closed-form ACN/SN3D spherical harmonic gains up to 7th order, a point
source encoder and a virtual microphone decoder with an adjustable polar
pattern.
"""

from .config import HOAMicConfig, ProcessingConfig, SourceConfig, VirtualMicConfig, channel_count
from .exceptions import HOAMicError, ConfigurationError, ValidationError
from .math_utils import get_coefficients, get_coefficient, coefficient_by_label, sn3d_coefficients
from .encoders import encode, encode_mono_source, encode_direction_vector
from .decoders import decode, decode_sample, decode_block, virtual_mic_weights, polar_response
from .streaming import VirtualMicProcessor
from .utils import Direction, channel_label

__version__ = '0.1.0'
