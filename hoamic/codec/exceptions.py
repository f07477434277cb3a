"""
Custom Exceptions Module

This module defines the exception hierarchy for the HOA virtual microphone
codec, providing specific error types for configuration and input mistakes.
"""

class HOAMicError(Exception):
    """Base exception class for all hoamic errors."""
    pass


class ConfigurationError(HOAMicError):
    """Error in codec configuration (ambisonic order, sample rate, ...)."""
    pass


class ValidationError(HOAMicError):
    """Error during input array validation."""
    pass


class MathError(HOAMicError):
    """Error in mathematical calculations."""

    class DomainError(HOAMicError):
        """Error due to input values outside the valid domain."""
        pass
