"""Exceptions raised while converting images to GBA declarations."""

from __future__ import annotations


class ConversionError(Exception):
    """Base class for every conversion failure."""


class DecodeError(ConversionError):
    """Raised when the input is not a readable raster image."""


class UnsupportedChannelLayout(ConversionError):
    """Raised when the decoded image is neither RGB nor RGBA."""

    def __init__(self, message: str, channels: int):
        super().__init__(message)
        self.channels = channels


class CapacityExceeded(ConversionError):
    """Raised when an image needs more colors than a palette can hold."""

    def __init__(self, message: str, identifier: str | None = None, capacity: int = 256):
        super().__init__(message)
        self.identifier = identifier
        self.capacity = capacity


class ConfigurationError(ConversionError):
    """Raised for invalid options, before any image is processed."""
