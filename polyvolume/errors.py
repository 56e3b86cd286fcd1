"""
Custom exception classes for the polyhedron volume package.

This module defines a hierarchy of custom exceptions for the error
conditions that can occur while converting inputs and computing volumes.
Winding and manifold problems are not detected and therefore have no
exception here: they produce a wrong number, not an error.
"""


class PolyVolumeError(Exception):
    """Base exception for all polyvolume errors."""
    
    def __init__(self, message: str, details: dict = None):
        """
        Initialize the exception.
        
        Args:
            message: Error message
            details: Optional dictionary with additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
    
    def __str__(self):
        """String representation with details."""
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


# Geometry Errors
class GeometryError(PolyVolumeError):
    """Base exception for malformed geometric input."""
    pass


class InvalidGeometryError(GeometryError):
    """Raised when a point, vertex array or face array has the wrong shape."""
    pass


class FaceIndexError(GeometryError):
    """Raised when a face references a vertex index outside the vertex array."""
    pass


# Volume Calculation Errors
class VolumeCalculationError(PolyVolumeError):
    """Raised when volume calculation fails unexpectedly."""
    pass


# Configuration Errors
class ConfigurationError(PolyVolumeError):
    """Base exception for configuration errors."""
    pass


class InvalidParameterError(ConfigurationError):
    """Raised when a parameter value is invalid."""
    pass


def handle_error(error: Exception, logger=None, reraise: bool = True) -> None:
    """
    Centralized error handling function.
    
    Args:
        error: The exception to handle
        logger: Optional logger instance for logging the error
        reraise: Whether to re-raise the exception after handling
    """
    if logger is not None:
        if isinstance(error, PolyVolumeError):
            logger.error(
                f"{type(error).__name__}: {error.message}",
                **error.details
            )
        else:
            logger.error(f"Unexpected error: {str(error)}", exc_info=True)
    
    if reraise:
        raise error
