"""Exception types raised by the house recolor pipeline."""


class HouseRecolorError(Exception):
    """Base class for pipeline errors."""


class InvalidImageError(HouseRecolorError, ValueError):
    """Raised for unreadable images and empty or malformed pixel buffers."""


class ServiceNotReadyError(HouseRecolorError, RuntimeError):
    """Raised when a service is used before ``initialize()`` was called."""


class RenderInProgressError(HouseRecolorError, RuntimeError):
    """Raised when a final render is requested while another is running."""
