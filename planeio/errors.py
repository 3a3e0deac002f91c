"""Exceptions raised by planeio."""


class PlaneIOError(Exception):
    """Base class for all planeio errors."""


class RegionTooLargeError(PlaneIOError, ValueError):
    """Requested region does not fit in a single read buffer.

    Args:
        nbytes: Size in bytes the region would need
        limit: Largest single read allowed
    """

    def __init__(self, nbytes, limit):
        self.nbytes = nbytes
        self.limit = limit
        super().__init__(
            f"Image plane too large: {nbytes} bytes requested but only {limit} bytes "
            "can be extracted at one time. Open the plane in smaller tiles instead."
        )


class TruncatedStreamError(PlaneIOError, EOFError):
    """Stream ended before the requested number of bytes was available."""

    def __init__(self, requested, received, position):
        self.requested = requested
        self.received = received
        self.position = position
        super().__init__(
            f"Expected {requested} bytes at offset {position}, got {received}"
        )


class IncompatiblePlaneError(PlaneIOError, TypeError):
    """A plane buffer is not of the kind a reader works with."""


class UnsupportedPixelTypeError(PlaneIOError, ValueError):
    """Pixel type name or dtype has no entry in the pixel type table."""


class UncompressibleAxesError(PlaneIOError, ValueError):
    """Axes cannot be folded into the five canonical dimensions."""
