"""Plane geometry and the byte buffers regions are read into."""

from dataclasses import dataclass
from typing import Protocol, runtime_checkable
import numpy as np
from planeio.errors import IncompatiblePlaneError


@dataclass(frozen=True)
class PlaneDescriptor:
    """Read-only facts about one stored 2D plane.

    :ivar width: Plane width in pixels (X axis length)
    :ivar height: Plane height in pixels (Y axis length)
    :ivar bytes_per_pixel: Bytes per sample
    :ivar channel_count: Samples stored per pixel position (RGB channel count)
    :ivar interleaved: True if channel samples are contiguous per pixel
    """

    width: int
    height: int
    bytes_per_pixel: int
    channel_count: int = 1
    interleaved: bool = False

    @property
    def plane_bytes(self):
        # type: () -> int
        return self.width * self.height * self.bytes_per_pixel * self.channel_count


@dataclass(frozen=True)
class Region:
    """Rectangle ``(x, y, w, h)`` requested from a plane."""

    x: int
    y: int
    w: int
    h: int

    @classmethod
    def full(cls, descriptor):
        # type: (PlaneDescriptor) -> Region
        """Region spanning the whole plane."""
        return cls(0, 0, descriptor.width, descriptor.height)

    def fits(self, descriptor):
        # type: (PlaneDescriptor) -> bool
        """Check that the region lies inside the plane."""
        return (
            self.x >= 0
            and self.y >= 0
            and self.w > 0
            and self.h > 0
            and self.x + self.w <= descriptor.width
            and self.y + self.h <= descriptor.height
        )

    def is_full(self, descriptor):
        # type: (PlaneDescriptor) -> bool
        return (
            self.x == 0
            and self.y == 0
            and self.w == descriptor.width
            and self.h == descriptor.height
        )


@runtime_checkable
class PlaneBuffer(Protocol):
    """Anything that exposes a writable raw byte view of a plane region."""

    descriptor: PlaneDescriptor
    region: Region

    @property
    def data(self) -> memoryview:
        """Writable byte view, ``w * h * bytes_per_pixel * channel_count`` long."""


class ByteArrayPlane:
    """Plane region backed by a plain ``bytearray``."""

    def __init__(self, descriptor, region, buffer=None):
        # type: (PlaneDescriptor, Region, bytearray | None) -> None
        self.descriptor = descriptor
        self.region = region
        nbytes = (
            region.w * region.h * descriptor.bytes_per_pixel * descriptor.channel_count
        )
        if buffer is None:
            buffer = bytearray(nbytes)
        elif len(buffer) < nbytes:
            raise ValueError(f"Buffer holds {len(buffer)} bytes, region needs {nbytes}")
        self._buffer = buffer
        self._nbytes = nbytes

    @property
    def data(self):
        # type: () -> memoryview
        return memoryview(self._buffer)[: self._nbytes]

    @property
    def bytes(self):
        # type: () -> bytes
        return bytes(self.data)

    def __repr__(self):
        return f"ByteArrayPlane(region={self.region}, nbytes={self._nbytes})"


class ArrayPlane:
    """Plane region backed by a numpy array of typed samples.

    The array shape follows the stored layout: ``(h, w, c)`` when interleaved,
    ``(c, h, w)`` when planar, and ``(h, w)`` for single-channel planes.
    """

    def __init__(self, descriptor, region, dtype):
        # type: (PlaneDescriptor, Region, np.dtype) -> None
        dtype = np.dtype(dtype)
        if dtype.itemsize != descriptor.bytes_per_pixel:
            raise ValueError(
                f"dtype {dtype} has {dtype.itemsize} bytes per sample, "
                f"plane declares {descriptor.bytes_per_pixel}"
            )
        self.descriptor = descriptor
        self.region = region
        c = descriptor.channel_count
        if c == 1:
            shape = (region.h, region.w)
        elif descriptor.interleaved:
            shape = (region.h, region.w, c)
        else:
            shape = (c, region.h, region.w)
        self.array = np.zeros(shape, dtype=dtype)

    @property
    def data(self):
        # type: () -> memoryview
        return memoryview(self.array.view(np.uint8).reshape(-1))

    def to_yxc(self):
        # type: () -> np.ndarray
        """Return samples as ``(h, w, c)`` regardless of stored layout."""
        if self.array.ndim == 2:
            return self.array[..., np.newaxis]
        if self.descriptor.interleaved:
            return self.array
        return self.array.transpose(1, 2, 0)

    def __repr__(self):
        return f"ArrayPlane(region={self.region}, shape={self.array.shape}, dtype={self.array.dtype})"


def cast_plane(plane, plane_class):
    # type: (PlaneBuffer, type) -> PlaneBuffer
    """Narrow ``plane`` to ``plane_class`` or fail with IncompatiblePlaneError."""
    if not isinstance(plane, plane_class):
        raise IncompatiblePlaneError(
            f"Incompatible plane types. Attempted to cast: {type(plane).__name__} "
            f"to: {plane_class.__name__}"
        )
    return plane
