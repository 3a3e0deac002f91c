"""planeio - plane region access, axis compression and cache tiling for image datasets."""

from planeio.axes import (
    AxisType,
    CanonicalOrder,
    compress_axes,
    count_slices,
    is_compressible,
    require_compressed,
)
from planeio.bioio_meta import axes_from_bioimage, metadata_from_bioimage, open_bioimage
from planeio.errors import (
    IncompatiblePlaneError,
    PlaneIOError,
    RegionTooLargeError,
    TruncatedStreamError,
    UncompressibleAxesError,
    UnsupportedPixelTypeError,
)
from planeio.planes import (
    ArrayPlane,
    ByteArrayPlane,
    PlaneBuffer,
    PlaneDescriptor,
    Region,
    cast_plane,
)
from planeio.reader import ImageMetadata, RawPlaneReader
from planeio.region import allocate_plane, extract_region, read_region, region_byte_count
from planeio.stream import ByteCursor
from planeio.tiling import TileGeometry, default_tile_height, iter_cells, optimal_tile

__version__ = "0.1.0"
