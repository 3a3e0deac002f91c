"""Folding arbitrary axis layouts into the canonical five dimensions.

Writers only understand images built from the known axes X, Y, Z, Channel and
Time. Any other axis is "unknown". Unknown axes of length 1 carry nothing and
may be dropped; longer ones must be merged into one of the canonical axes that
the image does not already have. A contiguous run of unknown axes (one not
interrupted by a known axis) is merged as a single block whose length is the
product of the run, e.g. in ``X Y U U T`` the two unknowns fold into Z, while
``X Y Z C U T`` cannot be compressed since every canonical axis is taken.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Sequence, Tuple
from loguru import logger
from planeio.errors import UncompressibleAxesError

CANONICAL_ORDER = "XYZCT"


class AxisType(str, Enum):
    X = "X"
    Y = "Y"
    Z = "Z"
    CHANNEL = "C"
    TIME = "T"
    UNKNOWN = "U"

    @classmethod
    def parse(cls, label):
        # type: (object) -> AxisType
        """Map an axis label ('x', 'Channel', AxisType.TIME, ...) to its type.

        Anything that is not one of the five canonical axes is UNKNOWN.
        """
        if isinstance(label, AxisType):
            return label
        return _LABELS.get(str(label).strip().lower(), cls.UNKNOWN)


_LABELS = {
    "x": AxisType.X,
    "y": AxisType.Y,
    "z": AxisType.Z,
    "c": AxisType.CHANNEL,
    "channel": AxisType.CHANNEL,
    "t": AxisType.TIME,
    "time": AxisType.TIME,
}


@dataclass(frozen=True)
class CanonicalOrder:
    """Five letter dimension order with the length of each position.

    :ivar order: Permutation of ``XYZCT``
    :ivar lengths: Length of the axis at each position of ``order``
    """

    order: str
    lengths: Tuple[int, ...]

    @property
    def sizes(self):
        # type: () -> Dict[str, int]
        """Axis length keyed by canonical letter."""
        return dict(zip(self.order, self.lengths))


def _group_axes(axes, lengths):
    # Known axes become (letter, [length]); each run of unknown axes becomes
    # (None, [lengths...]). Returns None on duplicated known axes.
    groups = []
    seen = set()
    for axis, length in zip(axes, lengths):
        kind = AxisType.parse(axis)
        if kind is AxisType.UNKNOWN:
            if groups and groups[-1][0] is None:
                groups[-1][1].append(length)
            else:
                groups.append((None, [length]))
        else:
            if kind.value in seen:
                return None
            seen.add(kind.value)
            groups.append((kind.value, [length]))
    return groups


def compress_axes(axes, lengths):
    # type: (Sequence[object], Sequence[int]) -> Optional[CanonicalOrder]
    """Compress an axis layout into a canonical five dimensional order.

    Unknown runs containing an axis longer than 1 each take the next free
    canonical axis in X, Y, Z, C, T preference order. Runs made only of length-1
    unknowns take a free axis while more are available than needed, and are
    dropped otherwise. Canonical axes left over are appended with length 1.

    :param axes: Axis labels, one per dimension
    :param lengths: Dimension lengths, same order as ``axes``
    :return: CanonicalOrder, or None when no valid compression exists
    """
    try:
        lengths = [int(n) for n in lengths]
        axes = list(axes)
    except (TypeError, ValueError):
        return None
    if len(axes) != len(lengths) or any(n < 1 for n in lengths):
        return None

    groups = _group_axes(axes, lengths)
    if groups is None:
        logger.debug(f"Duplicate canonical axis in {axes}")
        return None

    present = {letter for letter, _ in groups if letter is not None}
    missing = [letter for letter in CANONICAL_ORDER if letter not in present]
    blocks = sum(
        1 for letter, run in groups if letter is None and any(n > 1 for n in run)
    )
    if blocks > len(missing):
        logger.debug(
            f"Cannot compress {axes}: {blocks} unknown blocks, {len(missing)} free axes"
        )
        return None

    spare = len(missing) - blocks
    free = iter(missing)
    order = []
    new_lengths = []
    for letter, run in groups:
        if letter is None:
            if all(n == 1 for n in run):
                if spare == 0:
                    continue
                spare -= 1
            letter = next(free)
        order.append(letter)
        new_lengths.append(math.prod(run))

    for letter in free:
        order.append(letter)
        new_lengths.append(1)

    return CanonicalOrder("".join(order), tuple(new_lengths))


def require_compressed(axes, lengths):
    # type: (Sequence[object], Sequence[int]) -> CanonicalOrder
    """Like :func:`compress_axes` but raise when compression is impossible."""
    result = compress_axes(axes, lengths)
    if result is None:
        raise UncompressibleAxesError(
            "Image has more than 5 dimensions in an order that could not be compressed."
        )
    return result


def is_compressible(axes, lengths):
    # type: (Sequence[object], Sequence[int]) -> bool
    """True if the layout has unknown axes longer than 1 and they can be folded."""
    result = compress_axes(axes, lengths)
    if result is None:
        return False
    return any(
        AxisType.parse(axis) is AxisType.UNKNOWN and int(n) > 1
        for axis, n in zip(axes, lengths)
    )


def count_slices(axes, lengths):
    # type: (Sequence[object], Sequence[int]) -> int
    """Number of 2D planes: product of all non X/Y axis lengths."""
    return math.prod(
        int(n)
        for axis, n in zip(axes, lengths)
        if AxisType.parse(axis) not in (AxisType.X, AxisType.Y)
    )
