"""Forward byte cursor over a binary file object."""

import io
from planeio.errors import TruncatedStreamError

_SKIP_CHUNK = 1 << 20


class ByteCursor:
    """Owned read cursor over a binary stream.

    The cursor is the only thing that moves the stream position, so one cursor
    must not be shared between threads without external locking. ``OSError``
    from the wrapped stream propagates unchanged.

    :param stream: Binary file object (``open(..., 'rb')``, ``io.BytesIO``, ...)
    """

    def __init__(self, stream):
        self._stream = stream
        self._seekable = stream.seekable() if hasattr(stream, "seekable") else False
        self.position = stream.tell() if self._seekable else 0

    @classmethod
    def from_bytes(cls, data):
        # type: (bytes) -> ByteCursor
        return cls(io.BytesIO(data))

    def seek(self, offset):
        # type: (int) -> None
        """Move to an absolute byte offset (seekable streams only)."""
        if not self._seekable:
            raise io.UnsupportedOperation("Stream does not support random access")
        self._stream.seek(offset, io.SEEK_SET)
        self.position = offset

    def skip(self, n):
        # type: (int) -> None
        """Advance the cursor by ``n`` bytes without returning them."""
        if n <= 0:
            return
        if self._seekable:
            self._stream.seek(n, io.SEEK_CUR)
            self.position += n
            return
        remaining = n
        while remaining > 0:
            chunk = self._stream.read(min(remaining, _SKIP_CHUNK))
            if not chunk:
                raise TruncatedStreamError(n, n - remaining, self.position)
            remaining -= len(chunk)
            self.position += len(chunk)

    def read_into(self, buffer, offset, n):
        # type: (memoryview, int, int) -> None
        """Read exactly ``n`` bytes into ``buffer[offset:offset + n]``."""
        target = memoryview(buffer)[offset : offset + n]
        filled = 0
        while filled < n:
            count = self._stream.readinto(target[filled:])
            if not count:
                raise TruncatedStreamError(n, filled, self.position)
            filled += count
            self.position += count
