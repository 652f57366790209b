"""
Binary encoding of payloads for VTK XML files.

Binary data, appended or inline, is preceded by a header of UInt32 values. If
compression is disabled, the header is just the size of the data in bytes. With
compression, it is

    [num_blocks, block_size, last_block_size, compressed_block_sizes...]

where all sizes are in bytes and only the data, not the header, is compressed.
This is not really documented in the VTK file format specification, see
<http://public.kitware.com/pipermail/paraview/2005-April/001391.html> and
<https://mathema.tician.de/what-they-dont-tell-you-about-vtk-xml-binary-formats>.
Here, every array is compressed into one block, so the header always reads
`[1, nbytes, nbytes, compressed_nbytes]`.
"""
import base64
import io
import zlib

import numpy as np

from ._exceptions import CompressionError, StructuralError, WriteError
from ._payload import (
    ArrayTuple,
    NumericArray,
    Scalar,
    Text,
    TextList,
    encode_text,
    tuple_order,
)

header_dtype = np.dtype(np.uint32)


class AppendBuffer:
    """Byte sink for the appended data section of one VTK file.

    Bytes are only ever appended, or overwritten in place within the region that
    has already been written.
    """

    def __init__(self):
        self._stream = io.BytesIO()
        self._size = 0

    def __len__(self):
        return self._size

    def tell(self) -> int:
        return self._size

    def write(self, data) -> int:
        n = self._stream.write(data)
        self._size += n
        return n

    def reserve(self, num_bytes: int) -> int:
        """Appends `num_bytes` zeros and returns their offset."""
        offset = self._size
        self.write(bytes(num_bytes))
        return offset

    def patch(self, offset: int, data: bytes) -> None:
        if offset < 0 or offset + len(data) > self._size:
            raise StructuralError(
                f"Cannot overwrite bytes {offset}:{offset + len(data)} "
                + f"of a buffer of size {self._size}."
            )
        self._stream.seek(offset)
        self._stream.write(data)
        self._stream.seek(0, io.SEEK_END)

    def getvalue(self) -> bytes:
        return self._stream.getvalue()


def write_array(f, payload) -> int:
    """Writes the raw bytes of `payload` to `f` and returns the number of bytes."""
    if isinstance(payload, (Scalar, NumericArray)):
        # keep the memory layout, e.g., Fortran order for structured grid data
        return f.write(payload.data.tobytes(order="A"))

    if isinstance(payload, Text):
        return f.write(encode_text(payload.value))

    if isinstance(payload, TextList):
        return sum(f.write(encode_text(value)) for value in payload.values)

    if isinstance(payload, ArrayTuple):
        if not payload.arrays:
            return 0
        # interleave the components: a0 b0 c0 a1 b1 c1 ...
        order = tuple_order(payload)
        columns = [a.ravel(order=order) for a in payload.arrays]
        return f.write(np.column_stack(columns).tobytes())

    raise TypeError(f"Unknown payload {payload!r}")


class ZlibBlockWriter:
    """Compresses everything written to it into a single zlib block on `sink`.

    `compressed_size` is only known once the context is left and the compressed
    stream has been finalized.
    """

    def __init__(self, sink, level: int):
        self.sink = sink
        self.level = level
        self.compressed_size = None
        self._compressor = None
        self._num_written = 0

    def __enter__(self):
        try:
            self._compressor = zlib.compressobj(self.level)
        except (zlib.error, ValueError) as e:
            raise CompressionError(f"Cannot set up zlib compression: {e}") from e
        self._num_written = 0
        return self

    def _emit(self, chunk: bytes) -> None:
        try:
            self._num_written += self.sink.write(chunk)
        except (OSError, ValueError) as e:
            raise CompressionError(f"Writing compressed data failed: {e}") from e

    def write(self, data) -> int:
        try:
            chunk = self._compressor.compress(data)
        except zlib.error as e:
            raise CompressionError(f"zlib compression failed: {e}") from e
        self._emit(chunk)
        return len(data)

    def __exit__(self, exc_type, exc_value, traceback):
        try:
            if exc_type is None:
                try:
                    chunk = self._compressor.flush(zlib.Z_FINISH)
                except zlib.error as e:
                    raise CompressionError(f"zlib compression failed: {e}") from e
                self._emit(chunk)
                self.compressed_size = self._num_written
        finally:
            self._compressor = None
        return False


def header_size(compressed: bool) -> int:
    return (4 if compressed else 1) * header_dtype.itemsize


def check_header_size(num_bytes: int) -> None:
    if num_bytes > np.iinfo(header_dtype).max:
        raise WriteError(
            f"Data array of {num_bytes} bytes is too large for a UInt32 header."
        )


def pack_header(num_bytes: int, compressed_num_bytes=None) -> bytes:
    if compressed_num_bytes is None:
        values = [num_bytes]
    else:
        values = [1, num_bytes, num_bytes, compressed_num_bytes]
    for value in values:
        check_header_size(value)
    return np.array(values, dtype=header_dtype).tobytes()


def write_appended(buf: AppendBuffer, payload, num_bytes: int, level: int) -> None:
    """Writes header and data of `payload` to the shared append buffer."""
    check_header_size(num_bytes)

    if level:
        # placeholder, replaced by the real header once the compressed size is known
        initpos = buf.reserve(header_size(True))
        with ZlibBlockWriter(buf, level) as z:
            nb_write = write_array(z, payload)
        assert nb_write == num_bytes
        buf.patch(initpos, pack_header(num_bytes, z.compressed_size))
    else:
        buf.write(pack_header(num_bytes))
        nb_write = write_array(buf, payload)
        assert nb_write == num_bytes


def encode_inline(payload, num_bytes: int, level: int) -> tuple:
    """Returns the base64-encoded header and data of `payload`.

    The two are encoded separately; the header is not known before the data has
    been compressed, and VTK expects it as its own base64 run.
    """
    check_header_size(num_bytes)

    with io.BytesIO() as scratch:
        if level:
            with ZlibBlockWriter(scratch, level) as z:
                nb_write = write_array(z, payload)
            header = pack_header(num_bytes, z.compressed_size)
        else:
            nb_write = write_array(scratch, payload)
            header = pack_header(num_bytes)
        assert nb_write == num_bytes

        return (
            base64.b64encode(header).decode(),
            base64.b64encode(scratch.getvalue()).decode(),
        )
