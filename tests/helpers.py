import base64
import pathlib
import re
import zlib
from xml.etree import ElementTree as ET

import numpy as np

import vtkxml

header_dtype = np.dtype(np.uint32)


def num_bytes_to_num_base64_chars(num_bytes):
    # Rounding up in integer division works by double negation since Python
    # always rounds down.
    return -(-num_bytes // 3) * 4


def make_vtk(tmp_path, append=True, compress=True, num_points=4, num_cells=2):
    vtk = vtkxml.VtkFile(
        tmp_path / "test",
        "UnstructuredGrid",
        num_points,
        num_cells,
        append=append,
        compress=compress,
    )
    vtk.add_piece(NumberOfPoints=num_points, NumberOfCells=num_cells)
    return vtk


def decode_inline(text, compressed):
    """Returns header and raw data bytes of a base64 DataArray text."""
    text = text.strip()
    num_header_bytes = (4 if compressed else 1) * header_dtype.itemsize
    num_header_chars = num_bytes_to_num_base64_chars(num_header_bytes)
    header = np.frombuffer(base64.b64decode(text[:num_header_chars]), header_dtype)
    data = base64.b64decode(text[num_header_chars:])
    if compressed:
        assert len(data) == header[3]
        data = zlib.decompress(data)
    return header, data


def decode_appended(raw, offset, compressed):
    """Returns header and raw data bytes of an array in the appended section."""
    if compressed:
        start = offset + 4 * header_dtype.itemsize
        header = np.frombuffer(raw[offset:start], header_dtype)
        data = zlib.decompress(raw[start : start + int(header[3])])
    else:
        start = offset + header_dtype.itemsize
        header = np.frombuffer(raw[offset:start], header_dtype)
        data = raw[start : start + int(header[0])]
    return header, data


def decode(vtk, da):
    compressed = vtk.compression_level > 0
    if da.get("format") == "appended":
        return decode_appended(vtk.buf.getvalue(), int(da.get("offset")), compressed)
    return decode_inline(da.text, compressed)


def read_file(filename):
    """Returns the XML root and the raw appended data of a written file."""
    raw = pathlib.Path(filename).read_bytes()
    res = re.search(b"<AppendedData[^>]*>", raw)
    if res is None:
        return ET.fromstring(raw), b""

    i_start = res.end()
    i_stop = raw.rfind(b"</AppendedData>")
    data = raw[i_start:i_stop].split(b"_", 1)[1].rsplit(b"\n", 1)[0]
    root = ET.fromstring(raw[:i_start] + raw[i_stop:])
    return root, data
