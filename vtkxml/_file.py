from __future__ import annotations

import pathlib
import sys

from .__about__ import __version__
from ._binary import AppendBuffer
from ._common import compressors, error, grid_type_to_extension
from ._cxml import etree as ET
from ._data_array import attach_data

# zlib's own default
default_compression_level = 6


def _compression_level(compress) -> int:
    if compress is True:
        return default_compression_level
    if compress is False:
        return 0
    if isinstance(compress, int) and 0 <= compress <= 9:
        return compress
    raise ValueError(
        f"compress must be a bool or a zlib compression level 0-9, got {compress!r}"
    )


class VtkFile:
    """One VTK XML dataset file being written.

    Owns the XML tree and the buffer of appended binary data. Geometry is up to the
    caller: add Piece nodes with :meth:`add_piece` and points/cells/coordinates with
    :func:`vtkxml.data_to_xml`, then attach data with ``vtk[name] = data``.

    Use as a context manager to save the file on exit.
    """

    def __init__(
        self,
        filename,
        grid_type: str,
        num_points: int,
        num_cells: int,
        append: bool = True,
        compress: bool | int = True,
        **grid_attrs,
    ):
        if grid_type not in grid_type_to_extension:
            raise ValueError(
                f"Unknown grid type '{grid_type}'. "
                + f"Valid values are {', '.join(grid_type_to_extension)}."
            )

        path = pathlib.Path(filename)
        if not path.suffix:
            path = path.with_name(path.name + grid_type_to_extension[grid_type])
        self.filename = path

        self.grid_type = grid_type
        self.num_points = num_points
        self.num_cells = num_cells
        self.appended = append
        self.compression_level = _compression_level(compress)
        self.buf = AppendBuffer()

        self.root = ET.Element(
            "VTKFile",
            type=grid_type,
            version="1.0",
            # Use the native endianness. Not strictly necessary, but this simplifies
            # things a bit.
            byte_order=("LittleEndian" if sys.byteorder == "little" else "BigEndian"),
            header_type="UInt32",
        )
        if self.compression_level > 0:
            self.root.set("compressor", compressors["zlib"])

        comment = ET.Comment(f"This file was created by vtkxml v{__version__}")
        self.root.insert(0, comment)

        self.grid = ET.SubElement(self.root, grid_type, **grid_attrs)

    def __repr__(self):
        items = [
            "vtkxml VtkFile",
            f"file: {self.filename}",
            f"type: {self.grid_type}",
            f"num points: {self.num_points}",
            f"num cells: {self.num_cells}",
        ]
        return "<" + ", ".join(items) + ">"

    def add_piece(self, **attrs) -> ET.Element:
        return ET.SubElement(self.grid, "Piece", **attrs)

    def __setitem__(self, key, data):
        if isinstance(key, tuple):
            name, placement = key
        else:
            name, placement = key, None
        attach_data(self, data, name, placement)

    def save(self):
        appended_data = None
        if self.appended and len(self.buf) > 0:
            appended_data = ET.SubElement(self.root, "AppendedData", encoding="raw")

            def raw_writer(f):
                f.write(b"_")
                f.write(self.buf.getvalue())

            appended_data.text_writer = raw_writer

        try:
            ET.ElementTree(self.root).write(self.filename)
        finally:
            if appended_data is not None:
                self.root.remove(appended_data)
        return self.filename

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        if exc_type is not None:
            error(f"{self.filename} was not written.")
            return False
        self.save()
        return False
