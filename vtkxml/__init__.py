from .__about__ import __author__, __author_email__, __version__, __website__
from ._binary import AppendBuffer, pack_header, write_array
from ._cxml.etree import SubElement
from ._data_array import (
    add_field_data,
    attach_data,
    cell_data,
    data_to_xml,
    field_data,
    point_data,
)
from ._exceptions import (
    CompressionError,
    ShapeMismatchError,
    StructuralError,
    UnsupportedTypeError,
    WriteError,
)
from ._file import VtkFile
from ._payload import Placement

__all__ = [
    "add_field_data",
    "attach_data",
    "cell_data",
    "data_to_xml",
    "field_data",
    "point_data",
    "pack_header",
    "write_array",
    "AppendBuffer",
    "SubElement",
    "Placement",
    "VtkFile",
    "WriteError",
    "ShapeMismatchError",
    "UnsupportedTypeError",
    "CompressionError",
    "StructuralError",
    "__version__",
    "__author__",
    "__author_email__",
    "__website__",
]
