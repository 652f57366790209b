from __future__ import annotations

from ._binary import check_header_size, encode_inline, write_appended
from ._common import warn
from ._cxml import etree as ET
from ._exceptions import StructuralError
from ._payload import (
    Placement,
    as_payload,
    check_tuple_sizes,
    guess_placement,
    inspect,
    is_text,
    sizeof_data,
    vtk_type,
)


def data_to_xml(
    vtk,
    parent: ET.Element,
    data,
    name: str,
    placement: Placement | None = None,
    num_components: int = 1,
) -> ET.Element:
    """Adds data as a DataArray to the VTK XML tree, under `parent`.

    If `placement` is given, the number of components (and, for field data, the
    number of tuples) is deduced from the data dimensions and the grid size.
    Otherwise, `num_components` is used as is; this is what grid builders use for
    points, coordinates and connectivity. `placement` may also be given by its
    container name, e.g. "PointData".

    Depending on `vtk.appended`, the binary data goes to the shared append buffer
    `vtk.buf` or is base64-encoded into the node text.
    """
    payload = as_payload(data)

    # collect everything before the tree and the buffer are touched
    if placement is None:
        vtu_type = vtk_type(payload)
        check_tuple_sizes(payload)
        nc = num_components
        nt = None
        nbytes = sizeof_data(payload)
    else:
        vtu_type, nc, nt, nbytes = inspect(payload, vtk, Placement(placement))
    check_header_size(nbytes)

    if any(c.get("Name") == name for c in parent if isinstance(c, ET.Element)):
        warn(f"{parent.name} already contains an array named '{name}'.")

    da = ET.SubElement(
        parent,
        "Array" if is_text(payload) else "DataArray",
        type=vtu_type,
        Name=name,
        NumberOfComponents=nc,
    )
    if nt is not None:
        da.set("NumberOfTuples", nt)

    level = vtk.compression_level
    if vtk.appended:
        da.set("format", "appended")
        da.set("offset", vtk.buf.tell())
        write_appended(vtk.buf, payload, nbytes, level)
    else:
        # "binary" means base64-encoded
        da.set("format", "binary")
        header, body = encode_inline(payload, nbytes, level)
        da.text = "\n" + header + body + "\n"

    return da


def _container(vtk, placement: Placement) -> ET.Element:
    grid = vtk.root.find(vtk.grid_type)
    if grid is None:
        raise StructuralError(f"VTK file has no {vtk.grid_type} node.")

    if placement is Placement.FIELD:
        base = grid
    else:
        pieces = grid.findall("Piece")
        if not pieces:
            raise StructuralError(
                f"Cannot add {placement.value} before a Piece has been added "
                + f"to the {vtk.grid_type}."
            )
        base = pieces[-1]

    node = base.find(placement.value)
    if node is None:
        node = ET.SubElement(base, placement.value)
    return node


def add_field_data(vtk, data, name: str, placement: Placement) -> ET.Element:
    """Adds point, cell or field data to the VTK file."""
    payload = as_payload(data)
    placement = Placement(placement)
    # shape, type and size errors are raised before any container is created
    check_header_size(inspect(payload, vtk, placement).nbytes)
    return data_to_xml(vtk, _container(vtk, placement), payload, name, placement)


def attach_data(vtk, data, name: str, placement: Placement | None = None):
    """Adds a named dataset to the VTK file.

    If `placement` isn't given, it is guessed from the data size and the grid
    dimensions: data that fits the points becomes point data, then cell data,
    and anything else is stored as field data.
    """
    payload = as_payload(data)
    if placement is None:
        placement = guess_placement(payload, vtk)
    return add_field_data(vtk, payload, name, placement)


def point_data(vtk, data, name: str) -> ET.Element:
    return add_field_data(vtk, data, name, Placement.POINT)


def cell_data(vtk, data, name: str) -> ET.Element:
    return add_field_data(vtk, data, name, Placement.CELL)


def field_data(vtk, data, name: str) -> ET.Element:
    return add_field_data(vtk, data, name, Placement.FIELD)
