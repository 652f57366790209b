"""
Classification of user data into payloads, and the type/shape bookkeeping needed for
the attributes of a VTK DataArray.
"""
from __future__ import annotations

import enum
import numbers
from typing import NamedTuple

import numpy as np

from ._common import numpy_to_vtk_type
from ._exceptions import ShapeMismatchError, UnsupportedTypeError


class Placement(enum.Enum):
    """Where data lives in the dataset. The values are the VTK container names."""

    POINT = "PointData"
    CELL = "CellData"
    FIELD = "FieldData"


def _numeric(data) -> np.ndarray:
    array = np.asarray(data)
    # swap the data to match the system byteorder
    native = array.dtype.newbyteorder("=")
    if native not in numpy_to_vtk_type:
        raise UnsupportedTypeError(f"Data type not supported by VTK: {array.dtype}")
    return array.astype(native, copy=False)


def encode_text(value: str) -> bytes:
    return value.encode() + b"\0"


class Scalar:
    def __init__(self, value):
        self.data = _numeric(value)

    def __repr__(self):
        return f"<Scalar {self.data.dtype}>"


class Text:
    def __init__(self, value: str):
        self.value = value

    def __repr__(self):
        return f"<Text {self.value!r}>"


class TextList:
    def __init__(self, values):
        self.values = list(values)

    def __repr__(self):
        return f"<TextList, {len(self.values)} strings>"


class NumericArray:
    def __init__(self, data):
        self.data = _numeric(data)

    def __repr__(self):
        return f"<NumericArray {self.data.dtype}, shape {self.data.shape}>"


class ArrayTuple:
    """Separate component arrays of one vector field, e.g. ``(vx, vy, vz)``."""

    def __init__(self, arrays):
        self.arrays = tuple(_numeric(a) for a in arrays)

    def __repr__(self):
        return f"<ArrayTuple, {len(self.arrays)} components>"


payload_types = (Scalar, Text, TextList, NumericArray, ArrayTuple)


def _is_text_sequence(values) -> bool:
    return len(values) > 0 and all(isinstance(v, str) for v in values)


def as_payload(data):
    """Sorts `data` into one of the payload classes. Numeric element types are
    checked here, before anything gets written.
    """
    if isinstance(data, payload_types):
        return data
    if isinstance(data, str):
        return Text(data)
    if isinstance(data, (numbers.Number, np.generic)):
        return Scalar(data)
    if isinstance(data, (tuple, list)) and _is_text_sequence(data):
        return TextList(data)
    if isinstance(data, tuple):
        return ArrayTuple(data)

    array = np.asarray(data)
    if array.dtype.kind == "U":
        return TextList(array.ravel(order="A").tolist())
    if array.dtype.kind == "O":
        values = array.ravel(order="A").tolist()
        if _is_text_sequence(values):
            return TextList(values)
    return NumericArray(array)


def is_text(payload) -> bool:
    return isinstance(payload, (Text, TextList))


def vtk_type(payload) -> str:
    if is_text(payload):
        return "String"

    if isinstance(payload, (Scalar, NumericArray)):
        dtype = payload.data.dtype
    elif isinstance(payload, ArrayTuple):
        dtypes = {a.dtype for a in payload.arrays}
        if len(dtypes) != 1:
            raise UnsupportedTypeError(
                "Tuple components must share one data type, "
                + f"got {sorted(str(d) for d in dtypes)}."
            )
        dtype = dtypes.pop()
    else:
        raise TypeError(f"Unknown payload {payload!r}")

    try:
        return numpy_to_vtk_type[dtype]
    except KeyError:
        raise UnsupportedTypeError(f"Data type not supported by VTK: {dtype}")


def element_count(payload) -> int:
    if isinstance(payload, (Scalar, Text)):
        return 1
    if isinstance(payload, TextList):
        return len(payload.values)
    if isinstance(payload, NumericArray):
        return payload.data.size
    if isinstance(payload, ArrayTuple):
        return payload.arrays[0].size if payload.arrays else 0
    raise TypeError(f"Unknown payload {payload!r}")


def _ambient_count(vtk, placement: Placement) -> int:
    return vtk.num_points if placement is Placement.POINT else vtk.num_cells


def check_tuple_sizes(payload) -> set:
    """Returns the common component size of an ArrayTuple (empty set if there are no
    components). Other payloads pass unchecked.
    """
    if not isinstance(payload, ArrayTuple):
        return set()
    sizes = {a.size for a in payload.arrays}
    if len(sizes) > 1:
        raise ShapeMismatchError(
            f"Tuple components have different sizes {sorted(sizes)}."
        )
    return sizes


def tuple_order(payload) -> str:
    """Memory order in which all components of an ArrayTuple are read, so that the
    same index addresses the same grid position in each of them.
    """
    if payload.arrays and all(a.flags.f_contiguous for a in payload.arrays):
        return "F"
    return "C"


def num_components(payload, vtk, placement: Placement) -> int:
    if isinstance(payload, (Scalar, Text, TextList)):
        return 1

    if isinstance(payload, ArrayTuple):
        sizes = check_tuple_sizes(payload)
        if placement is not Placement.FIELD and sizes:
            count = _ambient_count(vtk, placement)
            if sizes != {count}:
                raise ShapeMismatchError(
                    f"Tuple components have size {sizes.pop()}, "
                    + f"expected {count} ({placement.value})."
                )
        return len(payload.arrays)

    if isinstance(payload, NumericArray):
        if placement is Placement.FIELD:
            return 1
        count = _ambient_count(vtk, placement)
        size = payload.data.size
        if count == 0:
            # only empty data fits an empty grid
            if size == 0:
                return 1
            raise ShapeMismatchError(
                f"Cannot add {size} values as {placement.value} to a grid without "
                + ("points." if placement is Placement.POINT else "cells.")
            )
        # empty data gives zero components
        nc = size // count
        if nc * count != size:
            raise ShapeMismatchError(
                f"Incorrect dimensions of input array: {size} values don't fit "
                + f"{count} {'points' if placement is Placement.POINT else 'cells'}."
            )
        return nc

    raise TypeError(f"Unknown payload {payload!r}")


def num_field_tuples(payload) -> int:
    """Value of the NumberOfTuples attribute of FieldData arrays."""
    return element_count(payload)


def guess_placement(payload, vtk) -> Placement:
    """Guess from the data size whether it belongs to the points, the cells or the
    whole dataset.
    """
    if isinstance(payload, ArrayTuple) and not payload.arrays:
        return Placement.POINT

    n = element_count(payload)
    if vtk.num_points > 0 and n % vtk.num_points == 0:
        return Placement.POINT
    if vtk.num_cells > 0 and n % vtk.num_cells == 0:
        return Placement.CELL
    return Placement.FIELD


def sizeof_data(payload) -> int:
    """Total size of the payload in bytes."""
    if isinstance(payload, (Scalar, NumericArray)):
        return payload.data.nbytes
    if isinstance(payload, Text):
        return len(encode_text(payload.value))
    if isinstance(payload, TextList):
        return sum(len(encode_text(v)) for v in payload.values)
    if isinstance(payload, ArrayTuple):
        return sum(a.nbytes for a in payload.arrays)
    raise TypeError(f"Unknown payload {payload!r}")


class DataShape(NamedTuple):
    vtk_type: str
    num_components: int
    # only set for FieldData
    num_tuples: int | None
    nbytes: int


def inspect(payload, vtk, placement: Placement) -> DataShape:
    return DataShape(
        vtk_type(payload),
        num_components(payload, vtk, placement),
        num_field_tuples(payload) if placement is Placement.FIELD else None,
        sizeof_data(payload),
    )
