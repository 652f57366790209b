class WriteError(Exception):
    pass


class ShapeMismatchError(WriteError):
    pass


class UnsupportedTypeError(WriteError):
    pass


class CompressionError(WriteError):
    pass


class StructuralError(WriteError):
    pass
