"""Errors and warnings raised by the Bloch integrators."""

__all__ = [
    "ShapeMismatchError",
    "FieldShapeError",
    "TimeStepShapeError",
    "InitialMagnetizationShapeError",
    "T1ShapeError",
    "T2ShapeError",
    "ShapeMismatchWarning",
    "ImaginaryFieldWarning",
]


class ShapeMismatchError(ValueError):
    """
    Base class for inconsistent input sizes.

    Parameters
    ----------
    parameter : str
        Name of the offending input argument.
    expected : tuple | int
        Expected shape (or size).
    actual : tuple | int
        Actual shape (or size).

    """

    message = "input size mismatch"

    def __init__(self, parameter, expected, actual):  # noqa
        self.parameter = parameter
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"{self.message} ({parameter}: expected {expected}, got {actual})"
        )


class FieldShapeError(ShapeMismatchError):  # noqa
    message = "B vectors not the same shape"


class TimeStepShapeError(ShapeMismatchError):  # noqa
    message = "dt not same length as B vectors"


class InitialMagnetizationShapeError(ShapeMismatchError):  # noqa
    message = "initial magnetization not right size"


class T1ShapeError(ShapeMismatchError):  # noqa
    message = "T1 vector not right size"


class T2ShapeError(ShapeMismatchError):  # noqa
    message = "T2 vector not right size"


class ShapeMismatchWarning(UserWarning):
    """Shape error reported as a warning (``on_error="warn"``)."""


class ImaginaryFieldWarning(UserWarning):
    """B field had a non-zero imaginary part, which has been discarded."""
