"""Bloch integrators sub-package."""

__all__ = []

from . import _bloch  # noqa

from ._bloch import *  # noqa

__all__.extend(_bloch.__all__)
