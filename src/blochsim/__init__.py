"""Main BlochSim API."""

__all__ = []

from . import _errors
from . import _integrators

from ._errors import *  # noqa
from ._integrators import integrate  # noqa
from ._options import IntegratorOptions  # noqa
from ._utils import gamma, gamma_bar  # noqa

__all__.extend(_integrators.__all__)
__all__.extend(_errors.__all__)
__all__.extend(["IntegratorOptions", "gamma", "gamma_bar"])
