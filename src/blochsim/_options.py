"""
Helper data structure to handle integrator options.
"""
__all__ = ["IntegratorOptions", "parse_options"]

from dataclasses import dataclass

import dacite
from dacite import Config

from ._utils import DTYPES


@dataclass
class IntegratorOptions:
    device: str | None = None
    dtype: str | None = None
    on_error: str = "raise"
    verbose: bool = False

    def __post_init__(self):
        if self.dtype is not None and self.dtype not in DTYPES:
            raise ValueError(
                f"Unsupported dtype: {self.dtype} (must be one of {list(DTYPES)})"
            )
        if self.on_error not in ("raise", "warn"):
            raise ValueError(
                f"Unsupported on_error policy: {self.on_error} (must be 'raise' or 'warn')"
            )


def parse_options(kwargs):
    """
    Build integrator options from keyworded arguments.

    Unknown option names raise ``dacite.UnexpectedDataError``.
    """
    return dacite.from_dict(
        IntegratorOptions, kwargs, config=Config(check_types=False, strict=True)
    )
