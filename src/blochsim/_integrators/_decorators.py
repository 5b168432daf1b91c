"""Decorator utils."""

__all__ = ["torchify"]

import inspect

from functools import wraps
from typing import Callable

import numpy as np

import torch


def torchify(func: Callable) -> Callable:
    """
    Force all the numeric input argument (including scalars) to be torch.Tensors.

    The first ArrayLike argument is chosen to determine the leading
    array interface (numpy or torch) and device (cpu or cuda:n).

    Output is automatically converted to the same array interface as
    the leading array.
    """
    signature = inspect.signature(func)

    @wraps(func)
    def wrapper(*args, **kwargs):
        bound = _get_args(signature, args, kwargs)

        # cast sequences and scalars to numpy
        names = [k for k, v in bound.arguments.items() if _is_array(v) or _could_be_array(v)]
        for k in names:
            if not _is_array(bound.arguments[k]):
                bound.arguments[k] = np.asarray(bound.arguments[k])

        # get leading array interface
        leading = _get_leading_arg([bound.arguments[k] for k in names])
        device = _get_device(leading)

        # run function
        for k in names:
            bound.arguments[k] = torch.as_tensor(bound.arguments[k], device=device)
        output = func(*bound.args, **bound.kwargs)

        return _to_interface(output, leading)

    return wrapper


# %% subroutines
def _get_args(signature, args, kwargs):
    """Bind input args/kwargs mix to the signature.

    This automatically fills missing kwargs with default values.
    """
    bound = signature.bind(*args, **kwargs)
    bound.apply_defaults()

    return bound


_numeric_types = (int, float, complex)


def _is_array(arg):
    return isinstance(arg, (np.ndarray, torch.Tensor))


def _could_be_array(arg):
    if isinstance(arg, bool):
        return False
    if isinstance(arg, _numeric_types):
        return True
    elif isinstance(arg, (list, tuple)) and len(arg) > 0:
        return np.asarray(arg).dtype.kind in "iufc"
    return False


def _get_leading_arg(args):
    for arg in args:
        if isinstance(arg, torch.Tensor):
            return arg
        if isinstance(arg, np.ndarray) and arg.ndim != 0:
            return arg
    return None


def _get_device(arg):
    if isinstance(arg, torch.Tensor):
        return arg.device
    return torch.device("cpu")


def _to_interface(output, leading):
    """Convert output tensor(s) to the interface of the leading argument."""
    if isinstance(output, (tuple, list)):
        return type(output)(_to_interface(out, leading) for out in output)
    if not isinstance(output, torch.Tensor):
        return output
    if isinstance(leading, torch.Tensor):
        return output.to(leading.device)
    return output.detach().cpu().numpy()
