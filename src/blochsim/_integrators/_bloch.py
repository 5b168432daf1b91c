"""Time-discretized Bloch equation integration sub-routines."""

__all__ = ["integrate"]

import time
import warnings

import numpy.typing as npt

import torch

from .._errors import (
    FieldShapeError,
    ImaginaryFieldWarning,
    InitialMagnetizationShapeError,
    ShapeMismatchError,
    ShapeMismatchWarning,
    T1ShapeError,
    T2ShapeError,
    TimeStepShapeError,
)
from .._options import parse_options
from .._utils import DTYPES, gamma

from ._decorators import torchify


@torchify
def integrate(
    Mi: npt.ArrayLike,
    bx: npt.ArrayLike,
    by: npt.ArrayLike,
    bz: npt.ArrayLike,
    T1: float | npt.ArrayLike,
    T2: float | npt.ArrayLike,
    dt: npt.ArrayLike,
    **kwargs,
):
    r"""Evolve magnetization using the time-discretized Bloch equation.

    Parameters
    ----------
    Mi : npt.ArrayLike
        Initial X, Y, Z magnetization of shape ``(3, nspins)``,
        normalized to magnitude ``<= M0 = 1``.
    bx : npt.ArrayLike
        Effective X applied magnetic field (in T) of shape ``(ntime, nspins)``,
        in the rotating frame (no B0).
    by : npt.ArrayLike
        Effective Y applied magnetic field (in T) of shape ``(ntime, nspins)``.
    bz : npt.ArrayLike
        Effective Z applied magnetic field (in T) of shape ``(ntime, nspins)``.
    T1 : float | npt.ArrayLike
        Spin-lattice relaxation time (in ms) of shape ``(nspins,)``.
    T2 : float | npt.ArrayLike
        Spin-spin relaxation time (in ms) of shape ``(nspins,)``.
    dt : npt.ArrayLike
        Time interval preceding each sample (in ms) of shape ``(ntime,)``.

    Other Parameters
    ----------------
    device : str, optional
        Computational device (e.g., ``cpu`` or ``cuda:n``, with ``n=0,1,2...``).
        Defaults to the device of the leading input.
    dtype : str, optional
        Working precision (``float32`` or ``float64``).
        Defaults to ``float64`` if the initial magnetization or any field
        component is double precision, ``float32`` otherwise.
    on_error : str, optional
        Policy for inconsistent input sizes. ``raise`` raises the
        corresponding :class:`ShapeMismatchError`; ``warn`` emits it as a
        :class:`ShapeMismatchWarning` and returns zeros.
        The default is ``raise``.
    verbose : bool, optional
        If ``True``, prints execution time. The default is ``False``.

    Returns
    -------
    mx : numpy.ndarray | torch.Tensor
        X magnetization of shape ``(ntime, nspins)``.
    my : numpy.ndarray | torch.Tensor
        Y magnetization of shape ``(ntime, nspins)``.
    mz : numpy.ndarray | torch.Tensor
        Z magnetization of shape ``(ntime, nspins)``.

    Notes
    -----
    Rotations are explicitly calculated (Rodrigues' formula) and carried
    out on the magnetization vector, which keeps the simulation stable for
    arbitrary rotation angles per step. Rotations are negative, as usual in MRI:

    .. math::

        \theta = -\gamma |B| \Delta t.

    Relaxation is applied after rotation as a first order loss / recovery:

    .. math::

        M_{xy} \leftarrow M_{xy} (1 - \Delta t / T_2), \quad
        M_z \leftarrow M_z + (1 - M_z) \Delta t / T_1.

    This is accurate only for ``dt << T1, T2``.
    Magnetization is never renormalized.

    Field arrays with non-zero imaginary part are truncated to their real
    part (with a warning). 1D fields of shape ``(ntime,)`` and 1D initial
    magnetization of shape ``(3,)`` are treated as a single spin.

    """
    options = parse_options(kwargs)

    # working precision and device
    if options.dtype is not None:
        dtype = DTYPES[options.dtype]
    else:
        dtype = _get_dtype(Mi, bx, by, bz)
    if options.device is not None:
        device = torch.device(options.device)
    else:
        device = bx.device

    # B field must be real valued
    bx, by, bz = _get_real_field(bx, by, bz)

    # cast
    Mi, bx, by, bz, T1, T2, dt = [
        arg.to(device=device, dtype=dtype) for arg in (Mi, bx, by, bz, T1, T2, dt)
    ]
    Mi, bx, by, bz, T1, T2, dt = _reshape(Mi, bx, by, bz, T1, T2, dt)

    # size checks
    try:
        _check_shapes(Mi, bx, by, bz, T1, T2, dt)
    except ShapeMismatchError as error:
        if options.on_error == "raise":
            raise
        warnings.warn(f"Error: {error}", ShapeMismatchWarning)
        zero = torch.zeros((), dtype=dtype, device=device)
        return zero, zero.clone(), zero.clone()

    # run simulation
    tstart = time.time()
    mx, my, mz = _integrate(Mi, bx, by, bz, T1, T2, dt)
    tstop = time.time()

    if options.verbose:
        print(f"Elapsed time for simulation: {round(tstop - tstart, 4)} s")

    return mx, my, mz


# %% subroutines
def _get_dtype(*args):
    """Double precision if any input is double, single otherwise."""
    if any(arg.dtype in (torch.float64, torch.complex128) for arg in args):
        return torch.float64
    return torch.float32


def _get_real_field(bx, by, bz):
    """Discard imaginary part of B field."""
    nonreal = [torch.is_complex(b) and bool((b.imag != 0).any()) for b in (bx, by, bz)]
    if any(nonreal):
        warnings.warn(
            "Warning: B field must be real valued - using only the real part",
            ImaginaryFieldWarning,
        )

    return [b.real if torch.is_complex(b) else b for b in (bx, by, bz)]


def _reshape(Mi, bx, by, bz, T1, T2, dt):
    """Promote single spin inputs to (..., nspins) and flatten vectors."""
    bx, by, bz = [b[:, None] if b.ndim == 1 else b for b in (bx, by, bz)]
    if Mi.ndim == 1:
        Mi = Mi[:, None]
    T1, T2, dt = [arg.ravel() for arg in (T1, T2, dt)]

    return Mi, bx, by, bz, T1, T2, dt


def _check_shapes(Mi, bx, by, bz, T1, T2, dt):
    """Check input sizes, stopping at the first inconsistency."""
    if by.shape != bx.shape:
        raise FieldShapeError("by", tuple(bx.shape), tuple(by.shape))
    if bz.shape != bx.shape:
        raise FieldShapeError("bz", tuple(bx.shape), tuple(bz.shape))
    if bx.ndim != 2:
        raise FieldShapeError("bx", "(ntime, nspins)", tuple(bx.shape))

    # get sizes
    nsteps, nspins = bx.shape

    if dt.shape[0] != nsteps:
        raise TimeStepShapeError("dt", nsteps, dt.shape[0])
    if Mi.ndim != 2 or Mi.shape != (3, nspins):
        raise InitialMagnetizationShapeError("Mi", (3, nspins), tuple(Mi.shape))
    if T1.shape[0] != nspins:
        raise T1ShapeError("T1", nspins, T1.shape[0])
    if T2.shape[0] != nspins:
        raise T2ShapeError("T2", nspins, T2.shape[0])


def _integrate(Mi, bx, by, bz, T1, T2, dt):
    # put B into rotation angle / step
    B = gamma * torch.stack((bx, by, bz), dim=-1) * dt[:, None, None]

    # put T1 and T2 into losses / recovery per step
    t1 = dt[:, None] / T1
    t2 = 1 - dt[:, None] / T2

    # initialize output
    nsteps = B.shape[0]
    M = torch.zeros_like(B)
    if nsteps > 0:
        M[0] = Mi.T

    # sequential loop through time
    for n in range(1, nsteps):
        M1 = _rotate(M[n - 1], B[n - 1])
        M[n] = _relax(M1, t1[n - 1], t2[n - 1])

    return [m.contiguous() for m in M.unbind(-1)]


def _rotate(M, B):
    """Rotate M of shape (nspins, 3) by each applied B of shape (nspins, 3)."""
    # magnitude of applied rotation
    Bmag = torch.linalg.vector_norm(B, dim=-1)
    good = Bmag != 0

    # axis of rotation (zero for null fields)
    w = B / torch.where(good, Bmag, torch.ones_like(Bmag))[:, None]
    wx, wy, wz = w.unbind(-1)

    # negative rotations for MRI
    ct = torch.cos(Bmag)
    st = -torch.sin(Bmag)
    vt = 1 - ct

    # Rodrigues' rotation formula
    Mx0, My0, Mz0 = M.unbind(-1)
    Mx1 = (
        (ct + wx * wx * vt) * Mx0
        + (wx * wy * vt - wz * st) * My0
        + (wy * st + wx * wz * vt) * Mz0
    )
    My1 = (
        (wz * st + wx * wy * vt) * Mx0
        + (ct + wy * wy * vt) * My0
        + (-wx * st + wy * wz * vt) * Mz0
    )
    Mz1 = (
        (-wy * st + wx * wz * vt) * Mx0
        + (wx * st + wy * wz * vt) * My0
        + (ct + wz * wz * vt) * Mz0
    )
    M1 = torch.stack((Mx1, My1, Mz1), dim=-1)

    # no B field: just copy it
    return torch.where(good[:, None], M1, M)


def _relax(M, t1, t2):
    """Apply transverse decay and longitudinal recovery (M0 = 1)."""
    Mx, My, Mz = M.unbind(-1)
    return torch.stack((Mx * t2, My * t2, Mz + (1 - Mz) * t1), dim=-1)
