"""
Reference (non-optimized) time-discretized Bloch simulation,
used to validate the vectorized torch integrator.

Here every spin is rotated one at a time by an explicitly built
rotation matrix, then relaxed.
"""
import numpy as np
import pytest

from blochsim import gamma


def rotation_matrix(B):
    """
    Rotation matrix for a rotation of -|B| about B / |B|.
    """
    Bmag = np.linalg.norm(B)
    if Bmag == 0:
        return np.eye(3)

    # axis and angle
    w = B / Bmag
    theta = -Bmag

    # cross product matrix
    K = np.asarray([[0.0, -w[2], w[1]], [w[2], 0.0, -w[0]], [-w[1], w[0], 0.0]])

    return np.eye(3) + np.sin(theta) * K + (1 - np.cos(theta)) * K @ K


def blochsim_reference(Mi, bx, by, bz, T1, T2, dt):
    """
    run a reference Bloch simulation
    """
    Mi = np.asarray(Mi, dtype=np.float64)
    B = gamma * np.stack((bx, by, bz), axis=-1) * np.asarray(dt)[:, None, None]
    nsteps, nspins = B.shape[:2]

    M = np.zeros((nsteps, nspins, 3))
    M[0] = Mi.T

    for n in range(1, nsteps):
        for s in range(nspins):
            M1 = rotation_matrix(B[n - 1, s]) @ M[n - 1, s]
            t1 = dt[n - 1] / T1[s]
            t2 = 1 - dt[n - 1] / T2[s]
            M[n, s] = [M1[0] * t2, M1[1] * t2, M1[2] + (1 - M1[2]) * t1]

    return M[..., 0], M[..., 1], M[..., 2]


@pytest.fixture
def reference():
    return blochsim_reference
