r"""
Hard pulse excitation
=====================
This script shows how to use the package to compute the magnetization trajectory
of a set of spins during a hard RF pulse followed by free relaxation.

The effective field is given in the rotating frame, so each spin only sees the
RF field (along X) and its own off-resonance (along Z):

.. code-block::

                |--tau--|
        .        _______                                          .
        . Rf  __|       |_______________________________________  .
        .                                                         .
        .       |excite |        free precession / relaxation     .

"""

import numpy as np
import matplotlib.pyplot as plt

import blochsim

# %%
# Field definition
# ================
# We simulate ``nspins`` isochromats spread over +-200 Hz off-resonance.
# A 90 deg hard pulse lasts ``tau`` ms, then the field is switched off.

nspins = 9
df = np.linspace(-200.0, 200.0, nspins)  # Hz

dt = 0.01  # ms
tau = 0.5  # ms
duration = 50.0  # ms
nsteps = int(duration / dt)
time = dt * np.arange(nsteps)

b1 = 0.5 * np.pi / (blochsim.gamma * tau)  # T
bx = np.zeros((nsteps, nspins))
bx[time < tau] = b1
by = np.zeros((nsteps, nspins))
bz = np.tile(df * 1e-3 / blochsim.gamma_bar, (nsteps, 1))  # Hz -> T

# %%
# Simulation
# ==========
# Spins start at equilibrium.

Mi = np.zeros((3, nspins))
Mi[2] = 1.0
T1 = 1000.0 * np.ones(nspins)
T2 = 30.0 * np.ones(nspins)

mx, my, mz = blochsim.integrate(Mi, bx, by, bz, T1, T2, dt * np.ones(nsteps))

fig, ax = plt.subplots(1, 2)

ax[0].plot(time, np.abs(mx + 1j * my).mean(axis=-1))
ax[0].set_title("net transverse magnetization")
ax[0].set_xlabel("time [ms]")
ax[0].set_ylabel("magnetization [a.u.]")

ax[1].plot(time, mz)
ax[1].set_title("longitudinal magnetization")
ax[1].set_xlabel("time [ms]")

plt.tight_layout()
plt.show()

# %%
# GPU simulation
# ==============
# Computation follows the leading input: passing ``torch`` tensors on the GPU
# (or the ``device`` option) runs the integration there.
# Outputs are ``torch`` tensors on the same device as the leading input.

import torch

device = "cuda:0" if torch.cuda.is_available() else "cpu"

mx, my, mz = blochsim.integrate(
    torch.as_tensor(Mi, device=device),
    torch.as_tensor(bx, device=device),
    torch.as_tensor(by, device=device),
    torch.as_tensor(bz, device=device),
    T1,
    T2,
    dt * np.ones(nsteps),
)

plt.plot(time, mz.cpu().numpy())
plt.title(f"longitudinal magnetization ({device})")
plt.xlabel("time [ms]")
plt.show()
