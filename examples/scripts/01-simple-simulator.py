"""Simple isochromat ensemble simulator: free induction decay."""

import numpy as np
import torch

import blochsim


def fid(nspins, T1, T2, T2star, dt=0.05, nsteps=2000, device="cpu"):
    """
    Simulate the free induction decay of a tipped magnetization.

    Args:
        nspins (int): number of isochromats.
        T1 (float): Longitudinal relaxation time in [ms].
        T2 (float): Transverse relaxation time in [ms].
        T2star (float): Effective transverse relaxation time in [ms].
            Off-resonances are drawn from a Lorentzian distribution of
            half width 1 / (2 * pi * T2'), with 1 / T2' = 1 / T2star - 1 / T2.
        dt (optional, float): Time step in [ms]. Defaults to 0.05.
        nsteps (optional, int): Number of time steps. Defaults to 2000.
        device (optional, str): Computational device. Defaults to "cpu".
    """
    # off-resonance distribution
    R2prime = 1 / T2star - 1 / T2  # 1 / ms
    rng = np.random.default_rng(42)
    df = R2prime / (2 * np.pi) * rng.standard_cauchy(nspins)  # kHz
    bz = torch.as_tensor(df / blochsim.gamma_bar, device=device).expand(nsteps, -1)

    # tipped magnetization
    Mi = torch.zeros((3, nspins), device=device)
    Mi[1] = 1.0

    # actual simulation
    mx, my, _ = blochsim.integrate(
        Mi,
        torch.zeros_like(bz),
        torch.zeros_like(bz),
        bz,
        T1 * torch.ones(nspins),
        T2 * torch.ones(nspins),
        dt * torch.ones(nsteps),
        verbose=True,
    )

    return (mx + 1j * my).mean(axis=-1).cpu().numpy()


if __name__ == "__main__":
    signal = fid(1000, 1000.0, 100.0, 20.0)
    print(abs(signal[::200]))
