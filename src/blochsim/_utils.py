"""
Utilities related to MR simulation.
"""
import torch

# 1H Gyromagnetic Factor
gamma_bar = 42.57e3  # kHz / T
gamma = 2 * torch.pi * gamma_bar  # rad / ms / T

# supported working precisions
DTYPES = {"float32": torch.float32, "float64": torch.float64}
