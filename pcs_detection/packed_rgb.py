"""Helpers for the packed color field used by PCL's XYZRGB point type

PCL stores a point's color as a single 32 bit value laid out as 0x00RRGGBB. For historical reasons
the field is typed as a float, so the integer bits are reinterpreted rather than converted.
"""
from typing import Union

import numpy as np
import torch

RED_SHIFT = 16
GREEN_SHIFT = 8
BLUE_SHIFT = 0
CHANNEL_MASK = 0xFF


def pack_rgb(rgb: Union[np.ndarray, torch.Tensor]) -> np.ndarray:
    """Packs an [N, 3] array of (r, g, b) bytes into [N] uint32 values"""
    if isinstance(rgb, torch.Tensor):
        rgb = rgb.detach().cpu().numpy()
    if rgb.ndim != 2 or rgb.shape[1] != 3:
        raise ValueError(f"Expected `rgb` of shape [N, 3] but got shape {rgb.shape} instead")

    rgb = rgb.astype(np.uint32)
    return ((rgb[:, 0] << RED_SHIFT) | (rgb[:, 1] << GREEN_SHIFT) | (rgb[:, 2] << BLUE_SHIFT))


def unpack_rgb(packed: np.ndarray) -> np.ndarray:
    """Unpacks [N] packed colors into an [N, 3] uint8 array of (r, g, b)

    Float32 input is treated as the legacy PCL `rgb` field and reinterpreted bitwise.
    """
    packed = np.asarray(packed)
    if packed.dtype == np.float32:
        packed = packed.view(np.uint32)
    elif not np.issubdtype(packed.dtype, np.integer):
        raise TypeError(f"Expected packed colors as float32 or integers, got {packed.dtype}")

    packed = packed.astype(np.uint32).reshape(-1)
    r = (packed >> RED_SHIFT) & CHANNEL_MASK
    g = (packed >> GREEN_SHIFT) & CHANNEL_MASK
    b = (packed >> BLUE_SHIFT) & CHANNEL_MASK
    return np.stack((r, g, b), axis=1).astype(np.uint8)


def packed_to_float(packed: np.ndarray) -> np.ndarray:
    """Reinterprets packed uint32 colors as float32, matching PCL's `rgb` field"""
    return np.ascontiguousarray(packed, dtype=np.uint32).view(np.float32)
