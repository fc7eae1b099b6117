from abc import ABC, abstractmethod
from typing import Tuple

import numpy as np
import torch


class BaseTypeMixin(ABC):
    """Interface for cloud containers backed by either NumPy arrays or PyTorch tensors

    `to_torch()` / `to_numpy()` switch the backing storage in place. Image conversions only ever
    read through `numpy_copy()`, so they work the same regardless of the storage.
    """
    is_torch: bool

    @abstractmethod
    def to_torch(self, dtype: torch.dtype = torch.double, device: torch.device = "cpu"):
        pass

    @abstractmethod
    def to_numpy(self):
        pass

    @abstractmethod
    def numpy_copy(self) -> Tuple[np.ndarray, np.ndarray]:
        """Returns (xyz, rgb) as new float64 [N, 3] and uint8 [N, 3] arrays"""
        pass

    @abstractmethod
    def copy(self):
        pass
