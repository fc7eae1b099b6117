from typing import Union, Optional, Tuple

import torch
import numpy as np

try:
    import open3d as o3d
    OPEN3D_FOUND = True
except ImportError:
    OPEN3D_FOUND = False

from .base_type_mixin import BaseTypeMixin
from .cloud_header import CloudHeader
from .constants import IS_DENSE_DEFAULT, POSITION_DTYPE, COLOR_DTYPE
from .exceptions import ShapeMismatch
from .packed_rgb import pack_rgb, unpack_rgb, packed_to_float


class StructuredPointCloud(BaseTypeMixin):
    """XYZRGB point cloud whose points may be laid out on a `height` x `width` grid

    Points are stored row-major, so the point at grid coordinate (x, y) is `xyz[y * width + x]`.
    Colors are kept as three explicit bytes per point. The packed form PCL uses is available through
    `packed_rgb()` / `packed_rgb_float()`.
    """

    def __init__(self,
                 xyz: Union[torch.Tensor, np.ndarray],
                 rgb: Optional[Union[torch.Tensor, np.ndarray]] = None,
                 width: Optional[int] = None,
                 height: Optional[int] = None,
                 is_dense: bool = IS_DENSE_DEFAULT,
                 header: Optional[CloudHeader] = None):
        """Initializes the cloud with XYZ and optional RGB data

        Parameters
        ----------
        xyz : Union[torch.Tensor, np.ndarray]
            The XYZ coordinates of the points. Should be of shape [N, 3].
        rgb : Union[torch.Tensor, np.ndarray], optional
            The unnormalized (0-255) RGB values of each point, shape [N, 3]. Defaults to black.
        width : int, optional
            Number of grid columns. Defaults to N (an unorganized cloud).
        height : int, optional
            Number of grid rows. Defaults to 1, or N / width when only the width is given.
        is_dense : bool
            Whether all points are known to be finite.
        header : CloudHeader, optional
            Metadata carried along with the cloud.
        """
        if len(xyz.shape) != 2 or xyz.shape[1] != 3:
            raise ValueError(f"Expected `xyz` of shape [N, 3] but got shape {tuple(xyz.shape)}")

        self.xyz: Union[torch.Tensor, np.ndarray] = xyz
        self.is_torch: bool = isinstance(self.xyz, torch.Tensor)
        num_points = xyz.shape[0]

        if rgb is None:
            if self.is_torch:
                rgb = torch.zeros((num_points, 3), dtype=torch.uint8, device=xyz.device)
            else:
                rgb = np.zeros((num_points, 3), dtype=COLOR_DTYPE)
        self._set_rgb(rgb)

        if width is None and height is None:
            width, height = num_points, 1
        elif height is None:
            height = num_points // width if width > 0 else 0
        elif width is None:
            width = num_points // height if height > 0 else 0

        if width < 0 or height < 0:
            raise ValueError(f"Cloud width and height must be non-negative, got {height} rows x "
                             f"{width} cols")

        if width * height != num_points:
            raise ShapeMismatch(f"Cloud of {num_points} points can't be laid out as "
                                f"{height} rows x {width} cols")

        self.width: int = width
        self.height: int = height
        self.is_dense: bool = is_dense
        self.header: CloudHeader = header if header is not None else CloudHeader()

    @classmethod
    def from_packed_rgb(cls,
                        xyz: np.ndarray,
                        packed: np.ndarray,
                        width: Optional[int] = None,
                        height: Optional[int] = None,
                        is_dense: bool = IS_DENSE_DEFAULT,
                        header: Optional[CloudHeader] = None) -> 'StructuredPointCloud':
        """Builds a cloud from colors in PCL's packed layout (uint32 or float32 reinterpreted)"""
        return cls(xyz, unpack_rgb(packed), width, height, is_dense, header)

    def _set_rgb(self, rgb: Union[torch.Tensor, np.ndarray]):
        if type(self.xyz) != type(rgb):
            raise TypeError("XYZ and RGB clouds must be same array "
                            f"type! XYZ is {type(self.xyz)} and RGB is {type(rgb)}")
        if len(rgb.shape) != 2 or rgb.shape[1] != 3:
            raise ValueError(f"Expected `rgb` of shape [N, 3] but got shape {tuple(rgb.shape)}")
        if rgb.shape[0] != self.xyz.shape[0]:
            raise ShapeMismatch(f"Got {self.xyz.shape[0]} XYZ points but {rgb.shape[0]} RGB values")

        if self.is_torch:
            self.rgb = rgb.to(dtype=torch.uint8)
        else:
            self.rgb = rgb.astype(COLOR_DTYPE, copy=False)

    def __len__(self) -> int:
        return self.xyz.shape[0]

    def is_organized(self) -> bool:
        """Returns True if the points are laid out on a grid with more than one row"""
        return self.height > 1

    def at(self, x: int, y: int) -> Tuple[float, float, float, int, int, int]:
        """Returns (x, y, z, r, g, b) of the point at grid column `x` and row `y`"""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Grid coordinate ({x}, {y}) out of range for "
                             f"{self.height} rows x {self.width} cols")
        idx = y * self.width + x
        px, py, pz = (float(v) for v in self.xyz[idx])
        r, g, b = (int(v) for v in self.rgb[idx])
        return px, py, pz, r, g, b

    def packed_rgb(self) -> np.ndarray:
        """Returns colors packed as uint32 0x00RRGGBB, one per point"""
        return pack_rgb(self.rgb)

    def packed_rgb_float(self) -> np.ndarray:
        """Returns packed colors reinterpreted as float32, the legacy PCL `rgb` field"""
        return packed_to_float(self.packed_rgb())

    def to_numpy(self):
        """Converts cloud to Numpy arrays if they're tensors"""
        if self.is_torch:
            self.xyz = self.xyz.detach().cpu().numpy()
            self.rgb = self.rgb.detach().cpu().numpy()
            self.is_torch = False

    def to_torch(self, dtype: torch.dtype = torch.double, device: torch.device = "cpu"):
        """Converts cloud to tensors if they're numpy array"""
        if not self.is_torch:
            self.xyz = torch.from_numpy(self.xyz).to(dtype).to(device)
            self.rgb = torch.from_numpy(self.rgb).to(device)
            self.is_torch = True
        else:
            # This should be a no-op if the cloud is already a tensor with correct dtype and device.
            self.xyz = self.xyz.to(dtype=dtype, device=device)
            self.rgb = self.rgb.to(device)

    def numpy_copy(self) -> Tuple[np.ndarray, np.ndarray]:
        """Returns (xyz, rgb) as freshly allocated float64/uint8 numpy arrays"""
        if self.is_torch:
            xyz = self.xyz.detach().cpu().numpy().astype(POSITION_DTYPE)
            rgb = self.rgb.detach().cpu().numpy().astype(COLOR_DTYPE)
        else:
            xyz = self.xyz.astype(POSITION_DTYPE)
            rgb = self.rgb.astype(COLOR_DTYPE)
        return xyz, rgb

    def to_open3d_copy(self):
        if not OPEN3D_FOUND:
            raise ImportError("Open3D not found. Please install Open3D to use this method.")

        xyz, rgb = self.numpy_copy()

        pcd = o3d.geometry.PointCloud()
        pcd.points = o3d.utility.Vector3dVector(xyz)
        pcd.colors = o3d.utility.Vector3dVector(rgb.astype(float) / 255.)

        return pcd

    def copy(self) -> 'StructuredPointCloud':
        if self.is_torch:
            xyz_new = self.xyz.detach().clone()
            rgb_new = self.rgb.detach().clone()
        else:
            xyz_new = self.xyz.copy()
            rgb_new = self.rgb.copy()

        return StructuredPointCloud(xyz_new, rgb_new, self.width, self.height, self.is_dense,
                                    self.header)
