from pathlib import Path
import sys

import numpy as np

CUR_DIR = Path(__file__).resolve().parent
REPO_ROOT = CUR_DIR.parent

sys.path.append(REPO_ROOT.as_posix())
from pcs_detection.structured_point_cloud import StructuredPointCloud
from pcs_detection.cloud_header import CloudHeader

# yapf: disable
EXAMPLE_XYZ = np.array((
    (0, 0, 0),
    (1, 0, 0),
    (0, 1, 0),
    (1, 1, 0)), dtype=np.float64)

EXAMPLE_RGB = np.array((
    ( 1,  2,  3),
    ( 4,  5,  6),
    ( 7,  8,  9),
    (10, 11, 12)), dtype=np.uint8)
# yapf: enable

EXAMPLE_HEADER = CloudHeader(seq=42, stamp=1570200000000000, frame_id="camera_color_optical_frame")


def make_example_cloud() -> StructuredPointCloud:
    """The 2 x 2 cloud used throughout the conversion tests"""
    return StructuredPointCloud(EXAMPLE_XYZ.copy(),
                                EXAMPLE_RGB.copy(),
                                width=2,
                                height=2,
                                header=EXAMPLE_HEADER)


def make_random_cloud(height: int = 48, width: int = 64, seed: int = 0) -> StructuredPointCloud:
    rng = np.random.default_rng(seed)
    num_pts = height * width
    xyz = rng.normal(scale=10.0, size=(num_pts, 3))
    rgb = rng.integers(0, 256, size=(num_pts, 3), dtype=np.uint8)
    return StructuredPointCloud(xyz, rgb, width=width, height=height)
