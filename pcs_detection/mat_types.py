"""OpenCV Mat type codes and their human readable labels

A Mat type packs the element depth into the low `CV_CN_SHIFT` bits and the channel count minus one
above them, e.g. CV_8UC3 == CV_8U + ((3 - 1) << CV_CN_SHIFT) == 16.
"""
from typing import Union

import numpy as np
import torch

from pcs_detection.constants import (CV_CN_SHIFT, CV_CN_MAX, CV_MAT_DEPTH_MASK, CV_MAT_CN_MASK,
                                     DEPTH_LABELS, DEPTH_LABEL_UNKNOWN, NUMPY_DTYPE_TO_CV_DEPTH)
from pcs_detection.exceptions import UnsupportedDtype

TORCH_DTYPE_TO_CV_DEPTH = {
    torch.uint8: NUMPY_DTYPE_TO_CV_DEPTH[np.dtype(np.uint8)],
    torch.int8: NUMPY_DTYPE_TO_CV_DEPTH[np.dtype(np.int8)],
    torch.int16: NUMPY_DTYPE_TO_CV_DEPTH[np.dtype(np.int16)],
    torch.int32: NUMPY_DTYPE_TO_CV_DEPTH[np.dtype(np.int32)],
    torch.float32: NUMPY_DTYPE_TO_CV_DEPTH[np.dtype(np.float32)],
    torch.float64: NUMPY_DTYPE_TO_CV_DEPTH[np.dtype(np.float64)],
}
# Older torch releases have no uint16.
if hasattr(torch, "uint16"):
    TORCH_DTYPE_TO_CV_DEPTH[torch.uint16] = NUMPY_DTYPE_TO_CV_DEPTH[np.dtype(np.uint16)]


def cv_mat_depth(type_code: int) -> int:
    return type_code & CV_MAT_DEPTH_MASK


def cv_mat_cn(type_code: int) -> int:
    return ((type_code & CV_MAT_CN_MASK) >> CV_CN_SHIFT) + 1


def cv_make_type(depth: int, channels: int) -> int:
    """Equivalent of OpenCV's CV_MAKETYPE macro"""
    if channels < 1 or channels > CV_CN_MAX:
        raise ValueError(f"Channel count must be in [1, {CV_CN_MAX}], got {channels}")
    return cv_mat_depth(depth) + ((channels - 1) << CV_CN_SHIFT)


def type2str(type_code: int) -> str:
    """Returns a label such as "8UC3" for an OpenCV Mat type code

    Depths outside the standard table (e.g. CV_16F) are labelled "User".
    """
    depth_label = DEPTH_LABELS.get(cv_mat_depth(type_code), DEPTH_LABEL_UNKNOWN)
    return f"{depth_label}C{cv_mat_cn(type_code)}"


def mat_type(img: Union[np.ndarray, torch.Tensor]) -> int:
    """Returns the OpenCV type code an image would have as a cv::Mat

    Images are [H, W] for single channel or [H, W, C] with channels last.
    """
    if isinstance(img, torch.Tensor):
        depth = TORCH_DTYPE_TO_CV_DEPTH.get(img.dtype)
    else:
        depth = NUMPY_DTYPE_TO_CV_DEPTH.get(img.dtype)
    if depth is None:
        raise UnsupportedDtype(f"No OpenCV depth for element type {img.dtype}")

    if img.ndim == 2:
        channels = 1
    elif img.ndim == 3:
        channels = img.shape[2]
    else:
        raise ValueError(f"Expected image of shape [H, W] or [H, W, C] but got {tuple(img.shape)}")

    return cv_make_type(depth, channels)
