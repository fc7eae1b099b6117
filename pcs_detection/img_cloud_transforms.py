from typing import Tuple, Optional, Union
import logging
from warnings import warn

import cv2
import numpy as np
import torch

from pcs_detection.cloud_header import CloudHeader
from pcs_detection.constants import (INT32_MAX, NUM_POSITION_CHANNELS, NUM_COLOR_CHANNELS,
                                     POSITION_DTYPE, COLOR_DTYPE, IS_DENSE_DEFAULT,
                                     NUMPY_DTYPE_TO_CV_DEPTH)
from pcs_detection.exceptions import ShapeMismatch, DegenerateCloud, DimensionOverflow
from pcs_detection.mat_types import mat_type, type2str
from pcs_detection.structured_point_cloud import StructuredPointCloud

logger = logging.getLogger(__name__)

ImageLike = Union[np.ndarray, torch.Tensor]


def _to_numpy(img: ImageLike) -> np.ndarray:
    if isinstance(img, torch.Tensor):
        return img.detach().cpu().numpy()
    return np.asarray(img)


def _apply_mask_torch(input_image: torch.Tensor, mask: torch.Tensor) -> torch.Tensor:
    """Tensor counterpart of the OpenCV path: same dtype out, integer products saturate"""
    is_image_float = input_image.is_floating_point() or input_image.is_complex()
    if mask.is_floating_point() and not is_image_float:
        warn(f"Casting {mask.dtype} mask to {input_image.dtype} to match the image. Fractional "
             "mask values will be truncated.")
    mask = mask.to(dtype=input_image.dtype, device=input_image.device)

    if is_image_float or input_image.dtype == torch.bool:
        return input_image * mask

    info = torch.iinfo(input_image.dtype)
    product = input_image.to(torch.int64) * mask.to(torch.int64)
    return product.clamp(info.min, info.max).to(input_image.dtype)


def apply_mask(input_image: ImageLike, mask: ImageLike) -> ImageLike:
    """Multiplies an image elementwise with a mask of the same shape

    NumPy images go through `cv2.multiply`, so integer images saturate instead of wrapping. Tensors
    get the same treatment and stay on the image's device. Either way the mask is cast to the
    image's element type first and the result keeps that type.
    """
    if isinstance(input_image, torch.Tensor) != isinstance(mask, torch.Tensor):
        raise TypeError(f"Image and mask must be same array type! Image is {type(input_image)} and "
                        f"mask is {type(mask)}")

    if tuple(input_image.shape) != tuple(mask.shape):
        raise ShapeMismatch(f"Mask of shape {tuple(mask.shape)} doesn't match image of shape "
                            f"{tuple(input_image.shape)}")

    if isinstance(input_image, torch.Tensor):
        return _apply_mask_torch(input_image, mask)

    is_mask_float = np.issubdtype(mask.dtype, np.floating)
    if is_mask_float and not np.issubdtype(input_image.dtype, np.floating):
        warn(f"Casting {mask.dtype} mask to {input_image.dtype} to match the image. Fractional "
             "mask values will be truncated.")
    mask = mask.astype(input_image.dtype, copy=False)

    if input_image.dtype not in NUMPY_DTYPE_TO_CV_DEPTH or input_image.ndim not in (2, 3):
        return np.multiply(input_image, mask)

    # OpenCV drops a trailing singleton channel axis, so restore the input's shape.
    return cv2.multiply(input_image, mask).reshape(input_image.shape)


def check_cloud_dimensions(cloud: StructuredPointCloud):
    """Raises if the cloud can't be represented as a pair of images"""
    if cloud.width <= 1 or cloud.height <= 1:
        raise DegenerateCloud(f"Expected an organized cloud but got {cloud.height} rows x "
                              f"{cloud.width} cols")

    if cloud.width > INT32_MAX:
        raise DimensionOverflow("width", cloud.width, INT32_MAX)
    if cloud.height > INT32_MAX:
        raise DimensionOverflow("height", cloud.height, INT32_MAX)

    if len(cloud) != cloud.width * cloud.height:
        raise ShapeMismatch(f"Cloud has {len(cloud)} points but claims {cloud.height} rows x "
                            f"{cloud.width} cols")


def cloud_to_images(cloud: StructuredPointCloud) -> Tuple[np.ndarray, np.ndarray]:
    """Converts an organized cloud to a position encoded image and a color image

    Returns
    -------
    position_image : np.ndarray
        [height, width, 3] float64 image where the channels are the x, y, z of each point.
    color_image : np.ndarray
        [height, width, 3] uint8 image in OpenCV's BGR channel order.
    """
    check_cloud_dimensions(cloud)

    # Copies, so the images never alias the cloud's storage.
    xyz, rgb = cloud.numpy_copy()

    # Row-major point storage means a reshape puts point y * width + x at pixel (y, x).
    position_image = xyz.reshape(cloud.height, cloud.width, NUM_POSITION_CHANNELS)
    color_image = np.ascontiguousarray(rgb[:, ::-1]).reshape(cloud.height, cloud.width,
                                                             NUM_COLOR_CHANNELS)

    logger.debug("Converted %d x %d cloud to %s position and %s color images", cloud.height,
                 cloud.width, type2str(mat_type(position_image)), type2str(mat_type(color_image)))

    return position_image, color_image


def _check_image_pair(color_image: np.ndarray, position_image: np.ndarray):
    if color_image.ndim != 3 or color_image.shape[2] != NUM_COLOR_CHANNELS:
        raise ShapeMismatch(f"Expected color image of shape [H, W, {NUM_COLOR_CHANNELS}] but got "
                            f"{color_image.shape}")
    if position_image.ndim != 3 or position_image.shape[2] != NUM_POSITION_CHANNELS:
        raise ShapeMismatch(f"Expected position image of shape [H, W, {NUM_POSITION_CHANNELS}] but "
                            f"got {position_image.shape}")
    if color_image.shape[:2] != position_image.shape[:2]:
        raise ShapeMismatch(f"Color image is {color_image.shape[0]} x {color_image.shape[1]} but "
                            f"position image is {position_image.shape[0]} x "
                            f"{position_image.shape[1]}")
    if color_image.dtype != COLOR_DTYPE:
        raise TypeError(f"Expected 8UC3 color image but got element type {color_image.dtype}")


def images_to_cloud(color_image: ImageLike,
                    position_image: ImageLike,
                    header: Optional[CloudHeader] = None) -> StructuredPointCloud:
    """Converts a color image and a position encoded image back to an organized cloud

    The color image is read in BGR channel order. The resulting cloud is never marked dense, even if
    every position is finite.
    """
    color_image = _to_numpy(color_image)
    position_image = _to_numpy(position_image)
    _check_image_pair(color_image, position_image)

    rows, cols = color_image.shape[:2]

    xyz = position_image.reshape(-1, NUM_POSITION_CHANNELS).astype(POSITION_DTYPE)
    rgb = color_image.reshape(-1, NUM_COLOR_CHANNELS)[:, ::-1].astype(COLOR_DTYPE)

    logger.debug("Converted %d x %d image pair to cloud", rows, cols)

    return StructuredPointCloud(xyz,
                                rgb,
                                width=cols,
                                height=rows,
                                is_dense=IS_DENSE_DEFAULT,
                                header=header if header is not None else CloudHeader())
