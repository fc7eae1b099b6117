import numpy as np
import cv2

# OpenCV element depth codes (CV_MAT_DEPTH of a Mat type).
CV_8U = cv2.CV_8U
CV_8S = cv2.CV_8S
CV_16U = cv2.CV_16U
CV_16S = cv2.CV_16S
CV_32S = cv2.CV_32S
CV_32F = cv2.CV_32F
CV_64F = cv2.CV_64F

CV_CN_SHIFT = 3
CV_CN_MAX = 512
CV_DEPTH_MAX = 1 << CV_CN_SHIFT
CV_MAT_DEPTH_MASK = CV_DEPTH_MAX - 1
CV_MAT_CN_MASK = (CV_CN_MAX - 1) << CV_CN_SHIFT

DEPTH_LABELS = {
    CV_8U: "8U",
    CV_8S: "8S",
    CV_16U: "16U",
    CV_16S: "16S",
    CV_32S: "32S",
    CV_32F: "32F",
    CV_64F: "64F",
}
DEPTH_LABEL_UNKNOWN = "User"

NUMPY_DTYPE_TO_CV_DEPTH = {
    np.dtype(np.uint8): CV_8U,
    np.dtype(np.int8): CV_8S,
    np.dtype(np.uint16): CV_16U,
    np.dtype(np.int16): CV_16S,
    np.dtype(np.int32): CV_32S,
    np.dtype(np.float32): CV_32F,
    np.dtype(np.float64): CV_64F,
}

# Image grids are indexed with signed 32 bit rows/cols, same as cv::Mat.
INT32_MAX = int(np.iinfo(np.int32).max)

# Color images store channels in OpenCV's (b, g, r) order.
BGR_BLUE_IDX = 0
BGR_GREEN_IDX = 1
BGR_RED_IDX = 2

# Position and color images always carry three channels.
NUM_POSITION_CHANNELS = 3
NUM_COLOR_CHANNELS = 3

POSITION_DTYPE = np.float64
COLOR_DTYPE = np.uint8

# Clouds rebuilt from images are never marked dense, NaN positions are not checked.
IS_DENSE_DEFAULT = False
