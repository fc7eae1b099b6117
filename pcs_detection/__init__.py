from .exceptions import (PointCloudImageError, ShapeMismatch, DegenerateCloud, DimensionOverflow,
                         UnsupportedDtype)
from .cloud_header import CloudHeader
from .structured_point_cloud import StructuredPointCloud
from .mat_types import type2str, mat_type, cv_make_type, cv_mat_depth, cv_mat_cn
from .packed_rgb import pack_rgb, unpack_rgb, packed_to_float
from .img_cloud_transforms import apply_mask, cloud_to_images, images_to_cloud
