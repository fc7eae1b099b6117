class PointCloudImageError(ValueError):
    """Base for errors raised while converting between clouds and images"""


class ShapeMismatch(PointCloudImageError):
    """Grids or clouds have incompatible dimensions"""


class DegenerateCloud(PointCloudImageError):
    """Cloud isn't organized, i.e. width or height is <= 1"""


class DimensionOverflow(PointCloudImageError):
    """Cloud width/height doesn't fit the signed 32 bit range used for image indexing"""

    def __init__(self, dim_name: str, value: int, limit: int):
        super().__init__(f"Cloud {dim_name} of {value} exceeds the maximum image dimension {limit}")
        self.dim_name = dim_name
        self.value = value
        self.limit = limit


class UnsupportedDtype(TypeError):
    """Array element type has no OpenCV depth equivalent"""
