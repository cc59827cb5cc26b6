"""
Normalized campus coordinates.

Positions are stored relative to the reference campus image, so (0, 0) is the
top-left corner and (1, 1) the bottom-right one. This keeps building data
independent of the pixel size the map is finally drawn at.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from campusroute.errors import ValidationError


@dataclass(frozen=True)
class NormalizedPoint:
    x: float
    y: float

    def __post_init__(self) -> None:
        # "not (0 <= v <= 1)" also rejects NaN
        if not (0.0 <= self.x <= 1.0):
            raise ValidationError(f"x must be within [0,1], got {self.x!r}")
        if not (0.0 <= self.y <= 1.0):
            raise ValidationError(f"y must be within [0,1], got {self.y!r}")

    def distance_to(self, other: NormalizedPoint) -> float:
        """Euclidean distance in normalized units."""
        return math.hypot(other.x - self.x, other.y - self.y)


def create_point(x: float, y: float) -> NormalizedPoint:
    return NormalizedPoint(float(x), float(y))


def point_from_pixels(
    pixel_x: float,
    pixel_y: float,
    image_width: float,
    image_height: float,
) -> NormalizedPoint:
    """
    Convert a pixel position on the reference image into a normalized point.

    Raises ValidationError for non-positive image dimensions or for pixels
    that fall outside the image.
    """
    if image_width <= 0 or image_height <= 0:
        raise ValidationError(
            f"Image dimensions must be positive, got {image_width!r}x{image_height!r}"
        )
    return create_point(pixel_x / image_width, pixel_y / image_height)
