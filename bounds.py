# bounds.py
"""
Playing field configuration shared by every particle.

The field is centered on the origin and described by its half-extents plus
the ball diameter used as the collision distance. One value is installed
process-wide before any particle system is built and read afterwards.
"""
import logging
import math
from typing import NamedTuple, Optional

from constants import METERS_PER_INCH

# --- Data Contracts ---
#
# class FieldBounds(NamedTuple):
#   - x_bound: float, half-width of the field in meters, >= 0.
#   - y_bound: float, half-height of the field in meters, >= 0.
#   - ball_diameter: float, collision threshold in meters, > 0.
#
# set_field_bounds(bounds: FieldBounds) -> FieldBounds:
#   - Side Effects: Replaces the process-wide bounds after validation.
#
# get_field_bounds() -> FieldBounds:
#   - Raises RuntimeError if no bounds were installed.
#
# bounds_from_display(width_px, height_px, xdpi, ydpi, ball_diameter) -> FieldBounds:
#   - Outputs: The largest bounds that keep a ball fully on screen.


class FieldBounds(NamedTuple):
    x_bound: float
    y_bound: float
    ball_diameter: float

    def validate(self) -> "FieldBounds":
        """Returns self, or raises ValueError if any extent is unusable."""
        values = (self.x_bound, self.y_bound, self.ball_diameter)
        if not all(math.isfinite(v) for v in values):
            raise ValueError(f"Field bounds must be finite, got {self}.")
        if self.x_bound < 0 or self.y_bound < 0:
            raise ValueError(
                f"Field half-extents must be non-negative, got "
                f"x_bound={self.x_bound}, y_bound={self.y_bound}."
            )
        if self.ball_diameter <= 0:
            raise ValueError(
                f"Ball diameter must be positive, got {self.ball_diameter}."
            )
        return self


_field_bounds: Optional[FieldBounds] = None


def set_field_bounds(bounds: FieldBounds) -> FieldBounds:
    global _field_bounds
    try:
        bounds = FieldBounds(*(float(v) for v in bounds)).validate()
    except ValueError as e:
        logging.critical(f"Configuration error: {e}")
        raise
    _field_bounds = bounds
    logging.info(
        f"Field bounds set: x_bound={bounds.x_bound:.6f}m, "
        f"y_bound={bounds.y_bound:.6f}m, ball_diameter={bounds.ball_diameter:.6f}m."
    )
    return bounds


def get_field_bounds() -> FieldBounds:
    if _field_bounds is None:
        msg = "Field bounds have not been set. Call set_field_bounds() first."
        logging.error(msg)
        raise RuntimeError(msg)
    return _field_bounds


def reset_field_bounds() -> None:
    """Forgets the process-wide bounds."""
    global _field_bounds
    _field_bounds = None


def bounds_from_display(
    width_px: int, height_px: int, xdpi: float, ydpi: float, ball_diameter: float
) -> FieldBounds:
    """
    Derives the field half-extents from display metrics.

    The screen size is converted to meters and shrunk by one ball diameter so
    a clamped ball still lies fully inside the display.

    Args:
        width_px (int): Display width in pixels.
        height_px (int): Display height in pixels.
        xdpi (float): Horizontal pixel density, dots per inch.
        ydpi (float): Vertical pixel density, dots per inch.
        ball_diameter (float): Ball diameter in meters.
    """
    if xdpi <= 0 or ydpi <= 0:
        raise ValueError(f"Display density must be positive, got xdpi={xdpi}, ydpi={ydpi}.")
    meters_to_pixels_x = xdpi / METERS_PER_INCH
    meters_to_pixels_y = ydpi / METERS_PER_INCH

    x_bound = (width_px / meters_to_pixels_x - ball_diameter) * 0.5
    y_bound = (height_px / meters_to_pixels_y - ball_diameter) * 0.5

    return FieldBounds(max(x_bound, 0.0), max(y_bound, 0.0), float(ball_diameter)).validate()
