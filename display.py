# display.py
"""
Host-side conversions between the device and the simulation.

The simulation works in meters with the origin at the field center and y
pointing up. A host reads raw sensor values in the device's natural
orientation and places sprites in pixels with y pointing down. This module
holds the two pure conversions a host needs; it draws nothing.
"""
import logging
from typing import Sequence, Tuple

from bounds import FieldBounds, bounds_from_display
from constants import (
    METERS_PER_INCH, ROTATION_0, ROTATION_90, ROTATION_180, ROTATION_270, ROTATIONS
)

# --- Data Contracts ---
#
# remap_sensor(values: Sequence[float], rotation: int) -> Tuple[float, float]:
#   - Inputs: Raw sensor (x, y, ...) and the screen rotation in degrees.
#   - Outputs: Acceleration expressed in screen axes.
#   - Raises ValueError for a rotation not in ROTATIONS.
#
# class DisplayMapping:
#   - __init__(self, width_px, height_px, xdpi, ydpi, ball_diameter)
#   - bounds(self) -> FieldBounds
#   - to_screen(self, pos: Tuple[float, float]) -> Tuple[float, float]:
#     - Outputs: Top-left pixel of the ball sprite for a field position.


def remap_sensor(values: Sequence[float], rotation: int) -> Tuple[float, float]:
    """
    Rotates a sensor reading into the current screen's axes.

    Sensors always report in the device's natural orientation, so a rotated
    screen needs the x and y components swapped and negated accordingly.
    """
    v0, v1 = values[0], values[1]
    if rotation == ROTATION_0:
        return (v0, v1)
    if rotation == ROTATION_90:
        return (-v1, v0)
    if rotation == ROTATION_180:
        return (-v0, -v1)
    if rotation == ROTATION_270:
        return (v1, -v0)
    msg = f"Unsupported screen rotation {rotation!r}, expected one of {ROTATIONS}."
    logging.error(msg)
    raise ValueError(msg)


class DisplayMapping:
    """
    Converts field coordinates in meters to sprite coordinates in pixels.
    """
    def __init__(self, width_px: int, height_px: int, xdpi: float, ydpi: float, ball_diameter: float):
        if xdpi <= 0 or ydpi <= 0:
            raise ValueError(f"Display density must be positive, got xdpi={xdpi}, ydpi={ydpi}.")
        self.width_px = width_px
        self.height_px = height_px
        self.xdpi = xdpi
        self.ydpi = ydpi
        self.ball_diameter = ball_diameter

        self.meters_to_pixels_x = xdpi / METERS_PER_INCH
        self.meters_to_pixels_y = ydpi / METERS_PER_INCH

        # Sprite size rounded to the nearest pixel
        self.ball_width_px = int(ball_diameter * self.meters_to_pixels_x + 0.5)
        self.ball_height_px = int(ball_diameter * self.meters_to_pixels_y + 0.5)

        # Top-left of a sprite centered on screen
        self.x_origin = (width_px - self.ball_width_px) * 0.5
        self.y_origin = (height_px - self.ball_height_px) * 0.5

        logging.info(
            f"DisplayMapping initialized for {width_px}x{height_px}px "
            f"({xdpi:.1f}x{ydpi:.1f} dpi), ball sprite "
            f"{self.ball_width_px}x{self.ball_height_px}px."
        )

    def bounds(self) -> FieldBounds:
        return bounds_from_display(
            self.width_px, self.height_px, self.xdpi, self.ydpi, self.ball_diameter
        )

    def to_screen(self, pos: Tuple[float, float]) -> Tuple[float, float]:
        # Screen y grows downwards, field y grows upwards.
        x = self.x_origin + pos[0] * self.meters_to_pixels_x
        y = self.y_origin - pos[1] * self.meters_to_pixels_y
        return (x, y)
