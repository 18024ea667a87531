# Import necessary modules
# ------------------------------------------------------------------------------------------------ #
import numpy as np
from typing import Tuple
# ------------------------------------------------------------------------------------------------ #

# Helper functions for moving between the normalized unit frame and the view frame.
# All points are plain (x, y) tuples.

TAU = 2 * np.pi

Vec = Tuple[float, float]

def to_rad(deg):
    """Convert degrees to radians."""
    return deg * (np.pi / 180)

def to_deg(rad):
    """Convert radians to degrees."""
    return rad * (180 / np.pi)

def scale_vec(v: Vec, s: float) -> Vec:
    """Scale a vector by s."""
    x, y = v
    return (x * s, y * s)

def vec_len(v: Vec) -> float:
    """Euclidean length of a vector."""
    x, y = v
    return np.sqrt(x * x + y * y)

def vec_add(a: Vec, b: Vec) -> Vec:
    """Component-wise sum of two vectors."""
    ax, ay = a
    bx, by = b
    return (ax + bx, ay + by)

def project(point: Vec, view_radius: float) -> Vec:
    """Map a point in the unit frame onto a view where the unit circle has radius view_radius."""
    return scale_vec(point, view_radius)

def label_position(point: Vec, distance: float) -> Vec:
    """
    Position of a point label, pushed radially outwards from the origin by `distance`.
    Labels on the origin itself are pushed to the left.
    """
    length = vec_len(point)
    if length == 0:
        return vec_add(point, (-distance, 0.0))
    return vec_add(point, scale_vec(point, distance / length))

def round_sig(value: float, digits: int) -> float:
    """Round value to the given number of significant digits (nan and inf pass through)."""
    if not np.isfinite(value):
        return float(value)
    return float(f"{value:.{digits}g}")
