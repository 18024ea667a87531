"""
AnomalyPy: interactive views of the ellipse / auxiliary-circle correspondence of an orbit,
driven by an angle and an eccentricity.
"""

from .solver import (
    OrbitalParameters,
    GeometryBundle,
    GeometrySolver,
    solve_quadratic,
    focal_radius,
    ellipse_point_at,
    circle_angle_of,
    circle_point_from_ellipse,
    second_circle_intersection,
    triangle_area,
    focus_triangle_area,
    sector_and_segment_areas,
    signed_angle_delta,
    kepler_fraction,
    swept_area_fraction,
)
from .variants import Variant, VARIANTS, VALID_VARIANTS, get_variant
from .controls import RangeControl
from .readout import readout_lines, format_readout
from .view import OrbitViewer, show_variant
from .logging_config import setup_logging
