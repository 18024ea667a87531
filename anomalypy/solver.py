# Import necessary modules
# ------------------------------------------------------------------------------------------------ #
import logging
import numpy as np
import numpy.typing as npt

from scipy.integrate import quad

from dataclasses import dataclass, replace
from typing import Optional, Tuple, Union

from .geometry import TAU, to_rad, to_deg, Vec
from .variants import Variant, get_variant
# ------------------------------------------------------------------------------------------------ #

logger = logging.getLogger(__name__)

# Geometry frame: the auxiliary circle is the unit circle centred on the origin and the ellipse is
# the same circle squashed by h = sqrt(1 - e^2) along y. The focus sits at f = (-e, 0).
#
# Every function below is written with numpy so that out-of-domain input (e >= 1, a negative
# discriminant) propagates nan/inf rather than raising.

Scalar = Union[float, npt.NDArray[np.float64]]


def solve_quadratic(a: Scalar, b: Scalar, c: Scalar) -> Scalar:
    """
    Larger root of a*t^2 + b*t + c = 0.

    The caller guarantees b^2 - 4ac >= 0 and a != 0, otherwise the result is nan (or inf).
    Only the +sqrt branch is ever taken.

    Parameters
    ----------
    a, b, c : float or array-like
        Quadratic coefficients.

    Returns
    -------
    float or ndarray
        t = (sqrt(b^2 - 4ac) - b) / (2a)
    """
    delta = b * b - 4 * a * c
    return (np.sqrt(delta) - b) / (2 * a)


def ellipse_height(e: Scalar) -> Scalar:
    """Semi-minor axis h = sqrt(1 - e^2) of the unit ellipse."""
    return np.sqrt(1 - np.asarray(e, dtype=float) ** 2)[()]


def focal_radius(phi: Scalar, e: Scalar, h: Optional[Scalar] = None) -> Scalar:
    """
    Distance from the focus to the ellipse along the direction phi.

    Parameters
    ----------
    phi : float or array-like
        Ray direction, measured at the focus from the positive x-axis.
    e : float
        Eccentricity.
    h : float, optional
        Semi-minor axis. Computed from e if not given.

    Returns
    -------
    float or ndarray
        Ray parameter t of the intersection (the ray direction is a unit vector).
    """
    if h is None:
        h = ellipse_height(e)
    dx = np.cos(phi)
    dy = np.sin(phi)
    return solve_quadratic(dx * dx + dy * dy / (h * h), -2 * dx * e, e * e - 1)


def ellipse_point_at(theta: Scalar, e: Scalar, h: Optional[Scalar] = None) -> Tuple[Scalar, Scalar]:
    """
    Point p where the ray leaving the focus at angle theta meets the ellipse x^2 + (y/h)^2 = 1.

    Parameters
    ----------
    theta : float or array-like
        Ray angle in radians.
    e : float
        Eccentricity.
    h : float, optional
        Semi-minor axis. Computed from e if not given.

    Returns
    -------
    tuple
        (x, y) of p.
    """
    t = focal_radius(theta, e, h)
    return (np.cos(theta) * t - e, np.sin(theta) * t)


def circle_angle_of(point: Tuple[Scalar, Scalar]) -> Scalar:
    """
    Angle in [0, 2pi] of a point on the unit circle, counter-clockwise from the positive x-axis.
    The point is not renormalized, so |x| > 1 yields nan.

    A point just below the x-axis, such as (cos 2pi, sin 2pi) with sin 2pi ~ -2.4e-16, maps to
    exactly 2pi rather than 0. The result is not wrapped: the covered-area branch and
    kepler_fraction both read such an angle as a full turn, so they keep agreeing at 360 deg.
    """
    x, y = point
    angle = np.arccos(x)
    return np.where(np.asarray(y) >= 0, angle, TAU - angle)[()]


def circle_point_from_ellipse(p: Tuple[Scalar, Scalar], h: Scalar) -> Tuple[Scalar, Scalar]:
    """Stretch an ellipse point vertically by 1/h onto the auxiliary circle."""
    x, y = p
    return (x, y / h)


def second_circle_intersection(i: Tuple[Scalar, Scalar], e: Scalar) -> Tuple[Scalar, Scalar]:
    """
    Second point o where the line through the circle point i and the focus f = (-e, 0)
    meets the unit circle.

    The line is parametrized as i + t*(f - i), so t = 0 is i itself and the larger root
    lies beyond the focus.

    Parameters
    ----------
    i : tuple
        Point on the unit circle.
    e : float
        Eccentricity.

    Returns
    -------
    tuple
        (x, y) of o.
    """
    ix, iy = i
    dx = -e - ix
    dy = 0 - iy
    t = solve_quadratic(
        dx * dx + dy * dy,
        2 * (ix * dx + iy * dy),
        ix * ix + iy * iy - 1,
    )
    return (ix + t * dx, iy + t * dy)


def triangle_area(a: Scalar, b: Scalar, c: Scalar) -> Scalar:
    """
    Area of a triangle from its side lengths, by projecting side a onto side c.

    x = (a^2 - b^2 + c^2) / (2c) is the foot of the height on c, so the height is
    sqrt(a^2 - x^2). Degenerate (collinear) triangles, such as the focus triangle at e = 0,
    can round to a tiny negative radicand; it is clamped to 0. A nan radicand stays nan.
    """
    a_sqr = a * a
    x = (a_sqr - b * b + c * c) / (2 * c)
    height = np.sqrt(np.maximum(a_sqr - x * x, 0.0))
    return c * height / 2


def focus_triangle_area(i: Tuple[Scalar, Scalar], e: Scalar) -> Scalar:
    """Area of the triangle centre-focus-i, with sides |f->i|, e and the unit radius."""
    ix, iy = i
    dx = ix + e
    dy = iy
    return triangle_area(np.sqrt(dx * dx + dy * dy), e, 1.0)


def sector_and_segment_areas(i_ang: Scalar, area_tri: Scalar) -> Tuple[Scalar, Scalar, Scalar, Scalar]:
    """
    Decompose the part of the unit circle swept from the focus.

    Parameters
    ----------
    i_ang : float or array-like
        Angle of the circle point i.
    area_tri : float or array-like
        Area of the triangle centre-focus-i.

    Returns
    -------
    sec_il : angle of the sector between i and l = (-1, 0)
    area_sec : area of that sector
    area_ifl : area bounded by i, f and l
    circ_cov_area : area of the circle covered between the positive x-axis and i, seen from f
    """
    sec_il = np.abs(np.pi - i_ang)
    area_sec = sec_il / 2
    area_ifl = area_sec - area_tri
    circ_cov_area = np.where(i_ang > np.pi, np.pi / 2 + area_ifl, np.pi / 2 - area_ifl)[()]
    return sec_il, area_sec, area_ifl, circ_cov_area


def signed_angle_delta(i_ang: Scalar, o_ang: Scalar) -> Scalar:
    """Angle from o to i, counter-clockwise, in [0, 2pi)."""
    delta = i_ang - o_ang
    return np.where(delta < 0, delta + TAU, delta)[()]


def kepler_fraction(theta: Scalar, e: Scalar) -> Scalar:
    """
    Fraction of the orbit area swept from the focus between the positive x-axis and the
    direction theta, in closed form.

    Kept independent from the rest of this module: it finds the ellipse point, its circle
    angle and the triangle/segment areas on its own, so it can be checked against the
    bundle computed by GeometrySolver.

    Parameters
    ----------
    theta : float or array-like
        Angle at the focus in radians.
    e : float
        Eccentricity in [0, 1).

    Returns
    -------
    float or ndarray
        Swept fraction in [0, 1].
    """
    e_sqr = e * e
    h = np.sqrt(1 - e_sqr)
    cos_t = np.cos(theta)
    sin_t = np.sin(theta)

    # Ray from the focus to the ellipse
    qa = cos_t * cos_t + sin_t * sin_t / (h * h)
    qb = -2 * cos_t * e
    t = (np.sqrt(qb * qb - 4 * qa * (e_sqr - 1)) - qb) / (2 * qa)
    px = cos_t * t - e
    py = sin_t * t

    # Squared distance focus -> circle point, and the triangle centre-focus-i
    fx = px + e
    fy = py / h
    fi_sqr = fx * fx + fy * fy
    foot = (fi_sqr - e_sqr + 1) / 2
    # Collinear at e = 0, clamp the rounding
    tri = np.sqrt(np.maximum(fi_sqr - foot * foot, 0.0)) / 2

    upper = py >= 0
    i_ang = np.where(upper, np.arccos(px), TAU - np.arccos(px))
    segment = np.abs(np.pi - i_ang) / 2 - tri
    return np.where(upper, 0.5 - segment / np.pi, 0.5 + segment / np.pi)[()]


def swept_area_fraction(theta: float, e: float, **quad_kwargs) -> float:
    """
    Numerical counterpart of kepler_fraction.

    Integrates the area swept by the focal radius, 1/2 * int_0^theta r(phi)^2 dphi, with
    scipy's quad and divides by the ellipse area pi*h.

    Parameters
    ----------
    theta : float
        Angle at the focus in radians.
    e : float
        Eccentricity in [0, 1).
    **quad_kwargs
        Passed on to scipy.integrate.quad (epsabs, epsrel, limit, ...).

    Returns
    -------
    float
        Swept fraction of the ellipse area.
    """
    h = ellipse_height(e)
    area, _ = quad(lambda phi: 0.5 * focal_radius(phi, e, h) ** 2, 0.0, theta, **quad_kwargs)
    return area / (np.pi * h)


@dataclass(frozen=True)
class OrbitalParameters:
    """
    The two user-controlled inputs.

    Attributes
    ----------
    theta (float): Angle in radians.
    e (float): Eccentricity, expected in [0, 1).
    """
    theta: float
    e: float

    def __post_init__(self) -> None:
        if not isinstance(self.theta, (int, float)) or not isinstance(self.e, (int, float)):
            raise TypeError("theta and e must be numeric values")

    @classmethod
    def from_degrees(cls, theta_deg: float, e: float) -> 'OrbitalParameters':
        """Build the parameters from an angle in degrees."""
        return cls(theta=float(to_rad(theta_deg)), e=float(e))

    @property
    def h(self) -> float:
        """Semi-minor axis of the ellipse."""
        return ellipse_height(self.e)

    @property
    def theta_deg(self) -> float:
        return float(to_deg(self.theta))

    def with_theta(self, theta: float) -> 'OrbitalParameters':
        return replace(self, theta=theta)

    def with_e(self, e: float) -> 'OrbitalParameters':
        return replace(self, e=e)


@dataclass(frozen=True)
class GeometryBundle:
    """
    Everything derived from one set of OrbitalParameters. Fields a variant does not
    compute are None.

    Attributes
    ----------
    theta, e, h : float
        Inputs and the semi-minor axis.
    f, p, i : tuple
        Focus, ellipse point and auxiliary-circle point.
    i_ang : float
        Angle of i.
    o : tuple, optional
        Second intersection of the line f-i with the circle (chord variants).
    o_ang : float, optional
        Angle of o.
    sec_ang : float, optional
        Angle from o to i in [0, 2pi) (sector variant).
    sec_il, area_tri, area_sec, area_ifl, circ_cov_area : float, optional
        Area decomposition (areas variant).
    """
    theta: float
    e: float
    h: float
    f: Vec
    p: Vec
    i: Vec
    i_ang: float
    o: Optional[Vec] = None
    o_ang: Optional[float] = None
    sec_ang: Optional[float] = None
    sec_il: Optional[float] = None
    area_tri: Optional[float] = None
    area_sec: Optional[float] = None
    area_ifl: Optional[float] = None
    circ_cov_area: Optional[float] = None

    @property
    def rel_cov_area(self) -> Optional[float]:
        """Covered area as a fraction of the circle area."""
        if self.circ_cov_area is None:
            return None
        return self.circ_cov_area / np.pi


class GeometrySolver:
    """
    Maps OrbitalParameters to a GeometryBundle for one variant.

    The solver holds no state besides its variant: every call to compute() starts from
    scratch and returns a new bundle.

    Parameters
    ----------
    variant : str or Variant, optional
        Variant name (see VALID_VARIANTS) or a Variant instance. Defaults to 'areas'.
    """

    def __init__(self, variant: Union[str, Variant] = 'areas') -> None:
        self.variant: Variant = get_variant(variant)

    def default_parameters(self) -> OrbitalParameters:
        """Start-up parameters of the variant."""
        return OrbitalParameters.from_degrees(self.variant.theta_deg, self.variant.e)

    def compute(self, params: OrbitalParameters) -> GeometryBundle:
        """
        Compute the bundle for the given parameters.

        Parameters
        ----------
        params : OrbitalParameters
            Angle and eccentricity.

        Returns
        -------
        GeometryBundle
            Fresh bundle holding the quantities selected by the variant.
        """
        theta, e = params.theta, params.e
        if not 0 <= e < 1:
            logger.warning("Eccentricity %s outside [0, 1), geometry will contain nan", e)

        h = ellipse_height(e)
        f = (-e, 0.0)
        p = ellipse_point_at(theta, e, h)
        i = circle_point_from_ellipse(p, h)
        i_ang = circle_angle_of(i)
        fields = dict(theta=theta, e=e, h=h, f=f, p=p, i=i, i_ang=i_ang)

        if self.variant.with_chord:
            o = second_circle_intersection(i, e)
            o_ang = circle_angle_of(o)
            fields.update(o=o, o_ang=o_ang)
            if self.variant.with_sector:
                fields['sec_ang'] = signed_angle_delta(i_ang, o_ang)

        if self.variant.with_areas:
            area_tri = focus_triangle_area(i, e)
            sec_il, area_sec, area_ifl, circ_cov_area = sector_and_segment_areas(i_ang, area_tri)
            fields.update(
                sec_il=sec_il,
                area_tri=area_tri,
                area_sec=area_sec,
                area_ifl=area_ifl,
                circ_cov_area=circ_cov_area,
            )

        logger.debug("Computed %s bundle for theta=%s, e=%s", self.variant.name, theta, e)
        return GeometryBundle(**fields)

    def __call__(self, params: OrbitalParameters) -> GeometryBundle:
        return self.compute(params)

    def __str__(self) -> str:
        return f"GeometrySolver(variant={self.variant.name})"
