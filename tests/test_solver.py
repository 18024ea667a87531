import logging
import numpy as np
import pytest
from anomalypy import (
    GeometrySolver,
    OrbitalParameters,
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
from anomalypy.geometry import TAU, to_rad, to_deg

# Angles avoiding theta = 0 and theta = pi, where the focus triangle is degenerate
THETAS = np.linspace(0.05, TAU - 0.05, 40)
ECCENTRICITIES = [0.0, 0.05, 0.3, 0.5, 0.75, 0.85, 0.95]

# Building blocks

def test_solve_quadratic_larger_root():
    """
    Check that the larger root is returned
    """
    assert solve_quadratic(1, -3, 2) == pytest.approx(2.0)
    assert solve_quadratic(2, 0, -8) == pytest.approx(2.0)
    assert solve_quadratic(1, 2, 1) == pytest.approx(-1.0)

def test_solve_quadratic_negative_discriminant():
    """
    Check that a negative discriminant propagates nan instead of raising
    """
    with np.errstate(invalid='ignore'):
        assert np.isnan(solve_quadratic(1, 0, 1))

def test_solve_quadratic_vectorised():
    """
    Check that array coefficients give an array of roots
    """
    roots = solve_quadratic(np.ones(3), np.array([-3.0, 0.0, -5.0]), np.array([2.0, -4.0, 6.0]))
    assert np.allclose(roots, [2.0, 2.0, 3.0])

def test_focal_radius_apsides():
    """
    Check the focal distances along the major axis: 1 + e towards (1, 0), 1 - e towards (-1, 0)
    """
    for e in ECCENTRICITIES:
        assert focal_radius(0.0, e) == pytest.approx(1 + e)
        assert focal_radius(np.pi, e) == pytest.approx(1 - e)

def test_ellipse_point_on_ellipse():
    """
    Check that p satisfies x^2 + (y/h)^2 = 1
    """
    for e in ECCENTRICITIES:
        h = np.sqrt(1 - e**2)
        px, py = ellipse_point_at(THETAS, e, h)
        assert np.allclose(px**2 + (py / h)**2, 1.0, atol=1e-9)

def test_ellipse_point_on_ray():
    """
    Check that p lies in the direction theta as seen from the focus
    """
    e = 0.6
    px, py = ellipse_point_at(THETAS, e)
    angles = np.mod(np.arctan2(py, px + e), TAU)
    assert np.allclose(angles, THETAS)

def test_circle_point_on_unit_circle():
    """
    Check that the circle point has unit norm over a sweep of (theta, e)
    """
    for e in np.linspace(0, 0.999, 12):
        h = np.sqrt(1 - e**2)
        ix, iy = circle_point_from_ellipse(ellipse_point_at(THETAS, e, h), h)
        assert np.allclose(np.hypot(ix, iy), 1.0, atol=1e-9)

def test_circle_angle_inverts_cos_sin():
    """
    Check that circle_angle_of((cos a, sin a)) == a on [0, 2pi)
    """
    angles = np.linspace(0, TAU, 100, endpoint=False)
    result = circle_angle_of((np.cos(angles), np.sin(angles)))
    assert np.allclose(result, angles, atol=1e-9)
    assert np.all((result >= 0) & (result < TAU))

def test_circle_angle_scalar():
    """
    Check scalar input and the lower half-plane branch
    """
    assert circle_angle_of((0.0, 1.0)) == pytest.approx(np.pi / 2)
    assert circle_angle_of((0.0, -1.0)) == pytest.approx(3 * np.pi / 2)
    assert circle_angle_of((1.0, 0.0)) == 0.0

def test_second_circle_intersection():
    """
    Check that o is on the unit circle and on the line through i and the focus, beyond the focus
    """
    e = 0.75
    for theta in THETAS:
        i = (np.cos(theta), np.sin(theta))
        ox, oy = second_circle_intersection(i, e)
        assert np.hypot(ox, oy) == pytest.approx(1.0, abs=1e-9)
        # Collinear with i and f
        cross = (i[0] + e) * oy - i[1] * (ox + e)
        assert cross == pytest.approx(0.0, abs=1e-9)
        # The focus lies between i and o
        assert (i[0] + e) * (ox + e) + i[1] * oy < 0

def test_triangle_area_known_triangle():
    """
    Check the 3-4-5 right triangle
    """
    assert triangle_area(3, 4, 5) == pytest.approx(6.0)
    assert triangle_area(1, 1, 1) == pytest.approx(np.sqrt(3) / 4)

def test_sector_and_segment_areas():
    """
    Check the area decomposition in both half-planes
    """
    sec_il, area_sec, area_ifl, circ = sector_and_segment_areas(np.pi / 2, 0.25)
    assert sec_il == pytest.approx(np.pi / 2)
    assert area_sec == pytest.approx(np.pi / 4)
    assert area_ifl == pytest.approx(np.pi / 4 - 0.25)
    assert circ == pytest.approx(np.pi / 4 + 0.25)

    sec_il, area_sec, area_ifl, circ = sector_and_segment_areas(3 * np.pi / 2, 0.25)
    assert sec_il == pytest.approx(np.pi / 2)
    assert circ == pytest.approx(np.pi / 2 + np.pi / 4 - 0.25)

def test_signed_angle_delta_range():
    """
    Check that the o -> i angle is wrapped into [0, 2pi)
    """
    assert signed_angle_delta(2.0, 1.0) == pytest.approx(1.0)
    assert signed_angle_delta(1.0, 2.0) == pytest.approx(TAU - 1.0)
    assert signed_angle_delta(1.0, 1.0) == 0.0

# Solver

def test_solver_default_parameters():
    """
    Check the start-up parameters of each variant
    """
    assert GeometrySolver('areas').default_parameters() == OrbitalParameters(to_rad(30.0), 0.5)
    assert GeometrySolver('chord').default_parameters() == OrbitalParameters(to_rad(15.0), 0.75)
    assert GeometrySolver('sector').default_parameters() == OrbitalParameters(to_rad(15.0), 0.85)

def test_solver_unknown_variant():
    """
    Check that an unknown variant name raises
    """
    with pytest.raises(ValueError, match="Unknown variant"):
        GeometrySolver('hyperbola')

def test_solver_is_pure():
    """
    Check that two calls with identical parameters give identical bundles
    """
    solver = GeometrySolver('sector')
    params = OrbitalParameters(1.234, 0.42)
    first = solver.compute(params)
    second = solver(params)
    assert first == second
    assert first is not second

def test_solver_circular_orbit():
    """
    Check that for e = 0 the ellipse is the circle and p == i
    """
    solver = GeometrySolver('areas')
    for theta in THETAS:
        bundle = solver.compute(OrbitalParameters(float(theta), 0.0))
        assert bundle.h == 1.0
        assert bundle.p == bundle.i

def test_solver_variant_fields():
    """
    Check that each variant only fills its own fields
    """
    params = OrbitalParameters(0.7, 0.5)
    areas = GeometrySolver('areas').compute(params)
    chord = GeometrySolver('chord').compute(params)
    sector = GeometrySolver('sector').compute(params)

    assert areas.circ_cov_area is not None and areas.o is None and areas.sec_ang is None
    assert chord.o is not None and chord.o_ang is not None
    assert chord.sec_ang is None and chord.circ_cov_area is None
    assert sector.sec_ang is not None and sector.circ_cov_area is None
    assert areas.i == chord.i == sector.i

def test_scenario_areas_default():
    """
    theta = 30 deg, e = 0.5: the eccentric anomaly satisfies tan(theta) = h sin(E) / (cos(E) + e)
    and the covered fraction lies strictly between 0 and 1
    """
    params = OrbitalParameters.from_degrees(30, 0.5)
    bundle = GeometrySolver('areas').compute(params)
    i_ang = bundle.i_ang
    assert np.arctan2(bundle.h * np.sin(i_ang), np.cos(i_ang) + 0.5) == pytest.approx(params.theta)
    assert to_deg(i_ang) == pytest.approx(49.79, abs=0.01)
    assert 0 < bundle.rel_cov_area < 1

def test_scenario_chord_default():
    """
    theta = 15 deg, e = 0.75: p and i lie on their curves and o on the unit circle
    """
    bundle = GeometrySolver('chord').compute(OrbitalParameters.from_degrees(15, 0.75))
    px, py = bundle.p
    ix, iy = bundle.i
    ox, oy = bundle.o
    assert px**2 + (py / bundle.h)**2 == pytest.approx(1.0, abs=1e-9)
    assert ix**2 + iy**2 == pytest.approx(1.0, abs=1e-9)
    assert np.hypot(ox, oy) == pytest.approx(1.0, abs=1e-9)
    assert bundle.o_ang == pytest.approx(circle_angle_of(bundle.o))

def test_scenario_sector_default():
    """
    theta = 15 deg, e = 0.85: the o -> i angle is non-negative and wraps i_ang - o_ang
    """
    bundle = GeometrySolver('sector').compute(OrbitalParameters.from_degrees(15, 0.85))
    assert 0 <= bundle.sec_ang < TAU
    assert bundle.sec_ang == pytest.approx(np.mod(bundle.i_ang - bundle.o_ang, TAU))

def test_out_of_domain_eccentricity():
    """
    Check that e >= 1 propagates nan and logs a warning instead of raising
    """
    solver = GeometrySolver('sector')
    for e in (1.0, 1.5):
        with np.errstate(invalid='ignore', divide='ignore'):
            bundle = solver.compute(OrbitalParameters(0.5, e))
        assert np.isnan(bundle.i_ang)
        assert np.isnan(bundle.sec_ang)

def test_out_of_domain_logs_warning(caplog):
    """
    Check that the solver warns about the out-of-domain eccentricity
    """
    with caplog.at_level(logging.WARNING, logger="anomalypy"):
        with np.errstate(invalid='ignore', divide='ignore'):
            GeometrySolver('areas').compute(OrbitalParameters(0.5, 1.2))
    assert "outside [0, 1)" in caplog.text

def test_parameters_type_check():
    """
    Check that non-numeric parameters are rejected
    """
    with pytest.raises(TypeError):
        OrbitalParameters("30", 0.5)

def test_parameters_replace():
    """
    Check that with_theta / with_e return new values and leave the original untouched
    """
    params = OrbitalParameters(0.5, 0.5)
    assert params.with_theta(1.0) == OrbitalParameters(1.0, 0.5)
    assert params.with_e(0.2) == OrbitalParameters(0.5, 0.2)
    assert params == OrbitalParameters(0.5, 0.5)

# Cross-checks of the covered area

def test_kepler_fraction_matches_covered_area():
    """
    Check that the closed-form fraction agrees with the bundle's covered area over a sweep
    """
    solver = GeometrySolver('areas')
    for e in ECCENTRICITIES:
        for theta in THETAS:
            bundle = solver.compute(OrbitalParameters(float(theta), e))
            assert kepler_fraction(theta, e) == pytest.approx(bundle.rel_cov_area, abs=1e-6)

def test_kepler_fraction_vectorised():
    """
    Check that array angles give the same values as scalar calls
    """
    e = 0.3
    values = kepler_fraction(THETAS, e)
    assert values.shape == THETAS.shape
    assert np.allclose(values, [kepler_fraction(t, e) for t in THETAS])

def test_kepler_fraction_is_keplers_equation():
    """
    Check that the fraction equals (E + e sin E) / 2pi with E the circle angle
    """
    for e in ECCENTRICITIES:
        h = np.sqrt(1 - e**2)
        i_ang = circle_angle_of(circle_point_from_ellipse(ellipse_point_at(THETAS, e, h), h))
        expected = (i_ang + e * np.sin(i_ang)) / TAU
        assert np.allclose(kepler_fraction(THETAS, e), expected, atol=1e-7)

def test_kepler_fraction_monotonic():
    """
    Check that the swept fraction grows with theta and stays in [0, 1]
    """
    values = kepler_fraction(THETAS, 0.85)
    assert np.all(np.diff(values) > 0)
    assert np.all((values >= 0) & (values <= 1))

def test_swept_area_fraction_matches_closed_form():
    """
    Check the quadrature of the focal sector against the closed form
    """
    for e in [0.1, 0.5, 0.85]:
        for theta in THETAS[::5]:
            assert swept_area_fraction(theta, e) == pytest.approx(kepler_fraction(theta, e), abs=1e-6)

def test_swept_area_fraction_full_orbit():
    """
    Check that a full turn sweeps the whole ellipse
    """
    assert swept_area_fraction(TAU, 0.6) == pytest.approx(1.0, abs=1e-6)

def test_circular_orbit_covered_fraction():
    """
    Check that for e = 0 both covered fractions are finite and equal theta / 2pi
    """
    solver = GeometrySolver('areas')
    for theta in THETAS:
        bundle = solver.compute(OrbitalParameters(float(theta), 0.0))
        assert bundle.rel_cov_area == pytest.approx(theta / TAU, abs=1e-7)
        assert kepler_fraction(theta, 0.0) == pytest.approx(theta / TAU, abs=1e-7)

def test_triangle_area_degenerate():
    """
    Check that collinear triangles give zero area instead of nan, while nan input stays nan
    """
    assert triangle_area(2.0, 1.0, 1.0) == 0.0
    area = focus_triangle_area((np.cos(0.3), np.sin(0.3)), 0.0)
    assert np.isfinite(area)
    assert area == pytest.approx(0.0, abs=1e-7)
    assert np.isnan(triangle_area(np.nan, 1.0, 1.0))

def test_full_turn():
    """
    Check theta = 360 deg: the circle angle is a full turn and both fractions give the whole orbit
    """
    assert circle_angle_of((np.cos(TAU), np.sin(TAU))) == TAU
    bundle = GeometrySolver('areas').compute(OrbitalParameters(TAU, 0.5))
    assert bundle.i_ang == TAU
    assert bundle.rel_cov_area == pytest.approx(1.0)
    assert kepler_fraction(TAU, 0.5) == pytest.approx(1.0)
