# Import necessary modules
# ------------------------------------------------------------------------------------------------ #
from typing import List, Tuple

from .geometry import to_deg, round_sig
from .solver import GeometryBundle, kepler_fraction
# ------------------------------------------------------------------------------------------------ #

READOUT_PRECISION = 6

def readout_lines(bundle: GeometryBundle) -> List[Tuple[str, float]]:
    """
    Label/value pairs of the numeric readout, values rounded to 6 significant digits.

    The last entry, 'short function', is evaluated with kepler_fraction() straight from the
    bundle inputs and should match 'rel. covered area'.

    Raises
    ------
    ValueError: If the bundle was computed without the area decomposition.
    """
    if bundle.circ_cov_area is None:
        raise ValueError("The readout requires a bundle computed with areas (variant 'areas').")

    lines = [
        ('i angle', to_deg(bundle.i_ang)),
        ('i-l sector', to_deg(bundle.sec_il)),
        ('triangle area', bundle.area_tri),
        ('sector area', bundle.area_sec),
        ('i-f-l area', bundle.area_ifl),
        ('circle covered area', bundle.circ_cov_area),
        ('rel. covered area', bundle.rel_cov_area),
        ('short function', kepler_fraction(bundle.theta, bundle.e)),
    ]
    return [(label, round_sig(value, READOUT_PRECISION)) for label, value in lines]

def format_readout(bundle: GeometryBundle) -> str:
    """Readout as text, one 'label: value' line per metric."""
    return ''.join(f"{label}: {value:g}\n" for label, value in readout_lines(bundle))
