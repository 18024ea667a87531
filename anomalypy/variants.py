# Import necessary modules
# ------------------------------------------------------------------------------------------------ #
from dataclasses import dataclass
from typing import Dict, Union
# ------------------------------------------------------------------------------------------------ #

@dataclass(frozen=True)
class Variant:
    """
    Configuration of one visualization: its start-up parameters, the quantities the
    solver computes for it and the elements the viewer draws.

    Attributes
    ----------
    name (str): Registry key of the variant.
    theta_deg (float): Default angle in degrees.
    e (float): Default eccentricity.
    with_areas (bool): Compute the triangle, sector and covered areas and show the readout panel.
    with_chord (bool): Compute the second circle intersection o and its angle.
    with_sector (bool): Compute the o-i sector angle (requires with_chord).
    title (str): Window title.
    """
    name: str
    theta_deg: float
    e: float
    with_areas: bool = False
    with_chord: bool = False
    with_sector: bool = False
    title: str = ''

    def __post_init__(self) -> None:
        if self.with_sector and not self.with_chord:
            raise ValueError("with_sector requires with_chord, the sector is bounded by o.")


VARIANTS: Dict[str, Variant] = {
    'areas': Variant(
        name='areas', theta_deg=30.0, e=0.5,
        with_areas=True,
        title='Covered area of the auxiliary circle',
    ),
    'chord': Variant(
        name='chord', theta_deg=15.0, e=0.75,
        with_chord=True,
        title='Focal chord through the auxiliary circle',
    ),
    'sector': Variant(
        name='sector', theta_deg=15.0, e=0.85,
        with_chord=True, with_sector=True,
        title='Sector between the chord end points',
    ),
}

VALID_VARIANTS = list(VARIANTS)

def get_variant(variant: Union[str, Variant]) -> Variant:
    """
    Resolve a variant name (or pass a Variant through unchanged).

    Raises
    ------
    ValueError: If the name is not a registered variant.
    TypeError: If variant is neither a string nor a Variant.
    """
    if isinstance(variant, Variant):
        return variant
    if not isinstance(variant, str):
        raise TypeError("variant must be a variant name or a Variant instance")
    if variant not in VARIANTS:
        raise ValueError(f"Unknown variant. Choose from {VALID_VARIANTS}")
    return VARIANTS[variant]
