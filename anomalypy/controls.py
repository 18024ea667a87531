# Import necessary modules
# ------------------------------------------------------------------------------------------------ #
import logging
import numpy as np

from matplotlib.widgets import Slider

from typing import Callable, Dict, Optional

from .geometry import round_sig
# ------------------------------------------------------------------------------------------------ #

logger = logging.getLogger(__name__)


class RangeControl:
    """
    A range input: a control position in [0, 1] mapped linearly onto [vmin, vmax].

    Positions snap to multiples of `step`, and every reported value is rounded to
    `precision` significant digits before it reaches the callbacks.

    Attributes
    ----------
    label (str): Name shown next to the control.
    vmin, vmax (float): Semantic range of the value.
    step (float): Position resolution. Defaults to 0.001.
    precision (int): Significant digits of reported values. Defaults to 8.
    position (float): Current control position.
    value (float): Current value.
    """

    def __init__(
        self,
        label: str,
        init: float,
        vmin: float,
        vmax: float,
        step: float = 0.001,
        precision: int = 8,
    ) -> None:
        """
        Initialize the control.

        Parameters
        ----------
        label (str): Name shown next to the control.
        init (float): Initial value, reported as-is.
        vmin, vmax (float): Semantic range.
        step (float, optional): Position resolution. Defaults to 0.001.
        precision (int, optional): Significant digits of reported values. Defaults to 8.

        Raises
        ------
        TypeError: If init, vmin or vmax are not numeric.
        ValueError: If vmin >= vmax or step is not in (0, 1].
        """
        if not all(isinstance(v, (int, float)) for v in (init, vmin, vmax)):
            raise TypeError("init, vmin and vmax must be numeric values")
        if vmin >= vmax:
            raise ValueError("vmin must be less than vmax")
        if not 0 < step <= 1:
            raise ValueError("step must be in (0, 1]")

        self.label = label
        self.vmin = vmin
        self.vmax = vmax
        self.step = step
        self.precision = precision

        self.value: float = init
        self.position: float = self._snap((init - vmin) / (vmax - vmin))

        self._callbacks: Dict[int, Callable[[float], None]] = {}
        self._next_cid = 0
        self.slider: Optional[Slider] = None

    def _snap(self, position: float) -> float:
        position = float(np.clip(position, 0.0, 1.0))
        return float(np.round(position / self.step) * self.step)

    def value_at(self, position: float) -> float:
        """Value reported for a control position."""
        position = self._snap(position)
        return round_sig(position * (self.vmax - self.vmin) + self.vmin, self.precision)

    def on_change(self, func: Callable[[float], None]) -> int:
        """
        Register a callback receiving the new value on every change.

        Returns
        -------
        int: Connection id, usable with disconnect().
        """
        cid = self._next_cid
        self._next_cid += 1
        self._callbacks[cid] = func
        return cid

    def disconnect(self, cid: int) -> None:
        """Remove a callback registered with on_change()."""
        self._callbacks.pop(cid, None)

    def set_position(self, position: float) -> float:
        """
        Move the control and notify the callbacks.

        Returns
        -------
        float: The new value.
        """
        self.position = self._snap(position)
        self.value = self.value_at(self.position)
        logger.debug("%s -> %s", self.label, self.value)
        for func in list(self._callbacks.values()):
            func(self.value)
        if self.slider is not None:
            self.slider.valtext.set_text(f"{self.value:g}")
        return self.value

    def set_value(self, value: float) -> float:
        """Move the control to the position closest to value and notify the callbacks."""
        position = self._snap((value - self.vmin) / (self.vmax - self.vmin))
        if self.slider is not None:
            # The slider reports back through set_position()
            self.slider.set_val(position)
            return self.value
        return self.set_position(position)

    def attach(self, ax) -> Slider:
        """
        Bind the control to a matplotlib Slider drawn in `ax`.

        The slider runs over the normalized position; moving it drives set_position().

        Parameters
        ----------
        ax (matplotlib.axes.Axes): Axes to hold the slider.

        Returns
        -------
        Slider: The created slider.
        """
        slider = Slider(ax, self.label, 0.0, 1.0, valinit=self.position, valstep=self.step)
        slider.valtext.set_text(f"{self.value:g}")
        slider.on_changed(self.set_position)
        self.slider = slider
        return slider

    def __str__(self) -> str:
        return f"RangeControl(label={self.label}, vmin={self.vmin}, vmax={self.vmax}, value={self.value})"
