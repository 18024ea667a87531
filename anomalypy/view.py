# Import necessary modules
# ------------------------------------------------------------------------------------------------ #
import logging
import numpy as np

import matplotlib.pyplot as plt
from matplotlib.patches import Arc, Ellipse, Polygon, Wedge

from typing import Optional, Tuple, Union

from .controls import RangeControl
from .geometry import to_deg, to_rad, project, label_position, Vec
from .logging_config import setup_logging
from .readout import format_readout
from .solver import GeometryBundle, GeometrySolver, OrbitalParameters
from .variants import Variant
# ------------------------------------------------------------------------------------------------ #

logger = logging.getLogger(__name__)


def _finite(*values) -> bool:
    return bool(np.all(np.isfinite(np.asarray(values, dtype=float))))


class OrbitViewer:
    """
    Interactive two-panel view of the ellipse (left) and its auxiliary circle (right).

    Two sliders drive the angle and the eccentricity. Every slider change rebuilds the
    OrbitalParameters, recomputes the GeometryBundle and redraws both panels; the 'areas'
    variant adds a panel with the numeric readout.

    Attributes
    ----------
    solver (GeometrySolver): Solver of the selected variant.
    params (OrbitalParameters): Current parameters.
    bundle (GeometryBundle or None): Bundle of the last redraw.
    theta_control, e_control (RangeControl): The two inputs.
    """

    BACKGROUND = '#111'
    FILL_COLOR = '#345'
    SWEEP_COLOR = (1.0, 1.0, 1.0, 0.2)
    SECTOR_COLOR = (0.0, 1.0, 0.5, 0.2)
    CHORD_SECTOR_COLOR = (1.0, 0.6, 0.1, 0.25)
    ARC_COLOR = (1.0, 1.0, 1.0, 0.3)
    POINT_COLOR = '#fff'
    X_AXIS_COLOR = '#c43'
    Y_AXIS_COLOR = '#2c7'

    VIEW_RADIUS = 1.0
    AXES_LEN = 1.6
    LABEL_OFFSET = 0.1
    ARC_SPACING = 0.1
    ARC_SAMPLES = 120

    def __init__(self, variant: Union[str, Variant] = 'areas') -> None:
        self.solver = GeometrySolver(variant)
        self.variant = self.solver.variant
        self.params: OrbitalParameters = self.solver.default_parameters()
        self.bundle: Optional[GeometryBundle] = None

        self.theta_control = RangeControl('Theta', round(self.params.theta_deg, 3), 0, 360)
        self.e_control = RangeControl('Eccentricity', self.params.e, 0, 1)
        self.theta_control.on_change(self._on_theta)
        self.e_control.on_change(self._on_e)

        self.fig = None
        self.ax_ellipse = None
        self.ax_circle = None
        self.ax_info = None

    # Input handling
    # -------------------------------------------------------------------------------------------- #

    def _on_theta(self, value: float) -> None:
        self.params = self.params.with_theta(float(to_rad(value)))
        self.update()

    def _on_e(self, value: float) -> None:
        self.params = self.params.with_e(value)
        self.update()

    # Figure
    # -------------------------------------------------------------------------------------------- #

    def build(self, figsize: Tuple[int, int] = (12, 6)) -> plt.Figure:
        """
        Create the figure, the panels and the two sliders.

        Parameters
        ----------
        figsize (tuple, optional): Figure size (width, height). Defaults to (12, 6).

        Returns
        -------
        matplotlib.figure.Figure: The created figure.
        """
        fig = plt.figure(figsize=figsize)
        fig.patch.set_facecolor(self.BACKGROUND)
        if self.variant.title:
            fig.suptitle(self.variant.title, color=self.POINT_COLOR)

        if self.variant.with_areas:
            self.ax_ellipse = fig.add_axes([0.02, 0.2, 0.36, 0.72])
            self.ax_circle = fig.add_axes([0.38, 0.2, 0.36, 0.72])
            self.ax_info = fig.add_axes([0.76, 0.2, 0.22, 0.72])
            self.ax_info.axis('off')
        else:
            self.ax_ellipse = fig.add_axes([0.02, 0.2, 0.46, 0.72])
            self.ax_circle = fig.add_axes([0.52, 0.2, 0.46, 0.72])

        for control, bottom in ((self.theta_control, 0.1), (self.e_control, 0.04)):
            slider = control.attach(fig.add_axes([0.2, bottom, 0.55, 0.03]))
            slider.label.set_color(self.POINT_COLOR)
            slider.valtext.set_color(self.POINT_COLOR)

        self.fig = fig
        return fig

    def update(self) -> GeometryBundle:
        """Recompute the bundle for the current parameters and redraw."""
        self.bundle = self.solver.compute(self.params)
        if self.fig is not None:
            self.render(self.bundle)
            self.fig.canvas.draw_idle()
        return self.bundle

    def plot(
        self,
        save: bool = False,
        filename: Optional[str] = None,
        figsize: Tuple[int, int] = (12, 6),
        show: bool = True,
    ) -> Tuple[plt.Figure, Tuple[plt.Axes, plt.Axes]]:
        """
        Draw the viewer.

        Parameters
        ----------
        save (bool, optional): Whether to save the figure to a file. Defaults to False.
        filename (str, optional): Filename to save the figure. Required if save is True.
        figsize (tuple, optional): Figure size (width, height). Defaults to (12, 6).
        show (bool, optional): Whether to display the interactive window. Defaults to True.

        Returns
        -------
        tuple: Figure and the (ellipse, circle) axes.

        Raises
        ------
        ValueError: If save=True but no filename is provided.
        """
        if save and filename is None:
            raise ValueError("Filename must be provided if save is True.")

        if self.fig is None:
            self.build(figsize)
        self.update()

        if save:
            self.fig.savefig(filename, dpi=150, facecolor=self.fig.get_facecolor())
        if show:
            plt.show()
        return self.fig, (self.ax_ellipse, self.ax_circle)

    # Rendering
    # -------------------------------------------------------------------------------------------- #

    def render(self, bundle: GeometryBundle) -> None:
        """Redraw both panels (and the readout) from a bundle."""
        logger.debug("Rendering %s: theta=%s, e=%s", self.variant.name, bundle.theta, bundle.e)
        self._render_ellipse(self.ax_ellipse, bundle)
        self._render_circle(self.ax_circle, bundle)
        if self.ax_info is not None:
            self.ax_info.clear()
            self.ax_info.axis('off')
            self.ax_info.text(
                0.0, 1.0, format_readout(bundle),
                va='top', ha='left', family='monospace', color=self.POINT_COLOR,
                transform=self.ax_info.transAxes,
            )

    def _render_ellipse(self, ax: plt.Axes, bundle: GeometryBundle) -> None:
        self._reset_panel(ax)
        self._fill_ellipse(ax, bundle.h)
        if self.variant.with_areas:
            self._fill_orbit_area(ax, bundle.f, bundle.i_ang, bundle.h)
        self._draw_axes(ax)

        self._draw_point(ax, (0.0, 0.0), 'c')
        self._draw_line(ax, bundle.f, bundle.p)
        self._draw_point(ax, bundle.p, 'p')
        self._draw_point(ax, bundle.f, 'f')

    def _render_circle(self, ax: plt.Axes, bundle: GeometryBundle) -> None:
        self._reset_panel(ax)
        self._fill_ellipse(ax, 1.0)
        if self.variant.with_areas:
            self._fill_orbit_area(ax, bundle.f, bundle.i_ang, 1.0)
            self._fill_sector(ax, min(bundle.i_ang, np.pi), max(bundle.i_ang, np.pi), self.SECTOR_COLOR)
        if self.variant.with_sector:
            self._fill_sector(ax, bundle.o_ang, bundle.o_ang + bundle.sec_ang, self.CHORD_SECTOR_COLOR)
        self._draw_axes(ax)

        self._draw_point(ax, (0.0, 0.0), 'c')
        self._draw_point(ax, bundle.f, 'f')
        self._draw_point(ax, bundle.i, 'i')
        if self.variant.with_areas:
            self._draw_point(ax, (-1.0, 0.0), 'l')

        self._draw_line(ax, bundle.i, bundle.f)
        if self.variant.with_chord:
            self._draw_line(ax, bundle.f, bundle.o, dashed=True)
            self._draw_point(ax, bundle.o, 'o')

        self._draw_arc(ax, 0.0, bundle.i_ang, 1)
        if self.variant.with_chord:
            self._draw_arc(ax, 0.0, bundle.o_ang, 2)
        if self.variant.with_sector:
            self._draw_arc(ax, bundle.o_ang, bundle.o_ang + bundle.sec_ang, 3)

    def _reset_panel(self, ax: plt.Axes) -> None:
        ax.clear()
        lim = self.AXES_LEN * self.VIEW_RADIUS + 4 * self.ARC_SPACING
        ax.set_xlim(-lim, lim)
        ax.set_ylim(-lim, lim)
        ax.set_aspect('equal')
        ax.axis('off')

    def _fill_ellipse(self, ax: plt.Axes, h: float) -> None:
        if not _finite(h):
            return
        r = self.VIEW_RADIUS
        ax.add_patch(Ellipse((0, 0), 2 * r, 2 * r * h, facecolor=self.FILL_COLOR))

    def _fill_orbit_area(self, ax: plt.Axes, f: Vec, ang: float, h: float) -> None:
        # Region swept from the focus, bounded by the curve between angle 0 and ang
        if not _finite(ang, h, *f):
            return
        t = np.linspace(0.0, ang, self.ARC_SAMPLES)
        curve = np.column_stack((np.cos(t), h * np.sin(t))) * self.VIEW_RADIUS
        vertices = np.vstack((project(f, self.VIEW_RADIUS), curve))
        ax.add_patch(Polygon(vertices, closed=True, facecolor=self.SWEEP_COLOR, edgecolor='none'))

    def _fill_sector(self, ax: plt.Axes, start: float, end: float, color) -> None:
        if not _finite(start, end):
            return
        ax.add_patch(Wedge((0, 0), self.VIEW_RADIUS, to_deg(start), to_deg(end),
                           facecolor=color, edgecolor='none'))

    def _draw_axes(self, ax: plt.Axes) -> None:
        length = self.AXES_LEN * self.VIEW_RADIUS
        for start, end, color in (((0, -length), (0, length), self.Y_AXIS_COLOR),
                                  ((-length, 0), (length, 0), self.X_AXIS_COLOR)):
            ax.annotate('', xy=end, xytext=start,
                        arrowprops=dict(arrowstyle='->', color=color, lw=1))

    def _draw_point(self, ax: plt.Axes, point: Vec, label: Optional[str] = None) -> None:
        if not _finite(*point):
            return
        x, y = project(point, self.VIEW_RADIUS)
        ax.plot([x], [y], 'o', color=self.POINT_COLOR, markersize=3)
        if not label:
            return
        lx, ly = label_position((x, y), self.LABEL_OFFSET)
        ax.text(lx, ly, label, ha='center', va='center', family='monospace', color=self.POINT_COLOR)

    def _draw_line(self, ax: plt.Axes, a: Vec, b: Vec, dashed: bool = False) -> None:
        if not _finite(*a, *b):
            return
        ax_, ay = project(a, self.VIEW_RADIUS)
        bx, by = project(b, self.VIEW_RADIUS)
        ax.plot([ax_, bx], [ay, by], color=self.POINT_COLOR, lw=1, linestyle='--' if dashed else '-')

    def _draw_arc(self, ax: plt.Axes, start: float, end: float, spaces: int) -> None:
        # Arcs are stacked outside the circle, one ARC_SPACING per index
        if not _finite(start, end):
            return
        diameter = 2 * (self.VIEW_RADIUS + self.ARC_SPACING * spaces)
        ax.add_patch(Arc((0, 0), diameter, diameter, theta1=to_deg(start), theta2=to_deg(end),
                         color=self.ARC_COLOR))

    def __str__(self) -> str:
        return f"OrbitViewer(variant={self.variant.name}, theta={self.params.theta}, e={self.params.e})"


def show_variant(
    variant: Union[str, Variant] = 'areas',
    log_level: Optional[int] = logging.INFO,
    log_file: Optional[str] = None,
    **plot_kwargs,
) -> OrbitViewer:
    """
    Open the interactive viewer for a variant and return it.

    Logging of the package is configured with setup_logging() unless log_level is None.
    Remaining keyword arguments go to OrbitViewer.plot().
    """
    if log_level is not None:
        setup_logging(log_level, log_file)
    viewer = OrbitViewer(variant)
    viewer.plot(**plot_kwargs)
    return viewer
