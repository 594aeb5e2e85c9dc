"""View state primitives for the interactive coordinate grid.

Purpose
-------
This module defines ``ViewConfig``, the fixed geometry of one coordinate grid
(unit size, area, zoom and hit-test limits), and ``ViewTransform``, the
mutable pan/zoom state a controller owns.

Notes
-----
The canvas origin sits at the center of a square area of
``columns * unit_size`` canvas units. Translation and scale are applied on
top of that canvas, in screen units.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .InputConvert import InputConvert


def clamp(value: float, low: float, high: float) -> float:
    """Return ``value`` limited to ``[low, high]``."""
    return max(low, min(high, value))


@dataclass(frozen=True)
class ViewConfig:
    """Fixed geometry and limits of one coordinate grid.

    Parameters
    ----------
    columns : int
        Number of grid squares per side.
    unit_size : float
        Canvas length of one grid square (one domain unit).
    min_scale, max_scale : float
        Pinch zoom limits.
    hit_threshold : float
        Largest tap-to-point distance, in domain units, that counts as a hit.
    initial_scale : float
        Scale of a fresh view; clamped into ``[min_scale, max_scale]``.
    initial_translate_x, initial_translate_y : float or None
        Translation of a fresh view. ``None`` uses ``-columns * 12`` and
        ``-415``, which center the default grid on a phone screen.
    """

    columns: int = 34
    unit_size: float = 34.0
    min_scale: float = 2.0
    max_scale: float = 3.0
    hit_threshold: float = 1.0
    initial_scale: float = 1.2
    initial_translate_x: Optional[float] = None
    initial_translate_y: Optional[float] = None

    def __post_init__(self) -> None:
        """Coerce numeric-like fields and validate limits."""
        object.__setattr__(self, "columns", InputConvert(self.columns, int, name="columns"))
        for name in ("unit_size", "min_scale", "max_scale", "hit_threshold", "initial_scale"):
            object.__setattr__(self, name, InputConvert(getattr(self, name), float, name=name))
        if self.initial_translate_x is None:
            object.__setattr__(self, "initial_translate_x", float(-self.columns * 12))
        if self.initial_translate_y is None:
            object.__setattr__(self, "initial_translate_y", -415.0)
        for name in ("initial_translate_x", "initial_translate_y"):
            object.__setattr__(self, name, InputConvert(getattr(self, name), float, name=name))

        if self.columns <= 0:
            raise ValueError(f"columns must be > 0, got {self.columns}")
        if self.unit_size <= 0:
            raise ValueError(f"unit_size must be > 0, got {self.unit_size}")
        if not 0 < self.min_scale <= self.max_scale:
            raise ValueError(
                f"scale limits must satisfy 0 < min_scale <= max_scale, got [{self.min_scale}, {self.max_scale}]"
            )
        if self.hit_threshold < 0:
            raise ValueError(f"hit_threshold must be >= 0, got {self.hit_threshold}")

    @property
    def area_size(self) -> float:
        """Side length of the square canvas."""
        return self.columns * self.unit_size

    def clamp_scale(self, scale: float) -> float:
        return clamp(scale, self.min_scale, self.max_scale)

    def pan_bounds(self, scale: float) -> tuple[tuple[float, float], tuple[float, float]]:
        """Return ``((min_x, max_x), (min_y, max_y))`` translation limits at ``scale``.

        The window may move further toward negative translation (content
        dragged left/up) the more the grid is zoomed in, so the enlarged grid
        can still be explored without being dragged fully off-screen.
        """
        area = self.area_size
        half = (area / 2) * scale
        max_x = half - area / 2
        min_x = -max_x - 30 * 17 * (scale - 1)
        max_y = half - area / 2
        min_y = -max_y - 30 * 1 * (scale - 1)
        return (min_x, max_x), (min_y, max_y)


@dataclass
class ViewTransform:
    """Current pan/zoom state of one view.

    Parameters
    ----------
    translate_x, translate_y : float
        Screen offset of the canvas.
    scale : float
        Zoom factor applied to the canvas.
    """

    translate_x: float
    translate_y: float
    scale: float

    @classmethod
    def initial(cls, config: ViewConfig) -> "ViewTransform":
        """Return the transform of a freshly mounted view."""
        return cls(
            translate_x=float(config.initial_translate_x),
            translate_y=float(config.initial_translate_y),
            scale=config.clamp_scale(config.initial_scale),
        )

    def screen_to_domain(
        self,
        screen_x: float,
        screen_y: float,
        *,
        canvas_width: float,
        canvas_height: float,
        unit_size: float,
    ) -> tuple[float, float]:
        """Map a screen position to domain coordinates.

        Inverse of ``screen = translate + canvas_center + domain * unit * scale``
        with the y axis pointing up in the domain.
        """
        canvas_dx = screen_x - self.translate_x - canvas_width / 2
        canvas_dy = screen_y - self.translate_y - canvas_height / 2
        return (canvas_dx / unit_size) / self.scale, (canvas_dy / unit_size) / -self.scale

    def domain_to_screen(
        self,
        domain_x: float,
        domain_y: float,
        *,
        canvas_width: float,
        canvas_height: float,
        unit_size: float,
    ) -> tuple[float, float]:
        """Forward mapping matching :meth:`screen_to_domain`."""
        return (
            self.translate_x + canvas_width / 2 + domain_x * unit_size * self.scale,
            self.translate_y + canvas_height / 2 - domain_y * unit_size * self.scale,
        )
