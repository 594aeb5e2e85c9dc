"""Gesture state machine and tap hit-testing for the coordinate grid.

This module centralizes the interactive behavior of one graph view so the UI
layer only forwards raw gesture events. The controller owns:

- the ``ViewTransform`` and its clamping rules,
- pan/pinch gesture lifecycle (``"idle"`` / ``"active"``),
- tap resolution to the nearest plotted point and the resulting selection
  (readout text, guide lines, marker).

Pan and pinch may be active at the same time. Updates are applied as they
arrive; ending or cancelling a gesture keeps whatever was already applied.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable, Literal, Optional, Sequence

from .curve_sampler import PlotPoint
from .view_transform import ViewConfig, ViewTransform, clamp

__all__ = [
    "CoordinateViewController",
    "GestureKind",
    "GestureState",
    "GuideLines",
    "HitResult",
    "hit_test",
]

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

GestureKind = Literal["pan", "pinch"]
GestureState = Literal["idle", "active"]


@dataclass(frozen=True)
class GuideLines:
    """Dashed helper lines from each axis to a selected point (canvas units)."""

    horizontal: tuple[tuple[float, float], tuple[float, float]]
    vertical: tuple[tuple[float, float], tuple[float, float]]


@dataclass(frozen=True)
class HitResult:
    """A tap resolved to a plotted point."""

    point: PlotPoint
    distance: float
    guides: GuideLines

    @property
    def readout(self) -> tuple[str, str]:
        """Coordinates formatted for display, two decimals each."""
        return f"{self.point.x:.2f}", f"{self.point.y:.2f}"

    @property
    def marker(self) -> tuple[float, float]:
        """Canvas position of the selection marker."""
        return self.point.canvas_x, self.point.canvas_y


def hit_test(
    points: Iterable[PlotPoint],
    domain_x: float,
    domain_y: float,
    threshold: float,
) -> Optional[tuple[PlotPoint, float]]:
    """Return the point nearest to ``(domain_x, domain_y)`` and its distance.

    Distance is Euclidean in domain units. Returns ``None`` when there are no
    points or the nearest one is farther than ``threshold``. Ties keep the
    earliest point in sweep order.
    """
    best: Optional[PlotPoint] = None
    best_distance = math.inf
    for point in points:
        distance = math.hypot(domain_x - point.x, domain_y - point.y)
        if distance < best_distance:
            best = point
            best_distance = distance
    if best is None or best_distance > threshold:
        return None
    return best, best_distance


class CoordinateViewController:
    """Own the pan/zoom transform and tap selection of one graph view.

    Parameters
    ----------
    points : Sequence[PlotPoint]
        Hit-test candidates, usually ``PlotResult.points``.
    config : ViewConfig or None
        Grid geometry and limits.
    interactive : bool
        When False (static preview), every gesture is ignored.
    """

    def __init__(
        self,
        points: Sequence[PlotPoint] = (),
        *,
        config: Optional[ViewConfig] = None,
        interactive: bool = True,
    ) -> None:
        self.config = config if config is not None else ViewConfig()
        self.interactive = bool(interactive)
        self.points: Sequence[PlotPoint] = tuple(points)
        self.transform = ViewTransform.initial(self.config)
        self.selection: Optional[HitResult] = None
        self._active: set[GestureKind] = set()
        self._scale_baseline = self.transform.scale
        self._translate_baseline = (self.transform.translate_x, self.transform.translate_y)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> GestureState:
        return "active" if self._active else "idle"

    @property
    def active_gestures(self) -> frozenset[GestureKind]:
        return frozenset(self._active)

    def set_points(self, points: Sequence[PlotPoint]) -> None:
        """Replace hit-test candidates and drop the current selection."""
        self.points = tuple(points)
        self.selection = None

    def reset(self) -> None:
        """Restore the initial transform, end all gestures, clear the selection."""
        self.transform = ViewTransform.initial(self.config)
        self._active.clear()
        self.selection = None

    def cancel(self) -> None:
        """Abort all gestures; incrementally applied updates stay in place."""
        if self._active:
            logger.debug("cancel: dropping gestures %s", sorted(self._active))
        self._active.clear()

    def _begin(self, kind: GestureKind) -> bool:
        if not self.interactive:
            logger.debug("%s start ignored: view is not interactive", kind)
            return False
        self._active.add(kind)
        return True

    def _end(self, kind: GestureKind) -> None:
        self._active.discard(kind)

    # ------------------------------------------------------------------
    # Pinch
    # ------------------------------------------------------------------

    def pinch_start(self) -> None:
        if self._begin("pinch"):
            self._scale_baseline = self.transform.scale

    def pinch_update(self, factor: float) -> None:
        """Apply ``baseline * factor`` clamped to the configured scale range."""
        if "pinch" not in self._active:
            logger.debug("pinch update ignored: no pinch in progress")
            return
        try:
            candidate = self._scale_baseline * float(factor)
        except (TypeError, ValueError):
            logger.debug("pinch update ignored: bad factor %r", factor)
            return
        if not math.isfinite(candidate):
            logger.debug("pinch update ignored: bad factor %r", factor)
            return
        self.transform.scale = self.config.clamp_scale(candidate)

    def pinch_end(self) -> None:
        self._end("pinch")

    # ------------------------------------------------------------------
    # Pan
    # ------------------------------------------------------------------

    def pan_start(self) -> None:
        if self._begin("pan"):
            self._translate_baseline = (self.transform.translate_x, self.transform.translate_y)

    def pan_update(self, delta_x: float, delta_y: float) -> None:
        """Apply ``baseline + delta`` clamped to the current pan bounds."""
        if "pan" not in self._active:
            logger.debug("pan update ignored: no pan in progress")
            return
        try:
            dx, dy = float(delta_x), float(delta_y)
        except (TypeError, ValueError):
            logger.debug("pan update ignored: bad delta (%r, %r)", delta_x, delta_y)
            return
        if not (math.isfinite(dx) and math.isfinite(dy)):
            logger.debug("pan update ignored: non-finite delta (%r, %r)", delta_x, delta_y)
            return
        (min_x, max_x), (min_y, max_y) = self.config.pan_bounds(self.transform.scale)
        base_x, base_y = self._translate_baseline
        self.transform.translate_x = clamp(base_x + dx, min_x, max_x)
        self.transform.translate_y = clamp(base_y + dy, min_y, max_y)

    def pan_end(self) -> None:
        self._end("pan")

    # ------------------------------------------------------------------
    # Tap
    # ------------------------------------------------------------------

    def tap(self, screen_x: float, screen_y: float) -> Optional[HitResult]:
        """Resolve a tap at screen coordinates to the nearest plotted point.

        A tap during an active pan is ignored and leaves the selection as is.
        A miss clears the selection; a hit replaces it.
        """
        if not self.interactive:
            logger.debug("tap ignored: view is not interactive")
            return None
        if "pan" in self._active:
            logger.debug("tap ignored: pan in progress")
            return self.selection

        area = self.config.area_size
        domain_x, domain_y = self.transform.screen_to_domain(
            screen_x,
            screen_y,
            canvas_width=area,
            canvas_height=area,
            unit_size=self.config.unit_size,
        )
        return self.select_at(domain_x, domain_y)

    def select_at(self, domain_x: float, domain_y: float) -> Optional[HitResult]:
        """Select the point nearest to domain coordinates, or clear on a miss."""
        found = hit_test(self.points, domain_x, domain_y, self.config.hit_threshold)
        if found is None:
            logger.debug("tap at (%.3f, %.3f) missed", domain_x, domain_y)
            self.selection = None
            return None
        point, distance = found
        self.selection = HitResult(point=point, distance=distance, guides=self._guides_for(point))
        return self.selection

    def _guides_for(self, point: PlotPoint) -> GuideLines:
        area = self.config.area_size
        unit = self.config.unit_size
        center = area / 2
        px = center + point.x * unit
        py = center - point.y * unit
        return GuideLines(
            horizontal=((center, py), (px, py)),
            vertical=((px, center), (px, py)),
        )
