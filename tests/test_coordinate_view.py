from __future__ import annotations

import math

import pytest

from mathsnap.coordinate_view import CoordinateViewController, hit_test
from mathsnap.curve_sampler import CurveSampler, PlotPoint
from mathsnap.view_transform import ViewConfig, ViewTransform


def _point(x: float, y: float, config: ViewConfig = ViewConfig()) -> PlotPoint:
    center = config.area_size / 2
    return PlotPoint(center + x * config.unit_size, center - y * config.unit_size, x, y)


def _screen_of(controller: CoordinateViewController, x: float, y: float) -> tuple[float, float]:
    area = controller.config.area_size
    return controller.transform.domain_to_screen(
        x, y, canvas_width=area, canvas_height=area, unit_size=controller.config.unit_size
    )


# ---------------------------------------------------------------------------
# Configuration and transform
# ---------------------------------------------------------------------------


def test_default_view_config() -> None:
    cfg = ViewConfig()
    assert cfg.area_size == 34 * 34
    assert cfg.initial_translate_x == -408.0
    assert cfg.initial_translate_y == -415.0


def test_initial_scale_is_clamped_into_limits() -> None:
    assert ViewTransform.initial(ViewConfig()).scale == 2.0
    assert ViewTransform.initial(ViewConfig(initial_scale=5)).scale == 3.0


@pytest.mark.parametrize(
    "kwargs",
    [
        {"columns": 0},
        {"columns": 2.5},
        {"unit_size": -1},
        {"min_scale": 3, "max_scale": 2},
        {"min_scale": 0},
        {"hit_threshold": -0.5},
    ],
)
def test_view_config_rejects_invalid_values(kwargs) -> None:
    with pytest.raises(ValueError):
        ViewConfig(**kwargs)


def test_pan_bounds_formula() -> None:
    (min_x, max_x), (min_y, max_y) = ViewConfig().pan_bounds(2.0)
    assert max_x == pytest.approx(578.0)
    assert max_y == pytest.approx(578.0)
    assert min_x == pytest.approx(-578.0 - 510.0)
    assert min_y == pytest.approx(-578.0 - 30.0)


def test_screen_domain_mapping_round_trips() -> None:
    t = ViewTransform(translate_x=-120.0, translate_y=35.0, scale=2.5)
    sx, sy = t.domain_to_screen(3.0, -1.5, canvas_width=1156, canvas_height=1156, unit_size=34)
    x, y = t.screen_to_domain(sx, sy, canvas_width=1156, canvas_height=1156, unit_size=34)
    assert (x, y) == pytest.approx((3.0, -1.5))


# ---------------------------------------------------------------------------
# Hit testing
# ---------------------------------------------------------------------------


def test_hit_test_picks_nearest_point() -> None:
    points = [_point(0, 0), _point(2, 4), _point(3, 9)]
    found = hit_test(points, 2.05, 4.02, threshold=1.0)
    assert found is not None
    point, distance = found
    assert (point.x, point.y) == (2, 4)
    assert distance == pytest.approx(math.hypot(0.05, 0.02))


def test_hit_test_threshold_is_inclusive() -> None:
    assert hit_test([_point(0, 0)], 1.0, 0.0, threshold=1.0) is not None
    assert hit_test([_point(0, 0)], 1.01, 0.0, threshold=1.0) is None


def test_hit_test_tie_keeps_first_point() -> None:
    first, second = _point(-1, 0), _point(1, 0)
    point, _ = hit_test([first, second], 0.0, 0.0, threshold=1.0)
    assert point is first


def test_hit_test_without_points() -> None:
    assert hit_test([], 0.0, 0.0, threshold=1.0) is None


def test_tap_near_point_selects_it() -> None:
    controller = CoordinateViewController([_point(0, 0), _point(2, 4)])
    hit = controller.tap(*_screen_of(controller, 2.05, 4.02))

    assert hit is not None
    assert hit is controller.selection
    assert hit.readout == ("2.00", "4.00")
    assert hit.marker == (578.0 + 68.0, 578.0 - 136.0)


def test_tap_far_from_curve_clears_selection() -> None:
    controller = CoordinateViewController([_point(2, 4)])
    controller.select_at(2, 4)
    assert controller.selection is not None

    assert controller.tap(*_screen_of(controller, 10, 10)) is None
    assert controller.selection is None


def test_tap_resolves_through_current_transform() -> None:
    controller = CoordinateViewController([_point(2, 4)])
    controller.pinch_start()
    controller.pinch_update(1.4)
    controller.pinch_end()
    controller.pan_start()
    controller.pan_update(-50, 30)
    controller.pan_end()

    assert controller.tap(*_screen_of(controller, 2.1, 3.9)) is not None


def test_guides_run_from_axes_to_point() -> None:
    controller = CoordinateViewController([_point(2, 4)])
    hit = controller.select_at(2, 4)
    px, py = hit.marker
    assert hit.guides.horizontal == ((578.0, py), (px, py))
    assert hit.guides.vertical == ((px, 578.0), (px, py))


def test_hit_on_sampled_parabola() -> None:
    result = CurveSampler().sample("y=x^2", 1156, 1156, 34)
    controller = CoordinateViewController(result.points)
    hit = controller.select_at(2.05, 4.02)
    assert hit is not None
    assert hit.point.x == pytest.approx(2.0)


def test_set_points_drops_selection() -> None:
    controller = CoordinateViewController([_point(2, 4)])
    controller.select_at(2, 4)
    controller.set_points([_point(5, 5)])
    assert controller.selection is None
    assert controller.select_at(2, 4) is None


# ---------------------------------------------------------------------------
# Gestures
# ---------------------------------------------------------------------------


def test_pinch_scales_from_baseline_and_clamps() -> None:
    controller = CoordinateViewController()
    controller.pinch_start()
    controller.pinch_update(1.25)
    assert controller.transform.scale == pytest.approx(2.5)
    controller.pinch_update(10)
    assert controller.transform.scale == 3.0
    controller.pinch_update(0.1)
    assert controller.transform.scale == 2.0
    controller.pinch_end()
    assert controller.state == "idle"


def test_pinch_ignores_nan_factor() -> None:
    controller = CoordinateViewController()
    controller.pinch_start()
    controller.pinch_update(1.25)
    controller.pinch_update(float("nan"))
    assert controller.transform.scale == pytest.approx(2.5)


def test_pan_offsets_from_baseline_and_clamps() -> None:
    controller = CoordinateViewController()
    controller.pan_start()
    controller.pan_update(100, 50)
    assert controller.transform.translate_x == pytest.approx(-308.0)
    assert controller.transform.translate_y == pytest.approx(-365.0)

    controller.pan_update(10_000, -10_000)
    assert controller.transform.translate_x == pytest.approx(578.0)
    assert controller.transform.translate_y == pytest.approx(-608.0)
    controller.pan_end()


def test_pan_ignores_non_finite_delta() -> None:
    controller = CoordinateViewController()
    controller.pan_start()
    controller.pan_update(20, 20)
    controller.pan_update(math.inf, 0)
    assert controller.transform.translate_x == pytest.approx(-388.0)


def test_pan_accepts_numeric_strings() -> None:
    controller = CoordinateViewController()
    controller.pan_start()
    controller.pan_update("5", 3)
    assert controller.transform.translate_x == pytest.approx(-403.0)
    assert controller.transform.translate_y == pytest.approx(-412.0)


@pytest.mark.parametrize("delta", [(None, 0), ("left", 1), (object(), 2)])
def test_pan_ignores_unconvertible_delta(delta) -> None:
    controller = CoordinateViewController()
    controller.pan_start()
    controller.pan_update(*delta)
    assert controller.transform.translate_x == pytest.approx(-408.0)
    assert controller.transform.translate_y == pytest.approx(-415.0)


def test_updates_without_start_are_ignored() -> None:
    controller = CoordinateViewController()
    before = (controller.transform.translate_x, controller.transform.translate_y, controller.transform.scale)
    controller.pan_update(50, 50)
    controller.pinch_update(1.5)
    after = (controller.transform.translate_x, controller.transform.translate_y, controller.transform.scale)
    assert after == before


def test_pan_and_pinch_can_overlap() -> None:
    controller = CoordinateViewController()
    controller.pan_start()
    controller.pinch_start()
    assert controller.state == "active"
    assert controller.active_gestures == frozenset({"pan", "pinch"})

    controller.pinch_end()
    assert controller.state == "active"
    controller.pan_end()
    assert controller.state == "idle"


def test_cancel_keeps_applied_updates() -> None:
    controller = CoordinateViewController()
    controller.pinch_start()
    controller.pinch_update(1.2)
    controller.cancel()

    assert controller.state == "idle"
    assert controller.transform.scale == pytest.approx(2.4)
    controller.pinch_update(1.5)
    assert controller.transform.scale == pytest.approx(2.4)


def test_tap_during_pan_keeps_selection() -> None:
    controller = CoordinateViewController([_point(2, 4)])
    selected = controller.select_at(2, 4)
    controller.pan_start()

    assert controller.tap(*_screen_of(controller, 10, 10)) is selected
    assert controller.selection is selected


def test_non_interactive_view_ignores_everything() -> None:
    controller = CoordinateViewController([_point(2, 4)], interactive=False)
    initial = controller.transform.scale
    controller.pinch_start()
    controller.pinch_update(1.4)
    controller.pan_start()
    controller.pan_update(100, 100)

    assert controller.state == "idle"
    assert controller.transform.scale == initial
    assert controller.tap(*_screen_of(controller, 2, 4)) is None


def test_reset_restores_initial_view() -> None:
    controller = CoordinateViewController([_point(2, 4)])
    controller.pinch_start()
    controller.pinch_update(1.5)
    controller.pan_start()
    controller.pan_update(200, 200)
    controller.select_at(2, 4)

    controller.reset()
    assert controller.state == "idle"
    assert controller.selection is None
    assert controller.transform == ViewTransform.initial(controller.config)


def test_ignored_update_is_logged(caplog) -> None:
    caplog.set_level("DEBUG", logger="mathsnap.coordinate_view")
    CoordinateViewController().pan_update(1, 1)
    assert "no pan in progress" in caplog.text
