from __future__ import annotations

import dataclasses
import math

import pytest

from pattix.core.color import BACKGROUND_COLOR, ColorMode, hsl_to_rgb01
from pattix.core.parameters.patterns import TreeParameters
from pattix.core.patterns.tree import branch_color, generate, tree_branches
from pattix.core.surface import RecordingSurface


def _draw(params: TreeParameters, *, color_mode: ColorMode | None = None) -> RecordingSurface:
    surface = RecordingSurface(800, 600)
    generate(surface, 800, 600, params, ColorMode() if color_mode is None else color_mode)
    return surface


def test_depth_zero_draws_single_trunk_segment() -> None:
    surface = _draw(TreeParameters(depth=0))

    plain = surface.plain_strokes()
    assert len(plain) == 1
    ((p0, p1),) = plain[0].segments()
    assert p0 == pytest.approx((400.0, 550.0))
    assert p1 == pytest.approx((400.0, 550.0 - 150.0))


@pytest.mark.parametrize(
    ("branches", "depth", "expected"),
    [
        (2, 2, 7),
        (2, 5, 63),
        (3, 3, 40),
        (5, 2, 31),
        (1, 0, 1),
        (1, 6, 7),
    ],
)
def test_segment_count_follows_geometric_series(branches: int, depth: int, expected: int) -> None:
    params = TreeParameters(branch_count=branches, depth=depth)

    assert len(tree_branches(800, 600, params)) == expected
    assert len(_draw(params).plain_strokes()) == expected


def test_scenario_two_levels_two_branches_draws_seven_segments() -> None:
    params = TreeParameters(
        branch_angle_degrees=25.0, depth=2, branch_count=2, length_ratio=0.67, thickness=10.0
    )

    surface = _draw(params)

    assert len(surface.plain_strokes()) == 7


def test_children_fan_symmetrically_and_shrink() -> None:
    params = TreeParameters(branch_angle_degrees=30.0, depth=1, branch_count=2, length_ratio=0.5)

    trunk, first, second = tree_branches(800, 600, params)

    assert (first.x0, first.y0) == pytest.approx((trunk.x1, trunk.y1))
    assert first.length == pytest.approx(trunk.length * 0.5)
    assert second.length == pytest.approx(trunk.length * 0.5)
    # 先に描かれる子はオフセットが負（数学座標で時計回り = 画面右側）。
    assert second.x1 < trunk.x1 < first.x1
    assert first.x1 - trunk.x1 == pytest.approx(-(second.x1 - trunk.x1))
    assert first.y1 == pytest.approx(second.y1)
    assert first.thickness == pytest.approx(trunk.thickness * 0.7)
    dx = first.x1 - first.x0
    dy = first.y0 - first.y1
    assert math.degrees(math.atan2(dy, dx)) == pytest.approx(90.0 - 15.0)


def test_three_branches_include_straight_center_child() -> None:
    params = TreeParameters(depth=1, branch_count=3)

    trunk, _, center, _ = tree_branches(800, 600, params)

    assert center.x1 == pytest.approx(trunk.x1)


def test_branches_are_emitted_depth_first() -> None:
    params = TreeParameters(depth=2, branch_count=2)

    depths = [b.depth for b in tree_branches(800, 600, params)]

    assert depths == [2, 1, 0, 0, 1, 0, 0]


def test_glow_is_applied_to_trunk_side_levels_only() -> None:
    params = TreeParameters(depth=5, branch_count=1)

    surface = _draw(params)

    glow = surface.glow_strokes()
    assert len(glow) == 3
    assert all(s.style.glow == pytest.approx(10.0) for s in glow)
    trunk_end_y = tree_branches(800, 600, params)[0].y1
    assert glow[0].segments()[0][1][1] == pytest.approx(trunk_end_y)


def test_generate_clears_with_opaque_background_first() -> None:
    surface = _draw(TreeParameters(depth=1))

    first = surface.commands[0]
    assert first == surface.fills[0]
    assert (first.w, first.h) == (800.0, 600.0)
    assert first.alpha == 1.0
    assert first.color == BACKGROUND_COLOR


def test_branch_color_rainbow_and_mono() -> None:
    rainbow = ColorMode(rainbow=True, base_hue=200.0)
    mono = ColorMode(rainbow=False, base_hue=200.0)

    assert branch_color(4, 4, rainbow) == pytest.approx(hsl_to_rgb01(320.0, 70.0, 58.0))
    assert branch_color(0, 4, rainbow) == pytest.approx(hsl_to_rgb01(200.0, 70.0, 50.0))
    assert branch_color(2, 4, mono) == pytest.approx(hsl_to_rgb01(200.0, 60.0, 55.0))
    # depth=0 の木では比率を 1.0 とみなす。
    assert branch_color(0, 0, mono) == pytest.approx(hsl_to_rgb01(200.0, 60.0, 80.0))


def test_stroke_width_follows_thickness_decay() -> None:
    surface = _draw(TreeParameters(depth=2, branch_count=1, thickness=10.0))

    widths = [s.style.width for s in surface.plain_strokes()]
    assert widths == pytest.approx([10.0, 7.0, 4.9])
    assert {s.style.cap for s in surface.plain_strokes()} == {"round"}


def test_length_ratio_at_least_one_warns_but_terminates() -> None:
    params = dataclasses.replace(TreeParameters(depth=3, branch_count=1), length_ratio=1.2)

    with pytest.warns(UserWarning):
        branches = tree_branches(800, 600, params)

    assert len(branches) == 4
    assert branches[-1].length > branches[0].length
