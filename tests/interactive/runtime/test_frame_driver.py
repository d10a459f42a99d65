from __future__ import annotations

import logging

import numpy as np
import pytest

from pattix.core.animation import PatternKind
from pattix.core.color import ColorMode
from pattix.core.parameters.patterns import FlowFieldParameters, TreeParameters
from pattix.core.surface import RecordingSurface
from pattix.interactive.runtime.frame_driver import FrameDriver


def _driver(**kwargs: object) -> tuple[FrameDriver, RecordingSurface]:
    surface = RecordingSurface(200, 150)
    params = dict(
        tree=TreeParameters(depth=2),
        flow=FlowFieldParameters(particle_count=3, step_count=5),
        rng=np.random.default_rng(0),
    )
    params.update(kwargs)
    return FrameDriver(surface, **params), surface  # type: ignore[arg-type]


def test_first_step_renders_then_idles_until_something_changes() -> None:
    driver, surface = _driver()

    assert driver.step() is True
    n_commands = len(surface.commands)
    assert driver.step() is False
    assert len(surface.commands) == n_commands
    assert driver.frames_rendered == 1
    assert driver.dirty is False


def test_stopped_driver_never_advances_progress() -> None:
    driver, _ = _driver(running=False)
    driver.step()

    for _ in range(5):
        assert driver.step() is False

    assert driver.state.progress == 0.0
    assert driver.frames_rendered == 1


def test_running_driver_ticks_and_renders_every_frame() -> None:
    driver, surface = _driver(running=True)

    for _ in range(25):
        assert driver.step() is True

    assert driver.frames_rendered == 25
    assert driver.state.progress == pytest.approx(0.25)
    assert driver.tree.branch_angle_degrees == pytest.approx(35.0)
    last_tree = surface.plain_strokes()[-7:]
    assert len(last_tree) == 7


def test_select_switches_pattern_and_marks_dirty(caplog: pytest.LogCaptureFixture) -> None:
    driver, surface = _driver()
    driver.step()
    surface.reset()

    with caplog.at_level(logging.INFO, logger="pattix.interactive.runtime.frame_driver"):
        driver.select("flow")

    assert driver.state.active_pattern is PatternKind.FLOW
    assert "flow" in caplog.text
    assert driver.step() is True
    assert surface.fills[0].alpha == pytest.approx(0.1)
    assert len(surface.strokes) == 3


def test_selecting_active_pattern_is_a_noop() -> None:
    driver, _ = _driver()
    driver.step()

    driver.select(PatternKind.TREE)

    assert driver.step() is False


def test_toggle_running_flips_state(caplog: pytest.LogCaptureFixture) -> None:
    driver, _ = _driver()

    with caplog.at_level(logging.INFO, logger="pattix.interactive.runtime.frame_driver"):
        assert driver.toggle_running() is True
        assert driver.toggle_running() is False

    assert driver.state.running is False
    assert len(caplog.records) == 2


def test_color_mode_changes_trigger_render() -> None:
    driver, _ = _driver(color_mode=ColorMode(rainbow=True, base_hue=355.0))
    driver.step()

    mode = driver.shift_hue(10.0)
    assert mode.base_hue == pytest.approx(5.0)
    assert driver.step() is True

    driver.set_color_mode(rainbow=False)
    assert driver.color_mode == ColorMode(rainbow=False, base_hue=pytest.approx(5.0))
    assert driver.step() is True

    with pytest.raises(ValueError):
        driver.set_color_mode(base_hue=720.0)


def test_shift_hue_by_tiny_negative_delta_stays_below_360() -> None:
    driver, _ = _driver()
    driver.set_color_mode(base_hue=0.0)

    mode = driver.shift_hue(-1e-20)

    assert 0.0 <= mode.base_hue < 360.0


def test_update_params_validates_and_keeps_previous_on_error() -> None:
    driver, _ = _driver()
    driver.step()

    updated = driver.update_params("tree", depth=3, branch_count=3)
    assert updated == TreeParameters(depth=3, branch_count=3)
    assert driver.tree is updated
    assert driver.dirty is True

    with pytest.raises(ValueError):
        driver.update_params(PatternKind.TREE, depth=99)
    assert driver.tree is updated

    with pytest.raises(TypeError):
        driver.update_params(PatternKind.SPIROGRAPH, radius=3.0)


def test_seeded_drivers_render_identical_flow_frames() -> None:
    a, sa = _driver(active_pattern="flow", rng=np.random.default_rng(9))
    b, sb = _driver(active_pattern="flow", rng=np.random.default_rng(9))

    a.step()
    b.step()

    assert sa.commands == sb.commands
