from pathlib import Path

import pytest

from pattix.core.color import ColorMode
from pattix.core.parameters.patterns import (
    FlowFieldParameters,
    SpirographParameters,
    TreeParameters,
)
from pattix.core.runtime_config import runtime_config, set_config_path


@pytest.fixture(autouse=True)
def _reset_runtime_config() -> None:
    set_config_path(None)
    yield
    set_config_path(None)


def _isolate_config_discovery(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_packaged_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    cfg = runtime_config()
    assert cfg.config_path is None
    assert cfg.canvas_size == (800, 800)
    assert cfg.fps == 60.0
    assert cfg.window_position == (25, 25)
    assert cfg.color_mode == ColorMode(rainbow=True, base_hue=200.0)
    assert cfg.flow_seed is None
    assert cfg.render.background_color == (10 / 255, 10 / 255, 21 / 255)
    assert cfg.render.tree_glow_blur == 10.0
    assert cfg.render.spirograph_glow_blur == 15.0
    assert cfg.render.flow_fade_alpha == 0.1
    assert cfg.tree == TreeParameters()
    assert cfg.spirograph == SpirographParameters()
    assert cfg.flow == FlowFieldParameters()


def test_result_is_cached_until_config_path_changes(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    assert runtime_config() is runtime_config()


def test_discovered_config_overrides_packaged_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)
    discovered = _write(
        tmp_path / ".pattix" / "config.yaml",
        "canvas:\n  size: [640, 480]\n  background: '#000000'\ncolor:\n  rainbow: false\n  base_hue: 90\n",
    )

    cfg = runtime_config()
    assert cfg.config_path == discovered
    assert cfg.canvas_size == (640, 480)
    assert cfg.render.background_color == (0.0, 0.0, 0.0)
    assert cfg.color_mode == ColorMode(rainbow=False, base_hue=90.0)
    # トップレベルの浅い上書きなので、他のセクションは同梱デフォルトのまま。
    assert cfg.fps == 60.0


def test_home_config_is_used_when_cwd_has_none(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    home = tmp_path / "home"
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)
    monkeypatch.setenv("HOME", str(home))
    home_cfg = _write(home / ".config" / "pattix" / "config.yaml", "animation:\n  fps: 30\n")

    cfg = runtime_config()
    assert cfg.config_path == home_cfg
    assert cfg.fps == 30.0


def test_explicit_config_overrides_discovered_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)
    _write(tmp_path / ".pattix" / "config.yaml", "animation:\n  fps: 30\nflow:\n  seed: 1\n")
    explicit = _write(tmp_path / "explicit.yaml", "animation:\n  fps: 24\n")

    set_config_path(explicit)

    cfg = runtime_config()
    assert cfg.config_path == explicit
    assert cfg.fps == 24.0
    assert cfg.flow_seed == 1


def test_missing_explicit_config_raises(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)
    set_config_path(tmp_path / "nope.yaml")

    with pytest.raises(FileNotFoundError):
        runtime_config()


def test_partial_pattern_mapping_keeps_other_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)
    _write(
        tmp_path / ".pattix" / "config.yaml",
        "patterns:\n  tree:\n    depth: 4\n    thickness: 6\n",
    )

    cfg = runtime_config()
    assert cfg.tree == TreeParameters(depth=4, thickness=6.0)
    assert isinstance(cfg.tree.thickness, float)
    assert cfg.spirograph == SpirographParameters()
    assert cfg.flow == FlowFieldParameters()


@pytest.mark.parametrize(
    ("text", "error"),
    [
        ("version: 2\n", RuntimeError),
        ("canvas:\n  size: [800]\n  background: '#000000'\n", RuntimeError),
        ("canvas:\n  size: [800, 800]\n  background: 'black'\n", ValueError),
        ("animation:\n  fps: fast\n", RuntimeError),
        ("animation:\n  fps: 0\n", ValueError),
        ("color:\n  rainbow: maybe\n", RuntimeError),
        ("color:\n  base_hue: 400\n", ValueError),
        ("render:\n  flow_fade_alpha: 0\n", ValueError),
        ("patterns:\n  tree:\n    leaves: 3\n", RuntimeError),
        ("patterns:\n  tree:\n    depth: 20\n", ValueError),
        ("patterns:\n  tree:\n    depth: 9.7\n", RuntimeError),
        ("patterns:\n  spirograph:\n    inner_radius: 0\n", ValueError),
        ("- just\n- a list\n", RuntimeError),
        ("canvas: [1, 2\n", RuntimeError),
    ],
)
def test_malformed_config_is_rejected(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, text: str, error: type[Exception]
):
    _isolate_config_discovery(tmp_path, monkeypatch)
    _write(tmp_path / ".pattix" / "config.yaml", text)

    with pytest.raises(error):
        runtime_config()


def test_empty_user_config_falls_back_to_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)
    discovered = _write(tmp_path / ".pattix" / "config.yaml", "")

    cfg = runtime_config()
    assert cfg.config_path == discovered
    assert cfg.canvas_size == (800, 800)
