# どこで: `src/pattix/core/runtime_config.py`。
# 何を: config.yaml による実行時設定（探索・ロード・キャッシュ）を提供する。
# なぜ: キャンバス寸法・描画定数・パターンの初期値を、コードを触らずにユーザーが差し替えられるようにするため。

"""実行時設定（`config.yaml`）の探索・ロード・キャッシュを担当する。

このモジュールは、以下を提供する:

- `config.yaml` を「同梱デフォルト → ユーザー設定（任意）」の順に適用して `RuntimeConfig` を構築
- 探索パス（CWD / HOME）と、明示指定（`set_config_path()`）の両方に対応
- 1 回ロードした結果をプロセス内でキャッシュ（設定を切り替える場合は `set_config_path()` で破棄）

入出力 / 副作用
----------------
- 入力: 同梱 `pattix/resource/default_config.yaml`、任意でユーザーの `config.yaml`
- 出力: `RuntimeConfig`（不変データ）
- 副作用: ファイル読み取り、YAML パース、モジュールグローバルへのキャッシュ保存

実装メモ
--------
- ユーザー設定の適用は `dict.update()`（トップレベルの浅い上書き）で行う。
  ネストした mapping は「部分的にマージ」されず「丸ごと置換」される。
- `patterns.<name>` に書かれていないフィールドはパラメータ型の既定値を使う。
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any

import yaml

from pattix.core.color import ColorMode, RGB01, parse_hex_color, validate_color_mode
from pattix.core.parameters.patterns import (
    FlowFieldParameters,
    SpirographParameters,
    TreeParameters,
    validate_flow_parameters,
    validate_spirograph_parameters,
    validate_tree_parameters,
)
from pattix.core.render_settings import RenderSettings

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    """pattix の実行時設定。

    `runtime_config()` が `config.yaml` を解釈して構築する不変オブジェクト。

    Attributes
    ----------
    config_path:
        実際に採用されたユーザー設定ファイルのパス。ユーザー設定が無い場合は None。
    canvas_size:
        描画面の (width, height) [px]。
    fps:
        preview ウィンドウの目標フレームレート（tick の頻度）。
    window_position:
        preview ウィンドウの左上座標 (x, y)。
    render:
        generator に渡す描画定数。
    color_mode:
        起動時の配色モード。
    flow_seed:
        flow の乱数 seed。None ならシード無し。
    tree, spirograph, flow:
        各パターンの初期パラメータ（検証済み）。
    """

    config_path: Path | None
    canvas_size: tuple[int, int]
    fps: float
    window_position: tuple[int, int]
    render: RenderSettings
    color_mode: ColorMode
    flow_seed: int | None
    tree: TreeParameters
    spirograph: SpirographParameters
    flow: FlowFieldParameters


# `set_config_path()` で指定される「明示 config」のパス。
# ここが設定されている場合、探索で見つかった config よりも後に適用される。
_EXPLICIT_CONFIG_PATH: Path | None = None
# `runtime_config()` のプロセス内キャッシュ。設定を切り替える場合は破棄する。
_CONFIG_CACHE: RuntimeConfig | None = None


def set_config_path(path: str | Path | None) -> None:
    """以降の設定探索で使う明示 config パスを設定する。

    Notes
    -----
    - `path` を None にすると明示指定を解除し、既定の探索に戻る。
    - `path` は `~` を展開して保持する。
    - 設定が変わるため、`runtime_config()` のキャッシュを破棄する。
    """

    global _EXPLICIT_CONFIG_PATH, _CONFIG_CACHE
    if path is None:
        _EXPLICIT_CONFIG_PATH = None
        _CONFIG_CACHE = None
        return
    _EXPLICIT_CONFIG_PATH = Path(str(path)).expanduser()
    _CONFIG_CACHE = None


def _default_config_candidates() -> tuple[Path, ...]:
    """既定の `config.yaml` 探索候補を返す。

    探索順（先勝ち）:
    - `./.pattix/config.yaml`
    - `~/.config/pattix/config.yaml`
    """

    return (
        Path.cwd() / ".pattix" / "config.yaml",
        Path.home() / ".config" / "pattix" / "config.yaml",
    )


def _as_mapping(value: Any, *, key: str) -> dict[str, Any]:
    """任意値を mapping として解釈し、dict に正規化して返す。"""

    if value is None:
        return {}
    if isinstance(value, dict):
        return dict(value)
    raise RuntimeError(f"{key} は mapping である必要があります: got={value!r}")


def _as_int_pair(value: Any, *, key: str) -> tuple[int, int] | None:
    """任意値を (x, y) の整数ペアとして解釈して返す。"""

    if value is None:
        return None
    try:
        seq = list(value)
    except TypeError as exc:
        raise RuntimeError(f"{key} は [x, y] の配列である必要があります: got={value!r}") from exc
    if len(seq) != 2:
        raise RuntimeError(f"{key} は [x, y] の配列である必要があります: got={value!r}")
    try:
        return int(seq[0]), int(seq[1])
    except (TypeError, ValueError) as exc:
        raise RuntimeError(f"{key} は [x, y] の整数配列である必要があります: got={value!r}") from exc


def _as_float(value: Any, *, key: str) -> float | None:
    """任意値を float として解釈して返す。"""

    if value is None:
        return None
    if isinstance(value, bool):
        raise RuntimeError(f"{key} は数値である必要があります: got={value!r}")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise RuntimeError(f"{key} は数値である必要があります: got={value!r}") from exc


def _as_int(value: Any, *, key: str) -> int | None:
    """任意値を int として解釈して返す。"""

    if value is None:
        return None
    if isinstance(value, bool):
        raise RuntimeError(f"{key} は整数である必要があります: got={value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise RuntimeError(f"{key} は整数である必要があります: got={value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise RuntimeError(f"{key} は整数である必要があります: got={value!r}") from exc


def _as_bool(value: Any, *, key: str) -> bool | None:
    """任意値を bool として解釈して返す。"""

    if value is None:
        return None
    if isinstance(value, bool):
        return bool(value)
    if isinstance(value, int) and int(value) in (0, 1):
        return bool(int(value))
    raise RuntimeError(f"{key} は bool である必要があります: got={value!r}")


def _require(value: Any, *, key: str) -> Any:
    if value is None:
        raise RuntimeError(f"{key} が未設定です（同梱 default_config.yaml を確認してください）")
    return value


def _load_yaml_text(text: str, *, source: str) -> dict[str, Any]:
    """YAML テキストを読み、トップレベル mapping を dict として返す。

    空（`null`）なら `{}` を返す。
    """

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise RuntimeError(f"config.yaml の読み込みに失敗しました: source={source}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise RuntimeError(f"config.yaml は mapping である必要があります: source={source}")
    return dict(data)


def _load_yaml_config(path: Path) -> dict[str, Any]:
    """UTF-8 の YAML ファイルを読み、dict を返す。"""

    text = path.read_text(encoding="utf-8")
    return _load_yaml_text(text, source=str(path))


def _load_packaged_default_config() -> dict[str, Any]:
    """同梱デフォルト config をロードして dict を返す。"""

    blob = (
        resources.files("pattix")
        .joinpath("resource", "default_config.yaml")
        .read_text(encoding="utf-8")
    )
    return _load_yaml_text(blob, source="pattix/resource/default_config.yaml")


def _pattern_params(value: Any, params_type: type, *, key: str) -> Any:
    """`patterns.<name>` の mapping をパラメータ型へ変換する（未指定フィールドは既定値）。"""

    mapping = _as_mapping(value, key=key)
    fields = {f.name: f for f in dataclasses.fields(params_type)}
    unknown = sorted(k for k in mapping if k not in fields)
    if unknown:
        raise RuntimeError(f"{key} に未知のキーがあります: {unknown}")

    base = params_type()
    changes: dict[str, Any] = {}
    for name, raw in mapping.items():
        if isinstance(getattr(base, name), int):
            changes[name] = _require(_as_int(raw, key=f"{key}.{name}"), key=f"{key}.{name}")
        else:
            changes[name] = _require(_as_float(raw, key=f"{key}.{name}"), key=f"{key}.{name}")
    return dataclasses.replace(base, **changes)


def runtime_config() -> RuntimeConfig:
    """実行時設定をロードして返す（キャッシュ）。

    読み込み元の優先順位（後勝ち）:
    1) 同梱 `pattix/resource/default_config.yaml`
    2) 探索で見つかった `config.yaml`（任意）
    3) `set_config_path()` で明示指定された `config.yaml`（任意）

    Raises
    ------
    FileNotFoundError
        明示指定された config が存在しない場合。
    RuntimeError
        必須キーの欠落や型の不一致がある場合。
    ValueError
        値域外の値がある場合。
    """

    global _CONFIG_CACHE
    if _CONFIG_CACHE is not None:
        return _CONFIG_CACHE

    explicit_path = _EXPLICIT_CONFIG_PATH
    if explicit_path is not None and not explicit_path.is_file():
        raise FileNotFoundError(f"config.yaml が見つかりません: {explicit_path}")

    discovered_path: Path | None = None
    # 既定の探索は「CWD → HOME」の順。最初に見つかった 1 つのみを採用する。
    for p in _default_config_candidates():
        if p.is_file():
            discovered_path = p
            break

    payload = _load_packaged_default_config()
    if discovered_path is not None:
        _logger.debug("config.yaml を適用します: %s", discovered_path)
        payload.update(_load_yaml_config(discovered_path))
    if explicit_path is not None:
        _logger.debug("明示指定の config.yaml を適用します: %s", explicit_path)
        payload.update(_load_yaml_config(explicit_path))

    version = _as_int(_require(payload.get("version"), key="version"), key="version")
    if version != 1:
        raise RuntimeError(f"未対応の config.yaml version です: got={version}")

    canvas = _as_mapping(payload.get("canvas"), key="canvas")
    canvas_size = _require(_as_int_pair(canvas.get("size"), key="canvas.size"), key="canvas.size")
    if canvas_size[0] <= 0 or canvas_size[1] <= 0:
        raise ValueError(f"canvas.size は正の (width, height) である必要がある: got={canvas_size}")
    background: RGB01 = parse_hex_color(
        _require(canvas.get("background"), key="canvas.background")
    )

    animation = _as_mapping(payload.get("animation"), key="animation")
    fps = _require(_as_float(animation.get("fps"), key="animation.fps"), key="animation.fps")
    if fps <= 0.0:
        raise ValueError(f"animation.fps は正の値である必要がある: got={fps}")

    render = _as_mapping(payload.get("render"), key="render")
    defaults = RenderSettings()
    tree_glow = _as_float(render.get("tree_glow_blur"), key="render.tree_glow_blur")
    spiro_glow = _as_float(render.get("spirograph_glow_blur"), key="render.spirograph_glow_blur")
    fade_alpha = _as_float(render.get("flow_fade_alpha"), key="render.flow_fade_alpha")
    flow_width = _as_float(render.get("flow_line_width"), key="render.flow_line_width")
    render_settings = RenderSettings(
        background_color=background,
        tree_glow_blur=defaults.tree_glow_blur if tree_glow is None else tree_glow,
        spirograph_glow_blur=defaults.spirograph_glow_blur if spiro_glow is None else spiro_glow,
        spirograph_line_width=defaults.spirograph_line_width,
        flow_fade_alpha=defaults.flow_fade_alpha if fade_alpha is None else fade_alpha,
        flow_line_width=defaults.flow_line_width if flow_width is None else flow_width,
    )
    if not (0.0 < render_settings.flow_fade_alpha <= 1.0):
        raise ValueError(
            f"render.flow_fade_alpha は (0, 1] である必要がある: got={render_settings.flow_fade_alpha}"
        )
    if render_settings.tree_glow_blur < 0.0 or render_settings.spirograph_glow_blur < 0.0:
        raise ValueError("render の glow_blur は 0 以上である必要がある")
    if render_settings.flow_line_width <= 0.0:
        raise ValueError(
            f"render.flow_line_width は正の値である必要がある: got={render_settings.flow_line_width}"
        )

    color = _as_mapping(payload.get("color"), key="color")
    rainbow = _as_bool(color.get("rainbow"), key="color.rainbow")
    base_hue = _as_float(color.get("base_hue"), key="color.base_hue")
    color_mode = validate_color_mode(
        ColorMode(
            rainbow=True if rainbow is None else rainbow,
            base_hue=200.0 if base_hue is None else base_hue,
        )
    )

    flow_section = _as_mapping(payload.get("flow"), key="flow")
    flow_seed = _as_int(flow_section.get("seed"), key="flow.seed")

    ui = _as_mapping(payload.get("ui"), key="ui")
    window_position = _as_int_pair(ui.get("window_position"), key="ui.window_position")

    patterns = _as_mapping(payload.get("patterns"), key="patterns")
    tree = validate_tree_parameters(
        _pattern_params(patterns.get("tree"), TreeParameters, key="patterns.tree")
    )
    spirograph = validate_spirograph_parameters(
        _pattern_params(patterns.get("spirograph"), SpirographParameters, key="patterns.spirograph")
    )
    flow = validate_flow_parameters(
        _pattern_params(patterns.get("flow"), FlowFieldParameters, key="patterns.flow")
    )

    cfg = RuntimeConfig(
        config_path=explicit_path or discovered_path,
        canvas_size=canvas_size,
        fps=float(fps),
        window_position=(25, 25) if window_position is None else window_position,
        render=render_settings,
        color_mode=color_mode,
        flow_seed=flow_seed,
        tree=tree,
        spirograph=spirograph,
        flow=flow,
    )
    _CONFIG_CACHE = cfg
    return cfg


__all__ = ["RuntimeConfig", "runtime_config", "set_config_path"]
