"""
どこで: `src/pattix/core/noise.py`。
何を: 決定的な 2D 疑似ノイズ場（sin×cos 積の 3 オクターブ和）を提供する。
なぜ: flow field の進行方向を滑らかに変化させ、かつ同じ (x, y) に対して常にビット一致の値を返すため。

Notes
-----
値域はおおよそ [-1.75, 1.75] で、正規化はしない（呼び出し側で単位区間を仮定しないこと）。
スカラー版 `sample` と flow field の numba カーネルは同じコンパイル済み関数
`_sample_njit` を呼ぶので、経路によらず同じビット列になる。
"""

from __future__ import annotations

import math

import numpy as np
from numba import njit  # type: ignore[import-untyped]

NOISE_BOUND = 1.75
"""`sample` の絶対値の上界（振幅 1.0 + 0.5 + 0.25）。"""


@njit(cache=True, fastmath=False)
def _sample_njit(x: float, y: float) -> float:
    return (
        math.sin(x) * math.cos(y)
        + math.sin(2.0 * x + 10.0) * math.cos(2.0 * y + 10.0) * 0.5
        + math.sin(3.0 * x + 20.0) * math.cos(3.0 * y + 20.0) * 0.25
    )


@njit(cache=True, fastmath=False)
def _sample_grid_njit(xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
    n = xs.shape[0]
    out = np.empty(n, dtype=np.float64)
    for i in range(n):
        out[i] = _sample_njit(xs[i], ys[i])
    return out


def sample(x: float, y: float) -> float:
    """ノイズ場を 1 点で評価する。

    Parameters
    ----------
    x, y : float
        評価位置。空間周波数のスケーリングは呼び出し側で済ませておく。

    Returns
    -------
    float
        ノイズ値。純関数で内部状態を持たない。
    """

    return float(_sample_njit(float(x), float(y)))


def sample_grid(xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
    """同じ長さの座標配列をまとめて評価し、float64 配列を返す。"""

    x = np.ascontiguousarray(np.asarray(xs, dtype=np.float64).ravel())
    y = np.ascontiguousarray(np.asarray(ys, dtype=np.float64).ravel())
    if x.shape != y.shape:
        raise ValueError(f"xs と ys は同じ長さである必要がある: got={x.shape} vs {y.shape}")
    return _sample_grid_njit(x, y)


__all__ = ["NOISE_BOUND", "sample", "sample_grid"]
