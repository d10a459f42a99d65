# どこで: `src/pattix/core/parameters/meta.py`。
# 何を: ParamMeta（操作パネル表示/一覧表示のためのメタ情報）を提供する。
# なぜ: スライダーのレンジと値の種別を、パラメータ定義のそばで一元管理するため。

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence


@dataclass(frozen=True, slots=True)
class ParamMeta:
    """パラメータの UI/表示用メタ情報。

    ui_min/ui_max はスライダーのレンジを示すだけで、実値をクランプしない。
    値の妥当性は `validate_*` 側で検証する。
    """

    kind: str  # "float" | "int" | "bool" | "choice"
    ui_min: Any | None = None
    ui_max: Any | None = None
    choices: Sequence[str] | None = None
