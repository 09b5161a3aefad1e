# -*- coding: utf-8 -*-
"""
gridsolver で使う主なデータ構造（型）をまとめたモジュールです。

dataclass を使うことで、
「この構造体はどんなフィールドを持っているのか」を
分かりやすく表現しています。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from .csp.domains import domain_size, domain_values, value_mask
from .errors import Contradiction

# グリッド上の座標を表す型 (row, col)
Position = Tuple[int, int]

# ==== セッションの状態名 ===================================================
STATE_UNCONSTRAINED = "unconstrained"
STATE_PARTIALLY_FIXED = "partially_fixed"
STATE_PROPAGATING = "propagating"
STATE_STALLED = "stalled"
STATE_SOLVED = "solved"
STATE_CONTRADICTION = "contradiction"


@dataclass
class Cell:
    """
    盤面の1マスを表すクラスです。

    Attributes
    ----------
    states : int
        取り得る状態のビットマスク（i ビット目が立っていれば状態 i が可能）。
    collapsed : bool
        値が確定しているかどうか。
    value : int
        確定している値。collapsed が True のときだけ意味を持ちます。
    """

    states: int
    collapsed: bool = False
    value: int = 0

    def num_states(self) -> int:
        """候補の個数を返します。確定済みなら常に 1 です。"""
        if self.collapsed:
            return 1
        return domain_size(self.states)

    def choices(self) -> Tuple[int, ...]:
        """候補を昇順のタプルで返します。確定済みなら (value,) です。"""
        if self.collapsed:
            return (self.value,)
        return domain_values(self.states)

    def value_at(self, index: int) -> int:
        """
        index 番目の候補を返します。

        ドメインが空の場合は既定値を返さず Contradiction を送出します。
        """
        choices = self.choices()
        if not choices:
            raise Contradiction(None, "cannot index an empty domain")
        return choices[index]

    def collapse_to(self, value: int) -> None:
        self.states = value_mask(value)
        self.collapsed = True
        self.value = value
