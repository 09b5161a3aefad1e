# -*- coding: utf-8 -*-
"""
gridsolver で送出する例外クラスをまとめたモジュールです。

- InvalidAssignment   : 範囲外の値・確定済みマスへの別の値の代入
- Contradiction       : ドメインが空になった（この盤面には解が無い）
- EnumerationOverflow : 総当たりの組み合わせ数がカウンタ幅を超えた

どれも「どの条件で」「どの座標・値で」起きたかをメッセージに含めます。
"""

from __future__ import annotations

from typing import Optional, Tuple

Position = Tuple[int, int]  # types.Position と同じ


class SolverError(Exception):
    """gridsolver の例外の基底クラスです。"""


class InvalidAssignment(SolverError):
    """
    盤面の外側（呼び出し側）から不正な代入が行われたことを表します。

    この例外が出た場合、盤面の状態は変更されていません。
    """

    def __init__(self, position: Optional[Position], value: int, reason: str) -> None:
        self.position = position
        self.value = value
        self.reason = reason
        super().__init__(f"invalid assignment {value} at {position}: {reason}")


class Contradiction(SolverError):
    """
    あるマスのドメインが空になったことを表します。

    position が None の場合は、全マス確定済みの盤面そのものが
    どのルールも満たせないことを意味します。
    """

    def __init__(self, position: Optional[Position], message: str = "") -> None:
        self.position = position
        self.message = message or "domain became empty"
        super().__init__(f"contradiction at {position}: {self.message}")


class EnumerationOverflow(SolverError):
    """総当たりの組み合わせ数が上限（カウンタ幅）を超えたことを表します。"""

    def __init__(self, count: int, limit: int) -> None:
        self.count = count
        self.limit = limit
        super().__init__(
            f"enumeration space of {count} combinations exceeds the limit of {limit}"
        )
