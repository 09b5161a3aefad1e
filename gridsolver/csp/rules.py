# -*- coding: utf-8 -*-
"""
盤面に課すルール（制約）を定義するモジュールです。

ルールは盤面の状態を持たない「純粋な」オブジェクトで、
- group_of(pos) : pos と一緒に制約されるマスの座標（順序つき）
- is_valid(values) : その座標に並べた値が制約を満たすか
の2つだけを提供します。

座標だけを扱い Cell には触れないので、
同じルールのリストをどの盤面にも使い回せます。
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from ..types import Position

Predicate = Callable[[Sequence[int]], bool]


def all_distinct(values: Sequence[int]) -> bool:
    """値がすべて互いに異なれば True（集合の大きさ == タプルの長さ）。"""
    return len(set(values)) == len(values)


def block_size_for(num_states: int) -> int:
    """K 状態の盤面で使うブロックの一辺 ceil(√K) を返します。"""
    return math.ceil(math.sqrt(num_states))


class Rule:
    name: str = "rule"

    def group_of(self, pos: Position) -> List[Position]:
        """pos を含むグループの座標を返します。pos に関係しなければ空リスト。"""
        raise NotImplementedError

    def scope(self, pos: Position, include_self: bool = False) -> List[Position]:
        group = self.group_of(pos)
        if include_self:
            return list(group)
        return [p for p in group if p != pos]

    def is_valid(self, values: Sequence[int]) -> bool:
        raise NotImplementedError

    def is_partial_valid(self, values: Sequence[int]) -> bool:
        """
        途中まで値を並べた段階で、まだ成立の見込みがあるかを返します。

        values はグループの一部のマスの値を、グループの並び順のまま抜き出したものです。
        どのマスが抜けているかは渡さないので、列挙の枝刈りに使える必要条件だけを判定します。
        判定できないルールは常に True を返します。
        """
        return True


class AllDistinctRule(Rule):
    name = "all-distinct"

    def is_valid(self, values: Sequence[int]) -> bool:
        return all_distinct(values)

    def is_partial_valid(self, values: Sequence[int]) -> bool:
        # 一部に重複があれば、残りをどう埋めても全体は成立しない
        return all_distinct(values)


@dataclass
class RowRule(AllDistinctRule):
    size: int
    name: str = "row"

    def group_of(self, pos: Position) -> List[Position]:
        r, _ = pos
        return [(r, j) for j in range(self.size)]


@dataclass
class ColumnRule(AllDistinctRule):
    size: int
    name: str = "column"

    def group_of(self, pos: Position) -> List[Position]:
        _, c = pos
        return [(i, c) for i in range(self.size)]


@dataclass
class BlockRule(AllDistinctRule):
    """
    block_height × block_width のブロック内で値が重複しないルールです。

    盤面の端で割り切れない場合、はみ出した部分は切り捨てます。
    """

    size: int
    block_height: int
    block_width: Optional[int] = None
    name: str = "block"

    def __post_init__(self) -> None:
        if self.block_width is None:
            self.block_width = self.block_height
        if self.block_height < 1 or self.block_width < 1:
            raise ValueError("block dimensions must be positive")

    def group_of(self, pos: Position) -> List[Position]:
        r, c = pos
        bh, bw = self.block_height, self.block_width
        top, left = (r // bh) * bh, (c // bw) * bw
        return [
            (i, j)
            for i in range(top, min(top + bh, self.size))
            for j in range(left, min(left + bw, self.size))
        ]


@dataclass
class DiagonalRule(AllDistinctRule):
    """主対角線（anti=True なら反対角線）上で値が重複しないルールです。"""

    size: int
    anti: bool = False
    name: str = "diagonal"

    def _on_diagonal(self, pos: Position) -> bool:
        r, c = pos
        return r + c == self.size - 1 if self.anti else r == c

    def group_of(self, pos: Position) -> List[Position]:
        if not self._on_diagonal(pos):
            return []
        if self.anti:
            return [(i, self.size - 1 - i) for i in range(self.size)]
        return [(i, i) for i in range(self.size)]


@dataclass
class GroupRule(AllDistinctRule):
    """任意の座標の集まり（ケージや追加領域など）で値が重複しないルールです。"""

    cells: Sequence[Position]
    name: str = "group"

    def group_of(self, pos: Position) -> List[Position]:
        if pos not in self.cells:
            return []
        return list(self.cells)


@dataclass
class PredicateRule(Rule):
    """
    任意の述語で判定するルールです。

    predicate にはグループの座標順に並べた値が渡されます。
    partial_predicate を指定しない場合、列挙の枝刈りは行いません。
    """

    cells: Sequence[Position]
    predicate: Predicate
    partial_predicate: Optional[Predicate] = None
    name: str = "custom"

    def group_of(self, pos: Position) -> List[Position]:
        if pos not in self.cells:
            return []
        return list(self.cells)

    def is_valid(self, values: Sequence[int]) -> bool:
        return bool(self.predicate(values))

    def is_partial_valid(self, values: Sequence[int]) -> bool:
        if self.partial_predicate is None:
            return True
        return bool(self.partial_predicate(values))


# ======================================================================
# ルールの組み立て
# ======================================================================

RULE_NAMES = ("row", "column", "block", "diagonal", "anti_diagonal")


def build_rules(names: Sequence[str], size: int, num_states: int) -> List[Rule]:
    """
    ルール名の並びからルールのリストを組み立てます。

    ブロックの一辺は ceil(√K) です。N と K がブロックルールと
    噛み合っているか（例: 9×9 で K=9）は呼び出し側の責任です。
    """
    rules: List[Rule] = []
    for name in names:
        if name == "row":
            rules.append(RowRule(size))
        elif name == "column":
            rules.append(ColumnRule(size))
        elif name == "block":
            rules.append(BlockRule(size, block_size_for(num_states)))
        elif name == "diagonal":
            rules.append(DiagonalRule(size))
        elif name == "anti_diagonal":
            rules.append(DiagonalRule(size, anti=True, name="anti_diagonal"))
        else:
            raise ValueError(f"unknown rule name: {name!r} (expected one of {RULE_NAMES})")
    return rules


def default_rules(size: int, num_states: int) -> List[Rule]:
    return build_rules(("row", "column", "block"), size, num_states)
