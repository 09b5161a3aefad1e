# -*- coding: utf-8 -*-
"""
N×N の盤面（Board）を表すモジュールです。

盤面は1つのソルバーセッションだけが持ち、外部と共有しません。
ドメインは「代入（collapse）」か「制約伝播（restrict）」によってのみ変化し、
伝播では必ず縮む方向にしか変わりません。
"""

from __future__ import annotations

from typing import Dict, Iterator, List, Optional, Set, Tuple

from ..config import MAX_STATES
from ..csp.domains import check_num_states, domain_size, domain_values, full_domain
from ..errors import Contradiction, InvalidAssignment
from ..types import Cell, Position


class Board:
    """
    N×N のマスを保持するクラスです。

    Parameters
    ----------
    size : int
        盤面の一辺 N。
    num_states : int
        1マスが取り得る状態数 K（状態は 0..K-1）。
    max_states : int
        K の上限。ドメインのビット幅をここで決めます。
    """

    def __init__(self, size: int, num_states: int, max_states: int = MAX_STATES) -> None:
        if size < 1:
            raise ValueError(f"board size must be positive, got {size}")
        self.size = size
        self.num_states = check_num_states(num_states, max_states)
        self.cells: List[List[Cell]] = [
            [Cell(states=full_domain(num_states)) for _ in range(size)]
            for _ in range(size)
        ]
        if num_states == 1:
            # 候補が最初から1つだけなら、作った時点で確定している
            for row in self.cells:
                for cell in row:
                    cell.collapse_to(0)
        # ドメインが空になったマスの座標（全マス確定で矛盾した場合は None のまま）
        self.contradiction: Optional[Position] = None
        self.contradiction_found: bool = False

    # ------------------------------------------------------------------
    # 参照系
    # ------------------------------------------------------------------
    def positions(self) -> Iterator[Position]:
        """全マスの座標を行優先（row-major）の順で返します。"""
        for r in range(self.size):
            for c in range(self.size):
                yield (r, c)

    def in_bounds(self, pos: Position) -> bool:
        r, c = pos
        return 0 <= r < self.size and 0 <= c < self.size

    def cell(self, pos: Position) -> Cell:
        r, c = pos
        return self.cells[r][c]

    def domain_of(self, pos: Position) -> Set[int]:
        return set(self.cell(pos).choices())

    def is_collapsed(self, pos: Position) -> bool:
        return self.cell(pos).collapsed

    def is_solved(self) -> bool:
        """全マスが確定しているかどうか（ルールを満たすかは SolverSession.is_solved で確認）。"""
        if self.contradiction_found:
            return False
        return all(cell.collapsed for row in self.cells for cell in row)

    def is_contradiction(self) -> bool:
        return self.contradiction_found

    def choices_snapshot(self) -> Dict[Position, Tuple[int, ...]]:
        """
        全マスの候補タプルを写し取ります。

        返り値は不変なタプルなので、あとで盤面が縮んでも写しは変わりません。
        """
        return {pos: self.cell(pos).choices() for pos in self.positions()}

    def masks(self) -> Dict[Position, int]:
        return {pos: self.cell(pos).states for pos in self.positions()}

    # ------------------------------------------------------------------
    # 更新系
    # ------------------------------------------------------------------
    def collapse(self, pos: Position, value: int) -> None:
        """
        外部からマスの値を確定させます。

        - 盤面の外の座標や、0..K-1 の範囲外の値は InvalidAssignment
        - すでに別の値で確定しているマスへの代入も InvalidAssignment
        どちらの場合も盤面は変更しません。
        """
        if not self.in_bounds(pos):
            raise InvalidAssignment(pos, value, "position is outside the board")
        if not 0 <= value < self.num_states:
            raise InvalidAssignment(
                pos, value, f"value must be in [0, {self.num_states})"
            )
        cell = self.cell(pos)
        if cell.collapsed:
            if cell.value != value:
                raise InvalidAssignment(
                    pos, value, f"cell is already collapsed to {cell.value}"
                )
            return
        cell.collapse_to(value)

    def restrict(self, pos: Position, mask: int) -> bool:
        """
        マスのドメインを mask との共通部分に縮めます。

        候補が1つになれば自動的に確定（collapse）し、
        空になれば矛盾として記録したうえで Contradiction を送出します。

        Returns
        -------
        bool
            ドメインが変化したかどうか。
        """
        cell = self.cell(pos)
        if cell.collapsed:
            return False

        new_states = cell.states & mask
        if new_states == cell.states:
            return False

        cell.states = new_states
        if new_states == 0:
            self.mark_contradiction(pos)
            raise Contradiction(pos, "no value has support under every rule")

        if domain_size(new_states) == 1:
            (value,) = domain_values(new_states)
            cell.collapse_to(value)
        return True

    def mark_contradiction(self, pos: Optional[Position]) -> None:
        self.contradiction = pos
        self.contradiction_found = True
