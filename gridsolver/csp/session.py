# -*- coding: utf-8 -*-
"""
1回分の「解く作業」（ソルバーセッション）を表すモジュールです。

盤面・ルールのリスト・ワーカープールをまとめて持ち、
外部（solve() や API）にはこのクラスの操作だけを見せます。

状態の移り変わり
----------------
unconstrained → partially_fixed → propagating → solved
                                              ↘ stalled（総当たりへ）
                                              ↘ contradiction（終端）
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Set, Tuple

from ..config import MAX_BRUTE_FORCE_COMBINATIONS, MAX_WORKERS
from ..errors import Contradiction, InvalidAssignment
from ..grid.board import Board
from ..logging_utils import get_logger
from ..types import (
    STATE_CONTRADICTION,
    STATE_PARTIALLY_FIXED,
    STATE_PROPAGATING,
    STATE_SOLVED,
    STATE_STALLED,
    STATE_UNCONSTRAINED,
    Position,
)
from .brute_force import brute_force_reduce
from .propagation import find_collapsed_violation, propagate_once, propagate_to_fixpoint
from .rules import Rule, default_rules
from .workers import WorkerPool

logger = get_logger()


class SolverSession:
    """
    盤面を1つ持つソルバーセッションです。

    Parameters
    ----------
    size : int
        盤面の一辺 N。
    num_states : int
        1マスの状態数 K。
    rules : sequence of Rule, optional
        使うルールのリスト。省略時は行・列・ブロック。
    givens : iterable of ((row, col), value), optional
        最初から確定しているマス（値は 0..K-1）。
    max_workers : int
        サポート判定・総当たりに使うワーカー数。
    max_combinations : int
        総当たりで扱う組み合わせ数の上限。
    """

    def __init__(
        self,
        size: int,
        num_states: int,
        rules: Optional[Sequence[Rule]] = None,
        givens: Iterable[Tuple[Position, int]] = (),
        max_workers: int = MAX_WORKERS,
        max_combinations: int = MAX_BRUTE_FORCE_COMBINATIONS,
    ) -> None:
        self.board = Board(size, num_states)
        self.rules: List[Rule] = list(rules) if rules is not None else default_rules(size, num_states)
        self.pool = WorkerPool(max_workers)
        self.max_combinations = max_combinations
        self.sweeps = 0
        self._phase = STATE_UNCONSTRAINED

        for pos, value in givens:
            self.collapse(pos, value)

    # ------------------------------------------------------------------
    # 状態
    # ------------------------------------------------------------------
    @property
    def state(self) -> str:
        if self.board.is_contradiction():
            return STATE_CONTRADICTION
        if self.is_solved():
            return STATE_SOLVED
        return self._phase

    def domain_of(self, pos: Position) -> Set[int]:
        return self.board.domain_of(pos)

    def is_collapsed(self, pos: Position) -> bool:
        return self.board.is_collapsed(pos)

    def is_solved(self) -> bool:
        """全マスが確定し、かつ確定値がすべてのルールを満たしていれば True。"""
        if not self.board.is_solved():
            return False
        return find_collapsed_violation(self.board, self.rules) is None

    def is_contradiction(self) -> bool:
        return self.board.is_contradiction()

    def _ensure_consistent(self) -> None:
        if self.board.is_contradiction():
            raise Contradiction(self.board.contradiction, "session is already in contradiction")

    # ------------------------------------------------------------------
    # 操作
    # ------------------------------------------------------------------
    def collapse(self, pos: Position, value: int) -> None:
        """マスの値を外部から確定させます（不正なら InvalidAssignment、盤面は不変）。"""
        if self.board.is_contradiction():
            raise InvalidAssignment(pos, value, "session is in contradiction")
        self.board.collapse(pos, value)
        self._phase = STATE_PARTIALLY_FIXED

    def propagate_once(self) -> bool:
        """盤面を1回スイープし、ドメインが変化したかどうかを返します。"""
        self._ensure_consistent()
        self.sweeps += 1
        try:
            changed = propagate_once(self.board, self.rules, self.pool)
        except Contradiction as e:
            logger.warning("[session] contradiction at %s: %s", e.position, e.message)
            raise
        self._phase = STATE_PROPAGATING if changed else STATE_STALLED
        return changed

    def propagate_to_fixpoint(self, max_sweeps: Optional[int] = None) -> int:
        """
        変化が無くなるまで（または max_sweeps 回まで）スイープを繰り返します。

        Returns
        -------
        int
            このメソッドで実行したスイープの回数。
        """
        self._ensure_consistent()
        before = self.sweeps
        try:
            done, converged = propagate_to_fixpoint(
                self.board, self.rules, self.pool, max_sweeps
            )
        except Contradiction as e:
            logger.warning("[session] contradiction at %s: %s", e.position, e.message)
            raise
        self.sweeps = before + done
        self._phase = STATE_STALLED if converged else STATE_PROPAGATING
        logger.info(
            "[session] propagation finished: sweeps=%d state=%s", done, self.state
        )
        return done

    def brute_force_reduce(self) -> bool:
        """総当たりで未確定マスのドメインを厳密なものに置き換えます。"""
        self._ensure_consistent()
        try:
            changed = brute_force_reduce(
                self.board, self.rules, self.pool, self.max_combinations
            )
        except Contradiction as e:
            logger.warning("[session] brute force found no solution: %s", e.message)
            raise
        self._phase = STATE_PROPAGATING if changed else STATE_STALLED
        return changed

    def close(self) -> None:
        self.pool.close()

    def __enter__(self) -> "SolverSession":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
