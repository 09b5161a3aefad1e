# -*- coding: utf-8 -*-
"""
制約伝播（propagation）を行うモジュールです。

propagate_once() は盤面全体を行優先（row-major）で1回なめ、
未確定のマスごとにサポート判定（support.update_cell）を行います。

1回のスイープの中では、後に調べるマスは
同じスイープで先に縮んだドメインを見ます（順序に依存します）。
ドメインが変化しなくなるまで繰り返すのは呼び出し側の役目で、
そのための補助として propagate_to_fixpoint() を用意しています。
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

from ..errors import Contradiction
from ..grid.board import Board
from ..logging_utils import get_logger
from ..types import Position
from .rules import Rule
from .support import update_cell
from .workers import WorkerPool

logger = get_logger()


def find_collapsed_violation(board: Board, rules: Sequence[Rule]) -> Optional[Position]:
    """
    全マスが確定済みのグループのうち、ルールを満たさないものを探します。

    スイープは確定済みのマスを調べないので、確定値どうしの衝突はここで見つけます。
    行優先で最初に見つかったマスの座標を返し、無ければ None を返します。
    """
    for pos in board.positions():
        if not board.is_collapsed(pos):
            continue
        for rule in rules:
            group = rule.scope(pos, include_self=True)
            if not group or not all(board.is_collapsed(q) for q in group):
                continue
            if not rule.is_valid([board.cell(q).value for q in group]):
                return pos
    return None


def propagate_once(
    board: Board,
    rules: Sequence[Rule],
    pool: Optional[WorkerPool] = None,
) -> bool:
    """
    盤面全体を1回スイープします。

    Returns
    -------
    bool
        どれか1マスでもドメインが変化したら True。

    Raises
    ------
    Contradiction
        あるマスのドメインが空になった場合、
        または確定済みのマスだけのグループがルールを満たさない場合。
    """
    changed = False
    for pos in board.positions():
        if board.is_collapsed(pos):
            continue
        if update_cell(board, pos, rules, pool):
            changed = True

    violation = find_collapsed_violation(board, rules)
    if violation is not None:
        board.mark_contradiction(violation)
        raise Contradiction(violation, "collapsed cells violate a rule")
    return changed


def propagate_to_fixpoint(
    board: Board,
    rules: Sequence[Rule],
    pool: Optional[WorkerPool] = None,
    max_sweeps: Optional[int] = None,
) -> Tuple[int, bool]:
    """
    ドメインが変化しなくなるまでスイープを繰り返します。

    max_sweeps を指定すると、その回数で打ち切ります（呼び出し側の予算）。
    矛盾が見つかった場合は Contradiction がそのまま伝わります。

    Returns
    -------
    sweeps : int
        実行したスイープの回数。
    converged : bool
        最後のスイープで変化が無かった（不動点に達した）かどうか。
    """
    sweeps = 0
    converged = False
    while max_sweeps is None or sweeps < max_sweeps:
        sweeps += 1
        changed = propagate_once(board, rules, pool)
        collapsed = sum(1 for pos in board.positions() if board.is_collapsed(pos))
        logger.debug(
            "[propagate] sweep=%d changed=%s collapsed=%d/%d",
            sweeps, changed, collapsed, board.size * board.size,
        )
        if not changed:
            converged = True
            break
    return sweeps, converged
